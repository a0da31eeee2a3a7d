# Copyright 2025 Gowtham Rao <rao@ohdsi.org>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Search criteria handed to the extractors and the result of one attempt."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from py_search_ctr.errors import RegistryError, RegistryHttpError


class SearchCriteria(BaseModel):
    """Canonical, registry-independent search parameters.

    Each extractor maps these onto its own query syntax. The orchestrator
    derives narrower variants with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    query: str | None = None
    condition: str | None = None
    country: str | None = None
    sponsor: str | None = None
    phase: str | None = None
    recruitment_status: str | None = None
    date_from: str | None = None
    date_to: str | None = None
    max_results: int | None = None
    trial_id: str | None = None

    @property
    def is_city_search(self) -> bool:
        """A free-text query together with a country is read as a city name."""
        return bool(self.query) and bool(self.country)

    def without_country(self) -> "SearchCriteria":
        return self.model_copy(update={"country": None})

    def without_query(self) -> "SearchCriteria":
        return self.model_copy(update={"query": None})


class FetchResult(BaseModel):
    """Outcome of a single registry attempt: a raw structure or an error."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    raw: dict[str, Any] | None = None
    error: RegistryError | None = None

    @classmethod
    def success(cls, raw: dict[str, Any]) -> "FetchResult":
        return cls(raw=raw)

    @classmethod
    def failure(cls, error: RegistryError) -> "FetchResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_not_found(self) -> bool:
        return isinstance(self.error, RegistryHttpError) and self.error.is_not_found
