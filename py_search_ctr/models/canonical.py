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
"""Defines the canonical trial record that every registry converges to."""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

NOT_SPECIFIED = "Not specified"
UNKNOWN = "Unknown"
NO_TITLE = "No title available"


class CanonicalTrial(BaseModel):
    """Pydantic model for a normalized, source-independent clinical trial.

    Built fresh from a raw registry structure for each request and never
    mutated afterwards. List fields always hold at least one element, the
    ``Not specified`` sentinel when the registry had nothing to offer.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True,
    )

    id: str = UNKNOWN
    title: str = NO_TITLE
    scientific_title: str = ""
    public_title: str = ""
    primary_sponsor: str = NOT_SPECIFIED
    recruitment_status: str = UNKNOWN
    study_type: str = NOT_SPECIFIED
    countries: list[str] = Field(default_factory=lambda: [NOT_SPECIFIED], min_length=1)
    contacts: list[str] = Field(default_factory=lambda: [NOT_SPECIFIED], min_length=1)
    conditions: list[str] = Field(default_factory=lambda: [NOT_SPECIFIED], min_length=1)
    phases: list[str] = Field(default_factory=lambda: [NOT_SPECIFIED], min_length=1)
    interventions: list[str] = Field(
        default_factory=lambda: [NOT_SPECIFIED], min_length=1,
    )
    enrollment_target: int | None = None
    start_date: str = NOT_SPECIFIED
    completion_date: str = NOT_SPECIFIED
    registration_date: str = NOT_SPECIFIED
    url: str | None = None

    @computed_field
    @property
    def status(self) -> str:
        """Older name for ``recruitment_status``; both carry the same value."""
        return self.recruitment_status
