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
"""The two operations offered to a hosting transport.

``search_clinical_trials`` and ``get_trial_details`` accept a typed request and
always return a ``ToolResponse``. Failures are encoded as text content and
never raised past this module.
"""

import json
import logging
import types
from typing import Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from py_search_ctr.config import Settings
from py_search_ctr.extractor.ctgov import CtGovExtractor
from py_search_ctr.extractor.ictrp import IctrpExtractor
from py_search_ctr.models.criteria import FetchResult, SearchCriteria
from py_search_ctr.orchestrator import Orchestrator
from py_search_ctr.transformers.normalizer import normalize
from py_search_ctr.transformers.renderer import render_trial

logger = logging.getLogger(__name__)

NOT_FOUND_SUGGESTION = """

The ICTRP API may not support the specific search parameters you provided.
Try these suggestions:
1. Search by condition only, without specifying location
2. Try a broader search with fewer parameters
3. Use ClinicalTrials.gov directly at https://clinicaltrials.gov/"""

NETWORK_SUGGESTION = """

There may be network connectivity issues or the ICTRP API may be temporarily unavailable. Please try again later."""

CITY_SUGGESTION = """

For city-based searches like "{query}" in "{country}", try:
1. Searching for the condition and country only, without mentioning the city
2. Using more general location terms
3. Checking the spelling of the city name"""


class SearchRequest(BaseModel):
    """Typed input of ``search-clinical-trials``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    query: str | None = Field(default=None, description="Search query for finding trials by keyword")
    condition: str | None = Field(default=None, description="Medical condition or disease being studied")
    country: str | None = Field(default=None, description="Country where the trial is conducted")
    sponsor: str | None = Field(default=None, description="Organization sponsoring the trial")
    phase: str | None = Field(default=None, description="Trial phase (e.g., 'Phase 1', 'Phase 2')")
    recruitment_status: str | None = Field(
        default=None, description="Trial recruitment status (e.g., 'Recruiting', 'Completed')",
    )
    date_from: str | None = Field(default=None, description="Start date for search range (YYYY-MM-DD)")
    date_to: str | None = Field(default=None, description="End date for search range (YYYY-MM-DD)")
    max_results: int = Field(default=10, description="Maximum number of results to return")


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """Typed output of both operations."""

    content: list[TextContent]
    is_error: bool = False

    @classmethod
    def from_text(cls, text: str, is_error: bool = False) -> "ToolResponse":
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)


def _search_suggestion(message: str, request: SearchRequest) -> str:
    suggestion = ""
    lowered = message.lower()
    if "404" in message:
        suggestion = NOT_FOUND_SUGGESTION
    elif "timeout" in lowered or "network" in lowered:
        suggestion = NETWORK_SUGGESTION

    if request.query and request.country:
        suggestion += CITY_SUGGESTION.format(query=request.query, country=request.country)
    return suggestion


class ClinicalTrialsService:
    """Runs the retrieval pipeline behind the two public operations.

    Use as an async context manager so the HTTP client it creates is closed.
    A caller-supplied client is left open.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        orchestrator: Orchestrator | None = None,
    ) -> None:
        self.settings = settings
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            follow_redirects=True,
            timeout=settings.request_timeout,
        )
        self.orchestrator = orchestrator or Orchestrator(
            primary=IctrpExtractor(settings, self.client),
            secondary=CtGovExtractor(settings, self.client),
        )

    async def __aenter__(self) -> "ClinicalTrialsService":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _cap(self, max_results: int) -> int:
        return max(1, min(max_results, self.settings.max_results_cap))

    async def _retrieve(self, criteria: SearchCriteria) -> FetchResult:
        result = await self.orchestrator.retrieve(criteria)
        if not result.ok:
            raise result.error
        return result

    async def search_clinical_trials(self, request: SearchRequest) -> ToolResponse:
        """Search both registries and render every matching trial."""
        criteria = SearchCriteria(
            query=request.query or None,
            condition=request.condition or None,
            country=request.country or None,
            sponsor=request.sponsor or None,
            phase=request.phase or None,
            recruitment_status=request.recruitment_status or None,
            date_from=request.date_from or None,
            date_to=request.date_to or None,
            max_results=self._cap(request.max_results),
        )
        if criteria.is_city_search:
            logger.info("City search detected: %r in %r", criteria.query, criteria.country)

        try:
            result = await self._retrieve(criteria)
            trials = normalize(result.raw, self.settings.trial_url_template)
        except Exception as e:
            logger.error("Error in search-clinical-trials: %s", e, exc_info=True)
            message = str(e) or "Unknown error"
            return ToolResponse.from_text(
                f"Error searching for clinical trials: {message}"
                + _search_suggestion(message, request),
                is_error=True,
            )

        if not trials:
            echoed = request.model_dump(
                by_alias=True,
                exclude_none=True,
                include={
                    "query", "condition", "country", "sponsor", "phase", "recruitment_status",
                },
            )
            return ToolResponse.from_text(
                "No clinical trials found matching your search criteria. "
                f"The search parameters were: {json.dumps(echoed)}",
            )

        rendered = "\n---\n".join(render_trial(trial) for trial in trials)
        return ToolResponse.from_text(
            f"Found {len(trials)} clinical trials matching your search criteria.\n\n{rendered}",
        )

    async def get_trial_details(self, trial_id: str) -> ToolResponse:
        """Look up a single trial by its registry identifier."""
        criteria = SearchCriteria(trial_id=trial_id)
        try:
            result = await self._retrieve(criteria)
            trials = normalize(result.raw, self.settings.trial_url_template)
        except Exception as e:
            logger.error("Error in get-trial-details: %s", e, exc_info=True)
            return ToolResponse.from_text(
                f"Error retrieving clinical trial details: {str(e) or 'Unknown error'}",
                is_error=True,
            )

        if not trials:
            return ToolResponse.from_text(f"No clinical trial found with ID: {trial_id}")
        return ToolResponse.from_text(render_trial(trials[0]))
