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
"""Provides a class to search ClinicalTrials.gov (JSON).

ClinicalTrials.gov is the secondary registry. It is used first for city-level
searches, which ICTRP cannot express, and as the last fallback otherwise.
Its payload is converted into the ICTRP raw shape so that one normalizer
handles both registries.
"""

import logging
from typing import Any

from pydantic import ValidationError

from py_search_ctr.errors import RegistryParseError
from py_search_ctr.extractor.base import BaseExtractor
from py_search_ctr.models.criteria import SearchCriteria
from py_search_ctr.models.ctgov import CtGovPayload, ProtocolSection

logger = logging.getLogger(__name__)


def build_expression(criteria: SearchCriteria) -> str:
    """Build the ``expr`` search expression as a conjunction of terms.

    The free-text query is only used as a city name, and only when a country
    is present as well.
    """
    terms: list[str] = []
    if criteria.trial_id:
        terms.append(f"AREA[NCTId]:{criteria.trial_id}")
    if criteria.condition:
        terms.append(criteria.condition)
    if criteria.country:
        terms.append(f"COUNTRY:{criteria.country}")
        if criteria.query:
            terms.append(f"AREA[City]:{criteria.query}")
    if criteria.recruitment_status:
        terms.append(f"AREA[RecruitmentsStatus]:{criteria.recruitment_status}")
    return " AND ".join(terms)


def _unique_countries(section: ProtocolSection) -> list[str]:
    countries: list[str] = []
    for location in section.contacts_locations.location_list.location:
        if location.country and location.country not in countries:
            countries.append(location.country)
    return countries


def _convert_study(section: ProtocolSection) -> dict[str, Any]:
    identification = section.identification
    status = section.status
    design = section.design

    trial = {
        "trialID": identification.nct_id,
        "scientificTitle": identification.official_title,
        "publicTitle": identification.brief_title,
        "primarySponsor": section.sponsor_collaborators.lead_sponsor.name,
        "recruitmentStatus": status.overall_status,
        "phase": ", ".join(design.phase_list.phase) or None,
        "studyType": design.study_type,
        "registerDate": status.study_first_submit_date,
        "startDate": status.start_date,
        "completionDate": status.completion_date,
        "enrollmentTarget": design.enrollment_info.enrollment_count,
        "countries": {"country": _unique_countries(section)},
        "conditions": {"condition": section.conditions.condition_list.condition},
    }
    # Absent values stay absent; defaults are the normalizer's job.
    return {key: value for key, value in trial.items() if value is not None}


def convert_full_studies(payload: CtGovPayload) -> dict[str, Any]:
    """Convert a full-study search payload into the ICTRP raw shape."""
    studies = payload.full_studies_response.full_studies
    return {
        "trials": {
            "trial": [_convert_study(s.study.protocol_section) for s in studies],
        },
    }


class CtGovExtractor(BaseExtractor):
    """Extractor for the secondary registry, ClinicalTrials.gov."""

    name = "ClinicalTrials.gov"

    def build_params(self, criteria: SearchCriteria) -> dict[str, str]:
        max_rank = criteria.max_results or self.settings.ctgov_default_max_rank
        return {
            "expr": build_expression(criteria),
            "min_rnk": "1",
            "max_rnk": str(max_rank),
            "fmt": "json",
        }

    async def _fetch_raw(self, criteria: SearchCriteria) -> dict[str, Any]:
        params = self.build_params(criteria)
        logger.info("Searching ClinicalTrials.gov with expression: %r", params["expr"])
        response = await self._get(
            self.settings.ctgov_full_studies_url,
            params=params,
            accept="application/json",
        )

        try:
            payload = CtGovPayload.model_validate(response.json())
        except ValidationError as e:
            raise RegistryParseError(
                f"Unexpected ClinicalTrials.gov payload: {e.error_count()} errors",
            ) from e
        except ValueError as e:
            raise RegistryParseError(f"Failed to parse JSON response: {e}") from e

        raw = convert_full_studies(payload)
        logger.info("ClinicalTrials.gov returned %d studies", len(raw["trials"]["trial"]))
        return raw
