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
"""Provides a class to search the WHO ICTRP registry (XML)."""

import logging
from typing import Any

from lxml import etree as ET

from py_search_ctr.errors import RegistryParseError
from py_search_ctr.extractor.base import BaseExtractor
from py_search_ctr.extractor.xml import xml_to_dict
from py_search_ctr.models.criteria import SearchCriteria

logger = logging.getLogger(__name__)

# SearchCriteria field -> ICTRP query-string key
PARAM_KEYS = {
    "query": "search",
    "condition": "condition",
    "country": "country",
    "sponsor": "sponsor",
    "phase": "phase",
    "recruitment_status": "recruitment",
    "date_from": "dateFrom",
    "date_to": "dateTo",
    "max_results": "max",
    "trial_id": "trialid",
}


class IctrpExtractor(BaseExtractor):
    """Extractor for the primary registry, the WHO ICTRP trial search API."""

    name = "ICTRP"

    @staticmethod
    def build_params(criteria: SearchCriteria) -> dict[str, str]:
        """Map every non-empty criterion onto its ICTRP query-string key."""
        params: dict[str, str] = {}
        for field, key in PARAM_KEYS.items():
            value = getattr(criteria, field)
            if value is not None and value != "":
                params[key] = str(value)
        return params

    async def _fetch_raw(self, criteria: SearchCriteria) -> dict[str, Any]:
        params = self.build_params(criteria)
        logger.info("Searching ICTRP with params: %s", params)
        response = await self._get(
            self.settings.ictrp_api_url, params=params, accept="application/xml",
        )

        try:
            raw = xml_to_dict(response.content)
        except (ET.XMLSyntaxError, ValueError) as e:
            raise RegistryParseError(f"Failed to parse XML response: {e}") from e

        logger.debug("Received XML response (first 100 chars): %s", response.text[:100])
        return raw
