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
import re

import pytest

from py_search_ctr.config import Settings

ICTRP_URL = "https://ictrp.test/api/v1/trials"
CTGOV_URL = "https://ctgov.test/api/query/full_studies"

ICTRP_URL_RE = re.compile(re.escape(ICTRP_URL) + r"(\?.*)?$")
CTGOV_URL_RE = re.compile(re.escape(CTGOV_URL) + r"(\?.*)?$")

ICTRP_TWO_TRIALS_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<trials>
  <trial>
    <trialID>ISRCTN12345678</trialID>
    <publicTitle>Leukemia Drug Study</publicTitle>
    <scientificTitle>A randomised study of drug X in acute leukemia</scientificTitle>
    <primarySponsor>University of London</primarySponsor>
    <recruitmentStatus>Recruiting</recruitmentStatus>
    <registerDate>2023-01-10</registerDate>
    <studyType>Interventional</studyType>
    <phase>Phase 2</phase>
    <countries><country>United Kingdom</country></countries>
    <conditions>
      <condition>Acute Myeloid Leukemia</condition>
      <condition>Acute Lymphoblastic Leukemia</condition>
    </conditions>
    <contacts>
      <contact><lastName>Smith</lastName><firstName>Jane</firstName></contact>
    </contacts>
    <interventions><intervention>Drug X</intervention></interventions>
    <enrollmentTarget>120</enrollmentTarget>
    <startDate>2023-02-01</startDate>
    <completionDate>2025-12-31</completionDate>
  </trial>
  <trial>
    <trialID>EUCTR2020-000001-01</trialID>
    <scientificTitle>Observational leukemia registry</scientificTitle>
  </trial>
</trials>
"""

ICTRP_SINGLE_TRIAL_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<trials>
  <trial>
    <trialID>NCT01234567</trialID>
    <publicTitle>Single Trial</publicTitle>
    <recruitmentStatus>Completed</recruitmentStatus>
  </trial>
</trials>
"""

ICTRP_EMPTY_XML = b"""<?xml version="1.0" encoding="utf-8"?><trials></trials>"""


def ctgov_study(
    nct_id: str = "NCT98765432",
    countries: tuple[str, ...] = ("United Kingdom",),
    phases: tuple[str, ...] = ("Phase 3",),
) -> dict:
    """Build one ``FullStudies`` entry in the ClinicalTrials.gov legacy format."""
    return {
        "Rank": 1,
        "Study": {
            "ProtocolSection": {
                "IdentificationModule": {
                    "NCTId": nct_id,
                    "BriefTitle": "London AML Trial",
                    "OfficialTitle": "London-based Clinical Trial for Acute Myeloid Leukemia",
                },
                "StatusModule": {
                    "OverallStatus": "Recruiting",
                    "StudyFirstSubmitDate": "2023-03-15",
                    "StartDate": "2023-04-01",
                    "CompletionDate": "2026-04-01",
                },
                "SponsorCollaboratorsModule": {"LeadSponsor": {"Name": "London Hospital"}},
                "ConditionsModule": {
                    "ConditionList": {"Condition": ["Acute Myeloid Leukemia"]},
                },
                "DesignModule": {
                    "StudyType": "Interventional",
                    "PhaseList": {"Phase": list(phases)},
                    "EnrollmentInfo": {"EnrollmentCount": "250"},
                },
                "ContactsLocationsModule": {
                    "LocationList": {
                        "Location": [
                            {"LocationFacility": f"Site {i}", "LocationCity": "London",
                             "LocationCountry": country}
                            for i, country in enumerate(countries)
                        ],
                    },
                },
            },
        },
    }


def ctgov_payload(*studies: dict) -> dict:
    return {
        "FullStudiesResponse": {
            "APIVrs": "1.01.05",
            "NStudiesFound": len(studies),
            "FullStudies": list(studies),
        },
    }


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing both registries at mock endpoints."""
    return Settings(
        ictrp_api_url=ICTRP_URL,
        ctgov_full_studies_url=CTGOV_URL,
        user_agent="py-search-ctr-tests/1.0",
    )
