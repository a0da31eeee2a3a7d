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
"""Pydantic models for the ClinicalTrials.gov full-study search payload.

Only the members the converter reads are declared. Every module defaults to
an empty model, and a ``null`` module counts as missing, so walking
``FullStudies[].Study.ProtocolSection`` never fails on a study that omits a
section.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from py_search_ctr.models.raw import Text, as_text


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    return [item for item in value if item is not None]


def _as_text_list(value: Any) -> list[str]:
    texts = (as_text(item) for item in _as_list(value))
    return [text for text in texts if text is not None]


TextList = Annotated[list[str], BeforeValidator(_as_text_list)]


class _CtGovModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _null_is_empty(cls, data: Any) -> Any:
        return {} if data is None else data


class IdentificationModule(_CtGovModel):
    nct_id: Text = Field(default=None, alias="NCTId")
    brief_title: Text = Field(default=None, alias="BriefTitle")
    official_title: Text = Field(default=None, alias="OfficialTitle")


class StatusModule(_CtGovModel):
    overall_status: Text = Field(default=None, alias="OverallStatus")
    study_first_submit_date: Text = Field(default=None, alias="StudyFirstSubmitDate")
    start_date: Text = Field(default=None, alias="StartDate")
    completion_date: Text = Field(default=None, alias="CompletionDate")


class LeadSponsor(_CtGovModel):
    name: Text = Field(default=None, alias="Name")


class SponsorCollaboratorsModule(_CtGovModel):
    lead_sponsor: LeadSponsor = Field(default_factory=LeadSponsor, alias="LeadSponsor")


class ConditionList(_CtGovModel):
    condition: TextList = Field(default_factory=list, alias="Condition")


class ConditionsModule(_CtGovModel):
    condition_list: ConditionList = Field(
        default_factory=ConditionList, alias="ConditionList",
    )


class PhaseList(_CtGovModel):
    phase: TextList = Field(default_factory=list, alias="Phase")


class EnrollmentInfo(_CtGovModel):
    enrollment_count: Text = Field(default=None, alias="EnrollmentCount")


class DesignModule(_CtGovModel):
    study_type: Text = Field(default=None, alias="StudyType")
    phase_list: PhaseList = Field(default_factory=PhaseList, alias="PhaseList")
    enrollment_info: EnrollmentInfo = Field(
        default_factory=EnrollmentInfo, alias="EnrollmentInfo",
    )


class Location(_CtGovModel):
    facility: Text = Field(default=None, alias="LocationFacility")
    city: Text = Field(default=None, alias="LocationCity")
    country: Text = Field(default=None, alias="LocationCountry")

    @model_validator(mode="before")
    @classmethod
    def _accept_short_keys(cls, data: Any) -> Any:
        # Some payloads use the short Facility/City/Country keys.
        if isinstance(data, dict):
            data = dict(data)
            for short in ("Facility", "City", "Country"):
                if short in data and f"Location{short}" not in data:
                    data[f"Location{short}"] = data.pop(short)
        return data


class LocationList(_CtGovModel):
    location: Annotated[list[Location], BeforeValidator(_as_list)] = Field(
        default_factory=list, alias="Location",
    )


class ContactsLocationsModule(_CtGovModel):
    location_list: LocationList = Field(
        default_factory=LocationList, alias="LocationList",
    )


class ProtocolSection(_CtGovModel):
    identification: IdentificationModule = Field(
        default_factory=IdentificationModule, alias="IdentificationModule",
    )
    status: StatusModule = Field(default_factory=StatusModule, alias="StatusModule")
    sponsor_collaborators: SponsorCollaboratorsModule = Field(
        default_factory=SponsorCollaboratorsModule, alias="SponsorCollaboratorsModule",
    )
    conditions: ConditionsModule = Field(
        default_factory=ConditionsModule, alias="ConditionsModule",
    )
    design: DesignModule = Field(default_factory=DesignModule, alias="DesignModule")
    contacts_locations: ContactsLocationsModule = Field(
        default_factory=ContactsLocationsModule, alias="ContactsLocationsModule",
    )


class Study(_CtGovModel):
    protocol_section: ProtocolSection = Field(
        default_factory=ProtocolSection, alias="ProtocolSection",
    )


class FullStudy(_CtGovModel):
    study: Study = Field(default_factory=Study, alias="Study")


class FullStudiesResponse(_CtGovModel):
    full_studies: Annotated[list[FullStudy], BeforeValidator(_as_list)] = Field(
        default_factory=list, alias="FullStudies",
    )


class CtGovPayload(_CtGovModel):
    """Top-level JSON document returned by ``/api/query/full_studies``."""

    full_studies_response: FullStudiesResponse = Field(
        default_factory=FullStudiesResponse, alias="FullStudiesResponse",
    )
