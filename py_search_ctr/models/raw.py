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
"""Typed view of a single trial inside a raw registry structure.

The raw structure is the ICTRP XML shape, ``{"trials": {"trial": ...}}``.
The ClinicalTrials.gov extractor converts its payload into the same shape,
so this model is the only contract the normalizer relies on.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def as_text(value: Any) -> str | None:
    """Collapse a parsed XML/JSON value to the text it carries."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        return as_text(value.get("#text"))
    if isinstance(value, list):
        return as_text(value[0]) if value else None
    return str(value)


Text = Annotated[str | None, BeforeValidator(as_text)]


class RawTrial(BaseModel):
    """One ``<trial>`` element, every member optional.

    Members whose cardinality differs between registries (a wrapper mapping,
    a list or a bare scalar) are typed ``Any`` and resolved by the
    normalizer's reconciliation rule.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    trial_id: Text = Field(default=None, alias="trialID")
    scientific_title: Text = Field(default=None, alias="scientificTitle")
    public_title: Text = Field(default=None, alias="publicTitle")
    primary_sponsor: Text = Field(default=None, alias="primarySponsor")
    recruitment_status: Text = Field(default=None, alias="recruitmentStatus")
    register_date: Text = Field(default=None, alias="registerDate")
    study_type: Text = Field(default=None, alias="studyType")
    start_date: Text = Field(default=None, alias="startDate")
    completion_date: Text = Field(default=None, alias="completionDate")
    enrollment_target: Any = Field(default=None, alias="enrollmentTarget")

    phase: Any = None
    countries: Any = None
    contacts: Any = None
    conditions: Any = None
    interventions: Any = None
