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
"""Formats canonical trials as human-readable text."""

from py_search_ctr.models.canonical import NOT_SPECIFIED, CanonicalTrial

NOT_AVAILABLE = "Not available"


def _join(values: list[str]) -> str:
    return ", ".join(values)


def render_trial(trial: CanonicalTrial) -> str:
    """Render one trial as a fixed-order block of ``Label: value`` lines."""
    enrollment = (
        str(trial.enrollment_target)
        if trial.enrollment_target is not None
        else NOT_SPECIFIED
    )
    lines = [
        f"Trial ID: {trial.id}",
        f"Title: {trial.title}",
        f"Status: {trial.recruitment_status}",
        f"Registration Date: {trial.registration_date}",
        f"Study Type: {trial.study_type}",
        f"Phase: {_join(trial.phases)}",
        f"Countries: {_join(trial.countries)}",
        f"Conditions: {_join(trial.conditions)}",
        f"Interventions: {_join(trial.interventions)}",
        f"Primary Sponsor: {trial.primary_sponsor}",
        f"Start Date: {trial.start_date}",
        f"Completion Date: {trial.completion_date}",
        f"Enrollment Target: {enrollment}",
        f"URL: {trial.url or NOT_AVAILABLE}",
    ]
    return "\n".join(lines) + "\n"
