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
"""Maps raw registry structures onto ``CanonicalTrial`` records."""

import re
from collections.abc import Callable
from typing import Any

from py_search_ctr.config import settings as default_settings
from py_search_ctr.models.canonical import NO_TITLE, NOT_SPECIFIED, UNKNOWN, CanonicalTrial
from py_search_ctr.models.raw import RawTrial, as_text

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _item_text(item: Any) -> str | None:
    if isinstance(item, dict) and "#text" not in item:
        parts = [as_text(v) for v in item.values() if not isinstance(v, (dict, list))]
        return ", ".join(p for p in parts if p) or None
    return as_text(item)


def _contact_text(contact: Any) -> str | None:
    if not isinstance(contact, dict):
        return as_text(contact)
    last_name = as_text(contact.get("lastName")) or ""
    first_name = as_text(contact.get("firstName")) or ""
    if not last_name and not first_name:
        return None
    return f"{last_name}, {first_name}"


def reconcile(
    value: Any, item_key: str, to_text: Callable[[Any], str | None] = _item_text,
) -> list[str]:
    """Resolve a field of uncertain cardinality to a non-empty list of strings.

    A wrapper mapping such as ``{"country": ...}`` is unwrapped first. A list
    is used as is and a scalar becomes a one-element list. When nothing usable
    is left, the ``Not specified`` sentinel is returned instead of ``[]``.
    """
    if isinstance(value, dict) and item_key in value:
        value = value[item_key]
    items = value if isinstance(value, list) else [value]

    texts = [to_text(item) for item in items if item is not None]
    texts = [text for text in texts if text]
    return texts or [NOT_SPECIFIED]


def parse_enrollment(value: Any) -> int | None:
    """Parse a leading integer, e.g. ``"120 participants"`` -> 120."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = as_text(value)
    if not text:
        return None
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def normalize_trial(
    raw: dict[str, Any], trial_url_template: str = default_settings.trial_url_template,
) -> CanonicalTrial:
    """Map one raw trial mapping onto a canonical record."""
    trial = RawTrial.model_validate(raw)
    return CanonicalTrial(
        id=trial.trial_id or UNKNOWN,
        title=trial.public_title or trial.scientific_title or NO_TITLE,
        scientific_title=trial.scientific_title or "",
        public_title=trial.public_title or "",
        primary_sponsor=trial.primary_sponsor or NOT_SPECIFIED,
        recruitment_status=trial.recruitment_status or UNKNOWN,
        study_type=trial.study_type or NOT_SPECIFIED,
        countries=reconcile(trial.countries, "country"),
        contacts=reconcile(trial.contacts, "contact", to_text=_contact_text),
        conditions=reconcile(trial.conditions, "condition"),
        phases=reconcile(trial.phase, "phase"),
        interventions=reconcile(trial.interventions, "intervention"),
        enrollment_target=parse_enrollment(trial.enrollment_target),
        start_date=trial.start_date or NOT_SPECIFIED,
        completion_date=trial.completion_date or NOT_SPECIFIED,
        registration_date=trial.register_date or NOT_SPECIFIED,
        url=(
            trial_url_template.format(trial_id=trial.trial_id)
            if trial.trial_id
            else None
        ),
    )


def normalize(
    raw: dict[str, Any] | None,
    trial_url_template: str = default_settings.trial_url_template,
) -> list[CanonicalTrial]:
    """Produce canonical records from a ``{"trials": {"trial": ...}}`` structure.

    A missing ``trial`` member yields an empty list, a single mapping one
    record, and a list one record per element in the same order.
    """
    trials = (raw or {}).get("trials")
    if not isinstance(trials, dict):
        return []
    entries = trials.get("trial")
    if entries is None:
        return []
    if not isinstance(entries, list):
        entries = [entries]
    return [
        normalize_trial(entry, trial_url_template)
        for entry in entries
        if isinstance(entry, dict)
    ]
