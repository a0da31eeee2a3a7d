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
"""Decides which registry to query, in which order and with which criteria.

ICTRP answers 404 (rather than an empty result) for parameter combinations it
cannot serve, so a 404 narrows the query instead of ending the search. The
fallback chain is a finite state machine: each attempt's outcome is classified
and the next state is read from ``TRANSITIONS``.
"""

import logging
from enum import Enum
from typing import Protocol

from py_search_ctr.models.criteria import FetchResult, SearchCriteria

logger = logging.getLogger(__name__)


class State(str, Enum):
    START = "START"
    TRY_B_CITY = "TRY_B_CITY"
    TRY_A = "TRY_A"
    TRY_A_NO_COUNTRY = "TRY_A_NO_COUNTRY"
    TRY_A_FALLBACK = "TRY_A_FALLBACK"
    TRY_B_FINAL = "TRY_B_FINAL"
    DONE = "DONE"
    FAILED = "FAILED"


class Outcome(str, Enum):
    """Classified result of the step that just ran."""

    CITY_SEARCH = "CITY_SEARCH"
    PLAIN_SEARCH = "PLAIN_SEARCH"
    OK = "OK"
    NOT_FOUND_WITH_COUNTRY = "NOT_FOUND_WITH_COUNTRY"
    NOT_FOUND = "NOT_FOUND"
    ERROR_CITY_SEARCH = "ERROR_CITY_SEARCH"
    ERROR = "ERROR"


TRANSITIONS: dict[tuple[State, Outcome], State] = {
    (State.START, Outcome.CITY_SEARCH): State.TRY_B_CITY,
    (State.START, Outcome.PLAIN_SEARCH): State.TRY_A,
    (State.TRY_B_CITY, Outcome.OK): State.DONE,
    (State.TRY_B_CITY, Outcome.ERROR): State.TRY_A,
    (State.TRY_A, Outcome.OK): State.DONE,
    (State.TRY_A, Outcome.NOT_FOUND_WITH_COUNTRY): State.TRY_A_NO_COUNTRY,
    (State.TRY_A, Outcome.NOT_FOUND): State.TRY_A_FALLBACK,
    (State.TRY_A, Outcome.ERROR_CITY_SEARCH): State.TRY_A_FALLBACK,
    (State.TRY_A, Outcome.ERROR): State.FAILED,
    (State.TRY_A_NO_COUNTRY, Outcome.OK): State.DONE,
    (State.TRY_A_NO_COUNTRY, Outcome.ERROR): State.TRY_B_FINAL,
    (State.TRY_A_FALLBACK, Outcome.OK): State.DONE,
    (State.TRY_A_FALLBACK, Outcome.ERROR): State.TRY_B_FINAL,
    (State.TRY_B_FINAL, Outcome.OK): State.DONE,
    (State.TRY_B_FINAL, Outcome.ERROR): State.FAILED,
}

TERMINAL_STATES = frozenset({State.DONE, State.FAILED})


class Extractor(Protocol):
    async def fetch(self, criteria: SearchCriteria) -> FetchResult: ...


def classify(state: State, result: FetchResult, criteria: SearchCriteria) -> Outcome:
    """Reduce an attempt's result plus the request context to an ``Outcome``.

    Only the full ICTRP attempt distinguishes 404s and city searches; every
    other step just succeeds or fails.
    """
    if result.ok:
        return Outcome.OK
    if state is not State.TRY_A:
        return Outcome.ERROR
    if result.is_not_found:
        return Outcome.NOT_FOUND_WITH_COUNTRY if criteria.country else Outcome.NOT_FOUND
    if criteria.is_city_search:
        return Outcome.ERROR_CITY_SEARCH
    return Outcome.ERROR


class Orchestrator:
    """Runs the sequential fallback policy across the two registries.

    Args:
        primary: Extractor for the primary (XML) registry.
        secondary: Extractor for the secondary (JSON) registry.

    """

    def __init__(self, primary: Extractor, secondary: Extractor) -> None:
        self.primary = primary
        self.secondary = secondary

    def _attempt_for(
        self, state: State, criteria: SearchCriteria,
    ) -> tuple[Extractor, SearchCriteria]:
        if state is State.TRY_B_CITY or state is State.TRY_B_FINAL:
            return self.secondary, criteria
        if state is State.TRY_A_NO_COUNTRY:
            return self.primary, criteria.without_country()
        if state is State.TRY_A_FALLBACK:
            return self.primary, criteria.without_query()
        return self.primary, criteria

    async def retrieve(self, criteria: SearchCriteria) -> FetchResult:
        """Resolve the criteria to one raw structure, or the last error.

        Attempts run strictly one after another because every step's
        criteria depend on how the previous one ended.
        """
        state = State.START
        outcome = Outcome.CITY_SEARCH if criteria.is_city_search else Outcome.PLAIN_SEARCH
        result: FetchResult | None = None
        trace = [state]

        while True:
            state = TRANSITIONS[(state, outcome)]
            trace.append(state)
            logger.info("Retrieval moved to %s", state.value)
            if state in TERMINAL_STATES:
                break

            extractor, attempt_criteria = self._attempt_for(state, criteria)
            result = await extractor.fetch(attempt_criteria)
            outcome = classify(state, result, criteria)

        if state is State.FAILED:
            logger.error(
                "All registry attempts failed (%s): %s",
                " -> ".join(s.value for s in trace),
                result.error,
            )
        else:
            logger.info("Retrieval finished via %s", " -> ".join(s.value for s in trace))
        return result
