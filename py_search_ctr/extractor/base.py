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
"""Defines the abstract base class for registry extractors."""

import abc
import logging
from typing import Any

import httpx

from py_search_ctr.config import Settings
from py_search_ctr.errors import (
    RegistryError,
    RegistryHttpError,
    RegistryNetworkError,
    RegistryTimeoutError,
)
from py_search_ctr.models.criteria import FetchResult, SearchCriteria

logger = logging.getLogger(__name__)


class BaseExtractor(abc.ABC):
    """Abstract Base Class for all registry extractors.

    Subclasses turn ``SearchCriteria`` into a registry-specific request and the
    response into a raw ``{"trials": {"trial": ...}}`` structure. Failures are
    reported inside the returned ``FetchResult``; ``fetch`` never raises a
    ``RegistryError``.
    """

    #: Short name used in log messages.
    name: str = "registry"

    def __init__(self, settings: Settings, client: httpx.AsyncClient) -> None:
        """Initialize the extractor with settings and a shared HTTP client."""
        self.settings = settings
        self.client = client

    async def fetch(self, criteria: SearchCriteria) -> FetchResult:
        """Query the registry once and return the raw structure or the error."""
        try:
            return FetchResult.success(await self._fetch_raw(criteria))
        except RegistryError as e:
            logger.warning("%s request failed: %s", self.name, e)
            return FetchResult.failure(e)

    @abc.abstractmethod
    async def _fetch_raw(self, criteria: SearchCriteria) -> dict[str, Any]:
        """Issue the request and parse it into a raw structure.

        Raises:
            RegistryError: on any HTTP, transport or parsing failure.

        """
        raise NotImplementedError

    async def _get(
        self, url: str, params: dict[str, str], accept: str,
    ) -> httpx.Response:
        """Send a GET request and translate transport failures.

        Raises:
            RegistryHttpError: for a non-2xx status code.
            RegistryTimeoutError: when the transport deadline expires.
            RegistryNetworkError: for any other transport failure.

        """
        headers = {"User-Agent": self.settings.user_agent, "Accept": accept}
        try:
            response = await self.client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise RegistryTimeoutError(url) from e
        except httpx.RequestError as e:
            raise RegistryNetworkError(url, str(e) or type(e).__name__) from e

        logger.info("%s responded %d for %s", self.name, response.status_code, response.url)
        if not response.is_success:
            raise RegistryHttpError(response.status_code, str(response.url))
        return response
