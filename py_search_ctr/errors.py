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
"""Error kinds raised by the registry extractors."""


class RegistryError(Exception):
    """Base class for every failure talking to an upstream registry."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class RegistryHttpError(RegistryError):
    """The registry answered with a non-2xx status code."""

    def __init__(self, status: int, url: str | None = None) -> None:
        super().__init__(f"HTTP error! status: {status}")
        self.status = status
        self.url = url

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


class RegistryParseError(RegistryError):
    """The response body was not well-formed XML/JSON."""


class RegistryTimeoutError(RegistryError):
    """The transport gave up waiting for the registry."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Request timeout while contacting {url}")
        self.url = url


class RegistryNetworkError(RegistryError):
    """Any other transport-level failure (DNS, refused connection, ...)."""

    def __init__(self, url: str, detail: str) -> None:
        super().__init__(f"Network error while contacting {url}: {detail}")
        self.url = url
