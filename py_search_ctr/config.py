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
"""Manages the application's configuration using Pydantic."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Manages configuration for the registry clients.

    Reads settings from environment variables with the prefix 'CTR_'.
    The instance is frozen so it can be shared by the service, the
    orchestrator and both extractors without being changed underneath them.
    """

    model_config = SettingsConfigDict(env_prefix="CTR_", frozen=True)

    # Upstream registry endpoints
    ictrp_api_url: str = "https://trialsearch.who.int/api/v1/trials"
    ctgov_full_studies_url: str = "https://clinicaltrials.gov/api/query/full_studies"
    trial_url_template: str = "https://trialsearch.who.int/Trial2.aspx?TrialID={trial_id}"

    # HTTP client settings
    user_agent: str = "py-search-ctr/0.1.0"
    request_timeout: float = 30.0

    # Result window
    ctgov_default_max_rank: int = 20
    default_max_results: int = 10
    max_results_cap: int = 50

    log_level: str = "INFO"


# Instantiate the settings so it can be imported directly
settings = Settings()
