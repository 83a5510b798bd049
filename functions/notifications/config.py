# Copyright 2025 Google LLC
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
# ==============================================================================

"""
Configuration for the notification functions.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings, read from CARPOOL_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="CARPOOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    region: str = Field(default="europe-west1")

    # Platform hints attached to every push message.
    click_action: str = Field(default="FLUTTER_NOTIFICATION_CLICK")
    notification_sound: str = Field(default="default")
    apns_badge: int = Field(default=1)

    # Upper bound on concurrent user reads / record writes within one event.
    fanout_max_workers: int = Field(default=8, ge=1)

    # Number of token characters written to logs.
    token_log_prefix: int = Field(default=10, ge=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
