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
Per-process dependencies handed to every handler.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable

from firebase_admin import firestore

from notifications.config import Settings, get_settings
from notifications.gateway import FcmPushGateway, PushGateway
from notifications.store import DocumentStore, FirestoreDocumentStore


@dataclass
class NotificationContext:
    store: DocumentStore
    push: PushGateway
    settings: Settings = field(default_factory=get_settings)
    clock: Callable[[], float] = time.time

    def now_millis(self) -> int:
        return int(self.clock() * 1000)

    def token_preview(self, token: str) -> str:
        return f"{token[: self.settings.token_log_prefix]}..."


@lru_cache(maxsize=1)
def get_context() -> NotificationContext:
    """
    Return the process-wide context. Requires firebase_admin.initialize_app()
    to have run.
    """
    return NotificationContext(
        store=FirestoreDocumentStore(firestore.client()),
        push=FcmPushGateway(),
        settings=get_settings(),
    )
