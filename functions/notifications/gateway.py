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
Push gateway abstraction over Firebase Cloud Messaging.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from firebase_admin import messaging


class PushDeliveryError(Exception):
    """Raised when a push message could not be delivered to a token."""


@dataclass
class TokenResult:
    token: str
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class MulticastResult:
    success_count: int
    failure_count: int
    results: List[TokenResult] = field(default_factory=list)

    def failures(self) -> List[tuple[int, TokenResult]]:
        return [(i, r) for i, r in enumerate(self.results) if not r.success]


class PushGateway(Protocol):
    def send(self, message: messaging.Message) -> str:
        ...

    def send_multicast(self, message: messaging.MulticastMessage) -> MulticastResult:
        ...


class FcmPushGateway:
    """Sends through the firebase_admin messaging API."""

    def __init__(self, app=None):
        self.app = app

    def send(self, message: messaging.Message) -> str:
        return messaging.send(message, app=self.app)

    def send_multicast(self, message: messaging.MulticastMessage) -> MulticastResult:
        response = messaging.send_each_for_multicast(message, app=self.app)
        results = [
            TokenResult(
                token=token,
                success=send_response.success,
                message_id=send_response.message_id,
                error=str(send_response.exception) if send_response.exception else None,
            )
            for token, send_response in zip(message.tokens, response.responses)
        ]
        return MulticastResult(
            success_count=response.success_count,
            failure_count=response.failure_count,
            results=results,
        )


@dataclass
class InMemoryPushGateway:
    """Test double that records messages instead of sending them."""

    sent: list = field(default_factory=list)
    multicasts: list = field(default_factory=list)
    failing_tokens: set = field(default_factory=set)

    def send(self, message: messaging.Message) -> str:
        if message.token in self.failing_tokens:
            raise PushDeliveryError(f"Requested entity was not found: {message.token}")
        self.sent.append(message)
        return f"projects/test/messages/{uuid.uuid4().hex}"

    def send_multicast(self, message: messaging.MulticastMessage) -> MulticastResult:
        self.multicasts.append(message)
        results = []
        for token in message.tokens:
            if token in self.failing_tokens:
                results.append(
                    TokenResult(token=token, success=False, error="Requested entity was not found.")
                )
            else:
                results.append(
                    TokenResult(
                        token=token,
                        success=True,
                        message_id=f"projects/test/messages/{uuid.uuid4().hex}",
                    )
                )
        success_count = sum(1 for r in results if r.success)
        return MulticastResult(
            success_count=success_count,
            failure_count=len(results) - success_count,
            results=results,
        )
