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

from typing import Any, List, Optional

from notifications.config import Settings
from notifications.context import NotificationContext
from notifications.gateway import InMemoryPushGateway
from notifications.store import InMemoryDocumentStore
from shared.carpool_doc import Ride, from_firestore
from shared.firebase_constants import USERS_COLLECTION

FIXED_NOW = 1735689600.0  # 2025-01-01T00:00:00Z


def create_test_context(**settings_overrides) -> NotificationContext:
    return NotificationContext(
        store=InMemoryDocumentStore(),
        push=InMemoryPushGateway(),
        settings=Settings(**settings_overrides),
        clock=lambda: FIXED_NOW,
    )


def add_user(
    ctx: NotificationContext,
    user_id: str,
    token: Optional[str] = None,
    display_name: Optional[str] = None,
    name: Optional[str] = None,
) -> None:
    data = {}
    if token is not None:
        data["fcmToken"] = token
    if display_name is not None:
        data["displayName"] = display_name
    if name is not None:
        data["name"] = name
    ctx.store.put(USERS_COLLECTION, user_id, data)


def seat(booked_by: Any = "n/a", approval_status: Optional[str] = None) -> dict:
    return {"bookedBy": booked_by, "approvalStatus": approval_status}


def create_ride_doc(
    seats: List[dict],
    status: str = "scheduled",
    driver_id: Optional[str] = "driver1",
    **extra,
) -> dict:
    doc = {"driverId": driver_id, "status": status, "seatLayout": seats}
    doc.update(extra)
    return doc


def create_ride(seats: List[dict], status: str = "scheduled", **extra) -> Ride:
    return from_firestore(Ride, create_ride_doc(seats, status=status, **extra))
