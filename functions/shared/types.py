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

from enum import StrEnum


class ApprovalStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class RideStatus(StrEnum):
    SCHEDULED = "scheduled"
    STARTED = "started"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Ride statuses that passengers are told about.
NOTIFIABLE_RIDE_STATUSES = (
    RideStatus.CANCELLED,
    RideStatus.STARTED,
    RideStatus.COMPLETED,
)


class BookingStatus(StrEnum):
    BOOKED = "booked"
    UNBOOKED = "unbooked"


class NotificationType(StrEnum):
    CHAT_MESSAGE = "chat_message"
    CALL = "call"
    RIDE_BOOKING = "ride_booking"
    APPROVAL_UPDATE = "approval_update"
    RIDE_STATUS_UPDATE = "ride_status_update"
