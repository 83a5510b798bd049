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

from dataclasses import dataclass, field, fields
from typing import Any, List, Optional, Type, TypeVar

from dacite import Config, from_dict

from shared.json_utils import convert_keys

T = TypeVar("T")


@dataclass
class Seat:
    booked_by: Optional[str] = None
    approval_status: Optional[str] = None


@dataclass
class Ride:
    driver_id: Optional[str] = None
    status: Optional[str] = None
    seat_layout: List[Seat] = field(default_factory=list)
    end_location_name: Optional[str] = None
    # Firestore timestamp (DatetimeWithNanoseconds once read).
    date: Any = None


@dataclass
class UserProfile:
    fcm_token: Optional[str] = None
    display_name: Optional[str] = None
    name: Optional[str] = None


@dataclass
class Chat:
    participants: List[str] = field(default_factory=list)


@dataclass
class ChatMessage:
    sender_id: Optional[str] = None
    text: Optional[str] = None
    sender_name: Optional[str] = None
    image_url: Optional[str] = None
    type: Optional[str] = None


@dataclass
class Call:
    caller_id: Optional[str] = None
    callee_id: Optional[str] = None
    # Passed to the payload as stored; may be a bool or a string.
    is_video_call: Any = False


@dataclass
class NotificationRecord:
    """Entry in a user's in-app notification history."""

    type: str
    ride_id: str
    created_at: (
        Any  # Firestore timestamp created with firestore_v1.SERVER_TIMESTAMP
    )
    read: bool = False
    booked_by: Optional[str] = None
    booked_by_name: Optional[str] = None
    booking_status: Optional[str] = None
    approval_status: Optional[str] = None
    new_status: Optional[str] = None

    def to_firestore(self) -> dict:
        # Built field by field: asdict() would deep-copy the SERVER_TIMESTAMP sentinel.
        data = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
        return convert_keys(data, "snake_to_camel")


def _normalize_seat(seat: Any) -> dict:
    if not isinstance(seat, dict):
        return {}
    if not isinstance(seat.get("booked_by"), str):
        seat = {**seat, "booked_by": None}
    return seat


def _normalize_ride(data: dict) -> dict:
    seats = data.get("seat_layout")
    if not isinstance(seats, list):
        seats = []
    data["seat_layout"] = [_normalize_seat(seat) for seat in seats]
    return data


def _normalize_chat(data: dict) -> dict:
    participants = data.get("participants")
    data["participants"] = participants if isinstance(participants, list) else []
    return data


def _normalize_call(data: dict) -> dict:
    data["is_video_call"] = data.get("is_video_call") or False
    return data


_NORMALIZERS = {
    Ride: _normalize_ride,
    Chat: _normalize_chat,
    Call: _normalize_call,
}


def from_firestore(data_class: Type[T], data: Optional[dict]) -> T:
    """
    Builds a record from a camelCase Firestore document.

    Absent documents and missing fields fall back to the dataclass defaults;
    fields explicitly stored as null are treated as missing.
    """
    snake = convert_keys(data or {}, "camel_to_snake")
    snake = {key: value for key, value in snake.items() if value is not None}
    normalize = _NORMALIZERS.get(data_class)
    if normalize:
        snake = normalize(snake)
    return from_dict(data_class=data_class, data=snake, config=Config(check_types=False))
