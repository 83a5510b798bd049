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
Detects the seat and status transitions between two versions of a ride.

Every function here is pure. A missing ride version is treated as a ride with
no seats and no status, so malformed input never raises.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from firebase_functions import logger

from shared.carpool_doc import Ride, Seat
from shared.constants import EMPTY_BOOKING_MARKERS
from shared.types import (
    NOTIFIABLE_RIDE_STATUSES,
    ApprovalStatus,
    BookingStatus,
    RideStatus,
)


@dataclass(frozen=True)
class BookingChange:
    seat_index: int
    status: BookingStatus
    user_id: str


@dataclass(frozen=True)
class ApprovalChange:
    seat_index: int
    new_status: ApprovalStatus
    booked_by: str


@dataclass(frozen=True)
class StatusChange:
    previous_status: Optional[str]
    new_status: RideStatus
    # Approved passengers, de-duplicated, in seat order.
    notify_user_ids: Tuple[str, ...]


def is_empty_booking(booked_by: Any) -> bool:
    return booked_by in EMPTY_BOOKING_MARKERS


def _aligned_seats(before: Optional[Ride], after: Optional[Ride]):
    before_seats = before.seat_layout if before else []
    after_seats = after.seat_layout if after else []
    for i in range(max(len(before_seats), len(after_seats))):
        before_seat = before_seats[i] if i < len(before_seats) else Seat()
        after_seat = after_seats[i] if i < len(after_seats) else Seat()
        yield i, before_seat, after_seat


def booking_changes(before: Optional[Ride], after: Optional[Ride]) -> List[BookingChange]:
    """
    Returns every seat whose bookedBy went from empty to a user (booked) or
    from a user to empty (unbooked). A seat handed directly from one user to
    another produces nothing.
    """
    changes = []
    for i, before_seat, after_seat in _aligned_seats(before, after):
        if before_seat.booked_by == after_seat.booked_by:
            continue
        before_empty = is_empty_booking(before_seat.booked_by)
        after_empty = is_empty_booking(after_seat.booked_by)
        if before_empty and not after_empty:
            changes.append(BookingChange(i, BookingStatus.BOOKED, after_seat.booked_by))
        elif not before_empty and after_empty:
            changes.append(BookingChange(i, BookingStatus.UNBOOKED, before_seat.booked_by))
    return changes


def detect_booking_change(
    before: Optional[Ride], after: Optional[Ride]
) -> Optional[BookingChange]:
    """Only the first changed seat is acted on; one user action moves one seat."""
    changes = booking_changes(before, after)
    if not changes:
        return None
    if len(changes) > 1:
        logger.info(f"Detected {len(changes)} booking changes, using the first: {changes}")
    return changes[0]


def approval_changes(before: Optional[Ride], after: Optional[Ride]) -> List[ApprovalChange]:
    """
    Returns seats whose approvalStatus moved from pending to approved or
    declined. The passenger is taken from the seat before the change, since a
    decline may clear bookedBy in the same write.
    """
    changes = []
    for i, before_seat, after_seat in _aligned_seats(before, after):
        if before_seat.approval_status != ApprovalStatus.PENDING:
            continue
        if after_seat.approval_status not in (
            ApprovalStatus.APPROVED,
            ApprovalStatus.DECLINED,
        ):
            continue
        if is_empty_booking(before_seat.booked_by):
            logger.info(
                f"Approval changed for seat {i}, but prior bookedBy is invalid: "
                f"{before_seat.booked_by}"
            )
            continue
        changes.append(
            ApprovalChange(
                seat_index=i,
                new_status=ApprovalStatus(after_seat.approval_status),
                booked_by=before_seat.booked_by,
            )
        )
    return changes


def detect_approval_change(
    before: Optional[Ride], after: Optional[Ride]
) -> Optional[ApprovalChange]:
    changes = approval_changes(before, after)
    if not changes:
        return None
    if len(changes) > 1:
        logger.info(f"Detected {len(changes)} approval changes, using the first: {changes}")
    return changes[0]


def detect_status_change(
    before: Optional[Ride], after: Optional[Ride]
) -> Optional[StatusChange]:
    """
    Returns the new ride status if it changed to one passengers care about,
    along with every approved passenger on the updated ride.
    """
    previous_status = before.status if before else None
    new_status = after.status if after else None
    if previous_status == new_status or new_status not in NOTIFIABLE_RIDE_STATUSES:
        return None

    notify_user_ids = {}
    for seat in after.seat_layout:
        if (
            not is_empty_booking(seat.booked_by)
            and seat.approval_status == ApprovalStatus.APPROVED
        ):
            notify_user_ids[seat.booked_by] = None
    return StatusChange(
        previous_status=previous_status,
        new_status=RideStatus(new_status),
        notify_user_ids=tuple(notify_user_ids),
    )
