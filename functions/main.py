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

# Cloud functions for the carpool app - push notifications for chat, calls
# and ride changes.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.

# Standard library imports
from typing import Optional, Tuple

# Third-party library imports
from firebase_admin import initialize_app
from firebase_functions import logger, options
from firebase_functions.firestore_fn import (
    on_document_created,
    on_document_updated,
    Event,
    Change,
    DocumentSnapshot,
)

# Local application imports
from notifications import handlers
from notifications.config import get_settings
from notifications.context import get_context
from shared.firebase_constants import (
    CALLS_COLLECTION,
    CHATS_COLLECTION,
    MESSAGES_COLLECTION,
    RIDES_COLLECTION,
)

RIDE_DOCUMENT = RIDES_COLLECTION + "/{rideId}"

initialize_app()
options.set_global_options(region=get_settings().region)


def _snapshot_data(snapshot: Optional[DocumentSnapshot]) -> Optional[dict]:
    if snapshot is None:
        return None
    return snapshot.to_dict() or {}


def _change_data(
    change: Optional[Change[DocumentSnapshot]],
) -> Tuple[Optional[dict], Optional[dict]]:
    if change is None:
        return None, None
    return _snapshot_data(change.before), _snapshot_data(change.after)


@on_document_created(
    document=CHATS_COLLECTION + "/{chatId}/" + MESSAGES_COLLECTION + "/{messageId}"
)
def send_chat_notification(event: Event[Optional[DocumentSnapshot]]) -> None:
    """Notifies the other participant of a chat about a new message."""
    logger.info(f"Chat function triggered for new message {event.params}")
    handlers.handle_chat_message(
        get_context(),
        chat_id=event.params["chatId"],
        message_id=event.params["messageId"],
        message_data=_snapshot_data(event.data),
    )


@on_document_created(document=CALLS_COLLECTION + "/{callId}")
def send_call_notification(event: Event[Optional[DocumentSnapshot]]) -> None:
    """Notifies the callee of an incoming voice or video call."""
    logger.info(f"Call function triggered, callId: {event.params['callId']}")
    handlers.handle_call(
        get_context(),
        call_id=event.params["callId"],
        call_data=_snapshot_data(event.data),
    )


@on_document_updated(document=RIDE_DOCUMENT)
def send_ride_booking_notification(
    event: Event[Optional[Change[DocumentSnapshot]]],
) -> None:
    """Notifies the driver when a seat is booked or unbooked."""
    logger.info(f"Ride booking function triggered for ride {event.params['rideId']}")
    before_data, after_data = _change_data(event.data)
    handlers.handle_ride_booking(
        get_context(), event.params["rideId"], before_data, after_data
    )


@on_document_updated(document=RIDE_DOCUMENT)
def send_approval_notification(
    event: Event[Optional[Change[DocumentSnapshot]]],
) -> None:
    """Notifies a passenger when their pending booking is approved or declined."""
    logger.info(f"Approval function triggered for ride {event.params['rideId']}")
    before_data, after_data = _change_data(event.data)
    handlers.handle_approval(
        get_context(), event.params["rideId"], before_data, after_data
    )


@on_document_updated(document=RIDE_DOCUMENT)
def send_ride_status_notification(
    event: Event[Optional[Change[DocumentSnapshot]]],
) -> None:
    """Notifies approved passengers when a ride starts, completes or is cancelled."""
    logger.info(f"Ride status function triggered for ride {event.params['rideId']}")
    before_data, after_data = _change_data(event.data)
    handlers.handle_ride_status(
        get_context(), event.params["rideId"], before_data, after_data
    )
