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
One pipeline per Firestore trigger: diff, resolve, compose, dispatch.

Handlers never raise. Missing data ends the pipeline with an info log, and
any other failure is logged by handler_boundary so the platform does not
retrigger the event.
"""

import functools
import traceback
from typing import Callable, Optional

from firebase_functions import logger
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from notifications import composer, diff, dispatcher, recipients
from notifications.context import NotificationContext
from shared.carpool_doc import (
    Call,
    Chat,
    ChatMessage,
    NotificationRecord,
    Ride,
    from_firestore,
)
from shared.constants import DEFAULT_CALLER_NAME, DEFAULT_DESTINATION, DEFAULT_USER_NAME
from shared.firebase_constants import CHATS_COLLECTION
from shared.types import NotificationType


def handler_boundary(name: str) -> Callable[[Callable], Callable]:
    """Logs any exception raised by the wrapped handler and returns None instead."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in {name}: {e}\n{traceback.format_exc()}")
                return None

        return wrapper

    return decorator


@handler_boundary("send_chat_notification")
def handle_chat_message(
    ctx: NotificationContext,
    chat_id: str,
    message_id: str,
    message_data: Optional[dict],
) -> None:
    """Notifies the other chat participant and bumps their unread counter."""
    if message_data is None:
        logger.info("No data associated with the event")
        return

    message = from_firestore(ChatMessage, message_data)
    if not message.sender_id:
        logger.info("No sender ID in message data")
        return

    chat_data = ctx.store.get(CHATS_COLLECTION, chat_id)
    if chat_data is None:
        logger.info(f"Chat {chat_id} not found.")
        return

    chat = from_firestore(Chat, chat_data)
    if not chat.participants:
        logger.info(f"No participants found in chat {chat_id}.")
        return

    recipient_id = next(
        (uid for uid in chat.participants if uid != message.sender_id), None
    )
    if not recipient_id:
        logger.info(f"Recipient not found for chat {chat_id}.")
        return

    recipient = recipients.resolve_recipient(ctx, recipient_id)
    if recipient is None:
        return

    sender_name = message.sender_name or recipients.resolve_display_name(
        ctx, message.sender_id, DEFAULT_USER_NAME
    )
    payload = composer.compose_chat_message(
        chat_id, message_id, message, sender_name, ctx.now_millis()
    )
    response = dispatcher.send(
        ctx, composer.build_message(payload, recipient.token, ctx.settings)
    )
    logger.info(f"Successfully sent notification to {recipient_id}, response: {response}")

    dispatcher.increment_unread_count(ctx, recipient_id, chat_id, payload.body)


@handler_boundary("send_call_notification")
def handle_call(ctx: NotificationContext, call_id: str, call_data: Optional[dict]) -> None:
    """Rings the callee."""
    if call_data is None:
        logger.info("No call data")
        return

    call = from_firestore(Call, call_data)
    if not call.caller_id or not call.callee_id:
        logger.info("Caller/Callee ID missing")
        return

    recipient = recipients.resolve_recipient(ctx, call.callee_id)
    if recipient is None:
        return

    caller_name = recipients.resolve_display_name(
        ctx, call.caller_id, DEFAULT_CALLER_NAME
    )
    payload = composer.compose_call(call_id, call, caller_name)
    response = dispatcher.send(
        ctx, composer.build_message(payload, recipient.token, ctx.settings)
    )
    logger.info(f"Call notification sent to {call.callee_id}, response: {response}")


@handler_boundary("send_ride_booking_notification")
def handle_ride_booking(
    ctx: NotificationContext,
    ride_id: str,
    before_data: Optional[dict],
    after_data: Optional[dict],
) -> None:
    """Tells the driver that a seat on their ride was booked or released."""
    if before_data is None or after_data is None:
        logger.info("Missing before or after data.")
        return

    before = from_firestore(Ride, before_data)
    after = from_firestore(Ride, after_data)
    change = diff.detect_booking_change(before, after)
    if change is None:
        logger.info("No booking/unbooking changes detected.")
        return
    logger.info(f"Detected booking change: {change}")

    if not after.driver_id:
        logger.info("No driver ID in ride data.")
        return

    driver = recipients.resolve_recipient(ctx, after.driver_id)
    if driver is None:
        return

    user_name = recipients.resolve_display_name(ctx, change.user_id, DEFAULT_USER_NAME)
    payload = composer.compose_booking(
        ride_id,
        change,
        user_name=user_name,
        destination=after.end_location_name or DEFAULT_DESTINATION,
        ride_date=composer.format_ride_date(after.date),
        timestamp=ctx.now_millis(),
    )
    dispatcher.send(ctx, composer.build_message(payload, driver.token, ctx.settings))
    logger.info(
        f"Sent ride booking notification ({change.status}) to driver {after.driver_id}"
    )

    dispatcher.record_notification(
        ctx,
        after.driver_id,
        NotificationRecord(
            type=NotificationType.RIDE_BOOKING,
            ride_id=ride_id,
            created_at=SERVER_TIMESTAMP,
            booked_by=change.user_id,
            booked_by_name=user_name,
            booking_status=change.status,
        ),
    )


@handler_boundary("send_approval_notification")
def handle_approval(
    ctx: NotificationContext,
    ride_id: str,
    before_data: Optional[dict],
    after_data: Optional[dict],
) -> None:
    """Tells a passenger that the driver approved or declined their booking."""
    if before_data is None or after_data is None:
        logger.info("Missing before or after data.")
        return

    change = diff.detect_approval_change(
        from_firestore(Ride, before_data), from_firestore(Ride, after_data)
    )
    if change is None:
        logger.info("No valid approval status change detected.")
        return
    logger.info(f"Detected approval status change: {change}")

    passenger = recipients.resolve_recipient(ctx, change.booked_by)
    if passenger is None:
        return

    payload = composer.compose_approval(ride_id, change, ctx.now_millis())
    dispatcher.send(ctx, composer.build_message(payload, passenger.token, ctx.settings))
    logger.info(
        f"Sent approval notification ({change.new_status}) to user {change.booked_by}"
    )

    dispatcher.record_notification(
        ctx,
        change.booked_by,
        NotificationRecord(
            type=NotificationType.APPROVAL_UPDATE,
            ride_id=ride_id,
            created_at=SERVER_TIMESTAMP,
            booked_by=change.booked_by,
            approval_status=change.new_status,
        ),
    )


@handler_boundary("send_ride_status_notification")
def handle_ride_status(
    ctx: NotificationContext,
    ride_id: str,
    before_data: Optional[dict],
    after_data: Optional[dict],
) -> None:
    """Broadcasts a ride status change to every approved passenger."""
    if before_data is None or after_data is None:
        logger.info("Missing before or after data.")
        return

    before = from_firestore(Ride, before_data)
    after = from_firestore(Ride, after_data)
    change = diff.detect_status_change(before, after)
    if change is None:
        logger.info(
            f"No relevant status transition detected. "
            f"Before: {before.status}, After: {after.status}"
        )
        return
    logger.info(f"Status transition detected: {change.previous_status} -> {change.new_status}")

    if not change.notify_user_ids:
        logger.info("No approved booked users found to notify.")
        return

    passengers = recipients.resolve_recipients(ctx, change.notify_user_ids)
    if not passengers:
        logger.info("No FCM tokens available for sending notifications.")
        return
    logger.info(f"FCM tokens collected for {len(passengers)} users.")

    payload = composer.compose_ride_status(ride_id, change, ctx.now_millis())
    dispatcher.send_multicast(
        ctx,
        composer.build_multicast_message(
            payload, [p.token for p in passengers], ctx.settings
        ),
    )

    dispatcher.record_notifications(
        ctx,
        [p.user_id for p in passengers],
        NotificationRecord(
            type=NotificationType.RIDE_STATUS_UPDATE,
            ride_id=ride_id,
            created_at=SERVER_TIMESTAMP,
            new_status=change.new_status,
        ),
    )
