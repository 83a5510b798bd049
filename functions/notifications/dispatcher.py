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
Sends composed messages and writes the resulting history entries.
"""

from typing import Iterable, Tuple

from firebase_admin import messaging
from firebase_functions import logger
from google.cloud.firestore_v1 import SERVER_TIMESTAMP, Increment

from notifications.context import NotificationContext
from notifications.gateway import MulticastResult
from notifications.tasks import run_all
from shared.carpool_doc import NotificationRecord
from shared.firebase_constants import (
    NOTIFICATIONS_COLLECTION,
    USER_CHATS_COLLECTION,
    USERS_COLLECTION,
)


def notifications_path(user_id: str) -> str:
    return f"{USERS_COLLECTION}/{user_id}/{NOTIFICATIONS_COLLECTION}"


def user_chat_id(user_id: str, chat_id: str) -> str:
    return f"{user_id}_{chat_id}"


def send(ctx: NotificationContext, message: messaging.Message) -> str:
    """Sends to a single token. Delivery errors propagate to the caller."""
    return ctx.push.send(message)


def send_multicast(
    ctx: NotificationContext, message: messaging.MulticastMessage
) -> MulticastResult:
    result = ctx.push.send_multicast(message)
    logger.info(
        f"Sent multicast notification. Success count: {result.success_count}, "
        f"Failure count: {result.failure_count}"
    )
    for index, token_result in result.failures():
        logger.warn(f"Failed to send to token at index {index}: {token_result.error}")
    return result


def record_notification(
    ctx: NotificationContext, user_id: str, record: NotificationRecord
) -> bool:
    """Appends to the user's notification history. Failures are logged only."""
    try:
        ctx.store.add(notifications_path(user_id), record.to_firestore())
    except Exception as e:
        logger.error(f"Error adding notification to collection for {user_id}: {e}")
        return False
    logger.info(f"Added {record.type} notification to collection for {user_id}")
    return True


def record_notifications(
    ctx: NotificationContext, user_ids: Iterable[str], record: NotificationRecord
) -> Tuple[int, int]:
    """
    Writes the same record for every user concurrently.

    Returns (success_count, failure_count); one failed write does not stop
    the rest.
    """
    outcomes = run_all(
        lambda user_id: ctx.store.add(notifications_path(user_id), record.to_firestore()),
        user_ids,
        max_workers=ctx.settings.fanout_max_workers,
    )
    failure_count = 0
    for outcome in outcomes:
        if not outcome.ok:
            failure_count += 1
            logger.error(
                f"Error adding {record.type} notification for {outcome.item}: {outcome.error}"
            )
    success_count = len(outcomes) - failure_count
    logger.info(
        f"Added {record.type} notification to collections for {success_count} users"
    )
    return success_count, failure_count


def increment_unread_count(
    ctx: NotificationContext, recipient_id: str, chat_id: str, last_message: str
) -> bool:
    """
    Bumps the recipient's unread counter for the chat. The counter uses a
    server-side increment so concurrent messages are all counted.
    """
    try:
        ctx.store.merge(
            USER_CHATS_COLLECTION,
            user_chat_id(recipient_id, chat_id),
            {
                "unreadCount": Increment(1),
                "lastMessage": last_message,
                "lastMessageTime": SERVER_TIMESTAMP,
            },
        )
    except Exception as e:
        logger.error(f"Error updating unread count: {e}")
        return False
    logger.info(f"Updated unread count for user {recipient_id} in chat {chat_id}")
    return True
