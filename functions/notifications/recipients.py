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
Maps user ids to push tokens and display names.

Missing users and missing tokens are normal here: they mean "do not notify",
and are logged rather than raised.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from firebase_functions import logger

from notifications.context import NotificationContext
from notifications.tasks import run_all
from shared.carpool_doc import UserProfile, from_firestore
from shared.firebase_constants import USERS_COLLECTION


@dataclass
class Recipient:
    user_id: str
    token: str


def _load_user(ctx: NotificationContext, user_id: str) -> Optional[UserProfile]:
    data = ctx.store.get(USERS_COLLECTION, user_id)
    if data is None:
        return None
    return from_firestore(UserProfile, data)


def _to_recipient(
    ctx: NotificationContext, user_id: str, user: Optional[UserProfile]
) -> Optional[Recipient]:
    if user is None:
        logger.info(f"User {user_id} not found.")
        return None
    if not user.fcm_token:
        logger.info(f"User {user_id} has no FCM token.")
        return None
    logger.info(f"Retrieved FCM token for user {user_id}: {ctx.token_preview(user.fcm_token)}")
    return Recipient(user_id=user_id, token=user.fcm_token)


def resolve_recipient(ctx: NotificationContext, user_id: str) -> Optional[Recipient]:
    """Returns the user's push target, or None when they cannot be notified."""
    return _to_recipient(ctx, user_id, _load_user(ctx, user_id))


def resolve_recipients(
    ctx: NotificationContext, user_ids: Iterable[str]
) -> List[Recipient]:
    """
    Resolves several users concurrently, keeping input order.

    Users without a document or token are dropped. A failed read drops that
    user only; the other reads still complete.
    """
    outcomes = run_all(
        lambda user_id: _load_user(ctx, user_id),
        user_ids,
        max_workers=ctx.settings.fanout_max_workers,
    )
    recipients = []
    for outcome in outcomes:
        if not outcome.ok:
            logger.error(f"Error fetching user {outcome.item}: {outcome.error}")
            continue
        recipient = _to_recipient(ctx, outcome.item, outcome.result)
        if recipient:
            recipients.append(recipient)
    return recipients


def resolve_display_name(ctx: NotificationContext, user_id: str, default: str) -> str:
    """displayName, then name, then `default`. Read errors fall back to `default`."""
    try:
        user = _load_user(ctx, user_id)
    except Exception as e:
        logger.info(f"Error fetching info for user {user_id}: {e}")
        return default
    if user is None:
        return default
    return user.display_name or user.name or default
