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
Builds FCM messages from detected changes. No I/O happens here.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from firebase_admin import messaging

from notifications.config import Settings
from notifications.diff import ApprovalChange, BookingChange, StatusChange
from shared.carpool_doc import Call, ChatMessage
from shared.constants import (
    ANDROID_PRIORITY,
    CALL_CATEGORY,
    CALL_CHANNEL_ID,
    CHAT_CHANNEL_ID,
    DEFAULT_CHAT_TEXT,
    DEFAULT_MESSAGE_TYPE,
    NEW_MESSAGE_CATEGORY,
    RIDE_APPROVAL_CATEGORY,
    RIDE_BOOKING_CATEGORY,
    RIDE_CHANNEL_ID,
    RIDE_STATUS_CATEGORY,
)
from shared.types import ApprovalStatus, BookingStatus, NotificationType, RideStatus

BOOKED_TITLE = "تم حجز مقعد جديد"
UNBOOKED_TITLE = "تم إلغاء حجز مقعد"

APPROVAL_TEMPLATES = {
    ApprovalStatus.APPROVED: (
        "تمت الموافقة على حجزك",
        "تمت الموافقة على حجز مقعدك في الرحلة.",
    ),
    ApprovalStatus.DECLINED: (
        "تم رفض حجزك",
        "تم رفض حجز مقعدك في الرحلة.",
    ),
}

RIDE_STATUS_TEMPLATES = {
    RideStatus.CANCELLED: (
        "تم إلغاء الرحلة",
        "تم إلغاء الرحلة التي قمت بالحجز عليها.",
    ),
    RideStatus.STARTED: (
        "بدأت الرحلة",
        "بدأت الرحلة التي قمت بالحجز عليها.",
    ),
    RideStatus.COMPLETED: (
        "انتهت الرحلة",
        "انتهت الرحلة التي قمت بالحجز عليها.",
    ),
}


@dataclass
class NotificationPayload:
    title: str
    body: str
    data: Dict[str, str] = field(default_factory=dict)
    channel_id: str = RIDE_CHANNEL_ID
    category: str = RIDE_STATUS_CATEGORY
    image_url: Optional[str] = None


def stringify_data(data: Dict[str, Any]) -> Dict[str, str]:
    """FCM data values must all be strings. None values are dropped."""
    result = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, bool):
            result[key] = "true" if value else "false"
        else:
            result[key] = str(value)
    return result


def format_ride_date(value: Any) -> str:
    """Formats a ride timestamp like "Mar 5, 2025" (UTC). Non-dates give ""."""
    if not isinstance(value, datetime):
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value:%b} {value.day}, {value.year}"


def compose_chat_message(
    chat_id: str,
    message_id: str,
    message: ChatMessage,
    sender_name: str,
    timestamp: int,
) -> NotificationPayload:
    return NotificationPayload(
        title=sender_name,
        body=message.text or DEFAULT_CHAT_TEXT,
        data=stringify_data(
            {
                "chatId": chat_id,
                "senderId": message.sender_id,
                "messageId": message_id,
                "timestamp": timestamp,
                "type": message.type or DEFAULT_MESSAGE_TYPE,
                "notificationType": NotificationType.CHAT_MESSAGE,
            }
        ),
        channel_id=CHAT_CHANNEL_ID,
        category=NEW_MESSAGE_CATEGORY,
        image_url=message.image_url or None,
    )


def compose_call(call_id: str, call: Call, caller_name: str) -> NotificationPayload:
    call_type = "video" if call.is_video_call else "voice"
    return NotificationPayload(
        title=f"Incoming {call_type} call",
        body=f"{caller_name} is calling you",
        data=stringify_data(
            {
                "call": True,
                "callerId": call.caller_id,
                "channelId": call_id,
                "isVideoCall": call.is_video_call,
                "callType": call_type,
            }
        ),
        channel_id=CALL_CHANNEL_ID,
        category=CALL_CATEGORY,
    )


def compose_booking(
    ride_id: str,
    change: BookingChange,
    user_name: str,
    destination: str,
    ride_date: str,
    timestamp: int,
) -> NotificationPayload:
    when = f" في {ride_date}" if ride_date else ""
    if change.status == BookingStatus.BOOKED:
        title = BOOKED_TITLE
        body = f"قام {user_name} بحجز مقعد في رحلتك إلى {destination}{when}. يرجى المراجعة والموافقة."
    else:
        title = UNBOOKED_TITLE
        body = f"قام {user_name} بإلغاء حجز مقعده في رحلتك إلى {destination}{when}."
    return NotificationPayload(
        title=title,
        body=body,
        data=stringify_data(
            {
                "notificationType": NotificationType.RIDE_BOOKING,
                "rideId": ride_id,
                "bookedBy": change.user_id,
                "bookingStatus": change.status,
                "timestamp": timestamp,
            }
        ),
        channel_id=RIDE_CHANNEL_ID,
        category=RIDE_BOOKING_CATEGORY,
    )


def compose_approval(
    ride_id: str, change: ApprovalChange, timestamp: int
) -> NotificationPayload:
    title, body = APPROVAL_TEMPLATES[change.new_status]
    return NotificationPayload(
        title=title,
        body=body,
        data=stringify_data(
            {
                "notificationType": NotificationType.APPROVAL_UPDATE,
                "rideId": ride_id,
                "bookedBy": change.booked_by,
                "approvalStatus": change.new_status,
                "timestamp": timestamp,
            }
        ),
        channel_id=RIDE_CHANNEL_ID,
        category=RIDE_APPROVAL_CATEGORY,
    )


def compose_ride_status(
    ride_id: str, change: StatusChange, timestamp: int
) -> NotificationPayload:
    title, body = RIDE_STATUS_TEMPLATES[change.new_status]
    return NotificationPayload(
        title=title,
        body=body,
        data=stringify_data(
            {
                "notificationType": NotificationType.RIDE_STATUS_UPDATE,
                "rideId": ride_id,
                "newStatus": change.new_status,
                "timestamp": timestamp,
            }
        ),
        channel_id=RIDE_CHANNEL_ID,
        category=RIDE_STATUS_CATEGORY,
    )


def _platform_configs(payload: NotificationPayload, settings: Settings):
    android = messaging.AndroidConfig(
        notification=messaging.AndroidNotification(
            channel_id=payload.channel_id,
            priority=ANDROID_PRIORITY,
            sound=settings.notification_sound,
            click_action=settings.click_action,
        ),
    )
    apns = messaging.APNSConfig(
        payload=messaging.APNSPayload(
            aps=messaging.Aps(
                content_available=True,
                sound=settings.notification_sound,
                badge=settings.apns_badge,
                category=payload.category,
            ),
        ),
    )
    return android, apns


def _notification(payload: NotificationPayload) -> messaging.Notification:
    return messaging.Notification(
        title=payload.title, body=payload.body, image=payload.image_url
    )


def build_message(
    payload: NotificationPayload, token: str, settings: Settings
) -> messaging.Message:
    android, apns = _platform_configs(payload, settings)
    return messaging.Message(
        notification=_notification(payload),
        data=dict(payload.data),
        android=android,
        apns=apns,
        token=token,
    )


def build_multicast_message(
    payload: NotificationPayload, tokens: List[str], settings: Settings
) -> messaging.MulticastMessage:
    android, apns = _platform_configs(payload, settings)
    return messaging.MulticastMessage(
        tokens=list(tokens),
        notification=_notification(payload),
        data=dict(payload.data),
        android=android,
        apns=apns,
    )
