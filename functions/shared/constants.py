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

# Values stored in a seat's bookedBy field that mean nobody holds the seat.
EMPTY_BOOKING_MARKERS = (None, "", "n/a")

# Android notification channels, one per category.
CHAT_CHANNEL_ID = "chat_messages"
CALL_CHANNEL_ID = "call_notifications"
RIDE_CHANNEL_ID = "ride_notifications"

# APNs categories.
NEW_MESSAGE_CATEGORY = "NEW_MESSAGE"
CALL_CATEGORY = "CALL_NOTIFICATION"
RIDE_BOOKING_CATEGORY = "RIDE_BOOKING"
RIDE_APPROVAL_CATEGORY = "RIDE_APPROVAL"
RIDE_STATUS_CATEGORY = "RIDE_STATUS"

ANDROID_PRIORITY = "high"

# Localized fallbacks.
DEFAULT_USER_NAME = "مستخدم"
DEFAULT_CALLER_NAME = "متصل"
DEFAULT_DESTINATION = "وجهتك"
DEFAULT_CHAT_TEXT = "لديك رسالة جديدة"
DEFAULT_MESSAGE_TYPE = "text"
