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
# Standard library imports
import unittest
from unittest.mock import patch, MagicMock

# Local application imports
# This patch must be applied before importing 'main'
with patch("firebase_admin.initialize_app"):
    import main
from main_testing_utils import add_user, create_ride_doc, create_test_context, seat


def _created_event(params, data):
    event = MagicMock()
    event.params = params
    if data is None:
        event.data = None
    else:
        event.data.to_dict.return_value = data
    return event


def _updated_event(params, before, after):
    event = MagicMock()
    event.params = params
    event.data.before.to_dict.return_value = before
    event.data.after.to_dict.return_value = after
    return event


class TestMainChatNotification(unittest.TestCase):

    def setUp(self):
        self.ctx = create_test_context()
        self.ctx.store.put("chats", "chat1", {"participants": ["u1", "u2"]})
        add_user(self.ctx, "u2", token="tokA")

    @patch("main.get_context")
    def test_message_created_end_to_end(self, mock_get_context):
        # Arrange
        mock_get_context.return_value = self.ctx
        event = _created_event(
            {"chatId": "chat1", "messageId": "m1"}, {"senderId": "u1", "text": "hi"}
        )

        # Act: call the undecorated trigger body with a stand-in event.
        main.send_chat_notification.__wrapped__(event)

        # Assert
        self.assertEqual(len(self.ctx.push.sent), 1)
        message = self.ctx.push.sent[0]
        self.assertEqual(message.token, "tokA")
        self.assertEqual(message.data["chatId"], "chat1")
        self.assertEqual(message.data["senderId"], "u1")
        self.assertEqual(self.ctx.store.get("userChats", "u2_chat1")["unreadCount"], 1)

    @patch("main.get_context")
    @patch("main.handlers")
    def test_event_without_snapshot(self, mock_handlers, mock_get_context):
        event = _created_event({"chatId": "chat1", "messageId": "m1"}, None)

        main.send_chat_notification.__wrapped__(event)

        mock_handlers.handle_chat_message.assert_called_once_with(
            mock_get_context.return_value,
            chat_id="chat1",
            message_id="m1",
            message_data=None,
        )


class TestMainCallNotification(unittest.TestCase):

    @patch("main.get_context")
    @patch("main.handlers")
    def test_passes_call_document(self, mock_handlers, mock_get_context):
        data = {"callerId": "a", "calleeId": "b", "isVideoCall": False}
        event = _created_event({"callId": "call1"}, data)

        main.send_call_notification.__wrapped__(event)

        mock_handlers.handle_call.assert_called_once_with(
            mock_get_context.return_value, call_id="call1", call_data=data
        )


class TestMainRideTriggers(unittest.TestCase):

    def setUp(self):
        self.ctx = create_test_context()
        add_user(self.ctx, "driver1", token="tokDriver")
        add_user(self.ctx, "userA", token="tokA")

    @patch("main.get_context")
    def test_all_ride_triggers_see_the_same_update(self, mock_get_context):
        # Arrange: a seat is approved and the ride starts in one write.
        mock_get_context.return_value = self.ctx
        event = _updated_event(
            {"rideId": "ride1"},
            create_ride_doc([seat("userA", "pending")], status="scheduled"),
            create_ride_doc([seat("userA", "approved")], status="started"),
        )

        # Act
        main.send_ride_booking_notification.__wrapped__(event)
        main.send_approval_notification.__wrapped__(event)
        main.send_ride_status_notification.__wrapped__(event)

        # Assert: no booking change; one approval send; one status broadcast.
        self.assertEqual([m.token for m in self.ctx.push.sent], ["tokA"])
        self.assertEqual(self.ctx.push.sent[0].data["notificationType"], "approval_update")
        self.assertEqual(len(self.ctx.push.multicasts), 1)
        self.assertEqual(self.ctx.push.multicasts[0].tokens, ["tokA"])
        self.assertEqual(len(self.ctx.store.documents("users/userA/notifications")), 2)
        self.assertEqual(self.ctx.store.documents("users/driver1/notifications"), [])

    @patch("main.get_context")
    @patch("main.handlers")
    def test_missing_change_passes_none(self, mock_handlers, mock_get_context):
        event = MagicMock()
        event.params = {"rideId": "ride1"}
        event.data = None

        main.send_ride_booking_notification.__wrapped__(event)

        mock_handlers.handle_ride_booking.assert_called_once_with(
            mock_get_context.return_value, "ride1", None, None
        )


if __name__ == "__main__":
    unittest.main()
