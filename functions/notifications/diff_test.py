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

import unittest

from main_testing_utils import create_ride, seat
from notifications import diff
from shared.carpool_doc import Ride
from shared.types import ApprovalStatus, BookingStatus, RideStatus


class IsEmptyBookingTest(unittest.TestCase):

    def test_empty_markers(self):
        for value in (None, "", "n/a"):
            self.assertTrue(diff.is_empty_booking(value), value)

    def test_user_ids_are_not_empty(self):
        for value in ("user123", "N/A ", "0"):
            self.assertFalse(diff.is_empty_booking(value), value)


class BookingChangeTest(unittest.TestCase):

    def test_booked_seat_is_reported_at_its_index(self):
        before = create_ride([seat(), seat(), seat()])
        after = create_ride([seat(), seat("userA"), seat()])

        change = diff.detect_booking_change(before, after)

        self.assertEqual(change, diff.BookingChange(1, BookingStatus.BOOKED, "userA"))

    def test_each_empty_marker_counts_as_unbooked(self):
        for marker in (None, "", "n/a"):
            before = create_ride([seat(marker)])
            after = create_ride([seat("userA")])
            self.assertEqual(
                diff.booking_changes(before, after),
                [diff.BookingChange(0, BookingStatus.BOOKED, "userA")],
                marker,
            )

    def test_unbooked_seat_reports_previous_user(self):
        before = create_ride([seat("userA", "approved")])
        after = create_ride([seat("n/a")])

        change = diff.detect_booking_change(before, after)

        self.assertEqual(change, diff.BookingChange(0, BookingStatus.UNBOOKED, "userA"))

    def test_no_booked_by_changes_yields_nothing(self):
        before = create_ride([seat("userA", "pending"), seat()])
        after = create_ride([seat("userA", "approved"), seat()], status="started")

        self.assertEqual(diff.booking_changes(before, after), [])
        self.assertIsNone(diff.detect_booking_change(before, after))

    def test_switching_between_empty_markers_is_not_a_change(self):
        before = create_ride([seat(None)])
        after = create_ride([seat("n/a")])

        self.assertEqual(diff.booking_changes(before, after), [])

    def test_seat_handed_between_users_is_ignored(self):
        before = create_ride([seat("userA")])
        after = create_ride([seat("userB")])

        self.assertEqual(diff.booking_changes(before, after), [])

    def test_only_first_change_is_acted_on(self):
        before = create_ride([seat(), seat("userB")])
        after = create_ride([seat("userA"), seat()])

        self.assertEqual(len(diff.booking_changes(before, after)), 2)
        self.assertEqual(
            diff.detect_booking_change(before, after),
            diff.BookingChange(0, BookingStatus.BOOKED, "userA"),
        )

    def test_layouts_of_different_length_are_aligned(self):
        before = create_ride([seat()])
        after = create_ride([seat(), seat("userA")])

        self.assertEqual(
            diff.detect_booking_change(before, after),
            diff.BookingChange(1, BookingStatus.BOOKED, "userA"),
        )

    def test_malformed_layout_degrades_to_empty(self):
        before = create_ride("not-a-list")
        after = create_ride([None, seat("userA")])

        self.assertEqual(
            diff.detect_booking_change(before, after),
            diff.BookingChange(1, BookingStatus.BOOKED, "userA"),
        )

    def test_non_string_booked_by_counts_as_empty(self):
        before = create_ride([seat(["x"])])
        after = create_ride([seat("userA")])

        self.assertEqual(
            diff.detect_booking_change(before, after),
            diff.BookingChange(0, BookingStatus.BOOKED, "userA"),
        )

    def test_missing_versions_are_empty_rides(self):
        self.assertIsNone(diff.detect_booking_change(None, None))
        self.assertEqual(
            diff.detect_booking_change(None, create_ride([seat("userA")])),
            diff.BookingChange(0, BookingStatus.BOOKED, "userA"),
        )


class ApprovalChangeTest(unittest.TestCase):

    def test_pending_to_declined_uses_prior_booked_by(self):
        before = create_ride([seat("user123", "pending")])
        after = create_ride([seat("n/a", "declined")])

        change = diff.detect_approval_change(before, after)

        self.assertEqual(change.booked_by, "user123")
        self.assertEqual(change.new_status, ApprovalStatus.DECLINED)
        self.assertEqual(change.seat_index, 0)

    def test_pending_to_approved(self):
        before = create_ride([seat(), seat("userA", "pending")])
        after = create_ride([seat(), seat("userA", "approved")])

        self.assertEqual(
            diff.detect_approval_change(before, after),
            diff.ApprovalChange(1, ApprovalStatus.APPROVED, "userA"),
        )

    def test_empty_prior_booking_is_skipped(self):
        before = create_ride([seat("n/a", "pending")])
        after = create_ride([seat("n/a", "approved")])

        self.assertIsNone(diff.detect_approval_change(before, after))

    def test_only_transitions_out_of_pending_count(self):
        cases = [
            ("approved", "declined"),
            ("declined", "approved"),
            (None, "approved"),
            ("pending", "pending"),
            ("pending", None),
            ("pending", "cancelled"),
        ]
        for before_status, after_status in cases:
            before = create_ride([seat("userA", before_status)])
            after = create_ride([seat("userA", after_status)])
            self.assertIsNone(
                diff.detect_approval_change(before, after),
                (before_status, after_status),
            )

    def test_only_first_change_is_acted_on(self):
        before = create_ride([seat("userA", "pending"), seat("userB", "pending")])
        after = create_ride([seat("userA", "approved"), seat("userB", "declined")])

        self.assertEqual(len(diff.approval_changes(before, after)), 2)
        self.assertEqual(diff.detect_approval_change(before, after).booked_by, "userA")


class StatusChangeTest(unittest.TestCase):

    def test_started_notifies_only_approved_passengers(self):
        seats = [
            seat("userA", "approved"),
            seat("userB", "approved"),
            seat("userC", "pending"),
        ]
        before = create_ride(seats, status="scheduled")
        after = create_ride(seats, status="started")

        change = diff.detect_status_change(before, after)

        self.assertEqual(change.new_status, RideStatus.STARTED)
        self.assertEqual(change.previous_status, "scheduled")
        self.assertEqual(set(change.notify_user_ids), {"userA", "userB"})

    def test_duplicate_passengers_are_notified_once(self):
        seats = [seat("userA", "approved"), seat("userA", "approved")]
        change = diff.detect_status_change(
            create_ride(seats, status="started"),
            create_ride(seats, status="completed"),
        )

        self.assertEqual(change.notify_user_ids, ("userA",))

    def test_approved_seat_with_empty_marker_is_ignored(self):
        seats = [seat("n/a", "approved"), seat("", "approved")]
        change = diff.detect_status_change(
            create_ride(seats), create_ride(seats, status="cancelled")
        )

        self.assertEqual(change.notify_user_ids, ())

    def test_unchanged_status_yields_nothing(self):
        seats = [seat("userA", "approved")]
        self.assertIsNone(
            diff.detect_status_change(
                create_ride(seats, status="started"),
                create_ride(seats, status="started"),
            )
        )

    def test_status_outside_notifiable_set_yields_nothing(self):
        seats = [seat("userA", "approved")]
        for status in ("scheduled", "paused", None):
            self.assertIsNone(
                diff.detect_status_change(
                    create_ride(seats, status="started"),
                    create_ride(seats, status=status),
                ),
                status,
            )

    def test_uses_the_updated_seat_layout(self):
        before = create_ride([seat("userA", "approved")], status="scheduled")
        after = create_ride([seat("n/a")], status="cancelled")

        change = diff.detect_status_change(before, after)

        self.assertEqual(change.notify_user_ids, ())

    def test_non_string_booked_by_does_not_block_other_passengers(self):
        before = create_ride([seat("userA", "approved")], status="scheduled")
        after = create_ride(
            [seat(["x"], "approved"), seat({"id": "y"}, "approved"), seat("userA", "approved")],
            status="started",
        )

        change = diff.detect_status_change(before, after)

        self.assertEqual(change.notify_user_ids, ("userA",))

    def test_missing_ride_yields_nothing(self):
        self.assertIsNone(diff.detect_status_change(Ride(), None))


if __name__ == "__main__":
    unittest.main()
