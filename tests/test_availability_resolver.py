"""
Tests for the availability resolver.
"""

import random

import pendulum
import pytest

from tutorslots.domain.availability_resolver import AvailabilityResolver, format_minutes, to_minutes
from tutorslots.domain.models import AvailabilityWindow, BookedInterval

from conftest import as_pairs, at, booking, window


@pytest.fixture
def resolver() -> AvailabilityResolver:
    return AvailabilityResolver()


class TestMinuteConversion:
    """Tests for the minute helpers."""

    def test_to_minutes_uses_utc_time_of_day(self):
        """Offsets are normalised to UTC before extracting hour and minute."""
        moment = pendulum.parse("2025-03-10T11:45:00+02:00")
        assert to_minutes(moment) == 9 * 60 + 45

    def test_to_minutes_truncates_seconds(self):
        """Seconds and microseconds are discarded."""
        moment = pendulum.parse("2025-03-10T09:30:59.999Z")
        assert to_minutes(moment) == 9 * 60 + 30

    def test_to_minutes_ignores_date(self):
        """Only the time of day matters."""
        assert to_minutes(at("10:15", day="2025-01-01")) == to_minutes(at("10:15", day="2025-12-31"))

    def test_format_minutes_zero_pads(self):
        """Hours and minutes are always two digits."""
        assert format_minutes(0) == "00:00"
        assert format_minutes(65) == "01:05"
        assert format_minutes(23 * 60 + 59) == "23:59"


class TestScenarios:
    """Concrete window/booking scenarios."""

    def test_window_without_bookings(self, resolver):
        slots = resolver.compute_free_slots([window("09:00", "17:00")], [])
        assert as_pairs(slots) == [("09:00", "17:00")]

    def test_booking_splits_window(self, resolver):
        slots = resolver.compute_free_slots(
            [window("09:00", "17:00")],
            [booking("12:00", "13:00")]
        )
        assert as_pairs(slots) == [("09:00", "12:00"), ("13:00", "17:00")]

    def test_exact_match_consumes_window(self, resolver):
        slots = resolver.compute_free_slots(
            [window("09:00", "10:00")],
            [booking("09:00", "10:00")]
        )
        assert slots == []

    def test_two_disjoint_bookings(self, resolver):
        slots = resolver.compute_free_slots(
            [window("09:00", "12:00")],
            [booking("10:00", "11:00"), booking("11:30", "12:00")]
        )
        assert as_pairs(slots) == [("09:00", "10:00"), ("11:00", "11:30")]

    def test_booking_overlapping_window_start(self, resolver):
        slots = resolver.compute_free_slots(
            [window("09:00", "12:00")],
            [booking("08:00", "10:00")]
        )
        assert as_pairs(slots) == [("10:00", "12:00")]

    def test_overlapping_windows_are_not_merged(self, resolver):
        slots = resolver.compute_free_slots(
            [window("09:00", "12:00"), window("11:00", "14:00")],
            []
        )
        assert as_pairs(slots) == [("09:00", "12:00"), ("11:00", "14:00")]


class TestEdgeCases:
    """Policy edge cases of the subtraction."""

    def test_no_windows_returns_empty(self, resolver):
        """Bookings alone never produce slots."""
        assert resolver.compute_free_slots([], [booking("09:00", "10:00")]) == []

    def test_booking_containing_window_consumes_it(self, resolver):
        slots = resolver.compute_free_slots(
            [window("10:00", "11:00")],
            [booking("09:00", "12:00")]
        )
        assert slots == []

    def test_booking_touching_window_start_is_ignored(self, resolver):
        slots = resolver.compute_free_slots(
            [window("09:00", "12:00")],
            [booking("08:00", "09:00")]
        )
        assert as_pairs(slots) == [("09:00", "12:00")]

    def test_booking_touching_window_end_is_ignored(self, resolver):
        slots = resolver.compute_free_slots(
            [window("09:00", "12:00")],
            [booking("12:00", "13:00")]
        )
        assert as_pairs(slots) == [("09:00", "12:00")]

    def test_back_to_back_bookings_leave_no_zero_width_slot(self, resolver):
        slots = resolver.compute_free_slots(
            [window("09:00", "12:00")],
            [booking("09:00", "10:00"), booking("10:00", "11:00")]
        )
        assert as_pairs(slots) == [("11:00", "12:00")]

    def test_nested_and_overlapping_bookings(self, resolver):
        """A booking inside an already consumed span does not rewind the cursor."""
        slots = resolver.compute_free_slots(
            [window("09:00", "17:00")],
            [booking("10:00", "13:00"), booking("11:00", "12:00"), booking("12:30", "14:00")]
        )
        assert as_pairs(slots) == [("09:00", "10:00"), ("14:00", "17:00")]

    def test_windows_are_emitted_in_start_order(self, resolver):
        slots = resolver.compute_free_slots(
            [window("14:00", "16:00"), window("08:00", "10:00")],
            [booking("15:00", "15:30")]
        )
        assert as_pairs(slots) == [("08:00", "10:00"), ("14:00", "15:00"), ("15:30", "16:00")]

    def test_booking_spanning_two_windows(self, resolver):
        slots = resolver.compute_free_slots(
            [window("09:00", "11:00"), window("12:00", "14:00")],
            [booking("10:00", "13:00")]
        )
        assert as_pairs(slots) == [("09:00", "10:00"), ("13:00", "14:00")]

    def test_malformed_booking_is_not_rejected(self, resolver):
        """A booking with start after end passes through the sweep unchecked."""
        slots = resolver.compute_free_slots(
            [window("09:00", "12:00")],
            [booking("11:00", "10:30")]
        )
        assert as_pairs(slots) == [("09:00", "11:00"), ("10:30", "12:00")]

    def test_inputs_are_not_mutated(self, resolver):
        windows = [window("14:00", "16:00"), window("08:00", "10:00")]
        bookings = [booking("15:00", "15:30"), booking("08:30", "09:00")]
        windows_before = list(windows)
        bookings_before = list(bookings)

        resolver.compute_free_slots(windows, bookings)

        assert windows == windows_before
        assert bookings == bookings_before

    def test_accepts_generators(self, resolver):
        slots = resolver.compute_free_slots(
            (w for w in [window("09:00", "10:00")]),
            (b for b in [booking("09:30", "10:00")])
        )
        assert as_pairs(slots) == [("09:00", "09:30")]


class TestProperties:
    """Order independence and minute accounting."""

    def test_shuffled_inputs_give_same_output(self, resolver):
        windows = [window("13:00", "18:00"), window("07:00", "09:00"), window("09:30", "12:00")]
        bookings = [
            booking("16:00", "17:00"),
            booking("07:30", "08:00"),
            booking("10:00", "10:45"),
            booking("13:00", "13:30"),
        ]
        expected = as_pairs(resolver.compute_free_slots(windows, bookings))

        rng = random.Random(7)
        for _ in range(10):
            shuffled_windows = windows[:]
            shuffled_bookings = bookings[:]
            rng.shuffle(shuffled_windows)
            rng.shuffle(shuffled_bookings)
            assert as_pairs(resolver.compute_free_slots(shuffled_windows, shuffled_bookings)) == expected

    def test_free_minutes_equal_window_minus_booked_union(self, resolver):
        # Booked union inside the window: 10:00-12:00 and 13:00-14:00 -> 180 minutes
        slots = resolver.compute_free_slots(
            [window("09:00", "17:00")],
            [booking("10:00", "11:30"), booking("11:00", "12:00"), booking("13:00", "14:00")]
        )
        assert sum(s.duration_minutes() for s in slots) == 8 * 60 - 180


class TestTutorDayFiltering:
    """Tests for resolving from unfiltered collections."""

    def test_filters_by_tutor_day_and_status(self, resolver):
        windows = [
            window("09:00", "12:00", tutor_id="t1"),
            window("13:00", "15:00", tutor_id="t2"),
            window("09:00", "12:00", tutor_id="t1", day="2025-03-11"),
            AvailabilityWindow(start_utc=at("16:00"), end_utc=at("17:00")),
        ]
        bookings = [
            booking("10:00", "11:00", tutor_id="t1", status="upcoming"),
            booking("09:00", "10:00", tutor_id="t1", status="completed"),
            booking("11:00", "12:00", tutor_id="t2", status="upcoming"),
            booking("11:00", "12:00", tutor_id="t1", status="upcoming", day="2025-03-11"),
        ]

        slots = resolver.compute_free_slots_for(
            "t1", pendulum.date(2025, 3, 10), windows, bookings
        )

        assert as_pairs(slots) == [("09:00", "10:00"), ("11:00", "12:00")]

    def test_custom_active_status(self, resolver):
        windows = [window("09:00", "12:00", tutor_id="t1")]
        bookings = [
            BookedInterval(start_utc=at("09:00"), end_utc=at("10:00"), tutor_id="t1", status="confirmed"),
        ]

        slots = resolver.compute_free_slots_for(
            "t1", pendulum.date(2025, 3, 10), windows, bookings, active_status="confirmed"
        )

        assert as_pairs(slots) == [("10:00", "12:00")]
