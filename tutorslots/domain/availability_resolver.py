"""
Core business logic for calculating a tutor's true availability.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from typing import Iterable, List, Sequence

from pendulum import Date, DateTime

from .models import AvailabilityWindow, BookedInterval, FreeSlot, MinuteInterval


def to_minutes(moment: DateTime) -> int:
    """
    Convert a timestamp to minutes since midnight UTC.

    The date, seconds and sub-second parts are discarded.
    """
    utc = moment.in_timezone("UTC")
    return utc.hour * 60 + utc.minute


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as a zero-padded ``HH:MM`` string."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


class AvailabilityResolver:
    """
    Computes the free slots left in a tutor's day.

    Algorithm:
    1. Convert windows and bookings to minutes since midnight UTC
    2. Sort both collections by start
    3. For each window, pick the bookings that strictly overlap it
    4. Sweep a cursor over those bookings, emitting the gaps
    5. Return the gaps as HH:MM slots, window by window

    Overlapping windows are resolved independently and never merged, so
    their slots may overlap in the output.
    """

    def compute_free_slots(
        self,
        windows: Iterable[AvailabilityWindow],
        bookings: Iterable[BookedInterval]
    ) -> List[FreeSlot]:
        """
        Subtract booked intervals from availability windows.

        Args:
            windows: Availability windows for one tutor on one day
            bookings: Confirmed bookings for the same tutor and day

        Returns:
            List of FreeSlot objects, in window-processing order
        """
        windows = list(windows)
        if not windows:
            return []

        window_intervals = [
            MinuteInterval(start=to_minutes(w.start_utc), end=to_minutes(w.end_utc))
            for w in windows
        ]
        booking_intervals = [
            MinuteInterval(start=to_minutes(b.start_utc), end=to_minutes(b.end_utc))
            for b in bookings
        ]

        window_intervals.sort(key=lambda i: i.start)
        booking_intervals.sort(key=lambda i: i.start)

        free: List[MinuteInterval] = []

        for window in window_intervals:
            overlapping = [
                booking for booking in booking_intervals
                if booking.overlaps(window)
            ]

            if not overlapping:
                # Entire window is free
                free.append(window)
                continue

            free.extend(self._subtract_bookings_from_window(window, overlapping))

        return [
            FreeSlot(start=format_minutes(i.start), end=format_minutes(i.end))
            for i in free
        ]

    def compute_free_slots_for(
        self,
        tutor_id: str,
        day: Date,
        windows: Iterable[AvailabilityWindow],
        bookings: Iterable[BookedInterval],
        active_status: str = "upcoming"
    ) -> List[FreeSlot]:
        """
        Filter raw collections down to one tutor and day, then resolve.

        Windows are kept when they belong to ``tutor_id`` and start on
        ``day`` (UTC). Bookings additionally need ``status == active_status``.
        """
        day_windows = [
            w for w in windows
            if w.tutor_id == tutor_id and _utc_date(w.start_utc) == day
        ]
        day_bookings = [
            b for b in bookings
            if b.tutor_id == tutor_id
            and b.status == active_status
            and _utc_date(b.start_utc) == day
        ]

        return self.compute_free_slots(day_windows, day_bookings)

    def _subtract_bookings_from_window(
        self,
        window: MinuteInterval,
        bookings: Sequence[MinuteInterval]
    ) -> List[MinuteInterval]:
        """
        Subtract bookings from a window, yielding free intervals.

        Example:
        Window: 09:00 - 17:00
        Bookings: [10:00-11:00, 14:00-15:00]
        Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
        """
        free: List[MinuteInterval] = []
        cursor = window.start

        for booking in sorted(bookings, key=lambda i: i.start):
            if cursor < booking.start:
                free.append(MinuteInterval(start=cursor, end=booking.start))

            # Nested and mutually overlapping bookings never move the cursor back
            cursor = max(cursor, booking.end)

        if cursor < window.end:
            free.append(MinuteInterval(start=cursor, end=window.end))

        return free


def _utc_date(moment: DateTime) -> Date:
    return moment.in_timezone("UTC").date()
