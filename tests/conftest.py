"""
Shared fixtures and builders for tests.
"""

from typing import Dict, List, Optional

import pendulum
import pytest
from pendulum import DateTime

from tutorslots.domain.exceptions import RecordStoreError
from tutorslots.domain.models import AvailabilityWindow, BookedInterval

DAY = "2025-03-10"


def at(hhmm: str, day: str = DAY) -> DateTime:
    """Build a UTC timestamp on the test day."""
    return pendulum.parse(f"{day}T{hhmm}:00Z")


def window(start: str, end: str, tutor_id: Optional[str] = None, day: str = DAY) -> AvailabilityWindow:
    return AvailabilityWindow(start_utc=at(start, day), end_utc=at(end, day), tutor_id=tutor_id)


def booking(
    start: str,
    end: str,
    tutor_id: Optional[str] = None,
    status: Optional[str] = None,
    day: str = DAY,
) -> BookedInterval:
    return BookedInterval(start_utc=at(start, day), end_utc=at(end, day), tutor_id=tutor_id, status=status)


def as_pairs(slots) -> List[tuple]:
    return [(s.start, s.end) for s in slots]


class StubRecordStore:
    """Minimal stub matching RecordStoreProtocol."""

    def __init__(
        self,
        windows: Optional[List[AvailabilityWindow]] = None,
        bookings: Optional[List[BookedInterval]] = None,
        fail_windows: bool = False,
        fail_bookings: bool = False,
    ):
        self._windows = windows or []
        self._bookings = bookings or []
        self._fail_windows = fail_windows
        self._fail_bookings = fail_bookings
        self.calls: List[Dict[str, str]] = []

    def get_availability_windows(self, tutor_id, day_start, day_end):
        self.calls.append({
            "kind": "windows",
            "tutor_id": tutor_id,
            "start": day_start.to_iso8601_string(),
            "end": day_end.to_iso8601_string(),
        })
        if self._fail_windows:
            raise RecordStoreError("connection refused")
        return self._windows

    def get_booked_intervals(self, tutor_id, status, day_start, day_end):
        self.calls.append({"kind": "bookings", "tutor_id": tutor_id, "status": status})
        if self._fail_bookings:
            raise RecordStoreError("connection refused")
        return self._bookings


@pytest.fixture
def stub_store() -> StubRecordStore:
    return StubRecordStore(
        windows=[window("09:00", "17:00", tutor_id="tutor-1")],
        bookings=[booking("12:00", "13:00", tutor_id="tutor-1", status="upcoming")],
    )
