"""
Domain models for availability windows, bookings and free slots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from pendulum import DateTime


@dataclass(frozen=True)
class AvailabilityWindow:
    """
    A contiguous interval during which a tutor declared themselves bookable.

    No ordering check is made on start/end: records are taken as the
    record store returns them.
    """
    start_utc: DateTime
    end_utc: DateTime
    tutor_id: Optional[str] = None


@dataclass(frozen=True)
class BookedInterval:
    """
    A confirmed booking's time range, consuming part of a window.
    """
    start_utc: DateTime
    end_utc: DateTime
    tutor_id: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class MinuteInterval:
    """An interval expressed in minutes since midnight UTC."""
    start: int
    end: int

    def overlaps(self, other: "MinuteInterval") -> bool:
        """Strict overlap: touching endpoints do not count."""
        return self.start < other.end and self.end > other.start


@dataclass(frozen=True)
class FreeSlot:
    """
    A free span of a window, as zero-padded ``HH:MM`` strings in UTC.
    """
    start: str
    end: str

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return _parse_hhmm(self.end) - _parse_hhmm(self.start)

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start, "end": self.end}

    def __str__(self) -> str:
        return f"{self.start} - {self.end}"


def _parse_hhmm(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)
