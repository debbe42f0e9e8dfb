"""
Application service computing a tutor's true availability for a day.

The service validates the request, fetches availability windows and
active bookings through a record store adapter and delegates the actual
subtraction to the domain-level ``AvailabilityResolver``. The record store
dependency is a simple protocol so the REST adapter, the mock store or a
test stub can be plugged in.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

import pendulum
from pendulum import DateTime

from ..domain.availability_resolver import AvailabilityResolver
from ..domain.exceptions import InvalidRequestError, RecordStoreError
from ..domain.models import AvailabilityWindow, BookedInterval, FreeSlot

logger = logging.getLogger(__name__)


MISSING_FIELDS_MESSAGE = "tutor_id and date are required"
INVALID_DATE_MESSAGE = "date must be formatted as YYYY-MM-DD"
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class RecordStoreProtocol(Protocol):
    """Protocol describing the record store behaviour needed by the service."""

    def get_availability_windows(
        self,
        tutor_id: str,
        day_start: DateTime,
        day_end: DateTime,
    ) -> List[AvailabilityWindow]:
        """Return windows for the tutor whose start falls within the day."""

    def get_booked_intervals(
        self,
        tutor_id: str,
        status: str,
        day_start: DateTime,
        day_end: DateTime,
    ) -> List[BookedInterval]:
        """Return bookings with the status whose start falls within the day."""


@dataclass(frozen=True)
class AvailabilityResponse:
    """Status code and JSON body answering an availability request."""
    status_code: int
    body: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def day_bounds(date: str) -> Tuple[DateTime, DateTime]:
    """
    Return the first and last millisecond of a ``YYYY-MM-DD`` day in UTC.

    Raises:
        InvalidRequestError: If the date is not in that format
    """
    if not DATE_PATTERN.fullmatch(date):
        raise InvalidRequestError(INVALID_DATE_MESSAGE)

    try:
        start = pendulum.from_format(date, "YYYY-MM-DD", tz="UTC").start_of("day")
    except ValueError as exc:
        raise InvalidRequestError(INVALID_DATE_MESSAGE) from exc

    end = start.add(days=1).subtract(microseconds=1000)
    return start, end


class TrueAvailabilityService:
    """
    Orchestrates record retrieval and availability resolution.
    """

    def __init__(
        self,
        record_store: RecordStoreProtocol,
        resolver: Optional[AvailabilityResolver] = None,
        active_status: str = "upcoming",
    ) -> None:
        self._record_store = record_store
        self._resolver = resolver or AvailabilityResolver()
        self._active_status = active_status

    def get_true_availability(
        self,
        tutor_id: str,
        date: str,
        min_duration_minutes: int = 0,
    ) -> List[FreeSlot]:
        """
        Fetch the tutor's windows and active bookings for the day and resolve them.

        Slots shorter than ``min_duration_minutes`` are dropped when it is positive.

        Raises:
            InvalidRequestError: If the date is malformed
            RecordStoreError: If either fetch fails
        """
        day_start, day_end = day_bounds(date)

        windows = self._record_store.get_availability_windows(
            tutor_id=tutor_id,
            day_start=day_start,
            day_end=day_end,
        )
        bookings = self._record_store.get_booked_intervals(
            tutor_id=tutor_id,
            status=self._active_status,
            day_start=day_start,
            day_end=day_end,
        )

        slots = self._resolver.compute_free_slots(windows, bookings)

        if min_duration_minutes > 0:
            slots = [s for s in slots if s.duration_minutes() >= min_duration_minutes]

        return slots

    def handle_request(self, payload: Optional[Mapping[str, Any]]) -> AvailabilityResponse:
        """
        Answer a ``{tutor_id, date}`` request with a status code and JSON body.

        Client errors are reported before any fetch; a failed fetch is
        reported without computing anything.
        """
        payload = payload or {}
        tutor_id = payload.get("tutor_id")
        date = payload.get("date")

        if not tutor_id or not date:
            return _error(400, MISSING_FIELDS_MESSAGE)

        try:
            day_start, day_end = day_bounds(str(date))
        except InvalidRequestError as exc:
            return _error(400, str(exc))

        tutor_id = str(tutor_id)

        try:
            windows = self._record_store.get_availability_windows(
                tutor_id=tutor_id,
                day_start=day_start,
                day_end=day_end,
            )
        except RecordStoreError as exc:
            logger.error("Error fetching tutor availability: %s", exc)
            return _error(500, "Failed to fetch tutor availability")

        try:
            bookings = self._record_store.get_booked_intervals(
                tutor_id=tutor_id,
                status=self._active_status,
                day_start=day_start,
                day_end=day_end,
            )
        except RecordStoreError as exc:
            logger.error("Error fetching bookings: %s", exc)
            return _error(500, "Failed to fetch bookings")

        slots = self._resolver.compute_free_slots(windows, bookings)
        logger.debug(
            "Resolved %d free slot(s) for tutor %s on %s from %d window(s) and %d booking(s)",
            len(slots), tutor_id, date, len(windows), len(bookings),
        )

        return AvailabilityResponse(
            status_code=200,
            body={"availability": [slot.to_dict() for slot in slots]},
        )


def _error(status_code: int, message: str) -> AvailabilityResponse:
    return AvailabilityResponse(status_code=status_code, body={"error": message})
