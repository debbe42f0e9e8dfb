"""
Mock record store for running without the hosted backend.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pendulum import DateTime

from ..domain.exceptions import RecordStoreError
from ..domain.models import AvailabilityWindow, BookedInterval
from .record_store_client import parse_timestamp

logger = logging.getLogger(__name__)


class MockRecordStoreClient:
    """
    Mock client that answers record queries from a JSON file.

    The file holds ``tutor_availability`` and ``bookings`` rows shaped like
    the hosted tables. By default the packaged mock_records.json is used.
    """

    def __init__(self, data_file: Optional[Path] = None):
        """
        Initialize the mock client.

        Args:
            data_file: Optional path to a JSON file with mock records
        """
        self.data_file = data_file or Path(__file__).parent / "mock_records.json"
        self._load_records()

    def _load_records(self) -> None:
        """Load mock records from the JSON file."""
        if not self.data_file.exists():
            # Fallback to empty if file doesn't exist
            self.availability_rows: List[Dict[str, Any]] = []
            self.booking_rows: List[Dict[str, Any]] = []
            return

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise RecordStoreError(f"Could not load mock records from {self.data_file}: {exc}") from exc

        self.availability_rows = data.get("tutor_availability", [])
        self.booking_rows = data.get("bookings", [])

    def get_availability_windows(
        self,
        tutor_id: str,
        day_start: DateTime,
        day_end: DateTime
    ) -> List[AvailabilityWindow]:
        """Return mock windows for a tutor starting within the day."""
        windows: List[AvailabilityWindow] = []

        for row in self.availability_rows:
            if row.get("tutor_id") != tutor_id:
                continue

            try:
                start = parse_timestamp(row["start_datetime_utc"])
                end = parse_timestamp(row["end_datetime_utc"])
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping invalid mock availability row: %s", e)
                continue

            if day_start <= start <= day_end:
                windows.append(AvailabilityWindow(start_utc=start, end_utc=end, tutor_id=tutor_id))

        return windows

    def get_booked_intervals(
        self,
        tutor_id: str,
        status: str,
        day_start: DateTime,
        day_end: DateTime
    ) -> List[BookedInterval]:
        """Return mock bookings with the given status starting within the day."""
        bookings: List[BookedInterval] = []

        for row in self.booking_rows:
            if row.get("tutor_id") != tutor_id or row.get("status") != status:
                continue

            try:
                start = parse_timestamp(row["start_datetime_utc"])
                end = parse_timestamp(row["end_datetime_utc"])
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping invalid mock booking row: %s", e)
                continue

            if day_start <= start <= day_end:
                bookings.append(
                    BookedInterval(start_utc=start, end_utc=end, tutor_id=tutor_id, status=status)
                )

        return bookings
