"""
REST client for fetching availability and booking records from the hosted backend.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import pendulum
import requests
from pendulum import DateTime

from ..domain.exceptions import ConfigurationError, RecordStoreError
from ..domain.models import AvailabilityWindow, BookedInterval

logger = logging.getLogger(__name__)


def to_utc_iso(moment: DateTime) -> str:
    """Format a timestamp as ``YYYY-MM-DDTHH:mm:ss.SSSZ`` in UTC."""
    return moment.in_timezone("UTC").format("YYYY-MM-DD[T]HH:mm:ss.SSS[Z]")


def parse_timestamp(value: str) -> DateTime:
    """
    Parse an ISO 8601 timestamp to a pendulum DateTime in UTC.

    Naive timestamps are taken as UTC.

    Raises:
        ValueError: If the value is not a full datetime
    """
    dt = pendulum.parse(value, tz="UTC")

    if isinstance(dt, DateTime):
        return dt.in_timezone("UTC")

    raise ValueError(f"Could not parse datetime: {value}")


class RestRecordStoreClient:
    """
    Client for the record store's REST interface.

    Queries use the PostgREST filter dialect (``column=op.value``) against
    ``/rest/v1/<table>``.
    """

    REST_PATH = "/rest/v1"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        timeout_seconds: int = 30,
        availability_table: str = "tutor_availability",
        bookings_table: str = "bookings"
    ):
        """
        Initialize the record store client.

        Args:
            base_url: Project URL of the hosted backend
            api_key: Public API key of the project
            access_token: Optional end-user token, forwarded instead of the API key
            timeout_seconds: Per-request timeout
            availability_table: Table holding availability windows
            bookings_table: Table holding bookings
        """
        if not base_url or not api_key:
            raise ConfigurationError(
                "Record store URL and API key are required. "
                "Set store.url and store.api_key in config.yaml or use --mock."
            )

        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.availability_table = availability_table
        self.bookings_table = bookings_table
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "Accept": "application/json"
        }

    def get_availability_windows(
        self,
        tutor_id: str,
        day_start: DateTime,
        day_end: DateTime
    ) -> List[AvailabilityWindow]:
        """
        Fetch availability windows for a tutor starting within a day.

        Raises:
            RecordStoreError: If the request fails
        """
        params = [
            ("select", "tutor_id,start_datetime_utc,end_datetime_utc"),
            ("tutor_id", f"eq.{tutor_id}"),
            *self._day_filter(day_start, day_end),
        ]

        rows = self._get_rows(self.availability_table, params)

        windows: List[AvailabilityWindow] = []
        for row in rows:
            try:
                windows.append(AvailabilityWindow(
                    start_utc=parse_timestamp(row["start_datetime_utc"]),
                    end_utc=parse_timestamp(row["end_datetime_utc"]),
                    tutor_id=row.get("tutor_id", tutor_id)
                ))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Could not parse availability row %s: %s", row, e)
                continue

        return windows

    def get_booked_intervals(
        self,
        tutor_id: str,
        status: str,
        day_start: DateTime,
        day_end: DateTime
    ) -> List[BookedInterval]:
        """
        Fetch bookings with the given status for a tutor starting within a day.

        Raises:
            RecordStoreError: If the request fails
        """
        params = [
            ("select", "tutor_id,status,start_datetime_utc,end_datetime_utc"),
            ("tutor_id", f"eq.{tutor_id}"),
            ("status", f"eq.{status}"),
            *self._day_filter(day_start, day_end),
        ]

        rows = self._get_rows(self.bookings_table, params)

        bookings: List[BookedInterval] = []
        for row in rows:
            try:
                bookings.append(BookedInterval(
                    start_utc=parse_timestamp(row["start_datetime_utc"]),
                    end_utc=parse_timestamp(row["end_datetime_utc"]),
                    tutor_id=row.get("tutor_id", tutor_id),
                    status=row.get("status", status)
                ))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Could not parse booking row %s: %s", row, e)
                continue

        return bookings

    @staticmethod
    def _day_filter(day_start: DateTime, day_end: DateTime) -> List[Tuple[str, str]]:
        return [
            ("start_datetime_utc", f"gte.{to_utc_iso(day_start)}"),
            ("start_datetime_utc", f"lte.{to_utc_iso(day_end)}"),
        ]

    def _get_rows(self, table: str, params: List[Tuple[str, str]]) -> List[Dict[str, Any]]:
        url = f"{self.base_url}{self.REST_PATH}/{table}"

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout_seconds
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise RecordStoreError(f"Failed to fetch {table} records: {e}") from e
        except ValueError as e:
            raise RecordStoreError(f"Invalid JSON in {table} response: {e}") from e

        if not isinstance(data, list):
            raise RecordStoreError(f"Unexpected {table} response: expected a list of rows")

        return data
