"""
Conversions between civil dates in an IANA timezone and UTC instants.

Instants are plain integers (UTC epoch seconds); pendulum is only used to
interpret them in a zone.
"""

import logging
from typing import Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidDateIdentifier, InvalidTimezone

DATE_IDENTIFIER_LENGTH = 8
DATE_FORMAT = "YYYY-MM-DD"
TIME_FORMAT = "HH:mm"

# Bounds of what a datetime can represent: 0001-01-01T00:00:00Z and
# 10000-01-01T00:00:00Z.
MIN_INSTANT = -62135596800
MAX_INSTANT = 253402300800

DATE_SLICE = slice(0, 10)
TIME_SLICE = slice(11, 16)


def seconds_to_clock(seconds: int) -> str:
    """Convert seconds from start of day to HH:MM."""
    hours, remainder = divmod(seconds, 3600)
    return f"{hours:02d}:{remainder // 60:02d}"


def utc_iso_text(instant: int, part: slice = slice(None)) -> str:
    """ISO 8601 UTC text of an instant, or the raw number if it is out of range."""
    try:
        return pendulum.from_timestamp(instant).to_iso8601_string()[part]
    except (ValueError, OverflowError, OSError):
        return str(instant)


class TimezoneConverter:
    """
    Stateless helper around pendulum's timezone database.

    Display formatting never raises: failures are logged and the UTC
    representation is returned instead.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    def validate_timezone(self, timezone_id: str) -> None:
        """
        Ensure timezone_id names a zone in the tz database.

        Raises:
            InvalidTimezone: If the identifier is empty, not a string or unknown
        """
        self._resolve(timezone_id)
        self._logger.debug("Timezone identifier validation passed: %s", timezone_id)

    def civil_date_to_utc_instant(
        self,
        year: int,
        month: int,
        day: int,
        timezone_id: str
    ) -> int:
        """Return local midnight of the given civil date as UTC epoch seconds."""
        zone = self._resolve(timezone_id)
        return pendulum.datetime(year, month, day, tz=zone).int_timestamp

    def parse_day_identifier(self, identifier: str, timezone_id: str) -> int:
        """
        Parse a YYYYMMDD identifier into the UTC instant of its local midnight.

        Raises:
            InvalidDateIdentifier: On wrong length, non-numeric or out of range
                components
            InvalidTimezone: If timezone_id cannot be resolved
        """
        if not isinstance(identifier, str) or len(identifier) != DATE_IDENTIFIER_LENGTH:
            raise InvalidDateIdentifier(
                f"Invalid start_day_identifier format: {identifier!r}. Expected YYYYMMDD format."
            )

        if not (identifier.isascii() and identifier.isdigit()):
            raise InvalidDateIdentifier(
                f"Invalid date components in start_day_identifier: {identifier!r}"
            )

        year, month, day = int(identifier[:4]), int(identifier[4:6]), int(identifier[6:])
        zone = self._resolve(timezone_id)

        try:
            local_midnight = pendulum.datetime(year, month, day, tz=zone)
            instant = local_midnight.int_timestamp
        except ValueError as exc:
            raise InvalidDateIdentifier(
                f"start_day_identifier {identifier!r} is not a calendar date: {exc}"
            ) from exc
        except OverflowError as exc:
            raise InvalidDateIdentifier(
                f"start_day_identifier {identifier!r} is outside the supported date range"
            ) from exc

        if instant < MIN_INSTANT:
            raise InvalidDateIdentifier(
                f"start_day_identifier {identifier!r} starts before year 1 in UTC"
            )

        self._logger.debug(
            "Parsed date %s in timezone %s: local midnight %s, UTC %s",
            identifier,
            timezone_id,
            local_midnight.to_iso8601_string(),
            utc_iso_text(instant),
        )
        return instant

    def utc_to_zoned(self, instant: int, timezone_id: str) -> DateTime:
        """Interpret a UTC instant in the given zone."""
        return pendulum.from_timestamp(instant, tz=self._resolve(timezone_id))

    def zoned_wall_time_to_utc(
        self,
        local_midnight: DateTime,
        offset_seconds: int,
        timezone_id: str
    ) -> int:
        """
        Add offset_seconds to a local midnight on the wall clock and return
        the resulting instant.

        The offset is wall-clock time, so on a transition day 10:00 stays 10:00
        even though fewer or more seconds have elapsed since midnight.
        """
        wall = local_midnight.naive().add(seconds=offset_seconds)
        zoned = pendulum.datetime(
            wall.year,
            wall.month,
            wall.day,
            wall.hour,
            wall.minute,
            wall.second,
            tz=self._resolve(timezone_id),
        )
        return zoned.int_timestamp

    def format_date(self, instant: int, timezone_id: str) -> str:
        """Format an instant as YYYY-MM-DD in the zone, falling back to UTC."""
        try:
            return self.utc_to_zoned(instant, timezone_id).format(DATE_FORMAT)
        except (ValueError, OverflowError, OSError) as exc:
            fallback = utc_iso_text(instant, DATE_SLICE)
            self._logger.warning(
                "Failed to format date %s in timezone %s: %s. Falling back to UTC format",
                fallback,
                timezone_id,
                exc,
            )
            return fallback

    def format_time(self, instant: int, timezone_id: str) -> str:
        """Format an instant as HH:mm in the zone, falling back to UTC."""
        try:
            return self.utc_to_zoned(instant, timezone_id).format(TIME_FORMAT)
        except (ValueError, OverflowError, OSError) as exc:
            fallback = utc_iso_text(instant, TIME_SLICE)
            self._logger.warning(
                "Failed to format time in timezone %s: %s. Falling back to UTC",
                timezone_id,
                exc,
            )
            return fallback

    def _resolve(self, timezone_id: str):
        if not isinstance(timezone_id, str) or not timezone_id.strip():
            raise InvalidTimezone(
                "Invalid timezone identifier: must be a non-empty string"
            )

        try:
            return pendulum.timezone(timezone_id)
        except (ValueError, LookupError, OSError) as exc:
            self._logger.debug("Invalid timezone identifier %s: %s", timezone_id, exc)
            raise InvalidTimezone(
                f"Invalid timezone identifier: '{timezone_id}'. "
                'Please use a valid IANA timezone identifier (e.g. "UTC", "Asia/Seoul", '
                '"America/New_York")'
            ) from exc
