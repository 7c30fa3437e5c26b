"""
Resolution of per-weekday working hours into UTC work windows.
"""

import logging
from typing import Iterable, Optional

import pendulum

from .models import SECONDS_IN_DAY, WorkhourRule, WorkWindow
from .timezone import TimezoneConverter, seconds_to_clock, utc_iso_text


def utc_weekday(instant: int) -> int:
    """Weekday number (1-7, Sunday-Saturday) of a UTC instant."""
    return pendulum.from_timestamp(instant).isoweekday() % 7 + 1


def find_rule_for_weekday(
    workhours: Iterable[WorkhourRule],
    weekday: int
) -> Optional[WorkhourRule]:
    """Return the first rule configured for weekday, if any."""
    for rule in workhours:
        if rule.weekday == weekday:
            return rule
    return None


class WorkWindowResolver:
    """
    Turns a day's work hour rule into the UTC instants bounding its slots.

    open_interval and close_interval are offsets from local midnight, so the
    day start is taken to the local wall clock, shifted there and converted
    back to UTC. Day-off rules never reach the resolver.
    """

    def __init__(
        self,
        converter: TimezoneConverter,
        logger: Optional[logging.Logger] = None
    ):
        self._converter = converter
        self._logger = logger or logging.getLogger(__name__)

    def resolve(
        self,
        start_of_day_utc: int,
        rule: Optional[WorkhourRule],
        ignore_workhour: bool,
        timezone_id: str
    ) -> WorkWindow:
        """
        Calculate the work window for one day.

        Args:
            start_of_day_utc: UTC epoch seconds of the day's local midnight
            rule: Work hours for the day's weekday, or None if not configured
            ignore_workhour: Use the whole day regardless of rule
            timezone_id: IANA timezone the rule offsets are expressed in

        Returns:
            WorkWindow in UTC epoch seconds
        """
        if ignore_workhour or rule is None:
            self._logger.debug(
                "%s - using full day (00:00-23:59) in %s",
                "Work hours IGNORED" if ignore_workhour else "No work hours data",
                timezone_id,
            )
            return WorkWindow(
                work_start_seconds=start_of_day_utc,
                work_end_seconds=start_of_day_utc + SECONDS_IN_DAY - 1,
            )

        try:
            local_midnight = self._converter.utc_to_zoned(start_of_day_utc, timezone_id)
            work_start = self._converter.zoned_wall_time_to_utc(
                local_midnight, rule.open_interval, timezone_id
            )
            work_end = self._converter.zoned_wall_time_to_utc(
                local_midnight, rule.close_interval, timezone_id
            )
        except (ValueError, OverflowError) as exc:
            self._logger.warning(
                "Work hours for weekday %s (open=%ss, close=%ss) fall outside the "
                "representable date range, no slots offered: %s",
                rule.weekday,
                rule.open_interval,
                rule.close_interval,
                exc,
            )
            return WorkWindow(
                work_start_seconds=start_of_day_utc,
                work_end_seconds=start_of_day_utc,
            )

        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(
                "Work hours for %s: open=%ss (%s), close=%ss (%s); local %s -> %s, UTC %s -> %s",
                timezone_id,
                rule.open_interval,
                seconds_to_clock(rule.open_interval),
                rule.close_interval,
                seconds_to_clock(rule.close_interval),
                self._converter.format_time(work_start, timezone_id),
                self._converter.format_time(work_end, timezone_id),
                utc_iso_text(work_start),
                utc_iso_text(work_end),
            )

        return WorkWindow(work_start_seconds=work_start, work_end_seconds=work_end)
