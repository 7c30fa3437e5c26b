"""
Application service computing bookable time slots over a range of days.

The service validates the request, loads events and work hours through a
repository protocol and delegates each day to the domain-level
``DayTimetableBuilder``. Data-source failures degrade to "no constraint";
only request errors (timezone, day identifier) reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import List, Optional, Protocol, Sequence

import pendulum

from ..domain.day_timetable import DayTimetableBuilder
from ..domain.exceptions import DataSourceUnavailable, InvalidDateIdentifier
from ..domain.models import SECONDS_IN_DAY, DayTimetable, Event, SlotRequest, WorkhourRule
from ..domain.timezone import MAX_INSTANT

# Fixed "today" that day_modifier is measured from; None means the live clock.
REFERENCE_DATE = date(2021, 9, 10)


class ScheduleRepositoryProtocol(Protocol):
    """Protocol describing the read-only data sources needed by the service."""

    async def load_events(self) -> List[Event]:
        """Return existing bookings."""

    async def load_workhours(self) -> List[WorkhourRule]:
        """Return the weekly work hour rules."""


class AvailabilityService:
    """
    Orchestrates data loading and per-day timetable construction.

    reference_date anchors day_modifier. Pass None to measure from the live
    clock in the request's timezone instead.
    """

    def __init__(
        self,
        repository: ScheduleRepositoryProtocol,
        builder: Optional[DayTimetableBuilder] = None,
        reference_date: Optional[date] = REFERENCE_DATE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._repository = repository
        self._logger = logger or logging.getLogger(__name__)
        self._builder = builder or DayTimetableBuilder.create(logger=logger)
        self._converter = self._builder.converter
        self._reference_date = reference_date

    async def get_time_slots(self, request: SlotRequest) -> List[DayTimetable]:
        """
        Generate the timetables for request.days consecutive days.

        Raises:
            InvalidTimezone: If timezone_identifier cannot be resolved
            InvalidDateIdentifier: If start_day_identifier is not YYYYMMDD or the
                requested days run past the representable date range
        """
        timezone_id = request.timezone_identifier

        self._logger.debug(
            "get time slots for %s, duration: %ss, days: %d, timezone: %s, reference date: %s",
            request.start_day_identifier,
            request.service_duration,
            request.days,
            timezone_id,
            self._reference_date or "live clock",
        )

        self._converter.validate_timezone(timezone_id)
        first_day = self._converter.parse_day_identifier(
            request.start_day_identifier, timezone_id
        )
        last_day = first_day + (request.days - 1) * SECONDS_IN_DAY
        if request.days and last_day >= MAX_INSTANT:
            raise InvalidDateIdentifier(
                f"{request.days} day(s) from start_day_identifier "
                f"{request.start_day_identifier!r} run past 9999-12-31 UTC"
            )

        events, workhours = await asyncio.gather(
            self._load_events(request.is_ignore_schedule),
            self._load_workhours(request.is_ignore_workhour),
        )

        today = self.today_instant(timezone_id)
        timetables: List[DayTimetable] = []

        for day_index in range(request.days):
            start_of_day = first_day + day_index * SECONDS_IN_DAY
            day_modifier = round((start_of_day - today) / SECONDS_IN_DAY)

            timetable = self._builder.build(
                start_of_day_utc=start_of_day,
                day_modifier=day_modifier,
                timezone_id=timezone_id,
                service_duration=request.service_duration,
                timeslot_interval=request.timeslot_interval,
                events=events,
                workhours=workhours,
                ignore_workhour=request.is_ignore_workhour,
            )
            timetables.append(timetable)

            self._logger.debug(
                "%d time slots for day %d (%s)",
                len(timetable.timeslots),
                day_index + 1,
                self._converter.format_date(start_of_day, timezone_id),
            )

        self._logger.info(
            "Generated %d slots across %d day(s) in %s (%d day(s) off, events %s, work hours %s)",
            sum(len(timetable.timeslots) for timetable in timetables),
            request.days,
            timezone_id,
            sum(1 for timetable in timetables if timetable.is_day_off),
            "ignored" if request.is_ignore_schedule else "considered",
            "ignored" if request.is_ignore_workhour else "considered",
        )

        return timetables

    def today_instant(self, timezone_id: str) -> int:
        """
        UTC instant of the local midnight that counts as "today" in timezone_id.

        A fixed reference date is taken at its UTC midnight and re-read in the
        zone, so zones west of UTC see the previous civil day.
        """
        if self._reference_date is None:
            anchor = pendulum.now(timezone_id)
        else:
            anchor = pendulum.datetime(
                self._reference_date.year,
                self._reference_date.month,
                self._reference_date.day,
                tz="UTC",
            ).in_timezone(timezone_id)

        return self._converter.civil_date_to_utc_instant(
            anchor.year, anchor.month, anchor.day, timezone_id
        )

    async def _load_events(self, ignore_schedule: bool) -> List[Event]:
        if ignore_schedule:
            self._logger.debug(
                "Schedule mode: IGNORE - skipping events, all generated timeslots will be available"
            )
            return []

        try:
            events = await self._repository.load_events()
        except DataSourceUnavailable as exc:
            self._logger.warning("Events unavailable, continuing without them: %s", exc)
            return []

        self._logger.debug(
            "Schedule mode: CONSIDER - loaded %d events for conflict checking", len(events)
        )
        return events

    async def _load_workhours(self, ignore_workhour: bool) -> List[WorkhourRule]:
        if ignore_workhour:
            self._logger.debug(
                "Work hour mode: IGNORE - using full days, all days treated as working days"
            )
            return []

        try:
            workhours = await self._repository.load_workhours()
        except DataSourceUnavailable as exc:
            self._logger.warning("Work hours unavailable, continuing without them: %s", exc)
            return []

        self._report_inconsistent_rules(workhours)
        self._logger.debug(
            "Work hour mode: CONSIDER - loaded %d work hour entries", len(workhours)
        )
        return workhours

    def _report_inconsistent_rules(self, workhours: Sequence[WorkhourRule]) -> None:
        seen: set[int] = set()
        for rule in workhours:
            for problem in rule.validation_problems():
                self._logger.warning("Work hour rule for weekday %s: %s", rule.weekday, problem)
            if rule.weekday in seen:
                self._logger.warning(
                    "Duplicate work hour rule for weekday %s; the first one is used",
                    rule.weekday,
                )
            seen.add(rule.weekday)
