"""
Per-day orchestration: work window -> candidate slots -> conflict filtering.
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from .models import DayTimetable, Event, TimeInterval, WorkhourRule
from .slots import ConflictFilter, SlotEnumerator
from .timezone import TimezoneConverter
from .work_window import WorkWindowResolver, find_rule_for_weekday, utc_weekday


class DayTimetableBuilder:
    """
    Builds the timetable of a single calendar day.

    A day ends in one of two states:
    1. Day off: the weekday's rule says so (and work hours are not ignored);
       no window is resolved and no slots are generated
    2. Working day: resolve the window, enumerate slots, drop conflicts
    """

    def __init__(
        self,
        converter: TimezoneConverter,
        window_resolver: WorkWindowResolver,
        enumerator: SlotEnumerator,
        conflict_filter: ConflictFilter,
        logger: Optional[logging.Logger] = None
    ):
        self._converter = converter
        self._window_resolver = window_resolver
        self._enumerator = enumerator
        self._conflict_filter = conflict_filter
        self._logger = logger or logging.getLogger(__name__)

    @classmethod
    def create(cls, logger: Optional[logging.Logger] = None) -> "DayTimetableBuilder":
        """Wire a builder with default collaborators sharing one logger."""
        converter = TimezoneConverter(logger=logger)
        return cls(
            converter=converter,
            window_resolver=WorkWindowResolver(converter, logger=logger),
            enumerator=SlotEnumerator(logger=logger),
            conflict_filter=ConflictFilter(logger=logger),
            logger=logger,
        )

    @property
    def converter(self) -> TimezoneConverter:
        return self._converter

    def build(
        self,
        *,
        start_of_day_utc: int,
        day_modifier: int,
        timezone_id: str,
        service_duration: int,
        timeslot_interval: int,
        events: Sequence[Event],
        workhours: Sequence[WorkhourRule],
        ignore_workhour: bool,
    ) -> DayTimetable:
        """Build one day's timetable."""
        weekday = utc_weekday(start_of_day_utc)
        day_label = self._converter.format_date(start_of_day_utc, timezone_id)

        self._logger.debug(
            "Generating timetable for %s (weekday: %d, modifier: %d, timezone: %s)",
            day_label,
            weekday,
            day_modifier,
            timezone_id,
        )

        rule = None if ignore_workhour else find_rule_for_weekday(workhours, weekday)

        if rule is not None and rule.is_day_off:
            self._logger.debug("Day %s is marked as day off (weekday: %d)", day_label, weekday)
            return DayTimetable(
                start_of_day=start_of_day_utc,
                day_modifier=day_modifier,
                is_day_off=True,
                timeslots=(),
            )

        window = self._window_resolver.resolve(
            start_of_day_utc, rule, ignore_workhour, timezone_id
        )

        candidates = self._enumerator.generate(
            window.work_start_seconds,
            window.work_end_seconds,
            service_duration,
            timeslot_interval,
        )
        available = self._conflict_filter.filter(candidates, events)

        self._log_available_timeslots(available, day_label, timezone_id)

        return DayTimetable(
            start_of_day=start_of_day_utc,
            day_modifier=day_modifier,
            is_day_off=False,
            timeslots=tuple(available),
        )

    def _log_available_timeslots(
        self,
        timeslots: List[TimeInterval],
        day_label: str,
        timezone_id: str
    ) -> None:
        if not self._logger.isEnabledFor(logging.DEBUG):
            return

        if not timeslots:
            self._logger.debug("No available timeslots for %s", day_label)
            return

        self._logger.debug("Available timeslots for %s (%s):", day_label, timezone_id)

        # A day's slots can spill into the next local date
        by_local_date: Dict[str, List[TimeInterval]] = OrderedDict()
        for slot in timeslots:
            key = self._converter.format_date(slot.begin_at, timezone_id)
            by_local_date.setdefault(key, []).append(slot)

        index = 0
        for local_date, slots in by_local_date.items():
            if len(by_local_date) > 1:
                self._logger.debug("  %s:", local_date)
            for slot in slots:
                index += 1
                self._logger.debug(
                    "    %d. %s - %s",
                    index,
                    self._converter.format_time(slot.begin_at, timezone_id),
                    self._converter.format_time(slot.end_at, timezone_id),
                )

        self._logger.debug("Total: %d available slots", len(timeslots))
