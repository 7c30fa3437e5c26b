"""
Domain layer - Pure business logic without external dependencies.
"""

from .day_timetable import DayTimetableBuilder
from .exceptions import (
    DataSourceUnavailable,
    InvalidDateIdentifier,
    InvalidTimezone,
    TimetableError,
)
from .models import DayTimetable, Event, SlotRequest, TimeInterval, WorkhourRule, WorkWindow
from .slots import ConflictFilter, SlotEnumerator
from .timezone import TimezoneConverter
from .work_window import WorkWindowResolver

__all__ = [
    "ConflictFilter",
    "DataSourceUnavailable",
    "DayTimetable",
    "DayTimetableBuilder",
    "Event",
    "InvalidDateIdentifier",
    "InvalidTimezone",
    "SlotEnumerator",
    "SlotRequest",
    "TimeInterval",
    "TimetableError",
    "TimezoneConverter",
    "WorkWindow",
    "WorkWindowResolver",
    "WorkhourRule",
]
