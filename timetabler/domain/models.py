"""
Domain models for time intervals, work hours and day timetables.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, Field

SECONDS_IN_DAY = 24 * 60 * 60

DEFAULT_DAYS = 1
DEFAULT_TIMESLOT_INTERVAL = 1800  # 30 minutes


@dataclass(frozen=True)
class TimeInterval:
    """
    Represents an immutable interval of UTC epoch seconds.

    Invariant: begin_at must be before end_at.
    """
    begin_at: int
    end_at: int

    def __post_init__(self):
        if self.begin_at >= self.end_at:
            raise ValueError(
                f"begin_at {self.begin_at} must be before end_at {self.end_at}"
            )

    def duration_seconds(self) -> int:
        """Return the length of the interval in seconds."""
        return self.end_at - self.begin_at

    def overlaps(self, other: "TimeInterval") -> bool:
        """
        Check if this interval overlaps with another.

        Intervals are half-open: touching end/begin is not an overlap.
        """
        return not (self.end_at <= other.begin_at or self.begin_at >= other.end_at)

    def to_dict(self) -> Dict[str, int]:
        return {"begin_at": self.begin_at, "end_at": self.end_at}


@dataclass(frozen=True)
class Event(TimeInterval):
    """An existing booking. created_at/updated_at are metadata only."""
    created_at: int = 0
    updated_at: int = 0


@dataclass(frozen=True)
class WorkhourRule:
    """
    Working hours for one weekday.

    weekday runs 1..7 starting on Sunday. open_interval and close_interval are
    seconds from local midnight and are ignored when is_day_off is set.
    """
    weekday: int
    is_day_off: bool = False
    open_interval: int = 0
    close_interval: int = SECONDS_IN_DAY

    def validation_problems(self) -> List[str]:
        """Describe violated invariants. An empty list means the rule is consistent."""
        problems: List[str] = []
        if self.weekday not in range(1, 8):
            problems.append(f"weekday must be between 1 and 7, got {self.weekday}")
        if self.is_day_off:
            return problems
        if not 0 <= self.open_interval < self.close_interval <= SECONDS_IN_DAY:
            problems.append(
                "expected 0 <= open_interval < close_interval <= 86400, "
                f"got open={self.open_interval} close={self.close_interval}"
            )
        return problems


@dataclass(frozen=True)
class WorkWindow:
    """UTC epoch seconds during which slots may be offered on one day."""
    work_start_seconds: int
    work_end_seconds: int


@dataclass(frozen=True)
class DayTimetable:
    """Bookable slots for one calendar day."""
    start_of_day: int
    day_modifier: int
    is_day_off: bool
    timeslots: Tuple[TimeInterval, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timeslots"] = [slot.to_dict() for slot in self.timeslots]
        return data


class SlotRequest(BaseModel):
    """Parameters of a time slot request."""
    start_day_identifier: str
    timezone_identifier: str
    service_duration: int = Field(gt=0)
    days: int = Field(default=DEFAULT_DAYS, ge=0)
    timeslot_interval: int = Field(default=DEFAULT_TIMESLOT_INTERVAL, ge=1)
    is_ignore_schedule: bool = False
    is_ignore_workhour: bool = False
