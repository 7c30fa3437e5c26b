"""
Candidate slot enumeration and conflict filtering.

Both operate purely on UTC epoch seconds; no timezone is involved once the
work window has been resolved.
"""

import logging
from typing import List, Optional, Sequence

from .models import TimeInterval


class SlotEnumerator:
    """Lays fixed-length slots over a work window at a fixed step."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    def generate(
        self,
        start_seconds: int,
        end_seconds: int,
        service_duration: int,
        interval: int
    ) -> List[TimeInterval]:
        """
        Generate every slot of service_duration starting at start_seconds and
        stepping by interval, as long as the slot ends by end_seconds.

        Example:
        Window: 09:00 - 11:00, duration 60 min, interval 30 min
        Result: [09:00-10:00, 09:30-10:30, 10:00-11:00]
        """
        if interval <= 0:
            raise ValueError(f"interval must be greater than zero, got {interval}")
        if service_duration <= 0:
            raise ValueError(
                f"service_duration must be greater than zero, got {service_duration}"
            )

        timeslots: List[TimeInterval] = []
        cursor = start_seconds

        while cursor + service_duration <= end_seconds:
            timeslots.append(
                TimeInterval(begin_at=cursor, end_at=cursor + service_duration)
            )
            cursor += interval

        self._logger.debug(
            "Generated %d potential timeslots between %d and %d",
            len(timeslots),
            start_seconds,
            end_seconds,
        )
        return timeslots


class ConflictFilter:
    """Drops candidate slots that overlap an existing event."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    def filter(
        self,
        candidates: List[TimeInterval],
        events: Sequence[TimeInterval]
    ) -> List[TimeInterval]:
        """
        Return the candidates that overlap none of the events, in order.

        Touching intervals do not conflict: a slot may end exactly when an event
        begins or begin exactly when one ends.
        """
        if not events:
            self._logger.debug(
                "No events to check for conflicts - returning all %d generated timeslots",
                len(candidates),
            )
            return candidates

        available: List[TimeInterval] = []

        for slot in candidates:
            conflict = next((event for event in events if slot.overlaps(event)), None)
            if conflict is None:
                available.append(slot)
                continue

            self._logger.debug(
                "Slot %d-%d conflicts with event %d-%d",
                slot.begin_at,
                slot.end_at,
                conflict.begin_at,
                conflict.end_at,
            )

        self._logger.debug(
            "Filtered %d conflicting slots, %d available",
            len(candidates) - len(available),
            len(available),
        )
        return available
