"""
Tests for slot enumeration and conflict filtering.
"""

import pytest

from timetabler.domain.models import Event, TimeInterval
from timetabler.domain.slots import ConflictFilter, SlotEnumerator

DAY = 1696118400  # 2023-10-01T00:00:00Z


class TestSlotEnumerator:
    """Tests for SlotEnumerator."""

    def test_overlapping_slots_at_interval(self):
        """Window 00:00-02:00, 60 minute slots every 30 minutes."""
        slots = SlotEnumerator().generate(DAY, DAY + 7200, 3600, 1800)

        assert slots == [
            TimeInterval(begin_at=DAY, end_at=DAY + 3600),
            TimeInterval(begin_at=DAY + 1800, end_at=DAY + 5400),
            TimeInterval(begin_at=DAY + 3600, end_at=DAY + 7200),
        ]

    def test_full_day_window(self):
        """A full day ending at 23:59:59 fits 46 one-hour slots every 30 minutes."""
        slots = SlotEnumerator().generate(DAY, DAY + 86399, 3600, 1800)

        assert len(slots) == 46
        assert slots[0] == TimeInterval(begin_at=1696118400, end_at=1696122000)
        assert slots[1] == TimeInterval(begin_at=1696120200, end_at=1696123800)
        assert slots[-1].end_at <= DAY + 86399
        assert all(slot.duration_seconds() == 3600 for slot in slots)

    def test_back_to_back_when_interval_equals_duration(self):
        slots = SlotEnumerator().generate(DAY, DAY + 3 * 3600, 3600, 3600)

        assert len(slots) == 3
        for previous, current in zip(slots, slots[1:]):
            assert previous.end_at == current.begin_at

    def test_duration_longer_than_window(self):
        assert SlotEnumerator().generate(DAY, DAY + 3599, 3600, 1800) == []

    def test_slot_ending_exactly_at_window_end(self):
        slots = SlotEnumerator().generate(DAY, DAY + 3600, 3600, 1800)

        assert slots == [TimeInterval(begin_at=DAY, end_at=DAY + 3600)]

    @pytest.mark.parametrize("duration, interval", [(3600, 0), (3600, -5), (0, 1800)])
    def test_rejects_non_positive_values(self, duration, interval):
        with pytest.raises(ValueError, match="greater than zero"):
            SlotEnumerator().generate(DAY, DAY + 86399, duration, interval)


class TestConflictFilter:
    """Tests for ConflictFilter."""

    def _candidates(self):
        return SlotEnumerator().generate(DAY, DAY + 6 * 3600, 3600, 1800)

    def test_no_events_returns_candidates_unchanged(self):
        candidates = self._candidates()

        assert ConflictFilter().filter(candidates, []) is candidates

    def test_removes_overlapping_slots(self):
        """An event 02:00-03:00 removes the slots starting 01:30, 02:00 and 02:30."""
        event = Event(begin_at=DAY + 7200, end_at=DAY + 10800)
        candidates = self._candidates()

        available = ConflictFilter().filter(candidates, [event])

        removed = [slot.begin_at - DAY for slot in candidates if slot not in available]
        assert removed == [5400, 7200, 9000]
        assert all(not slot.overlaps(event) for slot in available)

    def test_touching_slots_are_kept(self):
        event = Event(begin_at=DAY + 3600, end_at=DAY + 7200)

        available = ConflictFilter().filter(self._candidates(), [event])

        assert TimeInterval(begin_at=DAY, end_at=DAY + 3600) in available
        assert TimeInterval(begin_at=DAY + 7200, end_at=DAY + 10800) in available

    def test_multiple_events_and_order_preserved(self):
        events = [
            Event(begin_at=DAY + 600, end_at=DAY + 1200),
            Event(begin_at=DAY + 4 * 3600, end_at=DAY + 6 * 3600),
        ]

        available = ConflictFilter().filter(self._candidates(), events)

        assert [slot.begin_at - DAY for slot in available] == [1800, 3600, 5400, 7200, 9000, 10800]

    def test_event_outside_window_removes_nothing(self):
        candidates = self._candidates()
        event = Event(begin_at=DAY - 7200, end_at=DAY)

        assert ConflictFilter().filter(candidates, [event]) == candidates
