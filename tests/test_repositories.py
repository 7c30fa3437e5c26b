"""
Tests for the JSON, in-memory and cached schedule repositories.
"""

import asyncio
import json
import logging

import pytest

from timetabler.adapters.json_repository import JsonScheduleRepository
from timetabler.adapters.memory_repository import (
    CachedScheduleRepository,
    InMemoryScheduleRepository,
)
from timetabler.domain.exceptions import DataSourceUnavailable
from timetabler.domain.models import Event, WorkhourRule


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path):
    _write(
        tmp_path / "events.json",
        [
            {"created_at": 1, "updated_at": 2, "begin_at": 1696125600, "end_at": 1696129200},
            {"created_at": 1, "updated_at": 2, "begin_at": 1696129200, "end_at": 1696125600},
            {"created_at": 1, "updated_at": 2, "begin_at": 1696125600},
            {"begin_at": 1696132800, "end_at": 1696136400},
        ],
    )
    _write(
        tmp_path / "workhours.json",
        [
            {"weekday": 1, "is_day_off": True, "open_interval": 0, "close_interval": 0},
            {"weekday": 2, "is_day_off": False, "open_interval": 36000, "close_interval": 72000},
            {"weekday": "monday", "is_day_off": False},
        ],
    )
    return tmp_path


class TestJsonScheduleRepository:
    """Tests for JsonScheduleRepository."""

    def test_loads_valid_events_and_skips_invalid(self, data_dir, caplog):
        repository = JsonScheduleRepository(data_dir / "events.json", data_dir / "workhours.json")

        with caplog.at_level(logging.WARNING):
            events = asyncio.run(repository.load_events())

        assert events == [
            Event(begin_at=1696125600, end_at=1696129200, created_at=1, updated_at=2),
            Event(begin_at=1696132800, end_at=1696136400),
        ]
        assert "Skipping" in caplog.text

    def test_loads_workhours(self, data_dir):
        repository = JsonScheduleRepository(data_dir / "events.json", data_dir / "workhours.json")

        workhours = asyncio.run(repository.load_workhours())

        assert workhours == [
            WorkhourRule(weekday=1, is_day_off=True, open_interval=0, close_interval=0),
            WorkhourRule(weekday=2, is_day_off=False, open_interval=36000, close_interval=72000),
        ]

    def test_missing_file(self, tmp_path):
        repository = JsonScheduleRepository(tmp_path / "nope.json", tmp_path / "nope.json")

        with pytest.raises(DataSourceUnavailable, match="Could not read"):
            asyncio.run(repository.load_events())

    def test_invalid_json(self, tmp_path):
        (tmp_path / "events.json").write_text("[{", encoding="utf-8")
        repository = JsonScheduleRepository(tmp_path / "events.json", tmp_path / "workhours.json")

        with pytest.raises(DataSourceUnavailable):
            asyncio.run(repository.load_events())

    def test_root_must_be_array(self, tmp_path):
        _write(tmp_path / "workhours.json", {"weekday": 1})
        repository = JsonScheduleRepository(tmp_path / "events.json", tmp_path / "workhours.json")

        with pytest.raises(DataSourceUnavailable, match="JSON array"):
            asyncio.run(repository.load_workhours())


class CountingRepository(InMemoryScheduleRepository):
    """In-memory repository counting how often it is asked."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.event_loads = 0
        self.workhour_loads = 0

    async def load_events(self):
        self.event_loads += 1
        return await super().load_events()

    async def load_workhours(self):
        self.workhour_loads += 1
        return await super().load_workhours()


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestCachedScheduleRepository:
    """Tests for CachedScheduleRepository."""

    def test_in_memory_returns_copies(self):
        repository = InMemoryScheduleRepository(events=[Event(begin_at=0, end_at=10)])

        first = asyncio.run(repository.load_events())
        first.clear()

        assert asyncio.run(repository.load_events()) == [Event(begin_at=0, end_at=10)]

    def test_snapshot_is_reused_within_ttl(self):
        inner = CountingRepository(workhours=[WorkhourRule(weekday=1, is_day_off=True)])
        clock = FakeClock()
        cached = CachedScheduleRepository(inner, ttl_seconds=30, clock=clock)

        asyncio.run(cached.load_workhours())
        clock.now += 29
        result = asyncio.run(cached.load_workhours())

        assert inner.workhour_loads == 1
        assert result == [WorkhourRule(weekday=1, is_day_off=True)]

    def test_snapshot_is_refreshed_after_ttl(self):
        inner = CountingRepository()
        clock = FakeClock()
        cached = CachedScheduleRepository(inner, ttl_seconds=30, clock=clock)

        asyncio.run(cached.load_events())
        clock.now += 30
        asyncio.run(cached.load_events())

        assert inner.event_loads == 2

    def test_invalidate(self):
        inner = CountingRepository()
        cached = CachedScheduleRepository(inner, ttl_seconds=300, clock=FakeClock())

        asyncio.run(cached.load_events())
        cached.invalidate()
        asyncio.run(cached.load_events())

        assert inner.event_loads == 2

    def test_failures_are_not_cached(self, tmp_path):
        inner = JsonScheduleRepository(tmp_path / "events.json", tmp_path / "workhours.json")
        cached = CachedScheduleRepository(inner, ttl_seconds=300)

        with pytest.raises(DataSourceUnavailable):
            asyncio.run(cached.load_events())

        _write(tmp_path / "events.json", [{"begin_at": 0, "end_at": 10}])

        assert asyncio.run(cached.load_events()) == [Event(begin_at=0, end_at=10)]

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValueError):
            CachedScheduleRepository(InMemoryScheduleRepository(), ttl_seconds=-1)
