"""
Schedule repository backed by two JSON files (events and work hours).
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..domain.exceptions import DataSourceUnavailable
from ..domain.models import SECONDS_IN_DAY, Event, WorkhourRule

RecordT = TypeVar("RecordT", bound=BaseModel)


class EventRecord(BaseModel):
    """One entry of events.json."""
    begin_at: int
    end_at: int
    created_at: int = 0
    updated_at: int = 0

    def to_domain(self) -> Event:
        return Event(
            begin_at=self.begin_at,
            end_at=self.end_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class WorkhourRecord(BaseModel):
    """One entry of workhours.json."""
    weekday: int
    is_day_off: bool = False
    open_interval: int = 0
    close_interval: int = SECONDS_IN_DAY

    def to_domain(self) -> WorkhourRule:
        return WorkhourRule(
            weekday=self.weekday,
            is_day_off=self.is_day_off,
            open_interval=self.open_interval,
            close_interval=self.close_interval,
        )


class JsonScheduleRepository:
    """
    Loads events and work hours from JSON arrays on disk.

    Every call reads the files again, so edits are picked up on the next
    request. Wrap in CachedScheduleRepository to share a snapshot instead.
    """

    def __init__(
        self,
        events_path: Path,
        workhours_path: Path,
        logger: Optional[logging.Logger] = None
    ):
        self.events_path = Path(events_path)
        self.workhours_path = Path(workhours_path)
        self._logger = logger or logging.getLogger(__name__)

    async def load_events(self) -> List[Event]:
        """
        Load events, skipping entries that are malformed or have
        begin_at >= end_at.

        Raises:
            DataSourceUnavailable: If the file is missing, unreadable or not a
                JSON array
        """
        records = await self._load_records(self.events_path, EventRecord)
        events: List[Event] = []

        for record in records:
            try:
                events.append(record.to_domain())
            except ValueError as exc:
                self._logger.warning("Skipping invalid event in %s: %s", self.events_path, exc)

        self._logger.debug("Successfully loaded %d events", len(events))
        return events

    async def load_workhours(self) -> List[WorkhourRule]:
        """
        Load work hour rules, skipping malformed entries.

        Raises:
            DataSourceUnavailable: If the file is missing, unreadable or not a
                JSON array
        """
        records = await self._load_records(self.workhours_path, WorkhourRecord)
        workhours = [record.to_domain() for record in records]

        self._logger.debug("Successfully loaded %d work hour entries", len(workhours))
        return workhours

    async def _load_records(self, path: Path, model: Type[RecordT]) -> List[RecordT]:
        self._logger.debug("Loading %s", path)

        try:
            content = await asyncio.to_thread(path.read_text, encoding="utf-8")
            data: Any = json.loads(content)
        except (OSError, ValueError) as exc:
            raise DataSourceUnavailable(f"Could not read {path}: {exc}") from exc

        if not isinstance(data, list):
            raise DataSourceUnavailable(f"{path} must contain a JSON array at the root level.")

        records: List[RecordT] = []
        for index, entry in enumerate(data):
            try:
                records.append(model.model_validate(entry))
            except ValidationError as exc:
                self._logger.warning(
                    "Skipping entry %d of %s: %s",
                    index,
                    path,
                    exc.errors(include_url=False),
                )

        return records
