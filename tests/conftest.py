"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from itertools import count
from zoneinfo import ZoneInfo

import pytest

from gutrest.domain.categories import MealCategory
from gutrest.domain.events import MealEvent, MealEventPatch, NewMealEvent
from gutrest.errors import NotFoundError, StorageError
from gutrest.services.dates import LocalDateResolver
from gutrest.services.timeline import EventStore, TimelineService
from gutrest.services.user_settings import SettingsRepository, UserSettingsService

HOUR_MS = 60 * 60 * 1000
MINUTE_MS = 60 * 1000

NEW_YORK = ZoneInfo("America/New_York")
TOKYO = ZoneInfo("Asia/Tokyo")


def local_ms(tz: ZoneInfo, *args: int) -> int:
    """Return epoch milliseconds for a wall-clock time in ``tz``."""
    moment = datetime(*args, tzinfo=tz)
    return round(moment.timestamp() * 1000)


def make_event(
    timestamp: int,
    category: MealCategory = MealCategory.MEDIUM_MEAL,
    event_id: str | None = None,
) -> MealEvent:
    return MealEvent(
        id=event_id or f"meal_{timestamp}",
        category=category,
        timestamp=timestamp,
        created_at=timestamp,
        updated_at=timestamp,
    )


@dataclass
class InMemoryEventStore(EventStore):
    """In-memory event store for tests."""

    events: dict[str, MealEvent] = field(default_factory=dict)
    initialized: int = 0
    queries: list[tuple[int, int]] = field(default_factory=list)
    fail_queries: bool = False
    _ids: count = field(default_factory=lambda: count(1))

    async def initialize(self) -> None:
        self.initialized += 1

    async def close(self) -> None:
        return None

    async def insert(self, event: NewMealEvent) -> MealEvent:
        event_id = f"meal_{next(self._ids)}"
        stored = MealEvent(
            id=event_id,
            category=event.category,
            timestamp=event.timestamp,
            notes=event.notes,
            created_at=event.timestamp,
            updated_at=event.timestamp,
        )
        self.events[event_id] = stored
        return stored

    async def update(self, event_id: str, patch: MealEventPatch) -> None:
        current = self.events.get(event_id)
        if current is None:
            raise NotFoundError(event_id)
        self.events[event_id] = patch.apply(current, current.updated_at + 1)

    async def delete(self, event_id: str) -> None:
        if self.events.pop(event_id, None) is None:
            raise NotFoundError(event_id)

    async def get(self, event_id: str) -> MealEvent | None:
        return self.events.get(event_id)

    async def query_by_time_range(
        self, start_inclusive: int, end_inclusive: int
    ) -> list[MealEvent]:
        if self.fail_queries:
            raise StorageError("query failed")
        self.queries.append((start_inclusive, end_inclusive))
        matching = [
            event
            for event in self.events.values()
            if start_inclusive <= event.timestamp <= end_inclusive
        ]
        return sorted(matching, key=lambda event: event.timestamp)

    def add(self, *events: MealEvent) -> None:
        for event in events:
            self.events[event.id] = event


@dataclass
class InMemorySettingsRepository(SettingsRepository):
    """In-memory settings repository for tests."""

    values: dict[str, str] = field(default_factory=dict)

    def get_value(self, key: str) -> str | None:
        return self.values.get(key)

    def set_value(self, key: str, value: str) -> None:
        self.values[key] = value

    def remove_value(self, key: str) -> None:
        self.values.pop(key, None)


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def settings_service() -> UserSettingsService:
    return UserSettingsService(InMemorySettingsRepository())


@pytest.fixture
def resolver() -> LocalDateResolver:
    return LocalDateResolver(NEW_YORK)


@pytest.fixture
def timeline_service(
    event_store: InMemoryEventStore,
    settings_service: UserSettingsService,
    resolver: LocalDateResolver,
) -> TimelineService:
    return TimelineService(
        store=event_store,
        settings_service=settings_service,
        resolver=resolver,
    )
