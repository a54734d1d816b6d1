"""SQLite implementation of the meal event store."""

import logging
import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from uuid import uuid4

from gutrest.adapters.sqlite_migrations import (
    EVENTS_TABLE,
    MIGRATION_STEPS,
    MigrationStep,
    describe_schema,
    run_migrations,
)
from gutrest.domain.categories import MealCategory
from gutrest.domain.events import MealEvent, MealEventPatch, NewMealEvent
from gutrest.errors import MigrationError, NotFoundError, StorageError
from gutrest.services.dates import current_time_ms
from gutrest.services.timeline import EventStore

_logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"
_SELECT_EVENTS = (
    f"SELECT id, category, timestamp, notes, created_at, updated_at FROM {EVENTS_TABLE}"
)


@dataclass
class SqliteEventStore(EventStore):
    """Event store backed by a local SQLite file.

    Statements run on the calling task without suspending, so a write is
    visible to the next read as soon as its coroutine returns.
    """

    path: str
    steps: Sequence[MigrationStep] = MIGRATION_STEPS
    _connection: sqlite3.Connection | None = field(
        default=None, init=False, repr=False
    )

    @property
    def is_ready(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the open connection or raise if the store is not initialized."""
        if self._connection is None:
            raise StorageError("Event store is not initialized")
        return self._connection

    async def initialize(self) -> None:
        """Open the database and bring its schema up to date."""
        if self._connection is not None:
            _logger.debug("Event store already initialized")
            return
        try:
            connection = _connect(self.path)
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to open database {self.path}") from exc
        try:
            run_migrations(connection, self.steps)
        except MigrationError:
            connection.close()
            raise
        self._connection = connection
        _logger.info("Event store initialized at %s", self.path)

    async def close(self) -> None:
        if self._connection is None:
            return
        self._connection.close()
        self._connection = None
        _logger.info("Event store closed")

    async def insert(self, event: NewMealEvent) -> MealEvent:
        """Insert an event and return the stored record."""
        now = current_time_ms()
        created = MealEvent(
            id=_generate_id(now),
            category=MealCategory(event.category),
            timestamp=event.timestamp,
            notes=event.notes,
            created_at=now,
            updated_at=now,
        )
        self._execute(
            f"INSERT INTO {EVENTS_TABLE} "
            "(id, category, timestamp, notes, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                created.id,
                created.category.value,
                created.timestamp,
                created.notes,
                created.created_at,
                created.updated_at,
            ),
            "Failed to insert meal entry",
        )
        _logger.info("Meal entry inserted: %s", created.id)
        return created

    async def update(self, event_id: str, patch: MealEventPatch) -> None:
        """Apply the fields present in the patch and touch ``updated_at``."""
        if patch.is_empty():
            if await self.get(event_id) is None:
                raise NotFoundError(event_id)
            return
        assignments: list[str] = []
        values: list[object] = []
        if patch.category is not None:
            assignments.append("category = ?")
            values.append(MealCategory(patch.category).value)
        if patch.timestamp is not None:
            assignments.append("timestamp = ?")
            values.append(patch.timestamp)
        if patch.clear_notes:
            assignments.append("notes = NULL")
        elif patch.notes is not None:
            assignments.append("notes = ?")
            values.append(patch.notes)
        assignments.append("updated_at = ?")
        values.append(current_time_ms())
        values.append(event_id)
        cursor = self._execute(
            f"UPDATE {EVENTS_TABLE} SET {', '.join(assignments)} WHERE id = ?",
            values,
            "Failed to update meal entry",
        )
        if cursor.rowcount == 0:
            raise NotFoundError(event_id)
        _logger.info("Meal entry updated: %s", event_id)

    async def delete(self, event_id: str) -> None:
        cursor = self._execute(
            f"DELETE FROM {EVENTS_TABLE} WHERE id = ?",
            (event_id,),
            "Failed to delete meal entry",
        )
        if cursor.rowcount == 0:
            raise NotFoundError(event_id)
        _logger.info("Meal entry deleted: %s", event_id)

    async def get(self, event_id: str) -> MealEvent | None:
        cursor = self._execute(
            f"{_SELECT_EVENTS} WHERE id = ?", (event_id,), "Failed to load meal entry"
        )
        row = cursor.fetchone()
        return _parse_row(row) if row is not None else None

    async def query_by_time_range(
        self, start_inclusive: int, end_inclusive: int
    ) -> list[MealEvent]:
        """Return events with ``start <= timestamp <= end`` in ascending order."""
        cursor = self._execute(
            f"{_SELECT_EVENTS} WHERE timestamp >= ? AND timestamp <= ? "
            "ORDER BY timestamp ASC, id ASC",
            (start_inclusive, end_inclusive),
            "Failed to retrieve meal entries",
        )
        return [_parse_row(row) for row in cursor.fetchall()]

    async def describe_schema(self) -> dict[str, list[str]]:
        """Return table names mapped to their columns, for debugging."""
        try:
            return describe_schema(self.connection)
        except sqlite3.Error as exc:
            raise StorageError("Failed to read schema") from exc

    async def clear_all(self) -> None:
        self._execute(f"DELETE FROM {EVENTS_TABLE}", (), "Failed to clear meal entries")
        _logger.info("All meal entries cleared")

    def _execute(
        self, sql: str, parameters: Sequence[object], failure: str
    ) -> sqlite3.Cursor:
        try:
            return self.connection.execute(sql, parameters)
        except sqlite3.Error as exc:
            _logger.exception(failure)
            raise StorageError(failure) from exc


def _connect(path: str) -> sqlite3.Connection:
    if path != IN_MEMORY:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(path, isolation_level=None)
    connection.row_factory = sqlite3.Row
    return connection


def _generate_id(now_ms: int) -> str:
    return f"meal_{now_ms}_{uuid4().hex[:9]}"


def _parse_row(row: sqlite3.Row) -> MealEvent:
    try:
        category = MealCategory(row["category"])
    except ValueError as exc:
        raise StorageError(f"Unknown meal category {row['category']!r}") from exc
    return MealEvent(
        id=str(row["id"]),
        category=category,
        timestamp=int(row["timestamp"]),
        notes=row["notes"],
        created_at=int(row["created_at"]),
        updated_at=int(row["updated_at"]),
    )
