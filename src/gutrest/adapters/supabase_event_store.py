"""Supabase implementation of the meal event store."""

import logging
from dataclasses import dataclass, field
from uuid import uuid4

from postgrest.exceptions import APIError
from supabase import Client

from gutrest.domain.categories import MealCategory
from gutrest.domain.events import MealEvent, MealEventPatch, NewMealEvent
from gutrest.errors import NotFoundError, StorageError
from gutrest.services.dates import current_time_ms
from gutrest.services.timeline import EventStore

_logger = logging.getLogger(__name__)

TABLE = "meal_entries"
COLUMNS = "id, category, timestamp, notes, created_at, updated_at"


@dataclass
class SupabaseEventStore(EventStore):
    """Event store on a hosted Supabase table.

    The table schema is managed by the hosted project, so initialization only
    checks that the table is reachable.
    """

    client: Client
    _ready: bool = field(default=False, init=False, repr=False)

    async def initialize(self) -> None:
        if self._ready:
            return
        try:
            self.client.table(TABLE).select("id").limit(1).execute()
        except APIError as exc:
            raise StorageError(f"Supabase table {TABLE} is unavailable") from exc
        self._ready = True
        _logger.info("Supabase event store initialized")

    async def close(self) -> None:
        self._ready = False

    def _require_ready(self) -> None:
        if not self._ready:
            raise StorageError("Event store is not initialized")

    async def insert(self, event: NewMealEvent) -> MealEvent:
        """Insert an event row and return the stored record."""
        self._require_ready()
        now = current_time_ms()
        payload = {
            "id": f"meal_{now}_{uuid4().hex[:9]}",
            "category": MealCategory(event.category).value,
            "timestamp": event.timestamp,
            "notes": event.notes,
            "created_at": now,
            "updated_at": now,
        }
        try:
            response = self.client.table(TABLE).insert(payload).execute()
        except APIError as exc:
            raise StorageError("Failed to insert meal entry") from exc
        row = response.data[0] if response.data else payload
        _logger.info("Meal entry inserted: %s", row["id"])
        return _parse_row(row)

    async def update(self, event_id: str, patch: MealEventPatch) -> None:
        """Apply the fields present in the patch and touch ``updated_at``."""
        self._require_ready()
        if patch.is_empty():
            if await self.get(event_id) is None:
                raise NotFoundError(event_id)
            return
        payload: dict[str, object] = {"updated_at": current_time_ms()}
        if patch.category is not None:
            payload["category"] = MealCategory(patch.category).value
        if patch.timestamp is not None:
            payload["timestamp"] = patch.timestamp
        if patch.clear_notes:
            payload["notes"] = None
        elif patch.notes is not None:
            payload["notes"] = patch.notes
        try:
            response = (
                self.client.table(TABLE).update(payload).eq("id", event_id).execute()
            )
        except APIError as exc:
            raise StorageError("Failed to update meal entry") from exc
        if not response.data:
            raise NotFoundError(event_id)
        _logger.info("Meal entry updated: %s", event_id)

    async def delete(self, event_id: str) -> None:
        self._require_ready()
        try:
            response = self.client.table(TABLE).delete().eq("id", event_id).execute()
        except APIError as exc:
            raise StorageError("Failed to delete meal entry") from exc
        if not response.data:
            raise NotFoundError(event_id)
        _logger.info("Meal entry deleted: %s", event_id)

    async def get(self, event_id: str) -> MealEvent | None:
        self._require_ready()
        try:
            response = (
                self.client.table(TABLE)
                .select(COLUMNS)
                .eq("id", event_id)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise StorageError("Failed to load meal entry") from exc
        if not response.data:
            return None
        return _parse_row(response.data[0])

    async def query_by_time_range(
        self, start_inclusive: int, end_inclusive: int
    ) -> list[MealEvent]:
        """Return events in the inclusive range ordered by timestamp."""
        self._require_ready()
        try:
            response = (
                self.client.table(TABLE)
                .select(COLUMNS)
                .gte("timestamp", start_inclusive)
                .lte("timestamp", end_inclusive)
                .order("timestamp", desc=False)
                .execute()
            )
        except APIError as exc:
            raise StorageError("Failed to retrieve meal entries") from exc
        events = [_parse_row(row) for row in response.data or []]
        return sorted(events, key=lambda event: event.timestamp)


def _parse_row(row: dict[str, object]) -> MealEvent:
    try:
        category = MealCategory(str(row.get("category")))
    except ValueError as exc:
        raise StorageError(f"Unknown meal category {row.get('category')!r}") from exc
    notes = row.get("notes")
    return MealEvent(
        id=str(row["id"]),
        category=category,
        timestamp=int(row["timestamp"]),
        notes=str(notes) if notes is not None else None,
        created_at=int(row.get("created_at") or 0),
        updated_at=int(row.get("updated_at") or 0),
    )
