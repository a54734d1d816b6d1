"""SQLite repository for settings documents."""

import sqlite3
from dataclasses import dataclass

from gutrest.adapters.sqlite_event_store import SqliteEventStore
from gutrest.adapters.sqlite_migrations import SETTINGS_TABLE
from gutrest.errors import StorageError
from gutrest.services.user_settings import SettingsRepository


@dataclass
class SqliteSettingsRepository(SettingsRepository):
    """Stores settings in the event store's database."""

    store: SqliteEventStore

    def get_value(self, key: str) -> str | None:
        """Return the stored JSON for a key."""
        try:
            row = self.store.connection.execute(
                f"SELECT value FROM {SETTINGS_TABLE} WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to read setting {key!r}") from exc
        return None if row is None else str(row["value"])

    def set_value(self, key: str, value: str) -> None:
        try:
            self.store.connection.execute(
                f"INSERT INTO {SETTINGS_TABLE} (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to save setting {key!r}") from exc

    def remove_value(self, key: str) -> None:
        try:
            self.store.connection.execute(
                f"DELETE FROM {SETTINGS_TABLE} WHERE key = ?", (key,)
            )
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to remove setting {key!r}") from exc
