"""Idempotent schema migrations for the SQLite event store.

Each step checks the live schema before running, so repeated launches never
re-run a destructive step. A step runs inside a single transaction: if it
fails the database is left on its previous schema.
"""

import logging
import sqlite3
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from gutrest.errors import MigrationError

_logger = logging.getLogger(__name__)

EVENTS_TABLE = "meal_entries"
SETTINGS_TABLE = "app_settings"
TIMESTAMP_INDEX = "idx_meal_entries_timestamp"
LEGACY_DATE_COLUMN = "date"

_EVENTS_COLUMNS_SQL = """
    id TEXT PRIMARY KEY,
    category TEXT NOT NULL,
    timestamp INTEGER NOT NULL,
    notes TEXT,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
"""
_EVENT_COLUMNS = "id, category, timestamp, notes, created_at, updated_at"


@dataclass(frozen=True)
class MigrationStep:
    """A named schema change guarded by an introspection check."""

    name: str
    is_applied: Callable[[sqlite3.Connection], bool]
    apply: Callable[[sqlite3.Connection], None]


def table_exists(connection: sqlite3.Connection, table: str) -> bool:
    row = connection.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (table,)
    ).fetchone()
    return row is not None


def index_exists(connection: sqlite3.Connection, index: str) -> bool:
    row = connection.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'index' AND name = ?", (index,)
    ).fetchone()
    return row is not None


def table_columns(connection: sqlite3.Connection, table: str) -> list[str]:
    """Return column names of a table in declaration order."""
    rows = connection.execute(f"PRAGMA table_info({table})").fetchall()
    return [row[1] for row in rows]


def describe_schema(connection: sqlite3.Connection) -> dict[str, list[str]]:
    """Return every user table with its columns."""
    rows = connection.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    ).fetchall()
    return {row[0]: table_columns(connection, row[0]) for row in rows}


def _create_events_table(connection: sqlite3.Connection) -> None:
    connection.execute(f"CREATE TABLE {EVENTS_TABLE} ({_EVENTS_COLUMNS_SQL})")


def _has_no_legacy_date_column(connection: sqlite3.Connection) -> bool:
    return LEGACY_DATE_COLUMN not in table_columns(connection, EVENTS_TABLE)


def _drop_legacy_date_column(connection: sqlite3.Connection) -> None:
    # Days are derived from timestamps; a stored date drifts across timezones.
    rebuilt = f"{EVENTS_TABLE}_new"
    connection.execute(f"DROP TABLE IF EXISTS {rebuilt}")
    connection.execute(f"CREATE TABLE {rebuilt} ({_EVENTS_COLUMNS_SQL})")
    connection.execute(
        f"INSERT INTO {rebuilt} ({_EVENT_COLUMNS}) "
        f"SELECT {_EVENT_COLUMNS} FROM {EVENTS_TABLE}"
    )
    connection.execute(f"DROP TABLE {EVENTS_TABLE}")
    connection.execute(f"ALTER TABLE {rebuilt} RENAME TO {EVENTS_TABLE}")
    _create_timestamp_index(connection)


def _create_timestamp_index(connection: sqlite3.Connection) -> None:
    connection.execute(
        f"CREATE INDEX IF NOT EXISTS {TIMESTAMP_INDEX} ON {EVENTS_TABLE}(timestamp)"
    )


def _create_settings_table(connection: sqlite3.Connection) -> None:
    connection.execute(
        f"CREATE TABLE {SETTINGS_TABLE} (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
    )


MIGRATION_STEPS: tuple[MigrationStep, ...] = (
    MigrationStep(
        name="create_meal_entries",
        is_applied=lambda connection: table_exists(connection, EVENTS_TABLE),
        apply=_create_events_table,
    ),
    MigrationStep(
        name="drop_legacy_date_column",
        is_applied=_has_no_legacy_date_column,
        apply=_drop_legacy_date_column,
    ),
    MigrationStep(
        name="create_timestamp_index",
        is_applied=lambda connection: index_exists(connection, TIMESTAMP_INDEX),
        apply=_create_timestamp_index,
    ),
    MigrationStep(
        name="create_app_settings",
        is_applied=lambda connection: table_exists(connection, SETTINGS_TABLE),
        apply=_create_settings_table,
    ),
)


def run_migrations(
    connection: sqlite3.Connection,
    steps: Sequence[MigrationStep] = MIGRATION_STEPS,
) -> list[str]:
    """Apply pending steps in order and return the names of those applied.

    The connection must be in autocommit mode (``isolation_level=None``) so
    each step can own its transaction.
    """
    applied = []
    for step in steps:
        try:
            if step.is_applied(connection):
                continue
            _logger.info("Applying migration %s", step.name)
            connection.execute("BEGIN IMMEDIATE")
            step.apply(connection)
            connection.execute("COMMIT")
        except sqlite3.Error as exc:
            if connection.in_transaction:
                connection.execute("ROLLBACK")
            _logger.exception("Migration %s failed", step.name)
            raise MigrationError(f"Migration {step.name} failed: {exc}") from exc
        applied.append(step.name)
    if applied:
        _logger.info("Schema migrated: %s", ", ".join(applied))
    return applied
