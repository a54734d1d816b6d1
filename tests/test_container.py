"""Tests for container wiring and configuration."""

import asyncio
import logging
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from gutrest.adapters.sqlite_event_store import SqliteEventStore
from gutrest.config import Settings
from gutrest.containers import build_container


def test_build_container_wires_sqlite_backend(tmp_path: Path) -> None:
    settings = Settings(database_path=str(tmp_path / "app.db"), timezone="Asia/Tokyo")
    container = build_container(settings)

    async def scenario() -> None:
        await container.initialize()
        summary = await container.timeline_service.get_daily_summary("2024-05-10")
        assert summary.total_entries == 0
        assert container.user_settings_service.get_fasting_goal_hours() == 16
        await container.close_resources()

    asyncio.run(scenario())
    assert isinstance(container.event_store, SqliteEventStore)
    assert container.timeline_service.resolver.tz == ZoneInfo("Asia/Tokyo")


def test_initialize_applies_configured_log_level(tmp_path: Path) -> None:
    settings = Settings(database_path=str(tmp_path / "app.db"), log_level="WARNING")
    container = build_container(settings)

    async def scenario() -> None:
        await container.initialize()
        await container.close_resources()

    asyncio.run(scenario())
    assert logging.getLogger("gutrest").level == logging.WARNING


def test_settings_resolve_timezone() -> None:
    assert Settings(timezone=None).resolve_timezone() is None
    assert Settings(timezone=" ").resolve_timezone() is None
    berlin = Settings(timezone="Europe/Berlin")
    assert berlin.resolve_timezone() == ZoneInfo("Europe/Berlin")


def test_supabase_backend_requires_credentials() -> None:
    with pytest.raises(ValidationError):
        Settings(storage_backend="supabase")
