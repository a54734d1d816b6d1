"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from gutrest.adapters.sqlite_event_store import SqliteEventStore
from gutrest.adapters.sqlite_settings_repository import SqliteSettingsRepository
from gutrest.adapters.supabase_event_store import SupabaseEventStore
from gutrest.adapters.supabase_settings_repository import (
    SupabaseSettingsRepository,
)
from gutrest.app_logging import configure_logging
from gutrest.config import Settings
from gutrest.services.dates import LocalDateResolver
from gutrest.services.timeline import EventStore, TimelineService
from gutrest.services.user_settings import SettingsRepository, UserSettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    event_store: EventStore
    user_settings_service: UserSettingsService
    timeline_service: TimelineService
    initialize: Callable[[], Awaitable[None]]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    The store is not opened here; the host awaits ``initialize`` before the
    first query.
    """
    resolved_settings = settings or Settings()
    event_store: EventStore
    settings_repository: SettingsRepository
    if resolved_settings.storage_backend == "supabase":
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        event_store = SupabaseEventStore(supabase_client)
        settings_repository = SupabaseSettingsRepository(supabase_client)
    else:
        sqlite_store = SqliteEventStore(resolved_settings.database_path)
        event_store = sqlite_store
        settings_repository = SqliteSettingsRepository(sqlite_store)

    user_settings_service = UserSettingsService(settings_repository)
    timeline_service = TimelineService(
        store=event_store,
        settings_service=user_settings_service,
        resolver=LocalDateResolver(resolved_settings.resolve_timezone()),
        lookback_hours=resolved_settings.fasting_lookback_hours,
    )

    async def initialize() -> None:
        configure_logging(resolved_settings.log_level)
        await event_store.initialize()

    async def close_resources() -> None:
        await event_store.close()

    return AppContainer(
        settings=resolved_settings,
        event_store=event_store,
        user_settings_service=user_settings_service,
        timeline_service=timeline_service,
        initialize=initialize,
        close_resources=close_resources,
    )
