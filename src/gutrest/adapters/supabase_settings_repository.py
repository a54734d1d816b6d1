"""Supabase repository for settings documents."""

import json
from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from gutrest.errors import StorageError
from gutrest.services.user_settings import SettingsRepository

TABLE = "app_settings"


@dataclass
class SupabaseSettingsRepository(SettingsRepository):
    """Supabase implementation for settings, stored as JSON values by key."""

    client: Client

    def get_value(self, key: str) -> str | None:
        try:
            response = (
                self.client.table(TABLE)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise StorageError(f"Failed to read setting {key!r}") from exc
        if not response.data:
            return None
        value = response.data[0].get("value")
        if value is None:
            return None
        # jsonb columns come back already decoded.
        return value if isinstance(value, str) else json.dumps(value)

    def set_value(self, key: str, value: str) -> None:
        try:
            self.client.table(TABLE).upsert(
                {"key": key, "value": json.loads(value)}
            ).execute()
        except APIError as exc:
            raise StorageError(f"Failed to save setting {key!r}") from exc

    def remove_value(self, key: str) -> None:
        try:
            self.client.table(TABLE).delete().eq("key", key).execute()
        except APIError as exc:
            raise StorageError(f"Failed to remove setting {key!r}") from exc
