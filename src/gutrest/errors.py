"""Error types raised by stores and settings."""


class GutRestError(Exception):
    """Base class for application errors."""


class StorageError(GutRestError):
    """A query or write against a store failed."""


class NotFoundError(GutRestError):
    """An update or delete targeted an id that does not exist."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Meal entry with id {event_id} not found")
        self.event_id = event_id


class MigrationError(GutRestError):
    """Schema evolution failed; the store is not ready."""


class InvalidSettingError(GutRestError):
    """A settings write was rejected by validation."""
