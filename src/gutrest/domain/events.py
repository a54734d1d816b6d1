"""Domain models for logged meal events."""

from dataclasses import dataclass

from gutrest.domain.categories import MealCategory


@dataclass(frozen=True)
class MealEvent:
    """A single logged intake.

    ``timestamp`` is milliseconds since the epoch and is the only temporal
    anchor; calendar days are always derived from it at read time.
    """

    id: str
    category: MealCategory
    timestamp: int
    created_at: int
    updated_at: int
    notes: str | None = None


@dataclass(frozen=True)
class NewMealEvent:
    """Payload for inserting an event; the store assigns id and bookkeeping."""

    category: MealCategory
    timestamp: int
    notes: str | None = None


@dataclass(frozen=True)
class MealEventPatch:
    """Explicit partial update of an event.

    A field left as None is not touched. ``clear_notes`` removes notes,
    since None already means "unchanged".
    """

    category: MealCategory | None = None
    timestamp: int | None = None
    notes: str | None = None
    clear_notes: bool = False

    def is_empty(self) -> bool:
        """Return True when the patch changes nothing."""
        return (
            self.category is None
            and self.timestamp is None
            and self.notes is None
            and not self.clear_notes
        )

    def apply(self, event: MealEvent, updated_at: int) -> MealEvent:
        """Return a copy of the event with this patch applied."""
        notes = event.notes
        if self.clear_notes:
            notes = None
        elif self.notes is not None:
            notes = self.notes
        return MealEvent(
            id=event.id,
            category=self.category if self.category is not None else event.category,
            timestamp=self.timestamp if self.timestamp is not None else event.timestamp,
            created_at=event.created_at,
            updated_at=updated_at,
            notes=notes,
        )
