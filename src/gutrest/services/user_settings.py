"""User preference settings."""

import logging
from dataclasses import dataclass
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gutrest.domain.categories import MealCategory
from gutrest.errors import InvalidSettingError

_logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
MIN_FASTING_GOAL_HOURS = 8
MAX_FASTING_GOAL_HOURS = 24


class AppSettings(BaseModel):
    """Preferences stored as a single JSON document."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    theme: Literal["light", "dark", "system"] = "system"
    notifications: bool = True
    default_meal_category: MealCategory = MealCategory.MEDIUM_MEAL
    fasting_goal_hours: int = Field(
        default=16, ge=MIN_FASTING_GOAL_HOURS, le=MAX_FASTING_GOAL_HOURS
    )
    first_launch: bool = True
    onboarding_completed: bool = False


class SettingsRepository(Protocol):
    """Key-value persistence for settings documents."""

    def get_value(self, key: str) -> str | None:
        """Return the raw JSON stored under the key."""

    def set_value(self, key: str, value: str) -> None:
        """Store raw JSON under the key."""

    def remove_value(self, key: str) -> None:
        """Remove the key if present."""


@dataclass
class UserSettingsService:
    """Service for reading and validating user settings."""

    repository: SettingsRepository

    def get_app_settings(self) -> AppSettings:
        """Return stored settings, or defaults when nothing valid is stored."""
        raw = self.repository.get_value(SETTINGS_KEY)
        if raw is None:
            return AppSettings()
        try:
            return AppSettings.model_validate_json(raw)
        except ValidationError:
            _logger.warning("Stored settings are invalid, using defaults")
            return AppSettings()

    def update_app_settings(self, **updates: object) -> AppSettings:
        """Merge updates into the stored settings and persist them."""
        unknown = set(updates) - set(AppSettings.model_fields)
        if unknown:
            raise InvalidSettingError(f"Unknown settings: {sorted(unknown)}")
        current = self.get_app_settings()
        try:
            updated = AppSettings.model_validate(current.model_dump() | updates)
        except ValidationError as exc:
            raise InvalidSettingError(str(exc)) from exc
        self.repository.set_value(SETTINGS_KEY, updated.model_dump_json())
        _logger.info("Settings updated: %s", sorted(updates))
        return updated

    def reset_app_settings(self) -> AppSettings:
        """Drop stored settings and return the defaults."""
        self.repository.remove_value(SETTINGS_KEY)
        return AppSettings()

    def get_fasting_goal_hours(self) -> int:
        return self.get_app_settings().fasting_goal_hours

    def set_fasting_goal_hours(self, hours: int) -> None:
        """Persist a fasting goal between 8 and 24 hours inclusive."""
        if not MIN_FASTING_GOAL_HOURS <= hours <= MAX_FASTING_GOAL_HOURS:
            raise InvalidSettingError(
                f"Fasting goal must be between {MIN_FASTING_GOAL_HOURS} and "
                f"{MAX_FASTING_GOAL_HOURS} hours"
            )
        self.update_app_settings(fasting_goal_hours=hours)

    def mark_as_launched(self) -> None:
        self.update_app_settings(first_launch=False)

    def complete_onboarding(self) -> None:
        self.update_app_settings(onboarding_completed=True, first_launch=False)
