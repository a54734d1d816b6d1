"""Derived timeline values. None of these are persisted."""

from dataclasses import dataclass, field

from gutrest.domain.events import MealEvent


@dataclass(frozen=True)
class TimeGap:
    """Elapsed time between two adjacent events."""

    start_time: int
    end_time: int
    duration_ms: int
    duration_formatted: str


@dataclass(frozen=True)
class FastingWindow:
    """Overnight fast between the last intake of one day and the first of the next."""

    start_time: int
    end_time: int
    duration_ms: int
    duration_formatted: str
    is_intermittent_fasting: bool


@dataclass(frozen=True)
class DailySummary:
    """Entries, gaps and fasting window for one local calendar day."""

    date: str
    entries: list[MealEvent] = field(default_factory=list)
    gaps: list[TimeGap] = field(default_factory=list)
    first_intake: int | None = None
    last_intake: int | None = None
    fasting_window: FastingWindow | None = None

    @property
    def total_entries(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class DailyStats:
    """Gap statistics for a single day."""

    shortest_gap: TimeGap | None
    longest_gap: TimeGap | None
    average_gap: float
    total_gaps: int
    fasting_streak: int
    total_intake_today: int


@dataclass(frozen=True)
class FastingStatus:
    """Live progress of the fast in progress."""

    is_currently_fasting: bool
    current_fast_duration: int
    current_fast_formatted: str
    time_to_goal: int
    time_to_goal_formatted: str
    goal_reached: bool
    progress_percentage: int
    goal_hours: float


@dataclass(frozen=True)
class PatternReport:
    """Multi-day eating pattern statistics."""

    average_eating_window: float
    average_eating_window_formatted: str
    average_meals_per_day: float
    average_fasting_hours: float
    intermittent_fasting_days: int
    intermittent_fasting_percentage: int
    consistency_score: int
    current_fasting_streak: int
    total_days_analyzed: int
