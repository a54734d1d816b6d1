"""Daily timeline aggregation over the event store."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from gutrest.domain.categories import DEFAULT_FASTING_POLICY, FastingPolicy
from gutrest.domain.events import MealEvent, MealEventPatch, NewMealEvent
from gutrest.domain.timeline import (
    DailyStats,
    DailySummary,
    FastingStatus,
    PatternReport,
)
from gutrest.services.dates import LocalDateResolver, current_time_ms
from gutrest.services.durations import MS_PER_HOUR, format_duration
from gutrest.services.fasting import (
    calculate_fasting_window,
    current_fasting_status,
    first_qualifying_event,
    last_qualifying_event,
)
from gutrest.services.gaps import calculate_gaps
from gutrest.services.patterns import analyze
from gutrest.services.user_settings import UserSettingsService

_logger = logging.getLogger(__name__)

WEEK_DAYS = 7
DEFAULT_LOOKBACK_HOURS = 48


class EventStore(Protocol):
    """Persistence interface for meal events."""

    async def initialize(self) -> None:
        """Open the store and migrate its schema. Safe to call repeatedly."""

    async def close(self) -> None:
        """Release the underlying connection."""

    async def insert(self, event: NewMealEvent) -> MealEvent:
        """Persist a new event and return it with id and bookkeeping fields."""

    async def update(self, event_id: str, patch: MealEventPatch) -> None:
        """Apply a patch. Raises NotFoundError for an unknown id."""

    async def delete(self, event_id: str) -> None:
        """Delete an event. Raises NotFoundError for an unknown id."""

    async def get(self, event_id: str) -> MealEvent | None:
        """Return an event by id."""

    async def query_by_time_range(
        self, start_inclusive: int, end_inclusive: int
    ) -> list[MealEvent]:
        """Return events in the range, ascending by timestamp."""


@dataclass
class TimelineService:
    """Builds daily summaries, stats and fasting status from stored events."""

    store: EventStore
    settings_service: UserSettingsService
    resolver: LocalDateResolver = field(default_factory=LocalDateResolver)
    policy: FastingPolicy = DEFAULT_FASTING_POLICY
    lookback_hours: int = DEFAULT_LOOKBACK_HOURS

    async def get_entries_for_day(self, date_id: str) -> list[MealEvent]:
        """Return the day's events ascending by timestamp, one per id."""
        start, end = self.resolver.day_bounds(date_id)
        events = await self.store.query_by_time_range(start, end)
        unique = {event.id: event for event in events}
        return sorted(unique.values(), key=lambda event: event.timestamp)

    async def get_daily_summary(self, date_id: str) -> DailySummary:
        """Return entries, gaps and the overnight fasting window for a local day."""
        entries = await self.get_entries_for_day(date_id)
        if not entries:
            return DailySummary(date=date_id)

        previous_entries = await self.get_entries_for_day(
            self.resolver.offset_id(date_id, -1)
        )
        fasting_window = calculate_fasting_window(
            last_qualifying_event(previous_entries, self.policy),
            first_qualifying_event(entries, self.policy),
        )
        return DailySummary(
            date=date_id,
            entries=entries,
            gaps=calculate_gaps(entries),
            first_intake=entries[0].timestamp,
            last_intake=entries[-1].timestamp,
            fasting_window=fasting_window,
        )

    async def get_summaries(self, start_id: str, days: int) -> list[DailySummary]:
        """Return summaries for consecutive days, aggregated concurrently."""
        date_ids = self.resolver.date_range(start_id, days)
        summaries = await asyncio.gather(
            *(self.get_daily_summary(date_id) for date_id in date_ids)
        )
        return list(summaries)

    async def get_weekly_summaries(self, start_id: str) -> list[DailySummary]:
        return await self.get_summaries(start_id, WEEK_DAYS)

    async def analyze_range(self, start_id: str, days: int) -> PatternReport:
        """Return pattern statistics for consecutive days."""
        return analyze(await self.get_summaries(start_id, days))

    async def get_current_fasting_status(
        self, now_ms: int | None = None
    ) -> FastingStatus:
        """Return live fasting progress against the user's goal."""
        now = current_time_ms() if now_ms is None else now_ms
        recent = await self.store.query_by_time_range(
            now - self.lookback_hours * MS_PER_HOUR, now
        )
        goal_hours = self.settings_service.get_fasting_goal_hours()
        return current_fasting_status(
            last_qualifying_event(recent, self.policy), goal_hours, now_ms=now
        )


def get_daily_stats(summary: DailySummary) -> DailyStats:
    """Return gap statistics for a day. Ties keep the earliest gap."""
    gaps = summary.gaps
    shortest = None
    longest = None
    for gap in gaps:
        if shortest is None or gap.duration_ms < shortest.duration_ms:
            shortest = gap
        if longest is None or gap.duration_ms > longest.duration_ms:
            longest = gap
    average = sum(gap.duration_ms for gap in gaps) / len(gaps) if gaps else 0
    window = summary.fasting_window
    stats = DailyStats(
        shortest_gap=shortest,
        longest_gap=longest,
        average_gap=average,
        total_gaps=len(gaps),
        fasting_streak=int(window is not None and window.is_intermittent_fasting),
        total_intake_today=summary.total_entries,
    )
    _logger.debug(
        "Daily stats for %s: gaps=%s average=%s",
        summary.date,
        stats.total_gaps,
        format_duration(stats.average_gap),
    )
    return stats
