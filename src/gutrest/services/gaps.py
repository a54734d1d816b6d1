"""Gap calculations between consecutive meal events."""

import logging
from collections.abc import Sequence

from gutrest.domain.events import MealEvent
from gutrest.domain.timeline import TimeGap
from gutrest.services.dates import current_time_ms
from gutrest.services.durations import MS_PER_HOUR, format_duration

_logger = logging.getLogger(__name__)

DEFAULT_SIGNIFICANT_GAP_HOURS = 3
DEFAULT_NEXT_MEAL_GAP_HOURS = 4


def calculate_gaps(events: Sequence[MealEvent]) -> list[TimeGap]:
    """Return the gaps between consecutive events in timestamp order.

    The input is copied and sorted, so callers may pass events in any order.
    """
    if len(events) < 2:
        return []
    ordered = sorted(events, key=lambda event: event.timestamp)
    gaps = []
    for current, following in zip(ordered, ordered[1:]):
        duration_ms = following.timestamp - current.timestamp
        gaps.append(
            TimeGap(
                start_time=current.timestamp,
                end_time=following.timestamp,
                duration_ms=duration_ms,
                duration_formatted=format_duration(duration_ms),
            )
        )
    _logger.debug("Calculated %s gaps for %s entries", len(gaps), len(events))
    return gaps


def calculate_eating_window(events: Sequence[MealEvent]) -> int:
    """Return the span between the first and last event, or 0 for fewer than two."""
    if len(events) < 2:
        return 0
    timestamps = [event.timestamp for event in events]
    return max(timestamps) - min(timestamps)


def is_significant_gap(
    gap: TimeGap, threshold_hours: float = DEFAULT_SIGNIFICANT_GAP_HOURS
) -> bool:
    """Return True when the gap is at least ``threshold_hours`` long."""
    return gap.duration_ms >= threshold_hours * MS_PER_HOUR


def time_until_next_meal(
    last_event: MealEvent,
    target_gap_hours: float = DEFAULT_NEXT_MEAL_GAP_HOURS,
    now_ms: int | None = None,
) -> int:
    """Return milliseconds until the next recommended intake, never negative."""
    now = current_time_ms() if now_ms is None else now_ms
    next_meal_at = last_event.timestamp + int(target_gap_hours * MS_PER_HOUR)
    return max(0, next_meal_at - now)
