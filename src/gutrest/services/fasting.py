"""Fasting window and live fasting status calculations."""

import logging
from collections.abc import Sequence

from gutrest.domain.categories import DEFAULT_FASTING_POLICY, FastingPolicy
from gutrest.domain.events import MealEvent
from gutrest.domain.timeline import FastingStatus, FastingWindow
from gutrest.services.dates import current_time_ms
from gutrest.services.durations import MS_PER_HOUR, format_duration, round_half_up

_logger = logging.getLogger(__name__)

# Fixed threshold for the overnight window flag. The live status uses the
# user's configurable goal instead.
INTERMITTENT_FASTING_HOURS = 16
MAX_FASTING_WINDOW_HOURS = 48
DEFAULT_FASTING_GOAL_HOURS = 16


def calculate_fasting_window(
    last_event_of_prior_day: MealEvent | None,
    first_event_of_this_day: MealEvent | None,
) -> FastingWindow | None:
    """Return the fast between two events, or None when it is not meaningful.

    Windows that are not positive or exceed 48 hours are rejected: they come
    from clock skew, edited entries or queries spanning several days.
    """
    if last_event_of_prior_day is None or first_event_of_this_day is None:
        _logger.debug("Cannot calculate fasting window: missing entries")
        return None
    start_time = last_event_of_prior_day.timestamp
    end_time = first_event_of_this_day.timestamp
    duration_ms = end_time - start_time
    if duration_ms <= 0 or duration_ms > MAX_FASTING_WINDOW_HOURS * MS_PER_HOUR:
        _logger.warning("Invalid fasting window duration: %s ms", duration_ms)
        return None
    return FastingWindow(
        start_time=start_time,
        end_time=end_time,
        duration_ms=duration_ms,
        duration_formatted=format_duration(duration_ms),
        is_intermittent_fasting=duration_ms >= INTERMITTENT_FASTING_HOURS * MS_PER_HOUR,
    )


def current_fasting_status(
    last_qualifying_event: MealEvent | None,
    goal_hours: float = DEFAULT_FASTING_GOAL_HOURS,
    now_ms: int | None = None,
) -> FastingStatus:
    """Return progress of the fast that started at the last qualifying event."""
    if last_qualifying_event is None:
        return _not_fasting(goal_hours)
    now = current_time_ms() if now_ms is None else now_ms
    current_fast_duration = now - last_qualifying_event.timestamp
    if current_fast_duration <= 0:
        # Entry logged for a future time.
        return _not_fasting(goal_hours)
    goal_ms = int(goal_hours * MS_PER_HOUR)
    time_to_goal = max(0, goal_ms - current_fast_duration)
    progress = 100.0
    if goal_ms > 0:
        progress = min(100.0, current_fast_duration / goal_ms * 100)
    return FastingStatus(
        is_currently_fasting=True,
        current_fast_duration=current_fast_duration,
        current_fast_formatted=format_duration(current_fast_duration),
        time_to_goal=time_to_goal,
        time_to_goal_formatted=format_duration(time_to_goal),
        goal_reached=current_fast_duration >= goal_ms,
        progress_percentage=int(round_half_up(progress)),
        goal_hours=goal_hours,
    )


def last_qualifying_event(
    events: Sequence[MealEvent], policy: FastingPolicy = DEFAULT_FASTING_POLICY
) -> MealEvent | None:
    """Return the latest event that breaks a fast."""
    qualifying = [event for event in events if policy.breaks_fast(event.category)]
    if not qualifying:
        return None
    return max(qualifying, key=lambda event: event.timestamp)


def first_qualifying_event(
    events: Sequence[MealEvent], policy: FastingPolicy = DEFAULT_FASTING_POLICY
) -> MealEvent | None:
    """Return the earliest event that breaks a fast."""
    qualifying = [event for event in events if policy.breaks_fast(event.category)]
    if not qualifying:
        return None
    return min(qualifying, key=lambda event: event.timestamp)


def _not_fasting(goal_hours: float) -> FastingStatus:
    return FastingStatus(
        is_currently_fasting=False,
        current_fast_duration=0,
        current_fast_formatted=format_duration(0),
        time_to_goal=0,
        time_to_goal_formatted=format_duration(0),
        goal_reached=False,
        progress_percentage=0,
        goal_hours=goal_hours,
    )
