"""Cross-day eating pattern statistics."""

from collections.abc import Sequence

from gutrest.domain.timeline import DailySummary, PatternReport
from gutrest.services.durations import MS_PER_HOUR, format_duration, round_half_up
from gutrest.services.gaps import calculate_eating_window

# Consistency loses 20 points per unit of variance in daily meal counts.
# This is a bounded heuristic for display, not a calibrated statistic.
CONSISTENCY_VARIANCE_PENALTY = 20


def analyze(summaries: Sequence[DailySummary]) -> PatternReport:
    """Summarise eating windows, fasting and regularity over several days."""
    if not summaries:
        return PatternReport(
            average_eating_window=0,
            average_eating_window_formatted=format_duration(0),
            average_meals_per_day=0,
            average_fasting_hours=0,
            intermittent_fasting_days=0,
            intermittent_fasting_percentage=0,
            consistency_score=0,
            current_fasting_streak=0,
            total_days_analyzed=0,
        )

    eating_windows = [
        calculate_eating_window(summary.entries)
        for summary in summaries
        if summary.total_entries >= 2
    ]
    fasting_windows = [
        summary.fasting_window
        for summary in summaries
        if summary.fasting_window is not None
    ]
    intermittent_days = sum(
        1 for window in fasting_windows if window.is_intermittent_fasting
    )
    meal_counts = [summary.total_entries for summary in summaries]

    average_eating_window = _mean(eating_windows)
    average_fasting_ms = _mean([window.duration_ms for window in fasting_windows])
    return PatternReport(
        average_eating_window=average_eating_window,
        average_eating_window_formatted=format_duration(average_eating_window),
        average_meals_per_day=round_half_up(_mean(meal_counts), 1),
        average_fasting_hours=round_half_up(average_fasting_ms / MS_PER_HOUR, 1),
        intermittent_fasting_days=intermittent_days,
        intermittent_fasting_percentage=int(
            round_half_up(intermittent_days / len(summaries) * 100)
        ),
        consistency_score=int(round_half_up(consistency_score(meal_counts))),
        current_fasting_streak=calculate_fasting_streak(summaries),
        total_days_analyzed=len(summaries),
    )


def consistency_score(meal_counts: Sequence[int]) -> float:
    """Return ``max(0, 100 - variance * 20)`` over daily meal counts."""
    if not meal_counts:
        return 0.0
    mean = _mean(meal_counts)
    variance = sum((count - mean) ** 2 for count in meal_counts) / len(meal_counts)
    return max(0.0, 100 - variance * CONSISTENCY_VARIANCE_PENALTY)


def calculate_fasting_streak(summaries: Sequence[DailySummary]) -> int:
    """Count consecutive most-recent days whose fast reached the IF threshold."""
    streak = 0
    for summary in sorted(summaries, key=lambda item: item.date, reverse=True):
        window = summary.fasting_window
        if window is None or not window.is_intermittent_fasting:
            break
        streak += 1
    return streak


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)
