"""Tests for the pattern analyzer."""

from gutrest.domain.timeline import DailySummary, FastingWindow
from gutrest.services.patterns import (
    analyze,
    calculate_fasting_streak,
    consistency_score,
)
from tests.conftest import HOUR_MS, make_event

BASE = 1_700_000_000_000


def _window(hours: float) -> FastingWindow:
    duration_ms = int(hours * HOUR_MS)
    return FastingWindow(
        start_time=BASE - duration_ms,
        end_time=BASE,
        duration_ms=duration_ms,
        duration_formatted="",
        is_intermittent_fasting=duration_ms >= 16 * HOUR_MS,
    )


def _day(
    date: str, offsets_hours: list[float], window: FastingWindow | None = None
) -> DailySummary:
    entries = [
        make_event(BASE + int(offset * HOUR_MS), event_id=f"{date}-{i}")
        for i, offset in enumerate(offsets_hours)
    ]
    return DailySummary(date=date, entries=entries, fasting_window=window)


def test_analyze_empty_input() -> None:
    report = analyze([])

    assert report.total_days_analyzed == 0
    assert report.average_meals_per_day == 0
    assert report.average_eating_window == 0
    assert report.consistency_score == 0
    assert report.average_eating_window_formatted == "0m"


def test_analyze_mixed_days() -> None:
    summaries = [
        _day("2024-05-01", [0, 4, 8], _window(17)),
        _day("2024-05-02", [0, 6], _window(14)),
        _day("2024-05-03", [0]),
        _day("2024-05-04", []),
    ]

    report = analyze(summaries)

    assert report.total_days_analyzed == 4
    # Only days with two or more entries have an eating window: 8h and 6h.
    assert report.average_eating_window == 7 * HOUR_MS
    assert report.average_eating_window_formatted == "7h"
    assert report.average_meals_per_day == 1.5
    assert report.average_fasting_hours == 15.5
    assert report.intermittent_fasting_days == 1
    assert report.intermittent_fasting_percentage == 25
    # Counts 3, 2, 1, 0: variance 1.25, score 100 - 25.
    assert report.consistency_score == 75
    assert report.current_fasting_streak == 0


def test_consistency_score_is_bounded() -> None:
    assert consistency_score([3, 3, 3]) == 100
    assert consistency_score([0, 10]) == 0
    assert consistency_score([]) == 0


def test_fasting_streak_counts_trailing_intermittent_days() -> None:
    summaries = [
        _day("2024-05-03", [0], _window(16)),
        _day("2024-05-01", [0], _window(17)),
        _day("2024-05-02", [0], _window(12)),
        _day("2024-05-04", [0], _window(18)),
    ]

    assert calculate_fasting_streak(summaries) == 2
    assert calculate_fasting_streak([]) == 0
