"""Human-readable formatting of millisecond durations."""

import math
import re

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

_DAYS_PATTERN = re.compile(r"(\d+)d")
_HOURS_PATTERN = re.compile(r"(\d+)h")
_MINUTES_PATTERN = re.compile(r"(\d+)m")


def format_duration(duration_ms: float) -> str:
    """Format a duration as ``"3h 20m"``, ``"45m"`` or ``"2h"``.

    Negative input is treated as zero and partial minutes are truncated.
    """
    if duration_ms < 0:
        return "0m"
    total_minutes = int(duration_ms // MS_PER_MINUTE)
    hours, minutes = divmod(total_minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def format_long_duration(duration_ms: float) -> str:
    """Format a duration that may exceed a day, e.g. ``"1d 3h 20m"``."""
    if duration_ms < 0:
        return "0m"
    total_minutes = int(duration_ms // MS_PER_MINUTE)
    total_hours, minutes = divmod(total_minutes, 60)
    days, hours = divmod(total_hours, 24)
    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    return " ".join(parts) if parts else "0m"


def parse_duration(value: str) -> int:
    """Parse a formatted duration back to milliseconds.

    Each of the ``d``, ``h`` and ``m`` tokens is optional and may appear in
    any order; unrecognised text contributes nothing.
    """
    days = _first_number(_DAYS_PATTERN, value)
    hours = _first_number(_HOURS_PATTERN, value)
    minutes = _first_number(_MINUTES_PATTERN, value)
    return ((days * 24 + hours) * 60 + minutes) * MS_PER_MINUTE


def _first_number(pattern: re.Pattern[str], value: str) -> int:
    match = pattern.search(value)
    if match is None:
        return 0
    return int(match.group(1))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, unlike the built-in banker's rounding."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
