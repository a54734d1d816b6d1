"""Conversion between timestamps and local calendar days.

Every day-scoped computation goes through :class:`LocalDateResolver`. Days
are always resolved in the device's local timezone (or an explicitly
configured zone), never in UTC, so an intake at 23:30 local time stays on
that local day regardless of the UTC offset.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo


def current_time_ms() -> int:
    """Return the current time in milliseconds since the epoch."""
    return int(datetime.now(tz=UTC).timestamp() * 1000)


@dataclass(frozen=True)
class LocalDateResolver:
    """Resolves ``YYYY-MM-DD`` day identifiers and their timestamp bounds.

    ``tz`` of None means the host's local timezone.
    """

    tz: tzinfo | None = None

    def local_date_id(self, timestamp: int) -> str:
        """Return the local calendar day containing the timestamp."""
        return self._to_local(timestamp).date().isoformat()

    def today_id(self, now_ms: int | None = None) -> str:
        """Return today's day identifier."""
        return self.local_date_id(current_time_ms() if now_ms is None else now_ms)

    def yesterday_id(self, now_ms: int | None = None) -> str:
        """Return yesterday's day identifier."""
        return self.offset_id(self.today_id(now_ms), -1)

    def offset_id(self, date_id: str, delta_days: int) -> str:
        """Shift a day identifier by whole calendar days."""
        return (date.fromisoformat(date_id) + timedelta(days=delta_days)).isoformat()

    def day_bounds(self, date_id: str) -> tuple[int, int]:
        """Return ``(start, end)`` timestamps of a local day, both inclusive.

        ``end`` is one millisecond before the next local midnight, which is
        midnight plus 24h minus 1ms except on days with a DST transition.
        """
        day = date.fromisoformat(date_id)
        start = self._local_midnight_ms(day)
        next_start = self._local_midnight_ms(day + timedelta(days=1))
        return start, next_start - 1

    def date_range(self, start_id: str, days: int) -> list[str]:
        """Return ``days`` consecutive day identifiers starting at ``start_id``."""
        return [self.offset_id(start_id, offset) for offset in range(days)]

    def is_today(self, date_id: str, now_ms: int | None = None) -> bool:
        return date_id == self.today_id(now_ms)

    def is_yesterday(self, date_id: str, now_ms: int | None = None) -> bool:
        return date_id == self.yesterday_id(now_ms)

    def _to_local(self, timestamp: int) -> datetime:
        instant = datetime.fromtimestamp(timestamp / 1000, tz=UTC)
        if self.tz is None:
            return instant.astimezone()
        return instant.astimezone(self.tz)

    def _local_midnight_ms(self, day: date) -> int:
        if self.tz is None:
            midnight = datetime(day.year, day.month, day.day).astimezone()
        else:
            midnight = datetime(day.year, day.month, day.day, tzinfo=self.tz)
        return int(midnight.timestamp()) * 1000
