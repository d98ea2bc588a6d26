"""Timeframe parsing and expiry checks.

A timeframe is a duration such as ``6M``, ``2w``, ``3d`` or ``12h``. It is
turned into an absolute cutoff relative to the run's "now"; a cached
record is valid while its check time falls inside ``[cutoff, now]``.
"""

from __future__ import annotations

import calendar
import re
from datetime import UTC, datetime, timedelta

from linkcache.errors import InvalidTimeframeError

_TIMEFRAME_RE = re.compile(r"^(\d+)([Mwdh])$")


def parse_timeframe(timeframe: str, now: datetime) -> datetime:
    """Return the cutoff instant ``now`` minus the given timeframe.

    Months are calendar months: the day of month is kept and clamped to the
    last day of the target month (31 March minus 1M is 28/29 February).
    Weeks, days and hours are exact multiples of 24h and 1h.

    Raises ``InvalidTimeframeError`` for anything other than
    ``<integer><M|w|d|h>``.
    """
    match = _TIMEFRAME_RE.match(timeframe.strip()) if isinstance(timeframe, str) else None
    if match is None:
        raise InvalidTimeframeError(str(timeframe))

    measurement = int(match.group(1))
    unit = match.group(2)

    try:
        if unit == "M":
            return _months_ago(now, measurement)
        if unit == "w":
            return now - timedelta(weeks=measurement)
        if unit == "d":
            return now - timedelta(days=measurement)
        return now - timedelta(hours=measurement)
    except (OverflowError, ValueError) as exc:
        # Cutoff falls outside the representable datetime range.
        raise InvalidTimeframeError(timeframe) from exc


def within_timeframe(
    timestamp: datetime | str | None, cutoff: datetime, now: datetime
) -> bool:
    """True iff ``cutoff <= timestamp <= now``.

    ``None`` and strings that are not ISO 8601 are never within.
    """
    if timestamp is None:
        return False
    if isinstance(timestamp, str):
        try:
            timestamp = datetime.fromisoformat(timestamp)
        except ValueError:
            # Unreadable timestamps count as expired so the link is rechecked
            return False
    return cutoff <= ensure_aware(timestamp) <= now


def ensure_aware(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _months_ago(now: datetime, months: int) -> datetime:
    total = now.year * 12 + (now.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)
