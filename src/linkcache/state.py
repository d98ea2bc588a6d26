"""Run-scoped context.

A checking run captures "now" once. Every record written and every expiry
decision made during the run uses that instant, so a run is
deterministic and tests can inject a fixed clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from linkcache.timeframe import ensure_aware, parse_timeframe


@dataclass(frozen=True)
class RunContext:
    """The instant a run started and the oldest check time still considered valid."""

    now: datetime
    cutoff: datetime

    @classmethod
    def start(cls, timeframe: str, now: datetime | None = None) -> RunContext:
        """Fix "now" and derive the cutoff. Raises ``InvalidTimeframeError``."""
        now = ensure_aware(now) if now is not None else datetime.now(UTC)
        return cls(now=now, cutoff=parse_timeframe(timeframe, now))
