from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_TIMEFRAME = "INVALID_TIMEFRAME"


class LinkCacheError(Exception):
    """Base class for failures the cache reports to its caller.

    Corrupt or incompatible cache files are not errors: they are discarded
    and replaced with an empty document. Only conditions that leave the
    cache unable to make decisions are raised.
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class InvalidTimeframeError(LinkCacheError, ValueError):
    """Raised when a timeframe string is not ``<integer><M|w|d|h>``."""

    def __init__(self, timeframe: str) -> None:
        super().__init__(
            ErrorCode.INVALID_TIMEFRAME,
            f"{timeframe!r} is not a valid timeframe; expected <integer><M|w|d|h>",
        )
        self.timeframe = timeframe
