"""Console entry point.

Loads settings, configures structlog and opens the cache, then logs a
summary of what is cached and how much of it has expired. Used to
inspect a cache directory without running a full link check.
"""

from __future__ import annotations

import logging
import sys
from typing import cast

import structlog
from pydantic import ValidationError

from linkcache import __version__
from linkcache.cache import LinkCache, open_cache
from linkcache.config import Settings
from linkcache.errors import InvalidTimeframeError

log = structlog.get_logger()


def setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout stays free for whatever the embedding checker prints
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def report_status(cache: LinkCache) -> dict[str, int]:
    """Count cached records per type and those outside the timeframe."""
    document = cache.document
    expired = sum(
        1
        for records in (document.internal, document.external)
        for record in records.values()
        if not cache.within_timeframe(record.checked_at)
    )
    return {
        "internal": len(document.internal),
        "external": len(document.external),
        "expired": expired,
    }


def main() -> int:
    try:
        settings = Settings()
    except ValidationError as exc:
        log.error("cache_config_error", error=str(exc))
        return 1

    setup_logging(settings)

    try:
        cache = open_cache(settings.cache)
    except InvalidTimeframeError as exc:
        log.error("cache_config_error", code=exc.code, error=exc.message)
        return 1

    if not cache.enabled:
        log.info("cache_disabled", version=__version__)
        return 0
    active = cast(LinkCache, cache)

    log.info(
        "cache_status",
        version=__version__,
        path=str(active.cache_file),
        cutoff=active.context.cutoff.isoformat(),
        **report_status(active),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
