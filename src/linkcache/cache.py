"""Link-check cache.

``open_cache`` is the single entry point. With a cache configuration it
returns a ``LinkCache`` bound to the document on disk and to the run's
clock; without one it returns a ``NullLinkCache`` so the checker can call
the same methods unconditionally.

Typical run::

    cache = open_cache(settings.cache)
    to_check = cache.retrieve_urls(external_urls, LinkType.EXTERNAL)
    ...  # check to_check, then cache.add_external(...) per result
    cache.write()
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from linkcache.document import load_document, save_document
from linkcache.models.cache import ExternalRecord, InternalRecord, LinkObservation
from linkcache.reconcile import detect_changes
from linkcache.state import RunContext
from linkcache.timeframe import within_timeframe

if TYPE_CHECKING:
    from datetime import datetime

    from linkcache.config import CacheSettings
    from linkcache.models.cache import CacheDocument, LinkType
    from linkcache.protocols import LinkCacheProtocol

log = structlog.get_logger()


def open_cache(
    settings: CacheSettings | None, *, now: datetime | None = None
) -> LinkCacheProtocol:
    """Create the cache for one checking run.

    ``settings`` of ``None`` disables caching. Otherwise the storage
    directory is created if needed and the cache file loaded. Raises
    ``InvalidTimeframeError`` when the configured timeframe is malformed.
    """
    if settings is None:
        return NullLinkCache()

    context = RunContext.start(settings.timeframe, now)

    storage_dir = Path(settings.storage_dir)
    storage_dir.mkdir(parents=True, exist_ok=True)
    cache_file = storage_dir / settings.cache_file

    return LinkCache(load_document(cache_file), context, cache_file)


class LinkCache:
    """Cache backed by a JSON document, implementing LinkCacheProtocol."""

    enabled = True

    def __init__(self, document: CacheDocument, context: RunContext, cache_file: Path) -> None:
        self.document = document
        self.context = context
        self.cache_file = cache_file

    @property
    def storage_dir(self) -> Path:
        return self.cache_file.parent

    @property
    def is_empty(self) -> bool:
        return self.document.is_empty

    def within_timeframe(self, timestamp: datetime | str | None) -> bool:
        return within_timeframe(timestamp, self.context.cutoff, self.context.now)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def add_internal(
        self,
        url: str,
        observation: LinkObservation | Mapping[str, Any],
        found: bool | None = None,
    ) -> None:
        """Append one occurrence of an internal link.

        The record is created with this run's timestamp on first sight;
        earlier observations are kept.
        """
        if not isinstance(observation, LinkObservation):
            observation = LinkObservation.model_validate(observation)

        record = self.document.internal.get(url)
        if record is None:
            record = InternalRecord(checked_at=self.context.now)
            self.document.internal[url] = record

        record.observations.append(observation.model_copy(update={"found": found}))

    def add_external(
        self,
        url: str,
        filenames: Iterable[str],
        status: int | None,
        message: str | None,
    ) -> None:
        """Record the check result of an external link.

        ``status`` and ``message`` are stored when the record is created and
        left as they are afterwards. ``filenames`` always replaces the
        referencing set.
        """
        record = self.document.external.get(url)
        if record is None:
            record = ExternalRecord(checked_at=self.context.now, status=status, message=message)
            self.document.external[url] = record

        record.filenames = list(filenames)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def detect_url_changes(
        self, found_urls: Mapping[str, Any] | Iterable[str], link_type: LinkType | str
    ) -> dict[str, Any]:
        return detect_changes(found_urls, link_type, self.document, self.context)

    def retrieve_urls(
        self, urls: Mapping[str, Any] | Iterable[str], link_type: LinkType | str
    ) -> Mapping[str, Any] | Iterable[str]:
        """Return the subset of ``urls`` that needs checking this run.

        While nothing is cached every URL needs checking and ``urls`` is
        returned as given.
        """
        if self.is_empty:
            return urls
        return self.detect_url_changes(urls, link_type)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def write(self) -> None:
        save_document(self.document, self.cache_file)
        log.info(
            "cache_written",
            path=str(self.cache_file),
            internal=len(self.document.internal),
            external=len(self.document.external),
        )


class NullLinkCache:
    """Stand-in used when caching is disabled. Nothing is stored or pruned."""

    enabled = False
    is_empty = True

    def within_timeframe(self, timestamp: datetime | str | None) -> bool:
        return False

    def add_internal(
        self,
        url: str,
        observation: LinkObservation | Mapping[str, Any],
        found: bool | None = None,
    ) -> None:
        return None

    def add_external(
        self,
        url: str,
        filenames: Iterable[str],
        status: int | None,
        message: str | None,
    ) -> None:
        return None

    def retrieve_urls(
        self, urls: Mapping[str, Any] | Iterable[str], link_type: LinkType | str
    ) -> Mapping[str, Any] | Iterable[str]:
        return urls

    def write(self) -> None:
        return None
