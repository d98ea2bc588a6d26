"""Reconciliation of discovered links against the cache document.

For one link type at a time, ``detect_changes`` compares the URLs found in
this run with the cached records and returns the URLs that need a check:

* additions: found URLs with no cached record
* expired: cached URLs whose last check falls outside ``[cutoff, now]``

As a side effect, cached URLs of the same shape that were not found are
removed from the document. An empty scan removes nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import structlog

from linkcache.models.cache import InternalRecord, LinkType
from linkcache.timeframe import within_timeframe
from linkcache.urls import unescape_url, url_matches_type

if TYPE_CHECKING:
    from linkcache.models.cache import CacheDocument, ExternalRecord
    from linkcache.state import RunContext

log = structlog.get_logger()


def detect_changes(
    found_urls: Mapping[str, Any] | Iterable[str],
    link_type: LinkType | str,
    document: CacheDocument,
    context: RunContext,
) -> dict[str, Any]:
    """Return the URLs needing a check, pruning records no longer found.

    ``found_urls`` maps each URL to the caller's payload for it (typically
    the places it was seen); a plain iterable of URLs is accepted and maps
    to ``None``. Expired entries carry their cached metadata as payload.
    """
    found = _as_mapping(found_urls)
    if not found:
        return {}

    link_type = LinkType(link_type)
    records = document.records(link_type)

    urls_to_check = _determine_additions(found, link_type, records)
    _determine_deletions(found, link_type, records)
    urls_to_check.update(_determine_expired(link_type, records, context))

    return urls_to_check


def _as_mapping(found_urls: Mapping[str, Any] | Iterable[str]) -> Mapping[str, Any]:
    if isinstance(found_urls, Mapping):
        return found_urls
    return dict.fromkeys(found_urls)


def _determine_additions(
    found: Mapping[str, Any],
    link_type: LinkType,
    records: Mapping[str, InternalRecord | ExternalRecord],
) -> dict[str, Any]:
    additions: dict[str, Any] = {}
    for url, payload in found.items():
        if url in records:
            continue
        log.debug("cache_link_added", url=url, link_type=link_type.value)
        additions[url] = payload

    log.info("cache_links_added", link_type=link_type.value, count=len(additions))
    return additions


def _determine_deletions(
    found: Mapping[str, Any],
    link_type: LinkType,
    records: dict[str, InternalRecord] | dict[str, ExternalRecord],
) -> None:
    deletions = 0
    for key in list(records):
        url = unescape_url(key)
        if url in found:
            continue
        # Keys shaped like the other partition are pruned by that partition's pass
        if not url_matches_type(url, link_type):
            continue
        log.debug("cache_link_removed", url=url, link_type=link_type.value)
        del records[key]
        deletions += 1

    log.info("cache_links_removed", link_type=link_type.value, count=deletions)


def _determine_expired(
    link_type: LinkType,
    records: Mapping[str, InternalRecord | ExternalRecord],
    context: RunContext,
) -> dict[str, Any]:
    expired: dict[str, Any] = {}
    for url, record in records.items():
        if within_timeframe(record.checked_at, context.cutoff, context.now):
            continue
        expired[url] = cached_metadata(record)

    if expired:
        log.info("cache_links_expired", link_type=link_type.value, count=len(expired))
    return expired


def cached_metadata(record: InternalRecord | ExternalRecord) -> list[Any]:
    """Return a copy of the metadata list stored on ``record``."""
    if isinstance(record, InternalRecord):
        return list(record.observations)
    return list(record.filenames)
