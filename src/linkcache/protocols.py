"""Protocol interfaces for swappable components.

The link checker talks to the cache through ``LinkCacheProtocol`` only.
Two implementations satisfy it:
- ``LinkCache`` when caching is configured
- ``NullLinkCache`` when it is not; every call is a no-op or pass-through
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

    from linkcache.models.cache import LinkObservation, LinkType


class LinkCacheProtocol(Protocol):
    """Interface of the link-check cache used by the checker."""

    @property
    def enabled(self) -> bool: ...

    @property
    def is_empty(self) -> bool: ...

    def within_timeframe(self, timestamp: datetime | str | None) -> bool: ...

    def add_internal(
        self,
        url: str,
        observation: LinkObservation | Mapping[str, Any],
        found: bool | None = None,
    ) -> None: ...

    def add_external(
        self,
        url: str,
        filenames: Iterable[str],
        status: int | None,
        message: str | None,
    ) -> None: ...

    def retrieve_urls(
        self, urls: Mapping[str, Any] | Iterable[str], link_type: LinkType | str
    ) -> Mapping[str, Any] | Iterable[str]: ...

    def write(self) -> None: ...
