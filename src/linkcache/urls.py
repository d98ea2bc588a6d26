"""URL helpers shared by the reconciliation passes.

Cache keys are stored unescaped. The checker may later act on the escaped
form, so a URL such as ``github.com/search?q=is:open`` and
``github.com/search?q=is%3Aopen`` are different keys to the cache even
though they name the same resource. Deletion compares the unescaped key
against the discovered set and keeps that behaviour as-is.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import unquote

if TYPE_CHECKING:
    from linkcache.models.cache import LinkType

# RFC 3986 scheme followed by a non-space character. Only the prefix is
# checked: unescaped keys may contain spaces further along.
_URI_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:\S")


def unescape_url(url: str) -> str:
    """Percent-decode ``url``. ``+`` is left alone."""
    return unquote(url)


def is_uri(url: str) -> bool:
    """Return True when ``url`` is a fully qualified URI (has a scheme)."""
    return _URI_RE.match(url) is not None


def url_matches_type(url: str, link_type: LinkType) -> bool:
    """True when the shape of ``url`` belongs to the ``link_type`` partition.

    Internal links are anything that is not a fully qualified URI; external
    links are fully qualified URIs.
    """
    if link_type == "internal":
        return not is_uri(url)
    return is_uri(url)
