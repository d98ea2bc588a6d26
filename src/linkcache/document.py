"""Loading and saving the cache document.

Unusable cache content is never an error. A missing or blank file, invalid
JSON, a legacy file without a ``version`` key, a different version (older
or newer) and content that fails validation all yield a fresh empty
document. The checker then re-validates everything, which is slower but
always correct. No migration between versions is attempted.
"""

from __future__ import annotations

import json
import os
from contextlib import suppress
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from linkcache.models.cache import CACHE_VERSION, CacheDocument

if TYPE_CHECKING:
    from pathlib import Path

log = structlog.get_logger()


def load_document(path: Path) -> CacheDocument:
    """Read the cache document at ``path``, or return an empty one."""
    if not path.is_file():
        return CacheDocument.empty()

    contents = path.read_bytes()
    if not contents.strip():
        return CacheDocument.empty()

    try:
        raw = json.loads(contents.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        log.warning("cache_discarded", reason="invalid_json", path=str(path), exc_info=True)
        return CacheDocument.empty()

    if not isinstance(raw, dict):
        log.warning("cache_discarded", reason="not_an_object", path=str(path))
        return CacheDocument.empty()

    version = raw.get("version")
    if version is None:
        log.info("cache_discarded", reason="legacy_format", path=str(path))
        return CacheDocument.empty()
    if type(version) is not int or version != CACHE_VERSION:
        # Newer versions are discarded too; an older engine cannot read them.
        log.info(
            "cache_discarded",
            reason="version_mismatch",
            path=str(path),
            found_version=version,
            expected_version=CACHE_VERSION,
        )
        return CacheDocument.empty()

    for section in ("internal", "external"):
        entries = raw.get(section) or {}
        if not isinstance(entries, dict):
            log.warning("cache_discarded", reason="invalid_content", path=str(path))
            return CacheDocument.empty()
        raw[section] = {str(url): record for url, record in entries.items()}

    try:
        document = CacheDocument.model_validate(raw)
    except ValidationError:
        log.warning("cache_discarded", reason="invalid_content", path=str(path), exc_info=True)
        return CacheDocument.empty()

    log.debug(
        "cache_loaded",
        path=str(path),
        internal=len(document.internal),
        external=len(document.external),
    )
    return document


def save_document(document: CacheDocument, path: Path) -> None:
    """Persist ``document`` to ``path``, replacing any previous file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        tmp_path.write_text(document.to_json(), encoding="utf-8")
        os.replace(tmp_path, path)
    finally:
        with suppress(OSError):
            tmp_path.unlink(missing_ok=True)

    log.debug(
        "cache_saved",
        path=str(path),
        internal=len(document.internal),
        external=len(document.external),
    )
