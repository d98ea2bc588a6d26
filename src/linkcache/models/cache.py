from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

from linkcache.timeframe import ensure_aware

CACHE_VERSION = 2


class LinkType(StrEnum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class LinkObservation(BaseModel):
    """One occurrence of an internal link in a scanned document."""

    source: str  # Referencing document or element
    current_path: str  # File being scanned when the link was found
    line: int | None = None
    base_url: str | None = None
    found: bool | None = None  # None until resolution has been attempted

    @model_serializer(mode="wrap")
    def _omit_unresolved_found(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if data.get("found") is None:
            data.pop("found", None)
        return data


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    checked_at: datetime = Field(alias="time")

    @field_validator("checked_at")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class InternalRecord(_Record):
    """Cached state of an internal link: when it was checked and where it occurs."""

    observations: list[LinkObservation] = Field(default_factory=list, alias="metadata")


class ExternalRecord(_Record):
    """Result of the last network check of an external link."""

    status: int | None = None
    message: str | None = None
    # Files currently referencing the URL; replaced on every update
    filenames: list[str] = Field(default_factory=list, alias="metadata")


class CacheDocument(BaseModel):
    """Versioned on-disk record of checked internal and external links."""

    version: int = CACHE_VERSION
    internal: dict[str, InternalRecord] = {}
    external: dict[str, ExternalRecord] = {}

    @classmethod
    def empty(cls) -> CacheDocument:
        return cls(version=CACHE_VERSION)

    @property
    def is_empty(self) -> bool:
        return not self.internal and not self.external

    def records(self, link_type: LinkType) -> dict[str, InternalRecord] | dict[str, ExternalRecord]:
        if link_type == LinkType.INTERNAL:
            return self.internal
        return self.external

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
