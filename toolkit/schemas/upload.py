"""Upload schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from toolkit.utils.sniff import mime_essence

if TYPE_CHECKING:
    from toolkit.config import Settings


class UploadedFile(BaseModel):
    """Result record for one file written to disk."""

    model_config = ConfigDict(frozen=True)

    original_name: str
    new_name: str
    size_bytes: int = Field(ge=0)
    content_type: str = "application/octet-stream"


class UploadConfiguration(BaseModel):
    """Policy applied to a single ingestion call."""

    model_config = ConfigDict(frozen=True)

    allowed_mime_types: frozenset[str] = frozenset()
    max_file_size: int = Field(default=0, ge=0)
    rename: bool = True
    skip_disallowed: bool = False
    cleanup_on_error: bool = False

    @field_validator("allowed_mime_types", mode="before")
    @classmethod
    def normalize_mime_types(cls, v):
        """Store allow-list entries as lower-cased MIME essences."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(mime_essence(item) for item in v if item and item.strip())

    def allows(self, content_type: str) -> bool:
        """Check a sniffed type against the allow-list (empty allows all)."""
        if not self.allowed_mime_types:
            return True
        return mime_essence(content_type) in self.allowed_mime_types

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> UploadConfiguration:
        values = {
            "allowed_mime_types": settings.allowed_mime_types,
            "max_file_size": settings.max_file_size,
            "rename": settings.rename_uploads,
        }
        values.update(overrides)
        return cls(**values)
