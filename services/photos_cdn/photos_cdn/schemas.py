"""
Photos CDN — Pydantic V2 value objects passed between the pipeline steps.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from photos_cdn.constants import (
    DEFAULT_QUALITY,
    DEFAULT_VARIANT,
    DEFAULT_WIDTH,
    MAX_QUALITY,
    MIN_QUALITY,
    Variant,
)


# ── Base ─────────────────────────────────────────────────────────────────────

class _Base(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


# ── Request ──────────────────────────────────────────────────────────────────

class ImageRequest(_Base):
    """A validated request for a presentation variant of an original photo."""
    original_path: str = Field(min_length=1, description="Source key, no leading slash")
    variant: Variant = DEFAULT_VARIANT
    requested_width: int = DEFAULT_WIDTH
    requested_quality: int = DEFAULT_QUALITY


class ResolvedVariantParams(_Base):
    """Normalized geometry and quality actually used for transcoding."""
    width: int = Field(ge=0)
    quality: int = Field(ge=MIN_QUALITY, le=MAX_QUALITY)


# ── Transcoding ──────────────────────────────────────────────────────────────

class SourceInfo(_Base):
    """Descriptive metadata of an original, as reported by inspection."""
    format: str = "unknown"
    dimensions: str = "unknown"   # e.g. 3008x4000
    color_depth: str = "unknown"  # e.g. 8-bit
    color_space: str = "unknown"  # e.g. sRGB

    def describe(self, original_path: str) -> str:
        """Value of the ``original`` object metadata on a stored variant."""
        return f"/{original_path} {self.format} {self.dimensions} {self.color_depth} {self.color_space}"


class CachedVariant(_Base):
    """A transcoded variant ready to be written to the resized bucket."""
    key: str
    body: bytes
    content_type: str
    cache_control: str
    metadata: dict[str, str] = Field(default_factory=dict)
