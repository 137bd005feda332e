"""
Request parser — turns a path and query string into an ``ImageRequest``.

    /2023-12-10/1000013814-01.jpeg?f=thumb&w=500&q=8

Query parameters:
  f — variant: raw (default), thumb, placeholder, scaled
  w — requested width in pixels (default 250), thumb/scaled only
  q — requested quality 1–10 (default 6), thumb/scaled only

Validation happens here, before any storage access.
"""
from __future__ import annotations

from urllib.parse import parse_qs

from photos_cdn.constants import (
    DEFAULT_QUALITY,
    DEFAULT_VARIANT,
    DEFAULT_WIDTH,
    Variant,
)
from photos_cdn.exceptions import InvalidPath, InvalidQuality, InvalidVariant, InvalidWidth
from photos_cdn.schemas import ImageRequest


def parse_request(path: str, query_string: str = "") -> ImageRequest:
    """Validate an incoming request. ``path`` must already be URL-decoded."""
    query = {k: v[0] for k, v in parse_qs(query_string, keep_blank_values=True).items()}

    raw_variant = query.get("f", DEFAULT_VARIANT.value)
    try:
        variant = Variant(raw_variant)
    except ValueError:
        raise InvalidVariant(raw_variant)

    original_path = path[1:] if path.startswith("/") else path
    if not original_path or original_path.endswith("/"):
        raise InvalidPath()

    if variant is Variant.RAW or variant is Variant.PLACEHOLDER:
        # Geometry is fixed (placeholder) or irrelevant (raw)
        return ImageRequest(original_path=original_path, variant=variant)

    width = _parse_int(query.get("w"), DEFAULT_WIDTH)
    if width is None or width < 0:
        raise InvalidWidth(query.get("w"))
    quality = _parse_int(query.get("q"), DEFAULT_QUALITY)
    if quality is None:
        raise InvalidQuality(query.get("q"))

    return ImageRequest(
        original_path=original_path,
        variant=variant,
        requested_width=width,
        requested_quality=quality,
    )


def _parse_int(value: str | None, default: int) -> int | None:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return None
