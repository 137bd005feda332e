"""
Cache key derivation — pure functions, no I/O.

A resized variant of ``2023-12-10/1000013814-01.jpeg`` requested as
``?f=thumb&w=500&q=8`` lives at::

    2023-12-10/1000013814-01.thumb-500-8.webp

in the resized bucket.  Identical inputs always produce the identical key, so
the key doubles as the cache identity for the lookup.
"""
from __future__ import annotations

import posixpath

from photos_cdn.config import Settings
from photos_cdn.constants import (
    MAX_QUALITY,
    MIN_QUALITY,
    PLACEHOLDER_QUALITY,
    PLACEHOLDER_WIDTH,
    VARIANT_EXTENSION,
    WIDTH_STEP,
    Variant,
)
from photos_cdn.schemas import ResolvedVariantParams
from shared.utils.s3 import object_url, prefixed_url


def resolve_params(
    variant: Variant,
    requested_width: int,
    requested_quality: int,
) -> ResolvedVariantParams:
    """Normalize the requested width and quality for ``variant``.

    Widths are quantized down to a multiple of 250, so anything below 250
    resolves to 0.  Callers decide what to do with a zero width.
    """
    if variant is Variant.PLACEHOLDER:
        return ResolvedVariantParams(width=PLACEHOLDER_WIDTH, quality=PLACEHOLDER_QUALITY)
    width = (requested_width // WIDTH_STEP) * WIDTH_STEP
    quality = min(MAX_QUALITY, max(MIN_QUALITY, requested_quality))
    return ResolvedVariantParams(width=width, quality=quality)


def cache_key(original_path: str, variant: Variant, params: ResolvedVariantParams) -> str:
    """Key of the resized variant in the resized bucket."""
    directory, filename = posixpath.split(original_path)
    basename, _ext = posixpath.splitext(filename)
    name = f"{basename}.{variant.value}-{params.width}-{params.quality}.{VARIANT_EXTENSION}"
    return f"{directory}/{name}" if directory else name


def derive(
    original_path: str,
    variant: Variant,
    requested_width: int,
    requested_quality: int,
) -> tuple[ResolvedVariantParams, str]:
    """Return ``(params, cache_key)`` for a non-raw request."""
    if variant is Variant.RAW:
        raise ValueError("raw requests are served from the original location")
    params = resolve_params(variant, requested_width, requested_quality)
    return params, cache_key(original_path, variant, params)


def original_location(original_path: str, settings: Settings) -> str:
    # The photos bucket name contains dots, which rules out virtual-hosted URLs
    return object_url(settings.photos_bucket, settings.aws_region, original_path, path_style=True)


def variant_location(key: str, settings: Settings) -> str:
    if settings.public_base_url:
        return prefixed_url(settings.public_base_url, key)
    return object_url(settings.resized_bucket, settings.aws_region, key)
