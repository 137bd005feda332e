"""
Photos CDN — variant resolution, pure business logic.

Zero FastAPI imports. Receives the validated request and its collaborators
via parameters and returns the location to redirect to, or raises one of the
domain exceptions in ``photos_cdn.exceptions``.

    raw          → original location, no storage access
    cache hit    → resized location, nothing transcoded
    cache miss   → fetch original → transcode → store → resized location

There is no locking between concurrent requests for the same variant.  Both
transcode and write; the bytes are identical so the last write wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from photos_cdn import keys
from photos_cdn.config import Settings
from photos_cdn.constants import CACHE_FOR_A_YEAR, VARIANT_CONTENT_TYPE, Variant
from photos_cdn.exceptions import InvalidWidth, OriginalNotFound
from photos_cdn.schemas import CachedVariant, ImageRequest
from photos_cdn.storage import S3Store, make_s3_client
from photos_cdn.transcoder import Transcoder, get_transcoder

logger = logging.getLogger(__name__)


@dataclass
class ResizeContext:
    """Per-process collaborators, built once and shared by every request."""

    settings: Settings
    photos: S3Store
    resized: S3Store
    transcoder: Transcoder


def build_context(settings: Settings) -> ResizeContext:
    client = make_s3_client(settings)
    lenient = settings.treat_store_errors_as_missing
    return ResizeContext(
        settings=settings,
        photos=S3Store(client, settings.photos_bucket, missing_on_error=lenient),
        resized=S3Store(client, settings.resized_bucket, missing_on_error=lenient),
        transcoder=get_transcoder(settings),
    )


def resolve(request: ImageRequest, ctx: ResizeContext) -> str:
    """Return the URL the client should be redirected to."""
    settings = ctx.settings

    if request.variant is Variant.RAW:
        return keys.original_location(request.original_path, settings)

    params, key = keys.derive(
        request.original_path,
        request.variant,
        request.requested_width,
        request.requested_quality,
    )
    if params.width == 0:
        raise InvalidWidth(request.requested_width)

    location = keys.variant_location(key, settings)

    if ctx.resized.exists(key):
        logger.info("Resized variant found: %s", key)
        return location
    logger.info("Resized variant does not exist: %s", key)

    original = ctx.photos.fetch(request.original_path)
    if original is None:
        raise OriginalNotFound(request.original_path)

    body, info = ctx.transcoder.transcode(original, request.variant, params)
    logger.info(
        "Transcoded %s (%s %s) to %s: %d bytes",
        request.original_path, info.format, info.dimensions, key, len(body),
    )

    ctx.resized.store(
        CachedVariant(
            key=key,
            body=body,
            content_type=VARIANT_CONTENT_TYPE,
            cache_control=CACHE_FOR_A_YEAR,
            metadata={"original": info.describe(request.original_path)},
        ),
        attempts=settings.store_write_attempts,
    )
    return location
