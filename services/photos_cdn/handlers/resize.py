"""
AWS Lambda handler — Photos CDN resizer (function URL).

Invoked through a Lambda function URL:

  "rawPath": "/2023-12-10/1000013814-01.jpeg",
  "rawQueryString": "f=thumb&w=500&q=8"

Flow:
  1. Validates the variant (f), width (w) and quality (q).
  2. f=raw redirects to the original in the photos bucket.
  3. Otherwise HEADs the resized bucket; if the variant exists, redirects to it.
  4. Else downloads the original, transcodes it with ImageMagick, uploads the
     WebP to the resized bucket and redirects to it.

Environment variables:
  PHOTOS_BUCKET    — S3 bucket with the originals (read-only)
  RESIZED_BUCKET   — public S3 bucket for resized variants
  AWS_REGION       — AWS region (set by Lambda runtime)
  CONVERT_PATH / IDENTIFY_PATH — ImageMagick binaries (default /opt/bin/...)
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any
from urllib.parse import unquote

from photos_cdn import controller, responses
from photos_cdn.config import get_settings
from photos_cdn.service import ResizeContext, build_context

logger = logging.getLogger()
logger.setLevel(get_settings().log_level.upper())


@lru_cache(maxsize=1)
def get_context() -> ResizeContext:
    """Built on the first invocation and reused while the container is warm."""
    return build_context(get_settings())


def handler(event: dict, context: object) -> dict[str, Any]:
    """Lambda entry point — answers one function URL request."""
    path = unquote(event.get("rawPath", "/"))
    query_string = event.get("rawQueryString", "")
    try:
        return controller.handle(path, query_string, get_context())
    except Exception as exc:
        logger.exception("Unhandled error for %s?%s: %s", path, query_string, exc)
        return responses.internal_error()
