"""
Photos CDN — controller layer.

Parses the request, runs the service and composes the response.  Shared by
the Lambda function URL handler and the FastAPI route.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException

from photos_cdn import responses, service
from photos_cdn.exceptions import OriginalNotFound, StoreUnavailable, TranscodeFailed
from photos_cdn.parser import parse_request
from photos_cdn.service import ResizeContext

logger = logging.getLogger(__name__)


def handle(path: str, query_string: str, ctx: ResizeContext) -> dict[str, Any]:
    """Return a redirect, not-found, bad-request or server-error response."""
    try:
        request = parse_request(path, query_string)
        location = service.resolve(request, ctx)
    except OriginalNotFound as exc:
        logger.warning("Original not found: %s", exc.key)
        return responses.not_found()
    except StoreUnavailable as exc:
        logger.error("Storage unavailable for s3://%s/%s: %s", exc.bucket, exc.key, exc.reason)
        return responses.from_exception(exc)
    except TranscodeFailed as exc:
        logger.error("Transcoding %s failed: %s", path, exc)
        return responses.from_exception(exc)
    except HTTPException as exc:
        logger.info("Rejected %s?%s: %s", path, query_string, exc.detail)
        return responses.from_exception(exc)
    return responses.redirect(location)
