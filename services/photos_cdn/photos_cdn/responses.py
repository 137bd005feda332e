"""
Response builder.

Responses are plain dicts in the Lambda function URL result shape
(``statusCode``, ``headers``, optional ``body``) so the Lambda handler can
return them as-is; ``to_response`` converts them for the FastAPI app.
"""
from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status
from fastapi.responses import Response

from photos_cdn.constants import CACHE_FOR_A_YEAR, NO_STORE

_TEXT_PLAIN = "text/plain; charset=utf-8"


def redirect(location: str) -> dict[str, Any]:
    return {
        "statusCode": status.HTTP_301_MOVED_PERMANENTLY,
        "headers": {
            "Location": location,
            "Cache-Control": CACHE_FOR_A_YEAR,
        },
    }


def not_found() -> dict[str, Any]:
    # Cached like a redirect; originals are never added under an existing path
    return {
        "statusCode": status.HTTP_404_NOT_FOUND,
        "headers": {"Cache-Control": CACHE_FOR_A_YEAR},
    }


def bad_request(message: str) -> dict[str, Any]:
    return {
        "statusCode": status.HTTP_400_BAD_REQUEST,
        "headers": {"Content-Type": _TEXT_PLAIN},
        "body": message,
    }


def server_error(status_code: int, message: str) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": _TEXT_PLAIN, "Cache-Control": NO_STORE},
        "body": message,
    }


def from_exception(exc: HTTPException) -> dict[str, Any]:
    """Map a domain exception onto its response."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return not_found()
    if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        return bad_request(str(exc.detail))
    return server_error(exc.status_code, str(exc.detail))


def internal_error() -> dict[str, Any]:
    return server_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error.")


def to_response(result: dict[str, Any]) -> Response:
    headers = dict(result.get("headers", {}))
    media_type = headers.pop("Content-Type", None)
    return Response(
        content=result.get("body", ""),
        status_code=result["statusCode"],
        headers=headers,
        media_type=media_type,
    )
