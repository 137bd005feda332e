import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, message: str) -> Response:
    # Errors are never cached by the CDN
    headers = {"Cache-Control": "no-store"}
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers["X-Request-ID"] = request_id
    return PlainTextResponse(message, status_code=status_code, headers=headers)


async def error_envelope_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    try:
        return await call_next(request)
    except StarletteHTTPException as exc:
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return _error_response(request, exc.status_code, message)
    except Exception:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error.")
