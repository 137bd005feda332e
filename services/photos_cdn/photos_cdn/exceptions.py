"""
Photos CDN — domain-specific HTTP exceptions.

All exceptions use preset status codes and detail messages so that callers
never need to specify these at the call site.  Both entry points (the Lambda
function URL handler and the FastAPI app) turn them into plain-text responses
via ``photos_cdn.responses.from_exception``.
"""
from fastapi import HTTPException, status


# ── Request validation ───────────────────────────────────────────────────────

class InvalidVariant(HTTPException):
    def __init__(self, value: str) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid size: {value}!",
        )


class InvalidWidth(HTTPException):
    def __init__(self, value: object) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid width: {value}!",
        )


class InvalidQuality(HTTPException):
    def __init__(self, value: object) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid quality: {value}!",
        )


class InvalidPath(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid path!",
        )


# ── Storage ──────────────────────────────────────────────────────────────────

class OriginalNotFound(HTTPException):
    def __init__(self, key: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="",
        )
        # Kept for logging only; never sent to the caller.
        self.key = key


class StoreUnavailable(HTTPException):
    def __init__(self, bucket: str, key: str, reason: str = "") -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage unavailable.",
        )
        self.bucket = bucket
        self.key = key
        self.reason = reason


# ── Transcoding ──────────────────────────────────────────────────────────────

class TranscodeFailed(HTTPException):
    """The image tool exited abnormally. Carries the captured diagnostics."""

    def __init__(
        self,
        command: str,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Transcoding failed.",
        )
        self.command = command
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        return f"{self.command} failed with {self.returncode}: {self.stderr}".strip()
