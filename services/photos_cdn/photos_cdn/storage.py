"""
AWS S3 stores — the photos bucket (originals) and the resized bucket.

Only three operations are needed:
  - ``exists``  HEAD on the resized bucket (cache lookup, no content read)
  - ``fetch``   GET on the photos bucket (original bytes)
  - ``store``   PUT on the resized bucket (cache write, no precondition)

"Not found" is a normal outcome and never raises.  Any other S3 or network
error raises ``StoreUnavailable`` unless the store was built with
``missing_on_error=True``, in which case it is logged and reported as absent.
"""
from __future__ import annotations

import logging
import string
from typing import Any
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from photos_cdn.config import Settings
from photos_cdn.exceptions import StoreUnavailable
from photos_cdn.schemas import CachedVariant

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})

# S3 user metadata travels as HTTP headers and must be printable ASCII
_METADATA_SAFE = "".join(c for c in string.printable if c not in "\t\n\r\x0b\x0c")


def make_s3_client(settings: Settings) -> Any:
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        config=Config(retries={"max_attempts": 3, "mode": "standard"}),
    )


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _ascii_metadata(metadata: dict[str, str]) -> dict[str, str]:
    return {k: quote(v, safe=_METADATA_SAFE) for k, v in metadata.items()}


class S3Store:
    """A single bucket accessed through a boto3 S3 client."""

    def __init__(self, client: Any, bucket: str, *, missing_on_error: bool = False) -> None:
        self._client = client
        self.bucket = bucket
        self._missing_on_error = missing_on_error

    def _unavailable(self, key: str, exc: Exception) -> None:
        """Raise ``StoreUnavailable`` for ``exc`` unless configured to treat it as absent."""
        if self._missing_on_error:
            logger.error("S3 error on s3://%s/%s, treating as missing: %s", self.bucket, key, exc)
            return
        logger.error("S3 error on s3://%s/%s: %s", self.bucket, key, exc)
        raise StoreUnavailable(self.bucket, key, str(exc)) from exc

    def exists(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                return False
            self._unavailable(key, exc)
            return False
        except BotoCoreError as exc:
            self._unavailable(key, exc)
            return False
        return True

    def fetch(self, key: str) -> bytes | None:
        """Return the object's bytes, or ``None`` if it does not exist or is empty."""
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=key)
            body = response.get("Body")
            if body is None:
                logger.warning("Object s3://%s/%s has no body", self.bucket, key)
                return None
            data = body.read()
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                logger.info("Object s3://%s/%s does not exist", self.bucket, key)
                return None
            self._unavailable(key, exc)
            return None
        except BotoCoreError as exc:
            self._unavailable(key, exc)
            return None
        if not data:
            logger.warning("Object s3://%s/%s is empty", self.bucket, key)
            return None
        return data

    def store(self, variant: CachedVariant, *, attempts: int = 1) -> None:
        """Write ``variant``, retrying failed attempts. Last write wins."""
        last_exc: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                self._client.put_object(
                    Bucket=self.bucket,
                    Key=variant.key,
                    Body=variant.body,
                    ContentType=variant.content_type,
                    CacheControl=variant.cache_control,
                    Metadata=_ascii_metadata(variant.metadata),
                )
                return
            except (BotoCoreError, ClientError) as exc:
                last_exc = exc
                logger.warning(
                    "put_object s3://%s/%s failed (attempt %d/%d): %s",
                    self.bucket, variant.key, attempt, attempts, exc,
                )
        raise StoreUnavailable(self.bucket, variant.key, str(last_exc)) from last_exc
