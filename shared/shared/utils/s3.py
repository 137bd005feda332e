"""Public S3 object URLs."""
from urllib.parse import quote


def object_url(bucket: str, region: str, key: str, *, path_style: bool = False) -> str:
    """Return the public HTTPS URL of an S3 object.

    Virtual-hosted style (``https://{bucket}.s3.{region}.amazonaws.com/{key}``)
    is the default. Buckets whose names contain dots do not match the
    ``*.s3`` wildcard certificate and must use path style
    (``https://s3.{region}.amazonaws.com/{bucket}/{key}``).
    """
    quoted = quote(key, safe="/")
    if path_style or "." in bucket:
        return f"https://s3.{region}.amazonaws.com/{bucket}/{quoted}"
    return f"https://{bucket}.s3.{region}.amazonaws.com/{quoted}"


def prefixed_url(base_url: str, key: str) -> str:
    """Return ``{base_url}/{key}`` for a CDN or custom domain in front of a bucket."""
    return f"{base_url.rstrip('/')}/{quote(key, safe='/')}"
