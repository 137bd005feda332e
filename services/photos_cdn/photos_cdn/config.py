import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_files() -> list[str]:
    """Load .env from repository root (when running from services/photos_cdn) then local .env."""
    base = Path(__file__).resolve().parent.parent.parent.parent  # repository root
    return [str(base / ".env"), ".env"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Buckets ──────────────────────────────────────────────────────────────
    # Source photos (read-only) and the public bucket holding resized variants.
    photos_bucket: str = ""
    resized_bucket: str = ""
    aws_region: str = "eu-central-1"

    # CDN domain in front of the resized bucket, e.g. https://photos.example.com
    public_base_url: str = ""

    # ── Transcoding ──────────────────────────────────────────────────────────
    transcoder_backend: str = "imagemagick"  # "imagemagick" or "pillow"
    identify_path: str = "/opt/bin/identify"
    convert_path: str = "/opt/bin/convert"
    transcode_timeout_seconds: int = 25  # below the 30 s function timeout
    scratch_dir: str = Field(default_factory=tempfile.gettempdir)

    # ── Storage error policy ─────────────────────────────────────────────────
    store_write_attempts: int = Field(default=2, ge=1)
    treat_store_errors_as_missing: bool = False

    # ── Service ──────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    env_name: str = "development"
    cors_origins: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
