from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from photos_cdn.config import Settings
from photos_cdn.constants import Variant
from photos_cdn.exceptions import TranscodeFailed
from photos_cdn.main import create_app
from photos_cdn.schemas import CachedVariant, ResolvedVariantParams, SourceInfo
from photos_cdn.service import ResizeContext
from photos_cdn.transcoder import Transcoder


ORIGINAL = "2023-12-10/1000013814-01.jpeg"
ORIGINAL_BYTES = b"\xff\xd8\xff\xe0 original jpeg"
JPEG_INFO = SourceInfo(format="JPEG", dimensions="3008x4000", color_depth="8-bit", color_space="sRGB")


class FakeStore:
    """In-memory stand-in for ``S3Store`` that records every call."""

    def __init__(self, bucket: str, objects: dict | None = None) -> None:
        self.bucket = bucket
        self.objects: dict = dict(objects or {})
        self.calls: list[tuple[str, str]] = []
        self.stored: list[CachedVariant] = []
        self.fail_with: Exception | None = None

    def exists(self, key: str) -> bool:
        self.calls.append(("exists", key))
        if self.fail_with is not None:
            raise self.fail_with
        return key in self.objects

    def fetch(self, key: str) -> bytes | None:
        self.calls.append(("fetch", key))
        if self.fail_with is not None:
            raise self.fail_with
        return self.objects.get(key)

    def store(self, variant: CachedVariant, *, attempts: int = 1) -> None:
        self.calls.append(("store", variant.key))
        self.stored.append(variant)
        self.objects[variant.key] = variant.body


class FakeTranscoder(Transcoder):
    """Runs the real scratch-file handling with canned inspect/transform steps."""

    def __init__(self, scratch_dir: str) -> None:
        super().__init__(scratch_dir)
        self.calls: list[tuple[Variant, ResolvedVariantParams]] = []
        self.fail = False

    def inspect(self, source: Path) -> SourceInfo:
        return JPEG_INFO

    def transform(self, source, variant, params, output) -> None:
        self.calls.append((variant, params))
        if self.fail:
            raise TranscodeFailed("convert", 1, "convert: improper image header")
        output.write_bytes(f"webp {variant.value} {params.width} {params.quality}".encode())


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        photos_bucket="photos.example.com",
        resized_bucket="resized-photos",
        aws_region="eu-central-1",
        scratch_dir=str(tmp_path),
    )


@pytest.fixture
def photos() -> FakeStore:
    return FakeStore("photos.example.com", {ORIGINAL: ORIGINAL_BYTES})


@pytest.fixture
def resized() -> FakeStore:
    return FakeStore("resized-photos")


@pytest.fixture
def transcoder(tmp_path: Path) -> FakeTranscoder:
    return FakeTranscoder(str(tmp_path))


@pytest.fixture
def ctx(settings: Settings, photos: FakeStore, resized: FakeStore, transcoder: FakeTranscoder) -> ResizeContext:
    return ResizeContext(settings=settings, photos=photos, resized=resized, transcoder=transcoder)


@pytest.fixture
def client(settings: Settings, ctx: ResizeContext) -> Generator[TestClient, None, None]:
    app = create_app(settings, ctx)
    with TestClient(app) as c:
        yield c
