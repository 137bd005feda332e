"""
Transcoder — inspect an original and re-encode it as a WebP variant.

Geometry per variant:
  thumb, placeholder: cover a W×W box, center crop to exactly W×W, strip metadata
  scaled:             resize to exactly W pixels wide, keep aspect ratio and metadata

WebP quality is the requested 1–10 quality times ten.

Two backends share that contract:
  ImageMagickTranscoder  runs ``identify`` / ``convert`` from the Lambda layer
  PillowTranscoder       does the same in-process, for machines without ImageMagick
"""
from __future__ import annotations

import abc
import logging
import subprocess
import uuid
from pathlib import Path

from PIL import Image, ImageOps

from photos_cdn.config import Settings
from photos_cdn.constants import QUALITY_SCALE, SQUARE_VARIANTS, Variant
from photos_cdn.exceptions import TranscodeFailed
from photos_cdn.schemas import ResolvedVariantParams, SourceInfo

logger = logging.getLogger(__name__)


class Transcoder(abc.ABC):
    """Synchronous image capability: ``inspect`` plus ``transform``."""

    def __init__(self, scratch_dir: str) -> None:
        self._scratch_dir = Path(scratch_dir)

    @abc.abstractmethod
    def inspect(self, source: Path) -> SourceInfo:
        """Describe the original (format, dimensions, depth, color space)."""

    @abc.abstractmethod
    def transform(
        self,
        source: Path,
        variant: Variant,
        params: ResolvedVariantParams,
        output: Path,
    ) -> None:
        """Write the WebP variant of ``source`` to ``output``."""

    def transcode(
        self,
        data: bytes,
        variant: Variant,
        params: ResolvedVariantParams,
    ) -> tuple[bytes, SourceInfo]:
        """Materialize ``data`` in scratch space, inspect it and return the WebP bytes."""
        if variant is Variant.RAW:
            raise ValueError("raw originals are never transcoded")

        # Fresh names per request; concurrent invocations may share /tmp
        source = self._scratch_dir / uuid.uuid4().hex
        output = self._scratch_dir / f"{uuid.uuid4().hex}.webp"
        source.write_bytes(data)
        try:
            info = self.inspect(source)
            self.transform(source, variant, params, output)
            if not output.exists() or output.stat().st_size == 0:
                raise TranscodeFailed(type(self).__name__, stderr="no output written")
            return output.read_bytes(), info
        finally:
            source.unlink(missing_ok=True)
            output.unlink(missing_ok=True)


# ── ImageMagick ──────────────────────────────────────────────────────────────

def parse_identify(output: str) -> SourceInfo:
    """Parse one line of ``identify`` output.

    ``/tmp/f5bb... JPEG 3008x4000 3008x4000+0+0 8-bit sRGB 2.49426MiB 0.010u 0:00.004``
    """
    lines = output.strip().splitlines()
    fields = lines[0].split(" ") if lines else []
    if len(fields) < 6:
        logger.warning("Unexpected identify output: %r", output)
        return SourceInfo()
    return SourceInfo(
        format=fields[1],
        dimensions=fields[2],
        color_depth=fields[4],
        color_space=fields[5],
    )


class ImageMagickTranscoder(Transcoder):

    def __init__(
        self,
        scratch_dir: str,
        *,
        identify_path: str,
        convert_path: str,
        timeout: float,
    ) -> None:
        super().__init__(scratch_dir)
        self._identify_path = identify_path
        self._convert_path = convert_path
        self._timeout = timeout

    def inspect(self, source: Path) -> SourceInfo:
        return parse_identify(self._run([self._identify_path, str(source)]))

    def transform(
        self,
        source: Path,
        variant: Variant,
        params: ResolvedVariantParams,
        output: Path,
    ) -> None:
        self._run([self._convert_path, *convert_args(source, variant, params, output)])

    def _run(self, cmd: list[str]) -> str:
        """Run ``cmd`` to completion and return its stdout. Non-zero exit is fatal."""
        name = Path(cmd[0]).name
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=self._timeout,
            )
        except FileNotFoundError:
            logger.error("%s not found at %s", name, cmd[0])
            raise TranscodeFailed(name, stderr=f"{cmd[0]} not found")
        except subprocess.TimeoutExpired:
            logger.error("%s timed out after %ss", name, self._timeout)
            raise TranscodeFailed(name, stderr=f"timed out after {self._timeout}s")

        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        if stderr:
            logger.warning("%s: %s", name, stderr)
        # A negative return code means the process was killed by that signal
        if result.returncode != 0:
            raise TranscodeFailed(name, result.returncode, stderr)
        return result.stdout.decode("ascii", errors="replace")


def convert_args(
    source: Path,
    variant: Variant,
    params: ResolvedVariantParams,
    output: Path,
) -> list[str]:
    """Arguments for ``convert`` (without the binary itself)."""
    w = params.width
    quality = str(params.quality * QUALITY_SCALE)
    if variant in SQUARE_VARIANTS:
        return [
            str(source),
            "-thumbnail", f"{w}x{w}^",
            "-gravity", "center",
            "-crop", f"{w}x{w}+0+0",
            "-quality", quality,
            "-strip",
            str(output),
        ]
    if variant is Variant.SCALED:
        return [
            str(source),
            "-resize", f"{w}x",
            "-quality", quality,
            str(output),
        ]
    raise ValueError(f"no conversion for variant {variant.value}")


# ── Pillow ───────────────────────────────────────────────────────────────────

_MODE_DEPTH = {"1": "1-bit", "I;16": "16-bit", "I": "32-bit", "F": "32-bit"}
_MODE_COLOR_SPACE = {
    "1": "Gray", "L": "Gray", "LA": "Gray", "I;16": "Gray", "I": "Gray", "F": "Gray",
    "P": "sRGB", "RGB": "sRGB", "RGBA": "sRGB",
    "CMYK": "CMYK", "YCbCr": "YCbCr", "LAB": "Lab", "HSV": "HSV",
}


class PillowTranscoder(Transcoder):

    def inspect(self, source: Path) -> SourceInfo:
        try:
            with Image.open(source) as img:
                return SourceInfo(
                    format=img.format or "unknown",
                    dimensions=f"{img.width}x{img.height}",
                    color_depth=_MODE_DEPTH.get(img.mode, "8-bit"),
                    color_space=_MODE_COLOR_SPACE.get(img.mode, img.mode),
                )
        except (OSError, ValueError) as exc:
            raise TranscodeFailed("pillow", stderr=str(exc)) from exc

    def transform(
        self,
        source: Path,
        variant: Variant,
        params: ResolvedVariantParams,
        output: Path,
    ) -> None:
        w = params.width
        quality = params.quality * QUALITY_SCALE
        try:
            with Image.open(source) as img:
                img = _webp_compatible(img)
                if variant in SQUARE_VARIANTS:
                    # Cover W×W, crop the center; nothing but pixels is written
                    resized = ImageOps.fit(img, (w, w), method=Image.LANCZOS, centering=(0.5, 0.5))
                    resized.save(output, format="WEBP", quality=quality, exif=b"")
                elif variant is Variant.SCALED:
                    height = max(1, round(img.height * w / img.width))
                    resized = img.resize((w, height), Image.LANCZOS)
                    extra = {k: img.info[k] for k in ("exif", "icc_profile") if img.info.get(k)}
                    resized.save(output, format="WEBP", quality=quality, **extra)
                else:
                    raise ValueError(f"no conversion for variant {variant.value}")
        except (OSError, ValueError) as exc:
            raise TranscodeFailed("pillow", stderr=str(exc)) from exc


def _webp_compatible(img: Image.Image) -> Image.Image:
    """WebP stores RGB or RGBA only."""
    if img.mode in ("RGB", "RGBA"):
        return img
    info = dict(img.info)
    has_alpha = img.mode in ("LA", "PA") or "transparency" in img.info
    converted = img.convert("RGBA" if has_alpha else "RGB")
    # convert() drops info; the ICC profile no longer matches the pixels
    if info.get("exif"):
        converted.info["exif"] = info["exif"]
    return converted


def get_transcoder(settings: Settings) -> Transcoder:
    backend = settings.transcoder_backend.lower()
    if backend == "imagemagick":
        return ImageMagickTranscoder(
            settings.scratch_dir,
            identify_path=settings.identify_path,
            convert_path=settings.convert_path,
            timeout=settings.transcode_timeout_seconds,
        )
    if backend == "pillow":
        return PillowTranscoder(settings.scratch_dir)
    raise ValueError(f"Unknown transcoder backend: {settings.transcoder_backend}")
