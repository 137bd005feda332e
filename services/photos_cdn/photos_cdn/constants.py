"""
Photos CDN — static constants and enum types.
"""
import enum


class Variant(str, enum.Enum):
    """Presentation variants accepted in the ``f`` query parameter."""
    RAW = "raw"                  # the original, untouched
    THUMB = "thumb"              # square, center-cropped
    PLACEHOLDER = "placeholder"  # tiny square, shared per original
    SCALED = "scaled"            # aspect-preserving, fixed width


# Variants that produce a square, center-cropped output with metadata stripped
SQUARE_VARIANTS = frozenset({Variant.THUMB, Variant.PLACEHOLDER})

# Query parameter defaults
DEFAULT_VARIANT = Variant.RAW
DEFAULT_WIDTH = 250
DEFAULT_QUALITY = 6

# Widths are quantized down to this step so the number of variants stays small
WIDTH_STEP = 250

# Quality is requested on a 1–10 scale and encoded on a 10–100 scale
MIN_QUALITY = 1
MAX_QUALITY = 10
QUALITY_SCALE = 10

# Placeholder geometry is fixed regardless of what was requested
PLACEHOLDER_WIDTH = 16
PLACEHOLDER_QUALITY = 2

VARIANT_CONTENT_TYPE = "image/webp"
VARIANT_EXTENSION = "webp"

# Redirects and 404s are cached for a year (52 weeks) by browsers and the CDN
CACHE_FOR_A_YEAR = "public, max-age=31449600, immutable"
NO_STORE = "no-store"
