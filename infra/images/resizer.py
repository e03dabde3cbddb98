"""
Image downscaling for vision requests.

Large page photos cost more tokens without improving transcription, so
images are scaled so their longest side fits a fixed maximum before
being sent to the model. Images that already fit are passed through
byte-for-byte.

Example:
    Original: 4032×2707 (phone photo), max_dimension=1500
    Result:   1500×1007, re-encoded as JPEG (quality 92)
"""

import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError, features

from infra.errors import DecodeFailure, InvalidDimension

logger = logging.getLogger(__name__)

# Tried in order; the first codec that decodes the bytes wins
DECODE_ORDER = ("WEBP", "PNG", "JPEG", "GIF")

JPEG_QUALITY = 92
WEBP_QUALITY = 92
PNG_COMPRESS_LEVEL = 9


def decode_image(image_bytes: bytes) -> Tuple[Image.Image, str]:
    """
    Decode image bytes with the supported codecs.

    Returns:
        Tuple of (fully loaded PIL Image, format name e.g. "JPEG")

    Raises:
        DecodeFailure: If no supported codec can decode the data
    """
    Image.init()
    last_error = None

    for fmt in DECODE_ORDER:
        if fmt not in Image.OPEN:
            continue
        try:
            image = Image.open(io.BytesIO(image_bytes), formats=[fmt])
            image.load()
            return image, fmt
        except Image.DecompressionBombError as e:
            raise DecodeFailure(f"failed to decode image: {e}") from e
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            last_error = e
            continue

    raise DecodeFailure(
        "failed to decode image: unsupported image format or invalid image data"
    ) from last_error


def mime_type_for(image_bytes: bytes, default: str = "image/jpeg") -> str:
    """Best-effort MIME type from the image header (no full decode)."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            return Image.MIME.get(image.format, default)
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError):
        return default


def scaled_size(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """
    Target size with the longest side equal to max_dimension.

    The other side is round(other * max_dimension / longest), computed in
    integer arithmetic (half rounds up) and never below 1 pixel.
    """
    if width >= height:
        new_height = (2 * height * max_dimension + width) // (2 * width)
        return max_dimension, max(1, new_height)

    new_width = (2 * width * max_dimension + height) // (2 * height)
    return max(1, new_width), max_dimension


def _prepare_for_resampling(image: Image.Image) -> Image.Image:
    # Pillow falls back to nearest-neighbour for palette and bilevel images
    if image.mode == "P":
        return image.convert("RGBA" if "transparency" in image.info else "RGB")
    if image.mode == "1":
        return image.convert("L")
    return image


def encode_image(image: Image.Image, fmt: str) -> bytes:
    """
    Encode image in the given format with fixed quality settings.

    WEBP falls back to JPEG when Pillow was built without a WebP encoder.
    """
    buffer = io.BytesIO()

    if fmt == "WEBP" and not features.check("webp"):
        logger.debug("WebP encoder unavailable, encoding as JPEG")
        fmt = "JPEG"

    if fmt == "JPEG":
        if image.mode not in ("RGB", "L", "CMYK"):
            image = image.convert("RGB")
        image.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    elif fmt == "PNG":
        image.save(buffer, format="PNG", optimize=True, compress_level=PNG_COMPRESS_LEVEL)
    elif fmt == "GIF":
        image.save(buffer, format="GIF")
    elif fmt == "WEBP":
        image.save(buffer, format="WEBP", quality=WEBP_QUALITY)
    else:
        raise ValueError(f"unsupported format for encoding: {fmt}")

    return buffer.getvalue()


def resize_image(image_bytes: bytes, max_dimension: int) -> bytes:
    """
    Scale an image so its longest side is at most max_dimension.

    Args:
        image_bytes: Encoded image (JPEG, PNG, GIF or WebP)
        max_dimension: Maximum length of the longest side, in pixels

    Returns:
        The original bytes object if the image already fits, otherwise
        the resized image re-encoded in its original format

    Raises:
        InvalidDimension: If max_dimension is not positive
        DecodeFailure: If the image cannot be decoded, exceeds Pillow's
            pixel limit, or cannot be re-encoded
    """
    if max_dimension <= 0:
        raise InvalidDimension(f"max_dimension must be positive, got {max_dimension}")

    image, fmt = decode_image(image_bytes)
    width, height = image.size

    if max(width, height) <= max_dimension:
        return image_bytes

    new_width, new_height = scaled_size(width, height, max_dimension)

    logger.debug(
        f"Resizing {fmt} image: {width}×{height} → {new_width}×{new_height}"
    )

    try:
        resized = _prepare_for_resampling(image).resize(
            (new_width, new_height),
            Image.Resampling.LANCZOS
        )
        return encode_image(resized, fmt)
    except (OSError, ValueError) as e:
        raise DecodeFailure(f"failed to re-encode {fmt} image: {e}") from e


class Resizer:
    """Callable wrapper used by the pipeline (swappable in tests)."""

    def __init__(self, max_dimension: Optional[int] = None):
        self.max_dimension = max_dimension

    def resize(self, image_bytes: bytes, max_dimension: Optional[int] = None) -> bytes:
        if max_dimension is None:
            max_dimension = self.max_dimension
        if max_dimension is None:
            raise InvalidDimension("max_dimension must be positive, got None")
        return resize_image(image_bytes, max_dimension)
