"""
Image handling for vision requests.

Provides:
- resize_image / Resizer: aspect-preserving downscale with byte-identical passthrough
- mime_type_for: MIME type sniffed from the image header
"""

from infra.images.resizer import (
    Resizer,
    resize_image,
    mime_type_for,
)

__all__ = [
    "Resizer",
    "resize_image",
    "mime_type_for",
]
