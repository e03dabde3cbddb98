from .image_repository import ImageRepository, IMAGE_EXTENSIONS

__all__ = [
    "ImageRepository",
    "IMAGE_EXTENSIONS",
]
