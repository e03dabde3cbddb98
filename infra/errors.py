"""
Error taxonomy for pagescribe.

Per-image errors (ImageNotFound, InvalidDimension, DecodeFailure,
RemoteAPIError, MaxAttemptsExceeded, Cancelled) are captured into that
image's result. Run-level errors (DirectoryNotFound, NoImagesFound,
InvalidCredential, ProcessingFailed, Cancelled) abort the whole run.
"""

from typing import Optional


class PageScribeError(Exception):
    """Base exception for pagescribe."""
    pass


# ===== Storage =====

class DirectoryNotFound(PageScribeError):
    """Image directory is missing or is not a directory."""
    pass


class ImageNotFound(PageScribeError):
    pass


class SaveFailed(PageScribeError):
    pass


# ===== Images =====

class InvalidDimension(PageScribeError):
    pass


class DecodeFailure(PageScribeError):
    """None of the supported codecs could decode the image."""
    pass


# ===== Remote recognition =====

class InvalidCredential(PageScribeError):
    def __init__(self, message: str = "invalid API key"):
        super().__init__(message)


class RemoteAPIError(PageScribeError):
    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"API error (status {status}): {message}")


class MalformedResponseError(PageScribeError):
    pass


class RefusalDetected(PageScribeError):
    """The model declined to transcribe the image."""

    def __init__(self, response_text: str):
        self.response_text = response_text
        super().__init__(f"model refused to process image: {response_text.strip()}")


class MaxAttemptsExceeded(PageScribeError):
    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        message = f"max attempts exceeded ({attempts})"
        if last_error is not None:
            message += f": {last_error}"
        super().__init__(message)


# ===== Run level =====

class NoImagesFound(PageScribeError):
    def __init__(self, message: str = "no images found in directory"):
        super().__init__(message)


class ProcessingFailed(PageScribeError):
    pass


class Cancelled(PageScribeError):
    def __init__(self, message: str = "operation cancelled"):
        super().__init__(message)
