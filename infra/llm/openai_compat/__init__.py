"""
OpenAI-compatible API client components.

Clean separation of concerns:
- transport.py: HTTP requests
- response_parser.py: Response parsing
- retry_policy.py: Attempt cap and backoff
- images.py: Image attachment for vision requests
"""

from .transport import OpenAITransport
from .response_parser import ResponseParser, ParsedResponse
from .retry_policy import RetryPolicy
from .images import add_image_to_messages, image_data_url

__all__ = [
    'OpenAITransport',
    'ResponseParser',
    'ParsedResponse',
    'RetryPolicy',
    'add_image_to_messages',
    'image_data_url',
]
