"""
Shared fixtures for pagescribe tests.

All tests use real images written to temporary directories. The HTTP
layer is replaced by in-process fakes; nothing touches the network.
"""

import io
import threading

import pytest
import requests
from PIL import Image

from infra.llm.openai_compat import RetryPolicy


def image_bytes(width: int, height: int, fmt: str = "JPEG", color="white") -> bytes:
    image = Image.new("RGB", (width, height), color=color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def chat_completion(content: str, prompt_tokens: int = 1000, completion_tokens: int = 500) -> dict:
    return {
        "id": "chatcmpl-test",
        "model": "gpt-4o",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
    }


def http_response(status: int, body: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    return response


class FakeTransport:
    """
    Scripted stand-in for OpenAITransport.

    Each post() consumes the next scripted item: a dict is returned as the
    response body, an exception is raised, a callable is called with the
    payload and its result handled the same way. When the script runs out
    the last item repeats.
    """

    def __init__(self, *script, models_response=None):
        self.script = list(script)
        self.models_response = models_response if models_response is not None else http_response(200, '{"data": []}')
        self.payloads = []
        self.model_checks = 0
        self._lock = threading.Lock()

    @property
    def calls(self) -> int:
        return len(self.payloads)

    def post(self, payload, timeout=120):
        with self._lock:
            self.payloads.append(payload)
            index = min(len(self.payloads) - 1, len(self.script) - 1)
            item = self.script[index]

        if callable(item) and not isinstance(item, type):
            item = item(payload)
        if isinstance(item, BaseException):
            raise item
        return item

    def get_models(self, timeout=10):
        self.model_checks += 1
        if isinstance(self.models_response, BaseException):
            raise self.models_response
        return self.models_response


@pytest.fixture
def make_image():
    """Factory: make_image(width, height, fmt='JPEG') -> encoded bytes."""
    return image_bytes


@pytest.fixture
def no_wait_retry():
    """Retry policy with zero backoff so retry tests run instantly."""
    return RetryPolicy(max_attempts=5, base_delay=0.0, max_delay=0.0)


@pytest.fixture
def image_dir(tmp_path):
    """Directory with three small page images and a non-image file."""
    scans = tmp_path / "scans"
    scans.mkdir()

    (scans / "page_003.jpg").write_bytes(image_bytes(60, 80))
    (scans / "page_001.jpg").write_bytes(image_bytes(60, 80))
    (scans / "page_002.png").write_bytes(image_bytes(60, 80, fmt="PNG"))
    (scans / "notes.txt").write_text("not an image")

    return scans


@pytest.fixture
def fake_transport():
    """The FakeTransport class, for building scripted transports."""
    return FakeTransport


@pytest.fixture
def completion():
    """Factory: completion(content, prompt_tokens=1000, completion_tokens=500) -> response body."""
    return chat_completion


@pytest.fixture
def make_http_response():
    """Factory: make_http_response(status, body='') -> requests.Response."""
    return http_response
