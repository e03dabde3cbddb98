#!/usr/bin/env python3
from typing import Dict, Any, Optional

import requests

from infra.errors import RemoteAPIError
from infra.logger import PipelineLogger, create_logger
from .http_session import ThreadLocalSessionManager


class OpenAITransport:
    """HTTP layer for an OpenAI-compatible API (chat completions + models)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        logger: Optional[PipelineLogger] = None,
        sessions: Optional[ThreadLocalSessionManager] = None,
    ):
        self.logger = logger or create_logger("pagescribe", "transport")
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.sessions = sessions or ThreadLocalSessionManager()

    @property
    def chat_completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    @property
    def models_url(self) -> str:
        return f"{self.base_url}/models"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def post(self, payload: Dict[str, Any], timeout: int = 120) -> Dict[str, Any]:
        """
        POST a chat completion request.

        Returns:
            Decoded JSON response body

        Raises:
            RemoteAPIError: On any non-2xx status
            requests.exceptions.RequestException: On connection errors/timeouts
        """
        model = payload.get('model', 'unknown')

        self.logger.debug(
            "Chat completion request",
            model=model,
            timeout=timeout,
            num_messages=len(payload.get('messages', []))
        )

        response = self.sessions.get_session().post(
            self.chat_completions_url,
            headers=self._headers(),
            json=payload,
            timeout=timeout
        )

        self.logger.debug(
            "Chat completion response",
            model=model,
            status_code=response.status_code
        )

        if not response.ok:
            raise RemoteAPIError(response.status_code, error_message(response))

        return response.json()

    def get_models(self, timeout: int = 10) -> requests.Response:
        """GET the models listing; used to check the credential without spending tokens."""
        return self.sessions.get_session().get(
            self.models_url,
            headers=self._headers(),
            timeout=timeout
        )


def error_message(response: requests.Response) -> str:
    """Extract the API's error message, falling back to the raw body."""
    try:
        data = response.json()
    except ValueError:
        return response.text

    if isinstance(data, dict):
        error = data.get('error')
        if isinstance(error, dict) and error.get('message'):
            return str(error['message'])
        if isinstance(error, str):
            return error
    return response.text
