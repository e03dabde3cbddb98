#!/usr/bin/env python3
"""
Recognition client for OpenAI-compatible vision models.

Orchestrates transport, retry, parsing, refusal detection and cost tracking
for one image at a time.

Retry contract:
- Up to RetryPolicy.max_attempts attempts (default 5)
- Backoff between attempts only, interruptible by the cancel event
- Cost is summed over every attempt, including failed ones
- 401 is terminal: no further attempts
- Refusals are retried like transient failures
- Exhausting attempts yields MaxAttemptsExceeded wrapping the last failure

recognize() never raises for remote failures; the terminal error is
returned in RecognitionResult.error so one bad image cannot take down a run.
"""

import threading
from typing import Dict, Any, Optional

import requests

from infra.errors import (
    Cancelled,
    InvalidCredential,
    MalformedResponseError,
    MaxAttemptsExceeded,
    RefusalDetected,
    RemoteAPIError,
)
from infra.logger import PipelineLogger, create_logger
from infra.llm.models import RecognitionResult
from infra.llm.pricing import CostCalculator
from infra.llm.prompts import SYSTEM_PROMPT, USER_PROMPT
from infra.llm.refusal import RefusalPredicate, is_refusal
from infra.llm.openai_compat import (
    OpenAITransport,
    ResponseParser,
    ParsedResponse,
    RetryPolicy,
    add_image_to_messages,
)

UNAUTHORIZED = 401


class RecognitionClient:
    """
    Transcribes page images through a vision chat model.

    Components:
    - OpenAITransport: HTTP requests
    - RetryPolicy: Attempt cap and cancellable backoff
    - ResponseParser: Response extraction and malformed handling
    - CostCalculator: Fixed per-token pricing
    - refusal_check: Pluggable refusal predicate
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        transport: Optional[OpenAITransport] = None,
        retry: Optional[RetryPolicy] = None,
        cost_calculator: Optional[CostCalculator] = None,
        refusal_check: RefusalPredicate = is_refusal,
        timeout: int = 120,
        max_tokens: int = 4096,
        temperature: float = 0.1,
        logger: Optional[PipelineLogger] = None,
    ):
        self.logger = logger or create_logger("pagescribe", "recognize")
        if transport is None:
            if not api_key:
                raise InvalidCredential("API key is required")
            transport = OpenAITransport(api_key, base_url=base_url, logger=self.logger)

        self.transport = transport
        self.retry = retry or RetryPolicy()
        self.parser = ResponseParser(logger=self.logger)
        self.cost_calculator = cost_calculator or CostCalculator()
        self.refusal_check = refusal_check
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature

    @classmethod
    def from_config(cls, config, logger: Optional[PipelineLogger] = None) -> 'RecognitionClient':
        return cls(
            api_key=config.openai_api_key,
            model=config.vision_model,
            base_url=config.openai_base_url,
            retry=RetryPolicy(
                base_delay=config.retry_base_delay,
                max_delay=config.retry_max_delay,
            ),
            cost_calculator=CostCalculator(
                input_cost_per_1k=config.input_cost_per_1k,
                output_cost_per_1k=config.output_cost_per_1k,
            ),
            timeout=config.request_timeout,
            logger=logger,
        )

    def validate_credential(self) -> None:
        """
        Check the API key against the models endpoint (single attempt).

        Raises:
            InvalidCredential: On 401, or if the service cannot be reached
            RemoteAPIError: On any other non-success status
        """
        try:
            response = self.transport.get_models()
        except requests.exceptions.RequestException as e:
            raise InvalidCredential(f"invalid API key: {e}") from e

        if response.status_code == UNAUTHORIZED:
            raise InvalidCredential()
        if not response.ok:
            raise RemoteAPIError(response.status_code, response.text)

        self.logger.debug("API key validated", model=self.model)

    def recognize(
        self,
        image_bytes: bytes,
        cancel_event: Optional[threading.Event] = None,
    ) -> RecognitionResult:
        """
        Transcribe one image with retries.

        Args:
            image_bytes: Encoded image (already resized)
            cancel_event: Run-scoped cancellation signal

        Returns:
            RecognitionResult with text on success, or the terminal error.
            cost_usd and attempts always reflect every attempt made.
        """
        payload = self._build_payload(image_bytes)

        total_cost = 0.0
        prompt_tokens = 0
        completion_tokens = 0
        attempts = 0
        last_error: Optional[BaseException] = None

        def outcome(text: str = "", error: Optional[BaseException] = None) -> RecognitionResult:
            return RecognitionResult(
                text=text,
                cost_usd=total_cost,
                attempts=attempts,
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                error=error,
            )

        for attempt in range(1, self.retry.max_attempts + 1):
            if not self.retry.wait(attempt, cancel_event):
                self.logger.debug(
                    "Recognition cancelled",
                    attempts=attempts,
                    cost_usd=total_cost
                )
                return outcome(error=Cancelled())

            attempts = attempt
            parsed: Optional[ParsedResponse] = None

            try:
                parsed = self._attempt(payload)
            except (RemoteAPIError, MalformedResponseError, requests.exceptions.RequestException) as e:
                last_error = e

            if parsed is not None:
                total_cost += self.cost_calculator.cost_for(parsed)
                prompt_tokens += parsed.prompt_tokens
                completion_tokens += parsed.completion_tokens

                if not self.refusal_check(parsed.content):
                    if attempt > 1:
                        self.logger.debug(
                            f"Recognition succeeded after {attempt} attempts",
                            attempts=attempt,
                            cost_usd=total_cost
                        )
                    return outcome(text=parsed.content)

                last_error = RefusalDetected(parsed.content)

            if self.retry.is_terminal(last_error):
                self.logger.error(
                    "Recognition unauthorized, not retrying",
                    attempt=attempt,
                    status_code=UNAUTHORIZED,
                    error=str(last_error)
                )
                return outcome(error=last_error)

            self.logger.warning(
                f"Recognition attempt {attempt}/{self.retry.max_attempts} failed",
                attempt=attempt,
                error=str(last_error),
                cost_usd=total_cost
            )

        error = MaxAttemptsExceeded(attempts, last_error)
        error.__cause__ = last_error
        return outcome(error=error)

    def _attempt(self, payload: Dict[str, Any]) -> ParsedResponse:
        result = self.transport.post(payload, timeout=self.timeout)
        return self.parser.parse_chat_completion(result, self.model)

    def _build_payload(self, image_bytes: bytes) -> Dict[str, Any]:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": USER_PROMPT},
        ]

        return {
            "model": self.model,
            "messages": add_image_to_messages(messages, image_bytes, logger=self.logger),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
