#!/usr/bin/env python3
"""
Data models for recognition calls.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RecognitionResult:
    """
    Outcome of one logical recognition call (all attempts included).

    Attributes:
        text: Transcribed text (empty on failure)
        cost_usd: Sum of the cost of every attempt made, failed ones included
        attempts: Number of network attempts made (0 if cancelled before the first)
        prompt_tokens: Prompt tokens summed over all attempts
        completion_tokens: Completion tokens summed over all attempts
        error: Terminal error (None on success). One of RemoteAPIError (401),
            MaxAttemptsExceeded or Cancelled.
    """
    text: str = ""
    cost_usd: float = 0.0
    attempts: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    error: Optional[BaseException] = None

    @property
    def success(self) -> bool:
        return self.error is None
