#!/usr/bin/env python3
import threading
import time
from typing import Optional

from infra.errors import RemoteAPIError

UNAUTHORIZED = 401


class RetryPolicy:
    """
    Attempt cap and exponential backoff for recognition calls.

    Delay before attempt n (n >= 2) is base_delay * 2 ** (n - 2), capped at
    max_delay. There is no delay before the first attempt.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        base_delay: float = 0.5,
        max_delay: float = 4.0,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay

    def delay_before(self, attempt: int) -> float:
        if attempt <= 1:
            return 0.0
        return min(self.base_delay * (2 ** (attempt - 2)), self.max_delay)

    def is_terminal(self, error: BaseException) -> bool:
        """Authentication failures are never retried."""
        return isinstance(error, RemoteAPIError) and error.status == UNAUTHORIZED

    def wait(self, attempt: int, cancel_event: Optional[threading.Event] = None) -> bool:
        """
        Sleep before the given attempt.

        Returns:
            False if the cancel event was set before or during the wait
        """
        delay = self.delay_before(attempt)
        if cancel_event is None:
            if delay > 0:
                time.sleep(delay)
            return True
        if cancel_event.is_set():
            return False
        return not cancel_event.wait(delay)
