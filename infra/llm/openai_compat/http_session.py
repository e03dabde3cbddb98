#!/usr/bin/env python3
"""Thread-local HTTP session management."""

import threading
import requests


class ThreadLocalSessionManager:
    """One requests.Session per worker thread (sessions are not thread-safe)."""

    def __init__(self, pool_maxsize: int = 1):
        self._thread_local = threading.local()
        self.pool_maxsize = pool_maxsize

    def get_session(self) -> requests.Session:
        if not hasattr(self._thread_local, 'session'):
            self._thread_local.session = self._create_session()
        return self._thread_local.session

    def _create_session(self) -> requests.Session:
        session = requests.Session()

        # Retries are owned by RetryPolicy, not urllib3
        adapter = requests.adapters.HTTPAdapter(
            pool_connections=1,
            pool_maxsize=self.pool_maxsize,
            max_retries=0
        )
        session.mount('https://', adapter)
        session.mount('http://', adapter)

        return session
