"""
Per-thread requests sessions.

Blocking HTTP calls run through ``asyncio.to_thread``, so concurrent API
requests can use one client object from several worker threads at once.
``requests.Session`` is not documented as thread safe; each worker thread
gets its own session and keeps it for connection reuse.
"""

import threading
from typing import Optional

import requests


class ThreadLocalSession:
    """Hands out one ``requests.Session`` per thread, or always the injected one."""

    def __init__(self, session: Optional[requests.Session] = None):
        self._fixed = session
        self._local = threading.local()

    def get(self) -> requests.Session:
        if self._fixed is not None:
            return self._fixed
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session
