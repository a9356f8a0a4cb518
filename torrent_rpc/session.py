"""
Session token handling.

The daemon hands out a session id in the ``X-Transmission-Session-Id`` header
of a 409 answer and expects it back on every later request. A SessionManager
owns that token for one client; SharedSessionManager guards it with a
reader/writer lock so one client can be shared between threads.
"""

import threading
from contextlib import contextmanager
from typing import Mapping, Optional

from .logger import logger

SESSION_ID_HEADER = "X-Transmission-Session-Id"


def find_session_id(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    """Return the session id header value, matching the name case-insensitively."""
    if not headers:
        return None
    wanted = SESSION_ID_HEADER.lower()
    for name, value in headers.items():
        if name.lower() == wanted:
            return value
    return None


class RWLock:
    """Reader/writer lock: many concurrent readers or one writer."""

    def __init__(self):
        self._read_ready = threading.Condition(threading.Lock())
        self._readers = 0

    def r_acquire(self):
        with self._read_ready:
            self._readers += 1

    def r_release(self):
        with self._read_ready:
            self._readers -= 1
            if self._readers == 0:
                self._read_ready.notify_all()

    def w_acquire(self):
        self._read_ready.acquire()
        while self._readers > 0:
            self._read_ready.wait()

    def w_release(self):
        self._read_ready.release()

    @contextmanager
    def read_locked(self):
        self.r_acquire()
        try:
            yield
        finally:
            self.r_release()

    @contextmanager
    def write_locked(self):
        self.w_acquire()
        try:
            yield
        finally:
            self.w_release()


class SessionManager:
    """
    Holds the session token of one client.

    The token starts out absent and is only ever replaced, never cleared.
    observe() is the single mutation path.
    """

    def __init__(self):
        self._token: Optional[str] = None

    def current_token(self) -> Optional[str]:
        return self._token

    def observe(self, headers: Optional[Mapping[str, str]]) -> Optional[str]:
        """
        Store the session id carried by ``headers``, if any.

        Returns:
            The token now held, or None if the headers carried no session id
        """
        token = find_session_id(headers)
        if token is None:
            return None
        self._store(token)
        return token

    def _store(self, token: str):
        if token != self._token:
            logger.debug("Session id updated")
        self._token = token


class SharedSessionManager(SessionManager):
    """SessionManager safe for use from several threads."""

    def __init__(self):
        super().__init__()
        self._lock = RWLock()

    def current_token(self) -> Optional[str]:
        with self._lock.read_locked():
            return self._token

    def _store(self, token: str):
        with self._lock.write_locked():
            super()._store(token)
