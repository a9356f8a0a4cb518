"""
Thread-safe variant of TransClient.

SharableTransClient can be handed to several threads at once. It only differs
from TransClient in keeping its session id in a SharedSessionManager, so
concurrent calls see a consistent token and pick up each other's updates.
"""

from .client import TransClient
from .session import SessionManager, SharedSessionManager


class SharableTransClient(TransClient):
    def _make_session_manager(self) -> SessionManager:
        return SharedSessionManager()
