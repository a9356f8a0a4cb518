"""
Transmission RPC call engine.

Provides TransClient, which sends one RPC request to the daemon, performs the
session id handshake and decodes the response envelope.

Usage:
    from torrent_rpc import BasicAuth, TorrentGetField, TransClient

    client = TransClient("http://localhost:9091/transmission/rpc",
                         auth=BasicAuth("user", "secret"))
    response = client.torrent_get(fields=[TorrentGetField.ID, TorrentGetField.NAME])
    if response.is_ok():
        for torrent in response.arguments.torrents:
            print(torrent.id, torrent.name)
"""

from enum import Enum
from typing import Any, Iterable, Optional, Tuple, Type

import requests

from .codec import decode, encode
from .config import Config
from .errors import MaxRetriesReached, NoSessionIdReceived, TransportError
from .logger import logger
from .models import BasicAuth, RpcResponse
from .request import (
    BandwidthGroup,
    Method,
    RpcRequest,
    SessionSetArgs,
    TorrentAction,
    TorrentAddArgs,
    TorrentGetField,
    TorrentSetArgs,
)
from .response import (
    BlocklistUpdate,
    FreeSpace,
    Nothing,
    PortTest,
    SessionClose,
    SessionGet,
    SessionStats,
    TorrentAddedOrDuplicate,
    TorrentRenamePath,
    Torrents,
)
from .session import SESSION_ID_HEADER, SessionManager, find_session_id


MAX_RETRIES = 5
CONFLICT_STATUS = 409


class Outcome(Enum):
    RETRY = "retry"
    DONE = "done"


class TransClient:
    """
    Client for one Transmission daemon.

    Not safe for concurrent use; see SharableTransClient for that.
    """

    def __init__(
        self,
        url: str = Config.TRANSMISSION_URL,
        auth: Optional[BasicAuth] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = Config.TRANSMISSION_TIMEOUT,
    ):
        """
        Args:
            url: Full RPC endpoint, e.g. 'http://localhost:9091/transmission/rpc'.
            auth: Optional basic auth credentials.
            session: Optional requests.Session to reuse connections.
            timeout: Timeout (seconds) for each HTTP request.
        """
        self.url = url
        self.auth = auth
        self.session = session or requests.Session()
        self.timeout = timeout
        self.session_manager = self._make_session_manager()

    @classmethod
    def from_config(cls, **kwargs) -> "TransClient":
        """Build a client from the TRANSMISSION_* settings."""
        if Config.TRANSMISSION_USERNAME and "auth" not in kwargs:
            kwargs["auth"] = BasicAuth(Config.TRANSMISSION_USERNAME, Config.TRANSMISSION_PASSWORD)
        kwargs.setdefault("url", Config.TRANSMISSION_URL)
        kwargs.setdefault("timeout", Config.TRANSMISSION_TIMEOUT)
        return cls(**kwargs)

    def _make_session_manager(self) -> SessionManager:
        return SessionManager()

    def set_auth(self, auth: Optional[BasicAuth]):
        """Replace the credentials used for every later request."""
        self.auth = auth

    # ------------------------------------------------------------------
    # Call engine
    # ------------------------------------------------------------------

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        token = self.session_manager.current_token()
        if token is not None:
            headers[SESSION_ID_HEADER] = token
        return headers

    def _send(self, body: bytes) -> requests.Response:
        kwargs = {"data": body, "headers": self._headers(), "timeout": self.timeout}
        if self.auth is not None:
            kwargs["auth"] = self.auth.as_tuple()
        try:
            return self.session.post(self.url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request to {self.url} failed: {e}")
            raise TransportError(f"Request to {self.url} failed: {e}") from e

    def _attempt(self, body: bytes) -> Tuple[Outcome, Optional[requests.Response]]:
        response = self._send(body)
        logger.info(f"RPC response status {response.status_code}")

        if response.status_code != CONFLICT_STATUS:
            return Outcome.DONE, response

        token = find_session_id(response.headers)
        if token is None:
            logger.error(f"Server answered {CONFLICT_STATUS} without {SESSION_ID_HEADER}")
            raise NoSessionIdReceived(
                f"Server answered {CONFLICT_STATUS} without a {SESSION_ID_HEADER} header"
            )
        self.session_manager.observe(response.headers)
        logger.debug("Session conflict, retrying with new session id")
        return Outcome.RETRY, None

    def call(self, request: RpcRequest, result_type: Optional[Type] = None) -> RpcResponse:
        """
        Send ``request`` and decode the answer as ``result_type``.

        A 409 answer carrying a session id is retried with that id, up to
        MAX_RETRIES attempts in total. Any other status is decoded and
        returned, whatever its ``result`` says.

        Raises:
            TransportError: If the HTTP request fails
            NoSessionIdReceived: If a 409 answer carries no session id
            MaxRetriesReached: If every attempt was answered with 409
            DecodeError: If the body does not decode as result_type
        """
        body = encode(request)
        logger.debug(f"RPC request: {body.decode('utf-8')}")

        for attempt in range(1, MAX_RETRIES + 1):
            outcome, response = self._attempt(body)
            if outcome is Outcome.DONE:
                return decode(response.content, result_type)
            logger.debug(f"Attempt {attempt}/{MAX_RETRIES} hit a session conflict")

        logger.error(f"Giving up on {request.method} after {MAX_RETRIES} attempts")
        raise MaxRetriesReached(MAX_RETRIES)

    # ------------------------------------------------------------------
    # Session methods
    # ------------------------------------------------------------------

    def session_get(self) -> RpcResponse:
        return self.call(RpcRequest.session_get(), SessionGet)

    def session_set(self, args: SessionSetArgs) -> RpcResponse:
        return self.call(RpcRequest.session_set(args), Nothing)

    def session_stats(self) -> RpcResponse:
        return self.call(RpcRequest.session_stats(), SessionStats)

    def session_close(self) -> RpcResponse:
        return self.call(RpcRequest.session_close(), SessionClose)

    def blocklist_update(self) -> RpcResponse:
        return self.call(RpcRequest.blocklist_update(), BlocklistUpdate)

    def free_space(self, path: str) -> RpcResponse:
        return self.call(RpcRequest.free_space(path), FreeSpace)

    def port_test(self) -> RpcResponse:
        return self.call(RpcRequest.port_test(), PortTest)

    # ------------------------------------------------------------------
    # Torrent methods
    # ------------------------------------------------------------------

    def torrent_get(
        self,
        fields: Optional[Iterable[TorrentGetField]] = None,
        ids: Optional[Iterable[Any]] = None
    ) -> RpcResponse:
        return self.call(RpcRequest.torrent_get(fields, ids), Torrents)

    def torrent_set(self, args: TorrentSetArgs, ids: Optional[Iterable[Any]] = None) -> RpcResponse:
        return self.call(RpcRequest.torrent_set(args, ids), Nothing)

    def torrent_action(self, action: TorrentAction, ids: Iterable[Any]) -> RpcResponse:
        return self.call(RpcRequest.torrent_action(action, ids), Nothing)

    def torrent_remove(self, ids: Iterable[Any], delete_local_data: bool) -> RpcResponse:
        return self.call(RpcRequest.torrent_remove(ids, delete_local_data), Nothing)

    def torrent_set_location(
        self,
        ids: Iterable[Any],
        location: str,
        move_from: Optional[bool] = None
    ) -> RpcResponse:
        return self.call(RpcRequest.torrent_set_location(ids, location, move_from), Nothing)

    def torrent_rename_path(self, ids: Iterable[Any], path: str, name: str) -> RpcResponse:
        return self.call(RpcRequest.torrent_rename_path(ids, path, name), TorrentRenamePath)

    def torrent_add(self, args: TorrentAddArgs) -> RpcResponse:
        """
        Add a torrent from a file, URL, magnet link or base64 metainfo.

        The arguments of the returned response are a TorrentAdded,
        TorrentDuplicate or TorrentAddNoResult.

        Raises:
            ValueError: If neither filename nor metainfo is set
        """
        return self.call(RpcRequest.torrent_add(args), TorrentAddedOrDuplicate)

    # ------------------------------------------------------------------
    # Queue and bandwidth groups
    # ------------------------------------------------------------------

    def queue_move_top(self, ids: Iterable[Any]) -> RpcResponse:
        return self.call(RpcRequest.queue_move(Method.QUEUE_MOVE_TOP, ids), Nothing)

    def queue_move_up(self, ids: Iterable[Any]) -> RpcResponse:
        return self.call(RpcRequest.queue_move(Method.QUEUE_MOVE_UP, ids), Nothing)

    def queue_move_down(self, ids: Iterable[Any]) -> RpcResponse:
        return self.call(RpcRequest.queue_move(Method.QUEUE_MOVE_DOWN, ids), Nothing)

    def queue_move_bottom(self, ids: Iterable[Any]) -> RpcResponse:
        return self.call(RpcRequest.queue_move(Method.QUEUE_MOVE_BOTTOM, ids), Nothing)

    def group_set(self, group: BandwidthGroup) -> RpcResponse:
        return self.call(RpcRequest.group_set(group), Nothing)
