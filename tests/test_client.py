"""
Tests for the TransClient call engine: session handshake, retry budget,
error wrapping and the convenience methods.
"""

import pytest
import requests

from conftest import RPC_URL, conflict, make_response, sent_body, sent_headers
from torrent_rpc.client import MAX_RETRIES, TransClient
from torrent_rpc.errors import DecodeError, MaxRetriesReached, NoSessionIdReceived, TransportError
from torrent_rpc.models import BasicAuth, HashId, NumericId
from torrent_rpc.request import (
    BandwidthGroup,
    RpcRequest,
    TorrentAction,
    TorrentAddArgs,
    TorrentGetField,
    TorrentSetArgs,
)
from torrent_rpc.response import Nothing, SessionGet, TorrentAdded, Torrents


class TestSessionHandshake:
    def test_first_request_has_no_session_header(self, client, mock_session):
        client.call(RpcRequest.session_get(), SessionGet)
        headers = sent_headers(mock_session.post.call_args)
        assert "X-Transmission-Session-Id" not in headers
        assert headers["Content-Type"] == "application/json"

    def test_retry_after_conflict(self, client, mock_session):
        mock_session.post.side_effect = [conflict("abc"), make_response()]

        response = client.call(RpcRequest.session_get(), SessionGet)

        assert response.is_ok()
        assert mock_session.post.call_count == 2
        assert sent_headers(mock_session.post.call_args_list[1])["X-Transmission-Session-Id"] == "abc"

    @pytest.mark.parametrize("conflicts", [1, 2, 3, 4])
    def test_recovers_within_budget(self, client, mock_session, conflicts):
        responses = [conflict(f"token-{i}") for i in range(conflicts)]
        mock_session.post.side_effect = responses + [make_response()]

        response = client.call(RpcRequest.session_get(), SessionGet)

        assert response.is_ok()
        assert mock_session.post.call_count == conflicts + 1
        last = sent_headers(mock_session.post.call_args_list[-1])
        assert last["X-Transmission-Session-Id"] == f"token-{conflicts - 1}"

    def test_exhausted_budget(self, client, mock_session):
        mock_session.post.side_effect = [conflict(f"token-{i}") for i in range(MAX_RETRIES + 1)]

        with pytest.raises(MaxRetriesReached) as exc_info:
            client.call(RpcRequest.session_get(), SessionGet)

        assert exc_info.value.attempts == MAX_RETRIES
        assert mock_session.post.call_count == MAX_RETRIES

    def test_conflict_without_header_is_fatal(self, client, mock_session):
        mock_session.post.side_effect = [make_response(409, body=b""), make_response()]

        with pytest.raises(NoSessionIdReceived):
            client.call(RpcRequest.session_get(), SessionGet)

        assert mock_session.post.call_count == 1

    def test_token_reused_across_calls(self, client, mock_session):
        mock_session.post.side_effect = [conflict("abc"), make_response(), make_response()]

        client.call(RpcRequest.session_get(), SessionGet)
        client.call(RpcRequest.session_stats())

        assert mock_session.post.call_count == 3
        assert sent_headers(mock_session.post.call_args_list[2])["X-Transmission-Session-Id"] == "abc"
        assert client.session_manager.current_token() == "abc"

    def test_body_is_identical_on_retry(self, client, mock_session):
        mock_session.post.side_effect = [conflict("abc"), make_response()]
        client.call(RpcRequest.free_space("/data"))
        first, second = mock_session.post.call_args_list
        assert first.kwargs["data"] == second.kwargs["data"]


class TestStatusHandling:
    def test_non_409_error_status_is_decoded(self, client, mock_session):
        mock_session.post.return_value = make_response(
            200, body={"arguments": {}, "result": "Invalid argument"}
        )
        response = client.call(RpcRequest.session_get(), SessionGet)
        assert not response.is_ok()
        assert response.result == "Invalid argument"

    def test_unauthorized_html_body_is_decode_error(self, client, mock_session):
        mock_session.post.return_value = make_response(401, body=b"<h1>401: Unauthorized</h1>")
        with pytest.raises(DecodeError):
            client.call(RpcRequest.session_get(), SessionGet)

    def test_transport_error_is_wrapped(self, client, mock_session):
        mock_session.post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(TransportError) as exc_info:
            client.call(RpcRequest.session_get(), SessionGet)

        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
        assert mock_session.post.call_count == 1

    def test_timeout_and_url(self, client, mock_session):
        client.call(RpcRequest.session_get())
        args, kwargs = mock_session.post.call_args
        assert args == (RPC_URL,)
        assert kwargs["timeout"] == 5


class TestAuth:
    def test_no_auth_by_default(self, client, mock_session):
        client.session_get()
        assert "auth" not in mock_session.post.call_args.kwargs

    def test_basic_auth(self, mock_session):
        client = TransClient(RPC_URL, auth=BasicAuth("user", "secret"), session=mock_session)
        client.session_get()
        assert mock_session.post.call_args.kwargs["auth"] == ("user", "secret")

    def test_set_auth_replaces_credentials(self, client, mock_session):
        client.set_auth(BasicAuth("user", "secret"))
        client.session_get()
        assert mock_session.post.call_args.kwargs["auth"] == ("user", "secret")

        client.set_auth(None)
        client.session_get()
        assert "auth" not in mock_session.post.call_args.kwargs

    def test_repr_hides_password(self):
        assert "secret" not in repr(BasicAuth("user", "secret"))


class TestConvenienceMethods:
    def test_session_get(self, client, mock_session):
        mock_session.post.return_value = make_response(body={
            "arguments": {"download-dir": "/data", "version": "4.0.6", "encryption": "preferred"},
            "result": "success",
        })
        response = client.session_get()
        assert sent_body(mock_session.post.call_args) == {"method": "session-get"}
        assert response.arguments.download_dir == "/data"

    def test_torrent_get_defaults_to_all_fields(self, client, mock_session):
        client.torrent_get()
        body = sent_body(mock_session.post.call_args)
        assert body["method"] == "torrent-get"
        assert len(body["arguments"]["fields"]) == len(TorrentGetField)
        assert "ids" not in body["arguments"]

    def test_torrent_get_fields_and_ids(self, client, mock_session):
        mock_session.post.return_value = make_response(body={
            "arguments": {"torrents": [{"id": 1, "name": "debian.iso"}]},
            "result": "success",
        })
        response = client.torrent_get(
            fields=[TorrentGetField.ID, TorrentGetField.NAME],
            ids=[NumericId(1), HashId("e08c")]
        )
        body = sent_body(mock_session.post.call_args)
        assert body["arguments"] == {"fields": ["id", "name"], "ids": [1, "e08c"]}
        assert isinstance(response.arguments, Torrents)
        assert response.arguments.torrents[0].name == "debian.iso"

    def test_torrent_action(self, client, mock_session):
        response = client.torrent_action(TorrentAction.REANNOUNCE, [1, 2])
        assert sent_body(mock_session.post.call_args) == {
            "method": "torrent-reannounce",
            "arguments": {"ids": [1, 2]},
        }
        assert isinstance(response.arguments, Nothing)

    def test_torrent_remove(self, client, mock_session):
        client.torrent_remove([NumericId(3)], delete_local_data=True)
        assert sent_body(mock_session.post.call_args)["arguments"] == {
            "ids": [3],
            "delete-local-data": True,
        }

    def test_torrent_set_location(self, client, mock_session):
        client.torrent_set_location([1], "/data/done", move_from=True)
        assert sent_body(mock_session.post.call_args)["arguments"] == {
            "ids": [1],
            "location": "/data/done",
            "move": True,
        }

    def test_torrent_rename_path(self, client, mock_session):
        mock_session.post.return_value = make_response(body={
            "arguments": {"id": 1, "name": "new", "path": "old"},
            "result": "success",
        })
        response = client.torrent_rename_path([1], "old", "new")
        assert sent_body(mock_session.post.call_args)["arguments"] == {
            "ids": [1], "path": "old", "name": "new"
        }
        assert response.arguments.name == "new"

    def test_torrent_set_overwrites_ids(self, client, mock_session):
        args = TorrentSetArgs(ids=[NumericId(9)], upload_limit=50)
        client.torrent_set(args, ids=[1])
        assert sent_body(mock_session.post.call_args)["arguments"] == {"ids": [1], "uploadLimit": 50}

    def test_torrent_add(self, client, mock_session):
        mock_session.post.return_value = make_response(body={
            "arguments": {"torrent-added": {"id": 7, "name": "debian.iso", "hashString": "e08c"}},
            "result": "success",
        })
        response = client.torrent_add(TorrentAddArgs(filename="magnet:?xt=urn:btih:e08c", paused=True))
        assert sent_body(mock_session.post.call_args)["arguments"] == {
            "filename": "magnet:?xt=urn:btih:e08c",
            "paused": True,
        }
        assert isinstance(response.arguments, TorrentAdded)
        assert response.arguments.torrent.id == 7

    def test_torrent_add_requires_source(self, client, mock_session):
        with pytest.raises(ValueError):
            client.torrent_add(TorrentAddArgs(paused=True))
        mock_session.post.assert_not_called()

    @pytest.mark.parametrize("method,wire", [
        ("queue_move_top", "queue-move-top"),
        ("queue_move_up", "queue-move-up"),
        ("queue_move_down", "queue-move-down"),
        ("queue_move_bottom", "queue-move-bottom"),
    ])
    def test_queue_moves(self, client, mock_session, method, wire):
        getattr(client, method)([1])
        assert sent_body(mock_session.post.call_args) == {"method": wire, "arguments": {"ids": [1]}}

    def test_group_set(self, client, mock_session):
        client.group_set(BandwidthGroup(name="slow", speed_limit_down_enabled=True, speed_limit_down=10))
        assert sent_body(mock_session.post.call_args) == {
            "method": "group-set",
            "arguments": {
                "name": "slow",
                "honorsSessionLimits": True,
                "speed-limit-down-enabled": True,
                "speed-limit-down": 10,
                "speed-limit-up-enabled": False,
                "speed-limit-up": 0,
            },
        }

    @pytest.mark.parametrize("method,wire", [
        ("session_stats", "session-stats"),
        ("session_close", "session-close"),
        ("blocklist_update", "blocklist-update"),
        ("port_test", "port-test"),
    ])
    def test_methods_without_arguments(self, client, mock_session, method, wire):
        response = getattr(client, method)()
        assert sent_body(mock_session.post.call_args) == {"method": wire}
        assert response.is_ok()

    def test_free_space(self, client, mock_session):
        mock_session.post.return_value = make_response(body={
            "arguments": {"path": "/data", "size-bytes": 1024, "total_size": 4096},
            "result": "success",
        })
        response = client.free_space("/data")
        assert response.arguments.size_bytes == 1024
        assert response.arguments.total_size == 4096
