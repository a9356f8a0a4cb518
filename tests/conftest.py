import json
from unittest.mock import MagicMock

import pytest

from torrent_rpc.client import TransClient
from torrent_rpc.sharable import SharableTransClient

RPC_URL = "http://localhost:9091/transmission/rpc"


def make_response(status=200, body=None, headers=None):
    """Build a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status
    response.headers = headers or {}
    if body is None:
        body = {"arguments": {}, "result": "success"}
    response.content = json.dumps(body).encode("utf-8") if isinstance(body, dict) else body
    return response


def conflict(token):
    return make_response(409, body=b"", headers={"X-Transmission-Session-Id": token})


def sent_body(call):
    """Decode the JSON body of one recorded session.post call."""
    return json.loads(call.kwargs["data"])


def sent_headers(call):
    return call.kwargs["headers"]


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.post.return_value = make_response()
    return session


@pytest.fixture
def client(mock_session):
    return TransClient(RPC_URL, session=mock_session, timeout=5)


@pytest.fixture
def sharable_client(mock_session):
    return SharableTransClient(RPC_URL, session=mock_session, timeout=5)
