"""
Tests for the message codec: envelope encoding, decoding and the
identifier, timestamp and bitfield decoders.
"""

import json
from datetime import datetime, timezone

import pytest

from torrent_rpc.codec import decode, decode_bitfield, decode_id, decode_timestamp, encode, encode_id
from torrent_rpc.errors import DecodeError, MalformedIdentifierError
from torrent_rpc.models import EPOCH, HashId, NumericId
from torrent_rpc.request import RpcRequest, TorrentSetArgs
from torrent_rpc.response import (
    Nothing,
    SessionGet,
    TorrentAdded,
    TorrentAddedOrDuplicate,
    TorrentAddNoResult,
    TorrentDuplicate,
    Torrents,
)


class TestEncode:
    def test_method_only_omits_arguments(self):
        body = json.loads(encode(RpcRequest.session_get()))
        assert body == {"method": "session-get"}

    def test_none_fields_are_omitted(self):
        request = RpcRequest.torrent_set(TorrentSetArgs(download_limit=100), ids=[1])
        body = json.loads(encode(request))
        assert body == {
            "method": "torrent-set",
            "arguments": {"downloadLimit": 100, "ids": [1]},
        }

    def test_plain_dict_arguments(self):
        request = RpcRequest("torrent-get", {"fields": ["id"], "ids": None, "nested": {"a": None, "b": 1}})
        body = json.loads(encode(request))
        assert body["arguments"] == {"fields": ["id"], "nested": {"b": 1}}

    def test_identifiers_in_dict_arguments(self):
        request = RpcRequest("torrent-start", {"ids": [NumericId(1), HashId("abc")]})
        body = json.loads(encode(request))
        assert body["arguments"]["ids"] == [1, "abc"]

    def test_encodes_utf8_bytes(self):
        request = RpcRequest.free_space("/data/été")
        raw = encode(request)
        assert isinstance(raw, bytes)
        assert json.loads(raw.decode("utf-8"))["arguments"]["path"] == "/data/été"


class TestDecode:
    def test_success_envelope(self):
        response = decode(b'{"arguments": {"version": "4.0.6", "rpc-version": 18}, "result": "success"}', SessionGet)
        assert response.is_ok()
        assert response.arguments.version == "4.0.6"
        assert response.arguments.rpc_version == 18

    def test_failure_is_returned_as_data(self):
        response = decode(b'{"arguments": {}, "result": "no such method"}', Nothing)
        assert not response.is_ok()
        assert response.result == "no such method"

    def test_missing_arguments_decodes_as_empty(self):
        response = decode(b'{"result": "success"}', Torrents)
        assert response.arguments.torrents == []

    def test_raw_arguments_without_result_type(self):
        response = decode(b'{"arguments": {"x": 1}, "result": "success"}')
        assert response.arguments == {"x": 1}

    def test_invalid_json(self):
        with pytest.raises(DecodeError):
            decode(b"<html>Unauthorized</html>", Nothing)

    def test_non_object_envelope(self):
        with pytest.raises(DecodeError):
            decode(b"[1, 2, 3]", Nothing)

    def test_missing_result(self):
        with pytest.raises(DecodeError):
            decode(b'{"arguments": {}}', Nothing)

    def test_arguments_not_an_object(self):
        with pytest.raises(DecodeError):
            decode(b'{"arguments": [], "result": "success"}', Nothing)

    def test_shape_mismatch(self):
        with pytest.raises(DecodeError):
            decode(b'{"arguments": {"torrents": "nope"}, "result": "success"}', Torrents)

    def test_unknown_keys_are_ignored(self):
        response = decode(b'{"arguments": {"torrents": [], "future-key": true}, "result": "success"}', Torrents)
        assert response.arguments.torrents == []


class TestTorrentAddedOrDuplicate:
    INFO = {"id": 1, "name": "debian.iso", "hashString": "e08c426aab2cc58649ae5e73690e3747117b3470"}

    def test_added(self):
        body = json.dumps({"arguments": {"torrent-added": self.INFO}, "result": "success"})
        response = decode(body, TorrentAddedOrDuplicate)
        assert isinstance(response.arguments, TorrentAdded)
        assert response.arguments.torrent.id == 1
        assert response.arguments.torrent.hash_string == self.INFO["hashString"]

    def test_duplicate(self):
        body = json.dumps({"arguments": {"torrent-duplicate": self.INFO}, "result": "success"})
        response = decode(body, TorrentAddedOrDuplicate)
        assert isinstance(response.arguments, TorrentDuplicate)
        assert response.arguments.torrent.name == "debian.iso"

    def test_empty_arguments(self):
        response = decode(b'{"arguments": {}, "result": "invalid or corrupt torrent file"}', TorrentAddedOrDuplicate)
        assert isinstance(response.arguments, TorrentAddNoResult)
        assert not response.is_ok()

    def test_unknown_key_only(self):
        response = decode(b'{"arguments": {"torrent-queued": {}}, "result": "success"}', TorrentAddedOrDuplicate)
        assert isinstance(response.arguments, TorrentAddNoResult)

    def test_variants_share_base(self):
        assert issubclass(TorrentAdded, TorrentAddedOrDuplicate)
        assert issubclass(TorrentAddNoResult, TorrentAddedOrDuplicate)

    def test_malformed_payload(self):
        with pytest.raises(DecodeError):
            decode(b'{"arguments": {"torrent-added": {"id": 1}}, "result": "success"}', TorrentAddedOrDuplicate)


class TestIdentifiers:
    def test_numeric(self):
        assert decode_id(5) == NumericId(5)

    def test_hash(self):
        assert decode_id("e08c426a") == HashId("e08c426a")

    @pytest.mark.parametrize("value", [True, False, 1.5, None, {}, []])
    def test_malformed(self, value):
        with pytest.raises(MalformedIdentifierError):
            decode_id(value)

    def test_malformed_is_a_decode_error(self):
        assert issubclass(MalformedIdentifierError, DecodeError)

    def test_round_trip(self):
        assert decode_id(encode_id(NumericId(42))) == NumericId(42)
        assert decode_id(encode_id(HashId("abc"))) == HashId("abc")


class TestTimestamps:
    def test_zero_and_negative_are_epoch(self):
        assert decode_timestamp(0) == EPOCH
        assert decode_timestamp(-1) == EPOCH

    def test_positive(self):
        assert decode_timestamp(1718947434) == datetime(2024, 6, 21, 5, 23, 54, tzinfo=timezone.utc)

    def test_result_is_utc(self):
        assert decode_timestamp(1).tzinfo == timezone.utc

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            decode_timestamp(10 ** 20)


class TestBitfield:
    def test_decodes_base64(self):
        assert decode_bitfield("AAAAAAAAAAAA") == bytes(9)

    def test_invalid(self):
        with pytest.raises(ValueError):
            decode_bitfield("not base64!")
