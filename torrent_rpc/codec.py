"""
Message codec for the Transmission RPC envelope.

Pure transformations between typed documents and wire JSON:

- encode(): RpcRequest -> bytes, omitting every absent (None) argument
- decode(): bytes -> RpcResponse[T], where T chooses the decoding strategy

Result types pick their own strategy through a ``from_arguments`` classmethod.
Plain records are pydantic models validated against their wire aliases; the
add-torrent result inspects which key is present. Identifiers, timestamps and
bitfields have dedicated decoders, exposed as annotated pydantic types so the
records can declare them directly.
"""

import base64
import binascii
import json
from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional, Type, Union

from pydantic import BaseModel, BeforeValidator, PlainSerializer, PlainValidator, ValidationError

from .errors import DecodeError, MalformedIdentifierError
from .models import EPOCH, HashId, Id, NumericId, RpcResponse


def decode_id(value: Any) -> Id:
    """
    Decode an untagged identifier.

    Integers are tried first, then strings. Booleans are rejected even though
    Python treats them as integers.
    """
    if isinstance(value, (NumericId, HashId)):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return NumericId(value)
    if isinstance(value, str):
        return HashId(value)
    raise MalformedIdentifierError(f"Malformed identifier: {value!r}")


def encode_id(value: Any) -> Union[int, str]:
    ident = decode_id(value)
    if isinstance(ident, NumericId):
        return ident.id
    return ident.hash


def decode_timestamp(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value <= 0:
            return EPOCH
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Timestamp out of range: {value}") from e
    return value


def decode_bitfield(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 bitfield: {e}")
    return value


def encode_tracker_list(value: List[str]) -> str:
    return "\n".join(value)


IdField = Annotated[Union[NumericId, HashId], PlainValidator(decode_id), PlainSerializer(encode_id)]
Timestamp = Annotated[datetime, BeforeValidator(decode_timestamp)]
Bitfield = Annotated[bytes, BeforeValidator(decode_bitfield)]
TrackerList = Annotated[List[str], PlainSerializer(encode_tracker_list, return_type=str)]


def encode_arguments(arguments: Any) -> Optional[dict]:
    if arguments is None:
        return None
    if isinstance(arguments, BaseModel):
        return arguments.model_dump(mode="json", by_alias=True, exclude_none=True)
    return _strip_none(arguments)


def _strip_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _strip_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_strip_none(v) for v in value]
    if isinstance(value, (NumericId, HashId)):
        return encode_id(value)
    return value


def encode(request) -> bytes:
    """Serialize an RpcRequest to the JSON body sent to the daemon."""
    document = {"method": request.method}
    arguments = encode_arguments(request.arguments)
    if arguments is not None:
        document["arguments"] = arguments
    return json.dumps(document).encode("utf-8")


def decode(body: Union[bytes, str], result_type: Optional[Type] = None) -> RpcResponse:
    """
    Decode a response body into an RpcResponse.

    Args:
        body: Raw response body
        result_type: Type of the ``arguments`` payload. Must provide a
            ``from_arguments`` classmethod. When None the raw arguments
            dictionary is returned.

    Raises:
        DecodeError: If the body is not JSON or does not match result_type
    """
    try:
        envelope = json.loads(body)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Response body is not valid JSON: {e}") from e

    if not isinstance(envelope, dict):
        raise DecodeError(f"Response envelope is not an object: {type(envelope).__name__}")

    result = envelope.get("result")
    if not isinstance(result, str):
        raise DecodeError("Response envelope has no result string")

    arguments = envelope.get("arguments")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise DecodeError(f"Response arguments is not an object: {type(arguments).__name__}")

    if result_type is None:
        return RpcResponse(arguments=arguments, result=result)

    try:
        decoded = result_type.from_arguments(arguments)
    except ValidationError as e:
        raise DecodeError(f"Failed to decode {result_type.__name__}: {e}") from e

    return RpcResponse(arguments=decoded, result=result)
