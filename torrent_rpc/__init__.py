"""
Client for the Transmission torrent daemon's JSON RPC protocol.
"""

from .client import MAX_RETRIES, TransClient
from .errors import (
    DecodeError,
    MalformedIdentifierError,
    MaxRetriesReached,
    NoSessionIdReceived,
    TransError,
    TransportError,
)
from .models import (
    EPOCH,
    BasicAuth,
    Encryption,
    ErrorType,
    HashId,
    Id,
    IdleMode,
    NumericId,
    Priority,
    RatioMode,
    RpcResponse,
    TorrentStatus,
    TrackerState,
)
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
    TorrentAdded,
    TorrentAddedOrDuplicate,
    TorrentAddNoResult,
    TorrentDuplicate,
    Torrent,
    Torrents,
)
from .sharable import SharableTransClient

__version__ = "0.1.0"
__all__ = [
    "TransClient",
    "SharableTransClient",
    "MAX_RETRIES",
    "RpcRequest",
    "RpcResponse",
    "Method",
    "TorrentAction",
    "TorrentGetField",
    "SessionSetArgs",
    "TorrentAddArgs",
    "TorrentSetArgs",
    "BandwidthGroup",
    "Torrent",
    "Torrents",
    "TorrentAddedOrDuplicate",
    "TorrentAdded",
    "TorrentDuplicate",
    "TorrentAddNoResult",
    "BasicAuth",
    "Id",
    "NumericId",
    "HashId",
    "EPOCH",
    "Encryption",
    "ErrorType",
    "IdleMode",
    "Priority",
    "RatioMode",
    "TorrentStatus",
    "TrackerState",
    "TransError",
    "TransportError",
    "DecodeError",
    "MalformedIdentifierError",
    "NoSessionIdReceived",
    "MaxRetriesReached",
]
