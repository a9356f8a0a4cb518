"""
Shared value types for the Transmission RPC client.

Includes the response envelope (RpcResponse), basic auth credentials, the
two-case torrent identifier (NumericId / HashId) and the small integer
enumerations used by both requests and responses.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Generic, TypeVar, Union


T = TypeVar("T")

SUCCESS = "success"

# Wire values of zero or below for "last happened" fields decode to this
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class BasicAuth:
    user: str
    password: str

    def __repr__(self):
        return f"BasicAuth(user={self.user!r}, password='***')"

    def as_tuple(self):
        return (self.user, self.password)


@dataclass(frozen=True)
class NumericId:
    """Torrent identified by its session-local numeric id."""
    id: int


@dataclass(frozen=True)
class HashId:
    """Torrent identified by its info hash string."""
    hash: str


Id = Union[NumericId, HashId]


@dataclass
class RpcResponse(Generic[T]):
    """
    Decoded response envelope.

    ``result`` is the daemon's own status string. Anything other than
    "success" is a failure reported by the daemon, e.g. "duplicate torrent".
    """
    arguments: T
    result: str

    def is_ok(self) -> bool:
        return self.result == SUCCESS


class Priority(IntEnum):
    LOW = -1
    NORMAL = 0
    HIGH = 1


class IdleMode(IntEnum):
    GLOBAL = 0
    SINGLE = 1
    UNLIMITED = 2


class RatioMode(IntEnum):
    GLOBAL = 0
    SINGLE = 1
    UNLIMITED = 2


class TorrentStatus(IntEnum):
    STOPPED = 0
    QUEUED_TO_VERIFY = 1
    VERIFYING = 2
    QUEUED_TO_DOWNLOAD = 3
    DOWNLOADING = 4
    QUEUED_TO_SEED = 5
    SEEDING = 6


class ErrorType(IntEnum):
    OK = 0
    TRACKER_WARNING = 1
    TRACKER_ERROR = 2
    LOCAL_ERROR = 3


class TrackerState(IntEnum):
    INACTIVE = 0
    WAITING = 1
    QUEUED = 2
    ACTIVE = 3


class Encryption(str, Enum):
    REQUIRED = "required"
    PREFERRED = "preferred"
    TOLERATED = "tolerated"
