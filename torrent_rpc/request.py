"""
Request catalogue for the Transmission RPC protocol.

Provides RpcRequest, with one builder per RPC method, and the argument
records those builders carry. Argument records are pydantic models whose
aliases are the wire names; unset (None) fields are left out of the
serialized document because the daemon treats "missing" and "null"
differently.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .codec import IdField, TrackerList, decode_id
from .models import Encryption, Id, IdleMode, Priority, RatioMode


def to_kebab(name: str) -> str:
    return name.replace("_", "-")


def normalize_ids(ids: Optional[Iterable[Any]]) -> Optional[List[Id]]:
    """Accept NumericId/HashId values as well as bare ints and hash strings."""
    if ids is None:
        return None
    return [decode_id(i) for i in ids]


class Method(str, Enum):
    SESSION_SET = "session-set"
    SESSION_GET = "session-get"
    SESSION_STATS = "session-stats"
    SESSION_CLOSE = "session-close"
    BLOCKLIST_UPDATE = "blocklist-update"
    FREE_SPACE = "free-space"
    PORT_TEST = "port-test"
    TORRENT_GET = "torrent-get"
    TORRENT_SET = "torrent-set"
    TORRENT_REMOVE = "torrent-remove"
    TORRENT_ADD = "torrent-add"
    TORRENT_SET_LOCATION = "torrent-set-location"
    TORRENT_RENAME_PATH = "torrent-rename-path"
    QUEUE_MOVE_TOP = "queue-move-top"
    QUEUE_MOVE_UP = "queue-move-up"
    QUEUE_MOVE_DOWN = "queue-move-down"
    QUEUE_MOVE_BOTTOM = "queue-move-bottom"
    GROUP_SET = "group-set"


class TorrentAction(str, Enum):
    START = "torrent-start"
    STOP = "torrent-stop"
    START_NOW = "torrent-start-now"
    VERIFY = "torrent-verify"
    REANNOUNCE = "torrent-reannounce"


class TorrentGetField(str, Enum):
    ACTIVITY_DATE = "activityDate"
    ADDED_DATE = "addedDate"
    AVAILABILITY = "availability"
    BANDWIDTH_PRIORITY = "bandwidthPriority"
    COMMENT = "comment"
    CORRUPT_EVER = "corruptEver"
    CREATOR = "creator"
    DATE_CREATED = "dateCreated"
    DESIRED_AVAILABLE = "desiredAvailable"
    DONE_DATE = "doneDate"
    DOWNLOAD_DIR = "downloadDir"
    DOWNLOADED_EVER = "downloadedEver"
    DOWNLOAD_LIMIT = "downloadLimit"
    DOWNLOAD_LIMITED = "downloadLimited"
    EDIT_DATE = "editDate"
    ERROR = "error"
    ERROR_STRING = "errorString"
    ETA = "eta"
    ETA_IDLE = "etaIdle"
    FILE_COUNT = "file-count"
    FILE_STATS = "fileStats"
    FILES = "files"
    GROUP = "group"
    HASH_STRING = "hashString"
    HAVE_UNCHECKED = "haveUnchecked"
    HAVE_VALID = "haveValid"
    HONORS_SESSION_LIMITS = "honorsSessionLimits"
    ID = "id"
    IS_FINISHED = "isFinished"
    IS_PRIVATE = "isPrivate"
    IS_STALLED = "isStalled"
    LABELS = "labels"
    LEFT_UNTIL_DONE = "leftUntilDone"
    MAGNET_LINK = "magnetLink"
    MANUAL_ANNOUNCE_TIME = "manualAnnounceTime"
    MAX_CONNECTED_PEERS = "maxConnectedPeers"
    METADATA_PERCENT_COMPLETE = "metadataPercentComplete"
    NAME = "name"
    PEER_LIMIT = "peer-limit"
    PEERS = "peers"
    PEERS_CONNECTED = "peersConnected"
    PEERS_FROM = "peersFrom"
    PEERS_GETTING_FROM_US = "peersGettingFromUs"
    PEERS_SENDING_TO_US = "peersSendingToUs"
    PERCENT_COMPLETE = "percentComplete"
    PERCENT_DONE = "percentDone"
    PIECES = "pieces"
    PIECE_COUNT = "pieceCount"
    PIECE_SIZE = "pieceSize"
    PRIORITIES = "priorities"
    PRIMARY_MIME_TYPE = "primary-mime-type"
    QUEUE_POSITION = "queuePosition"
    RATE_DOWNLOAD = "rateDownload"
    RATE_UPLOAD = "rateUpload"
    RECHECK_PROGRESS = "recheckProgress"
    SECONDS_DOWNLOADING = "secondsDownloading"
    SECONDS_SEEDING = "secondsSeeding"
    SEED_IDLE_LIMIT = "seedIdleLimit"
    SEED_IDLE_MODE = "seedIdleMode"
    SEED_RATIO_LIMIT = "seedRatioLimit"
    SEED_RATIO_MODE = "seedRatioMode"
    SEQUENTIAL_DOWNLOAD = "sequentialDownload"
    SIZE_WHEN_DONE = "sizeWhenDone"
    START_DATE = "startDate"
    STATUS = "status"
    TORRENT_FILE = "torrentFile"
    TOTAL_SIZE = "totalSize"
    TRACKERS = "trackers"
    TRACKER_LIST = "trackerList"
    TRACKER_STATS = "trackerStats"
    UPLOAD_RATIO = "uploadRatio"
    UPLOADED_EVER = "uploadedEver"
    UPLOAD_LIMIT = "uploadLimit"
    UPLOAD_LIMITED = "uploadLimited"
    WANTED = "wanted"
    WEBSEEDS = "webseeds"
    WEBSEEDS_SENDING_TO_US = "webseedsSendingToUs"


class RequestArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class KebabArgs(RequestArgs):
    model_config = ConfigDict(alias_generator=to_kebab)


class CamelArgs(RequestArgs):
    model_config = ConfigDict(alias_generator=to_camel)


class FreeSpaceArgs(RequestArgs):
    path: str


class IdsArgs(RequestArgs):
    ids: List[IdField]


class TorrentGetArgs(RequestArgs):
    fields: List[TorrentGetField] = Field(default_factory=lambda: list(TorrentGetField))
    # None means every torrent
    ids: Optional[List[IdField]] = None


class TorrentRemoveArgs(KebabArgs):
    ids: List[IdField]
    delete_local_data: bool = False


class TorrentSetLocationArgs(RequestArgs):
    ids: List[IdField]
    location: str
    move_from: Optional[bool] = Field(default=None, alias="move")


class TorrentRenamePathArgs(RequestArgs):
    ids: List[IdField]
    path: str
    name: str


class TorrentAddArgs(KebabArgs):
    """
    Arguments for torrent-add. Either ``filename`` (path or URL of a .torrent
    file, or a magnet link) or ``metainfo`` (base64 .torrent content) must be set.
    """
    cookies: Optional[str] = None
    download_dir: Optional[str] = None
    filename: Optional[str] = None
    metainfo: Optional[str] = None
    paused: Optional[bool] = None
    peer_limit: Optional[int] = None
    bandwidth_priority: Optional[Priority] = Field(default=None, alias="bandwidthPriority")
    files_wanted: Optional[List[int]] = None
    files_unwanted: Optional[List[int]] = None
    priority_high: Optional[List[int]] = None
    priority_low: Optional[List[int]] = None
    priority_normal: Optional[List[int]] = None
    labels: Optional[List[str]] = None


class TorrentSetArgs(CamelArgs):
    bandwidth_priority: Optional[Priority] = None
    download_limit: Optional[int] = None
    download_limited: Optional[bool] = None
    files_wanted: Optional[List[int]] = Field(default=None, alias="files-wanted")
    files_unwanted: Optional[List[int]] = Field(default=None, alias="files-unwanted")
    group: Optional[str] = None
    honors_session_limits: Optional[bool] = None
    # Overwritten by RpcRequest.torrent_set()
    ids: Optional[List[IdField]] = None
    labels: Optional[List[str]] = None
    location: Optional[str] = None
    peer_limit: Optional[int] = Field(default=None, alias="peer-limit")
    priority_high: Optional[List[int]] = Field(default=None, alias="priority-high")
    priority_low: Optional[List[int]] = Field(default=None, alias="priority-low")
    priority_normal: Optional[List[int]] = Field(default=None, alias="priority-normal")
    queue_position: Optional[int] = None
    seed_idle_limit: Optional[int] = None
    seed_idle_mode: Optional[IdleMode] = None
    seed_ratio_limit: Optional[float] = None
    seed_ratio_mode: Optional[RatioMode] = None
    sequential_download: Optional[bool] = None
    tracker_add: Optional[List[str]] = None
    # Announce urls, with an empty entry between tiers
    tracker_list: Optional[TrackerList] = None
    tracker_remove: Optional[List[int]] = None
    tracker_replace: Optional[List[Any]] = None
    upload_limit: Optional[int] = None
    upload_limited: Optional[bool] = None


class SessionSetArgs(KebabArgs):
    alt_speed_down: Optional[int] = None
    alt_speed_enabled: Optional[bool] = None
    alt_speed_time_begin: Optional[int] = None
    alt_speed_time_day: Optional[int] = None
    alt_speed_time_enabled: Optional[bool] = None
    alt_speed_time_end: Optional[int] = None
    alt_speed_up: Optional[int] = None
    blocklist_enabled: Optional[bool] = None
    blocklist_url: Optional[str] = None
    cache_size_mb: Optional[int] = None
    default_trackers: Optional[str] = None
    dht_enabled: Optional[bool] = None
    download_dir: Optional[str] = None
    download_queue_enabled: Optional[bool] = None
    download_queue_size: Optional[int] = None
    encryption: Optional[Encryption] = None
    idle_seeding_limit_enabled: Optional[bool] = None
    idle_seeding_limit: Optional[int] = None
    incomplete_dir_enabled: Optional[bool] = None
    incomplete_dir: Optional[str] = None
    lpd_enabled: Optional[bool] = None
    peer_limit_global: Optional[int] = None
    peer_limit_per_torrent: Optional[int] = None
    peer_port_random_on_start: Optional[bool] = None
    peer_port: Optional[int] = None
    pex_enabled: Optional[bool] = None
    port_forwarding_enabled: Optional[bool] = None
    queue_stalled_enabled: Optional[bool] = None
    queue_stalled_minutes: Optional[int] = None
    rename_partial_files: Optional[bool] = None
    script_torrent_added_enabled: Optional[bool] = None
    script_torrent_added_filename: Optional[str] = None
    script_torrent_done_enabled: Optional[bool] = None
    script_torrent_done_filename: Optional[str] = None
    script_torrent_done_seeding_enabled: Optional[bool] = None
    script_torrent_done_seeding_filename: Optional[str] = None
    seed_queue_enabled: Optional[bool] = None
    seed_queue_size: Optional[int] = None
    seed_ratio_limit: Optional[float] = Field(default=None, alias="seedRatioLimit")
    seed_ratio_limited: Optional[bool] = Field(default=None, alias="seedRatioLimited")
    speed_limit_down_enabled: Optional[bool] = None
    speed_limit_down: Optional[int] = None
    speed_limit_up_enabled: Optional[bool] = None
    speed_limit_up: Optional[int] = None
    start_added_torrents: Optional[bool] = None
    trash_original_torrent_files: Optional[bool] = None
    utp_enabled: Optional[bool] = None


class BandwidthGroup(KebabArgs):
    """A named bandwidth group, as sent with group-set."""
    name: str
    honors_session_limits: bool = Field(default=True, alias="honorsSessionLimits")
    speed_limit_down_enabled: bool = False
    speed_limit_down: int = 0
    speed_limit_up_enabled: bool = False
    speed_limit_up: int = 0


@dataclass
class RpcRequest:
    """
    Outgoing request envelope.

    ``method`` is the wire method name; ``arguments`` is an argument record
    (or a plain dict) and is left out of the body entirely when None.
    """
    method: str
    arguments: Optional[Any] = None

    @classmethod
    def session_set(cls, args: SessionSetArgs) -> "RpcRequest":
        return cls(Method.SESSION_SET.value, args)

    @classmethod
    def session_get(cls) -> "RpcRequest":
        return cls(Method.SESSION_GET.value)

    @classmethod
    def session_stats(cls) -> "RpcRequest":
        return cls(Method.SESSION_STATS.value)

    @classmethod
    def session_close(cls) -> "RpcRequest":
        return cls(Method.SESSION_CLOSE.value)

    @classmethod
    def blocklist_update(cls) -> "RpcRequest":
        return cls(Method.BLOCKLIST_UPDATE.value)

    @classmethod
    def free_space(cls, path: str) -> "RpcRequest":
        return cls(Method.FREE_SPACE.value, FreeSpaceArgs(path=path))

    @classmethod
    def port_test(cls) -> "RpcRequest":
        return cls(Method.PORT_TEST.value)

    @classmethod
    def queue_move(cls, method: Method, ids: Iterable[Any]) -> "RpcRequest":
        return cls(method.value, IdsArgs(ids=normalize_ids(ids)))

    @classmethod
    def torrent_get(
        cls,
        fields: Optional[Iterable[TorrentGetField]] = None,
        ids: Optional[Iterable[Any]] = None
    ) -> "RpcRequest":
        """Request ``fields`` (all when None) of torrents ``ids`` (all when None)."""
        args = TorrentGetArgs(ids=normalize_ids(ids))
        if fields is not None:
            args.fields = [TorrentGetField(f) for f in fields]
        return cls(Method.TORRENT_GET.value, args)

    @classmethod
    def torrent_set(cls, args: TorrentSetArgs, ids: Optional[Iterable[Any]] = None) -> "RpcRequest":
        args = args.model_copy(update={"ids": normalize_ids(ids)})
        return cls(Method.TORRENT_SET.value, args)

    @classmethod
    def torrent_remove(cls, ids: Iterable[Any], delete_local_data: bool) -> "RpcRequest":
        args = TorrentRemoveArgs(ids=normalize_ids(ids), delete_local_data=delete_local_data)
        return cls(Method.TORRENT_REMOVE.value, args)

    @classmethod
    def torrent_add(cls, args: TorrentAddArgs) -> "RpcRequest":
        if args.filename is None and args.metainfo is None:
            raise ValueError("torrent-add requires either filename or metainfo")
        return cls(Method.TORRENT_ADD.value, args)

    @classmethod
    def torrent_action(cls, action: TorrentAction, ids: Iterable[Any]) -> "RpcRequest":
        return cls(TorrentAction(action).value, IdsArgs(ids=normalize_ids(ids)))

    @classmethod
    def torrent_set_location(
        cls,
        ids: Iterable[Any],
        location: str,
        move_from: Optional[bool] = None
    ) -> "RpcRequest":
        args = TorrentSetLocationArgs(ids=normalize_ids(ids), location=location, move_from=move_from)
        return cls(Method.TORRENT_SET_LOCATION.value, args)

    @classmethod
    def torrent_rename_path(cls, ids: Iterable[Any], path: str, name: str) -> "RpcRequest":
        args = TorrentRenamePathArgs(ids=normalize_ids(ids), path=path, name=name)
        return cls(Method.TORRENT_RENAME_PATH.value, args)

    @classmethod
    def group_set(cls, group: BandwidthGroup) -> "RpcRequest":
        return cls(Method.GROUP_SET.value, group)
