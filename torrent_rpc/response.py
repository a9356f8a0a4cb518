"""
Response catalogue for the Transmission RPC protocol.

Each result type decodes the ``arguments`` object of a response envelope via
its ``from_arguments`` classmethod. Plain records are pydantic models keyed by
their wire names. Top-level records leave every field optional, since a
failed call answers with ``{}``; nested records (files, peers, trackers)
require their core fields.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress
from pydantic.alias_generators import to_camel

from .codec import Bitfield, IdField, Timestamp
from .models import (
    ErrorType,
    IdleMode,
    Priority,
    RatioMode,
    RpcResponse,
    TorrentStatus,
    TrackerState,
)

__all__ = [
    "RpcResponse",
    "Nothing",
    "SessionGet",
    "SessionStats",
    "StatsDetails",
    "SessionClose",
    "BlocklistUpdate",
    "FreeSpace",
    "PortTest",
    "Torrents",
    "Torrent",
    "File",
    "FileStat",
    "Peer",
    "PeersFrom",
    "Tracker",
    "TrackerStat",
    "TorrentRenamePath",
    "TorrentAddedInfo",
    "TorrentAddedOrDuplicate",
    "TorrentAdded",
    "TorrentDuplicate",
    "TorrentAddNoResult",
]


def to_kebab(name: str) -> str:
    return name.replace("_", "-")


class ResponseRecord(BaseModel):
    """Base for records decoded from a response ``arguments`` object."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, ser_json_bytes="base64")

    @classmethod
    def from_arguments(cls, arguments: Dict[str, Any]):
        return cls.model_validate(arguments)


class KebabRecord(ResponseRecord):
    model_config = ConfigDict(alias_generator=to_kebab)


class Nothing(ResponseRecord):
    """Result of calls whose success answer carries no arguments."""


class SessionClose(ResponseRecord):
    pass


class SessionGet(KebabRecord):
    alt_speed_down: Optional[int] = None
    alt_speed_enabled: Optional[bool] = None
    alt_speed_time_begin: Optional[int] = None
    alt_speed_time_day: Optional[int] = None
    alt_speed_time_enabled: Optional[bool] = None
    alt_speed_time_end: Optional[int] = None
    alt_speed_up: Optional[int] = None
    blocklist_enabled: Optional[bool] = None
    blocklist_size: Optional[int] = None
    blocklist_url: Optional[str] = None
    cache_size_mb: Optional[int] = None
    config_dir: Optional[str] = None
    default_trackers: Optional[str] = None
    dht_enabled: Optional[bool] = None
    download_dir: Optional[str] = None
    download_queue_enabled: Optional[bool] = None
    download_queue_size: Optional[int] = None
    encryption: Optional[str] = None
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
    rpc_version: Optional[int] = None
    rpc_version_minimum: Optional[int] = None
    rpc_version_semver: Optional[str] = None
    seed_queue_enabled: Optional[bool] = None
    seed_queue_size: Optional[int] = None
    seed_ratio_limit: Optional[float] = Field(default=None, alias="seedRatioLimit")
    seed_ratio_limited: Optional[bool] = Field(default=None, alias="seedRatioLimited")
    session_id: Optional[str] = None
    speed_limit_down_enabled: Optional[bool] = None
    speed_limit_down: Optional[int] = None
    speed_limit_up_enabled: Optional[bool] = None
    speed_limit_up: Optional[int] = None
    start_added_torrents: Optional[bool] = None
    trash_original_torrent_files: Optional[bool] = None
    utp_enabled: Optional[bool] = None
    version: Optional[str] = None


class StatsDetails(ResponseRecord):
    uploaded_bytes: int
    downloaded_bytes: int
    files_added: int
    session_count: int
    seconds_active: int


class SessionStats(ResponseRecord):
    active_torrent_count: Optional[int] = None
    download_speed: Optional[int] = None
    paused_torrent_count: Optional[int] = None
    torrent_count: Optional[int] = None
    upload_speed: Optional[int] = None
    cumulative_stats: Optional[StatsDetails] = Field(default=None, alias="cumulative-stats")
    current_stats: Optional[StatsDetails] = Field(default=None, alias="current-stats")


class BlocklistUpdate(KebabRecord):
    blocklist_size: Optional[int] = None


class FreeSpace(KebabRecord):
    path: Optional[str] = None
    size_bytes: Optional[int] = None
    total_size: Optional[int] = Field(default=None, alias="total_size")


class PortTest(KebabRecord):
    port_is_open: Optional[bool] = None
    ip_protocol: Optional[str] = Field(default=None, alias="ip_protocol")


class TorrentRenamePath(ResponseRecord):
    id: Optional[int] = None
    name: Optional[str] = None
    path: Optional[str] = None


class File(ResponseRecord):
    bytes_completed: int
    length: int
    name: str
    # Only sent by daemons speaking rpc-version 18 or later
    begin_piece: Optional[int] = None
    end_piece: Optional[int] = None


class FileStat(ResponseRecord):
    bytes_completed: int
    wanted: bool
    priority: Priority


class Peer(ResponseRecord):
    address: IPvAnyAddress
    client_name: str
    client_is_choked: bool
    client_is_interested: bool
    flag_str: str
    is_downloading_from: bool
    is_encrypted: bool
    is_incoming: bool
    is_uploading_to: bool
    is_utp: bool = Field(alias="isUTP")
    peer_is_choked: bool
    peer_is_interested: bool
    port: int
    progress: float
    rate_to_client: int
    rate_to_peer: int


class PeersFrom(ResponseRecord):
    from_cache: int
    from_dht: int
    from_incoming: int
    from_lpd: int
    from_ltep: int
    from_pex: int
    from_tracker: int


class Tracker(ResponseRecord):
    id: int
    announce: str
    scrape: str
    sitename: str = ""
    tier: int


class TrackerStat(ResponseRecord):
    announce: str
    announce_state: TrackerState
    download_count: int
    has_announced: bool
    has_scraped: bool
    host: str
    id: IdField
    is_backup: bool
    last_announce_peer_count: int
    last_announce_result: str
    last_announce_start_time: Timestamp
    last_announce_succeeded: bool
    last_announce_time: Timestamp
    last_announce_timed_out: bool
    last_scrape_result: str
    last_scrape_start_time: Timestamp
    last_scrape_succeeded: bool
    last_scrape_time: Timestamp
    last_scrape_timed_out: bool
    leecher_count: int
    next_announce_time: Timestamp
    next_scrape_time: Timestamp
    scrape: str
    scrape_state: TrackerState
    seeder_count: int
    sitename: str = ""
    tier: int


class Torrent(ResponseRecord):
    """
    One torrent from a torrent-get answer.

    Only the fields that were requested are present; everything else is None.
    """
    activity_date: Optional[Timestamp] = None
    added_date: Optional[Timestamp] = None
    availability: Optional[List[int]] = None
    bandwidth_priority: Optional[Priority] = None
    comment: Optional[str] = None
    corrupt_ever: Optional[int] = None
    creator: Optional[str] = None
    date_created: Optional[Timestamp] = None
    desired_available: Optional[int] = None
    done_date: Optional[Timestamp] = None
    download_dir: Optional[str] = None
    downloaded_ever: Optional[int] = None
    download_limit: Optional[int] = None
    download_limited: Optional[bool] = None
    edit_date: Optional[Timestamp] = None
    error: Optional[ErrorType] = None
    error_string: Optional[str] = None
    eta: Optional[int] = None
    eta_idle: Optional[int] = None
    file_count: Optional[int] = Field(default=None, alias="file-count")
    files: Optional[List[File]] = None
    file_stats: Optional[List[FileStat]] = None
    group: Optional[str] = None
    hash_string: Optional[str] = None
    have_unchecked: Optional[int] = None
    have_valid: Optional[int] = None
    honors_session_limits: Optional[bool] = None
    id: Optional[int] = None
    is_finished: Optional[bool] = None
    is_private: Optional[bool] = None
    is_stalled: Optional[bool] = None
    labels: Optional[List[str]] = None
    left_until_done: Optional[int] = None
    magnet_link: Optional[str] = None
    manual_announce_time: Optional[Timestamp] = None
    max_connected_peers: Optional[int] = None
    metadata_percent_complete: Optional[float] = None
    name: Optional[str] = None
    peer_limit: Optional[int] = Field(default=None, alias="peer-limit")
    peers: Optional[List[Peer]] = None
    peers_connected: Optional[int] = None
    peers_from: Optional[PeersFrom] = None
    peers_getting_from_us: Optional[int] = None
    peers_sending_to_us: Optional[int] = None
    percent_complete: Optional[float] = None
    percent_done: Optional[float] = None
    pieces: Optional[Bitfield] = None
    piece_count: Optional[int] = None
    piece_size: Optional[int] = None
    priorities: Optional[List[Priority]] = None
    primary_mime_type: Optional[str] = Field(default=None, alias="primary-mime-type")
    queue_position: Optional[int] = None
    rate_download: Optional[int] = None
    rate_upload: Optional[int] = None
    recheck_progress: Optional[float] = None
    seconds_downloading: Optional[int] = None
    seconds_seeding: Optional[int] = None
    seed_idle_limit: Optional[int] = None
    seed_idle_mode: Optional[IdleMode] = None
    seed_ratio_limit: Optional[float] = None
    seed_ratio_mode: Optional[RatioMode] = None
    sequential_download: Optional[bool] = None
    size_when_done: Optional[int] = None
    start_date: Optional[Timestamp] = None
    status: Optional[TorrentStatus] = None
    torrent_file: Optional[str] = None
    total_size: Optional[int] = None
    trackers: Optional[List[Tracker]] = None
    tracker_list: Optional[str] = None
    tracker_stats: Optional[List[TrackerStat]] = None
    upload_ratio: Optional[float] = None
    uploaded_ever: Optional[int] = None
    upload_limit: Optional[int] = None
    upload_limited: Optional[bool] = None
    wanted: Optional[List[bool]] = None
    webseeds: Optional[List[str]] = None
    webseeds_sending_to_us: Optional[int] = None


class Torrents(ResponseRecord):
    torrents: List[Torrent] = Field(default_factory=list)
    # ids of recently removed torrents, only present with ids="recently-active"
    removed: Optional[List[IdField]] = None


class TorrentAddedInfo(ResponseRecord):
    id: int
    name: str
    hash_string: str


class TorrentAddedOrDuplicate:
    """
    Result of torrent-add.

    The daemon answers with exactly one of the keys ``torrent-added`` or
    ``torrent-duplicate``. from_arguments() returns the matching variant,
    or TorrentAddNoResult when neither key is present (e.g. ``{}`` from a
    failed call).
    """

    ADDED_KEY = "torrent-added"
    DUPLICATE_KEY = "torrent-duplicate"

    @classmethod
    def from_arguments(cls, arguments: Dict[str, Any]) -> "TorrentAddedOrDuplicate":
        if cls.ADDED_KEY in arguments:
            return TorrentAdded(TorrentAddedInfo.model_validate(arguments[cls.ADDED_KEY]))
        if cls.DUPLICATE_KEY in arguments:
            return TorrentDuplicate(TorrentAddedInfo.model_validate(arguments[cls.DUPLICATE_KEY]))
        return TorrentAddNoResult()


@dataclass(frozen=True)
class TorrentAdded(TorrentAddedOrDuplicate):
    torrent: TorrentAddedInfo


@dataclass(frozen=True)
class TorrentDuplicate(TorrentAddedOrDuplicate):
    torrent: TorrentAddedInfo


@dataclass(frozen=True)
class TorrentAddNoResult(TorrentAddedOrDuplicate):
    pass
