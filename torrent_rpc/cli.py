"""
Command-line interface for torrent-rpc.

Talks to a Transmission daemon directly over its RPC endpoint. Connection
settings default to the TRANSMISSION_* environment variables (or .env file).

Usage:
    torrent-rpc session
    torrent-rpc list
    torrent-rpc add <magnet/url/file> --paused
    torrent-rpc stop 3 e08c426aab2cc58649ae5e73690e3747117b3470
    torrent-rpc remove 3 --delete-data
"""

import argparse
import base64
import os
import sys

from .config import Config
from .client import TransClient
from .logger import logger
from .models import BasicAuth, HashId, NumericId
from .request import TorrentAction, TorrentAddArgs, TorrentGetField
from .response import TorrentAdded, TorrentDuplicate

ACTIONS = {
    "start": TorrentAction.START,
    "stop": TorrentAction.STOP,
    "verify": TorrentAction.VERIFY,
    "reannounce": TorrentAction.REANNOUNCE,
}

LIST_FIELDS = [
    TorrentGetField.ID,
    TorrentGetField.NAME,
    TorrentGetField.STATUS,
    TorrentGetField.PERCENT_DONE,
    TorrentGetField.TOTAL_SIZE,
    TorrentGetField.HASH_STRING,
]


def parse_id(value: str):
    """Numeric strings are session ids, anything else is an info hash."""
    try:
        return NumericId(int(value))
    except ValueError:
        return HashId(value)


def format_bytes(size):
    """Format bytes as human-readable string."""
    if size is None:
        return "N/A"
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024:
            return f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} PB"


def add_args_for(source: str, paused: bool, download_dir, labels) -> TorrentAddArgs:
    """Local .torrent files are sent as metainfo; urls and magnet links as filename."""
    args = TorrentAddArgs(paused=paused or None, download_dir=download_dir, labels=labels)
    if os.path.isfile(source):
        with open(source, "rb") as f:
            args.metainfo = base64.b64encode(f.read()).decode("ascii")
    else:
        args.filename = source
    return args


def print_record(record):
    print(record.model_dump_json(indent=2, by_alias=True, exclude_none=True))


def check(response) -> bool:
    """Print the daemon's failure message; True when the call succeeded."""
    if response.is_ok():
        return True
    print(f"Failed: {response.result}")
    return False


def build_client(args) -> TransClient:
    auth = None
    if args.username:
        auth = BasicAuth(args.username, args.password or "")
    return TransClient(url=args.url, auth=auth, timeout=args.timeout)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="torrent-rpc",
        description="Transmission RPC client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s session
  %(prog)s list --ids 1 2
  %(prog)s add magnet:?xt=... --paused
  %(prog)s move 1 /data/done
  %(prog)s rename 1 old-name new-name
"""
    )
    parser.add_argument("--url", default=Config.TRANSMISSION_URL, help="RPC endpoint URL")
    parser.add_argument("--username", default=Config.TRANSMISSION_USERNAME, help="RPC username")
    parser.add_argument("--password", default=Config.TRANSMISSION_PASSWORD, help="RPC password")
    parser.add_argument("--timeout", type=float, default=Config.TRANSMISSION_TIMEOUT,
                        help="Request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # -------------------------------------------------------------------------
    # Session Commands
    # -------------------------------------------------------------------------

    subparsers.add_parser("session", help="Show session settings")
    subparsers.add_parser("stats", help="Show session statistics")

    free_space_parser = subparsers.add_parser("free-space", help="Show free space in a directory")
    free_space_parser.add_argument("path", help="Directory on the daemon host")

    subparsers.add_parser("port-test", help="Check whether the peer port is reachable")
    subparsers.add_parser("blocklist-update", help="Reload the blocklist")

    # -------------------------------------------------------------------------
    # Torrent Commands
    # -------------------------------------------------------------------------

    list_parser = subparsers.add_parser("list", help="List torrents")
    list_parser.add_argument("--ids", nargs="+", help="Only these ids or hashes")

    info_parser = subparsers.add_parser("info", help="Show every field of one torrent")
    info_parser.add_argument("id", help="Torrent id or hash")

    add_parser = subparsers.add_parser("add", help="Add a torrent")
    add_parser.add_argument("source", help="Magnet link, URL or .torrent file")
    add_parser.add_argument("--paused", action="store_true", help="Add without starting")
    add_parser.add_argument("--download-dir", help="Download directory")
    add_parser.add_argument("--label", action="append", dest="labels", help="Label (repeatable)")

    for name, action in ACTIONS.items():
        action_parser = subparsers.add_parser(name, help=f"Send {action.value}")
        action_parser.add_argument("ids", nargs="+", help="Torrent ids or hashes")

    remove_parser = subparsers.add_parser("remove", help="Remove torrents")
    remove_parser.add_argument("ids", nargs="+", help="Torrent ids or hashes")
    remove_parser.add_argument("--delete-data", action="store_true", help="Also delete downloaded data")

    move_parser = subparsers.add_parser("move", help="Set the location of torrents")
    move_parser.add_argument("ids", nargs="+", help="Torrent ids or hashes")
    move_parser.add_argument("location", help="New location")
    move_parser.add_argument("--no-move", action="store_true",
                             help="Only point at the new location, do not move data")

    rename_parser = subparsers.add_parser("rename", help="Rename a file or folder of a torrent")
    rename_parser.add_argument("id", help="Torrent id or hash")
    rename_parser.add_argument("path", help="Current path inside the torrent")
    rename_parser.add_argument("name", help="New name")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    if not (args.verbose or Config.VERBOSE or Config.LOG_PATH):
        logger.disable("torrent_rpc")

    client = build_client(args)
    ok = True

    try:
        # ---------------------------------------------------------------------
        # Session Commands
        # ---------------------------------------------------------------------

        if args.command == "session":
            res = client.session_get()
            ok = check(res)
            if ok:
                print_record(res.arguments)

        elif args.command == "stats":
            res = client.session_stats()
            ok = check(res)
            if ok:
                print_record(res.arguments)

        elif args.command == "free-space":
            res = client.free_space(args.path)
            ok = check(res)
            if ok:
                print(f"{res.arguments.path}: {format_bytes(res.arguments.size_bytes)} free")

        elif args.command == "port-test":
            res = client.port_test()
            ok = check(res)
            if ok:
                print("Port is open" if res.arguments.port_is_open else "Port is closed")

        elif args.command == "blocklist-update":
            res = client.blocklist_update()
            ok = check(res)
            if ok:
                print(f"Blocklist size: {res.arguments.blocklist_size}")

        # ---------------------------------------------------------------------
        # Torrent Commands
        # ---------------------------------------------------------------------

        elif args.command == "list":
            ids = [parse_id(i) for i in args.ids] if args.ids else None
            res = client.torrent_get(fields=LIST_FIELDS, ids=ids)
            ok = check(res)
            if ok:
                torrents = res.arguments.torrents
                if not torrents:
                    print("No torrents found.")
                else:
                    print(f"{'ID':<6} {'STATUS':<20} {'DONE':>7} {'SIZE':>12}  {'NAME'}")
                    print("-" * 80)
                    for t in torrents:
                        status = t.status.name if t.status is not None else "-"
                        done = f"{(t.percent_done or 0) * 100:.1f}%"
                        print(f"{t.id:<6} {status:<20} {done:>7} {format_bytes(t.total_size):>12}  {t.name}")

        elif args.command == "info":
            res = client.torrent_get(ids=[parse_id(args.id)])
            ok = check(res)
            if ok:
                if not res.arguments.torrents:
                    print(f"No torrent found for {args.id}")
                    ok = False
                else:
                    print_record(res.arguments.torrents[0])

        elif args.command == "add":
            add_args = add_args_for(args.source, args.paused, args.download_dir, args.labels)
            res = client.torrent_add(add_args)
            ok = check(res)
            if ok:
                added = res.arguments
                if isinstance(added, TorrentAdded):
                    print(f"Added: {added.torrent.name} (ID: {added.torrent.id})")
                elif isinstance(added, TorrentDuplicate):
                    print(f"Already present: {added.torrent.name} (ID: {added.torrent.id})")
                else:
                    print("Added")

        elif args.command in ACTIONS:
            res = client.torrent_action(ACTIONS[args.command], [parse_id(i) for i in args.ids])
            ok = check(res)
            if ok:
                print(f"Sent {args.command} for {len(args.ids)} torrent(s)")

        elif args.command == "remove":
            res = client.torrent_remove([parse_id(i) for i in args.ids], args.delete_data)
            ok = check(res)
            if ok:
                print(f"Removed {len(args.ids)} torrent(s)")

        elif args.command == "move":
            res = client.torrent_set_location(
                [parse_id(i) for i in args.ids],
                args.location,
                move_from=not args.no_move
            )
            ok = check(res)
            if ok:
                print(f"Location set to {args.location}")

        elif args.command == "rename":
            res = client.torrent_rename_path([parse_id(args.id)], args.path, args.name)
            ok = check(res)
            if ok:
                print(f"Renamed {res.arguments.path} to {res.arguments.name}")

    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
