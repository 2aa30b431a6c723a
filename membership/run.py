"""Command-line entry point for the hosts reader.

Usage:
    membership-hosts show                      # print include/exclude lists once
    membership-hosts show --subsystem mapreduce --json
    membership-hosts watch --interval 30       # log membership on every change

    python -m membership.run ...               # same, without the console script

Config is read from --config, MEMBERSHIP_CONFIG, `.membership/config.yaml` or
`~/.membership/config.yaml` (see membership/config.py), then
MEMBERSHIP_HOSTS_* environment overrides are applied.
"""

from __future__ import annotations

import argparse
import json
import sys
import threading
from typing import Optional, Sequence

from membership.config import ConfigError, load_config
from membership.hosts.store import MembershipError, MembershipStore
from membership.reader import SUBSYSTEM_KEYS, apply_env_overrides, initialize_reader
from membership.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


class LoggingNotificationTarget:
    """Notification target that logs the membership after each change."""

    def __init__(self, store: MembershipStore) -> None:
        self.store = store

    def refresh_nodes(self) -> None:
        logger.info(
            "Hosts membership changed",
            includes=sorted(self.store.get_hosts()),
            excludes=sorted(self.store.get_excluded_hosts()),
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="membership-hosts",
        description="Read cluster include/exclude hosts files",
    )
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument(
        "--subsystem",
        choices=sorted(SUBSYSTEM_KEYS),
        default="dfs",
        help="Which subsystem's config keys to read (default: dfs)",
    )
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument(
        "--console-logs",
        action="store_true",
        help="Human-readable log output instead of JSON",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    show = commands.add_parser("show", help="Load the hosts files once and print them")
    show.add_argument("--json", action="store_true", help="Print a JSON document")

    watch = commands.add_parser("watch", help="Refresh periodically until interrupted")
    watch.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Refresh period in seconds (overrides the configured value)",
    )
    return parser


def _print_hosts(store: MembershipStore, as_json: bool) -> None:
    includes = sorted(store.get_hosts())
    excludes = sorted(store.get_excluded_hosts())
    if as_json:
        print(json.dumps({"includes": includes, "excludes": excludes}, indent=2))
        return
    print(f"includes ({len(includes)}):")
    for host in includes:
        print(f"  {host}")
    print(f"excludes ({len(excludes)}):")
    for host in excludes:
        print(f"  {host}")


def main(argv: Optional[Sequence[str]] = None, stop_event: Optional[threading.Event] = None) -> int:
    """Run the CLI. Returns the process exit code.

    ``stop_event`` ends ``watch`` when set (Ctrl-C does the same).
    """
    args = build_parser().parse_args(argv)
    configure_logging(
        log_level=args.log_level,
        json_output=not args.console_logs,
        stream=sys.stderr,
    )

    keys = SUBSYSTEM_KEYS[args.subsystem]
    try:
        config = load_config(args.config)
        apply_env_overrides(config, keys)
        if args.command == "watch" and args.interval is not None:
            if args.interval <= 0:
                print("ERROR: --interval must be a positive number of seconds", file=sys.stderr)
                return 2
            config.set(keys.refresh_sec_key, args.interval)
        elif args.command == "show":
            # Load once, never schedule
            config.set(keys.refresh_sec_key, -1)

        store = MembershipStore()
        target = LoggingNotificationTarget(store)
        scheduler = initialize_reader(config, keys, target, store=store)
    except ConfigError as exc:
        print(f"CONFIG ERROR: {exc}", file=sys.stderr)
        return 1
    except MembershipError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.command == "show":
        _print_hosts(store, args.json)
        return 0

    if not scheduler.running:
        print(
            f"ERROR: no positive refresh interval configured for {keys.refresh_sec_key}; "
            "pass --interval",
            file=sys.stderr,
        )
        return 2

    _print_hosts(store, as_json=False)
    stop_event = stop_event or threading.Event()
    try:
        while not stop_event.wait(1.0):
            pass
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
