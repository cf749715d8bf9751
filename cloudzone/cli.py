"""Cloudzone CLI: DNS record queries and changes from the command line.

Usage examples::

    cloudzone dns zone-info example.com
    cloudzone dns get-record --domain example.com --name www --type a
    cloudzone dns change --domain example.com --ttl 300 --merge www:a=192.0.2.10 '!old:cname'
    cloudzone dns wait-for-live --domain example.com www:a=192.0.2.10

Structured results go to stdout; progress and errors go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any

from cloudzone.base.exceptions import CloudzoneError, WaitTimeoutError


_TRUNCATION_NOTE = (
    "Existing records are read with a single listing call of up to 300 record sets "
    "starting at the record name. If the provider reports more, the command fails "
    "instead of working from a partial view; --merge changes in large zones can hit this."
)


def _add_domain(parser: argparse.ArgumentParser, required: bool = True) -> None:
    parser.add_argument(
        "--domain", "-d",
        required=required,
        help="Domain (or zone ID) the records live under",
    )


def _add_name(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--name", "-n",
        default=None,
        help="Default record name ('.' or '@' for the apex)",
    )


def _add_timeout(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait before giving up (default 60)",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``cloudzone`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="cloudzone",
        description="DNS record reconciliation for cloud providers",
    )
    parser.add_argument(
        "--provider", "-p",
        choices=["aws", "gcp"],
        default=os.environ.get("CLOUDZONE_PROVIDER", "aws"),
        help="Cloud provider (default: $CLOUDZONE_PROVIDER or aws)",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON config string (e.g. \'{"region_name":"us-east-1"}\')',
    )
    parser.add_argument(
        "--output", "-o",
        choices=["json", "lines"],
        default="json",
        help="Print results as one JSON array, or one JSON object per line",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Log debug detail")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log errors")

    groups = parser.add_subparsers(dest="group", required=True)
    dns = groups.add_parser("dns", help="DNS zone and record commands")
    commands = dns.add_subparsers(dest="command", required=True)

    zone = commands.add_parser("zone-info", help="Resolve a domain or zone ID to its zone")
    zone.add_argument("zone", help="Domain name or zone ID")

    get = commands.add_parser(
        "get-record",
        help="Read records from the provider",
        description=_TRUNCATION_NOTE,
    )
    _add_domain(get)
    _add_name(get)
    get.add_argument(
        "--type", "-t",
        dest="types",
        action="append",
        required=True,
        help="Record type; repeat for several",
    )
    get.add_argument("--value", default=None, help="Only records containing this value")
    get.add_argument("--not-found-ok", action="store_true", help="Missing records are not an error")

    query = commands.add_parser("query", help="Resolve records through public DNS")
    _add_domain(query)
    _add_name(query)
    query.add_argument("--not-found-ok", action="store_true", help="Missing records are not an error")
    query.add_argument("queries", nargs="+", help="[name:]type")

    change = commands.add_parser(
        "change",
        help="Add or delete record values",
        description=_TRUNCATION_NOTE,
    )
    _add_domain(change)
    _add_name(change)
    change.add_argument("--ttl", type=int, default=None, help="TTL for added records")
    change.add_argument(
        "--merge",
        action="store_true",
        help="Merge with existing values instead of replacing them (required to delete)",
    )
    change.add_argument(
        "--allow-mixed",
        action="store_true",
        help="Allow adding to and deleting from the same record in one change",
    )
    change.add_argument("--comment", default=None, help="Change batch comment")
    change.add_argument("--wait", action="store_true", help="Wait for the change to sync")
    _add_timeout(change)
    change.add_argument(
        "bindings",
        nargs="+",
        help="[name:]type=value | ![name:]type=value | ![name:]type",
    )

    sync = commands.add_parser("wait-for-sync", help="Wait for submitted changes to sync")
    _add_domain(sync, required=False)
    _add_timeout(sync)
    sync.add_argument("change_ids", nargs="+", metavar="change-id")

    live = commands.add_parser("wait-for-live", help="Wait for public DNS to show expected records")
    _add_domain(live)
    _add_name(live)
    _add_timeout(live)
    live.add_argument(
        "expectations",
        nargs="+",
        help="[name:]type[=value] (present) | ![name:]type[=value] (absent)",
    )
    return parser


def _emit(result: Any, output: str) -> None:
    """Print structured results on stdout."""
    items = result if isinstance(result, list) else [result]
    if output == "lines":
        for item in items:
            print(json.dumps(item, default=str))
    else:
        print(json.dumps(items, indent=2, default=str))
    sys.stdout.flush()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, creates the provider backend via the factory, and
    runs the requested DNS command.  Any error exits with status 1.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    try:
        config: dict[str, Any] = json.loads(ns.config)
    except json.JSONDecodeError as e:
        print(f"Invalid --config JSON: {e}", file=sys.stderr)
        sys.exit(1)

    # Lazy-import to avoid loading provider SDKs before argument errors
    from cloudzone.base.config import WaitConfig
    from cloudzone.base.logger import CloudzoneLogger
    from cloudzone.dns import commands
    from cloudzone.dns.changes import DEFAULT_COMMENT
    from cloudzone.dns.waiter import wait_for_changes
    from cloudzone.factory import backend_factory

    level = logging.DEBUG if ns.verbose else logging.ERROR if ns.quiet else logging.INFO
    logger = CloudzoneLogger(level=level)

    try:
        backend = backend_factory(ns.provider, config)
        wait_config = WaitConfig(
            **({"timeout": ns.timeout} if getattr(ns, "timeout", None) is not None else {})
        )

        if ns.command == "zone-info":
            _emit(commands.zone_info(backend, ns.zone, logger), ns.output)
        elif ns.command == "get-record":
            _emit(
                commands.get_record(
                    backend, ns.domain, ns.name, ns.types, ns.value, ns.not_found_ok, logger=logger
                ),
                ns.output,
            )
        elif ns.command == "query":
            _emit(
                commands.query(backend, ns.domain, ns.queries, ns.name, ns.not_found_ok, logger),
                ns.output,
            )
        elif ns.command == "change":
            result = commands.change(
                backend,
                ns.domain,
                ns.bindings,
                default_name=ns.name,
                ttl=ns.ttl,
                merge=ns.merge,
                allow_mixed=ns.allow_mixed,
                comment=ns.comment or DEFAULT_COMMENT,
                logger=logger,
            )
            # Emitted before waiting so a timeout still reports the change ID
            _emit(commands.change_to_dict(result), ns.output)
            if ns.wait:
                wait_for_changes(backend, [result.change_id], result.zone.id, wait_config, logger)
        elif ns.command == "wait-for-sync":
            commands.wait_for_sync(backend, ns.change_ids, ns.domain, wait_config, logger)
        elif ns.command == "wait-for-live":
            commands.wait_for_live(backend, ns.domain, ns.expectations, ns.name, wait_config, logger)
    except WaitTimeoutError as e:
        print(f"Timed out: {e}", file=sys.stderr)
        sys.exit(1)
    except CloudzoneError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
