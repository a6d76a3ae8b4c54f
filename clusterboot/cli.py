"""Command-line entry point: ``clusterboot --server|--client [options]``."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from clusterboot.config import load_settings
from clusterboot.document import NodeRole
from clusterboot.errors import ClusterBootError
from clusterboot.observability import LogConfig, _setup_logging, _teardown_logging
from clusterboot.pipeline import BootstrapRequest, generate, run

log = logger.bind(component="cli")

EXIT_OK = 0
EXIT_FATAL = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clusterboot",
        description="Generate the membership-service config for this node and start it",
    )
    role = parser.add_mutually_exclusive_group(required=True)
    role.add_argument(
        "--server", dest="role", action="store_const", const=NodeRole.SERVER,
        help="Configure this node as a server",
    )
    role.add_argument(
        "--client", dest="role", action="store_const", const=NodeRole.CLIENT,
        help="Configure this node as a client",
    )
    parser.add_argument("--tag-key", default=None, help="Tag key for cloud auto-join")
    parser.add_argument("--tag-value", default=None, help="Tag value for cloud auto-join")
    parser.add_argument(
        "--datacenter", default=None,
        help="Datacenter name (default: the instance's region)",
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="TOML settings file merged over the system defaults",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the document to stdout; do not write it or start the service",
    )
    parser.add_argument(
        "--no-start", action="store_true",
        help="Write the document but do not restart the service",
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument("--log-file", default=None, help="Also log to this file at DEBUG")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    handler_ids = _setup_logging(LogConfig(level=args.log_level, file=args.log_file))

    try:
        if bool(args.tag_key) != bool(args.tag_value):
            log.warning("Both --tag-key and --tag-value are needed for auto-join; skipping it")

        try:
            settings = load_settings(config_path=args.config)
            policy = settings.tag_retry_policy()
        except (OSError, ValueError) as e:
            log.error("Invalid settings: {error}", error=e)
            return EXIT_FATAL

        request = BootstrapRequest(
            role=args.role,
            tag_key=args.tag_key,
            tag_value=args.tag_value,
            datacenter=args.datacenter,
        )

        if args.dry_run:
            sys.stdout.write(generate(request, settings, policy=policy).render())
        else:
            run(request, settings, start=not args.no_start, policy=policy)
    except ClusterBootError as e:
        log.error("{kind}: {error}", kind=type(e).__name__, error=e)
        return EXIT_FATAL
    finally:
        _teardown_logging(handler_ids)

    return EXIT_OK
