"""
stackctl CLI: run one target against the dev or prod compose stack.
Usage: stackctl [--mode dev|prod] [--service NAME] [--args=STRING] [--dry-run] TARGET [SERVICE ...]
       python -m stackctl help
Flags override env vars (MODE, SERVICE, ARGS, ...); env vars override defaults.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from stackctl.core.config import MODES, Settings, get_settings
from stackctl.core.errors import StackctlError
from stackctl.core.logging import setup_logging
from stackctl.runner import INTERRUPTED_EXIT_CODE, CommandRunner
from stackctl.targets import REGISTRY, TargetContext, help_text, run_target
from stackctl.version import get_version

logger = logging.getLogger(__name__)

USAGE_ERROR_EXIT_CODE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackctl",
        description="Start, stop, inspect and maintain the docker compose stack.",
        epilog="Run 'stackctl help' for the full target list.",
    )
    parser.add_argument("target", nargs="?", default="help", help="Target to run (default: help)")
    parser.add_argument("services", nargs="*", help="Services the target acts on (default: whole stack, or SERVICE)")
    parser.add_argument("--mode", type=str.lower, choices=MODES, default=None, help="Compose configuration (default: MODE or dev)")
    parser.add_argument("--service", default=None, help="Service for logs/shell (default: SERVICE or backend)")
    parser.add_argument("--args", dest="extra_args", default=None,
                        help="Extra compose arguments, e.g. --args=\"--build\" (default: ARGS)")
    parser.add_argument("--dry-run", action="store_true", help="Print commands without running them")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip the db-reset confirmation prompt")
    parser.add_argument("--strict", action="store_true", help="health: exit 1 when an endpoint does not respond")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or WARNING)")
    parser.add_argument("--version", "-V", action="version", version=get_version())
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Environment first, then command-line overrides."""
    settings = get_settings()
    changes = {}
    if args.mode is not None:
        changes["mode"] = args.mode
    if args.service is not None:
        changes["service"] = args.service
    if args.extra_args is not None:
        changes["args"] = args.extra_args
    if args.log_level is not None:
        changes["log_level"] = args.log_level
    if args.dry_run:
        changes["dry_run"] = True
    return dataclasses.replace(settings, **changes) if changes else settings


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    if args.target not in REGISTRY:
        print(f"stackctl: unknown target {args.target!r}", file=sys.stderr)
        print(help_text(), file=sys.stderr)
        return USAGE_ERROR_EXIT_CODE

    try:
        settings = resolve_settings(args)
        setup_logging(settings)
        logger.debug("target=%s mode=%s compose_file=%s", args.target, settings.mode, settings.compose_file)
        ctx = TargetContext(
            settings=settings,
            runner=CommandRunner(dry_run=settings.dry_run),
            services=list(args.services),
            assume_yes=args.yes,
            strict=args.strict,
        )
        return run_target(args.target, ctx)
    except StackctlError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print("", file=sys.stderr)
        return INTERRUPTED_EXIT_CODE


if __name__ == "__main__":
    sys.exit(main())
