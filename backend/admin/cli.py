#!/usr/bin/env python3
"""
Configuration Notices CLI - Thin entrypoint for operator commands.

This module provides a minimal CLI interface:
- Run the notice battery against a dashboard URL
- Rebuild the routing requirements cache
- Serve the admin backend over HTTP

Design Principles:
==================
- CLI is a dispatcher only
- No check logic inside CLI
- Exit non-zero when notices were raised
- No interactive prompts

Exit Codes:
===========
- 0: No notices
- 1: One or more notices raised
- 2: Routing cache could not be written
- 4: Configuration error (unparseable YAML, wrong shape)
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

from notices.engine import DASHBOARD_ROUTE, evaluate
from notices.errors import ConfigError, RoutingCacheError
from notices.report import format_notices_terminal, to_json

from .context import build_context
from .routing_cache import clear_cache
from .settings import ENV_CONFIG_DIR, RuntimeParameters, load_settings

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S',
    )


def _load(config_dir: Optional[str]):
    try:
        return load_settings(Path(config_dir) if config_dir else None)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(4)


def cmd_check(args: argparse.Namespace) -> NoReturn:
    """
    Evaluate the notices for a dashboard request to args.url.

    Exit codes:
        0: No notices
        1: Notices raised
        4: Configuration error
    """
    settings = _load(args.config_dir)
    context = build_context(
        settings=settings,
        runtime=RuntimeParameters.from_environ(),
        route=DASHBOARD_ROUTE,
        url=args.url,
        base_url=args.base_url,
    )
    result = evaluate(context)

    if args.json:
        print(to_json(result))
    else:
        print(format_notices_terminal(result))

    sys.exit(1 if result.has_notices else 0)


def cmd_clear_cache(args: argparse.Namespace) -> NoReturn:
    """
    Rebuild the routing requirements cache.

    Exit codes:
        0: Cache rebuilt
        2: Cache folder missing or not writable
        4: Configuration error
    """
    settings = _load(args.config_dir)
    try:
        requirement = clear_cache(settings)
    except RoutingCacheError as e:
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(2)

    print(f"✓ Routing cache rebuilt: {requirement or '(no content types)'}")
    sys.exit(0)


def cmd_serve(args: argparse.Namespace) -> NoReturn:
    """
    Serve the admin backend with uvicorn.

    Settings are read from --config-dir (exported as $NOTICES_CONFIG_DIR).
    """
    import uvicorn

    if args.config_dir:
        os.environ[ENV_CONFIG_DIR] = args.config_dir
    _load(args.config_dir)

    uvicorn.run("admin.main:create_app", factory=True, host=args.host, port=args.port)
    sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='configuration-notices',
        description='Configuration sanity checks for the admin dashboard',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True, help='Command to execute')

    # check command
    parser_check = subparsers.add_parser(
        'check',
        help='Run the notice battery for a dashboard URL',
    )
    parser_check.add_argument('--url', required=True, help='Full dashboard URL, e.g. https://example.org/bolt/')
    parser_check.add_argument('--config-dir', default=None, help='Configuration directory (default: $NOTICES_CONFIG_DIR or ./config)')
    parser_check.add_argument('--base-url', default='', help='Path prefix the application is mounted under')
    parser_check.add_argument('--json', action='store_true', help='Print the result as JSON')
    parser_check.set_defaults(func=cmd_check)

    # clear-cache command
    parser_clear = subparsers.add_parser(
        'clear-cache',
        help='Rebuild the routing requirements cache',
    )
    parser_clear.add_argument('--config-dir', default=None, help='Configuration directory (default: $NOTICES_CONFIG_DIR or ./config)')
    parser_clear.set_defaults(func=cmd_clear_cache)

    # serve command
    parser_serve = subparsers.add_parser(
        'serve',
        help='Serve the admin backend over HTTP',
    )
    parser_serve.add_argument('--config-dir', default=None, help='Configuration directory (default: $NOTICES_CONFIG_DIR or ./config)')
    parser_serve.add_argument('--host', default='127.0.0.1', help='Bind address')
    parser_serve.add_argument('--port', type=int, default=8085, help='Bind port')
    parser_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """CLI entrypoint."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    args.func(args)


if __name__ == '__main__':
    main()
