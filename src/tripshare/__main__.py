"""Command-line entry point: ``python -m tripshare``.

Usage
-----
::

    python -m tripshare --port 3000 --verbose

Every option falls back to the matching ``TRIPSHARE_*`` environment
variable.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from tripshare.config import TripShareConfig
from tripshare.exceptions import TripShareConfigError
from tripshare.server import run


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Realtime trip-sharing server")
    parser.add_argument("--host", help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: 3000)")
    parser.add_argument("--api-prefix", help="Path prefix for REST routes, e.g. /api")
    parser.add_argument("--no-seed", action="store_true", help="Do not create the demo1234 trip")
    parser.add_argument(
        "--realtime-errors",
        action="store_true",
        help="Reply with an error event to realtime events for unknown trips",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.api_prefix is not None:
        overrides["api_prefix"] = args.api_prefix
    if args.no_seed:
        overrides["seed_demo"] = False
    if args.realtime_errors:
        overrides["realtime_errors"] = True

    try:
        config = TripShareConfig.from_env(**overrides)
    except TripShareConfigError as exc:
        print(f"tripshare: {exc}", file=sys.stderr)
        return 2

    run(config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
