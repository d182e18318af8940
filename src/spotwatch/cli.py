"""Command line entry point: ``spotwatch`` / ``python -m spotwatch``."""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from spotwatch.config import MonitorConfig
from spotwatch.exceptions import SpotwatchConfigError
from spotwatch.monitor import run_monitor

_logger = logging.getLogger("spotwatch")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="spotwatch",
        description="Watch EC2 instance metadata for spot interruptions and rebalance recommendations.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single poll cycle and exit.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between poll cycles (default: SPOTWATCH_CHECK_INTERVAL or 5).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    _logger.info("EC2 Interruption Monitor starting...")

    overrides: dict[str, Any] = {}
    if args.interval is not None:
        overrides["check_interval"] = args.interval

    try:
        config = MonitorConfig.from_env(**overrides)
    except SpotwatchConfigError as exc:
        _logger.critical("%s", exc)
        return 1

    _logger.info("Using ntfy topic: %s", config.topic)

    asyncio.run(run_monitor(config, once=args.once))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
