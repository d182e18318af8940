#!/usr/bin/env python3
"""Send one test alert to the configured ntfy topic.

Use this after subscribing to ``NTFY_TOPIC`` to confirm that alerts reach
your devices before deploying the monitor on a spot instance.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import socket
import sys
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from spotwatch import MonitorConfig, NotificationError, NtfyMessage, NtfyNotifier  # noqa: E402
from spotwatch._constants import DEFAULT_TAGS  # noqa: E402
from spotwatch.exceptions import SpotwatchConfigError  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish a test alert to NTFY_TOPIC.")
    parser.add_argument(
        "--topic",
        default=None,
        help="Topic to publish to (default: NTFY_TOPIC).",
    )
    parser.add_argument(
        "--message",
        default=f"spotwatch test notification from {socket.gethostname()}",
        help="Message body.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


async def _send(config: MonitorConfig, message: str) -> None:
    async with NtfyNotifier(config) as notifier:
        await notifier.send(
            NtfyMessage(
                topic=config.topic,
                title="spotwatch test",
                message=message,
                tags=DEFAULT_TAGS,
            )
        )


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides = {"topic": args.topic} if args.topic else {}
    try:
        config = MonitorConfig.from_env(**overrides)
    except SpotwatchConfigError as exc:
        print(f"[notify] {exc}", file=sys.stderr)
        return 2

    try:
        asyncio.run(_send(config, args.message))
    except NotificationError as exc:
        print(f"[notify] Delivery failed: {exc}", file=sys.stderr)
        return 1

    print(f"[notify] Sent to {config.ntfy_server}/{config.topic}")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
