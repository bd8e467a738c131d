#!/usr/bin/env python3
"""Watch a record feed and print the replica table on every change.

Connects to the feed's WebSocket endpoint (given directly, derived from
the hosting page URL, or read from ``FEEDSYNC_*`` env vars), keeps the
local replica in sync, reconnects on drops, and re-renders the table
each time a delta is applied.  Optionally sends ``remove`` intents for
the ids given with ``--remove`` once connected.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
import time
from dataclasses import dataclass
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyfeedsync import FeedClient, FeedConfig, FeedSyncConfigError, TableRenderer  # noqa: E402


@dataclass
class WatchStats:
    started_at: float
    renders: int = 0


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mirror a WebSocket record feed and print it as a table.",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--url",
        help="Feed WebSocket URL (ws:// or wss://).",
    )
    target.add_argument(
        "--page",
        help="URL of the hosting page; the feed is assumed at <host>/ws.",
    )
    parser.add_argument(
        "--reconnect-delay",
        type=float,
        default=None,
        help="Seconds between a disconnection and the next attempt (default 5).",
    )
    parser.add_argument(
        "--connect-timeout",
        type=float,
        default=None,
        help="Give up on a single connection attempt after N seconds.",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--remove",
        action="append",
        default=[],
        metavar="ID",
        help="Send a remove intent for ID once connected (repeatable).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _build_config(args: argparse.Namespace) -> FeedConfig:
    overrides: dict[str, float] = {}
    if args.reconnect_delay is not None:
        overrides["reconnect_delay"] = args.reconnect_delay
    if args.connect_timeout is not None:
        overrides["connect_timeout"] = args.connect_timeout
    if args.url:
        return FeedConfig(url=args.url, **overrides)
    if args.page:
        return FeedConfig.from_page_url(args.page, **overrides)
    return FeedConfig.from_env(**overrides)


async def _watch(
    config: FeedConfig,
    args: argparse.Namespace,
    stats: WatchStats,
    renderer: TableRenderer,
) -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(signum, stop.set)

    async with FeedClient(config, on_change=renderer) as client:
        print(f"[watch] Connecting to {config.url}")
        pending_removals = list(args.remove)
        while not stop.is_set():
            if args.duration > 0 and (time.time() - stats.started_at) >= args.duration:
                print(f"[watch] Reached --duration={args.duration}s, stopping.")
                break
            if await client.wait_until_connected(timeout=1.0):
                if pending_removals:
                    for record_id in pending_removals:
                        sent = await client.remove(record_id)
                        print(f"[watch] remove {record_id}: {'sent' if sent else 'dropped'}")
                    pending_removals = []
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(stop.wait(), 1.0)


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _build_config(args)
    except FeedSyncConfigError as exc:
        print(f"[watch] {exc}", file=sys.stderr)
        return 2

    stats = WatchStats(started_at=time.time())
    renderer = TableRenderer(sys.stdout)
    try:
        asyncio.run(_watch(config, args, stats, renderer))
    except KeyboardInterrupt:
        pass
    finally:
        stats.renders = renderer.renders

    runtime = time.time() - stats.started_at
    print("[watch] Summary")
    print(f"[watch]   runtime_s : {runtime:.1f}")
    print(f"[watch]   renders   : {stats.renders}")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
