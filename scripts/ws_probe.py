#!/usr/bin/env python3
"""Realtime probe for a running tripshare server.

Joins a trip room over the WebSocket endpoint and prints every frame the
server pushes, until interrupted or ``--duration`` elapses. Optionally
joins the chat room and sends one message.

Usage
-----
::

    python scripts/ws_probe.py --join-code demo1234
    python scripts/ws_probe.py --trip-id <uuid> --chat-name Ann --say "hello"

Options::

    --base-url URL       Server root (default: http://localhost:3000)
    --api-prefix PREFIX  REST prefix configured on the server (default: "")
    --ws-path PATH       WebSocket path (default: /ws)
    --duration SECS      Stop after this many seconds (default: 0 = forever)
    --json               Pretty-print frame payloads
    --verbose / -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Any

import aiohttp

_LOG = logging.getLogger("ws_probe")


@dataclass
class ProbeStats:
    started_at: float
    frames_by_event: dict[str, int] = field(default_factory=dict)

    def on_frame(self, event: str) -> int:
        self.frames_by_event[event] = self.frames_by_event.get(event, 0) + 1
        return sum(self.frames_by_event.values())


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print realtime frames for one trip")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--trip-id", help="Trip identifier to join")
    target.add_argument("--join-code", help="Join code to resolve through the REST API first")
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--api-prefix", default="")
    parser.add_argument("--ws-path", default="/ws")
    parser.add_argument("--chat-name", help="Also join the chat room under this name")
    parser.add_argument("--say", help="Chat message to send after joining (implies chat)")
    parser.add_argument("--duration", type=float, default=0.0)
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args()


async def _resolve_trip_id(http: aiohttp.ClientSession, args: argparse.Namespace) -> str:
    if args.trip_id:
        return str(args.trip_id)
    url = f"{args.base_url}{args.api_prefix}/trips/{args.join_code}"
    async with http.get(url) as resp:
        if resp.status != 200:
            raise RuntimeError(f"GET {url} returned HTTP {resp.status}")
        trip: dict[str, Any] = await resp.json()
    print(f"[probe] Trip {trip['name']!r} id={trip['id']}")
    return str(trip["id"])


def _print_summary(stats: ProbeStats) -> None:
    runtime = time.time() - stats.started_at
    print("[probe] Summary")
    print(f"[probe]   runtime_s : {runtime:.1f}")
    for event, count in sorted(stats.frames_by_event.items()):
        print(f"[probe]   {event:<14}: {count}")


async def _probe(args: argparse.Namespace) -> int:
    stats = ProbeStats(started_at=time.time())
    async with aiohttp.ClientSession() as http:
        try:
            trip_id = await _resolve_trip_id(http, args)
        except (aiohttp.ClientError, RuntimeError) as exc:
            print(f"[probe] Lookup failed: {exc}", file=sys.stderr)
            return 2

        ws_url = f"{args.base_url}{args.ws_path}"
        print(f"[probe] Connecting to {ws_url}")
        async with http.ws_connect(ws_url) as ws:
            await ws.send_json({"event": "joinTrip", "data": {"tripId": trip_id}})
            if args.chat_name or args.say:
                await ws.send_json({"event": "chatJoin", "data": {"tripId": trip_id, "name": args.chat_name or ""}})
            if args.say:
                await ws.send_json({"event": "chatMessage", "data": {"tripId": trip_id, "text": args.say}})

            while True:
                remaining = None
                if args.duration > 0:
                    remaining = args.duration - (time.time() - stats.started_at)
                    if remaining <= 0:
                        print(f"[probe] Reached --duration={args.duration}s, stopping.")
                        break
                try:
                    msg = await ws.receive(timeout=remaining)
                except TimeoutError:
                    continue
                if msg.type != aiohttp.WSMsgType.TEXT:
                    _LOG.debug("Non-text message %s, stopping", msg.type)
                    break

                frame = json.loads(msg.data)
                event = str(frame.get("event"))
                total = stats.on_frame(event)
                ts_text = time.strftime("%H:%M:%S")
                print(f"[probe] frame#{total} at {ts_text} event={event}")
                if args.json:
                    print(json.dumps(frame.get("data"), indent=2, ensure_ascii=False))
                else:
                    print(json.dumps(frame.get("data"), ensure_ascii=False))

    _print_summary(stats)
    return 0


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_probe(args))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(_main())
