#!/usr/bin/env python3
"""Command-line voice chat client for the relay."""

from __future__ import annotations

import sys
import asyncio
import logging
import argparse

from voice_relay.runtime.logging import configure_logging

from .controller import VoiceChatClient


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Talk to the realtime voice relay")
    p.add_argument("--server", default="ws://localhost:3001", help="Relay WebSocket URL")
    p.add_argument("--text", help="Send a text message")
    p.add_argument("--audio", help="Send an audio file (any format soundfile can read)")
    p.add_argument("--out", help="Write the assistant's audio to this WAV file")
    p.add_argument("--timeout", type=float, default=30.0, help="Seconds to wait for each step")
    return p.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    client = VoiceChatClient(args.server)
    try:
        await client.connect()
    except ConnectionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        if not await client.wait_connected(args.timeout):
            print(f"error: {client.error or 'timed out waiting for the upstream session'}", file=sys.stderr)
            return 1
        print(f"[{client.status}]")

        if args.text:
            await client.send_text(args.text)
            await client.wait_response_done(args.timeout)
        if args.audio:
            await client.send_audio_file(args.audio)
            await client.wait_response_done(args.timeout)
    finally:
        await client.disconnect()

    for entry in client.transcript.entries:
        print(f"{entry.role}/{entry.kind}: {entry.content}")

    if args.out and len(client.playback):
        samples = client.playback.write(args.out)
        print(f"wrote {samples} samples to {args.out}")

    return 1 if client.error else 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    logging.getLogger("voice_relay").setLevel(logging.WARNING)
    return asyncio.run(run(parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
