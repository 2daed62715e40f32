#!/usr/bin/env python3
"""
phonecall Quickstart — receive one pushed notification.

Checks the notifier is up, connects a client bridge, prints the record
delivered to the phoneCallIn port, and disconnects.
Run with: python examples/quickstart.py

Requires: pip install -e .  (plus httpx for the health check)
Notifier must be running: phonecall serve
"""

import asyncio
import sys

import httpx

from phonecall.bridge import ClientBridge, Ports
from phonecall.errors import PhoneCallError

HTTP_BASE = "http://localhost:8000/api/v1"
WS_URL = "ws://localhost:8000"


def check_notifier() -> None:
    """Verify the notifier is reachable and healthy."""
    try:
        resp = httpx.get(f"{HTTP_BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Notifier not reachable at {HTTP_BASE}")
        print("Start it with:  phonecall serve")
        sys.exit(1)

    health = resp.json()
    print(f"Notifier {health['version']}: {health['status']}")
    print(f"  Will push: {health['notification']}")


async def receive_one() -> None:
    ports = Ports()
    queue = ports["phoneCallIn"].subscribe_queue()

    async with ClientBridge(WS_URL, ports["phoneCallIn"]) as bridge:
        task = asyncio.create_task(bridge.run())
        record = await asyncio.wait_for(queue.get(), timeout=5)
        print(f"\nphoneCallIn <- {record['name']} ({record['company']})")
        await bridge.close()
        await task


def main():
    check_notifier()
    try:
        asyncio.run(receive_one())
    except PhoneCallError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
