"""Bridge entry point — run the client bridge as its own process.

Learn: The bridge is a separate process from the notifier server, the
same way a browser tab is separate from the backend. It connects once,
forwards everything it receives into the phoneCallIn port, and exits
when the server closes the connection or on SIGINT/SIGTERM.

Usage:
    python -m phonecall.bridge.main

Or via the console script:
    phonecall-bridge
"""

import asyncio
import json
import signal
import sys
from typing import Any, Callable, Optional

import structlog

from phonecall.bridge.client import ClientBridge
from phonecall.bridge.ports import Ports
from phonecall.config import settings
from phonecall.errors import PhoneCallError
from phonecall.logging_config import configure_logging

logger = structlog.get_logger()


def print_value(value: Any) -> None:
    """Default consumer: write each delivered value to stdout as JSON."""
    print(json.dumps(value, ensure_ascii=False), flush=True)


async def run(
    url: Optional[str] = None,
    on_malformed: Optional[str] = None,
    consumer: Callable[[Any], None] = print_value,
) -> int:
    """Run the bridge until the connection ends. Returns frames received."""
    ports = Ports([settings.inbound_port])
    port = ports[settings.inbound_port]
    port.subscribe(consumer)

    bridge = ClientBridge(
        url or settings.server_url,
        port,
        on_malformed=on_malformed or settings.on_malformed,
        open_timeout=settings.open_timeout,
    )

    # Handle shutdown signals; the set keeps close tasks alive until done
    shutdown_tasks: set[asyncio.Task] = set()

    def request_stop() -> None:
        task = asyncio.create_task(bridge.close())
        shutdown_tasks.add(task)
        task.add_done_callback(shutdown_tasks.discard)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, request_stop)
        except (NotImplementedError, RuntimeError):
            # Not available on this platform / outside the main thread
            pass

    try:
        return await bridge.run()
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                pass


def main():
    """CLI entry point."""
    configure_logging(settings.log_level)
    try:
        asyncio.run(run())
    except PhoneCallError as e:
        logger.error("bridge.failed", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
