"""phonecall CLI — run the notifier server or listen as a client bridge.

Usage:
    phonecall serve                              # Notifier on 0.0.0.0:8000
    phonecall serve --port 9000 --reload         # Custom port, autoreload
    phonecall listen                             # Bridge to ws://localhost:8000
    phonecall listen --url ws://host:9000 --on-malformed raise
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import sys
from typing import Any, Optional

import click

from phonecall import __version__
from phonecall.config import MALFORMED_POLICIES, settings
from phonecall.errors import PhoneCallError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop — normal CLI invocation
        return asyncio.run(coro)
    else:
        # Already inside an event loop (e.g. test runner) — run in a thread
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _to_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, default=str)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="phonecall")
def main():
    """phonecall — push notification records over WebSocket."""


# ---------------------------------------------------------------------------
# phonecall serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help=f"Bind address (default {settings.host})")
@click.option("--port", "-p", type=int, default=None, help=f"Port (default {settings.port})")
@click.option("--reload", is_flag=True, help="Restart on code changes (development)")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the notifier server."""
    import uvicorn

    from phonecall.logging_config import configure_logging

    configure_logging(settings.log_level)
    uvicorn.run(
        "phonecall.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# phonecall listen
# ---------------------------------------------------------------------------


@main.command()
@click.option("--url", "-u", default=None, help=f"Notifier URL (default {settings.server_url})")
@click.option(
    "--on-malformed",
    type=click.Choice(MALFORMED_POLICIES),
    default=None,
    help=f"What to do with non-JSON frames (default {settings.on_malformed})",
)
def listen(url: Optional[str], on_malformed: Optional[str]):
    """Connect once and print every value delivered to the inbound port."""
    from phonecall.bridge.main import run as run_bridge

    def echo(value: Any) -> None:
        click.echo(_to_json(value))

    try:
        received = _run(run_bridge(url=url, on_malformed=on_malformed, consumer=echo))
    except PhoneCallError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"Connection closed after {received} frame(s).", dim=True, err=True)
