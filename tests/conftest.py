"""Test fixtures — in-process clients and live servers on ephemeral ports.

Learn: Three ways to reach the notifier:

1. `client` — httpx over ASGITransport, for plain HTTP routes. No socket.
2. `live_server` — the real FastAPI app served by uvicorn on 127.0.0.1:0,
   for end-to-end WebSocket tests with the client bridge.
3. `frame_server` — a bare `websockets` server that sends whatever frames
   a test hands it, for fault injection (non-JSON frames, binary frames).
"""

import asyncio

import pytest_asyncio
import uvicorn
from httpx import ASGITransport, AsyncClient
from websockets.asyncio.server import serve

from phonecall.main import app


def _ws_url(sockets) -> str:
    host, port = sockets[0].getsockname()[:2]
    return f"ws://{host}:{port}"


@pytest_asyncio.fixture()
async def client():
    """HTTP client wired straight into the ASGI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def live_server():
    """Run the notifier app under uvicorn and yield its ws:// URL."""
    config = uvicorn.Config(app, host="127.0.0.1", port=0, log_level="warning")
    server = uvicorn.Server(config)
    task = asyncio.create_task(server.serve())
    while not server.started:
        if task.done():
            task.result()
        await asyncio.sleep(0.01)

    try:
        yield _ws_url(server.servers[0].sockets)
    finally:
        server.should_exit = True
        await task


@pytest_asyncio.fixture()
async def frame_server():
    """Factory: start a server that sends the given frames, then closes.

    Usage: url = await frame_server(["not json", '{"a": 1}'])
    """
    servers = []

    async def start(frames, close=True):
        async def handler(ws):
            for frame in frames:
                await ws.send(frame)
            if close:
                await ws.close()
            else:
                await ws.wait_closed()

        server = await serve(handler, "127.0.0.1", 0)
        servers.append(server)
        return _ws_url(list(server.sockets))

    yield start

    for server in servers:
        server.close()
        await server.wait_closed()
