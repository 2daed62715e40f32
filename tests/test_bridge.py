"""Client bridge tests — forwarding, malformed frames, transport failures.

Learn: `deliver()` is the per-frame step and is tested without a socket.
`run()` is tested end to end, both against the real notifier (live_server)
and against a fault-injecting server (frame_server) that sends frames
the notifier never would.
"""

import asyncio
import os
import signal

import pytest

from phonecall.bridge import ClientBridge, InboundPort, Ports
from phonecall.errors import DeserializationError, TransportError

EXPECTED = {"name": "Jonathan Linnestad", "company": "Anleggsmannen"}


@pytest.fixture
def port():
    return Ports()["phoneCallIn"]


# ═══════════════════════════════════════════════════════════
# deliver() — no socket
# ═══════════════════════════════════════════════════════════


def test_deliver_forwards_parsed_value(port):
    received = []
    port.subscribe(received.append)
    bridge = ClientBridge("ws://unused", port)

    assert bridge.deliver('{"name": "Jonathan Linnestad", "company": "Anleggsmannen"}')
    assert received == [EXPECTED]


def test_deliver_drops_malformed_frame_when_logging(port):
    received = []
    port.subscribe(received.append)
    bridge = ClientBridge("ws://unused", port, on_malformed="log")

    assert bridge.deliver("this is not json") is False
    assert received == []
    assert bridge.frames_received == 1
    assert bridge.frames_dropped == 1


def test_deliver_raises_on_malformed_frame_when_strict(port):
    bridge = ClientBridge("ws://unused", port, on_malformed="raise")
    with pytest.raises(DeserializationError):
        bridge.deliver("{broken")


def test_unknown_malformed_policy_rejected(port):
    with pytest.raises(ValueError):
        ClientBridge("ws://unused", port, on_malformed="ignore")


# ═══════════════════════════════════════════════════════════
# run() against the real notifier
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_bridge_delivers_exactly_one_record(live_server, port):
    queue = port.subscribe_queue()
    bridge = ClientBridge(live_server, port)
    task = asyncio.create_task(bridge.run())

    try:
        assert await asyncio.wait_for(queue.get(), timeout=5) == EXPECTED
        await asyncio.sleep(0.3)
        assert queue.empty()
    finally:
        await bridge.close()
        received = await asyncio.wait_for(task, timeout=5)

    assert received == 1
    assert not bridge.connected


@pytest.mark.asyncio
async def test_two_bridges_receive_independent_copies(live_server):
    first_port, second_port = InboundPort("phoneCallIn"), InboundPort("phoneCallIn")
    first_queue = first_port.subscribe_queue()
    second_queue = second_port.subscribe_queue()

    async with ClientBridge(live_server, first_port) as first, ClientBridge(
        live_server, second_port
    ) as second:
        tasks = [asyncio.create_task(first.run()), asyncio.create_task(second.run())]
        assert await asyncio.wait_for(first_queue.get(), timeout=5) == EXPECTED
        assert await asyncio.wait_for(second_queue.get(), timeout=5) == EXPECTED
        await first.close()
        await second.close()
        assert await asyncio.gather(*tasks) == [1, 1]

    assert first_queue.empty()
    assert second_queue.empty()


# ═══════════════════════════════════════════════════════════
# run() against fault-injecting servers
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_run_returns_when_server_closes(frame_server, port):
    received = []
    port.subscribe(received.append)
    url = await frame_server(['{"name": "a", "company": "b"}', '{"name": "c", "company": "d"}'])

    count = await ClientBridge(url, port).run()

    assert count == 2
    assert received == [{"name": "a", "company": "b"}, {"name": "c", "company": "d"}]


@pytest.mark.asyncio
async def test_non_json_frame_is_dropped_and_bridge_keeps_going(frame_server, port):
    received = []
    port.subscribe(received.append)
    url = await frame_server(["<html>oops</html>", '{"name": "a", "company": "b"}'])

    bridge = ClientBridge(url, port, on_malformed="log")
    assert await bridge.run() == 2

    assert bridge.frames_dropped == 1
    assert received == [{"name": "a", "company": "b"}]


@pytest.mark.asyncio
async def test_non_json_frame_terminates_strict_bridge(frame_server, port):
    received = []
    port.subscribe(received.append)
    url = await frame_server(["<html>oops</html>", '{"name": "a", "company": "b"}'], close=False)

    bridge = ClientBridge(url, port, on_malformed="raise")
    with pytest.raises(DeserializationError):
        await bridge.run()

    assert received == []
    assert not bridge.connected


@pytest.mark.asyncio
async def test_binary_utf8_frame_is_parsed(frame_server, port):
    received = []
    port.subscribe(received.append)
    url = await frame_server([b'{"name": "a", "company": "b"}'])

    await ClientBridge(url, port).run()
    assert received == [{"name": "a", "company": "b"}]


# ═══════════════════════════════════════════════════════════
# Transport failures
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_connection_refused_raises_transport_error(unused_tcp_port, port):
    bridge = ClientBridge(f"ws://127.0.0.1:{unused_tcp_port}", port, open_timeout=2)
    with pytest.raises(TransportError) as exc_info:
        await bridge.run()

    assert isinstance(exc_info.value, ConnectionError)
    assert exc_info.value.url == f"ws://127.0.0.1:{unused_tcp_port}"
    assert not bridge.connected


@pytest.mark.asyncio
async def test_invalid_url_raises_transport_error(port):
    with pytest.raises(TransportError, match="invalid URI"):
        await ClientBridge("not-a-websocket-url", port).connect()


@pytest.mark.asyncio
async def test_handshake_rejection_raises_transport_error(live_server, port):
    bridge = ClientBridge(f"{live_server}/no-such-endpoint", port)
    with pytest.raises(TransportError, match="handshake"):
        await bridge.connect()


# ═══════════════════════════════════════════════════════════
# Process entry point
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_bridge_main_run_feeds_consumer(frame_server):
    from phonecall.bridge.main import run

    received = []
    url = await frame_server(['{"name": "Jonathan Linnestad", "company": "Anleggsmannen"}'])

    assert await run(url=url, consumer=received.append) == 1
    assert received == [EXPECTED]


@pytest.mark.asyncio
@pytest.mark.parametrize("sig", [signal.SIGINT, signal.SIGTERM])
async def test_bridge_main_run_stops_on_signal(frame_server, sig):
    from phonecall.bridge.main import run

    received = []
    url = await frame_server(['{"name": "a", "company": "b"}'], close=False)
    task = asyncio.create_task(run(url=url, consumer=received.append))

    for _ in range(500):
        if received:
            break
        await asyncio.sleep(0.01)
    assert received == [{"name": "a", "company": "b"}]

    os.kill(os.getpid(), sig)
    assert await asyncio.wait_for(task, timeout=5) == 1

    # Handlers are removed again once run() returns
    default = signal.default_int_handler if sig == signal.SIGINT else signal.SIG_DFL
    assert signal.getsignal(sig) == default
