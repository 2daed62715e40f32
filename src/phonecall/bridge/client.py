"""WebSocket client bridge — forward pushed records into an inbound port.

Usage example::

    from phonecall.bridge import ClientBridge, Ports

    ports = Ports()
    ports["phoneCallIn"].subscribe(print)

    async with ClientBridge("ws://localhost:8000", ports["phoneCallIn"]) as bridge:
        await bridge.run()

Learn: One connection, opened once. There is deliberately no reconnect
and no backoff: when the server closes the socket, run() returns.
"""

import asyncio
from typing import Optional

import structlog
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosedError, InvalidHandshake, InvalidURI

from phonecall.bridge.ports import InboundPort
from phonecall.config import MALFORMED_POLICIES
from phonecall.errors import DeserializationError, TransportError
from phonecall.events.types import (
    BRIDGE_CLOSED,
    BRIDGE_CONNECTED,
    BRIDGE_DELIVERED,
    BRIDGE_MALFORMED_FRAME,
)
from phonecall.schemas.notification import decode_payload

logger = structlog.get_logger()


class ClientBridge:
    """Owns one outbound WebSocket connection and feeds an InboundPort.

    Can be used as an async context manager.
    """

    def __init__(
        self,
        url: str,
        port: InboundPort,
        *,
        on_malformed: str = "log",
        open_timeout: float = 10.0,
    ):
        if on_malformed not in MALFORMED_POLICIES:
            raise ValueError(f"on_malformed must be one of {MALFORMED_POLICIES}")
        self.url = url
        self.port = port
        self.on_malformed = on_malformed
        self._open_timeout = open_timeout
        self._ws: Optional[ClientConnection] = None
        self.frames_received = 0
        self.frames_dropped = 0

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def connect(self) -> None:
        """Open the WebSocket connection. Raises TransportError on failure."""
        if self._ws is not None:
            return
        try:
            self._ws = await connect(self.url, open_timeout=self._open_timeout)
        except InvalidURI as e:
            raise TransportError(self.url, f"invalid URI: {e}") from e
        except InvalidHandshake as e:
            raise TransportError(self.url, f"handshake rejected: {e}") from e
        except (OSError, asyncio.TimeoutError) as e:
            raise TransportError(self.url, f"connect failed: {e!r}") from e
        logger.info(BRIDGE_CONNECTED, url=self.url, port=self.port.name)

    async def close(self) -> None:
        """Close the connection if it is open."""
        if self._ws is None:
            return
        ws, self._ws = self._ws, None
        await ws.close()

    async def __aenter__(self) -> "ClientBridge":
        await self.connect()
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    def deliver(self, frame: str | bytes) -> bool:
        """Parse one frame and send the value to the port.

        Returns False when the frame was malformed and dropped. Raises
        DeserializationError instead when on_malformed is "raise".
        """
        self.frames_received += 1
        try:
            value = decode_payload(frame)
        except DeserializationError as e:
            if self.on_malformed == "raise":
                raise
            self.frames_dropped += 1
            logger.warning(BRIDGE_MALFORMED_FRAME, url=self.url, error=str(e))
            return False

        receivers = self.port.send(value)
        logger.debug(BRIDGE_DELIVERED, port=self.port.name, receivers=receivers)
        return True

    async def run(self) -> int:
        """Receive frames until the server closes the connection.

        Returns the number of frames received. Abnormal closure raises
        TransportError.
        """
        await self.connect()
        ws = self._ws
        try:
            async for frame in ws:
                self.deliver(frame)
        except ConnectionClosedError as e:
            raise TransportError(self.url, f"connection lost: {e}") from e
        finally:
            await self.close()

        logger.info(
            BRIDGE_CLOSED,
            url=self.url,
            received=self.frames_received,
            dropped=self.frames_dropped,
        )
        return self.frames_received
