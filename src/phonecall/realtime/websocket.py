"""WebSocket endpoint — push one notification record per connection.

Learn: Each client connects to ``/``. The handler:
1. Accepts the upgrade
2. Sends the configured notification record as a single text frame
3. Reads and discards inbound frames until the client disconnects

A failed send is logged and dropped — no retry. The connection stays
open after the push; the client decides when it is done.
"""

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from phonecall.errors import SerializationError
from phonecall.events.types import (
    NOTIFIER_CONNECTED,
    NOTIFIER_DISCONNECTED,
    NOTIFIER_SEND_FAILED,
    NOTIFIER_SENT,
)
from phonecall.schemas.notification import default_record, encode_record

logger = structlog.get_logger()
router = APIRouter()


def _client_label(websocket: WebSocket) -> str:
    if websocket.client is None:
        return "unknown"
    return f"{websocket.client.host}:{websocket.client.port}"


async def push_notification(websocket: WebSocket) -> bool:
    """Send the notification record to one client. Returns True if sent."""
    client = _client_label(websocket)
    try:
        payload = encode_record(default_record())
        await websocket.send_text(payload)
    except (SerializationError, ValueError, WebSocketDisconnect, RuntimeError, OSError) as e:
        logger.warning(NOTIFIER_SEND_FAILED, client=client, error=str(e))
        return False
    logger.info(NOTIFIER_SENT, client=client, size=len(payload))
    return True


@router.websocket("/")
async def notifier_websocket(websocket: WebSocket):
    """WebSocket endpoint for the one-shot notification push."""
    await websocket.accept()
    client = _client_label(websocket)
    logger.info(NOTIFIER_CONNECTED, client=client)

    await push_notification(websocket)

    # Inbound frames are ignored; we only wait for the disconnect.
    try:
        while websocket.client_state == WebSocketState.CONNECTED:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    except (WebSocketDisconnect, RuntimeError):
        pass
    finally:
        logger.info(NOTIFIER_DISCONNECTED, client=client)
