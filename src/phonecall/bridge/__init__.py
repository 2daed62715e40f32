"""Client bridge — the receiving side of the notification channel.

Learn: The bridge owns the WebSocket connection; the application owns
the ports. The bridge only ever calls ``port.send(value)``, so the
application can be tested without a socket and the bridge without an
application.
"""

from phonecall.bridge.client import ClientBridge
from phonecall.bridge.ports import InboundPort, Ports

__all__ = ["ClientBridge", "InboundPort", "Ports"]
