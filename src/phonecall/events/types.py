"""Port and event name constants.

Learn: Centralizing names as constants prevents typos and makes it easy
to discover every channel the application exposes. Port names are the
names the rendering application subscribes to, so they keep its
camelCase spelling.
"""

# ─── Inbound ports (client bridge → application) ─────────

PHONE_CALL_IN = "phoneCallIn"

DEFAULT_PORTS = (PHONE_CALL_IN,)

# ─── Log events ──────────────────────────────────────────

NOTIFIER_CONNECTED = "notifier.client_connected"
NOTIFIER_SENT = "notifier.sent"
NOTIFIER_SEND_FAILED = "notifier.send_failed"
NOTIFIER_DISCONNECTED = "notifier.client_disconnected"

BRIDGE_CONNECTED = "bridge.connected"
BRIDGE_DELIVERED = "bridge.delivered"
BRIDGE_MALFORMED_FRAME = "bridge.malformed_frame"
BRIDGE_CLOSED = "bridge.closed"
