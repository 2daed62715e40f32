"""Error taxonomy for the notification channel.

TransportError covers the socket itself, the other two cover the JSON
payload in each direction.
"""


class PhoneCallError(Exception):
    """Base class for every error raised by phonecall."""


class TransportError(PhoneCallError, ConnectionError):
    """Connecting, handshaking, or reading from the WebSocket failed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class SerializationError(PhoneCallError):
    """An outbound notification record could not be encoded as JSON."""


class DeserializationError(PhoneCallError):
    """An inbound frame was not valid JSON (or not a notification record)."""

    def __init__(self, message: str, payload: str | bytes = ""):
        self.payload = payload
        super().__init__(message)
