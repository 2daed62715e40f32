"""phonecall — server-push notification channel over WebSocket.

A notifier server pushes one notification record to each client that
connects; a client bridge forwards every received record into a named
inbound port consumed by the rendering application.
"""

__version__ = "0.1.0"
