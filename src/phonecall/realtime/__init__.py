"""Real-time infrastructure — the notifier side of the channel.

Learn: Events flow one way only:
1. Client connects to the WebSocket endpoint
2. Server pushes the notification record as one text frame
3. Connection idles until the client goes away

There is no broadcast and no shared state between connections, so each
connection is handled entirely inside its own endpoint coroutine.
"""
