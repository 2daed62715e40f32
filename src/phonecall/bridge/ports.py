"""Inbound ports — named conduits from the bridge into the application.

Learn: A port is fire-and-forget, like a Redis PUBLISH. If no one is
subscribed when a value is sent, the value is dropped. Consumers either
register a callback with ``subscribe`` or take a queue with
``subscribe_queue`` and drain it from their own task.
"""

import asyncio
from typing import Any, Callable, Iterable

import structlog

from phonecall.events.types import DEFAULT_PORTS

logger = structlog.get_logger()

Subscriber = Callable[[Any], None]


class InboundPort:
    """A named channel that fans each value out to its subscribers."""

    def __init__(self, name: str):
        self.name = name
        self._subscribers: list[Subscriber] = []

    def __repr__(self) -> str:
        return f"InboundPort({self.name!r}, subscribers={len(self._subscribers)})"

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def subscribe_queue(self) -> asyncio.Queue:
        """Subscribe an unbounded asyncio.Queue that receives every value sent."""
        queue: asyncio.Queue = asyncio.Queue()
        self.subscribe(queue.put_nowait)
        return queue

    def send(self, value: Any) -> int:
        """Deliver a value to every subscriber. Returns how many received it.

        A subscriber that raises is logged and skipped; the others still
        get the value.
        """
        delivered = 0
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception:
                logger.exception("port.subscriber_failed", port=self.name)
                continue
            delivered += 1
        return delivered


class Ports:
    """Registry of the inbound ports an application declares."""

    def __init__(self, names: Iterable[str] = DEFAULT_PORTS):
        self._ports = {name: InboundPort(name) for name in names}

    def __getitem__(self, name: str) -> InboundPort:
        try:
            return self._ports[name]
        except KeyError:
            raise KeyError(f"Unknown port: {name!r} (declared: {sorted(self._ports)})") from None

    def __contains__(self, name: object) -> bool:
        return name in self._ports

    def __iter__(self):
        return iter(self._ports.values())

    def __len__(self) -> int:
        return len(self._ports)

    def names(self) -> list[str]:
        return list(self._ports)
