"""One-to-many fan-out of telemetry messages.

Each subscriber owns a bounded queue. Publishing never waits: a subscriber
whose queue is full has fallen behind and is closed instead, so one slow
viewer cannot stall the simulation loop or the other viewers. There is no
history; a subscriber only sees messages published after it subscribed.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

_CLOSED = object()


class Subscription:
    """A viewer's handle on a ``BroadcastChannel``.

    Iterate with ``async for`` to receive messages in publish order. Iteration
    ends once the subscription is closed, either by the viewer or by the
    channel dropping a lagging subscriber.
    """

    def __init__(self, channel: BroadcastChannel, capacity: int) -> None:
        self._channel = channel
        # One extra slot so the close marker always fits.
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=capacity + 1)
        self._capacity = capacity
        self.closed = False
        self.lagged = False

    def _offer(self, message: str) -> bool:
        """Queue *message*; ``False`` if the subscriber is too far behind."""
        if self.closed:
            return False
        if self._queue.qsize() >= self._capacity:
            return False
        self._queue.put_nowait(message)
        return True

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._queue.put_nowait(_CLOSED)
        self._channel._unsubscribe(self)

    async def recv(self) -> str | None:
        """Wait for the next message; ``None`` once the subscription is closed."""
        item = await self._queue.get()
        if item is _CLOSED:
            return None
        return item  # type: ignore[return-value]

    def __aiter__(self) -> AsyncIterator[str]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        while True:
            message = await self.recv()
            if message is None:
                return
            yield message


class BroadcastChannel:
    """Fan-out channel with a per-subscriber buffer of *capacity* messages."""

    def __init__(self, capacity: int = 100) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._subscribers: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription:
        subscription = Subscription(self, self.capacity)
        self._subscribers.append(subscription)
        return subscription

    def publish(self, message: str) -> int:
        """Deliver *message* to every subscriber.

        Returns:
            The number of subscribers that received it. Subscribers that
            could not keep up are closed and not counted.
        """
        delivered = 0
        for subscription in list(self._subscribers):
            if subscription._offer(message):
                delivered += 1
            else:
                subscription.lagged = True
                subscription.close()
        return delivered

    def close(self) -> None:
        """Close every subscription."""
        for subscription in list(self._subscribers):
            subscription.close()

    def _unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)
