"""In-process realtime broker fanning status events out to subscribers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass

from .status import StatusChannel
from .types import NodeStatusEvent

logger = logging.getLogger(__name__)


@dataclass
class RealtimeMessage:
    """A status event as delivered to a subscriber."""

    channel: str
    topic: str
    event: NodeStatusEvent

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "topic": self.topic,
            "data": self.event.to_dict(),
        }


class Subscription:
    """Queue of messages for one subscriber, filtered by channel key."""

    def __init__(
        self,
        channel_keys: Iterable[str],
        run_id: str | None = None,
        max_queue_size: int = 1000,
    ) -> None:
        self.channel_keys = frozenset(channel_keys)
        self.run_id = run_id
        self._queue: asyncio.Queue[RealtimeMessage] = asyncio.Queue(maxsize=max_queue_size)

    def matches(self, channel: StatusChannel, event: NodeStatusEvent) -> bool:
        if channel.key not in self.channel_keys:
            return False
        return self.run_id is None or self.run_id == event.run_id

    def offer(self, message: RealtimeMessage) -> None:
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Dropping status event for slow subscriber on %s", message.channel)

    async def get(self) -> RealtimeMessage:
        return await self._queue.get()

    def __aiter__(self) -> AsyncIterator[RealtimeMessage]:
        return self

    async def __anext__(self) -> RealtimeMessage:
        return await self._queue.get()


class RealtimeBroker:
    """StatusSink that delivers events to live subscribers."""

    def __init__(self) -> None:
        self._subscriptions: set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    async def publish(self, channel: StatusChannel, event: NodeStatusEvent) -> None:
        message = RealtimeMessage(channel=channel.name, topic=channel.topic, event=event)
        for subscription in list(self._subscriptions):
            if subscription.matches(channel, event):
                subscription.offer(message)

    @asynccontextmanager
    async def subscribe(
        self,
        channel_keys: Iterable[str],
        run_id: str | None = None,
    ) -> AsyncIterator[Subscription]:
        """Subscribe to channels for the lifetime of the context."""
        subscription = Subscription(channel_keys, run_id=run_id)
        self._subscriptions.add(subscription)
        try:
            yield subscription
        finally:
            self._subscriptions.discard(subscription)


# Singleton instance
realtime_broker = RealtimeBroker()
