"""
Node status channels.

Every node type family publishes `loading -> success|error` transitions on
its own channel. The registry enumerates all channels so subscription tokens
can be issued per channel and clients can map channel names back to node
types. Adding a node type means registering one more channel here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from .types import NodeStatus, NodeStatusEvent

logger = logging.getLogger(__name__)

STATUS_TOPIC = "status"


@dataclass(frozen=True)
class StatusChannel:
    """A named pub/sub stream for one node type family."""

    key: str
    name: str
    topic: str = STATUS_TOPIC


class ChannelRegistry:
    """Registry of node status channels."""

    def __init__(self) -> None:
        self._channels: dict[str, StatusChannel] = {}

    def register(self, channel: StatusChannel) -> StatusChannel:
        """Register a channel; re-registering the same key is a no-op."""
        existing = self._channels.get(channel.key)
        if existing is not None:
            if existing != channel:
                raise ValueError(f'Channel key "{channel.key}" already registered as {existing.name}')
            return existing
        self._channels[channel.key] = channel
        return channel

    def get(self, key: str) -> StatusChannel:
        """
        Get a channel by key.

        Raises:
            KeyError: If the channel is not registered
        """
        if key not in self._channels:
            raise KeyError(f'Unknown status channel: "{key}"')
        return self._channels[key]

    def has(self, key: str) -> bool:
        return key in self._channels

    def keys(self) -> list[str]:
        return list(self._channels)

    def items(self) -> list[tuple[str, StatusChannel]]:
        return list(self._channels.items())

    def __iter__(self) -> Iterator[StatusChannel]:
        return iter(self._channels.values())

    def name_map(self) -> dict[str, str]:
        """Channel key -> human-readable channel name, for client-side filtering."""
        return {key: channel.name for key, channel in self._channels.items()}


# Singleton instance
channel_registry = ChannelRegistry()

INITIAL_CHANNEL = channel_registry.register(StatusChannel("initial", "initial-execution"))
MANUAL_TRIGGER_CHANNEL = channel_registry.register(
    StatusChannel("manualTrigger", "manual-trigger-execution")
)
WEBHOOK_CHANNEL = channel_registry.register(StatusChannel("webhook", "webhook-execution"))
GOOGLE_FORM_TRIGGER_CHANNEL = channel_registry.register(
    StatusChannel("googleFormTrigger", "google-form-trigger-execution")
)
STRIPE_TRIGGER_CHANNEL = channel_registry.register(
    StatusChannel("stripeTrigger", "stripe-trigger-execution")
)
HTTP_REQUEST_CHANNEL = channel_registry.register(
    StatusChannel("httpRequest", "http-request-execution")
)
OPENAI_CHANNEL = channel_registry.register(StatusChannel("openai", "openai-execution"))
ANTHROPIC_CHANNEL = channel_registry.register(StatusChannel("anthropic", "anthropic-execution"))
GEMINI_CHANNEL = channel_registry.register(StatusChannel("gemini", "gemini-execution"))


class StatusSink(Protocol):
    """Destination for node status events (realtime broker, test recorder, ...)."""

    async def publish(self, channel: StatusChannel, event: NodeStatusEvent) -> None: ...


class StatusPublisher:
    """Publishes status events for one channel within one run."""

    def __init__(
        self,
        sink: StatusSink | None,
        channel: StatusChannel,
        run_id: str | None = None,
    ) -> None:
        self._sink = sink
        self.channel = channel
        self.run_id = run_id

    async def __call__(self, node_id: str, status: NodeStatus) -> None:
        await self.publish(node_id, status)

    async def publish(self, node_id: str, status: NodeStatus) -> None:
        """Publish a status; sink failures are logged, never raised."""
        if self._sink is None:
            return
        event = NodeStatusEvent(node_id=node_id, status=status, run_id=self.run_id)
        try:
            await self._sink.publish(self.channel, event)
        except Exception:
            logger.exception(
                "Failed to publish %s status for node %s on %s",
                status.value,
                node_id,
                self.channel.name,
            )
