"""In-process event bus carrying run trigger events to their handlers."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)

WORKFLOW_TRIGGER_EVENT = "workflow/trigger"


@dataclass
class TriggerEvent:
    """Event sent to the bus; `data` holds workflowId, userId and seed data."""

    name: str
    data: dict[str, Any]
    id: str = field(default_factory=lambda: f"evt_{uuid.uuid4().hex[:12]}")
    timestamp: datetime = field(default_factory=datetime.now)


EventHandler = Callable[[TriggerEvent], Awaitable[Any]]


class EventBus:
    """
    Fire-and-forget dispatcher.

    `send` returns as soon as handlers are scheduled; handler outcomes are
    logged, never reported back to the sender.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    def subscribe(self, name: str, handler: EventHandler) -> None:
        handlers = self._handlers.setdefault(name, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    async def send(self, event: TriggerEvent) -> str:
        """Schedule every handler subscribed to the event name."""
        handlers = self._handlers.get(event.name, [])
        if not handlers:
            logger.warning("No handlers subscribed to event %s", event.name)

        for handler in handlers:
            task = asyncio.create_task(self._dispatch(handler, event))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        logger.debug("Sent event %s (%s) to %d handler(s)", event.id, event.name, len(handlers))
        return event.id

    async def drain(self) -> None:
        """Wait for all in-flight handlers to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _dispatch(self, handler: EventHandler, event: TriggerEvent) -> None:
        try:
            await handler(event)
        except Exception:
            logger.exception("Handler for event %s (%s) failed", event.id, event.name)


# Singleton instance
event_bus = EventBus()
