"""Event dispatcher - dispatches typed events to registered handlers.

Handlers for one event run concurrently. There is no ordering guarantee
between events for different players, nor mutual exclusion for the same one.
"""

import asyncio
import inspect
from typing import Awaitable, Callable, Dict, List, TypeVar, Union

from ..logger import logger
from .base import BaseEvent, PlayerJoinedEvent, PlayerLeftEvent
from .types import EventType

EventT = TypeVar("EventT", bound=BaseEvent)

# Handlers may be sync or async
EventHandler = Union[Callable[[EventT], None], Callable[[EventT], Awaitable[None]]]


class EventDispatcher:
    """Dispatches events to the handlers registered for their type."""

    def __init__(self):
        self._handlers: Dict[EventType, List[Callable]] = {
            event_type: [] for event_type in EventType
        }

    def on_player_joined(self, handler: EventHandler[PlayerJoinedEvent]) -> None:
        """Register handler for player joined events."""
        self._handlers[EventType.PLAYER_JOINED].append(handler)

    def on_player_left(self, handler: EventHandler[PlayerLeftEvent]) -> None:
        """Register handler for player left events."""
        self._handlers[EventType.PLAYER_LEFT].append(handler)

    async def dispatch_player_joined(self, event: PlayerJoinedEvent) -> None:
        await self._dispatch_event(event)

    async def dispatch_player_left(self, event: PlayerLeftEvent) -> None:
        await self._dispatch_event(event)

    async def _dispatch_event(self, event: BaseEvent) -> None:
        """Run every handler for the event and log the ones that fail."""
        handlers = self._handlers.get(event.event_type, [])

        if not handlers:
            logger.debug(f"No handlers registered for event: {event.event_type}")
            return

        tasks = []
        for handler in handlers:
            if inspect.iscoroutinefunction(handler):
                tasks.append(asyncio.create_task(handler(event)))
            else:
                tasks.append(asyncio.create_task(asyncio.to_thread(handler, event)))

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(
                    f"Handler {getattr(handler, '__qualname__', handler)} failed "
                    f"for event {event.event_type.value}: {result}",
                    exc_info=result,
                )
