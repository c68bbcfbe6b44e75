"""
Login/logout events forwarded by the game server.
"""

from .base import BaseEvent, PlayerJoinedEvent, PlayerLeftEvent
from .dispatcher import EventDispatcher
from .types import EventType

__all__ = [
    "BaseEvent",
    "EventDispatcher",
    "EventType",
    "PlayerJoinedEvent",
    "PlayerLeftEvent",
]
