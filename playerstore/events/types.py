"""Event type definitions."""

from enum import Enum


class EventType(str, Enum):
    """All event types forwarded by the game server."""

    PLAYER_JOINED = "player.joined"
    PLAYER_LEFT = "player.left"
