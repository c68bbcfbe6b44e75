"""Base event model for all events."""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from .types import EventType


class BaseEvent(BaseModel):
    """Base class for all events."""

    event_type: EventType
    timestamp: AwareDatetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class PlayerJoinedEvent(BaseEvent):
    """Fired when a player logs in."""

    event_type: EventType = EventType.PLAYER_JOINED
    player_id: UUID = Field(..., description="Player UUID")
    player_name: str = Field(..., description="Player username")


class PlayerLeftEvent(BaseEvent):
    """Fired when a player logs out."""

    event_type: EventType = EventType.PLAYER_LEFT
    player_id: UUID = Field(..., description="Player UUID")
    player_name: str = Field(..., description="Player username")
