"""Login and logout notifications from the game server."""

from datetime import datetime, timezone
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi import status as http_status
from pydantic import AwareDatetime, BaseModel, Field

from ..dependencies import get_plugin, verify_token
from ..events.base import PlayerJoinedEvent, PlayerLeftEvent
from ..plugin import ProfilePlugin

router = APIRouter(
    prefix="/events", tags=["events"], dependencies=[Depends(verify_token)]
)


class PlayerEventRequest(BaseModel):
    player_id: UUID
    player_name: str = Field(min_length=1)
    timestamp: AwareDatetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


@router.post("/join", status_code=http_status.HTTP_202_ACCEPTED)
async def player_joined(
    request: PlayerEventRequest,
    background_tasks: BackgroundTasks,
    plugin: Annotated[ProfilePlugin, Depends(get_plugin)],
):
    event = PlayerJoinedEvent(**request.model_dump())
    background_tasks.add_task(plugin.event_dispatcher.dispatch_player_joined, event)
    return {"accepted": True}


@router.post("/leave", status_code=http_status.HTTP_202_ACCEPTED)
async def player_left(
    request: PlayerEventRequest,
    background_tasks: BackgroundTasks,
    plugin: Annotated[ProfilePlugin, Depends(get_plugin)],
):
    event = PlayerLeftEvent(**request.model_dump())
    background_tasks.add_task(plugin.event_dispatcher.dispatch_player_left, event)
    return {"accepted": True}
