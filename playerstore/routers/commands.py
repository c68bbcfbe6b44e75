"""Chat command execution on behalf of the game server."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from pydantic import BaseModel, Field

from ..commands.base import BufferedSender
from ..dependencies import get_plugin, verify_token
from ..exceptions import UnknownCommandError
from ..plugin import ProfilePlugin

router = APIRouter(
    prefix="/commands", tags=["commands"], dependencies=[Depends(verify_token)]
)


class CommandRequest(BaseModel):
    sender: str = Field(default="CONSOLE", description="Name of the issuing player")
    args: List[str] = Field(default_factory=list, description="Tokenized arguments")


class CommandResponse(BaseModel):
    success: bool
    messages: List[str]


@router.get("/", response_model=List[str])
async def list_commands(plugin: Annotated[ProfilePlugin, Depends(get_plugin)]):
    return plugin.commands.names()


@router.post("/{name}", response_model=CommandResponse)
async def run_command(
    name: str,
    request: CommandRequest,
    plugin: Annotated[ProfilePlugin, Depends(get_plugin)],
):
    """
    Run a chat command.

    Failures of the command itself are reported in ``messages`` with
    ``success`` false, exactly as the player would see them.
    """
    try:
        command = plugin.commands.get(name)
    except UnknownCommandError as e:
        raise HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=str(e))

    sender = BufferedSender(request.sender)
    success = await command.execute(sender, request.args)
    return CommandResponse(success=success, messages=sender.messages)
