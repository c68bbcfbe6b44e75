"""Player profile API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi import status as http_status

from ..dependencies import get_plugin, verify_token
from ..exceptions import DecodeError, PlayerNotFoundError
from ..logger import logger
from ..models import PlayerData
from ..plugin import ProfilePlugin

router = APIRouter(
    prefix="/players", tags=["players"], dependencies=[Depends(verify_token)]
)


def _decode_failure(e: DecodeError) -> HTTPException:
    logger.error(f"Stored profile could not be decoded: {e}")
    return HTTPException(
        status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Stored profile could not be decoded",
    )


@router.get("/id/{player_id}", response_model=PlayerData)
async def get_player_by_id(
    player_id: UUID, plugin: Annotated[ProfilePlugin, Depends(get_plugin)]
):
    try:
        return await plugin.repository.find_by_id(player_id)
    except PlayerNotFoundError as e:
        raise HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=str(e))
    except DecodeError as e:
        raise _decode_failure(e)


@router.get("/name/{name}", response_model=PlayerData)
async def get_player_by_name(
    name: str, plugin: Annotated[ProfilePlugin, Depends(get_plugin)]
):
    """
    Get a profile by name, ignoring case.
    """
    try:
        return await plugin.repository.find_by_name(name)
    except PlayerNotFoundError as e:
        raise HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=str(e))
    except DecodeError as e:
        raise _decode_failure(e)


@router.delete("/{player_id}", status_code=http_status.HTTP_204_NO_CONTENT)
async def delete_player(
    player_id: UUID, plugin: Annotated[ProfilePlugin, Depends(get_plugin)]
):
    await plugin.repository.delete(player_id)
    logger.info(f"Deleted profile {player_id}")
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)
