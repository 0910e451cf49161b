from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_player_service
from app.models.player import Player
from app.schemas.player import PlayerCreate, PlayerUpdate, DuplicateCheckResponse
from app.services.player_service import PlayerService

router = APIRouter()


@router.get("/", response_model=List[Player])
async def list_players(
    include_archived: bool = True,
    service: PlayerService = Depends(get_player_service)
):
    """List players, most recently used first"""
    return await service.list_players(include_archived=include_archived)


@router.post("/", response_model=Player)
async def create_player(
    player_in: PlayerCreate,
    service: PlayerService = Depends(get_player_service)
):
    return await service.add_player(player_in.display_name)


@router.get("/duplicate", response_model=DuplicateCheckResponse)
async def check_duplicate(
    name: str,
    exclude_id: Optional[str] = Query(default=None),
    service: PlayerService = Depends(get_player_service)
):
    """Case-insensitive name clash among non-archived players"""
    return DuplicateCheckResponse(duplicate=await service.check_duplicate_name(name, exclude_id))


@router.get("/{player_id}", response_model=Player)
async def get_player(
    player_id: str,
    service: PlayerService = Depends(get_player_service)
):
    return await service.get_player(player_id)


@router.patch("/{player_id}", response_model=Player)
async def rename_player(
    player_id: str,
    player_in: PlayerUpdate,
    service: PlayerService = Depends(get_player_service)
):
    return await service.rename_player(player_id, player_in.display_name)


@router.post("/{player_id}/archive", response_model=Player)
async def archive_player(
    player_id: str,
    service: PlayerService = Depends(get_player_service)
):
    return await service.archive_player(player_id)
