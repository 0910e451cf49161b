from typing import List
from fastapi import APIRouter, Depends

from app.api.deps import get_player_service
from app.models.stats import PlayerStats
from app.services.player_service import PlayerService

router = APIRouter()


@router.get("/", response_model=List[PlayerStats])
async def list_stats(service: PlayerService = Depends(get_player_service)):
    """Lifetime stats for every player with at least one finished game"""
    return await service.all_stats()


@router.get("/{player_id}", response_model=PlayerStats)
async def get_stats(
    player_id: str,
    service: PlayerService = Depends(get_player_service)
):
    return await service.stats_for(player_id)
