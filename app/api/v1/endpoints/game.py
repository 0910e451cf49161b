from typing import Optional
from fastapi import APIRouter, Depends

from app.api.deps import get_game_service
from app.models.game import GameSession
from app.schemas.game import GameStart, GamePlayerAdd, ChipCountUpdate, ChipWarningResponse
from app.services.game_service import GameService

router = APIRouter()


@router.get("/", response_model=Optional[GameSession])
async def get_active_game(service: GameService = Depends(get_game_service)):
    """The active slot: an in-progress game, a just-finished one, or null"""
    return await service.get_active_game()


@router.post("/", response_model=GameSession)
async def start_game(
    game_in: GameStart,
    service: GameService = Depends(get_game_service)
):
    return await service.start_game(
        game_in.mode, game_in.buy_in_value, game_in.chips_per_buy_in, game_in.title
    )


@router.delete("/")
async def clear_active_game(service: GameService = Depends(get_game_service)):
    await service.clear_active_game()
    return {"message": "Active game cleared"}


@router.post("/players", response_model=GameSession)
async def add_player(
    player_in: GamePlayerAdd,
    service: GameService = Depends(get_game_service)
):
    return await service.add_player(player_in.player_id)


@router.delete("/players/{player_id}", response_model=GameSession)
async def remove_player(
    player_id: str,
    service: GameService = Depends(get_game_service)
):
    return await service.remove_player(player_id)


@router.post("/players/{player_id}/rebuy", response_model=GameSession)
async def rebuy(
    player_id: str,
    service: GameService = Depends(get_game_service)
):
    return await service.rebuy(player_id)


@router.patch("/players/{player_id}", response_model=GameSession)
async def update_chips(
    player_id: str,
    chips_in: ChipCountUpdate,
    service: GameService = Depends(get_game_service)
):
    return await service.set_chips(player_id, chips_in.current_chips)


@router.get("/warning", response_model=ChipWarningResponse)
async def chip_warning(service: GameService = Depends(get_game_service)):
    return ChipWarningResponse(warning=await service.chip_warning())


@router.post("/end", response_model=GameSession)
async def end_game(service: GameService = Depends(get_game_service)):
    """Compute results and settlements and move the game to history"""
    return await service.end_game()
