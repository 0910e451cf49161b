from fastapi import Depends

from app.db.session import get_store
from app.db.store import KeyValueStore
from app.services.game_service import GameService
from app.services.player_service import PlayerService


async def get_game_service(store: KeyValueStore = Depends(get_store)) -> GameService:
    return GameService(store)


async def get_player_service(store: KeyValueStore = Depends(get_store)) -> PlayerService:
    return PlayerService(store)
