from typing import Optional
from fastapi import APIRouter, Depends

from app.api.deps import get_player_service
from app.models.app_settings import AppOwner, AppSettings
from app.schemas.player import OwnerCreate
from app.services.player_service import PlayerService

router = APIRouter()


@router.get("/", response_model=AppSettings)
async def get_settings(service: PlayerService = Depends(get_player_service)):
    return await service.get_app_settings()


@router.put("/", response_model=AppSettings)
async def save_settings(
    settings_in: AppSettings,
    service: PlayerService = Depends(get_player_service)
):
    return await service.save_app_settings(settings_in)


@router.get("/owner", response_model=Optional[AppOwner])
async def get_owner(service: PlayerService = Depends(get_player_service)):
    return await service.get_owner()


@router.post("/owner", response_model=AppOwner)
async def create_owner(
    owner_in: OwnerCreate,
    service: PlayerService = Depends(get_player_service)
):
    """Finish onboarding: the owner becomes a regular player too"""
    return await service.complete_onboarding(owner_in.display_name, owner_in.age)


@router.post("/reset")
async def reset_data(service: PlayerService = Depends(get_player_service)):
    await service.reset_all_data()
    return {"message": "All session data reset"}
