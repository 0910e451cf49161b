from typing import List
from fastapi import APIRouter, Depends

from app.api.deps import get_game_service
from app.models.game import GameSession
from app.schemas.game import SummaryResponse
from app.services.game_service import GameService

router = APIRouter()


@router.get("/", response_model=List[GameSession])
async def list_sessions(service: GameService = Depends(get_game_service)):
    """Session history, most recent first"""
    return await service.list_sessions()


@router.get("/{session_id}", response_model=GameSession)
async def get_session(
    session_id: str,
    service: GameService = Depends(get_game_service)
):
    return await service.get_session(session_id)


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    service: GameService = Depends(get_game_service)
):
    await service.delete_session(session_id)
    return {"message": "Session deleted successfully"}


@router.post("/{session_id}/settlements/{settlement_id}/toggle", response_model=GameSession)
async def toggle_settlement(
    session_id: str,
    settlement_id: str,
    service: GameService = Depends(get_game_service)
):
    """Mark a settlement paid, or unpaid again"""
    return await service.toggle_settlement(session_id, settlement_id)


@router.get("/{session_id}/summary", response_model=SummaryResponse)
async def session_summary(
    session_id: str,
    service: GameService = Depends(get_game_service)
):
    message, share_link = await service.session_summary(session_id)
    return SummaryResponse(message=message, share_link=share_link)
