from typing import Optional
from pydantic import BaseModel, Field

from app.models.game import GameMode


class GameStart(BaseModel):
    mode: GameMode = GameMode.MONEY
    buy_in_value: float
    chips_per_buy_in: int
    title: Optional[str] = Field(default=None, max_length=100)


class GamePlayerAdd(BaseModel):
    player_id: str


class ChipCountUpdate(BaseModel):
    current_chips: int


class ChipWarningResponse(BaseModel):
    warning: Optional[str] = None


class SummaryResponse(BaseModel):
    message: str
    share_link: str
