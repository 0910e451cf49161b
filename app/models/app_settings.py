from datetime import datetime

from pydantic import BaseModel, Field

from app.models.base import _utcnow


class AppSettings(BaseModel):
    currency_symbol: str = "₪"
    dark_mode: bool = True
    default_buy_in: float = 50
    default_chips_per_buy_in: int = 1000


class AppOwner(BaseModel):
    """The person running the app; also a regular registry player."""
    player_id: str
    display_name: str
    age: int
    onboarding_complete: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
