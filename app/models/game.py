"""
Game session model - one poker night.

Design principles:
- GameSession is the aggregate root; everything else is embedded
- Settings are fixed once the session starts
- results/settlements stay empty while active and are written once, when the
  session finishes
- After finishing, only Settlement.settled / settled_at may change
"""

from typing import Optional, List
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, ConfigDict

from app.models.base import RecordModel, _utcnow, generate_id


class GameMode(str, Enum):
    MONEY = "money"
    POINTS = "points"


class GameStatus(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"


# Embedded documents don't need RecordModel (no separate id)
class GameSettings(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    mode: GameMode = GameMode.MONEY
    buy_in_value: float
    chips_per_buy_in: int
    currency_symbol: str = "₪"
    created_at: datetime = Field(default_factory=_utcnow)


class PlayerInGame(BaseModel):
    player_id: str
    buy_ins: int = 1
    current_chips: int = 0


class GameTotals(BaseModel):
    total_buy_ins: int = 0
    total_money: float = 0
    total_chips: int = 0
    expected_chips: int = 0


class GameResult(BaseModel):
    """Snapshot taken when the session finishes."""
    model_config = ConfigDict(frozen=True)

    player_id: str
    buy_ins: int
    chips: int
    invested: float
    cash_out: float
    net_amount: float


class Settlement(BaseModel):
    """Directed payment: from_player_id pays to_player_id."""
    id: str = Field(default_factory=generate_id)
    from_player_id: str
    to_player_id: str
    amount: float
    settled: bool = False
    settled_at: Optional[datetime] = None


class GameSession(RecordModel):
    title: str
    settings: GameSettings
    players: List[PlayerInGame] = []
    results: List[GameResult] = []
    settlements: List[Settlement] = []
    totals: GameTotals = Field(default_factory=GameTotals)
    finished_at: Optional[datetime] = None
    status: GameStatus = GameStatus.ACTIVE

    def find_player(self, player_id: str) -> Optional[PlayerInGame]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    @property
    def is_finished(self) -> bool:
        return self.status == GameStatus.FINISHED
