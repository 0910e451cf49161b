from datetime import datetime

from pydantic import BaseModel


class PlayerStats(BaseModel):
    """Lifetime figures for one player, derived from finished sessions only."""
    player_id: str
    display_name: str
    games_played: int
    total_net: float
    average_net: float
    biggest_win: float
    biggest_loss: float
    win_rate: float
    last_played_at: datetime
