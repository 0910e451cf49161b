from datetime import datetime

from pydantic import Field

from app.models.base import RecordModel, _utcnow

UNKNOWN_PLAYER_NAME = "Unknown Player"


class Player(RecordModel):
    """Registry entry. Identity is `id`; display_name may change or repeat."""
    display_name: str
    last_used_at: datetime = Field(default_factory=_utcnow)
    is_archived: bool = False


def normalize_name(name: str) -> str:
    """Key used for case-insensitive name matching."""
    return name.strip().lower()
