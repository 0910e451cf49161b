"""
Key-value store contract used by the repositories.

Records are plain dicts written and read whole. Each named store behaves like
a table keyed by record id; single-slot stores use a fixed key.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Protocol

PLAYERS = "players"
SESSIONS = "sessions"
ACTIVE_GAME = "active_game"
SETTINGS = "settings"
OWNER = "owner"
MIGRATIONS = "migrations"

ALL_STORES = (PLAYERS, SESSIONS, ACTIVE_GAME, SETTINGS, OWNER, MIGRATIONS)

# Fixed keys for single-slot stores
ACTIVE_GAME_KEY = "current"
SETTINGS_KEY = "app"
OWNER_KEY = "owner"


class KeyValueStore(Protocol):
    """Contract for record persistence - implemented by the db backends."""
    async def get(self, store: str, key: str) -> Optional[dict]: ...
    async def put(self, store: str, record: dict, key: Optional[str] = None) -> None: ...
    async def delete(self, store: str, key: str) -> None: ...
    async def clear(self, store: str) -> None: ...
    async def get_all(self, store: str) -> list[dict]: ...
    async def get_all_sorted_by_date(self, store: str) -> list[dict]: ...


def record_key(record: dict, key: Optional[str]) -> str:
    """Explicit key wins, otherwise the record's own id."""
    if key is not None:
        return key
    if "id" not in record:
        raise ValueError("Record has no id and no explicit key was given")
    return str(record["id"])


def date_sort_key(value: Any) -> datetime:
    """Sort key for created_at values, which may be legacy ISO strings."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            value = None
    if not isinstance(value, datetime):
        value = datetime.min
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
