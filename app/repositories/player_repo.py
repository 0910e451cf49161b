from datetime import datetime, timezone
from typing import List, Optional

from app.db.store import KeyValueStore, PLAYERS
from app.models.player import Player, normalize_name


class PlayerRepository:
    """Player registry operations."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.collection = PLAYERS

    async def create_player(self, display_name: str) -> Player:
        """Create a new player."""
        player = Player(display_name=display_name)
        await self.save_player(player)
        return player

    async def save_player(self, player: Player) -> None:
        await self.store.put(self.collection, player.to_record())

    async def get_player(self, player_id: str) -> Optional[Player]:
        doc = await self.store.get(self.collection, player_id)
        if doc:
            return Player(**doc)
        return None

    async def list_players(self, include_archived: bool = True) -> List[Player]:
        """All players, most recently used first."""
        docs = await self.store.get_all(self.collection)
        players = [Player(**doc) for doc in docs]
        if not include_archived:
            players = [p for p in players if not p.is_archived]
        players.sort(key=lambda p: p.last_used_at, reverse=True)
        return players

    async def update_player(self, player_id: str, **updates) -> Optional[Player]:
        player = await self.get_player(player_id)
        if not player:
            return None
        player = player.model_copy(update=updates)
        await self.save_player(player)
        return player

    async def touch_player(self, player_id: str) -> Optional[Player]:
        """Mark a player as just used."""
        return await self.update_player(player_id, last_used_at=datetime.now(timezone.utc))

    async def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Player]:
        """Case-insensitive lookup among non-archived players."""
        target = normalize_name(name)
        for player in await self.list_players(include_archived=False):
            if normalize_name(player.display_name) == target and player.id != exclude_id:
                return player
        return None
