from typing import List, Optional

from app.db.store import KeyValueStore, SESSIONS, ACTIVE_GAME, ACTIVE_GAME_KEY
from app.models.game import GameSession


class SessionRepository:
    """Finished-session history plus the single active-game slot."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.collection = SESSIONS

    # ===== HISTORY =====

    async def save_session(self, session: GameSession) -> None:
        await self.store.put(self.collection, session.to_record())

    async def get_session(self, session_id: str) -> Optional[GameSession]:
        doc = await self.store.get(self.collection, session_id)
        if doc:
            return GameSession(**doc)
        return None

    async def list_sessions(self) -> List[GameSession]:
        """All stored sessions, most recent first."""
        docs = await self.store.get_all_sorted_by_date(self.collection)
        return [GameSession(**doc) for doc in reversed(docs)]

    async def delete_session(self, session_id: str) -> bool:
        if not await self.store.get(self.collection, session_id):
            return False
        await self.store.delete(self.collection, session_id)
        return True

    async def clear_sessions(self) -> None:
        await self.store.clear(self.collection)

    # ===== ACTIVE SLOT =====

    async def get_active_game(self) -> Optional[GameSession]:
        doc = await self.store.get(ACTIVE_GAME, ACTIVE_GAME_KEY)
        if doc:
            return GameSession(**doc)
        return None

    async def save_active_game(self, session: GameSession) -> None:
        await self.store.put(ACTIVE_GAME, session.to_record(), key=ACTIVE_GAME_KEY)

    async def clear_active_game(self) -> None:
        await self.store.delete(ACTIVE_GAME, ACTIVE_GAME_KEY)
