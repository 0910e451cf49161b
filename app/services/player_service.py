import logging
from typing import List, Optional

from app.db.store import KeyValueStore
from app.models.app_settings import AppOwner, AppSettings
from app.models.player import Player, UNKNOWN_PLAYER_NAME
from app.models.stats import PlayerStats
from app.repositories.player_repo import PlayerRepository
from app.repositories.session_repo import SessionRepository
from app.repositories.settings_repo import SettingsRepository
from app.services.stats_service import compute_player_stats, get_player_stats
from app.utils.game_validation import (
    GameValidationError,
    NotFoundError,
    validate_display_name,
)

logger = logging.getLogger(__name__)


class PlayerService:
    """Player registry, app owner onboarding and lifetime stats."""

    def __init__(self, store: KeyValueStore):
        self.players = PlayerRepository(store)
        self.sessions = SessionRepository(store)
        self.settings = SettingsRepository(store)

    async def list_players(self, include_archived: bool = True) -> List[Player]:
        return await self.players.list_players(include_archived=include_archived)

    async def get_player(self, player_id: str) -> Player:
        player = await self.players.get_player(player_id)
        if not player:
            raise NotFoundError(f"Player {player_id} not found")
        return player

    async def get_player_name(self, player_id: str) -> str:
        player = await self.players.get_player(player_id)
        return player.display_name if player else UNKNOWN_PLAYER_NAME

    async def add_player(self, display_name: str) -> Player:
        player = await self.players.create_player(validate_display_name(display_name))
        logger.info("Added player %r", player.display_name, extra={"player_id": player.id})
        return player

    async def rename_player(self, player_id: str, display_name: str) -> Player:
        name = validate_display_name(display_name)
        player = await self.players.update_player(player_id, display_name=name)
        if not player:
            raise NotFoundError(f"Player {player_id} not found")
        return player

    async def archive_player(self, player_id: str) -> Player:
        """Hide from new games; history keeps referencing the player."""
        player = await self.players.update_player(player_id, is_archived=True)
        if not player:
            raise NotFoundError(f"Player {player_id} not found")
        logger.info("Archived player %r", player.display_name, extra={"player_id": player.id})
        return player

    async def check_duplicate_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Player]:
        """Soft uniqueness check; storage itself allows repeated names."""
        return await self.players.find_by_name(name, exclude_id=exclude_id)

    # ===== STATS =====

    async def all_stats(self) -> List[PlayerStats]:
        sessions = await self.sessions.list_sessions()
        players = await self.players.list_players()
        return compute_player_stats(sessions, players)

    async def stats_for(self, player_id: str) -> PlayerStats:
        sessions = await self.sessions.list_sessions()
        players = await self.players.list_players()
        stats = get_player_stats(player_id, sessions, players)
        if not stats:
            raise NotFoundError(f"No finished games for player {player_id}")
        return stats

    # ===== APP SETTINGS & OWNER =====

    async def get_app_settings(self) -> AppSettings:
        return await self.settings.get_app_settings()

    async def save_app_settings(self, app_settings: AppSettings) -> AppSettings:
        if app_settings.default_buy_in <= 0 or app_settings.default_chips_per_buy_in <= 0:
            raise GameValidationError("Default buy-in and chips per buy-in must be positive")
        await self.settings.save_app_settings(app_settings)
        return app_settings

    async def get_owner(self) -> Optional[AppOwner]:
        return await self.settings.get_owner()

    async def complete_onboarding(self, display_name: str, age: int) -> AppOwner:
        """Register the owner as a regular player and remember who they are."""
        if age <= 0:
            raise GameValidationError(f"Age must be positive: {age}")

        player = await self.add_player(display_name)
        owner = AppOwner(player_id=player.id, display_name=player.display_name, age=age)
        await self.settings.save_owner(owner)
        return owner

    async def reset_all_data(self) -> None:
        """Drop history and the active game; players, owner and settings stay."""
        await self.sessions.clear_sessions()
        await self.sessions.clear_active_game()
        logger.warning("All session data was reset")
