"""
Game session commands.

The module-level functions are pure: each takes the current GameSession and
returns the next one, recomputing totals where the roster changed.
GameService loads the active session from the store, applies a command and
writes the result back.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from app.db.store import KeyValueStore
from app.models.game import (
    GameMode,
    GameSession,
    GameSettings,
    GameStatus,
    GameTotals,
    PlayerInGame,
)
from app.repositories.player_repo import PlayerRepository
from app.repositories.session_repo import SessionRepository
from app.repositories.settings_repo import SettingsRepository
from app.services.export_service import generate_summary_message, get_share_link
from app.services.settlement_service import calculate_settlements, toggle_settlement
from app.utils.calculations import (
    calculate_all_results,
    calculate_totals,
    get_chip_difference_warning,
)
from app.utils.game_validation import (
    GameStateError,
    GameValidationError,
    NotFoundError,
    validate_chip_count,
    validate_game_settings,
)

logger = logging.getLogger(__name__)


def default_title(now: datetime) -> str:
    """e.g. "Mon, Jan 5" """
    return f"{now:%a}, {now:%b} {now.day}"


def new_game(
    mode: GameMode,
    buy_in_value: float,
    chips_per_buy_in: int,
    currency_symbol: str,
    title: Optional[str] = None
) -> GameSession:
    validate_game_settings(buy_in_value, chips_per_buy_in)
    now = datetime.now(timezone.utc)

    return GameSession(
        title=(title or "").strip() or default_title(now),
        settings=GameSettings(
            mode=mode,
            buy_in_value=buy_in_value,
            chips_per_buy_in=chips_per_buy_in,
            currency_symbol=currency_symbol,
            created_at=now,
        ),
        totals=GameTotals(),
        created_at=now,
        status=GameStatus.ACTIVE,
    )


def _require_active(session: GameSession) -> None:
    if session.is_finished:
        raise GameStateError("Game is already finished")


def _with_players(session: GameSession, players: List[PlayerInGame]) -> GameSession:
    return session.model_copy(update={
        "players": players,
        "totals": calculate_totals(players, session.settings),
    })


def add_player(session: GameSession, player_id: str) -> GameSession:
    """Seat a player with one buy-in's worth of chips."""
    _require_active(session)
    if session.find_player(player_id):
        raise GameValidationError(f"Player {player_id} is already in this game")

    seat = PlayerInGame(
        player_id=player_id,
        buy_ins=1,
        current_chips=session.settings.chips_per_buy_in,
    )
    return _with_players(session, session.players + [seat])


def remove_player(session: GameSession, player_id: str) -> GameSession:
    _require_active(session)
    if not session.find_player(player_id):
        raise NotFoundError(f"Player {player_id} is not in this game")
    return _with_players(session, [p for p in session.players if p.player_id != player_id])


def rebuy(session: GameSession, player_id: str) -> GameSession:
    """One more buy-in: adds chips_per_buy_in chips."""
    _require_active(session)
    if not session.find_player(player_id):
        raise NotFoundError(f"Player {player_id} is not in this game")

    players = [
        p.model_copy(update={
            "buy_ins": p.buy_ins + 1,
            "current_chips": p.current_chips + session.settings.chips_per_buy_in,
        }) if p.player_id == player_id else p
        for p in session.players
    ]
    return _with_players(session, players)


def set_chips(session: GameSession, player_id: str, chips: int) -> GameSession:
    _require_active(session)
    validate_chip_count(chips)
    if not session.find_player(player_id):
        raise NotFoundError(f"Player {player_id} is not in this game")

    players = [
        p.model_copy(update={"current_chips": chips}) if p.player_id == player_id else p
        for p in session.players
    ]
    return _with_players(session, players)


def end_game(session: GameSession) -> GameSession:
    """
    Freeze results and settlements. This happens exactly once per session;
    a finished session is never recomputed.
    """
    _require_active(session)
    if not session.players:
        raise GameValidationError("Cannot end a game without players")

    results = calculate_all_results(session)
    settlements = calculate_settlements(results)

    return session.model_copy(update={
        "results": results,
        "settlements": settlements,
        "totals": calculate_totals(session.players, session.settings),
        "finished_at": datetime.now(timezone.utc),
        "status": GameStatus.FINISHED,
    })


class GameService:
    """Runs game commands against the persisted active slot and history."""

    def __init__(self, store: KeyValueStore):
        self.sessions = SessionRepository(store)
        self.players = PlayerRepository(store)
        self.settings = SettingsRepository(store)

    async def get_active_game(self) -> Optional[GameSession]:
        return await self.sessions.get_active_game()

    async def _load_active(self) -> GameSession:
        session = await self.sessions.get_active_game()
        if not session:
            raise GameStateError("No active game")
        return session

    async def start_game(
        self,
        mode: GameMode,
        buy_in_value: float,
        chips_per_buy_in: int,
        title: Optional[str] = None
    ) -> GameSession:
        current = await self.sessions.get_active_game()
        if current and not current.is_finished:
            raise GameStateError("A game is already in progress")

        app_settings = await self.settings.get_app_settings()
        session = new_game(mode, buy_in_value, chips_per_buy_in, app_settings.currency_symbol, title)
        await self.sessions.save_active_game(session)

        logger.info("Started game %r (%s mode)", session.title, session.settings.mode,
                    extra={"session_id": session.id})
        return session

    async def add_player(self, player_id: str) -> GameSession:
        session = await self._load_active()
        player = await self.players.get_player(player_id)
        if not player:
            raise NotFoundError(f"Player {player_id} not found")
        if player.is_archived:
            raise GameValidationError(f"Player {player.display_name!r} is archived")

        session = add_player(session, player_id)
        await self.sessions.save_active_game(session)
        await self.players.touch_player(player_id)
        return session

    async def remove_player(self, player_id: str) -> GameSession:
        session = remove_player(await self._load_active(), player_id)
        await self.sessions.save_active_game(session)
        return session

    async def rebuy(self, player_id: str) -> GameSession:
        session = rebuy(await self._load_active(), player_id)
        await self.sessions.save_active_game(session)
        return session

    async def set_chips(self, player_id: str, chips: int) -> GameSession:
        session = set_chips(await self._load_active(), player_id, chips)
        await self.sessions.save_active_game(session)
        return session

    async def chip_warning(self) -> Optional[str]:
        session = await self._load_active()
        return get_chip_difference_warning(session.totals)

    async def end_game(self) -> GameSession:
        session = end_game(await self._load_active())

        # history first: the slot only ever points at something already saved
        await self.sessions.save_session(session)
        await self.sessions.save_active_game(session)

        logger.info(
            "Finished game %r: %d players, %d settlements", session.title,
            len(session.results), len(session.settlements),
            extra={"session_id": session.id}
        )
        return session

    async def toggle_settlement(self, session_id: str, settlement_id: str) -> GameSession:
        session = await self.sessions.get_session(session_id)
        if not session:
            raise NotFoundError(f"Session {session_id} not found")

        session = toggle_settlement(session, settlement_id)
        await self.sessions.save_session(session)

        active = await self.sessions.get_active_game()
        if active and active.id == session.id:
            await self.sessions.save_active_game(session)
        return session

    async def clear_active_game(self) -> None:
        await self.sessions.clear_active_game()

    # ===== HISTORY =====

    async def list_sessions(self) -> List[GameSession]:
        return await self.sessions.list_sessions()

    async def get_session(self, session_id: str) -> GameSession:
        session = await self.sessions.get_session(session_id)
        if not session:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    async def delete_session(self, session_id: str) -> None:
        if not await self.sessions.delete_session(session_id):
            raise NotFoundError(f"Session {session_id} not found")
        logger.info("Deleted session", extra={"session_id": session_id})

    async def session_summary(self, session_id: str) -> Tuple[str, str]:
        """Share text and link for a finished session."""
        session = await self.get_session(session_id)
        names = {p.id: p.display_name for p in await self.players.list_players()}
        message = generate_summary_message(session, names)
        return message, get_share_link(message)
