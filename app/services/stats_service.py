from typing import Dict, List, Optional

from app.models.game import GameSession
from app.models.player import Player, UNKNOWN_PLAYER_NAME
from app.models.stats import PlayerStats


def compute_player_stats(
    sessions: List[GameSession],
    players: List[Player]
) -> List[PlayerStats]:
    """
    Fold every finished session's results into lifetime stats per player.

    Players without finished games are left out. Results pointing at ids that
    are not in the registry still get a row, under a fallback name.
    """
    names = {p.id: p.display_name for p in players}
    acc: Dict[str, dict] = {}

    for session in sessions:
        if not session.is_finished:
            continue
        played_at = session.finished_at or session.created_at

        for result in session.results:
            entry = acc.get(result.player_id)
            if entry is None:
                entry = {
                    "games_played": 0,
                    "total_net": 0.0,
                    "wins": 0,
                    # a player who never lost has a biggest loss of 0
                    "biggest_win": 0.0,
                    "biggest_loss": 0.0,
                    "last_played_at": played_at,
                }
                acc[result.player_id] = entry

            entry["games_played"] += 1
            entry["total_net"] += result.net_amount
            if result.net_amount > 0:
                entry["wins"] += 1
            entry["biggest_win"] = max(entry["biggest_win"], result.net_amount)
            entry["biggest_loss"] = min(entry["biggest_loss"], result.net_amount)
            entry["last_played_at"] = max(entry["last_played_at"], played_at)

    stats = [
        PlayerStats(
            player_id=player_id,
            display_name=names.get(player_id, UNKNOWN_PLAYER_NAME),
            games_played=entry["games_played"],
            total_net=entry["total_net"],
            average_net=entry["total_net"] / entry["games_played"],
            biggest_win=entry["biggest_win"],
            biggest_loss=entry["biggest_loss"],
            win_rate=entry["wins"] / entry["games_played"] * 100,
            last_played_at=entry["last_played_at"],
        )
        for player_id, entry in acc.items()
    ]
    stats.sort(key=lambda s: s.total_net, reverse=True)
    return stats


def get_player_stats(
    player_id: str,
    sessions: List[GameSession],
    players: List[Player]
) -> Optional[PlayerStats]:
    for row in compute_player_stats(sessions, players):
        if row.player_id == player_id:
            return row
    return None
