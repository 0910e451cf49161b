"""
Settlement reduction - who pays whom at the end of a session.

Greedy matching: losers (most negative first) pay winners (largest first).
Results are never mutated; remaining balances live in parallel lists
addressed by index.
"""

import logging
from datetime import datetime, timezone
from typing import List

from app.models.game import GameResult, GameSession, Settlement
from app.utils.game_validation import NotFoundError

logger = logging.getLogger(__name__)

# Balances at or below this are treated as settled
SETTLEMENT_TOLERANCE = 0.01


def calculate_settlements(results: List[GameResult]) -> List[Settlement]:
    # sorted() is stable, so ties keep roster order
    winners = sorted(
        (r for r in results if r.net_amount > 0),
        key=lambda r: r.net_amount,
        reverse=True
    )
    losers = sorted(
        (r for r in results if r.net_amount < 0),
        key=lambda r: r.net_amount
    )

    winner_remaining = [w.net_amount for w in winners]
    loser_remaining = [abs(l.net_amount) for l in losers]

    settlements: List[Settlement] = []

    for i, loser in enumerate(losers):
        while loser_remaining[i] > SETTLEMENT_TOLERANCE:
            j = next(
                (k for k, left in enumerate(winner_remaining) if left > SETTLEMENT_TOLERANCE),
                None
            )
            if j is None:
                break

            amount = min(loser_remaining[i], winner_remaining[j])

            if amount > SETTLEMENT_TOLERANCE:
                settlements.append(Settlement(
                    from_player_id=loser.player_id,
                    to_player_id=winners[j].player_id,
                    amount=round(amount, 2),
                ))

            loser_remaining[i] -= amount
            winner_remaining[j] -= amount

    return settlements


def toggle_settlement(session: GameSession, settlement_id: str) -> GameSession:
    """Flip one settlement's paid flag. Everything else stays as it was."""
    found = False
    updated = []
    for settlement in session.settlements:
        if settlement.id == settlement_id:
            found = True
            settled = not settlement.settled
            settlement = settlement.model_copy(update={
                "settled": settled,
                "settled_at": datetime.now(timezone.utc) if settled else None,
            })
        updated.append(settlement)

    if not found:
        raise NotFoundError(f"Settlement {settlement_id} not found")

    logger.info(
        "Toggled settlement %s", settlement_id,
        extra={"session_id": session.id}
    )
    return session.model_copy(update={"settlements": updated})
