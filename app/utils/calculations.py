"""
Totals and per-player result calculations.

All functions here are pure: they take model snapshots and return new ones.
Settings are assumed valid (see app.utils.game_validation).
"""

from typing import List, Optional

from app.models.game import (
    GameMode,
    GameResult,
    GameSession,
    GameSettings,
    GameTotals,
    PlayerInGame,
)

# Chip counts more than this far off the expected total trigger a warning
CHIP_WARNING_THRESHOLD_PERCENT = 5


def calculate_totals(players: List[PlayerInGame], settings: GameSettings) -> GameTotals:
    """Pot size and chip supply for the current roster."""
    total_buy_ins = sum(p.buy_ins for p in players)
    total_chips = sum(p.current_chips for p in players)

    return GameTotals(
        total_buy_ins=total_buy_ins,
        total_money=total_buy_ins * settings.buy_in_value,
        total_chips=total_chips,
        expected_chips=total_buy_ins * settings.chips_per_buy_in,
    )


def chip_value(settings: GameSettings, totals: GameTotals) -> float:
    """
    Value of a single chip.

    Money mode divides the pot by the chips actually counted, so payouts add
    up to the pot even when the count is off. Points mode uses the fixed
    buy-in rate.
    """
    if settings.mode == GameMode.MONEY:
        if totals.total_chips > 0:
            return totals.total_money / totals.total_chips
        return 0.0
    return settings.buy_in_value / settings.chips_per_buy_in


def calculate_player_result(
    player: PlayerInGame,
    settings: GameSettings,
    totals: GameTotals
) -> GameResult:
    invested = player.buy_ins * settings.buy_in_value
    cash_out = player.current_chips * chip_value(settings, totals)

    return GameResult(
        player_id=player.player_id,
        buy_ins=player.buy_ins,
        chips=player.current_chips,
        invested=invested,
        cash_out=cash_out,
        net_amount=cash_out - invested,
    )


def calculate_all_results(session: GameSession) -> List[GameResult]:
    totals = calculate_totals(session.players, session.settings)
    return [
        calculate_player_result(player, session.settings, totals)
        for player in session.players
    ]


def get_chip_difference_warning(totals: GameTotals) -> Optional[str]:
    """Advisory message when counted chips stray from the expected supply."""
    if totals.expected_chips <= 0:
        return None

    diff = abs(totals.total_chips - totals.expected_chips)
    diff_percent = diff / totals.expected_chips * 100

    if diff_percent > CHIP_WARNING_THRESHOLD_PERCENT:
        direction = "more" if totals.total_chips > totals.expected_chips else "fewer"
        return (
            f"Warning: Total chips entered is {diff:,} {direction} than expected "
            f"({diff_percent:.1f}% difference)"
        )

    return None
