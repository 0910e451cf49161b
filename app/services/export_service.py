"""Plain-text session summary for sharing in chat apps."""

from typing import Dict
from urllib.parse import quote

from app.models.game import GameSession
from app.models.player import UNKNOWN_PLAYER_NAME

SHARE_URL = "https://wa.me/?text="


def format_currency(amount: float, symbol: str = "₪") -> str:
    """Up to two decimals with thousands separators, sign before the symbol."""
    formatted = f"{abs(amount):,.2f}".rstrip("0").rstrip(".")
    if amount < 0 and formatted != "0":
        return f"-{symbol}{formatted}"
    return f"{symbol}{formatted}"


def format_chips(chips: int) -> str:
    return f"{chips:,}"


def generate_summary_message(session: GameSession, names: Dict[str, str]) -> str:
    settings = session.settings
    symbol = settings.currency_symbol

    def name(player_id: str) -> str:
        return names.get(player_id, UNKNOWN_PLAYER_NAME)

    played_at = session.finished_at or session.created_at
    lines = [
        "*Poker Night Summary*",
        "",
        f"Date: {played_at:%Y-%m-%d}",
        f"Buy-in: {format_currency(settings.buy_in_value, symbol)} "
        f"({format_chips(settings.chips_per_buy_in)} chips)",
        f"Total Pot: {format_currency(session.totals.total_money, symbol)}",
        "",
        "*Results:*",
    ]

    for result in sorted(session.results, key=lambda r: r.net_amount, reverse=True):
        marker = "+" if result.net_amount > 0 else "-" if result.net_amount < 0 else "="
        sign = "+" if result.net_amount > 0 else ""
        lines.append(
            f"[{marker}] {name(result.player_id)}: {sign}{format_currency(result.net_amount, symbol)}"
        )

    if session.settlements:
        lines.extend(["", "*Settlements:*"])
        for s in session.settlements:
            status = "paid" if s.settled else "pending"
            lines.append(
                f"[{status}] {name(s.from_player_id)} -> {name(s.to_player_id)}: "
                f"{format_currency(s.amount, symbol)}"
            )

    lines.extend(["", "_Generated by PokerSplit_"])
    return "\n".join(lines)


def get_share_link(message: str) -> str:
    return SHARE_URL + quote(message, safe="")
