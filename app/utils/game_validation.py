"""Game validation utilities and domain errors."""
from typing import Optional


class GameError(Exception):
    """Base exception for game domain errors."""
    status_code: int = 400


class GameValidationError(GameError):
    """Invalid numeric input or malformed request data."""
    status_code = 400


class GameStateError(GameError):
    """Operation not allowed in the current session state."""
    status_code = 409


class NotFoundError(GameError):
    """Referenced player, session or settlement does not exist."""
    status_code = 404


def validate_game_settings(buy_in_value: float, chips_per_buy_in: int) -> None:
    """
    Validate settings before a session is created.

    Rules:
    - buy_in_value must be positive
    - chips_per_buy_in must be a positive integer
    """
    if buy_in_value is None or buy_in_value <= 0:
        raise GameValidationError(
            f"Buy-in value must be positive: {buy_in_value}"
        )

    if chips_per_buy_in is None or chips_per_buy_in <= 0:
        raise GameValidationError(
            f"Chips per buy-in must be positive: {chips_per_buy_in}"
        )


def validate_chip_count(chips: int) -> None:
    """Chip counts are whole, non-negative numbers."""
    if chips is None or chips < 0:
        raise GameValidationError(f"Chip count cannot be negative: {chips}")


def validate_display_name(name: Optional[str]) -> str:
    """Return the trimmed name or raise if nothing is left."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise GameValidationError("Player name cannot be empty")
    if len(trimmed) > 100:
        raise GameValidationError("Player name is too long (max 100 characters)")
    return trimmed
