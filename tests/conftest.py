import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core import config
from app.db.memory import MemoryStore
from app.models.game import GameMode, GameResult, GameSettings
from app.repositories.player_repo import PlayerRepository


@pytest_asyncio.fixture
async def store() -> MemoryStore:
    """Fresh in-memory store per test."""
    return MemoryStore()


@pytest.fixture
def money_settings() -> GameSettings:
    return GameSettings(mode=GameMode.MONEY, buy_in_value=50, chips_per_buy_in=1000)


@pytest.fixture
def points_settings() -> GameSettings:
    return GameSettings(mode=GameMode.POINTS, buy_in_value=50, chips_per_buy_in=1000)


@pytest.fixture
def make_result():
    """Build a GameResult with a 50-per-buy-in investment and the given net."""
    def _make(player_id: str, net_amount: float, buy_ins: int = 1) -> GameResult:
        invested = buy_ins * 50.0
        return GameResult(
            player_id=player_id,
            buy_ins=buy_ins,
            chips=0,
            invested=invested,
            cash_out=invested + net_amount,
            net_amount=net_amount,
        )
    return _make


@pytest_asyncio.fixture
async def registry(store):
    """Three registered players: Alice, Bob, Charlie."""
    repo = PlayerRepository(store)
    return [
        await repo.create_player("Alice"),
        await repo.create_player("Bob"),
        await repo.create_player("Charlie"),
    ]


@pytest.fixture
def test_client(monkeypatch):
    """FastAPI test client backed by a fresh in-memory store."""
    monkeypatch.setattr(config.settings, "STORE_BACKEND", "memory")

    # context manager runs the lifespan: store + migrations
    from app.main import app
    with TestClient(app) as client:
        yield client
