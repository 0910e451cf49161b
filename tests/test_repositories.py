"""Tests for the store backends and repositories."""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from app.db.mongo import MongoStore
from app.db.store import SESSIONS
from app.models.game import GameSession, GameSettings
from app.repositories.migration_repo import MigrationRepository
from app.repositories.player_repo import PlayerRepository
from app.repositories.session_repo import SessionRepository


def _session(title: str, created_at: datetime) -> GameSession:
    return GameSession(
        title=title,
        settings=GameSettings(buy_in_value=50, chips_per_buy_in=1000),
        created_at=created_at,
    )


@pytest.mark.asyncio
class TestMemoryStore:
    """KeyValueStore contract on the in-memory backend."""

    async def test_put_get_delete(self, store):
        await store.put("things", {"id": "a", "value": 1})

        assert await store.get("things", "a") == {"id": "a", "value": 1}

        await store.delete("things", "a")
        assert await store.get("things", "a") is None

    async def test_records_are_copied(self, store):
        record = {"id": "a", "nested": {"n": 1}}
        await store.put("things", record)
        record["nested"]["n"] = 2

        fetched = await store.get("things", "a")
        fetched["nested"]["n"] = 3

        assert (await store.get("things", "a"))["nested"]["n"] == 1

    async def test_explicit_key(self, store):
        await store.put("slot", {"value": 1}, key="current")

        assert await store.get("slot", "current") == {"value": 1}

    async def test_put_without_id_or_key_fails(self, store):
        with pytest.raises(ValueError):
            await store.put("things", {"value": 1})

    async def test_sorted_by_date_handles_legacy_strings(self, store):
        await store.put("s", {"id": "new", "created_at": datetime(2024, 3, 1, tzinfo=timezone.utc)})
        await store.put("s", {"id": "old", "created_at": "2023-01-01T10:00:00.000Z"})
        await store.put("s", {"id": "mid", "created_at": "2024-01-01T00:00:00Z"})

        records = await store.get_all_sorted_by_date("s")

        assert [r["id"] for r in records] == ["old", "mid", "new"]

    async def test_clear(self, store):
        await store.put("things", {"id": "a"})
        await store.clear("things")

        assert await store.get_all("things") == []


@pytest.mark.asyncio
class TestRepositories:

    async def test_player_round_trip(self, store):
        repo = PlayerRepository(store)
        player = await repo.create_player("Alice")

        assert await repo.get_player(player.id) == player
        assert await repo.get_player("missing") is None

    async def test_players_sorted_by_last_used(self, store):
        repo = PlayerRepository(store)
        a = await repo.create_player("A")
        b = await repo.create_player("B")
        await repo.update_player(a.id, last_used_at=datetime(2030, 1, 1, tzinfo=timezone.utc))

        assert [p.id for p in await repo.list_players()] == [a.id, b.id]

    async def test_sessions_most_recent_first(self, store):
        repo = SessionRepository(store)
        older = _session("older", datetime(2024, 1, 1, tzinfo=timezone.utc))
        newer = _session("newer", datetime(2024, 2, 1, tzinfo=timezone.utc))
        await repo.save_session(newer)
        await repo.save_session(older)

        assert [s.title for s in await repo.list_sessions()] == ["newer", "older"]
        assert await repo.delete_session(older.id) is True
        assert await repo.delete_session(older.id) is False

    async def test_active_slot(self, store):
        repo = SessionRepository(store)
        session = _session("live", datetime.now(timezone.utc))

        await repo.save_active_game(session)
        assert (await repo.get_active_game()).id == session.id

        await repo.clear_active_game()
        assert await repo.get_active_game() is None

    async def test_migration_flags(self, store):
        repo = MigrationRepository(store)

        assert await repo.is_done("v2-player-ids") is False
        await repo.mark_done("v2-player-ids")
        assert await repo.is_done("v2-player-ids") is True


@pytest.mark.asyncio
async def test_mongo_store_put_upserts_by_id():
    collection = MagicMock()
    collection.replace_one = AsyncMock()
    db = MagicMock()
    db.__getitem__.return_value = collection

    await MongoStore(db).put(SESSIONS, {"id": "s1", "title": "x"})

    db.__getitem__.assert_called_with(SESSIONS)
    collection.replace_one.assert_called_once_with(
        {"_id": "s1"}, {"_id": "s1", "id": "s1", "title": "x"}, upsert=True
    )


@pytest.mark.asyncio
async def test_mongo_store_get_strips_internal_id():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value={"_id": "p1", "id": "p1", "display_name": "Al"})
    db = MagicMock()
    db.__getitem__.return_value = collection

    doc = await MongoStore(db).get("players", "p1")

    assert doc == {"id": "p1", "display_name": "Al"}
    collection.find_one.assert_called_once_with({"_id": "p1"})


@pytest.mark.asyncio
async def test_mongo_store_sorted_by_date():
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[
        {"_id": "b", "id": "b", "created_at": datetime(2024, 2, 1, tzinfo=timezone.utc)},
        {"_id": "a", "id": "a", "created_at": "2024-01-01T00:00:00Z"},
    ])
    collection = MagicMock()
    collection.find.return_value = cursor
    db = MagicMock()
    db.__getitem__.return_value = collection

    docs = await MongoStore(db).get_all_sorted_by_date(SESSIONS)

    assert [d["id"] for d in docs] == ["a", "b"]
    cursor.sort.assert_called_once_with("created_at", 1)
