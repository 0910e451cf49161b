import pytest

from app.models.app_settings import AppSettings
from app.models.game import GameMode, GameSession, GameStatus
from app.repositories.player_repo import PlayerRepository
from app.repositories.session_repo import SessionRepository
from app.repositories.settings_repo import SettingsRepository
from app.services import game_service
from app.services.game_service import GameService
from app.utils.game_validation import GameStateError, GameValidationError, NotFoundError


def _game(mode=GameMode.MONEY):
    return game_service.new_game(mode, 50, 1000, "$", title="Test night")


def test_new_game_defaults():
    session = game_service.new_game(GameMode.POINTS, 20, 500, "€")

    assert session.status == "active"
    assert session.title  # default date title
    assert session.settings.mode == GameMode.POINTS
    assert session.settings.currency_symbol == "€"
    assert session.players == []
    assert session.results == []
    assert session.totals.total_money == 0


@pytest.mark.parametrize("buy_in,chips", [(0, 1000), (-5, 1000), (50, 0), (50, -1)])
def test_new_game_rejects_non_positive_settings(buy_in, chips):
    with pytest.raises(GameValidationError):
        game_service.new_game(GameMode.MONEY, buy_in, chips, "$")


def test_add_player_seats_one_buy_in():
    session = game_service.add_player(_game(), "p1")

    assert session.players[0].buy_ins == 1
    assert session.players[0].current_chips == 1000
    assert session.totals.total_money == 50
    assert session.totals.expected_chips == 1000


def test_add_player_twice_rejected():
    session = game_service.add_player(_game(), "p1")

    with pytest.raises(GameValidationError):
        game_service.add_player(session, "p1")


def test_rebuy_adds_buy_in_and_chips():
    session = game_service.add_player(_game(), "p1")
    session = game_service.set_chips(session, "p1", 200)

    session = game_service.rebuy(session, "p1")

    assert session.players[0].buy_ins == 2
    assert session.players[0].current_chips == 1200
    assert session.totals.total_money == 100


def test_commands_do_not_mutate_input():
    before = game_service.add_player(_game(), "p1")

    game_service.rebuy(before, "p1")

    assert before.players[0].buy_ins == 1
    assert before.totals.total_buy_ins == 1


def test_set_chips_rejects_negative():
    session = game_service.add_player(_game(), "p1")

    with pytest.raises(GameValidationError):
        game_service.set_chips(session, "p1", -1)


def test_remove_unknown_player():
    with pytest.raises(NotFoundError):
        game_service.remove_player(_game(), "ghost")


def test_end_game_freezes_results():
    session = _game()
    for player_id in ("p1", "p2"):
        session = game_service.add_player(session, player_id)
    session = game_service.set_chips(session, "p1", 1200)
    session = game_service.set_chips(session, "p2", 800)

    finished = game_service.end_game(session)

    assert finished.is_finished
    assert finished.finished_at is not None
    assert [r.net_amount for r in finished.results] == pytest.approx([10, -10])
    assert len(finished.settlements) == 1
    assert finished.settlements[0].amount == 10.00

    with pytest.raises(GameStateError):
        game_service.end_game(finished)
    with pytest.raises(GameStateError):
        game_service.rebuy(finished, "p1")


def test_finished_status_survives_round_trip():
    session = game_service.add_player(_game(), "p1")

    finished = game_service.end_game(session)
    reloaded = GameSession(**finished.to_record())

    assert finished.status == GameStatus.FINISHED
    assert reloaded.status == "finished"
    assert reloaded.is_finished


def test_end_game_without_players():
    with pytest.raises(GameValidationError):
        game_service.end_game(_game())


@pytest.mark.asyncio
async def test_full_game_persists_history(store, registry):
    alice, bob, _ = registry
    service = GameService(store)

    await service.start_game(GameMode.MONEY, 50, 1000)
    await service.add_player(alice.id)
    await service.add_player(bob.id)
    await service.set_chips(alice.id, 1200)
    await service.set_chips(bob.id, 800)
    finished = await service.end_game()

    history = await SessionRepository(store).list_sessions()
    assert [s.id for s in history] == [finished.id]
    assert history[0].settlements[0].from_player_id == bob.id
    # finished game stays in the slot until cleared
    assert (await service.get_active_game()).is_finished


@pytest.mark.asyncio
async def test_only_one_game_in_progress(store):
    service = GameService(store)
    await service.start_game(GameMode.MONEY, 50, 1000)

    with pytest.raises(GameStateError):
        await service.start_game(GameMode.POINTS, 10, 100)


@pytest.mark.asyncio
async def test_new_game_replaces_finished_one(store, registry):
    service = GameService(store)
    await service.start_game(GameMode.MONEY, 50, 1000)
    await service.add_player(registry[0].id)
    await service.end_game()

    second = await service.start_game(GameMode.POINTS, 10, 100)

    assert (await service.get_active_game()).id == second.id


@pytest.mark.asyncio
async def test_commands_need_active_game(store):
    with pytest.raises(GameStateError):
        await GameService(store).rebuy("p1")


@pytest.mark.asyncio
async def test_archived_player_cannot_join(store, registry):
    service = GameService(store)
    await PlayerRepository(store).update_player(registry[2].id, is_archived=True)
    await service.start_game(GameMode.MONEY, 50, 1000)

    with pytest.raises(GameValidationError):
        await service.add_player(registry[2].id)


@pytest.mark.asyncio
async def test_add_player_touches_last_used(store, registry):
    service = GameService(store)
    before = registry[0].last_used_at
    await service.start_game(GameMode.MONEY, 50, 1000)

    await service.add_player(registry[0].id)

    assert (await PlayerRepository(store).get_player(registry[0].id)).last_used_at >= before


@pytest.mark.asyncio
async def test_toggle_settlement_updates_history_and_slot(store, registry):
    alice, bob, _ = registry
    service = GameService(store)
    await service.start_game(GameMode.MONEY, 50, 1000)
    await service.add_player(alice.id)
    await service.add_player(bob.id)
    await service.set_chips(alice.id, 2000)
    await service.set_chips(bob.id, 0)
    finished = await service.end_game()

    toggled = await service.toggle_settlement(finished.id, finished.settlements[0].id)

    assert toggled.settlements[0].settled is True
    assert (await service.get_session(finished.id)).settlements[0].settled is True
    assert (await service.get_active_game()).settlements[0].settled is True
    # nothing else was recomputed
    assert toggled.results == finished.results


@pytest.mark.asyncio
async def test_delete_and_summary(store, registry):
    alice, bob, _ = registry
    await SettingsRepository(store).save_app_settings(AppSettings(currency_symbol="$"))
    service = GameService(store)
    await service.start_game(GameMode.MONEY, 50, 1000, title="Friday")
    await service.add_player(alice.id)
    await service.add_player(bob.id)
    await service.set_chips(alice.id, 1500)
    await service.set_chips(bob.id, 500)
    finished = await service.end_game()

    message, link = await service.session_summary(finished.id)
    assert "Alice: +$25" in message
    assert "Bob -> Alice: $25" in message
    assert link.startswith("https://wa.me/?text=")

    await service.delete_session(finished.id)
    with pytest.raises(NotFoundError):
        await service.get_session(finished.id)
