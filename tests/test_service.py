import json
import logging
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from poker_control.domain import INITIAL_STATE, GamePhase, InvalidAmount, InvalidTransition, PaymentStatus
from poker_control.service import GameService
from poker_control.storage.models import StoredDocument


def test_every_mutation_is_persisted(service: GameService, repo) -> None:
    service.start_game(Decimal("50"))
    state = service.add_player("Ana")
    player_id = state.players[0].id
    service.set_buy_in_status(player_id, PaymentStatus.PAID)

    assert repo.load() == service.state

    fresh = GameService(repo)
    assert fresh.load() == service.state
    assert fresh.state.get_player(player_id).buy_in_status is PaymentStatus.PAID


def test_rejected_command_leaves_state_and_storage_untouched(service: GameService, repo) -> None:
    service.start_game(50)
    player_id = service.add_player("Ana").players[0].id
    before = service.state

    with pytest.raises(InvalidAmount):
        service.add_rebuy(player_id, "0.5")
    with pytest.raises(InvalidTransition):
        service.submit_cashout(player_id, 10)

    assert service.state is before
    assert repo.load() == before


def test_full_game_flow(service: GameService) -> None:
    service.start_game(50)
    ana = service.add_player("Ana").players[0].id
    bia = service.add_player("Bia").players[1].id
    service.add_rebuy(bia, 30)
    service.end_game()
    service.submit_cashout(ana, 20)
    service.submit_cashout(bia, 90)
    state = service.finish_game()

    assert state.phase is GamePhase.FINISHED


def test_load_starts_fresh_when_nothing_stored(service: GameService) -> None:
    assert service.load() == INITIAL_STATE


def test_load_recovers_from_corrupt_document(service: GameService, repo, session_factory, caplog) -> None:
    with session_factory() as db:
        db.add(StoredDocument(key=repo.storage_key, payload='{"isStarted": "maybe"'))
        db.commit()

    with caplog.at_level(logging.ERROR):
        state = service.load()

    assert state == INITIAL_STATE
    assert "unreadable game state" in caplog.text


def test_load_recovers_from_out_of_range_timestamp(service: GameService, repo, session_factory) -> None:
    rebuy = {"id": "r1", "amount": 30, "status": "PENDING", "timestamp": 10**20}
    payload = json.dumps(
        {
            "isStarted": True,
            "config": {"buyInAmount": 50},
            "players": [{"id": "p1", "name": "Ana", "buyInStatus": "PAID", "rebuys": [rebuy]}],
        }
    )
    with session_factory() as db:
        db.add(StoredDocument(key=repo.storage_key, payload=payload))
        db.commit()

    assert service.load() == INITIAL_STATE


def test_reset_clears_storage(service: GameService, repo) -> None:
    service.start_game(50)
    service.add_player("Ana")

    assert service.reset_game() == INITIAL_STATE
    assert repo.load() is None


def test_failed_save_keeps_in_memory_state(service: GameService, repo, monkeypatch, caplog) -> None:
    def broken_save(state):
        raise OperationalError("UPDATE", {}, Exception("disk full"))

    monkeypatch.setattr(repo, "save", broken_save)

    with caplog.at_level(logging.ERROR):
        state = service.start_game(50)

    assert state.phase is GamePhase.ACTIVE
    assert service.state is state
    assert "Could not save game state" in caplog.text
