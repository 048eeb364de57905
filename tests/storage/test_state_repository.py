import json
from decimal import Decimal

import pytest

from poker_control.domain import GameState, PaymentStatus, Player, lifecycle
from poker_control.storage.document import PersistenceCorrupt, decode_state, encode_state
from poker_control.storage.models import StoredDocument

from tests.factories import FIXED_TIME, id_sequence, started_game


def _rich_state() -> GameState:
    state = started_game(buy_in="60", names=("alice", "bob", "carol"))
    rebuy_ids = id_sequence("r")
    state = lifecycle.add_rebuy(state, "p1", "25.75", id_factory=rebuy_ids, clock=lambda: FIXED_TIME)
    state = lifecycle.add_rebuy(state, "p1", 10, id_factory=rebuy_ids, clock=lambda: FIXED_TIME)
    state = lifecycle.toggle_rebuy_status(state, "p1", "r2")
    state = lifecycle.set_buy_in_status(state, "p3", PaymentStatus.PAID)
    state = lifecycle.end_game(state)
    return lifecycle.submit_cashout(state, "p2", "99.99")


def test_round_trip_preserves_state() -> None:
    state = _rich_state()

    assert decode_state(encode_state(state)) == state


def test_round_trip_drops_ghost_players() -> None:
    state = _rich_state()
    with_ghost = GameState(
        is_started=state.is_started,
        cashout_open=state.cashout_open,
        config=state.config,
        players=state.players + (Player(id="ghost", name=" "),),
    )

    assert decode_state(encode_state(with_ghost)) == state


def test_document_uses_snapshot_keys() -> None:
    document = json.loads(encode_state(_rich_state()))

    assert document["isStarted"] is True
    assert document["finished"] is False
    assert document["cashoutOpen"] is True
    assert document["config"] == {"buyInAmount": 60.0}

    alice, bob, _ = document["players"]
    assert alice["buyInStatus"] == "PENDING"
    assert "cashoutAmount" not in alice
    assert alice["rebuys"][0] == {
        "id": "r1",
        "amount": 25.75,
        "status": "PENDING",
        "timestamp": 1741987800000,
    }
    assert bob["cashoutAmount"] == 99.99


def test_legacy_snapshot_loads_and_filters_blank_names() -> None:
    payload = json.dumps(
        {
            "isStarted": True,
            "finished": True,
            "config": {"buyInAmount": 50},
            "players": [
                {"id": "a", "name": "Ana", "buyInStatus": "PAID", "rebuys": [], "cashoutAmount": 80},
                {"id": "b", "name": "   ", "buyInStatus": "PENDING", "rebuys": []},
                {"id": "c", "name": "", "buyInStatus": "PENDING", "rebuys": []},
                {
                    "id": "d",
                    "name": "Bia",
                    "buyInStatus": "PENDING",
                    "rebuys": [{"id": "x", "amount": 30, "status": "PAID", "timestamp": 1700000000123}],
                },
            ],
        }
    )

    state = decode_state(payload)

    assert state.finished and not state.cashout_open
    assert [p.name for p in state.players] == ["Ana", "Bia"]
    assert state.players[0].cashout_amount == Decimal("80")
    assert state.players[1].rebuys[0].amount == Decimal("30")
    assert state.players[1].rebuys[0].created_at.microsecond == 123000


@pytest.mark.parametrize(
    "payload",
    [
        "not json at all",
        "{}",
        '{"isStarted": true, "config": {"buyInAmount": "lots"}, "players": []}',
        '{"isStarted": true, "config": {"buyInAmount": 50}, "players": [{"id": "a", "name": "A", "buyInStatus": "MAYBE"}]}',
        '{"isStarted": true, "config": {"buyInAmount": 50}, "players": [{"id": "a", "name": "A"}, {"id": "a", "name": "B"}]}',
        '{"isStarted": false, "finished": true, "config": {"buyInAmount": 50}, "players": []}',
        '{"isStarted": true, "config": {"buyInAmount": 50}, "players": [{"id": "a", "name": "A", "rebuys": [{"id": "r", "amount": 5, "timestamp": 100000000000000000000}]}]}',
        '{"isStarted": true, "config": {"buyInAmount": 50}, "players": [{"id": "a", "name": "A", "rebuys": [{"id": "r", "amount": 5, "timestamp": -100000000000000000000}]}]}',
        '{"isStarted": true, "config": {"buyInAmount": 5e15}, "players": []}',
    ],
)
def test_unreadable_documents_raise_persistence_corrupt(payload: str) -> None:
    with pytest.raises(PersistenceCorrupt):
        decode_state(payload)


def test_repository_save_load_and_clear(repo, session_factory) -> None:
    assert repo.load() is None

    state = _rich_state()
    repo.save(state)
    repo.save(lifecycle.submit_cashout(state, "p1", 10))

    loaded = repo.load()
    assert loaded.get_player("p1").cashout_amount == Decimal("10")

    with session_factory() as db:
        assert db.query(StoredDocument).count() == 1

    repo.clear()
    assert repo.load() is None


def test_repository_surfaces_corrupt_payload(repo, session_factory) -> None:
    with session_factory() as db:
        db.add(StoredDocument(key=repo.storage_key, payload="{broken"))
        db.commit()

    with pytest.raises(PersistenceCorrupt):
        repo.load()


def test_largest_amounts_survive_round_trip() -> None:
    state = lifecycle.end_game(started_game(buy_in="999999999999.99", names=("alice",)))
    state = lifecycle.add_rebuy(lifecycle.resume_game(state), "p1", "123456789012.34", id_factory=lambda: "r1")
    state = lifecycle.submit_cashout(lifecycle.end_game(state), "p1", "987654321098.76")

    assert decode_state(encode_state(state)) == state


def test_timestamps_at_calendar_limits_decode() -> None:
    player = {"id": "a", "name": "A", "rebuys": [{"id": "r", "amount": 5, "timestamp": 253402300799999}]}
    payload = json.dumps({"isStarted": True, "config": {"buyInAmount": 50}, "players": [player]})

    rebuy = decode_state(payload).players[0].rebuys[0]

    assert rebuy.created_at.year == 9999
