"""Game lifecycle commands.

Every command takes the current ``GameState`` and returns a new one without
touching infrastructure. Commands referencing an unknown player or rebuy id
return the state unchanged, so replaying a command is always safe.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable
from uuid import uuid4

from .game import (
    HOUSE_FEE_FIXED,
    INITIAL_STATE,
    MIN_REBUY,
    GameConfig,
    GamePhase,
    GameState,
    InvalidAmount,
    InvalidTransition,
    PaymentStatus,
    Player,
    Rebuy,
    to_decimal,
    to_money,
    utc_now,
)

IdFactory = Callable[[], str]
Clock = Callable[[], datetime]

EDITABLE_PHASES = frozenset({GamePhase.ACTIVE})
PAYMENT_PHASES = frozenset({GamePhase.ACTIVE, GamePhase.CASHOUT_ENTRY, GamePhase.FINISHED})


def new_id() -> str:
    return str(uuid4())


def start_game(state: GameState, buy_in_amount) -> GameState:
    _require_phase(state, {GamePhase.SETUP}, "start game")
    amount = to_money(buy_in_amount)
    if min(amount, to_decimal(buy_in_amount)) <= HOUSE_FEE_FIXED:
        raise InvalidAmount(f"buy-in must be greater than the house fee of {HOUSE_FEE_FIXED}")
    return replace(
        state,
        is_started=True,
        finished=False,
        cashout_open=False,
        config=GameConfig(buy_in_amount=amount),
    )


def add_player(state: GameState, name: str, id_factory: IdFactory = new_id) -> GameState:
    _require_phase(state, EDITABLE_PHASES, "add player")
    clean = name.strip() if name else ""
    if not clean:
        return state
    player = Player(id=id_factory(), name=clean)
    return replace(state, players=state.players + (player,))


def remove_player(state: GameState, player_id: str) -> GameState:
    _require_phase(state, EDITABLE_PHASES, "remove player")
    if state.get_player(player_id) is None:
        return state
    if any(player.has_cashout for player in state.active_players()):
        raise InvalidTransition("cannot remove players once cashouts have been declared")
    return replace(state, players=tuple(p for p in state.players if p.id != player_id))


def set_buy_in_status(state: GameState, player_id: str, status: PaymentStatus) -> GameState:
    _require_phase(state, PAYMENT_PHASES, "change buy-in status")
    return _update_player(state, player_id, lambda p: replace(p, buy_in_status=PaymentStatus(status)))


def add_rebuy(
    state: GameState,
    player_id: str,
    amount,
    id_factory: IdFactory = new_id,
    clock: Clock = utc_now,
) -> GameState:
    _require_phase(state, EDITABLE_PHASES, "add rebuy")
    if to_decimal(amount) < MIN_REBUY:
        raise InvalidAmount(f"rebuy amount must be at least {MIN_REBUY}")
    if state.get_player(player_id) is None:
        return state
    rebuy = Rebuy(id=id_factory(), amount=to_money(amount), status=PaymentStatus.PENDING, created_at=clock())
    return _update_player(state, player_id, lambda p: replace(p, rebuys=p.rebuys + (rebuy,)))


def remove_rebuy(state: GameState, player_id: str, rebuy_id: str) -> GameState:
    _require_phase(state, EDITABLE_PHASES, "remove rebuy")
    return _update_player(
        state,
        player_id,
        lambda p: replace(p, rebuys=tuple(r for r in p.rebuys if r.id != rebuy_id)),
    )


def toggle_rebuy_status(state: GameState, player_id: str, rebuy_id: str) -> GameState:
    _require_phase(state, PAYMENT_PHASES, "toggle rebuy status")
    return _update_player(
        state,
        player_id,
        lambda p: replace(
            p,
            rebuys=tuple(replace(r, status=r.status.toggled()) if r.id == rebuy_id else r for r in p.rebuys),
        ),
    )


def submit_cashout(state: GameState, player_id: str, amount) -> GameState:
    _require_phase(state, {GamePhase.CASHOUT_ENTRY}, "submit cashout")
    if to_decimal(amount) < 0:
        raise InvalidAmount("cashout amount cannot be negative")
    value = to_money(amount)
    return _update_player(state, player_id, lambda p: replace(p, cashout_amount=value))


def end_game(state: GameState) -> GameState:
    _require_phase(state, {GamePhase.ACTIVE}, "end game")
    return replace(state, cashout_open=True)


def resume_game(state: GameState) -> GameState:
    _require_phase(state, {GamePhase.CASHOUT_ENTRY}, "resume game")
    return replace(state, cashout_open=False)


def finish_game(state: GameState) -> GameState:
    _require_phase(state, {GamePhase.CASHOUT_ENTRY}, "finish game")
    return replace(state, finished=True, cashout_open=False)


def reset_game(state: GameState) -> GameState:
    return INITIAL_STATE


def _require_phase(state: GameState, allowed: Iterable[GamePhase], action: str) -> None:
    phase = state.phase
    if phase not in allowed:
        raise InvalidTransition(f"cannot {action} while game is {phase.value}")


def _update_player(state: GameState, player_id: str, update: Callable[[Player], Player]) -> GameState:
    if state.get_player(player_id) is None:
        return state
    return replace(
        state,
        players=tuple(update(p) if p.id == player_id else p for p in state.players),
    )
