"""Cash and chip totals derived from the current game state."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .game import HOUSE_FEE_FIXED, GameState, PaymentStatus, Player

ZERO = Decimal("0")


@dataclass(frozen=True)
class LedgerTotals:
    player_count: int
    total_buy_ins: Decimal
    total_fees: Decimal
    total_rebuys: Decimal
    total_chips: Decimal
    total_paid: Decimal
    total_pending: Decimal


@dataclass(frozen=True)
class PlayerSummary:
    player_id: str
    name: str
    invested_chips: Decimal
    paid_cash: Decimal
    total_cost_cash: Decimal
    pending_cash: Decimal
    rebuy_count: int


@dataclass(frozen=True)
class Debtor:
    id: str
    name: str
    pending: Decimal


def compute_player_summary(state: GameState, player: Player) -> PlayerSummary:
    buy_in = state.config.buy_in_amount
    rebuys_total = sum((rebuy.amount for rebuy in player.rebuys), ZERO)
    paid_rebuys = sum(
        (rebuy.amount for rebuy in player.rebuys if rebuy.status is PaymentStatus.PAID),
        ZERO,
    )

    paid_cash = (buy_in if player.buy_in_status is PaymentStatus.PAID else ZERO) + paid_rebuys
    total_cost_cash = buy_in + rebuys_total
    return PlayerSummary(
        player_id=player.id,
        name=player.name,
        invested_chips=(buy_in - HOUSE_FEE_FIXED) + rebuys_total,
        paid_cash=paid_cash,
        total_cost_cash=total_cost_cash,
        pending_cash=total_cost_cash - paid_cash,
        rebuy_count=len(player.rebuys),
    )


def compute_player_summaries(state: GameState) -> list[PlayerSummary]:
    return [compute_player_summary(state, player) for player in state.active_players()]


def compute_totals(state: GameState) -> LedgerTotals:
    players = state.active_players()
    buy_in = state.config.buy_in_amount
    count = len(players)

    total_rebuys = ZERO
    total_paid = ZERO
    total_pending = ZERO
    for player in players:
        if player.buy_in_status is PaymentStatus.PAID:
            total_paid += buy_in
        else:
            total_pending += buy_in

        for rebuy in player.rebuys:
            total_rebuys += rebuy.amount
            if rebuy.status is PaymentStatus.PAID:
                total_paid += rebuy.amount
            else:
                total_pending += rebuy.amount

    return LedgerTotals(
        player_count=count,
        total_buy_ins=buy_in * count,
        total_fees=HOUSE_FEE_FIXED * count,
        total_rebuys=total_rebuys,
        total_chips=(buy_in - HOUSE_FEE_FIXED) * count + total_rebuys,
        total_paid=total_paid,
        total_pending=total_pending,
    )


def compute_debtors(state: GameState) -> list[Debtor]:
    """Players that still owe cash, in table order (not sorted by amount)."""
    return [
        Debtor(id=summary.player_id, name=summary.name, pending=summary.pending_cash)
        for summary in compute_player_summaries(state)
        if summary.pending_cash > 0
    ]
