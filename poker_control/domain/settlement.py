"""Domain logic for cashout settlement and the final ranking."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .game import GameState
from .ledger import ZERO, compute_player_summary

SETTLEMENT_FEE_RATE = Decimal("0.10")
POINTS_BY_POSITION = (20, 15, 10)
DEFAULT_POINTS = 5


@dataclass(frozen=True)
class RankingEntry:
    position: int
    points: int
    player_id: str
    name: str
    invested_chips: Decimal
    out: Decimal
    performance_ratio: Decimal
    ranking_fee: Decimal
    net: Decimal
    has_cashout: bool


@dataclass(frozen=True)
class SettlementTotals:
    total_cashout_declared: Decimal
    house_cut: Decimal
    net_payout_pool: Decimal


def points_for_position(index: int) -> int:
    """Award for a 0-indexed ranking position."""
    if 0 <= index < len(POINTS_BY_POSITION):
        return POINTS_BY_POSITION[index]
    return DEFAULT_POINTS


def compute_ranking(state: GameState) -> list[RankingEntry]:
    rows = []
    for player in state.active_players():
        invested = compute_player_summary(state, player).invested_chips
        out = player.cashout_amount if player.cashout_amount is not None else ZERO
        ratio = out / invested if invested > 0 else ZERO
        fee = out * SETTLEMENT_FEE_RATE
        rows.append((player, invested, out, ratio, fee))

    # sorted() is stable: equal ratio and equal cashout keep table order.
    rows.sort(key=lambda row: (row[3], row[2]), reverse=True)

    return [
        RankingEntry(
            position=idx + 1,
            points=points_for_position(idx),
            player_id=player.id,
            name=player.name,
            invested_chips=invested,
            out=out,
            performance_ratio=ratio,
            ranking_fee=fee,
            net=out - fee,
            has_cashout=player.has_cashout,
        )
        for idx, (player, invested, out, ratio, fee) in enumerate(rows)
    ]


def compute_settlement_totals(state: GameState) -> SettlementTotals:
    total = sum(
        (player.cashout_amount for player in state.active_players() if player.cashout_amount is not None),
        ZERO,
    )
    return SettlementTotals(
        total_cashout_declared=total,
        house_cut=total * SETTLEMENT_FEE_RATE,
        net_payout_pool=total * (1 - SETTLEMENT_FEE_RATE),
    )
