from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field

from poker_control.domain import (
    AuditStatus,
    ChipAudit,
    Debtor,
    GamePhase,
    GameState,
    LedgerTotals,
    PaymentStatus,
    PlayerSummary,
    RankingEntry,
    SettlementTotals,
)


class StartGameRequest(BaseModel):
    buy_in_amount: Decimal = Field(..., description="Valor do buy-in inicial", examples=[50])


class AddPlayerRequest(BaseModel):
    name: str = Field(..., examples=["Ana"])


class BuyInStatusRequest(BaseModel):
    status: PaymentStatus


class AmountRequest(BaseModel):
    amount: Decimal = Field(..., examples=[50])


class RebuyResponse(BaseModel):
    id: str
    amount: Decimal
    status: PaymentStatus
    created_at: datetime


class PlayerResponse(BaseModel):
    id: str
    name: str
    buy_in_status: PaymentStatus
    rebuys: list[RebuyResponse]
    cashout_amount: Decimal | None = None


class GameStateResponse(BaseModel):
    phase: GamePhase
    is_started: bool
    finished: bool
    buy_in_amount: Decimal
    players: list[PlayerResponse]

    @classmethod
    def from_state(cls, state: GameState) -> "GameStateResponse":
        return cls(
            phase=state.phase,
            is_started=state.is_started,
            finished=state.finished,
            buy_in_amount=state.config.buy_in_amount,
            players=[
                PlayerResponse(
                    id=player.id,
                    name=player.name,
                    buy_in_status=player.buy_in_status,
                    rebuys=[
                        RebuyResponse(
                            id=rebuy.id,
                            amount=rebuy.amount,
                            status=rebuy.status,
                            created_at=rebuy.created_at,
                        )
                        for rebuy in player.rebuys
                    ],
                    cashout_amount=player.cashout_amount,
                )
                for player in state.active_players()
            ],
        )


class TotalsResponse(BaseModel):
    player_count: int
    total_buy_ins: Decimal
    total_fees: Decimal
    total_rebuys: Decimal
    total_chips: Decimal
    total_paid: Decimal
    total_pending: Decimal

    @classmethod
    def from_totals(cls, totals: LedgerTotals) -> "TotalsResponse":
        return cls(**vars(totals))


class PlayerSummaryResponse(BaseModel):
    player_id: str
    name: str
    invested_chips: Decimal
    paid_cash: Decimal
    total_cost_cash: Decimal
    pending_cash: Decimal
    rebuy_count: int

    @classmethod
    def from_summary(cls, summary: PlayerSummary) -> "PlayerSummaryResponse":
        return cls(**vars(summary))


class DebtorResponse(BaseModel):
    id: str
    name: str
    pending: Decimal

    @classmethod
    def from_debtor(cls, debtor: Debtor) -> "DebtorResponse":
        return cls(**vars(debtor))


class RankingEntryResponse(BaseModel):
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


class RankingResponse(BaseModel):
    entries: list[RankingEntryResponse]
    total_cashout_declared: Decimal
    house_cut: Decimal
    net_payout_pool: Decimal

    @classmethod
    def build(cls, entries: list[RankingEntry], totals: SettlementTotals) -> "RankingResponse":
        return cls(
            entries=[RankingEntryResponse(**vars(entry)) for entry in entries],
            **vars(totals),
        )


class ChipAuditResponse(BaseModel):
    total_chips: Decimal
    total_cashout_declared: Decimal
    chips_difference: Decimal
    status: AuditStatus
    is_balanced: bool
    pending_cashouts: int

    @classmethod
    def from_audit(cls, audit: ChipAudit) -> "ChipAuditResponse":
        return cls(**vars(audit), is_balanced=audit.is_balanced)
