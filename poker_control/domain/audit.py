from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .game import GameState
from .ledger import compute_totals
from .settlement import compute_settlement_totals


class AuditStatus(str, Enum):
    BALANCED = "BALANCED"
    CHIPS_MISSING = "CHIPS_MISSING"
    CHIPS_EXCESS = "CHIPS_EXCESS"


@dataclass(frozen=True)
class ChipAudit:
    total_chips: Decimal
    total_cashout_declared: Decimal
    chips_difference: Decimal
    status: AuditStatus
    pending_cashouts: int

    @property
    def is_balanced(self) -> bool:
        return self.status is AuditStatus.BALANCED


def compute_chip_audit(state: GameState) -> ChipAudit:
    """Compare chips issued against cashouts declared.

    Amounts are exact decimals, so any non-zero difference is a real
    data-entry mismatch. The result is informational and never blocks
    finishing the game.
    """
    total_chips = compute_totals(state).total_chips
    declared = compute_settlement_totals(state).total_cashout_declared
    difference = total_chips - declared

    if difference > 0:
        status = AuditStatus.CHIPS_MISSING
    elif difference < 0:
        status = AuditStatus.CHIPS_EXCESS
    else:
        status = AuditStatus.BALANCED

    return ChipAudit(
        total_chips=total_chips,
        total_cashout_declared=declared,
        chips_difference=difference,
        status=status,
        pending_cashouts=sum(1 for player in state.active_players() if not player.has_cashout),
    )
