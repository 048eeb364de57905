from .audit import AuditStatus, ChipAudit, compute_chip_audit
from .game import (
    DEFAULT_BUY_IN,
    HOUSE_FEE_FIXED,
    INITIAL_STATE,
    MAX_AMOUNT,
    MIN_REBUY,
    DomainValidationError,
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
)
from .ledger import (
    Debtor,
    LedgerTotals,
    PlayerSummary,
    compute_debtors,
    compute_player_summaries,
    compute_player_summary,
    compute_totals,
)
from .settlement import (
    RankingEntry,
    SettlementTotals,
    compute_ranking,
    compute_settlement_totals,
    points_for_position,
)

__all__ = [
    "AuditStatus",
    "ChipAudit",
    "DEFAULT_BUY_IN",
    "Debtor",
    "DomainValidationError",
    "GameConfig",
    "GamePhase",
    "GameState",
    "HOUSE_FEE_FIXED",
    "INITIAL_STATE",
    "InvalidAmount",
    "InvalidTransition",
    "LedgerTotals",
    "MAX_AMOUNT",
    "MIN_REBUY",
    "PaymentStatus",
    "Player",
    "PlayerSummary",
    "RankingEntry",
    "Rebuy",
    "SettlementTotals",
    "compute_chip_audit",
    "compute_debtors",
    "compute_player_summaries",
    "compute_player_summary",
    "compute_ranking",
    "compute_settlement_totals",
    "compute_totals",
    "points_for_position",
    "to_decimal",
    "to_money",
]
