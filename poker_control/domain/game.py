from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Tuple

HOUSE_FEE_FIXED = Decimal("10")
DEFAULT_BUY_IN = Decimal("50")
MIN_REBUY = Decimal("1")
MAX_AMOUNT = Decimal("1000000000000")

_CENTS = Decimal("0.01")


class DomainValidationError(ValueError):
    """Raised when a game rule is violated."""


class InvalidAmount(DomainValidationError):
    """Raised when a money input is rejected. State is left unchanged."""


class InvalidTransition(DomainValidationError):
    """Raised when a command is not accepted in the current game phase."""


class PaymentStatus(str, Enum):
    PAID = "PAID"
    PENDING = "PENDING"

    def toggled(self) -> "PaymentStatus":
        return PaymentStatus.PENDING if self is PaymentStatus.PAID else PaymentStatus.PAID


class GamePhase(str, Enum):
    SETUP = "SETUP"
    ACTIVE = "ACTIVE"
    CASHOUT_ENTRY = "CASHOUT_ENTRY"
    FINISHED = "FINISHED"


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Parse a money input without rounding it.

    Floats go through ``str`` so ``12.34`` stays ``12.34`` instead of its
    binary expansion. NaN, infinities and non-numeric strings are rejected.
    Magnitudes of MAX_AMOUNT and above are rejected. Range checks run on this
    value so rounding cannot lift an amount over a limit.
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"invalid amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmount(f"invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise InvalidAmount(f"invalid amount: {value!r}")
    if abs(amount) >= MAX_AMOUNT:
        raise InvalidAmount(f"amount too large: {value!r}")
    return amount


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Normalize a money input to a two-decimal ``Decimal``."""
    try:
        return to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidAmount(f"invalid amount: {value!r}") from exc


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds, the precision we persist."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass(frozen=True)
class GameConfig:
    buy_in_amount: Decimal = DEFAULT_BUY_IN

    @property
    def buy_in_chips(self) -> Decimal:
        return self.buy_in_amount - HOUSE_FEE_FIXED


@dataclass(frozen=True)
class Rebuy:
    id: str
    amount: Decimal
    status: PaymentStatus = PaymentStatus.PENDING
    created_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    buy_in_status: PaymentStatus = PaymentStatus.PENDING
    rebuys: Tuple[Rebuy, ...] = field(default_factory=tuple)
    cashout_amount: Decimal | None = None

    @property
    def is_ghost(self) -> bool:
        return not self.name or not self.name.strip()

    @property
    def has_cashout(self) -> bool:
        return self.cashout_amount is not None

    def get_rebuy(self, rebuy_id: str) -> Rebuy | None:
        for rebuy in self.rebuys:
            if rebuy.id == rebuy_id:
                return rebuy
        return None


@dataclass(frozen=True)
class GameState:
    is_started: bool = False
    finished: bool = False
    cashout_open: bool = False
    config: GameConfig = field(default_factory=GameConfig)
    players: Tuple[Player, ...] = field(default_factory=tuple)

    @property
    def phase(self) -> GamePhase:
        if not self.is_started:
            return GamePhase.SETUP
        if self.finished:
            return GamePhase.FINISHED
        if self.cashout_open:
            return GamePhase.CASHOUT_ENTRY
        return GamePhase.ACTIVE

    def active_players(self) -> list[Player]:
        """Players that take part in every computation, in list order."""
        return [player for player in self.players if not player.is_ghost]

    def get_player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None


INITIAL_STATE = GameState()
