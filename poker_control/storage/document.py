"""JSON document format of the persisted game state.

The layout keeps the keys of the original browser snapshot so older saves
still load; ``cashoutOpen`` is optional for that reason.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, ValidationError, field_validator, model_validator

from poker_control.domain import (
    DomainValidationError,
    GameConfig,
    GameState,
    PaymentStatus,
    Player,
    Rebuy,
    to_money,
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MIN_MILLIS = (datetime.min.replace(tzinfo=timezone.utc) - EPOCH) // timedelta(milliseconds=1)
MAX_MILLIS = (datetime.max.replace(tzinfo=timezone.utc) - EPOCH) // timedelta(milliseconds=1)

# Written as JSON numbers. Amounts are capped below MAX_AMOUNT so two-decimal
# values stay within float precision and read back exactly.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float)]


class PersistenceCorrupt(ValueError):
    """Raised when a stored document cannot be turned back into a game state."""


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RebuyDocument(_Document):
    id: str
    amount: Money
    status: PaymentStatus = PaymentStatus.PENDING
    timestamp: int = Field(ge=MIN_MILLIS, le=MAX_MILLIS)


class PlayerDocument(_Document):
    id: str
    name: str
    buy_in_status: PaymentStatus = Field(default=PaymentStatus.PENDING, alias="buyInStatus")
    rebuys: list[RebuyDocument] = Field(default_factory=list)
    cashout_amount: Money | None = Field(default=None, alias="cashoutAmount")

    @model_validator(mode="after")
    def rebuy_ids_unique(self) -> "PlayerDocument":
        ids = [rebuy.id for rebuy in self.rebuys]
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate rebuy id for player {self.id}")
        return self


class ConfigDocument(_Document):
    buy_in_amount: Money = Field(alias="buyInAmount")


class GameDocument(_Document):
    is_started: bool = Field(alias="isStarted")
    finished: bool = False
    cashout_open: bool = Field(default=False, alias="cashoutOpen")
    game_config: ConfigDocument = Field(alias="config")
    players: list[PlayerDocument] = Field(default_factory=list)

    @field_validator("players", mode="before")
    @classmethod
    def drop_ghost_players(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [
            item
            for item in value
            if not isinstance(item, dict) or str(item.get("name") or "").strip()
        ]

    @model_validator(mode="after")
    def player_ids_unique(self) -> "GameDocument":
        ids = [player.id for player in self.players]
        if len(set(ids)) != len(ids):
            raise ValueError("duplicate player id")
        if self.finished and not self.is_started:
            raise ValueError("finished game must be started")
        return self


def to_millis(moment: datetime) -> int:
    return (moment - EPOCH) // timedelta(milliseconds=1)


def from_millis(value: int) -> datetime:
    return EPOCH + timedelta(milliseconds=value)


def encode_state(state: GameState) -> str:
    document = GameDocument(
        is_started=state.is_started,
        finished=state.finished,
        cashout_open=state.cashout_open,
        game_config=ConfigDocument(buy_in_amount=state.config.buy_in_amount),
        players=[
            PlayerDocument(
                id=player.id,
                name=player.name,
                buy_in_status=player.buy_in_status,
                rebuys=[
                    RebuyDocument(
                        id=rebuy.id,
                        amount=rebuy.amount,
                        status=rebuy.status,
                        timestamp=to_millis(rebuy.created_at),
                    )
                    for rebuy in player.rebuys
                ],
                cashout_amount=player.cashout_amount,
            )
            for player in state.active_players()
        ],
    )
    return document.model_dump_json(by_alias=True, exclude_none=True)


def decode_state(payload: str | bytes) -> GameState:
    try:
        document = GameDocument.model_validate_json(payload)
        return GameState(
            is_started=document.is_started,
            finished=document.finished,
            cashout_open=document.cashout_open and document.is_started and not document.finished,
            config=GameConfig(buy_in_amount=to_money(document.game_config.buy_in_amount)),
            players=tuple(
                Player(
                    id=player.id,
                    name=player.name,
                    buy_in_status=player.buy_in_status,
                    rebuys=tuple(
                        Rebuy(
                            id=rebuy.id,
                            amount=to_money(rebuy.amount),
                            status=rebuy.status,
                            created_at=from_millis(rebuy.timestamp),
                        )
                        for rebuy in player.rebuys
                    ),
                    cashout_amount=(
                        to_money(player.cashout_amount) if player.cashout_amount is not None else None
                    ),
                )
                for player in document.players
            ),
        )
    except (ValidationError, DomainValidationError, OverflowError) as exc:
        raise PersistenceCorrupt(f"stored game state is unreadable: {exc}") from exc
