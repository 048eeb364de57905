from datetime import datetime, timezone
from decimal import Decimal
from itertools import count

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from poker_control.domain import INITIAL_STATE, GameState, lifecycle
from poker_control.storage.database import Base

FIXED_TIME = datetime(2025, 3, 14, 21, 30, 0, tzinfo=timezone.utc)


def make_session_factory() -> sessionmaker:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def id_sequence(prefix: str):
    counter = count(1)
    return lambda: f"{prefix}{next(counter)}"


def started_game(buy_in="50", names=("alice", "bob")) -> GameState:
    """Started game whose players get ids p1, p2, ... in order."""
    ids = id_sequence("p")
    state = lifecycle.start_game(INITIAL_STATE, Decimal(buy_in))
    for name in names:
        state = lifecycle.add_player(state, name, id_factory=ids)
    return state
