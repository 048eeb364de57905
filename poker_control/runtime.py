from __future__ import annotations

from poker_control.config import config
from poker_control.service import GameService
from poker_control.storage.database import SessionLocal
from poker_control.storage.repository import StateRepository

repo = StateRepository(SessionLocal, config.storage_key)
service = GameService(repo)


def get_game_service() -> GameService:
    return service
