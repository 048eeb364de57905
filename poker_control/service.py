from __future__ import annotations

from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from poker_control.domain import (
    INITIAL_STATE,
    DomainValidationError,
    GameState,
    PaymentStatus,
    lifecycle,
)
from poker_control.storage.document import PersistenceCorrupt
from poker_control.storage.repository import StateRepository
from poker_control.utils.logger import get_logger

logger = get_logger(__name__)


class GameService:
    """Owns the current game state and persists it after every change."""

    def __init__(self, repo: StateRepository) -> None:
        self.repo = repo
        self.state: GameState = INITIAL_STATE

    def load(self) -> GameState:
        try:
            stored = self.repo.load()
        except PersistenceCorrupt:
            logger.exception("Discarding unreadable game state under key %s", self.repo.storage_key)
            stored = None
        except SQLAlchemyError:
            logger.exception("Could not read game state, starting fresh")
            stored = None

        self.state = stored if stored is not None else INITIAL_STATE
        logger.info(
            "Loaded game state: phase=%s players=%d",
            self.state.phase.value,
            len(self.state.players),
        )
        return self.state

    def start_game(self, buy_in_amount) -> GameState:
        return self._apply("start_game", lambda s: lifecycle.start_game(s, buy_in_amount))

    def add_player(self, name: str) -> GameState:
        return self._apply("add_player", lambda s: lifecycle.add_player(s, name))

    def remove_player(self, player_id: str) -> GameState:
        return self._apply("remove_player", lambda s: lifecycle.remove_player(s, player_id))

    def set_buy_in_status(self, player_id: str, status: PaymentStatus) -> GameState:
        return self._apply("set_buy_in_status", lambda s: lifecycle.set_buy_in_status(s, player_id, status))

    def add_rebuy(self, player_id: str, amount) -> GameState:
        return self._apply("add_rebuy", lambda s: lifecycle.add_rebuy(s, player_id, amount))

    def remove_rebuy(self, player_id: str, rebuy_id: str) -> GameState:
        return self._apply("remove_rebuy", lambda s: lifecycle.remove_rebuy(s, player_id, rebuy_id))

    def toggle_rebuy_status(self, player_id: str, rebuy_id: str) -> GameState:
        return self._apply(
            "toggle_rebuy_status",
            lambda s: lifecycle.toggle_rebuy_status(s, player_id, rebuy_id),
        )

    def submit_cashout(self, player_id: str, amount) -> GameState:
        return self._apply("submit_cashout", lambda s: lifecycle.submit_cashout(s, player_id, amount))

    def end_game(self) -> GameState:
        return self._apply("end_game", lifecycle.end_game)

    def resume_game(self) -> GameState:
        return self._apply("resume_game", lifecycle.resume_game)

    def finish_game(self) -> GameState:
        return self._apply("finish_game", lifecycle.finish_game)

    def reset_game(self) -> GameState:
        self.state = lifecycle.reset_game(self.state)
        try:
            self.repo.clear()
        except SQLAlchemyError:
            logger.exception("Could not clear stored game state")
        logger.info("Game reset")
        return self.state

    def _apply(self, command: str, transition: Callable[[GameState], GameState]) -> GameState:
        try:
            new_state = transition(self.state)
        except DomainValidationError as exc:
            logger.warning("Rejected %s: %s", command, exc)
            raise

        if new_state is self.state:
            logger.info("%s changed nothing", command)
            return self.state

        self.state = new_state
        logger.info("Applied %s: phase=%s", command, new_state.phase.value)
        self._save()
        return self.state

    def _save(self) -> None:
        try:
            self.repo.save(self.state)
        except SQLAlchemyError:
            logger.exception("Could not save game state")
