import pytest
from sqlalchemy.orm import sessionmaker

from poker_control.service import GameService
from poker_control.storage.repository import StateRepository

from tests.factories import make_session_factory


@pytest.fixture
def session_factory() -> sessionmaker:
    return make_session_factory()


@pytest.fixture
def repo(session_factory) -> StateRepository:
    return StateRepository(session_factory, "poker_control_state_v1")


@pytest.fixture
def service(repo) -> GameService:
    return GameService(repo)
