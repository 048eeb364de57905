from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from poker_control.api.games import router as game_router
from poker_control.runtime import service
from poker_control.storage.database import Base, engine
from poker_control.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    Base.metadata.create_all(bind=engine)
    service.load()
    logger.info("Poker Control ready")
    yield


app = FastAPI(title="Poker Control API", lifespan=lifespan)
app.include_router(game_router)
