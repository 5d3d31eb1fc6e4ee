"""
Othello Service - FastAPI Application

Run with: uvicorn src.main:app
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from src.api.routes import game_error_handler, router
from src.core.config import LOG_FORMAT, LOG_LEVEL
from src.core.exceptions import GameError
from src.db.database import init_db

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    init_db()
    logger.info("Database tables ready")
    yield


app = FastAPI(
    title="Othello Service",
    description="Two-player Othello games: create, join, move, pass, resign",
    version="1.0.0",
    lifespan=lifespan,
)
app.include_router(router)
app.add_exception_handler(GameError, game_error_handler)
