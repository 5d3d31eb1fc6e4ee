"""HTTP routes. Thin: parse the request, call the service, map domain errors to status codes."""

import logging
import random
from uuid import UUID, uuid4

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.models import (
    CreateGameRequest,
    CreateGameResponse,
    GameStatusRequest,
    GameStatusResponse,
    JoinGameRequest,
    JoinGameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PendingGamesRequest,
    PendingGamesResponse,
)
from src.core.exceptions import (
    ConcurrencyConflictError,
    ConflictError,
    GameError,
    GameNotFoundError,
    GameStateError,
    IllegalMoveError,
    IllegalPassError,
    InvalidMaskError,
    InvalidRequestError,
    NotYourTurnError,
    StorageError,
)
from src.core.shared_types import Color
from src.db.database import get_db
from src.db.sql_repository import SQLGameRepository
from src.services.othello_service import OthelloService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])

# first match wins, so subclasses go before their parents
ERROR_STATUS: tuple[tuple[type[GameError], int], ...] = (
    (IllegalMoveError, status.HTTP_400_BAD_REQUEST),
    (IllegalPassError, status.HTTP_400_BAD_REQUEST),
    (InvalidMaskError, status.HTTP_400_BAD_REQUEST),
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST),
    (NotYourTurnError, status.HTTP_403_FORBIDDEN),
    (GameNotFoundError, status.HTTP_404_NOT_FOUND),
    (GameStateError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ConcurrencyConflictError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def http_status_for(error: GameError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def game_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Registered on the app for GameError."""
    assert isinstance(exc, GameError)
    status_code = http_status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": str(exc)},
    )


def get_service(db: Session = Depends(get_db)) -> OthelloService:
    return OthelloService(SQLGameRepository(db))


@router.post("", response_model=CreateGameResponse)
def create_game(
    request: CreateGameRequest, service: OthelloService = Depends(get_service)
) -> CreateGameResponse:
    # The core is deterministic. Identity and color are decided here.
    return service.create_new_game(
        request, game_id=uuid4(), color=random.choice(list(Color))
    )


@router.get("/pending", response_model=PendingGamesResponse)
def list_pending_games(
    player_id: UUID, service: OthelloService = Depends(get_service)
) -> PendingGamesResponse:
    return service.list_pending_games(PendingGamesRequest(player_id=player_id))


@router.get("/{game_id}/status", response_model=GameStatusResponse)
def game_status(
    game_id: UUID, service: OthelloService = Depends(get_service)
) -> GameStatusResponse:
    return service.get_status(GameStatusRequest(game_id=game_id))


@router.get("/{game_id}/legal-moves", response_model=LegalMovesResponse)
def legal_moves(
    game_id: UUID, player_id: UUID, service: OthelloService = Depends(get_service)
) -> LegalMovesResponse:
    return service.legal_moves(LegalMovesRequest(game_id=game_id, player_id=player_id))


@router.post("/join", response_model=JoinGameResponse)
def join_game(
    request: JoinGameRequest, service: OthelloService = Depends(get_service)
) -> JoinGameResponse:
    return service.join_game(request)


@router.post("/move", response_model=MoveResponse)
def submit_move(
    request: MoveRequest, service: OthelloService = Depends(get_service)
) -> MoveResponse:
    return service.submit_move(request)
