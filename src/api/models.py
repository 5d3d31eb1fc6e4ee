"""Requests and Response models"""

from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player_id: UUID


class PendingGamesRequest(BaseModel):
    player_id: UUID


class GameStatusRequest(BaseModel):
    game_id: UUID


class JoinGameRequest(BaseModel):
    game_id: UUID
    player_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    player_id: UUID


class MoveRequest(BaseModel):
    """`move` is a square like 'd3', or one of the tokens 'pass' / 'resign'."""

    game_id: UUID
    player_id: UUID
    move: str

    @field_validator("move")
    @classmethod
    def normalize_move(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise InvalidRequestError("Move must not be empty.")
        return normalized


# --- RESPONSE MODELS ---
class CreateGameResponse(BaseModel):
    game_id: UUID
    color: Color


class PendingGame(BaseModel):
    game_id: UUID
    first_player: UUID


class PendingGamesResponse(BaseModel):
    games: list[PendingGame]


class GameStatusResponse(BaseModel):
    game_id: UUID
    status: str
    last_move: str
    must_pass: bool


class JoinGameResponse(BaseModel):
    game_id: UUID
    color: Color


class MoveResponse(BaseModel):
    accepted: bool
    game_continues: bool
    winner: str


class LegalMovesResponse(BaseModel):
    game_id: UUID
    player_id: UUID
    color: Color
    legal_moves: list[str]
