"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class GameModel:
    """Transport-safe representation of an Othello game used between API, Service, DB, and Game layers.

    Positions are unsigned 64-bit occupancy masks, `state` is a `GameState` code.
    `version` is the row version the game was read at (optimistic concurrency).
    """

    game_id: UUID
    black_player: Optional[UUID]
    white_player: Optional[UUID]
    position_black: int
    position_white: int
    state: int
    version: int = 0
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


@dataclass
class MoveModel:
    """One entry of a game's (append-only) move log."""

    game_id: UUID
    move_number: int
    move_value: int
    position_black: int
    position_white: int
    played_at: Optional[datetime] = None
