"""Protocol repository (implemented with SQLAlchemy in sql_repository.py, and with a dictionary in the service tests)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel, MoveModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> GameModel:
        """Store new game. Raises ConflictError if the ID is already taken."""
        ...

    def update_game(self, game: GameModel) -> GameModel:
        """
        Write the game row (players, position, state, end time) without touching the move log.
        Raises ConcurrencyConflictError if the row changed since `game.version` was read.
        """
        ...

    def get_max_move_number(self, game_id: UUID) -> int:
        """Highest move number recorded for the game, 0 if none."""
        ...

    def get_last_move(self, game_id: UUID) -> int:
        """Encoded value of the latest move, NO_MOVE if none."""
        ...

    def commit_move_and_state(
        self, game: GameModel, move_value: int, move_number: int
    ) -> None:
        """
        Update the game row AND append the move record as one atomic unit: both are stored, or neither is.
        Raises ConcurrencyConflictError if the row changed since `game.version` was read or the move number is taken.
        """
        ...

    def get_moves(self, game_id: UUID) -> list[MoveModel]:
        """Move log of the game in playing order."""
        ...

    def pending_games(self, excluding_player: UUID) -> list[GameModel]:
        """Games waiting for a second player, except those opened by `excluding_player`. Oldest first."""
        ...
