"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from contextlib import contextmanager
from typing import Generator
from uuid import UUID

from sqlalchemy import func, insert, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import (
    ConcurrencyConflictError,
    ConflictError,
    GameNotFoundError,
    RepositoryError,
    StorageError,
)
from src.core.models import GameModel, MoveModel
from src.core.shared_types import GameState
from src.db.schema import DBGame, DBMove
from src.othello.square import NO_MOVE

logger = logging.getLogger(__name__)

_UINT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


def to_signed(value: int) -> int:
    """Reinterpret an unsigned 64-bit mask as the signed integer SQL can store."""
    value &= _UINT64_MASK
    return value - (1 << 64) if value & _INT64_SIGN else value


def to_unsigned(value: int) -> int:
    """Reverse of to_signed()"""
    return value & _UINT64_MASK


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        with self._storage_errors("fetch game"):
            game_db = self._fetch_game(game_id)
            if game_db:
                return self._to_model(game_db)
            return None

    def create_game(self, game: GameModel) -> GameModel:
        """Store new game and return the stored data. The ID is generated by the caller."""
        with self._transaction("create game"):
            if self._fetch_game(game.game_id) is not None:
                raise ConflictError(f"Game with game_id={game.game_id} already exists.")
            game_db = DBGame(
                id=game.game_id,
                black_player_id=game.black_player,
                white_player_id=game.white_player,
                position_black=to_signed(game.position_black),
                position_white=to_signed(game.position_white),
                state=game.state,
                version=0,
            )
            self.db.add(game_db)
            try:
                self.db.flush()
            except IntegrityError as e:
                raise ConflictError(
                    f"Game with game_id={game.game_id} already exists."
                ) from e
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def update_game(self, game: GameModel) -> GameModel:
        """Add new info to existing record (no move recorded)."""
        with self._transaction("update game"):
            self._write_game_row(game)
        stored = self._fetch_game(game.game_id)
        assert stored is not None
        return self._to_model(stored)

    def get_max_move_number(self, game_id: UUID) -> int:
        with self._storage_errors("fetch move number"):
            query = select(func.max(DBMove.move_number)).where(
                DBMove.game_id == game_id
            )
            return self.db.scalar(query) or 0

    def get_last_move(self, game_id: UUID) -> int:
        with self._storage_errors("fetch last move"):
            query = (
                select(DBMove.move_value)
                .where(DBMove.game_id == game_id)
                .order_by(DBMove.move_number.desc())
                .limit(1)
            )
            move_value = self.db.scalar(query)
            return NO_MOVE if move_value is None else to_unsigned(move_value)

    def get_moves(self, game_id: UUID) -> list[MoveModel]:
        with self._storage_errors("fetch moves"):
            query = (
                select(DBMove)
                .where(DBMove.game_id == game_id)
                .order_by(DBMove.move_number)
            )
            return [
                MoveModel(
                    game_id=move_db.game_id,
                    move_number=move_db.move_number,
                    move_value=to_unsigned(move_db.move_value),
                    position_black=to_unsigned(move_db.position_black),
                    position_white=to_unsigned(move_db.position_white),
                    played_at=move_db.played_at,
                )
                for move_db in self.db.scalars(query)
            ]

    def commit_move_and_state(
        self, game: GameModel, move_value: int, move_number: int
    ) -> None:
        """
        Update the game row and append to the move log in a single transaction.
        ----

        The row update only matches if the stored version is still the one we read,
        and (game_id, move_number) is the primary key of the move log. Losing either race rolls back both writes.
        """
        with self._transaction("record move"):
            self._write_game_row(game)
            try:
                self.db.execute(
                    insert(DBMove).values(
                        game_id=game.game_id,
                        move_number=move_number,
                        move_value=to_signed(move_value),
                        position_black=to_signed(game.position_black),
                        position_white=to_signed(game.position_white),
                    )
                )
            except IntegrityError as e:
                raise ConcurrencyConflictError(
                    f"Move number {move_number} of game {game.game_id} was already recorded."
                ) from e

    def pending_games(self, excluding_player: UUID) -> list[GameModel]:
        # NOTE comparing NULL to anything is never true, hence the explicit IS NULL checks
        with self._storage_errors("list pending games"):
            query = (
                select(DBGame)
                .where(DBGame.state == GameState.PENDING.value)
                .where(
                    or_(
                        DBGame.black_player_id.is_(None),
                        DBGame.black_player_id != excluding_player,
                    )
                )
                .where(
                    or_(
                        DBGame.white_player_id.is_(None),
                        DBGame.white_player_id != excluding_player,
                    )
                )
                .order_by(DBGame.started_at.asc())
            )
            return [self._to_model(game_db) for game_db in self.db.scalars(query)]

    def _write_game_row(self, game: GameModel) -> None:
        """Compare-and-swap on the row version."""
        statement = (
            update(DBGame)
            .where(DBGame.id == game.game_id, DBGame.version == game.version)
            .values(
                black_player_id=game.black_player,
                white_player_id=game.white_player,
                position_black=to_signed(game.position_black),
                position_white=to_signed(game.position_white),
                state=game.state,
                ended_at=game.ended_at,
                version=game.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(statement)
        if result.rowcount == 1:
            return

        if self._fetch_game(game.game_id) is None:
            raise GameNotFoundError(f"Game with game_id={game.game_id} not found.")
        raise ConcurrencyConflictError(
            f"Game {game.game_id} was changed by another request. Reload and try again."
        )

    @contextmanager
    def _transaction(self, action: str) -> Generator[None, None, None]:
        """Commit when the block succeeds, roll back everything it wrote otherwise."""
        try:
            yield
            self.db.commit()
        except ConcurrencyConflictError:
            self.db.rollback()
            logger.warning("Concurrent write detected while trying to %s", action)
            raise
        except RepositoryError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Storage failure while trying to %s", action)
            raise StorageError(f"Could not {action}: {e}") from e

    @contextmanager
    def _storage_errors(self, action: str) -> Generator[None, None, None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Storage failure while trying to %s", action)
            raise StorageError(f"Could not {action}: {e}") from e

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            game_id=game_db.id,
            black_player=game_db.black_player_id,
            white_player=game_db.white_player_id,
            position_black=to_unsigned(game_db.position_black),
            position_white=to_unsigned(game_db.position_white),
            state=game_db.state,
            version=game_db.version,
            started_at=game_db.started_at,
            ended_at=game_db.ended_at,
        )
