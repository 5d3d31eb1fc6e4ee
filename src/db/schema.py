"""Database tables / schema

Occupancy masks are unsigned 64-bit values, but SQL integers are signed.
The repository stores them reinterpreted as signed 64-bit integers (two's complement), see sql_repository.py.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import BigInteger, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    black_player_id: Mapped[Optional[UUID]]
    white_player_id: Mapped[Optional[UUID]]
    position_black: Mapped[int] = mapped_column(BigInteger)
    position_white: Mapped[int] = mapped_column(BigInteger)
    state: Mapped[int] = mapped_column(index=True)
    # bumped on every write, a stale version means someone else wrote in between
    version: Mapped[int] = mapped_column(default=0)
    started_at: Mapped[datetime] = mapped_column(default=utc_now)
    ended_at: Mapped[Optional[datetime]]


class DBMove(Base):
    __tablename__ = "moves"
    game_id: Mapped[UUID] = mapped_column(ForeignKey("games.id"), primary_key=True)
    move_number: Mapped[int] = mapped_column(primary_key=True)
    move_value: Mapped[int] = mapped_column(BigInteger)
    position_black: Mapped[int] = mapped_column(BigInteger)
    position_white: Mapped[int] = mapped_column(BigInteger)
    played_at: Mapped[datetime] = mapped_column(default=utc_now)
