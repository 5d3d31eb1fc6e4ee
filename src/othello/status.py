"""Decide whether a game goes on, needs a pass, or is over."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from src.core.shared_types import Color
from src.othello.moves import has_any_legal_move
from src.othello.position import Position


class Outcome(Enum):
    CONTINUE = auto()
    MUST_PASS = auto()
    WINNER = auto()
    DRAW = auto()


@dataclass(frozen=True)
class Evaluation:
    outcome: Outcome
    winner: Optional[Color] = None

    @property
    def is_terminal(self) -> bool:
        return self.outcome in (Outcome.WINNER, Outcome.DRAW)


def evaluate(position: Position, color_to_move: Color) -> Evaluation:
    """
    Classify the position for the side to move.
    ----

    1. Board full -> majority of discs wins, equal counts is a draw.
    2. Side to move has a legal move -> continue.
    3. Only the opponent has a legal move -> side to move must pass.
    4. Nobody can move -> count discs, as in 1.
    """
    if position.is_full():
        return _count_out(position)

    if has_any_legal_move(position, color_to_move):
        return Evaluation(Outcome.CONTINUE)

    if has_any_legal_move(position, color_to_move.opponent):
        return Evaluation(Outcome.MUST_PASS)

    return _count_out(position)


def _count_out(position: Position) -> Evaluation:
    black = position.count(Color.BLACK)
    white = position.count(Color.WHITE)
    if black > white:
        return Evaluation(Outcome.WINNER, Color.BLACK)
    if white > black:
        return Evaluation(Outcome.WINNER, Color.WHITE)
    return Evaluation(Outcome.DRAW)
