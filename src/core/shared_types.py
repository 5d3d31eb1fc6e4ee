"""
Type definitions used across layers
"""

from enum import IntEnum, StrEnum


class Color(StrEnum):
    BLACK = "black"
    WHITE = "white"

    @property
    def opponent(self) -> "Color":
        return Color.WHITE if self == Color.BLACK else Color.BLACK


class GameState(IntEnum):
    """
    State codes as persisted in the games table.

    NOTE the two "to move" codes toggle with `3 - current`, so their values must stay 1 and 2.
    """

    PENDING = 0
    BLACK_TO_MOVE = 1
    WHITE_TO_MOVE = 2
    BLACK_WON = 3
    WHITE_WON = 4
    DRAW = 5

    @property
    def is_terminal(self) -> bool:
        return self in (GameState.BLACK_WON, GameState.WHITE_WON, GameState.DRAW)

    def toggled(self) -> "GameState":
        """Hand the turn to the other color."""
        if self not in (GameState.BLACK_TO_MOVE, GameState.WHITE_TO_MOVE):
            raise ValueError(f"Cannot toggle the turn in state {self.name}")
        return GameState(3 - self.value)


def state_label(state: GameState) -> str:
    """Label of a state as shown to clients."""
    match state:
        case GameState.PENDING:
            return "pending"
        case GameState.BLACK_TO_MOVE:
            return "black"
        case GameState.WHITE_TO_MOVE:
            return "white"
        case GameState.BLACK_WON:
            return "black_won"
        case GameState.WHITE_WON:
            return "white_won"
        case GameState.DRAW:
            return "draw"


def winner_label(state: GameState) -> str:
    """Empty while the game is still open."""
    match state:
        case GameState.BLACK_WON:
            return Color.BLACK.value
        case GameState.WHITE_WON:
            return Color.WHITE.value
        case GameState.DRAW:
            return "draw"
        case GameState.PENDING | GameState.BLACK_TO_MOVE | GameState.WHITE_TO_MOVE:
            return ""


def to_move_state(color: Color) -> GameState:
    return GameState.BLACK_TO_MOVE if color == Color.BLACK else GameState.WHITE_TO_MOVE


def won_state(color: Color) -> GameState:
    return GameState.BLACK_WON if color == Color.BLACK else GameState.WHITE_WON
