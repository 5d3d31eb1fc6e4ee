"""
Representation of a single position on the board: one occupancy mask per color.
"""

from dataclasses import dataclass
from typing import Self

from src.core.shared_types import Color
from src.othello.square import FULL_BOARD

# d5 + e4 for black, d4 + e5 for white
INITIAL_BLACK = 0x0000_0008_1000_0000
INITIAL_WHITE = 0x0000_0010_0800_0000


@dataclass(frozen=True)
class Position:
    """
    Discs on the board, as two 64-bit masks.
    ----

    The masks never share a bit: a square is empty, black, or white.
    Which color is to move is not part of the position, the Game keeps track of that.
    """

    black: int
    white: int

    def __post_init__(self) -> None:
        if self.black & self.white:
            raise ValueError(
                f"Squares {self.black & self.white:#x} are occupied by both colors."
            )
        if (self.black | self.white) & ~FULL_BOARD:
            raise ValueError("Position has discs outside of the 8x8 board.")

    @classmethod
    def starting_position(cls) -> Self:
        return cls(black=INITIAL_BLACK, white=INITIAL_WHITE)

    @classmethod
    def from_discs(cls, color: Color, own: int, other: int) -> Self:
        """Build from the point of view of `color`: `own` are its discs, `other` the opponent's."""
        if color == Color.BLACK:
            return cls(black=own, white=other)
        return cls(black=other, white=own)

    def discs_of(self, color: Color) -> int:
        return self.black if color == Color.BLACK else self.white

    @property
    def occupied(self) -> int:
        return self.black | self.white

    @property
    def empty(self) -> int:
        return FULL_BOARD & ~self.occupied

    def is_full(self) -> bool:
        return self.occupied == FULL_BOARD

    def count(self, color: Color) -> int:
        return self.discs_of(color).bit_count()

    def count_discs(self) -> dict[Color, int]:
        """Tally the discs each player has on the board"""
        return {color: self.count(color) for color in Color}
