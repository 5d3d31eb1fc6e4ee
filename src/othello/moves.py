"""
Move engine: which squares are legal for a color, and what the board looks like after placing a disc.

A disc placed on an empty square flips every line of opponent discs it brackets against one of the mover's own discs.
Per direction, we walk outward from the square:
* opponent disc -> tentatively flip it and keep walking
* own disc      -> commit the tentative flips of this direction
* empty / edge  -> drop the tentative flips of this direction
A placement that commits no flips at all is illegal.
"""

from src.core.exceptions import NoLegalFlipError, SquareOccupiedError
from src.core.shared_types import Color
from src.othello.position import Position
from src.othello.square import (
    BOARD_SIZE,
    is_single_square,
    is_within_bounds,
    square_bit,
    square_indices,
)

# (file step, rank step) for all 8 compass directions
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)


def _flips_in_direction(
    own: int, other: int, index: int, file_step: int, rank_step: int
) -> int:
    """Discs flipped along a single direction when placing on square `index`."""
    rank, file = divmod(index, BOARD_SIZE)
    file += file_step
    rank += rank_step
    tentative = 0
    while is_within_bounds(file, rank):
        bit = square_bit(file, rank)
        if other & bit:
            tentative |= bit
        elif own & bit:
            return tentative
        else:
            return 0
        file += file_step
        rank += rank_step

    # walked off the board without meeting one of our own discs
    return 0


def flips(position: Position, square: int, color: Color) -> int:
    """
    Mask of the discs `color` would flip by placing on `square` (0 if nothing flips).

    NOTE Assumes the square is empty, callers check occupancy first.
    """
    own = position.discs_of(color)
    other = position.discs_of(color.opponent)
    index = square.bit_length() - 1

    flipped = 0
    for file_step, rank_step in DIRECTIONS:
        flipped |= _flips_in_direction(own, other, index, file_step, rank_step)
    return flipped


def apply_move(position: Position, square: int, color: Color) -> Position:
    """
    Place a disc of `color` on `square` and return the resulting position.
    ----

    Raises SquareOccupiedError if either color already owns the square,
    and NoLegalFlipError if the square is empty but the placement flips nothing.
    The given position is never modified.
    """
    if not is_single_square(square):
        raise ValueError(f"Mask {square:#x} does not denote a single square.")
    if position.occupied & square:
        raise SquareOccupiedError("Square already occupied.")

    flipped = flips(position, square, color)
    if not flipped:
        raise NoLegalFlipError("Invalid move, no discs flipped.")

    own = position.discs_of(color) | square | flipped
    other = position.discs_of(color.opponent) & ~flipped
    return Position.from_discs(color, own, other)


def legal_moves(position: Position, color: Color) -> int:
    """Mask of every square `color` can legally play on."""
    legal = 0
    for index in square_indices(position.empty):
        square = 1 << index
        if flips(position, square, color):
            legal |= square
    return legal


def has_any_legal_move(position: Position, color: Color) -> bool:
    """Stops at the first empty square that flips something."""
    return any(
        flips(position, 1 << index, color) for index in square_indices(position.empty)
    )
