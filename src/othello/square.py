"""
Squares on the board, encoded as single-bit masks.

(placed in its own module as multiple other modules need to import it)

Bit index = rank * 8 + file, with file a=0 .. h=7 and rank 1=0 .. 8=7. So a1 is bit 0 and h8 is bit 63.
"""

from typing import Iterator

from src.core.exceptions import InvalidMaskError, InvalidNotationError

# Othello board is always 8x8.
BOARD_SIZE = 8
NUM_SQUARES = BOARD_SIZE * BOARD_SIZE
FULL_BOARD = (1 << NUM_SQUARES) - 1

# Move values that are not squares. Neither has exactly one bit set, so they never collide with a real square.
NO_MOVE = 0
PASS_MOVE = FULL_BOARD

PASS_TOKEN = "pass"
RESIGN_TOKEN = "resign"

FILES = "abcdefgh"
RANKS = "12345678"


def square_index(file: int, rank: int) -> int:
    return rank * BOARD_SIZE + file


def square_bit(file: int, rank: int) -> int:
    return 1 << square_index(file, rank)


def is_within_bounds(file: int, rank: int) -> bool:
    return 0 <= file < BOARD_SIZE and 0 <= rank < BOARD_SIZE


def is_single_square(mask: int) -> bool:
    return 0 < mask <= FULL_BOARD and mask & (mask - 1) == 0


def parse(notation: str) -> int:
    """Algebraic notation: 'a1' - 'h8' (case-insensitive) gets converted to the bit of that square."""
    if len(notation) != 2:
        raise InvalidNotationError(
            f"Cannot interpret {notation!r} as a square. Expected a file a-h and a rank 1-8, like 'd3'."
        )
    file_char, rank_char = notation[0].lower(), notation[1]
    if file_char not in FILES or rank_char not in RANKS:
        raise InvalidNotationError(
            f"Cannot interpret {notation!r} as a square. Expected a file a-h and a rank 1-8, like 'd3'."
        )
    return square_bit(FILES.index(file_char), RANKS.index(rank_char))


def to_notation(bit: int) -> str:
    """Reverse of parse(): the mask must have exactly one bit set."""
    if not is_single_square(bit):
        raise InvalidMaskError(f"Mask {bit:#x} does not denote a single square.")
    index = bit.bit_length() - 1
    rank, file = divmod(index, BOARD_SIZE)
    return f"{FILES[file]}{RANKS[rank]}"


def move_to_text(move_value: int) -> str:
    """How a recorded move is shown to clients. No move recorded yet gives an empty string."""
    if move_value == NO_MOVE:
        return ""
    if move_value == PASS_MOVE:
        return PASS_TOKEN
    return to_notation(move_value)


def square_indices(mask: int) -> Iterator[int]:
    """Indices of the set bits of a mask, lowest first."""
    while mask:
        lowest = mask & -mask
        yield lowest.bit_length() - 1
        mask ^= lowest
