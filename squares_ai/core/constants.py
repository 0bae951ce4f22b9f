"""
Constants for the Poker Squares game.

This module defines the grid geometry, deck composition, heuristic value
limits and timing defaults used throughout the implementation.
"""
from typing import List, Tuple, Final


# Grid geometry
GRID_SIZE: Final[int] = 5  # Rows and columns in the square grid
NUM_CELLS: Final[int] = GRID_SIZE * GRID_SIZE  # Cells are encoded row-major: row * GRID_SIZE + col
NUM_LINES: Final[int] = 2 * GRID_SIZE  # Five rows followed by five columns
LINE_SIZE: Final[int] = GRID_SIZE  # Cards in a complete line

# Deck composition
NUM_RANKS: Final[int] = 13
NUM_SUITS: Final[int] = 4
NUM_CARDS: Final[int] = NUM_RANKS * NUM_SUITS

# Rank indices (ace is rank 0, king is rank 12)
ACE: Final[int] = 0
TEN: Final[int] = 9
JACK: Final[int] = 10
QUEEN: Final[int] = 11
KING: Final[int] = 12

RANK_SYMBOLS: Final[str] = "A23456789TJQK"
SUIT_SYMBOLS: Final[str] = "CDHS"

SUIT_NAMES: Final[Tuple[str, ...]] = ("clubs", "diamonds", "hearts", "spades")

# Ranks that can take part in a royal flush (10, J, Q, K, A)
ROYAL_RANKS: Final[frozenset] = frozenset({TEN, JACK, QUEEN, KING, ACE})

# Heuristic table limits
MIN_HEURISTIC_VALUE: Final[int] = -128
MAX_HEURISTIC_VALUE: Final[int] = 127

# Turns are grouped into phase buckets that share heuristic values
NUM_PHASE_BUCKETS: Final[int] = 3
TURNS_PER_BUCKET: Final[int] = 10  # Turns 0-9, 10-19 and 20-24

# Row and column cell lists
ROW_CELLS: Final[List[Tuple[int, ...]]] = [
    tuple(row * GRID_SIZE + col for col in range(GRID_SIZE)) for row in range(GRID_SIZE)
]
COLUMN_CELLS: Final[List[Tuple[int, ...]]] = [
    tuple(row * GRID_SIZE + col for row in range(GRID_SIZE)) for col in range(GRID_SIZE)
]

# Timing defaults (milliseconds), matching the tournament format
DEFAULT_SETUP_MILLIS: Final[int] = 300000  # Five minutes to calibrate before play
DEFAULT_PLAY_MILLIS: Final[int] = 30000  # Thirty seconds for a whole game
DEFAULT_SAFETY_MARGIN_MILLIS: Final[int] = 3000


def cell_to_position(cell: int) -> Tuple[int, int]:
    """Decode a row-major cell index into a (row, col) pair."""
    return divmod(cell, GRID_SIZE)


def position_to_cell(row: int, col: int) -> int:
    """Encode a (row, col) pair as a row-major cell index."""
    return row * GRID_SIZE + col
