"""
Squares AI Core Package

This package contains the game model for Poker Squares, including:
- Cards and the 52-card deck
- The 40-way partial hand classifier
- Point systems that score complete grids
- The backtrackable play state
- Time sources and the game runner

All core components can be imported directly from this package.
"""

# Cards
from squares_ai.core.cards import (
    Card, ALL_CARDS, create_deck, shuffled_deck, parse_cards, format_cards
)

# Hand classification
from squares_ai.core.hands import (
    HandCategory, CATEGORIES, COMPLETE_CATEGORIES, PARTIAL_CATEGORIES,
    NUM_CATEGORIES, classify, categories_of_size
)

# Scoring
from squares_ai.core.scoring import PokerHand, PointSystem, classify_hand

# State
from squares_ai.core.state import PlayState

# Time and game flow
from squares_ai.core.clock import Clock, MonotonicClock, TickingClock
from squares_ai.core.game import PokerSquaresGame, GameRecord

# Errors
from squares_ai.core.exceptions import (
    SquaresError, InvariantViolation, IllegalPlayError
)

# Constants
from squares_ai.core.constants import (
    GRID_SIZE, NUM_CELLS, NUM_CARDS, NUM_PHASE_BUCKETS
)

__all__ = [
    # Cards
    'Card', 'ALL_CARDS', 'create_deck', 'shuffled_deck', 'parse_cards', 'format_cards',

    # Hands
    'HandCategory', 'CATEGORIES', 'COMPLETE_CATEGORIES', 'PARTIAL_CATEGORIES',
    'NUM_CATEGORIES', 'classify', 'categories_of_size',

    # Scoring
    'PokerHand', 'PointSystem', 'classify_hand',

    # State and game
    'PlayState', 'Clock', 'MonotonicClock', 'TickingClock',
    'PokerSquaresGame', 'GameRecord',

    # Errors
    'SquaresError', 'InvariantViolation', 'IllegalPlayError',

    # Constants
    'GRID_SIZE', 'NUM_CELLS', 'NUM_CARDS', 'NUM_PHASE_BUCKETS',
]
