"""
Squares AI - A Monte Carlo player for the card placement game Poker Squares.

This package provides the game model (cards, hand classification, point
systems and a backtrackable play state), a greedy Monte Carlo move selector
driven by a tunable heuristic table, and offline tuners that calibrate the
table before play.
"""

__version__ = "0.1.0"
__author__ = "Squares AI Team"

# Make key components available at package level
from squares_ai.core.cards import Card
from squares_ai.core.scoring import PointSystem, PokerHand
from squares_ai.core.state import PlayState
from squares_ai.core.game import PokerSquaresGame, GameRecord
from squares_ai.montecarlo.heuristics import HeuristicTable, seed_table
from squares_ai.montecarlo.agent import MonteCarloPlayer, RandomPlayer

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
