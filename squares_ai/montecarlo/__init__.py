"""
Greedy Monte Carlo play for Poker Squares.

This package provides the player that needs no training beyond a short
setup phase. Each placement is chosen by:

1. Splitting the remaining play time across the turns left and the empty cells.
2. For each empty cell, placing the card there and running greedy rollouts:
   simulated cards are drawn from the undealt deck and placed wherever a
   heuristic table scores the grid highest.
3. Choosing the cell with the best mean rollout score (random among ties).

The heuristic table values every partial row or column by its category and
the game phase; it is seeded from the point system and tuned during setup.
"""

from squares_ai.montecarlo.heuristics import HeuristicTable, seed_table, bucket_for_turn
from squares_ai.montecarlo.rollout import rollout, evaluate_grid, greedy_placement
from squares_ai.montecarlo.config import SearchConfig, PlayerConfig
from squares_ai.montecarlo.selector import search_move, select_move
from squares_ai.montecarlo.agent import MonteCarloPlayer, RandomPlayer


__all__ = [
    'HeuristicTable',
    'seed_table',
    'bucket_for_turn',
    'rollout',
    'evaluate_grid',
    'greedy_placement',
    'SearchConfig',
    'PlayerConfig',
    'search_move',
    'select_move',
    'MonteCarloPlayer',
    'RandomPlayer'
]
