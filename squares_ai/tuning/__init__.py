"""
Offline tuning of heuristic tables for Poker Squares.

This package calibrates the heuristic table during the player's setup time.
Two interchangeable strategies are provided:

1. Genetic algorithm: a population of tables evolves through elitism,
   rank-biased uniform crossover and small mutations.
2. Stochastic ruler: a single table walks through its neighbors, accepting
   a neighbor only when it repeatedly beats a random threshold drawn between
   the worst and best values seen so far.

Both strategies measure a table by the mean score of full games played by
the greedy rollout policy, and stop at a deadline on the injected clock.
"""

from squares_ai.tuning.config import GeneticConfig, StochasticRulerConfig, TunerConfig
from squares_ai.tuning.population import Member, Population
from squares_ai.tuning.base import TableTuner, evaluate_table
from squares_ai.tuning.genetic import GeneticTuner
from squares_ai.tuning.stochastic_ruler import StochasticRulerTuner
from squares_ai.tuning.factory import create_tuner

__all__ = [
    'GeneticConfig',
    'StochasticRulerConfig',
    'TunerConfig',
    'Member',
    'Population',
    'TableTuner',
    'evaluate_table',
    'GeneticTuner',
    'StochasticRulerTuner',
    'create_tuner',
]
