"""
Common machinery for heuristic table tuners.

A tuner starts from a seeded table and spends the player's setup time
searching for a table that scores better in simulated games. Fitness is the
mean final score of full games played by the greedy rollout policy itself,
so a table is rewarded for the placements it leads to.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import random

from squares_ai.core.clock import Clock, MonotonicClock
from squares_ai.core.constants import NUM_CELLS
from squares_ai.core.scoring import PointSystem
from squares_ai.core.state import PlayState
from squares_ai.montecarlo.heuristics import HeuristicTable
from squares_ai.montecarlo.rollout import rollout


def evaluate_table(
    table: HeuristicTable,
    point_system: PointSystem,
    num_games: int,
    rng: random.Random,
    state: Optional[PlayState] = None,
) -> float:
    """
    Estimate how well a table plays.

    Each game starts from an empty grid and runs one greedy rollout over all
    25 turns, so only the final grid is scored, by the point system.

    Args:
        table: Table to evaluate
        point_system: Scores the final grids
        num_games: Games to average over
        rng: Source of simulated cards and tie-breaks
        state: Scratch state to reuse (a fresh one if None)

    Returns:
        Mean final score
    """
    if num_games <= 0:
        raise ValueError("num_games must be positive")
    state = state or PlayState()
    total = 0
    for _ in range(num_games):
        state.reset()
        total += rollout(state, table, NUM_CELLS, rng, point_system)
    state.reset()
    return total / num_games


class TableTuner(ABC):
    """
    Base class for strategies that improve a heuristic table before play.

    Subclasses implement ``tune``; ``history`` collects one summary dict per
    generation or iteration for reporting.
    """

    name = "tuner"

    def __init__(
        self,
        point_system: PointSystem,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        verbose: bool = False,
    ):
        """
        Initialize a tuner.

        Args:
            point_system: Scoring the tables are tuned for
            clock: Time source for the deadline
            rng: Random source
            verbose: Whether to show a progress bar
        """
        self.point_system = point_system
        self.clock = clock or MonotonicClock()
        self.rng = rng or random.Random()
        self.verbose = verbose
        self.history: List[Dict[str, Any]] = []
        self.evaluations = 0
        self._state = PlayState()

    @abstractmethod
    def tune(self, seed: HeuristicTable, deadline_ms: float) -> HeuristicTable:
        """
        Search for a better table until the deadline.

        Args:
            seed: Starting table (not modified)
            deadline_ms: Clock reading at which tuning must stop

        Returns:
            The best table found
        """

    def evaluate(self, table: HeuristicTable, num_games: int) -> float:
        self.evaluations += 1
        return evaluate_table(table, self.point_system, num_games, self.rng, self._state)

    def time_fraction(self, start_ms: float, deadline_ms: float) -> float:
        """Fraction of the tuning window already used, in [0, 1]."""
        span = deadline_ms - start_ms
        if span <= 0:
            return 1.0
        return min(max((self.clock.now_ms() - start_ms) / span, 0.0), 1.0)
