"""
Monte Carlo player for Poker Squares.

This module provides the MonteCarloPlayer class, a ready-to-use player for
the game harness. During setup it seeds a heuristic table from the point
system and tunes it with the configured strategy; during play it picks each
placement with the time-budgeted greedy rollout selector. A RandomPlayer
baseline is included for comparison.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging
import random

from squares_ai.core.cards import Card
from squares_ai.core.clock import Clock, MonotonicClock
from squares_ai.core.constants import cell_to_position
from squares_ai.core.exceptions import InvariantViolation
from squares_ai.core.scoring import PointSystem
from squares_ai.core.state import PlayState
from squares_ai.montecarlo.config import PlayerConfig
from squares_ai.montecarlo.heuristics import HeuristicTable, seed_table
from squares_ai.montecarlo.selector import search_move
from squares_ai.tuning.base import TableTuner
from squares_ai.tuning.factory import create_tuner

logger = logging.getLogger(__name__)


class MonteCarloPlayer:
    """
    Poker Squares player driven by greedy Monte Carlo rollouts.

    The player owns its PlayState and heuristic table; the harness only sees
    the (row, col) plays it returns.
    """

    def __init__(
        self,
        config: Optional[PlayerConfig] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        verbose: bool = False
    ):
        """
        Initialize a Monte Carlo player.

        Args:
            config: Search and tuning configuration
            clock: Time source shared by tuning and search
            rng: Random source (seed it for reproducible play)
            verbose: Whether to show tuning progress
        """
        self.config = config or PlayerConfig()
        self.name = self.config.name
        self.clock = clock or MonotonicClock()
        self.rng = rng or random.Random()
        self.verbose = verbose

        self.state = PlayState()
        self.point_system: Optional[PointSystem] = None
        self.table: Optional[HeuristicTable] = None
        self.seed: Optional[HeuristicTable] = None
        self.tuner: Optional[TableTuner] = None

        # Statistics from setup and the most recent search
        self.setup_stats: Dict[str, Any] = {}
        self.last_stats: Dict[str, Any] = {}

        # (card, cell, stats) for every play of the current game
        self.history: List[Tuple[Card, int, Dict[str, Any]]] = []

    def set_point_system(self, point_system: PointSystem, millis: float) -> None:
        """
        Prepare a heuristic table for a point system.

        The table is seeded from the point values and then tuned until
        ``millis`` minus the safety margin has elapsed.

        Args:
            point_system: Scoring for the coming games
            millis: Setup time available
        """
        tuner_config = self.config.tuner
        start = self.clock.now_ms()
        deadline = start + millis - tuner_config.safety_margin_ms

        self.point_system = point_system
        self.seed = seed_table(point_system.hand_score, tuner_config.discount_draws)
        self.tuner = create_tuner(tuner_config, point_system, self.clock, self.rng, self.verbose)

        if self.tuner is not None and self.clock.now_ms() < deadline:
            self.table = self.tuner.tune(self.seed, deadline)
        else:
            self.table = self.seed.clone()

        self.setup_stats = {
            "point_system": point_system.name,
            "strategy": tuner_config.strategy,
            "evaluations": self.tuner.evaluations if self.tuner else 0,
            "time_elapsed_ms": self.clock.now_ms() - start,
        }
        logger.info(
            "%s ready for %s after %.0f ms (%s tuning)",
            self.name, point_system.name, self.setup_stats["time_elapsed_ms"], tuner_config.strategy,
        )

    def init(self) -> None:
        """Start a new game."""
        self.state.reset()
        self.history = []
        self.last_stats = {}

    def get_play(self, card: Card, millis_remaining: float) -> Tuple[int, int]:
        """
        Choose where to place a dealt card.

        Args:
            card: The card just dealt
            millis_remaining: Play time left for the rest of the game

        Returns:
            (row, col) of the chosen cell
        """
        if self.table is None or self.point_system is None:
            raise InvariantViolation("set_point_system must be called before get_play")

        cell, stats = search_move(
            self.state, card, self.table, millis_remaining, self.point_system,
            self.config.search, self.clock, self.rng,
        )
        self.state.apply_move(card, cell)

        self.last_stats = stats
        self.history.append((card, cell, stats))
        return cell_to_position(cell)

    def get_last_statistics(self) -> Dict[str, Any]:
        """
        Get statistics from the most recent search.

        Returns:
            Dictionary of search statistics
        """
        return self.last_stats

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.history = []

    def __str__(self) -> str:
        return f"{self.name} (Monte Carlo, depth {self.config.search.depth_limit}, {self.config.tuner.strategy} tuning)"


class RandomPlayer:
    """
    Baseline player that places every card in a uniformly random empty cell.
    """

    def __init__(self, rng: Optional[random.Random] = None, name: str = "Random"):
        self.rng = rng or random.Random()
        self.name = name
        self.state = PlayState()

    def set_point_system(self, point_system: PointSystem, millis: float) -> None:
        self.point_system = point_system

    def init(self) -> None:
        self.state.reset()

    def get_play(self, card: Card, millis_remaining: float) -> Tuple[int, int]:
        cell = self.rng.choice(self.state.legal_cells())
        self.state.apply_move(card, cell)
        return cell_to_position(cell)

    def __str__(self) -> str:
        return self.name
