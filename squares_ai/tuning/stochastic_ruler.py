"""
Stochastic-ruler tuning of heuristic tables.

The tuner walks through table space one neighbor at a time. A neighbor
replaces the current table only if it beats a freshly drawn random
threshold (the ruler) on every one of several short evaluations; the ruler
spans the worst and best values seen so far. Accepted neighbors that also
beat a fresh long re-check of the best table become the new best.

Early on neighbors change many entries by small amounts; as the deadline
approaches fewer entries change, each by a wider offset. The number of
trials a neighbor must pass grows at geometrically spaced iterations.
"""
from __future__ import annotations
from typing import Optional
import logging
import random

from tqdm import tqdm

from squares_ai.core.clock import Clock
from squares_ai.core.constants import NUM_PHASE_BUCKETS
from squares_ai.core.hands import PARTIAL_CATEGORIES
from squares_ai.core.scoring import PointSystem
from squares_ai.montecarlo.heuristics import HeuristicTable
from squares_ai.tuning.base import TableTuner
from squares_ai.tuning.config import StochasticRulerConfig

logger = logging.getLogger(__name__)


class StochasticRulerTuner(TableTuner):
    """
    Tunes a table with the stochastic-ruler method.
    """

    name = "stochastic_ruler"

    def __init__(
        self,
        point_system: PointSystem,
        config: Optional[StochasticRulerConfig] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        verbose: bool = False,
    ):
        super().__init__(point_system, clock, rng, verbose)
        self.config = config or StochasticRulerConfig()
        self.iterations = 0
        self.accepted = 0
        self.best_value = float("-inf")
        self.worst_value = float("inf")

    def tune(self, seed: HeuristicTable, deadline_ms: float) -> HeuristicTable:
        """
        Walk from the seed until the deadline.

        Args:
            seed: Starting table (not modified)
            deadline_ms: Clock reading at which tuning must stop

        Returns:
            The best table found
        """
        config = self.config
        start = self.clock.now_ms()

        current = seed.clone()
        best = current
        self.best_value = self.worst_value = self.evaluate(current, config.initial_games)
        logger.info("Stochastic ruler tuning: seeded table scores %.2f", self.best_value)

        trials = config.initial_trials
        next_bump = config.first_bump

        pbar = tqdm(total=config.max_iterations, desc="Iterations", disable=not self.verbose)
        while self.clock.now_ms() < deadline_ms:
            if config.max_iterations is not None and self.iterations >= config.max_iterations:
                break
            self.iterations += 1
            if self.iterations == next_bump:
                trials += 1
                next_bump *= config.bump_factor

            neighbor = self.neighbor(current, self.time_fraction(start, deadline_ms))
            if self._passes(neighbor, trials):
                current = neighbor
                self.accepted += 1
                value = self.evaluate(neighbor, config.confirm_games)
                self.worst_value = min(self.worst_value, value)
                # Average a fresh look at the incumbent into its stored estimate
                recheck = self.evaluate(best, config.confirm_games)
                self.worst_value = min(self.worst_value, recheck)
                self.best_value = (self.best_value + recheck) / 2
                if value > self.best_value:
                    best = neighbor
                    self.best_value = value
                    logger.info("Iteration %d: new best table scores %.2f", self.iterations, value)

            self.history.append({
                "iteration": self.iterations,
                "best": self.best_value,
                "worst": self.worst_value,
                "trials": trials,
                "accepted": self.accepted,
                "elapsed_ms": self.clock.now_ms() - start,
            })
            pbar.update(1)
            pbar.set_postfix({"best": self.best_value, "accepted": self.accepted})
            if self.iterations % config.log_every == 0:
                logger.info(
                    "Iteration %d: best %.2f, worst %.2f, %d accepted, %d trials",
                    self.iterations, self.best_value, self.worst_value, self.accepted, trials,
                )
        pbar.close()

        logger.info(
            "Stochastic ruler tuning finished after %d iterations: best %.2f",
            self.iterations, self.best_value,
        )
        return best

    def neighbor(self, table: HeuristicTable, fraction: float) -> HeuristicTable:
        """
        Propose a random neighbor of a table.

        Args:
            table: Current table (not modified)
            fraction: Share of the tuning window already used, in [0, 1]

        Returns:
            New HeuristicTable
        """
        config = self.config
        change_probability = 1.0 - fraction * config.change_probability_decay
        interval = int(fraction * config.interval_growth) + config.base_interval
        neighbor = table.clone()
        for bucket in range(NUM_PHASE_BUCKETS):
            for category in PARTIAL_CATEGORIES:
                if self.rng.random() < change_probability:
                    offset = self.rng.randrange(interval) - interval // 2
                    neighbor.set_bucket_value(
                        bucket, category, neighbor.bucket_value(bucket, category) + offset
                    )
        return neighbor

    def _passes(self, table: HeuristicTable, trials: int) -> bool:
        """Whether a table beats a fresh ruler draw on every trial."""
        for _ in range(trials):
            low, high = sorted((self.worst_value, self.best_value))
            threshold = self.rng.uniform(low, high)
            value = self.evaluate(table, self.config.trial_games)
            self.worst_value = min(self.worst_value, value)
            if threshold > value:
                return False
        return True
