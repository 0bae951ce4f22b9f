"""
Construction of table tuners from configuration.
"""
from typing import Optional
import random

from squares_ai.core.clock import Clock
from squares_ai.core.scoring import PointSystem
from squares_ai.tuning.base import TableTuner
from squares_ai.tuning.config import TunerConfig
from squares_ai.tuning.genetic import GeneticTuner
from squares_ai.tuning.stochastic_ruler import StochasticRulerTuner


def create_tuner(
    config: TunerConfig,
    point_system: PointSystem,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
    verbose: bool = False,
) -> Optional[TableTuner]:
    """
    Create the tuner selected by a configuration.

    Args:
        config: Tuner configuration
        point_system: Scoring the table is tuned for
        clock: Time source for the deadline
        rng: Random source
        verbose: Whether to show a progress bar

    Returns:
        A TableTuner, or None when the strategy is "none"
    """
    if config.strategy == "genetic":
        return GeneticTuner(point_system, config.genetic, clock, rng, verbose)
    if config.strategy == "stochastic_ruler":
        return StochasticRulerTuner(point_system, config.stochastic_ruler, clock, rng, verbose)
    return None
