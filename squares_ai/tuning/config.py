"""
Configuration for heuristic table tuning.

This module defines the parameters of the two tuning strategies (a genetic
algorithm and a stochastic-ruler hill climber) and the wrapper that selects
between them.
"""
from dataclasses import dataclass, field, fields
from typing import Optional, Literal, ClassVar, Tuple

from squares_ai.core.constants import DEFAULT_SAFETY_MARGIN_MILLIS


@dataclass
class GeneticConfig:
    """
    Parameters for the genetic-algorithm tuner.

    Fractions are of ``population_size``; at least one member is always kept
    as an elite.
    """
    population_size: int = 20
    """Number of tables in each generation"""

    clone_fraction: float = 0.5
    """Fraction of the first generation that are exact copies of the seeded table"""

    elite_fraction: float = 0.05
    """Fraction of each generation carried over unchanged"""

    crossover: bool = True
    """Whether children are produced by uniform crossover of two parents"""

    mutation: bool = True
    """Whether non-elite children are mutated"""

    num_mutations: int = 2
    """Perturbations applied to each non-elite child"""

    mutation_step: int = 2
    """Largest absolute change made by one perturbation"""

    seed_spread: int = 10
    """Largest absolute offset used to perturb the first generation"""

    games_per_evaluation: int = 10
    """Full simulated games averaged into one fitness value"""

    reevaluate_elites: bool = True
    """Whether surviving elites are re-scored each generation"""

    max_generations: Optional[int] = None
    """Optional cap on generations (None = run until the deadline)"""

    log_every: int = 10
    """Generations between INFO summaries"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.population_size < 2:
            raise ValueError("population_size must be at least 2")

        if not 0.0 <= self.clone_fraction <= 1.0:
            raise ValueError("clone_fraction must be between 0 and 1")

        if not 0.0 <= self.elite_fraction < 1.0:
            raise ValueError("elite_fraction must be in [0, 1)")

        if self.num_mutations < 0:
            raise ValueError("num_mutations must be non-negative")

        if self.mutation_step < 0:
            raise ValueError("mutation_step must be non-negative")

        if self.seed_spread < 0:
            raise ValueError("seed_spread must be non-negative")

        if self.games_per_evaluation <= 0:
            raise ValueError("games_per_evaluation must be positive")

        if self.max_generations is not None and self.max_generations < 0:
            raise ValueError("max_generations must be non-negative or None")

        if self.log_every <= 0:
            raise ValueError("log_every must be positive")

    @property
    def num_elites(self) -> int:
        """Members kept unchanged each generation (at least one)."""
        return max(1, min(int(self.population_size * self.elite_fraction), self.population_size - 1))

    @property
    def num_clones(self) -> int:
        """Unperturbed copies of the seeded table in the first generation."""
        return int(self.population_size * self.clone_fraction)

    @classmethod
    def default(cls) -> 'GeneticConfig':
        return cls()

    @classmethod
    def fast(cls) -> 'GeneticConfig':
        """
        Get a configuration for short setup times.

        Returns:
            Fast GeneticConfig object
        """
        return cls(population_size=10, games_per_evaluation=5)

    @classmethod
    def strong(cls) -> 'GeneticConfig':
        """
        Get a configuration for long setup times (less noisy fitness).

        Returns:
            Strong GeneticConfig object
        """
        return cls(population_size=40, games_per_evaluation=20)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'GeneticConfig':
        valid_params = {k: v for k, v in config_dict.items()
                        if k in cls.__dataclass_fields__}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class StochasticRulerConfig:
    """
    Parameters for the stochastic-ruler tuner.

    The number of trials a neighbor must pass starts at ``initial_trials``
    and grows by one at iterations ``first_bump``,
    ``first_bump * bump_factor``, ``first_bump * bump_factor ** 2`` and so on.
    """
    initial_games: int = 100
    """Games used to evaluate the seeded table"""

    trial_games: int = 10
    """Games per acceptance trial"""

    confirm_games: int = 500
    """Games used to re-check an accepted neighbor against the best table"""

    initial_trials: int = 2
    """Trials a neighbor must pass at the start"""

    first_bump: int = 100
    """Iteration at which the trial count first grows"""

    bump_factor: int = 5
    """Growth factor between trial-count checkpoints"""

    base_interval: int = 2
    """Width of the neighbor offset interval at the start"""

    interval_growth: int = 20
    """Extra interval width reached when the deadline arrives"""

    change_probability_decay: float = 0.5
    """Drop in per-entry change probability between start and deadline"""

    max_iterations: Optional[int] = None
    """Optional cap on proposed neighbors (None = run until the deadline)"""

    log_every: int = 100
    """Iterations between INFO summaries"""

    def __post_init__(self):
        """Validate configuration parameters."""
        for name in ("initial_games", "trial_games", "confirm_games", "initial_trials", "first_bump"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

        if self.bump_factor < 2:
            raise ValueError("bump_factor must be at least 2")

        if self.base_interval <= 0:
            raise ValueError("base_interval must be positive")

        if self.interval_growth < 0:
            raise ValueError("interval_growth must be non-negative")

        if not 0.0 <= self.change_probability_decay <= 1.0:
            raise ValueError("change_probability_decay must be between 0 and 1")

        if self.max_iterations is not None and self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative or None")

        if self.log_every <= 0:
            raise ValueError("log_every must be positive")

    @classmethod
    def default(cls) -> 'StochasticRulerConfig':
        return cls()

    @classmethod
    def fast(cls) -> 'StochasticRulerConfig':
        return cls(initial_games=20, trial_games=5, confirm_games=50)

    @classmethod
    def strong(cls) -> 'StochasticRulerConfig':
        return cls(initial_games=200, trial_games=20, confirm_games=1000)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'StochasticRulerConfig':
        valid_params = {k: v for k, v in config_dict.items()
                        if k in cls.__dataclass_fields__}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class TunerConfig:
    """
    Selects and configures the table tuner run during player setup.
    """
    strategy: Literal["genetic", "stochastic_ruler", "none"] = "genetic"
    """Tuning strategy ('none' keeps the seeded table)"""

    genetic: GeneticConfig = field(default_factory=GeneticConfig)
    """Parameters for the genetic strategy"""

    stochastic_ruler: StochasticRulerConfig = field(default_factory=StochasticRulerConfig)
    """Parameters for the stochastic-ruler strategy"""

    safety_margin_ms: float = DEFAULT_SAFETY_MARGIN_MILLIS
    """Setup time left unused so the player returns before its deadline"""

    discount_draws: bool = False
    """Halve the seeded value of four-card straight and flush draws"""

    STRATEGIES: ClassVar[Tuple[str, ...]] = ("genetic", "stochastic_ruler", "none")

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.strategy not in self.STRATEGIES:
            raise ValueError(f"strategy must be one of {', '.join(self.STRATEGIES)}")

        if self.safety_margin_ms < 0:
            raise ValueError("safety_margin_ms must be non-negative")

    @classmethod
    def default(cls) -> 'TunerConfig':
        return cls()

    @classmethod
    def fast(cls) -> 'TunerConfig':
        return cls(
            genetic=GeneticConfig.fast(),
            stochastic_ruler=StochasticRulerConfig.fast(),
        )

    @classmethod
    def strong(cls) -> 'TunerConfig':
        return cls(
            genetic=GeneticConfig.strong(),
            stochastic_ruler=StochasticRulerConfig.strong(),
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'TunerConfig':
        """
        Create a configuration from a (possibly nested) dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            TunerConfig object
        """
        params = {k: v for k, v in config_dict.items()
                  if k in cls.__dataclass_fields__}
        if isinstance(params.get("genetic"), dict):
            params["genetic"] = GeneticConfig.from_dict(params["genetic"])
        if isinstance(params.get("stochastic_ruler"), dict):
            params["stochastic_ruler"] = StochasticRulerConfig.from_dict(params["stochastic_ruler"])
        return cls(**params)

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy,
            "genetic": self.genetic.to_dict(),
            "stochastic_ruler": self.stochastic_ruler.to_dict(),
            "safety_margin_ms": self.safety_margin_ms,
            "discount_draws": self.discount_draws,
        }
