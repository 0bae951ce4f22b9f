"""
Configuration for the Monte Carlo move selector and player.

This module defines the rollout depth and time-splitting parameters used at
play time, and the player configuration that bundles them with the tuner
settings used during setup.
"""
from dataclasses import dataclass, field, fields

from squares_ai.tuning.config import TunerConfig


@dataclass
class SearchConfig:
    """
    Configuration parameters for the greedy Monte Carlo move selector.
    """
    depth_limit: int = 2
    """Greedy placements simulated per rollout after the candidate move"""

    min_cell_budget_ms: float = 0.0
    """Lower bound on the time given to each candidate cell"""

    reserve_last_move: bool = True
    """Leave the forced last placement out of the per-turn time split"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.depth_limit < 0:
            raise ValueError("depth_limit must be non-negative")

        if self.min_cell_budget_ms < 0:
            raise ValueError("min_cell_budget_ms must be non-negative")

    @classmethod
    def default(cls) -> 'SearchConfig':
        """
        Get the default configuration.

        Returns:
            Default SearchConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'SearchConfig':
        """
        Get a configuration with shallow rollouts (more samples per cell).

        Returns:
            Fast SearchConfig object
        """
        return cls(depth_limit=1)

    @classmethod
    def strong(cls) -> 'SearchConfig':
        """
        Get a configuration with deeper rollouts.

        Returns:
            Strong SearchConfig object
        """
        return cls(depth_limit=4)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'SearchConfig':
        valid_params = {k: v for k, v in config_dict.items()
                        if k in cls.__dataclass_fields__}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{k}={v}" for k, v in self.to_dict().items())
        return f"SearchConfig({params})"


@dataclass
class PlayerConfig:
    """
    Everything a MonteCarloPlayer needs: search and tuning settings.
    """
    search: SearchConfig = field(default_factory=SearchConfig)
    """Play-time move selection"""

    tuner: TunerConfig = field(default_factory=TunerConfig)
    """Setup-time table tuning"""

    name: str = "MonteCarlo"
    """Player name shown in game records"""

    def __post_init__(self):
        if not self.name:
            raise ValueError("name must not be empty")

    @classmethod
    def default(cls) -> 'PlayerConfig':
        return cls()

    @classmethod
    def fast(cls) -> 'PlayerConfig':
        return cls(search=SearchConfig.fast(), tuner=TunerConfig.fast())

    @classmethod
    def strong(cls) -> 'PlayerConfig':
        return cls(search=SearchConfig.strong(), tuner=TunerConfig.strong())

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'PlayerConfig':
        """
        Create a configuration from a nested dictionary.

        Args:
            config_dict: Dictionary with optional "search", "tuner" and "name" keys

        Returns:
            PlayerConfig object
        """
        params = {}
        if "search" in config_dict:
            params["search"] = SearchConfig.from_dict(config_dict["search"])
        if "tuner" in config_dict:
            params["tuner"] = TunerConfig.from_dict(config_dict["tuner"])
        if "name" in config_dict:
            params["name"] = config_dict["name"]
        return cls(**params)

    def to_dict(self) -> dict:
        return {
            "search": self.search.to_dict(),
            "tuner": self.tuner.to_dict(),
            "name": self.name,
        }
