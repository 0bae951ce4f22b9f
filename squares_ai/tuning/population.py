"""
Populations of candidate heuristic tables for the genetic tuner.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Sequence
import random

import numpy as np

from squares_ai.montecarlo.heuristics import HeuristicTable


@dataclass
class Member:
    """A candidate table and its most recent fitness."""
    table: HeuristicTable
    fitness: float = float("-inf")
    evaluated: bool = False

    def assign(self, fitness: float) -> None:
        self.fitness = fitness
        self.evaluated = True


class Population:
    """
    An ordered collection of members.

    After ``sort`` the fittest member is first. Ties keep their previous
    relative order.
    """

    def __init__(self, members: Sequence[Member]):
        if not members:
            raise ValueError("A population needs at least one member")
        self.members: List[Member] = list(members)

    @classmethod
    def seeded(
        cls,
        seed: HeuristicTable,
        size: int,
        num_clones: int,
        spread: int,
        rng: random.Random,
    ) -> 'Population':
        """
        Create the first generation from a seeded table.

        Args:
            seed: Starting table
            size: Number of members
            num_clones: Members that are exact copies of the seed
            spread: Largest per-category offset for the other members
            rng: Random source

        Returns:
            Unevaluated Population
        """
        members = []
        for i in range(size):
            if i < num_clones:
                members.append(Member(seed.clone()))
            else:
                members.append(Member(seed.randomize(rng, spread)))
        return cls(members)

    def sort(self) -> None:
        """Order members by fitness, best first."""
        self.members.sort(key=lambda member: member.fitness, reverse=True)

    @property
    def best(self) -> Member:
        return max(self.members, key=lambda member: member.fitness)

    def fitnesses(self) -> np.ndarray:
        return np.array([member.fitness for member in self.members], dtype=float)

    def mean_fitness(self) -> float:
        return float(np.mean(self.fitnesses()))

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[Member]:
        return iter(self.members)

    def __getitem__(self, index: int) -> Member:
        return self.members[index]
