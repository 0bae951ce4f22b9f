"""
Genetic-algorithm tuning of heuristic tables.

Each generation is sorted by fitness. The best few members survive
unchanged; every other slot is filled by a child of two parents drawn from
a pool that shrinks as the slots are filled, so fitter members are more
likely to reproduce. Children get a few small random mutations before they
are evaluated.
"""
from __future__ import annotations
from typing import Optional
import logging
import random

from tqdm import tqdm

from squares_ai.core.clock import Clock
from squares_ai.core.scoring import PointSystem
from squares_ai.montecarlo.heuristics import HeuristicTable
from squares_ai.tuning.base import TableTuner
from squares_ai.tuning.config import GeneticConfig
from squares_ai.tuning.population import Member, Population

logger = logging.getLogger(__name__)


class GeneticTuner(TableTuner):
    """
    Tunes a table with a generational genetic algorithm.
    """

    name = "genetic"

    def __init__(
        self,
        point_system: PointSystem,
        config: Optional[GeneticConfig] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        verbose: bool = False,
    ):
        super().__init__(point_system, clock, rng, verbose)
        self.config = config or GeneticConfig()
        self.generations = 0
        self.population: Optional[Population] = None

    def tune(self, seed: HeuristicTable, deadline_ms: float) -> HeuristicTable:
        """
        Evolve tables from the seed until the deadline.

        A generation interrupted by the deadline is discarded and the best
        member of the last complete generation is returned.

        Args:
            seed: Starting table (not modified)
            deadline_ms: Clock reading at which tuning must stop

        Returns:
            The fittest table of the final generation
        """
        config = self.config
        start = self.clock.now_ms()
        logger.info(
            "Genetic tuning: population %d, %d elites, %d games per evaluation",
            config.population_size, config.num_elites, config.games_per_evaluation,
        )

        population = Population.seeded(
            seed, config.population_size, config.num_clones, config.seed_spread, self.rng
        )
        if not self._evaluate(population, deadline_ms):
            logger.info("Deadline reached before the first generation was evaluated")
            return seed.clone()
        population.sort()
        self.population = population
        self._record(start)

        pbar = tqdm(total=config.max_generations, desc="Generations", disable=not self.verbose)
        while self.clock.now_ms() < deadline_ms:
            if config.max_generations is not None and self.generations >= config.max_generations:
                break
            candidate = self.next_generation(population)
            if not self._evaluate(candidate, deadline_ms):
                break
            candidate.sort()
            population = candidate
            self.population = population
            self.generations += 1
            entry = self._record(start)

            pbar.update(1)
            pbar.set_postfix({"best": entry["best"], "mean": entry["mean"]})
            if self.generations % config.log_every == 0:
                logger.info(
                    "Generation %d: best %.2f, mean %.2f",
                    self.generations, entry["best"], entry["mean"],
                )
        pbar.close()

        best = population[0]
        logger.info(
            "Genetic tuning finished after %d generations: best fitness %.2f",
            self.generations, best.fitness,
        )
        return best.table

    def next_generation(self, population: Population) -> Population:
        """
        Breed the next generation from a sorted population.

        Args:
            population: Current generation, best first

        Returns:
            New Population with elites first
        """
        config = self.config
        size = len(population)
        num_elites = min(config.num_elites, size - 1)

        members = []
        for elite in population.members[:num_elites]:
            survivor = Member(elite.table, elite.fitness, elite.evaluated)
            if config.reevaluate_elites:
                survivor.evaluated = False
            members.append(survivor)

        for i in range(num_elites, size):
            # The lowest members drop out of the parent pool as slots fill
            pool = min(size, size - i + 1)
            if config.crossover:
                first = population[self.rng.randrange(pool)]
                second = population[self.rng.randrange(pool)]
                child = first.table.merge(second.table, self.rng)
            else:
                low = min(num_elites, pool - 1)
                child = population[self.rng.randrange(low, pool)].table.clone()
            if config.mutation:
                child.mutate(self.rng, config.num_mutations, config.mutation_step)
            members.append(Member(child))

        return Population(members)

    def _evaluate(self, population: Population, deadline_ms: float) -> bool:
        """Evaluate unscored members; False if the deadline interrupted."""
        for member in population:
            if member.evaluated:
                continue
            if self.clock.now_ms() >= deadline_ms:
                return False
            member.assign(self.evaluate(member.table, self.config.games_per_evaluation))
        return True

    def _record(self, start_ms: float) -> dict:
        fitnesses = self.population.fitnesses()
        entry = {
            "generation": self.generations,
            "best": float(fitnesses.max()),
            "mean": float(fitnesses.mean()),
            "worst": float(fitnesses.min()),
            "elapsed_ms": self.clock.now_ms() - start_ms,
        }
        self.history.append(entry)
        return entry
