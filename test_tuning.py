#!/usr/bin/env python
"""
Tests for the heuristic table tuners.

Tuning runs here are kept tiny (small populations, few games per
evaluation, capped generations) and driven by a ticking clock so every run
is reproducible.
"""
import random
import unittest

import numpy as np

from squares_ai.core.clock import TickingClock
from squares_ai.core.constants import MIN_HEURISTIC_VALUE, MAX_HEURISTIC_VALUE
from squares_ai.core.hands import COMPLETE_CATEGORIES
from squares_ai.core.scoring import PointSystem, PokerHand
from squares_ai.core.state import PlayState
from squares_ai.montecarlo.heuristics import seed_table
from squares_ai.tuning import (
    GeneticConfig, StochasticRulerConfig, TunerConfig, Population,
    GeneticTuner, StochasticRulerTuner, create_tuner, evaluate_table
)

COMPLETE_INDICES = [c.index for c in COMPLETE_CATEGORIES]
FAR_DEADLINE = 1e12


def small_genetic(**overrides):
    params = dict(population_size=6, games_per_evaluation=2, max_generations=4)
    params.update(overrides)
    return GeneticConfig(**params)


class AcceptingRuler(StochasticRulerTuner):
    """Ruler tuner that accepts every neighbor and records its evaluations."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def _passes(self, table, trials):
        return True

    def evaluate(self, table, num_games):
        self.calls.append((table, num_games))
        return super().evaluate(table, num_games)


class TuningTestCase(unittest.TestCase):
    """Shared fixtures."""

    def setUp(self):
        self.points = PointSystem.british()
        self.seed = seed_table(self.points.hand_score)

    def assert_valid_table(self, table):
        values = table.as_array()
        self.assertTrue(table.is_complete)
        self.assertGreaterEqual(values.min(), MIN_HEURISTIC_VALUE)
        self.assertLessEqual(values.max(), MAX_HEURISTIC_VALUE)
        # Complete hands keep their point values
        self.assertTrue(np.array_equal(
            values[:, COMPLETE_INDICES], self.seed.as_array()[:, COMPLETE_INDICES]
        ))


class TestEvaluateTable(TuningTestCase):
    """Test table fitness."""

    def test_zero_points_give_zero_fitness(self):
        zero = PointSystem.from_dict({hand.name: 0 for hand in PokerHand})
        table = seed_table(zero.hand_score)
        self.assertEqual(evaluate_table(table, zero, 5, random.Random(1)), 0.0)

    def test_state_is_reset(self):
        state = PlayState()
        fitness = evaluate_table(self.seed, self.points, 3, random.Random(1), state)
        self.assertEqual(state.played, 0)
        self.assertGreaterEqual(fitness, 0.0)

    def test_reproducible(self):
        first = evaluate_table(self.seed, self.points, 4, random.Random(6))
        second = evaluate_table(self.seed, self.points, 4, random.Random(6))
        self.assertEqual(first, second)

    def test_needs_games(self):
        with self.assertRaises(ValueError):
            evaluate_table(self.seed, self.points, 0, random.Random(1))


class TestPopulation(TuningTestCase):
    """Test population seeding and ordering."""

    def test_seeded_population(self):
        population = Population.seeded(self.seed, 10, 5, 10, random.Random(3))
        self.assertEqual(len(population), 10)
        for member in population.members[:5]:
            self.assertEqual(member.table, self.seed)
            self.assertIsNot(member.table, self.seed)
        self.assertTrue(any(member.table != self.seed for member in population.members[5:]))
        self.assertFalse(any(member.evaluated for member in population))

    def test_sort_puts_best_first(self):
        population = Population.seeded(self.seed, 4, 4, 0, random.Random(3))
        for member, fitness in zip(population, (1.0, 5.0, 3.0, 2.0)):
            member.assign(fitness)
        population.sort()
        self.assertEqual(list(population.fitnesses()), [5.0, 3.0, 2.0, 1.0])
        self.assertIs(population.best, population[0])
        self.assertAlmostEqual(population.mean_fitness(), 2.75)


class TestGeneticTuner(TuningTestCase):
    """Test the genetic algorithm."""

    def test_elite_fitness_never_drops(self):
        for run in range(3):
            config = small_genetic(reevaluate_elites=False)
            tuner = GeneticTuner(self.points, config, TickingClock(), random.Random(run))
            tuner.tune(self.seed, FAR_DEADLINE)
            best = [entry["best"] for entry in tuner.history]
            self.assertEqual(len(best), config.max_generations + 1)
            for earlier, later in zip(best, best[1:]):
                self.assertGreaterEqual(later, earlier)

    def test_returns_best_of_final_generation(self):
        tuner = GeneticTuner(self.points, small_genetic(), TickingClock(), random.Random(1))
        table = tuner.tune(self.seed, FAR_DEADLINE)
        self.assertIs(table, tuner.population[0].table)
        self.assertEqual(tuner.generations, 4)
        self.assert_valid_table(table)

    def test_deadline_stops_tuning(self):
        clock = TickingClock()
        config = small_genetic(max_generations=None)
        tuner = GeneticTuner(self.points, config, clock, random.Random(2))
        deadline = clock.now_ms() + 60
        table = tuner.tune(self.seed, deadline)
        self.assertGreaterEqual(clock.now_ms(), deadline)
        self.assertLess(tuner.generations, 60)
        self.assert_valid_table(table)

    def test_expired_deadline_returns_seed(self):
        clock = TickingClock(start_ms=100.0)
        tuner = GeneticTuner(self.points, small_genetic(), clock, random.Random(2))
        table = tuner.tune(self.seed, 0.0)
        self.assertEqual(table, self.seed)
        self.assertEqual(tuner.history, [])

    def test_next_generation_keeps_elites(self):
        config = small_genetic(population_size=10, elite_fraction=0.2)
        tuner = GeneticTuner(self.points, config, TickingClock(), random.Random(4))
        population = Population.seeded(self.seed, 10, 5, 10, random.Random(4))
        for rank, member in enumerate(population):
            member.assign(100.0 - rank)
        children = tuner.next_generation(population)
        self.assertEqual(len(children), 10)
        self.assertIs(children[0].table, population[0].table)
        self.assertIs(children[1].table, population[1].table)
        self.assertFalse(children[0].evaluated)
        self.assertTrue(all(child.table is not member.table
                            for child in children.members[2:] for member in population))

    def test_without_crossover_or_mutation(self):
        config = small_genetic(crossover=False, mutation=False, reevaluate_elites=False)
        tuner = GeneticTuner(self.points, config, TickingClock(), random.Random(5))
        population = Population.seeded(self.seed, 6, 6, 0, random.Random(5))
        for member in population:
            member.assign(1.0)
        children = tuner.next_generation(population)
        self.assertTrue(children[0].evaluated)
        for child in children.members[1:]:
            self.assertEqual(child.table, self.seed)

    def test_config_validation(self):
        with self.assertRaises(ValueError):
            GeneticConfig(population_size=1)
        with self.assertRaises(ValueError):
            GeneticConfig(elite_fraction=1.0)
        with self.assertRaises(ValueError):
            GeneticConfig(games_per_evaluation=0)
        self.assertEqual(GeneticConfig(population_size=20, elite_fraction=0.0).num_elites, 1)
        self.assertEqual(GeneticConfig(population_size=20).num_clones, 10)


class TestStochasticRulerTuner(TuningTestCase):
    """Test the stochastic-ruler hill climber."""

    def small_config(self, **overrides):
        params = dict(initial_games=4, trial_games=2, confirm_games=4, first_bump=3, max_iterations=6)
        params.update(overrides)
        return StochasticRulerConfig(**params)

    def test_runs_capped_iterations(self):
        tuner = StochasticRulerTuner(self.points, self.small_config(), TickingClock(), random.Random(1))
        table = tuner.tune(self.seed, FAR_DEADLINE)
        self.assertEqual(tuner.iterations, 6)
        self.assertEqual(len(tuner.history), 6)
        self.assertLessEqual(tuner.worst_value, tuner.best_value)
        self.assert_valid_table(table)

    def test_trial_count_grows_geometrically(self):
        config = self.small_config(first_bump=2, bump_factor=2, max_iterations=8)
        tuner = StochasticRulerTuner(self.points, config, TickingClock(), random.Random(2))
        tuner.tune(self.seed, FAR_DEADLINE)
        trials = [entry["trials"] for entry in tuner.history]
        # Bumps at iterations 2, 4 and 8
        self.assertEqual(trials, [2, 3, 3, 4, 4, 4, 4, 5])

    def test_deadline_stops_tuning(self):
        clock = TickingClock()
        config = self.small_config(max_iterations=None)
        tuner = StochasticRulerTuner(self.points, config, clock, random.Random(3))
        deadline = clock.now_ms() + 40
        table = tuner.tune(self.seed, deadline)
        self.assertGreaterEqual(clock.now_ms(), deadline)
        self.assert_valid_table(table)

    def test_neighbor_offsets_follow_schedule(self):
        tuner = StochasticRulerTuner(self.points, self.small_config(), TickingClock(), random.Random(4))
        early = tuner.neighbor(self.seed, 0.0)
        diff = early.as_array().astype(int) - self.seed.as_array().astype(int)
        self.assertTrue(set(np.unique(diff)) <= {-1, 0})
        late = tuner.neighbor(self.seed, 1.0)
        diff = late.as_array().astype(int) - self.seed.as_array().astype(int)
        self.assertGreaterEqual(diff.min(), -11)
        self.assertLessEqual(diff.max(), 10)
        self.assertTrue(np.all(diff[:, COMPLETE_INDICES] == 0))

    def test_incumbent_best_is_rechecked(self):
        config = self.small_config(confirm_games=5, max_iterations=5)
        tuner = AcceptingRuler(self.points, config, TickingClock(), random.Random(5))
        table = tuner.tune(self.seed, FAR_DEADLINE)
        self.assertEqual(tuner.accepted, 5)
        self.assertEqual(tuner.calls[0][1], config.initial_games)
        confirmed = [scored for scored, games in tuner.calls if games == config.confirm_games]
        self.assertEqual(len(confirmed), 2 * tuner.accepted)
        known = [tuner.calls[0][0]]
        for neighbor, incumbent in zip(confirmed[::2], confirmed[1::2]):
            self.assertIsNot(neighbor, incumbent)
            self.assertTrue(any(incumbent is earlier for earlier in known))
            known.append(neighbor)
        self.assertTrue(any(table is earlier for earlier in known))
        self.assertLessEqual(tuner.worst_value, tuner.best_value)

    def test_config_validation(self):
        with self.assertRaises(ValueError):
            StochasticRulerConfig(trial_games=0)
        with self.assertRaises(ValueError):
            StochasticRulerConfig(bump_factor=1)


class TestCreateTuner(TuningTestCase):
    """Test tuner selection by configuration."""

    def test_strategies(self):
        self.assertIsInstance(create_tuner(TunerConfig(strategy="genetic"), self.points), GeneticTuner)
        self.assertIsInstance(
            create_tuner(TunerConfig(strategy="stochastic_ruler"), self.points), StochasticRulerTuner
        )
        self.assertIsNone(create_tuner(TunerConfig(strategy="none"), self.points))

    def test_config_round_trip(self):
        config = TunerConfig(strategy="stochastic_ruler", discount_draws=True,
                             genetic=GeneticConfig(population_size=8))
        self.assertEqual(TunerConfig.from_dict(config.to_dict()), config)
        with self.assertRaises(ValueError):
            TunerConfig(strategy="annealing")


if __name__ == "__main__":
    unittest.main()
