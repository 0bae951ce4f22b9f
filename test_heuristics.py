#!/usr/bin/env python
"""
Tests for heuristic tables and their seeding.
"""
import random
import unittest

import numpy as np

from squares_ai.core.cards import parse_cards
from squares_ai.core.constants import MIN_HEURISTIC_VALUE, MAX_HEURISTIC_VALUE
from squares_ai.core.exceptions import UnseededTableError
from squares_ai.core.hands import (
    HandCategory, CATEGORIES, COMPLETE_CATEGORIES, PARTIAL_CATEGORIES, classify
)
from squares_ai.core.scoring import PointSystem, PokerHand
from squares_ai.montecarlo.heuristics import (
    HeuristicTable, seed_table, bucket_for_turn, clamp, REACHABLE, INSIDE_VARIANTS
)

H = HandCategory
PARTIAL_INDICES = [c.index for c in PARTIAL_CATEGORIES]
COMPLETE_INDICES = [c.index for c in COMPLETE_CATEGORIES]


def uniform_points(value):
    return PointSystem.from_dict({hand.name: value for hand in PokerHand}, name="Uniform")


class TestBuckets(unittest.TestCase):
    """Test the turn to phase bucket mapping."""

    def test_bucket_boundaries(self):
        self.assertEqual(bucket_for_turn(-1), 0)
        self.assertEqual(bucket_for_turn(0), 0)
        self.assertEqual(bucket_for_turn(9), 0)
        self.assertEqual(bucket_for_turn(10), 1)
        self.assertEqual(bucket_for_turn(19), 1)
        self.assertEqual(bucket_for_turn(20), 2)
        self.assertEqual(bucket_for_turn(24), 2)

    def test_clamp(self):
        self.assertEqual(clamp(1000), MAX_HEURISTIC_VALUE)
        self.assertEqual(clamp(-1000), MIN_HEURISTIC_VALUE)
        self.assertEqual(clamp(5), 5)


class TestSeeding(unittest.TestCase):
    """Test the optimistic seeding recursion."""

    def setUp(self):
        self.american = PointSystem.american()
        self.table = seed_table(self.american.hand_score)

    def test_every_partial_category_has_successors(self):
        for category in PARTIAL_CATEGORIES:
            self.assertTrue(category in REACHABLE or category in INSIDE_VARIANTS, category)

    def test_table_is_complete(self):
        self.assertTrue(self.table.is_complete)

    def test_complete_hands_take_point_values(self):
        for category in COMPLETE_CATEGORIES:
            self.assertEqual(self.table.get(0, category), self.american.hand_score(category.poker_hand))

    def test_partial_values(self):
        expected = {
            H.ROYAL_FLUSH4: 100, H.STRAIGHT_FLUSH4: 75, H.INSIDE_STRAIGHT_FLUSH4: 75,
            H.FOUR_OF_A_KIND4: 50, H.FLUSH4: 20, H.STRAIGHT4: 15, H.INSIDE_STRAIGHT4: 15,
            H.THREE_OF_A_KIND4: 50, H.TWO_PAIR4: 25, H.ONE_PAIR4: 10, H.HIGH_CARD4: 2,
            H.ROYAL_FLUSH3: 100, H.FLUSH3: 20, H.THREE_OF_A_KIND3: 50, H.ONE_PAIR3: 50,
            H.HIGH_CARD3: 10, H.ONE_PAIR2: 50, H.HIGH_CARD2: 50,
            H.ONE_CARD: 100, H.ZERO_CARDS: 100,
        }
        for category, value in expected.items():
            self.assertEqual(self.table.get(0, category), value, category)

    def test_draws_count_off_suit_completions(self):
        points = PointSystem.from_dict({"STRAIGHT": 100}, name="Straights")
        table = seed_table(points.hand_score)
        self.assertEqual(classify(parse_cards("TS JS QS KS")), H.ROYAL_FLUSH4)
        self.assertEqual(classify(parse_cards("TS JS QS KS AH")), H.STRAIGHT5)
        self.assertEqual(classify(parse_cards("5D 6D 7D 8D 9C")), H.STRAIGHT5)
        for category in (H.ROYAL_FLUSH4, H.STRAIGHT_FLUSH4, H.INSIDE_STRAIGHT_FLUSH4,
                         H.ROYAL_FLUSH3, H.STRAIGHT_FLUSH3):
            self.assertEqual(table.get(0, category), 100, category)
        self.assertEqual(table.get(0, H.FLUSH4), 0)

    def test_buckets_start_equal(self):
        values = self.table.as_array()
        self.assertTrue(np.array_equal(values[0], values[1]))
        self.assertTrue(np.array_equal(values[0], values[2]))

    def test_discount_draws(self):
        table = seed_table(self.american.hand_score, discount_draws=True)
        self.assertEqual(table.get(0, H.FLUSH4), 10)
        self.assertEqual(table.get(0, H.STRAIGHT4), 8)
        self.assertEqual(table.get(0, H.INSIDE_STRAIGHT4), 8)
        self.assertEqual(table.get(0, H.STRAIGHT_FLUSH4), 38)
        self.assertEqual(table.get(0, H.ROYAL_FLUSH4), 50)
        # Smaller lines are derived from the discounted draws
        self.assertEqual(table.get(0, H.ROYAL_FLUSH3), 50)
        self.assertEqual(table.get(0, H.FLUSH3), 10)
        # Non-draw categories are unchanged
        self.assertEqual(table.get(0, H.THREE_OF_A_KIND4), 50)

    def test_discount_rounds_toward_zero(self):
        table = seed_table(uniform_points(-8).hand_score, discount_draws=True)
        self.assertEqual(table.get(0, H.FLUSH4), -3)
        self.assertEqual(table.get(0, H.HIGH_CARD4), -8)

    def test_seeding_clamps(self):
        points = PointSystem.from_dict({"ROYAL_FLUSH": 500, "HIGH_CARD": -500})
        table = seed_table(points.hand_score)
        self.assertEqual(table.get(0, H.ROYAL_FLUSH5), MAX_HEURISTIC_VALUE)
        self.assertEqual(table.get(0, H.HIGH_CARD5), MIN_HEURISTIC_VALUE)
        self.assertEqual(table.get(0, H.ROYAL_FLUSH4), MAX_HEURISTIC_VALUE)


class TestHeuristicTable(unittest.TestCase):
    """Test table access and the tuning operations."""

    def setUp(self):
        self.rng = random.Random(7)
        self.seed = seed_table(PointSystem.american().hand_score)

    def test_unseeded_lookup_fails(self):
        table = HeuristicTable()
        self.assertFalse(table.is_complete)
        with self.assertRaises(UnseededTableError):
            table.get(0, H.FLUSH4)
        with self.assertRaises(UnseededTableError):
            table.values_for_turn(0)
        table.put(0, H.FLUSH4, 3)
        with self.assertRaises(UnseededTableError):
            table.values_for_turn(0)

    def test_put_clamps_and_invalidates_cache(self):
        table = self.seed.clone()
        before = table.values_for_turn(12)
        table.put(12, H.FLUSH3, 1000)
        after = table.values_for_turn(12)
        self.assertEqual(after[H.FLUSH3.index], MAX_HEURISTIC_VALUE)
        self.assertNotEqual(before, after)
        # Other buckets are untouched
        self.assertEqual(table.get(0, H.FLUSH3), self.seed.get(0, H.FLUSH3))
        table.put(12, H.FLUSH3, -1000)
        self.assertEqual(table.get(15, H.FLUSH3), MIN_HEURISTIC_VALUE)

    def test_clone_is_independent(self):
        copy = self.seed.clone()
        copy.put(0, H.FLUSH2, -1)
        self.assertNotEqual(copy, self.seed)
        self.assertEqual(self.seed.clone(), self.seed)

    def test_randomize_uses_one_offset_per_category(self):
        child = self.seed.randomize(self.rng, spread=10)
        diff = child.as_array().astype(int) - self.seed.as_array().astype(int)
        for index in PARTIAL_INDICES:
            self.assertEqual(diff[0, index], diff[1, index])
            self.assertEqual(diff[0, index], diff[2, index])
            self.assertLessEqual(abs(diff[0, index]), 10)
        self.assertTrue(np.all(diff[:, COMPLETE_INDICES] == 0))

    def test_merge_takes_whole_categories(self):
        other = self.seed.randomize(self.rng, spread=10)
        other.mutate(self.rng, num_mutations=50, step=5)
        child = self.seed.merge(other, self.rng)
        mine, theirs, values = self.seed.as_array(), other.as_array(), child.as_array()
        for index in PARTIAL_INDICES:
            column = values[:, index]
            self.assertTrue(
                np.array_equal(column, mine[:, index]) or np.array_equal(column, theirs[:, index]),
                CATEGORIES[index],
            )
        self.assertTrue(np.array_equal(values[:, COMPLETE_INDICES], mine[:, COMPLETE_INDICES]))

    def test_mutate_changes_few_partial_entries(self):
        table = self.seed.clone()
        table.mutate(self.rng, num_mutations=2, step=2)
        diff = table.as_array().astype(int) - self.seed.as_array().astype(int)
        self.assertLessEqual(np.count_nonzero(diff), 2)
        self.assertLessEqual(np.abs(diff).max(), 4)
        self.assertTrue(np.all(diff[:, COMPLETE_INDICES] == 0))

    def test_values_stay_in_range(self):
        extreme = seed_table(uniform_points(127).hand_score)
        low = seed_table(uniform_points(-128).hand_score)
        population = [extreme, low, self.seed]
        for _ in range(300):
            operation = self.rng.randrange(3)
            table = self.rng.choice(population)
            if operation == 0:
                table = table.randomize(self.rng, spread=50)
            elif operation == 1:
                table = table.merge(self.rng.choice(population), self.rng)
            else:
                table = table.clone()
                table.mutate(self.rng, num_mutations=10, step=40)
            values = table.as_array()
            self.assertGreaterEqual(values.min(), MIN_HEURISTIC_VALUE)
            self.assertLessEqual(values.max(), MAX_HEURISTIC_VALUE)
            self.assertTrue(table.is_complete)
            population.append(table)

    def test_str_lists_every_category(self):
        text = str(self.seed)
        lines = text.splitlines()
        self.assertEqual(len(lines), 4)
        self.assertEqual(len(lines[0].split()), 40)


if __name__ == "__main__":
    unittest.main()
