#!/usr/bin/env python
"""
Tests for the time-budgeted move selector.
"""
import random
import unittest

from squares_ai.core.cards import ALL_CARDS, shuffled_deck
from squares_ai.core.clock import Clock, TickingClock
from squares_ai.core.constants import NUM_CELLS, ROW_CELLS, COLUMN_CELLS
from squares_ai.core.exceptions import BoardFullError
from squares_ai.core.scoring import PointSystem, PokerHand, classify_hand
from squares_ai.core.state import PlayState
from squares_ai.montecarlo.config import SearchConfig
from squares_ai.montecarlo.heuristics import seed_table
from squares_ai.montecarlo.selector import cell_budget, search_move, select_move

TEST_POINTS = {
    "HIGH_CARD": 0, "ONE_PAIR": 1, "TWO_PAIR": 3, "THREE_OF_A_KIND": 6,
    "STRAIGHT": 12, "FLUSH": 5, "FULL_HOUSE": 10, "FOUR_OF_A_KIND": 16,
    "STRAIGHT_FLUSH": 30, "ROYAL_FLUSH": 50,
}


class ScriptedClock(Clock):
    """Replays fixed readings, then jumps 1000 ms per reading."""

    def __init__(self, readings):
        self.readings = list(readings)
        self.current = 0.0

    def now_ms(self):
        if self.readings:
            self.current = self.readings.pop(0)
        else:
            self.current += 1000.0
        return self.current


class TestCellBudget(unittest.TestCase):
    """Test splitting the game budget across turns and cells."""

    def test_split_reserves_last_move(self):
        state = PlayState()
        self.assertAlmostEqual(cell_budget(state, 25, 2400, SearchConfig()), 4.0)
        config = SearchConfig(reserve_last_move=False)
        self.assertAlmostEqual(cell_budget(state, 25, 2500, config), 4.0)

    def test_floor_and_negative_budget(self):
        state = PlayState()
        self.assertEqual(cell_budget(state, 25, -50, SearchConfig()), 0.0)
        self.assertEqual(cell_budget(state, 25, 0, SearchConfig(min_cell_budget_ms=2.5)), 2.5)


class TestSearchMove(unittest.TestCase):
    """Test move selection."""

    def setUp(self):
        self.points = PointSystem.from_dict(TEST_POINTS, name="Test")
        self.table = seed_table(self.points.hand_score)

    def test_full_deal_end_to_end(self):
        deck = shuffled_deck(random.Random(11))[:NUM_CELLS]
        state = PlayState()
        clock = TickingClock()
        rng = random.Random(3)
        chosen = []
        for card in deck:
            cell = select_move(state, card, self.table, 1200, self.points, SearchConfig(), clock, rng)
            chosen.append(cell)

        self.assertEqual(state.played, NUM_CELLS)
        self.assertEqual(sorted(chosen), list(range(NUM_CELLS)))
        self.assertEqual(state.played_cards(), deck)
        self.assertTrue(all(card is not None for card in state.grid))

        # Recompute the score line by line
        independent = 0
        for line in ROW_CELLS + COLUMN_CELLS:
            independent += TEST_POINTS[classify_hand([state.grid[c] for c in line]).name]
        self.assertEqual(self.points.score_grid(state.grid), independent)

    def test_forced_last_move(self):
        state = PlayState.from_moves([(ALL_CARDS[i], i) for i in range(NUM_CELLS) if i != 7])
        cell, stats = search_move(state, ALL_CARDS[40], self.table, 1000, self.points, clock=TickingClock())
        self.assertEqual(cell, 7)
        self.assertTrue(stats["forced_move"])
        self.assertEqual(stats["iterations"], 0)
        self.assertEqual(state.played, NUM_CELLS - 1)

    def test_search_leaves_state_unchanged(self):
        state = PlayState.from_moves([(ALL_CARDS[i], i * 2) for i in range(6)])
        before = state.snapshot()
        cell, stats = search_move(
            state, ALL_CARDS[30], self.table, 500, self.points,
            SearchConfig(), TickingClock(), random.Random(1),
        )
        self.assertEqual(state.snapshot(), before)
        self.assertIn(cell, state.legal_cells())
        self.assertEqual(set(stats["simulations"]), set(state.legal_cells()))
        self.assertGreater(stats["iterations"], 0)
        self.assertEqual(stats["starved_cells"], 0)

    def test_search_is_reproducible(self):
        state = PlayState.from_moves([(ALL_CARDS[i], i) for i in range(4)])
        results = []
        for _ in range(2):
            results.append(search_move(
                state, ALL_CARDS[33], self.table, 1000, self.points,
                SearchConfig(), TickingClock(), random.Random(8),
            ))
        self.assertEqual(results[0][0], results[1][0])
        self.assertEqual(results[0][1]["mean_scores"], results[1][1]["mean_scores"])

    def test_all_cells_starved(self):
        state = PlayState()
        cell, stats = search_move(
            state, ALL_CARDS[0], self.table, 0, self.points,
            SearchConfig(), TickingClock(), random.Random(2),
        )
        self.assertIn(cell, range(NUM_CELLS))
        self.assertEqual(stats["starved_cells"], NUM_CELLS)
        self.assertEqual(stats["iterations"], 0)
        self.assertEqual(stats["tied_cells"], NUM_CELLS)

    def test_sampled_cell_beats_starved_cells(self):
        # Every line scores negatively, so any sampled mean is below zero
        points = PointSystem.from_dict({hand.name: -50 for hand in PokerHand})
        table = seed_table(points.hand_score)
        state = PlayState.from_moves([(ALL_CARDS[i], i) for i in range(3)])
        first = state.legal_cells()[0]

        # Start, first deadline, one rollout, then time runs out for good
        clock = ScriptedClock([0.0, 0.0, 0.0, 100.0])
        cell, stats = search_move(
            state, ALL_CARDS[45], table, 0, points,
            SearchConfig(min_cell_budget_ms=10), clock, random.Random(4),
        )
        self.assertEqual(cell, first)
        self.assertEqual(stats["simulations"][first], 1)
        self.assertLess(stats["mean_scores"][first], 0)
        self.assertEqual(stats["starved_cells"], len(state.legal_cells()) - 1)

    def test_full_board(self):
        state = PlayState.from_moves([(ALL_CARDS[i], i) for i in range(NUM_CELLS)])
        with self.assertRaises(BoardFullError):
            search_move(state, ALL_CARDS[40], self.table, 100, self.points, clock=TickingClock())


class TestSearchConfig(unittest.TestCase):
    """Test search configuration validation."""

    def test_validation(self):
        with self.assertRaises(ValueError):
            SearchConfig(depth_limit=-1)
        with self.assertRaises(ValueError):
            SearchConfig(min_cell_budget_ms=-1)

    def test_round_trip(self):
        config = SearchConfig(depth_limit=3, reserve_last_move=False)
        self.assertEqual(SearchConfig.from_dict(config.to_dict()), config)
        self.assertEqual(SearchConfig.from_dict({"depth_limit": 1, "unknown": 2}).depth_limit, 1)


if __name__ == "__main__":
    unittest.main()
