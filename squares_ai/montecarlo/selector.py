"""
Time-budgeted Monte Carlo move selection for Poker Squares.

For each dealt card the selector tries every empty cell in turn. After
placing the card in a candidate cell it runs greedy rollouts until the
cell's share of the time budget runs out, and keeps the mean rollout score.
The cell with the highest mean wins; ties are broken uniformly at random.

The move budget is split evenly across the real turns left in the game and
then evenly across the candidate cells of this turn.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import logging
import random

from squares_ai.core.cards import Card
from squares_ai.core.clock import Clock, MonotonicClock
from squares_ai.core.constants import NUM_CELLS
from squares_ai.core.exceptions import BoardFullError
from squares_ai.core.scoring import PointSystem
from squares_ai.core.state import PlayState
from squares_ai.montecarlo.config import SearchConfig
from squares_ai.montecarlo.heuristics import HeuristicTable
from squares_ai.montecarlo.rollout import rollout

logger = logging.getLogger(__name__)

NEGATIVE_INFINITY = float("-inf")


def cell_budget(
    state: PlayState,
    num_candidates: int,
    time_budget_ms: float,
    config: SearchConfig,
) -> float:
    """
    Get the time each candidate cell may spend on rollouts.

    Args:
        state: Current play state (before the card is placed)
        num_candidates: Number of cells considered this turn
        time_budget_ms: Time left for the rest of the game
        config: Search configuration

    Returns:
        Milliseconds per candidate cell
    """
    turns_left = NUM_CELLS - state.played
    if config.reserve_last_move:
        turns_left -= 1
    per_turn = max(time_budget_ms, 0.0) / max(turns_left, 1)
    return max(per_turn / max(num_candidates, 1), config.min_cell_budget_ms)


def search_move(
    state: PlayState,
    card: Card,
    table: HeuristicTable,
    time_budget_ms: float,
    point_system: PointSystem,
    config: Optional[SearchConfig] = None,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[int, Dict[str, Any]]:
    """
    Find the best cell for a dealt card without committing it.

    Args:
        state: Current play state (left unchanged)
        card: The card just dealt
        table: Heuristic table used by the rollouts
        time_budget_ms: Time left for the rest of the game
        point_system: Scores full grids
        config: Search configuration
        clock: Time source
        rng: Source of simulated cards and tie-breaks

    Returns:
        Tuple of (chosen cell, search statistics)
    """
    config = config or SearchConfig()
    clock = clock or MonotonicClock()
    rng = rng or random.Random()

    if state.is_full:
        raise BoardFullError()

    start = clock.now_ms()
    legal = state.legal_cells()

    # The last placement has only one option
    if len(legal) == 1:
        return legal[0], {
            "forced_move": True,
            "iterations": 0,
            "starved_cells": 0,
            "time_elapsed_ms": 0.0,
        }

    budget = cell_budget(state, len(legal), time_budget_ms, config)
    simulations: Dict[int, int] = {}
    mean_scores: Dict[int, float] = {}

    for cell in legal:
        state.apply_move(card, cell)
        total = 0
        count = 0
        try:
            deadline = clock.deadline(budget)
            while clock.now_ms() < deadline:
                total += rollout(state, table, config.depth_limit, rng, point_system)
                count += 1
        finally:
            state.undo_move()
        simulations[cell] = count
        mean_scores[cell] = total / count if count else NEGATIVE_INFINITY

    best_mean = max(mean_scores.values())
    best_cells: List[int] = [cell for cell in legal if mean_scores[cell] == best_mean]
    chosen = rng.choice(best_cells)

    starved = [cell for cell in legal if simulations[cell] == 0]
    if starved:
        logger.debug("No rollouts completed for cells %s (%.3f ms each)", starved, budget)

    stats = {
        "forced_move": False,
        "iterations": sum(simulations.values()),
        "simulations": simulations,
        "mean_scores": mean_scores,
        "starved_cells": len(starved),
        "tied_cells": len(best_cells),
        "cell_budget_ms": budget,
        "best_mean": best_mean,
        "time_elapsed_ms": clock.now_ms() - start,
    }
    logger.debug(
        "Placed %s at cell %d: mean %.2f over %d rollouts (%d candidates)",
        card, chosen, best_mean, simulations[chosen], len(legal),
    )
    return chosen, stats


def select_move(
    state: PlayState,
    card: Card,
    table: HeuristicTable,
    time_budget_ms: float,
    point_system: PointSystem,
    config: Optional[SearchConfig] = None,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Choose a cell for a dealt card and commit the placement to the state.

    Returns:
        The chosen cell (row-major index)
    """
    cell, _ = search_move(state, card, table, time_budget_ms, point_system, config, clock, rng)
    state.apply_move(card, cell)
    return cell
