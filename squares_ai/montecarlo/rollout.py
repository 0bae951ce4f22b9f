"""
Greedy rollouts for Poker Squares.

A rollout simulates the next few turns of a game: each simulated card is
drawn from the undealt part of the deck and placed wherever the heuristic
score of the resulting grid is highest. The score of the grid after the last
simulated placement is the rollout's result, and the state is always
returned to exactly where it started.
"""
from __future__ import annotations
from typing import List, Sequence, Tuple
import random

from squares_ai.core.cards import Card
from squares_ai.core.constants import GRID_SIZE, NUM_CELLS
from squares_ai.core.hands import classify
from squares_ai.core.scoring import PointSystem
from squares_ai.core.state import PlayState, CELL_LINES
from squares_ai.montecarlo.heuristics import HeuristicTable


def line_values(state: PlayState, values: Sequence[int]) -> List[int]:
    """
    Look up the heuristic value of every line.

    Args:
        state: Current play state
        values: One bucket of a heuristic table, indexed by category index

    Returns:
        Values of rows 0-4 followed by columns 0-4
    """
    return [values[classify(line).index] for line in state.lines()]


def evaluate_grid(state: PlayState, table: HeuristicTable, point_system: PointSystem) -> int:
    """
    Score the current grid.

    A full grid gets its true score from the point system. Otherwise every
    row and column is classified and valued with the phase bucket of the
    most recent turn.
    """
    if state.is_full:
        return point_system.score_grid(state.grid)
    return sum(line_values(state, table.values_for_turn(state.played - 1)))


def greedy_placement(
    state: PlayState,
    card: Card,
    table: HeuristicTable,
    point_system: PointSystem,
    rng: random.Random,
) -> Tuple[int, int]:
    """
    Find the empty cell that maximizes the grid score after placing a card.

    Only the row and column through a candidate cell change, so each
    candidate is scored from the current line values plus two lookups. When
    the placement fills the grid the point system scores it instead.

    Args:
        state: Current play state (restored before returning)
        card: Card to place
        table: Heuristic table
        point_system: Scores a full grid
        rng: Breaks ties uniformly at random

    Returns:
        (cell, score) of the chosen placement
    """
    if state.played == NUM_CELLS - 1:
        cell = state.order[state.played]
        state.apply_move(card, cell)
        try:
            score = point_system.score_grid(state.grid)
        finally:
            state.undo_move()
        return cell, score

    # Lines that hold the new card are valued with the bucket of this turn
    values = table.values_for_turn(state.played)
    current = line_values(state, values)
    base = sum(current)

    best_score = None
    best_cells: List[int] = []
    for cell in state.legal_cells():
        row, col = CELL_LINES[cell]
        state.apply_move(card, cell)
        try:
            score = (
                base - current[row] - current[GRID_SIZE + col]
                + values[classify(state.row(row)).index]
                + values[classify(state.column(col)).index]
            )
        finally:
            state.undo_move()
        if best_score is None or score > best_score:
            best_score = score
            best_cells = [cell]
        elif score == best_score:
            best_cells.append(cell)

    return rng.choice(best_cells), best_score


def rollout(
    state: PlayState,
    table: HeuristicTable,
    depth: int,
    rng: random.Random,
    point_system: PointSystem,
) -> int:
    """
    Run one greedy simulation from the current state.

    Args:
        state: Play state to simulate from (left unchanged on return)
        table: Heuristic table used to value partial grids
        depth: Simulated placements; clipped to the cells left
        rng: Source of simulated cards and tie-breaks
        point_system: Scores a full grid

    Returns:
        Score of the grid after the last simulated placement
    """
    steps = min(depth, NUM_CELLS - state.played)
    if steps <= 0:
        return evaluate_grid(state, table, point_system)

    committed = 0
    score = 0
    try:
        for _ in range(steps):
            card = state.draw_random_card(rng)
            cell, score = greedy_placement(state, card, table, point_system, rng)
            state.apply_move(card, cell)
            committed += 1
    finally:
        for _ in range(committed):
            state.undo_move()
    return score
