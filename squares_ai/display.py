"""
Terminal renderings for grids, heuristic tables and score summaries.

Every function returns a rich renderable; printing is left to the caller's
Console.
"""
from typing import Dict, Optional, Sequence

import numpy as np
from rich.table import Table
from rich.text import Text

from squares_ai.core.cards import Card
from squares_ai.core.constants import GRID_SIZE, NUM_CELLS, NUM_PHASE_BUCKETS, TURNS_PER_BUCKET
from squares_ai.core.hands import CATEGORIES
from squares_ai.core.scoring import PointSystem, classify_hand
from squares_ai.montecarlo.heuristics import HeuristicTable

# Suit index to display style (clubs, diamonds, hearts, spades)
SUIT_STYLES = ("bold", "bold red", "bold red", "bold")


def card_text(card: Optional[Card]) -> Text:
    if card is None:
        return Text("--", style="dim")
    return Text(str(card), style=SUIT_STYLES[card.suit])


def render_grid(
    grid: Sequence[Optional[Card]],
    point_system: Optional[PointSystem] = None,
    title: Optional[str] = None,
) -> Table:
    """
    Render a grid, with line scores when a point system is given.

    Args:
        grid: The 25 cells in row-major order
        point_system: Scores rows and columns (omit for a bare grid)
        title: Optional table title

    Returns:
        rich Table
    """
    if len(grid) != NUM_CELLS:
        raise ValueError(f"A grid has {NUM_CELLS} cells, got {len(grid)}")

    table = Table(title=title, show_header=False, show_lines=True)
    for _ in range(GRID_SIZE):
        table.add_column(justify="center")
    if point_system is not None:
        table.add_column(justify="right", style="cyan")

    scores = point_system.hand_scores(grid) if point_system is not None else None
    for row in range(GRID_SIZE):
        cells = [card_text(grid[row * GRID_SIZE + col]) for col in range(GRID_SIZE)]
        if scores is not None:
            line = grid[row * GRID_SIZE:(row + 1) * GRID_SIZE]
            cells.append(Text(f"{scores[row]} ({classify_hand(line).label})"))
        table.add_row(*cells)

    if scores is not None:
        column_scores = [Text(str(score), style="cyan") for score in scores[GRID_SIZE:]]
        table.add_row(*column_scores, Text(f"total {sum(scores)}", style="bold green"))
    return table


def render_table(table: HeuristicTable, title: str = "Heuristic values") -> Table:
    """
    Render a heuristic table with one row per category and one column per phase.

    Args:
        table: A fully defined heuristic table
        title: Table title

    Returns:
        rich Table
    """
    view = Table(title=title)
    view.add_column("Category")
    view.add_column("Abbr", style="dim")
    for bucket in range(NUM_PHASE_BUCKETS):
        first = bucket * TURNS_PER_BUCKET
        last = min(first + TURNS_PER_BUCKET, NUM_CELLS) - 1
        view.add_column(f"Turns {first}-{last}", justify="right")

    rows = [table.values_for_turn(bucket * TURNS_PER_BUCKET) for bucket in range(NUM_PHASE_BUCKETS)]
    for category in CATEGORIES:
        view.add_row(
            category.label,
            category.abbreviation,
            *(str(row[category.index]) for row in rows),
        )
    return view


def score_summary(scores: Sequence[float]) -> Dict[str, float]:
    """
    Summarize a list of game scores.

    Returns:
        Dictionary with games, mean, std, min, median and max
    """
    values = np.asarray(scores, dtype=float)
    if values.size == 0:
        raise ValueError("No scores to summarize")
    return {
        "games": int(values.size),
        "mean": float(values.mean()),
        "std": float(values.std()),
        "min": float(values.min()),
        "median": float(np.median(values)),
        "max": float(values.max()),
    }


def render_summary(summaries: Dict[str, Dict[str, float]], title: str = "Results") -> Table:
    """
    Render score summaries side by side.

    Args:
        summaries: Player name to ``score_summary`` output
        title: Table title

    Returns:
        rich Table
    """
    view = Table(title=title)
    view.add_column("Player")
    for key in ("games", "mean", "std", "min", "median", "max"):
        view.add_column(key.capitalize(), justify="right")
    for name, summary in summaries.items():
        view.add_row(
            name,
            str(summary["games"]),
            *(f"{summary[key]:.2f}" for key in ("mean", "std", "min", "median", "max")),
        )
    return view
