#!/usr/bin/env python
"""
Tune a heuristic table offline and compare it with the seeded table.

This script runs one tuning strategy for a fixed time, then evaluates the
seeded and tuned tables over the same number of simulated games. The tuning
history can be plotted to an image file.

Example usage:
    # One minute of genetic tuning under the British point system
    squares-tune --point-system british --millis 60000 --plot history.png

    # Stochastic ruler with a fixed seed, showing the tuned table
    squares-tune --strategy stochastic_ruler --millis 30000 --seed 3 --show-table
"""
import argparse
import logging
import random
import sys
from typing import Any, Dict, List, Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from rich.console import Console

from squares_ai.core.clock import MonotonicClock
from squares_ai.core.scoring import PointSystem
from squares_ai.display import render_table, render_summary, score_summary
from squares_ai.logging_config import setup_logging
from squares_ai.montecarlo.heuristics import seed_table
from squares_ai.tuning.base import evaluate_table
from squares_ai.tuning.config import TunerConfig
from squares_ai.tuning.factory import create_tuner

logger = logging.getLogger(__name__)

PRESETS = {
    "default": TunerConfig.default,
    "fast": TunerConfig.fast,
    "strong": TunerConfig.strong,
}


def parse_args(argv: Optional[Sequence[str]] = None):
    """Parse command-line arguments for a tuning run."""
    parser = argparse.ArgumentParser(description="Tune a Poker Squares heuristic table")

    parser.add_argument("--point-system", type=str, default="american",
                        choices=["american", "british", "random"],
                        help="Point system the table is tuned for")
    parser.add_argument("--strategy", type=str, default="genetic",
                        choices=["genetic", "stochastic_ruler"],
                        help="Tuning strategy")
    parser.add_argument("--preset", type=str, default="default", choices=sorted(PRESETS),
                        help="Base tuner configuration")
    parser.add_argument("--millis", type=float, default=60000,
                        help="Tuning time (ms)")
    parser.add_argument("--discount-draws", action="store_true",
                        help="Halve the seeded value of four-card draws")
    parser.add_argument("--games", type=int, default=1000,
                        help="Simulated games used to compare seeded and tuned tables")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")

    # Output
    parser.add_argument("--plot", type=str, default=None,
                        help="Save the tuning history plot to this image file")
    parser.add_argument("--show-table", action="store_true",
                        help="Print the tuned heuristic table")
    parser.add_argument("--verbose", action="store_true",
                        help="Show a progress bar while tuning")
    parser.add_argument("--log-level", type=str, default="INFO",
                        help="Logging level")
    parser.add_argument("--log-json", action="store_true",
                        help="Emit logs as JSON lines")

    args = parser.parse_args(argv)
    if args.millis <= 0:
        parser.error("--millis must be positive")
    if args.games <= 0:
        parser.error("--games must be positive")
    return args


def plot_history(history: List[Dict[str, Any]], strategy: str, path: str) -> None:
    """
    Plot best (and mean, when recorded) fitness against tuning time.

    Args:
        history: Tuner history entries
        strategy: Strategy name for the title
        path: Image file to write
    """
    seconds = [entry["elapsed_ms"] / 1000.0 for entry in history]
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(seconds, [entry["best"] for entry in history], label="Best")
    if history and "mean" in history[0]:
        ax.plot(seconds, [entry["mean"] for entry in history], label="Population mean")
    if history and "worst" in history[0]:
        ax.plot(seconds, [entry["worst"] for entry in history], label="Worst", alpha=0.5)
    ax.set_title(f"{strategy} tuning")
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Mean game score")
    ax.legend()
    ax.grid(True)
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)


def run_tuning(args, console: Console) -> None:
    """Tune a table and report how it compares with the seeded one."""
    rng = random.Random(args.seed)
    point_system = PointSystem.by_name(args.point_system, rng)
    console.print(f"[bold]Point system:[/bold] {point_system}")

    config = PRESETS[args.preset]()
    config.strategy = args.strategy
    config.discount_draws = args.discount_draws

    clock = MonotonicClock()
    seed = seed_table(point_system.hand_score, config.discount_draws)
    tuner = create_tuner(config, point_system, clock, rng, args.verbose)
    tuned = tuner.tune(seed, clock.now_ms() + args.millis)
    console.print(f"{tuner.name} tuning ran {tuner.evaluations} evaluations")

    if args.show_table:
        console.print(render_table(tuned, title="Tuned heuristic values"))

    results = {}
    for label, table in (("Seeded", seed), ("Tuned", tuned)):
        scores = [evaluate_table(table, point_system, 1, rng) for _ in range(args.games)]
        results[label] = score_summary(scores)
    console.print(render_summary(results, title=f"Greedy play over {args.games} simulated games"))

    if args.plot:
        plot_history(tuner.history, tuner.name, args.plot)
        console.print(f"Saved tuning history to {args.plot}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function."""
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_json)
    console = Console()

    try:
        run_tuning(args, console)
    except KeyboardInterrupt:
        console.print("\nInterrupted by user.")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
