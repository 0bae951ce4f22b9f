#!/usr/bin/env python
"""
Play Poker Squares games with the Monte Carlo player.

The player is given its setup time to seed and tune a heuristic table for
the chosen point system, then plays a series of games against freshly
shuffled decks. With --baseline a random player plays the same decks for
comparison.

Example usage:
    # Ten games under the American point system with default settings
    squares-play --games 10

    # Quick run with the stochastic ruler tuner and a fixed seed
    squares-play --point-system british --strategy stochastic_ruler \\
        --setup-millis 10000 --play-millis 5000 --seed 7 --show-grids
"""
import argparse
import logging
import random
import sys
from typing import Dict, List, Optional, Sequence

from rich.console import Console
from tqdm import tqdm

from squares_ai.core.cards import shuffled_deck
from squares_ai.core.constants import DEFAULT_SETUP_MILLIS, DEFAULT_PLAY_MILLIS
from squares_ai.core.exceptions import SquaresError
from squares_ai.core.game import PokerSquaresGame
from squares_ai.core.scoring import PointSystem
from squares_ai.display import render_grid, render_table, render_summary, score_summary
from squares_ai.logging_config import setup_logging
from squares_ai.montecarlo.agent import MonteCarloPlayer, RandomPlayer
from squares_ai.montecarlo.config import PlayerConfig

logger = logging.getLogger(__name__)

PRESETS = {
    "default": PlayerConfig.default,
    "fast": PlayerConfig.fast,
    "strong": PlayerConfig.strong,
}


def parse_args(argv: Optional[Sequence[str]] = None):
    """Parse command-line arguments for a series of games."""
    parser = argparse.ArgumentParser(description="Play Poker Squares with the Monte Carlo player")

    # Game configuration
    parser.add_argument("--point-system", type=str, default="american",
                        choices=["american", "british", "random"],
                        help="Point system used for scoring")
    parser.add_argument("--games", type=int, default=1,
                        help="Number of games to play")
    parser.add_argument("--setup-millis", type=float, default=DEFAULT_SETUP_MILLIS,
                        help="Setup time given to the player (ms)")
    parser.add_argument("--play-millis", type=float, default=DEFAULT_PLAY_MILLIS,
                        help="Play time per game (ms)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for decks and the player")

    # Player configuration
    parser.add_argument("--preset", type=str, default="default", choices=sorted(PRESETS),
                        help="Base player configuration")
    parser.add_argument("--strategy", type=str, default=None,
                        choices=["genetic", "stochastic_ruler", "none"],
                        help="Tuning strategy (overrides the preset)")
    parser.add_argument("--depth", type=int, default=None,
                        help="Rollout depth limit (overrides the preset)")
    parser.add_argument("--discount-draws", action="store_true",
                        help="Halve the seeded value of four-card draws")

    # Output
    parser.add_argument("--baseline", action="store_true",
                        help="Also play every deck with a random player")
    parser.add_argument("--show-grids", action="store_true",
                        help="Print every final grid")
    parser.add_argument("--show-table", action="store_true",
                        help="Print the tuned heuristic table")
    parser.add_argument("--verbose", action="store_true",
                        help="Show progress bars")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        help="Logging level")
    parser.add_argument("--log-json", action="store_true",
                        help="Emit logs as JSON lines")

    args = parser.parse_args(argv)
    if args.games <= 0:
        parser.error("--games must be positive")
    return args


def build_config(args) -> PlayerConfig:
    """Create a player configuration from command-line arguments."""
    config = PRESETS[args.preset]()
    if args.strategy is not None:
        config.tuner.strategy = args.strategy
    if args.depth is not None:
        config.search.depth_limit = args.depth
    if args.discount_draws:
        config.tuner.discount_draws = True
    # Re-run validation on the edited configuration
    return PlayerConfig.from_dict(config.to_dict())


def run_games(args, console: Console) -> Dict[str, List[int]]:
    """
    Set up the player and play the requested games.

    Returns:
        Player name to list of scores
    """
    rng = random.Random(args.seed)
    point_system = PointSystem.by_name(args.point_system, rng)
    console.print(f"[bold]Point system:[/bold] {point_system}")

    player = MonteCarloPlayer(build_config(args), rng=random.Random(rng.random()), verbose=args.verbose)
    game = PokerSquaresGame(point_system, args.setup_millis, args.play_millis)
    used = game.setup(player)
    console.print(f"{player} set up in {used / 1000:.1f} s")
    if args.show_table:
        console.print(render_table(player.table))

    baseline = RandomPlayer(random.Random(rng.random())) if args.baseline else None
    if baseline is not None:
        game.setup(baseline)

    scores: Dict[str, List[int]] = {player.name: []}
    if baseline is not None:
        scores[baseline.name] = []

    for number in tqdm(range(1, args.games + 1), desc="Games", disable=not args.verbose):
        deck = shuffled_deck(rng)
        record = game.play(player, deck)
        scores[player.name].append(record.score)
        if record.timed_out:
            console.print(f"[yellow]Game {number}: {player.name} exceeded its play time[/yellow]")
        if args.show_grids:
            console.print(render_grid(record.grid, point_system, title=f"Game {number}: {record.score}"))
        if baseline is not None:
            scores[baseline.name].append(game.play(baseline, deck).score)

    return scores


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function."""
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_json)
    console = Console()

    try:
        scores = run_games(args, console)
    except KeyboardInterrupt:
        console.print("\nInterrupted by user.")
        return 130
    except SquaresError as e:
        logger.exception("Game aborted")
        console.print(f"[red]Error: {e}[/red]")
        return 1

    summaries = {name: score_summary(values) for name, values in scores.items()}
    console.print(render_summary(summaries, title=f"Results over {args.games} games"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
