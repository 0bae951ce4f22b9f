"""
Game flow for Poker Squares.

This module runs complete games: it gives a player its setup time with the
point system, deals 25 cards one at a time, validates each placement and
scores the final grid. Players are duck-typed; anything with
``set_point_system``, ``init``, ``get_play`` and ``name`` can take part.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging
import random

from squares_ai.core.cards import Card, shuffled_deck
from squares_ai.core.clock import Clock, MonotonicClock
from squares_ai.core.constants import (
    GRID_SIZE, NUM_CELLS, NUM_CARDS, DEFAULT_SETUP_MILLIS, DEFAULT_PLAY_MILLIS
)
from squares_ai.core.exceptions import IllegalPlayError
from squares_ai.core.scoring import PointSystem, grid_rows

logger = logging.getLogger(__name__)


@dataclass
class GameRecord:
    """Outcome of one game."""
    player_name: str
    point_system: str
    cards: List[Card] = field(default_factory=list)
    plays: List[Tuple[int, int]] = field(default_factory=list)
    grid: List[Optional[Card]] = field(default_factory=lambda: [None] * NUM_CELLS)
    hand_scores: List[int] = field(default_factory=list)
    score: int = 0
    elapsed_ms: float = 0.0
    timed_out: bool = False

    @property
    def rows(self) -> List[List[Optional[Card]]]:
        return grid_rows(self.grid)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player_name,
            "point_system": self.point_system,
            "cards": [str(card) for card in self.cards],
            "plays": [list(play) for play in self.plays],
            "hand_scores": list(self.hand_scores),
            "score": self.score,
            "elapsed_ms": self.elapsed_ms,
            "timed_out": self.timed_out,
        }


class PokerSquaresGame:
    """
    Runs Poker Squares games for a single player under one point system.

    The player is configured once through ``setup`` and may then play any
    number of games; each game starts with ``init`` on the player.
    """

    def __init__(
        self,
        point_system: PointSystem,
        setup_millis: float = DEFAULT_SETUP_MILLIS,
        play_millis: float = DEFAULT_PLAY_MILLIS,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize a game runner.

        Args:
            point_system: Scoring used for the final grid and given to the player
            setup_millis: Time the player may spend in ``set_point_system``
            play_millis: Time the player may spend across all plays of one game
            clock: Time source (wall clock if None)
        """
        self.point_system = point_system
        self.setup_millis = setup_millis
        self.play_millis = play_millis
        self.clock = clock or MonotonicClock()

    def setup(self, player: Any) -> float:
        """
        Hand the point system to the player and let it prepare.

        Returns:
            Milliseconds the player used
        """
        start = self.clock.now_ms()
        player.set_point_system(self.point_system, self.setup_millis)
        used = self.clock.now_ms() - start
        if used > self.setup_millis:
            logger.warning("%s used %.0f ms of %.0f ms setup time", player.name, used, self.setup_millis)
        return used

    def play(
        self,
        player: Any,
        deck: Optional[Sequence[Card]] = None,
        rng: Optional[random.Random] = None,
    ) -> GameRecord:
        """
        Play one game.

        Args:
            player: A configured player
            deck: Cards to deal in order (a shuffled deck if None); only the first 25 are used
            rng: Random source for shuffling when no deck is given

        Returns:
            GameRecord with the final grid and score
        """
        if deck is None:
            deck = shuffled_deck(rng)
        if len(deck) < NUM_CELLS or len(set(deck)) != len(deck) or len(deck) > NUM_CARDS:
            raise ValueError("The deck must hold at least 25 distinct cards")

        record = GameRecord(player_name=player.name, point_system=self.point_system.name)
        player.init()
        remaining = self.play_millis

        for card in deck[:NUM_CELLS]:
            start = self.clock.now_ms()
            row, col = player.get_play(card, remaining)
            remaining -= self.clock.now_ms() - start

            if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
                raise IllegalPlayError(player.name, row, col)
            cell = row * GRID_SIZE + col
            if record.grid[cell] is not None:
                raise IllegalPlayError(player.name, row, col)

            record.grid[cell] = card
            record.cards.append(card)
            record.plays.append((row, col))

        if remaining < 0:
            record.timed_out = True
            logger.warning("%s exceeded its play time by %.0f ms", player.name, -remaining)

        record.elapsed_ms = self.play_millis - remaining
        record.hand_scores = self.point_system.hand_scores(record.grid)
        record.score = sum(record.hand_scores)
        logger.info("%s scored %d under %s", player.name, record.score, self.point_system.name)
        return record

    def play_many(
        self,
        player: Any,
        num_games: int,
        rng: Optional[random.Random] = None,
    ) -> List[GameRecord]:
        """Play several games with freshly shuffled decks."""
        rng = rng or random.Random()
        return [self.play(player, rng=rng) for _ in range(num_games)]
