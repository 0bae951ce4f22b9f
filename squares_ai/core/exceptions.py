"""Custom exception classes for the Poker Squares engine."""

from __future__ import annotations


class SquaresError(Exception):
    """Base exception for all Poker Squares errors."""


class InvariantViolation(SquaresError):
    """Raised when an operation would break an internal invariant (programmer error)."""


class LineTooLongError(InvariantViolation):
    """Raised when a line with more than five cards is classified."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"A line holds at most 5 cards, got {count}.")


class InvalidCellError(InvariantViolation):
    """Raised when a cell index lies outside the grid."""

    def __init__(self, cell: int) -> None:
        self.cell = cell
        super().__init__(f"Cell {cell} is outside the grid.")


class OccupiedCellError(InvariantViolation):
    """Raised when a card is placed into a cell that already holds one."""

    def __init__(self, cell: int) -> None:
        self.cell = cell
        super().__init__(f"Cell {cell} is already occupied.")


class CardAlreadyDealtError(InvariantViolation):
    """Raised when a card that is already on the grid is placed again."""

    def __init__(self, card: object) -> None:
        self.card = card
        super().__init__(f"Card {card} has already been placed.")


class BoardFullError(InvariantViolation):
    """Raised when a move is applied to a full grid."""

    def __init__(self) -> None:
        super().__init__("Cannot place a card; the grid is full.")


class EmptyHistoryError(InvariantViolation):
    """Raised when undoing a move with no moves played."""

    def __init__(self) -> None:
        super().__init__("Cannot undo; no cards have been placed.")


class UnseededTableError(InvariantViolation):
    """Raised when a heuristic value is read before it has been defined."""

    def __init__(self, bucket: int, category: object) -> None:
        self.bucket = bucket
        self.category = category
        super().__init__(f"No heuristic value for {category} in phase bucket {bucket}.")


class IllegalPlayError(SquaresError):
    """Raised when a player returns a play outside the grid or onto an occupied cell."""

    def __init__(self, player_name: str, row: int, col: int) -> None:
        self.player_name = player_name
        self.row = row
        self.col = col
        super().__init__(f"{player_name} made an illegal play at ({row}, {col}).")


__all__ = [
    "BoardFullError",
    "CardAlreadyDealtError",
    "EmptyHistoryError",
    "IllegalPlayError",
    "InvalidCellError",
    "InvariantViolation",
    "LineTooLongError",
    "OccupiedCellError",
    "SquaresError",
    "UnseededTableError",
]
