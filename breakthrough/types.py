"""
Type definitions for the Breakthrough engine.

This module provides:
- the two sides (``Color``) and the board cell type
- immutable dataclasses for moves and game states
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Tuple, Union


class Color(str, Enum):
    """The two sides. White starts on the high-index rows and moves first."""

    WHITE = "W"
    BLACK = "B"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def direction(self) -> int:
        """Row delta of a forward step."""
        return -1 if self is Color.WHITE else 1

    def goal_row(self, size: int) -> int:
        """Row a piece of this color must reach to win."""
        return 0 if self is Color.WHITE else size - 1

    def __str__(self) -> str:
        return self.value


# Basic type aliases
Position = Tuple[int, int]  # (row, col)
Cell = Optional[Color]  # a piece is represented by the color it carries
Row = Tuple[Cell, ...]
Board = Tuple[Row, ...]

DRAW: Literal["draw"] = "draw"
Outcome = Union[Color, Literal["draw"]]

DEFAULT_SIZE = 8
MIN_SIZE = 2


@dataclass(frozen=True)
class Move:
    """A single pawn step. ``from_`` maps to the ``from`` key on the wire."""

    from_: Position
    to: Position
    capture: bool = False


@dataclass(frozen=True)
class GameState:
    """
    Immutable representation of a Breakthrough position.

    ``winner`` is derived from the board by the rules engine; a state is
    never mutated, every transition builds a new board.
    """

    board: Board
    turn: Color
    winner: Optional[Color] = None
    size: int = DEFAULT_SIZE

    def __post_init__(self) -> None:
        """Cheap structural validation; deeper validity is the caller's contract."""
        if self.size < MIN_SIZE:
            raise ValueError(f"Board size must be at least {MIN_SIZE}")
        if len(self.board) != self.size or any(len(row) != self.size for row in self.board):
            raise ValueError(f"Board must be {self.size}x{self.size}")

    @property
    def is_draw(self) -> bool:
        """No pieces remain on the board."""
        return not any(cell is not None for row in self.board for cell in row)

    @property
    def is_terminal(self) -> bool:
        return self.winner is not None or self.is_draw

