"""
Search interfaces shared by every move-selection strategy.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

import numpy as np

from .moves import all_legal_moves
from .types import GameState, Move

T = TypeVar("T")


@dataclass(frozen=True)
class StrategyOptions:
    """Per-call knobs. Unset fields fall back to the strategy's own defaults."""

    verbose: bool = False
    max_depth: Optional[int] = None
    move_budget: Optional[int] = None


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one search invocation."""

    score: float
    move: Optional[Move]
    depth: int = 0
    moves_used: int = 0


def make_rng(seed: Optional[int] = None, rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return ``rng`` if given, else a fresh generator seeded with ``seed``."""
    return rng if rng is not None else np.random.default_rng(seed)


def random_choice(rng: np.random.Generator, items: Sequence[T]) -> T:
    return items[int(rng.integers(len(items)))]


def shuffled(rng: np.random.Generator, items: Sequence[T]) -> List[T]:
    out = list(items)
    rng.shuffle(out)
    return out


class SearchStrategy(ABC):
    """Abstract interface for move-selection strategies.

    A strategy owns its random generator; everything else it needs for one
    decision is created inside ``choose_move`` and dropped on return.
    """

    name: str = "strategy"

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None) -> None:
        self.rng: np.random.Generator = make_rng(seed, rng)

    @abstractmethod
    def choose_move(self, state: GameState, options: Optional[StrategyOptions] = None) -> Optional[Move]:  # pragma: no cover
        """Return a legal move for the side to move, or None if none exists."""
        raise NotImplementedError

    def random_move(self, state: GameState) -> Optional[Move]:
        moves = all_legal_moves(state)
        if not moves:
            return None
        return random_choice(self.rng, moves)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class RandomStrategy(SearchStrategy):
    """Uniformly random legal move; baseline opponent and fallback picker."""

    name = "random"

    def choose_move(self, state: GameState, options: Optional[StrategyOptions] = None) -> Optional[Move]:
        return self.random_move(state)


__all__ = [
    "StrategyOptions",
    "SearchResult",
    "SearchStrategy",
    "RandomStrategy",
    "make_rng",
    "random_choice",
    "shuffled",
]
