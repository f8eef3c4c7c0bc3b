"""
Strategy registry: resolves a strategy name to a fresh strategy instance.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

import numpy as np

from ..config import EngineSettings, get_engine_settings
from ..search import RandomStrategy, SearchStrategy
from .mcts import MonteCarloStrategy
from .minimax import BudgetedMinimaxStrategy
from .pvs import HeuristicPVSStrategy


class UnknownStrategyError(ValueError):
    """Raised for a strategy name that no ``StrategyKind`` recognises."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown strategy: {name}")
        self.name = name


class StrategyKind(str, Enum):
    MINE = "mine"
    MINIMAX = "dapetcu21-minimax"
    MONTECARLO = "dapetcu21-montecarlo"
    RANDOM = "random"

    @classmethod
    def from_name(cls, name: str) -> "StrategyKind":
        key = name.strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnknownStrategyError(name) from None


_ALIASES = {
    "pvs": StrategyKind.MINE.value,
    "minimax": StrategyKind.MINIMAX.value,
    "mcts": StrategyKind.MONTECARLO.value,
    "montecarlo": StrategyKind.MONTECARLO.value,
}


def create_strategy(kind: StrategyKind, settings: Optional[EngineSettings] = None,
                    seed: Optional[int] = None, rng: Optional[np.random.Generator] = None) -> SearchStrategy:
    """Build a new instance of ``kind``; every kind must have a branch here."""
    settings = settings or get_engine_settings()
    if seed is None and rng is None:
        seed = settings.seed
    if kind is StrategyKind.MINE:
        return HeuristicPVSStrategy(max_depth=settings.pvs_max_depth, seed=seed, rng=rng)
    if kind is StrategyKind.MINIMAX:
        return BudgetedMinimaxStrategy(move_budget=settings.minimax_move_budget,
                                       max_depth=settings.minimax_max_depth, seed=seed, rng=rng)
    if kind is StrategyKind.MONTECARLO:
        return MonteCarloStrategy(move_budget=settings.mcts_move_budget,
                                  exploration=settings.mcts_exploration, seed=seed, rng=rng)
    if kind is StrategyKind.RANDOM:
        return RandomStrategy(seed=seed, rng=rng)
    raise AssertionError(f"Unhandled strategy kind: {kind!r}")


def get_strategy(name: str, settings: Optional[EngineSettings] = None,
                 seed: Optional[int] = None, rng: Optional[np.random.Generator] = None) -> SearchStrategy:
    """Resolve ``name`` (case-insensitive, aliases allowed) to a fresh strategy."""
    return create_strategy(StrategyKind.from_name(name), settings=settings, seed=seed, rng=rng)


def list_strategies() -> List[str]:
    return [kind.value for kind in StrategyKind]


def has_strategy(name: str) -> bool:
    try:
        StrategyKind.from_name(name)
    except UnknownStrategyError:
        return False
    return True
