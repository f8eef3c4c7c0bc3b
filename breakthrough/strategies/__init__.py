"""Move-selection strategies and the registry that resolves them by name."""
from __future__ import annotations

from .mcts import MonteCarloStrategy
from .minimax import BudgetedMinimaxStrategy
from .pvs import HeuristicPVSStrategy, order_moves
from .registry import (
    StrategyKind,
    UnknownStrategyError,
    create_strategy,
    get_strategy,
    has_strategy,
    list_strategies,
)

__all__ = [
    "BudgetedMinimaxStrategy",
    "HeuristicPVSStrategy",
    "MonteCarloStrategy",
    "StrategyKind",
    "UnknownStrategyError",
    "create_strategy",
    "get_strategy",
    "has_strategy",
    "list_strategies",
    "order_moves",
]
