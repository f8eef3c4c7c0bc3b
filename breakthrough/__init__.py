"""Breakthrough package: rules engine plus pluggable adversarial search.

Usage examples:
    from breakthrough import initial_state, all_legal_moves, apply_move
    from breakthrough import get_strategy
    move = get_strategy("mine").choose_move(initial_state(8))
"""
from __future__ import annotations

# Rules engine
from .engine import (
    IllegalMoveError,
    all_legal_moves,
    apply_move,
    check_winner,
    count_pieces,
    game_outcome,
    initial_state,
    legal_moves_from,
    move_to_str,
    parse_move_str,
    replay,
    state_from_rows,
    state_key,
)
from .types import DRAW, Color, GameState, Move

# Evaluation
from .eval import AdvancementEvaluator, Evaluator, HeuristicEvaluator, get_evaluator

# Search
from .search import RandomStrategy, SearchResult, SearchStrategy, StrategyOptions
from .strategies import (
    BudgetedMinimaxStrategy,
    HeuristicPVSStrategy,
    MonteCarloStrategy,
    StrategyKind,
    UnknownStrategyError,
    get_strategy,
    list_strategies,
)

# Boundary
from .api import MoveRequest, MoveResponse, get_move

__version__ = "1.0.0"
