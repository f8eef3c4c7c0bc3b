"""
Alpha-beta negamax with iterative deepening under a global move budget.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..engine import apply_move, state_key
from ..eval import WIN_SCORE, AdvancementEvaluator, Evaluator
from ..moves import all_legal_moves
from ..search import SearchResult, SearchStrategy, StrategyOptions, random_choice
from ..types import Color, GameState, Move

logger = logging.getLogger(__name__)

DEFAULT_MOVE_BUDGET = 10_000
MAX_ITERATIVE_DEPTH = 100

NodeResult = Tuple[float, Optional[Move]]


class _BudgetedTree:
    """Per-invocation view of the game tree.

    Legal moves and move applications are memoised by ``state_key`` so that
    transpositions and re-visits in deeper iterations cost no budget. Once the
    budget is spent, ``child`` returns None for any application not already
    in the table.
    """

    def __init__(self, budget: int) -> None:
        self.budget = budget
        self.moves_used = 0
        self._moves: Dict[int, List[Move]] = {}
        self._children: Dict[Tuple[int, Move], GameState] = {}

    def moves(self, state: GameState, key: int) -> List[Move]:
        cached = self._moves.get(key)
        if cached is None:
            cached = all_legal_moves(state)
            self._moves[key] = cached
        return cached

    def child(self, state: GameState, key: int, move: Move) -> Optional[GameState]:
        cached = self._children.get((key, move))
        if cached is not None:
            return cached
        if self.moves_used >= self.budget:
            return None
        self.moves_used += 1
        nxt = apply_move(state, move)
        self._children[(key, move)] = nxt
        return nxt


class BudgetedMinimaxStrategy(SearchStrategy):
    """Iterative-deepening alpha-beta bounded by a count of move applications.

    Moves are searched in generation order; the first move that strictly
    improves the running best is kept. When the budget runs out mid-iteration
    the partial iteration is discarded and the last completed depth decides,
    falling back to a random legal move if no depth completed.
    """

    name = "dapetcu21-minimax"

    def __init__(self, move_budget: int = DEFAULT_MOVE_BUDGET, max_depth: int = MAX_ITERATIVE_DEPTH,
                 evaluator: Optional[Evaluator] = None, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None) -> None:
        super().__init__(seed=seed, rng=rng)
        self.move_budget = move_budget
        self.max_depth = max_depth
        self.evaluator: Evaluator = evaluator or AdvancementEvaluator()

    def choose_move(self, state: GameState, options: Optional[StrategyOptions] = None) -> Optional[Move]:
        options = options or StrategyOptions()
        moves = all_legal_moves(state)
        if not moves:
            return None

        budget = self.move_budget if options.move_budget is None else options.move_budget
        max_depth = self.max_depth if options.max_depth is None else options.max_depth
        tree = _BudgetedTree(budget)
        result: Move = random_choice(self.rng, moves)
        completed = 0

        for depth in range(1, max_depth + 1):
            used_before = tree.moves_used
            node = self._alphabeta(tree, state, depth, -float("inf"), float("inf"), state.turn)
            if node is None:
                break
            if node[1] is not None:
                result = node[1]
            completed = depth
            if tree.moves_used == used_before:
                # Nothing new was expanded: the reachable tree is exhausted
                break

        level = logging.INFO if options.verbose else logging.DEBUG
        logger.log(level, "%s: depth %d completed, %d/%d applications", self.name, completed,
                   tree.moves_used, budget)
        return result

    def search(self, state: GameState, depth: int, move_budget: Optional[int] = None) -> SearchResult:
        """Single fixed-depth search with a fresh memo; ``move`` is None if it did not complete."""
        tree = _BudgetedTree(self.move_budget if move_budget is None else move_budget)
        node = self._alphabeta(tree, state, depth, -float("inf"), float("inf"), state.turn)
        if node is None:
            return SearchResult(score=0.0, move=None, depth=0, moves_used=tree.moves_used)
        return SearchResult(score=node[0], move=node[1], depth=depth, moves_used=tree.moves_used)

    def _terminal_score(self, state: GameState, side: Color) -> float:
        # A decided position scores for the side to move at this ply, not the
        # stored turn (which stays with the winner).
        return WIN_SCORE if state.winner is side else -WIN_SCORE

    def _alphabeta(self, tree: _BudgetedTree, state: GameState, depth: int,
                   alpha: float, beta: float, side: Color) -> Optional[NodeResult]:
        if state.winner is not None:
            return self._terminal_score(state, side), None
        if depth == 0:
            return self.evaluator.evaluate_position(state, side), None

        key = state_key(state)
        moves = tree.moves(state, key)
        if not moves:
            return self.evaluator.evaluate_position(state, side), None

        best_value = -float("inf")
        best_move: Optional[Move] = None
        for move in moves:
            child = tree.child(state, key, move)
            if child is None:
                return None
            child_result = self._alphabeta(tree, child, depth - 1, -beta, -alpha, side.opponent)
            if child_result is None:
                return None
            value = -child_result[0]
            if value > best_value:
                best_value = value
                best_move = move
            if best_value > alpha:
                alpha = best_value
            if alpha >= beta:
                break
        return best_value, best_move
