"""
Heuristic negamax with principal-variation search ("mine").

Moves are statically ordered at every node, the first move is searched with a
full window and the rest with a null window. The first move gains one ply when
it promotes or advances a passed pawn, and late quiet moves lose one ply.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..engine import apply_move
from ..eval import Evaluator, HeuristicEvaluator, is_passed, most_advanced_pawns
from ..moves import all_legal_moves, in_bounds
from ..search import SearchResult, SearchStrategy, StrategyOptions
from ..types import Color, GameState, Move

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 4
LMR_MIN_DEPTH = 3
LMR_MIN_INDEX = 3

# Move-ordering keys
PROMOTION_KEY = 10_000
CAPTURE_KEY = 500
CENTRAL_CAPTURE_KEY = 120
ADVANCE_KEY = 40
CENTER_FILE_KEY = 10
EDGE_ORIGIN_KEY = 8
FILE_CHANGE_KEY = 5
RUNNER_CAPTURE_KEY = 800
RUNNER_BLOCK_KEY = 350
RUNNER_FLANK_KEY = 120

INF = float("inf")


def order_moves(moves: List[Move], state: GameState) -> List[Move]:
    """Rank moves by a cheap static key, best first. Ties keep generation order."""
    n = state.size
    side = state.turn
    promo_row = side.goal_row(n)
    opp = side.opponent
    enemy_runners = most_advanced_pawns(state, opp)
    mid = (n - 1) / 2

    def key(m: Move) -> float:
        (fr, fc), (tr, tc) = m.from_, m.to
        if tr == promo_row:
            return PROMOTION_KEY

        k = 0.0
        if m.capture:
            k += CAPTURE_KEY
            if 2 <= tc <= n - 3:
                k += CENTRAL_CAPTURE_KEY

        k += (tr - fr) * side.direction * ADVANCE_KEY
        k += (mid - abs(tc - mid)) * CENTER_FILE_KEY
        if fc == 0 or fc == n - 1:
            k += EDGE_ORIGIN_KEY
        if tc != fc:
            k += FILE_CHANGE_KEY

        for er, ec in enemy_runners:
            br = er + opp.direction
            if m.capture and (tr, tc) == (er, ec):
                k += RUNNER_CAPTURE_KEY
            if tr == br and in_bounds(n, br, ec):
                if tc == ec:
                    k += RUNNER_BLOCK_KEY
                elif abs(tc - ec) == 1:
                    k += RUNNER_FLANK_KEY
        return k

    return sorted(moves, key=key, reverse=True)


@dataclass(frozen=True)
class _MoveTraits:
    capture: bool
    promotion: bool
    passed_advance: bool

    @property
    def extends(self) -> bool:
        return self.promotion or self.passed_advance

    @property
    def quiet(self) -> bool:
        return not (self.capture or self.promotion or self.passed_advance)


def _classify(state: GameState, move: Move, nxt: GameState) -> _MoveTraits:
    (fr, fc), (tr, tc) = move.from_, move.to
    mover: Optional[Color] = state.board[fr][fc]
    promotion = tr == state.turn.goal_row(state.size)
    passed_advance = (
        mover is not None
        and (tr - fr) * mover.direction > 0
        and nxt.board[tr][tc] is mover
        and is_passed(nxt, mover, tr, tc)
    )
    return _MoveTraits(capture=move.capture, promotion=promotion, passed_advance=passed_advance)


class HeuristicPVSStrategy(SearchStrategy):
    """Negamax/PVS searcher driven by ``HeuristicEvaluator``."""

    name = "mine"

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, evaluator: Optional[Evaluator] = None,
                 seed: Optional[int] = None, rng: Optional[np.random.Generator] = None,
                 extensions: bool = True, reductions: bool = True) -> None:
        super().__init__(seed=seed, rng=rng)
        self.max_depth = max_depth
        self.evaluator: Evaluator = evaluator or HeuristicEvaluator()
        self.extensions = extensions
        self.reductions = reductions
        self.root_moves: List[Move] = []
        self._reset_stats()

    def _reset_stats(self) -> None:
        self.nodes = 0
        self.extended = 0
        self.reduced = 0
        self.researches = 0

    def choose_move(self, state: GameState, options: Optional[StrategyOptions] = None) -> Optional[Move]:
        options = options or StrategyOptions()
        max_depth = self.max_depth if options.max_depth is None else options.max_depth
        result = self.search(state, max_depth)
        level = logging.INFO if options.verbose else logging.DEBUG
        logger.log(level, "%s: depth %d score %s nodes %d", self.name, result.depth, result.score, self.nodes)
        return result.move

    def search(self, state: GameState, max_depth: int) -> SearchResult:
        """Iterative deepening from depth 1 to ``max_depth`` over the ordered root moves."""
        self._reset_stats()
        root = state.turn
        moves = order_moves(all_legal_moves(state), state)
        self.root_moves = moves
        if not moves:
            return SearchResult(score=self.evaluator.evaluate_position(state, root), move=None)
        if max_depth < 1:
            # No search budget: trust the static ordering
            return SearchResult(score=self.evaluator.evaluate_position(state, root), move=moves[0])

        best_move: Move = moves[0]
        best_score = -INF
        completed = 0
        for depth in range(1, max_depth + 1):
            local_best = -INF
            local_index = 0
            for i, move in enumerate(moves):
                nxt = apply_move(state, move)
                score = -self._negamax(nxt, depth - 1, -INF, -local_best, root.opponent)
                if score > local_best:
                    local_best = score
                    local_index = i
            best_move, best_score = moves[local_index], local_best
            completed = depth
            # Seed the next iteration with this depth's best move
            moves.insert(0, moves.pop(local_index))
            logger.debug("%s: depth %d best %s score %s", self.name, depth, best_move, best_score)
        return SearchResult(score=best_score, move=best_move, depth=completed, moves_used=self.nodes)

    def _negamax(self, state: GameState, depth: int, alpha: float, beta: float, side: Color) -> float:
        self.nodes += 1
        if depth <= 0 or state.winner is not None:
            return self.evaluator.evaluate_position(state, side)

        moves = all_legal_moves(state)
        if not moves:
            return self.evaluator.evaluate_position(state, side)

        best = -INF
        a = alpha
        for i, move in enumerate(order_moves(moves, state)):
            nxt = apply_move(state, move)
            traits = _classify(state, move, nxt)

            if i == 0:
                # Extensions apply to the first move at a node only
                ext = 1 if self.extensions and traits.extends else 0
                self.extended += ext
                score = -self._negamax(nxt, depth - 1 + ext, -beta, -a, side.opponent)
            else:
                reduce = 1 if (self.reductions and traits.quiet
                               and depth >= LMR_MIN_DEPTH and i >= LMR_MIN_INDEX) else 0
                self.reduced += reduce
                score = -self._negamax(nxt, depth - 1 - reduce, -a - 1, -a, side.opponent)
                if a < score < beta:
                    self.researches += 1
                    score = -self._negamax(nxt, depth - 1, -beta, -a, side.opponent)

            if score > best:
                best = score
            if best > a:
                a = best
            if a >= beta:
                break
        return best


__all__ = ["HeuristicPVSStrategy", "order_moves", "DEFAULT_MAX_DEPTH"]
