"""
Static evaluators and the pawn-structure helpers they share.

Both evaluators score a position from a requested side's point of view and
return ``±WIN_SCORE`` once a side has reached its goal rank.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Tuple

from .types import Color, GameState, Position

WIN_SCORE = 100_000

# Heuristic weights, tuned on the 8x8 board
PIECE_BASE = 130
ADVANCE_WEIGHT = 22
FLANK_EDGE = -10
FLANK_NEAR_EDGE = -5
MOBILITY_STRAIGHT = 10
MOBILITY_DIAGONAL = 4
RUNNER_BASE = 20
RUNNER_STEP = 15
RUNNER_HORIZON = 6
RUNNER_ONE_STEP = 60
RUNNER_UNSTOPPABLE = 120
UNSTOPPABLE_RANGE = 3
MATERIAL_WEIGHT = 290
ADVANCED_WEIGHT = 140
CENTER_WEIGHT = 45
BACK_FLANK_WEIGHT = 15
BACK_RANK_WEIGHT = 18

_CENTER_STEPS = (0, 10, 20, 25)


def center_table(size: int) -> Tuple[int, ...]:
    """Per-column centrality bonus, ``(0, 10, 20, 25, 25, 20, 10, 0)`` at size 8."""
    last = len(_CENTER_STEPS) - 1
    return tuple(_CENTER_STEPS[min(last, min(c, size - 1 - c))] for c in range(size))


def distance_to_goal(state: GameState, side: Color, r: int) -> int:
    return r if side is Color.WHITE else state.size - 1 - r


def _enemy_rows_on_path(state: GameState, side: Color, r: int, c: int):
    """Yield the row of every enemy piece on the three files ahead of (r, c)."""
    n = state.size
    opp = side.opponent
    d = side.direction
    rr = r + d
    while 0 <= rr < n:
        row = state.board[rr]
        for cc in (c - 1, c, c + 1):
            if 0 <= cc < n and row[cc] is opp:
                yield rr
        rr += d


def is_passed(state: GameState, side: Color, r: int, c: int) -> bool:
    """True when no enemy piece stands ahead on the pawn's file or either neighbour file."""
    return next(_enemy_rows_on_path(state, side, r, c), None) is None


def is_likely_unstoppable(state: GameState, side: Color, r: int, c: int) -> bool:
    """A passed pawn close to its goal with no enemy within interception range."""
    if not is_passed(state, side, r, c):
        return False
    remaining = distance_to_goal(state, side, r)
    for rr in _enemy_rows_on_path(state, side, r, c):
        if abs(rr - r) <= remaining + 1:
            return False
    return remaining <= UNSTOPPABLE_RANGE


def most_advanced_pawns(state: GameState, side: Color) -> List[Position]:
    """All pawns of ``side`` sharing the row closest to its goal rank."""
    n = state.size
    rows = range(n) if side is Color.WHITE else range(n - 1, -1, -1)
    for r in rows:
        found = [(r, c) for c, cell in enumerate(state.board[r]) if cell is side]
        if found:
            return found
    return []


class Evaluator(ABC):
    """Abstract evaluator interface for position scoring."""

    name: str = "evaluator"

    @abstractmethod
    def evaluate_position(self, state: GameState, color: Color) -> float:  # pragma: no cover
        """Score ``state`` from ``color``'s point of view."""
        raise NotImplementedError


class AdvancementEvaluator(Evaluator):
    """Sum of squared advancement: own pieces count positive, enemy pieces negative."""

    name = "advancement"

    def evaluate_position(self, state: GameState, color: Color) -> float:
        if state.winner is not None:
            return WIN_SCORE if state.winner is color else -WIN_SCORE
        n = state.size
        total = 0
        for r, row in enumerate(state.board):
            for cell in row:
                if cell is None:
                    continue
                adv = n - r if cell is Color.WHITE else r + 1
                total += adv * adv if cell is color else -adv * adv
        return total


class HeuristicEvaluator(Evaluator):
    """Weighted positional heuristic with passed-pawn ("runner") detection."""

    name = "heuristic"

    def evaluate_position(self, state: GameState, color: Color) -> float:
        score = self.score_for_white(state)
        return score if color is Color.WHITE else -score

    def score_for_white(self, state: GameState) -> int:
        if state.winner is Color.WHITE:
            return WIN_SCORE
        if state.winner is Color.BLACK:
            return -WIN_SCORE

        n = state.size
        board = state.board
        centers = center_table(n)
        band_lo, band_hi = 2, n - 3
        score = 0
        pieces = {Color.WHITE: 0, Color.BLACK: 0}
        advanced = {Color.WHITE: 0, Color.BLACK: 0}
        central = {Color.WHITE: 0, Color.BLACK: 0}

        for r in range(n):
            row = board[r]
            for c in range(n):
                p = row[c]
                if p is None:
                    continue

                center_bonus = centers[c]
                dist = distance_to_goal(state, p, r)
                adv_bonus = (n - 1 - dist) * ADVANCE_WEIGHT

                flank = 0
                if c == 0 or c == n - 1:
                    flank = FLANK_EDGE
                elif c == 1 or c == n - 2:
                    flank = FLANK_NEAR_EDGE

                mobility = 0
                fr = r + p.direction
                if 0 <= fr < n:
                    ahead = board[fr]
                    if ahead[c] is None:
                        mobility += MOBILITY_STRAIGHT
                    if c > 0 and ahead[c - 1] is None and c - 1 >= band_lo:
                        mobility += MOBILITY_DIAGONAL
                    if c + 1 < n and ahead[c + 1] is None and c + 1 <= band_hi:
                        mobility += MOBILITY_DIAGONAL

                runner = 0
                if is_passed(state, p, r, c):
                    runner += RUNNER_BASE + (RUNNER_HORIZON - min(RUNNER_HORIZON, dist)) * RUNNER_STEP
                    if dist <= 1:
                        runner += RUNNER_ONE_STEP
                    if is_likely_unstoppable(state, p, r, c):
                        runner += RUNNER_UNSTOPPABLE

                piece_score = PIECE_BASE + adv_bonus + center_bonus + flank + mobility + runner
                score += piece_score if p is Color.WHITE else -piece_score

                pieces[p] += 1
                if dist <= 2:
                    advanced[p] += 1
                if center_bonus > 0:
                    central[p] += 1

        score += (pieces[Color.WHITE] - pieces[Color.BLACK]) * MATERIAL_WEIGHT
        score += (advanced[Color.WHITE] - advanced[Color.BLACK]) * ADVANCED_WEIGHT
        score += (central[Color.WHITE] - central[Color.BLACK]) * CENTER_WEIGHT

        # Pieces still guarding the home rank
        white_back = black_back = white_flank = black_flank = 0
        home_white, home_black = board[n - 1], board[0]
        for c in range(n):
            edge = c == 0 or c == n - 1
            if home_white[c] is Color.WHITE:
                white_back += 1
                white_flank += edge
            if home_black[c] is Color.BLACK:
                black_back += 1
                black_flank += edge
        score += (black_flank - white_flank) * BACK_FLANK_WEIGHT
        score += (black_back - white_back) * BACK_RANK_WEIGHT
        return score


def get_evaluator(name: str = "heuristic") -> Evaluator:
    """Factory for the named evaluator."""
    key = name.lower()
    if key == AdvancementEvaluator.name:
        return AdvancementEvaluator()
    if key == HeuristicEvaluator.name:
        return HeuristicEvaluator()
    raise ValueError(f"Unknown evaluator: {name}")


__all__ = [
    "WIN_SCORE",
    "Evaluator",
    "AdvancementEvaluator",
    "HeuristicEvaluator",
    "get_evaluator",
    "center_table",
    "distance_to_goal",
    "is_passed",
    "is_likely_unstoppable",
    "most_advanced_pawns",
]
