"""
Monte Carlo Tree Search with UCB1 selection and uniformly random playouts.

Nodes live in a flat arena and refer to each other by index; a node's parent
index is only followed during backpropagation.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from ..engine import apply_move, game_outcome
from ..moves import all_legal_moves
from ..search import SearchResult, SearchStrategy, StrategyOptions, random_choice, shuffled
from ..types import DRAW, Color, GameState, Move, Outcome

logger = logging.getLogger(__name__)

DEFAULT_MOVE_BUDGET = 1000
DEFAULT_EXPLORATION = 2.0
ROOT = 0
NO_PARENT = -1

WIN, LOSS, NEUTRAL = 1.0, 0.0, 0.5


@dataclass
class MCNode:
    state: GameState
    parent: int = NO_PARENT
    children: List[int] = field(default_factory=list)
    moves: List[Move] = field(default_factory=list)
    score: float = 0.0
    playouts: int = 0
    discovered: bool = False
    outcome: Optional[Outcome] = None

    @property
    def fully_expanded(self) -> bool:
        return len(self.children) >= len(self.moves)


@dataclass(frozen=True)
class Playout:
    score: float
    moves_used: int
    interrupted: bool


class MonteCarloStrategy(SearchStrategy):
    """MCTS bounded by a budget of simulated move applications.

    Rewards are always from the perspective of the side to move at the root,
    at every level of the tree.
    """

    name = "dapetcu21-montecarlo"

    def __init__(self, move_budget: int = DEFAULT_MOVE_BUDGET, exploration: float = DEFAULT_EXPLORATION,
                 seed: Optional[int] = None, rng: Optional[np.random.Generator] = None) -> None:
        super().__init__(seed=seed, rng=rng)
        self.move_budget = move_budget
        self.exploration = exploration
        self.last_tree: List[MCNode] = []

    def choose_move(self, state: GameState, options: Optional[StrategyOptions] = None) -> Optional[Move]:
        options = options or StrategyOptions()
        budget = self.move_budget if options.move_budget is None else options.move_budget
        result = self.search(state, budget)
        level = logging.INFO if options.verbose else logging.DEBUG
        logger.log(level, "%s: %d simulations, %d/%d applications", self.name,
                   self.last_tree[ROOT].playouts if self.last_tree else 0, result.moves_used, budget)
        return result.move

    def search(self, state: GameState, move_budget: int) -> SearchResult:
        if not all_legal_moves(state):
            self.last_tree = []
            return SearchResult(score=0.0, move=None)

        tree: List[MCNode] = [MCNode(state=state)]
        self.last_tree = tree
        self._discover(tree[ROOT])
        root_player = state.turn

        moves_used = 0
        while moves_used < move_budget:
            selected = self._select(tree, ROOT)
            expanded, expand_used = self._expand(tree, selected)
            playout = self._playout(tree[expanded].state, move_budget - moves_used - expand_used, root_player)
            if playout.interrupted:
                break
            moves_used += max(1, expand_used + playout.moves_used)
            self._backpropagate(tree, expanded, playout.score)

        root = tree[ROOT]
        best_move: Optional[Move] = None
        best_rate = -1.0
        for i, child_index in enumerate(root.children):
            child = tree[child_index]
            if child.playouts == 0:
                continue
            rate = child.score / child.playouts
            if rate > best_rate:
                best_rate = rate
                best_move = root.moves[i]

        if best_move is None:
            return SearchResult(score=NEUTRAL, move=self.random_move(state), moves_used=moves_used)
        return SearchResult(score=best_rate, move=best_move, moves_used=moves_used)

    # -----------------------------
    # Tree phases
    # -----------------------------
    def _discover(self, node: MCNode) -> None:
        if node.discovered:
            return
        node.discovered = True
        node.outcome = game_outcome(node.state)
        if node.outcome is None:
            node.moves = shuffled(self.rng, all_legal_moves(node.state))

    def ucb1(self, child: MCNode, parent_playouts: int) -> float:
        return child.score / child.playouts + math.sqrt(
            self.exploration * math.log(parent_playouts) / child.playouts
        )

    def _select(self, tree: List[MCNode], index: int) -> int:
        while True:
            node = tree[index]
            self._discover(node)
            if node.outcome is not None or not node.fully_expanded:
                return index

            best_child: Optional[int] = None
            best_bound = -1.0
            for child_index in node.children:
                child = tree[child_index]
                if child.playouts == 0:
                    continue
                bound = self.ucb1(child, node.playouts)
                if bound > best_bound:
                    best_bound = bound
                    best_child = child_index
            if best_child is None:
                return index
            index = best_child

    def _expand(self, tree: List[MCNode], index: int) -> Tuple[int, int]:
        node = tree[index]
        if node.outcome is not None or node.fully_expanded:
            return index, 0
        move = node.moves[len(node.children)]
        tree.append(MCNode(state=apply_move(node.state, move), parent=index))
        child_index = len(tree) - 1
        node.children.append(child_index)
        return child_index, 1

    def _playout(self, state: GameState, budget: int, root_player: Color) -> Playout:
        used = 0
        outcome = game_outcome(state)
        while used < budget and outcome is None:
            moves = all_legal_moves(state)
            if not moves:
                return Playout(NEUTRAL, used, False)
            state = apply_move(state, random_choice(self.rng, moves))
            outcome = game_outcome(state)
            used += 1

        if outcome is None:
            return Playout(NEUTRAL, used, True)
        if outcome == DRAW:
            return Playout(NEUTRAL, used, False)
        return Playout(WIN if outcome is root_player else LOSS, used, False)

    def _backpropagate(self, tree: List[MCNode], index: int, score: float) -> None:
        while index != NO_PARENT:
            node = tree[index]
            node.playouts += 1
            node.score += score
            index = node.parent


__all__ = ["MonteCarloStrategy", "MCNode", "DEFAULT_MOVE_BUDGET"]
