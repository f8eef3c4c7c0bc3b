import numpy as np
import pytest

from breakthrough.engine import all_legal_moves, apply_move, initial_state, state_from_rows
from breakthrough.search import RandomStrategy, StrategyOptions
from breakthrough.strategies.mcts import NO_PARENT, ROOT, MCNode, MonteCarloStrategy
from breakthrough.types import Color

RACE = [
    ".....",
    "..W..",
    ".....",
    "B..W.",
    ".....",
]


def test_picks_immediate_win():
    state = state_from_rows(RACE)
    strategy = MonteCarloStrategy(move_budget=1000, seed=0)
    result = strategy.search(state, 1000)
    assert result.move is not None and result.move.to[0] == 0
    assert result.score == 1.0


def test_zero_budget_falls_back_to_random_legal_move():
    state = initial_state(8)
    strategy = MonteCarloStrategy(move_budget=0, seed=3)
    move = strategy.choose_move(state)
    assert move in all_legal_moves(state)
    assert MonteCarloStrategy(move_budget=0, seed=3).choose_move(state) == move


def test_interrupted_playout_stops_search():
    # Five applications cannot finish a random game from the 8x8 start
    state = initial_state(8)
    strategy = MonteCarloStrategy(seed=1)
    result = strategy.search(state, 5)
    assert result.move in all_legal_moves(state)
    assert result.moves_used == 0
    assert strategy.last_tree[ROOT].playouts == 0


def test_tree_links_and_playout_counts():
    state = initial_state(5)
    strategy = MonteCarloStrategy(seed=2)
    result = strategy.search(state, 600)
    assert result.moves_used <= 600
    tree = strategy.last_tree
    assert tree[ROOT].parent == NO_PARENT
    assert tree[ROOT].playouts > 0
    for index, node in enumerate(tree):
        if index != ROOT:
            assert 0 <= node.parent < index
            assert index in tree[node.parent].children
        assert sum(tree[c].playouts for c in node.children) <= node.playouts
        assert 0.0 <= node.score <= node.playouts


def test_seeded_search_is_reproducible():
    state = initial_state(6)
    a = MonteCarloStrategy(seed=11).search(state, 400)
    b = MonteCarloStrategy(seed=11).search(state, 400)
    assert a == b


def test_budget_from_options():
    state = initial_state(5)
    strategy = MonteCarloStrategy(move_budget=10_000, seed=4)
    move = strategy.choose_move(state, StrategyOptions(move_budget=100))
    assert move in all_legal_moves(state)
    assert len(strategy.last_tree) <= 101


def test_no_legal_moves_returns_none():
    state = state_from_rows([
        "....",
        "....",
        "....",
        "W...",
    ], turn=Color.BLACK)
    assert MonteCarloStrategy(seed=0).choose_move(state) is None


def test_ucb1_prefers_unexplored_child():
    strategy = MonteCarloStrategy(seed=0)
    state = initial_state(4)
    busy = MCNode(state=state, parent=0, score=6.0, playouts=9)
    fresh = MCNode(state=state, parent=0, score=0.5, playouts=1)
    assert strategy.ucb1(fresh, 10) > strategy.ucb1(busy, 10)


def _wins_against_random(budget, games, seed):
    rng = np.random.default_rng(seed)
    wins = 0
    for g in range(games):
        state = initial_state(6)
        mcts_color = Color.WHITE if g % 2 == 0 else Color.BLACK
        while state.winner is None:
            if state.turn is mcts_color:
                move = MonteCarloStrategy(move_budget=budget, rng=rng).choose_move(state)
            else:
                move = RandomStrategy(rng=rng).choose_move(state)
            if move is None:
                break
            state = apply_move(state, move)
        wins += state.winner is mcts_color
    return wins


@pytest.mark.slow
def test_larger_budget_does_not_regress_against_random():
    low = _wins_against_random(50, games=20, seed=123)
    high = _wins_against_random(5000, games=20, seed=123)
    assert high >= low
    assert high >= 15
