import numpy as np
import pytest

from breakthrough.engine import (
    IllegalMoveError,
    all_legal_moves,
    apply_move,
    check_winner,
    count_pieces,
    game_outcome,
    initial_state,
    move_to_str,
    parse_move_str,
    replay,
    state_from_rows,
    state_key,
    state_to_rows,
)
from breakthrough.types import DRAW, Color, GameState, Move


def _random_game(size, seed, max_plies=200):
    rng = np.random.default_rng(seed)
    state = initial_state(size)
    played = []
    for _ in range(max_plies):
        if state.winner is not None:
            break
        moves = all_legal_moves(state)
        if not moves:
            break
        move = moves[int(rng.integers(len(moves)))]
        played.append(move)
        state = apply_move(state, move)
    return state, played


def test_apply_move_leaves_input_untouched():
    state = initial_state(8)
    before = state_to_rows(state)
    board = state.board
    nxt = apply_move(state, Move((6, 0), (5, 0)))
    assert state.board is board
    assert state_to_rows(state) == before
    assert state.turn is Color.WHITE
    assert nxt.board[5][0] is Color.WHITE
    assert nxt.board[6][0] is None
    assert nxt.turn is Color.BLACK


def test_apply_move_is_deterministic():
    state = initial_state(6)
    move = all_legal_moves(state)[3]
    assert apply_move(state, move) == apply_move(state, move)


def test_apply_move_from_empty_cell_returns_same_state():
    state = initial_state(6)
    assert apply_move(state, Move((3, 3), (2, 3))) is state


def test_capture_removes_exactly_one_piece():
    state = state_from_rows([
        "....",
        ".B..",
        "W...",
        "....",
    ])
    nxt = apply_move(state, Move((2, 0), (1, 1), capture=True))
    assert count_pieces(state) == (1, 1)
    assert count_pieces(nxt) == (1, 0)
    assert nxt.board[1][1] is Color.WHITE


@pytest.mark.parametrize("size", [4, 5, 6, 8])
def test_piece_counts_never_increase(size):
    rng = np.random.default_rng(size)
    state = initial_state(size)
    prev = count_pieces(state)
    for _ in range(100):
        if state.winner is not None:
            break
        moves = all_legal_moves(state)
        if not moves:
            break
        move = moves[int(rng.integers(len(moves)))]
        state = apply_move(state, move)
        counts = count_pieces(state)
        assert counts[0] <= prev[0] and counts[1] <= prev[1]
        assert sum(prev) - sum(counts) == (1 if move.capture else 0)
        prev = counts


def test_winning_move_keeps_turn_with_winner():
    state = state_from_rows([
        ".....",
        "..W..",
        ".....",
        "B....",
        ".....",
    ])
    nxt = apply_move(state, Move((1, 2), (0, 2)))
    assert nxt.winner is Color.WHITE
    assert nxt.turn is Color.WHITE


def test_winner_is_derived_from_board_not_turn():
    # White already stands on row 0 while Black is to move
    state = state_from_rows([
        "...W....",
        "........",
        "........",
        "........",
        "........",
        "........",
        "B.......",
        "........",
    ], turn=Color.BLACK)
    assert check_winner(state) is Color.WHITE
    assert state.winner is Color.WHITE

    state = state_from_rows([
        "........",
        ".W......",
        "........",
        "........",
        "........",
        "........",
        "........",
        "...B....",
    ], turn=Color.WHITE)
    assert check_winner(state) is Color.BLACK


def test_open_position_has_no_winner():
    state = initial_state(8)
    assert check_winner(state) is None
    assert game_outcome(state) is None
    assert not state.is_terminal


def test_empty_board_is_a_draw():
    state = state_from_rows(["....", "....", "....", "...."])
    assert check_winner(state) is None
    assert game_outcome(state) == DRAW
    assert state.is_draw
    assert state.is_terminal
    assert all_legal_moves(state) == []


@pytest.mark.parametrize("size", [4, 5, 6, 7, 8])
def test_replay_reproduces_random_game(size):
    final, played = _random_game(size, seed=size * 11)
    replayed = replay(played, size=size)
    assert replayed == final


def test_replay_rejects_illegal_move():
    with pytest.raises(IllegalMoveError):
        replay([Move((6, 0), (5, 0)), Move((5, 0), (4, 0))], size=8)
    with pytest.raises(ValueError):
        replay([Move((6, 0), (4, 0))], size=8)


def test_state_key_distinguishes_turn_and_matches_transpositions():
    state = initial_state(6)
    flipped = GameState(board=state.board, turn=Color.BLACK, winner=None, size=6)
    assert state_key(state) != state_key(flipped)

    a = [Move((4, 0), (3, 0)), Move((1, 0), (2, 0)), Move((4, 5), (3, 5)), Move((1, 5), (2, 5))]
    b = [Move((4, 5), (3, 5)), Move((1, 5), (2, 5)), Move((4, 0), (3, 0)), Move((1, 0), (2, 0))]
    assert state_key(replay(a, size=6)) == state_key(replay(b, size=6))


def test_move_string_round_trip():
    move = Move((6, 1), (5, 2), capture=True)
    text = move_to_str(move)
    assert text == "6,1x5,2"
    assert parse_move_str(text) == move
    assert parse_move_str(" 6,1 - 5,1 ") == Move((6, 1), (5, 1))


@pytest.mark.parametrize("text", ["", "6,1", "a,b-c,d", "6,1>5,1"])
def test_parse_move_str_rejects_malformed(text):
    assert parse_move_str(text) is None


def test_state_from_rows_validation():
    with pytest.raises(ValueError):
        state_from_rows(["..Q", "...", "..."])
    with pytest.raises(ValueError):
        state_from_rows(["...", "..", "..."])
    assert state_to_rows(state_from_rows(["W.B", "...", ".B."])) == ["W.B", "...", ".B."]
