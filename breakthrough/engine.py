"""
Rules engine: board setup, move application and win detection.

Move generation lives in ``breakthrough.moves`` and is re-exported here so
callers can import the whole rules API from one place.
"""
from __future__ import annotations

import re
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from .moves import (
    IllegalMoveError,
    MoveValidator,
    all_legal_moves,
    in_bounds,
    legal_moves_from,
)
from .types import (
    DEFAULT_SIZE,
    DRAW,
    Board,
    Cell,
    Color,
    GameState,
    Move,
    Outcome,
    Row,
)

__all__ = [
    "initial_state",
    "legal_moves_from",
    "all_legal_moves",
    "apply_move",
    "check_winner",
    "game_outcome",
    "count_pieces",
    "state_key",
    "move_to_str",
    "parse_move_str",
    "state_from_rows",
    "state_to_rows",
    "replay",
    "in_bounds",
    "IllegalMoveError",
]

_CELL_BITS = {None: 0, Color.WHITE: 1, Color.BLACK: 2}
_CELL_CHARS = {None: ".", Color.WHITE: "W", Color.BLACK: "B"}


# ============================
# Board setup and utilities
# ============================
def initial_state(size: int = DEFAULT_SIZE) -> GameState:
    """Black on rows 0..1, White on the last two rows, White to move."""
    black_row: Row = (Color.BLACK,) * size
    white_row: Row = (Color.WHITE,) * size
    empty_row: Row = (None,) * size
    board: Board = tuple(
        white_row if r >= size - 2 else black_row if r < 2 else empty_row
        for r in range(size)
    )
    return GameState(board=board, turn=Color.WHITE, winner=None, size=size)


def count_pieces(state: GameState) -> Tuple[int, int]:
    """Count pieces on the board.

    Returns:
        Tuple of (white, black)
    """
    white = sum(row.count(Color.WHITE) for row in state.board)
    black = sum(row.count(Color.BLACK) for row in state.board)
    return white, black


def _winner_on_board(board: Board, size: int) -> Optional[Color]:
    top = board[0]
    bottom = board[size - 1]
    for c in range(size):
        if top[c] is Color.WHITE:
            return Color.WHITE
        if bottom[c] is Color.BLACK:
            return Color.BLACK
    return None


def check_winner(state: GameState) -> Optional[Color]:
    """The color owning a piece on its goal rank, derived from the board alone."""
    return _winner_on_board(state.board, state.size)


def game_outcome(state: GameState) -> Optional[Outcome]:
    """Winner color, ``"draw"`` when no pieces remain, or None while the game is open."""
    winner = check_winner(state)
    if winner is not None:
        return winner
    if state.is_draw:
        return DRAW
    return None


# ============================
# Applying moves
# ============================
def apply_move(state: GameState, move: Move) -> GameState:
    """Relocate the moving piece and return the successor state.

    The input state is never modified. If ``move.from_`` holds no piece the
    original state is returned unchanged; any other malformed move is out of
    contract.
    """
    fr, fc = move.from_
    tr, tc = move.to
    piece: Cell = state.board[fr][fc]
    if piece is None:
        return state

    rows: List[Row] = list(state.board)
    src = list(rows[fr])
    src[fc] = None
    rows[fr] = tuple(src)
    dst = list(rows[tr])
    dst[tc] = piece
    rows[tr] = tuple(dst)
    board: Board = tuple(rows)

    winner = _winner_on_board(board, state.size)
    next_turn = state.turn if winner is not None else piece.opponent
    return GameState(board=board, turn=next_turn, winner=winner, size=state.size)


def replay(moves: Iterable[Move], size: int = DEFAULT_SIZE, validate: bool = True) -> GameState:
    """Replay a recorded move sequence from the initial position."""
    state = initial_state(size)
    for ply, move in enumerate(moves, start=1):
        if validate and not MoveValidator.validate(state, move):
            raise IllegalMoveError(f"Illegal move at ply {ply}: {move_to_str(move)}")
        state = apply_move(state, move)
    return state


# ============================
# Encodings
# ============================
def state_key(state: GameState) -> int:
    """Compact canonical key: two bits per cell, row-major, then the side to move."""
    key = 0
    bits = _CELL_BITS
    for row in state.board:
        for cell in row:
            key = (key << 2) | bits[cell]
    return (key << 1) | (state.turn is Color.BLACK)


def move_to_str(move: Move) -> str:
    """Convert a move to ``r,c-r,c`` notation (``x`` separator for captures)."""
    sep = "x" if move.capture else "-"
    return f"{move.from_[0]},{move.from_[1]}{sep}{move.to[0]},{move.to[1]}"


_MOVE_RE = re.compile(r"^(\d+),(\d+)([-x])(\d+),(\d+)$")


def parse_move_str(s: str) -> Optional[Move]:
    """Parse ``r,c-r,c`` / ``r,cxr,c`` notation; None if the text is malformed."""
    m = _MOVE_RE.match(s.strip().lower().replace(" ", ""))
    if not m:
        return None
    fr, fc, sep, tr, tc = m.groups()
    return Move((int(fr), int(fc)), (int(tr), int(tc)), capture=sep == "x")


def state_from_rows(rows: Sequence[str], turn: Color = Color.WHITE) -> GameState:
    """Build a state from text rows of ``W``, ``B`` and ``.``; winner is derived."""
    size = len(rows)
    lookup = {".": None, "W": Color.WHITE, "B": Color.BLACK}
    try:
        board: Board = tuple(tuple(lookup[ch] for ch in row.strip().upper()) for row in rows)
    except KeyError as exc:
        raise ValueError(f"Unknown board character {exc.args[0]!r}") from None
    state = GameState(board=board, turn=turn, winner=None, size=size)
    return replace(state, winner=check_winner(state))


def state_to_rows(state: GameState) -> List[str]:
    return ["".join(_CELL_CHARS[cell] for cell in row) for row in state.board]
