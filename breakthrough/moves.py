from __future__ import annotations

from typing import List

from .types import Color, GameState, Move, Position

# Column deltas in generation order: straight, forward-left, forward-right
_STEPS = (0, -1, 1)


class IllegalMoveError(ValueError):
    """Raised when a recorded move is not legal in the position it is replayed on."""


def in_bounds(size: int, r: int, c: int) -> bool:
    return 0 <= r < size and 0 <= c < size


class MoveGenerator:
    """Generates legal moves for a given state.

    Breakthrough pawns step one row toward the opponent's back rank: straight
    ahead onto an empty cell, or diagonally onto an empty cell or an enemy
    piece (capture). Board edges restrict diagonals through bounds checks only.
    """

    def legal_moves_from(self, state: GameState, r: int, c: int) -> List[Move]:
        """Moves for the piece on (r, c); empty unless it belongs to the side to move."""
        piece = state.board[r][c]
        if piece is None or piece is not state.turn:
            return []
        size = state.size
        fr = r + piece.direction
        if not 0 <= fr < size:
            return []
        row = state.board[fr]
        origin: Position = (r, c)
        moves: List[Move] = []
        for dc in _STEPS:
            fc = c + dc
            if not 0 <= fc < size:
                continue
            target = row[fc]
            if target is None:
                moves.append(Move(origin, (fr, fc)))
            elif dc != 0 and target is not piece:
                moves.append(Move(origin, (fr, fc), capture=True))
        return moves

    def legal_moves(self, state: GameState) -> List[Move]:
        side: Color = state.turn
        moves: List[Move] = []
        for r, row in enumerate(state.board):
            for c, cell in enumerate(row):
                if cell is side:
                    moves.extend(self.legal_moves_from(state, r, c))
        return moves


class MoveValidator:
    """Validates moves against the generated legal moves."""

    @staticmethod
    def validate(state: GameState, move: Move) -> bool:
        fr, fc = move.from_
        if not in_bounds(state.size, fr, fc):
            return False
        return move in _GENERATOR.legal_moves_from(state, fr, fc)


_GENERATOR = MoveGenerator()


# Convenience functional API

def legal_moves_from(state: GameState, r: int, c: int) -> List[Move]:
    """Moves for the piece on (r, c); empty for an empty cell or an opponent piece."""
    return _GENERATOR.legal_moves_from(state, r, c)


def all_legal_moves(state: GameState) -> List[Move]:
    """Every move available to the side to move, in row-major generation order."""
    return _GENERATOR.legal_moves(state)
