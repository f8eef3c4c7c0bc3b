"""
Request/response models for asking a strategy for a move.

Transport framing is left to the caller; this module only validates the
payload shape, builds a ``GameState`` and dispatches to the named strategy.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .config import EngineSettings, get_engine_settings
from .search import StrategyOptions
from .strategies.registry import get_strategy
from .types import Color, GameState, Move

logger = logging.getLogger(__name__)


class CellModel(BaseModel):
    color: Color


class MoveModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Tuple[int, int] = Field(alias="from")
    to: Tuple[int, int]
    capture: Optional[bool] = None

    @classmethod
    def from_move(cls, move: Move) -> 'MoveModel':
        return cls(from_=move.from_, to=move.to, capture=True if move.capture else None)

    def to_move(self) -> Move:
        return Move(tuple(self.from_), tuple(self.to), capture=bool(self.capture))


class MoveRequest(BaseModel):
    """Position plus the strategy to consult and its optional limits."""

    model_config = ConfigDict(populate_by_name=True)

    board: List[List[Optional[CellModel]]]
    turn: Color
    winner: Optional[Color] = None
    size: int = Field(ge=2)
    strategy: Optional[str] = None
    move_budget: Optional[int] = Field(default=None, ge=0, alias="moveBudget")
    max_depth: Optional[int] = Field(default=None, ge=0, alias="maxDepth")
    seed: Optional[int] = None

    @field_validator('strategy', mode='before')
    @classmethod
    def normalise_strategy(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @model_validator(mode='after')
    def validate_board_shape(self) -> 'MoveRequest':
        if len(self.board) != self.size or any(len(row) != self.size for row in self.board):
            raise ValueError(f"board must be {self.size}x{self.size}")
        return self

    def to_state(self) -> GameState:
        board = tuple(tuple(cell.color if cell is not None else None for cell in row) for row in self.board)
        return GameState(board=board, turn=self.turn, winner=self.winner, size=self.size)


class MoveResponse(BaseModel):
    move: Optional[MoveModel] = None

    def to_wire(self) -> Dict[str, Any]:
        if self.move is None:
            return {"move": None}
        return {"move": self.move.model_dump(by_alias=True, exclude_none=True)}


def get_move(request: Union[MoveRequest, Dict[str, Any]],
             settings: Optional[EngineSettings] = None) -> MoveResponse:
    """Validate ``request``, run the named strategy and wrap its answer.

    Raises ``pydantic.ValidationError`` for malformed payloads and
    ``UnknownStrategyError`` for an unrecognised strategy name.
    """
    if not isinstance(request, MoveRequest):
        request = MoveRequest.model_validate(request)
    settings = settings or get_engine_settings()

    # A supplied name is never replaced, even when blank
    name = settings.default_strategy if request.strategy is None else request.strategy
    strategy = get_strategy(name, settings=settings, seed=request.seed)
    options = StrategyOptions(max_depth=request.max_depth, move_budget=request.move_budget)
    move = strategy.choose_move(request.to_state(), options)
    logger.debug("get_move strategy=%s turn=%s move=%s", strategy.name, request.turn.value, move)
    return MoveResponse(move=MoveModel.from_move(move) if move is not None else None)
