from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from .movegen import generate_moves
from .pieces import Color

if TYPE_CHECKING:
    from .state import GameState


class Terminal(Enum):
    NONE = "none"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


def has_legal_moves(state: "GameState", side: Optional[Color] = None) -> bool:
    """Return True if ``side`` (default: side to move) has at least one legal move."""
    side = state.turn if side is None else side
    for square in state.board.occupied(side):
        if generate_moves(state, square):
            return True
    return False


def classify(state: "GameState", in_check: Optional[bool] = None) -> Terminal:
    """Classify the position for the side to move.

    Args:
        state: Position to inspect.
        in_check: Precomputed check flag for the side to move, if known.

    Returns:
        Terminal: NONE while any piece can move, otherwise CHECKMATE when the
            king is attacked and STALEMATE when it is not.
    """
    if has_legal_moves(state):
        return Terminal.NONE
    if in_check is None:
        in_check = state.in_check()
    return Terminal.CHECKMATE if in_check else Terminal.STALEMATE
