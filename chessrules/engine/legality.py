from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, Set

from .attacks import king_in_check
from .board import Coord
from .pieces import EMPTY, PieceKind, Square

if TYPE_CHECKING:
    from .state import GameState


@dataclass(frozen=True)
class UndoRecord:
    """Everything needed to take back one simulated move."""

    origin: Coord
    target: Coord
    moved: Square
    replaced: Square
    victim: Optional[Coord]
    victim_square: Square
    king_before: Optional[Coord]


def simulate(state: "GameState", origin: Coord, target: Coord) -> UndoRecord:
    """Apply ``origin -> target`` to the board in place and return its undo record.

    Only the board and the mover's king coordinate change. An en-passant
    capture also lifts the captured pawn so a checking pawn can be taken.
    """
    board = state.board
    moved = board[origin]
    replaced = board[target]
    side = moved.color

    victim: Optional[Coord] = None
    victim_square = EMPTY
    if (
        moved.piece is PieceKind.PAWN
        and target == state.en_passant
        and replaced.is_empty
        and target[0] != origin[0]
    ):
        victim = (target[0], origin[1])
        victim_square = board[victim]

    king_before = state.king_coords[side]
    if moved.piece is PieceKind.KING:
        state.king_coords[side] = target

    board[origin] = EMPTY
    board[target] = moved
    if victim is not None:
        board[victim] = EMPTY
    return UndoRecord(origin, target, moved, replaced, victim, victim_square, king_before)


def revert(state: "GameState", undo: UndoRecord) -> None:
    """Restore the board and king coordinate captured in ``undo``."""
    board = state.board
    board[undo.target] = undo.replaced
    board[undo.origin] = undo.moved
    if undo.victim is not None:
        board[undo.victim] = undo.victim_square
    state.king_coords[undo.moved.color] = undo.king_before


def filter_legal(state: "GameState", origin: Coord, candidates: Iterable[Coord]) -> Set[Coord]:
    """Keep the candidates that do not leave the mover's own king attacked.

    Each candidate is simulated, tested and reverted before the next one; the
    board is shared, so this loop must stay sequential.
    """
    side = state.board[origin].color
    legal: Set[Coord] = set()
    for target in candidates:
        undo = simulate(state, origin, target)
        try:
            exposed = king_in_check(state.board, side, state.king_coords[side])
        finally:
            revert(state, undo)
        if not exposed:
            legal.add(target)
    return legal
