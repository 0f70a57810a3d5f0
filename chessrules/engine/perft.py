from __future__ import annotations

from typing import Dict, Optional, Sequence

from .board import Coord, promotion_row
from .move import square_to_str
from .movegen import generate_moves
from .pieces import PROMOTION_KINDS, PieceKind
from .state import GameState


def perft(state: GameState, depth: int) -> int:
    """Compute the perft node count for ``state`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Each promotion choice counts as its own child. ``state`` is not modified;
    children are played on copies.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for origin in state.board.occupied(state.turn):
        for target in generate_moves(state, origin):
            for promo in _promotion_choices(state, origin, target):
                if depth == 1:
                    nodes += 1
                    continue
                child = state.copy()
                child.apply_move(origin, target, promo)
                nodes += perft(child, depth - 1)
    return nodes


def divide(state: GameState, depth: int) -> Dict[str, int]:
    """Per-root-move perft counts keyed by long algebraic move."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    counts: Dict[str, int] = {}
    for origin in state.board.occupied(state.turn):
        for target in generate_moves(state, origin):
            for promo in _promotion_choices(state, origin, target):
                child = state.copy()
                child.apply_move(origin, target, promo)
                key = square_to_str(origin) + square_to_str(target) + (promo.value if promo else "")
                counts[key] = perft(child, depth - 1)
    return counts


def _promotion_choices(
    state: GameState, origin: Coord, target: Coord
) -> Sequence[Optional[PieceKind]]:
    piece = state.board[origin]
    if piece.piece is PieceKind.PAWN and target[1] == promotion_row(piece.color):
        return PROMOTION_KINDS
    return (None,)
