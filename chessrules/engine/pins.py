from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .board import Board, Coord, in_bounds
from .directions import Direction, direction_between
from .pieces import PieceKind


PinAxis = Tuple[Direction, Direction]


def check_for_pin(board: Board, square: Coord, king: Optional[Coord]) -> Optional[PinAxis]:
    """Return the pin axis of the piece on ``square``, or None if it is free.

    The axis is ``(toward_king, away_from_king)``. A piece is pinned when only
    empty squares separate it from its own king and the first piece found on
    the opposite side is an enemy slider able to move along the line.
    """
    piece = board[square]
    if piece.is_empty or king is None or king == square:
        return None
    toward = direction_between(square, king)
    if toward is None:
        return None
    away = toward.opposite

    dx, dy = toward.step
    x, y = square
    while True:
        x += dx
        y += dy
        if not in_bounds(x, y):
            return None
        occupant = board[x, y]
        if occupant.is_empty:
            continue
        if occupant.piece is PieceKind.KING and occupant.color is piece.color:
            break
        return None

    dx, dy = away.step
    x, y = square
    while True:
        x += dx
        y += dy
        if not in_bounds(x, y):
            return None
        occupant = board[x, y]
        if occupant.is_empty:
            continue
        if occupant.color is piece.color or not occupant.piece.is_slider:
            return None
        if toward in occupant.move_set:
            return (toward, away)
        return None


def restrict_to_axis(
    directions: Iterable[Direction], axis: Optional[PinAxis]
) -> Tuple[Direction, ...]:
    """Intersect a move set with a pin axis, keeping the move-set order."""
    if axis is None:
        return tuple(directions)
    return tuple(d for d in directions if d in axis)
