from __future__ import annotations

from .board import Board, Coord, in_bounds
from .directions import ALL_DIRECTIONS, Direction
from .pieces import Color, PieceKind, Square


def is_attacked(board: Board, square: Coord, by: Color) -> bool:
    """Return True if any piece of ``by`` attacks ``square``.

    Rays are cast from ``square`` along every catalogued direction. The first
    occupied square on a ray decides that ray: a defender's piece blocks it,
    an attacker's piece hits only if it could step back along the ray (kings,
    knights and pawns only from the adjacent step). Rays are independent, so
    the scan stops at the first hit.
    """
    defender = by.opponent
    x0, y0 = square
    for direction in ALL_DIRECTIONS:
        dx, dy = direction.step
        x, y = x0, y0
        for distance in range(1, 8):
            x += dx
            y += dy
            if not in_bounds(x, y):
                break
            occupant = board[x, y]
            if occupant.is_empty:
                continue
            if occupant.color is defender:
                break
            if _hits(occupant, direction, distance):
                return True
            break
    return False


def _hits(attacker: Square, direction: Direction, distance: int) -> bool:
    # The attacker reaches the scanned square by moving against the ray.
    toward = direction.opposite
    kind = attacker.piece
    if kind is PieceKind.KING or kind is PieceKind.KNIGHT:
        return distance == 1 and toward in attacker.move_set
    if kind is PieceKind.PAWN:
        return distance == 1 and toward.is_diagonal and toward in attacker.move_set
    if kind.is_slider:
        return toward in attacker.move_set
    return False


def king_in_check(board: Board, side: Color, king: Coord | None) -> bool:
    """Return True if ``side``'s king at ``king`` is attacked (False if absent)."""
    if king is None:
        return False
    return is_attacked(board, king, side.opponent)
