from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Set

from .attacks import is_attacked, king_in_check
from .board import Board, Coord, home_row, in_bounds, pawn_start_row
from .directions import Direction
from .legality import filter_legal
from .pieces import Color, PieceKind, Square
from .pins import check_for_pin, restrict_to_axis

if TYPE_CHECKING:
    from .state import GameState


# (rights index, rook file, step toward the rook, squares between king and rook)
_CASTLES = ((0, 7, 1, 2), (1, 0, -1, 3))
_KING_FILE = 4


def generate_moves(state: "GameState", square: Coord) -> Set[Coord]:
    """Return the legal destinations of the piece on ``square``.

    Pins are resolved up front; the simulate/revert filter only runs for king
    moves and, for other pieces, while their own king is in check.
    """
    board = state.board
    piece = board[square]
    if piece.is_empty:
        return set()
    side = piece.color
    king = state.king_coords[side]
    in_check = king_in_check(board, side, king)
    kind = piece.piece

    if kind is PieceKind.KING:
        moves = filter_legal(state, square, _steps(board, square, side, piece.move_set))
        moves |= _castling_moves(state, square, side, in_check)
        return moves

    pin = check_for_pin(board, square, king)
    if kind is PieceKind.KNIGHT:
        if pin is not None:
            return set()
        moves = _steps(board, square, side, piece.move_set)
    elif kind is PieceKind.PAWN:
        moves = _pawn_moves(state, square, side, restrict_to_axis(piece.move_set, pin))
        # En passant empties two squares of one rank, which the pin scan cannot see.
        if not in_check and state.en_passant in moves:
            moves -= {state.en_passant} - filter_legal(state, square, [state.en_passant])
    else:
        moves = _slides(board, square, side, restrict_to_axis(piece.move_set, pin))

    if in_check:
        moves = filter_legal(state, square, moves)
    return moves


def _steps(board: Board, square: Coord, side: Color, directions: Iterable[Direction]) -> Set[Coord]:
    x, y = square
    moves: Set[Coord] = set()
    for d in directions:
        dx, dy = d.step
        tx, ty = x + dx, y + dy
        if not in_bounds(tx, ty):
            continue
        if board[tx, ty].color is side:
            continue
        moves.add((tx, ty))
    return moves


def _slides(board: Board, square: Coord, side: Color, directions: Iterable[Direction]) -> Set[Coord]:
    x0, y0 = square
    moves: Set[Coord] = set()
    for d in directions:
        dx, dy = d.step
        x, y = x0, y0
        for _ in range(7):
            x += dx
            y += dy
            if not in_bounds(x, y):
                break
            occupant = board[x, y]
            if occupant.color is side:
                break
            moves.add((x, y))
            if not occupant.is_empty:
                break
    return moves


def _pawn_moves(
    state: "GameState", square: Coord, side: Color, directions: Iterable[Direction]
) -> Set[Coord]:
    board = state.board
    x, y = square
    moves: Set[Coord] = set()
    for d in directions:
        dx, dy = d.step
        tx, ty = x + dx, y + dy
        if not in_bounds(tx, ty):
            continue
        dest = board[tx, ty]
        if d.is_orthogonal:
            if not dest.is_empty:
                continue
            moves.add((tx, ty))
            if y == pawn_start_row(side) and board[tx, ty + dy].is_empty:
                moves.add((tx, ty + dy))
        elif not dest.is_empty:
            if dest.color is not side:
                moves.add((tx, ty))
        elif (tx, ty) == state.en_passant and board[tx, y] == Square(PieceKind.PAWN, side.opponent):
            moves.add((tx, ty))
    return moves


def _castling_moves(state: "GameState", square: Coord, side: Color, in_check: bool) -> Set[Coord]:
    if in_check and not state.allow_castling_out_of_check:
        return set()
    board = state.board
    row = home_row(side)
    if square != (_KING_FILE, row):
        return set()
    rook = Square(PieceKind.ROOK, side)
    moves: Set[Coord] = set()
    for index, rook_file, step, between in _CASTLES:
        if not state.castling_rights[side][index]:
            continue
        if board[rook_file, row] != rook:
            continue
        path = [(_KING_FILE + step * i, row) for i in range(1, between + 1)]
        if any(not board.is_empty(sq) or is_attacked(board, sq, side.opponent) for sq in path):
            continue
        moves.add((_KING_FILE + 2 * step, row))
    return moves
