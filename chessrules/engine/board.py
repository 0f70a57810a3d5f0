from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .errors import ContractViolation
from .pieces import EMPTY, Color, PieceKind, Square


Coord = Tuple[int, int]

BACK_RANK = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < 8 and 0 <= y < 8


def home_row(color: Color) -> int:
    """Grid row of ``color``'s back rank (row 7 is rank 1)."""
    return 7 if color is Color.WHITE else 0


def pawn_start_row(color: Color) -> int:
    return 6 if color is Color.WHITE else 1


def promotion_row(color: Color) -> int:
    return 0 if color is Color.WHITE else 7


class Board:
    """8x8 grid of squares.

    Notes:
    - Coordinates are ``(x, y)``: x is the file (a=0 .. h=7), y the grid row
      with row 0 = rank 8 and row 7 = rank 1.
    - Off-board access is a contract violation, not a recoverable error.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: Optional[List[List[Square]]] = None) -> None:
        if grid is None:
            grid = [[EMPTY] * 8 for _ in range(8)]
        if len(grid) != 8 or any(len(row) != 8 for row in grid):
            raise ContractViolation("board grid must be 8x8")
        self._grid: List[List[Square]] = grid

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board holding the standard starting position."""
        b = cls()
        for x, kind in enumerate(BACK_RANK):
            b[x, 0] = Square(kind, Color.BLACK)
            b[x, 1] = Square(PieceKind.PAWN, Color.BLACK)
            b[x, 6] = Square(PieceKind.PAWN, Color.WHITE)
            b[x, 7] = Square(kind, Color.WHITE)
        return b

    @staticmethod
    def _check(coord: Coord) -> None:
        x, y = coord
        if not in_bounds(x, y):
            raise ContractViolation(f"coordinates off the board: {coord!r}")

    # -- Element access -----------------------------------------------------

    def __getitem__(self, coord: Coord) -> Square:
        self._check(coord)
        return self._grid[coord[1]][coord[0]]

    def __setitem__(self, coord: Coord, square: Square) -> None:
        self._check(coord)
        self._grid[coord[1]][coord[0]] = square

    def is_empty(self, coord: Coord) -> bool:
        return self[coord].is_empty

    def rows(self) -> Iterator[List[Square]]:
        """Yield the grid rows from rank 8 down to rank 1."""
        for row in self._grid:
            yield list(row)

    # -- Query helpers ------------------------------------------------------

    def occupied(self, color: Color) -> List[Coord]:
        """Squares holding pieces of ``color`` in row-major order."""
        return [
            (x, y)
            for y in range(8)
            for x in range(8)
            if self._grid[y][x].color is color
        ]

    def find(self, kind: PieceKind, color: Color) -> List[Coord]:
        """Squares holding ``color``'s pieces of ``kind``."""
        target = Square(kind, color)
        return [
            (x, y)
            for y in range(8)
            for x in range(8)
            if self._grid[y][x] == target
        ]

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> "Board":
        return Board([list(row) for row in self._grid])

    def clear(self) -> None:
        self._grid = [[EMPTY] * 8 for _ in range(8)]

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        lines: List[str] = []
        for y, row in enumerate(self._grid):
            cells = [sq.to_fen_char() or "." for sq in row]
            lines.append(f"{8 - y} {' '.join(cells)}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
