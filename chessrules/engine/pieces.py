from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple

from .directions import DIAGONAL, KNIGHT_JUMPS, ORTHOGONAL, SLIDING, Direction
from .errors import ContractViolation, IllegalSelection


class Color(IntEnum):
    WHITE = 0
    BLACK = 1
    NONE = 2

    @property
    def opponent(self) -> "Color":
        if self is Color.WHITE:
            return Color.BLACK
        if self is Color.BLACK:
            return Color.WHITE
        raise ContractViolation("empty squares have no opponent")

    @property
    def fen_char(self) -> str:
        if self is Color.NONE:
            raise ContractViolation("empty squares have no side letter")
        return "w" if self is Color.WHITE else "b"


class PieceKind(Enum):
    KING = "k"
    QUEEN = "q"
    ROOK = "r"
    BISHOP = "b"
    KNIGHT = "n"
    PAWN = "p"
    EMPTY = " "

    @property
    def is_slider(self) -> bool:
        return self in (PieceKind.QUEEN, PieceKind.ROOK, PieceKind.BISHOP)


PROMOTION_KINDS = (PieceKind.QUEEN, PieceKind.ROOK, PieceKind.BISHOP, PieceKind.KNIGHT)

# Direction sets per kind. Pawns depend on colour and are handled separately.
_MOVE_SETS: Dict[PieceKind, Tuple[Direction, ...]] = {
    PieceKind.KING: SLIDING,
    PieceKind.QUEEN: SLIDING,
    PieceKind.ROOK: ORTHOGONAL,
    PieceKind.BISHOP: DIAGONAL,
    PieceKind.KNIGHT: KNIGHT_JUMPS,
    PieceKind.PAWN: (),
    PieceKind.EMPTY: (),
}
_PAWN_MOVE_SETS: Dict[Color, Tuple[Direction, ...]] = {
    Color.WHITE: (Direction.N, Direction.NW, Direction.NE),
    Color.BLACK: (Direction.S, Direction.SW, Direction.SE),
}


def move_set(kind: PieceKind, color: Color) -> Tuple[Direction, ...]:
    """Return the directions a piece of ``kind`` and ``color`` may step along."""
    if kind is PieceKind.PAWN:
        return _PAWN_MOVE_SETS[color]
    return _MOVE_SETS[kind]


def pawn_forward(color: Color) -> Direction:
    return Direction.N if color is Color.WHITE else Direction.S


@dataclass(frozen=True)
class Square:
    """Contents of a single board cell."""

    piece: PieceKind = PieceKind.EMPTY
    color: Color = Color.NONE

    def __post_init__(self) -> None:
        if (self.color is Color.NONE) != (self.piece is PieceKind.EMPTY):
            raise ContractViolation(
                f"inconsistent square: piece={self.piece.name} color={self.color.name}"
            )

    @property
    def is_empty(self) -> bool:
        return self.piece is PieceKind.EMPTY

    @property
    def move_set(self) -> Tuple[Direction, ...]:
        return move_set(self.piece, self.color)

    def to_fen_char(self) -> Optional[str]:
        """Return the FEN letter for this square, or ``None`` when empty."""
        if self.is_empty:
            return None
        ch = self.piece.value
        return ch.upper() if self.color is Color.WHITE else ch

    @classmethod
    def from_fen_char(cls, ch: str) -> "Square":
        """Build a square from a FEN piece letter (``KQRBNP`` / ``kqrbnp``)."""
        lower = ch.lower()
        if len(ch) != 1 or lower not in _FEN_LETTERS:
            raise ValueError(f"invalid piece letter: {ch!r}")
        color = Color.WHITE if ch.isupper() else Color.BLACK
        return cls(_FEN_LETTERS[lower], color)


_FEN_LETTERS: Dict[str, PieceKind] = {
    k.value: k for k in PieceKind if k is not PieceKind.EMPTY
}

EMPTY = Square()


def promotion_kind(letter: str) -> PieceKind:
    """Parse a promotion letter (``q``, ``r``, ``b`` or ``n``, any case)."""
    lower = letter.lower()
    for kind in PROMOTION_KINDS:
        if kind.value == lower:
            return kind
    raise IllegalSelection(f"invalid promotion piece: {letter!r}")
