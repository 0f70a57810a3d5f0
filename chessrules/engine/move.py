from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


PROMOTION_PIECES = {"q", "r", "b", "n"}

Coord = Tuple[int, int]


@dataclass(frozen=True)
class Move:
    """Coordinate move used by the adapters and the move history.

    Attributes:
        from_sq (Coord): Origin ``(x, y)`` grid coordinate.
        to_sq (Coord): Destination ``(x, y)`` grid coordinate.
        promotion (Optional[str]): Lowercase promotion piece, if any.
    """

    from_sq: Coord
    to_sq: Coord
    promotion: Optional[str] = None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + (self.promotion or "")


def parse_uci(uci: str) -> Move:
    """Parse a long algebraic move string.

    Args:
        uci (str): Move encoded like ``"e2e4"`` or ``"e7e8q"``.

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    promo: Optional[str] = None
    if len(uci) == 5:
        promo = uci[4].lower()
        if promo not in PROMOTION_PIECES:
            raise ValueError(f"invalid promotion piece: {promo!r}")
    return Move(from_sq, to_sq, promo)


def str_to_square(s: str) -> Coord:
    """Convert algebraic notation into grid coordinates.

    Args:
        s (str): Square name such as ``"e4"``; the file letter may be upper
            case.

    Returns:
        Coord: ``(x, y)`` with row 0 = rank 8.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2:
        raise ValueError(f"invalid square: {s!r}")
    file_ch = s[0].lower()
    if file_ch < "a" or file_ch > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    x = ord(file_ch) - ord("a")
    y = 8 - int(s[1])
    return (x, y)


def square_to_str(coord: Coord) -> str:
    """Convert grid coordinates into algebraic notation.

    Raises:
        ValueError: If ``coord`` is off the board.
    """
    x, y = coord
    if not (0 <= x < 8 and 0 <= y < 8):
        raise ValueError(f"invalid square coordinates: {coord!r}")
    return chr(ord("a") + x) + str(8 - y)
