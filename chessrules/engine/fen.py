from __future__ import annotations

from typing import List, Optional

from .board import Board, Coord
from .errors import MalformedFen
from .move import square_to_str, str_to_square
from .pieces import Color, PieceKind, Square
from .state import GameState


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# FEN castling letters in their fixed output order: (letter, color, rights index)
_CASTLING_LETTERS = (
    ("K", Color.WHITE, 0),
    ("Q", Color.WHITE, 1),
    ("k", Color.BLACK, 0),
    ("q", Color.BLACK, 1),
)


def encode(state: GameState) -> str:
    """Serialize ``state`` into a six-field FEN string.

    Returns:
        str: Placement, side, castling, en passant, halfmove clock and
            fullmove number, space-separated.
    """
    ranks: List[str] = []
    for row in state.board.rows():
        run = 0
        out: List[str] = []
        for sq in row:
            ch = sq.to_fen_char()
            if ch is None:
                run += 1
                continue
            if run > 0:
                out.append(str(run))
                run = 0
            out.append(ch)
        if run > 0:
            out.append(str(run))
        ranks.append("".join(out))
    placement = "/".join(ranks)

    castling = "".join(
        letter
        for letter, color, index in _CASTLING_LETTERS
        if state.castling_rights[color][index]
    )
    ep = square_to_str(state.en_passant) if state.en_passant is not None else "-"
    return (
        f"{placement} {state.turn.fen_char} {castling or '-'} {ep} "
        f"{state.halfmove_clock} {state.fullmove_number}"
    )


def decode(fen: str, *, allow_castling_out_of_check: bool = False) -> GameState:
    """Parse a FEN string into a fresh :class:`GameState`.

    Args:
        fen (str): FEN string describing the position to load.
        allow_castling_out_of_check (bool): Rules option carried by the state.

    Returns:
        GameState: New state; nothing else is touched.

    Raises:
        MalformedFen: If the text does not have six fields, a rank does not
            describe exactly eight files, a piece letter, side, castling field
            or en-passant square is invalid, a counter is not a non-negative
            integer (fullmove at least 1), or a side has more than one king.
    """
    if not fen or not isinstance(fen, str):
        raise MalformedFen("FEN must be a non-empty string")
    parts = fen.split()
    if len(parts) != 6:
        raise MalformedFen(f"FEN must have 6 fields, got {len(parts)}")
    placement, stm, castling, ep, halfmove, fullmove = parts

    board, kings = _parse_placement(placement)

    if stm not in ("w", "b"):
        raise MalformedFen("side to move must be 'w' or 'b'")
    turn = Color.WHITE if stm == "w" else Color.BLACK

    rights = [[False, False], [False, False]]
    if castling != "-":
        letters = {letter: (color, index) for letter, color, index in _CASTLING_LETTERS}
        for ch in castling:
            if ch not in letters:
                raise MalformedFen(f"invalid castling rights: {castling!r}")
            color, index = letters[ch]
            rights[color][index] = True

    en_passant: Optional[Coord] = None
    if ep != "-":
        try:
            en_passant = str_to_square(ep)
        except ValueError as e:
            raise MalformedFen(f"invalid en passant square: {ep!r}") from e
        # targets only exist on rank 6 (row 2) or rank 3 (row 5)
        if en_passant[1] not in (2, 5):
            raise MalformedFen(f"invalid en passant square rank: {ep!r}")

    halfmove_clock = _parse_counter(halfmove, "halfmove clock", minimum=0)
    fullmove_number = _parse_counter(fullmove, "fullmove number", minimum=1)

    return GameState(
        board=board,
        turn=turn,
        king_coords=kings,
        castling_rights=rights,
        en_passant=en_passant,
        halfmove_clock=halfmove_clock,
        fullmove_number=fullmove_number,
        allow_castling_out_of_check=allow_castling_out_of_check,
    )


def _parse_placement(placement: str) -> tuple[Board, List[Optional[Coord]]]:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise MalformedFen("FEN board must have 8 ranks")
    board = Board()
    kings: List[Optional[Coord]] = [None, None]
    for y, rank in enumerate(ranks):
        x = 0
        for ch in rank:
            if ch in "0123456789":
                n = int(ch)
                if n < 1 or n > 8:
                    raise MalformedFen("invalid empty count in FEN rank")
                x += n
                if x > 8:
                    raise MalformedFen("too many squares in FEN rank")
                continue
            if x >= 8:
                raise MalformedFen("too many squares in FEN rank")
            try:
                sq = Square.from_fen_char(ch)
            except ValueError as e:
                raise MalformedFen(f"invalid piece in FEN: {ch!r}") from e
            if sq.piece is PieceKind.KING:
                if kings[sq.color] is not None:
                    raise MalformedFen(f"more than one {sq.color.name.lower()} king")
                kings[sq.color] = (x, y)
            board[x, y] = sq
            x += 1
        if x != 8:
            raise MalformedFen("rank does not sum to 8 squares in FEN")
    return board, kings


def _parse_counter(text: str, name: str, *, minimum: int) -> int:
    if not (text.isascii() and text.isdigit()):
        raise MalformedFen(f"invalid {name} in FEN: {text!r}")
    value = int(text)
    if value < minimum:
        raise MalformedFen(f"invalid {name} in FEN: {text!r}")
    return value
