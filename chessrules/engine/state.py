from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .attacks import king_in_check
from .board import Board, Coord, home_row, promotion_row
from .errors import IllegalSelection
from .pieces import EMPTY, PROMOTION_KINDS, Color, PieceKind, Square
from .terminal import Terminal, classify


KINGSIDE, QUEENSIDE = 0, 1
# rights index -> rook file
_ROOK_FILES = {KINGSIDE: 7, QUEENSIDE: 0}
_KING_FILE = 4


def _full_rights() -> List[List[bool]]:
    return [[True, True], [True, True]]


def _no_kings() -> List[Optional[Coord]]:
    return [None, None]


@dataclass(frozen=True)
class MoveOutcome:
    """Result of applying a move (or completing a promotion)."""

    check: bool
    terminal: Terminal = Terminal.NONE
    pending_promotion: bool = False


@dataclass
class GameState:
    """Board plus the side-to-move bookkeeping of a chess position.

    Notes:
    - ``king_coords[c]`` always names the square holding ``c``'s king, or is
      ``None`` when that side has no king (possible after board editing).
    - ``castling_rights[c]`` is ``[kingside, queenside]``.
    - ``pending_promotion`` is set between a pawn reaching the last rank
      without a promotion choice and :meth:`complete_promotion`.
    """

    board: Board
    turn: Color = Color.WHITE
    king_coords: List[Optional[Coord]] = field(default_factory=_no_kings)
    castling_rights: List[List[bool]] = field(default_factory=_full_rights)
    en_passant: Optional[Coord] = None
    halfmove_clock: int = 0
    fullmove_number: int = 1
    pending_promotion: Optional[Coord] = None
    allow_castling_out_of_check: bool = False

    @classmethod
    def startpos(cls, *, allow_castling_out_of_check: bool = False) -> "GameState":
        """Return the standard starting position with White to move."""
        return cls(
            board=Board.startpos(),
            king_coords=[(_KING_FILE, 7), (_KING_FILE, 0)],
            allow_castling_out_of_check=allow_castling_out_of_check,
        )

    def copy(self) -> "GameState":
        return GameState(
            board=self.board.copy(),
            turn=self.turn,
            king_coords=list(self.king_coords),
            castling_rights=[list(r) for r in self.castling_rights],
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            pending_promotion=self.pending_promotion,
            allow_castling_out_of_check=self.allow_castling_out_of_check,
        )

    # --- Queries ---
    def in_check(self, side: Optional[Color] = None) -> bool:
        """Return True if ``side`` (default: side to move) has its king attacked."""
        s = self.turn if side is None else side
        return king_in_check(self.board, s, self.king_coords[s])

    # --- Move application ---
    def apply_move(
        self, origin: Coord, target: Coord, promotion: Optional[PieceKind] = None
    ) -> MoveOutcome:
        """Play ``origin -> target`` in place.

        The caller is responsible for ``target`` being a legal destination;
        :class:`~chessrules.engine.game.Game` checks that before calling.

        Raises:
            IllegalSelection: If a promotion is pending, ``origin`` is empty,
                or ``promotion`` is not a piece a pawn can promote to.
        """
        if self.pending_promotion is not None:
            raise IllegalSelection("a promotion choice is pending")
        mover = self.board[origin]
        if mover.is_empty:
            raise IllegalSelection("no piece on the origin square")
        if promotion is not None and promotion not in PROMOTION_KINDS:
            raise IllegalSelection(f"cannot promote to {promotion.name.lower()}")
        side = mover.color
        captured = self.board[target]
        is_pawn = mover.piece is PieceKind.PAWN
        is_king = mover.piece is PieceKind.KING

        # 1. halfmove clock
        if is_pawn or not captured.is_empty:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        # 2. en passant capture: the victim sits beside the origin on the target file
        if is_pawn and target == self.en_passant and captured.is_empty:
            self.board[target[0], origin[1]] = EMPTY

        # 3. en passant field
        self.en_passant = None
        if is_pawn and abs(target[1] - origin[1]) == 2:
            self.en_passant = (origin[0], (origin[1] + target[1]) // 2)

        # 4. castling rights
        self._update_castling_rights(mover, origin, captured, target)

        # 5. castle rook relocation
        if is_king and abs(target[0] - origin[0]) == 2:
            row = origin[1]
            if target[0] > origin[0]:
                rook_from, rook_to = (7, row), (target[0] - 1, row)
            else:
                rook_from, rook_to = (0, row), (target[0] + 1, row)
            self.board[rook_to] = self.board[rook_from]
            self.board[rook_from] = EMPTY

        # 6. king coordinate
        if is_king:
            self.king_coords[side] = target

        # 7. board mutation
        self.board[target] = mover
        self.board[origin] = EMPTY

        # 8. promotion
        if is_pawn and target[1] == promotion_row(side):
            if promotion is None:
                self.pending_promotion = target
                return MoveOutcome(check=False, pending_promotion=True)
            self.board[target] = Square(promotion, side)

        return self._finish_turn()

    def complete_promotion(self, kind: PieceKind) -> MoveOutcome:
        """Replace the pending pawn with ``kind`` and hand the turn over."""
        if self.pending_promotion is None:
            raise IllegalSelection("no promotion is pending")
        if kind not in PROMOTION_KINDS:
            raise IllegalSelection(f"cannot promote to {kind.name.lower()}")
        square = self.pending_promotion
        self.board[square] = Square(kind, self.board[square].color)
        self.pending_promotion = None
        return self._finish_turn()

    def _finish_turn(self) -> MoveOutcome:
        # 9. turn toggle; fullmove number advances once Black has moved
        if self.turn is Color.BLACK:
            self.fullmove_number += 1
        self.turn = self.turn.opponent
        # 10. check flag, 11. terminal state
        check = self.in_check()
        return MoveOutcome(check=check, terminal=classify(self, in_check=check))

    def _update_castling_rights(
        self, mover: Square, origin: Coord, captured: Square, target: Coord
    ) -> None:
        """Clear rights on king moves, rook moves and rook captures on home corners."""
        side = mover.color
        if mover.piece is PieceKind.KING:
            self.castling_rights[side] = [False, False]
        elif mover.piece is PieceKind.ROOK:
            self._drop_right_for_corner(side, origin)
        if captured.piece is PieceKind.ROOK:
            self._drop_right_for_corner(captured.color, target)

    def _drop_right_for_corner(self, color: Color, square: Coord) -> None:
        if square[1] != home_row(color):
            return
        for index, rook_file in _ROOK_FILES.items():
            if square[0] == rook_file:
                self.castling_rights[color][index] = False

    # --- Board editing ---
    def place_piece(self, kind: PieceKind, color: Color, square: Coord) -> None:
        """Put a piece on ``square`` outside of move legality.

        Placing a king moves that side's king: any previous king of the same
        colour is removed so ``king_coords`` stays exact.
        """
        self._check_editable()
        if kind is PieceKind.EMPTY:
            self.clear_square(square)
            return
        new = Square(kind, color)
        self._forget_king_on(square)
        if kind is PieceKind.KING:
            previous = self.king_coords[color]
            if previous is not None and previous != square:
                self.board[previous] = EMPTY
            self.king_coords[color] = square
        self.board[square] = new
        self._after_edit()

    def clear_square(self, square: Coord) -> None:
        self._check_editable()
        self._forget_king_on(square)
        self.board[square] = EMPTY
        self._after_edit()

    def clear_board(self) -> None:
        self._check_editable()
        self.board.clear()
        self.king_coords = [None, None]
        self._after_edit()

    def _check_editable(self) -> None:
        if self.pending_promotion is not None:
            raise IllegalSelection("a promotion choice is pending")

    def _forget_king_on(self, square: Coord) -> None:
        occupant = self.board[square]
        if occupant.piece is PieceKind.KING and self.king_coords[occupant.color] == square:
            self.king_coords[occupant.color] = None

    def _after_edit(self) -> None:
        self.en_passant = None
        self.reconcile_castling_rights()

    def reconcile_castling_rights(self) -> None:
        """Drop rights whose king or rook is no longer on its home square."""
        for color in (Color.WHITE, Color.BLACK):
            row = home_row(color)
            king_home = self.board[_KING_FILE, row] == Square(PieceKind.KING, color)
            for index, rook_file in _ROOK_FILES.items():
                rook_home = self.board[rook_file, row] == Square(PieceKind.ROOK, color)
                if not (king_home and rook_home):
                    self.castling_rights[color][index] = False
