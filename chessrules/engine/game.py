from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .board import Coord, promotion_row
from .errors import IllegalSelection
from .fen import decode, encode
from .move import Move, parse_uci, square_to_str
from .movegen import generate_moves
from .pieces import PROMOTION_KINDS, Color, PieceKind, promotion_kind
from .state import GameState, MoveOutcome
from .terminal import Terminal, classify


logger = logging.getLogger(__name__)


@dataclass
class Game:
    """Game wrapper around a position with helper operations.

    Responsibility: validate selections, expose legal moves, apply moves,
    edit the board, and keep an undo history.
    """

    state: GameState
    move_stack: List[Move] = field(default_factory=list)
    _snapshots: List[GameState] = field(default_factory=list, repr=False)

    @classmethod
    def new(cls, *, allow_castling_out_of_check: bool = False) -> "Game":
        return cls(state=GameState.startpos(allow_castling_out_of_check=allow_castling_out_of_check))

    @classmethod
    def from_fen(cls, fen: str, *, allow_castling_out_of_check: bool = False) -> "Game":
        return cls(state=decode(fen, allow_castling_out_of_check=allow_castling_out_of_check))

    def to_fen(self) -> str:
        return encode(self.state)

    def load_fen(self, fen: str) -> None:
        """Replace the position with ``fen``; on MalformedFen nothing changes."""
        state = decode(fen, allow_castling_out_of_check=self.state.allow_castling_out_of_check)
        self.state = state
        self._reset_history()
        logger.debug("loaded position %s", fen)

    @property
    def turn(self) -> Color:
        return self.state.turn

    @property
    def pending_promotion(self) -> bool:
        return self.state.pending_promotion is not None

    # --- Queries ---
    def legal_moves(self, square: Coord) -> Set[Coord]:
        """Return the legal destinations for the side-to-move piece on ``square``.

        Raises:
            IllegalSelection: If a promotion is pending or ``square`` does not
                hold a piece of the side to move.
        """
        if self.pending_promotion:
            raise IllegalSelection("a promotion choice is pending")
        piece = self.state.board[square]
        if piece.is_empty:
            raise IllegalSelection(f"no piece on {square_to_str(square)}")
        if piece.color is not self.state.turn:
            raise IllegalSelection(f"{square_to_str(square)} does not hold a piece of the side to move")
        return generate_moves(self.state, square)

    def all_legal_moves(self) -> List[Move]:
        """Every legal move of the side to move, promotions expanded, in board order."""
        if self.pending_promotion:
            return []
        moves: List[Move] = []
        for origin in self.state.board.occupied(self.state.turn):
            targets = generate_moves(self.state, origin)
            for target in sorted(targets, key=lambda c: (c[1], c[0])):
                if self._is_promotion(origin, target):
                    moves.extend(Move(origin, target, k.value) for k in PROMOTION_KINDS)
                else:
                    moves.append(Move(origin, target))
        return moves

    def is_in_check(self, side: Optional[Color] = None) -> bool:
        return self.state.in_check(side)

    def terminal(self) -> Terminal:
        if self.pending_promotion:
            return Terminal.NONE
        return classify(self.state)

    def checkmate(self) -> bool:
        return self.terminal() is Terminal.CHECKMATE

    def stalemate(self) -> bool:
        return self.terminal() is Terminal.STALEMATE

    # --- Moves ---
    def apply_move(
        self, origin: Coord, target: Coord, promotion: Optional[PieceKind] = None
    ) -> MoveOutcome:
        """Validate and play a move.

        Raises:
            IllegalSelection: If ``target`` is not among the legal destinations
                of ``origin``, or a promotion piece is given for a move that
                does not promote.
        """
        if target not in self.legal_moves(origin):
            raise IllegalSelection(
                f"illegal move {square_to_str(origin)}{square_to_str(target)}"
            )
        if promotion is not None and not self._is_promotion(origin, target):
            raise IllegalSelection("only a pawn reaching the last rank can promote")
        snapshot = self.state.copy()
        outcome = self.state.apply_move(origin, target, promotion)
        self._snapshots.append(snapshot)
        move = Move(origin, target, promotion.value if promotion is not None else None)
        self.move_stack.append(move)
        logger.debug("applied %s -> %s", move.to_uci(), self.to_fen())
        if outcome.terminal is not Terminal.NONE:
            logger.debug("game over: %s", outcome.terminal.value)
        return outcome

    def apply_uci(self, uci: str) -> MoveOutcome:
        """Play a move given in long algebraic form (``e2e4``, ``e7e8q``)."""
        try:
            mv = parse_uci(uci)
        except ValueError as e:
            raise IllegalSelection(str(e)) from e
        promo = promotion_kind(mv.promotion) if mv.promotion else None
        return self.apply_move(mv.from_sq, mv.to_sq, promo)

    def promote(self, kind: PieceKind) -> MoveOutcome:
        """Finish a pending promotion with ``kind``."""
        outcome = self.state.complete_promotion(kind)
        if self.move_stack:
            last = self.move_stack[-1]
            self.move_stack[-1] = Move(last.from_sq, last.to_sq, kind.value)
        logger.debug("promoted to %s -> %s", kind.name.lower(), self.to_fen())
        return outcome

    def undo_move(self) -> None:
        if not self._snapshots:
            raise IllegalSelection("no moves to undo")
        self.state = self._snapshots.pop()
        self.move_stack.pop()

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m in self.move_stack]

    # --- Board editing ---
    def place_piece(self, kind: PieceKind, color: Color, square: Coord) -> None:
        self.state.place_piece(kind, color, square)
        self._reset_history()

    def clear_square(self, square: Coord) -> None:
        self.state.clear_square(square)
        self._reset_history()

    def clear_board(self) -> None:
        self.state.clear_board()
        self._reset_history()

    def _reset_history(self) -> None:
        self.move_stack.clear()
        self._snapshots.clear()

    def _is_promotion(self, origin: Coord, target: Coord) -> bool:
        piece = self.state.board[origin]
        return piece.piece is PieceKind.PAWN and target[1] == promotion_row(piece.color)
