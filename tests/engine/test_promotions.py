from __future__ import annotations

import pytest

from chessrules.engine.errors import IllegalSelection
from chessrules.engine.game import Game
from chessrules.engine.move import str_to_square
from chessrules.engine.pieces import Color, PieceKind
from chessrules.engine.terminal import Terminal


def _uci_set(moves):
    return set(m.to_uci() for m in moves)


def test_white_pawn_push_promotions() -> None:
    g = Game.from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    assert _uci_set(g.all_legal_moves()) >= {"e7e8q", "e7e8r", "e7e8b", "e7e8n"}
    assert "e7e8" not in _uci_set(g.all_legal_moves())


def test_white_pawn_capture_promotion() -> None:
    g = Game.from_fen("3rk3/4P3/8/8/8/8/8/4K3 w - - 0 1")
    assert _uci_set(g.all_legal_moves()) >= {"e7d8q", "e7d8r", "e7d8b", "e7d8n"}


def test_black_pawn_push_promotions() -> None:
    g = Game.from_fen("4k3/8/8/8/8/8/3p4/4K3 b - - 0 1")
    assert _uci_set(g.all_legal_moves()) >= {"d2d1q", "d2d1r", "d2d1b", "d2d1n"}


def test_move_without_piece_leaves_promotion_pending() -> None:
    g = Game.from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    outcome = g.apply_move(str_to_square("e7"), str_to_square("e8"))
    assert outcome.pending_promotion
    assert g.pending_promotion
    assert g.turn is Color.WHITE
    assert g.all_legal_moves() == []
    with pytest.raises(IllegalSelection):
        g.legal_moves(str_to_square("e1"))
    with pytest.raises(IllegalSelection):
        g.apply_uci("e1e2")

    outcome = g.promote(PieceKind.QUEEN)
    assert outcome.check
    assert outcome.terminal is Terminal.NONE
    assert not g.pending_promotion
    assert g.to_fen() == "k3Q3/8/8/8/8/8/8/4K3 b - - 0 1"
    assert g.move_history_uci() == ["e7e8q"]


def test_promotion_piece_given_up_front() -> None:
    g = Game.from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    outcome = g.apply_uci("e7e8n")
    assert not outcome.pending_promotion
    assert not outcome.check
    assert g.to_fen() == "k3N3/8/8/8/8/8/8/4K3 b - - 0 1"


def test_promote_without_pending_promotion_raises() -> None:
    g = Game.new()
    with pytest.raises(IllegalSelection):
        g.promote(PieceKind.QUEEN)


def test_promotion_rejects_other_pieces() -> None:
    g = Game.from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    with pytest.raises(IllegalSelection):
        g.apply_uci("e7e8k")
    g.apply_uci("e7e8")
    with pytest.raises(IllegalSelection):
        g.promote(PieceKind.KING)
    assert g.pending_promotion


def test_promotion_piece_on_ordinary_move_is_rejected() -> None:
    g = Game.new()
    with pytest.raises(IllegalSelection):
        g.apply_move(str_to_square("e2"), str_to_square("e4"), PieceKind.QUEEN)


def test_undo_while_promotion_pending() -> None:
    fen = "k7/4P3/8/8/8/8/8/4K3 w - - 0 1"
    g = Game.from_fen(fen)
    g.apply_uci("e7e8")
    g.undo_move()
    assert not g.pending_promotion
    assert g.to_fen() == fen
