from __future__ import annotations

from chessrules.engine.fen import decode
from chessrules.engine.game import Game
from chessrules.engine.pieces import Color
from chessrules.engine.terminal import Terminal, classify, has_legal_moves


def test_checkmate_position() -> None:
    g = Game.from_fen("7k/6Q1/6K1/8/8/8/8/8 b - - 0 1")
    assert g.is_in_check()
    assert g.checkmate()
    assert not g.stalemate()
    assert g.all_legal_moves() == []


def test_stalemate_position() -> None:
    g = Game.from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    assert not g.is_in_check()
    assert g.stalemate()
    assert not g.checkmate()


def test_back_rank_mate_reported_by_the_move() -> None:
    g = Game.from_fen("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
    outcome = g.apply_uci("a1a8")
    assert outcome.check
    assert outcome.terminal is Terminal.CHECKMATE


def test_stalemating_move_reported_by_the_move() -> None:
    g = Game.from_fen("k7/8/8/1Q6/8/8/8/7K w - - 0 1")
    outcome = g.apply_uci("b5b6")
    assert not outcome.check
    assert outcome.terminal is Terminal.STALEMATE


def test_fools_mate() -> None:
    g = Game.new()
    for uci in ("f2f3", "e7e5", "g2g4"):
        assert g.apply_uci(uci).terminal is Terminal.NONE
    outcome = g.apply_uci("d8h4")
    assert outcome.check
    assert outcome.terminal is Terminal.CHECKMATE
    assert g.terminal() is Terminal.CHECKMATE


def test_has_legal_moves_for_either_side() -> None:
    state = decode("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    assert not has_legal_moves(state)
    assert has_legal_moves(state, Color.WHITE)
    assert classify(state) is Terminal.STALEMATE
