from __future__ import annotations

from chessrules.engine.game import Game
from chessrules.engine.move import square_to_str, str_to_square


def dests(g: Game, square: str) -> set[str]:
    return {square_to_str(c) for c in g.legal_moves(str_to_square(square))}


def test_white_captures_en_passant_after_double_step() -> None:
    g = Game.from_fen("4k3/3p4/8/4P3/8/8/8/4K3 b - - 0 1")
    g.apply_uci("d7d5")
    assert g.to_fen().split()[3] == "d6"
    assert "d6" in dests(g, "e5")

    g.apply_uci("e5d6")
    assert g.state.board.is_empty(str_to_square("d5"))
    assert g.to_fen() == "4k3/8/3P4/8/8/8/8/4K3 b - - 0 2"


def test_black_en_passant_generation_and_apply() -> None:
    g = Game.from_fen("4k3/8/8/8/3pP3/8/8/4K3 b - e3 0 1")
    assert "e3" in dests(g, "d4")
    g.apply_uci("d4e3")
    assert g.to_fen() == "4k3/8/8/8/8/4p3/8/4K3 w - - 0 2"


def test_en_passant_target_expires_after_one_move() -> None:
    g = Game.from_fen("4k3/3p4/8/4P3/8/8/8/4K3 b - - 0 1")
    g.apply_uci("d7d5")
    g.apply_uci("e1d1")
    g.apply_uci("e8d8")
    assert g.to_fen().split()[3] == "-"
    assert dests(g, "e5") == {"e6"}


def test_en_passant_that_exposes_the_king_on_the_rank_is_illegal() -> None:
    g = Game.from_fen("8/8/8/K2pP2r/8/8/8/7k w - d6 0 1")
    assert dests(g, "e5") == {"e6"}


def test_en_passant_may_capture_a_checking_pawn() -> None:
    g = Game.from_fen("8/8/8/3pP3/4K3/8/8/7k w - d6 0 1")
    assert g.is_in_check()
    assert "d6" in dests(g, "e5")
