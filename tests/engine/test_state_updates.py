from __future__ import annotations

from chessrules.engine.game import Game
from chessrules.engine.pieces import Color


def _castling(g: Game) -> str:
    return g.to_fen().split()[2]


def test_halfmove_and_fullmove_counters_and_ep_clearing() -> None:
    g = Game.new()
    assert g.state.halfmove_clock == 0 and g.state.fullmove_number == 1

    # e2e4: pawn move resets halfmove, sets ep to e3, side -> black
    g.apply_uci("e2e4")
    assert g.state.halfmove_clock == 0
    assert g.turn is Color.BLACK
    assert " e3 " in g.to_fen()
    assert g.state.fullmove_number == 1  # increments after black moves

    # g8f6: knight move increments halfmove, clears ep, side -> white, fullmove -> 2
    g.apply_uci("g8f6")
    assert g.state.halfmove_clock == 1
    assert g.turn is Color.WHITE
    assert " - " in g.to_fen()
    assert g.state.fullmove_number == 2

    g.apply_uci("g1f3")
    assert g.state.halfmove_clock == 2

    # f6e4: capture resets halfmove
    g.apply_uci("f6e4")
    assert g.state.halfmove_clock == 0
    assert g.state.fullmove_number == 3


def test_castling_rights_update_on_king_and_rook_moves_and_captures() -> None:
    g = Game.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")

    # White rook moves h1h2: remove white 'K' right only
    g.apply_uci("h1h2")
    assert _castling(g) == "Qkq"

    # Black rook captures a1: removes black 'q' (moved from a8) and white 'Q' (captured on a1)
    g.apply_uci("a8a1")
    assert _castling(g) == "k"

    # The king steps off the checked rank; black keeps its kingside right
    g.apply_uci("e1e2")
    assert _castling(g) == "k"

    g.apply_uci("e8d8")
    assert _castling(g) == "-"


def test_rook_away_from_its_corner_keeps_rights() -> None:
    g = Game.from_fen("4k3/8/8/8/R7/8/8/R3K3 w Q - 0 1")
    g.apply_uci("a4a5")
    assert _castling(g) == "Q"
    g.apply_uci("e8e7")
    g.apply_uci("a1b1")
    assert _castling(g) == "-"


def test_king_coordinate_follows_the_king() -> None:
    g = Game.new()
    g.apply_uci("e2e4")
    g.apply_uci("e7e5")
    g.apply_uci("e1e2")
    assert g.state.king_coords[Color.WHITE] == (4, 6)
    g.undo_move()
    assert g.state.king_coords[Color.WHITE] == (4, 7)
