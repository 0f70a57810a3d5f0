from __future__ import annotations

import pytest

from chessrules.engine.errors import MalformedFen
from chessrules.engine.fen import STARTPOS_FEN, decode, encode
from chessrules.engine.game import Game
from chessrules.engine.pieces import Color
from chessrules.engine.state import GameState


def test_startpos_encodes_exactly() -> None:
    assert encode(GameState.startpos()) == STARTPOS_FEN
    assert STARTPOS_FEN == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


def test_startpos_round_trip() -> None:
    state = decode(STARTPOS_FEN)
    assert encode(state) == STARTPOS_FEN
    assert state.king_coords == [(4, 7), (4, 0)]
    assert state.board == GameState.startpos().board


@pytest.mark.parametrize(
    "fen",
    [
        # Mixed pieces and empty squares, some castling rights
        "r1bqkbnr/pppp1ppp/2n5/4p3/3P4/5N2/PPP1PPPP/RNBQKB1R b KQ - 2 3",
        # No castling rights, ep target present on rank 3 or 6
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - e3 0 1",
        "rnbqkbnr/ppp1pppp/8/3pP3/8/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 2",
        # All castling rights
        "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1",
        # Kingless boards are allowed
        "8/8/8/8/8/8/8/8 w - - 0 1",
    ],
)
def test_round_trip_various_positions(fen: str) -> None:
    assert encode(decode(fen)) == fen


def test_decode_reads_every_field() -> None:
    state = decode("4k3/8/8/3pP3/8/8/8/4K3 w k d6 7 42")
    assert state.turn is Color.WHITE
    assert state.castling_rights == [[False, False], [True, False]]
    assert state.en_passant == (3, 2)
    assert state.halfmove_clock == 7
    assert state.fullmove_number == 42
    assert state.pending_promotion is None


@pytest.mark.parametrize(
    "fen",
    [
        "",  # empty
        "8/8/8/8/8/8/8 w - - 0 1",  # not enough ranks
        "8/8/8/8/8/8/8/8 w - - 0",  # missing fields
        "8/8/8/8/8/8/8/8 w - - 0 1 extra",  # too many fields
        "8/8/8/8/8/8/8/8 x - - 0 1",  # bad side to move
        "8/8/8/8/8/8/8/8 w A - 0 1",  # bad castling
        "8/8/8/8/8/8/8/8 w - z9 0 1",  # bad ep square
        "8/8/8/8/8/8/8/8 w - e4 0 1",  # ep square on the wrong rank
        "8/8/8/8/8/8/8/8 w - - -1 1",  # bad halfmove
        "8/8/8/8/8/8/8/8 w - - x 1",  # non-numeric halfmove
        "8/8/8/8/8/8/8/8 w - - 0 0",  # bad fullmove
        "9/8/8/8/8/8/8/8 w - - 0 1",  # too many squares
        "7/8/8/8/8/8/8/8 w - - 0 1",  # too few squares
        "53/8/8/8/8/8/8/8 w - - 0 1",  # run overflows the rank
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1",  # bad piece
        "k6k/8/8/8/8/8/8/4K3 w - - 0 1",  # two black kings
    ],
)
def test_invalid_fen_raises(fen: str) -> None:
    with pytest.raises(MalformedFen):
        decode(fen)


def test_malformed_fen_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        decode("not a fen")


def test_load_fen_failure_leaves_the_game_untouched() -> None:
    g = Game.new()
    g.apply_uci("e2e4")
    before = g.to_fen()
    with pytest.raises(MalformedFen):
        g.load_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1")
    assert g.to_fen() == before
    assert g.move_history_uci() == ["e2e4"]


def test_load_fen_replaces_position_and_history() -> None:
    g = Game.new()
    g.apply_uci("e2e4")
    g.load_fen("4k3/8/8/8/8/8/8/4K3 b - - 3 9")
    assert g.to_fen() == "4k3/8/8/8/8/8/8/4K3 b - - 3 9"
    assert g.turn is Color.BLACK
    assert g.move_history_uci() == []
