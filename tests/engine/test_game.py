from __future__ import annotations

import pytest

from chessrules.engine.game import Game, IllegalMoveError, Outcome, Termination
from chessrules.engine.move import parse_uci
from chessrules.engine.pieces import Color
from chessrules.engine.position import STARTPOS_FEN


def test_new_game() -> None:
    g = Game.new()
    assert g.fen() == STARTPOS_FEN
    assert len(g.legal_moves()) == 20
    assert g.outcome() is None
    assert not g.in_check()


def test_fools_mate() -> None:
    g = Game.new()
    for u in ("f2f3", "e7e5", "g2g4", "d8h4"):
        g.push(parse_uci(u))
    assert g.in_check()
    assert g.checkmate()
    assert not g.stalemate()
    outcome = g.outcome()
    assert outcome == Outcome(Color.BLACK, Termination.CHECKMATE)
    assert outcome.result == "0-1"
    assert g.history_uci() == ["f2f3", "e7e5", "g2g4", "d8h4"]


def test_stalemate_outcome() -> None:
    g = Game.from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    assert g.stalemate()
    assert g.outcome().result == "1/2-1/2"


def test_push_rejects_illegal_move() -> None:
    g = Game.new()
    with pytest.raises(IllegalMoveError):
        g.push(parse_uci("e2e5"))
    assert g.fen() == STARTPOS_FEN
    assert g.move_stack == []


def test_illegal_move_error_is_value_error() -> None:
    assert issubclass(IllegalMoveError, ValueError)


def test_undo_restores_previous_position() -> None:
    g = Game.new()
    g.push(parse_uci("e2e4"))
    g.push(parse_uci("e7e5"))
    assert g.undo() == parse_uci("e7e5")
    assert g.fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    g.undo()
    assert g.fen() == STARTPOS_FEN
    with pytest.raises(ValueError):
        g.undo()


def test_white_win_result() -> None:
    assert Outcome(Color.WHITE, Termination.TIMEOUT).result == "1-0"
