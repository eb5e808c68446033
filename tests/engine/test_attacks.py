from __future__ import annotations

import pytest

from chessrules.engine import movegen
from chessrules.engine.attacks import is_attacked, is_in_check
from chessrules.engine.fen import decode
from chessrules.engine.move import str_to_square as sq
from chessrules.engine.pieces import Color


def test_white_pawn_attacks_do_not_wrap_files() -> None:
    p = decode("4k3/8/8/8/8/8/7P/4K3 w - - 0 1")
    assert is_attacked(p, sq("g3"), Color.WHITE)
    assert not is_attacked(p, sq("a4"), Color.WHITE)
    # Pawns do not attack straight ahead
    assert not is_attacked(p, sq("h3"), Color.WHITE)


def test_black_pawn_attacks_point_down_the_board() -> None:
    p = decode("4k3/p7/8/8/8/8/8/4K3 w - - 0 1")
    assert is_attacked(p, sq("b6"), Color.BLACK)
    assert not is_attacked(p, sq("h5"), Color.BLACK)
    assert not is_attacked(p, sq("b8"), Color.BLACK)


def test_knight_offsets_do_not_wrap() -> None:
    p = decode("4k3/8/8/8/8/8/8/4K2N w - - 0 1")
    assert is_attacked(p, sq("g3"), Color.WHITE)
    assert is_attacked(p, sq("f2"), Color.WHITE)
    assert not is_attacked(p, sq("b3"), Color.WHITE)
    assert not is_attacked(p, sq("a2"), Color.WHITE)


def test_king_attacks_adjacent_squares_only() -> None:
    p = decode("4k3/8/8/8/8/8/8/7K w - - 0 1")
    assert is_attacked(p, sq("g2"), Color.WHITE)
    assert not is_attacked(p, sq("a2"), Color.WHITE)
    assert not is_attacked(p, sq("h3"), Color.WHITE)


def test_rook_ray_stops_at_first_blocker() -> None:
    p = decode("4k3/8/8/8/8/8/8/R1p4K w - - 0 1")
    assert is_attacked(p, sq("b1"), Color.WHITE)
    assert is_attacked(p, sq("c1"), Color.WHITE)
    assert not is_attacked(p, sq("d1"), Color.WHITE)
    assert is_attacked(p, sq("a8"), Color.WHITE)


def test_bishop_diagonal_does_not_wrap() -> None:
    p = decode("4k3/8/8/8/8/7B/8/4K3 w - - 0 1")
    assert is_attacked(p, sq("g4"), Color.WHITE)
    assert is_attacked(p, sq("c8"), Color.WHITE)
    assert not is_attacked(p, sq("a5"), Color.WHITE)
    assert not is_attacked(p, sq("a4"), Color.WHITE)


def test_queen_attacks_both_ways_and_blockers_stop_rays() -> None:
    p = decode("4k3/8/8/8/3q4/8/1P6/4K3 w - - 0 1")
    assert is_attacked(p, sq("d1"), Color.BLACK)
    assert is_attacked(p, sq("h8"), Color.BLACK)
    # White pawn on b2 shields a1 from the d4 queen
    assert not is_attacked(p, sq("a1"), Color.BLACK)


def test_is_in_check_for_side_to_move() -> None:
    p = decode("4k3/8/8/8/8/8/8/4R1K1 b - - 0 1")
    assert is_in_check(p)
    q = decode("4k3/8/8/8/8/8/8/4R1K1 w - - 0 1")
    assert not is_in_check(q)


def test_check_detection_never_generates_moves(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*_args, **_kwargs):
        raise AssertionError("move generation called")

    monkeypatch.setattr(movegen, "legal_moves", boom)
    p = decode("4k3/8/8/8/8/8/8/4R1K1 b - - 0 1")
    assert is_in_check(p)
