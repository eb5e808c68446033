from __future__ import annotations

import pytest

from chessrules.engine.apply import apply, make_move
from chessrules.engine.fen import decode, encode
from chessrules.engine.move import Move, parse_uci, str_to_square
from chessrules.engine.pieces import Color, PieceType
from chessrules.engine.position import STARTPOS_FEN, Position


def play(fen: str, *ucis: str) -> Position:
    p = decode(fen)
    for u in ucis:
        p = apply(p, parse_uci(u))
    return p


def test_double_push_sets_en_passant_for_opponent() -> None:
    p = play(STARTPOS_FEN, "e2e4")
    assert encode(p) == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    assert p.ep_target(Color.BLACK) == str_to_square("e3")
    assert p.ep_target(Color.WHITE) is None


def test_en_passant_target_expires_after_one_ply() -> None:
    p = play(STARTPOS_FEN, "e2e4", "d7d6")
    assert p.ep_targets == (None, None)


def test_apply_leaves_input_untouched() -> None:
    p = decode(STARTPOS_FEN)
    apply(p, parse_uci("e2e4"))
    assert encode(p) == STARTPOS_FEN


def test_apply_rejects_illegal_move() -> None:
    with pytest.raises(AssertionError):
        apply(decode(STARTPOS_FEN), parse_uci("e2e5"))


def test_make_move_requires_own_piece() -> None:
    with pytest.raises(ValueError):
        make_move(decode(STARTPOS_FEN), parse_uci("e4e5"))


def test_capture_removes_enemy_piece() -> None:
    p = play(STARTPOS_FEN, "e2e4", "d7d5", "e4d5")
    assert p.piece_at(str_to_square("d5")) == (Color.WHITE, PieceType.PAWN)
    assert bin(p.bitboard(Color.BLACK, PieceType.PAWN)).count("1") == 7


def test_en_passant_removes_captured_pawn() -> None:
    p = play(STARTPOS_FEN, "e2e4", "d7d5", "e4e5", "f7f5", "e5f6")
    assert p.piece_at(str_to_square("f6")) == (Color.WHITE, PieceType.PAWN)
    assert p.piece_at(str_to_square("f5")) is None
    assert p.piece_at(str_to_square("e5")) is None


def test_black_en_passant() -> None:
    p = play("4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1", "e2e4", "d4e3")
    assert encode(p) == "4k3/8/8/8/8/4p3/8/4K3 w - - 0 1"


def test_castling_moves_the_rook() -> None:
    fen = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
    p = play(fen, "e1g1")
    assert encode(p) == "r3k2r/8/8/8/8/8/8/R4RK1 b kq - 0 1"
    p = apply(p, parse_uci("e8c8"))
    assert encode(p) == "2kr3r/8/8/8/8/8/8/R4RK1 w - - 0 1"


def test_queenside_castling_white() -> None:
    p = play("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1", "e1c1")
    assert encode(p) == "r3k2r/8/8/8/8/8/8/2KR3R b kq - 0 1"


def test_castling_rights_bookkeeping() -> None:
    p = play("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1", "h1h2")
    assert p.castling == "Qkq"
    # a8xa1 removes black's queenside right and white's remaining one
    p = apply(p, parse_uci("a8a1"))
    assert p.castling == "k"
    p = apply(p, parse_uci("e1e2"))
    assert p.castling == "k"


def test_king_move_drops_both_rights() -> None:
    p = play("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1", "e1f1")
    assert p.castling == "kq"


@pytest.mark.parametrize(
    "promotion", [PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT]
)
def test_promotion_places_chosen_piece(promotion: PieceType) -> None:
    p = apply(decode("k7/4P3/8/8/8/8/8/4K3 w - - 0 1"), Move(52, 60, promotion))
    assert p.piece_at(60) == (Color.WHITE, promotion)
    assert p.bitboard(Color.WHITE, PieceType.PAWN) == 0


def test_capture_promotion() -> None:
    p = play("3r3k/4P3/8/8/8/8/8/4K3 w - - 0 1", "e7d8n")
    assert encode(p) == "3N3k/8/8/8/8/8/8/4K3 b - - 0 1"


def test_side_to_move_flips() -> None:
    p = play(STARTPOS_FEN, "g1f3")
    assert p.side_to_move == Color.BLACK
    p = apply(p, parse_uci("g8f6"))
    assert p.side_to_move == Color.WHITE
