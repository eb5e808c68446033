from __future__ import annotations

from typing import Tuple

from .attacks import is_attacked, is_in_check
from .move import Move
from .pieces import PROMOTION_PIECES, Color, PieceType, piece_index
from .position import Position


# (king from, king to, rook home, squares that must be empty, transit square)
CASTLING_PATHS = {
    (Color.WHITE, True): (4, 6, 7, (5, 6), 5),
    (Color.WHITE, False): (4, 2, 0, (1, 2, 3), 3),
    (Color.BLACK, True): (60, 62, 63, (61, 62), 61),
    (Color.BLACK, False): (60, 58, 56, (57, 58, 59), 59),
}


def back_rank(color: Color) -> int:
    """Rank index a pawn of ``color`` promotes on."""
    return 7 if color == Color.WHITE else 0


def is_legal(position: Position, move: Move) -> bool:
    """Return True if ``move`` obeys the moving piece's rules.

    Checks ownership, shape, occupancy, promotion and castling conditions.
    Leaving the own king in check after a non-castling move is not checked
    here; :func:`chessrules.engine.movegen.legal_moves` filters that for
    every piece type.
    """
    from_sq, to_sq = move.from_sq, move.to_sq
    if not (0 <= from_sq < 64 and 0 <= to_sq < 64) or from_sq == to_sq:
        return False

    side = position.side_to_move
    mover = position.piece_at(from_sq)
    if mover is None or mover[0] != side:
        return False
    target = position.piece_at(to_sq)
    if target is not None and target[0] == side:
        return False

    piece_type = mover[1]
    if move.promotion is not None:
        if piece_type != PieceType.PAWN or to_sq // 8 != back_rank(side):
            return False

    if piece_type == PieceType.PAWN:
        return _is_valid_pawn_move(position, move)
    elif piece_type == PieceType.KNIGHT:
        return _is_valid_knight_move(move)
    elif piece_type == PieceType.BISHOP:
        return _is_valid_bishop_move(position, move)
    elif piece_type == PieceType.ROOK:
        return _is_valid_rook_move(position, move)
    elif piece_type == PieceType.QUEEN:
        return _is_valid_bishop_move(position, move) or _is_valid_rook_move(position, move)
    elif piece_type == PieceType.KING:
        return _is_valid_king_move(position, move)
    raise AssertionError(f"unhandled piece type: {piece_type!r}")


def _deltas(move: Move) -> Tuple[int, int]:
    """Return (file delta, rank delta) of ``move``."""
    return move.to_sq % 8 - move.from_sq % 8, move.to_sq // 8 - move.from_sq // 8


def _is_valid_pawn_move(position: Position, move: Move) -> bool:
    side = position.side_to_move
    forward = 1 if side == Color.WHITE else -1
    home_rank = 1 if side == Color.WHITE else 6
    df, dr = _deltas(move)
    occ = position.occupancy()
    to_empty = not (occ >> move.to_sq) & 1

    if df == 0 and dr == forward:
        ok = to_empty
    elif df == 0 and dr == 2 * forward:
        mid = move.from_sq + 8 * forward
        ok = move.from_sq // 8 == home_rank and to_empty and not (occ >> mid) & 1
    elif abs(df) == 1 and dr == forward:
        if not to_empty:
            ok = True  # friendly targets were rejected already
        else:
            ok = _is_en_passant(position, move)
    else:
        return False

    if not ok:
        return False
    if move.to_sq // 8 == back_rank(side):
        return move.promotion in PROMOTION_PIECES
    return move.promotion is None


def _is_en_passant(position: Position, move: Move) -> bool:
    side = position.side_to_move
    if position.ep_target(side) != move.to_sq:
        return False
    # The double-stepped pawn sits one rank behind the target, seen from the mover
    victim_sq = move.to_sq - 8 if side == Color.WHITE else move.to_sq + 8
    enemy_pawns = position.bitboard(side.opposite, PieceType.PAWN)
    return (enemy_pawns >> victim_sq) & 1 == 1


def _is_valid_knight_move(move: Move) -> bool:
    df, dr = _deltas(move)
    return (abs(df), abs(dr)) in ((1, 2), (2, 1))


def _path_clear(position: Position, move: Move) -> bool:
    """True if every square strictly between ``from`` and ``to`` is empty."""
    df, dr = _deltas(move)
    step_f = (df > 0) - (df < 0)
    step_r = (dr > 0) - (dr < 0)
    occ = position.occupancy()
    f, r = move.from_sq % 8 + step_f, move.from_sq // 8 + step_r
    while (f, r) != (move.to_sq % 8, move.to_sq // 8):
        if (occ >> (r * 8 + f)) & 1:
            return False
        f += step_f
        r += step_r
    return True


def _is_valid_bishop_move(position: Position, move: Move) -> bool:
    df, dr = _deltas(move)
    if abs(df) != abs(dr):
        return False
    return _path_clear(position, move)


def _is_valid_rook_move(position: Position, move: Move) -> bool:
    df, dr = _deltas(move)
    if df != 0 and dr != 0:
        return False
    return _path_clear(position, move)


def _is_valid_king_move(position: Position, move: Move) -> bool:
    df, dr = _deltas(move)
    if abs(df) <= 1 and abs(dr) <= 1:
        return True
    if dr == 0 and abs(df) == 2:
        return _is_valid_castling(position, move, kingside=df > 0)
    return False


def _is_valid_castling(position: Position, move: Move, *, kingside: bool) -> bool:
    side = position.side_to_move
    king_from, king_to, rook_home, between, transit = CASTLING_PATHS[(side, kingside)]
    if move.from_sq != king_from or move.to_sq != king_to:
        return False
    if not position.can_castle(side, kingside):
        return False
    occ = position.occupancy()
    if any((occ >> sq) & 1 for sq in between):
        return False
    if not (position.bitboard(side, PieceType.ROOK) >> rook_home) & 1:
        return False
    if is_in_check(position):
        return False
    for sq in (transit, king_to):
        if is_attacked(_with_king_on(position, king_from, sq), sq, side.opposite):
            return False
    return True


def _with_king_on(position: Position, king_from: int, sq: int) -> Position:
    """Copy of ``position`` with the side-to-move king relocated to ``sq``."""
    idx = piece_index(position.side_to_move, PieceType.KING)
    boards = list(position.boards)
    boards[idx] = (boards[idx] & ~(1 << king_from)) | (1 << sq)
    return position.derive(boards=boards)
