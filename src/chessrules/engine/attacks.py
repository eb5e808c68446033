from __future__ import annotations

from .pieces import Color, PieceType
from .position import Position


KNIGHT_OFFSETS = ((-1, 2), (1, 2), (-2, 1), (2, 1), (-2, -1), (2, -1), (-1, -2), (1, -2))
KING_OFFSETS = ((-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))
BISHOP_DIRS = ((-1, -1), (1, -1), (-1, 1), (1, 1))
ROOK_DIRS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def is_attacked(position: Position, sq: int, by_color: Color) -> bool:
    """Return True if square ``sq`` is attacked by ``by_color``.

    Works directly on the bitboards and never consults move generation, so
    it is safe to call from the generator's king-safety filter.

    Covers: pawns, knights, king, and slider rays for bishops/rooks/queens.
    Offsets are applied on file/rank coordinates so nothing wraps across
    the a/h files.
    """
    f = sq % 8
    r = sq // 8

    # Pawn attacks: look one rank back towards the attacker's side
    pawns = position.bitboard(by_color, PieceType.PAWN)
    dr = -1 if by_color == Color.WHITE else 1
    tr = r + dr
    if 0 <= tr < 8:
        for df in (-1, 1):
            tf = f + df
            if 0 <= tf < 8 and (pawns >> (tr * 8 + tf)) & 1:
                return True

    knights = position.bitboard(by_color, PieceType.KNIGHT)
    if knights:
        for df, dr in KNIGHT_OFFSETS:
            tf = f + df
            tr = r + dr
            if 0 <= tf < 8 and 0 <= tr < 8 and (knights >> (tr * 8 + tf)) & 1:
                return True

    king = position.bitboard(by_color, PieceType.KING)
    for df, dr in KING_OFFSETS:
        tf = f + df
        tr = r + dr
        if 0 <= tf < 8 and 0 <= tr < 8 and (king >> (tr * 8 + tf)) & 1:
            return True

    # Slider attacks (bishop/rook/queen)
    occ = position.occupancy()
    queens = position.bitboard(by_color, PieceType.QUEEN)
    diagonal = position.bitboard(by_color, PieceType.BISHOP) | queens
    orthogonal = position.bitboard(by_color, PieceType.ROOK) | queens
    if diagonal and _ray_hits(f, r, BISHOP_DIRS, occ, diagonal):
        return True
    if orthogonal and _ray_hits(f, r, ROOK_DIRS, occ, orthogonal):
        return True
    return False


def _ray_hits(f: int, r: int, dirs, occ: int, attackers: int) -> bool:
    for df, dr in dirs:
        tf, tr = f, r
        while True:
            tf += df
            tr += dr
            if not (0 <= tf < 8 and 0 <= tr < 8):
                break
            o = tr * 8 + tf
            if (occ >> o) & 1:
                if (attackers >> o) & 1:
                    return True
                break
    return False


def is_in_check(position: Position) -> bool:
    """Return True if the side to move is in check."""
    side = position.side_to_move
    ksq = position.king_square(side)
    if ksq is None:
        return False
    return is_attacked(position, ksq, side.opposite)
