from __future__ import annotations

from typing import Iterator, List

from .apply import make_move
from .attacks import BISHOP_DIRS, KING_OFFSETS, KNIGHT_OFFSETS, ROOK_DIRS, is_attacked, is_in_check
from .move import Move
from .pieces import PROMOTION_PIECES, Color, PieceType
from .position import Position
from .validator import CASTLING_PATHS, back_rank, is_legal


def legal_moves(position: Position) -> List[Move]:
    """Return every legal move for the side to move.

    Candidates are enumerated per piece type, kept only if
    :func:`~chessrules.engine.validator.is_legal` accepts them, and then
    played on a derived copy to drop any move that leaves the mover's own
    king attacked (pins, discovered checks, king steps into check). The
    order of the returned list is not part of the contract.
    """
    side = position.side_to_move
    legal: List[Move] = []
    for mv in _candidates(position):
        if not is_legal(position, mv):
            continue
        child = make_move(position, mv)
        ksq = child.king_square(side)
        if ksq is not None and is_attacked(child, ksq, side.opposite):
            continue
        legal.append(mv)
    return legal


def has_legal_moves(position: Position) -> bool:
    return bool(legal_moves(position))


def is_checkmate(position: Position) -> bool:
    return is_in_check(position) and not has_legal_moves(position)


def is_stalemate(position: Position) -> bool:
    return not is_in_check(position) and not has_legal_moves(position)


def _squares(bb: int) -> Iterator[int]:
    while bb:
        lsb = bb & -bb
        yield lsb.bit_length() - 1
        bb ^= lsb


def _candidates(position: Position) -> Iterator[Move]:
    side = position.side_to_move
    own = position.occupancy(side)
    occ = position.occupancy()

    yield from _pawn_candidates(position, side)

    for from_sq in _squares(position.bitboard(side, PieceType.KNIGHT)):
        yield from _step_candidates(from_sq, KNIGHT_OFFSETS, own)

    queens = position.bitboard(side, PieceType.QUEEN)
    for from_sq in _squares(position.bitboard(side, PieceType.BISHOP) | queens):
        yield from _ray_candidates(from_sq, BISHOP_DIRS, own, occ)
    for from_sq in _squares(position.bitboard(side, PieceType.ROOK) | queens):
        yield from _ray_candidates(from_sq, ROOK_DIRS, own, occ)

    for from_sq in _squares(position.bitboard(side, PieceType.KING)):
        yield from _step_candidates(from_sq, KING_OFFSETS, own)
        for kingside in (True, False):
            king_from, king_to = CASTLING_PATHS[(side, kingside)][:2]
            if from_sq == king_from:
                yield Move(king_from, king_to)


def _pawn_candidates(position: Position, side: Color) -> Iterator[Move]:
    forward = 8 if side == Color.WHITE else -8
    promo_rank = back_rank(side)
    for from_sq in _squares(position.bitboard(side, PieceType.PAWN)):
        f = from_sq % 8
        targets = [from_sq + forward, from_sq + 2 * forward]
        if f > 0:
            targets.append(from_sq + forward - 1)
        if f < 7:
            targets.append(from_sq + forward + 1)
        for to_sq in targets:
            if not 0 <= to_sq < 64:
                continue
            if to_sq // 8 == promo_rank:
                for promo in PROMOTION_PIECES:
                    yield Move(from_sq, to_sq, promotion=promo)
            else:
                yield Move(from_sq, to_sq)


def _step_candidates(from_sq: int, offsets, own: int) -> Iterator[Move]:
    f = from_sq % 8
    r = from_sq // 8
    for df, dr in offsets:
        tf = f + df
        tr = r + dr
        if 0 <= tf < 8 and 0 <= tr < 8:
            to_sq = tr * 8 + tf
            if not (own >> to_sq) & 1:
                yield Move(from_sq, to_sq)


def _ray_candidates(from_sq: int, dirs, own: int, occ: int) -> Iterator[Move]:
    f = from_sq % 8
    r = from_sq // 8
    for df, dr in dirs:
        tf, tr = f, r
        while True:
            tf += df
            tr += dr
            if not (0 <= tf < 8 and 0 <= tr < 8):
                break
            to_sq = tr * 8 + tf
            if (own >> to_sq) & 1:
                break
            yield Move(from_sq, to_sq)
            if (occ >> to_sq) & 1:
                break
