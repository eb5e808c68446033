from __future__ import annotations

from typing import List, Optional

from .move import Move
from .pieces import Color, PieceType, piece_index
from .position import Position


# Rook relocation for castling, keyed by king destination
CASTLING_ROOK_MOVES = {
    6: (7, 5),  # e1g1: h1 -> f1
    2: (0, 3),  # e1c1: a1 -> d1
    62: (63, 61),  # e8g8: h8 -> f8
    58: (56, 59),  # e8c8: a8 -> d8
}

# Castling flag lost when a piece leaves or lands on these squares
ROOK_HOME_FLAGS = {0: "Q", 7: "K", 56: "q", 63: "k"}


def apply(position: Position, move: Move) -> Position:
    """Return the position reached by playing ``move``.

    ``move`` must be one of ``legal_moves(position)``; anything else is a
    programming error and fails the contract assertion. ``position`` is left
    untouched.
    """
    from .movegen import legal_moves

    assert move in legal_moves(position), f"illegal move {move.to_uci()}"
    return make_move(position, move)


def make_move(position: Position, move: Move) -> Position:
    """Derive the successor position without checking legality.

    Handles captures, en passant, promotion, castling rook relocation,
    castling-rights and en-passant bookkeeping, and flips the side to move.
    """
    from_sq, to_sq = move.from_sq, move.to_sq
    side = position.side_to_move
    opp = side.opposite
    mover = position.piece_at(from_sq)
    if mover is None or mover[0] != side:
        raise ValueError("no piece to move from from_sq")
    piece_type = mover[1]
    moved_idx = piece_index(side, piece_type)

    boards: List[int] = list(position.boards)
    to_mask = 1 << to_sq
    to_was_empty = not (position.occupancy() & to_mask)

    # Capture: clear destination from every enemy bitboard
    opp_start = int(opp) * 6
    for idx in range(opp_start, opp_start + 6):
        boards[idx] &= ~to_mask

    if piece_type == PieceType.PAWN and to_was_empty and to_sq == position.ep_target(side):
        victim_sq = to_sq - 8 if side == Color.WHITE else to_sq + 8
        boards[piece_index(opp, PieceType.PAWN)] &= ~(1 << victim_sq)

    boards[moved_idx] &= ~(1 << from_sq)
    if move.promotion is not None:
        boards[piece_index(side, move.promotion)] |= to_mask
    else:
        boards[moved_idx] |= to_mask

    castling = position.castling
    if piece_type == PieceType.KING:
        lost = "KQ" if side == Color.WHITE else "kq"
        castling = "".join(c for c in castling if c not in lost)
        if abs(to_sq - from_sq) == 2:
            rook_from, rook_to = CASTLING_ROOK_MOVES[to_sq]
            rook_idx = piece_index(side, PieceType.ROOK)
            boards[rook_idx] = (boards[rook_idx] & ~(1 << rook_from)) | (1 << rook_to)
    for sq in (from_sq, to_sq):
        flag = ROOK_HOME_FLAGS.get(sq)
        if flag is not None:
            castling = castling.replace(flag, "")

    # En passant targets live for exactly one ply
    ep_targets: List[Optional[int]] = [None, None]
    if piece_type == PieceType.PAWN and abs(to_sq - from_sq) == 16:
        ep_targets[int(opp)] = (from_sq + to_sq) // 2

    return position.derive(
        boards=boards,
        side_to_move=opp,
        castling=castling,
        ep_targets=(ep_targets[0], ep_targets[1]),
    )
