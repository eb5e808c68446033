from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .pieces import PIECE_ORDER, Color, PieceType, piece_index, split_index


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

CASTLING_ORDER = "KQkq"


def _get_bit(bb: int, sq: int) -> bool:
    return (bb >> sq) & 1 == 1


def lsb_index(bb: int) -> int:
    """Index of the lowest set bit, ``-1`` for an empty set."""
    return (bb & -bb).bit_length() - 1


@dataclass(frozen=True)
class Position:
    """Immutable board state over twelve piece bitboards.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
    - ``boards`` is indexed by ``color * 6 + piece_type``.
    - ``ep_targets[color]`` is the square a pawn of ``color`` may capture onto
      en passant this ply, or ``None``.
    - ``castling`` is a subset of ``"KQkq"`` in that order.
    - Every transition derives a new instance; nothing mutates in place.
    """

    boards: Tuple[int, ...]
    side_to_move: Color
    castling: str = ""
    ep_targets: Tuple[Optional[int], Optional[int]] = (None, None)

    @classmethod
    def startpos(cls) -> "Position":
        """Return the standard chess starting position."""
        from .fen import decode

        return decode(STARTPOS_FEN)

    def derive(self, **changes) -> "Position":
        """Return a copy with ``changes`` applied."""
        if "boards" in changes:
            changes["boards"] = tuple(changes["boards"])
        return replace(self, **changes)

    # --- Readers ---
    def bitboard(self, color: Color, piece_type: PieceType) -> int:
        return self.boards[piece_index(color, piece_type)]

    def occupancy(self, color: Optional[Color] = None) -> int:
        """Union of the bitboards of ``color``, or of both sides when ``None``."""
        if color is None:
            boards = self.boards
        else:
            start = int(color) * 6
            boards = self.boards[start : start + 6]
        occ = 0
        for bb in boards:
            occ |= bb
        return occ

    def piece_index_at(self, sq: int) -> Optional[int]:
        for idx in PIECE_ORDER:
            if _get_bit(self.boards[idx], sq):
                return idx
        return None

    def piece_at(self, sq: int) -> Optional[Tuple[Color, PieceType]]:
        """Return ``(color, piece_type)`` on ``sq`` or ``None`` when empty."""
        idx = self.piece_index_at(sq)
        if idx is None:
            return None
        return split_index(idx)

    def king_square(self, color: Color) -> Optional[int]:
        kbb = self.bitboard(color, PieceType.KING)
        if kbb == 0:
            return None
        return lsb_index(kbb)

    def ep_target(self, color: Color) -> Optional[int]:
        return self.ep_targets[int(color)]

    def can_castle(self, color: Color, kingside: bool) -> bool:
        flag = "K" if kingside else "Q"
        if color == Color.BLACK:
            flag = flag.lower()
        return flag in self.castling
