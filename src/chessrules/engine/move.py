from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .pieces import CHAR_TO_PROMOTION, PROMOTION_TO_CHAR, PieceType


@dataclass(frozen=True)
class Move:
    """Candidate transition between two squares.

    Attributes:
        from_sq (int): Origin square index (0-based, a1=0).
        to_sq (int): Destination square index (0-based).
        promotion (Optional[PieceType]): Piece placed when a pawn reaches the
            back rank, otherwise ``None``.
    """

    from_sq: int
    to_sq: int
    promotion: Optional[PieceType] = None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = PROMOTION_TO_CHAR[self.promotion] if self.promotion is not None else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo

    def __str__(self) -> str:
        return self.to_uci()


def parse_uci(uci: str) -> Move:
    """Parse a long algebraic move string.

    Args:
        uci (str): Move such as ``"e2e4"`` or ``"a7a8n"``.

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    promo: Optional[PieceType] = None
    if len(uci) == 5:
        promo = parse_promotion(uci[4])
    return Move(from_sq, to_sq, promo)


def parse_promotion(ch: str) -> PieceType:
    """Map a promotion letter (any case) to its piece type.

    Raises:
        ValueError: If ``ch`` is not one of ``q``, ``r``, ``b``, ``n``.
    """
    try:
        return CHAR_TO_PROMOTION[ch.lower()]
    except KeyError:
        raise ValueError(f"invalid promotion piece: {ch!r}") from None


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = int(s[1]) - 1
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    file = idx % 8
    rank = idx // 8
    return chr(ord("a") + file) + str(rank + 1)
