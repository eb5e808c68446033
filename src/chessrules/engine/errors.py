from __future__ import annotations


class FenError(ValueError):
    """Base class for FEN decoding failures. Always recoverable."""


class MalformedFen(FenError):
    """Missing fields or a bad side-to-move, castling or en-passant field."""


class InvalidPiecePlacement(FenError):
    """Piece placement field with unknown letters or a bad rank layout."""
