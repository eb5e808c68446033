"""Chess rules core: FEN codec, legal move generation, move application."""

from .engine import (
    FenError,
    Move,
    Position,
    apply,
    is_checkmate,
    is_in_check,
    is_stalemate,
    legal_moves,
    parse_uci,
)
from .engine.fen import decode as decode_position
from .engine.fen import encode as encode_position

__all__ = [
    "FenError",
    "Move",
    "Position",
    "apply",
    "decode_position",
    "encode_position",
    "is_checkmate",
    "is_in_check",
    "is_stalemate",
    "legal_moves",
    "parse_uci",
]

__version__ = "0.1.0"
