from .apply import apply, make_move
from .attacks import is_attacked, is_in_check
from .errors import FenError, InvalidPiecePlacement, MalformedFen
from .fen import decode, encode
from .move import Move, parse_uci
from .movegen import is_checkmate, is_stalemate, legal_moves
from .pieces import Color, PieceType
from .position import STARTPOS_FEN, Position
from .render import render
from .validator import is_legal

__all__ = [
    "Color",
    "FenError",
    "InvalidPiecePlacement",
    "MalformedFen",
    "Move",
    "PieceType",
    "Position",
    "STARTPOS_FEN",
    "apply",
    "decode",
    "encode",
    "is_attacked",
    "is_checkmate",
    "is_in_check",
    "is_legal",
    "is_stalemate",
    "legal_moves",
    "make_move",
    "parse_uci",
    "render",
]
