from __future__ import annotations

from typing import List, Optional

from .errors import InvalidPiecePlacement, MalformedFen
from .move import square_to_str, str_to_square
from .pieces import CHAR_TO_PIECE, PIECE_TO_CHAR, Color, PieceType, piece_index
from .position import CASTLING_ORDER, Position


def decode(fen: str) -> Position:
    """Create a position from a Forsyth–Edwards Notation (FEN) string.

    Only the four state fields are read: piece placement, side to move,
    castling rights and en-passant square. Move counters, when present, are
    ignored.

    Args:
        fen (str): FEN string describing the position to load.

    Returns:
        Position: Position initialized with the state encoded in ``fen``.

    Raises:
        MalformedFen: If fewer than four fields are present, the side to
            move or castling rights are invalid, or the en-passant square is
            not one a double push just skipped.
        InvalidPiecePlacement: If the placement field has an unknown piece
            letter, a rank count other than 8, or a rank that does not sum
            to 8 files.
    """
    if not fen or not isinstance(fen, str):
        raise MalformedFen("FEN must be a non-empty string")
    parts = fen.strip().split()
    if len(parts) < 4:
        raise MalformedFen("FEN must have at least 4 fields")
    placement, stm, castling, ep = parts[:4]

    boards = _decode_placement(placement)

    if stm not in ("w", "b"):
        raise MalformedFen("side to move must be 'w' or 'b'")
    side = Color.WHITE if stm == "w" else Color.BLACK

    if castling != "-":
        for ch in castling:
            if ch not in CASTLING_ORDER:
                raise MalformedFen(f"invalid castling rights: {castling!r}")
        castling = "".join(c for c in CASTLING_ORDER if c in castling)
    else:
        castling = ""

    # The FEN square is the one the side to move may capture onto.
    ep_targets: List[Optional[int]] = [None, None]
    if ep != "-":
        try:
            ep_square = str_to_square(ep)
        except ValueError as e:
            raise MalformedFen("invalid en passant square") from e
        expected_rank = 5 if side == Color.WHITE else 2
        if ep_square // 8 != expected_rank:
            raise MalformedFen("invalid en passant square rank")
        _check_ep_square(boards, side, ep_square)
        ep_targets[int(side)] = ep_square

    return Position(
        boards=tuple(boards),
        side_to_move=side,
        castling=castling,
        ep_targets=(ep_targets[0], ep_targets[1]),
    )


def _check_ep_square(boards: List[int], side: Color, ep_square: int) -> None:
    """Reject an en-passant square no double push could have produced."""
    step = -8 if side == Color.WHITE else 8
    occ = 0
    for bb in boards:
        occ |= bb
    if (occ >> ep_square) & 1 or (occ >> (ep_square - step)) & 1:
        raise MalformedFen("en passant square or the pawn's origin square is occupied")
    victim = boards[piece_index(side.opposite, PieceType.PAWN)]
    if not (victim >> (ep_square + step)) & 1:
        raise MalformedFen("no pawn to capture en passant")


def _decode_placement(placement: str) -> List[int]:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidPiecePlacement("FEN board must have 8 ranks")
    bb = [0] * 12
    for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
        file_idx = 0
        for ch in rank:
            if ch.isdigit():
                n = int(ch)
                if n < 1 or n > 8:
                    raise InvalidPiecePlacement("invalid empty count in FEN rank")
                file_idx += n
            else:
                if ch not in CHAR_TO_PIECE:
                    raise InvalidPiecePlacement(f"invalid piece in FEN: {ch!r}")
                if file_idx >= 8:
                    raise InvalidPiecePlacement("too many squares in FEN rank")
                bb[CHAR_TO_PIECE[ch]] |= 1 << (rank_idx * 8 + file_idx)
                file_idx += 1
            if file_idx > 8:
                raise InvalidPiecePlacement("too many squares in FEN rank")
        if file_idx != 8:
            raise InvalidPiecePlacement("rank does not sum to 8 squares in FEN")
    return bb


def encode(position: Position) -> str:
    """Serialize ``position`` into a FEN string.

    Move counters are not tracked, so the halfmove clock is always ``0`` and
    the fullmove number always ``1``.
    """
    ranks_str: List[str] = []
    for rank_idx in range(7, -1, -1):  # 7..0 maps to ranks 8..1
        run = 0
        row = []
        for file_idx in range(8):
            idx = position.piece_index_at(rank_idx * 8 + file_idx)
            if idx is None:
                run += 1
            else:
                if run > 0:
                    row.append(str(run))
                    run = 0
                row.append(PIECE_TO_CHAR[idx])
        if run > 0:
            row.append(str(run))
        ranks_str.append("".join(row))
    placement = "/".join(ranks_str)

    stm = "w" if position.side_to_move == Color.WHITE else "b"
    castling = position.castling if position.castling else "-"
    ep_square = position.ep_target(position.side_to_move)
    ep = square_to_str(ep_square) if ep_square is not None else "-"
    return f"{placement} {stm} {castling} {ep} 0 1"
