from __future__ import annotations

from .pieces import PIECE_TO_CHAR
from .position import Position


def render(position: Position) -> str:
    """Draw ``position`` as text, rank 8 at the top, ``.`` for empty squares.

    Example for the start position::

        8 r n b q k b n r
        7 p p p p p p p p
        ...
        1 R N B Q K B N R
          a b c d e f g h
    """
    rows: list[str] = []
    for rank in range(7, -1, -1):
        row = []
        for file in range(8):
            idx = position.piece_index_at(rank * 8 + file)
            row.append(PIECE_TO_CHAR[idx] if idx is not None else ".")
        rows.append(f"{rank + 1} {' '.join(row)}")
    rows.append("  a b c d e f g h")
    return "\n".join(rows)
