from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .apply import make_move
from .attacks import is_in_check
from .fen import decode, encode
from .move import Move
from .movegen import legal_moves
from .pieces import Color
from .position import Position


class IllegalMoveError(ValueError):
    """Raised by :meth:`Game.push` for a move outside the legal set."""


class Termination(str, Enum):
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    FORFEIT = "forfeit"
    TIMEOUT = "timeout"
    MOVE_LIMIT = "move_limit"


@dataclass(frozen=True)
class Outcome:
    """Finished-game result; ``winner`` is ``None`` for a draw."""

    winner: Optional[Color]
    termination: Termination

    @property
    def result(self) -> str:
        if self.winner is None:
            return "1/2-1/2"
        return "1-0" if self.winner == Color.WHITE else "0-1"


@dataclass
class Game:
    """Game wrapper around a position with helper operations.

    Responsibility: track position history, expose legal moves, reject
    moves outside the legal set, and report the outcome.
    """

    position: Position
    move_stack: List[Move] = field(default_factory=list)
    _snapshots: List[Position] = field(default_factory=list, repr=False)

    @classmethod
    def new(cls) -> "Game":
        return cls(position=Position.startpos())

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        return cls(position=decode(fen))

    def fen(self) -> str:
        return encode(self.position)

    def legal_moves(self) -> List[Move]:
        return legal_moves(self.position)

    def push(self, move: Move) -> None:
        if move not in legal_moves(self.position):
            raise IllegalMoveError(f"illegal move: {move.to_uci()}")
        self._snapshots.append(self.position)
        self.position = make_move(self.position, move)
        self.move_stack.append(move)

    def undo(self) -> Move:
        if not self.move_stack:
            raise ValueError("no moves to undo")
        self.position = self._snapshots.pop()
        return self.move_stack.pop()

    # --- State flags for protocol ---
    def in_check(self) -> bool:
        return is_in_check(self.position)

    def outcome(self) -> Optional[Outcome]:
        """Return the outcome when the side to move has no legal moves."""
        if legal_moves(self.position):
            return None
        if is_in_check(self.position):
            return Outcome(self.position.side_to_move.opposite, Termination.CHECKMATE)
        return Outcome(None, Termination.STALEMATE)

    def checkmate(self) -> bool:
        o = self.outcome()
        return o is not None and o.termination == Termination.CHECKMATE

    def stalemate(self) -> bool:
        o = self.outcome()
        return o is not None and o.termination == Termination.STALEMATE

    def history_uci(self) -> List[str]:
        return [m.to_uci() for m in self.move_stack]
