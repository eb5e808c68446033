from __future__ import annotations

import random
from typing import List, Optional, Protocol

from ..engine.move import Move
from ..engine.position import Position


class Agent(Protocol):
    """Move-selection collaborator driven by the match runner."""

    name: str

    def select_move(self, position: Position, legal_moves: List[Move]) -> Move: ...


class RandomAgent:
    """Pick a uniformly random move from the offered legal set."""

    def __init__(self, seed: Optional[int] = None, name: str = "random") -> None:
        self.name = name
        self._rng = random.Random(seed)

    def select_move(self, position: Position, legal_moves: List[Move]) -> Move:
        if not legal_moves:
            raise ValueError("no legal moves to choose from")
        return self._rng.choice(legal_moves)
