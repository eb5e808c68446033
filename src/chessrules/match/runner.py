from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..engine.attacks import is_in_check
from ..engine.fen import decode, encode
from ..engine.apply import make_move
from ..engine.move import Move
from ..engine.movegen import legal_moves
from ..engine.game import Outcome, Termination
from ..engine.pieces import Color
from ..engine.position import Position
from .agents import Agent


logger = logging.getLogger(__name__)


@dataclass
class GameRecord:
    outcome: Outcome
    moves: List[Move]
    final_fen: str

    @property
    def plies(self) -> int:
        return len(self.moves)


@dataclass
class MatchResult:
    white_wins: int = 0
    black_wins: int = 0
    draws: int = 0
    games: List[GameRecord] = field(default_factory=list)

    def record(self, game: GameRecord) -> None:
        self.games.append(game)
        winner = game.outcome.winner
        if winner is None:
            self.draws += 1
        elif winner == Color.WHITE:
            self.white_wins += 1
        else:
            self.black_wins += 1


class _AgentTimeout(Exception):
    pass


def play_game(
    white: Agent,
    black: Agent,
    *,
    start_fen: Optional[str] = None,
    max_retries: int = 3,
    turn_timeout: Optional[float] = None,
    max_plies: Optional[int] = None,
) -> GameRecord:
    """Alternate two agents from ``start_fen`` (default: start position).

    An agent proposing a move outside the legal set is asked again up to
    ``max_retries`` more times before it forfeits. An agent taking longer
    than ``turn_timeout`` seconds loses on time. ``max_plies`` caps the game
    length and scores a draw when reached.
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")
    position = decode(start_fen) if start_fen else Position.startpos()
    moves: List[Move] = []
    executor = ThreadPoolExecutor(max_workers=1) if turn_timeout is not None else None
    logger.info(
        "game start",
        extra={"white": white.name, "black": black.name, "fen": encode(position)},
    )

    def finish(outcome: Outcome) -> GameRecord:
        record = GameRecord(outcome=outcome, moves=moves, final_fen=encode(position))
        logger.info(
            "game over",
            extra={
                "result": outcome.result,
                "termination": outcome.termination.value,
                "plies": record.plies,
            },
        )
        return record

    try:
        while True:
            side = position.side_to_move
            legal = legal_moves(position)
            if not legal:
                if is_in_check(position):
                    return finish(Outcome(side.opposite, Termination.CHECKMATE))
                return finish(Outcome(None, Termination.STALEMATE))
            if max_plies is not None and len(moves) >= max_plies:
                return finish(Outcome(None, Termination.MOVE_LIMIT))

            agent = white if side == Color.WHITE else black
            chosen: Optional[Move] = None
            for attempt in range(max_retries + 1):
                try:
                    proposal = _ask(executor, agent, position, list(legal), turn_timeout)
                except _AgentTimeout:
                    logger.warning("agent timed out", extra={"agent": agent.name})
                    return finish(Outcome(side.opposite, Termination.TIMEOUT))
                if proposal in legal:
                    chosen = proposal
                    break
                logger.warning(
                    "illegal move proposed",
                    extra={"agent": agent.name, "move": str(proposal), "attempt": attempt + 1},
                )
            if chosen is None:
                return finish(Outcome(side.opposite, Termination.FORFEIT))

            position = make_move(position, chosen)
            moves.append(chosen)
    finally:
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)


def _ask(
    executor: Optional[ThreadPoolExecutor],
    agent: Agent,
    position: Position,
    legal: List[Move],
    timeout: Optional[float],
) -> Any:
    if executor is None:
        return agent.select_move(position, legal)
    future = executor.submit(agent.select_move, position, legal)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        raise _AgentTimeout() from None


def play_match(white: Agent, black: Agent, games: int, **kwargs: Any) -> MatchResult:
    """Play ``games`` games with fixed colors and tally the results."""
    if games < 1:
        raise ValueError("games must be >= 1")
    result = MatchResult()
    for _ in range(games):
        result.record(play_game(white, black, **kwargs))
    logger.info(
        "match finished",
        extra={"white_wins": result.white_wins, "black_wins": result.black_wins, "draws": result.draws},
    )
    return result
