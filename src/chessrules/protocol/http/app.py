from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...config import Settings
from ...engine.game import Game, Outcome, Termination
from ...engine.move import Move, parse_promotion, str_to_square
from ...engine.perft import perft as perft_nodes
from ...engine.pieces import Color
from ...match.agents import Agent, RandomAgent
from .error import HANDLED_ERRORS
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)

# Extra attempts granted to the reply agent, as in the match runner
REPLY_RETRIES = 3


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    """Move triple as sent by the front-end: ``{"from", "to", "promotion"}``."""

    model_config = ConfigDict(populate_by_name=True)

    from_sq: str = Field(..., alias="from", description="Origin square, e.g. e2")
    to_sq: str = Field(..., alias="to", description="Destination square, e.g. e4")
    promotion: Optional[str] = Field(default=None, description="q, r, b or n")

    def to_move(self) -> Move:
        promo = parse_promotion(self.promotion) if self.promotion else None
        return Move(str_to_square(self.from_sq), str_to_square(self.to_sq), promo)


class PerftRequest(BaseModel):
    fen: str
    depth: int = Field(default=1, ge=0, le=3)


class OutcomeModel(BaseModel):
    result: str
    winner: Optional[str]
    termination: str


class GameState(BaseModel):
    game_id: str
    fen: str
    legal_moves: list[str]
    in_check: bool
    checkmate: bool
    stalemate: bool
    outcome: Optional[OutcomeModel]
    last_move: Optional[str]
    move_history: list[str]


def create_app(
    settings: Optional[Settings] = None, reply_agent: Optional[Agent] = None
) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Chess Rules API", version="0.1.0")

    logging.basicConfig(level=settings.log_level)

    app.add_middleware(RequestIDLoggingMiddleware)
    for exc_type, handler in HANDLED_ERRORS:
        app.add_exception_handler(exc_type, handler)

    store = InMemorySessionStore()
    responder: Agent = reply_agent or RandomAgent(seed=settings.reply_agent_seed)

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game = Game.new()
        game_id = store.create(game)
        return CreateGameResponse(game_id=game_id, fen=game.fen())

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _state(game_id, _require_game(store, game_id))

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, bool]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"deleted": True}

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        # FenError propagates to the invalid_fen handler
        game = Game.from_fen(req.fen)
        store.set(game_id, game)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            move = req.to_move()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        game.push(move)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        try:
            game.undo()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state(game_id, game)

    @app.post("/api/perft")
    def perft(req: PerftRequest) -> Dict[str, int]:
        game = Game.from_fen(req.fen)
        return {"nodes": perft_nodes(game.position, req.depth)}

    @app.websocket("/ws")
    async def play_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        game = Game.new()
        logger.info("websocket connected")
        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    move = MoveRequest.model_validate_json(raw).to_move()
                    game.push(move)
                except (ValidationError, ValueError) as e:
                    logger.info("rejected human move", extra={"payload": raw, "reason": str(e)})
                    await websocket.send_json({"error": "Illegal move, please try again"})
                    continue

                reply: Optional[str] = None
                if game.outcome() is None:
                    answer = _agent_reply(responder, game)
                    if answer is None:
                        # Return to the position before the human move
                        game.undo()
                        await websocket.send_json(
                            {"error": "Opponent failed to move, please try again", "fen": game.fen()}
                        )
                        continue
                    game.push(answer)
                    reply = answer.to_uci()

                payload: Dict[str, object] = {"fen": game.fen(), "move": reply}
                outcome = game.outcome()
                if outcome is not None:
                    payload["outcome"] = _outcome_model(outcome).model_dump()
                await websocket.send_json(payload)
        except WebSocketDisconnect:
            logger.info("websocket disconnected", extra={"plies": len(game.move_stack)})

    return app


def _agent_reply(agent: Agent, game: Game) -> Optional[Move]:
    """Ask ``agent`` for a legal reply, up to ``REPLY_RETRIES`` extra times."""
    legal = game.legal_moves()
    for attempt in range(REPLY_RETRIES + 1):
        answer = agent.select_move(game.position, list(legal))
        if answer in legal:
            return answer
        logger.warning(
            "illegal reply proposed",
            extra={"agent": agent.name, "move": str(answer), "attempt": attempt + 1},
        )
    return None


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _outcome_model(outcome: Outcome) -> OutcomeModel:
    winner = None if outcome.winner is None else str(Color(outcome.winner))
    return OutcomeModel(
        result=outcome.result, winner=winner, termination=outcome.termination.value
    )


def _state(game_id: str, game: Game) -> GameState:
    history = game.history_uci()
    outcome = game.outcome()
    return GameState(
        game_id=game_id,
        fen=game.fen(),
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        in_check=game.in_check(),
        checkmate=outcome is not None and outcome.termination == Termination.CHECKMATE,
        stalemate=outcome is not None and outcome.termination == Termination.STALEMATE,
        outcome=_outcome_model(outcome) if outcome is not None else None,
        last_move=history[-1] if history else None,
        move_history=history,
    )


# Default app for non-factory servers
app = create_app()
