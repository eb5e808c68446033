from __future__ import annotations

import json
from typing import List

from fastapi.testclient import TestClient

from chessrules.config import Settings
from chessrules.engine.move import Move, parse_uci
from chessrules.engine.position import STARTPOS_FEN, Position
from chessrules.protocol.http.app import create_app


class ScriptedAgent:
    name = "scripted"

    def __init__(self, moves: List[str]) -> None:
        self._moves = [parse_uci(u) for u in moves]

    def select_move(self, position: Position, legal_moves: List[Move]) -> Move:
        return self._moves.pop(0)


def _client(replies: List[str]) -> TestClient:
    return TestClient(create_app(Settings(), reply_agent=ScriptedAgent(replies)))


def test_move_gets_a_reply() -> None:
    client = _client(["e7e5"])
    with client.websocket_connect("/ws") as ws:
        ws.send_text(json.dumps({"from": "e2", "to": "e4"}))
        msg = ws.receive_json()
    assert msg["move"] == "e7e5"
    assert msg["fen"] == "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq e6 0 1"
    assert "outcome" not in msg


def test_illegal_move_gets_error_and_game_continues() -> None:
    client = _client(["e7e5"])
    with client.websocket_connect("/ws") as ws:
        ws.send_text(json.dumps({"from": "e2", "to": "e5"}))
        assert ws.receive_json() == {"error": "Illegal move, please try again"}
        ws.send_text("garbage")
        assert ws.receive_json() == {"error": "Illegal move, please try again"}
        ws.send_text(json.dumps({"from": "e2", "to": "e4"}))
        assert ws.receive_json()["move"] == "e7e5"


def test_game_over_reports_outcome() -> None:
    # Scholar's mate: the human delivers mate so no reply is made
    client = _client(["e7e5", "b8c6", "g8f6"])
    with client.websocket_connect("/ws") as ws:
        for frm, to in (("e2", "e4"), ("f1", "c4"), ("d1", "h5")):
            ws.send_text(json.dumps({"from": frm, "to": to}))
            ws.receive_json()
        ws.send_text(json.dumps({"from": "h5", "to": "f7"}))
        msg = ws.receive_json()
    assert msg["move"] is None
    assert msg["outcome"] == {"result": "1-0", "winner": "white", "termination": "checkmate"}


class CountingAgent(ScriptedAgent):
    def __init__(self, moves: List[str]) -> None:
        super().__init__(moves)
        self.calls = 0

    def select_move(self, position: Position, legal_moves: List[Move]) -> Move:
        self.calls += 1
        return super().select_move(position, legal_moves)


def test_illegal_reply_is_retried() -> None:
    agent = CountingAgent(["e7e4", "e7e5"])
    client = TestClient(create_app(Settings(), reply_agent=agent))
    with client.websocket_connect("/ws") as ws:
        ws.send_text(json.dumps({"from": "e2", "to": "e4"}))
        msg = ws.receive_json()
    assert msg["move"] == "e7e5"
    assert agent.calls == 2


def test_agent_without_legal_reply_keeps_socket_open() -> None:
    agent = CountingAgent(["e7e4"] * 4 + ["e7e5"])
    client = TestClient(create_app(Settings(), reply_agent=agent))
    with client.websocket_connect("/ws") as ws:
        ws.send_text(json.dumps({"from": "e2", "to": "e4"}))
        msg = ws.receive_json()
        assert msg["error"]
        assert msg["fen"] == STARTPOS_FEN
        assert agent.calls == 4

        ws.send_text(json.dumps({"from": "e2", "to": "e4"}))
        assert ws.receive_json()["move"] == "e7e5"
