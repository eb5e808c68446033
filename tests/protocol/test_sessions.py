from __future__ import annotations

import pytest

from chessrules.engine.game import Game
from chessrules.protocol.http.session import InMemorySessionStore


def test_create_get_delete() -> None:
    store = InMemorySessionStore()
    assert len(store) == 0
    gid = store.create()
    assert len(store) == 1
    game = store.get(gid)
    assert isinstance(game, Game)
    assert store.delete(gid) is True
    assert store.delete(gid) is False
    assert store.get(gid) is None
    assert len(store) == 0


def test_ids_are_unique() -> None:
    store = InMemorySessionStore()
    ids = {store.create() for _ in range(5)}
    assert len(ids) == 5
    assert len(store) == 5


def test_set_replaces_existing_game_only() -> None:
    store = InMemorySessionStore()
    gid = store.create()
    replacement = Game.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
    store.set(gid, replacement)
    assert store.get(gid) is replacement
    with pytest.raises(KeyError):
        store.set("missing", replacement)
