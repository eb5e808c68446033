from __future__ import annotations

import pytest

from chessrules.config import Settings


def test_defaults() -> None:
    s = Settings.from_env({})
    assert s.host == "127.0.0.1"
    assert s.port == 8000
    assert s.log_level == "INFO"
    assert s.reply_agent_seed is None


def test_environment_overrides() -> None:
    s = Settings.from_env(
        {
            "CHESSRULES_HOST": "0.0.0.0",
            "CHESSRULES_PORT": "9000",
            "CHESSRULES_LOG_LEVEL": "debug",
            "CHESSRULES_SEED": "42",
        }
    )
    assert s.host == "0.0.0.0"
    assert s.port == 9000
    assert s.log_level == "DEBUG"
    assert s.reply_agent_seed == 42


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESSRULES_PORT", "8123")
    assert Settings.from_env().port == 8123


@pytest.mark.parametrize("name", ["CHESSRULES_PORT", "CHESSRULES_SEED"])
def test_non_integer_values_rejected(name: str) -> None:
    with pytest.raises(ValueError, match=name):
        Settings.from_env({name: "abc"})
