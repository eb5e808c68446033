from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


ENV_PREFIX = "CHESSRULES_"


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    # Seed for the agent that answers human moves over the WebSocket
    reply_agent_seed: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``CHESSRULES_*`` environment variables.

        Raises:
            ValueError: If ``CHESSRULES_PORT`` or ``CHESSRULES_SEED`` is not an
                integer.
        """
        env = os.environ if environ is None else environ
        settings = cls()
        if env.get(ENV_PREFIX + "HOST"):
            settings.host = env[ENV_PREFIX + "HOST"]
        if env.get(ENV_PREFIX + "PORT"):
            settings.port = _int(env[ENV_PREFIX + "PORT"], "PORT")
        if env.get(ENV_PREFIX + "LOG_LEVEL"):
            settings.log_level = env[ENV_PREFIX + "LOG_LEVEL"].upper()
        if env.get(ENV_PREFIX + "SEED"):
            settings.reply_agent_seed = _int(env[ENV_PREFIX + "SEED"], "SEED")
        return settings


def _int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e
