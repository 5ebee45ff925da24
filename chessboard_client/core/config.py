"""
Client configuration.

Settings can be changed via:
1. Environment variables (see ENV_* below), read by ClientConfig.from_env()
2. Passing values to ClientConfig directly (tests, embedding applications)
"""

import os
from typing import Self

from pydantic import BaseModel, Field, PositiveFloat

from chessboard_client.api.models import PlayerVsAi, PlayMode
from chessboard_client.core.shared_types import Color

# Where the engine binds by default
DEFAULT_ENGINE_URL = "http://localhost:8005"
DEFAULT_REQUEST_TIMEOUT_S = 10.0
DEFAULT_AUTO_PLAY_INTERVAL_S = 0.5

ENV_ENGINE_URL = "CHESS_ENGINE_URL"
ENV_REQUEST_TIMEOUT = "CHESS_REQUEST_TIMEOUT"
ENV_AUTO_PLAY_INTERVAL = "CHESS_AUTO_PLAY_INTERVAL"
ENV_REMOTE_HISTORY = "CHESS_REMOTE_HISTORY"
ENV_FETCH_PREVIEW = "CHESS_FETCH_PREVIEW"
ENV_LOG_LEVEL = "CHESS_LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}


class ClientConfig(BaseModel):
    """Everything the session needs to know about its surroundings."""

    engine_url: str = DEFAULT_ENGINE_URL
    request_timeout: PositiveFloat = DEFAULT_REQUEST_TIMEOUT_S
    auto_play_interval: PositiveFloat = DEFAULT_AUTO_PLAY_INTERVAL_S
    # Also move the engine's own history cursor when stepping through the history
    remote_history: bool = False
    # Show the engine's starting board while the first setup request is pending
    fetch_preview: bool = True
    log_level: str = "INFO"
    default_mode: PlayMode = Field(
        default_factory=lambda: PlayerVsAi(player_color=Color.WHITE)
    )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Self:
        """Defaults, overridden by whichever environment variables are set."""
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        if ENV_ENGINE_URL in env:
            overrides["engine_url"] = env[ENV_ENGINE_URL]
        if ENV_REQUEST_TIMEOUT in env:
            overrides["request_timeout"] = env[ENV_REQUEST_TIMEOUT]
        if ENV_AUTO_PLAY_INTERVAL in env:
            overrides["auto_play_interval"] = env[ENV_AUTO_PLAY_INTERVAL]
        if ENV_REMOTE_HISTORY in env:
            overrides["remote_history"] = env[ENV_REMOTE_HISTORY].lower() in _TRUTHY
        if ENV_FETCH_PREVIEW in env:
            overrides["fetch_preview"] = env[ENV_FETCH_PREVIEW].lower() in _TRUTHY
        if ENV_LOG_LEVEL in env:
            overrides["log_level"] = env[ENV_LOG_LEVEL].upper()
        return cls.model_validate(overrides)
