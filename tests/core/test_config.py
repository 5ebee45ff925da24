"""Unit tests for chessboard_client/core/config.py"""

import pytest
from pydantic import ValidationError

from chessboard_client.api.models import PlayerVsAi
from chessboard_client.core.config import (
    DEFAULT_AUTO_PLAY_INTERVAL_S,
    DEFAULT_ENGINE_URL,
    ClientConfig,
)
from chessboard_client.core.shared_types import Color


def test_defaults_without_environment() -> None:
    config = ClientConfig.from_env({})
    assert config.engine_url == DEFAULT_ENGINE_URL
    assert config.auto_play_interval == DEFAULT_AUTO_PLAY_INTERVAL_S == 0.5
    assert config.remote_history is False
    assert config.fetch_preview is True
    assert config.default_mode == PlayerVsAi(player_color=Color.WHITE)


def test_environment_overrides() -> None:
    config = ClientConfig.from_env(
        {
            "CHESS_ENGINE_URL": "http://engine:9000",
            "CHESS_REQUEST_TIMEOUT": "2.5",
            "CHESS_AUTO_PLAY_INTERVAL": "0.1",
            "CHESS_REMOTE_HISTORY": "yes",
            "CHESS_FETCH_PREVIEW": "0",
            "CHESS_LOG_LEVEL": "debug",
        }
    )
    assert config.engine_url == "http://engine:9000"
    assert config.request_timeout == 2.5
    assert config.auto_play_interval == 0.1
    assert config.remote_history is True
    assert config.fetch_preview is False
    assert config.log_level == "DEBUG"


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        ClientConfig(auto_play_interval=0)
