"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

from typing import Callable

import httpx
import pytest

from chessboard_client.api.engine_client import EngineClient
from chessboard_client.core.config import ClientConfig
from chessboard_client.services.session_controller import GameSessionController
from tests.engine_fakes import FakeEngine


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def client_config() -> ClientConfig:
    """No preview request and a fast auto-play cadence, so that tests stay short and request logs predictable."""
    return ClientConfig(fetch_preview=False, auto_play_interval=0.01)


@pytest.fixture
def make_client(
    fake_engine: FakeEngine, client_config: ClientConfig
) -> Callable[[], EngineClient]:
    """EngineClient talking to the fake engine. Call it inside the event loop of the test."""

    def _make() -> EngineClient:
        http_client = httpx.AsyncClient(
            transport=fake_engine.transport(), base_url=client_config.engine_url
        )
        return EngineClient(client_config, http_client)

    return _make


@pytest.fixture
def make_controller(
    fake_engine: FakeEngine, client_config: ClientConfig
) -> Callable[..., GameSessionController]:
    def _make(config: ClientConfig | None = None) -> GameSessionController:
        config = config or client_config
        http_client = httpx.AsyncClient(
            transport=fake_engine.transport(), base_url=config.engine_url
        )
        return GameSessionController.from_config(config, http_client)

    return _make
