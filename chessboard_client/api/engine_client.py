"""HTTP client for the remote chess engine. One method per endpoint, one typed result per method."""

import logging
from typing import Any, Optional, Self, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from chessboard_client.api.models import (
    BoardResponse,
    GameState,
    PlayMode,
    PlayRequest,
    PromoteRequest,
    SetPlayModeRequest,
)
from chessboard_client.board.snapshot import BoardSnapshot
from chessboard_client.core.config import ClientConfig
from chessboard_client.core.exceptions import (
    EngineRejectedError,
    MalformedResponseError,
    NetworkFailureError,
)
from chessboard_client.core.shared_types import PromotionChoice

logger = logging.getLogger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)

RESET_BOARD_PATH = "/api/reset_board"
SET_PLAY_MODE_PATH = "/api/set_play_mode"
PLAY_PATH = "/api/play"
PROMOTE_PATH = "/api/promote"
PREVIOUS_BOARD_PATH = "/api/get_previous_board"
NEXT_BOARD_PATH = "/api/get_next_board"


class EngineClient:
    """Talks to the engine's REST-like API."""

    def __init__(
        self,
        config: ClientConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self._http = http_client or httpx.AsyncClient(
            base_url=config.engine_url, timeout=config.request_timeout
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -- Endpoints --
    async def reset_board(self) -> BoardSnapshot:
        response = await self._send("GET", RESET_BOARD_PATH)
        return self._parse(response, BoardResponse).board

    async def set_play_mode(self, mode: PlayMode) -> GameState:
        body = SetPlayModeRequest(mode=mode).to_body()
        response = await self._send("POST", SET_PLAY_MODE_PATH, body)
        return self._parse(response, GameState)

    async def play(self, x: int, y: int) -> GameState:
        body = PlayRequest(x=x, y=y).model_dump()
        response = await self._send("POST", PLAY_PATH, body)
        return self._parse(response, GameState)

    async def promote(self, choice: PromotionChoice | str) -> GameState:
        body = PromoteRequest(promote_to=choice).model_dump(mode="json")
        response = await self._send("POST", PROMOTE_PATH, body)
        return self._parse(response, GameState)

    async def get_previous_board(self) -> BoardSnapshot:
        response = await self._send("GET", PREVIOUS_BOARD_PATH)
        return self._parse(response, BoardResponse).board

    async def get_next_board(self) -> BoardSnapshot:
        response = await self._send("GET", NEXT_BOARD_PATH)
        return self._parse(response, BoardResponse).board

    # -- Internal helpers --
    async def _send(
        self, method: str, path: str, body: Optional[dict[str, Any]] = None
    ) -> httpx.Response:
        """Perform the request and translate transport problems into client exceptions."""
        logger.debug("%s %s %s", method, path, body if body is not None else "")
        try:
            response = await self._http.request(method, path, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as error:
            raise EngineRejectedError(
                f"{method} {path} answered {error.response.status_code}: {error.response.text!r}",
                status_code=error.response.status_code,
            ) from error
        except httpx.HTTPError as error:
            raise NetworkFailureError(f"{method} {path} failed: {error!r}") from error
        return response

    def _parse(
        self, response: httpx.Response, model: type[ResponseModel]
    ) -> ResponseModel:
        """Decode the body into the response type of the endpoint, or fail with MalformedResponseError."""
        try:
            payload = response.json()
        except ValueError as error:
            raise MalformedResponseError(
                f"{response.request.url.path} did not answer with JSON: {response.text[:200]!r}"
            ) from error
        try:
            return model.model_validate(payload)
        except ValidationError as error:
            raise MalformedResponseError(
                f"{response.request.url.path} answered an unexpected {model.__name__} shape: {error}"
            ) from error
