"""
Sends the client's actions to the engine.

Every call returns an Outcome instead of raising: network and parse failures are logged here and
reported as a failed Outcome, so that the caller can keep its previous state.
Outcomes are tagged with a sequence number, which lets the caller discard responses that were overtaken
by a more recent request of the same family.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Awaitable, Generic, Optional, TypeVar

from chessboard_client.api.engine_client import EngineClient
from chessboard_client.api.models import GameState, PlayMode
from chessboard_client.board.snapshot import BoardSnapshot
from chessboard_client.core.exceptions import ChessClientError
from chessboard_client.core.shared_types import PromotionChoice

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Action(StrEnum):
    SUBMIT_MOVE = "submit move"
    SET_PLAY_MODE = "set play mode"
    PROMOTE = "promote"
    STEP_BACK = "step back"
    STEP_FORWARD = "step forward"
    RESET_BOARD = "reset board"


# Actions whose response replaces the game state. They share one sequence, the others share a second one.
MUTATING_ACTIONS = frozenset({Action.SUBMIT_MOVE, Action.SET_PLAY_MODE, Action.PROMOTE})


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of one request: either a value or the error that prevented it."""

    action: Action
    sequence: int
    value: Optional[T] = None
    error: Optional[ChessClientError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ActionDispatcher:
    """Builds, sends and tags requests. Does not serialize them: that is up to the caller."""

    def __init__(self, client: EngineClient) -> None:
        self.client = client
        self._mutation_sequence = 0
        self._navigation_sequence = 0

    @property
    def latest_mutation(self) -> int:
        return self._mutation_sequence

    @property
    def latest_navigation(self) -> int:
        return self._navigation_sequence

    def is_latest(self, outcome: Outcome) -> bool:
        """Was no other request of the same family issued after this one?"""
        if outcome.action in MUTATING_ACTIONS:
            return outcome.sequence == self._mutation_sequence
        return outcome.sequence == self._navigation_sequence

    # -- Actions --
    async def submit_move(self, x: int, y: int) -> Outcome[GameState]:
        return await self._dispatch(Action.SUBMIT_MOVE, self.client.play(x, y))

    async def set_play_mode(self, mode: PlayMode) -> Outcome[GameState]:
        return await self._dispatch(Action.SET_PLAY_MODE, self.client.set_play_mode(mode))

    async def promote(self, choice: PromotionChoice | str) -> Outcome[GameState]:
        return await self._dispatch(Action.PROMOTE, self.client.promote(choice))

    async def step_back(self) -> Outcome[BoardSnapshot]:
        return await self._dispatch(Action.STEP_BACK, self.client.get_previous_board())

    async def step_forward(self) -> Outcome[BoardSnapshot]:
        return await self._dispatch(Action.STEP_FORWARD, self.client.get_next_board())

    async def reset_board(self) -> Outcome[BoardSnapshot]:
        return await self._dispatch(Action.RESET_BOARD, self.client.reset_board())

    # -- Internal helpers --
    def _next_sequence(self, action: Action) -> int:
        if action in MUTATING_ACTIONS:
            self._mutation_sequence += 1
            return self._mutation_sequence
        self._navigation_sequence += 1
        return self._navigation_sequence

    async def _dispatch(self, action: Action, request: Awaitable[T]) -> Outcome[T]:
        """Await the request, turning client errors into a failed Outcome."""
        sequence = self._next_sequence(action)
        try:
            value = await request
        except ChessClientError as error:
            logger.warning("%s #%d failed: %s", action, sequence, error)
            return Outcome(action, sequence, error=error)
        logger.debug("%s #%d succeeded", action, sequence)
        return Outcome(action, sequence, value=value)
