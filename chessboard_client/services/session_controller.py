"""
The game session controller is the one owner of what the board UI displays.

It holds the engine's latest game state and the client-local history offset, turns UI events
(clicks, key presses, mode and promotion choices) into engine requests, and decides which
responses are still allowed to replace the state:
- state-changing requests are single-flight: a click while a move is pending is ignored,
- responses overtaken by a newer state-changing request (e.g. a mode change) are discarded,
- a failed request leaves everything as it was, apart from the `last_error` status.

All entry points called by the presentation layer are synchronous and must be called from within
the running event loop; the network work they start runs as tasks on that loop.
"""

import asyncio
import logging
from enum import StrEnum
from typing import Callable, Coroutine, Optional, Self

import httpx

from chessboard_client.api.engine_client import EngineClient
from chessboard_client.api.models import (
    AiVsAi,
    GameState,
    PlayerVsAi,
    PlayerVsPlayer,
    PlayMode,
)
from chessboard_client.board.snapshot import BoardSnapshot
from chessboard_client.board.square import BOARD_DIMENSIONS, Position
from chessboard_client.core.config import ClientConfig
from chessboard_client.core.exceptions import InvalidTransitionError
from chessboard_client.core.shared_types import ARROW_LEFT, ARROW_RIGHT, PromotionChoice
from chessboard_client.services import history
from chessboard_client.services.auto_play import AutoPlayLoop
from chessboard_client.services.dispatcher import Action, ActionDispatcher, Outcome

logger = logging.getLogger(__name__)

# AI-vs-AI games ignore the coordinates of a play request. Off the board, so it never reads as a real click.
AI_TICK_SQUARE = BOARD_DIMENSIONS

Listener = Callable[["GameSessionController"], None]


class SessionPhase(StrEnum):
    UNINITIALIZED = "uninitialized"
    AWAITING_SETUP = "awaiting setup"
    LIVE = "live"
    VIEWING = "viewing history"


class GameSessionController:
    """Orchestration of navigator, dispatcher and auto-play for one game session."""

    def __init__(self, dispatcher: ActionDispatcher, config: ClientConfig) -> None:
        self._dispatcher = dispatcher
        self._config = config
        self._phase = SessionPhase.UNINITIALIZED
        self._game_state: Optional[GameState] = None
        self._state_version = 0
        self._preview: Optional[BoardSnapshot] = None
        self._mode: Optional[PlayMode] = None
        self._offset = 0
        self._mutation_in_flight = False
        # The click or promotion request behind the flag. AI ticks run inside the auto-play task instead.
        self._mutation_task: Optional[asyncio.Task[None]] = None
        self._steps_in_flight: set[Action] = set()
        # Boards the engine sent for a history offset, shown instead of the local history entry
        self._remote_views: dict[int, BoardSnapshot] = {}
        self._held_keys: set[str] = set()
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task[None]] = set()
        self._auto_play = AutoPlayLoop(self._ai_tick, interval=config.auto_play_interval)
        self.last_error: Optional[str] = None

    @classmethod
    def from_config(
        cls, config: ClientConfig, http_client: Optional[httpx.AsyncClient] = None
    ) -> Self:
        """Wire up client, dispatcher and controller for the engine named in the config."""
        return cls(ActionDispatcher(EngineClient(config, http_client)), config)

    # --- STATE SEEN BY THE PRESENTATION LAYER ---
    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def game_state(self) -> Optional[GameState]:
        return self._game_state

    @property
    def mode(self) -> Optional[PlayMode]:
        return self._mode

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def promotion_pending(self) -> bool:
        return self._game_state is not None and self._game_state.promotion_pending

    @property
    def move_in_flight(self) -> bool:
        return self._mutation_in_flight

    @property
    def auto_play(self) -> AutoPlayLoop:
        return self._auto_play

    def view(self) -> BoardSnapshot:
        """The board to render right now."""
        if self._game_state is None:
            return self._preview if self._preview is not None else BoardSnapshot.empty()
        if self._offset > 0 and self._offset in self._remote_views:
            return self._remote_views[self._offset]
        return history.navigate(self._game_state, self._offset)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """`listener` gets called after every change. Returns a function to unsubscribe again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- LIFECYCLE ---
    def start(self, mode: Optional[PlayMode] = None) -> None:
        """Uninitialized -> awaiting setup: set up a game with `mode` (or the configured default)."""
        if self._phase != SessionPhase.UNINITIALIZED:
            raise InvalidTransitionError(f"Cannot start a session that is {self._phase}.")
        self._phase = SessionPhase.AWAITING_SETUP
        logger.info("Starting session against %s", self._config.engine_url)
        if self._config.fetch_preview:
            self._spawn(self._fetch_preview())
        self.on_mode_selected(mode if mode is not None else self._config.default_mode)

    async def wait_idle(self) -> None:
        """Wait until every request started so far (auto-play excluded) has been handled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def close(self) -> None:
        await self._auto_play.aclose()
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        await self._dispatcher.client.aclose()

    # --- UI CALLBACKS ---
    def on_mode_selected(self, mode: PlayMode) -> bool:
        """Always allowed. Supersedes whatever is in flight; the new game replaces the old one once the engine confirms."""
        self._auto_play.stop()
        self._cancel_mutation()
        self._phase = SessionPhase.AWAITING_SETUP
        self._spawn(self._set_play_mode(mode))
        self._notify()
        return True

    def on_square_clicked(self, x: int, y: int) -> bool:
        """Forward a click to the engine, if a human may move right now. Returns whether it was sent."""
        blocker = self._move_blocker()
        if blocker is None and not Position(x, y).is_within_bounds():
            blocker = "not a square on the board"
        if blocker is not None:
            logger.debug("Ignoring click on (%d, %d): %s", x, y, blocker)
            return False
        self._mutation_in_flight = True
        self._mutation_task = self._spawn(self._submit_move(x, y))
        return True

    def on_promotion_chosen(self, choice: PromotionChoice | str) -> bool:
        try:
            choice = PromotionChoice(choice)
        except ValueError:
            logger.debug("Ignoring promotion to %r: not a piece a pawn can become", choice)
            return False
        if self._phase != SessionPhase.LIVE or not self.promotion_pending:
            logger.debug("Ignoring promotion to %s: nothing to promote", choice)
            return False
        if self._mutation_in_flight:
            logger.debug("Ignoring promotion to %s: previous request in flight", choice)
            return False
        self._mutation_in_flight = True
        self._mutation_task = self._spawn(self._promote(choice))
        return True

    def on_key_down(self, key: str) -> bool:
        """Edge-triggered: only the transition from released to pressed counts, auto-repeat is ignored."""
        if key in self._held_keys:
            return False
        self._held_keys.add(key)
        if key == ARROW_LEFT:
            return self.step_back()
        if key == ARROW_RIGHT:
            return self.step_forward()
        return False

    def on_key_up(self, key: str) -> None:
        self._held_keys.discard(key)

    def step_back(self) -> bool:
        """Show the board from one move earlier. No-op when there is no older board."""
        if not self._can_navigate() or not history.can_step_back(
            self._game_state, self._offset
        ):
            return False
        return self._step(Action.STEP_BACK, history.step_back(self._game_state, self._offset))

    def step_forward(self) -> bool:
        """Show the board from one move later. No-op when already showing the live board."""
        if not self._can_navigate() or not history.can_step_forward(self._offset):
            return False
        return self._step(Action.STEP_FORWARD, history.step_forward(self._offset))

    # --- GUARDS ---
    def _move_blocker(self) -> Optional[str]:
        """Why a human move cannot be sent right now (None if it can)."""
        if self._phase != SessionPhase.LIVE:
            return f"session is {self._phase}"
        if not isinstance(self._mode, (PlayerVsAi, PlayerVsPlayer)):
            return "no human side in this play mode"
        if self.promotion_pending:
            return "promotion pending"
        if self._mutation_in_flight:
            return "previous request in flight"
        return None

    def _can_navigate(self) -> bool:
        return self._game_state is not None and self._phase in (
            SessionPhase.LIVE,
            SessionPhase.VIEWING,
        )

    # --- REQUESTS ---
    async def _fetch_preview(self) -> None:
        outcome = await self._dispatcher.reset_board()
        if self._game_state is not None:
            # The real game arrived first, the preview has nothing left to show or report
            return
        if not outcome.ok:
            self._record_failure(outcome)
        else:
            self._preview = outcome.value
        self._notify()

    async def _set_play_mode(self, mode: PlayMode) -> None:
        outcome = await self._dispatcher.set_play_mode(mode)
        if not self._dispatcher.is_latest(outcome):
            logger.debug("Discarding %s #%d: superseded", outcome.action, outcome.sequence)
            return

        if not outcome.ok:
            self._record_failure(outcome)
            # Back to how things were before the attempt
            if self._game_state is not None:
                self._phase = self._navigation_phase()
                if isinstance(self._mode, AiVsAi):
                    self._auto_play.start()
            self._notify()
            return

        self._mode = mode
        self._offset = 0
        self._replace_state(outcome.value)
        self._phase = SessionPhase.LIVE
        logger.info("New game set up: %s", mode)
        if isinstance(mode, AiVsAi):
            self._auto_play.start()
        self._notify()

    async def _submit_move(self, x: int, y: int) -> None:
        """The caller sets the in-flight flag, this clears it once the engine answered."""
        try:
            outcome = await self._dispatcher.submit_move(x, y)
        finally:
            self._mutation_in_flight = False
        self._apply_game_outcome(outcome)

    async def _promote(self, choice: PromotionChoice) -> None:
        try:
            outcome = await self._dispatcher.promote(choice)
        finally:
            self._mutation_in_flight = False
        self._apply_game_outcome(outcome)

    async def _ai_tick(self) -> None:
        if self._mutation_in_flight or not isinstance(self._mode, AiVsAi):
            return
        self._mutation_in_flight = True
        await self._submit_move(*AI_TICK_SQUARE)

    async def _remote_step(
        self, action: Action, start_offset: int, offset: int, state_version: int
    ) -> None:
        try:
            if action == Action.STEP_BACK:
                outcome = await self._dispatcher.step_back()
            else:
                outcome = await self._dispatcher.step_forward()
        finally:
            self._steps_in_flight.discard(action)

        if not self._dispatcher.is_latest(outcome):
            logger.debug("Discarding %s #%d: superseded", outcome.action, outcome.sequence)
            return
        unchanged = offset == self._offset and state_version == self._state_version
        if not outcome.ok:
            self._record_failure(outcome)
            if unchanged and self._can_navigate():
                self._offset = start_offset
                self._phase = self._navigation_phase()
            self._notify()
            return
        if not unchanged:
            logger.debug("Discarding %s #%d: view moved on", outcome.action, outcome.sequence)
            return
        if offset > 0:
            self._remote_views[offset] = outcome.value
        self._notify()

    # --- STATE UPDATES ---
    def _step(self, action: Action, new_offset: int) -> bool:
        if self._config.remote_history:
            if action in self._steps_in_flight:
                logger.debug("Ignoring %s: previous one still in flight", action)
                return False
            self._steps_in_flight.add(action)
            self._spawn(
                self._remote_step(action, self._offset, new_offset, self._state_version)
            )
        self._offset = new_offset
        self._phase = self._navigation_phase()
        self._notify()
        return True

    def _apply_game_outcome(self, outcome: Outcome[GameState]) -> None:
        if not self._dispatcher.is_latest(outcome):
            logger.debug("Discarding %s #%d: superseded", outcome.action, outcome.sequence)
            return
        if not outcome.ok:
            self._record_failure(outcome)
            self._notify()
            return

        previous = self._game_state
        self._replace_state(outcome.value)
        if self._offset > 0 and previous is not None:
            # Someone is looking at the history while the AIs play on: keep showing the same board
            self._offset = history.clamp_offset(
                self._game_state, self._offset + self._game_state.turn - previous.turn
            )
            self._phase = self._navigation_phase()
        self._notify()

    def _replace_state(self, state: GameState) -> None:
        """The game state is only ever replaced as a whole."""
        if state.mode is None and self._mode is not None:
            state = state.model_copy(update={"mode": self._mode})
        self._game_state = state
        self._state_version += 1
        self._remote_views.clear()
        self.last_error = None
        logger.debug("Game state replaced: turn %d, %s to move", state.turn, state.current_player)

    def _cancel_mutation(self) -> None:
        """Drop the pending click or promotion: its answer belongs to a game that is being replaced."""
        task, self._mutation_task = self._mutation_task, None
        if task is not None and not task.done():
            task.cancel()
            # Nothing left to wait for
            self._tasks.discard(task)
        self._mutation_in_flight = False

    def _navigation_phase(self) -> SessionPhase:
        return SessionPhase.LIVE if self._offset == 0 else SessionPhase.VIEWING

    def _record_failure(self, outcome: Outcome) -> None:
        self.last_error = f"{outcome.action} failed: {outcome.error}"

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _spawn(self, coroutine: Coroutine[None, None, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
