"""
Stand-ins for the remote engine: JSON builders in the engine's wire format and a scripted fake engine
that sits behind httpx.MockTransport.
"""

import asyncio
import json
from collections import defaultdict, deque
from typing import Any, Optional

import httpx

EMPTY_PIECE = {"idx": 10, "name": "EMPTY", "color": None}

# (row, col) -> (name, color)
PieceMap = dict[tuple[int, int], tuple[str, Optional[str]]]


def cell(
    name: Optional[str] = None,
    color: Optional[str] = None,
    threatened: bool = False,
    control: Optional[str] = None,
) -> dict[str, Any]:
    piece = EMPTY_PIECE if name is None else {"name": name, "color": color}
    record: dict[str, Any] = {"piece": piece, "threatened": threatened}
    if control is not None:
        record["control"] = control
    return record


def board_json(pieces: Optional[PieceMap] = None) -> list[list[dict[str, Any]]]:
    pieces = pieces or {}
    return [
        [cell(*pieces[(row, col)]) if (row, col) in pieces else cell() for col in range(8)]
        for row in range(8)
    ]


def numbered_board(number: int) -> list[list[dict[str, Any]]]:
    """A board that is recognizable by its number: a single white king on square `number`."""
    return board_json({(number // 8, number % 8): ("KING", "WHITE")})


def game_state_json(
    turn: int = 0,
    current_player: str = "White",
    board: Optional[list[list[dict[str, Any]]]] = None,
    history_length: Optional[int] = None,
    **extra: Any,
) -> dict[str, Any]:
    """Game record with history boards numbered 0..turn-1 and the live board numbered `turn`."""
    length = turn if history_length is None else history_length
    state = {
        "current_player": current_player,
        "turn": turn,
        "board": board if board is not None else numbered_board(turn),
        "board_history": [numbered_board(number) for number in range(length)],
    }
    state.update(extra)
    return state


class FakeEngine:
    """
    Answers requests from queued responses (per path), falling back to per-path defaults.
    `hold(path)` makes the next request to that path wait until the returned event is set.
    """

    def __init__(self) -> None:
        self.requests: list[tuple[str, str, Any]] = []
        self._queued: dict[str, deque] = defaultdict(deque)
        self._defaults: dict[str, Any] = {
            "/api/set_play_mode": game_state_json(turn=0),
            "/api/reset_board": {"board": numbered_board(63)},
        }
        self._gates: dict[str, deque] = defaultdict(deque)

    def queue(self, path: str, payload: Any = None, status: int = 200) -> None:
        self._queued[path].append((status, payload))

    def queue_error(self, path: str, error: Exception) -> None:
        self._queued[path].append(error)

    def set_default(self, path: str, payload: Any) -> None:
        self._defaults[path] = payload

    def hold(self, path: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[path].append(gate)
        return gate

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.requests]

    def bodies(self, path: str) -> list[Any]:
        return [body for _, request_path, body in self.requests if request_path == path]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        if self._gates[path]:
            await self._gates[path].popleft().wait()

        if self._queued[path]:
            scripted = self._queued[path].popleft()
            if isinstance(scripted, Exception):
                raise scripted
            status, payload = scripted
        elif path in self._defaults:
            status, payload = 200, self._defaults[path]
        else:
            status, payload = 500, "could not process play"

        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)
