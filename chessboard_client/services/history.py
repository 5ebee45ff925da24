"""
History navigation: which board to show for a given offset.

The offset counts turns back from the live board: 0 is the live board, k > 0 is the board from k moves ago.
It only lives on the client, the engine never sees it. Everything here is pure.
"""

from chessboard_client.api.models import GameState
from chessboard_client.board.snapshot import BoardSnapshot


def navigate(state: GameState, offset: int) -> BoardSnapshot:
    """Board to render for `offset`. Callers keep the offset within [0, turn]."""
    if offset == 0:
        return state.board
    if not 0 < offset <= state.turn:
        raise IndexError(f"Offset {offset} outside of [0, {state.turn}].")
    return state.board_history[state.turn - offset]


def can_step_back(state: GameState, offset: int) -> bool:
    return offset + 1 <= state.turn


def can_step_forward(offset: int) -> bool:
    return offset - 1 >= 0


def step_back(state: GameState, offset: int) -> int:
    """One move further into the past, or the same offset when there is no older board."""
    return offset + 1 if can_step_back(state, offset) else offset


def step_forward(offset: int) -> int:
    """One move towards the live board, or the same offset when already live."""
    return offset - 1 if can_step_forward(offset) else offset


def clamp_offset(state: GameState, offset: int) -> int:
    return max(0, min(offset, state.turn))
