"""Requests and Response models exchanged with the chess engine"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    NonNegativeInt,
    field_validator,
    model_validator,
)

from chessboard_client.board.snapshot import BoardSnapshot
from chessboard_client.board.square import BOARD_DIMENSIONS, Position
from chessboard_client.core.exceptions import MalformedResponseError
from chessboard_client.core.shared_types import AiEngine, Color, PromotionChoice


def _parse_color(value: Any) -> Any:
    return Color(value) if isinstance(value, str) else value


EngineColor = Annotated[Color, BeforeValidator(_parse_color)]


# --- PLAY MODES ---
class PlayerVsPlayer(BaseModel):
    """Two humans share the board and take turns clicking."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["player_vs_player"] = "player_vs_player"

    def to_setup(self) -> dict[str, Any]:
        return {"Setup": "PlayerVsPlayer"}


class PlayerVsAi(BaseModel):
    """A human plays `player_color`, the engine's AI plays the other side."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["player_vs_ai"] = "player_vs_ai"
    player_color: EngineColor
    engine: Optional[AiEngine] = None

    def to_setup(self) -> dict[str, Any]:
        if self.engine is None:
            return {"Setup": {"PlayerVsAi": self.player_color.to_engine()}}
        return {"Setup": {"PlayerVsAi": [self.player_color.to_engine(), self.engine.value]}}


class AiVsAi(BaseModel):
    """Two AIs play each other. The client only keeps asking the engine to advance."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ai_vs_ai"] = "ai_vs_ai"
    engine_a: AiEngine = AiEngine.MINIMAX
    engine_b: AiEngine = AiEngine.MINIMAX
    depth_a: NonNegativeInt = 3
    depth_b: NonNegativeInt = 3

    def to_setup(self) -> dict[str, Any]:
        return {
            "Setup": {
                "AiVsAi": [
                    self.engine_a.value,
                    self.engine_b.value,
                    self.depth_a,
                    self.depth_b,
                ]
            }
        }


PlayMode = Annotated[
    Union[PlayerVsPlayer, PlayerVsAi, AiVsAi], Field(discriminator="kind")
]

# Unit variant, sent as a plain string instead of a one-key object
_PLAYER_VS_PLAYER = "PlayerVsPlayer"


def play_mode_from_setup(data: Any) -> Any:
    """Inverse of `to_setup()`: also accepts the bare variant without the 'Setup' wrapper."""
    if data == _PLAYER_VS_PLAYER:
        return PlayerVsPlayer()
    if not isinstance(data, dict) or "kind" in data:
        return data
    if "Setup" in data:
        data = data["Setup"]
    if data == _PLAYER_VS_PLAYER:
        return PlayerVsPlayer()
    if not isinstance(data, dict):
        raise ValueError(f"Unknown play mode setup: {data!r}")
    if "PlayerVsAi" in data:
        value = data["PlayerVsAi"]
        if isinstance(value, (list, tuple)):
            color, engine = value
            return PlayerVsAi(player_color=color, engine=engine)
        return PlayerVsAi(player_color=value)
    if "AiVsAi" in data:
        engine_a, engine_b, depth_a, depth_b = data["AiVsAi"]
        return AiVsAi(
            engine_a=engine_a, engine_b=engine_b, depth_a=depth_a, depth_b=depth_b
        )
    raise ValueError(f"Unknown play mode setup: {data!r}")


# --- REQUEST MODELS ---
class PlayRequest(BaseModel):
    """A click on the board. x is the row, y the column. 8 means 'off the board' (AI ticks, deselection)."""

    x: int = Field(ge=0, le=BOARD_DIMENSIONS[0])
    y: int = Field(ge=0, le=BOARD_DIMENSIONS[1])


class PromoteRequest(BaseModel):
    promote_to: PromotionChoice

    @field_validator("promote_to", mode="before")
    @classmethod
    def parse_choice(cls, value: Any) -> Any:
        return PromotionChoice(value) if isinstance(value, str) else value


class SetPlayModeRequest(BaseModel):
    mode: PlayMode

    def to_body(self) -> dict[str, Any]:
        return self.mode.to_setup()


# --- RESPONSE MODELS ---
class BoardResponse(BaseModel):
    """Endpoints that only answer with a board: {'board': <snapshot>}"""

    board: BoardSnapshot


class GameState(BaseModel):
    """
    The authoritative session record, as sent wholesale by the engine after every state-changing call.

    `board` is the live board. `board_history[t]` is the board as it was before move t was played,
    so the history holds `turn` entries, plus one while a promotion is still pending.
    """

    model_config = ConfigDict(frozen=True)

    current_player: EngineColor
    turn: NonNegativeInt
    board: BoardSnapshot
    board_history: tuple[BoardSnapshot, ...] = ()
    mode: Optional[PlayMode] = None
    can_promote: Optional[tuple[int, int]] = None

    @field_validator("mode", mode="before")
    @classmethod
    def parse_mode(cls, value: Any) -> Any:
        return play_mode_from_setup(value)

    @model_validator(mode="after")
    def check_history_length(self) -> "GameState":
        if len(self.board_history) not in (self.turn, self.turn + 1):
            raise MalformedResponseError(
                f"Game state at turn {self.turn} carries {len(self.board_history)} history boards."
            )
        return self

    @property
    def promotion_pending(self) -> bool:
        """Either the engine says so explicitly, or a pawn is still standing on a last rank."""
        if self.can_promote is not None:
            return True
        return len(self.board.promotion_squares()) > 0

    @property
    def promotion_square(self) -> Optional[Position]:
        if self.can_promote is not None:
            return Position(*self.can_promote)
        squares = self.board.promotion_squares()
        return squares[0] if squares else None
