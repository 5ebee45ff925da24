"""
Type definitions used across layers
"""

from enum import StrEnum
from typing import Self


class Color(StrEnum):
    WHITE = "WHITE"
    BLACK = "BLACK"

    @classmethod
    def _missing_(cls, value: object) -> Self | None:
        # The engine spells colors "White" in the game record and "WHITE" in the cell records
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None

    def other(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    def to_engine(self) -> str:
        """Spelling used by the engine's setup message: 'White' / 'Black'"""
        return self.value.capitalize()


class Control(StrEnum):
    """Which side(s) attack a square."""

    NONE = "NONE"
    WHITE = "WHITE"
    BLACK = "BLACK"
    BOTH = "BOTH"

    @classmethod
    def _missing_(cls, value: object) -> Self | None:
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


class PieceKind(StrEnum):
    KING = "KING"
    QUEEN = "QUEEN"
    ROOK = "ROOK"
    BISHOP = "BISHOP"
    KNIGHT = "KNIGHT"
    PAWN = "PAWN"
    # Not a real piece: marks a legal destination of the currently selected piece
    MOVE_MARKER = "MOVE_MARKER"


# Numeric codes the engine may send instead of (or next to) the piece name
PIECE_CODES: dict[int, PieceKind] = {
    0: PieceKind.KING,
    1: PieceKind.QUEEN,
    2: PieceKind.ROOK,
    3: PieceKind.BISHOP,
    4: PieceKind.KNIGHT,
    5: PieceKind.PAWN,
    6: PieceKind.MOVE_MARKER,
}

CODE_OF_PIECE: dict[PieceKind, int] = {value: key for key, value in PIECE_CODES.items()}


class PromotionChoice(StrEnum):
    BISHOP = "Bishop"
    KNIGHT = "Knight"
    ROOK = "Rook"
    QUEEN = "Queen"

    @classmethod
    def _missing_(cls, value: object) -> Self | None:
        # Also accept the piece names used on the board ("QUEEN") and plain lower case
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


class AiEngine(StrEnum):
    """AI implementations the engine can instantiate for a side."""

    DUMMY = "DummyAi"
    BEST_PLAY_DEPTH_ONE = "BestPlayDephtOneAi"
    MINIMAX = "MiniMaxAi"


# Keys the controller listens to for history navigation
ARROW_LEFT = "ArrowLeft"
ARROW_RIGHT = "ArrowRight"
