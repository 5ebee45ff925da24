"""Defines the pieces as the engine reports them"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from chessboard_client.core.shared_types import PIECE_CODES, Color, PieceKind

# The engine names empty squares "EMPTY" (code 10). The web client used 6000 as placeholder.
EMPTY_NAME = "EMPTY"

UNICODE_SYMBOLS: dict[tuple[PieceKind, Optional[Color]], str] = {
    (PieceKind.KING, Color.WHITE): "♔",
    (PieceKind.QUEEN, Color.WHITE): "♕",
    (PieceKind.ROOK, Color.WHITE): "♖",
    (PieceKind.BISHOP, Color.WHITE): "♗",
    (PieceKind.KNIGHT, Color.WHITE): "♘",
    (PieceKind.PAWN, Color.WHITE): "♙",
    (PieceKind.KING, Color.BLACK): "♚",
    (PieceKind.QUEEN, Color.BLACK): "♛",
    (PieceKind.ROOK, Color.BLACK): "♜",
    (PieceKind.BISHOP, Color.BLACK): "♝",
    (PieceKind.KNIGHT, Color.BLACK): "♞",
    (PieceKind.PAWN, Color.BLACK): "♟",
    (PieceKind.MOVE_MARKER, None): "•",
}


def is_empty_record(record: Any) -> bool:
    """True when a raw cell-piece record from the engine denotes 'no piece'."""
    if record is None:
        return True
    if not isinstance(record, dict):
        return False
    name = record.get("name")
    if name is not None:
        return str(name).upper() == EMPTY_NAME
    if "kind" in record:
        return False
    return record.get("idx") not in PIECE_CODES


class Piece(BaseModel):
    """A piece standing on a square. MOVE_MARKER has no color."""

    model_config = ConfigDict(frozen=True)

    kind: PieceKind
    color: Optional[Color] = None

    @model_validator(mode="before")
    @classmethod
    def from_engine_record(cls, data: Any) -> Any:
        """Engine records look like {'idx': 5, 'name': 'PAWN', 'color': 'WHITE'}: name wins, idx is the fallback."""
        if not isinstance(data, dict) or "kind" in data:
            return data

        name = data.get("name")
        if name is not None:
            kind = PieceKind(str(name).upper())
        elif data.get("idx") in PIECE_CODES:
            kind = PIECE_CODES[data["idx"]]
        else:
            raise ValueError(f"Cannot interpret piece record: {data!r}")

        color = data.get("color")
        if kind == PieceKind.MOVE_MARKER:
            color = None
        elif isinstance(color, str):
            color = Color(color)
        return {"kind": kind, "color": color}

    @model_validator(mode="after")
    def check_color(self) -> "Piece":
        if self.kind != PieceKind.MOVE_MARKER and self.color is None:
            raise ValueError(f"A {self.kind.lower()} needs a color.")
        return self

    @property
    def is_marker(self) -> bool:
        return self.kind == PieceKind.MOVE_MARKER

    def symbol(self) -> str:
        return UNICODE_SYMBOLS[(self.kind, self.color)]
