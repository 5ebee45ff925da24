"""
Board snapshot: the complete 8x8 record of square facts at one point in game time.

Snapshots are values. The engine sends a fresh one with every response, the client never edits one.
"""

from typing import Any, Iterator, Optional, Self

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from chessboard_client.board.pieces import Piece, is_empty_record
from chessboard_client.board.square import BOARD_DIMENSIONS, Position
from chessboard_client.core.shared_types import Control, PieceKind


class Square(BaseModel):
    """What the engine knows about one square."""

    model_config = ConfigDict(frozen=True)

    piece: Optional[Piece] = None
    threatened: bool = False
    control: Control = Control.NONE

    @field_validator("piece", mode="before")
    @classmethod
    def drop_empty_piece(cls, value: Any) -> Any:
        return None if is_empty_record(value) else value

    @field_validator("control", mode="before")
    @classmethod
    def parse_control(cls, value: Any) -> Any:
        if value is None:
            return Control.NONE
        if isinstance(value, str):
            return Control(value)
        return value

    @property
    def is_empty(self) -> bool:
        return self.piece is None or self.piece.is_marker


class BoardSnapshot(BaseModel):
    """Row-major 8x8 matrix of squares."""

    model_config = ConfigDict(frozen=True)

    squares: tuple[tuple[Square, ...], ...]

    @model_validator(mode="before")
    @classmethod
    def from_engine_repr(cls, data: Any) -> Any:
        """The engine either sends the bare matrix, or wraps it as {'board': [[...], ...]}"""
        if isinstance(data, dict) and "squares" not in data and "board" in data:
            data = data["board"]
        if isinstance(data, (list, tuple)):
            return {"squares": data}
        return data

    @field_validator("squares")
    @classmethod
    def check_dimensions(
        cls, value: tuple[tuple[Square, ...], ...]
    ) -> tuple[tuple[Square, ...], ...]:
        rows, cols = BOARD_DIMENSIONS
        if len(value) != rows or any(len(row) != cols for row in value):
            raise ValueError(f"A board snapshot must be {rows}x{cols} squares.")
        return value

    @classmethod
    def empty(cls) -> Self:
        """Board without any pieces (shown before the engine sent anything)"""
        rows, cols = BOARD_DIMENSIONS
        return cls(squares=tuple(tuple(Square() for _ in range(cols)) for _ in range(rows)))

    def square(self, row: int, col: int) -> Square:
        position = Position(row, col)
        if not position.is_within_bounds():
            raise IndexError(f"{position} is not on the board.")
        return self.squares[row][col]

    def pieces(self) -> Iterator[tuple[Position, Piece]]:
        """All real pieces (move markers excluded), row by row."""
        for row_idx, row in enumerate(self.squares):
            for col_idx, square in enumerate(row):
                if square.piece is not None and not square.piece.is_marker:
                    yield Position(row_idx, col_idx), square.piece

    def move_markers(self) -> list[Position]:
        """Legal destinations of the selected piece, as marked by the engine"""
        return [
            Position(row_idx, col_idx)
            for row_idx, row in enumerate(self.squares)
            for col_idx, square in enumerate(row)
            if square.piece is not None and square.piece.is_marker
        ]

    def promotion_squares(self) -> list[Position]:
        """Pawns standing on a last rank: they still have to be promoted."""
        return [
            position
            for position, piece in self.pieces()
            if piece.kind == PieceKind.PAWN and position.is_last_rank()
        ]
