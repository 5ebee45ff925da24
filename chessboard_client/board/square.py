"""
A position on the board

(placed in its own module as multiple other modules need to import it)
"""

from dataclasses import dataclass

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Position:
    """Row-major board coordinates, (0, 0) being the corner where Black's queen-side rook starts."""

    row: int
    col: int

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def is_last_rank(self) -> bool:
        """Rows where a pawn has to promote (for either color)"""
        return self.row in (0, BOARD_DIMENSIONS[0] - 1)
