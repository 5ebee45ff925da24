"""Plain text rendering of a board snapshot (terminal host and debugging)"""

from chessboard_client.board.snapshot import BoardSnapshot, Square

EMPTY_SYMBOL = "_"
THREATENED_SUFFIX = "!"


def _square_text(square: Square) -> str:
    symbol = square.piece.symbol() if square.piece is not None else EMPTY_SYMBOL
    return f"{symbol}{THREATENED_SUFFIX if square.threatened else ' '}"


def render_board(snapshot: BoardSnapshot, coordinates: bool = True) -> str:
    """One line per row, columns separated by '|'. Threatened squares carry a '!'."""
    lines: list[str] = []
    if coordinates:
        lines.append("   " + " ".join(f"{col} " for col in range(len(snapshot.squares[0]))))
    for row_idx, row in enumerate(snapshot.squares):
        cells = "|".join(_square_text(square) for square in row)
        lines.append(f"{row_idx} |{cells}|" if coordinates else f"|{cells}|")
    return "\n".join(lines)
