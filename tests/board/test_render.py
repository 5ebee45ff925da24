"""Unit tests for chessboard_client/board/render.py"""

from chessboard_client.board.render import render_board
from chessboard_client.board.snapshot import BoardSnapshot
from tests.engine_fakes import board_json, cell


def test_render_without_coordinates() -> None:
    raw = board_json({(0, 0): ("ROOK", "BLACK"), (7, 7): ("ROOK", "WHITE")})
    raw[4][4] = cell(threatened=True)
    lines = render_board(BoardSnapshot.model_validate(raw), coordinates=False).splitlines()

    assert len(lines) == 8
    assert lines[0].startswith("|♜ |_ |")
    assert lines[7].endswith("|♖ |")
    assert "_!" in lines[4]


def test_render_with_coordinates() -> None:
    lines = render_board(BoardSnapshot.empty()).splitlines()
    assert len(lines) == 9
    assert lines[1].startswith("0 |")
    assert lines[8].startswith("7 |")
