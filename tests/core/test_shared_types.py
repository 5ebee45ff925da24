"""Unit tests for chessboard_client/core/shared_types.py"""

import pytest

from chessboard_client.core.shared_types import (
    CODE_OF_PIECE,
    PIECE_CODES,
    Color,
    Control,
    PieceKind,
    PromotionChoice,
)


@pytest.mark.parametrize("spelling", ["WHITE", "White", "white"])
def test_color_accepts_engine_spellings(spelling: str) -> None:
    """The game record says 'White', the cell records say 'WHITE'"""
    assert Color(spelling) == Color.WHITE


def test_unknown_color_is_rejected() -> None:
    with pytest.raises(ValueError):
        Color("purple")


def test_other_color() -> None:
    assert Color.WHITE.other() == Color.BLACK
    assert Color.BLACK.other() == Color.WHITE


def test_engine_spelling_of_color() -> None:
    assert Color.WHITE.to_engine() == "White"
    assert Color.BLACK.to_engine() == "Black"


def test_piece_codes_map_one_to_one() -> None:
    """Codes 0-6 cover every kind exactly once."""
    assert sorted(PIECE_CODES.keys()) == list(range(7))
    assert set(PIECE_CODES.values()) == set(PieceKind)
    assert all(PIECE_CODES[CODE_OF_PIECE[kind]] == kind for kind in PieceKind)


@pytest.mark.parametrize("spelling", ["Queen", "QUEEN", "queen"])
def test_promotion_choice_spellings(spelling: str) -> None:
    assert PromotionChoice(spelling) == PromotionChoice.QUEEN
    assert PromotionChoice(spelling).value == "Queen"


def test_king_is_no_promotion_choice() -> None:
    with pytest.raises(ValueError):
        PromotionChoice("King")


def test_control_lower_case() -> None:
    assert Control("both") == Control.BOTH
