"""Tests for square helpers."""

import pytest

from chessrules.core.types import (
    A1, E4, H8,
    coerce_square,
    is_light_square,
    parse_square,
    square_name,
    to_coord,
)


class TestSquareNames:
    def test_round_trip(self) -> None:
        for sq in range(64):
            assert parse_square(square_name(sq)) == sq

    @pytest.mark.parametrize("name", ["", "e", "i1", "a9", "e44"])
    def test_bad_names(self, name: str) -> None:
        with pytest.raises(ValueError, match="Invalid square name"):
            parse_square(name)

    def test_to_coord(self) -> None:
        assert to_coord(E4) == (3, 4)
        assert to_coord(H8) == (7, 7)


class TestCoerceSquare:
    def test_accepts_index_name_and_coord(self) -> None:
        assert coerce_square(E4) == E4
        assert coerce_square("e4") == E4
        assert coerce_square((3, 4)) == E4

    @pytest.mark.parametrize(
        "value", [-1, 64, (8, 0), (0, -1), (1,), "z9", None, True, 2.0, (1.0, 2)]
    )
    def test_rejects_off_board(self, value: object) -> None:
        assert coerce_square(value) is None


def test_square_colors() -> None:
    assert not is_light_square(A1)
    assert is_light_square(parse_square("h1"))
    assert not is_light_square(H8)
