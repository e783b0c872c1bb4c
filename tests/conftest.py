"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chessrules.game.session import ChessGame


@pytest.fixture
def game() -> ChessGame:
    """A fresh game from the standard starting position."""
    return ChessGame()
