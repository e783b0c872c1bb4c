"""Notation package: FEN parsing and serialization."""

from chessrules.core.notation.fen import (
    STARTING_FEN,
    placement_to_fen,
    position_from_fen,
    position_to_fen,
)

__all__ = [
    "STARTING_FEN",
    "placement_to_fen",
    "position_from_fen",
    "position_to_fen",
]
