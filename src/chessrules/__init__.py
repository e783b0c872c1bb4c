"""chessrules: a chess rule engine.

``chessrules.core`` holds the board, move generation, attack detection and
termination rules; ``chessrules.game`` wraps them into a validated game
session for renderers, clocks and puzzle code.
"""

from chessrules.core import (
    STARTING_FEN,
    Color,
    GameResult,
    Move,
    MoveFlag,
    Piece,
    PieceType,
    RulePolicy,
    Termination,
)
from chessrules.game import ChessGame, ErrorKind, GameSnapshot, MoveOutcome

__version__ = "0.1.0"

__all__ = [
    "STARTING_FEN",
    "ChessGame",
    "Color",
    "ErrorKind",
    "GameResult",
    "GameSnapshot",
    "Move",
    "MoveFlag",
    "MoveOutcome",
    "Piece",
    "PieceType",
    "RulePolicy",
    "Termination",
]
