"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import MoveGenerator, Rules, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
    print(Rules.termination(pos))
"""

from chessrules.core.attacks import attackers_of, is_in_check, is_square_attacked
from chessrules.core.board import Board
from chessrules.core.enums import (
    CastlingRights,
    Color,
    GameResult,
    MoveFlag,
    PieceType,
    Termination,
)
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessrules.core.piece import Piece
from chessrules.core.policy import RulePolicy
from chessrules.core.position import Position
from chessrules.core.rules import Rules
from chessrules.core.types import (
    Square,
    coerce_square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameResult",
    "MoveFlag",
    "PieceType",
    "Termination",
    # Types / helpers
    "Square",
    "coerce_square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "RulePolicy",
    "Rules",
    # Attack oracle
    "attackers_of",
    "is_in_check",
    "is_square_attacked",
    # Notation
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
]
