"""Collaborator-facing contracts of the game layer.

Renderers, clocks, persistence and puzzle code talk to a game only through
:class:`IChessGame` and the value types defined here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chessrules.core.enums import Color, GameResult, PieceType, Termination

if TYPE_CHECKING:
    from chessrules.core.move import Move
    from chessrules.core.piece import Piece
    from chessrules.core.types import SquareLike
    from chessrules.game.state import MoveRecord


class ErrorKind(IntEnum):
    """Why :meth:`IChessGame.attempt_move` refused a move."""

    INVALID_SQUARE = auto()
    NO_PIECE_AT_SQUARE = auto()
    WRONG_SIDE_TO_MOVE = auto()
    ILLEGAL_MOVE = auto()
    GAME_ALREADY_OVER = auto()
    INVALID_PROMOTION_CHOICE = auto()


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """Result of a move attempt: either a record or an error, never both."""

    record: MoveRecord | None = None
    error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def failed(cls, error: ErrorKind) -> MoveOutcome:
        return cls(error=error)


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Read-only view of a game at one instant."""

    board: tuple[Piece | None, ...]  # 64 squares, a1 first
    side_to_move: Color
    white_in_check: bool
    black_in_check: bool
    termination: Termination
    result: GameResult
    fen: str

    @property
    def is_terminal(self) -> bool:
        return self.termination != Termination.ONGOING

    def in_check(self, color: Color) -> bool:
        return self.white_in_check if color == Color.WHITE else self.black_in_check


class IChessGame(ABC):
    """Interface of a single rule-enforced game."""

    @abstractmethod
    def legal_moves(self, square: SquareLike) -> list[Move]:
        """Legal moves of the piece on *square*, in generation order.

        Empty when the square is invalid or empty, holds a piece of the side
        not to move, or the game is over.
        """

    @abstractmethod
    def attempt_move(
        self,
        from_sq: SquareLike,
        to_sq: SquareLike,
        promotion: PieceType | None = None,
    ) -> MoveOutcome:
        """Validate, apply and evaluate one move as a single step."""

    @abstractmethod
    def current_state(self) -> GameSnapshot:
        """Snapshot of board, side, check flags and termination."""

    @abstractmethod
    def position_export(self) -> str:
        """FEN record of the current position."""

    @abstractmethod
    def resign(self, color: Color) -> bool:
        """Player of *color* resigns. Returns False if the game is over."""

    @abstractmethod
    def undo(self) -> Move | None:
        """Take back the last move of an unfinished game."""
