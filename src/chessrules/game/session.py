"""ChessGame: the one entry point collaborators use to play a game.

Validates input, applies moves through :class:`GameState`, and notifies
subscribers via simple callbacks so a renderer, clock or puzzle checker can
react without polling.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chessrules.core.attacks import is_in_check
from chessrules.core.enums import Color, GameResult, PieceType, Termination
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import position_to_fen
from chessrules.core.piece import PROMOTION_PIECES
from chessrules.core.policy import RulePolicy
from chessrules.core.rules import Rules
from chessrules.core.types import SquareLike, coerce_square
from chessrules.game.interfaces import ErrorKind, GameSnapshot, IChessGame, MoveOutcome
from chessrules.game.state import GameState, MoveRecord

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, GameSnapshot], None]
GameOverCallback = Callable[[Termination, GameResult], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


# ── Session ──────────────────────────────────────────────────────────────────


class ChessGame(IChessGame):
    """A single rule-enforced chess game.

    Every public call validates fully before touching the position, so a
    rejected move leaves no trace.  Once the game reaches a terminal state
    it is read-only apart from :meth:`reset`.

    Not thread-safe: one owner at a time.  Separate instances share nothing.
    """

    __slots__ = ("_state", "events")

    def __init__(self, fen: str | None = None, policy: RulePolicy | None = None) -> None:
        self._state = GameState(policy=policy or RulePolicy.standard())
        self.events = GameEvents()
        self._state.setup(fen)
        if self._state.is_game_over:
            _LOGGER.info(
                "Game loaded in a finished position: %s", self._state.termination.name
            )

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def history(self) -> tuple[MoveRecord, ...]:
        return tuple(self._state.move_history)

    @property
    def is_over(self) -> bool:
        return self._state.is_game_over

    # ── IChessGame impl ──────────────────────────────────────────────────

    def reset(self, fen: str | None = None) -> None:
        """Start over from the standard position or from *fen*."""
        self._state.setup(fen)

    def legal_moves(self, square: SquareLike) -> list[Move]:
        if self._state.is_game_over:
            return []
        sq = coerce_square(square)
        if sq is None:
            return []
        return MoveGenerator(self._state.position).legal_moves_from(sq)

    def attempt_move(
        self,
        from_sq: SquareLike,
        to_sq: SquareLike,
        promotion: PieceType | None = None,
    ) -> MoveOutcome:
        resolved = self._resolve_move(from_sq, to_sq, promotion)
        if isinstance(resolved, ErrorKind):
            _LOGGER.debug(
                "Rejected %r -> %r (%s): %s", from_sq, to_sq, promotion, resolved.name
            )
            return MoveOutcome.failed(resolved)

        record = self._state.apply_move(resolved)
        _LOGGER.debug("Applied %s; position now %s", resolved, record.fen_after)

        snapshot = self.current_state()
        for cb in self.events.on_move:
            cb(record, snapshot)
        if self._state.is_game_over:
            self._emit_game_over()
        return MoveOutcome(record=record)

    def current_state(self) -> GameSnapshot:
        position = self._state.position
        board = position.board
        return GameSnapshot(
            board=board.snapshot(),
            side_to_move=position.side_to_move,
            white_in_check=is_in_check(board, Color.WHITE),
            black_in_check=is_in_check(board, Color.BLACK),
            termination=self._state.termination,
            result=self._state.result,
            fen=position_to_fen(position),
        )

    def position_export(self) -> str:
        return position_to_fen(self._state.position)

    def resign(self, color: Color) -> bool:
        if self._state.is_game_over:
            return False
        self._state.resign(color)
        self._emit_game_over()
        return True

    def agree_draw(self) -> bool:
        """Both players agreed to a draw."""
        if self._state.is_game_over:
            return False
        self._state.set_draw(Termination.DRAW_AGREED)
        self._emit_game_over()
        return True

    def claim_draw(self) -> bool:
        """Side to move claims a draw the policy makes claimable."""
        if self._state.is_game_over:
            return False
        reason = Rules.claimable_draw(self._state.position, self._state.policy)
        if reason is None:
            return False
        self._state.set_draw(reason)
        self._emit_game_over()
        return True

    def undo(self) -> Move | None:
        if self._state.is_game_over:
            return None
        move = self._state.undo_last_move()
        if move is not None:
            _LOGGER.debug("Took back %s", move)
        return move

    # ── Internal helpers ─────────────────────────────────────────────────

    def _resolve_move(
        self,
        from_value: SquareLike,
        to_value: SquareLike,
        promotion: PieceType | None,
    ) -> Move | ErrorKind:
        """Find the legal move meant by the arguments, or say why there is none."""
        if self._state.is_game_over:
            return ErrorKind.GAME_ALREADY_OVER

        from_sq = coerce_square(from_value)
        to_sq = coerce_square(to_value)
        if from_sq is None or to_sq is None:
            return ErrorKind.INVALID_SQUARE

        position = self._state.position
        piece = position.board[from_sq]
        if piece is None:
            return ErrorKind.NO_PIECE_AT_SQUARE
        if piece.color != position.side_to_move:
            return ErrorKind.WRONG_SIDE_TO_MOVE

        candidates = [
            m
            for m in MoveGenerator(position).legal_moves_from(from_sq)
            if m.to_sq == to_sq
        ]
        if not candidates:
            return ErrorKind.ILLEGAL_MOVE

        # A choice sent with an ordinary move is ignored.
        if not candidates[0].is_promotion:
            return candidates[0]

        if promotion not in PROMOTION_PIECES:
            return ErrorKind.INVALID_PROMOTION_CHOICE
        for move in candidates:
            if move.promotion == promotion:
                return move
        return ErrorKind.INVALID_PROMOTION_CHOICE

    def _emit_game_over(self) -> None:
        termination, result = self._state.termination, self._state.result
        _LOGGER.info(
            "Game over after %d plies: %s (%s)",
            self._state.ply_count,
            termination.name,
            result.name,
        )
        for cb in self.events.on_game_over:
            cb(termination, result)

    def __repr__(self) -> str:
        return (
            f"ChessGame({self.position_export()!r}, "
            f"{self._state.termination.name}, plies={self._state.ply_count})"
        )

