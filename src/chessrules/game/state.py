"""Game state machine: tracks termination and move history."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chessrules.core.attacks import is_in_check
from chessrules.core.enums import Color, GameResult, Termination
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessrules.core.policy import RulePolicy
from chessrules.core.position import Position
from chessrules.core.rules import Rules

if TYPE_CHECKING:
    from chessrules.core.move import Move


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    fen_after: str
    was_check: bool = False
    was_capture: bool = False


@dataclass
class GameState:
    """Manages game lifecycle: termination, result, move history.

    This is a pure data/logic class: it applies whatever it is given.
    Legality checks live in :class:`~chessrules.game.session.ChessGame`.
    """

    policy: RulePolicy = field(default_factory=RulePolicy.standard)
    position: Position = field(default_factory=Position, init=False)
    termination: Termination = field(default=Termination.ONGOING, init=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Initialise (or reset) the game.

        A supplied position may already be finished (a mate or a bare-kings
        puzzle), so termination is evaluated straight away.
        """
        self.start_fen = fen or STARTING_FEN
        self.position = position_from_fen(self.start_fen)
        self.move_history.clear()
        self.termination = Termination.ONGOING
        self.result = GameResult.IN_PROGRESS
        self._check_game_over()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveRecord:
        """Apply a validated move and return the history record.

        Caller is responsible for legality check.
        """
        captured = self.position.make_move(move)
        record = MoveRecord(
            move=move,
            fen_after=position_to_fen(self.position),
            was_check=is_in_check(self.position.board, self.position.side_to_move),
            was_capture=captured is not None,
        )
        self.move_history.append(record)
        self._check_game_over()
        return record

    def undo_last_move(self) -> Move | None:
        """Undo the last move. Returns the undone Move, or None if empty."""
        if not self.move_history:
            return None

        record = self.move_history.pop()
        self.position.unmake_move(record.move)
        self.termination = Termination.ONGOING
        self.result = GameResult.IN_PROGRESS
        return record.move

    # ── Resignation / draw ───────────────────────────────────────────────

    def resign(self, color: Color) -> None:
        self._finish(Termination.RESIGNATION, GameResult.win_for(color.opposite))

    def set_draw(self, reason: Termination) -> None:
        self._finish(reason, GameResult.DRAW)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def is_game_over(self) -> bool:
        return self.termination != Termination.ONGOING

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        return MoveGenerator(self.position).generate_legal_moves()

    # ── Internal ─────────────────────────────────────────────────────────

    def _finish(self, termination: Termination, result: GameResult) -> None:
        self.termination = termination
        self.result = result

    def _check_game_over(self) -> None:
        reason = Rules.termination(self.position, self.policy)
        if reason == Termination.ONGOING:
            return
        if reason.is_draw:
            self.set_draw(reason)
        else:
            self._finish(reason, GameResult.win_for(self.side_to_move.opposite))
