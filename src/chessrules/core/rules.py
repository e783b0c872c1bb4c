"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.attacks import is_in_check
from chessrules.core.enums import Color, GameResult, PieceType, Termination
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.policy import RulePolicy
from chessrules.core.types import is_light_square

if TYPE_CHECKING:
    from chessrules.core.position import Position

_STANDARD = RulePolicy.standard()


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return is_in_check(position.board, position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        return not MoveGenerator(position).has_legal_move()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        return not MoveGenerator(position).has_legal_move()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+minor vs K, K+B vs K+B with bishops on one square color."""
        board = position.board
        minors: list[tuple[Color, PieceType, bool]] = []
        for sq, piece in board.items():
            if piece.piece_type == PieceType.KING:
                continue
            if not piece.is_minor:
                return False
            minors.append((piece.color, piece.piece_type, is_light_square(sq)))

        if len(minors) <= 1:
            return True
        if len(minors) > 2:
            return False

        (c1, t1, light1), (c2, t2, light2) = minors
        return (
            c1 != c2
            and t1 == PieceType.BISHOP
            and t2 == PieceType.BISHOP
            and light1 == light2
        )

    @staticmethod
    def is_fifty_move_rule(position: Position, policy: RulePolicy = _STANDARD) -> bool:
        return position.halfmove_clock >= policy.fifty_move_halfmoves

    @staticmethod
    def is_repetition(position: Position, policy: RulePolicy = _STANDARD) -> bool:
        return position.repetition_count() >= policy.repetition_count

    @staticmethod
    def claimable_draw(
        position: Position, policy: RulePolicy = _STANDARD
    ) -> Termination | None:
        """Draw the side to move may claim right now, if the policy allows one."""
        limit = policy.claim_fifty_move_halfmoves
        if limit is not None and position.halfmove_clock >= limit:
            return Termination.FIFTY_MOVE_RULE
        count = policy.claim_repetition_count
        if count is not None and position.repetition_count() >= count:
            return Termination.REPETITION
        return None

    @staticmethod
    def termination(
        position: Position, policy: RulePolicy = _STANDARD
    ) -> Termination:
        """Classify *position*: mate and stalemate first, then draws by priority."""
        if not MoveGenerator(position).has_legal_move():
            if Rules.is_in_check(position):
                return Termination.CHECKMATE
            return Termination.STALEMATE

        if Rules.is_fifty_move_rule(position, policy):
            return Termination.FIFTY_MOVE_RULE
        if Rules.is_insufficient_material(position):
            return Termination.INSUFFICIENT_MATERIAL
        if Rules.is_repetition(position, policy):
            return Termination.REPETITION
        return Termination.ONGOING

    @staticmethod
    def game_result(position: Position, policy: RulePolicy = _STANDARD) -> GameResult:
        """Determine the current game result."""
        reason = Rules.termination(position, policy)
        if reason == Termination.ONGOING:
            return GameResult.IN_PROGRESS
        if reason == Termination.CHECKMATE:
            return GameResult.win_for(position.side_to_move.opposite)
        return GameResult.DRAW
