"""Move: a from/to pair plus the special-move kind the generator assigned."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import Color, MoveFlag, PieceType
from chessrules.core.piece import Piece
from chessrules.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """One generated move.

    ``flag`` tells the executor which extra squares change (rook hop,
    en-passant victim, promotion); ``promotion`` is set only together with
    :attr:`MoveFlag.PROMOTION`.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    @property
    def is_castling(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    @property
    def is_promotion(self) -> bool:
        return self.flag == MoveFlag.PROMOTION

    def __str__(self) -> str:
        # Coordinate form, e.g. "e2e4" or "a7a8q".
        text = square_name(self.from_sq) + square_name(self.to_sq)
        if self.promotion is not None:
            text += str(Piece(Color.BLACK, self.promotion))
        return text
