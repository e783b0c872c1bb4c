"""Draw-rule configuration."""

from __future__ import annotations


class RulePolicy:
    """Set of draw thresholds used by :class:`~chessrules.core.rules.Rules`.

    Args:
        fifty_move_halfmoves: Halfmove clock value that ends the game
            automatically.
        repetition_count: Occurrences of one position that end the game
            automatically.
        claim_fifty_move_halfmoves: Halfmove clock value from which the side
            to move may claim a draw (``None`` disables the claim).
        claim_repetition_count: Occurrence count from which a repetition
            draw may be claimed (``None`` disables the claim).

    Insufficient material always ends the game and is not configurable.
    """

    __slots__ = (
        "fifty_move_halfmoves",
        "repetition_count",
        "claim_fifty_move_halfmoves",
        "claim_repetition_count",
    )

    def __init__(
        self,
        fifty_move_halfmoves: int = 100,
        repetition_count: int = 3,
        claim_fifty_move_halfmoves: int | None = None,
        claim_repetition_count: int | None = None,
    ) -> None:
        if fifty_move_halfmoves < 1 or repetition_count < 2:
            raise ValueError(
                f"Invalid draw thresholds: {fifty_move_halfmoves}, {repetition_count}"
            )
        self.fifty_move_halfmoves = fifty_move_halfmoves
        self.repetition_count = repetition_count
        self.claim_fifty_move_halfmoves = claim_fifty_move_halfmoves
        self.claim_repetition_count = claim_repetition_count

    # Presets
    @classmethod
    def standard(cls) -> RulePolicy:
        """Every draw rule fires automatically: 50 moves, threefold."""
        return cls()

    @classmethod
    def fide(cls) -> RulePolicy:
        """Automatic at 75 moves / fivefold; claimable at 50 moves / threefold."""
        return cls(
            fifty_move_halfmoves=150,
            repetition_count=5,
            claim_fifty_move_halfmoves=100,
            claim_repetition_count=3,
        )

    def __repr__(self) -> str:
        return (
            f"RulePolicy(fifty={self.fifty_move_halfmoves}, "
            f"repetition={self.repetition_count}, "
            f"claim_fifty={self.claim_fifty_move_halfmoves}, "
            f"claim_repetition={self.claim_repetition_count})"
        )
