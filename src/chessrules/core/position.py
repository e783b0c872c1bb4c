"""Position: complete game state (board + metadata) with make/unmake."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core import zobrist
from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, file_of, make_square, rank_of

# Home rook corners and the right each one guards.
ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}


def castling_rook_squares(move: Move) -> tuple[Square, Square]:
    """``(rook_from, rook_to)`` for a castling *move*."""
    rank = rank_of(move.from_sq)
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        return make_square(7, rank), make_square(5, rank)
    return make_square(0, rank), make_square(3, rank)


def en_passant_victim(move: Move) -> Square:
    """Square of the pawn removed by an en-passant *move*.

    It stands beside the capturing pawn: same rank as the origin, same file
    as the destination.
    """
    return make_square(file_of(move.to_sq), rank_of(move.from_sq))


@dataclass(slots=True)
class _UndoRecord:
    """State that a move destroys and ``unmake_move`` must put back."""

    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    captured_piece: Piece | None
    key: int


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Moves are applied with :meth:`make_move` and reverted with
    :meth:`unmake_move`; each move pushes one compact undo record rather
    than a copy of the whole position.  The position also counts how often
    each position key has occurred, which drives repetition draws.

    ``make_move`` trusts its input: callers must only pass moves produced by
    :class:`~chessrules.core.move_generator.MoveGenerator`.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_key",
        "_history",
        "_key_counts",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._key = zobrist.position_key(
            self.board, side_to_move, castling, en_passant
        )
        self._history: list[_UndoRecord] = []
        self._key_counts: dict[int, int] = {self._key: 1}

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> Piece | None:
        """Apply *move* and return the captured piece, if any."""
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        capture_sq = (
            en_passant_victim(move) if move.flag == MoveFlag.EN_PASSANT else move.to_sq
        )
        captured = board[capture_sq]

        self._history.append(
            _UndoRecord(
                castling=self.castling,
                en_passant=self.en_passant,
                halfmove_clock=self.halfmove_clock,
                captured_piece=captured,
                key=self._key,
            )
        )

        self._lift(move.from_sq)
        if captured is not None:
            self._lift(capture_sq)

        placed = piece
        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            placed = Piece(piece.color, move.promotion)
        self._drop(placed, move.to_sq)

        if move.is_castling:
            rook_from, rook_to = castling_rook_squares(move)
            rook = self._lift(rook_from)
            assert rook is not None
            self._drop(rook, rook_to)

        next_en_passant: Square | None = None
        if move.flag == MoveFlag.DOUBLE_PAWN:
            next_en_passant = (move.from_sq + move.to_sq) // 2
        self._set_en_passant(next_en_passant)

        self._set_castling(self._castling_after(move, piece))

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite
        self._key ^= zobrist.side_to_move_key()
        self._key_counts[self._key] = self._key_counts.get(self._key, 0) + 1
        return captured

    def unmake_move(self, move: Move) -> None:
        """Undo the last :meth:`make_move`; *move* must be that same move."""
        record = self._history.pop()
        count = self._key_counts[self._key] - 1
        if count:
            self._key_counts[self._key] = count
        else:
            del self._key_counts[self._key]

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        board = self.board
        piece = board[move.to_sq]
        assert piece is not None
        if move.flag == MoveFlag.PROMOTION:
            piece = Piece(piece.color, PieceType.PAWN)

        board[move.from_sq] = piece
        if move.flag == MoveFlag.EN_PASSANT:
            board[move.to_sq] = None
            board[en_passant_victim(move)] = record.captured_piece
        else:
            board[move.to_sq] = record.captured_piece

        if move.is_castling:
            rook_from, rook_to = castling_rook_squares(move)
            board[rook_from] = board[rook_to]
            board[rook_to] = None

        self.castling = record.castling
        self.en_passant = record.en_passant
        self.halfmove_clock = record.halfmove_clock
        self._key = record.key

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _castling_after(self, move: Move, piece: Piece) -> CastlingRights:
        rights = self.castling
        if piece.piece_type == PieceType.KING:
            rights &= ~CastlingRights.both(piece.color)
        # A rook leaving its corner, or anything landing on one, kills the right.
        for sq in (move.from_sq, move.to_sq):
            corner = ROOK_CORNERS.get(sq)
            if corner is not None:
                rights &= ~corner
        return rights

    # ── Incremental key maintenance ──────────────────────────────────────

    def _lift(self, sq: Square) -> Piece | None:
        piece = self.board[sq]
        if piece is not None:
            self._key ^= zobrist.piece_key(piece, sq)
            self.board[sq] = None
        return piece

    def _drop(self, piece: Piece, sq: Square) -> None:
        self.board[sq] = piece
        self._key ^= zobrist.piece_key(piece, sq)

    def _set_castling(self, castling: CastlingRights) -> None:
        if castling == self.castling:
            return
        self._key ^= zobrist.castling_key(self.castling)
        self.castling = castling
        self._key ^= zobrist.castling_key(self.castling)

    def _set_en_passant(self, en_passant: Square | None) -> None:
        if en_passant == self.en_passant:
            return
        if self.en_passant is not None:
            self._key ^= zobrist.en_passant_key(self.en_passant)
        self.en_passant = en_passant
        if self.en_passant is not None:
            self._key ^= zobrist.en_passant_key(self.en_passant)

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Independent copy, repetition counts included, undo stack excluded."""
        pos = Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )
        pos._key_counts = self._key_counts.copy()
        return pos

    @property
    def key(self) -> int:
        """Position key of the current position."""
        return self._key

    @property
    def ply(self) -> int:
        """Moves made on this object that can still be unmade."""
        return len(self._history)

    def repetition_count(self) -> int:
        """How many times the current position key occurred in game history."""
        return self._key_counts.get(self._key, 0)
