"""Pseudo-legal move generation and the legality filter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.attacks import (
    BISHOP_RAYS,
    KING_TARGETS,
    KNIGHT_TARGETS,
    QUEEN_RAYS,
    ROOK_RAYS,
    is_in_check,
    is_square_attacked,
)
from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from chessrules.core.position import Position


_PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_SLIDER_RAYS = {
    PieceType.BISHOP: BISHOP_RAYS,
    PieceType.ROOK: ROOK_RAYS,
    PieceType.QUEEN: QUEEN_RAYS,
}

# Generation order: pawns first, king last.
_GENERATION_ORDER: tuple[PieceType, ...] = tuple(PieceType)


class MoveGenerator:
    """Generates moves for the side to move of a :class:`Position`.

    The legality filter plays each candidate on the position with
    ``make_move`` / ``unmake_move`` and always restores it before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return self._filter_legal(self.generate_pseudo_legal_moves())

    def legal_moves_from(self, sq: Square) -> list[Move]:
        """Legal moves of the side-to-move piece standing on *sq*."""
        piece = self._board[sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return []
        moves: list[Move] = []
        self._gen_piece(sq, piece, moves)
        return self._filter_legal(moves)

    def has_legal_move(self) -> bool:
        """Cheaper than ``bool(generate_legal_moves())``: stops at the first hit."""
        color = self._pos.side_to_move
        for piece_type in _GENERATION_ORDER:
            for sq in self._board.pieces(color, piece_type):
                moves: list[Move] = []
                self._gen_piece(sq, Piece(color, piece_type), moves)
                for move in moves:
                    if self._is_legal(move):
                        return True
        return False

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        for piece_type in _GENERATION_ORDER:
            piece = Piece(color, piece_type)
            for sq in self._board.pieces(color, piece_type):
                self._gen_piece(sq, piece, moves)
        return moves

    def is_in_check(self, color: Color) -> bool:
        return is_in_check(self._board, color)

    # -- Legality filter ----------------------------------------------------

    def _is_legal(self, move: Move) -> bool:
        mover = self._pos.side_to_move
        self._pos.make_move(move)
        try:
            return not is_in_check(self._board, mover)
        finally:
            self._pos.unmake_move(move)

    def _filter_legal(self, moves: list[Move]) -> list[Move]:
        return [move for move in moves if self._is_legal(move)]

    # -- Piece-specific generators (private) -------------------------------

    def _gen_piece(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        piece_type = piece.piece_type
        if piece_type == PieceType.PAWN:
            self._gen_pawn(sq, piece.color, moves)
        elif piece_type == PieceType.KNIGHT:
            self._gen_leaper(sq, piece.color, KNIGHT_TARGETS[sq], moves)
        elif piece_type == PieceType.KING:
            self._gen_leaper(sq, piece.color, KING_TARGETS[sq], moves)
            self._gen_castling(sq, piece.color, moves)
        else:
            self._gen_sliding(sq, piece.color, _SLIDER_RAYS[piece_type][sq], moves)

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        forward = color.forward
        rank_idx = rank_of(sq)
        next_rank = rank_idx + forward
        if not 0 <= next_rank < 8:
            return
        start_rank = 1 if color == Color.WHITE else 6
        promotes = next_rank in (0, 7)

        def push(to_sq: Square, flag: MoveFlag = MoveFlag.NORMAL) -> None:
            if promotes:
                for pt in _PROMOTION_TYPES:
                    moves.append(Move(sq, to_sq, MoveFlag.PROMOTION, pt))
            else:
                moves.append(Move(sq, to_sq, flag))

        one_step = sq + 8 * forward
        if board.is_empty(one_step):
            push(one_step)
            if rank_idx == start_rank:
                two_step = one_step + 8 * forward
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        file_idx = file_of(sq)
        for df in (-1, 1):
            if not 0 <= file_idx + df < 8:
                continue
            cap_sq = make_square(file_idx + df, next_rank)
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    push(cap_sq)
            elif cap_sq == self._pos.en_passant and board[
                make_square(file_idx + df, rank_idx)
            ] == Piece(color.opposite, PieceType.PAWN):
                moves.append(Move(sq, cap_sq, MoveFlag.EN_PASSANT))

    def _gen_leaper(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        home = 0 if color == Color.WHITE else 56
        if king_sq != home + 4 or not self._pos.castling & CastlingRights.both(color):
            return

        board = self._board
        opponent = color.opposite
        if is_square_attacked(board, king_sq, opponent):
            return

        rook = Piece(color, PieceType.ROOK)
        sides = (
            (CastlingRights.kingside(color), MoveFlag.CASTLE_KINGSIDE, home + 7, 1),
            (CastlingRights.queenside(color), MoveFlag.CASTLE_QUEENSIDE, home, -1),
        )
        for right, flag, rook_sq, step in sides:
            if not self._pos.castling & right or board[rook_sq] != rook:
                continue
            between = range(king_sq + step, rook_sq, step)
            if any(not board.is_empty(s) for s in between):
                continue
            transit = (king_sq + step, king_sq + 2 * step)
            if any(is_square_attacked(board, s, opponent) for s in transit):
                continue
            moves.append(Move(king_sq, king_sq + 2 * step, flag))
