"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator

from chessrules.core.enums import Color, PieceType
from chessrules.core.piece import Piece
from chessrules.core.types import Square, make_square

_PIECE_TYPE_COUNT = 6
_COLOR_COUNT = 2

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _iter_bits(bitboard: int) -> Iterator[Square]:
    while bitboard:
        lsb = bitboard & -bitboard
        yield lsb.bit_length() - 1
        bitboard ^= lsb


class Board:
    """Mutable 64-square placement with per-color/per-type occupancy sets.

    Holds no chess rules: the only check performed is that squares lie on
    the board.  Everything else (legality, side effects) belongs to
    :class:`~chessrules.core.position.Position`.
    """

    __slots__ = ("_squares", "_occupancy", "_color_occupancy", "_king_squares")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color][piece_type-1] -> bitboard of occupied squares.
        self._occupancy: list[list[int]] = [
            [0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)
        ]
        # [color] -> bitboard of everything that color occupies.
        self._color_occupancy: list[int] = [0] * _COLOR_COUNT
        # [color] -> king square, None while that king is off the board.
        self._king_squares: list[Square | None] = [None] * _COLOR_COUNT

    @staticmethod
    def _check_bounds(sq: Square) -> None:
        if not 0 <= sq < 64:
            raise IndexError(f"Square index out of range: {sq}")

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        self._check_bounds(sq)
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._check_bounds(sq)
        old_piece = self._squares[sq]
        if old_piece == piece:
            return

        mask = 1 << sq

        if old_piece is not None:
            old_color = int(old_piece.color)
            self._occupancy[old_color][old_piece.piece_type - 1] &= ~mask
            self._color_occupancy[old_color] &= ~mask
            if self._king_squares[old_color] == sq:
                self._king_squares[old_color] = None

        self._squares[sq] = piece
        if piece is None:
            return

        color = int(piece.color)
        self._occupancy[color][piece.piece_type - 1] |= mask
        self._color_occupancy[color] |= mask
        if piece.piece_type == PieceType.KING:
            self._king_squares[color] = sq

    def is_empty(self, sq: Square) -> bool:
        return self[sq] is None

    def items(self) -> Iterator[tuple[Square, Piece]]:
        """``(square, piece)`` pairs for every occupied square, a1 first."""
        for sq, piece in enumerate(self._squares):
            if piece is not None:
                yield sq, piece

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return list(_iter_bits(self.pieces_bitboard(color, piece_type)))

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Bitboard of squares occupied by *color*'s *piece_type*."""
        return self._occupancy[int(color)][piece_type - 1]

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        """Whether *color* has at least one piece of *piece_type*."""
        return bool(self.pieces_bitboard(color, piece_type))

    def count(self, color: Color, piece_type: PieceType) -> int:
        return self.pieces_bitboard(color, piece_type).bit_count()

    def piece_count(self) -> int:
        """Number of pieces of both colors on the board."""
        return (self._color_occupancy[0] | self._color_occupancy[1]).bit_count()

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        sq = self._king_squares[int(color)]
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        b._occupancy = [row.copy() for row in self._occupancy]
        b._color_occupancy = self._color_occupancy.copy()
        b._king_squares = self._king_squares.copy()
        return b

    def snapshot(self) -> tuple[Piece | None, ...]:
        """Immutable copy of the 64 squares, a1 first."""
        return tuple(self._squares)

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for file, piece_type in enumerate(_BACK_RANK):
            b[make_square(file, 0)] = Piece(Color.WHITE, piece_type)
            b[make_square(file, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(file, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[make_square(file, 7)] = Piece(Color.BLACK, piece_type)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            cells = [
                str(p) if (p := self._squares[make_square(file, rank)]) else "."
                for file in range(8)
            ]
            rows.append(f"{rank + 1} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
