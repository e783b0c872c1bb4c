"""FEN parsing and serialization."""

from __future__ import annotations

import logging

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, PieceType
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.types import Square, make_square, parse_square, rank_of, square_name

_LOGGER = logging.getLogger(__name__)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def _parse_placement(placement: str, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    for color in Color:
        kings = board.count(color, PieceType.KING)
        if kings != 1:
            raise ValueError(
                f"Invalid FEN: expected one {color} king, found {kings}: {fen!r}"
            )
    return board


def _parse_castling(field: str) -> CastlingRights:
    castling = CastlingRights.NONE
    if field == "-":
        return castling
    rights = dict(_CASTLING_CHARS)
    seen: set[str] = set()
    for ch in field:
        right = rights.get(ch)
        if right is None or ch in seen:
            raise ValueError(f"Invalid FEN castling field: {field!r}")
        seen.add(ch)
        castling |= right
    return castling


def _parse_counter(text: str, minimum: int, name: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise ValueError(f"Invalid FEN {name}: {text!r}") from None
    if value < minimum:
        raise ValueError(f"Invalid FEN {name}: {text!r}")
    return value


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    The halfmove and fullmove fields are optional.  Beyond syntax, only the
    one-king-per-side rule and the en-passant rank are checked.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]
    board = _parse_placement(placement, fen)

    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    castling = _parse_castling(castling_part)

    ep: Square | None = None
    if ep_part != "-":
        ep = parse_square(ep_part)
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise ValueError(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    halfmove = _parse_counter(parts[4], 0, "halfmove clock") if len(parts) > 4 else 0
    fullmove = _parse_counter(parts[5], 1, "fullmove number") if len(parts) > 5 else 1

    _LOGGER.debug("Loaded position from FEN %s", fen)
    return Position(board, side, castling, ep, halfmove, fullmove)


def placement_to_fen(board: Board) -> str:
    """First FEN field: ranks 8 to 1, digits for runs of empty squares."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board[make_square(file, rank)]
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS if pos.castling & right)
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"
    return " ".join(
        (
            placement_to_fen(pos.board),
            side_str,
            castling_str or "-",
            ep_str,
            str(pos.halfmove_clock),
            str(pos.fullmove_number),
        )
    )
