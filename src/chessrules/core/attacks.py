"""Attack detection by direct geometric scan.

Nothing here generates moves: every question is answered by looking outward
from the target square, so move generation may depend on this module
without the reverse ever being true.
"""

from __future__ import annotations

from chessrules.core.board import Board
from chessrules.core.enums import Color, PieceType
from chessrules.core.types import Square, make_square

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_DIAGONAL_SLIDERS = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_SLIDERS = (PieceType.ROOK, PieceType.QUEEN)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        targets.append(
            tuple(
                make_square(file_idx + df, rank_idx + dr)
                for df, dr in offsets
                if 0 <= file_idx + df < 8 and 0 <= rank_idx + dr < 8
            )
        )
    return tuple(targets)


def _build_mask(squares: tuple[Square, ...]) -> int:
    mask = 0
    for sq in squares:
        mask |= 1 << sq
    return mask


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = (sq & 7) + df
            ar = (sq >> 3) + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _build_pawn_sources(color: Color) -> tuple[int, ...]:
    """For each target square, the squares a *color* pawn attacks it from.

    A pawn strikes one rank forward, so its attackers sit one rank behind
    the target relative to the pawn's own direction.
    """
    back = -color.forward
    masks: list[int] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = (sq >> 3) + back
        mask = 0
        if 0 <= rank_idx < 8:
            for df in (-1, 1):
                if 0 <= file_idx + df < 8:
                    mask |= 1 << make_square(file_idx + df, rank_idx)
        masks.append(mask)
    return tuple(masks)


KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
KING_TARGETS = _build_targets(KING_OFFSETS)
BISHOP_RAYS = _build_rays(BISHOP_DIRS)
ROOK_RAYS = _build_rays(ROOK_DIRS)
QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_KNIGHT_MASKS = tuple(_build_mask(t) for t in KNIGHT_TARGETS)
_KING_MASKS = tuple(_build_mask(t) for t in KING_TARGETS)
_PAWN_SOURCES = (_build_pawn_sources(Color.WHITE), _build_pawn_sources(Color.BLACK))


# -- Oracle -----------------------------------------------------------------


def _ray_hit(
    board: Board,
    rays: tuple[tuple[Square, ...], ...],
    by_color: Color,
    kinds: tuple[PieceType, PieceType],
) -> Square | None:
    for ray in rays:
        for to_sq in ray:
            piece = board[to_sq]
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in kinds:
                return to_sq
            break
    return None


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?"""
    if board.pieces_bitboard(by_color, PieceType.PAWN) & _PAWN_SOURCES[by_color][sq]:
        return True
    if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_MASKS[sq]:
        return True
    if board.pieces_bitboard(by_color, PieceType.KING) & _KING_MASKS[sq]:
        return True

    queens = board.has_piece(by_color, PieceType.QUEEN)
    if queens or board.has_piece(by_color, PieceType.BISHOP):
        if _ray_hit(board, BISHOP_RAYS[sq], by_color, _DIAGONAL_SLIDERS) is not None:
            return True
    if queens or board.has_piece(by_color, PieceType.ROOK):
        if _ray_hit(board, ROOK_RAYS[sq], by_color, _STRAIGHT_SLIDERS) is not None:
            return True
    return False


def is_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?"""
    return is_square_attacked(board, board.king_square(color), color.opposite)


def attackers_of(board: Board, sq: Square, by_color: Color) -> list[Square]:
    """Every square holding a *by_color* piece that attacks *sq*."""
    found: list[Square] = []
    for piece_type, mask in (
        (PieceType.PAWN, _PAWN_SOURCES[by_color][sq]),
        (PieceType.KNIGHT, _KNIGHT_MASKS[sq]),
        (PieceType.KING, _KING_MASKS[sq]),
    ):
        bits = board.pieces_bitboard(by_color, piece_type) & mask
        found.extend(s for s in range(64) if bits >> s & 1)

    for rays, kinds in ((BISHOP_RAYS[sq], _DIAGONAL_SLIDERS), (ROOK_RAYS[sq], _STRAIGHT_SLIDERS)):
        for ray in rays:
            hit = _ray_hit(board, (ray,), by_color, kinds)
            if hit is not None:
                found.append(hit)
    return sorted(found)
