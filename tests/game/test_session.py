"""Tests for ChessGame: the validated move facade."""

import random

import pytest

from chessrules.core.enums import (
    CastlingRights,
    Color,
    GameResult,
    MoveFlag,
    PieceType,
    Termination,
)
from chessrules.core.move import Move
from chessrules.core.notation import STARTING_FEN, position_from_fen
from chessrules.core.piece import Piece
from chessrules.core.policy import RulePolicy
from chessrules.core.types import E1, E2, E3, E4, parse_square
from chessrules.game.interfaces import ErrorKind, GameSnapshot
from chessrules.game.session import ChessGame
from chessrules.game.state import MoveRecord

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
PROMOTION_FEN = "4k3/P7/8/8/8/8/8/4K3 w - - 0 1"


def _play(game: ChessGame, *moves: str) -> None:
    """Play UCI-like moves ("e2e4", "a7a8q"), failing on any rejection."""
    promotions = {
        "q": PieceType.QUEEN,
        "r": PieceType.ROOK,
        "b": PieceType.BISHOP,
        "n": PieceType.KNIGHT,
    }
    for text in moves:
        promotion = promotions[text[4]] if len(text) == 5 else None
        outcome = game.attempt_move(text[:2], text[2:4], promotion)
        assert outcome.ok, f"{text} rejected: {outcome.error}"


def _targets(game: ChessGame, square) -> set[str]:
    return {str(m)[2:4] for m in game.legal_moves(square)}


class TestLegalMoves:
    def test_twenty_from_start(self, game: ChessGame) -> None:
        total = sum(len(game.legal_moves(sq)) for sq in range(64))
        assert total == 20

    def test_pawn_targets(self, game: ChessGame) -> None:
        assert _targets(game, "e2") == {"e3", "e4"}

    def test_knight_targets(self, game: ChessGame) -> None:
        assert _targets(game, "g1") == {"f3", "h3"}

    def test_rank_file_coordinates(self, game: ChessGame) -> None:
        assert game.legal_moves((1, 4)) == game.legal_moves("e2")
        assert game.legal_moves((1, 4)) == game.legal_moves(E2)

    @pytest.mark.parametrize("square", ["e7", "e4", "z9", (8, 0), 64, -1])
    def test_empty_for_unplayable_squares(self, game: ChessGame, square) -> None:
        assert game.legal_moves(square) == []

    def test_empty_after_game_over(self, game: ChessGame) -> None:
        game.resign(Color.WHITE)
        assert game.legal_moves("e2") == []


class TestAttemptMove:
    def test_legal_move_applied(self, game: ChessGame) -> None:
        outcome = game.attempt_move("e2", "e4")
        assert outcome.ok
        assert outcome
        assert outcome.error is None
        assert isinstance(outcome.record, MoveRecord)
        assert outcome.record.move == Move(E2, E4, MoveFlag.DOUBLE_PAWN)
        assert game.current_state().side_to_move == Color.BLACK

    def test_rank_file_coordinates(self, game: ChessGame) -> None:
        assert game.attempt_move((1, 4), (3, 4)).ok
        assert game.position_export() == (
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )

    def test_integer_squares(self, game: ChessGame) -> None:
        assert game.attempt_move(E2, E3).ok

    def test_fools_mate(self, game: ChessGame) -> None:
        _play(game, "f2f3", "e7e5", "g2g4", "d8h4")
        snap = game.current_state()
        assert snap.is_terminal
        assert snap.termination == Termination.CHECKMATE
        assert snap.result == GameResult.BLACK_WINS
        assert snap.white_in_check
        assert not snap.black_in_check
        assert game.is_over

    def test_back_rank_mate(self) -> None:
        game = ChessGame("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
        _play(game, "a1a8")
        assert game.current_state().termination == Termination.CHECKMATE
        assert game.current_state().result == GameResult.WHITE_WINS

    def test_stalemate(self) -> None:
        game = ChessGame("7k/8/5K2/8/8/8/8/6Q1 w - - 0 1")
        _play(game, "g1g6")
        snap = game.current_state()
        assert snap.termination == Termination.STALEMATE
        assert snap.result == GameResult.DRAW
        assert not snap.black_in_check


class TestErrors:
    @pytest.mark.parametrize(
        "from_sq, to_sq, expected",
        [
            ("z9", "e4", ErrorKind.INVALID_SQUARE),
            ("e2", "e9", ErrorKind.INVALID_SQUARE),
            ((8, 0), "a1", ErrorKind.INVALID_SQUARE),
            (64, 0, ErrorKind.INVALID_SQUARE),
            ("e4", "e5", ErrorKind.NO_PIECE_AT_SQUARE),
            ("e7", "e5", ErrorKind.WRONG_SIDE_TO_MOVE),
            ("g8", "f6", ErrorKind.WRONG_SIDE_TO_MOVE),
            ("e2", "e5", ErrorKind.ILLEGAL_MOVE),
            ("e1", "e2", ErrorKind.ILLEGAL_MOVE),
            ("a1", "a3", ErrorKind.ILLEGAL_MOVE),
            ("e2", "e4", None),
        ],
    )
    def test_error_kinds(self, game: ChessGame, from_sq, to_sq, expected) -> None:
        assert game.attempt_move(from_sq, to_sq).error == expected

    def test_rejection_leaves_no_trace(self, game: ChessGame) -> None:
        before = game.current_state()
        for args in (("e2", "e5"), ("e7", "e5"), ("z9", "a1"), ("e4", "e5")):
            outcome = game.attempt_move(*args)
            assert not outcome.ok
            assert outcome.record is None
        assert game.current_state() == before
        assert game.history == ()

    def test_pinned_piece_cannot_move(self) -> None:
        game = ChessGame("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
        assert game.attempt_move("e2", "d3").error == ErrorKind.ILLEGAL_MOVE
        assert game.legal_moves("e2") == []

    def test_must_answer_check(self) -> None:
        game = ChessGame("4k3/8/8/8/8/8/3PP3/r3K3 w - - 0 1")
        assert game.attempt_move("e2", "e4").error == ErrorKind.ILLEGAL_MOVE
        assert game.attempt_move("e1", "d1").error == ErrorKind.ILLEGAL_MOVE
        assert game.attempt_move("e1", "f2").ok

    def test_king_cannot_step_into_check(self) -> None:
        game = ChessGame("4k3/8/8/8/8/8/5r2/4K3 w - - 0 1")
        assert game.attempt_move("e1", "e2").error == ErrorKind.ILLEGAL_MOVE
        assert game.attempt_move("e1", "f1").error == ErrorKind.ILLEGAL_MOVE
        assert game.attempt_move("e1", "f2").ok

    def test_game_already_over(self, game: ChessGame) -> None:
        _play(game, "f2f3", "e7e5", "g2g4", "d8h4")
        fen = game.position_export()
        assert game.attempt_move("e2", "e4").error == ErrorKind.GAME_ALREADY_OVER
        # Checked before anything else.
        assert game.attempt_move("z9", "e4").error == ErrorKind.GAME_ALREADY_OVER
        assert game.position_export() == fen


class TestPromotion:
    @pytest.mark.parametrize(
        "piece_type",
        [PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT],
    )
    def test_each_choice(self, piece_type: PieceType) -> None:
        game = ChessGame(PROMOTION_FEN)
        outcome = game.attempt_move("a7", "a8", piece_type)
        assert outcome.ok
        assert outcome.record.move.flag == MoveFlag.PROMOTION
        a8 = game.current_state().board[parse_square("a8")]
        assert a8 == Piece(Color.WHITE, piece_type)
        assert game.current_state().board[parse_square("a7")] is None

    @pytest.mark.parametrize("choice", [None, PieceType.PAWN, PieceType.KING])
    def test_bad_choice_rejected(self, choice) -> None:
        game = ChessGame(PROMOTION_FEN)
        outcome = game.attempt_move("a7", "a8", choice)
        assert outcome.error == ErrorKind.INVALID_PROMOTION_CHOICE
        assert game.position_export() == PROMOTION_FEN

    def test_choice_on_ordinary_move_ignored(self, game: ChessGame) -> None:
        outcome = game.attempt_move("e2", "e4", PieceType.QUEEN)
        assert outcome.ok
        assert outcome.record.move == Move(E2, E4, MoveFlag.DOUBLE_PAWN)
        assert game.current_state().board[E4] == Piece(Color.WHITE, PieceType.PAWN)

    def test_underpromotion_text(self) -> None:
        game = ChessGame(PROMOTION_FEN)
        outcome = game.attempt_move("a7", "a8", PieceType.KNIGHT)
        assert str(outcome.record.move) == "a7a8n"

    def test_promotion_with_capture(self) -> None:
        game = ChessGame("1r2k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        outcome = game.attempt_move("a7", "b8", PieceType.KNIGHT)
        assert outcome.ok
        assert outcome.record.was_capture

    def test_four_moves_listed(self) -> None:
        game = ChessGame(PROMOTION_FEN)
        promotions = {m.promotion for m in game.legal_moves("a7")}
        assert promotions == {
            PieceType.QUEEN,
            PieceType.ROOK,
            PieceType.BISHOP,
            PieceType.KNIGHT,
        }


class TestEnPassant:
    def test_capture_right_after_double_push(self, game: ChessGame) -> None:
        _play(game, "e2e4", "a7a6", "e4e5", "d7d5")
        assert "d6" in _targets(game, "e5")
        outcome = game.attempt_move("e5", "d6")
        assert outcome.ok
        assert outcome.record.move.flag == MoveFlag.EN_PASSANT
        assert outcome.record.was_capture
        board = game.current_state().board
        assert board[parse_square("d5")] is None
        assert board[parse_square("d6")] == Piece(Color.WHITE, PieceType.PAWN)

    def test_right_expires_after_one_move(self, game: ChessGame) -> None:
        _play(game, "e2e4", "a7a6", "e4e5", "d7d5", "h2h3", "h7h6")
        assert game.attempt_move("e5", "d6").error == ErrorKind.ILLEGAL_MOVE

    def test_not_after_single_steps(self, game: ChessGame) -> None:
        _play(game, "e2e4", "d7d6", "e4e5", "d6d5")
        assert game.attempt_move("e5", "d6").error == ErrorKind.ILLEGAL_MOVE


class TestClocks:
    def test_halfmove_counts_and_resets(self, game: ChessGame) -> None:
        _play(game, "g1f3", "g8f6")
        assert game.position_export().split()[4] == "2"
        _play(game, "e2e4")
        assert game.position_export().split()[4] == "0"
        _play(game, "f6e4")  # capture
        assert game.position_export().split()[4] == "0"

    def test_fullmove_after_black(self, game: ChessGame) -> None:
        _play(game, "e2e4")
        assert game.position_export().split()[5] == "1"
        _play(game, "e7e5")
        assert game.position_export().split()[5] == "2"


class TestCastling:
    def test_kingside(self) -> None:
        game = ChessGame(CASTLING_FEN)
        outcome = game.attempt_move("e1", "g1")
        assert outcome.ok
        assert outcome.record.move.flag == MoveFlag.CASTLE_KINGSIDE
        board = game.current_state().board
        assert board[parse_square("g1")] == Piece(Color.WHITE, PieceType.KING)
        assert board[parse_square("f1")] == Piece(Color.WHITE, PieceType.ROOK)
        assert board[parse_square("h1")] is None
        assert game.position_export().split()[2] == "kq"

    def test_queenside(self) -> None:
        game = ChessGame(CASTLING_FEN)
        _play(game, "e1g1", "e8c8")
        board = game.current_state().board
        assert board[parse_square("c8")] == Piece(Color.BLACK, PieceType.KING)
        assert board[parse_square("d8")] == Piece(Color.BLACK, PieceType.ROOK)
        assert game.position_export().split()[2] == "-"

    def test_not_through_attacked_square(self) -> None:
        game = ChessGame("4kr2/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        assert game.attempt_move("e1", "g1").error == ErrorKind.ILLEGAL_MOVE
        assert game.attempt_move("e1", "c1").ok

    def test_not_out_of_check(self) -> None:
        game = ChessGame("4r1k1/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        assert game.attempt_move("e1", "g1").error == ErrorKind.ILLEGAL_MOVE
        assert game.attempt_move("e1", "c1").error == ErrorKind.ILLEGAL_MOVE

    def test_rights_never_return(self) -> None:
        game = ChessGame(CASTLING_FEN)
        _play(game, "h1h2", "a8a7", "h2h1", "a7a8")
        assert position_from_fen(game.position_export()).castling == (
            CastlingRights.WHITE_QUEENSIDE | CastlingRights.BLACK_KINGSIDE
        )
        assert game.attempt_move("e1", "g1").error == ErrorKind.ILLEGAL_MOVE

    def test_capturing_rook_removes_right(self) -> None:
        game = ChessGame("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        _play(game, "a1a8")
        assert game.position_export().split()[2] == "Kk"


class TestDraws:
    def test_threefold_repetition(self, game: ChessGame) -> None:
        shuffle = ("g1f3", "g8f6", "f3g1", "f6g8")
        _play(game, *shuffle)
        assert not game.is_over
        _play(game, *shuffle[:3])
        assert not game.is_over
        _play(game, shuffle[3])
        snap = game.current_state()
        assert snap.termination == Termination.REPETITION
        assert snap.result == GameResult.DRAW

    def test_fifty_move_rule(self) -> None:
        game = ChessGame("4k3/8/8/8/8/8/4K2R/7r w - - 99 60")
        _play(game, "e2d3")
        assert game.current_state().termination == Termination.FIFTY_MOVE_RULE
        assert game.current_state().result == GameResult.DRAW

    def test_capture_beats_fifty_move_rule(self) -> None:
        game = ChessGame("4k3/8/8/8/8/8/4K2R/7r w - - 99 60")
        _play(game, "h2h1")
        assert not game.is_over

    def test_insufficient_material_after_capture(self) -> None:
        game = ChessGame("4k3/8/8/8/8/8/4n3/4KB2 w - - 0 1")
        _play(game, "e1e2")
        assert game.current_state().termination == Termination.INSUFFICIENT_MATERIAL

    def test_loaded_draw_position(self) -> None:
        game = ChessGame("8/8/4k3/8/8/4K3/8/8 w - - 0 1")
        assert game.is_over
        assert game.attempt_move("e3", "e2").error == ErrorKind.GAME_ALREADY_OVER


class TestPolicy:
    def test_fide_fifty_is_claimed(self) -> None:
        game = ChessGame("4k3/8/8/8/8/8/4K2R/7r w - - 100 60", RulePolicy.fide())
        assert not game.is_over
        assert game.claim_draw()
        assert game.current_state().termination == Termination.FIFTY_MOVE_RULE
        assert game.current_state().result == GameResult.DRAW

    def test_fide_threefold_needs_claim(self) -> None:
        game = ChessGame(policy=RulePolicy.fide())
        shuffle = ("g1f3", "g8f6", "f3g1", "f6g8")
        _play(game, *shuffle, *shuffle)
        assert not game.is_over
        assert game.claim_draw()
        assert game.current_state().termination == Termination.REPETITION

    def test_fide_fivefold_is_automatic(self) -> None:
        game = ChessGame(policy=RulePolicy.fide())
        shuffle = ("g1f3", "g8f6", "f3g1", "f6g8")
        _play(game, *(shuffle * 4))
        assert game.current_state().termination == Termination.REPETITION

    def test_nothing_to_claim(self, game: ChessGame) -> None:
        assert not game.claim_draw()
        assert not game.is_over


class TestResignDrawUndo:
    def test_resign(self, game: ChessGame) -> None:
        assert game.resign(Color.WHITE)
        snap = game.current_state()
        assert snap.termination == Termination.RESIGNATION
        assert snap.result == GameResult.BLACK_WINS
        assert not game.resign(Color.BLACK)
        assert game.attempt_move("e2", "e4").error == ErrorKind.GAME_ALREADY_OVER

    def test_agree_draw(self, game: ChessGame) -> None:
        assert game.agree_draw()
        assert game.current_state().termination == Termination.DRAW_AGREED
        assert game.current_state().result == GameResult.DRAW
        assert not game.agree_draw()

    def test_undo(self, game: ChessGame) -> None:
        _play(game, "e2e4")
        assert game.undo() == Move(E2, E4, MoveFlag.DOUBLE_PAWN)
        assert game.position_export() == STARTING_FEN
        assert game.history == ()

    def test_undo_nothing(self, game: ChessGame) -> None:
        assert game.undo() is None

    def test_no_undo_after_game_over(self, game: ChessGame) -> None:
        _play(game, "f2f3", "e7e5", "g2g4", "d8h4")
        assert game.undo() is None
        assert game.is_over

    def test_reset(self, game: ChessGame) -> None:
        _play(game, "e2e4")
        game.resign(Color.BLACK)
        game.reset()
        assert not game.is_over
        assert game.position_export() == STARTING_FEN


class TestEvents:
    def test_on_move_fires(self, game: ChessGame) -> None:
        seen: list[tuple[MoveRecord, GameSnapshot]] = []
        game.events.on_move.append(lambda record, snap: seen.append((record, snap)))
        game.attempt_move("e2", "e5")
        assert seen == []
        game.attempt_move("e2", "e4")
        assert len(seen) == 1
        record, snap = seen[0]
        assert str(record.move) == "e2e4"
        assert snap.side_to_move == Color.BLACK

    def test_on_game_over_fires_once(self, game: ChessGame) -> None:
        seen: list[tuple[Termination, GameResult]] = []
        game.events.on_game_over.append(lambda t, r: seen.append((t, r)))
        _play(game, "f2f3", "e7e5", "g2g4", "d8h4")
        game.attempt_move("e2", "e4")
        assert seen == [(Termination.CHECKMATE, GameResult.BLACK_WINS)]

    def test_on_game_over_for_resignation(self, game: ChessGame) -> None:
        seen: list[tuple[Termination, GameResult]] = []
        game.events.on_game_over.append(lambda t, r: seen.append((t, r)))
        game.resign(Color.BLACK)
        assert seen == [(Termination.RESIGNATION, GameResult.WHITE_WINS)]


class TestSnapshotAndExport:
    def test_snapshot_board(self, game: ChessGame) -> None:
        snap = game.current_state()
        assert len(snap.board) == 64
        assert snap.board[E1] == Piece(Color.WHITE, PieceType.KING)
        assert snap.board[E4] is None
        assert snap.fen == STARTING_FEN
        assert not snap.in_check(Color.WHITE)
        assert not snap.in_check(Color.BLACK)

    def test_check_flag(self) -> None:
        game = ChessGame("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        _play(game, "a1a8")
        snap = game.current_state()
        assert snap.black_in_check
        assert snap.in_check(Color.BLACK)
        assert not snap.is_terminal

    def test_start_export(self, game: ChessGame) -> None:
        assert game.position_export() == STARTING_FEN

    @pytest.mark.parametrize(
        "moves",
        [
            ("e2e4", "a7a6", "e4e5", "d7d5"),
            ("g1f3", "g8f6", "e2e3", "e7e6", "f1e2", "f8e7"),
            ("d2d4", "e7e5", "d4e5", "f7f5"),
        ],
    )
    def test_export_reimport_keeps_legal_moves(self, moves) -> None:
        game = ChessGame()
        _play(game, *moves)
        copy = ChessGame(game.position_export())
        for sq in range(64):
            assert set(copy.legal_moves(sq)) == set(game.legal_moves(sq))
        assert copy.current_state().board == game.current_state().board

    def test_invalid_fen_raises(self) -> None:
        with pytest.raises(ValueError):
            ChessGame("not a fen")

    def test_games_are_independent(self) -> None:
        first, second = ChessGame(), ChessGame()
        _play(first, "e2e4")
        assert second.position_export() == STARTING_FEN


class TestRandomPlayouts:
    @pytest.mark.parametrize("seed", range(4))
    def test_invariants_hold(self, seed: int) -> None:
        rng = random.Random(seed)
        game = ChessGame()
        for _ in range(120):
            if game.is_over:
                break
            snap = game.current_state()
            mover = snap.side_to_move
            moves = game.state.legal_moves()
            assert moves
            move = rng.choice(moves)
            outcome = game.attempt_move(move.from_sq, move.to_sq, move.promotion)
            assert outcome.ok

            after = game.current_state()
            assert not after.in_check(mover)
            assert after.side_to_move == mover.opposite
            kings = [
                p
                for p in after.board
                if p is not None and p.piece_type == PieceType.KING
            ]
            assert sorted(k.color for k in kings) == [Color.WHITE, Color.BLACK]

            reloaded = ChessGame(game.position_export())
            assert reloaded.position_export() == game.position_export()
            assert set(reloaded.state.legal_moves()) == set(game.state.legal_moves())
