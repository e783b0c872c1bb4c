"""Game management layer: validated play, termination, history.

Quick start::

    from chessrules.game import ChessGame

    game = ChessGame()
    outcome = game.attempt_move("e2", "e4")
    assert outcome.ok
    print(game.position_export())
"""

from chessrules.game.interfaces import ErrorKind, GameSnapshot, IChessGame, MoveOutcome
from chessrules.game.session import ChessGame, GameEvents
from chessrules.game.state import GameState, MoveRecord

__all__ = [
    # Interfaces
    "ErrorKind",
    "GameSnapshot",
    "IChessGame",
    "MoveOutcome",
    # Concrete
    "ChessGame",
    "GameEvents",
    "GameState",
    "MoveRecord",
]
