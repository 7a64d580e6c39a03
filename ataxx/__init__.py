"""
Ataxx rules engine and alpha-beta move selection.
"""

from .core.board import Board, IllegalMoveError
from .core.types import PASS, Move, Outcome, PieceColor
from .search.driver import decide

__all__ = [
    "Board",
    "IllegalMoveError",
    "Move",
    "Outcome",
    "PASS",
    "PieceColor",
    "decide",
]
