from __future__ import annotations

from ataxx.core.board import Board
from ataxx.core.types import Outcome, PieceColor


def static_score(board: Board, winning_value: int) -> int:
    """
    Material evaluation.

    Returns +winning_value / -winning_value when Red / Blue has won, 0 for a
    tie, and red pieces minus blue pieces while the game is in progress.
    """
    outcome = board.outcome()
    if outcome == Outcome.RED_WINS:
        return winning_value
    if outcome == Outcome.BLUE_WINS:
        return -winning_value
    if outcome == Outcome.TIE:
        return 0
    return board.num_pieces(PieceColor.RED) - board.num_pieces(PieceColor.BLUE)
