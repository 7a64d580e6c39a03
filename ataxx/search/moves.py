from __future__ import annotations

from typing import List

from ataxx.core.board import Board
from ataxx.core.types import PASS, SIDE, Move, square_index


def possible_moves(board: Board) -> List[Move]:
    """
    All legal moves for the side to move, or [PASS] if there are none.

    Order is source column, source row, destination column, destination row,
    each ascending. Search keeps the first of equally scored moves, so this
    order decides ties.
    """
    moves: List[Move] = []
    for col0 in range(SIDE):
        for row0 in range(SIDE):
            if board.squares[square_index(col0, row0)] != board.side_to_move:
                continue
            for col1 in range(col0 - 2, col0 + 3):
                for row1 in range(row0 - 2, row0 + 3):
                    if board.legal_transfer(col0, row0, col1, row1):
                        moves.append(Move(square_index(col0, row0), square_index(col1, row1)))
    if not moves:
        moves.append(PASS)
    return moves
