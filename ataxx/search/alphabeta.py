from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ataxx.core.board import Board
from ataxx.core.types import Move
from ataxx.search.eval import static_score
from ataxx.search.moves import possible_moves

INF = 2**31 - 1
# Magnitude of a won position (red if positive, blue if negative).
WINNING_VALUE = INF - 20


@dataclass(slots=True)
class FoundMove:
    """Best move seen so far by the root call of alphabeta."""

    move: Optional[Move] = None


def alphabeta(
    board: Board,
    depth: int,
    sense: int,
    alpha: int,
    beta: int,
    record: Optional[FoundMove] = None,
    alternate: bool = False,
) -> int:
    """
    Minimax value of BOARD searched DEPTH plies deep.

    SENSE is 1 to maximize (red) and -1 to minimize (blue). Only strict
    improvements replace the best move, so the earliest of equal moves wins.
    When RECORD is given, its move is updated after every candidate.

    By default every ply below the root minimizes and both branches raise
    ALPHA, which is how the engine has always played. ALTERNATE switches to
    textbook alpha-beta: senses alternate and the minimizing branch lowers
    BETA.
    """
    # WINNING_VALUE + depth so that wins found sooner score higher.
    if depth == 0 or board.is_game_over():
        return static_score(board, WINNING_VALUE + depth)

    best_move: Optional[Move] = None

    if sense == 1:
        best = -INF
        for move in possible_moves(board):
            with board.applied(move):
                score = alphabeta(board, depth - 1, -1, alpha, beta, alternate=alternate)
            if score > best:
                best = score
                best_move = move
            if record is not None:
                record.move = best_move
            alpha = max(best, alpha)
            if alpha >= beta:
                return best
        return best

    best = INF
    child_sense = 1 if alternate else -1
    for move in possible_moves(board):
        with board.applied(move):
            score = alphabeta(board, depth - 1, child_sense, alpha, beta, alternate=alternate)
        if score < best:
            best = score
            best_move = move
        if record is not None:
            record.move = best_move
        if alternate:
            beta = min(best, beta)
        else:
            alpha = max(best, alpha)
        if alpha >= beta:
            return best
    return best


def search(
    board: Board,
    depth: int,
    sense: int,
    alpha: int = -INF,
    beta: int = INF,
    alternate: bool = False,
) -> Tuple[int, Optional[Move]]:
    """
    Root search. Returns (score, best_move); best_move is None only when
    depth is 0 or the game is already over.
    """
    if sense not in (1, -1):
        raise ValueError(f"sense must be 1 or -1, got {sense}")
    record = FoundMove()
    score = alphabeta(board, depth, sense, alpha, beta, record=record, alternate=alternate)
    return score, record.move
