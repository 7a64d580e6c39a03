from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from ataxx.config import CONFIG
from ataxx.core.board import Board
from ataxx.core.types import PASS, Move, PieceColor
from ataxx.search.alphabeta import search

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchResult:
    score: int
    best_move: Move
    depth: int
    elapsed_ms: float


def find_move(board: Board, side: PieceColor, depth: int, alternate: bool = False) -> SearchResult:
    """
    Search a private copy of BOARD for SIDE, assuming SIDE has a legal move
    and the game is not over. BOARD itself is never touched.
    """
    sense = 1 if side == PieceColor.RED else -1
    work = board.copy()
    start = time.perf_counter()
    score, move = search(work, depth, sense, alternate=alternate)
    elapsed_ms = (time.perf_counter() - start) * 1000.0
    if move is None:
        raise RuntimeError("search returned no move for a side that can move")
    return SearchResult(score=score, best_move=move, depth=depth, elapsed_ms=elapsed_ms)


def decide(
    board: Board,
    side: PieceColor,
    depth: Optional[int] = None,
    alternate: Optional[bool] = None,
) -> Move:
    """Choose SIDE's move on BOARD; PASS (without searching) when SIDE is stuck."""
    if side != board.side_to_move:
        raise ValueError(f"{side.display()} is not the side to move")
    if depth is None:
        depth = CONFIG.search.depth
    if alternate is None:
        alternate = CONFIG.search.alternate_sense
    if depth < 1:
        raise ValueError(f"search depth must be at least 1, got {depth}")

    if not board.can_move(side):
        logger.debug("%s has no legal move; passing", side.display())
        return PASS
    if board.is_game_over():
        raise ValueError("game is over")

    result = find_move(board, side, depth, alternate=alternate)
    logger.info(
        "%s moves %s (score %d, depth %d, %.1f ms)",
        side.display(),
        result.best_move.text(),
        result.score,
        result.depth,
        result.elapsed_ms,
    )
    return result.best_move
