"""
Tests for move enumeration, static evaluation and alpha-beta search.
"""

import pytest

from ataxx.core.board import JUMP_LIMIT, Board
from ataxx.core.types import PASS, SIDE, PieceColor, move_from_text
from ataxx.search.alphabeta import INF, WINNING_VALUE, FoundMove, alphabeta, search
from ataxx.search.eval import static_score
from ataxx.search.moves import possible_moves

STARTPOS = "r5b/7/7/7/7/7/b5r r"
BOXED_IN = "7/7/7/7/bbb4/bbb4/rbb4 r"
CORNERS = "6b/7/7/7/7/7/r6 r"
FAR_APART = "b6/7/7/7/4r2/7/7 r"
ONE_MOVE_WIN = "7/7/7/7/7/7/r1b4 r"
MIDGAME = "r1b4/1X3X1/7/3r3/7/1X3X1/b4r1 r"


def exhaustive(board: Board, depth: int, sense: int, alternate: bool) -> int:
    """Plain minimax with the same sense rules as alphabeta, without pruning."""
    if depth == 0 or board.is_game_over():
        return static_score(board, WINNING_VALUE + depth)
    child_sense = 1 if (alternate and sense == -1) else -1
    scores = []
    for move in possible_moves(board):
        with board.applied(move):
            scores.append(exhaustive(board, depth - 1, child_sense, alternate))
    return max(scores) if sense == 1 else min(scores)


class DepthTrackingBoard(Board):
    def __init__(self) -> None:
        super().__init__()
        self.max_history = 0

    @staticmethod
    def tracking(layout: str) -> "DepthTrackingBoard":
        src = Board.from_layout(layout)
        board = DepthTrackingBoard()
        board.squares = src.squares[:]
        board.side_to_move = src.side_to_move
        board._recount()
        return board

    def make_move(self, move):
        undo = super().make_move(move)
        self.max_history = max(self.max_history, len(self.history))
        return undo


class TestPossibleMoves:
    """Test enumeration order and the pass fallback."""

    def test_startpos_order(self):
        moves = [m.text() for m in possible_moves(Board.from_startpos())]
        assert moves == [
            "a7-a5", "a7-a6", "a7-b5", "a7-b6", "a7-b7", "a7-c5", "a7-c6", "a7-c7",
            "g1-e1", "g1-e2", "g1-e3", "g1-f1", "g1-f2", "g1-f3", "g1-g2", "g1-g3",
        ]

    def test_order_is_column_major(self):
        moves = possible_moves(Board.from_layout(MIDGAME))

        def key(move):
            from_row, from_col = divmod(move.from_sq, SIDE)
            to_row, to_col = divmod(move.to_sq, SIDE)
            return (from_col, from_row, to_col, to_row)

        assert moves == sorted(moves, key=key)
        assert len(set(moves)) == len(moves)

    def test_blue_moves(self):
        board = Board.from_startpos()
        board.make_move(move_from_text("a7-a6"))
        moves = possible_moves(board)
        assert len(moves) == 16
        assert all(board.squares[m.from_sq] == PieceColor.BLUE for m in moves)

    def test_boxed_in_passes(self):
        assert possible_moves(Board.from_layout(BOXED_IN)) == [PASS]

    def test_enumeration_is_pure(self):
        board = Board.from_layout(MIDGAME)
        possible_moves(board)
        assert board.layout() == MIDGAME
        assert board.history == []


class TestStaticScore:
    """Test the frontier evaluation."""

    def test_material_difference(self):
        board = Board.from_startpos()
        assert static_score(board, WINNING_VALUE) == 0
        board.make_move(move_from_text("a7-a6"))
        assert static_score(board, WINNING_VALUE) == 1

    def test_red_win(self):
        board = Board.from_layout(ONE_MOVE_WIN)
        board.make_move(move_from_text("a1-b1"))
        assert static_score(board, WINNING_VALUE + 3) == WINNING_VALUE + 3

    def test_blue_win(self):
        board = Board.from_layout("7/7/7/7/7/7/b6 r")
        assert static_score(board, WINNING_VALUE) == -WINNING_VALUE

    def test_tie(self):
        board = Board.from_startpos()
        board.consecutive_jumps = JUMP_LIMIT
        assert static_score(board, WINNING_VALUE) == 0

    @pytest.mark.parametrize("layout", [STARTPOS, MIDGAME, ONE_MOVE_WIN, BOXED_IN])
    @pytest.mark.parametrize("depth", [0, 1, 4])
    def test_score_range(self, layout, depth):
        score = static_score(Board.from_layout(layout), WINNING_VALUE + depth)
        assert -(WINNING_VALUE + depth) <= score <= WINNING_VALUE + depth


class TestAlphaBeta:
    """Test search values, recorded moves and the undo discipline."""

    def test_depth_zero_is_static(self):
        board = Board.from_layout(MIDGAME)
        assert alphabeta(board, 0, 1, -INF, INF) == static_score(board, WINNING_VALUE)
        assert search(board, 0, 1) == (static_score(board, WINNING_VALUE), None)

    def test_corner_prefers_first_clone(self):
        score, move = search(Board.from_layout(CORNERS), 1, 1)
        assert move.text() == "a1-a2"
        assert move.is_clone
        assert score == 1

    def test_ties_keep_first_enumerated(self):
        # Column c holds only jumps (score 0); every clone scores 1 and d2 is
        # the first clone in enumeration order.
        board = Board.from_layout(FAR_APART)
        first = possible_moves(board)[0]
        assert first.text() == "e3-c1"
        assert first.is_jump
        score, move = search(board, 1, 1)
        assert score == 1
        assert move.text() == "e3-d2"
        assert move.is_clone

    def test_sooner_win_scores_higher(self):
        score, move = search(Board.from_layout(ONE_MOVE_WIN), 3, 1)
        assert move.text() == "a1-b1"
        assert score == WINNING_VALUE + 2

    def test_blue_minimizes(self):
        score, move = search(Board.from_layout("7/7/7/7/7/7/b1r4 b"), 1, -1)
        assert move.text() == "a1-b1"
        assert score == -WINNING_VALUE

    def test_pass_is_searched(self):
        board = Board.from_layout(BOXED_IN)
        score, move = search(board, 2, 1)
        assert move == PASS
        assert board.layout() == BOXED_IN

    def test_record_tracks_best_move(self):
        record = FoundMove()
        alphabeta(Board.from_layout(CORNERS), 1, 1, -INF, INF, record=record)
        assert record.move.text() == "a1-a2"

    def test_invalid_sense(self):
        with pytest.raises(ValueError):
            search(Board.from_startpos(), 1, 0)

    @pytest.mark.parametrize("alternate", [False, True])
    @pytest.mark.parametrize(
        "layout,depth,sense",
        [
            (STARTPOS, 2, 1),
            (STARTPOS, 3, 1),
            (MIDGAME, 2, 1),
            ("r1b4/1X3X1/7/3r3/7/1X3X1/b4r1 b", 2, -1),
            ("7/7/2b4/2rb3/3r3/7/7 r", 2, 1),
            ("7/7/2b4/2rb3/3r3/7/7 b", 2, -1),
        ],
    )
    def test_pruning_matches_exhaustive(self, layout, depth, sense, alternate):
        board = Board.from_layout(layout)
        expected = exhaustive(board.copy(), depth, sense, alternate)
        assert alphabeta(board, depth, sense, -INF, INF, alternate=alternate) == expected
        assert board.layout() == layout
        assert board.history == []

    @pytest.mark.parametrize("depth", [1, 2, 3])
    def test_recursion_bounded_by_depth(self, depth):
        board = DepthTrackingBoard.tracking(STARTPOS)
        search(board, depth, 1)
        assert board.max_history == depth
        assert board.history == []
