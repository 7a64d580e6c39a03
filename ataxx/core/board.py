from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from ataxx.core.types import (
    NUM_SQUARES,
    SIDE,
    Move,
    Outcome,
    PieceColor,
    on_board,
    square_index,
    square_to_str,
    str_to_square,
)

# Consecutive jumps (no clone in between) that end the game.
JUMP_LIMIT = 25

_LAYOUT_CHARS = {
    PieceColor.RED: "r",
    PieceColor.BLUE: "b",
    PieceColor.BLOCKED: "X",
}
_LAYOUT_PIECES = {ch: color for color, ch in _LAYOUT_CHARS.items()}

_DUMP_CHARS = {
    PieceColor.EMPTY: "-",
    PieceColor.RED: "r",
    PieceColor.BLUE: "b",
    PieceColor.BLOCKED: "X",
}


class IllegalMoveError(ValueError):
    """A move was rejected by Board.play; the message is the reason."""


@dataclass(slots=True)
class MoveUndo:
    move: Move
    mover: PieceColor
    consecutive_jumps: int
    infected: List[int] = field(default_factory=list)


class Board:
    def __init__(self) -> None:
        self.squares: List[PieceColor] = [PieceColor.EMPTY] * NUM_SQUARES
        self.side_to_move: PieceColor = PieceColor.RED
        self.consecutive_jumps: int = 0
        self.history: List[MoveUndo] = []
        self._counts: Dict[PieceColor, int] = {PieceColor.RED: 0, PieceColor.BLUE: 0}

    @staticmethod
    def empty() -> "Board":
        return Board()

    @staticmethod
    def from_startpos() -> "Board":
        b = Board()
        b._setup_startpos()
        return b

    def reset_to_startpos(self) -> None:
        self._setup_startpos()

    def _setup_startpos(self) -> None:
        self.squares = [PieceColor.EMPTY] * NUM_SQUARES
        self.side_to_move = PieceColor.RED
        self.consecutive_jumps = 0
        self.history = []

        self.squares[str_to_square("a7")] = PieceColor.RED
        self.squares[str_to_square("g1")] = PieceColor.RED
        self.squares[str_to_square("a1")] = PieceColor.BLUE
        self.squares[str_to_square("g7")] = PieceColor.BLUE

        self._recount()

    def _recount(self) -> None:
        self._counts = {
            PieceColor.RED: self.squares.count(PieceColor.RED),
            PieceColor.BLUE: self.squares.count(PieceColor.BLUE),
        }

    def copy(self) -> "Board":
        b = Board()
        b.squares = self.squares[:]
        b.side_to_move = self.side_to_move
        b.consecutive_jumps = self.consecutive_jumps
        b.history = self.history[:]
        b._counts = dict(self._counts)
        return b

    @staticmethod
    def from_layout(text: str) -> "Board":
        """
        Parse a layout such as 'r5b/7/7/7/7/7/b5r r'.

        Rows run from 7 down to 1; 'r' red, 'b' blue, 'X' blocked, digits are
        runs of empty squares. The trailing field is the side to move.
        """
        parts = text.strip().split()
        if len(parts) != 2:
            raise ValueError(f"invalid layout (expected 2 fields): {text!r}")

        placement, stm = parts
        rows = placement.split("/")
        if len(rows) != SIDE:
            raise ValueError(f"invalid layout rows: {text!r}")

        b = Board()
        for layout_row_idx, row_str in enumerate(rows):
            row = SIDE - 1 - layout_row_idx
            col = 0
            for ch in row_str:
                if ch.isdigit():
                    col += int(ch)
                    continue

                color = _LAYOUT_PIECES.get(ch)
                if color is None:
                    raise ValueError(f"invalid layout piece: {ch!r}")
                if not (0 <= col < SIDE):
                    raise ValueError(f"invalid layout column overflow: {text!r}")
                b.squares[square_index(col, row)] = color
                col += 1

            if col != SIDE:
                raise ValueError(f"invalid layout row width: {text!r}")

        if stm == "r":
            b.side_to_move = PieceColor.RED
        elif stm == "b":
            b.side_to_move = PieceColor.BLUE
        else:
            raise ValueError(f"invalid layout side to move: {stm!r}")

        b._recount()
        return b

    def layout(self) -> str:
        rows: List[str] = []
        for row in range(SIDE - 1, -1, -1):
            out = ""
            run = 0
            for col in range(SIDE):
                piece = self.squares[square_index(col, row)]
                if piece == PieceColor.EMPTY:
                    run += 1
                    continue
                if run:
                    out += str(run)
                    run = 0
                out += _LAYOUT_CHARS[piece]
            if run:
                out += str(run)
            rows.append(out)
        stm = "r" if self.side_to_move == PieceColor.RED else "b"
        return "/".join(rows) + " " + stm

    def dump(self) -> str:
        lines = ["==="]
        for row in range(SIDE - 1, -1, -1):
            cells = [_DUMP_CHARS[self.squares[square_index(col, row)]] for col in range(SIDE)]
            lines.append("  " + " ".join(cells))
        lines.append("===")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.dump()

    def num_pieces(self, color: PieceColor) -> int:
        if color in self._counts:
            return self._counts[color]
        return self.squares.count(color)

    def set_block(self, sq: int) -> None:
        """Block SQ and its reflections across the centre column and row."""
        if self.history:
            raise ValueError("blocks may only be placed before the first move")
        row, col = divmod(sq, SIDE)
        targets = sorted(
            {
                square_index(c, r)
                for c in (col, SIDE - 1 - col)
                for r in (row, SIDE - 1 - row)
            }
        )
        for target in targets:
            if self.squares[target].is_piece():
                raise ValueError(f"cannot block occupied square {square_to_str(target)}")
        for target in targets:
            self.squares[target] = PieceColor.BLOCKED

    def legal_transfer(self, col0: int, row0: int, col1: int, row1: int) -> bool:
        if not (on_board(col0, row0) and on_board(col1, row1)):
            return False
        if self.squares[square_index(col0, row0)] != self.side_to_move:
            return False
        if self.squares[square_index(col1, row1)] != PieceColor.EMPTY:
            return False
        return max(abs(col1 - col0), abs(row1 - row0)) in (1, 2)

    def legal_move(self, move: Move) -> bool:
        if move.is_pass:
            return not self.can_move(self.side_to_move)
        if not (0 <= move.from_sq < NUM_SQUARES and 0 <= move.to_sq < NUM_SQUARES):
            return False
        row0, col0 = divmod(move.from_sq, SIDE)
        row1, col1 = divmod(move.to_sq, SIDE)
        return self.legal_transfer(col0, row0, col1, row1)

    def validate_move(self, move: Move) -> Tuple[bool, str]:
        if move.is_pass:
            if self.can_move(self.side_to_move):
                return False, "cannot pass while a move is available"
            return True, ""
        if not (0 <= move.from_sq < NUM_SQUARES and 0 <= move.to_sq < NUM_SQUARES):
            return False, "square out of range"
        if move.from_sq == move.to_sq:
            return False, "from/to are the same square"

        piece = self.squares[move.from_sq]
        if not piece.is_piece():
            return False, f"no piece on {square_to_str(move.from_sq)}"
        if piece != self.side_to_move:
            return False, "wrong side to move"

        target = self.squares[move.to_sq]
        if target == PieceColor.BLOCKED:
            return False, "destination is blocked"
        if target != PieceColor.EMPTY:
            return False, "destination is occupied"
        if move.distance > 2:
            return False, "destination is too far"

        return True, ""

    def can_move(self, color: PieceColor) -> bool:
        for sq, piece in enumerate(self.squares):
            if piece != color:
                continue
            row, col = divmod(sq, SIDE)
            for dc in range(-2, 3):
                for dr in range(-2, 3):
                    c = col + dc
                    r = row + dr
                    if on_board(c, r) and self.squares[square_index(c, r)] == PieceColor.EMPTY:
                        return True
        return False

    def outcome(self) -> Outcome:
        red = self._counts[PieceColor.RED]
        blue = self._counts[PieceColor.BLUE]
        over = (
            red == 0
            or blue == 0
            or self.consecutive_jumps >= JUMP_LIMIT
            or (not self.can_move(PieceColor.RED) and not self.can_move(PieceColor.BLUE))
        )
        if not over:
            return Outcome.IN_PROGRESS
        if red > blue:
            return Outcome.RED_WINS
        if blue > red:
            return Outcome.BLUE_WINS
        return Outcome.TIE

    def is_game_over(self) -> bool:
        return self.outcome() != Outcome.IN_PROGRESS

    def play(self, move: Move) -> MoveUndo:
        """Validate MOVE and apply it; raises IllegalMoveError on rejection."""
        if self.is_game_over():
            raise IllegalMoveError("game is over")
        ok, reason = self.validate_move(move)
        if not ok:
            raise IllegalMoveError(reason)
        return self.make_move(move)

    def make_move(self, move: Move) -> MoveUndo:
        mover = self.side_to_move
        undo = MoveUndo(move=move, mover=mover, consecutive_jumps=self.consecutive_jumps)

        if not move.is_pass:
            if move.is_jump:
                self.squares[move.from_sq] = PieceColor.EMPTY
                self._counts[mover] -= 1
                self.consecutive_jumps += 1
            else:
                self.consecutive_jumps = 0
            self.squares[move.to_sq] = mover
            self._counts[mover] += 1

            opponent = mover.opposite()
            to_row, to_col = divmod(move.to_sq, SIDE)
            for dc in (-1, 0, 1):
                for dr in (-1, 0, 1):
                    c = to_col + dc
                    r = to_row + dr
                    if not on_board(c, r):
                        continue
                    sq = square_index(c, r)
                    if self.squares[sq] == opponent:
                        self.squares[sq] = mover
                        undo.infected.append(sq)
            self._counts[mover] += len(undo.infected)
            self._counts[opponent] -= len(undo.infected)

        self.side_to_move = mover.opposite()
        self.history.append(undo)
        return undo

    def undo(self) -> None:
        """Reverse the most recent make_move."""
        if not self.history:
            raise RuntimeError("no move to undo")
        undo = self.history.pop()
        move = undo.move
        mover = undo.mover

        self.side_to_move = mover
        self.consecutive_jumps = undo.consecutive_jumps
        if move.is_pass:
            return

        opponent = mover.opposite()
        for sq in undo.infected:
            self.squares[sq] = opponent
        self._counts[mover] -= len(undo.infected)
        self._counts[opponent] += len(undo.infected)

        self.squares[move.to_sq] = PieceColor.EMPTY
        self._counts[mover] -= 1
        if move.is_jump:
            self.squares[move.from_sq] = mover
            self._counts[mover] += 1

    @contextmanager
    def applied(self, move: Move) -> Iterator[MoveUndo]:
        """Apply MOVE for the duration of the block; undone on every exit path."""
        undo = self.make_move(move)
        try:
            yield undo
        finally:
            if not self.history or self.history[-1] is not undo:
                raise RuntimeError("apply/undo out of order")
            self.undo()
