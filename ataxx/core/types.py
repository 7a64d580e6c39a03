from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

SIDE = 7
NUM_SQUARES = SIDE * SIDE

# Sentinel square used by the pass move.
PASS_SQ = -1


class PieceColor(IntEnum):
    EMPTY = 0
    RED = 1
    BLUE = 2
    BLOCKED = 3

    def opposite(self) -> "PieceColor":
        if self == PieceColor.RED:
            return PieceColor.BLUE
        if self == PieceColor.BLUE:
            return PieceColor.RED
        return self

    def is_piece(self) -> bool:
        return self in (PieceColor.RED, PieceColor.BLUE)

    def display(self) -> str:
        return self.name.capitalize()


class Outcome(Enum):
    IN_PROGRESS = "in progress"
    RED_WINS = "red wins"
    BLUE_WINS = "blue wins"
    TIE = "tie"


def color_from_name(name: str) -> PieceColor:
    color = {"red": PieceColor.RED, "blue": PieceColor.BLUE}.get(name.strip().lower())
    if color is None:
        raise ValueError(f"invalid color: {name!r}")
    return color


def square_index(col: int, row: int) -> int:
    return row * SIDE + col


def on_board(col: int, row: int) -> bool:
    return 0 <= col < SIDE and 0 <= row < SIDE


def str_to_square(s: str) -> int:
    """
    'a1' -> 0, 'b1' -> 1, ..., 'g7' -> 48.
    Row 1 is index 0..6, row 7 is index 42..48.
    """
    if len(s) != 2:
        raise ValueError(f"invalid square: {s!r}")
    col = ord(s[0]) - ord("a")
    row = ord(s[1]) - ord("1")
    if not on_board(col, row):
        raise ValueError(f"invalid square: {s!r}")
    return square_index(col, row)


def square_to_str(idx: int) -> str:
    if not (0 <= idx < NUM_SQUARES):
        raise ValueError(f"square out of range: {idx}")
    row, col = divmod(idx, SIDE)
    return chr(ord("a") + col) + chr(ord("1") + row)


@dataclass(frozen=True, slots=True)
class Move:
    """Transfer between two squares (a7-b6), or the pass move (-)."""

    from_sq: int
    to_sq: int

    @property
    def is_pass(self) -> bool:
        return self.from_sq == PASS_SQ

    @property
    def distance(self) -> int:
        if self.is_pass:
            return 0
        from_row, from_col = divmod(self.from_sq, SIDE)
        to_row, to_col = divmod(self.to_sq, SIDE)
        return max(abs(to_col - from_col), abs(to_row - from_row))

    @property
    def is_clone(self) -> bool:
        return self.distance == 1

    @property
    def is_jump(self) -> bool:
        return self.distance == 2

    def text(self) -> str:
        if self.is_pass:
            return "-"
        return square_to_str(self.from_sq) + "-" + square_to_str(self.to_sq)

    def __str__(self) -> str:
        return self.text()


PASS = Move(PASS_SQ, PASS_SQ)


def move_from_text(text: str) -> Optional[Move]:
    text = text.strip()
    if text == "-":
        return PASS
    if len(text) != 5 or text[2] != "-":
        return None

    try:
        from_sq = str_to_square(text[0:2])
        to_sq = str_to_square(text[3:5])
    except ValueError:
        return None

    return Move(from_sq, to_sq)
