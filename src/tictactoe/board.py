"""Cell marks, the winning-lines table and pure win/draw detection."""

from __future__ import annotations

from enum import IntEnum
from typing import List, Optional, Sequence, Tuple


class Mark(IntEnum):
    """Occupant of a single cell."""

    EMPTY = 0
    HUMAN = 1
    AI = 2

    @property
    def opponent(self) -> "Mark":
        if self is Mark.HUMAN:
            return Mark.AI
        if self is Mark.AI:
            return Mark.HUMAN
        raise ValueError("EMPTY has no opponent")


Board = List[Mark]
Line = Tuple[int, int, int]

BOARD_SIZE = 9

WINNING_LINES: Tuple[Line, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

# Reported as the winning line while the game runs or after a draw
NO_LINE: Line = (-1, -1, -1)


def new_board() -> Board:
    return [Mark.EMPTY] * BOARD_SIZE


def winning_line(board: Sequence[Mark]) -> Line:
    """First completed line in table order, or ``NO_LINE``."""
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != Mark.EMPTY and v == board[b] == board[c]:
            return (a, b, c)
    return NO_LINE


def detect_winner(board: Sequence[Mark]) -> Optional[Mark]:
    """Owner of the first completed line, or None.

    Works on any 9-cell sequence, so search can call it on hypothetical
    boards as well as on the live session.
    """
    a, _, _ = winning_line(board)
    if a < 0:
        return None
    return Mark(board[a])


def has_moves_left(board: Sequence[Mark]) -> bool:
    return any(c == Mark.EMPTY for c in board)


def empty_cells(board: Sequence[Mark]) -> List[int]:
    return [i for i, c in enumerate(board) if c == Mark.EMPTY]
