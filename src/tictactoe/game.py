"""Game session for 3x3 tic-tac-toe: turn order, placement rules and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
import logging
import random

from .ai import Difficulty, MinimaxAI
from .board import (
    NO_LINE,
    Board,
    Line,
    Mark,
    detect_winner,
    empty_cells,
    has_moves_left,
    new_board,
    winning_line,
)

logger = logging.getLogger(__name__)

SIDES: Tuple[Mark, ...] = (Mark.HUMAN, Mark.AI)


# ---------- Session status ----------


@dataclass(frozen=True)
class InProgress:
    turn: Mark


@dataclass(frozen=True)
class Over:
    # ``turn`` keeps whatever side was due to move before the final move
    turn: Mark
    winner: Optional[Mark] = None
    line: Line = NO_LINE


Status = Union[InProgress, Over]


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    """One human-versus-AI game.

    Refusals are reported through return values: ``place_move`` returns
    False and ``ai_move`` returns -1, and neither touches the board then.
    """

    starting_side: Mark = Mark.HUMAN
    _board: Board = field(default_factory=new_board, init=False, repr=False)
    status: Status = field(init=False)

    def __post_init__(self) -> None:
        self.reset(self.starting_side)

    # ---- API used by UI & AI ----

    def reset(self, starting_side: Mark = Mark.HUMAN) -> None:
        """Empty the board and hand the first move to ``starting_side``.

        Raises ValueError when ``starting_side`` is not HUMAN or AI.
        """
        if starting_side not in SIDES:
            raise ValueError(
                f"Starting side must be HUMAN or AI, not {starting_side!r}"
            )
        self.starting_side = starting_side
        self._board = new_board()
        self.status = InProgress(turn=starting_side)

    def can_place(self, index: int) -> bool:
        return (
            isinstance(self.status, InProgress)
            and 0 <= index < len(self._board)
            and self._board[index] == Mark.EMPTY
        )

    def place_move(self, index: int, side: Mark) -> bool:
        """Put ``side``'s mark on ``index`` and advance the game."""
        if side not in SIDES or not self.can_place(index):
            logger.debug("Rejected move %r at %r", side, index)
            return False

        side = Mark(side)
        self._board[index] = side
        self.status = self._resolve(side, self.status.turn)
        logger.debug("%s placed at %d", side.name, index)
        if isinstance(self.status, Over):
            if self.status.winner is None:
                logger.info("Game over: draw")
            else:
                logger.info(
                    "Game over: %s won on %s",
                    self.status.winner.name,
                    self.status.line,
                )
        return True

    def ai_move(
        self,
        difficulty: Difficulty = Difficulty.HARD,
        rng: Optional[random.Random] = None,
    ) -> int:
        """Let the computer play its turn; returns the cell index or -1."""
        if self.is_over or self.current_turn != Mark.AI:
            return -1
        index = MinimaxAI(player=Mark.AI, difficulty=difficulty, rng=rng).choose(
            self._board
        )
        if index >= 0:
            self.place_move(index, Mark.AI)
        return index

    def clone(self) -> "TicTacToeGame":
        g = TicTacToeGame(starting_side=self.starting_side)
        g._board = self._board.copy()
        g.status = self.status
        return g

    # ---- observers ----

    @property
    def board(self) -> Tuple[Mark, ...]:
        return tuple(self._board)

    @property
    def current_turn(self) -> Mark:
        return self.status.turn

    @property
    def winner(self) -> Optional[Mark]:
        return self.status.winner if isinstance(self.status, Over) else None

    @property
    def is_over(self) -> bool:
        return isinstance(self.status, Over)

    @property
    def winning_line(self) -> Line:
        return self.status.line if isinstance(self.status, Over) else NO_LINE

    def empty_cells(self) -> List[int]:
        return empty_cells(self._board)

    # ---- helpers ----

    def _resolve(self, mover: Mark, turn: Mark) -> Status:
        # The turn only flips while the game keeps going
        winner = detect_winner(self._board)
        if winner is not None:
            return Over(turn=turn, winner=winner, line=winning_line(self._board))
        if not has_moves_left(self._board):
            return Over(turn=turn)
        return InProgress(turn=mover.opponent)
