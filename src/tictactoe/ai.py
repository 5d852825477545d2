"""Exhaustive minimax with alpha-beta pruning and a difficulty-weighted policy."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple
import logging
import math
import random

from .board import Board, Mark, detect_winner, empty_cells, has_moves_left

logger = logging.getLogger(__name__)

WIN_SCORE = 10

# Process-wide source used when callers do not inject their own
_RNG = random.Random()


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def optimal_chance(self) -> float:
        """Probability that a single AI turn plays the minimax move."""
        return _OPTIMAL_CHANCE[self]


_OPTIMAL_CHANCE = {
    Difficulty.EASY: 0.3,
    Difficulty.MEDIUM: 0.75,
    Difficulty.HARD: 1.0,
}


# ---- scoring & search ----


def evaluate(board: Sequence[Mark], depth: int, player: Mark = Mark.AI) -> int:
    """Terminal-only score from ``player``'s point of view.

    Faster wins score higher and slower losses score less negative; anything
    without a completed line is 0.
    """
    winner = detect_winner(board)
    if winner is None:
        return 0
    if winner == player:
        return WIN_SCORE - depth
    return depth - WIN_SCORE


@contextmanager
def _tentative(board: Board, index: int, mark: Mark) -> Iterator[None]:
    board[index] = mark
    try:
        yield
    finally:
        board[index] = Mark.EMPTY


def minimax(
    board: Board,
    depth: int,
    is_maximizing: bool,
    alpha: float = -math.inf,
    beta: float = math.inf,
    player: Mark = Mark.AI,
) -> int:
    """Minimax value of ``board`` for ``player`` with alpha-beta pruning.

    ``board`` is probed in place; every tentative mark is removed again
    before returning, so the caller sees it unchanged.
    """
    score = evaluate(board, depth, player)
    if score != 0:
        return score
    if not has_moves_left(board):
        return 0

    if is_maximizing:
        best = -math.inf
        for i in empty_cells(board):
            with _tentative(board, i, player):
                value = minimax(board, depth + 1, False, alpha, beta, player)
            best = max(best, value)
            alpha = max(alpha, best)
            if beta <= alpha:
                break
    else:
        best = math.inf
        for i in empty_cells(board):
            with _tentative(board, i, player.opponent):
                value = minimax(board, depth + 1, True, alpha, beta, player)
            best = min(best, value)
            beta = min(beta, best)
            if beta <= alpha:
                break
    return int(best)


def score_moves(
    board: Sequence[Mark], player: Mark = Mark.AI
) -> List[Tuple[int, int]]:
    """(index, minimax value) for every empty cell, in index order."""
    scratch: Board = list(board)
    scored = []
    for i in empty_cells(scratch):
        with _tentative(scratch, i, player):
            scored.append((i, minimax(scratch, 0, False, player=player)))
    return scored


def find_best_move(board: Sequence[Mark], player: Mark = Mark.AI) -> int:
    """Index of the optimal move for ``player``, or -1 on a full board.

    Ties go to the lowest index.
    """
    best_value = -math.inf
    best_index = -1
    for i, value in score_moves(board, player):
        if value > best_value:
            best_value, best_index = value, i
    return best_index


def find_random_move(
    board: Sequence[Mark], rng: Optional[random.Random] = None
) -> int:
    cells = empty_cells(board)
    if not cells:
        return -1
    rng = rng if rng is not None else _RNG
    return cells[rng.randrange(len(cells))]


def choose_move(
    board: Sequence[Mark],
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
    player: Mark = Mark.AI,
) -> int:
    """Pick a move: optimal with the difficulty's probability, else random.

    One sample is drawn per call, so mistakes are independent per turn.
    """
    rng = rng if rng is not None else _RNG
    sample = rng.random()
    if sample <= difficulty.optimal_chance:
        index = find_best_move(board, player)
        logger.debug(
            "%s picked optimal move %d (sample=%.3f)", player.name, index, sample
        )
    else:
        index = find_random_move(board, rng)
        logger.debug(
            "%s picked random move %d (sample=%.3f)", player.name, index, sample
        )
    return index


# ---- player object ----


@dataclass
class MinimaxAI:
    """Computer opponent bound to one side, a difficulty and a random source.

    Used by ``TicTacToeGame.ai_move``:
      - MinimaxAI(player=Mark.AI, difficulty=Difficulty.HARD)
      - choose(board) -> cell index or -1
    """

    player: Mark = Mark.AI
    difficulty: Difficulty = Difficulty.HARD
    rng: Optional[random.Random] = field(default=None, repr=False)

    def choose(self, board: Sequence[Mark]) -> int:
        if not empty_cells(board):
            return -1
        return choose_move(board, self.difficulty, self.rng, self.player)
