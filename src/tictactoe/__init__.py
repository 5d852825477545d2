"""Tic-tac-toe package exposing game rules, the minimax AI, and the web application."""

from .ai import Difficulty, MinimaxAI, find_best_move, find_random_move, minimax
from .board import WINNING_LINES, Mark, detect_winner, has_moves_left
from .game import TicTacToeGame
from .ui import app

__all__ = [
    "Difficulty",
    "Mark",
    "MinimaxAI",
    "TicTacToeGame",
    "WINNING_LINES",
    "app",
    "detect_winner",
    "find_best_move",
    "find_random_move",
    "has_moves_left",
    "minimax",
]
