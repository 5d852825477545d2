"""Unit tests for tic-tac-toe session rules."""

import random

import pytest

from tictactoe.ai import Difficulty
from tictactoe.board import NO_LINE, WINNING_LINES, Mark, detect_winner, new_board
from tictactoe.game import InProgress, Over, TicTacToeGame

H, A, E = Mark.HUMAN, Mark.AI, Mark.EMPTY


def test_initial_state():
    game = TicTacToeGame()
    assert game.board == tuple([E] * 9)
    assert game.current_turn == H
    assert game.winner is None
    assert not game.is_over
    assert game.winning_line == NO_LINE


def test_reset_clears_board_and_sets_starting_side():
    game = TicTacToeGame()
    game.place_move(0, H)
    game.place_move(4, A)
    game.reset(A)
    assert game.board == tuple([E] * 9)
    assert game.current_turn == A
    assert game.status == InProgress(turn=A)


def test_reset_rejects_empty_side():
    with pytest.raises(ValueError):
        TicTacToeGame().reset(E)


def test_can_place_bounds_and_occupancy():
    game = TicTacToeGame()
    assert game.can_place(0)
    assert game.can_place(8)
    assert not game.can_place(-1)
    assert not game.can_place(9)
    game.place_move(3, H)
    assert not game.can_place(3)


def test_place_move_switches_turn():
    game = TicTacToeGame()
    assert game.place_move(4, H)
    assert game.board[4] == H
    assert game.current_turn == A
    assert game.place_move(0, A)
    assert game.current_turn == H


def test_rejected_move_has_no_side_effects():
    game = TicTacToeGame()
    game.place_move(4, H)
    before_board, before_turn = game.board, game.current_turn

    assert not game.place_move(4, A)
    assert not game.place_move(42, A)
    assert not game.place_move(0, E)
    assert game.board == before_board
    assert game.current_turn == before_turn


def test_win_sets_winner_line_and_keeps_turn():
    game = TicTacToeGame()
    for index, side in [(0, H), (3, A), (1, H), (4, A), (2, H)]:
        assert game.place_move(index, side)
    assert game.is_over
    assert game.winner == H
    assert game.winning_line == (0, 1, 2)
    assert game.current_turn == H
    assert game.status == Over(turn=H, winner=H, line=(0, 1, 2))

    assert not game.place_move(5, A)
    assert game.current_turn == H


def test_out_of_turn_winning_move_keeps_turn():
    game = TicTacToeGame()
    for index, side in [(0, H), (3, A), (1, H), (4, A)]:
        assert game.place_move(index, side)
    assert game.current_turn == H

    assert game.place_move(5, A)
    assert game.winner == A
    assert game.winning_line == (3, 4, 5)
    assert game.current_turn == H
    assert game.status == Over(turn=H, winner=A, line=(3, 4, 5))


def test_out_of_turn_drawing_move_keeps_turn():
    game = TicTacToeGame()
    moves = [(0, H), (1, A), (2, H), (4, A), (3, H), (5, A), (7, H), (6, A)]
    for index, side in moves:
        assert game.place_move(index, side)
    assert game.current_turn == H

    assert game.place_move(8, A)
    assert game.is_over
    assert game.winner is None
    assert game.current_turn == H


def test_full_board_without_line_is_draw():
    game = TicTacToeGame()
    # X O X / X O O / O X _  -> last move X at 8 completes no line
    moves = [(0, H), (1, A), (2, H), (4, A), (3, H), (5, A), (7, H), (6, A)]
    for index, side in moves:
        assert game.place_move(index, side)
    assert not game.is_over

    assert game.place_move(8, H)
    assert game.is_over
    assert game.winner is None
    assert game.winning_line == NO_LINE


def test_winning_move_on_last_cell_is_a_win_not_a_draw():
    game = TicTacToeGame()
    moves = [(0, H), (1, A), (2, H), (5, A), (3, H), (6, A), (4, H), (7, A)]
    for index, side in moves:
        assert game.place_move(index, side)
    assert not game.is_over

    assert game.place_move(8, H)
    assert game.is_over
    assert game.winner == H
    assert game.winning_line == (0, 4, 8)


def test_double_line_reports_first_line_in_table_order():
    game = TicTacToeGame()
    # X completes row 0 and column 0 with its final move at 0
    moves = [(1, H), (4, A), (2, H), (5, A), (3, H), (7, A), (6, H), (8, A)]
    for index, side in moves:
        assert game.place_move(index, side)
    assert game.place_move(0, H)
    assert game.winner == H
    assert game.winning_line == (0, 1, 2)


def test_ai_move_refused_on_human_turn():
    game = TicTacToeGame()
    assert game.ai_move(Difficulty.HARD) == -1
    assert game.board == tuple([E] * 9)
    assert game.current_turn == H


def test_ai_move_refused_when_over():
    game = TicTacToeGame()
    for index, side in [(0, A), (3, H), (1, A), (4, H), (2, A)]:
        game.place_move(index, side)
    assert game.is_over
    before = game.board
    assert game.ai_move() == -1
    assert game.board == before


def test_ai_move_places_ai_mark():
    game = TicTacToeGame(starting_side=A)
    index = game.ai_move(Difficulty.HARD)
    assert 0 <= index < 9
    assert game.board[index] == A
    assert game.current_turn == H


def test_clone_is_independent():
    game = TicTacToeGame()
    game.place_move(4, H)
    copy = game.clone()
    copy.place_move(0, A)
    assert game.board[0] == E
    assert copy.board[0] == A
    assert game.current_turn == A


def _random_playout(rng):
    game = TicTacToeGame(starting_side=rng.choice([H, A]))
    while True:
        index = rng.randrange(-1, 10)
        side = rng.choice([H, A])
        board, turn, over = game.board, game.current_turn, game.is_over
        allowed = game.can_place(index)
        accepted = game.place_move(index, side)
        yield board, turn, over, index, side, allowed, accepted, game
        if game.is_over and rng.random() < 0.3:
            return


def test_placement_properties_on_random_play():
    rng = random.Random(1234)
    for _ in range(300):
        for before, turn, was_over, index, side, allowed, accepted, game in (
            _random_playout(rng)
        ):
            assert accepted == allowed
            if was_over:
                assert not accepted
            if not accepted:
                assert game.board == before
                assert game.current_turn == turn
                continue
            diff = [i for i in range(9) if before[i] != game.board[i]]
            assert diff == [index]
            assert game.board[index] == side
            if game.is_over:
                assert game.current_turn == turn
            else:
                assert game.current_turn == side.opponent


def test_turn_frozen_once_over():
    rng = random.Random(99)
    for _ in range(200):
        game = TicTacToeGame()
        while not game.is_over:
            game.place_move(rng.choice(game.empty_cells()), game.current_turn)
        turn = game.current_turn
        for index in range(9):
            game.place_move(index, turn.opponent)
        assert game.current_turn == turn


def test_session_winner_matches_detection():
    rng = random.Random(7)
    for _ in range(200):
        game = TicTacToeGame()
        while not game.is_over:
            game.place_move(rng.choice(game.empty_cells()), game.current_turn)
        assert game.winner == detect_winner(list(game.board))
        if game.winner is not None:
            assert game.winning_line in WINNING_LINES
            assert all(game.board[i] == game.winner for i in game.winning_line)
        else:
            assert E not in game.board


def test_new_board_is_fresh_list():
    a, b = new_board(), new_board()
    a[0] = H
    assert b[0] == E
