"""FastAPI JSON interface for playing tic-tac-toe against the computer."""

from __future__ import annotations

import logging
import random
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from .ai import Difficulty
from .board import Mark
from .game import TicTacToeGame

logger = logging.getLogger(__name__)

MARK_GLYPHS: Dict[Mark, str] = {Mark.EMPTY: "", Mark.HUMAN: "X", Mark.AI: "O"}
SIDE_NAMES: Dict[Mark, str] = {Mark.HUMAN: "human", Mark.AI: "ai"}

FirstPlayer = Literal["human", "ai"]


@dataclass
class GameSession:
    """Container for an active game and the settings of its AI opponent."""

    game: TicTacToeGame
    difficulty: Difficulty = Difficulty.HARD
    rng: Optional[random.Random] = field(default=None, repr=False)
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="Tic-Tac-Toe", description="Play 3x3 tic-tac-toe against a minimax AI"
)


class NewGameRequest(BaseModel):
    """Request payload for starting (or restarting) a game."""

    model_config = ConfigDict(populate_by_name=True)

    difficulty: Difficulty = Field(
        default=Difficulty.HARD,
        description="Chance that the AI plays the optimal move each turn",
    )
    first_player: FirstPlayer = Field(default="human", alias="firstPlayer")


class ResetRequest(BaseModel):
    """Restart payload; omitted fields keep the session's current settings."""

    model_config = ConfigDict(populate_by_name=True)

    difficulty: Optional[Difficulty] = None
    first_player: Optional[FirstPlayer] = Field(default=None, alias="firstPlayer")


class DifficultyRequest(BaseModel):
    difficulty: Difficulty


class MoveRequest(BaseModel):
    """Request payload for submitting a human move."""

    index: int = Field(ge=0, le=8)


def _starting_side(first_player: FirstPlayer) -> Mark:
    return Mark.AI if first_player == "ai" else Mark.HUMAN


def _create_session(
    difficulty: Difficulty, first_player: FirstPlayer
) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    game = TicTacToeGame(starting_side=_starting_side(first_player))
    session = GameSession(game=game, difficulty=difficulty)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created game %s (difficulty=%s, first=%s)",
        session_id,
        difficulty.value,
        first_player,
    )
    with session.lock:
        _run_ai_turn(session)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(session: GameSession) -> None:
    # Caller holds session.lock
    game = session.game
    if game.is_over or game.current_turn != Mark.AI:
        return
    index = game.ai_move(session.difficulty, session.rng)
    if index >= 0:
        session.move_log.append({"player": "ai", "index": index})


def _status(game: TicTacToeGame) -> str:
    if not game.is_over:
        return f"{SIDE_NAMES[game.current_turn]}-turn"
    if game.winner is None:
        return "draw"
    return f"{SIDE_NAMES[game.winner]}-won"


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        state: Dict[str, object] = {
            "id": game_id,
            "board": [MARK_GLYPHS[c] for c in game.board],
            "currentPlayer": SIDE_NAMES[game.current_turn],
            "winner": SIDE_NAMES[game.winner] if game.winner is not None else None,
            "over": game.is_over,
            "winningLine": list(game.winning_line),
            "status": _status(game),
            "difficulty": session.difficulty.value,
            "availableMoves": game.empty_cells() if not game.is_over else [],
            "moveLog": list(session.move_log),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(session: GameSession, index: int) -> None:
    with session.lock:
        game = session.game
        if game.is_over:
            raise HTTPException(status_code=400, detail="Game already finished")
        if game.current_turn != Mark.HUMAN:
            raise HTTPException(status_code=400, detail="It is not your turn")
        if not game.place_move(index, Mark.HUMAN):
            raise HTTPException(status_code=400, detail="Cell is already occupied")

        session.move_log.append({"player": "human", "index": index})
        _run_ai_turn(session)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.difficulty, request.first_player)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(session, request.index)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(
    game_id: str, request: Optional[ResetRequest] = None
) -> Dict[str, object]:
    session = _get_session(game_id)
    request = request or ResetRequest()
    with session.lock:
        if request.difficulty is not None:
            session.difficulty = request.difficulty
        starting_side = session.game.starting_side
        if request.first_player is not None:
            starting_side = _starting_side(request.first_player)
        session.game.reset(starting_side)
        session.move_log.clear()
        _run_ai_turn(session)
    return _serialize_session(game_id, session)


@app.put("/api/game/{game_id}/difficulty")
def set_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.difficulty = request.difficulty
    return _serialize_session(game_id, session)
