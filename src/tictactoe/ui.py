"""FastAPI-powered web UI for playing tic-tac-toe against the computer."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .ai import Difficulty
from .game import InvalidMoveError, winning_line
from .scores import COOKIE_MAX_AGE, COOKIE_NAME, ScoreRecord, dump_record, load_record
from .session import GameSession

logger = logging.getLogger(__name__)


@dataclass
class ActiveGame:
    """A served GameSession plus the bookkeeping for its pending computer move."""

    session: GameSession
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, ActiveGame] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Play tic-tac-toe against the computer")


DEFAULT_DIFFICULTY = Difficulty.MEDIUM
AI_THINK_DELAY: float = 0.5  # seconds


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    difficulty: Difficulty = Field(
        default=DEFAULT_DIFFICULTY,
        description="Computer strength: easy, medium or hard",
    )


class DifficultyRequest(BaseModel):
    difficulty: Difficulty


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(difficulty: Difficulty, request: Request) -> Tuple[str, ActiveGame]:
    """Create a new game, restoring the tallies stored in the score cookie."""

    scores = load_record(request.cookies.get(COOKIE_NAME))
    session = GameSession(difficulty=difficulty, scores=scores)
    game_id = uuid.uuid4().hex
    active = ActiveGame(session=session)
    SESSIONS[game_id] = active
    logger.info("Created game %s at %s difficulty", game_id, difficulty.value)
    return game_id, active


def _get_session(game_id: str) -> ActiveGame:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    active = SESSIONS.get(game_id)
    if not active:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with active.lock:
        try:
            session = active.session
            if session.finished:
                return
            if session.current_side is not session.selector.player:
                return
            session.play_computer()
        finally:
            active.ai_pending = False


def _serialize_session(game_id: str, active: ActiveGame) -> Dict[str, object]:
    with active.lock:
        session = active.session
        line = winning_line(session.board)
        winner = session.outcome.winner
        state: Dict[str, object] = {
            "id": game_id,
            "cells": session.board.to_list(),
            "currentPlayer": session.current_side.value,
            "difficulty": session.difficulty.value,
            "outcome": session.outcome.value,
            "winner": winner.value if winner else None,
            "winningLine": list(line) if line else None,
            "scores": session.scores.model_dump(by_alias=True),
            "moveLog": list(session.move_log),
            "aiPending": active.ai_pending,
        }
        if session.last_move:
            state["lastMove"] = session.last_move
        return state


def _respond(game_id: str, active: ActiveGame, response: Response) -> Dict[str, object]:
    """Serialize the game and persist its tallies to the score cookie."""

    state = _serialize_session(game_id, active)
    # Encode the snapshot taken under the lock, not the live record.
    response.set_cookie(
        COOKIE_NAME,
        dump_record(ScoreRecord.model_validate(state["scores"])),
        max_age=COOKIE_MAX_AGE,
        path="/",
        samesite="strict",
    )
    return state


def _apply_player_move(
    game_id: str,
    active: ActiveGame,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with active.lock:
        session = active.session
        if active.ai_pending:
            raise HTTPException(status_code=400, detail="Computer is completing its move")

        try:
            session.play_human(cell_index)
        except InvalidMoveError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        should_schedule_ai = (
            not session.finished
            and session.current_side is session.selector.player
        )
        if should_schedule_ai:
            active.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(
    payload: NewGameRequest, request: Request, response: Response
) -> Dict[str, object]:
    game_id, active = _create_session(payload.difficulty, request)
    return _respond(game_id, active, response)


@app.get("/api/game/{game_id}")
def get_game(game_id: str, response: Response) -> Dict[str, object]:
    active = _get_session(game_id)
    return _respond(game_id, active, response)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str,
    payload: MoveRequest,
    background_tasks: BackgroundTasks,
    response: Response,
) -> Dict[str, object]:
    active = _get_session(game_id)
    _apply_player_move(game_id, active, payload.cell_index, background_tasks)
    return _respond(game_id, active, response)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str, response: Response) -> Dict[str, object]:
    active = _get_session(game_id)
    with active.lock:
        active.session.reset_game()
        active.ai_pending = False
    return _respond(game_id, active, response)


@app.post("/api/game/{game_id}/reset-score")
def reset_score(game_id: str, response: Response) -> Dict[str, object]:
    active = _get_session(game_id)
    with active.lock:
        active.session.reset_score()
        active.ai_pending = False
    return _respond(game_id, active, response)


@app.post("/api/game/{game_id}/difficulty")
def change_difficulty(
    game_id: str, payload: DifficultyRequest, response: Response
) -> Dict[str, object]:
    active = _get_session(game_id)
    with active.lock:
        active.session.set_difficulty(payload.difficulty)
        active.ai_pending = False
    return _respond(game_id, active, response)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem;
        background: radial-gradient(circle at top, #f2f5ff, #cfd8ff 70%);
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem;
        width: min(420px, 100%);
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        letter-spacing: 0.06em;
      }
      .controls {
        display: flex;
        gap: 0.6rem;
        justify-content: center;
        flex-wrap: wrap;
        margin-bottom: 1rem;
      }
      button,
      select {
        font-size: 1rem;
        padding: 0.5rem 0.9rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
        font-family: inherit;
      }
      #status {
        min-height: 1.5rem;
        font-weight: 600;
        margin-bottom: 1rem;
      }
      #status.winner {
        color: #1f8a4c;
      }
      #status.draw {
        color: #8a6d1f;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.5rem;
        margin: 0 auto 1.25rem;
        width: min(300px, 100%);
      }
      .cell {
        aspect-ratio: 1;
        border-radius: 12px;
        background: #eef1ff;
        font-size: 2.4rem;
        font-weight: 700;
        display: flex;
        align-items: center;
        justify-content: center;
        cursor: pointer;
        user-select: none;
      }
      .cell.taken {
        cursor: default;
      }
      .cell.x {
        color: #2d5bff;
      }
      .cell.o {
        color: #e0475b;
      }
      .cell.winning {
        background: #fff2b8;
      }
      .scores {
        display: flex;
        justify-content: space-around;
      }
      .scores strong {
        display: block;
        font-size: 1.4rem;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <div class=\"controls\">
        <select id=\"difficultySelect\">
          <option value=\"easy\">Easy</option>
          <option value=\"medium\" selected>Medium</option>
          <option value=\"hard\">Hard</option>
        </select>
        <button id=\"resetBtn\">New round</button>
        <button id=\"resetScoreBtn\">Reset score</button>
      </div>
      <div id=\"status\"></div>
      <div class=\"board\" id=\"board\"></div>
      <div class=\"scores\">
        <div>You<strong id=\"playerScore\">0</strong></div>
        <div>Draws<strong id=\"drawScore\">0</strong></div>
        <div>Computer<strong id=\"computerScore\">0</strong></div>
      </div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const difficultyEl = document.getElementById('difficultySelect');
      const resetBtn = document.getElementById('resetBtn');
      const resetScoreBtn = document.getElementById('resetScoreBtn');
      const scoreEls = {
        playerScore: document.getElementById('playerScore'),
        computerScore: document.getElementById('computerScore'),
        drawScore: document.getElementById('drawScore'),
      };
      let gameId = null;
      let gameState = null;
      let pollTimer = null;

      const cells = [];
      for (let i = 0; i < 9; i++) {
        const cell = document.createElement('div');
        cell.className = 'cell';
        cell.dataset.index = String(i);
        cell.addEventListener('click', () => handleCellClick(i));
        boardEl.appendChild(cell);
        cells.push(cell);
      }

      async function api(path, body) {
        const options = body === undefined
          ? { method: 'GET' }
          : { method: 'POST', headers: { 'Content-Type': 'application/json' }, body: JSON.stringify(body) };
        const response = await fetch(path, options);
        const payload = await response.json();
        if (!response.ok) {
          throw new Error(payload.detail || 'Request failed');
        }
        return payload;
      }

      function render() {
        if (!gameState) return;
        const line = gameState.winningLine || [];
        gameState.cells.forEach((value, index) => {
          const cell = cells[index];
          cell.textContent = value;
          cell.className = 'cell';
          if (value) cell.classList.add('taken', value.toLowerCase());
          if (line.includes(index)) cell.classList.add('winning');
        });
        for (const key of Object.keys(scoreEls)) {
          scoreEls[key].textContent = gameState.scores[key];
        }
        difficultyEl.value = gameState.difficulty;
        statusEl.className = '';
        if (gameState.outcome === 'player_win') {
          statusEl.textContent = 'You win!';
          statusEl.classList.add('winner');
        } else if (gameState.outcome === 'opponent_win') {
          statusEl.textContent = 'The computer wins.';
          statusEl.classList.add('winner');
        } else if (gameState.outcome === 'draw') {
          statusEl.textContent = 'Draw!';
          statusEl.classList.add('draw');
        } else if (gameState.currentPlayer === 'X') {
          statusEl.textContent = 'You are X, your move.';
        } else {
          statusEl.textContent = 'Computer (O) is thinking...';
        }
      }

      function schedulePoll() {
        clearTimeout(pollTimer);
        if (gameState && gameState.aiPending) {
          pollTimer = setTimeout(() => update(api(`/api/game/${gameId}`)), 250);
        }
      }

      async function update(request) {
        try {
          gameState = await request;
          render();
          schedulePoll();
        } catch (err) {
          statusEl.textContent = err.message;
          schedulePoll();
        }
      }

      function handleCellClick(index) {
        if (!gameState || gameState.outcome !== 'in_progress') return;
        if (gameState.aiPending || gameState.currentPlayer !== 'X') return;
        if (gameState.cells[index] !== '') return;
        update(api(`/api/game/${gameId}/move`, { cellIndex: index }));
      }

      resetBtn.addEventListener('click', () => update(api(`/api/game/${gameId}/reset`, {})));
      resetScoreBtn.addEventListener('click', () => update(api(`/api/game/${gameId}/reset-score`, {})));
      difficultyEl.addEventListener('change', () =>
        update(api(`/api/game/${gameId}/difficulty`, { difficulty: difficultyEl.value }))
      );

      (async () => {
        gameState = await api('/api/game', { difficulty: difficultyEl.value });
        gameId = gameState.id;
        render();
      })();
    </script>
  </body>
</html>
"""
