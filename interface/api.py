"""FastAPI REST interface for the engine."""

import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator
from typing import Optional

from rival.config import CONFIG
from rival.core.board import ChessBoard
from rival.core.controller import SearchController
from rival.core.difficulty import DIFFICULTY_TABLE, Difficulty, config_for
from rival.errors import GameOverError

_log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=CONFIG.log_level)
    yield


app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0", lifespan=lifespan)

# One game per process; every search builds its own table.
controller = SearchController()
board = ChessBoard()
_board_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # UCI or SAN, e.g. "e2e4"


class SearchRequest(BaseModel):
    difficulty: str = CONFIG.search.default_difficulty
    play: bool = False

    @field_validator("difficulty")
    @classmethod
    def known_difficulty(cls, v: str) -> str:
        return Difficulty.parse(v).value


@app.get("/board")
def get_board():
    with _board_lock:
        return {
            "fen": board.get_fen(),
            "turn": board.turn_name(),
            "legal_moves": board.get_legal_moves(),
            "is_game_over": board.is_game_over(),
            "result": board.result() if board.is_game_over() else None,
        }


@app.get("/difficulties")
def list_difficulties():
    return {
        d.value: {
            "max_depth": cfg.max_depth,
            "time_budget_ms": cfg.time_budget_ms,
            "table_capacity": cfg.table_capacity,
            "quiescence": cfg.quiescence,
        }
        for d, cfg in DIFFICULTY_TABLE.items()
    }


@app.post("/position")
def set_position(req: FenRequest):
    with _board_lock:
        try:
            board.set_fen(req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
        return {"fen": board.get_fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _board_lock:
        move = board.parse_move(req.move)
        if move is None:
            raise HTTPException(status_code=400, detail=f"Illegal or malformed move: {req.move}")
        board.push(move)
        return {"fen": board.get_fen(), "move": move.uci()}


@app.post("/search")
def search_move(req: Optional[SearchRequest] = None):
    req = req or SearchRequest()
    with _board_lock:
        search_board = board.board.copy()

    try:
        result = controller.search(search_board, config_for(req.difficulty))
    except GameOverError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _log.info("search %s -> %s (depth %d, %d nodes)", req.difficulty, result.move.uci(),
              result.depth, result.stats.nodes)

    with _board_lock:
        if req.play and board.board.fen() == search_board.fen():
            board.push(result.move)
        fen = board.get_fen()

    return {
        "best_move": result.move.uci(),
        "score": result.score,
        "depth": result.depth,
        "pv": [m.uci() for m in result.pv],
        "nodes": result.stats.nodes,
        "difficulty": req.difficulty,
        "fen": fen,
    }


@app.post("/reset")
def reset_board():
    with _board_lock:
        board.reset()
        return {"fen": board.get_fen()}
