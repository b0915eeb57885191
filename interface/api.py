"""FastAPI REST interface for a single game session."""

import threading

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional

from chess_ai.config import CONFIG
from chess_ai.core.errors import PreconditionError, SessionBusyError, SessionNotInitializedError
from chess_ai.core.utils import configure_logging
from chess_ai.session import SearchSession

configure_logging(CONFIG.log_level)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

session = SearchSession()
_session_lock = threading.Lock()

PIECE_TYPES = {chess.piece_name(pt): pt for pt in chess.PIECE_TYPES}


class InitRequest(BaseModel):
    color: str  # "w" / "b" / "white" / "black"
    fen: str = chess.STARTING_FEN


class MoveRequest(BaseModel):
    move: str  # UCI format e.g. "e2e4"


class PromotionRequest(BaseModel):
    square: str  # e.g. "e8"
    piece: str  # "queen", "rook", "bishop" or "knight"
    color: str
    move: Optional[str] = None


def _raise_http(e: Exception):
    if isinstance(e, (SessionNotInitializedError, SessionBusyError)):
        raise HTTPException(status_code=409, detail=str(e))
    raise HTTPException(status_code=400, detail=str(e))


@app.post("/init")
def init_session(req: InitRequest):
    with _session_lock:
        try:
            session.initialize(req.color, req.fen)
        except (PreconditionError, SessionBusyError, ValueError) as e:
            _raise_http(e)
        return {
            "fen": session.fen,
            "color": chess.COLOR_NAMES[session.color],
            "score": session.running_score,
        }


@app.get("/board")
def get_board():
    with _session_lock:
        if not session.initialized:
            raise HTTPException(status_code=409, detail="Session not initialized")
        board = session.board
        return {
            "fen": board.fen(),
            "turn": chess.COLOR_NAMES[board.turn],
            "legal_moves": [m.uci() for m in board.legal_moves()],
            "is_game_over": board.is_game_over(),
            "score": session.running_score,
        }


@app.post("/opponent-move")
def opponent_move(req: MoveRequest):
    with _session_lock:
        try:
            record = session.record_opponent_move(req.move)
        except (PreconditionError, SessionNotInitializedError, SessionBusyError) as e:
            _raise_http(e)
        return {"fen": session.fen, "move": record.uci(), "score": session.running_score}


@app.post("/promotion")
def promotion(req: PromotionRequest):
    with _session_lock:
        try:
            square = chess.parse_square(req.square)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid square: {req.square}")
        piece_type = PIECE_TYPES.get(req.piece.lower())
        if piece_type is None:
            raise HTTPException(status_code=400, detail=f"Invalid piece: {req.piece}")
        try:
            session.apply_promotion(square, piece_type, req.color, move=req.move)
        except (PreconditionError, SessionNotInitializedError, SessionBusyError, ValueError) as e:
            _raise_http(e)
        return {"fen": session.fen, "score": session.running_score}


@app.post("/ai-move")
def ai_move():
    with _session_lock:
        try:
            record = session.choose_own_move()
        except (PreconditionError, SessionNotInitializedError, SessionBusyError) as e:
            _raise_http(e)
        return {
            "move": record.uci() if record else None,
            "fen": session.fen,
            "score": session.running_score,
        }
