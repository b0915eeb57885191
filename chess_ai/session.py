"""Per-game state for the automated player.

A ``SearchSession`` owns one rules-engine board, the engine's colour, the
perspective tables derived from that colour and the running score of the real
game. The surrounding application feeds it the opponent's moves and asks it
for the engine's replies.
"""

import logging
import threading
from typing import Callable, Optional, Union

import chess

from chess_ai.config import CONFIG, EvalConfig
from chess_ai.core.board import ChessBoard, MoveLike, MoveRecord
from chess_ai.core.errors import NotYourTurnError, SessionBusyError, SessionNotInitializedError
from chess_ai.core.evaluator import IncrementalEvaluator, Perspective, evaluate_board
from chess_ai.core.search import SearchEngine

logger = logging.getLogger(__name__)

ColorLike = Union[chess.Color, str]

_COLOR_NAMES = {"w": chess.WHITE, "white": chess.WHITE, "b": chess.BLACK, "black": chess.BLACK}


def parse_color(color: ColorLike) -> chess.Color:
    if isinstance(color, bool):
        return color
    try:
        return _COLOR_NAMES[color.lower()]
    except (AttributeError, KeyError):
        raise ValueError(f"Unknown colour {color!r}; expected 'w', 'b', 'white' or 'black'") from None


class SearchSession:
    def __init__(self, depth: Optional[int] = None, eval_config: Optional[EvalConfig] = None):
        self.depth = depth if depth is not None else CONFIG.search.depth
        self.eval_config = eval_config or CONFIG.eval
        self.board = ChessBoard()
        self.last_search_value = None
        self._color: Optional[chess.Color] = None
        self._perspective: Optional[Perspective] = None
        self._evaluator: Optional[IncrementalEvaluator] = None
        self._running_score = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # -- state -----------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._color is not None

    def _require(self, operation: str):
        if not self.initialized:
            raise SessionNotInitializedError(operation)

    def _require_idle(self):
        if self.is_searching():
            raise SessionBusyError()

    @property
    def color(self) -> chess.Color:
        self._require("color")
        return self._color

    @property
    def perspective(self) -> Perspective:
        self._require("perspective")
        return self._perspective

    @property
    def running_score(self) -> int:
        self._require("running_score")
        return self._running_score

    @property
    def fen(self) -> str:
        self._require("fen")
        return self.board.fen()

    def full_score(self) -> int:
        """Rescan the board; equals the running score while only quiet moves were played."""
        self._require("full_score")
        return evaluate_board(self.board.board, self._perspective)

    # -- operations ------------------------------------------------------------

    def initialize(self, color: ColorLike, fen: str = chess.STARTING_FEN):
        self._require_idle()
        color = parse_color(color)
        perspective = Perspective.from_config(color, self.eval_config)
        evaluator = IncrementalEvaluator(perspective, self.eval_config.promotion_parity)
        self.board.load(fen)
        self._perspective = perspective
        self._evaluator = evaluator
        self._color = color
        self._running_score = 0
        self.last_search_value = None
        logger.debug("Session initialized as %s from %s", chess.COLOR_NAMES[color], fen)

    def record_opponent_move(self, move: MoveLike) -> MoveRecord:
        """Apply the opponent's move and update the running score."""
        self._require("record_opponent_move")
        self._require_idle()
        if self.board.turn == self._color:
            raise NotYourTurnError(f"it is the engine's turn ({chess.COLOR_NAMES[self._color]}) to move")
        record = self.board.apply_move(move)
        self._running_score = self._evaluator.evaluate(record, self._running_score)
        logger.debug("Opponent played %s, score %d", record.uci(), self._running_score)
        return record

    def choose_own_move(self) -> Optional[MoveRecord]:
        """Search, play the chosen move and return it. None when no move is legal."""
        self._require("choose_own_move")
        self._require_idle()
        self._stop_event.clear()
        return self._choose_own_move()

    def _choose_own_move(self) -> Optional[MoveRecord]:
        if self.board.turn != self._color:
            raise NotYourTurnError("it is the opponent's turn to move")
        engine = SearchEngine(self.board, self._evaluator, depth=self.depth, stop_event=self._stop_event)
        result = engine.best_move(self._running_score)
        self.last_search_value = result.value
        if result.move is None:
            logger.info("No legal moves for %s", chess.COLOR_NAMES[self._color])
            return None
        record = self.board.apply_move(result.move.move)
        if self.eval_config.running_score_from_search:
            self._running_score = result.value
        else:
            self._running_score = self._evaluator.evaluate(record, self._running_score)
        logger.debug("Engine played %s, score %d (search value %s)",
                     record.uci(), self._running_score, result.value)
        return record

    def apply_promotion(self, square: chess.Square, piece_type: chess.PieceType, color: ColorLike,
                        move: Optional[MoveLike] = None):
        """Realize a promotion choice by placing the piece directly.

        ``move``, when given, is the opponent's pawn move and is recorded first.
        python-chess keeps a move stack that no longer matches the board once a
        square is edited by hand, so the position is reloaded from its FEN.
        """
        self._require("apply_promotion")
        self._require_idle()
        if move is not None:
            self.record_opponent_move(move)
        self.board.remove_piece(square)
        self.board.put_piece(square, piece_type, parse_color(color))
        self.board.reload()
        logger.debug("Placed %s on %s", chess.piece_name(piece_type), chess.square_name(square))

    # -- background search -----------------------------------------------------

    def is_searching(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start_choose_own_move(self, callback: Callable[[Optional[MoveRecord], Optional[BaseException]], None]):
        """Run ``choose_own_move`` on a daemon thread and report through ``callback``."""
        self._require("start_choose_own_move")
        self._require_idle()
        self._stop_event.clear()

        def worker():
            try:
                move = self._choose_own_move()
            except Exception as e:
                logger.info("Background search ended: %s", e)
                callback(None, e)
                return
            callback(move, None)

        self._thread = threading.Thread(target=worker, daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None):
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
