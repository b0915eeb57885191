"""Fixed-depth minimax with alpha-beta pruning.

The search walks one shared ``ChessBoard``: every candidate is applied,
searched and undone before the next sibling is tried, so at any moment the
board carries exactly the moves on the current path. Leaf scores are the
running score accumulated by the incremental evaluator along that path; no
leaf rescans the board.
"""

import logging
import threading
import time
from typing import NamedTuple, Optional

from chess_ai.config import CONFIG
from chess_ai.core.board import ChessBoard, MoveRecord
from chess_ai.core.errors import SearchCancelled, SearchInvariantError
from chess_ai.core.evaluator import IncrementalEvaluator
from chess_ai.core.utils import format_info

logger = logging.getLogger(__name__)

INF = float("inf")


class SearchResult(NamedTuple):
    move: Optional[MoveRecord]
    value: float


class SearchEngine:
    def __init__(self, board: ChessBoard, evaluator: IncrementalEvaluator, depth: Optional[int] = None,
                 stop_event: Optional[threading.Event] = None):
        self.board = board
        self.evaluator = evaluator
        self.max_depth = depth if depth is not None else CONFIG.search.depth
        self.stop_event = stop_event or threading.Event()
        self.nodes = 0

    def best_move(self, score: int) -> SearchResult:
        """Root call: engine to move, full window, configured depth."""
        self.nodes = 0
        start_time = time.time()
        result = self.search(self.max_depth, score, True, -INF, INF)
        elapsed = time.time() - start_time
        pv = [result.move] if result.move else []
        logger.info(format_info(self.max_depth, result.value, self.nodes, elapsed, pv))
        return result

    def search(self, depth: int, score: int, maximizing: bool,
               alpha: float = -INF, beta: float = INF) -> SearchResult:
        """Return the best move at this node and its minimax value.

        ``score`` is the running evaluation entering the node. Ties keep the
        first move in generation order.
        """
        if self.stop_event.is_set():
            raise SearchCancelled()
        self.nodes += 1

        moves = self.board.legal_moves()
        if depth == 0 or not moves:
            return SearchResult(None, score)

        best_move = None
        best_value = -INF if maximizing else INF

        for move in moves:
            with self.board.applied(move) as record:
                new_score = self.evaluator.evaluate(record, score)
                _, child_value = self.search(depth - 1, new_score, not maximizing, alpha, beta)

            if maximizing:
                if child_value > best_value:
                    best_value = child_value
                    best_move = record
                alpha = max(alpha, child_value)
            else:
                if child_value < best_value:
                    best_value = child_value
                    best_move = record
                beta = min(beta, child_value)

            if beta <= alpha:
                break

        if best_move is None:
            raise SearchInvariantError(f"no move selected among {len(moves)} candidates at depth {depth}")
        return SearchResult(best_move, best_value)

    def minimax(self, depth: int, score: int, maximizing: bool) -> SearchResult:
        """Same traversal as ``search`` without pruning."""
        self.nodes += 1
        moves = self.board.legal_moves()
        if depth == 0 or not moves:
            return SearchResult(None, score)

        best_move = None
        best_value = -INF if maximizing else INF
        for move in moves:
            with self.board.applied(move) as record:
                _, child_value = self.minimax(depth - 1, self.evaluator.evaluate(record, score), not maximizing)
            if (maximizing and child_value > best_value) or (not maximizing and child_value < best_value):
                best_value = child_value
                best_move = record
        return SearchResult(best_move, best_value)
