"""Core engine components: rules-engine adapter, tables, evaluator and search."""

from .board import ChessBoard, MoveRecord, SpecialFlag
from .evaluator import IncrementalEvaluator, Perspective, evaluate_board
from .search import SearchEngine, SearchResult
