"""Incremental material + piece-square evaluation.

Scores are always from the engine's point of view: positive favours the side
the session plays. ``IncrementalEvaluator.evaluate`` turns the score before a
move into the score after it in constant time; ``evaluate_board`` rescans the
whole board and is only used to check and report.
"""

from typing import Mapping, Optional

import chess

from chess_ai.config import CONFIG, EvalConfig
from chess_ai.core.board import MoveRecord
from chess_ai.core.tables import (
    BASE_TABLES,
    PieceSquareTables,
    load_tables,
    material_weights,
    reverse_tables,
    square_to_cell,
    validate_tables,
)


class Perspective:
    """Tables and weights seen from one engine colour.

    ``own_tables`` score the engine's pieces, ``opponent_tables`` the
    opponent's. Built once per session and never changed.
    """

    def __init__(self, color: chess.Color, tables: PieceSquareTables = BASE_TABLES,
                 weights: Optional[Mapping[chess.PieceType, int]] = None):
        validate_tables(tables)
        self.color = color
        self.weights = dict(weights) if weights is not None else material_weights(CONFIG.eval.piece_values)
        # opponent tables take the opponent's orientation, not the engine's
        if color == chess.WHITE:
            self.own_tables = dict(tables)
            self.opponent_tables = reverse_tables(tables)
        else:
            self.own_tables = reverse_tables(tables)
            self.opponent_tables = dict(tables)

    @classmethod
    def from_config(cls, color: chess.Color, cfg: EvalConfig = None) -> "Perspective":
        cfg = cfg or CONFIG.eval
        tables = load_tables(cfg.positional_table_path) if cfg.positional_table_path else BASE_TABLES
        return cls(color, tables, material_weights(cfg.piece_values))

    def is_mine(self, color: chess.Color) -> bool:
        return color == self.color

    def material(self, piece: chess.PieceType) -> int:
        return self.weights[piece]

    def positional(self, piece: chess.PieceType, square: chess.Square, mine: bool) -> int:
        row, col = square_to_cell(square)
        tables = self.own_tables if mine else self.opponent_tables
        return tables[piece][row][col]

    def value(self, piece: chess.PieceType, square: chess.Square, mine: bool) -> int:
        return self.material(piece) + self.positional(piece, square, mine)


class IncrementalEvaluator:
    def __init__(self, perspective: Perspective, promotion_parity: Optional[bool] = None):
        self.perspective = perspective
        if promotion_parity is None:
            promotion_parity = CONFIG.eval.promotion_parity
        self.promotion_parity = promotion_parity

    def evaluate(self, move: MoveRecord, score: int) -> int:
        """Return the score after ``move`` given the score before it.

        Exactly one rule applies: capture, then promotion, then a quiet move.
        A promoted pawn is always scored as a queen.
        """
        p = self.perspective
        mine = p.is_mine(move.color)
        sign = 1 if mine else -1

        if move.captured is not None:
            return score + sign * p.value(move.captured, move.to_square, mine)

        if move.is_promotion:
            removed = p.value(move.piece, move.from_square, mine)
            if mine or not self.promotion_parity:
                added = p.value(chess.QUEEN, move.from_square, mine)
            else:
                # opponent branch reads the pawn table at the target square
                added = p.material(chess.QUEEN) + p.positional(move.piece, move.to_square, mine)
            return score + sign * (added - removed)

        delta = p.positional(move.piece, move.to_square, mine) - p.positional(move.piece, move.from_square, mine)
        return score + sign * delta


def evaluate_board(board: chess.Board, perspective: Perspective) -> int:
    """Full recompute: own material + position minus the opponent's."""
    score = 0
    for sq, piece in board.piece_map().items():
        mine = perspective.is_mine(piece.color)
        value = perspective.value(piece.piece_type, sq, mine)
        score += value if mine else -value
    return score
