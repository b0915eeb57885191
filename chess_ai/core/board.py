"""Rules-engine adapter over python-chess.

The search never copies the position: it applies a move, recurses and undoes
the move on this single board. ``applied`` scopes that pairing so an exception
raised mid-search still restores the position.
"""

import enum
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

import chess

from chess_ai.core.errors import EmptyHistoryError, IllegalMoveError, InvalidPositionError


class SpecialFlag(enum.Enum):
    PROMOTION = "promotion"


@dataclass(frozen=True)
class MoveRecord:
    """A move as played, with everything the evaluator reads."""

    move: chess.Move
    from_square: chess.Square
    to_square: chess.Square
    piece: chess.PieceType
    color: chess.Color
    captured: Optional[chess.PieceType] = None
    special: Optional[SpecialFlag] = None

    @property
    def is_promotion(self) -> bool:
        return self.special is SpecialFlag.PROMOTION

    def uci(self) -> str:
        return self.move.uci()


MoveLike = Union[chess.Move, str]


class ChessBoard:
    def __init__(self, fen: str = None):
        """Initialize from FEN or the standard starting position."""
        self.board = chess.Board()
        self.move_history: List[MoveRecord] = []
        if fen:
            self.load(fen)

    def load(self, fen: str):
        """Replace the position with ``fen``. Clears the move history."""
        try:
            self.board.set_fen(fen)
        except ValueError as e:
            raise InvalidPositionError(f"Invalid FEN {fen!r}: {e}") from e
        self.move_history.clear()

    def fen(self) -> str:
        return self.board.fen()

    def reload(self):
        """Serialize and reload the position, dropping python-chess's move stack."""
        self.load(self.fen())

    @property
    def turn(self) -> chess.Color:
        return self.board.turn

    def legal_moves(self) -> List[chess.Move]:
        """Legal moves in python-chess generation order."""
        return list(self.board.legal_moves)

    def is_game_over(self) -> bool:
        return self.board.is_game_over()

    def _parse(self, move: MoveLike) -> chess.Move:
        if isinstance(move, chess.Move):
            return move
        try:
            return chess.Move.from_uci(move)
        except ValueError as e:
            raise IllegalMoveError(move, self.fen()) from e

    def describe(self, move: chess.Move) -> MoveRecord:
        """Build the record for a legal ``move`` before it is pushed."""
        board = self.board
        piece = board.piece_type_at(move.from_square)
        if board.is_en_passant(move):
            captured = chess.PAWN
        elif board.is_castling(move):
            captured = None
        else:
            captured = board.piece_type_at(move.to_square)
        return MoveRecord(
            move=move,
            from_square=move.from_square,
            to_square=move.to_square,
            piece=piece,
            color=board.turn,
            captured=captured,
            special=SpecialFlag.PROMOTION if move.promotion else None,
        )

    def apply_move(self, move: MoveLike) -> MoveRecord:
        """Push a legal move and return its record. Raises IllegalMoveError otherwise."""
        parsed = self._parse(move)
        if not self.board.is_legal(parsed):
            raise IllegalMoveError(move, self.fen())
        record = self.describe(parsed)
        self.board.push(parsed)
        self.move_history.append(record)
        return record

    def undo_move(self) -> MoveRecord:
        """Pop the last applied move."""
        if not self.move_history:
            raise EmptyHistoryError()
        self.board.pop()
        return self.move_history.pop()

    @contextmanager
    def applied(self, move: MoveLike) -> Iterator[MoveRecord]:
        record = self.apply_move(move)
        try:
            yield record
        finally:
            self.undo_move()

    def put_piece(self, square: chess.Square, piece_type: chess.PieceType, color: chess.Color):
        self.board.set_piece_at(square, chess.Piece(piece_type, color))

    def remove_piece(self, square: chess.Square) -> Optional[chess.Piece]:
        return self.board.remove_piece_at(square)

    def __str__(self) -> str:
        return str(self.board)
