"""Piece-square tables and material weights.

Base tables are authored for White: row 0 is rank 8 and row 7 is rank 1,
column 0 is the a-file. They are tuples so no session can mutate them; the
per-colour copies a session needs come from ``reverse_tables``.
"""

import tomllib
from typing import Dict, Mapping, Sequence, Tuple

import chess

from chess_ai.core.errors import InvalidTablesError

Grid = Tuple[Tuple[int, ...], ...]
PieceSquareTables = Mapping[chess.PieceType, Grid]

BOARD_SIZE = 8


def _grid(rows: Sequence[Sequence[int]]) -> Grid:
    return tuple(tuple(row) for row in rows)


# Sunfish tables.
BASE_TABLES: Dict[chess.PieceType, Grid] = {
    chess.PAWN: _grid([
        [100, 100, 100, 100, 105, 100, 100, 100],
        [78, 83, 86, 73, 102, 82, 85, 90],
        [7, 29, 21, 44, 40, 31, 44, 7],
        [-17, 16, -2, 15, 14, 0, 15, -13],
        [-26, 3, 10, 9, 6, 1, 0, -23],
        [-22, 9, 5, -11, -10, -2, 3, -19],
        [-31, 8, -7, -37, -36, -14, 3, -31],
        [0, 0, 0, 0, 0, 0, 0, 0],
    ]),
    chess.KNIGHT: _grid([
        [-66, -53, -75, -75, -10, -55, -58, -70],
        [-3, -6, 100, -36, 4, 62, -4, -14],
        [10, 67, 1, 74, 73, 27, 62, -2],
        [24, 24, 45, 37, 33, 41, 25, 17],
        [-1, 5, 31, 21, 22, 35, 2, 0],
        [-18, 10, 13, 22, 18, 15, 11, -14],
        [-23, -15, 2, 0, 2, 0, -23, -20],
        [-74, -23, -26, -24, -19, -35, -22, -69],
    ]),
    chess.BISHOP: _grid([
        [-59, -78, -82, -76, -23, -107, -37, -50],
        [-11, 20, 35, -42, -39, 31, 2, -22],
        [-9, 39, -32, 41, 52, -10, 28, -14],
        [25, 17, 20, 34, 26, 25, 15, 10],
        [13, 10, 17, 23, 17, 16, 0, 7],
        [14, 25, 24, 15, 8, 25, 20, 15],
        [19, 20, 11, 6, 7, 6, 20, 16],
        [-7, 2, -15, -12, -14, -15, -10, -10],
    ]),
    chess.ROOK: _grid([
        [35, 29, 33, 4, 37, 33, 56, 50],
        [55, 29, 56, 67, 55, 62, 34, 60],
        [19, 35, 28, 33, 45, 27, 25, 15],
        [0, 5, 16, 13, 18, -4, -9, -6],
        [-28, -35, -16, -21, -13, -29, -46, -30],
        [-42, -28, -42, -25, -25, -35, -26, -46],
        [-53, -38, -31, -26, -29, -43, -44, -53],
        [-30, -24, -18, 5, -2, -18, -31, -32],
    ]),
    chess.QUEEN: _grid([
        [6, 1, -8, -104, 69, 24, 88, 26],
        [14, 32, 60, -10, 20, 76, 57, 24],
        [-2, 43, 32, 60, 72, 63, 43, 2],
        [1, -16, 22, 17, 25, 20, -13, -6],
        [-14, -15, -2, -5, -1, -10, -20, -22],
        [-30, -6, -13, -11, -16, -11, -16, -27],
        [-36, -18, 0, -19, -15, -15, -21, -38],
        [-39, -30, -31, -13, -31, -36, -34, -42],
    ]),
    chess.KING: _grid([
        [4, 54, 47, -99, -99, 60, 83, -62],
        [-32, 10, 55, 56, 56, 55, 10, 3],
        [-62, 12, -57, 44, -67, 28, 37, -31],
        [-55, 50, 11, -4, -19, 13, 0, -49],
        [-55, -43, -52, -28, -51, -47, -8, -50],
        [-47, -42, -43, -79, -64, -32, -29, -32],
        [-4, 3, -14, -50, -57, -18, 13, 4],
        [17, 30, -3, -14, 6, -1, 40, 18],
    ]),
}


def square_to_cell(square: chess.Square) -> Tuple[int, int]:
    """Map a python-chess square to (row, column) in table orientation."""
    return BOARD_SIZE - 1 - chess.square_rank(square), chess.square_file(square)


def reverse_tables(tables: PieceSquareTables) -> Dict[chess.PieceType, Grid]:
    """Return a copy of ``tables`` with every grid's row order reversed."""
    return {pt: tuple(tuple(row) for row in reversed(grid)) for pt, grid in tables.items()}


def validate_tables(tables: PieceSquareTables):
    """Raise InvalidTablesError unless every piece type has an 8x8 integer grid."""
    for pt in chess.PIECE_TYPES:
        if pt not in tables:
            raise InvalidTablesError(f"missing table for {chess.piece_name(pt)}")
        grid = tables[pt]
        if len(grid) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in grid):
            raise InvalidTablesError(f"{chess.piece_name(pt)} table is not 8x8")
        if not all(isinstance(v, int) and not isinstance(v, bool) for row in grid for v in row):
            raise InvalidTablesError(f"{chess.piece_name(pt)} table holds non-integer weights")


def load_tables(path: str) -> Dict[chess.PieceType, Grid]:
    """Read a ``[tables]`` section keyed by piece name (pawn, knight, ...) from TOML."""
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise InvalidTablesError(f"cannot read tables from {path}: {e}") from e
    section = raw.get("tables", {})
    names = {chess.piece_name(pt): pt for pt in chess.PIECE_TYPES}
    unknown = set(section) - set(names)
    if unknown:
        raise InvalidTablesError(f"unknown piece names in {path}: {sorted(unknown)}")
    tables = {names[name]: _grid(rows) for name, rows in section.items()}
    validate_tables(tables)
    return tables


def material_weights(piece_values: Mapping[str, int]) -> Dict[chess.PieceType, int]:
    """Translate config weights keyed by upper-case piece name to piece types."""
    weights = {}
    for pt in chess.PIECE_TYPES:
        name = chess.piece_name(pt).upper()
        if name not in piece_values:
            raise InvalidTablesError(f"missing material weight for {name}")
        weights[pt] = int(piece_values[name])
    return weights
