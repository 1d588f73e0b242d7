from __future__ import annotations

from typing import List, Tuple

import numpy as np
from numpy.typing import NDArray

from .hashing import PerspectiveHash
from .state import BOARD_SIZE, GameResult, Piece, SlotState

BoardArray = NDArray[np.int8]

WIN_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def initialize_board() -> BoardArray:
    return np.full(BOARD_SIZE, Piece.EMPTY, dtype=np.int8)


def legal_moves(board: BoardArray) -> List[int]:
    return [int(i) for i in np.flatnonzero(board == Piece.EMPTY)]


def place_piece(board: BoardArray, index: int, piece: Piece) -> None:
    if not 0 <= index < BOARD_SIZE:
        raise ValueError(f"Move index {index} out of range.")
    if board[index] != Piece.EMPTY:
        raise ValueError(f"Slot {index} is already occupied.")
    board[index] = piece


def evaluate_board(board: BoardArray) -> GameResult:
    for piece in (Piece.X, Piece.O):
        for a, b, c in WIN_LINES:
            if board[a] == piece and board[b] == piece and board[c] == piece:
                return GameResult.X_WIN if piece == Piece.X else GameResult.O_WIN
    if not np.any(board == Piece.EMPTY):
        return GameResult.DRAW
    return GameResult.ONGOING


def hash_for(board: BoardArray, viewpoint: Piece) -> PerspectiveHash:
    """Encode ``board`` from ``viewpoint``'s side."""
    codes = np.full(BOARD_SIZE, SlotState.EMPTY, dtype=np.int8)
    codes[board == viewpoint] = SlotState.MINE
    codes[board == viewpoint.opponent] = SlotState.THEIRS
    return PerspectiveHash.from_codes(viewpoint, codes)
