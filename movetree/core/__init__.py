"""Core board encoding and rules for the move-tree learner."""

from .errors import (
    CounterOverflowError,
    CorruptHeaderError,
    InvalidHashError,
    MalformedRecordError,
    MoveTreeError,
    SlotIndexError,
    TooManyChildrenError,
    TreeFormatError,
    TreeInvariantError,
    UnsupportedVersionError,
)
from .hashing import PerspectiveHash
from .rules import (
    WIN_LINES,
    evaluate_board,
    hash_for,
    initialize_board,
    legal_moves,
    place_piece,
)
from .state import BOARD_SIZE, GameResult, MatchResult, Piece, SlotState

__all__ = [
    "BOARD_SIZE",
    "GameResult",
    "MatchResult",
    "Piece",
    "SlotState",
    "PerspectiveHash",
    "WIN_LINES",
    "evaluate_board",
    "hash_for",
    "initialize_board",
    "legal_moves",
    "place_piece",
    "MoveTreeError",
    "CounterOverflowError",
    "InvalidHashError",
    "SlotIndexError",
    "TooManyChildrenError",
    "TreeFormatError",
    "CorruptHeaderError",
    "UnsupportedVersionError",
    "MalformedRecordError",
    "TreeInvariantError",
]
