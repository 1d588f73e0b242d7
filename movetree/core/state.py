from __future__ import annotations

from enum import Enum, IntEnum

BOARD_SIZE = 9


class Piece(IntEnum):
    X = 0
    O = 1
    EMPTY = 2

    @property
    def opponent(self) -> "Piece":
        if self == Piece.EMPTY:
            raise ValueError("Piece.EMPTY has no opponent.")
        return Piece.O if self == Piece.X else Piece.X

    @property
    def symbol(self) -> str:
        return {Piece.X: "X", Piece.O: "O", Piece.EMPTY: "."}[self]


class SlotState(IntEnum):
    """Slot contents relative to a viewpoint. Values are the 2-bit wire codes."""

    EMPTY = 0
    MINE = 1
    THEIRS = 2

    @property
    def char(self) -> str:
        return SLOT_CHARS[self]

    @staticmethod
    def from_char(char: str) -> "SlotState":
        return CHAR_SLOTS[char]


SLOT_CHARS = {SlotState.EMPTY: ".", SlotState.MINE: "M", SlotState.THEIRS: "O"}
CHAR_SLOTS = {char: state for state, char in SLOT_CHARS.items()}


class MatchResult(Enum):
    WON = "won"
    LOST = "lost"
    TIED = "tied"


class GameResult(Enum):
    ONGOING = "ongoing"
    X_WIN = "x_win"
    O_WIN = "o_win"
    DRAW = "draw"

    def result_for(self, piece: Piece) -> MatchResult:
        if self == GameResult.ONGOING:
            raise ValueError("The game has not finished yet.")
        if self == GameResult.DRAW:
            return MatchResult.TIED
        winner = Piece.X if self == GameResult.X_WIN else Piece.O
        return MatchResult.WON if piece == winner else MatchResult.LOST
