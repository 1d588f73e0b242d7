from __future__ import annotations

from typing import Iterable, Optional, Union

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidHashError, SlotIndexError
from .state import BOARD_SIZE, CHAR_SLOTS, SLOT_CHARS, Piece, SlotState

SlotArray = NDArray[np.int8]
SlotsLike = Union[str, Iterable[Union[SlotState, str, int]]]

_VALID_CODES = frozenset(int(state) for state in SlotState)


class PerspectiveHash:
    """A board position seen from one piece's point of view.

    Slots hold ``SlotState`` codes (mine / theirs / empty) instead of absolute
    pieces, so the same layout hashes differently for ``X`` and ``O``.
    """

    __slots__ = ("_slots", "viewpoint", "opponent")
    __hash__ = None  # mutable through set_slot

    def __init__(self, viewpoint: Piece, slots: Optional[SlotsLike] = None) -> None:
        viewpoint = Piece(viewpoint)
        if viewpoint == Piece.EMPTY:
            raise InvalidHashError("The viewpoint piece must not be Piece.EMPTY.")
        self.viewpoint: Piece = viewpoint
        self.opponent: Piece = viewpoint.opponent
        if slots is None:
            self._slots: SlotArray = np.full(BOARD_SIZE, SlotState.EMPTY, dtype=np.int8)
        else:
            self._slots = _parse_slots(slots)

    # ------------------------------------------------------------------
    @classmethod
    def from_codes(cls, viewpoint: Piece, codes: SlotArray) -> "PerspectiveHash":
        return cls(viewpoint, [int(code) for code in codes])

    def copy(self) -> "PerspectiveHash":
        clone = PerspectiveHash.__new__(PerspectiveHash)
        clone.viewpoint = self.viewpoint
        clone.opponent = self.opponent
        clone._slots = self._slots.copy()
        return clone

    @property
    def codes(self) -> SlotArray:
        """Read-only view of the raw slot codes."""
        view = self._slots.view()
        view.flags.writeable = False
        return view

    # ------------------------------------------------------------------
    def set_slot(self, piece: Piece, index: int, allow_overwrite: bool = False) -> None:
        index = self._check_index(index)
        if self._slots[index] != SlotState.EMPTY and not allow_overwrite:
            raise InvalidHashError(
                f"Attempted to place {Piece(piece).name} at index {index}, but the slot is "
                f"occupied and allow_overwrite is False. Hash = {self}"
            )
        self._slots[index] = self._state_for(Piece(piece))

    def slot_state(self, index: int) -> SlotState:
        return SlotState(int(self._slots[self._check_index(index)]))

    def get_slot(self, index: int) -> Piece:
        state = self.slot_state(index)
        if state == SlotState.MINE:
            return self.viewpoint
        if state == SlotState.THEIRS:
            return self.opponent
        return Piece.EMPTY

    def is_mine(self, index: int) -> bool:
        return self.slot_state(index) == SlotState.MINE

    def is_empty(self, index: int) -> bool:
        return self.slot_state(index) == SlotState.EMPTY

    def empty_count(self) -> int:
        return int(np.count_nonzero(self._slots == SlotState.EMPTY))

    def to_canonical_string(self) -> str:
        return "".join(SLOT_CHARS[SlotState(int(code))] for code in self._slots)

    # ------------------------------------------------------------------
    def _state_for(self, piece: Piece) -> SlotState:
        if piece == self.viewpoint:
            return SlotState.MINE
        if piece == self.opponent:
            return SlotState.THEIRS
        return SlotState.EMPTY

    @staticmethod
    def _check_index(index: int) -> int:
        if not 0 <= index < BOARD_SIZE:
            raise SlotIndexError(f"index must be between 0 and {BOARD_SIZE} (exclusive), got {index}")
        return int(index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PerspectiveHash):
            return NotImplemented
        return self.viewpoint == other.viewpoint and bool(np.array_equal(self._slots, other._slots))

    def __str__(self) -> str:
        return self.to_canonical_string()

    def __repr__(self) -> str:
        return f"PerspectiveHash({self.viewpoint.name}, {self.to_canonical_string()!r})"


def _parse_slots(slots: SlotsLike) -> SlotArray:
    values = list(slots)
    if len(values) != BOARD_SIZE:
        raise InvalidHashError(f"A hash must have {BOARD_SIZE} slots, got {len(values)}.")

    codes = np.empty(BOARD_SIZE, dtype=np.int8)
    for i, value in enumerate(values):
        if isinstance(value, str):
            if value not in CHAR_SLOTS:
                raise InvalidHashError(f"Invalid slot character {value!r} at index {i}.")
            codes[i] = CHAR_SLOTS[value]
        elif isinstance(value, (int, np.integer)) and int(value) in _VALID_CODES:
            codes[i] = int(value)
        else:
            raise InvalidHashError(f"Invalid slot value {value!r} at index {i}.")
    return codes
