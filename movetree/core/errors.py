from __future__ import annotations

from typing import Tuple


class MoveTreeError(Exception):
    pass


class InvalidHashError(MoveTreeError, ValueError):
    """Malformed slot data, or an overwrite that was not allowed."""


class SlotIndexError(MoveTreeError, IndexError):
    pass


class TooManyChildrenError(MoveTreeError, OverflowError):
    pass


class CounterOverflowError(MoveTreeError, OverflowError):
    """A win or loss counter would leave the unsigned 32-bit range."""


class TreeFormatError(MoveTreeError, ValueError):
    pass


class CorruptHeaderError(TreeFormatError):
    pass


class UnsupportedVersionError(TreeFormatError):
    def __init__(self, version: int, supported: Tuple[int, ...]) -> None:
        super().__init__(
            f"Tree file uses format version {version}; "
            f"supported versions are {', '.join(str(v) for v in supported)}."
        )
        self.version = version
        self.supported = supported


class MalformedRecordError(TreeFormatError):
    pass


class TreeInvariantError(AssertionError):
    """An internal consistency check failed; points at a move-recording bug."""
