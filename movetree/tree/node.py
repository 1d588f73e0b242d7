from __future__ import annotations

from typing import List, Optional

from movetree.core import (
    CounterOverflowError,
    Piece,
    PerspectiveHash,
    TooManyChildrenError,
    TreeInvariantError,
)

SENTINEL = 0xFFFFFFFF
U32_MAX = 0xFFFFFFFF
MAX_CHILDREN = 255


class MoveNode:
    """One position reached in play, with the win/loss counts seen through it.

    ``hash`` is the board after the move, ``move_index`` the slot that changed.
    The synthetic root carries ``move_index == SENTINEL``.
    """

    __slots__ = ("hash", "move_index", "wins", "losses", "children")

    def __init__(
        self,
        hash: PerspectiveHash,
        move_index: int,
        wins: int = 0,
        losses: int = 0,
    ) -> None:
        if hash is None:
            raise ValueError("A MoveNode needs a hash.")
        for name, value in (("move_index", move_index), ("wins", wins), ("losses", losses)):
            if not 0 <= value <= U32_MAX:
                raise ValueError(f"{name} must fit in an unsigned 32-bit field, got {value}")
        self.hash: PerspectiveHash = hash.copy()
        self.move_index: int = int(move_index)
        self.wins: int = int(wins)
        self.losses: int = int(losses)
        self.children: List[MoveNode] = []

    @classmethod
    def root(cls, viewpoint: Piece = Piece.X) -> "MoveNode":
        return cls(PerspectiveHash(viewpoint), SENTINEL)

    # ------------------------------------------------------------------
    @property
    def is_root(self) -> bool:
        return self.move_index == SENTINEL

    @property
    def total(self) -> int:
        return self.wins + self.losses

    @property
    def win_percent(self) -> float:
        total = self.total
        if total == 0:
            return 0.0
        return self.wins / total * 100.0

    @property
    def lose_percent(self) -> float:
        total = self.total
        if total == 0:
            return 0.0
        return self.losses / total * 100.0

    def is_leaf(self) -> bool:
        return not self.children

    def find_child(self, hash: PerspectiveHash) -> Optional["MoveNode"]:
        for child in self.children:
            if child.hash == hash:
                return child
        return None

    def add_child(self, child: "MoveNode") -> "MoveNode":
        if len(self.children) >= MAX_CHILDREN:
            raise TooManyChildrenError(
                f"A node can hold at most {MAX_CHILDREN} children; refusing to add {child.hash}."
            )
        if self.find_child(child.hash) is not None:
            raise TreeInvariantError(f"Duplicate child {child.hash} under {self.hash}.")
        self.children.append(child)
        return child

    def record(self, wins: int = 0, losses: int = 0) -> None:
        """Add to the counters. Neither changes if either sum would pass ``U32_MAX``."""
        if wins < 0 or losses < 0:
            raise ValueError("Win/loss counters never decrease.")
        if self.wins + wins > U32_MAX or self.losses + losses > U32_MAX:
            raise CounterOverflowError(
                f"Adding {wins} wins / {losses} losses to {self.hash} "
                f"({self.wins} / {self.losses}) overflows a 32-bit counter."
            )
        self.wins += wins
        self.losses += losses

    def clone(self) -> "MoveNode":
        """Deep copy of this subtree. Shares nothing with the original."""
        copy = MoveNode(self.hash, self.move_index, self.wins, self.losses)
        stack = [(self, copy)]
        while stack:
            original, duplicate = stack.pop()
            for child in original.children:
                child_copy = MoveNode(child.hash, child.move_index, child.wins, child.losses)
                duplicate.children.append(child_copy)
                stack.append((child, child_copy))
        return copy

    def count_nodes(self) -> int:
        count = 0
        stack = [self]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children)
        return count

    def depth(self) -> int:
        deepest = 0
        stack = [(self, 0)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children)
        return deepest

    def __eq__(self, other: object) -> bool:
        """Structural equality over the whole subtree, children in order."""
        if not isinstance(other, MoveNode):
            return NotImplemented
        stack = [(self, other)]
        while stack:
            a, b = stack.pop()
            if (
                a.move_index != b.move_index
                or a.wins != b.wins
                or a.losses != b.losses
                or a.hash != b.hash
                or len(a.children) != len(b.children)
            ):
                return False
            stack.extend(zip(a.children, b.children))
        return True

    __hash__ = None

    def __repr__(self) -> str:
        index = "root" if self.is_root else str(self.move_index)
        return (
            f"MoveNode({self.hash}, index={index}, wins={self.wins}, "
            f"losses={self.losses}, children={len(self.children)})"
        )
