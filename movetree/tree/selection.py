from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .node import MoveNode
from .walker import enumerate_paths


@dataclass
class PathAverage:
    path: List[MoveNode] = field(default_factory=list)

    @property
    def average_win_percent(self) -> float:
        if not self.path:
            return 0.0
        return sum(node.win_percent for node in self.path) / len(self.path)

    @property
    def first(self) -> MoveNode:
        if not self.path:
            raise IndexError("The path is empty.")
        return self.path[0]

    def __len__(self) -> int:
        return len(self.path)


def statistically_best(root: MoveNode) -> PathAverage:
    """Root-to-leaf path (root excluded) with the highest mean win percentage.

    Only a strictly greater mean replaces the current best, so on a tie the
    path met first in depth-first child order wins. An empty result means the
    tree has nothing to say about this position.
    """
    best = PathAverage()
    best_score = 0.0

    def consider(path: List[MoveNode]) -> None:
        nonlocal best, best_score
        candidate = PathAverage(path)
        score = candidate.average_win_percent
        if score > best_score:
            best, best_score = candidate, score

    enumerate_paths(root, consider)
    return best
