"""Move tree: nodes, walks, merges and best-path search."""

from .node import MAX_CHILDREN, SENTINEL, MoveNode
from .selection import PathAverage, statistically_best
from .walker import check_merge, enumerate_paths, find_node, merge, walk_path

__all__ = [
    "MAX_CHILDREN",
    "SENTINEL",
    "MoveNode",
    "PathAverage",
    "statistically_best",
    "check_merge",
    "enumerate_paths",
    "find_node",
    "merge",
    "walk_path",
]
