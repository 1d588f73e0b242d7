from __future__ import annotations

import logging

from movetree.tree import MoveNode, statistically_best

logger = logging.getLogger(__name__)


class TreeObserver:
    """Optional listener told about every update to a global tree."""

    def on_tree_updated(self, root: MoveNode, local: MoveNode) -> None:
        raise NotImplementedError


class LoggingObserver(TreeObserver):
    def __init__(self, level: int = logging.DEBUG) -> None:
        self.level = level

    def on_tree_updated(self, root: MoveNode, local: MoveNode) -> None:
        if not logger.isEnabledFor(self.level):
            return
        best = statistically_best(root)
        logger.log(
            self.level,
            "Tree updated: %d nodes, depth %d, local path %d moves, best path %s (%.1f%%)",
            root.count_nodes(),
            root.depth(),
            local.depth(),
            [node.move_index for node in best.path],
            best.average_win_percent,
        )
