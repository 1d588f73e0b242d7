"""Turning finished matches into tree statistics, and statistics into moves."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from movetree.core import (
    BOARD_SIZE,
    MatchResult,
    PerspectiveHash,
    Piece,
    TreeInvariantError,
)
from movetree.tree import MoveNode, find_node, merge, statistically_best

from .observers import TreeObserver

logger = logging.getLogger(__name__)

MoveEvent = Tuple[PerspectiveHash, int]


@dataclass
class MatchOutcome:
    final_position: PerspectiveHash
    final_move_index: int
    result: MatchResult


@dataclass
class SelectionConfig:
    # A best path averaging below explore_below_percent is skipped with
    # probability explore_probability, leaving the move to the fallback policy.
    explore_below_percent: float = 25.0
    explore_probability: float = 0.0


class LocalPath:
    """Single-branch tree of the positions seen during one match."""

    def __init__(self, viewpoint: Piece = Piece.X) -> None:
        self.root = MoveNode.root(viewpoint)
        self._tail = self.root
        self._length = 0

    def append(self, position: PerspectiveHash, move_index: int) -> MoveNode:
        node = MoveNode(position, move_index)
        self._tail.add_child(node)
        self._tail = node
        self._length += 1
        return node

    @property
    def last(self) -> Optional[MoveNode]:
        return None if self._tail is self.root else self._tail

    def nodes(self) -> List[MoveNode]:
        nodes = []
        current = self.root
        while current.children:
            current = current.children[0]
            nodes.append(current)
        return nodes

    def hashes(self) -> List[PerspectiveHash]:
        return [node.hash for node in self.nodes()]

    def __len__(self) -> int:
        return self._length


def build_local_path(events: Iterable[MoveEvent], outcome: MatchOutcome) -> LocalPath:
    """Chain the match events into a ``LocalPath``.

    The final record is appended unless it repeats the last event, which is
    the case when the recording player made the final move itself.
    """
    local = LocalPath(outcome.final_position.viewpoint)
    for position, move_index in events:
        local.append(position, move_index)
    last = local.last
    if last is None or last.hash != outcome.final_position:
        local.append(outcome.final_position, outcome.final_move_index)
    return local


def apply_result(local: LocalPath, result: MatchResult) -> None:
    if result == MatchResult.TIED:
        return
    for node in local.nodes():
        if result == MatchResult.WON:
            node.record(wins=1)
        else:
            node.record(losses=1)


def record_match(
    global_root: MoveNode,
    events: Iterable[MoveEvent],
    outcome: MatchOutcome,
    observer: Optional[TreeObserver] = None,
) -> MoveNode:
    """Fold one finished match into ``global_root``. Returns the local tree."""
    local = build_local_path(events, outcome)
    return commit_local_path(global_root, local, outcome, observer=observer)


def commit_local_path(
    global_root: MoveNode,
    local: LocalPath,
    outcome: MatchOutcome,
    observer: Optional[TreeObserver] = None,
) -> MoveNode:
    expected = BOARD_SIZE - outcome.final_position.empty_count()
    if len(local) != expected:
        raise TreeInvariantError(
            f"Local path has {len(local)} moves but the final position {outcome.final_position} "
            f"shows {expected} placed pieces."
        )
    apply_result(local, outcome.result)
    merge(global_root, local.root)
    logger.debug(
        "Recorded %s match of %d moves; global tree now has %d nodes",
        outcome.result.value,
        len(local),
        global_root.count_nodes(),
    )
    if observer is not None:
        observer.on_tree_updated(global_root, local.root)
    return local.root


def select_move(
    global_root: MoveNode,
    local_hashes: Sequence[PerspectiveHash],
    viewpoint: Piece,
    config: Optional[SelectionConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> Optional[int]:
    """Recommended move index for ``viewpoint``, or ``None`` for no recommendation.

    ``None`` means the caller has to pick the move with its own fallback.
    """
    config = config or SelectionConfig()

    parent = find_node(global_root, local_hashes) if local_hashes else global_root
    if parent is None:
        logger.debug("Current position is not in the tree; no recommendation")
        return None

    best = statistically_best(parent)
    if not best.path:
        logger.debug("No statistics below the current position; no recommendation")
        return None

    node = best.first
    if node.hash.viewpoint != viewpoint or not node.hash.is_mine(node.move_index):
        logger.debug("Best path starts with %r, which is not a move for %s", node, viewpoint.name)
        return None

    if config.explore_probability > 0 and best.average_win_percent < config.explore_below_percent:
        rng = rng or np.random.default_rng()
        if rng.random() < config.explore_probability:
            logger.debug(
                "Best path averages %.1f%%; exploring instead of following it",
                best.average_win_percent,
            )
            return None
    return node.move_index
