"""Stateless algorithms over a ``MoveNode`` tree.

None of these keep state between calls. The walk, enumeration and merge loops
run on explicit stacks, so tree depth is not limited by the recursion limit.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from movetree.core import CounterOverflowError, PerspectiveHash, TooManyChildrenError

from .node import MAX_CHILDREN, U32_MAX, MoveNode

NodeVisitor = Callable[[MoveNode], None]
PathVisitor = Callable[[List[MoveNode]], None]


def walk_path(
    node: MoveNode,
    path: Sequence[PerspectiveHash],
    visit: Optional[NodeVisitor] = None,
    max_depth: Optional[int] = None,
) -> bool:
    """Follow ``path`` down from ``node``, one hash per level.

    ``visit`` is called for every node reached. Returns ``True`` when every
    step (up to ``max_depth``) found a matching child, ``False`` at the first
    step that did not; nothing past that step is attempted.
    """
    if max_depth is not None and max_depth < 1:
        raise ValueError("max_depth must be 1 or more.")

    steps = len(path) if max_depth is None else min(len(path), max_depth)
    current = node
    for expected in path[:steps]:
        child = current.find_child(expected)
        if child is None:
            return False
        if visit is not None:
            visit(child)
        current = child
    return True


def find_node(
    node: MoveNode,
    path: Sequence[PerspectiveHash],
    max_depth: Optional[int] = None,
) -> Optional[MoveNode]:
    """Node at the end of ``path``, or ``None`` if the walk falls off the tree."""
    reached: List[MoveNode] = [node]
    if not walk_path(node, path, reached.append, max_depth=max_depth):
        return None
    return reached[-1]


def enumerate_paths(node: MoveNode, visit: PathVisitor) -> None:
    """Call ``visit`` once per leaf with the nodes from ``node`` (exclusive) to it.

    Each call receives its own list. A childless ``node`` yields one empty path.
    """
    path: List[MoveNode] = []
    # Frames are (node, next child index); the path holds every frame but the first.
    stack: List[List] = [[node, 0]]
    while stack:
        frame = stack[-1]
        current, index = frame
        if not current.children:
            visit(list(path))
        if index >= len(current.children):
            stack.pop()
            if path:
                path.pop()
            continue
        frame[1] = index + 1
        child = current.children[index]
        path.append(child)
        stack.append([child, 0])


def merge(destination: MoveNode, source: MoveNode) -> None:
    """Fold every path of ``source`` into ``destination``.

    Children are matched by hash one level at a time; matched nodes get their
    counters summed, unmatched ones are cloned in. ``source`` is left as is.
    Merging the same source twice counts its experience twice.

    The whole merge is checked first, so a counter overflow or a full child
    list raises before ``destination`` changes at all.
    """
    check_merge(destination, source)
    stack: List[List] = [[destination, source, 0]]
    while stack:
        frame = stack[-1]
        into, origin, index = frame
        if index >= len(origin.children):
            stack.pop()
            continue
        frame[2] = index + 1

        incoming = origin.children[index]
        existing = into.find_child(incoming.hash)
        if existing is None:
            into.add_child(incoming.clone())
            continue
        existing.record(wins=incoming.wins, losses=incoming.losses)
        stack.append([existing, incoming, 0])


def check_merge(destination: MoveNode, source: MoveNode) -> None:
    """Raise the error ``merge(destination, source)`` would hit, without merging."""
    stack = [(destination, source)]
    while stack:
        into, origin = stack.pop()
        added = 0
        for incoming in origin.children:
            existing = into.find_child(incoming.hash)
            if existing is None:
                added += 1
                continue
            if existing.wins + incoming.wins > U32_MAX or existing.losses + incoming.losses > U32_MAX:
                raise CounterOverflowError(
                    f"Merging {incoming.hash} ({incoming.wins} / {incoming.losses}) into "
                    f"({existing.wins} / {existing.losses}) overflows a 32-bit counter."
                )
            stack.append((existing, incoming))
        if len(into.children) + added > MAX_CHILDREN:
            raise TooManyChildrenError(
                f"Merging would give {into.hash} {len(into.children) + added} children; "
                f"at most {MAX_CHILDREN} are allowed."
            )
