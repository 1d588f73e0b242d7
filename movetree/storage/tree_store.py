from __future__ import annotations

import logging
import os
from typing import List, Optional

from movetree.codec import decode, dumps
from movetree.core import Piece
from movetree.tree import MoveNode

logger = logging.getLogger(__name__)

TREE_SUFFIX = ".tree"


class TreeStore:
    """Named move trees kept as ``<directory>/<name>.tree`` files."""

    def __init__(self, directory: str = os.path.join("data", "trees")) -> None:
        self.directory = directory

    def path_for(self, name: str) -> str:
        return os.path.join(self.directory, name + TREE_SUFFIX)

    def exists(self, name: str) -> bool:
        return os.path.isfile(self.path_for(name))

    def names(self) -> List[str]:
        if not os.path.isdir(self.directory):
            return []
        return sorted(
            entry[: -len(TREE_SUFFIX)]
            for entry in os.listdir(self.directory)
            if entry.endswith(TREE_SUFFIX)
        )

    def save(self, name: str, root: MoveNode, *, overwrite: bool = True) -> str:
        if root is None:
            raise ValueError("Cannot save an empty tree reference.")
        path = self.path_for(name)
        if not overwrite and os.path.exists(path):
            raise FileExistsError(f"Tree {name!r} already exists and overwrite is False: {path}")

        data = dumps(root)
        os.makedirs(self.directory, exist_ok=True)
        tmp_path = path + ".tmp"
        try:
            with open(tmp_path, "wb") as fh:
                fh.write(data)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.info("Saved tree %r (%d nodes, %d bytes) to %s", name, root.count_nodes(), len(data), path)
        return path

    def load(self, name: str, *, must_exist: bool = True) -> Optional[MoveNode]:
        path = self.path_for(name)
        if not os.path.isfile(path):
            if must_exist:
                raise FileNotFoundError(f"Tree {name!r} does not exist: {path}")
            logger.debug("Tree %r not found at %s", name, path)
            return None

        with open(path, "rb") as fh:
            try:
                root = decode(fh)
            except Exception:
                logger.error("Failed to decode tree %r from %s", name, path)
                raise
        logger.info("Loaded tree %r (%d nodes) from %s", name, root.count_nodes(), path)
        return root

    def load_or_create(self, name: str, viewpoint: Piece = Piece.X) -> MoveNode:
        root = self.load(name, must_exist=False)
        if root is None:
            logger.info("Starting a new tree %r", name)
            root = MoveNode.root(viewpoint)
        return root

    def remove(self, name: str, *, must_exist: bool = False) -> None:
        path = self.path_for(name)
        if not os.path.isfile(path):
            if must_exist:
                raise FileNotFoundError(f"Cannot remove tree {name!r}; it does not exist: {path}")
            return
        os.remove(path)
        logger.info("Removed tree %r", name)
