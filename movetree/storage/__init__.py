"""On-disk storage of named move trees."""

from .tree_store import TREE_SUFFIX, TreeStore

__all__ = ["TREE_SUFFIX", "TreeStore"]
