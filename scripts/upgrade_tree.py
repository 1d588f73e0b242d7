#!/usr/bin/env python3
"""Rewrite a stored tree in the current TREE format version."""

import argparse
import json
import logging
from typing import Dict

from movetree.codec import CURRENT_VERSION, read_header
from movetree.storage import TreeStore
from movetree.utils import setup_logging

logger = logging.getLogger("upgrade_tree")


def upgrade_tree(store: TreeStore, name: str, *, dry_run: bool = False) -> Dict[str, object]:
    with open(store.path_for(name), "rb") as fh:
        version = read_header(fh)

    summary = {"name": name, "from_version": version, "to_version": CURRENT_VERSION, "upgraded": False}
    if version == CURRENT_VERSION:
        logger.info("Tree %r already uses version %d", name, version)
        return summary

    root = store.load(name)
    summary["nodes"] = root.count_nodes()
    if not dry_run:
        store.save(name, root, overwrite=True)
        summary["upgraded"] = True
    return summary


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("names", nargs="*", help="Tree names; defaults to every tree in --tree-dir")
    parser.add_argument("--tree-dir", default="data/trees")
    parser.add_argument("--dry-run", action="store_true")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    setup_logging(args.log_level)
    store = TreeStore(args.tree_dir)
    names = args.names or store.names()
    results = [upgrade_tree(store, name, dry_run=args.dry_run) for name in names]
    print(json.dumps(results, indent=2))


if __name__ == "__main__":
    main()
