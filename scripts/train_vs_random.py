#!/usr/bin/env python3
"""Train the move-tree learner against a random opponent and persist its tree."""

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import yaml
from tqdm.auto import trange

from movetree.core import GameResult, Piece
from movetree.env import TicTacToeEnv
from movetree.evaluation import play_match
from movetree.learning import (
    LoggingObserver,
    MoveTreeController,
    RandomController,
    SelectionConfig,
)
from movetree.storage import TreeStore
from movetree.utils import setup_logging

logger = logging.getLogger("train_vs_random")


def train(
    *,
    store: TreeStore,
    tree_name: str,
    matches: int,
    learner_piece: Piece = Piece.X,
    selection: Optional[SelectionConfig] = None,
    seed: Optional[int] = None,
    save_every: int = 0,
    progress: bool = True,
) -> Dict[str, object]:
    rng = np.random.default_rng(seed)
    tree = store.load_or_create(tree_name)
    learner = MoveTreeController(
        tree,
        config=selection,
        observer=LoggingObserver(),
        rng=rng,
    )
    opponent = RandomController(np.random.default_rng(rng.integers(2**32)))
    controller_x, controller_o = (learner, opponent) if learner_piece == Piece.X else (opponent, learner)
    learner_win = GameResult.X_WIN if learner_piece == Piece.X else GameResult.O_WIN

    wins = losses = draws = 0
    env = TicTacToeEnv()
    iterator = trange(matches, desc="Matches", disable=not progress)
    for i in iterator:
        record = play_match(env, controller_x, controller_o)
        if record.result == GameResult.DRAW:
            draws += 1
        elif record.result == learner_win:
            wins += 1
        else:
            losses += 1
        if save_every > 0 and (i + 1) % save_every == 0:
            store.save(tree_name, tree)

    path = store.save(tree_name, tree)
    return {
        "tree_path": path,
        "matches": matches,
        "learner_piece": learner_piece.name,
        "wins": wins,
        "losses": losses,
        "draws": draws,
        "tree_moves": learner.tree_moves,
        "fallback_moves": learner.fallback_moves,
        "tree_nodes": tree.count_nodes(),
    }


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", type=str, default="configs/learner.yaml")
    parser.add_argument("--tree-dir")
    parser.add_argument("--tree-name")
    parser.add_argument("--matches", type=int)
    parser.add_argument("--learner-piece", choices=["X", "O"])
    parser.add_argument("--seed", type=int)
    parser.add_argument("--save-every", type=int)
    parser.add_argument("--explore-probability", type=float)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file")
    args = parser.parse_args()

    setup_logging(args.log_level, args.log_file)

    cfg = {}
    if args.config:
        cfg_path = Path(args.config)
        if cfg_path.exists():
            cfg = yaml.safe_load(cfg_path.read_text()) or {}
    tree_dir = args.tree_dir if args.tree_dir is not None else cfg.get("tree_dir", "data/trees")
    tree_name = args.tree_name if args.tree_name is not None else cfg.get("tree_name", "learner")
    matches = args.matches if args.matches is not None else cfg.get("matches", 100)
    piece_name = args.learner_piece if args.learner_piece is not None else cfg.get("learner_piece", "X")
    seed = args.seed if args.seed is not None else cfg.get("seed")
    save_every = args.save_every if args.save_every is not None else cfg.get("save_every", 0)

    selection_cfg = cfg.get("selection", {})
    if args.explore_probability is not None:
        selection_cfg["explore_probability"] = args.explore_probability
    selection = SelectionConfig(**selection_cfg)

    logger.info("Training %s learner for %d matches into %s/%s", piece_name, matches, tree_dir, tree_name)
    summary = train(
        store=TreeStore(tree_dir),
        tree_name=tree_name,
        matches=matches,
        learner_piece=Piece[piece_name],
        selection=selection,
        seed=seed,
        save_every=save_every,
    )
    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
