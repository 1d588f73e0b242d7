"""Move-tree learner: a self-improving move-statistics store for tic-tac-toe."""

from . import codec, core, env, evaluation, learning, storage, tree
from .codec import CURRENT_VERSION, decode, dumps, encode, loads
from .core import BOARD_SIZE, MatchResult, PerspectiveHash, Piece, SlotState
from .env import TicTacToeEnv
from .evaluation import EvaluationResult, evaluate_controllers, play_match
from .learning import (
    Controller,
    LoggingObserver,
    MatchOutcome,
    MoveTreeController,
    RandomController,
    SelectionConfig,
    TreeObserver,
    record_match,
    select_move,
)
from .storage import TreeStore
from .tree import (
    MoveNode,
    PathAverage,
    enumerate_paths,
    merge,
    statistically_best,
    walk_path,
)

__all__ = [
    "codec",
    "core",
    "env",
    "evaluation",
    "learning",
    "storage",
    "tree",
    "BOARD_SIZE",
    "CURRENT_VERSION",
    "MatchResult",
    "PerspectiveHash",
    "Piece",
    "SlotState",
    "TicTacToeEnv",
    "EvaluationResult",
    "evaluate_controllers",
    "play_match",
    "Controller",
    "LoggingObserver",
    "MatchOutcome",
    "MoveTreeController",
    "RandomController",
    "SelectionConfig",
    "TreeObserver",
    "record_match",
    "select_move",
    "TreeStore",
    "MoveNode",
    "PathAverage",
    "enumerate_paths",
    "merge",
    "statistically_best",
    "walk_path",
    "decode",
    "dumps",
    "encode",
    "loads",
]
