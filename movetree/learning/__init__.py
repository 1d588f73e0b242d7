"""Match ingestion, move selection and the controllers that use them."""

from .controllers import Controller, MoveTreeController, RandomController
from .experience import (
    LocalPath,
    MatchOutcome,
    MoveEvent,
    SelectionConfig,
    apply_result,
    build_local_path,
    commit_local_path,
    record_match,
    select_move,
)
from .observers import LoggingObserver, TreeObserver

__all__ = [
    "Controller",
    "MoveTreeController",
    "RandomController",
    "LocalPath",
    "MatchOutcome",
    "MoveEvent",
    "SelectionConfig",
    "apply_result",
    "build_local_path",
    "commit_local_path",
    "record_match",
    "select_move",
    "LoggingObserver",
    "TreeObserver",
]
