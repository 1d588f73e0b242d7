from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from movetree.core import BOARD_SIZE, MatchResult, PerspectiveHash, Piece
from movetree.tree import MoveNode

from .experience import (
    LocalPath,
    MatchOutcome,
    SelectionConfig,
    commit_local_path,
    select_move,
)
from .observers import TreeObserver

logger = logging.getLogger(__name__)


class Controller:
    """Something that can play one side of a match.

    ``position`` arguments are always hashed from this controller's piece.
    ``last_move`` is the opponent's previous move, or ``None`` on the very
    first turn of the match.
    """

    piece: Optional[Piece] = None

    def on_match_start(self, piece: Piece) -> None:
        self.piece = piece

    def on_turn(self, position: PerspectiveHash, last_move: Optional[int]) -> int:
        raise NotImplementedError

    def on_after_turn(self, position: PerspectiveHash, move_index: int) -> None:
        pass

    def on_match_end(
        self,
        final_position: PerspectiveHash,
        last_move: int,
        result: MatchResult,
    ) -> None:
        self.piece = None


class RandomController(Controller):
    """Uniformly random empty slot. Also the fallback for the learner."""

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def on_turn(self, position: PerspectiveHash, last_move: Optional[int]) -> int:
        empty = [i for i in range(BOARD_SIZE) if position.is_empty(i)]
        if not empty:
            raise ValueError(f"No empty slot left in {position}.")
        return int(self.rng.choice(empty))


class MoveTreeController(Controller):
    """Plays from the global move tree and learns from every match.

    Once the tree has no recommendation, the rest of the match is played by the
    fallback controller, since later positions will not be in the tree either.
    """

    def __init__(
        self,
        global_tree: Optional[MoveNode] = None,
        *,
        config: Optional[SelectionConfig] = None,
        fallback: Optional[Controller] = None,
        observer: Optional[TreeObserver] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.global_tree = global_tree if global_tree is not None else MoveNode.root()
        self.config = config or SelectionConfig()
        self.rng = rng or np.random.default_rng()
        self.fallback = fallback or RandomController(self.rng)
        self.observer = observer
        self.local: Optional[LocalPath] = None
        self.use_fallback = False
        self.fallback_moves = 0
        self.tree_moves = 0

    def on_match_start(self, piece: Piece) -> None:
        super().on_match_start(piece)
        self.fallback.on_match_start(piece)
        self.local = LocalPath(piece)
        self.use_fallback = False

    def on_turn(self, position: PerspectiveHash, last_move: Optional[int]) -> int:
        if self.local is None:
            raise RuntimeError("on_turn called before on_match_start.")
        if last_move is not None:
            self.local.append(position, last_move)

        if not self.use_fallback:
            move = select_move(
                self.global_tree,
                self.local.hashes(),
                self.piece,
                config=self.config,
                rng=self.rng,
            )
            if move is not None and position.is_empty(move):
                self.tree_moves += 1
                return move
            logger.debug("No usable recommendation for %s; switching to fallback", position)
            self.use_fallback = True

        self.fallback_moves += 1
        return self.fallback.on_turn(position, last_move)

    def on_after_turn(self, position: PerspectiveHash, move_index: int) -> None:
        if self.local is None:
            raise RuntimeError("on_after_turn called before on_match_start.")
        self.local.append(position, move_index)

    def on_match_end(
        self,
        final_position: PerspectiveHash,
        last_move: int,
        result: MatchResult,
    ) -> None:
        if self.local is None:
            raise RuntimeError("on_match_end called before on_match_start.")
        last = self.local.last
        if last is None or last.hash != final_position:
            self.local.append(final_position, last_move)
        outcome = MatchOutcome(final_position, last_move, result)
        commit_local_path(self.global_tree, self.local, outcome, observer=self.observer)
        self.local = None
        self.fallback.on_match_end(final_position, last_move, result)
        super().on_match_end(final_position, last_move, result)
