from __future__ import annotations

from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from movetree.core import (
    BOARD_SIZE,
    GameResult,
    PerspectiveHash,
    Piece,
    evaluate_board,
    hash_for,
    initialize_board,
    place_piece,
)


class TicTacToeEnv(gym.Env):
    """Tic-tac-toe with X moving first. Observations are raw piece codes."""

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(self, *, render_mode: Optional[str] = None) -> None:
        super().__init__()
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=0, high=int(Piece.EMPTY), shape=(BOARD_SIZE,), dtype=np.int8
        )
        self.action_space = spaces.Discrete(BOARD_SIZE)

        self.board = initialize_board()
        self.current_player = Piece.X
        self.result = GameResult.ONGOING
        self.last_move: Optional[int] = None
        self.ply = 0

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        self.board = initialize_board()
        self.current_player = Piece.X
        self.result = GameResult.ONGOING
        self.last_move = None
        self.ply = 0
        return self._build_observation(), self._build_info()

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")
        if self.result != GameResult.ONGOING:
            raise ValueError("Cannot play a move after the game has ended.")

        place_piece(self.board, int(action_index), self.current_player)
        self.last_move = int(action_index)
        self.ply += 1
        self.result = evaluate_board(self.board)
        if self.result == GameResult.ONGOING:
            self.current_player = self.current_player.opponent

        reward = self._compute_reward(self.result)
        terminated = self.result != GameResult.ONGOING
        return self._build_observation(), reward, terminated, False, self._build_info()

    def legal_action_mask(self) -> np.ndarray:
        return (self.board == Piece.EMPTY).astype(np.int8)

    def hash_for(self, piece: Piece) -> PerspectiveHash:
        return hash_for(self.board, piece)

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return self._render_ascii()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_observation(self) -> np.ndarray:
        return self.board.copy()

    def _build_info(self) -> Dict[str, object]:
        return {
            "legal_action_mask": self.legal_action_mask(),
            "current_player": self.current_player,
            "result": self.result,
        }

    def _compute_reward(self, result: GameResult) -> float:
        if result == GameResult.X_WIN:
            return 1.0
        if result == GameResult.O_WIN:
            return -1.0
        return 0.0

    def _render_ascii(self) -> str:
        symbols = [Piece(int(cell)).symbol for cell in self.board]
        return "\n".join("".join(symbols[row * 3 : row * 3 + 3]) for row in range(3))
