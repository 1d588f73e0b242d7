"""Gymnasium environment for tic-tac-toe."""

from .gym_env import TicTacToeEnv

__all__ = ["TicTacToeEnv"]
