from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from movetree.core import GameResult, Piece
from movetree.env import TicTacToeEnv
from movetree.learning import Controller


@dataclass
class MatchRecord:
    result: GameResult
    moves: List[int] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.moves)


@dataclass
class EvaluationResult:
    games_played: int
    x_wins: int
    o_wins: int
    draws: int
    average_length: float

    def winrate_x(self) -> float:
        return self.x_wins / max(1, self.games_played)

    def winrate_o(self) -> float:
        return self.o_wins / max(1, self.games_played)

    def draw_rate(self) -> float:
        return self.draws / max(1, self.games_played)

    def as_dict(self) -> dict:
        return {
            "games_played": self.games_played,
            "x_wins": self.x_wins,
            "o_wins": self.o_wins,
            "draws": self.draws,
            "average_length": self.average_length,
        }


def play_match(env: TicTacToeEnv, controller_x: Controller, controller_o: Controller) -> MatchRecord:
    """Play one match, driving both controllers' callbacks in turn order."""
    controllers = {Piece.X: controller_x, Piece.O: controller_o}
    env.reset()
    controller_x.on_match_start(Piece.X)
    controller_o.on_match_start(Piece.O)

    moves: List[int] = []
    terminated = False
    while not terminated:
        piece = env.current_player
        controller = controllers[piece]
        last_move = moves[-1] if moves else None

        move = controller.on_turn(env.hash_for(piece), last_move)
        _, _, terminated, _, _ = env.step(move)
        moves.append(move)
        controller.on_after_turn(env.hash_for(piece), move)

    for piece, controller in controllers.items():
        controller.on_match_end(env.hash_for(piece), moves[-1], env.result.result_for(piece))
    return MatchRecord(result=env.result, moves=moves)


def evaluate_controllers(
    controller_x: Controller,
    controller_o: Controller,
    *,
    episodes: int,
    env_factory: Optional[Callable[[], TicTacToeEnv]] = None,
) -> EvaluationResult:
    env_factory = env_factory or TicTacToeEnv

    x_wins = 0
    o_wins = 0
    draws = 0
    total_ply = 0

    for _ in range(episodes):
        record = play_match(env_factory(), controller_x, controller_o)
        total_ply += record.length
        if record.result == GameResult.X_WIN:
            x_wins += 1
        elif record.result == GameResult.O_WIN:
            o_wins += 1
        else:
            draws += 1

    average_length = total_ply / max(1, episodes)
    return EvaluationResult(
        games_played=episodes,
        x_wins=x_wins,
        o_wins=o_wins,
        draws=draws,
        average_length=average_length,
    )
