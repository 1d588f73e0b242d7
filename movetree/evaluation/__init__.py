"""Match playing and evaluation helpers."""

from .match import EvaluationResult, MatchRecord, evaluate_controllers, play_match

__all__ = ["EvaluationResult", "MatchRecord", "evaluate_controllers", "play_match"]
