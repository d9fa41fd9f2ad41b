"""
Bots - Scripted opponents for Deep Regrets.

Bots pick from the engine's own legal actions and never bypass the reducer.
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .evaluator import HeuristicEvaluator, EvaluationWeights
from .personality import Personality, DIFFICULTIES, EASY, MEDIUM, HARD, get_personality
from .angler_bot import AnglerBot, decide

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "Personality",
    "DIFFICULTIES",
    "EASY",
    "MEDIUM",
    "HARD",
    "get_personality",
    "AnglerBot",
    "decide",
]
