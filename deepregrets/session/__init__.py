"""
Session Module - Runs games between humans and scripted seats.

A session drives the reducer on behalf of scripted seats and hands
control back whenever a human seat must act.
"""

from .game_loop import GameLoop, LoopState, TurnResult, play_game

__all__ = [
    "GameLoop",
    "LoopState",
    "TurnResult",
    "play_game",
]
