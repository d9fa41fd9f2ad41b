"""
Deep Regrets - Rules engine and scripted opponents for a push-your-luck
fishing game.

A deterministic, rules-driven engine that provides:
- Immutable game state and a pure transition function
- Forced sub-decisions (dice removal, life preserver, passing rewards)
- Legal action generation
- Heuristic bots at three difficulty tiers
"""

__version__ = "0.1.0"
