"""
Deep Regrets - A push-your-luck fishing game for 1-5 anglers.

Key mechanics:
- Anglers roll dice each morning and spend them at sea or at port
- Deeper fish are worth more and cost more sanity
- Regrets raise madness, which changes how fish score
- Six days, then the trophy walls are counted

This module contains:
- Fish, Dink, regret, upgrade, tackle and character tables
- The content bundle and the initial state setup
"""

from .spec import create_deep_regrets_content
from .setup import setup_game
from .fish import ALL_FISH, PLUG_ID
from .cards import DINK_CARDS, REGRET_CARDS
from .shop import ALL_UPGRADES, TACKLE_DICE
from .characters import CHARACTERS

__all__ = [
    "create_deep_regrets_content",
    "setup_game",
    "ALL_FISH",
    "PLUG_ID",
    "DINK_CARDS",
    "REGRET_CARDS",
    "ALL_UPGRADES",
    "TACKLE_DICE",
    "CHARACTERS",
]
