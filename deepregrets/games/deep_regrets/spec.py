"""
Deep Regrets Content Bundle

Assembles the lookup tables of this package into one GameContent.
Tests and tools may pass their own RulesConfig or swap tables; the
engine only ever reads content through GameContent.
"""

from __future__ import annotations

from ...spec_schema.game_spec import GameContent, RulesConfig
from .fish import ALL_FISH
from .cards import DINK_CARDS, REGRET_CARDS
from .shop import ALL_UPGRADES, TACKLE_DICE
from .characters import CHARACTERS


def create_deep_regrets_content(rules: RulesConfig | None = None) -> GameContent:
    """Create the standard Deep Regrets content bundle."""
    return GameContent(
        content_id="deep_regrets_base",
        name="Deep Regrets",
        version="1.0.0",
        fish=list(ALL_FISH),
        dinks=list(DINK_CARDS),
        upgrades=list(ALL_UPGRADES),
        tackle_dice=list(TACKLE_DICE),
        regrets=list(REGRET_CARDS),
        characters=list(CHARACTERS),
        rules=rules or RulesConfig(),
        metadata={
            "genre": "push-your-luck fishing",
            "days": "Monday to Saturday",
        },
    )
