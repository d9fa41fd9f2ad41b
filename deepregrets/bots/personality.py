"""
Bot Personalities - Difficulty tiers for scripted anglers.

A tier never changes the rules a bot plays by. It adjusts:
- Noise (random perturbation added to every action score)
- Horizon (how many days ahead upgrades are valued)
- Risk aversion (how much regrets and madness hurt)
- Evaluation weights (what the bot values)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .evaluator import EvaluationWeights


@dataclass
class Personality:
    """
    A bot personality that defines play strength and style.

    Lower tiers add more noise and look fewer days ahead; the hardest
    tier is greedy on the heuristic with no noise at all.
    """
    name: str
    description: str = ""

    # Evaluation weights
    weights: EvaluationWeights = field(default_factory=EvaluationWeights)

    # Behavioral parameters
    noise: float = 0.0  # Half-width of the uniform score perturbation
    horizon: int = 3  # Days of upgrade value considered
    risk_aversion: float = 1.0  # Multiplier on regret and madness penalties

    # Metadata
    metadata: dict[str, Any] = field(default_factory=dict)


# ============================================================================
# Difficulty tiers
# ============================================================================

EASY = Personality(
    name="Easy",
    description="Distracted angler, often takes a worse line",
    weights=EvaluationWeights(overspend=0.0, first_pass_bonus=0.0, reroll_threshold=2.0),
    noise=3.0,
    horizon=1,
    risk_aversion=0.5,
)


MEDIUM = Personality(
    name="Medium",
    description="Sensible play with occasional slips",
    weights=EvaluationWeights(),
    noise=1.2,
    horizon=3,
    risk_aversion=1.0,
)


HARD = Personality(
    name="Hard",
    description="Greedy on the full heuristic, no randomness",
    weights=EvaluationWeights(
        die_cost=0.7,
        regret_penalty=1.2,
        upgrade_per_day=0.8,
        reroll_threshold=3.0,
    ),
    noise=0.0,
    horizon=6,
    risk_aversion=1.2,
)


DIFFICULTIES: dict[str, Personality] = {
    "easy": EASY,
    "medium": MEDIUM,
    "hard": HARD,
}


def get_personality(difficulty: str | Personality) -> Personality:
    """Resolve a tier name (or pass a Personality through)."""
    if isinstance(difficulty, Personality):
        return difficulty
    try:
        return DIFFICULTIES[difficulty.lower()]
    except KeyError:
        raise ValueError(f"Unknown difficulty: {difficulty}") from None
