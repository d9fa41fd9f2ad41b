"""
Seat policies.

Anything that can sit at the table in place of a human implements
BotPolicy: given the state and the acting seat's legal actions, it picks
one and says why. Policies never build actions of their own; they choose
from what the action generator offers.
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Action
    from ..spec_schema import GameContent


@dataclass
class BotDecision:
    """The chosen action, a one-line reason and a confidence in [0, 1]."""
    action: Action
    reasoning: str = ""
    confidence: float = 1.0

    # Scoring trace, only filled in by scoring policies
    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """A way of choosing among a seat's legal actions."""

    @abstractmethod
    def select_action(
        self,
        state: GameState,
        content: GameContent,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Pick one of `legal_actions` for the seat the game is waiting on.

        Raises ValueError when `legal_actions` is empty.
        """

    def get_name(self) -> str:
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """Uniform choice. A baseline opponent and a fuzzer for the engine."""

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(
        self,
        state: GameState,
        content: GameContent,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("Nothing to choose from")

        return BotDecision(
            action=self.rng.choice(legal_actions),
            reasoning="Picked at random",
            confidence=1.0 / len(legal_actions),
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """Always the first offered action, for fully predictable seats."""

    def select_action(
        self,
        state: GameState,
        content: GameContent,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("Nothing to choose from")

        return BotDecision(
            action=legal_actions[0],
            reasoning="First action offered",
            evaluated_actions=1,
        )
