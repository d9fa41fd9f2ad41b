"""
Angler Bot - Scripted opponent for Deep Regrets.

This bot:
- Enumerates the legal actions through the rules engine
- Scores each action with the heuristic evaluator
- Perturbs scores by its difficulty tier's noise
- Picks the best, breaking ties by candidate order

The bot does NOT:
- Use deep search (MCTS, minimax)
- Peek at future dice rolls or card draws
- Coordinate with other scripted seats
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import logging
import random

from .policy import BotPolicy, BotDecision
from .evaluator import HeuristicEvaluator
from .personality import Personality, MEDIUM, get_personality
from ..engine_core.action import ActionType
from ..engine_core.action_generator import legal_actions as generate_legal_actions

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Action
    from ..spec_schema import GameContent

logger = logging.getLogger(__name__)


@dataclass
class AnglerBot(BotPolicy):
    """
    Deep Regrets opponent with heuristic evaluation.

    Usage:
        bot = AnglerBot(seat_id="bot1", personality=HARD)
        decision = bot.select_action(state, content, legal_actions)
        print(decision.reasoning)
    """
    seat_id: str
    personality: Personality = None  # type: ignore
    evaluator: HeuristicEvaluator = None  # type: ignore
    rng: random.Random | None = None

    def __post_init__(self):
        if self.personality is None:
            self.personality = MEDIUM
        if self.evaluator is None:
            self.evaluator = HeuristicEvaluator(
                weights=self.personality.weights,
                horizon=self.personality.horizon,
                risk_aversion=self.personality.risk_aversion,
            )

    def select_action(
        self,
        state: GameState,
        content: GameContent,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select the best scoring action.

        Process:
        1. Evaluate each legal action
        2. Add the tier's noise
        3. Keep the first action with the highest score
        4. Confidence is the normalized margin over the runner-up
        """
        if not legal_actions:
            raise ValueError(f"No legal actions available for {self.seat_id}")

        rng = self.rng or self._derived_rng(state)
        noise = self.personality.noise

        scored: list[tuple[Action, float]] = []
        for action in legal_actions:
            score = self.evaluator.evaluate_action(state, content, action, self.seat_id)
            if noise > 0:
                score += rng.uniform(-noise, noise)
            scored.append((action, score))

        best_index = 0
        for i, (_, score) in enumerate(scored):
            if score > scored[best_index][1]:
                best_index = i
        best_action, best_score = scored[best_index]

        runner_up = max((s for i, (_, s) in enumerate(scored) if i != best_index), default=None)
        confidence = self._calculate_confidence(best_score, runner_up)

        reasoning = self._explain(best_action, state, content)
        logger.debug("%s chose %s (score %.2f)", self.seat_id, best_action.describe(), best_score)
        return BotDecision(
            action=best_action,
            reasoning=reasoning,
            confidence=confidence,
            evaluated_actions=len(legal_actions),
            best_score=best_score,
            evaluation_details={
                "personality": self.personality.name,
                "runner_up_score": runner_up,
            },
        )

    def _derived_rng(self, state: GameState) -> random.Random:
        """Reproducible noise for this seat at this point of the game."""
        return random.Random(f"{state.random_seed}:{state.random_counter}:{self.seat_id}")

    def _calculate_confidence(self, best: float, runner_up: float | None) -> float:
        if runner_up is None:
            return 1.0
        margin = (best - runner_up) / max(abs(best), 1.0)
        return max(0.0, min(1.0, margin))

    def _explain(self, action: Action, state: GameState, content: GameContent) -> str:
        """One line a player would say out loud."""
        payload = action.payload
        seat = state.get_seat(self.seat_id)
        kind = action.action_type

        if kind == ActionType.CATCH_FISH:
            fish = content.get_fish(payload.target_fish_id)
            dice = [seat.fresh_dice[i] for i in payload.die_indices]
            name = fish.name if fish else payload.target_fish_id
            extra = f" and {len(payload.tackle_indices)} tackle" if payload.tackle_indices else ""
            return f"Cast for {name} (difficulty {fish.difficulty if fish else '?'}) with {dice}{extra}"
        if kind == ActionType.DESCEND:
            return f"Dive to depth {payload.target_depth} for richer shoals"
        if kind == ActionType.REVEAL_FISH:
            return f"Look into shoal {payload.shoal_slot}"
        if kind == ActionType.BUY_UPGRADE:
            upgrade = content.get_upgrade(payload.upgrade_id)
            return f"Buy {upgrade.name if upgrade else payload.upgrade_id}"
        if kind == ActionType.BUY_TACKLE_DICE:
            return f"Buy {payload.count} {payload.tackle_id}"
        if kind == ActionType.SELL_FISH:
            return f"Sell {payload.fish_id} for fishbucks"
        if kind == ActionType.MOUNT_FISH:
            return f"Mount {payload.fish_id} on the trophy wall"
        if kind == ActionType.DISCARD_REGRET:
            return "Make peace with a regret"
        if kind == ActionType.MAKE_PORT:
            return f"Abandon the sea at depth {seat.depth} and make port"
        if kind == ActionType.PORT_REROLL:
            return f"Reroll poor dice {list(seat.fresh_dice)}"
        if kind == ActionType.USE_CAN_OF_WORMS:
            return f"Peek into shoal {payload.shoal_slot} at depth {payload.depth}"
        if kind == ActionType.DECLARE_LOCATION:
            return f"Head to {payload.location} today"
        if kind == ActionType.PLAY_DINK:
            dink = content.get_dink(payload.dink_id)
            return f"Play {dink.name if dink else payload.dink_id}"
        if kind == ActionType.USE_LIFE_PRESERVER:
            return f"Use the life preserver ({payload.use_type})"
        if kind == ActionType.PASS:
            return "Nothing worth the risk left today; pass"
        if kind == ActionType.END_TURN:
            return "End turn"
        if kind == ActionType.REMOVE_DIE:
            return f"Discard die {payload.die_index}"
        if kind == ActionType.GIVE_LIFE_PRESERVER:
            return f"Hand the life preserver to {payload.target_seat_id}"
        if kind == ActionType.CLAIM_PASSING_REWARD:
            return f"Passing reward: {payload.choice}"
        return f"Selected {kind.value}"

    def get_name(self) -> str:
        return f"AnglerBot({self.seat_id}, {self.personality.name})"


def decide(
    content: GameContent,
    state: GameState,
    seat_id: str,
    difficulty: str | Personality = "medium",
    rng: random.Random | None = None,
) -> BotDecision:
    """
    Choose an action for a seat.

    Only actions the rules engine accepts are considered. Without an
    explicit rng the choice is reproducible from the game seed.
    Raises ValueError when the seat has nothing legal to do.
    """
    actions = generate_legal_actions(content, state, seat_id)
    bot = AnglerBot(seat_id=seat_id, personality=get_personality(difficulty), rng=rng)
    return bot.select_action(state, content, actions)
