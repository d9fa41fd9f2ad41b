"""
Game Loop - Drives scripted seats through a game.

The loop:
1. Asks the engine which seat it is waiting on
2. If a policy controls that seat, asks it for a decision
3. Applies the decision through the reducer
4. Repeats until a human seat must act or the game is over

Thinking delays and animation belong to whatever displays the game; the
loop runs synchronously.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core.action import Action
from ..engine_core.action_generator import legal_actions
from ..engine_core.payloads import SeatSetup
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState
from ..engine_core.turns import acting_seat_id

if TYPE_CHECKING:
    from ..bots.policy import BotPolicy
    from ..spec_schema import GameContent

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    RUNNING_AUTOMA = "running_automa"
    WAITING_HUMAN_ACTION = "waiting_human_action"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of running the loop.

    Contains the state reached and what the scripted seats did.
    """
    loop_state: LoopState
    state: GameState
    steps: int = 0

    # Automa actions taken, with their rationale
    automa_actions: list[str] = field(default_factory=list)

    # Game over info
    winner: str | None = None
    final_scores: dict[str, int] = field(default_factory=dict)


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(content, {"bot1": AnglerBot("bot1", personality=HARD)})
        state = loop.start(seats, seed=7)
        result = loop.run(state)

        if result.loop_state == LoopState.WAITING_HUMAN_ACTION:
            state = loop.apply(result.state, human_action)
            result = loop.run(state)
    """

    def __init__(self, content: GameContent, policies: dict[str, BotPolicy], max_steps: int = 20000):
        self.content = content
        self.policies = policies
        self.max_steps = max_steps
        self.reducer = Reducer(content=content)

    def start(self, seats: list[SeatSetup], seed: int = 0, game_id: str = "deep_regrets") -> GameState:
        """Create a new game through INIT_GAME."""
        result = self.reducer.apply(GameState(), Action.init_game(seats, seed=seed, game_id=game_id))
        if not result.success:
            raise ValueError(result.error)
        logger.info("Game %s started with %d seat(s), seed %d", game_id, len(seats), seed)
        return result.new_state

    def apply(self, state: GameState, action: Action) -> GameState:
        """Apply a human action; illegal actions leave the state unchanged."""
        return self.reducer.transition(state, action)

    def run(self, state: GameState) -> TurnResult:
        """
        Run scripted seats until a human must act or the game ends.

        Raises RuntimeError if a policy picks an action the engine rejects
        or the step limit is hit.
        """
        actions: list[str] = []
        for step in range(self.max_steps):
            if state.is_game_over:
                logger.info("Game over, winner %s", state.winner_id)
                return TurnResult(
                    loop_state=LoopState.GAME_OVER,
                    state=state,
                    steps=step,
                    automa_actions=actions,
                    winner=state.winner_id,
                    final_scores=dict(state.final_scores),
                )

            seat_id = acting_seat_id(state)
            policy = self.policies.get(seat_id) if seat_id else None
            if policy is None:
                return TurnResult(
                    loop_state=LoopState.WAITING_HUMAN_ACTION,
                    state=state,
                    steps=step,
                    automa_actions=actions,
                )

            decision = policy.select_action(state, self.content, legal_actions(self.content, state, seat_id))
            result = self.reducer.apply(state, decision.action)
            if not result.success:
                raise RuntimeError(f"{policy.get_name()} chose an illegal action: {result.error}")

            if result.new_state.day_number != state.day_number and not result.new_state.is_game_over:
                logger.info("Day %d begins", result.new_state.day_number)
            actions.append(f"{seat_id}: {decision.action.describe()} - {decision.reasoning}")
            state = result.new_state

        raise RuntimeError(f"Game did not finish within {self.max_steps} steps")


def play_game(
    content: GameContent,
    seats: list[SeatSetup],
    seed: int = 0,
    policies: dict[str, BotPolicy] | None = None,
) -> TurnResult:
    """
    Play a whole game with scripted seats only.

    Seats without an explicit policy get an AnglerBot of their configured
    difficulty.
    """
    from ..bots.angler_bot import AnglerBot
    from ..bots.personality import get_personality

    policies = dict(policies or {})
    for seat in seats:
        if seat.seat_id not in policies:
            policies[seat.seat_id] = AnglerBot(seat_id=seat.seat_id, personality=get_personality(seat.difficulty))

    loop = GameLoop(content, policies)
    return loop.run(loop.start(seats, seed=seed))
