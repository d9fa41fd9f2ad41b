"""
Pending-Decision Subsystem - Forced choices that suspend turn flow.

Three decisions exist (dice removal, life preserver handoff, passing
reward) and GameState.pending holds at most one of them. After every
successful transition the reducer calls settle(), which raises the next
due decision or, when nothing is due, lets the day end.
"""

from __future__ import annotations
import logging
import random
from typing import TYPE_CHECKING

from .state import GameState, GamePhase, DiceRemoval, LifePreserverGift, PassingReward
from .turns import end_day

if TYPE_CHECKING:
    from ..spec_schema import GameContent

logger = logging.getLogger(__name__)

# Upper bound on settle iterations; a day end can only follow a day end
# when the game is over, so a handful is plenty.
_MAX_SETTLE_STEPS = 16


def dice_overflow(state: GameState) -> DiceRemoval | None:
    """DiceRemoval for the first seat holding more dice than it may."""
    for seat in state.seats:
        excess = seat.dice_held - seat.max_dice
        if excess > 0:
            return DiceRemoval(seat_id=seat.seat_id, count=excess)
    return None


def preserver_must_move(state: GameState) -> bool:
    """True when the preserver holder's fresh total is strictly the highest."""
    owner = state.get_seat(state.life_preserver_owner_id) if state.life_preserver_owner_id else None
    others = [s.fresh_total for s in state.seats if owner is not None and s.seat_id != owner.seat_id]
    if owner is None or not others:
        return False
    return owner.fresh_total > max(others)


def _reward_due(state: GameState) -> PassingReward | None:
    for seat in state.seats:
        if seat.reward_due:
            return PassingReward(seat_id=seat.seat_id, is_first_pass=seat.seat_id == state.first_passer_id)
    return None


def settle(content: GameContent, state: GameState, rng: random.Random) -> GameState:
    """
    Bring the state to a fixed point.

    Order: dice overflow, passing rewards, the life preserver rule, then the
    end of the day. Stops as soon as a decision is pending.
    """
    for _ in range(_MAX_SETTLE_STEPS):
        if state.pending is not None or state.phase in (GamePhase.SETUP, GamePhase.GAME_OVER):
            return state

        overflow = dice_overflow(state)
        if overflow is not None:
            logger.debug("%s must remove %d dice", overflow.seat_id, overflow.count)
            return state._copy_with(pending=overflow)

        reward = _reward_due(state)
        if reward is not None:
            seat = state.get_seat(reward.seat_id)
            state = state.with_seat(seat._copy_with(reward_due=False))
            return state._copy_with(pending=reward)

        if state.preserver_check_due:
            state = state._copy_with(preserver_check_due=False)
            if preserver_must_move(state):
                logger.debug("%s must hand on the life preserver", state.life_preserver_owner_id)
                return state._copy_with(
                    pending=LifePreserverGift(from_seat_id=state.life_preserver_owner_id),
                )
            continue

        if state.phase == GamePhase.DAY_END:
            state = end_day(content, state, rng)
            continue

        return state
    return state
