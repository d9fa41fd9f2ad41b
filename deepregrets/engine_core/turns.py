"""
Turn/Phase Controller - Seat order, day start and day end.

A day runs refresh -> declaration -> action -> day_end. Every phase walks
the seats in order starting from the priority seat. The functions here
only move the state machine forward; legality is the reducer's job.
"""

from __future__ import annotations
import logging
import random
from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING

from .state import GameState, GamePhase, SeatState
from .dice import roll_dice
from .economy import passive_effect_count, final_standings

if TYPE_CHECKING:
    from ..spec_schema import GameContent

logger = logging.getLogger(__name__)


def acting_seat_id(state: GameState) -> str | None:
    """
    The seat whose input the game is waiting for.

    A pending decision belongs to its seat; otherwise the current seat acts
    during refresh, declaration and action. None between days and after
    the game ends.
    """
    pending = state.pending
    if pending is not None:
        return getattr(pending, "seat_id", None) or getattr(pending, "from_seat_id", None)
    if state.phase in (GamePhase.REFRESH, GamePhase.DECLARATION, GamePhase.ACTION) and state.seats:
        return state.seats[state.current_seat_index].seat_id
    return None


def next_seat_index(
    state: GameState,
    start: int,
    predicate: Callable[[SeatState], bool],
) -> int | None:
    """First seat after `start` (wrapping, `start` itself last) matching predicate."""
    n = len(state.seats)
    for offset in range(1, n + 1):
        index = (start + offset) % n
        if predicate(state.seats[index]):
            return index
    return None


def _start_turn(state: GameState, index: int) -> GameState:
    seat = state.seats[index]._copy_with(turn_action_taken=False)
    return state.with_seat(seat)._copy_with(current_seat_index=index, last_failed_catch=None)


# ============================================================================
# Day start
# ============================================================================

def begin_day(content: GameContent, state: GameState, rng: random.Random) -> GameState:
    """
    Start the next day in the refresh phase.

    Unused fresh dice keep their faces and capacity nobody is using is
    rolled fresh. Spent dice wait for the end of the seat's refresh turn.
    Start-of-day passives fire and payday pays out on its day.
    """
    rules = content.rules
    day = state.day_number + 1
    seats = []
    for seat in state.seats:
        fishbucks = seat.fishbucks
        if day == rules.payday_day:
            fishbucks += rules.payday_amount
        shields = seat.regret_shields
        if seat.has_flag("prevent_regret_1_per_day"):
            shields = max(shields, 1)
        missing = max(0, seat.max_dice - seat.dice_held)
        seats.append(seat._copy_with(
            fresh_dice=seat.fresh_dice + roll_dice(rng, missing, reroll_ones=seat.has_flag("reroll_1s")),
            fishbucks=fishbucks,
            regret_shields=shields,
            has_passed=False,
            has_declared=False,
            has_refreshed=False,
            turn_action_taken=False,
            reward_due=False,
            made_port_today=False,
            regret_discarded_today=False,
            port_reroll_used_today=False,
            peeked=(),
            bonus_actions=passive_effect_count(content, seat, "gain_extra_action"),
            catch_bonus=0,
            catch_discount=0,
            shop_discount_pending=0,
        ))

    logger.debug("Day %d begins", day)
    return state._copy_with(
        seats=tuple(seats),
        day_number=day,
        phase=GamePhase.REFRESH,
        current_seat_index=state.priority_seat_index,
        first_passer_id=None,
        last_failed_catch=None,
        last_seat_turns_remaining=None,
        life_preserver_used_today=False,
    )


def finish_refresh_turn(state: GameState, seat_id: str, rng: random.Random) -> GameState:
    """
    Roll the seat's spent dice back into its fresh pool and mark it refreshed.

    After the last seat the phase moves to declaration.
    """
    seat = state.get_seat(seat_id)
    readied = roll_dice(rng, len(seat.spent_dice), reroll_ones=seat.has_flag("reroll_1s"))
    state = state.with_seat(seat._copy_with(
        fresh_dice=seat.fresh_dice + readied,
        spent_dice=(),
        has_refreshed=True,
    ))
    index = next_seat_index(state, state.current_seat_index, lambda s: not s.has_refreshed)
    if index is not None:
        return state._copy_with(current_seat_index=index)
    # The life preserver rule is evaluated once per day, on fresh rolls
    return state._copy_with(
        phase=GamePhase.DECLARATION,
        current_seat_index=state.priority_seat_index,
        preserver_check_due=True,
    )


def finish_declaration(state: GameState) -> GameState:
    """Advance to the next undeclared seat; after the last one, start the action phase."""
    index = next_seat_index(state, state.current_seat_index, lambda s: not s.has_declared)
    if index is not None:
        return state._copy_with(current_seat_index=index)
    return _start_turn(state._copy_with(phase=GamePhase.ACTION), state.priority_seat_index)


# ============================================================================
# Action phase
# ============================================================================

def end_action_turn(content: GameContent, state: GameState, seat_id: str) -> GameState:
    """
    End the current seat's turn.

    The last seat still out on the water only gets a fixed number of turns;
    when they run out the seat passes.
    """
    if state.last_seat_turns_remaining is not None:
        remaining = state.last_seat_turns_remaining - 1
        state = state._copy_with(last_seat_turns_remaining=remaining)
        if remaining <= 0:
            logger.debug("%s is out of turns and passes", seat_id)
            return pass_seat(content, state, seat_id)

    index = next_seat_index(state, state.current_seat_index, lambda s: not s.has_passed)
    return _start_turn(state, index)


def pass_seat(content: GameContent, state: GameState, seat_id: str) -> GameState:
    """
    Pass a seat for the rest of the day.

    The passing reward is queued on the seat and turned into a pending
    decision by the settle step. When every seat has passed the day ends.
    """
    seat = state.get_seat(seat_id)
    state = state.with_seat(seat._copy_with(has_passed=True, reward_due=True, turn_action_taken=False))
    if state.first_passer_id is None:
        state = state._copy_with(first_passer_id=seat_id)

    unpassed = [s for s in state.seats if not s.has_passed]
    if not unpassed:
        return state._copy_with(
            phase=GamePhase.DAY_END,
            last_seat_turns_remaining=None,
            last_failed_catch=None,
        )

    if len(unpassed) == 1 and state.num_seats > 1 and state.last_seat_turns_remaining is None:
        state = state._copy_with(last_seat_turns_remaining=content.rules.last_to_pass_turns)

    index = next_seat_index(state, state.seat_index(seat_id), lambda s: not s.has_passed)
    return _start_turn(state, index)


# ============================================================================
# Day end
# ============================================================================

def erode(state: GameState) -> GameState:
    """Wash the top fish of the next non-empty shoal into the graveyard."""
    sea = state.sea
    positions = sea.positions()
    if not positions:
        return state
    for step in range(len(positions)):
        cursor = (sea.erosion_cursor + step) % len(positions)
        depth, slot = positions[cursor]
        shoal = sea.get_shoal(depth, slot)
        if shoal.is_empty:
            continue
        fish_id, shoal = shoal.pop_top()
        sea = sea.with_shoal(depth, slot, shoal)
        sea = replace(
            sea,
            graveyard=sea.graveyard + (fish_id,),
            erosion_cursor=(cursor + 1) % len(positions),
        )
        logger.debug("Erosion washes %s away", fish_id)
        return state.with_sea(sea)
    return state


def end_day(content: GameContent, state: GameState, rng: random.Random) -> GameState:
    """
    Close the day: end-of-day passives, erosion, then either the next day
    or the end of the game (last day played or the sea fully drowned).
    """
    rules = content.rules
    seats = []
    for seat in state.seats:
        tales = passive_effect_count(content, seat, "score_bonus_2")
        seats.append(seat._copy_with(bonus_points=seat.bonus_points + tales * rules.end_of_day_bonus))
    state = state._copy_with(seats=tuple(seats))

    if state.sea.plug_active:
        state = erode(state)

    if state.day_number >= rules.days_in_game or state.sea.all_empty:
        scores, winner = final_standings(content, state)
        logger.debug("Game over after day %d, winner %s", state.day_number, winner)
        return state._copy_with(
            phase=GamePhase.GAME_OVER,
            final_scores=tuple(scores.items()),
            winner_id=winner,
        )

    priority = state.priority_seat_index
    if state.first_passer_id is not None:
        priority = state.seat_index(state.first_passer_id)
    return begin_day(content, state._copy_with(priority_seat_index=priority), rng)
