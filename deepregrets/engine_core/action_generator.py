"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Bots to enumerate possible moves
2. UI to show available actions
3. Tests (every generated action must be accepted by the reducer)

Design: candidates are built from the state and then filtered through
Reducer.is_legal, so the rules live in exactly one place.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from itertools import combinations
from typing import TYPE_CHECKING

from .state import GameState, GamePhase, Location, SeatState, DiceRemoval, LifePreserverGift, PassingReward
from .action import Action
from .reducer import Reducer
from .turns import acting_seat_id

if TYPE_CHECKING:
    from ..spec_schema import GameContent


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the seat the game is waiting on.

    Candidates that only differ by which equal-valued die they use are
    generated once.
    """
    content: GameContent
    reducer: Reducer = field(init=False)

    def __post_init__(self):
        self.reducer = Reducer(content=self.content)

    def generate(self, state: GameState, seat_id: str | None = None) -> list[Action]:
        """
        Generate all legal actions for `seat_id` (default: the acting seat).

        Returns a list of fully-specified Action objects in a stable order.
        """
        actor = acting_seat_id(state)
        if actor is None or (seat_id is not None and seat_id != actor):
            return []
        return [a for a in self.candidates(state, actor) if self.reducer.is_legal(state, a)]

    def candidates(self, state: GameState, seat_id: str) -> list[Action]:
        """Unfiltered candidate actions for a seat."""
        seat = state.get_seat(seat_id)
        if seat is None:
            return []

        if state.pending is not None:
            return self._generate_pending_actions(state, seat)

        actions = []
        if state.phase == GamePhase.REFRESH:
            actions.extend(self._generate_dink_actions(state, seat))
            actions.append(Action.end_turn(seat_id))
        elif state.phase == GamePhase.DECLARATION:
            actions.append(Action.declare_location(seat_id, "sea"))
            actions.append(Action.declare_location(seat_id, "port"))
            actions.extend(self._generate_dink_actions(state, seat))
        elif state.phase == GamePhase.ACTION:
            if seat.location == Location.SEA:
                actions.extend(self._generate_sea_actions(state, seat))
            else:
                actions.extend(self._generate_port_actions(state, seat))
            actions.extend(self._generate_dink_actions(state, seat))
            for use_type in ("reduce_fish_difficulty", "reduce_shop_cost"):
                actions.append(Action.use_life_preserver(seat_id, use_type))
            actions.append(Action.end_turn(seat_id))
            actions.append(Action.pass_day(seat_id))
        return actions

    def _generate_pending_actions(self, state: GameState, seat: SeatState) -> list[Action]:
        pending = state.pending
        if isinstance(pending, DiceRemoval):
            dice = seat.fresh_dice + seat.spent_dice
            return [Action.remove_die(seat.seat_id, i) for i in _distinct_positions(dice, len(seat.fresh_dice))]
        if isinstance(pending, LifePreserverGift):
            return [
                Action.give_life_preserver(seat.seat_id, other.seat_id)
                for other in state.seats
                if other.seat_id != seat.seat_id
            ]
        if isinstance(pending, PassingReward):
            return [
                Action.claim_passing_reward(seat.seat_id, "draw_dink"),
                Action.claim_passing_reward(seat.seat_id, "discard_regret"),
            ]
        return []

    def _generate_sea_actions(self, state: GameState, seat: SeatState) -> list[Action]:
        actions = []

        # Catch attempts: each distinct dice combination against each visible fish
        targets = [
            shoal.top_fish_id
            for shoal in state.sea.shoals_at(seat.depth)
            if shoal.revealed and not shoal.is_empty
        ]
        tackle_options = [()] + [(i,) for i in _first_index_per_value(seat.tackle_dice)]
        subsets = _distinct_subsets(seat.fresh_dice)
        for fish_id in targets:
            for tackle in tackle_options:
                for indices in subsets:
                    actions.append(Action.catch_fish(seat.seat_id, indices, fish_id, tackle))

        for depth in range(seat.depth + 1, state.sea.max_depth + 1):
            actions.append(Action.descend(seat.seat_id, depth))

        for slot, shoal in enumerate(state.sea.shoals_at(seat.depth)):
            if not shoal.revealed and not shoal.is_empty:
                actions.append(Action.reveal_fish(seat.seat_id, slot))

        if seat.can_of_worms_face_up:
            for depth, slot in state.sea.positions():
                shoal = state.sea.get_shoal(depth, slot)
                if not shoal.revealed and not shoal.is_empty:
                    actions.append(Action.use_can_of_worms(seat.seat_id, depth, slot))

        if seat.has_flag("port_from_sea"):
            actions.append(Action.make_port(seat.seat_id))
        return actions

    def _generate_port_actions(self, state: GameState, seat: SeatState) -> list[Action]:
        actions = []
        for upgrade_id in state.port.shop:
            actions.append(Action.buy_upgrade(seat.seat_id, upgrade_id))

        for tackle in self.content.tackle_dice:
            affordable = seat.fishbucks // tackle.cost if tackle.cost else state.port.stock_of(tackle.id)
            for count in range(1, min(affordable, state.port.stock_of(tackle.id)) + 1):
                actions.append(Action.buy_tackle_dice(seat.seat_id, tackle.id, count))

        held = list(dict.fromkeys(seat.hand_fish + tuple(m.fish_id for m in seat.mounted)))
        for fish_id in held:
            actions.append(Action.sell_fish(seat.seat_id, fish_id))
        for fish_id in dict.fromkeys(seat.hand_fish):
            actions.append(Action.mount_fish(seat.seat_id, fish_id))
        for regret_id in dict.fromkeys(seat.regrets):
            actions.append(Action.discard_regret(seat.seat_id, regret_id))
        actions.append(Action.port_reroll(seat.seat_id))
        return actions

    def _generate_dink_actions(self, state: GameState, seat: SeatState) -> list[Action]:
        actions = []
        for dink_id in dict.fromkeys(seat.dinks):
            dink = self.content.get_dink(dink_id)
            if dink is None or not dink.one_shot:
                continue
            if "convert_one_to_six" in dink.effects:
                for i in _first_index_per_value(seat.fresh_dice):
                    if seat.fresh_dice[i] != 6:
                        actions.append(Action.play_dink(seat.seat_id, dink_id, i))
            elif "peek_shoal_top" in dink.effects:
                for slot in range(self.content.rules.shoals_per_depth):
                    actions.append(Action.play_dink(seat.seat_id, dink_id, slot))
            else:
                actions.append(Action.play_dink(seat.seat_id, dink_id))
        return actions


def _first_index_per_value(values) -> list[int]:
    seen = {}
    for i, value in enumerate(values):
        seen.setdefault(value, i)
    return sorted(seen.values())


def _distinct_positions(dice: tuple[int, ...], fresh_count: int) -> list[int]:
    """One index per (zone, face) pair for dice removal."""
    seen = {}
    for i, value in enumerate(dice):
        seen.setdefault((i < fresh_count, value), i)
    return sorted(seen.values())


def _distinct_subsets(dice: tuple[int, ...]) -> list[tuple[int, ...]]:
    """Non-empty index subsets, one per multiset of face values."""
    seen: dict[tuple[int, ...], tuple[int, ...]] = {}
    for size in range(1, len(dice) + 1):
        for indices in combinations(range(len(dice)), size):
            key = tuple(sorted(dice[i] for i in indices))
            seen.setdefault(key, indices)
    return list(seen.values())


def legal_actions(content: GameContent, state: GameState, seat_id: str | None = None) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    return ActionGenerator(content=content).generate(state, seat_id)


def is_legal(content: GameContent, state: GameState, action: Action) -> bool:
    """Check if a specific action is legal."""
    return Reducer(content=content).is_legal(state, action)
