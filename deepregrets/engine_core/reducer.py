"""
Reducer - Applies actions to game state.

The reducer is the single point of state change.
All state changes must go through transition() / Reducer.apply().

Design principles:
- Pure function: (state, action) -> new_state, randomness derived from
  the seed and draw counter stored in the state
- Rule violations are absorbed: the public transition() returns the
  very same state object
- Malformed actions raise MalformedActionError
- One legality predicate (is_legal) shared by humans, bots and the
  action generator
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .state import (
    GameState,
    GamePhase,
    Location,
    FailedCatch,
    Peek,
    DiceRemoval,
    LifePreserverGift,
    PassingReward,
)
from .action import (
    Action,
    ActionType,
    ActionResult,
    MAIN_ACTIONS,
    SYSTEM_ACTIONS,
    ensure_well_formed,
)
from .dice import (
    catch_succeeds,
    descend_dice,
    effective_difficulty,
    lowest_die_index,
    roll_dice,
    roll_faces,
    split_dice,
)
from . import economy
from .pending import settle
from . import turns
from ..spec_schema.game_spec import FishSize

if TYPE_CHECKING:
    from ..spec_schema import GameContent

logger = logging.getLogger(__name__)


PHASE_ACTIONS: dict[GamePhase, frozenset[ActionType]] = {
    GamePhase.REFRESH: frozenset({ActionType.PLAY_DINK, ActionType.END_TURN}),
    GamePhase.DECLARATION: frozenset({ActionType.DECLARE_LOCATION, ActionType.PLAY_DINK}),
    GamePhase.ACTION: MAIN_ACTIONS | frozenset({
        ActionType.REVEAL_FISH,
        ActionType.USE_CAN_OF_WORMS,
        ActionType.PLAY_DINK,
        ActionType.USE_LIFE_PRESERVER,
        ActionType.PASS,
        ActionType.END_TURN,
    }),
}

RESOLVING_ACTIONS: dict[type, ActionType] = {
    DiceRemoval: ActionType.REMOVE_DIE,
    LifePreserverGift: ActionType.GIVE_LIFE_PRESERVER,
    PassingReward: ActionType.CLAIM_PASSING_REWARD,
}

# Dink timings playable per phase; passive timings are never played
DINK_WINDOWS: dict[GamePhase, frozenset[str]] = {
    GamePhase.REFRESH: frozenset({"refresh", "roll"}),
    GamePhase.DECLARATION: frozenset({"declaration"}),
    GamePhase.ACTION: frozenset({"catch", "port"}),
}


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    Content provides the lookup tables and numeric rules.
    """
    content: GameContent

    def transition(self, state: GameState, action: Action) -> GameState:
        """Apply an action; an illegal action returns `state` itself."""
        result = self.apply(state, action)
        return result.new_state if result.success else state

    def is_legal(self, state: GameState, action: Action) -> bool:
        return self.apply(state, action).success

    def violation(self, state: GameState, action: Action) -> str | None:
        """The rule an action breaks, or None when it is legal."""
        return self.apply(state, action).error

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or the violated rule.
        Raises MalformedActionError for malformed actions.
        """
        ensure_well_formed(action)

        violation = self._validate_action(state, action)
        if violation:
            logger.debug("Rejected %s from %s: %s", action.describe(), action.seat_id, violation)
            return ActionResult.failure(violation)

        handler = self._get_handler(action.action_type)
        rng = random.Random(f"{state.random_seed}:{state.random_counter}")
        result = handler(state, action, rng)
        if not result.success:
            logger.debug("Rejected %s from %s: %s", action.describe(), action.seat_id, result.error)
            return result

        new_state = result.new_state
        if action.action_type not in SYSTEM_ACTIONS:
            new_state = new_state._copy_with(random_counter=state.random_counter + 1)
        # A failed catch can only be rerolled straight away
        if action.action_type not in (ActionType.CATCH_FISH, ActionType.PLAY_DINK):
            new_state = new_state._copy_with(last_failed_catch=None)
        new_state = settle(self.content, new_state, rng)
        logger.debug("Applied %s from %s", action.describe(), action.seat_id)
        return ActionResult.success_with_state(new_state, result.state_changes)

    def _validate_action(self, state: GameState, action: Action) -> str | None:
        """
        Validate phase, seat and pending-decision gating.

        Returns error message if invalid, None if valid. Handlers check
        the action-specific rules.
        """
        if action.action_type in SYSTEM_ACTIONS:
            return None

        if state.phase == GamePhase.SETUP:
            return "Game not started - only INIT_GAME allowed"
        if state.is_game_over:
            return "Game is over - no actions allowed"

        seat = state.get_seat(action.seat_id)
        if seat is None:
            return f"Unknown seat {action.seat_id}"

        pending = state.pending
        if pending is not None:
            expected = RESOLVING_ACTIONS[type(pending)]
            owner = turns.acting_seat_id(state)
            if action.action_type != expected or action.seat_id != owner:
                return f"Waiting for {owner} to resolve {type(pending).__name__}"
            return None

        if action.action_type in RESOLVING_ACTIONS.values():
            return f"No pending decision for {action.action_type.value}"

        if action.action_type not in PHASE_ACTIONS.get(state.phase, frozenset()):
            return f"{action.action_type.value} not allowed during {state.phase.value}"

        if state.current_seat.seat_id != action.seat_id:
            return f"Not {action.seat_id}'s turn"

        if action.action_type in MAIN_ACTIONS and seat.turn_action_taken and seat.bonus_actions <= 0:
            return f"{action.seat_id} already took an action this turn"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.INIT_GAME: self._handle_init_game,
            ActionType.RESET_GAME: self._handle_reset_game,
            ActionType.DECLARE_LOCATION: self._handle_declare_location,
            ActionType.CATCH_FISH: self._handle_catch_fish,
            ActionType.DESCEND: self._handle_descend,
            ActionType.BUY_UPGRADE: self._handle_buy_upgrade,
            ActionType.MOUNT_FISH: self._handle_mount_fish,
            ActionType.SELL_FISH: self._handle_sell_fish,
            ActionType.REVEAL_FISH: self._handle_reveal_fish,
            ActionType.BUY_TACKLE_DICE: self._handle_buy_tackle_dice,
            ActionType.DISCARD_REGRET: self._handle_discard_regret,
            ActionType.MAKE_PORT: self._handle_make_port,
            ActionType.PORT_REROLL: self._handle_port_reroll,
            ActionType.USE_CAN_OF_WORMS: self._handle_use_can_of_worms,
            ActionType.PLAY_DINK: self._handle_play_dink,
            ActionType.USE_LIFE_PRESERVER: self._handle_use_life_preserver,
            ActionType.PASS: self._handle_pass,
            ActionType.END_TURN: self._handle_end_turn,
            ActionType.REMOVE_DIE: self._handle_remove_die,
            ActionType.GIVE_LIFE_PRESERVER: self._handle_give_life_preserver,
            ActionType.CLAIM_PASSING_REWARD: self._handle_claim_passing_reward,
        }
        return handlers[action_type]

    # ------------------------------------------------------------------
    # System
    # ------------------------------------------------------------------

    def _handle_init_game(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        from ..games.deep_regrets.setup import setup_game

        payload = action.payload
        try:
            new_state = setup_game(self.content, payload.seats, seed=payload.seed, game_id=payload.game_id)
        except ValueError as e:
            return ActionResult.failure(str(e))
        return ActionResult.success_with_state(
            new_state,
            changes=[f"New game with {len(payload.seats)} seat(s)"],
        )

    def _handle_reset_game(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        return ActionResult.success_with_state(GameState(), changes=["Game reset"])

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def _handle_declare_location(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        if action.payload.location == "sea":
            seat = seat._copy_with(
                location=Location.SEA,
                depth=economy.start_depth(self.content, seat),
                has_declared=True,
            )
        else:
            seat = economy.make_port(seat)._copy_with(has_declared=True)
        new_state = turns.finish_declaration(state.with_seat(seat))
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{seat.name} heads to {seat.location.value}"],
        )

    # ------------------------------------------------------------------
    # At sea
    # ------------------------------------------------------------------

    def _handle_catch_fish(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        """
        Resolve a catch attempt.

        The chosen dice are spent whether or not the catch succeeds. A failed
        catch draws a consolation Dink and can be retried once with a reroll
        Dink played straight after.
        """
        payload = action.payload
        seat = state.get_seat(action.seat_id)
        if seat.location != Location.SEA:
            return ActionResult.failure("Can only catch fish at sea")

        indices = payload.die_indices
        if not indices:
            return ActionResult.failure("Select at least one die")
        if len(set(indices)) != len(indices):
            return ActionResult.failure("Die indices must be distinct")
        if any(i < 0 or i >= len(seat.fresh_dice) for i in indices):
            return ActionResult.failure("Die index not in fresh dice")

        tackle_indices = payload.tackle_indices
        if len(set(tackle_indices)) != len(tackle_indices):
            return ActionResult.failure("Tackle indices must be distinct")
        if any(i < 0 or i >= len(seat.tackle_dice) for i in tackle_indices):
            return ActionResult.failure("Tackle index not held")

        slot = state.sea.find_top(seat.depth, payload.target_fish_id)
        fish = self.content.get_fish(payload.target_fish_id)
        if slot is None or fish is None:
            return ActionResult.failure(
                f"{payload.target_fish_id} is not on top of a revealed shoal at depth {seat.depth}"
            )

        used, remaining = split_dice(seat.fresh_dice, indices)
        tackle_total = 0
        for i in tackle_indices:
            tackle = self.content.get_tackle_die(seat.tackle_dice[i])
            if tackle is not None:
                tackle_total += roll_faces(rng, tackle.faces)
        bonus = seat.catch_bonus + tackle_total
        difficulty = effective_difficulty(fish.difficulty, seat.catch_modifier, seat.catch_discount)

        success = seat.has_flag("auto_catch_difficulty_3") and fish.difficulty <= 3
        success = success or catch_succeeds(sum(used) + bonus, difficulty)
        if not success and seat.has_flag("reroll_1_die"):
            rerolled = list(used)
            rerolled[lowest_die_index(used)] = roll_dice(rng, 1)[0]
            used = tuple(rerolled)
            success = catch_succeeds(sum(used) + bonus, difficulty)

        seat = self._spend_main_action(seat)._copy_with(
            fresh_dice=remaining,
            spent_dice=seat.spent_dice + used,
            tackle_dice=tuple(t for i, t in enumerate(seat.tackle_dice) if i not in set(tackle_indices)),
            catch_bonus=0,
            catch_discount=0,
        )
        state = state.with_seat(seat)._copy_with(last_failed_catch=None)

        if success:
            state = self._land_fish(state, seat.seat_id, seat.depth, slot, rng)
            return ActionResult.success_with_state(state, changes=[f"{seat.name} caught {fish.name}"])

        state = economy.draw_dink(self.content, state, seat.seat_id, rng)
        state = state._copy_with(last_failed_catch=FailedCatch(
            seat_id=seat.seat_id,
            fish_id=fish.id,
            depth=seat.depth,
            slot=slot,
            dice=used,
            bonus=bonus,
            difficulty=difficulty,
        ))
        return ActionResult.success_with_state(state, changes=[f"{seat.name} failed to catch {fish.name}"])

    def _land_fish(
        self,
        state: GameState,
        seat_id: str,
        depth: int,
        slot: int,
        rng: random.Random,
    ) -> GameState:
        """Move the top fish of a shoal into the seat's hand and resolve its abilities."""
        shoal = state.sea.get_shoal(depth, slot)
        fish_id, shoal = shoal.pop_top()
        state = state.with_sea(state.sea.with_shoal(depth, slot, shoal))
        seat = state.get_seat(seat_id)
        state = state.with_seat(seat._copy_with(hand_fish=seat.hand_fish + (fish_id,)))
        fish = self.content.get_fish(fish_id)

        regrets = 0
        if fish.has_ability("regret_draw"):
            regrets += 1
        if fish.has_ability("regret_draw_2"):
            regrets += 2
        if shoal.is_empty:
            # Overfishing: emptying a shoal weighs on the conscience
            regrets += 1
        if regrets and seat.has_flag("reduce_regrets_1"):
            regrets -= 1
        state = economy.draw_regrets(self.content, state, seat_id, regrets, rng)

        for tag in fish.abilities:
            if tag.startswith("madness_+"):
                state = economy.raise_madness(self.content, state, seat_id, int(tag[len("madness_+"):]))

        if fish.has_ability("dink_on_catch"):
            state = economy.draw_dink(self.content, state, seat_id, rng)
        if seat.has_flag("draw_dink_on_catch"):
            state = economy.draw_dink(self.content, state, seat_id, rng)

        if fish.has_ability("discard_small") and not seat.has_flag("ignore_discard_small"):
            state = self._discard_small_fish(state, seat_id)

        if fish.has_ability("start_erosion") and not state.sea.plug_active:
            logger.info("%s pulled the plug; the sea starts draining", seat_id)
            state = state.with_sea(replace(state.sea, plug_active=True))

        if fish.has_ability("end_turn"):
            state = turns.pass_seat(self.content, state, seat_id)
        return state

    def _discard_small_fish(self, state: GameState, seat_id: str) -> GameState:
        """A predator eats the cheapest small fish in hand."""
        seat = state.get_seat(seat_id)
        small = []
        for i, fish_id in enumerate(seat.hand_fish):
            fish = self.content.get_fish(fish_id)
            if fish is not None and fish.size == FishSize.SMALL:
                small.append((fish.value, i, fish_id))
        if not small:
            return state
        _, _, fish_id = min(small)
        seat = seat._copy_with(hand_fish=economy.without_first(seat.hand_fish, fish_id))
        sea = replace(state.sea, graveyard=state.sea.graveyard + (fish_id,))
        return state.with_seat(seat).with_sea(sea)

    def _handle_descend(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        target = action.payload.target_depth
        if seat.location != Location.SEA:
            return ActionResult.failure("Can only descend at sea")
        if target <= seat.depth or target > state.sea.max_depth:
            return ActionResult.failure(f"Cannot descend from depth {seat.depth} to {target}")

        threshold = economy.descend_threshold(self.content, seat)
        chosen = descend_dice(seat.fresh_dice, target - seat.depth, threshold)
        if chosen is None:
            return ActionResult.failure(
                f"Need {target - seat.depth} dice showing {threshold}+ to reach depth {target}"
            )

        used, remaining = split_dice(seat.fresh_dice, chosen)
        seat = self._spend_main_action(seat)._copy_with(
            depth=target,
            fresh_dice=remaining,
            spent_dice=seat.spent_dice + used,
        )
        return ActionResult.success_with_state(
            state.with_seat(seat),
            changes=[f"{seat.name} descends to depth {target}"],
        )

    def _handle_reveal_fish(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        slot = action.payload.shoal_slot
        if seat.location != Location.SEA:
            return ActionResult.failure("Can only reveal fish at sea")
        shoal = state.sea.get_shoal(seat.depth, slot)
        if shoal is None or shoal.is_empty:
            return ActionResult.failure(f"No fish in shoal {slot} at depth {seat.depth}")
        if shoal.revealed:
            return ActionResult.failure(f"Shoal {slot} is already revealed")

        cost = economy.reveal_cost(self.content, seat)
        if len(seat.fresh_dice) < cost:
            return ActionResult.failure("No fresh dice to spend on a reveal")
        fresh, spent = list(seat.fresh_dice), list(seat.spent_dice)
        for _ in range(cost):
            spent.append(fresh.pop(lowest_die_index(fresh)))
        seat = seat._copy_with(fresh_dice=tuple(fresh), spent_dice=tuple(spent))

        sea = state.sea.with_shoal(seat.depth, slot, replace(shoal, revealed=True))
        return ActionResult.success_with_state(
            state.with_seat(seat).with_sea(sea),
            changes=[f"{seat.name} reveals {shoal.top_fish_id}"],
        )

    # ------------------------------------------------------------------
    # At port
    # ------------------------------------------------------------------

    def _handle_buy_upgrade(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        upgrade = self.content.get_upgrade(action.payload.upgrade_id)
        if seat.location != Location.PORT:
            return ActionResult.failure("Can only shop at port")
        if upgrade is None or upgrade.id not in state.port.shop:
            return ActionResult.failure(f"{action.payload.upgrade_id} is not for sale")
        reason = economy.equip_violation(seat, upgrade)
        if reason:
            return ActionResult.failure(reason)
        price = economy.upgrade_price(self.content, seat, upgrade)
        if price > seat.fishbucks:
            return ActionResult.failure(f"{upgrade.name} costs {price}, {seat.name} has {seat.fishbucks}")

        seat = seat._copy_with(fishbucks=seat.fishbucks - price, shop_discount_pending=0)
        seat = economy.apply_upgrade(self.content, self._spend_main_action(seat), upgrade)
        return ActionResult.success_with_state(
            state.with_seat(seat),
            changes=[f"{seat.name} buys {upgrade.name} for {price}"],
        )

    def _handle_buy_tackle_dice(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        tackle = self.content.get_tackle_die(action.payload.tackle_id)
        count = action.payload.count
        if seat.location != Location.PORT:
            return ActionResult.failure("Can only buy tackle at port")
        if tackle is None:
            return ActionResult.failure(f"Unknown tackle die {action.payload.tackle_id}")
        if state.port.stock_of(tackle.id) < count:
            return ActionResult.failure(f"Only {state.port.stock_of(tackle.id)} {tackle.name} left")
        if tackle.cost * count > seat.fishbucks:
            return ActionResult.failure(f"{seat.name} cannot afford {count} {tackle.name}")

        seat = self._spend_main_action(seat)._copy_with(
            fishbucks=seat.fishbucks - tackle.cost * count,
            tackle_dice=seat.tackle_dice + (tackle.id,) * count,
        )
        port = state.port.with_stock(tackle.id, state.port.stock_of(tackle.id) - count)
        return ActionResult.success_with_state(
            state.with_seat(seat).with_port(port),
            changes=[f"{seat.name} buys {count} {tackle.name}"],
        )

    def _handle_sell_fish(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        fish = self.content.get_fish(action.payload.fish_id)
        if seat.location != Location.PORT:
            return ActionResult.failure("Can only sell fish at port")
        if fish is None:
            return ActionResult.failure(f"Unknown fish {action.payload.fish_id}")

        if fish.id in seat.hand_fish:
            seat = seat._copy_with(hand_fish=economy.without_first(seat.hand_fish, fish.id))
        else:
            trophy = next((m for m in seat.mounted if m.fish_id == fish.id), None)
            if trophy is None:
                return ActionResult.failure(f"{seat.name} holds no {fish.name}")
            seat = seat._copy_with(mounted=tuple(m for m in seat.mounted if m != trophy))

        value = economy.sale_value(self.content, seat, fish)
        seat = self._spend_main_action(seat)._copy_with(fishbucks=seat.fishbucks + value)
        state = state.with_seat(seat)
        if fish.is_foul:
            state = economy.draw_regrets(self.content, state, seat.seat_id, 1, rng)
        return ActionResult.success_with_state(state, changes=[f"{seat.name} sells {fish.name} for {value}"])

    def _handle_mount_fish(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        fish_id = action.payload.fish_id
        if seat.location != Location.PORT:
            return ActionResult.failure("Can only mount fish at port")
        if fish_id not in seat.hand_fish:
            return ActionResult.failure(f"{fish_id} is not in {seat.name}'s hand")
        slot = action.payload.slot
        if slot is None:
            slot = economy.default_mount_slot(self.content, seat)
        if slot is None or slot not in seat.free_mount_slots:
            return ActionResult.failure(f"No free mount slot {slot}")

        seat = economy.mount(self._spend_main_action(seat), fish_id, slot)
        return ActionResult.success_with_state(
            state.with_seat(seat),
            changes=[f"{seat.name} mounts {fish_id} in slot {slot}"],
        )

    def _handle_discard_regret(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        regret_id = action.payload.regret_id
        if seat.location != Location.PORT or not seat.made_port_today:
            return ActionResult.failure("Regrets can only be discarded after making port")
        if seat.regret_discarded_today:
            return ActionResult.failure(f"{seat.name} already discarded a regret today")
        if regret_id not in seat.regrets:
            return ActionResult.failure(f"{seat.name} does not hold {regret_id}")

        seat = self._spend_main_action(seat)._copy_with(regret_discarded_today=True)
        state = economy.discard_regret(self.content, state.with_seat(seat), seat.seat_id, regret_id)
        return ActionResult.success_with_state(state, changes=[f"{seat.name} lets go of {regret_id}"])

    def _handle_port_reroll(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        """Reroll every fresh die, once a day after making port."""
        seat = state.get_seat(action.seat_id)
        if seat.location != Location.PORT or not seat.made_port_today:
            return ActionResult.failure("Dice can only be rerolled after making port")
        if seat.port_reroll_used_today:
            return ActionResult.failure(f"{seat.name} already rerolled today")
        if not seat.fresh_dice:
            return ActionResult.failure(f"{seat.name} has no fresh dice to reroll")

        fresh = roll_dice(rng, len(seat.fresh_dice), reroll_ones=seat.has_flag("reroll_1s"))
        seat = self._spend_main_action(seat)._copy_with(fresh_dice=fresh, port_reroll_used_today=True)
        return ActionResult.success_with_state(
            state.with_seat(seat),
            changes=[f"{seat.name} rerolls {len(fresh)} dice"],
        )

    def _handle_make_port(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        """Abandon the sea for the rest of the day (Lifeboat)."""
        seat = state.get_seat(action.seat_id)
        if seat.location != Location.SEA:
            return ActionResult.failure(f"{seat.name} is already at port")
        if not seat.has_flag("port_from_sea"):
            return ActionResult.failure(f"{seat.name} has no way back to port from the sea")

        seat = economy.make_port(self._spend_main_action(seat))
        return ActionResult.success_with_state(
            state.with_seat(seat),
            changes=[f"{seat.name} makes port"],
        )

    def _handle_use_can_of_worms(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        """Look at a hidden top fish privately; the can goes face down."""
        seat = state.get_seat(action.seat_id)
        depth, slot = action.payload.depth, action.payload.shoal_slot
        if seat.location != Location.SEA:
            return ActionResult.failure("The Can of Worms only works at sea")
        if not seat.can_of_worms_face_up:
            return ActionResult.failure(f"{seat.name}'s Can of Worms is face down")
        shoal = state.sea.get_shoal(depth, slot)
        if shoal is None or shoal.is_empty:
            return ActionResult.failure(f"No fish in shoal {slot} at depth {depth}")
        if shoal.revealed:
            return ActionResult.failure(f"Shoal {slot} at depth {depth} is already revealed")

        peek = Peek(depth=depth, slot=slot, fish_id=shoal.top_fish_id)
        seat = seat._copy_with(can_of_worms_face_up=False, peeked=seat.peeked + (peek,))
        return ActionResult.success_with_state(
            state.with_seat(seat),
            changes=[f"{seat.name} peeks into shoal {slot} at depth {depth}"],
        )

    # ------------------------------------------------------------------
    # Dinks and the life preserver
    # ------------------------------------------------------------------

    def _handle_play_dink(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        """Play a one-shot Dink whose timing matches the current phase."""
        seat = state.get_seat(action.seat_id)
        dink = self.content.get_dink(action.payload.dink_id)
        if dink is None or dink.id not in seat.dinks:
            return ActionResult.failure(f"{seat.name} does not hold {action.payload.dink_id}")
        if not dink.one_shot:
            return ActionResult.failure(f"{dink.name} is passive and cannot be played")
        if dink.timing.value not in DINK_WINDOWS.get(state.phase, frozenset()):
            return ActionResult.failure(f"{dink.name} cannot be played during {state.phase.value}")
        if dink.timing.value == "catch" and seat.location != Location.SEA:
            return ActionResult.failure(f"{dink.name} can only be played at sea")
        if dink.timing.value == "port" and seat.location != Location.PORT:
            return ActionResult.failure(f"{dink.name} can only be played at port")

        seat = seat._copy_with(dinks=economy.without_first(seat.dinks, dink.id))
        state = state.with_seat(seat).with_port(
            state.port._copy_with(dink_discard=state.port.dink_discard + (dink.id,))
        )
        for effect in dink.effects:
            effect_handler = self._dink_effects().get(effect)
            if effect_handler is None:
                return ActionResult.failure(f"{dink.name} has no playable effect {effect}")
            outcome = effect_handler(state, seat.seat_id, action.payload.target, rng)
            if isinstance(outcome, str):
                return ActionResult.failure(outcome)
            state = outcome
        return ActionResult.success_with_state(state, changes=[f"{seat.name} plays {dink.name}"])

    def _dink_effects(self):
        return {
            "reroll_failed_catch": self._dink_reroll_failed_catch,
            "ready_spent_die": self._dink_ready_spent_die,
            "catch_bonus_1": self._dink_catch_bonus,
            "peek_shoal_top": self._dink_peek_shoal,
            "convert_one_to_six": self._dink_convert_to_six,
            "shop_discount_2": self._dink_shop_discount,
        }

    def _dink_reroll_failed_catch(self, state, seat_id, target, rng):
        failed = state.last_failed_catch
        if failed is None or failed.seat_id != seat_id:
            return "No failed catch to reroll"
        shoal = state.sea.get_shoal(failed.depth, failed.slot)
        if shoal is None or shoal.top_fish_id != failed.fish_id:
            return "The fish is gone"

        rerolled = roll_dice(rng, len(failed.dice))
        seat = state.get_seat(seat_id)
        spent = seat.spent_dice[:len(seat.spent_dice) - len(failed.dice)] + rerolled
        state = state.with_seat(seat._copy_with(spent_dice=spent))._copy_with(last_failed_catch=None)
        if catch_succeeds(sum(rerolled) + failed.bonus, failed.difficulty):
            state = self._land_fish(state, seat_id, failed.depth, failed.slot, rng)
        return state

    def _dink_ready_spent_die(self, state, seat_id, target, rng):
        """Move a spent die, the highest unless `target` names one, back to fresh as it lies."""
        seat = state.get_seat(seat_id)
        if not seat.spent_dice:
            return "No spent dice to ready"
        if target is None:
            target = max(range(len(seat.spent_dice)), key=lambda i: (seat.spent_dice[i], -i))
        if target < 0 or target >= len(seat.spent_dice):
            return f"No spent die {target}"
        spent = seat.spent_dice[:target] + seat.spent_dice[target + 1:]
        seat = seat._copy_with(fresh_dice=seat.fresh_dice + (seat.spent_dice[target],), spent_dice=spent)
        return state.with_seat(seat)

    def _dink_catch_bonus(self, state, seat_id, target, rng):
        seat = state.get_seat(seat_id)
        return state.with_seat(seat._copy_with(catch_bonus=seat.catch_bonus + 1))

    def _dink_peek_shoal(self, state, seat_id, target, rng):
        seat = state.get_seat(seat_id)
        depth = economy.start_depth(self.content, seat)
        shoal = state.sea.get_shoal(depth, target if target is not None else -1)
        if shoal is None or shoal.is_empty or shoal.revealed:
            return f"Nothing to reveal in shoal {target} at depth {depth}"
        sea = state.sea.with_shoal(depth, target, replace(shoal, revealed=True))
        return state.with_sea(sea)

    def _dink_convert_to_six(self, state, seat_id, target, rng):
        seat = state.get_seat(seat_id)
        if target is None or target < 0 or target >= len(seat.fresh_dice):
            return "Choose a fresh die to turn"
        fresh = list(seat.fresh_dice)
        fresh[target] = 6
        return state.with_seat(seat._copy_with(fresh_dice=tuple(fresh)))

    def _dink_shop_discount(self, state, seat_id, target, rng):
        seat = state.get_seat(seat_id)
        return state.with_seat(seat._copy_with(shop_discount_pending=seat.shop_discount_pending + 2))

    def _handle_use_life_preserver(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        if state.life_preserver_owner_id != seat.seat_id:
            return ActionResult.failure(f"{seat.name} does not hold the life preserver")
        if state.life_preserver_used_today:
            return ActionResult.failure("The life preserver was already used today")

        discount = self.content.rules.life_preserver_discount
        if action.payload.use_type == "reduce_fish_difficulty":
            if seat.location != Location.SEA:
                return ActionResult.failure("Fish difficulty can only be reduced at sea")
            seat = seat._copy_with(catch_discount=seat.catch_discount + discount)
        else:
            if seat.location != Location.PORT:
                return ActionResult.failure("Shop costs can only be reduced at port")
            seat = seat._copy_with(shop_discount_pending=seat.shop_discount_pending + discount)

        return ActionResult.success_with_state(
            state.with_seat(seat)._copy_with(life_preserver_used_today=True),
            changes=[f"{seat.name} uses the life preserver"],
        )

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    def _handle_pass(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        new_state = turns.pass_seat(self.content, state, action.seat_id)
        return ActionResult.success_with_state(new_state, changes=[f"{action.seat_id} passes"])

    def _handle_end_turn(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        if state.phase == GamePhase.REFRESH:
            return ActionResult.success_with_state(turns.finish_refresh_turn(state, action.seat_id, rng))
        seat = state.get_seat(action.seat_id)
        if not seat.turn_action_taken:
            return ActionResult.failure("Take an action or pass before ending the turn")
        return ActionResult.success_with_state(turns.end_action_turn(self.content, state, action.seat_id))

    def _spend_main_action(self, seat):
        if seat.turn_action_taken:
            return seat._copy_with(bonus_actions=seat.bonus_actions - 1)
        return seat._copy_with(turn_action_taken=True)

    # ------------------------------------------------------------------
    # Pending decisions
    # ------------------------------------------------------------------

    def _handle_remove_die(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        index = action.payload.die_index
        held = len(seat.fresh_dice) + len(seat.spent_dice)
        if index < 0 or index >= held:
            return ActionResult.failure(f"Die index {index} out of range")

        if index < len(seat.fresh_dice):
            fresh = seat.fresh_dice[:index] + seat.fresh_dice[index + 1:]
            seat = seat._copy_with(fresh_dice=fresh)
        else:
            i = index - len(seat.fresh_dice)
            seat = seat._copy_with(spent_dice=seat.spent_dice[:i] + seat.spent_dice[i + 1:])

        remaining = state.pending.count - 1
        pending = DiceRemoval(seat_id=seat.seat_id, count=remaining) if remaining > 0 else None
        return ActionResult.success_with_state(
            state.with_seat(seat)._copy_with(pending=pending),
            changes=[f"{seat.name} discards a die"],
        )

    def _handle_give_life_preserver(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        target = state.get_seat(action.payload.target_seat_id)
        if target is None or target.seat_id == action.seat_id:
            return ActionResult.failure("Give the life preserver to another seat")
        return ActionResult.success_with_state(
            state._copy_with(
                life_preserver_owner_id=target.seat_id,
                pending=None,
                preserver_check_due=True,
            ),
            changes=[f"{action.seat_id} hands the life preserver to {target.name}"],
        )

    def _handle_claim_passing_reward(self, state: GameState, action: Action, rng: random.Random) -> ActionResult:
        seat = state.get_seat(action.seat_id)
        if action.payload.choice == "discard_regret":
            if not seat.regrets:
                return ActionResult.failure(f"{seat.name} has no regret to discard")
            state = economy.discard_regret(self.content, state, seat.seat_id, rng.choice(seat.regrets))
        else:
            state = economy.draw_dink(self.content, state, seat.seat_id, rng)
        return ActionResult.success_with_state(
            state._copy_with(pending=None),
            changes=[f"{seat.name} claims {action.payload.choice}"],
        )


def transition(content: GameContent, state: GameState, action: Action) -> GameState:
    """
    The rules engine's transition function.

    Returns the new state, or `state` itself when the action breaks a rule.
    """
    return Reducer(content=content).transition(state, action)


def apply_action(content: GameContent, state: GameState, action: Action) -> ActionResult:
    """Convenience function to apply an action and keep the violation reason."""
    return Reducer(content=content).apply(state, action)
