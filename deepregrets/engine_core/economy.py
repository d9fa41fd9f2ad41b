"""
Economy Module - Prices, upgrade effects, regrets, Dinks and scoring.

All functions are pure: they take seats or states and return new ones.
Functions that shuffle or pick at random take an explicit random.Random
derived from the game state by the reducer.
"""

from __future__ import annotations
import logging
import random
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .state import GameState, SeatState, Location, Mount

if TYPE_CHECKING:
    from ..spec_schema import GameContent, FishDefinition, UpgradeDefinition, RulesConfig

logger = logging.getLogger(__name__)

_NUMERIC_EFFECT = re.compile(r"^(max_dice|catch_difficulty|descend_cost|shop_discount)_([+-]?\d+)$")


# ============================================================================
# Madness
# ============================================================================

def madness_tier(regret_count: int, rules: RulesConfig) -> int:
    """Tier 0-5 from the number of regrets held."""
    return sum(1 for threshold in rules.madness_thresholds if regret_count >= threshold)


def fish_value_modifier(fish: FishDefinition, madness: int, rules: RulesConfig) -> int:
    table = rules.foul_value_modifiers if fish.is_foul else rules.fair_value_modifiers
    return table[min(madness, len(table) - 1)]


def adjusted_fish_value(fish: FishDefinition, madness: int, rules: RulesConfig) -> int:
    """Mounted value of a fish for a seat at the given madness, never negative."""
    return max(0, fish.value + fish_value_modifier(fish, madness, rules))


def recompute_madness(content: GameContent, seat: SeatState) -> SeatState:
    """Derive madness and max_dice from regrets, madness offset and base dice."""
    rules = content.rules
    madness = min(rules.max_madness, madness_tier(len(seat.regrets), rules) + seat.madness_offset)
    max_dice = seat.base_max_dice + rules.madness_dice_bonus[madness]
    if madness == seat.madness and max_dice == seat.max_dice:
        return seat
    return seat._copy_with(madness=madness, max_dice=max_dice)


def raise_madness(content: GameContent, state: GameState, seat_id: str, amount: int) -> GameState:
    """
    Raise a seat's madness.

    Blocked entirely by madness immunity; otherwise a held Scrimshaw-style
    Dink (timing `madness`) is discarded to cancel the increase.
    """
    seat = state.get_seat(seat_id)
    if seat is None or amount <= 0:
        return state
    if seat.has_flag("madness_immune"):
        return state

    ward = _first_dink_with_effect(content, seat, "ignore_madness_increase")
    if ward is not None:
        logger.debug("%s discards %s to ignore madness", seat_id, ward)
        seat = seat._copy_with(dinks=without_first(seat.dinks, ward))
        port = state.port._copy_with(dink_discard=state.port.dink_discard + (ward,))
        return state.with_seat(seat).with_port(port)

    seat = recompute_madness(content, seat._copy_with(madness_offset=seat.madness_offset + amount))
    return state.with_seat(seat)


# ============================================================================
# Regrets
# ============================================================================

def draw_regrets(
    content: GameContent,
    state: GameState,
    seat_id: str,
    count: int,
    rng: random.Random,
) -> GameState:
    """
    Draw `count` regrets for a seat.

    Shields absorb draws first. An empty deck is refilled from the
    shuffled discard; when both are empty the regret is stolen at random
    from another seat that holds one.
    """
    for _ in range(count):
        seat = state.get_seat(seat_id)
        if seat is None:
            return state
        if seat.regret_shields > 0:
            state = state.with_seat(seat._copy_with(regret_shields=seat.regret_shields - 1))
            continue

        port = state.port
        if not port.regret_deck and port.regret_discard:
            deck = list(port.regret_discard)
            rng.shuffle(deck)
            port = port._copy_with(regret_deck=tuple(deck), regret_discard=())

        if port.regret_deck:
            regret_id = port.regret_deck[0]
            state = state.with_port(port._copy_with(regret_deck=port.regret_deck[1:]))
        else:
            victims = [s for s in state.seats if s.seat_id != seat_id and s.regrets]
            if not victims:
                return state.with_port(port)
            victim = rng.choice(victims)
            regret_id = rng.choice(victim.regrets)
            victim = recompute_madness(content, victim._copy_with(regrets=without_first(victim.regrets, regret_id)))
            state = state.with_port(port).with_seat(victim)
            logger.debug("%s steals %s from %s", seat_id, regret_id, victim.seat_id)

        seat = state.get_seat(seat_id)
        seat = recompute_madness(content, seat._copy_with(regrets=seat.regrets + (regret_id,)))
        state = state.with_seat(seat)
    return state


def discard_regret(content: GameContent, state: GameState, seat_id: str, regret_id: str) -> GameState:
    """Move one held regret to the discard pile. Lowering madness may shrink max_dice."""
    seat = state.get_seat(seat_id)
    if seat is None or regret_id not in seat.regrets:
        return state
    seat = recompute_madness(content, seat._copy_with(regrets=without_first(seat.regrets, regret_id)))
    port = state.port._copy_with(regret_discard=state.port.regret_discard + (regret_id,))
    return state.with_seat(seat).with_port(port)


# ============================================================================
# Dinks
# ============================================================================

def draw_dink(content: GameContent, state: GameState, seat_id: str, rng: random.Random) -> GameState:
    """
    Draw one Dink for a seat.

    Immediate Dinks resolve on the spot and go to the discard pile.
    Returns the state unchanged when deck and discard are both empty.
    """
    port = state.port
    if not port.dink_deck and port.dink_discard:
        deck = list(port.dink_discard)
        rng.shuffle(deck)
        port = port._copy_with(dink_deck=tuple(deck), dink_discard=())
    if not port.dink_deck:
        return state

    dink_id = port.dink_deck[0]
    port = port._copy_with(dink_deck=port.dink_deck[1:])
    seat = state.get_seat(seat_id)
    dink = content.get_dink(dink_id)

    if dink is not None and dink.timing.value == "immediate":
        gained = sum(1 for e in dink.effects if e == "gain_1_fishbuck")
        seat = seat._copy_with(fishbucks=seat.fishbucks + gained)
        port = port._copy_with(dink_discard=port.dink_discard + (dink_id,))
    else:
        seat = seat._copy_with(dinks=seat.dinks + (dink_id,))
    return state.with_seat(seat).with_port(port)


def passive_effect_count(content: GameContent, seat: SeatState, effect: str) -> int:
    """How many passive (non one-shot) Dinks in hand carry `effect`."""
    total = 0
    for dink_id in seat.dinks:
        dink = content.get_dink(dink_id)
        if dink is not None and not dink.one_shot and effect in dink.effects:
            total += 1
    return total


def _first_dink_with_effect(content: GameContent, seat: SeatState, effect: str) -> str | None:
    for dink_id in seat.dinks:
        dink = content.get_dink(dink_id)
        if dink is not None and effect in dink.effects:
            return dink_id
    return None


# ============================================================================
# Movement
# ============================================================================

def descend_threshold(content: GameContent, seat: SeatState) -> int:
    """Minimum die face that pays for one level of descent."""
    reduction = seat.descend_modifier + passive_effect_count(content, seat, "descend_cost_-1")
    return max(1, content.rules.descend_threshold - reduction)


def start_depth(content: GameContent, seat: SeatState) -> int:
    deep_start = seat.has_flag("start_depth_2") or passive_effect_count(content, seat, "start_at_depth_2") > 0
    return min(content.rules.max_depth, 2) if deep_start else content.rules.start_depth


# ============================================================================
# Port
# ============================================================================

def make_port(seat: SeatState) -> SeatState:
    """
    Bring a seat into port.

    Arriving flips the Can of Worms face up and opens the day's port
    benefits: one reroll of the fresh dice and one regret discard.
    """
    return seat._copy_with(
        location=Location.PORT,
        depth=0,
        made_port_today=True,
        can_of_worms_face_up=True,
    )


def reveal_cost(content: GameContent, seat: SeatState) -> int:
    """Fresh dice spent to turn over a shoal; a Fish Finder makes it free."""
    if seat.has_flag("reveal_before_move"):
        return 0
    return content.rules.reveal_cost


# ============================================================================
# Shop
# ============================================================================

def upgrade_price(content: GameContent, seat: SeatState, upgrade: UpgradeDefinition) -> int:
    """Cost after permanent and pending discounts; deep madness earns a port discount."""
    rules = content.rules
    discount = seat.shop_discount + seat.shop_discount_pending
    if seat.madness >= rules.port_discount_tier:
        discount += rules.port_discount
    return max(0, upgrade.cost - discount)


def equip_violation(seat: SeatState, upgrade: UpgradeDefinition) -> str | None:
    """Why the seat cannot take this upgrade, or None."""
    if upgrade.id in seat.upgrades:
        return f"{seat.seat_id} already owns {upgrade.id}"
    if upgrade.kind.value == "rod" and seat.rod_id is not None:
        return f"{seat.seat_id} already has a rod"
    if upgrade.kind.value == "reel" and seat.reel_id is not None:
        return f"{seat.seat_id} already has a reel"
    return None


def apply_upgrade(content: GameContent, seat: SeatState, upgrade: UpgradeDefinition) -> SeatState:
    """
    Equip an upgrade and fold its effects into the seat, once.

    Numeric effects become permanent modifiers; the rest become flags.
    """
    if upgrade.kind.value == "rod":
        seat = seat._copy_with(rod_id=upgrade.id)
    elif upgrade.kind.value == "reel":
        seat = seat._copy_with(reel_id=upgrade.id)
    else:
        seat = seat._copy_with(supplies=seat.supplies + (upgrade.id,))

    for effect in upgrade.effects:
        match = _NUMERIC_EFFECT.match(effect)
        if match:
            kind, amount = match.group(1), abs(int(match.group(2)))
            if kind == "max_dice":
                seat = seat._copy_with(base_max_dice=seat.base_max_dice + amount)
            elif kind == "catch_difficulty":
                seat = seat._copy_with(catch_modifier=seat.catch_modifier + amount)
            elif kind == "descend_cost":
                seat = seat._copy_with(descend_modifier=seat.descend_modifier + amount)
            else:
                seat = seat._copy_with(shop_discount=seat.shop_discount + amount)
        elif effect == "prevent_regret_1_per_day":
            seat = seat.with_flags(effect)._copy_with(regret_shields=max(seat.regret_shields, 1))
        else:
            seat = seat.with_flags(effect)
    return recompute_madness(content, seat)


# ============================================================================
# Fish trade
# ============================================================================

def sale_value(content: GameContent, seat: SeatState, fish: FishDefinition) -> int:
    return fish.value + passive_effect_count(content, seat, "sell_bonus_1")


def slot_multiplier(rules: RulesConfig, slot: int) -> int:
    multipliers = rules.slot_multipliers
    return multipliers[min(slot, len(multipliers) - 1)]


def default_mount_slot(content: GameContent, seat: SeatState) -> int | None:
    """Free slot with the highest multiplier, lowest index on ties."""
    free = seat.free_mount_slots
    if not free:
        return None
    return max(free, key=lambda s: (slot_multiplier(content.rules, s), -s))


# ============================================================================
# Scoring
# ============================================================================

@dataclass
class ScoreBreakdown:
    """Final score of one seat, by source."""
    seat_id: str
    mounted: int = 0
    hand: int = 0
    fishbucks: int = 0
    bonus: int = 0
    regrets: int = 0

    @property
    def total(self) -> int:
        return self.mounted + self.hand + self.fishbucks + self.bonus - self.regrets


def hand_fish_factor(madness: int) -> float:
    """Unmounted fish rot in a mad angler's hold."""
    if madness <= 1:
        return 1.0
    if madness == 2:
        return 0.5
    return 0.25


def score_seat(content: GameContent, seat: SeatState) -> ScoreBreakdown:
    rules = content.rules
    breakdown = ScoreBreakdown(seat_id=seat.seat_id)

    for mount in seat.mounted:
        fish = content.get_fish(mount.fish_id)
        if fish is not None:
            breakdown.mounted += adjusted_fish_value(fish, seat.madness, rules) * slot_multiplier(rules, mount.slot)

    hand_value = sum(f.value for f in (content.get_fish(i) for i in seat.hand_fish) if f is not None)
    breakdown.hand = int(hand_value * hand_fish_factor(seat.madness))
    breakdown.fishbucks = seat.fishbucks // rules.fishbucks_per_point
    breakdown.bonus = seat.bonus_points
    breakdown.regrets = sum(r.value for r in (content.get_regret(i) for i in seat.regrets) if r is not None)
    return breakdown


def final_standings(content: GameContent, state: GameState) -> tuple[dict[str, int], str | None]:
    """
    Scores per seat and the winner.

    Ties go to the seat with fewer regrets, then to seat order.
    """
    scores = {seat.seat_id: score_seat(content, seat).total for seat in state.seats}
    if not state.seats:
        return scores, None
    ranked = sorted(
        enumerate(state.seats),
        key=lambda pair: (-scores[pair[1].seat_id], len(pair[1].regrets), pair[0]),
    )
    return scores, ranked[0][1].seat_id


def mount(seat: SeatState, fish_id: str, slot: int) -> SeatState:
    return seat._copy_with(
        hand_fish=without_first(seat.hand_fish, fish_id),
        mounted=seat.mounted + (Mount(slot=slot, fish_id=fish_id),),
    )


def without_first(items: tuple[str, ...], item: str) -> tuple[str, ...]:
    index = items.index(item)
    return items[:index] + items[index + 1:]
