"""
Deep Regrets Game Setup - Creates the initial game state.

This module handles:
- Shuffling fish into shoals per depth with the game seed
- Shuffling the regret and Dink decks
- Seating anglers and applying character bonuses
- Rolling the first day's dice (the game starts in Monday's refresh)
"""

from __future__ import annotations
import random
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ...engine_core.state import GameState, GamePhase, SeatState, Sea, Shoal, Port
from ...engine_core.payloads import SeatSetup
from ...engine_core.economy import apply_upgrade, draw_dink, recompute_madness
from ...engine_core.turns import begin_day

if TYPE_CHECKING:
    from ...spec_schema import GameContent


def setup_game(
    content: GameContent,
    seats: Sequence[SeatSetup],
    seed: int = 0,
    game_id: str = "deep_regrets",
) -> GameState:
    """
    Set up a new game.

    Raises ValueError for an unsupported seat count, duplicate seat ids or
    an unknown character.
    """
    rules = content.rules
    if not rules.min_seats <= len(seats) <= rules.max_seats:
        raise ValueError(f"Deep Regrets supports {rules.min_seats}-{rules.max_seats} seats")
    seat_ids = [s.seat_id for s in seats]
    if len(set(seat_ids)) != len(seat_ids):
        raise ValueError("Seat ids must be unique")
    for setup in seats:
        if setup.character_id is not None and content.get_character(setup.character_id) is None:
            raise ValueError(f"Unknown character: {setup.character_id}")

    rng = random.Random(seed)

    state = GameState(
        game_id=game_id,
        content_id=content.content_id,
        phase=GamePhase.SETUP,
        seats=tuple(_create_seat(content, s) for s in seats),
        sea=_create_sea(content, rng),
        port=_create_port(content, rng),
        life_preserver_owner_id=seat_ids[-1],
        random_seed=seed,
    )

    for setup in seats:
        state = _apply_character(content, state, setup, rng)

    return begin_day(content, state, rng)


def _create_seat(content: GameContent, setup: SeatSetup) -> SeatState:
    rules = content.rules
    seat = SeatState(
        seat_id=setup.seat_id,
        name=setup.name,
        character_id=setup.character_id,
        is_scripted=setup.is_scripted,
        difficulty=setup.difficulty,
        base_max_dice=rules.base_max_dice,
        fishbucks=rules.starting_fishbucks,
        max_mount_slots=rules.mount_slots,
    )
    return recompute_madness(content, seat._copy_with(max_dice=0))


def _create_sea(content: GameContent, rng: random.Random) -> Sea:
    """Deal each depth's shuffled fish round-robin into its shoals."""
    rules = content.rules
    rows = []
    for depth in range(1, rules.max_depth + 1):
        fish_ids = [f.id for f in content.fish_at_depth(depth)]
        rng.shuffle(fish_ids)
        piles: list[list[str]] = [[] for _ in range(rules.shoals_per_depth)]
        for i, fish_id in enumerate(fish_ids):
            piles[i % rules.shoals_per_depth].append(fish_id)
        rows.append(tuple(Shoal(fish_ids=tuple(p)) for p in piles))
    return Sea(shoals=tuple(rows))


def _create_port(content: GameContent, rng: random.Random) -> Port:
    regrets = [r.id for r in content.regrets]
    dinks = [d.id for d in content.dinks]
    rng.shuffle(regrets)
    rng.shuffle(dinks)
    return Port(
        regret_deck=tuple(regrets),
        dink_deck=tuple(dinks),
        shop=tuple(u.id for u in content.upgrades),
        tackle_stock=tuple((t.id, t.stock) for t in content.tackle_dice),
    )


def _apply_character(
    content: GameContent,
    state: GameState,
    setup: SeatSetup,
    rng: random.Random,
) -> GameState:
    """Apply a captain's starting bonuses to their seat."""
    if setup.character_id is None:
        return state
    character = content.get_character(setup.character_id)
    seat = state.get_seat(setup.seat_id)

    seat = seat._copy_with(
        fishbucks=seat.fishbucks + character.fishbucks_bonus,
        base_max_dice=seat.base_max_dice + character.max_dice_bonus,
        max_mount_slots=seat.max_mount_slots + character.mount_slot_bonus,
        regret_shields=seat.regret_shields + character.regret_shields,
    )
    if character.flags:
        seat = seat.with_flags(*character.flags)
    for upgrade_id in character.starting_upgrades:
        seat = apply_upgrade(content, seat, content.get_upgrade(upgrade_id))
    state = state.with_seat(recompute_madness(content, seat))

    for _ in range(character.extra_dinks):
        state = draw_dink(content, state, setup.seat_id, rng)
    return state
