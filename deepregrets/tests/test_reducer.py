"""
Tests for the reducer (state transitions).

Tests:
- Illegal actions are absorbed in every phase
- Catching, descending and revealing at sea
- Fish abilities resolved on catch
- Turn flow and the one-main-action rule
- Making port, the Lifeboat and the Can of Worms
- Game setup and determinism
"""

import random
from dataclasses import replace

import pytest

from ..engine_core.state import GameState, GamePhase, Location, PassingReward, FailedCatch, Peek
from ..engine_core.action import Action
from ..engine_core.payloads import SeatSetup
from ..engine_core.reducer import Reducer, transition
from ..engine_core.snapshot import snapshot
from ..engine_core import turns
from ..games.deep_regrets import PLUG_ID
from .builders import (
    KRAKEN_ID,
    seat_setups,
    start_game,
    set_seat,
    set_port,
    force_action_phase,
    place_shoal,
    finish_refresh,
)

COD = "FISH-D1-COD-005"
TROUT = "FISH-D1-TROUT-008"
SARDINE = "FISH-D1-SARDINE-001"
PERCH = "FISH-D1-PERCH-007"
MEDUSA = "FISH-D2-JELLYFISH-009"
CUTTLEFISH = "FISH-D2-CUTTLEFISH-011"
SHARK = "FISH-D2-SHARK-002"
TUNA = "FISH-D2-TUNA-001"
WHALE = "FISH-D3-WHALE-007"


class TestIllegalActionsAreAbsorbed:
    """An action that breaks a rule returns the very same state object."""

    def test_setup_phase(self, reducer, empty_game_state):
        action = Action.pass_day("alice")
        assert reducer.transition(empty_game_state, action) is empty_game_state

    def test_refresh_phase(self, reducer, two_seat_game):
        action = Action.declare_location("alice", "sea")
        assert reducer.transition(two_seat_game, action) is two_seat_game

    def test_declaration_phase(self, reducer, two_seat_game):
        state = finish_refresh(reducer, two_seat_game)
        assert state.phase == GamePhase.DECLARATION

        action = Action.catch_fish(state.current_seat.seat_id, [0], COD)
        assert reducer.transition(state, action) is state

    def test_action_phase_wrong_seat(self, reducer, at_sea):
        assert reducer.transition(at_sea, Action.pass_day("bob")) is at_sea
        assert "turn" in reducer.violation(at_sea, Action.pass_day("bob")).lower()

    def test_unknown_seat(self, reducer, at_sea):
        assert reducer.transition(at_sea, Action.pass_day("zed")) is at_sea

    def test_day_end_with_pending_reward(self, reducer, at_port):
        state = reducer.transition(at_port, Action.pass_day("alice"))
        state = reducer.transition(state, Action.claim_passing_reward("alice", "draw_dink"))
        state = reducer.transition(state, Action.pass_day("bob"))
        assert state.phase == GamePhase.DAY_END
        assert state.pending == PassingReward(seat_id="bob", is_first_pass=False)

        action = Action.claim_passing_reward("alice", "draw_dink")
        assert reducer.transition(state, action) is state

    def test_game_over(self, reducer, at_port):
        state = at_port._copy_with(phase=GamePhase.GAME_OVER)
        assert reducer.transition(state, Action.end_turn("alice")) is state

    def test_module_transition(self, content, at_sea):
        assert transition(content, at_sea, Action.end_turn("alice")) is at_sea

    def test_rejection_keeps_random_counter(self, reducer, at_sea):
        state = reducer.transition(at_sea, Action.descend("alice", 9))
        assert state.random_counter == at_sea.random_counter


class TestCatchFish:
    """Tests for catch attempts."""

    def test_four_and_five_land_difficulty_nine(self, kraken_content):
        """A 4 and a 5 exactly meet difficulty 9."""
        reducer = Reducer(content=kraken_content)
        state = force_action_phase(start_game(kraken_content))
        state = set_seat(state, "alice", fresh_dice=(4, 5), spent_dice=())
        state = place_shoal(state, 1, 0, [KRAKEN_ID, COD])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0, 1], KRAKEN_ID))

        alice = new_state.get_seat("alice")
        assert KRAKEN_ID in alice.hand_fish
        assert alice.fresh_dice == ()
        assert sorted(alice.spent_dice) == [4, 5]
        shoal = new_state.sea.get_shoal(1, 0)
        assert shoal.fish_ids == (COD,)
        # The next fish lies face down
        assert not shoal.revealed

    def test_failed_catch_spends_dice_and_draws_dink(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(1, 2), spent_dice=())
        state = place_shoal(state, 1, 0, [COD, TROUT])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0], COD))

        alice = new_state.get_seat("alice")
        assert alice.fresh_dice == (2,)
        assert alice.spent_dice == (1,)
        assert alice.turn_action_taken
        assert COD not in alice.hand_fish
        assert new_state.sea.get_shoal(1, 0).top_fish_id == COD
        assert len(new_state.port.dink_deck) == len(state.port.dink_deck) - 1

        failed = new_state.last_failed_catch
        assert failed.seat_id == "alice"
        assert failed.fish_id == COD
        assert failed.dice == (1,)
        assert failed.difficulty == 3

    @pytest.mark.parametrize("indices", [[], [5], [0, 0]])
    def test_bad_dice_selection(self, reducer, at_sea, indices):
        state = place_shoal(at_sea, 1, 0, [COD])
        action = Action.catch_fish("alice", indices, COD)
        assert reducer.transition(state, action) is state

    def test_fish_not_on_top(self, reducer, at_sea):
        state = place_shoal(at_sea, 1, 0, [COD, TROUT])
        assert reducer.transition(state, Action.catch_fish("alice", [0], TROUT)) is state

    def test_unrevealed_shoal(self, reducer, at_sea):
        state = place_shoal(at_sea, 1, 0, [COD], revealed=False)
        assert reducer.transition(state, Action.catch_fish("alice", [0], COD)) is state

    def test_fish_at_other_depth(self, reducer, at_sea):
        state = place_shoal(at_sea, 2, 0, [TUNA])
        assert reducer.transition(state, Action.catch_fish("alice", [0], TUNA)) is state

    def test_catch_at_port(self, reducer, at_port):
        state = place_shoal(at_port, 1, 0, [COD])
        assert reducer.transition(state, Action.catch_fish("alice", [0], COD)) is state

    def test_tackle_die_adds_to_total(self, reducer, at_sea):
        """An orange tackle die never rolls below 2."""
        state = set_seat(at_sea, "alice", fresh_dice=(1,), tackle_dice=("TACKLE-ORANGE",))
        state = place_shoal(state, 1, 0, [COD, TROUT])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0], COD, [0]))

        alice = new_state.get_seat("alice")
        assert COD in alice.hand_fish
        assert alice.tackle_dice == ()

    def test_salt_cured_worms(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(2,), dinks=("DINK-006",))
        state = place_shoal(state, 1, 0, [COD, TROUT])

        state = reducer.transition(state, Action.play_dink("alice", "DINK-006"))
        assert state.get_seat("alice").catch_bonus == 1

        state = reducer.transition(state, Action.catch_fish("alice", [0], COD))
        alice = state.get_seat("alice")
        assert COD in alice.hand_fish
        assert alice.catch_bonus == 0

    def _failed_cod_catch(self, reducer, at_sea):
        """Alice misses the cod with a single 1 and draws a Fisherman's Tale."""
        state = set_seat(at_sea, "alice", fresh_dice=(1,), spent_dice=(), dinks=("DINK-003", "DINK-003"))
        state = set_port(state, dink_deck=("DINK-005", "DINK-012"), dink_discard=())
        state = place_shoal(state, 1, 0, [COD, TROUT])
        state = reducer.transition(state, Action.catch_fish("alice", [0], COD))

        alice = state.get_seat("alice")
        assert COD not in alice.hand_fish
        assert alice.dinks == ("DINK-003", "DINK-003", "DINK-005")
        assert state.last_failed_catch == FailedCatch(
            seat_id="alice", fish_id=COD, depth=1, slot=0, dice=(1,), bonus=0, difficulty=3,
        )
        return state

    def _play_net(self, reducer, state):
        state = reducer.transition(state, Action.play_dink("alice", "DINK-003"))
        alice = state.get_seat("alice")
        assert state.last_failed_catch is None
        assert alice.dinks.count("DINK-003") == 1
        assert "DINK-005" in alice.dinks
        assert state.port.dink_discard == ("DINK-003",)
        assert len(alice.spent_dice) == 1
        return state

    def test_sturdy_net_reroll_lands_the_fish(self, reducer, at_sea):
        state = self._failed_cod_catch(reducer, at_sea)
        # Any reroll of the single die now beats the difficulty
        state = state._copy_with(last_failed_catch=replace(state.last_failed_catch, bonus=2))

        state = self._play_net(reducer, state)

        assert COD in state.get_seat("alice").hand_fish
        assert state.sea.get_shoal(1, 0).fish_ids == (TROUT,)

    def test_sturdy_net_reroll_can_miss_again(self, reducer, at_sea):
        state = self._failed_cod_catch(reducer, at_sea)
        # One die can never reach nine
        state = state._copy_with(last_failed_catch=replace(state.last_failed_catch, difficulty=9))

        state = self._play_net(reducer, state)

        alice = state.get_seat("alice")
        assert COD not in alice.hand_fish
        assert state.sea.get_shoal(1, 0).fish_ids == (COD, TROUT)
        # A missed reroll draws no second consolation Dink
        assert state.port.dink_deck == ("DINK-012",)

        # Nothing left to reroll
        again = Action.play_dink("alice", "DINK-003")
        assert reducer.transition(state, again) is state

    def test_reroll_needs_a_failed_catch(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", dinks=("DINK-003",))
        assert reducer.transition(state, Action.play_dink("alice", "DINK-003")) is state


class TestCatchAbilities:
    """Fish abilities resolved when a fish is landed."""

    def test_overfishing_draws_regret(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(3,))
        state = place_shoal(state, 1, 0, [COD])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0], COD))

        assert new_state.sea.get_shoal(1, 0).is_empty
        alice = new_state.get_seat("alice")
        assert len(alice.regrets) == 1
        assert alice.madness == 1
        assert len(new_state.port.regret_deck) == len(state.port.regret_deck) - 1

    def test_regret_draw(self, reducer, two_seat_game):
        state = force_action_phase(two_seat_game, depth=2)
        state = set_seat(state, "alice", fresh_dice=(3,))
        state = place_shoal(state, 2, 0, [CUTTLEFISH, TUNA])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0], CUTTLEFISH))

        assert len(new_state.get_seat("alice").regrets) == 1

    def test_madness_fish(self, reducer, two_seat_game):
        state = force_action_phase(two_seat_game, depth=2)
        state = set_seat(state, "alice", fresh_dice=(2,))
        state = place_shoal(state, 2, 0, [MEDUSA, TUNA])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0], MEDUSA))

        alice = new_state.get_seat("alice")
        assert alice.madness_offset == 1
        assert alice.madness == 1
        assert alice.regrets == ()

    def test_scrimshaw_cancels_madness(self, reducer, two_seat_game):
        state = force_action_phase(two_seat_game, depth=2)
        state = set_seat(state, "alice", fresh_dice=(2,), dinks=("DINK-008",))
        state = place_shoal(state, 2, 0, [MEDUSA, TUNA])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0], MEDUSA))

        alice = new_state.get_seat("alice")
        assert alice.madness == 0
        assert "DINK-008" not in alice.dinks
        assert new_state.port.dink_discard[-1] == "DINK-008"

    def test_predator_eats_cheapest_small_fish(self, reducer, two_seat_game):
        state = force_action_phase(two_seat_game, depth=2)
        state = set_seat(state, "alice", fresh_dice=(4,), hand_fish=(SARDINE, PERCH))
        state = place_shoal(state, 2, 0, [SHARK, TUNA])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0], SHARK))

        assert new_state.get_seat("alice").hand_fish == (PERCH, SHARK)
        assert SARDINE in new_state.sea.graveyard

    def test_harpoon_protects_small_fish(self, reducer, two_seat_game):
        state = force_action_phase(two_seat_game, depth=2)
        state = set_seat(
            state, "alice",
            fresh_dice=(4,),
            hand_fish=(SARDINE, PERCH),
            flags=frozenset({"ignore_discard_small"}),
        )
        state = place_shoal(state, 2, 0, [SHARK, TUNA])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0], SHARK))

        assert new_state.get_seat("alice").hand_fish == (SARDINE, PERCH, SHARK)

    def test_plug_forces_pass_and_starts_erosion(self, reducer, two_seat_game):
        state = force_action_phase(two_seat_game, depth=3)
        state = set_seat(state, "alice", fresh_dice=(4,))
        state = place_shoal(state, 3, 0, [PLUG_ID, WHALE])

        new_state = reducer.transition(state, Action.catch_fish("alice", [0], PLUG_ID))

        assert new_state.sea.plug_active
        assert new_state.get_seat("alice").has_passed
        assert new_state.pending == PassingReward(seat_id="alice", is_first_pass=True)
        assert new_state.current_seat.seat_id == "bob"


class TestDescendAndReveal:
    """Moving down and turning fish over."""

    def test_descend_two_levels(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(3, 1, 5), spent_dice=())

        new_state = reducer.transition(state, Action.descend("alice", 3))

        alice = new_state.get_seat("alice")
        assert alice.depth == 3
        assert alice.fresh_dice == (1,)
        assert sorted(alice.spent_dice) == [3, 5]

    def test_descend_needs_high_dice(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(2, 2, 6))
        assert reducer.transition(state, Action.descend("alice", 3)) is state

        new_state = reducer.transition(state, Action.descend("alice", 2))
        alice = new_state.get_seat("alice")
        assert alice.depth == 2
        assert alice.fresh_dice == (2, 2)

    def test_descend_past_the_bottom(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(6, 6, 6, 6))
        assert reducer.transition(state, Action.descend("alice", 4)) is state
        assert reducer.transition(state, Action.descend("alice", 1)) is state

    def test_ball_bearings_lower_threshold(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(2, 2), dinks=("DINK-007",))
        new_state = reducer.transition(state, Action.descend("alice", 3))
        assert new_state.get_seat("alice").depth == 3

    def test_reveal_spends_lowest_die(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(4, 2, 5), spent_dice=())
        state = place_shoal(state, 1, 1, [COD], revealed=False)

        new_state = reducer.transition(state, Action.reveal_fish("alice", 1))

        alice = new_state.get_seat("alice")
        assert alice.fresh_dice == (4, 5)
        assert alice.spent_dice == (2,)
        # Revealing is not the turn's main action
        assert not alice.turn_action_taken
        assert new_state.sea.get_shoal(1, 1).revealed

    def test_reveal_revealed_shoal(self, reducer, at_sea):
        state = place_shoal(at_sea, 1, 1, [COD], revealed=True)
        assert reducer.transition(state, Action.reveal_fish("alice", 1)) is state


class TestTurnFlow:
    """Declaration, main actions and turn order."""

    def test_declaration_moves_to_action_phase(self, reducer, two_seat_game):
        state = finish_refresh(reducer, two_seat_game)
        assert state.current_seat.seat_id == "alice"

        state = reducer.transition(state, Action.declare_location("alice", "sea"))
        alice = state.get_seat("alice")
        assert alice.location == Location.SEA
        assert alice.depth == 1
        assert state.current_seat.seat_id == "bob"

        state = reducer.transition(state, Action.declare_location("bob", "port"))
        assert state.phase == GamePhase.ACTION
        assert state.current_seat.seat_id == "alice"
        assert state.get_seat("bob").made_port_today

    def test_pocket_compass_starts_at_depth_two(self, reducer, two_seat_game):
        state = finish_refresh(reducer, two_seat_game)
        state = set_seat(state, "alice", dinks=("DINK-002",))
        state = reducer.transition(state, Action.declare_location("alice", "sea"))
        assert state.get_seat("alice").depth == 2

    def test_one_main_action_per_turn(self, reducer, at_port):
        state = reducer.transition(at_port, Action.buy_tackle_dice("alice", "TACKLE-GREEN"))
        assert state.get_seat("alice").turn_action_taken

        second = Action.buy_tackle_dice("alice", "TACKLE-GREEN")
        assert reducer.transition(state, second) is state

    def test_bonus_action_allows_a_second(self, reducer, at_port):
        state = set_seat(at_port, "alice", bonus_actions=1)
        buy = Action.buy_tackle_dice("alice", "TACKLE-GREEN")
        state = reducer.transition(state, buy)
        state = reducer.transition(state, buy)

        alice = state.get_seat("alice")
        assert alice.tackle_dice == ("TACKLE-GREEN", "TACKLE-GREEN")
        assert alice.bonus_actions == 0
        assert reducer.transition(state, buy) is state

    def test_end_turn_requires_an_action(self, reducer, at_port):
        assert reducer.transition(at_port, Action.end_turn("alice")) is at_port

        state = reducer.transition(at_port, Action.buy_tackle_dice("alice", "TACKLE-GREEN"))
        state = reducer.transition(state, Action.end_turn("alice"))
        assert state.current_seat.seat_id == "bob"
        assert not state.get_seat("bob").turn_action_taken

    def test_last_seat_gets_limited_turns(self, reducer, at_port):
        state = reducer.transition(at_port, Action.pass_day("alice"))
        state = reducer.transition(state, Action.claim_passing_reward("alice", "draw_dink"))
        assert state.last_seat_turns_remaining == 2

        buy = Action.buy_tackle_dice("bob", "TACKLE-GREEN")
        state = reducer.transition(state, buy)
        state = reducer.transition(state, Action.end_turn("bob"))
        assert state.current_seat.seat_id == "bob"
        assert state.phase == GamePhase.ACTION

        state = reducer.transition(state, buy)
        state = reducer.transition(state, Action.end_turn("bob"))
        assert state.get_seat("bob").has_passed
        assert state.phase == GamePhase.DAY_END
        assert state.pending == PassingReward(seat_id="bob", is_first_pass=False)

    def test_successful_action_advances_random_counter(self, reducer, at_port):
        state = reducer.transition(at_port, Action.pass_day("alice"))
        assert state.random_counter == at_port.random_counter + 1


class TestRefreshDinks:
    """One-shot Dinks played on fresh rolls."""

    def test_coffee_thermos_readies_highest_spent_die(self, reducer, two_seat_game):
        state = set_seat(two_seat_game, "alice", fresh_dice=(2, 3), spent_dice=(6, 1), dinks=("DINK-004",))

        new_state = reducer.transition(state, Action.play_dink("alice", "DINK-004"))

        alice = new_state.get_seat("alice")
        assert alice.dinks == ()
        assert alice.fresh_dice == (2, 3, 6)
        assert alice.spent_dice == (1,)
        assert new_state.port.dink_discard[-1] == "DINK-004"

    def test_coffee_thermos_chosen_die(self, reducer, two_seat_game):
        state = set_seat(two_seat_game, "alice", fresh_dice=(2, 3), spent_dice=(6, 1), dinks=("DINK-004",))

        new_state = reducer.transition(state, Action.play_dink("alice", "DINK-004", 1))

        alice = new_state.get_seat("alice")
        assert alice.fresh_dice == (2, 3, 1)
        assert alice.spent_dice == (6,)

    def test_coffee_thermos_needs_a_spent_die(self, reducer, two_seat_game):
        state = set_seat(two_seat_game, "alice", fresh_dice=(1, 5, 5, 5), spent_dice=(), dinks=("DINK-004",))
        action = Action.play_dink("alice", "DINK-004")

        assert reducer.transition(state, action) is state
        assert "spent" in reducer.violation(state, action)

        state = set_seat(state, "alice", fresh_dice=(1, 5, 5), spent_dice=(4,))
        assert reducer.transition(state, Action.play_dink("alice", "DINK-004", 3)) is state

    def test_lucky_clamshell(self, reducer, two_seat_game):
        state = set_seat(two_seat_game, "alice", fresh_dice=(1, 2, 3, 4), dinks=("DINK-010",))

        assert reducer.transition(state, Action.play_dink("alice", "DINK-010")) is state

        new_state = reducer.transition(state, Action.play_dink("alice", "DINK-010", 0))
        assert new_state.get_seat("alice").fresh_dice == (6, 2, 3, 4)

    def test_wrong_window(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", dinks=("DINK-004",))
        assert reducer.transition(state, Action.play_dink("alice", "DINK-004")) is state

    def test_passive_dink_cannot_be_played(self, reducer, two_seat_game):
        state = set_seat(two_seat_game, "alice", dinks=("DINK-005",))
        assert reducer.transition(state, Action.play_dink("alice", "DINK-005")) is state


class TestMakingPort:
    """Refresh readies spent dice; making port opens the port benefits."""

    def test_refresh_turn_rolls_spent_dice_fresh(self, content, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(2,), spent_dice=(5, 6), port_reroll_used_today=True)

        state = turns.begin_day(content, state, random.Random(3))
        alice = state.get_seat("alice")
        # Unused capacity is rolled at once, spent dice wait for the refresh turn
        assert alice.spent_dice == (5, 6)
        assert alice.fresh_dice[0] == 2
        assert len(alice.fresh_dice) == 2
        assert not alice.port_reroll_used_today

        assert state.current_seat.seat_id == "alice"
        state = reducer.transition(state, Action.end_turn("alice"))

        alice = state.get_seat("alice")
        assert alice.spent_dice == ()
        assert len(alice.fresh_dice) == alice.max_dice == 4
        assert alice.fresh_dice[0] == 2

    def test_declaring_port_flips_the_can(self, reducer, two_seat_game):
        state = finish_refresh(reducer, two_seat_game)
        seat_id = state.current_seat.seat_id
        before = state.get_seat(seat_id)

        state = reducer.transition(state, Action.declare_location(seat_id, "port"))

        seat = state.get_seat(seat_id)
        assert seat.location == Location.PORT
        assert seat.depth == 0
        assert seat.fresh_dice == before.fresh_dice
        assert seat.made_port_today
        assert seat.can_of_worms_face_up

    def test_declaring_sea_leaves_the_can_down(self, reducer, two_seat_game):
        state = finish_refresh(reducer, two_seat_game)
        seat_id = state.current_seat.seat_id

        state = reducer.transition(state, Action.declare_location(seat_id, "sea"))

        seat = state.get_seat(seat_id)
        assert not seat.made_port_today
        assert not seat.can_of_worms_face_up

    def test_port_reroll_once_per_day(self, reducer, at_port):
        state = set_seat(at_port, "alice", fresh_dice=(1, 1, 1, 1), spent_dice=(), bonus_actions=1)

        state = reducer.transition(state, Action.port_reroll("alice"))

        alice = state.get_seat("alice")
        assert alice.port_reroll_used_today
        assert alice.turn_action_taken
        assert len(alice.fresh_dice) == 4
        assert all(1 <= die <= 6 for die in alice.fresh_dice)

        again = Action.port_reroll("alice")
        assert reducer.transition(state, again) is state
        assert "already rerolled" in reducer.violation(state, again)

    def test_port_reroll_is_a_main_action(self, reducer, at_port):
        state = reducer.transition(at_port, Action.buy_tackle_dice("alice", "TACKLE-GREEN"))
        assert reducer.transition(state, Action.port_reroll("alice")) is state

    def test_port_reroll_needs_making_port(self, reducer, at_port, at_sea):
        state = set_seat(at_port, "alice", made_port_today=False)
        assert reducer.transition(state, Action.port_reroll("alice")) is state
        assert reducer.transition(at_sea, Action.port_reroll("alice")) is at_sea

    def test_port_reroll_needs_fresh_dice(self, reducer, at_port):
        state = set_seat(at_port, "alice", fresh_dice=(), spent_dice=(3, 3))
        assert reducer.transition(state, Action.port_reroll("alice")) is state


class TestLifeboat:
    """MAKE_PORT takes a seat home from the sea mid-day."""

    def test_make_port_from_sea(self, reducer, at_sea):
        state = set_seat(
            at_sea, "alice",
            fresh_dice=(4,),
            spent_dice=(1, 2, 3),
            depth=2,
            flags=frozenset({"port_from_sea"}),
            regrets=("REG-002",),
            madness=1,
            bonus_actions=1,
        )

        state = reducer.transition(state, Action.make_port("alice"))

        alice = state.get_seat("alice")
        assert alice.location == Location.PORT
        assert alice.depth == 0
        # Spent dice stay spent until the next refresh
        assert alice.spent_dice == (1, 2, 3)
        assert alice.fresh_dice == (4,)
        assert alice.made_port_today
        assert alice.can_of_worms_face_up
        assert alice.turn_action_taken

        # Port actions open up straight away
        state = reducer.transition(state, Action.discard_regret("alice", "REG-002"))
        assert state.get_seat("alice").regrets == ()

    def test_make_port_needs_a_lifeboat(self, reducer, at_sea):
        action = Action.make_port("alice")
        assert reducer.transition(at_sea, action) is at_sea
        assert "no way back" in reducer.violation(at_sea, action)

    def test_make_port_from_port(self, reducer, at_port):
        state = set_seat(at_port, "alice", flags=frozenset({"port_from_sea"}))
        assert reducer.transition(state, Action.make_port("alice")) is state

    def test_make_port_is_a_main_action(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(3, 3, 5), flags=frozenset({"port_from_sea"}))
        state = place_shoal(state, 1, 0, [COD, TROUT])
        state = reducer.transition(state, Action.catch_fish("alice", [0, 1], COD))

        assert reducer.transition(state, Action.make_port("alice")) is state


class TestCanOfWorms:
    """A private look at a hidden shoal, once per trip to port."""

    def test_peek_records_the_fish(self, content, reducer, at_sea):
        state = set_seat(at_sea, "alice", can_of_worms_face_up=True)
        state = place_shoal(state, 2, 1, [TUNA, SHARK], revealed=False)
        before = state.get_seat("alice")

        new_state = reducer.transition(state, Action.use_can_of_worms("alice", 2, 1))

        alice = new_state.get_seat("alice")
        assert not alice.can_of_worms_face_up
        assert alice.peeked == (Peek(depth=2, slot=1, fish_id=TUNA),)
        assert alice.peeked_fish(2, 1) == TUNA
        assert alice.peeked_fish(1, 0) is None
        # Free: no die spent, no main action used
        assert alice.fresh_dice == before.fresh_dice
        assert not alice.turn_action_taken
        assert not new_state.sea.get_shoal(2, 1).revealed

        view = snapshot(content, new_state)
        seat_view = next(s for s in view.seats if s.seat_id == "alice")
        shoal_view = next(s for s in view.shoals if (s.depth, s.slot) == (2, 1))
        assert not seat_view.can_of_worms_face_up
        assert shoal_view.top_fish_id is None

    def test_face_down_can(self, reducer, at_sea):
        state = place_shoal(at_sea, 2, 1, [TUNA, SHARK], revealed=False)
        action = Action.use_can_of_worms("alice", 2, 1)
        assert reducer.transition(state, action) is state
        assert "face down" in reducer.violation(state, action)

    def test_once_until_next_port(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", can_of_worms_face_up=True)
        state = place_shoal(state, 2, 1, [TUNA, SHARK], revealed=False)
        state = place_shoal(state, 2, 0, [SHARK], revealed=False)

        state = reducer.transition(state, Action.use_can_of_worms("alice", 2, 1))
        assert reducer.transition(state, Action.use_can_of_worms("alice", 2, 0)) is state

    def test_revealed_or_empty_shoal(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", can_of_worms_face_up=True)
        state = place_shoal(state, 1, 0, [COD], revealed=True)
        state = place_shoal(state, 1, 1, [], revealed=False)

        assert reducer.transition(state, Action.use_can_of_worms("alice", 1, 0)) is state
        assert reducer.transition(state, Action.use_can_of_worms("alice", 1, 1)) is state

    def test_only_at_sea(self, reducer, at_port):
        state = set_seat(at_port, "alice", can_of_worms_face_up=True)
        assert reducer.transition(state, Action.use_can_of_worms("alice", 1, 0)) is state


class TestFishFinder:
    """The Fish Finder turns over a top fish without spending a die."""

    def test_free_reveal(self, reducer, at_sea):
        state = set_seat(at_sea, "alice", fresh_dice=(4, 2), spent_dice=(), flags=frozenset({"reveal_before_move"}))
        state = place_shoal(state, 1, 1, [COD], revealed=False)

        state = reducer.transition(state, Action.reveal_fish("alice", 1))

        alice = state.get_seat("alice")
        assert alice.fresh_dice == (4, 2)
        assert alice.spent_dice == ()
        assert state.sea.get_shoal(1, 1).revealed

    def test_free_reveal_without_fresh_dice(self, reducer, at_sea):
        state = set_seat(
            at_sea, "alice", fresh_dice=(), spent_dice=(1, 1), flags=frozenset({"reveal_before_move"}),
        )
        state = place_shoal(state, 1, 1, [COD], revealed=False)

        assert reducer.transition(state, Action.reveal_fish("alice", 1)) is not state


class TestInitGame:
    """Tests for game setup through INIT_GAME."""

    def test_initial_state(self, reducer, empty_game_state):
        state = reducer.transition(empty_game_state, Action.init_game(seat_setups(3), seed=3))

        assert state.phase == GamePhase.REFRESH
        assert state.day_number == 1
        assert state.num_seats == 3
        assert state.life_preserver_owner_id == "cora"
        assert all(len(s.fresh_dice) == s.max_dice == 4 for s in state.seats)
        assert all(s.fishbucks == 3 for s in state.seats)
        assert [len(row) for row in state.sea.shoals] == [3, 3, 3]
        assert len(state.port.regret_deck) == 20

    def test_too_many_seats(self, reducer, empty_game_state):
        seats = [SeatSetup(seat_id=f"s{i}", name=f"Seat {i}") for i in range(6)]
        action = Action.init_game(seats)
        assert reducer.transition(empty_game_state, action) is empty_game_state
        assert "seats" in reducer.violation(empty_game_state, action)

    def test_duplicate_seat_ids(self, reducer, empty_game_state):
        seats = [SeatSetup(seat_id="a", name="A"), SeatSetup(seat_id="a", name="B")]
        assert reducer.transition(empty_game_state, Action.init_game(seats)) is empty_game_state

    def test_unknown_character(self, reducer, empty_game_state):
        seats = [SeatSetup(seat_id="a", name="A", character_id="nobody")]
        assert reducer.transition(empty_game_state, Action.init_game(seats)) is empty_game_state

    def test_character_bonuses(self, reducer, empty_game_state):
        seats = [
            SeatSetup(seat_id="a", name="Ahab", character_id="ahab"),
            SeatSetup(seat_id="s", name="Storm", character_id="storm"),
        ]
        state = reducer.transition(empty_game_state, Action.init_game(seats))

        ahab = state.get_seat("a")
        assert ahab.fishbucks == 5
        assert ahab.rod_id == "ROD-001"
        assert ahab.has_flag("reroll_1_die")

        storm = state.get_seat("s")
        assert storm.max_dice == 5
        assert len(storm.fresh_dice) == 5
        assert storm.max_mount_slots == 4

    def test_same_seed_same_game(self, content):
        assert start_game(content, seed=7) == start_game(content, seed=7)

    def test_reset(self, reducer, at_sea):
        state = reducer.transition(at_sea, Action.reset_game())
        assert state == GameState()
