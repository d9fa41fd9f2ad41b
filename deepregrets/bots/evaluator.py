"""
Heuristic Evaluator - Scores candidate actions for bot decision-making.

The evaluator assigns a numeric score to each legal action based on:
- Expected value of catches (dice-sum distribution vs. difficulty)
- Marginal value of upgrades over the remaining days
- Exposure to regrets and madness
- Progress towards ending the day well (passing, mounting, selling)

The evaluator never applies actions to look ahead: outcomes that depend
on future dice rolls or card draws are scored by their expectation.

Weights can be adjusted to create different play styles.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.action import Action, ActionType
from ..engine_core.state import GameState, GamePhase, Location, SeatState
from ..engine_core.dice import D6_FACES, effective_difficulty, reroll_success_probability, success_probability
from ..engine_core import economy

if TYPE_CHECKING:
    from ..spec_schema import GameContent, FishDefinition


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Higher values = more importance.
    Can be adjusted to create different play styles.
    """
    # Fish
    fish_value: float = 1.0
    mount_expectation: float = 1.5  # Expected trophy multiplier of a fresh catch
    failed_catch_consolation: float = 0.3  # A failed catch still draws a Dink

    # Costs
    die_cost: float = 0.6  # Opportunity cost of spending a fresh die
    overspend: float = 0.15  # Per pip above the difficulty
    fishbuck_value: float = 0.4

    # Exposure
    regret_penalty: float = 1.0  # Multiplied by the average regret value
    madness_penalty: float = 2.0

    # Movement
    depth_value: float = 1.2
    reveal_value: float = 0.8

    # Port
    reroll_threshold: float = 2.5  # Average fresh face below which a port reroll pays

    # Upgrades, per day they stay useful
    upgrade_per_day: float = 0.7

    # Turn flow
    end_turn_value: float = 0.1
    first_pass_bonus: float = 0.4
    unused_die_penalty: float = 0.5  # Passing at sea with fresh dice left
    dink_value: float = 1.0


class HeuristicEvaluator:
    """
    Evaluates candidate actions using weighted heuristics.

    Used by bots:
    1. Generate legal actions
    2. Score each action for the acting seat
    3. Select the best scoring action
    """

    def __init__(self, weights: EvaluationWeights | None = None, horizon: int = 3, risk_aversion: float = 1.0):
        self.weights = weights or EvaluationWeights()
        self.horizon = horizon
        self.risk_aversion = risk_aversion

    def evaluate_action(
        self,
        state: GameState,
        content: GameContent,
        action: Action,
        for_seat_id: str,
    ) -> float:
        """Score one action from the seat's perspective; higher is better."""
        seat = state.get_seat(for_seat_id)
        if seat is None:
            return float("-inf")

        scorers = {
            ActionType.CATCH_FISH: self._score_catch,
            ActionType.DESCEND: self._score_descend,
            ActionType.REVEAL_FISH: self._score_reveal,
            ActionType.BUY_UPGRADE: self._score_upgrade,
            ActionType.BUY_TACKLE_DICE: self._score_tackle,
            ActionType.SELL_FISH: self._score_sell,
            ActionType.MOUNT_FISH: self._score_mount,
            ActionType.DISCARD_REGRET: self._score_discard_regret,
            ActionType.MAKE_PORT: self._score_make_port,
            ActionType.PORT_REROLL: self._score_port_reroll,
            ActionType.USE_CAN_OF_WORMS: self._score_can_of_worms,
            ActionType.DECLARE_LOCATION: self._score_declaration,
            ActionType.PLAY_DINK: self._score_dink,
            ActionType.USE_LIFE_PRESERVER: self._score_life_preserver,
            ActionType.PASS: self._score_pass,
            ActionType.END_TURN: self._score_end_turn,
            ActionType.REMOVE_DIE: self._score_remove_die,
            ActionType.GIVE_LIFE_PRESERVER: self._score_give_life_preserver,
            ActionType.CLAIM_PASSING_REWARD: self._score_claim_reward,
        }
        scorer = scorers.get(action.action_type)
        if scorer is None:
            return 0.0
        return scorer(state, content, seat, action)

    # ------------------------------------------------------------------
    # Shared estimates
    # ------------------------------------------------------------------

    def _days_left(self, state: GameState, content: GameContent) -> int:
        return max(0, content.rules.days_in_game - state.day_number)

    def _useful_days(self, state: GameState, content: GameContent) -> int:
        return min(self.horizon, self._days_left(state, content))

    def _average_regret(self, content: GameContent) -> float:
        if not content.regrets:
            return 0.0
        return sum(r.value for r in content.regrets) / len(content.regrets)

    def _fish_worth(self, content: GameContent, seat: SeatState, fish: FishDefinition) -> float:
        value = economy.adjusted_fish_value(fish, seat.madness, content.rules)
        return value * self.weights.fish_value * self.weights.mount_expectation

    def _exposure(self, content: GameContent, seat: SeatState, regrets: float, madness: float) -> float:
        """Penalty for drawing regrets and gaining madness."""
        if seat.has_flag("reduce_regrets_1") and regrets > 0:
            regrets -= 1
        regrets = max(0.0, regrets - seat.regret_shields)
        if seat.has_flag("madness_immune"):
            madness = 0
        penalty = regrets * self._average_regret(content) * self.weights.regret_penalty
        penalty += madness * self.weights.madness_penalty
        return penalty * self.risk_aversion

    # ------------------------------------------------------------------
    # At sea
    # ------------------------------------------------------------------

    def _score_catch(self, state, content, seat, action) -> float:
        payload = action.payload
        fish = content.get_fish(payload.target_fish_id)
        if fish is None:
            return float("-inf")

        difficulty = effective_difficulty(fish.difficulty, seat.catch_modifier, seat.catch_discount)
        fixed = sum(seat.fresh_dice[i] for i in payload.die_indices) + seat.catch_bonus
        tackle_faces = []
        for i in payload.tackle_indices:
            tackle = content.get_tackle_die(seat.tackle_dice[i])
            if tackle is not None:
                tackle_faces.append(tackle.faces)

        if seat.has_flag("auto_catch_difficulty_3") and fish.difficulty <= 3:
            p = 1.0
        else:
            p = success_probability(fixed, difficulty, tackle_faces)

        regrets = 0.0
        if fish.has_ability("regret_draw"):
            regrets += 1
        if fish.has_ability("regret_draw_2"):
            regrets += 2
        slot = state.sea.find_top(seat.depth, fish.id)
        shoal = state.sea.get_shoal(seat.depth, slot) if slot is not None else None
        if shoal is not None and len(shoal.fish_ids) == 1:
            regrets += 1
        madness = sum(int(t.split("+")[1]) for t in fish.abilities if t.startswith("madness_+"))

        gain = self._fish_worth(content, seat, fish) - self._exposure(content, seat, regrets, madness)
        if fish.has_ability("dink_on_catch"):
            gain += self.weights.dink_value

        cost = self.weights.die_cost * len(payload.die_indices)
        cost += self.weights.die_cost * 0.5 * len(payload.tackle_indices)
        if fixed > difficulty:
            cost += self.weights.overspend * (fixed - difficulty)
        return p * gain + (1 - p) * self.weights.failed_catch_consolation - cost

    def _score_descend(self, state, content, seat, action) -> float:
        levels = action.payload.target_depth - seat.depth
        gain = content.average_value_at_depth(action.payload.target_depth) - content.average_value_at_depth(seat.depth)
        days_factor = 1.0 if self._days_left(state, content) > 0 else 0.5
        score = gain * 0.5 * days_factor + self.weights.depth_value * levels
        # Deeper waters carry more regrets
        score -= self._exposure(content, seat, 0.5 * levels, 0)
        dice_after = len(seat.fresh_dice) - levels
        if dice_after <= 0:
            score -= 2 * self.weights.depth_value
        return score - self.weights.die_cost * levels

    def _score_reveal(self, state, content, seat, action) -> float:
        visible = sum(1 for s in state.sea.shoals_at(seat.depth) if s.revealed and not s.is_empty)
        lowest = min(seat.fresh_dice) if seat.fresh_dice else 0
        score = self.weights.reveal_value - 0.1 * lowest
        if seat.has_flag("reveal_before_move"):
            score += 0.1 * lowest
        seen = seat.peeked_fish(seat.depth, action.payload.shoal_slot)
        shoal = state.sea.get_shoal(seat.depth, action.payload.shoal_slot)
        fish = content.get_fish(seen) if shoal is not None and seen == shoal.top_fish_id else None
        if fish is not None:
            # Already known: only worth it to make the fish catchable
            score += 0.1 * (fish.value - content.average_value_at_depth(seat.depth))
        # Another face-up shoal matters less when there are already targets
        return score - 0.3 * visible

    # ------------------------------------------------------------------
    # At port
    # ------------------------------------------------------------------

    def _upgrade_worth(self, effect: str) -> float:
        """Value per remaining day of one upgrade effect."""
        worth = {
            "max_dice_+1": 1.6,
            "catch_difficulty_-1": 1.2,
            "descend_cost_-1": 0.6,
            "shop_discount_1": 0.3,
            "port_from_sea": 0.8,
            "reveal_before_move": 0.5,
            "madness_immune": 1.2,
            "auto_catch_difficulty_3": 1.0,
            "reduce_regrets_1": 0.9,
            "prevent_regret_1_per_day": 0.9,
        }
        return worth.get(effect, 0.6)

    def _score_upgrade(self, state, content, seat, action) -> float:
        upgrade = content.get_upgrade(action.payload.upgrade_id)
        if upgrade is None:
            return float("-inf")
        days = self._useful_days(state, content)
        worth = sum(self._upgrade_worth(e) for e in upgrade.effects) * days * self.weights.upgrade_per_day
        price = economy.upgrade_price(content, seat, upgrade)
        return worth - price * self.weights.fishbuck_value

    def _score_tackle(self, state, content, seat, action) -> float:
        tackle = content.get_tackle_die(action.payload.tackle_id)
        if tackle is None:
            return float("-inf")
        days = self._useful_days(state, content)
        if days == 0:
            return -1.0
        count = action.payload.count
        # Extra tackle dice beyond the first are worth less
        worth = tackle.mean * 0.6 * (1 + 0.5 * (count - 1))
        return worth - tackle.cost * count * self.weights.fishbuck_value

    def _score_sell(self, state, content, seat, action) -> float:
        fish = content.get_fish(action.payload.fish_id)
        if fish is None:
            return float("-inf")
        cash = economy.sale_value(content, seat, fish) * self.weights.fishbuck_value
        if action.payload.fish_id in seat.hand_fish:
            keep = economy.adjusted_fish_value(fish, seat.madness, content.rules)
            if seat.free_mount_slots:
                keep *= self.weights.mount_expectation
            else:
                keep *= economy.hand_fish_factor(seat.madness)
        else:
            slot = next(m.slot for m in seat.mounted if m.fish_id == fish.id)
            keep = economy.adjusted_fish_value(fish, seat.madness, content.rules)
            keep *= economy.slot_multiplier(content.rules, slot)
        penalty = self._exposure(content, seat, 1, 0) if fish.is_foul else 0.0
        return cash + self._useful_days(state, content) * 0.2 * cash - keep * self.weights.fish_value - penalty

    def _score_mount(self, state, content, seat, action) -> float:
        fish = content.get_fish(action.payload.fish_id)
        slot = economy.default_mount_slot(content, seat)
        if fish is None or slot is None:
            return float("-inf")
        value = economy.adjusted_fish_value(fish, seat.madness, content.rules)
        mounted = value * economy.slot_multiplier(content.rules, slot)
        in_hand = value * economy.hand_fish_factor(seat.madness)
        return (mounted - in_hand) * self.weights.fish_value + 0.5

    def _score_discard_regret(self, state, content, seat, action) -> float:
        regret = content.get_regret(action.payload.regret_id)
        if regret is None:
            return float("-inf")
        rules = content.rules
        tier_now = economy.madness_tier(len(seat.regrets), rules)
        tier_after = economy.madness_tier(len(seat.regrets) - 1, rules)
        return regret.value * self.weights.regret_penalty + (tier_now - tier_after) * self.weights.madness_penalty + 0.3

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def _port_work(self, state, content, seat) -> float:
        """What a day at port would get done."""
        port_work = 0.0
        if seat.hand_fish and seat.free_mount_slots:
            port_work += 1.5 * len(seat.hand_fish)
        if seat.regrets:
            port_work += 1.0
        affordable = [
            u for u in content.upgrades
            if u.id in state.port.shop
            and economy.equip_violation(seat, u) is None
            and economy.upgrade_price(content, seat, u) <= seat.fishbucks
        ]
        port_work += 0.8 * min(len(affordable), 2)
        if self._days_left(state, content) == 0:
            port_work *= 2
        return port_work

    def _score_declaration(self, state, content, seat, action) -> float:
        if action.payload.location == "port":
            return self._port_work(state, content, seat)

        # With no fresh dice the sea is worth nothing
        depth = economy.start_depth(content, seat)
        typical = content.average_value_at_depth(depth) * self.weights.fish_value
        dice_strength = min(1.0, seat.fresh_total / 10.0)
        return typical * dice_strength + 0.5 * len(seat.fresh_dice) * self.weights.die_cost

    def _score_make_port(self, state, content, seat, action) -> float:
        stay = 0.5 * len(seat.fresh_dice) * self.weights.die_cost
        if self._best_visible_fish(state, content, seat) is not None:
            stay += 1.0
        return self._port_work(state, content, seat) - stay

    def _score_port_reroll(self, state, content, seat, action) -> float:
        if not seat.fresh_dice:
            return float("-inf")
        average = seat.fresh_total / len(seat.fresh_dice)
        if average >= self.weights.reroll_threshold:
            return -0.2
        expected = sum(D6_FACES) / len(D6_FACES)
        return (expected - average) * len(seat.fresh_dice) * 0.3

    def _score_can_of_worms(self, state, content, seat, action) -> float:
        # Shoals within reach are the ones worth knowing about
        if action.payload.depth >= seat.depth:
            return 0.3
        return 0.1

    # ------------------------------------------------------------------
    # Dinks and the life preserver
    # ------------------------------------------------------------------

    def _best_visible_fish(self, state, content, seat) -> FishDefinition | None:
        best = None
        for shoal in state.sea.shoals_at(seat.depth):
            if not shoal.revealed or shoal.is_empty:
                continue
            fish = content.get_fish(shoal.top_fish_id)
            if fish is not None and (best is None or fish.value > best.value):
                best = fish
        return best

    def _score_dink(self, state, content, seat, action) -> float:
        dink = content.get_dink(action.payload.dink_id)
        if dink is None:
            return float("-inf")
        keep_value = 0.2
        score = 0.0
        for effect in dink.effects:
            if effect == "reroll_failed_catch":
                failed = state.last_failed_catch
                fish = content.get_fish(failed.fish_id) if failed else None
                if fish is not None:
                    p = reroll_success_probability(len(failed.dice), failed.bonus, failed.difficulty)
                    score += p * self._fish_worth(content, seat, fish)
            elif effect == "ready_spent_die":
                if seat.spent_dice:
                    # Keeping a high face beats rolling it again
                    expected = sum(D6_FACES) / len(D6_FACES)
                    score += (max(seat.spent_dice) - expected) * 0.3
            elif effect == "catch_bonus_1":
                if seat.location == Location.SEA and self._best_visible_fish(state, content, seat):
                    score += 0.5
            elif effect == "convert_one_to_six":
                target = action.payload.target
                if target is not None and target < len(seat.fresh_dice):
                    score += (6 - seat.fresh_dice[target]) * 0.3
            elif effect == "peek_shoal_top":
                score += 0.4
            elif effect == "shop_discount_2":
                score += 0.5 if seat.location == Location.PORT and seat.fishbucks > 0 else 0.0
        return score - keep_value

    def _score_life_preserver(self, state, content, seat, action) -> float:
        if action.payload.use_type == "reduce_fish_difficulty":
            fish = self._best_visible_fish(state, content, seat)
            if fish is None:
                return -0.5
            return 0.2 * fish.difficulty
        affordable = any(
            economy.upgrade_price(content, seat, u) - content.rules.life_preserver_discount <= seat.fishbucks
            for u in content.upgrades if u.id in state.port.shop
        )
        return 0.6 if affordable else -0.5

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    def _score_pass(self, state, content, seat, action) -> float:
        score = 0.0
        if state.first_passer_id is None and state.num_seats > 1:
            score += self.weights.first_pass_bonus
        if seat.location == Location.SEA:
            score -= self.weights.unused_die_penalty * len(seat.fresh_dice)
        return score

    def _score_end_turn(self, state, content, seat, action) -> float:
        if state.phase == GamePhase.REFRESH:
            return 0.0
        return self.weights.end_turn_value

    def _score_remove_die(self, state, content, seat, action) -> float:
        index = action.payload.die_index
        if index >= len(seat.fresh_dice):
            return 1.0
        return -0.1 * seat.fresh_dice[index]

    def _score_give_life_preserver(self, state, content, seat, action) -> float:
        target = state.get_seat(action.payload.target_seat_id)
        if target is None:
            return float("-inf")
        # Hand the advantage to the weakest rival
        return -0.01 * economy.score_seat(content, target).total

    def _score_claim_reward(self, state, content, seat, action) -> float:
        if action.payload.choice == "draw_dink":
            return self.weights.dink_value
        rules = content.rules
        tier_now = economy.madness_tier(len(seat.regrets), rules)
        tier_after = economy.madness_tier(max(0, len(seat.regrets) - 1), rules)
        return self._average_regret(content) * self.weights.regret_penalty + (tier_now - tier_after) * self.weights.madness_penalty
