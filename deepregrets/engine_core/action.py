"""
Action System - Actions, payloads, and results.

Actions represent:
1. Seat actions (declare, catch, descend, shop, pass, ...)
2. Resolutions of pending decisions (remove die, give preserver, claim reward)
3. System actions (init game, reset game)

Human seats and scripted seats dispatch the same vocabulary.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .payloads import (
    ActionPayloadModel,
    MalformedActionError,
    EmptyPayload,
    InitGamePayload,
    SeatSetup,
    DeclareLocationPayload,
    CatchFishPayload,
    DescendPayload,
    BuyUpgradePayload,
    MountFishPayload,
    SellFishPayload,
    RevealFishPayload,
    CanOfWormsPayload,
    BuyTackleDicePayload,
    DiscardRegretPayload,
    RemoveDiePayload,
    GiveLifePreserverPayload,
    UseLifePreserverPayload,
    ClaimPassingRewardPayload,
    PlayDinkPayload,
    build_payload,
)

SYSTEM_SEAT = "system"


class ActionType(Enum):
    """Types of actions in the system."""
    # System actions
    INIT_GAME = "INIT_GAME"
    RESET_GAME = "RESET_GAME"

    # Seat actions
    DECLARE_LOCATION = "DECLARE_LOCATION"
    CATCH_FISH = "CATCH_FISH"
    DESCEND = "DESCEND"
    BUY_UPGRADE = "BUY_UPGRADE"
    MOUNT_FISH = "MOUNT_FISH"
    SELL_FISH = "SELL_FISH"
    REVEAL_FISH = "REVEAL_FISH"
    BUY_TACKLE_DICE = "BUY_TACKLE_DICE"
    DISCARD_REGRET = "DISCARD_REGRET"
    MAKE_PORT = "MAKE_PORT"
    PORT_REROLL = "PORT_REROLL"
    USE_CAN_OF_WORMS = "USE_CAN_OF_WORMS"
    PLAY_DINK = "PLAY_DINK"
    USE_LIFE_PRESERVER = "USE_LIFE_PRESERVER"
    PASS = "PASS"
    END_TURN = "END_TURN"

    # Pending-decision resolutions
    REMOVE_DIE = "REMOVE_DIE"
    GIVE_LIFE_PRESERVER = "GIVE_LIFE_PRESERVER"
    CLAIM_PASSING_REWARD = "CLAIM_PASSING_REWARD"


PAYLOAD_MODELS: dict[ActionType, type[ActionPayloadModel]] = {
    ActionType.INIT_GAME: InitGamePayload,
    ActionType.RESET_GAME: EmptyPayload,
    ActionType.DECLARE_LOCATION: DeclareLocationPayload,
    ActionType.CATCH_FISH: CatchFishPayload,
    ActionType.DESCEND: DescendPayload,
    ActionType.BUY_UPGRADE: BuyUpgradePayload,
    ActionType.MOUNT_FISH: MountFishPayload,
    ActionType.SELL_FISH: SellFishPayload,
    ActionType.REVEAL_FISH: RevealFishPayload,
    ActionType.BUY_TACKLE_DICE: BuyTackleDicePayload,
    ActionType.DISCARD_REGRET: DiscardRegretPayload,
    ActionType.MAKE_PORT: EmptyPayload,
    ActionType.PORT_REROLL: EmptyPayload,
    ActionType.USE_CAN_OF_WORMS: CanOfWormsPayload,
    ActionType.PLAY_DINK: PlayDinkPayload,
    ActionType.USE_LIFE_PRESERVER: UseLifePreserverPayload,
    ActionType.PASS: EmptyPayload,
    ActionType.END_TURN: EmptyPayload,
    ActionType.REMOVE_DIE: RemoveDiePayload,
    ActionType.GIVE_LIFE_PRESERVER: GiveLifePreserverPayload,
    ActionType.CLAIM_PASSING_REWARD: ClaimPassingRewardPayload,
}

SYSTEM_ACTIONS = frozenset({ActionType.INIT_GAME, ActionType.RESET_GAME})

# At most one of these per turn; END_TURN requires one
MAIN_ACTIONS = frozenset({
    ActionType.CATCH_FISH,
    ActionType.DESCEND,
    ActionType.BUY_UPGRADE,
    ActionType.BUY_TACKLE_DICE,
    ActionType.SELL_FISH,
    ActionType.MOUNT_FISH,
    ActionType.DISCARD_REGRET,
    ActionType.MAKE_PORT,
    ActionType.PORT_REROLL,
})


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.

    Build actions with the factory classmethods or parse_action(); both
    validate the payload shape and raise MalformedActionError on a breach.
    """
    action_type: ActionType
    seat_id: str
    payload: ActionPayloadModel = field(default_factory=EmptyPayload)

    def describe(self) -> str:
        """Short human-readable form, used in logs and bot reasoning."""
        fields = self.payload.model_dump(exclude_defaults=True)
        if self.action_type == ActionType.INIT_GAME:
            fields = {"seats": len(self.payload.seats)}
        args = ", ".join(f"{k}={v}" for k, v in fields.items())
        return f"{self.action_type.value}({args})"

    @classmethod
    def _make(cls, action_type: ActionType, seat_id: str, **data) -> Action:
        payload = build_payload(PAYLOAD_MODELS[action_type], data)
        return cls(action_type=action_type, seat_id=seat_id, payload=payload)

    # System ----------------------------------------------------------------

    @classmethod
    def init_game(
        cls,
        seats: list[SeatSetup | dict[str, Any]],
        seed: int = 0,
        game_id: str = "deep_regrets",
    ) -> Action:
        """Factory for starting a new game."""
        raw = [s.model_dump() if isinstance(s, SeatSetup) else s for s in seats]
        return cls._make(ActionType.INIT_GAME, SYSTEM_SEAT, seats=raw, seed=seed, game_id=game_id)

    @classmethod
    def reset_game(cls) -> Action:
        return cls._make(ActionType.RESET_GAME, SYSTEM_SEAT)

    # Turn actions ----------------------------------------------------------

    @classmethod
    def declare_location(cls, seat_id: str, location: str) -> Action:
        return cls._make(ActionType.DECLARE_LOCATION, seat_id, location=location)

    @classmethod
    def catch_fish(
        cls,
        seat_id: str,
        die_indices: list[int] | tuple[int, ...],
        target_fish_id: str,
        tackle_indices: list[int] | tuple[int, ...] = (),
    ) -> Action:
        """Factory for a catch attempt with the chosen fresh dice."""
        return cls._make(
            ActionType.CATCH_FISH,
            seat_id,
            die_indices=tuple(die_indices),
            target_fish_id=target_fish_id,
            tackle_indices=tuple(tackle_indices),
        )

    @classmethod
    def descend(cls, seat_id: str, target_depth: int) -> Action:
        return cls._make(ActionType.DESCEND, seat_id, target_depth=target_depth)

    @classmethod
    def buy_upgrade(cls, seat_id: str, upgrade_id: str) -> Action:
        return cls._make(ActionType.BUY_UPGRADE, seat_id, upgrade_id=upgrade_id)

    @classmethod
    def mount_fish(cls, seat_id: str, fish_id: str, slot: int | None = None) -> Action:
        return cls._make(ActionType.MOUNT_FISH, seat_id, fish_id=fish_id, slot=slot)

    @classmethod
    def sell_fish(cls, seat_id: str, fish_id: str) -> Action:
        return cls._make(ActionType.SELL_FISH, seat_id, fish_id=fish_id)

    @classmethod
    def reveal_fish(cls, seat_id: str, shoal_slot: int) -> Action:
        return cls._make(ActionType.REVEAL_FISH, seat_id, shoal_slot=shoal_slot)

    @classmethod
    def buy_tackle_dice(cls, seat_id: str, tackle_id: str, count: int = 1) -> Action:
        return cls._make(ActionType.BUY_TACKLE_DICE, seat_id, tackle_id=tackle_id, count=count)

    @classmethod
    def discard_regret(cls, seat_id: str, regret_id: str) -> Action:
        return cls._make(ActionType.DISCARD_REGRET, seat_id, regret_id=regret_id)

    @classmethod
    def make_port(cls, seat_id: str) -> Action:
        """Factory for leaving the sea mid-day (needs the port_from_sea flag)."""
        return cls._make(ActionType.MAKE_PORT, seat_id)

    @classmethod
    def port_reroll(cls, seat_id: str) -> Action:
        return cls._make(ActionType.PORT_REROLL, seat_id)

    @classmethod
    def use_can_of_worms(cls, seat_id: str, depth: int, shoal_slot: int) -> Action:
        return cls._make(ActionType.USE_CAN_OF_WORMS, seat_id, depth=depth, shoal_slot=shoal_slot)

    @classmethod
    def play_dink(cls, seat_id: str, dink_id: str, target: int | None = None) -> Action:
        return cls._make(ActionType.PLAY_DINK, seat_id, dink_id=dink_id, target=target)

    @classmethod
    def use_life_preserver(cls, seat_id: str, use_type: str) -> Action:
        return cls._make(ActionType.USE_LIFE_PRESERVER, seat_id, use_type=use_type)

    @classmethod
    def pass_day(cls, seat_id: str) -> Action:
        """Factory for PASS (the seat is done for the day)."""
        return cls._make(ActionType.PASS, seat_id)

    @classmethod
    def end_turn(cls, seat_id: str) -> Action:
        return cls._make(ActionType.END_TURN, seat_id)

    # Pending resolutions ---------------------------------------------------

    @classmethod
    def remove_die(cls, seat_id: str, die_index: int) -> Action:
        return cls._make(ActionType.REMOVE_DIE, seat_id, die_index=die_index)

    @classmethod
    def give_life_preserver(cls, seat_id: str, target_seat_id: str) -> Action:
        return cls._make(ActionType.GIVE_LIFE_PRESERVER, seat_id, target_seat_id=target_seat_id)

    @classmethod
    def claim_passing_reward(cls, seat_id: str, choice: str) -> Action:
        return cls._make(ActionType.CLAIM_PASSING_REWARD, seat_id, choice=choice)


def parse_action(data: dict[str, Any]) -> Action:
    """
    Build an Action from a plain dict, e.g. one produced by a UI.

    Expected shape: {"type": "CATCH_FISH", "seat_id": "p1", "payload": {...}}
    """
    if not isinstance(data, dict):
        raise MalformedActionError(f"Action must be a dict, got {type(data).__name__}")
    raw_type = data.get("type")
    try:
        action_type = ActionType(raw_type)
    except ValueError as e:
        raise MalformedActionError(f"Unknown action type: {raw_type!r}") from e

    seat_id = data.get("seat_id", SYSTEM_SEAT if action_type in SYSTEM_ACTIONS else None)
    if not isinstance(seat_id, str) or not seat_id:
        raise MalformedActionError(f"{action_type.value} requires a seat_id")

    payload = data.get("payload") or {}
    if not isinstance(payload, dict):
        raise MalformedActionError("payload must be a dict")
    return Action._make(action_type, seat_id, **payload)


def ensure_well_formed(action: Any) -> None:
    """
    Raise MalformedActionError unless `action` is a structurally valid Action.

    Catches actions assembled by hand with the wrong payload model.
    """
    if not isinstance(action, Action):
        raise MalformedActionError(f"Expected Action, got {type(action).__name__}")
    if not isinstance(action.action_type, ActionType):
        raise MalformedActionError(f"Unknown action type: {action.action_type!r}")
    if not isinstance(action.seat_id, str) or not action.seat_id:
        raise MalformedActionError(f"{action.action_type.value} requires a seat_id")
    expected = PAYLOAD_MODELS[action.action_type]
    if type(action.payload) is not expected:
        raise MalformedActionError(
            f"{action.action_type.value} requires {expected.__name__}, "
            f"got {type(action.payload).__name__}"
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    A failure carries the rule that was violated; the public transition
    function turns it into "state unchanged".
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error)

    @classmethod
    def success_with_state(cls, state: Any, changes: list[str] | None = None) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
