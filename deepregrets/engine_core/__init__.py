"""
Engine Core - Deterministic game state management and rule enforcement.

The engine is the runtime that:
1. Holds the immutable GameState
2. Validates and applies actions via the reducer
3. Raises and resolves forced decisions (pending subsystem)
4. Generates legal actions for any seat
5. Produces serializable snapshots for display
"""

from .state import (
    GameState,
    GamePhase,
    Location,
    SeatState,
    Sea,
    Shoal,
    Port,
    Mount,
    DiceRemoval,
    LifePreserverGift,
    PassingReward,
    FailedCatch,
    Peek,
)
from .action import Action, ActionType, ActionResult, parse_action
from .payloads import MalformedActionError, SeatSetup
from .reducer import Reducer, transition, apply_action
from .action_generator import ActionGenerator, legal_actions, is_legal
from .snapshot import GameSnapshot, snapshot

__all__ = [
    "GameState",
    "GamePhase",
    "Location",
    "SeatState",
    "Sea",
    "Shoal",
    "Port",
    "Mount",
    "DiceRemoval",
    "LifePreserverGift",
    "PassingReward",
    "FailedCatch",
    "Peek",
    "Action",
    "ActionType",
    "ActionResult",
    "parse_action",
    "MalformedActionError",
    "SeatSetup",
    "Reducer",
    "transition",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
    "is_legal",
    "GameSnapshot",
    "snapshot",
]
