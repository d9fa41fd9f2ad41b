"""
Action Payloads - Shape validation for the action vocabulary.

Every ActionType has exactly one payload model. Models are frozen and
forbid unknown fields, so a caller that builds an action with a missing or
misspelled field fails loudly at construction time instead of producing a
silently absorbed no-op.

Only shape is checked here. Whether a die index exists or a fish is on top
of a shoal is a rule question answered by the reducer.
"""

from __future__ import annotations
from typing import Literal

from pydantic import BaseModel, Field, ValidationError


class MalformedActionError(ValueError):
    """Raised for caller-contract breaches: bad action shape or payload."""


class ActionPayloadModel(BaseModel):
    """Base payload: immutable, no unknown fields."""

    model_config = {"frozen": True, "extra": "forbid"}


class EmptyPayload(ActionPayloadModel):
    pass


class SeatSetup(ActionPayloadModel):
    """One seat of an INIT_GAME request."""
    seat_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    character_id: str | None = None
    is_scripted: bool = False
    difficulty: Literal["easy", "medium", "hard"] = "medium"


class InitGamePayload(ActionPayloadModel):
    seats: tuple[SeatSetup, ...] = Field(min_length=1)
    seed: int = 0
    game_id: str = "deep_regrets"


class DeclareLocationPayload(ActionPayloadModel):
    location: Literal["sea", "port"]


class CatchFishPayload(ActionPayloadModel):
    die_indices: tuple[int, ...]
    target_fish_id: str
    tackle_indices: tuple[int, ...] = ()


class DescendPayload(ActionPayloadModel):
    target_depth: int


class BuyUpgradePayload(ActionPayloadModel):
    upgrade_id: str


class MountFishPayload(ActionPayloadModel):
    fish_id: str
    slot: int | None = None


class SellFishPayload(ActionPayloadModel):
    fish_id: str


class RevealFishPayload(ActionPayloadModel):
    shoal_slot: int


class CanOfWormsPayload(ActionPayloadModel):
    depth: int
    shoal_slot: int


class BuyTackleDicePayload(ActionPayloadModel):
    tackle_id: str
    count: int = Field(default=1, ge=1)


class DiscardRegretPayload(ActionPayloadModel):
    regret_id: str


class RemoveDiePayload(ActionPayloadModel):
    die_index: int


class GiveLifePreserverPayload(ActionPayloadModel):
    target_seat_id: str


class UseLifePreserverPayload(ActionPayloadModel):
    use_type: Literal["reduce_fish_difficulty", "reduce_shop_cost"]


class ClaimPassingRewardPayload(ActionPayloadModel):
    choice: Literal["draw_dink", "discard_regret"]


class PlayDinkPayload(ActionPayloadModel):
    dink_id: str
    target: int | None = None


def build_payload(model: type[ActionPayloadModel], data: dict) -> ActionPayloadModel:
    """Validate raw payload data, converting pydantic errors to MalformedActionError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedActionError(f"Invalid {model.__name__}: {e}") from e
