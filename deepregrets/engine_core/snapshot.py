"""
Snapshots - Read-only, serializable views of a game for a table display.

Regret cards are secret, so seats only expose their regret count. Shoals
only show a fish when they are revealed, and what a seat saw through its
Can of Worms stays private.
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
from pydantic import BaseModel, Field

from .state import GameState, DiceRemoval, LifePreserverGift, PassingReward
from .economy import score_seat
from .turns import acting_seat_id

if TYPE_CHECKING:
    from ..spec_schema import GameContent


class SnapshotModel(BaseModel):
    model_config = {"frozen": True}


class MountInfo(SnapshotModel):
    slot: int
    fish_id: str


class SeatSnapshot(SnapshotModel):
    """One angler as the table sees them."""
    seat_id: str
    name: str
    character_id: Optional[str] = None
    is_scripted: bool = False
    location: str
    depth: int
    fresh_dice: list[int] = Field(default_factory=list)
    spent_dice: list[int] = Field(default_factory=list)
    max_dice: int
    fishbucks: int
    hand_fish: list[str] = Field(default_factory=list)
    mounted: list[MountInfo] = Field(default_factory=list)
    regret_count: int = 0
    madness: int = 0
    dink_count: int = 0
    tackle_dice: list[str] = Field(default_factory=list)
    upgrades: list[str] = Field(default_factory=list)
    has_passed: bool = False
    can_of_worms_face_up: bool = False
    projected_score: int = 0


class ShoalSnapshot(SnapshotModel):
    depth: int
    slot: int
    size: int
    revealed: bool
    top_fish_id: Optional[str] = Field(default=None, description="Only set for revealed shoals")


class PendingSnapshot(SnapshotModel):
    kind: str = Field(description="dice_removal, life_preserver_gift or passing_reward")
    seat_id: str
    count: Optional[int] = None
    is_first_pass: Optional[bool] = None


class GameSnapshot(SnapshotModel):
    """Whole-table view of a game."""
    game_id: str
    phase: str
    day_number: int
    current_seat_id: Optional[str] = None
    acting_seat_id: Optional[str] = None
    priority_seat_id: Optional[str] = None
    life_preserver_owner_id: Optional[str] = None
    seats: list[SeatSnapshot] = Field(default_factory=list)
    shoals: list[ShoalSnapshot] = Field(default_factory=list)
    pending: Optional[PendingSnapshot] = None
    regret_deck_size: int = 0
    dink_deck_size: int = 0
    tackle_stock: dict[str, int] = Field(default_factory=dict)
    is_game_over: bool = False
    winner_id: Optional[str] = None
    final_scores: dict[str, int] = Field(default_factory=dict)


def _pending_snapshot(state: GameState) -> PendingSnapshot | None:
    pending = state.pending
    if isinstance(pending, DiceRemoval):
        return PendingSnapshot(kind="dice_removal", seat_id=pending.seat_id, count=pending.count)
    if isinstance(pending, LifePreserverGift):
        return PendingSnapshot(kind="life_preserver_gift", seat_id=pending.from_seat_id)
    if isinstance(pending, PassingReward):
        return PendingSnapshot(
            kind="passing_reward",
            seat_id=pending.seat_id,
            is_first_pass=pending.is_first_pass,
        )
    return None


def snapshot(content: GameContent, state: GameState) -> GameSnapshot:
    """Build a GameSnapshot of the state."""
    seats = [
        SeatSnapshot(
            seat_id=seat.seat_id,
            name=seat.name,
            character_id=seat.character_id,
            is_scripted=seat.is_scripted,
            location=seat.location.value,
            depth=seat.depth,
            fresh_dice=list(seat.fresh_dice),
            spent_dice=list(seat.spent_dice),
            max_dice=seat.max_dice,
            fishbucks=seat.fishbucks,
            hand_fish=list(seat.hand_fish),
            mounted=[MountInfo(slot=m.slot, fish_id=m.fish_id) for m in seat.mounted],
            regret_count=len(seat.regrets),
            madness=seat.madness,
            dink_count=len(seat.dinks),
            tackle_dice=list(seat.tackle_dice),
            upgrades=list(seat.upgrades),
            has_passed=seat.has_passed,
            can_of_worms_face_up=seat.can_of_worms_face_up,
            projected_score=score_seat(content, seat).total,
        )
        for seat in state.seats
    ]

    shoals = []
    for depth, slot in state.sea.positions():
        shoal = state.sea.get_shoal(depth, slot)
        shoals.append(ShoalSnapshot(
            depth=depth,
            slot=slot,
            size=len(shoal.fish_ids),
            revealed=shoal.revealed,
            top_fish_id=shoal.top_fish_id if shoal.revealed else None,
        ))

    current = state.current_seat
    priority = state.seats[state.priority_seat_index].seat_id if state.seats else None
    return GameSnapshot(
        game_id=state.game_id,
        phase=state.phase.value,
        day_number=state.day_number,
        current_seat_id=current.seat_id if current else None,
        acting_seat_id=acting_seat_id(state),
        priority_seat_id=priority,
        life_preserver_owner_id=state.life_preserver_owner_id,
        seats=seats,
        shoals=shoals,
        pending=_pending_snapshot(state),
        regret_deck_size=len(state.port.regret_deck),
        dink_deck_size=len(state.port.dink_deck),
        tackle_stock=dict(state.port.tackle_stock),
        is_game_over=state.is_game_over,
        winner_id=state.winner_id,
        final_scores=dict(state.final_scores),
    )
