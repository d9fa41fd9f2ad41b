"""
Game State - Immutable snapshot of a Deep Regrets game.

Design principles:
- Immutable: frozen dataclasses and tuples, all mutations return new state
- Self-contained: the random seed and draw counter live in the state, so a
  transition is a pure function of (state, action)
- One pending decision at most: the tagged union in GameState.pending
  makes forced sub-decisions mutually exclusive by construction
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union


class GamePhase(Enum):
    """Phases of a game day, plus the bookends of a whole game."""
    SETUP = "setup"
    REFRESH = "refresh"
    DECLARATION = "declaration"
    ACTION = "action"
    DAY_END = "day_end"
    GAME_OVER = "game_over"


class Location(Enum):
    SEA = "sea"
    PORT = "port"


@dataclass(frozen=True)
class Mount:
    """A fish hung on the trophy wall. Slot index picks the multiplier."""
    slot: int
    fish_id: str


@dataclass(frozen=True)
class Peek:
    """A hidden top fish one seat has seen privately."""
    depth: int
    slot: int
    fish_id: str


@dataclass(frozen=True)
class SeatState:
    """
    State for a single seat (angler).

    Dice are plain face values. fresh_dice can still be spent, spent_dice
    have been used and are rolled fresh again at the end of the seat's next
    refresh turn. Their combined length never exceeds max_dice once any
    pending dice removal is resolved.
    """
    seat_id: str
    name: str
    character_id: str | None = None
    is_scripted: bool = False
    difficulty: str = "medium"

    location: Location = Location.PORT
    depth: int = 0

    fresh_dice: tuple[int, ...] = ()
    spent_dice: tuple[int, ...] = ()
    base_max_dice: int = 3
    max_dice: int = 4

    fishbucks: int = 0
    hand_fish: tuple[str, ...] = ()
    mounted: tuple[Mount, ...] = ()
    max_mount_slots: int = 3

    regrets: tuple[str, ...] = ()
    madness: int = 0
    madness_offset: int = 0
    regret_shields: int = 0

    dinks: tuple[str, ...] = ()
    tackle_dice: tuple[str, ...] = ()

    # Equipment and the permanent modifiers it granted
    rod_id: str | None = None
    reel_id: str | None = None
    supplies: tuple[str, ...] = ()
    catch_modifier: int = 0
    descend_modifier: int = 0
    shop_discount: int = 0
    flags: frozenset[str] = frozenset()

    # Day and turn bookkeeping
    has_passed: bool = False
    has_declared: bool = False
    has_refreshed: bool = False
    turn_action_taken: bool = False
    bonus_actions: int = 0
    reward_due: bool = False
    made_port_today: bool = False
    regret_discarded_today: bool = False
    port_reroll_used_today: bool = False

    # Flipped face up on making port, spent on one peek at a hidden shoal
    can_of_worms_face_up: bool = False
    peeked: tuple[Peek, ...] = ()

    # One-shot modifiers waiting for their next use
    catch_bonus: int = 0
    catch_discount: int = 0
    shop_discount_pending: int = 0

    bonus_points: int = 0

    @property
    def dice_held(self) -> int:
        return len(self.fresh_dice) + len(self.spent_dice)

    @property
    def fresh_total(self) -> int:
        return sum(self.fresh_dice)

    @property
    def upgrades(self) -> tuple[str, ...]:
        owned = tuple(u for u in (self.rod_id, self.reel_id) if u)
        return owned + self.supplies

    @property
    def free_mount_slots(self) -> list[int]:
        used = {m.slot for m in self.mounted}
        return [s for s in range(self.max_mount_slots) if s not in used]

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    def peeked_fish(self, depth: int, slot: int) -> str | None:
        for peek in self.peeked:
            if peek.depth == depth and peek.slot == slot:
                return peek.fish_id
        return None

    def with_flags(self, *new_flags: str) -> SeatState:
        return self._copy_with(flags=self.flags | frozenset(new_flags))

    def _copy_with(self, **kwargs) -> SeatState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)


@dataclass(frozen=True)
class Shoal:
    """A face-down stack of fish. Index 0 is the top fish."""
    fish_ids: tuple[str, ...] = ()
    revealed: bool = False

    @property
    def top_fish_id(self) -> str | None:
        return self.fish_ids[0] if self.fish_ids else None

    @property
    def is_empty(self) -> bool:
        return not self.fish_ids

    def pop_top(self) -> tuple[str | None, Shoal]:
        """Return (removed fish, new shoal). The next fish lies face down."""
        if not self.fish_ids:
            return None, self
        return self.fish_ids[0], Shoal(fish_ids=self.fish_ids[1:], revealed=False)


@dataclass(frozen=True)
class Sea:
    """Shoals per depth. shoals[0] is Depth I."""
    shoals: tuple[tuple[Shoal, ...], ...] = ()
    graveyard: tuple[str, ...] = ()
    plug_active: bool = False
    erosion_cursor: int = 0

    @property
    def max_depth(self) -> int:
        return len(self.shoals)

    def shoals_at(self, depth: int) -> tuple[Shoal, ...]:
        if depth < 1 or depth > len(self.shoals):
            return ()
        return self.shoals[depth - 1]

    def get_shoal(self, depth: int, slot: int) -> Shoal | None:
        row = self.shoals_at(depth)
        if slot < 0 or slot >= len(row):
            return None
        return row[slot]

    def find_top(self, depth: int, fish_id: str) -> int | None:
        """Slot of the revealed shoal at depth whose top fish is fish_id."""
        for slot, shoal in enumerate(self.shoals_at(depth)):
            if shoal.revealed and shoal.top_fish_id == fish_id:
                return slot
        return None

    def with_shoal(self, depth: int, slot: int, shoal: Shoal) -> Sea:
        row = list(self.shoals[depth - 1])
        row[slot] = shoal
        rows = list(self.shoals)
        rows[depth - 1] = tuple(row)
        return replace(self, shoals=tuple(rows))

    @property
    def all_empty(self) -> bool:
        return all(s.is_empty for row in self.shoals for s in row)

    def positions(self) -> list[tuple[int, int]]:
        """All (depth, slot) pairs, shallowest first."""
        return [
            (depth, slot)
            for depth, row in enumerate(self.shoals, start=1)
            for slot in range(len(row))
        ]


@dataclass(frozen=True)
class Port:
    """Shared decks and the shop."""
    regret_deck: tuple[str, ...] = ()
    regret_discard: tuple[str, ...] = ()
    dink_deck: tuple[str, ...] = ()
    dink_discard: tuple[str, ...] = ()
    shop: tuple[str, ...] = ()
    # (tackle_id, count) pairs in shop order
    tackle_stock: tuple[tuple[str, int], ...] = ()

    def stock_of(self, tackle_id: str) -> int:
        return dict(self.tackle_stock).get(tackle_id, 0)

    def with_stock(self, tackle_id: str, count: int) -> Port:
        stock = dict(self.tackle_stock)
        stock[tackle_id] = count
        return replace(self, tackle_stock=tuple(stock.items()))

    def _copy_with(self, **kwargs) -> Port:
        return replace(self, **kwargs)


# ============================================================================
# Pending decisions
# ============================================================================

@dataclass(frozen=True)
class DiceRemoval:
    """Seat holds more dice than max_dice and must discard `count` of them."""
    seat_id: str
    count: int


@dataclass(frozen=True)
class LifePreserverGift:
    """The preserver holder rolled the strictly highest total and must hand it on."""
    from_seat_id: str


@dataclass(frozen=True)
class PassingReward:
    """Seat passed and picks a reward: draw a Dink or discard a regret."""
    seat_id: str
    is_first_pass: bool


PendingDecision = Union[DiceRemoval, LifePreserverGift, PassingReward]


@dataclass(frozen=True)
class FailedCatch:
    """Last failed catch, kept so a reroll Dink can retry it."""
    seat_id: str
    fish_id: str
    depth: int
    slot: int
    dice: tuple[int, ...]
    bonus: int
    difficulty: int


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    game_id: str = ""
    content_id: str = ""

    phase: GamePhase = GamePhase.SETUP
    day_number: int = 0
    current_seat_index: int = 0
    priority_seat_index: int = 0

    seats: tuple[SeatState, ...] = ()
    sea: Sea = field(default_factory=Sea)
    port: Port = field(default_factory=Port)

    life_preserver_owner_id: str | None = None
    life_preserver_used_today: bool = False
    preserver_check_due: bool = False

    pending: PendingDecision | None = None
    first_passer_id: str | None = None
    last_failed_catch: FailedCatch | None = None
    last_seat_turns_remaining: int | None = None

    winner_id: str | None = None
    # (seat_id, score) pairs in seat order, set when the game ends
    final_scores: tuple[tuple[str, int], ...] = ()

    # Determinism: every random draw uses (random_seed, random_counter)
    random_seed: int = 0
    random_counter: int = 0

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def num_seats(self) -> int:
        return len(self.seats)

    @property
    def current_seat(self) -> SeatState | None:
        if not self.seats:
            return None
        return self.seats[self.current_seat_index]

    @property
    def pending_dice_removal(self) -> DiceRemoval | None:
        return self.pending if isinstance(self.pending, DiceRemoval) else None

    @property
    def pending_life_preserver_gift(self) -> LifePreserverGift | None:
        return self.pending if isinstance(self.pending, LifePreserverGift) else None

    @property
    def pending_passing_reward(self) -> PassingReward | None:
        return self.pending if isinstance(self.pending, PassingReward) else None

    def get_seat(self, seat_id: str) -> SeatState | None:
        """Get seat by ID."""
        for seat in self.seats:
            if seat.seat_id == seat_id:
                return seat
        return None

    def seat_index(self, seat_id: str) -> int | None:
        for i, seat in enumerate(self.seats):
            if seat.seat_id == seat_id:
                return i
        return None

    def with_seat(self, seat: SeatState) -> GameState:
        """Return new state with updated seat."""
        seats = tuple(seat if s.seat_id == seat.seat_id else s for s in self.seats)
        return self._copy_with(seats=seats)

    def with_sea(self, sea: Sea) -> GameState:
        return self._copy_with(sea=sea)

    def with_port(self, port: Port) -> GameState:
        return self._copy_with(port=port)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
