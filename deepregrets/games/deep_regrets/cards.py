"""
Deep Regrets Cards - Dinks and regrets.

Dink effect tags the engine resolves:
    gain_1_fishbuck          immediate, on draw
    start_at_depth_2         declaring sea starts at Depth II
    reroll_failed_catch      reroll the dice of the failed catch just made
    ready_spent_die          move one spent die back to the fresh pool during Refresh
    score_bonus_2            +2 points at every day end
    catch_bonus_1            +1 to the next catch total
    descend_cost_-1          descending needs one pip less per level
    ignore_madness_increase  consumed automatically to cancel a madness gain
    peek_shoal_top           reveal a shoal at the starting depth
    convert_one_to_six       turn one fresh die to a 6
    gain_extra_action        one extra main action on the first turn of each day
    sell_bonus_1             +1 fishbuck per fish sold
    shop_discount_2          next shop purchase costs 2 less
"""

from ...spec_schema.game_spec import DinkDefinition, DinkTiming, RegretDefinition

SCRIMSHAW_ID = "DINK-008"


DINK_CARDS = [
    DinkDefinition(
        id="DINK-001",
        name="Lucky Minnow",
        timing=DinkTiming.IMMEDIATE,
        effects=("gain_1_fishbuck",),
        one_shot=True,
        description="Flip this trinket for an instant Fishbuck windfall.",
    ),
    DinkDefinition(
        id="DINK-002",
        name="Pocket Compass",
        timing=DinkTiming.DECLARATION,
        effects=("start_at_depth_2",),
        one_shot=False,
        description="Begin each day at sea already positioned at Depth II.",
    ),
    DinkDefinition(
        id="DINK-003",
        name="Sturdy Net",
        timing=DinkTiming.CATCH,
        effects=("reroll_failed_catch",),
        one_shot=True,
        description="After failing a catch attempt, reroll the dice you spent on it.",
    ),
    DinkDefinition(
        id="DINK-004",
        name="Coffee Thermos",
        timing=DinkTiming.REFRESH,
        effects=("ready_spent_die",),
        one_shot=True,
        description="Move one spent die back to your fresh pool during Refresh.",
    ),
    DinkDefinition(
        id="DINK-005",
        name="Fisherman's Tale",
        timing=DinkTiming.END_OF_DAY,
        effects=("score_bonus_2",),
        one_shot=False,
        description="Spin a yarn to secure +2 glory at the end of the day.",
    ),
    DinkDefinition(
        id="DINK-006",
        name="Salt-Cured Worms",
        timing=DinkTiming.CATCH,
        effects=("catch_bonus_1",),
        one_shot=True,
        description="Your next catch counts one pip higher.",
    ),
    DinkDefinition(
        id="DINK-007",
        name="Tin of Ball Bearings",
        timing=DinkTiming.MOVEMENT,
        effects=("descend_cost_-1",),
        one_shot=False,
        description="Your rig glides silently; descending costs 1 less die value.",
    ),
    DinkDefinition(
        id=SCRIMSHAW_ID,
        name="Scrimshaw Token",
        timing=DinkTiming.MADNESS,
        effects=("ignore_madness_increase",),
        one_shot=True,
        description="Discarded automatically to ignore a single Madness increase.",
    ),
    DinkDefinition(
        id="DINK-009",
        name="Abyssal Chart",
        timing=DinkTiming.DECLARATION,
        effects=("peek_shoal_top",),
        one_shot=True,
        description="Reveal the top fish of a shoal at your starting depth.",
    ),
    DinkDefinition(
        id="DINK-010",
        name="Lucky Clamshell",
        timing=DinkTiming.ROLL,
        effects=("convert_one_to_six",),
        one_shot=True,
        description="After rolling dice, turn a single die to show a 6.",
    ),
    DinkDefinition(
        id="DINK-011",
        name="Tide Reader",
        timing=DinkTiming.START,
        effects=("gain_extra_action",),
        one_shot=False,
        description="At the start of each day gain one additional action.",
    ),
    DinkDefinition(
        id="DINK-012",
        name="Brass Fish Hook",
        timing=DinkTiming.SELL,
        effects=("sell_bonus_1",),
        one_shot=False,
        description="Whenever you sell a fish, gain +1 Fishbuck.",
    ),
    DinkDefinition(
        id="DINK-013",
        name="Merchant's Token",
        timing=DinkTiming.PORT,
        effects=("shop_discount_2",),
        one_shot=True,
        description="Discard at Port to reduce the cost of a single Shop purchase by 2.",
    ),
]


_REGRET_TABLE = [
    ("REG-001", "A Lamentable Incident at Sea", 0),
    ("REG-002", "The Fish That Got Away", 1),
    ("REG-003", "Cursed Equipment Failure", 2),
    ("REG-004", "Nightmares of the Deep", 3),
    ("REG-005", "Whispers in the Fog", 1),
    ("REG-006", "The Captain's Last Words", 2),
    ("REG-007", "Lost at Sea", 1),
    ("REG-008", "Tentacles in the Net", 3),
    ("REG-009", "The Sunken Vessel", 2),
    ("REG-010", "Madness Takes Hold", 3),
    ("REG-011", "Blood in the Water", 1),
    ("REG-012", "The Deep Calls", 2),
    ("REG-013", "Eldritch Visions", 3),
    ("REG-014", "Sailor's Superstition", 0),
    ("REG-015", "The Kraken's Eye", 3),
    ("REG-016", "Cursed Waters", 2),
    ("REG-017", "The Lighthouse Keeper", 1),
    ("REG-018", "Storm of Souls", 2),
    ("REG-019", "The Final Cast", 1),
    ("REG-020", "Ancient Grudge", 3),
]

REGRET_CARDS = [RegretDefinition(id=i, text=t, value=v) for i, t, v in _REGRET_TABLE]
