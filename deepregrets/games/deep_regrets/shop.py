"""
Deep Regrets Shop - Upgrades and tackle dice sold at port.

Upgrade effect tags:
    max_dice_+N, catch_difficulty_-N, descend_cost_-N, shop_discount_N
        numeric modifiers folded into the seat at purchase
    prevent_regret_1_per_day
        grants a regret shield that refills every morning
    anything else
        a flag checked by the engine where it applies
"""

from ...spec_schema.game_spec import UpgradeDefinition, UpgradeKind, TackleDieDefinition

ROD, REEL, SUPPLY = UpgradeKind.ROD, UpgradeKind.REEL, UpgradeKind.SUPPLY


RODS = [
    UpgradeDefinition("ROD-001", "Glass Rod", ROD, 3, ("reroll_1_die",),
                      "Reroll your lowest die once when a catch falls short."),
    UpgradeDefinition("ROD-002", "Carbon Fiber Rod", ROD, 5, ("catch_difficulty_-1",),
                      "Every fish is one point easier to catch."),
    UpgradeDefinition("ROD-003", "Blessed Rod", ROD, 7, ("reduce_regrets_1",),
                      "Each catch draws one regret fewer."),
    UpgradeDefinition("ROD-004", "Ancient Harpoon", ROD, 8, ("ignore_discard_small",),
                      "Predators no longer eat the small fish in your hold."),
]

REELS = [
    UpgradeDefinition("REEL-001", "Quick Release Reel", REEL, 4, ("draw_dink_on_catch",),
                      "Draw a Dink whenever you land a fish."),
    UpgradeDefinition("REEL-002", "Deep Sea Reel", REEL, 6, ("descend_cost_-1",),
                      "Descending costs 1 less die value."),
    UpgradeDefinition("REEL-003", "Mechanical Reel", REEL, 5, ("auto_catch_difficulty_3",),
                      "Fish of difficulty 3 or less are caught with any dice."),
    UpgradeDefinition("REEL-004", "Void Reel", REEL, 9, ("madness_immune",),
                      "Fish can no longer drive you mad."),
]

SUPPLIES = [
    UpgradeDefinition("SUPPLY-001", "Lucky Lure", SUPPLY, 2, ("reroll_1s",),
                      "Reroll 1s once whenever you roll your dice."),
    UpgradeDefinition("SUPPLY-002", "Fish Finder", SUPPLY, 4, ("reveal_before_move",),
                      "Turn over the top fish of a shoal without spending a die."),
    UpgradeDefinition("SUPPLY-003", "Safety Net", SUPPLY, 3, ("prevent_regret_1_per_day",),
                      "Prevent 1 Regret draw per day."),
    UpgradeDefinition("SUPPLY-004", "Ancient Map", SUPPLY, 6, ("start_depth_2",),
                      "Start each day at sea at Depth II."),
    UpgradeDefinition("SUPPLY-005", "Lifeboat", SUPPLY, 5, ("port_from_sea",),
                      "Make port straight from the sea. Sometimes you just have to abandon ship."),
]

ALL_UPGRADES = RODS + REELS + SUPPLIES


TACKLE_DICE = [
    TackleDieDefinition("TACKLE-GREEN", "Green Tackle Die", "green", 1, (0, 0, 1, 2, 1, 2), stock=6),
    TackleDieDefinition("TACKLE-BLUE", "Blue Tackle Die", "blue", 2, (0, 1, 1, 1, 1, 1), stock=6),
    TackleDieDefinition("TACKLE-ORANGE", "Orange Tackle Die", "orange", 3, (2, 2, 2, 3, 3, 3), stock=6),
]
