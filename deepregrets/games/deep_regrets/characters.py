"""Deep Regrets captains and their starting bonuses."""

from ...spec_schema.game_spec import CharacterDefinition


CHARACTERS = [
    CharacterDefinition(
        id="ahab",
        name="Ahab",
        title="The Veteran",
        fishbucks_bonus=2,
        starting_upgrades=("ROD-001",),
    ),
    CharacterDefinition(
        id="nemo",
        name="Nemo",
        title="The Beastmaster",
        regret_shields=1,
        starting_upgrades=("REEL-001",),
    ),
    CharacterDefinition(
        id="marina",
        name="Marina",
        title="The Hunter",
        extra_dinks=1,
        flags=("start_depth_2",),
    ),
    CharacterDefinition(
        id="finn",
        name="Finn",
        title="The Determined",
        fishbucks_bonus=3,
        flags=("reroll_1s",),
    ),
    CharacterDefinition(
        id="storm",
        name="Storm",
        title="The Sailor",
        max_dice_bonus=1,
        mount_slot_bonus=1,
    ),
]
