"""
Deep Regrets Fish - The three depths of the sea.

Fish structure:
- Depth (1-3), size (small/mid/large), quality (fair/foul)
- Value in fishbucks and catch difficulty
- Ability tags resolved on catch

Ability tags the engine resolves:
    regret_draw, regret_draw_2   draw 1 or 2 regrets
    madness_+1, madness_+2       raise madness
    dink_on_catch                draw a Dink
    discard_small                discard the lowest small fish in hand
    end_turn                     the catching seat passes immediately
    start_erosion                the sea starts eroding at day end

Other tags (quick, strong, legendary, ...) are descriptive only.
"""

from ...spec_schema.game_spec import FishDefinition, FishSize, FishQuality

SMALL, MID, LARGE = FishSize.SMALL, FishSize.MID, FishSize.LARGE
FAIR, FOUL = FishQuality.FAIR, FishQuality.FOUL

PLUG_ID = "FISH-D3-PLUG-003"


def _fish(fish_id, name, depth, size, value, difficulty, abilities=(), quality=FAIR):
    return FishDefinition(
        id=fish_id,
        name=name,
        depth=depth,
        size=size,
        value=value,
        difficulty=difficulty,
        abilities=tuple(abilities),
        quality=quality,
    )


DEPTH_1_FISH = [
    _fish("FISH-D1-SARDINE-001", "Sardine School", 1, SMALL, 1, 1),
    _fish("FISH-D1-HERRING-006", "Silver Herring", 1, SMALL, 1, 0),
    _fish("FISH-D1-ANCHOVY-009", "Anchovy Swarm", 1, SMALL, 1, 0),
    _fish("FISH-D1-PERCH-007", "Spotted Perch", 1, SMALL, 2, 1),
    _fish("FISH-D1-FLOUNDER-004", "Whispering Flounder", 1, SMALL, 2, 2, ["dink_on_catch"], FOUL),
    _fish("FISH-D1-MACKEREL-002", "Atlantic Mackerel", 1, MID, 2, 1),
    _fish("FISH-D1-SQUID-012", "Ink Squid", 1, MID, 2, 2, ["dink_on_catch"]),
    _fish("FISH-D1-CRAB-010", "Stone Crab", 1, MID, 2, 2),
    _fish("FISH-D1-BASS-003", "Sea Bass", 1, MID, 3, 2, ["quick"]),
    _fish("FISH-D1-TROUT-008", "Rainbow Trout", 1, MID, 3, 3),
    _fish("FISH-D1-COD-005", "Ancient Cod", 1, LARGE, 3, 3),
    _fish("FISH-D1-SNAPPER-011", "Red Snapper", 1, LARGE, 3, 3),
    _fish("FISH-D1-HALIBUT-013", "Young Halibut", 1, LARGE, 3, 4),
]

DEPTH_2_FISH = [
    _fish("FISH-D2-JELLYFISH-009", "Stinging Medusa", 2, SMALL, 5, 2, ["madness_+1"], FOUL),
    _fish("FISH-D2-CUTTLEFISH-011", "Hypnotic Cuttlefish", 2, SMALL, 6, 3, ["regret_draw"], FOUL),
    _fish("FISH-D2-MANTA-004", "Shadow Manta", 2, MID, 6, 3, ["glide", "dink_on_catch"]),
    _fish("FISH-D2-MORAY-007", "Phantom Moray", 2, MID, 6, 3, ["dink_on_catch"]),
    _fish("FISH-D2-BARRACUDA-005", "Cursed Barracuda", 2, MID, 7, 3, ["curse", "madness_+1"], FOUL),
    _fish("FISH-D2-TUNA-001", "Bluefin Tuna", 2, MID, 7, 4, ["strong"]),
    _fish("FISH-D2-GROUPER-008", "Goliath Grouper", 2, MID, 7, 4, ["strong"]),
    _fish("FISH-D2-WAHOO-012", "Swift Wahoo", 2, MID, 7, 4, ["quick"]),
    _fish("FISH-D2-SHARK-002", "Reef Shark", 2, LARGE, 8, 4, ["shark", "discard_small"], FOUL),
    _fish("FISH-D2-LOBSTER-013", "Giant Lobster", 2, LARGE, 8, 4),
    _fish("FISH-D2-SWORDFISH-006", "Bronze Swordfish", 2, LARGE, 9, 4, ["strong"]),
    _fish("FISH-D2-OCTOPUS-003", "Giant Octopus", 2, LARGE, 10, 5, ["tentacles", "regret_draw"], FOUL),
    _fish("FISH-D2-MARLIN-010", "Striped Marlin", 2, LARGE, 10, 5, ["strong"]),
]

DEPTH_3_FISH = [
    _fish("FISH-D3-BLOBFISH-012", "Eldritch Blobfish", 3, SMALL, 10, 3, ["madness_+1"], FOUL),
    _fish("FISH-D3-ISOPOD-011", "Giant Isopod", 3, SMALL, 12, 4),
    _fish("FISH-D3-ANGLER-005", "Abyssal Anglerfish", 3, MID, 14, 4, ["lure", "horror", "regret_draw"], FOUL),
    _fish("FISH-D3-COELACANTH-009", "Living Fossil", 3, MID, 15, 4, ["ancient"]),
    _fish("FISH-D3-ORCA-004", "Void Orca", 3, MID, 16, 5, ["beast", "discard_small", "intelligence"], FOUL),
    _fish("FISH-D3-OARFISH-010", "Doom Oarfish", 3, MID, 16, 5, ["regret_draw"], FOUL),
    _fish(PLUG_ID, "The Plug", 3, LARGE, 0, 4, ["special", "end_turn", "start_erosion"], FOUL),
    _fish("FISH-D3-KRAKEN-001", "Lesser Kraken", 3, LARGE, 18, 5, ["legendary", "tentacles", "regret_draw_2"], FOUL),
    _fish("FISH-D3-SQUID-006", "Colossal Squid", 3, LARGE, 18, 5, ["tentacles", "regret_draw"], FOUL),
    _fish("FISH-D3-SERPENT-008", "Sea Serpent", 3, LARGE, 20, 5, ["legendary", "madness_+1"], FOUL),
    _fish("FISH-D3-WHALE-007", "Ghost Whale", 3, LARGE, 22, 6, ["legendary", "ancient"]),
    _fish("FISH-D3-LEVIATHAN-002", "Deep Leviathan", 3, LARGE, 25, 6, ["legendary", "ancient", "madness_+2"], FOUL),
    _fish("FISH-D3-DRAGON-013", "Abyssal Dragon", 3, LARGE, 28, 6, ["legendary", "madness_+2", "regret_draw"], FOUL),
]

ALL_FISH = DEPTH_1_FISH + DEPTH_2_FISH + DEPTH_3_FISH
