"""
Tests for content validation.
"""

from dataclasses import replace

import pytest

from ..spec_schema import (
    validate_content,
    ContentValidationError,
    FishDefinition,
    FishSize,
    RulesConfig,
    CharacterDefinition,
)
from ..games.deep_regrets import create_deep_regrets_content


class TestBundledContent:
    """The shipped tables pass validation."""

    def test_base_content_is_valid(self, content):
        result = validate_content(content)
        assert result.valid, result.errors
        assert result.errors == []

    def test_table_sizes(self, content):
        assert len(content.fish) == 39
        assert all(len(content.fish_at_depth(d)) == 13 for d in (1, 2, 3))
        assert len(content.regrets) == 20
        assert len(content.characters) == 5

    def test_lookups(self, content):
        assert content.get_fish("FISH-D1-COD-005").difficulty == 3
        assert content.get_upgrade("SUPPLY-002").cost == 4
        assert content.get_tackle_die("TACKLE-GREEN").mean == pytest.approx(1.0)
        assert content.get_fish("FISH-NOPE") is None

    def test_custom_rules(self):
        content = create_deep_regrets_content(RulesConfig(days_in_game=3))
        assert content.rules.days_in_game == 3
        assert validate_content(content).valid


class TestBrokenContent:
    """Errors are reported, and raised on request."""

    def test_duplicate_fish_id(self, content):
        cod = content.get_fish("FISH-D1-COD-005")
        broken = replace(content, fish=content.fish + [cod])

        result = validate_content(broken)

        assert not result.valid
        assert any("duplicate id 'FISH-D1-COD-005'" in e for e in result.errors)

    def test_fish_outside_the_sea(self, content):
        deep = FishDefinition(id="FISH-D9", name="Too Deep", depth=9, size=FishSize.MID, value=1, difficulty=1)
        result = validate_content(replace(content, fish=content.fish + [deep]))
        assert any("FISH-D9" in e for e in result.errors)

    def test_madness_tables_must_match_tiers(self, content):
        rules = RulesConfig(madness_dice_bonus=(1, 1, 2))
        result = validate_content(replace(content, rules=rules))
        assert any("madness_dice_bonus" in e for e in result.errors)

    def test_character_with_unknown_upgrade(self, content):
        ghost = CharacterDefinition(id="ghost", name="Ghost", starting_upgrades=("ROD-999",))
        result = validate_content(replace(content, characters=content.characters + [ghost]))
        assert any("ROD-999" in e for e in result.errors)

    def test_character_with_two_rods(self, content):
        greedy = CharacterDefinition(id="greedy", name="Greedy", starting_upgrades=("ROD-001", "ROD-002"))
        result = validate_content(replace(content, characters=content.characters + [greedy]))
        assert any("more than one rod" in e for e in result.errors)

    def test_thin_depth_is_a_warning(self, content):
        thin = [f for f in content.fish if f.depth != 3] + content.fish_at_depth(3)[:2]
        result = validate_content(replace(content, fish=thin))
        assert result.valid
        assert any("Depth 3" in w for w in result.warnings)

    def test_raise_on_error(self, content):
        broken = replace(content, content_id="")
        with pytest.raises(ContentValidationError) as excinfo:
            validate_content(broken, raise_on_error=True)
        assert "content_id is required" in excinfo.value.errors
