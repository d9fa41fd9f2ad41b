"""
Content Validation - Consistency checks for game content.

Validates that:
1. Ids are present and unique per table
2. References resolve (character starting upgrades, etc.)
3. Numeric ranges make sense (depths, faces, costs)
4. RulesConfig tables have one entry per madness tier
"""

from __future__ import annotations
from dataclasses import dataclass
from collections import Counter

from .game_spec import GameContent, RulesConfig, UpgradeKind


class ContentValidationError(Exception):
    """Raised when content validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Content validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_content(content: GameContent, raise_on_error: bool = False) -> ValidationResult:
    """
    Validate a complete content bundle.

    Returns ValidationResult with errors and warnings.
    Raises ContentValidationError if raise_on_error=True and errors exist.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not content.content_id:
        errors.append("content_id is required")
    if not content.name:
        errors.append("name is required")

    tables = {
        "fish": [f.id for f in content.fish],
        "dinks": [d.id for d in content.dinks],
        "upgrades": [u.id for u in content.upgrades],
        "tackle_dice": [t.id for t in content.tackle_dice],
        "regrets": [r.id for r in content.regrets],
        "characters": [c.id for c in content.characters],
    }
    for table, ids in tables.items():
        errors.extend(_check_ids(table, ids))

    errors.extend(_validate_rules(content.rules))

    for fish in content.fish:
        if not 1 <= fish.depth <= content.rules.max_depth:
            errors.append(f"Fish '{fish.id}' has depth {fish.depth} outside 1-{content.rules.max_depth}")
        if fish.difficulty < 0:
            errors.append(f"Fish '{fish.id}' has negative difficulty")
        if fish.value < 0:
            errors.append(f"Fish '{fish.id}' has negative value")

    for depth in range(1, content.rules.max_depth + 1):
        count = len(content.fish_at_depth(depth))
        if count == 0:
            errors.append(f"Depth {depth} has no fish")
        elif count < content.rules.shoals_per_depth:
            warnings.append(
                f"Depth {depth} has {count} fish for {content.rules.shoals_per_depth} shoals"
            )

    for dink in content.dinks:
        if not dink.effects:
            warnings.append(f"Dink '{dink.id}' has no effects")

    for upgrade in content.upgrades:
        if upgrade.cost < 0:
            errors.append(f"Upgrade '{upgrade.id}' has negative cost")
        if not upgrade.effects:
            warnings.append(f"Upgrade '{upgrade.id}' has no effects")

    for tackle in content.tackle_dice:
        if not tackle.faces:
            errors.append(f"Tackle die '{tackle.id}' has no faces")
        if tackle.stock < 0:
            errors.append(f"Tackle die '{tackle.id}' has negative stock")

    for regret in content.regrets:
        if regret.value < 0:
            errors.append(f"Regret '{regret.id}' has negative value")

    for character in content.characters:
        errors.extend(_validate_character(character, content))

    if not content.regrets:
        warnings.append("No regrets defined - regret draws will always steal")
    if not content.dinks:
        warnings.append("No dinks defined - failed catches carry no consolation")

    result = ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
    if raise_on_error and not result.valid:
        raise ContentValidationError(errors)
    return result


def _check_ids(table: str, ids: list[str]) -> list[str]:
    errors = []
    if any(not i for i in ids):
        errors.append(f"{table}: entry with empty id")
    for item_id, count in Counter(ids).items():
        if count > 1:
            errors.append(f"{table}: duplicate id '{item_id}'")
    return errors


def _validate_rules(rules: RulesConfig) -> list[str]:
    errors = []
    tiers = rules.max_madness + 1
    for name in ("fair_value_modifiers", "foul_value_modifiers", "madness_dice_bonus"):
        if len(getattr(rules, name)) != tiers:
            errors.append(f"rules.{name} must have {tiers} entries")
    if list(rules.madness_thresholds) != sorted(rules.madness_thresholds):
        errors.append("rules.madness_thresholds must be ascending")
    if rules.min_seats < 1 or rules.max_seats < rules.min_seats:
        errors.append("rules seat range is invalid")
    if rules.days_in_game < 1:
        errors.append("rules.days_in_game must be >= 1")
    if not rules.slot_multipliers:
        errors.append("rules.slot_multipliers must not be empty")
    if rules.start_depth < 1 or rules.start_depth > rules.max_depth:
        errors.append("rules.start_depth must be within 1..max_depth")
    return errors


def _validate_character(character, content: GameContent) -> list[str]:
    errors = []
    kinds: list[UpgradeKind] = []
    for upgrade_id in character.starting_upgrades:
        upgrade = content.get_upgrade(upgrade_id)
        if upgrade is None:
            errors.append(
                f"Character '{character.id}' references unknown upgrade '{upgrade_id}'"
            )
            continue
        kinds.append(upgrade.kind)
    for kind in (UpgradeKind.ROD, UpgradeKind.REEL):
        if kinds.count(kind) > 1:
            errors.append(f"Character '{character.id}' starts with more than one {kind.value}")
    return errors
