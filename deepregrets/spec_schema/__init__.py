"""Game content schema - static lookup tables injected into the engine."""

from .game_spec import (
    GameContent,
    RulesConfig,
    FishDefinition,
    FishSize,
    FishQuality,
    DinkDefinition,
    DinkTiming,
    UpgradeDefinition,
    UpgradeKind,
    TackleDieDefinition,
    RegretDefinition,
    CharacterDefinition,
)
from .validation import validate_content, ContentValidationError, ValidationResult

__all__ = [
    "GameContent",
    "RulesConfig",
    "FishDefinition",
    "FishSize",
    "FishQuality",
    "DinkDefinition",
    "DinkTiming",
    "UpgradeDefinition",
    "UpgradeKind",
    "TackleDieDefinition",
    "RegretDefinition",
    "CharacterDefinition",
    "validate_content",
    "ContentValidationError",
    "ValidationResult",
]
