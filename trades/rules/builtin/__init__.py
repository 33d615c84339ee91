from __future__ import annotations

from .deal_shape_rule import DealShapeRule
from .duplicate_pick_rule import DuplicatePickRule
from .stepien_rule import StepienRule


def build_builtin_rules() -> list:
    # Fresh instances so RuleRegistry.set_enabled never leaks across registries.
    return [
        DealShapeRule(),
        DuplicatePickRule(),
        StepienRule(),
    ]
