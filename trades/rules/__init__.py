"""Trade rules engine.

How to add a new rule:
1) Create a new rule file in trades/rules/builtin (e.g., my_rule.py).
2) Implement a Rule with rule_id, priority, enabled, and validate().
3) Register the rule in trades/rules/builtin/__init__.py build_builtin_rules().

Rules raise TradeError; trades.validator.validate_trade turns the first one
into a ValidationResult.
"""

from .base import TradeContext, build_trade_context
from .registry import RuleRegistry, get_default_registry, validate_all

__all__ = [
    "TradeContext",
    "build_trade_context",
    "RuleRegistry",
    "get_default_registry",
    "validate_all",
]
