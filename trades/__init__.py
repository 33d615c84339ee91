"""Draft-pick trade package: ownership replay and trade legality."""

from .models import (
    LeagueState,
    Pick,
    Team,
    Trade,
    TradePickRef,
    TradeRequest,
    parse_state,
    parse_trade,
    parse_trade_request,
    serialize_state,
    serialize_trade,
)
from .errors import TradeError
from .ownership import build_ownership_matrix, rebuild_ownership
from .validator import ValidationResult, ensure_trade_valid, validate_trade

# Abstract operation names used by callers.
derive_ownership = rebuild_ownership

__all__ = [
    "LeagueState",
    "Pick",
    "Team",
    "Trade",
    "TradePickRef",
    "TradeRequest",
    "parse_state",
    "parse_trade",
    "parse_trade_request",
    "serialize_state",
    "serialize_trade",
    "TradeError",
    "build_ownership_matrix",
    "rebuild_ownership",
    "derive_ownership",
    "ValidationResult",
    "ensure_trade_valid",
    "validate_trade",
]
