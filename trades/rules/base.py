from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Protocol

from config import DEFAULT_TRADE_RULES
from schema import PickKey

from ..models import LeagueState, TradeRequest


@dataclass
class TradeContext:
    state: LeagueState
    trade_rules: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_TRADE_RULES))
    _ownership: Optional[Dict[PickKey, str]] = field(default=None, repr=False)
    _base_keys: Optional[FrozenSet[PickKey]] = field(default=None, repr=False)

    # -----------------------------
    # Lazily derived views of the existing state (candidate trade NOT applied)
    # -----------------------------
    @property
    def ownership(self) -> Mapping[PickKey, str]:
        if self._ownership is None:
            # Local import: trades.ownership imports the Stepien policy from this package.
            from ..ownership import rebuild_ownership

            self._ownership = rebuild_ownership(self.state)
        return self._ownership

    @property
    def base_keys(self) -> FrozenSet[PickKey]:
        if self._base_keys is None:
            self._base_keys = frozenset(p.key for p in self.state.base_picks)
        return self._base_keys

    def rule_setting(self, name: str, default: Any = None) -> Any:
        return self.trade_rules.get(name, DEFAULT_TRADE_RULES.get(name, default))


class Rule(Protocol):
    rule_id: str
    priority: int
    enabled: bool

    def validate(self, trade: TradeRequest, ctx: TradeContext) -> None:
        ...


def build_trade_context(
    state: LeagueState,
    trade_rules: Optional[Mapping[str, Any]] = None,
    ownership: Optional[Mapping[PickKey, str]] = None,
) -> TradeContext:
    """Build a per-validation context.

    `ownership` may be passed when the caller already replayed the same state.
    """
    resolved_rules = dict(DEFAULT_TRADE_RULES)
    if trade_rules:
        resolved_rules.update(trade_rules)
    return TradeContext(
        state=state,
        trade_rules=resolved_rules,
        _ownership=dict(ownership) if ownership is not None else None,
    )
