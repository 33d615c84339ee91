from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from schema import PickKey

from .errors import TradeError
from .models import LeagueState, Trade, TradeRequest
from .rules import RuleRegistry, build_trade_context, validate_all


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: Optional[str] = None
    code: Optional[str] = None
    details: Optional[Any] = None

    def to_payload(self) -> dict:
        if self.ok:
            return {"ok": True}
        return {"ok": False, "error": self.reason, "code": self.code}


def _as_request(candidate: TradeRequest | Trade) -> TradeRequest:
    if isinstance(candidate, TradeRequest):
        return candidate
    return TradeRequest(
        from_team_id=candidate.from_team_id,
        to_team_id=candidate.to_team_id,
        picks=tuple(candidate.picks),
        notes=candidate.notes,
    )


def ensure_trade_valid(
    state: LeagueState,
    candidate: TradeRequest | Trade,
    *,
    trade_rules: Optional[Mapping[str, Any]] = None,
    registry: Optional[RuleRegistry] = None,
    ownership: Optional[Mapping[PickKey, str]] = None,
) -> None:
    """Raise TradeError for the first rule the candidate trade breaks.

    Rules see the existing state only; the candidate is never applied here.
    """
    ctx = build_trade_context(state, trade_rules=trade_rules, ownership=ownership)
    validate_all(_as_request(candidate), ctx, registry=registry)


def validate_trade(
    state: LeagueState,
    candidate: TradeRequest | Trade,
    *,
    trade_rules: Optional[Mapping[str, Any]] = None,
    registry: Optional[RuleRegistry] = None,
    ownership: Optional[Mapping[PickKey, str]] = None,
) -> ValidationResult:
    """Evaluate a candidate trade against the state. Never raises on rule violations."""
    try:
        ensure_trade_valid(
            state,
            candidate,
            trade_rules=trade_rules,
            registry=registry,
            ownership=ownership,
        )
    except TradeError as exc:
        return ValidationResult(ok=False, reason=exc.message, code=exc.code, details=exc.details)
    return ValidationResult(ok=True)
