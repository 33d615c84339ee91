from __future__ import annotations

"""Trade log writes.

The rules engine is pure; this module is the caller that owns the log:
  - submit: read log -> validate -> assign id/created_at -> append,
    as one SQLite write transaction.
  - delete: remove one whole trade by id.
"""

import datetime as _dt
import logging
from typing import Any, Mapping, Optional
from uuid import uuid4

from league_repo import LeagueRepo
from trade_time import to_utc_iso, utc_now

from .errors import BAD_PAYLOAD, INVALID_TEAM, TRADE_NOT_FOUND, TradeError
from .locks import trade_write_lock
from .models import LeagueState, Trade, TradeRequest, parse_trade_request
from .validator import ValidationResult, ensure_trade_valid, validate_trade

logger = logging.getLogger(__name__)


def _coerce_request(candidate: TradeRequest | Mapping[str, Any]) -> TradeRequest:
    if isinstance(candidate, TradeRequest):
        return candidate
    return parse_trade_request(candidate)


def check_trade_teams(seed: LeagueState, request: TradeRequest) -> None:
    """Boundary check: both teams exist and differ."""
    team_ids = {t.id for t in seed.teams}
    unknown = [tid for tid in (request.from_team_id, request.to_team_id) if tid not in team_ids]
    if unknown:
        raise TradeError(
            INVALID_TEAM,
            f"Unknown team(s): {', '.join(unknown)}",
            {"from_team_id": request.from_team_id, "to_team_id": request.to_team_id, "unknown": unknown},
        )
    if request.from_team_id == request.to_team_id:
        raise TradeError(
            INVALID_TEAM,
            "A team cannot trade picks to itself",
            {"team_id": request.from_team_id},
        )


def preview_trade(
    repo: LeagueRepo,
    seed: LeagueState,
    candidate: TradeRequest | Mapping[str, Any],
    *,
    trade_rules: Optional[Mapping[str, Any]] = None,
) -> ValidationResult:
    """Dry-run validation against the current log. Nothing is written."""
    try:
        request = _coerce_request(candidate)
        check_trade_teams(seed, request)
    except TradeError as exc:
        return ValidationResult(ok=False, reason=exc.message, code=exc.code, details=exc.details)
    state = seed.with_trades(repo.list_trades())
    return validate_trade(state, request, trade_rules=trade_rules)


def submit_trade(
    repo: LeagueRepo,
    seed: LeagueState,
    candidate: TradeRequest | Mapping[str, Any],
    *,
    now: Optional[_dt.datetime] = None,
    trade_id: Optional[str] = None,
    trade_rules: Optional[Mapping[str, Any]] = None,
) -> Trade:
    """Validate a candidate trade against the stored log and append it.

    Raises:
        TradeError: on boundary or rule failures; nothing is written.
        ValueError: if the stored log has unreadable rows; nothing is written.
    """
    request = _coerce_request(candidate)
    check_trade_teams(seed, request)

    with trade_write_lock(reason="TRADE_SUBMIT"):
        with repo.transaction(immediate=True):
            state = seed.with_trades(repo.list_trades(strict=True))
            ensure_trade_valid(state, request, trade_rules=trade_rules)
            trade = Trade(
                id=str(trade_id or uuid4()),
                created_at=to_utc_iso(now or utc_now()),
                from_team_id=request.from_team_id,
                to_team_id=request.to_team_id,
                picks=tuple(request.picks),
                notes=request.notes,
            )
            repo.insert_trade(trade)

    logger.info(
        "trade recorded id=%s from=%s to=%s picks=%d",
        trade.id,
        trade.from_team_id,
        trade.to_team_id,
        len(trade.picks),
    )
    return trade


def delete_trade(repo: LeagueRepo, trade_id: str) -> str:
    """Delete one trade from the log by id.

    Raises:
        TradeError(TRADE_NOT_FOUND): if no trade has that id.
    """
    tid = str(trade_id or "").strip()
    if not tid:
        raise TradeError(BAD_PAYLOAD, "tradeId is required", {"trade_id": trade_id})
    with trade_write_lock(reason="TRADE_DELETE"):
        deleted = repo.delete_trade(tid)
    if not deleted:
        raise TradeError(TRADE_NOT_FOUND, "Trade not found", {"trade_id": tid})
    logger.info("trade deleted id=%s", tid)
    return tid
