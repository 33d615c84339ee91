from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from schema import PickKey, normalize_round, normalize_team_id, normalize_year
from trade_time import normalize_created_at

from .errors import BAD_PAYLOAD, TradeError


@dataclass(frozen=True)
class Team:
    id: str
    name: str


@dataclass(frozen=True)
class Pick:
    year: int
    round: int
    original_owner_id: str
    current_owner_id: str

    @property
    def key(self) -> PickKey:
        return (self.year, self.round, self.original_owner_id)


@dataclass(frozen=True)
class TradePickRef:
    year: int
    round: int
    original_owner_id: str

    @property
    def key(self) -> PickKey:
        return (self.year, self.round, self.original_owner_id)


@dataclass(frozen=True)
class TradeRequest:
    from_team_id: str
    to_team_id: str
    picks: Tuple[TradePickRef, ...]
    notes: Optional[str] = None


@dataclass(frozen=True)
class Trade:
    id: str
    created_at: str
    from_team_id: str
    to_team_id: str
    picks: Tuple[TradePickRef, ...]
    notes: Optional[str] = None


@dataclass(frozen=True)
class LeagueState:
    teams: Tuple[Team, ...] = ()
    base_picks: Tuple[Pick, ...] = ()
    # Log order. Replay re-sorts by created_at; this order only breaks ties.
    trades: Tuple[Trade, ...] = field(default_factory=tuple)

    def with_trades(self, trades: Sequence[Trade]) -> "LeagueState":
        return LeagueState(teams=self.teams, base_picks=self.base_picks, trades=tuple(trades))


# ----------------------------------------------------------------------------
# Parsing (JSON wire format uses camelCase keys)
# ----------------------------------------------------------------------------


def _require_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise TradeError(BAD_PAYLOAD, f"{what} must be an object", {"value": raw})
    return raw


def _field(raw: Mapping[str, Any], camel: str, snake: str) -> Any:
    if camel in raw:
        return raw.get(camel)
    return raw.get(snake)


def _team_id(value: Any, what: str, raw: Any) -> str:
    try:
        return str(normalize_team_id(value, strict=False))
    except ValueError as exc:
        raise TradeError(BAD_PAYLOAD, f"Invalid {what}", {"value": value, "payload": raw}) from exc


def parse_team(raw: Any) -> Team:
    raw = _require_mapping(raw, "team")
    team_id = _team_id(raw.get("id"), "team id", raw)
    name = raw.get("name")
    return Team(id=team_id, name=str(name) if name else team_id)


def parse_pick_ref(raw: Any) -> TradePickRef:
    raw = _require_mapping(raw, "pick")
    try:
        year = normalize_year(raw.get("year"))
        rnd = normalize_round(raw.get("round"))
    except ValueError as exc:
        raise TradeError(BAD_PAYLOAD, str(exc), dict(raw)) from exc
    owner = _team_id(_field(raw, "originalOwnerId", "original_owner_id"), "originalOwnerId", raw)
    return TradePickRef(year=year, round=rnd, original_owner_id=owner)


def parse_pick(raw: Any) -> Pick:
    ref = parse_pick_ref(raw)
    current = _team_id(_field(raw, "currentOwnerId", "current_owner_id"), "currentOwnerId", raw)
    return Pick(
        year=ref.year,
        round=ref.round,
        original_owner_id=ref.original_owner_id,
        current_owner_id=current,
    )


def _parse_picks(raw_picks: Any, raw: Any) -> Tuple[TradePickRef, ...]:
    if raw_picks is None:
        return ()
    if not isinstance(raw_picks, list):
        raise TradeError(BAD_PAYLOAD, "picks must be a list", raw)
    return tuple(parse_pick_ref(p) for p in raw_picks)


def _parse_notes(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_trade_request(payload: Any) -> TradeRequest:
    """Parse a candidate trade ({fromTeamId, toTeamId, picks, notes?}).

    An empty picks list is allowed here; the rules engine reports it.
    """
    raw = _require_mapping(payload, "trade")
    return TradeRequest(
        from_team_id=_team_id(_field(raw, "fromTeamId", "from_team_id"), "fromTeamId", raw),
        to_team_id=_team_id(_field(raw, "toTeamId", "to_team_id"), "toTeamId", raw),
        picks=_parse_picks(raw.get("picks"), raw),
        notes=_parse_notes(raw.get("notes")),
    )


def parse_trade(payload: Any) -> Trade:
    raw = _require_mapping(payload, "trade")
    trade_id = raw.get("id")
    if not trade_id:
        raise TradeError(BAD_PAYLOAD, "Missing trade id", raw)
    try:
        created_at = normalize_created_at(_field(raw, "createdAt", "created_at"))
    except ValueError as exc:
        raise TradeError(BAD_PAYLOAD, str(exc), raw) from exc
    request = parse_trade_request(raw)
    return Trade(
        id=str(trade_id),
        created_at=created_at,
        from_team_id=request.from_team_id,
        to_team_id=request.to_team_id,
        picks=request.picks,
        notes=request.notes,
    )


def parse_state(payload: Any) -> LeagueState:
    raw = _require_mapping(payload, "state")
    teams_raw = raw.get("teams") or []
    picks_raw = _field(raw, "basePicks", "base_picks") or []
    trades_raw = raw.get("trades") or []
    if not isinstance(teams_raw, list) or not isinstance(picks_raw, list) or not isinstance(trades_raw, list):
        raise TradeError(BAD_PAYLOAD, "teams, basePicks and trades must be lists", None)
    return LeagueState(
        teams=tuple(parse_team(t) for t in teams_raw),
        base_picks=tuple(parse_pick(p) for p in picks_raw),
        trades=tuple(parse_trade(t) for t in trades_raw),
    )


# ----------------------------------------------------------------------------
# Serialization
# ----------------------------------------------------------------------------


def serialize_pick_ref(ref: TradePickRef) -> Dict[str, Any]:
    return {"year": ref.year, "round": ref.round, "originalOwnerId": ref.original_owner_id}


def serialize_pick(pick: Pick) -> Dict[str, Any]:
    return {
        "year": pick.year,
        "round": pick.round,
        "originalOwnerId": pick.original_owner_id,
        "currentOwnerId": pick.current_owner_id,
    }


def serialize_trade(trade: Trade) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": trade.id,
        "createdAt": trade.created_at,
        "fromTeamId": trade.from_team_id,
        "toTeamId": trade.to_team_id,
        "picks": [serialize_pick_ref(p) for p in trade.picks],
    }
    if trade.notes:
        payload["notes"] = trade.notes
    return payload


def serialize_state(state: LeagueState) -> Dict[str, Any]:
    return {
        "teams": [{"id": t.id, "name": t.name} for t in state.teams],
        "basePicks": [serialize_pick(p) for p in state.base_picks],
        "trades": [serialize_trade(t) for t in state.trades],
    }


def pick_refs(picks: Sequence[Any]) -> Tuple[TradePickRef, ...]:
    """Coerce a mix of TradePickRef / (year, round, owner) tuples / dicts into refs."""
    out: List[TradePickRef] = []
    for p in picks:
        if isinstance(p, TradePickRef):
            out.append(p)
        elif isinstance(p, tuple):
            year, rnd, owner = p
            out.append(TradePickRef(year=int(year), round=int(rnd), original_owner_id=str(owner)))
        else:
            out.append(parse_pick_ref(p))
    return tuple(out)
