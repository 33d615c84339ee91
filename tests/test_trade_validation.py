import pytest

from conftest import make_state, make_trade
from trades.errors import (
    CONSECUTIVE_FIRST_ROUNDERS,
    DUPLICATE_PICK,
    EMPTY_TRADE,
    LOCKED_PICK,
    STEPIEN_VIOLATION,
    TradeError,
)
from trades.models import TradeRequest, pick_refs
from trades.rules import RuleRegistry, get_default_registry
from trades.validator import ensure_trade_valid, validate_trade


def _request(from_team, to_team, *keys):
    return TradeRequest(from_team_id=from_team, to_team_id=to_team, picks=pick_refs(keys))


def test_empty_trade_rejected(league) -> None:
    result = validate_trade(league, _request("A", "B"))
    assert result.ok is False
    assert result.code == EMPTY_TRADE
    assert result.to_payload() == {"ok": False, "error": result.reason, "code": EMPTY_TRADE}


def test_valid_trade_returns_ok_payload(league) -> None:
    result = validate_trade(league, _request("A", "B", (2026, 2, "A")))
    assert result.ok is True
    assert result.to_payload() == {"ok": True}


def test_duplicate_pick_rejected(league) -> None:
    result = validate_trade(league, _request("A", "B", (2026, 1, "A"), (2026, 1, "A")))
    assert result.ok is False
    assert result.code == DUPLICATE_PICK
    assert "2026" in result.reason
    assert "Round 1" in result.reason


def test_duplicate_reports_every_repeated_key(league) -> None:
    result = validate_trade(
        league,
        _request("A", "B", (2026, 2, "A"), (2027, 2, "A"), (2026, 2, "A"), (2027, 2, "A")),
    )
    assert result.code == DUPLICATE_PICK
    assert "2026 Round 2" in result.reason
    assert "2027 Round 2" in result.reason
    assert len(result.details["duplicates"]) == 2


def test_same_slot_different_original_owner_is_not_duplicate(league) -> None:
    # A holds B's 2026 first after this trade; both 2026 firsts can then move together.
    state = league.with_trades([make_trade("t1", "2026-01-01T00:00:00Z", "B", "A", (2026, 1, "B"))])
    result = validate_trade(state, _request("A", "C", (2026, 1, "A"), (2026, 1, "B")))
    assert result.ok is True


def test_stepien_lock_after_losing_previous_year(league) -> None:
    state = league.with_trades([make_trade("t1", "2026-01-01T00:00:00Z", "A", "B", (2026, 1, "A"))])
    result = validate_trade(state, _request("A", "C", (2027, 1, "A")))
    assert result.ok is False
    assert result.code == LOCKED_PICK
    assert "2027" in result.reason
    assert result.details["locked_picks"][0]["previous_year_owner"] == "B"


def test_lock_lifts_once_previous_year_is_reacquired(league) -> None:
    state = league.with_trades(
        [
            make_trade("t1", "2026-01-01T00:00:00Z", "A", "B", (2026, 1, "A")),
            make_trade("t2", "2026-01-05T00:00:00Z", "B", "A", (2026, 1, "A")),
        ]
    )
    assert validate_trade(state, _request("A", "C", (2027, 1, "A"))).ok is True


def test_consecutive_first_rounders_rejected(league) -> None:
    result = validate_trade(league, _request("A", "B", (2026, 1, "A"), (2027, 1, "A")))
    assert result.ok is False
    assert result.code == CONSECUTIVE_FIRST_ROUNDERS
    assert "2026" in result.reason
    assert "2027" in result.reason


def test_non_adjacent_first_rounders_allowed(league) -> None:
    result = validate_trade(league, _request("A", "B", (2026, 1, "A"), (2028, 1, "A")))
    assert result.ok is True


def test_consecutive_second_rounders_allowed(league) -> None:
    result = validate_trade(league, _request("A", "B", (2026, 2, "A"), (2027, 2, "A")))
    assert result.ok is True


def test_first_year_on_record_is_never_locked() -> None:
    # No 2025 first-rounder exists in the baseline, whatever the history.
    state = make_state(
        trades=[make_trade("t1", "2026-01-01T00:00:00Z", "A", "B", (2027, 1, "A"))],
    )
    assert validate_trade(state, _request("A", "C", (2026, 1, "A"))).ok is True


def test_both_sub_rules_reported_together(league) -> None:
    state = league.with_trades([make_trade("t1", "2026-01-01T00:00:00Z", "A", "B", (2026, 1, "A"))])
    result = validate_trade(state, _request("A", "C", (2027, 1, "A"), (2028, 1, "A")))
    assert result.ok is False
    assert result.code == STEPIEN_VIOLATION
    assert "locked" in result.reason
    assert "consecutive years 2027 and 2028" in result.reason
    assert result.details["consecutive_years"] == [[2027, 2028]]


def test_acquired_first_rounders_skip_stepien(league) -> None:
    state = league.with_trades(
        [
            make_trade("t1", "2026-01-01T00:00:00Z", "B", "A", (2026, 1, "B"), (2027, 1, "B")),
        ]
    )
    # B's picks: A is not their original owner, so neither sub-rule applies.
    assert validate_trade(state, _request("A", "C", (2026, 1, "B"), (2027, 1, "B"))).ok is True


def test_validator_sees_state_without_candidate(league) -> None:
    # Trading 2026 R1 is fine on its own; the lock only applies to later trades.
    assert validate_trade(league, _request("A", "B", (2026, 1, "A"))).ok is True


def test_candidate_may_be_a_recorded_trade(league) -> None:
    trade = make_trade("t9", "2026-01-01T00:00:00Z", "A", "B", (2026, 1, "A"), (2027, 1, "A"))
    assert validate_trade(league, trade).code == CONSECUTIVE_FIRST_ROUNDERS


def test_ensure_trade_valid_raises_trade_error(league) -> None:
    with pytest.raises(TradeError) as exc_info:
        ensure_trade_valid(league, _request("A", "B"))
    assert exc_info.value.code == EMPTY_TRADE


def test_stepien_can_be_switched_off(league) -> None:
    request = _request("A", "B", (2026, 1, "A"), (2027, 1, "A"))
    assert validate_trade(league, request, trade_rules={"stepien_enabled": False}).ok is True


def test_registry_controls_which_rules_run(league) -> None:
    registry = get_default_registry()
    assert [r.rule_id for r in registry.list_rules()] == ["deal_shape", "duplicate_pick", "stepien"]

    registry.set_enabled("stepien", False)
    request = _request("A", "B", (2026, 1, "A"), (2027, 1, "A"))
    assert validate_trade(league, request, registry=registry).ok is True
    # Fresh default registry is unaffected.
    assert validate_trade(league, request).ok is False

    registry.unregister("deal_shape")
    assert validate_trade(league, _request("A", "B"), registry=registry).ok is True
    assert validate_trade(league, _request("A", "B"), registry=RuleRegistry()).ok is True
