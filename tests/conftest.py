from pathlib import Path
import json
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from trades.models import LeagueState, Pick, Team, Trade, TradePickRef  # noqa: E402


def make_state(team_ids=("A", "B", "C"), years=(2026, 2027, 2028), rounds=(1, 2), trades=()):
    """Every team owns its own pick for every (year, round)."""
    teams = tuple(Team(id=t, name=f"Team {t}") for t in team_ids)
    picks = tuple(
        Pick(year=y, round=r, original_owner_id=t, current_owner_id=t)
        for t in team_ids
        for y in years
        for r in rounds
    )
    return LeagueState(teams=teams, base_picks=picks, trades=tuple(trades))


def make_trade(trade_id, created_at, from_team, to_team, *keys, notes=None):
    return Trade(
        id=trade_id,
        created_at=created_at,
        from_team_id=from_team,
        to_team_id=to_team,
        picks=tuple(TradePickRef(year=y, round=r, original_owner_id=o) for y, r, o in keys),
        notes=notes,
    )


@pytest.fixture
def league():
    return make_state()


@pytest.fixture
def seed_payload():
    return {
        "teams": [
            {"id": "A", "name": "Team A"},
            {"id": "B", "name": "Team B"},
            {"id": "C", "name": "Team C"},
        ],
        "basePicks": [
            {"year": y, "round": r, "originalOwnerId": t, "currentOwnerId": t}
            for t in ("A", "B", "C")
            for y in (2026, 2027, 2028)
            for r in (1, 2)
        ],
    }


@pytest.fixture
def seed_file(tmp_path, seed_payload):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(seed_payload), encoding="utf-8")
    return path


@pytest.fixture
def repo(tmp_path):
    from league_repo import LeagueRepo

    r = LeagueRepo(tmp_path / "picks.sqlite3")
    r.init_db()
    try:
        yield r
    finally:
        r.close()


@pytest.fixture
def seed(seed_file):
    import state

    state.clear_seed_cache()
    loaded = state.load_seed(str(seed_file))
    yield loaded
    state.clear_seed_cache()
