import pytest
from fastapi.testclient import TestClient

import config
import state
from app.main import app


@pytest.fixture
def client(tmp_path, seed_file, monkeypatch):
    monkeypatch.setattr(state, "_DB_PATH", None)
    monkeypatch.setattr(state, "_SEED_PATH", None)
    monkeypatch.setattr(config, "ADMIN_TOKEN", "")
    state.set_db_path(str(tmp_path / "api.sqlite3"))
    state.set_seed_path(str(seed_file))
    state.clear_seed_cache()
    with TestClient(app) as c:
        yield c
    state.clear_seed_cache()


def _body(from_team, to_team, *keys, notes=None):
    body = {
        "fromTeamId": from_team,
        "toTeamId": to_team,
        "picks": [{"year": y, "round": r, "originalOwnerId": o} for y, r, o in keys],
    }
    if notes is not None:
        body["notes"] = notes
    return body


def test_health_and_teams(client) -> None:
    assert client.get("/").status_code == 200
    health = client.get("/api/health").json()
    assert health == {"ok": True, "teams": 3, "base_picks": 18, "trades": 0}
    teams = client.get("/api/teams").json()["teams"]
    assert [t["id"] for t in teams] == ["A", "B", "C"]


def test_state_lists_seed_and_trades(client) -> None:
    res = client.get("/api/state")
    assert res.status_code == 200
    assert res.headers["cache-control"].startswith("no-cache")
    payload = res.json()
    assert len(payload["basePicks"]) == 18
    assert payload["trades"] == []


def test_validate_endpoint(client) -> None:
    ok = client.post("/api/trade/validate", json=_body("A", "B", (2026, 1, "A")))
    assert ok.json() == {"ok": True}

    dup = client.post("/api/trade/validate", json=_body("A", "B", (2026, 1, "A"), (2026, 1, "A")))
    assert dup.status_code == 200
    assert dup.json()["ok"] is False
    assert dup.json()["code"] == "DUPLICATE_PICK"
    assert "Round 1" in dup.json()["error"]

    empty = client.post("/api/trade/validate", json=_body("A", "B"))
    assert empty.json()["code"] == "EMPTY_TRADE"


def test_submit_then_locked_follow_up(client) -> None:
    res = client.post("/api/trade/submit", json=_body("A", "B", (2026, 1, "A"), notes="draft night"))
    assert res.status_code == 200
    trade = res.json()["trade"]
    assert trade["fromTeamId"] == "A"
    assert trade["notes"] == "draft night"
    assert trade["createdAt"].endswith("Z")

    locked = client.post("/api/trade/submit", json=_body("A", "C", (2027, 1, "A")))
    assert locked.status_code == 400
    error = locked.json()["error"]
    assert error["code"] == "LOCKED_PICK"
    assert "2027" in error["message"]

    ownership = client.get("/api/ownership").json()
    row_a = next(row for row in ownership["rows"] if row["teamId"] == "A")
    cells = {(c["year"], c["round"]): c["picks"][0] for c in row_a["cells"]}
    assert cells[(2026, 1)]["currentOwnerId"] == "B"
    assert cells[(2027, 1)]["stepienLocked"] is True

    assert len(client.get("/api/state").json()["trades"]) == 1


def test_submit_rejects_unknown_team(client) -> None:
    res = client.post("/api/trade/submit", json=_body("A", "Z", (2026, 2, "A")))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_TEAM"


def test_submit_rejects_malformed_body(client) -> None:
    res = client.post("/api/trade/submit", json={"fromTeamId": "A"})
    assert res.status_code == 422


def test_delete_trade_endpoints(client) -> None:
    trade_id = client.post("/api/trade/submit", json=_body("A", "B", (2026, 2, "A"))).json()["trade"]["id"]

    res = client.post("/api/trade/delete", json={"tradeId": trade_id})
    assert res.json() == {"ok": True, "deletedTradeId": trade_id}

    again = client.post("/api/trade/delete", json={"tradeId": trade_id})
    assert again.status_code == 404
    assert again.json()["error"]["code"] == "TRADE_NOT_FOUND"

    other = client.post("/api/trade/submit", json=_body("B", "C", (2026, 2, "B"))).json()["trade"]["id"]
    assert client.delete(f"/api/trade/{other}").json()["deletedTradeId"] == other
    assert client.get("/api/state").json()["trades"] == []


def test_admin_token_guards_writes(client, monkeypatch) -> None:
    monkeypatch.setattr(config, "ADMIN_TOKEN", "s3cret")
    body = _body("A", "B", (2026, 2, "A"))

    assert client.post("/api/trade/submit", json=body).status_code == 401
    # Dry runs stay open.
    assert client.post("/api/trade/validate", json=body).json() == {"ok": True}

    res = client.post("/api/trade/submit", json=body, headers={"X-Admin-Token": "s3cret"})
    assert res.status_code == 200
