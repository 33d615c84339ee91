from __future__ import annotations

from fastapi import APIRouter

import state
from league_repo import LeagueRepo

router = APIRouter()


@router.get("/")
async def root():
    """Health check."""
    return {"message": "Dynasty pick tracker server. See /api/state."}


@router.get("/api/teams")
async def api_teams():
    seed = state.load_seed()
    return {"teams": [{"id": t.id, "name": t.name} for t in seed.teams]}


@router.get("/api/health")
async def api_health():
    with LeagueRepo(state.get_db_path()) as repo:
        trade_count = repo.count_trades()
    seed = state.load_seed()
    return {
        "ok": True,
        "teams": len(seed.teams),
        "base_picks": len(seed.base_picks),
        "trades": trade_count,
    }
