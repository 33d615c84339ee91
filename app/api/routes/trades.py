from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

import state
from league_repo import LeagueRepo
from trades.apply import delete_trade, preview_trade, submit_trade
from trades.errors import TradeError
from trades.models import serialize_state, serialize_trade
from trades.ownership import build_ownership_matrix
from app.schemas.trades import TradeDeleteRequest, TradeSubmitRequest
from app.services.trade_facade import _trade_error_response, _trade_request_payload

logger = logging.getLogger(__name__)

router = APIRouter()

_NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/api/state")
async def api_state():
    snapshot = state.export_state()
    return JSONResponse(content=serialize_state(snapshot), headers=_NO_CACHE_HEADERS)


@router.get("/api/ownership")
async def api_ownership():
    snapshot = state.export_state()
    return JSONResponse(content=build_ownership_matrix(snapshot), headers=_NO_CACHE_HEADERS)


@router.post("/api/trade/validate")
async def api_trade_validate(req: TradeSubmitRequest):
    seed = state.load_seed()
    with LeagueRepo(state.get_db_path()) as repo:
        result = preview_trade(repo, seed, _trade_request_payload(req))
    return result.to_payload()


@router.post("/api/trade/submit")
async def api_trade_submit(req: TradeSubmitRequest):
    try:
        seed = state.load_seed()
        with LeagueRepo(state.get_db_path()) as repo:
            trade = submit_trade(repo, seed, _trade_request_payload(req))
        return JSONResponse(
            content={"ok": True, "trade": serialize_trade(trade)},
            headers=_NO_CACHE_HEADERS,
        )
    except TradeError as exc:
        return _trade_error_response(exc)


@router.post("/api/trade/delete")
async def api_trade_delete(req: TradeDeleteRequest):
    try:
        with LeagueRepo(state.get_db_path()) as repo:
            deleted_id = delete_trade(repo, req.tradeId)
        return JSONResponse(
            content={"ok": True, "deletedTradeId": deleted_id},
            headers=_NO_CACHE_HEADERS,
        )
    except TradeError as exc:
        return _trade_error_response(exc)


@router.delete("/api/trade/{trade_id}")
async def api_trade_delete_by_path(trade_id: str):
    return await api_trade_delete(TradeDeleteRequest(tradeId=trade_id))
