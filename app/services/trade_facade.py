from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.schemas.trades import TradeSubmitRequest
from trades.errors import TRADE_NOT_FOUND, TradeError

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    TRADE_NOT_FOUND: 404,
}


def _trade_error_response(error: TradeError) -> JSONResponse:
    status = _STATUS_BY_CODE.get(error.code, 400)
    logger.info("trade request rejected code=%s message=%s", error.code, error.message)
    payload = {
        "ok": False,
        "error": {
            "code": error.code,
            "message": error.message,
            "details": jsonable_encoder(error.details),
        },
    }
    return JSONResponse(status_code=status, content=payload)


def _trade_request_payload(req: TradeSubmitRequest) -> Dict[str, Any]:
    return {
        "fromTeamId": req.fromTeamId,
        "toTeamId": req.toTeamId,
        "picks": [p.model_dump() for p in req.picks],
        "notes": req.notes,
    }
