from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
import state
from app.api.router import api_router

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Dynasty pick tracker")


@app.on_event("startup")
def _startup_init_state() -> None:
    # 1) seed load + validation (teams, baseline picks)
    # 2) DB init (trade log schema)
    # 3) trade log integrity validate once
    try:
        state.startup_init_state()
    except Exception as e:
        raise RuntimeError(f"startup_init_state() failed: {e}") from e


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def _auth_guard_middleware(request: Request, call_next):
    """Optional auth guard.

    If PICKS_ADMIN_TOKEN is configured, require it on state-changing API calls.
    """
    required_token = config.ADMIN_TOKEN
    if not required_token:
        return await call_next(request)

    path = request.url.path or ""
    method = (request.method or "GET").upper()
    if method not in {"POST", "DELETE"} or not path.startswith("/api/"):
        return await call_next(request)

    # Dry-run validation never writes.
    if path in {"/api/trade/validate"}:
        return await call_next(request)

    provided = (request.headers.get("X-Admin-Token") or "").strip()
    if provided != required_token:
        logger.warning("rejected unauthenticated %s %s", method, path)
        return JSONResponse(status_code=401, content={"detail": "Unauthorized: invalid X-Admin-Token"})

    return await call_next(request)


app.include_router(api_router)
