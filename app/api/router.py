from fastapi import APIRouter

from app.api.routes import core, trades

api_router = APIRouter()
api_router.include_router(core.router)
api_router.include_router(trades.router)
