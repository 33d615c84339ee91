from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class TradePickPayload(BaseModel):
    year: int
    round: int
    originalOwnerId: str


class TradeSubmitRequest(BaseModel):
    fromTeamId: str
    toTeamId: str
    picks: List[TradePickPayload] = []
    notes: Optional[str] = None


class TradeDeleteRequest(BaseModel):
    tradeId: str
