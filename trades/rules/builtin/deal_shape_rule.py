from __future__ import annotations

from dataclasses import dataclass

from ...errors import EMPTY_TRADE, TradeError
from ...models import TradeRequest
from ..base import TradeContext


@dataclass
class DealShapeRule:
    rule_id: str = "deal_shape"
    priority: int = 15
    enabled: bool = True

    def validate(self, trade: TradeRequest, ctx: TradeContext) -> None:
        # Prevent empty trades where no picks move.
        if not trade.picks:
            raise TradeError(
                EMPTY_TRADE,
                "Trade must contain at least one pick",
                {"rule": self.rule_id, "from_team_id": trade.from_team_id, "to_team_id": trade.to_team_id},
            )
