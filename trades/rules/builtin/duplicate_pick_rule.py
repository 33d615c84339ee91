from __future__ import annotations

from dataclasses import dataclass

from schema import PickKey, pick_key_label

from ...errors import DUPLICATE_PICK, TradeError
from ...models import TradeRequest
from ..base import TradeContext


@dataclass
class DuplicatePickRule:
    rule_id: str = "duplicate_pick"
    priority: int = 30
    enabled: bool = True

    def validate(self, trade: TradeRequest, ctx: TradeContext) -> None:
        seen: set[PickKey] = set()
        duplicates: list[PickKey] = []
        for ref in trade.picks:
            key = ref.key
            if key in seen:
                duplicates.append(key)
            seen.add(key)
        if not duplicates:
            return
        raise TradeError(
            DUPLICATE_PICK,
            "Duplicate picks found in trade: " + ", ".join(pick_key_label(k) for k in duplicates),
            {
                "rule": self.rule_id,
                "duplicates": [
                    {"year": y, "round": r, "original_owner_id": o} for y, r, o in duplicates
                ],
            },
        )
