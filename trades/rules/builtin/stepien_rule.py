from __future__ import annotations

from dataclasses import dataclass

from ...errors import CONSECUTIVE_FIRST_ROUNDERS, LOCKED_PICK, STEPIEN_VIOLATION, TradeError
from ...models import TradeRequest
from ..base import TradeContext
from ..policies.stepien_policy import check_stepien_violation, violation_evidence


@dataclass
class StepienRule:
    rule_id: str = "stepien"
    priority: int = 80
    enabled: bool = True

    def validate(self, trade: TradeRequest, ctx: TradeContext) -> None:
        if not ctx.rule_setting("stepien_enabled", True):
            return
        first_round = int(ctx.rule_setting("stepien_round", 1) or 1)

        picks = [ref.key for ref in trade.picks]
        # Nothing of the sender's own first round moves; skip the replay entirely.
        if not any(rnd == first_round and owner == trade.from_team_id for _y, rnd, owner in picks):
            return

        violation = check_stepien_violation(
            team_id=trade.from_team_id,
            picks=picks,
            base_keys=ctx.base_keys,
            ownership=ctx.ownership,
            first_round=first_round,
        )
        if violation is None:
            return

        if violation.locked and violation.consecutive:
            code = STEPIEN_VIOLATION
        elif violation.locked:
            code = LOCKED_PICK
        else:
            code = CONSECUTIVE_FIRST_ROUNDERS

        details = violation_evidence(violation)
        details["rule"] = self.rule_id
        details["first_round"] = first_round
        raise TradeError(code, violation.message(), details)
