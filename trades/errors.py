from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class TradeError(Exception):
    """Structured error for trade flows.

    Rule violations are raised as TradeError inside the rules engine and
    converted to ValidationResult values by the validator. The server layer
    maps the remaining ones to HTTP 4xx while keeping a stable code.
    """

    code: str
    message: str
    details: Optional[Any] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


# Error codes (stable API surface)
EMPTY_TRADE = "EMPTY_TRADE"
DUPLICATE_PICK = "DUPLICATE_PICK"
LOCKED_PICK = "LOCKED_PICK"
CONSECUTIVE_FIRST_ROUNDERS = "CONSECUTIVE_FIRST_ROUNDERS"
STEPIEN_VIOLATION = "STEPIEN_VIOLATION"
TRADE_NOT_FOUND = "TRADE_NOT_FOUND"
INVALID_TEAM = "INVALID_TEAM"
BAD_PAYLOAD = "BAD_PAYLOAD"
