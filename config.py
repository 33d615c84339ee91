import os
from typing import Any, Dict

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Data paths (environment overrides win)
DB_PATH: str = os.environ.get("PICKS_DB_PATH") or os.path.join(BASE_DIR, "data", "dynasty_picks.sqlite3")
SEED_PATH: str = os.environ.get("PICKS_SEED_PATH") or os.path.join(BASE_DIR, "data", "initial_state.json")

# Optional: when set, POST /api/* requires X-Admin-Token.
ADMIN_TOKEN: str = (os.environ.get("PICKS_ADMIN_TOKEN") or "").strip()

LOG_LEVEL: str = (os.environ.get("PICKS_LOG_LEVEL") or "INFO").upper()

# Trade rule switches. Rules read these through TradeContext.trade_rules.
DEFAULT_TRADE_RULES: Dict[str, Any] = {
    "stepien_enabled": True,
    # Round treated as the "first round" by the Stepien rule.
    "stepien_round": 1,
}
