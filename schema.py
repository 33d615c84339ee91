# schema.py
from __future__ import annotations

import re
from typing import Any, Iterable, NewType, Tuple

# ============================================================================
# 0) Single Source of Truth: IDs / Versions
# ============================================================================

SCHEMA_VERSION: str = "1.0"

# IMPORTANT:
# - Always treat team ids as str slugs (e.g. "gtd_pussies"). Case is preserved.
TeamId = NewType("TeamId", str)

# (year, round, original_owner_id): names a pick slot for its whole lifetime.
PickKey = Tuple[int, int, str]

TEAM_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,63}$")

MIN_DRAFT_YEAR = 1900
MAX_DRAFT_YEAR = 2200
MAX_DRAFT_ROUND = 10


def normalize_team_id(value: Any, *, strict: bool = True) -> TeamId:
    """
    Normalize team id into canonical form.
    - trims spaces
    - strict=True enforces a slug (letters, digits, '_', '-', '.')
    """
    if value is None:
        raise ValueError("team_id is empty")
    s = str(value).strip()
    if not s:
        raise ValueError("team_id is empty")
    if strict and not TEAM_ID_RE.match(s):
        raise ValueError(f"invalid team_id '{s}' (expected slug)")
    return TeamId(s)


def normalize_year(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid draft year: {value!r}")
    try:
        year = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid draft year: {value!r}") from exc
    if year != value and str(year) != str(value).strip():
        raise ValueError(f"invalid draft year: {value!r}")
    if not (MIN_DRAFT_YEAR <= year <= MAX_DRAFT_YEAR):
        raise ValueError(f"draft year out of range: {year}")
    return year


def normalize_round(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid draft round: {value!r}")
    try:
        rnd = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid draft round: {value!r}") from exc
    if rnd != value and str(rnd) != str(value).strip():
        raise ValueError(f"invalid draft round: {value!r}")
    if not (1 <= rnd <= MAX_DRAFT_ROUND):
        raise ValueError(f"draft round out of range: {rnd}")
    return rnd


def pick_key_label(key: PickKey) -> str:
    year, rnd, owner = key
    return f"{year} Round {rnd} (originally owned by {owner})"


def assert_unique_ids(ids: Iterable[Any], *, what: str = "team_id") -> None:
    seen: set = set()
    dups: set = set()
    for x in ids:
        if x in seen:
            dups.add(x)
        seen.add(x)
    if dups:
        raise ValueError(f"duplicate {what}: {sorted(dups)!r}")
