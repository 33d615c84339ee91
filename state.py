"""League state facade.

A LeagueState snapshot is the immutable seed (teams + baseline picks, loaded
from JSON) merged with the trade log read from SQLite. Nothing derived from
the log is cached here; ownership is replayed by trades.ownership on demand.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Optional

import config
from league_repo import LeagueRepo
from schema import assert_unique_ids, pick_key_label
from trades.errors import TradeError
from trades.models import LeagueState, parse_state

logger = logging.getLogger(__name__)

_STATE_LOCK = RLock()
_DB_PATH: Optional[str] = None
_SEED_PATH: Optional[str] = None
_SEED_CACHE: Dict[str, LeagueState] = {}


class SeedDataError(ValueError):
    pass


# -----------------------------------------------------------------------------
# Paths
# -----------------------------------------------------------------------------


def set_db_path(path: str) -> None:
    global _DB_PATH
    with _STATE_LOCK:
        _DB_PATH = str(path)


def get_db_path() -> str:
    return _DB_PATH or config.DB_PATH


def set_seed_path(path: str) -> None:
    global _SEED_PATH
    with _STATE_LOCK:
        _SEED_PATH = str(path)


def get_seed_path() -> str:
    return _SEED_PATH or config.SEED_PATH


# -----------------------------------------------------------------------------
# Seed
# -----------------------------------------------------------------------------


def validate_seed(seed: LeagueState) -> None:
    """Reject corrupt seed data.

    - team ids unique
    - every baseline pick references known teams
    - baseline identity keys (year, round, original owner) unique
    """
    try:
        assert_unique_ids((t.id for t in seed.teams), what="team id")
    except ValueError as exc:
        raise SeedDataError(str(exc)) from exc

    team_ids = {t.id for t in seed.teams}
    unknown = sorted(
        {p.original_owner_id for p in seed.base_picks if p.original_owner_id not in team_ids}
        | {p.current_owner_id for p in seed.base_picks if p.current_owner_id not in team_ids}
    )
    if unknown:
        raise SeedDataError(f"baseline picks reference unknown teams: {unknown!r}")

    seen: set = set()
    dups: list = []
    for pick in seed.base_picks:
        if pick.key in seen:
            dups.append(pick_key_label(pick.key))
        seen.add(pick.key)
    if dups:
        raise SeedDataError(f"duplicate baseline picks: {dups!r}")


def parse_seed(payload: Any) -> LeagueState:
    if isinstance(payload, dict) and payload.get("trades"):
        raise SeedDataError("seed data must not contain trades")
    try:
        seed = parse_state(payload)
    except TradeError as exc:
        raise SeedDataError(f"invalid seed data: {exc.message}") from exc
    validate_seed(seed)
    return seed


def load_seed(path: Optional[str] = None) -> LeagueState:
    """Load and validate the seed JSON. Cached per path."""
    seed_path = str(path or get_seed_path())
    with _STATE_LOCK:
        cached = _SEED_CACHE.get(seed_path)
        if cached is not None:
            return cached
        p = Path(seed_path)
        if not p.exists():
            raise SeedDataError(f"seed file not found: {seed_path}")
        with p.open("r", encoding="utf-8") as f:
            try:
                payload = json.load(f)
            except json.JSONDecodeError as exc:
                raise SeedDataError(f"seed file is not valid JSON: {seed_path}") from exc
        seed = parse_seed(payload)
        _SEED_CACHE[seed_path] = seed
        logger.info(
            "seed loaded path=%s teams=%d base_picks=%d",
            seed_path,
            len(seed.teams),
            len(seed.base_picks),
        )
        return seed


def clear_seed_cache() -> None:
    with _STATE_LOCK:
        _SEED_CACHE.clear()


# -----------------------------------------------------------------------------
# Snapshots
# -----------------------------------------------------------------------------


def export_state(*, repo: Optional[LeagueRepo] = None, seed: Optional[LeagueState] = None) -> LeagueState:
    """Assemble a LeagueState from the seed and the current trade log."""
    seed = seed or load_seed()
    if repo is not None:
        return seed.with_trades(repo.list_trades())
    with LeagueRepo(get_db_path()) as own_repo:
        return seed.with_trades(own_repo.list_trades())


def startup_init_state() -> None:
    """DB init + seed load + trade log integrity check (server startup)."""
    load_seed()
    with LeagueRepo(get_db_path()) as repo:
        repo.init_db()
        repo.validate_integrity()
        logger.info("trade log ready db=%s trades=%d", repo.db_path, repo.count_trades())
