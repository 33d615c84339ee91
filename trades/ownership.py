from __future__ import annotations

"""Ownership replay.

Current ownership is never stored. It is derived every time from:
  - the immutable baseline (LeagueState.base_picks), and
  - the trade log (LeagueState.trades), replayed in created_at order.

Replay order is (created_at instant, position in the log). Two trades with the
same timestamp are applied in the order they were appended.

A trade leg is applied only if the pick's owner at that point of the replay is
the trade's from_team_id. Otherwise the leg is skipped (tolerated, not an
error); legality is enforced when a trade is admitted, not when it is replayed.
Pick refs whose identity key is not in the baseline are ignored.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from schema import PickKey
from trade_time import parse_created_at

from .models import LeagueState, Trade
from .rules.policies.stepien_policy import is_pick_locked

logger = logging.getLogger(__name__)


def replay_order(trades: Sequence[Trade]) -> List[Trade]:
    """Return trades sorted by created_at, ties broken by log position."""
    indexed = [(parse_created_at(t.created_at), idx, t) for idx, t in enumerate(trades)]
    indexed.sort(key=lambda row: (row[0], row[1]))
    return [t for _ts, _idx, t in indexed]


def seed_ownership(state: LeagueState) -> Dict[PickKey, str]:
    # Duplicate baseline keys are rejected at seed load (state.load_seed); last one wins here.
    return {pick.key: pick.current_owner_id for pick in state.base_picks}


def apply_trade(ownership: Dict[PickKey, str], trade: Trade) -> int:
    """Apply one trade to an ownership mapping in place. Returns the number of legs applied."""
    applied = 0
    for ref in trade.picks:
        key = ref.key
        current = ownership.get(key)
        if current is None:
            continue
        if current != trade.from_team_id:
            logger.debug(
                "replay skip trade=%s pick=%s owner=%s from=%s",
                trade.id,
                key,
                current,
                trade.from_team_id,
            )
            continue
        ownership[key] = trade.to_team_id
        applied += 1
    return applied


def rebuild_ownership(state: LeagueState) -> Dict[PickKey, str]:
    """Derive current ownership: {(year, round, original_owner_id): team_id}.

    Pure and idempotent; the input state is never modified.
    """
    ownership = seed_ownership(state)
    for trade in replay_order(state.trades):
        apply_trade(ownership, trade)
    return ownership


def team_name(state: LeagueState, team_id: str) -> str:
    for team in state.teams:
        if team.id == team_id:
            return team.name
    return team_id


# ----------------------------------------------------------------------------
# Matrix view (teams x years x rounds)
# ----------------------------------------------------------------------------


def build_ownership_matrix(state: LeagueState, *, stepien_round: int = 1) -> Dict[str, Any]:
    """Build the ownership matrix used by the UI.

    One row per team; one cell per (year, round) holding the baseline picks that
    team originally minted, with their current owner and lock flag.
    """
    ownership = rebuild_ownership(state)
    base_keys = set(ownership.keys())

    years = sorted({p.year for p in state.base_picks})
    rounds = sorted({p.round for p in state.base_picks})

    by_cell: Dict[Tuple[str, int, int], List[Dict[str, Any]]] = {}
    for pick in state.base_picks:
        owner = ownership.get(pick.key, pick.original_owner_id)
        locked = False
        if pick.round == stepien_round:
            locked = is_pick_locked(
                pick.key,
                base_keys=base_keys,
                ownership=ownership,
                first_round=stepien_round,
            )
        by_cell.setdefault((pick.original_owner_id, pick.year, pick.round), []).append(
            {
                "year": pick.year,
                "round": pick.round,
                "originalOwnerId": pick.original_owner_id,
                "currentOwnerId": owner,
                "currentOwnerName": team_name(state, owner),
                "traded": owner != pick.original_owner_id,
                "stepienLocked": locked,
            }
        )

    rows: List[Dict[str, Any]] = []
    for team in state.teams:
        cells: List[Dict[str, Any]] = []
        for year in years:
            for rnd in rounds:
                cells.append(
                    {
                        "year": year,
                        "round": rnd,
                        "picks": by_cell.get((team.id, year, rnd), []),
                    }
                )
        rows.append({"teamId": team.id, "teamName": team.name, "cells": cells})

    return {"years": years, "rounds": rounds, "rows": rows}
