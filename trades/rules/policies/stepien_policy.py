from __future__ import annotations

"""Stepien rule policy.

This module centralizes Stepien logic so that the validation rule and the
ownership view share identical behavior.

Only first-round picks whose original owner is the trading team are checked.
Picks a team acquired from others are not bound by the original owner's state.

- Lock: pick (Y, 1, T) is locked if the baseline has (Y-1, 1, T) and T does not
  currently own it. A team with no baseline Y-1 first-rounder is never locked
  for year Y (first year on record is always free to trade).
- Consecutive pairs: within one trade, the sorted years of the team's own
  first-rounders must not contain two adjacent years (Y, Y+1).

Both checks are evaluated independently; a violation carries every finding.
"""

from dataclasses import dataclass
from typing import Any, Collection, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from schema import PickKey


@dataclass(frozen=True, slots=True)
class LockedPick:
    year: int
    round: int
    original_owner_id: str
    previous_year: int
    previous_year_owner: Optional[str]

    def describe(self) -> str:
        return (
            f"{self.year} Round {self.round} pick (originally owned by {self.original_owner_id}) is locked: "
            f"{self.original_owner_id} no longer owns its {self.previous_year} Round {self.round} pick"
        )


@dataclass(frozen=True, slots=True)
class ConsecutivePair:
    year: int
    next_year: int

    def describe(self) -> str:
        return f"cannot trade first-round picks in consecutive years {self.year} and {self.next_year}"


@dataclass(frozen=True, slots=True)
class StepienViolation:
    team_id: str
    locked: Tuple[LockedPick, ...]
    consecutive: Tuple[ConsecutivePair, ...]

    def message(self) -> str:
        parts = [p.describe() for p in self.locked] + [p.describe() for p in self.consecutive]
        return "Stepien rule violation: " + "; ".join(parts)


def is_pick_locked(
    key: PickKey,
    *,
    base_keys: Collection[PickKey],
    ownership: Mapping[PickKey, str],
    first_round: int = 1,
) -> bool:
    """Return True if a first-round pick cannot be traded by its original owner."""

    year, rnd, owner = key
    if rnd != first_round:
        return False
    previous = (year - 1, rnd, owner)
    if previous not in base_keys:
        return False
    return ownership.get(previous) != owner


def own_first_round_years(
    team_id: str,
    picks: Iterable[PickKey],
    *,
    first_round: int = 1,
) -> List[int]:
    return sorted(year for year, rnd, owner in picks if rnd == first_round and owner == team_id)


def find_locked_picks(
    team_id: str,
    picks: Iterable[PickKey],
    *,
    base_keys: Collection[PickKey],
    ownership: Mapping[PickKey, str],
    first_round: int = 1,
) -> List[LockedPick]:
    locked: List[LockedPick] = []
    for key in picks:
        year, rnd, owner = key
        if rnd != first_round or owner != team_id:
            continue
        if is_pick_locked(key, base_keys=base_keys, ownership=ownership, first_round=first_round):
            locked.append(
                LockedPick(
                    year=year,
                    round=rnd,
                    original_owner_id=owner,
                    previous_year=year - 1,
                    previous_year_owner=ownership.get((year - 1, rnd, owner)),
                )
            )
    return locked


def find_consecutive_pairs(years: Sequence[int]) -> List[ConsecutivePair]:
    ordered = sorted(years)
    return [
        ConsecutivePair(year=a, next_year=b)
        for a, b in zip(ordered, ordered[1:])
        if b - a == 1
    ]


def check_stepien_violation(
    *,
    team_id: str,
    picks: Sequence[PickKey],
    base_keys: Collection[PickKey],
    ownership: Mapping[PickKey, str],
    first_round: int = 1,
) -> Optional[StepienViolation]:
    """Check Stepien compliance for the picks `team_id` sends away in one trade.

    Args:
        team_id: Sending team.
        picks: Identity keys of the picks in the trade.
        base_keys: Identity keys present in the baseline.
        ownership: Current ownership (before the trade is applied).
        first_round: Round treated as the first round.

    Returns:
        StepienViolation if either sub-rule fails, else None.
    """

    locked = find_locked_picks(
        team_id,
        picks,
        base_keys=base_keys,
        ownership=ownership,
        first_round=first_round,
    )
    consecutive = find_consecutive_pairs(own_first_round_years(team_id, picks, first_round=first_round))
    if not locked and not consecutive:
        return None
    return StepienViolation(team_id=team_id, locked=tuple(locked), consecutive=tuple(consecutive))


def violation_evidence(violation: StepienViolation) -> Dict[str, Any]:
    return {
        "team_id": violation.team_id,
        "locked_picks": [
            {
                "year": p.year,
                "round": p.round,
                "original_owner_id": p.original_owner_id,
                "previous_year": p.previous_year,
                "previous_year_owner": p.previous_year_owner,
            }
            for p in violation.locked
        ],
        "consecutive_years": [[p.year, p.next_year] for p in violation.consecutive],
    }
