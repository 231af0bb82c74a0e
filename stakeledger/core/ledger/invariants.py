"""Invariant checkers for the staking ledger.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass). The engine runs
`check_all()` on every post-state and rejects the step on any violation.
"""

from __future__ import annotations

from typing import Callable

from ...state.positions import PositionStatus
from ..compounding import MAX_UINT256
from .types import LedgerState


def inv_ids_unique(s: LedgerState) -> bool:
    ids = [p.id for ps in s.positions.values() for p in ps]
    return len(ids) == len(set(ids))


def inv_ids_below_counter(s: LedgerState) -> bool:
    return all(p.id < s.next_id for ps in s.positions.values() for p in ps)


def inv_ids_increasing_per_owner(s: LedgerState) -> bool:
    for ps in s.positions.values():
        ids = [p.id for p in ps]
        if any(a >= b for a, b in zip(ids, ids[1:])):
            return False
    return True


def inv_active_amount_positive(s: LedgerState) -> bool:
    return all(
        0 < p.staked_amount <= MAX_UINT256
        for ps in s.positions.values()
        for p in ps
        if p.status is PositionStatus.ACTIVE
    )


def inv_active_period_valid(s: LedgerState) -> bool:
    return all(
        s.schedule.is_valid_period(p.staking_period)
        for ps in s.positions.values()
        for p in ps
        if p.status is PositionStatus.ACTIVE
    )


def inv_closed_zeroed(s: LedgerState) -> bool:
    return all(
        p.staked_amount == 0 and p.staking_period == 0 and p.start_time == 0
        for ps in s.positions.values()
        for p in ps
        if p.status is PositionStatus.CLOSED
    )


INVARIANT_REGISTRY: dict[str, Callable[[LedgerState], bool]] = {
    "inv_ids_unique": inv_ids_unique,
    "inv_ids_below_counter": inv_ids_below_counter,
    "inv_ids_increasing_per_owner": inv_ids_increasing_per_owner,
    "inv_active_amount_positive": inv_active_amount_positive,
    "inv_active_period_valid": inv_active_period_valid,
    "inv_closed_zeroed": inv_closed_zeroed,
}


def check_all(state: LedgerState) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state)
    ]
