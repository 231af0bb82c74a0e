"""Position ledger: the functional core of term staking.

- deterministic, integer-only transitions,
- immutable state (frozen dataclasses),
- typed rejections and post-state invariant checks.

Public API:
- `initial_state(schedule) -> LedgerState`
- `step(state, params) -> StepResult`
- `step_or_raise(state, params) -> StepResult` (raises on rejection)
- `step_batch(state, batch) -> BatchResult` (all-or-nothing)
- `withdrawable_amount(state, owner, position_id, now) -> int`
"""

from .accrual import accrued_value, elapsed_days, term_elapsed, value_at_term_end
from .engine import step, step_batch, step_or_raise, withdrawable_amount
from .invariants import check_all
from .state import initial_state, state_from_dict, state_to_dict
from .types import (
    SECONDS_PER_DAY,
    Action,
    ActionParams,
    BatchResult,
    Effect,
    Event,
    LedgerEvent,
    LedgerState,
    RateSchedule,
    StakedEvent,
    StepResult,
    Tier,
    Transfer,
    TransferDirection,
    WithdrawnEvent,
)

__all__ = [
    "step",
    "step_or_raise",
    "step_batch",
    "withdrawable_amount",
    "accrued_value",
    "elapsed_days",
    "term_elapsed",
    "value_at_term_end",
    "check_all",
    "initial_state",
    "state_from_dict",
    "state_to_dict",
    "SECONDS_PER_DAY",
    "Action",
    "ActionParams",
    "BatchResult",
    "Effect",
    "Event",
    "LedgerEvent",
    "LedgerState",
    "RateSchedule",
    "StakedEvent",
    "StepResult",
    "Tier",
    "Transfer",
    "TransferDirection",
    "WithdrawnEvent",
]
