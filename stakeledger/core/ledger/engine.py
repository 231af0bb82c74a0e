"""Dispatch-table engine for the staking ledger.

``step(state, params)`` is the single entry point. It:

1. Dispatches to the action's guard / update / effect functions.
2. Runs the guard against the PRE-state (any ``StakingError`` rejects).
3. Applies the update and checks all invariants on the post-state.
4. Returns a ``StepResult`` carrying the post-state and the step's ``Effect``
   (events plus transfer instructions for the asset ledger).

Nothing here performs I/O; executing transfers and emitting events is the job
of ``stakeledger.integration.staking_ledger.StakingLedger``.
"""

from __future__ import annotations

from typing import Callable, Iterable

from ...state.positions import Amount, Owner, PositionId, Timestamp
from ..errors import LedgerInvariantError, StakingError
from .accrual import accrued_value
from .effects import (
    effect_extend_staking_period,
    effect_stake,
    effect_withdraw,
    effect_withdraw_all,
)
from .guards import (
    guard_extend_staking_period,
    guard_stake,
    guard_withdraw,
    guard_withdraw_all,
    require_active_position,
)
from .invariants import check_all
from .types import Action, ActionParams, BatchResult, Effect, LedgerState, StepResult
from .updates import (
    apply_extend_staking_period,
    apply_stake,
    apply_withdraw,
    apply_withdraw_all,
)

GuardFn = Callable[[LedgerState, ActionParams], None]
UpdateFn = Callable[[LedgerState, ActionParams], LedgerState]
EffectFn = Callable[[LedgerState, LedgerState, ActionParams], Effect]

_DISPATCH: dict[Action, tuple[GuardFn, UpdateFn, EffectFn]] = {
    Action.STAKE: (
        guard_stake, apply_stake, effect_stake,
    ),
    Action.EXTEND_STAKING_PERIOD: (
        guard_extend_staking_period, apply_extend_staking_period, effect_extend_staking_period,
    ),
    Action.WITHDRAW: (
        guard_withdraw, apply_withdraw, effect_withdraw,
    ),
    Action.WITHDRAW_ALL: (
        guard_withdraw_all, apply_withdraw_all, effect_withdraw_all,
    ),
}


def _reject(error: StakingError) -> StepResult:
    return StepResult(accepted=False, error=error, rejection=f"{error.code}:{error}")


def step(state: LedgerState, params: ActionParams) -> StepResult:
    """Execute one action against the given state.

    Returns ``StepResult`` with ``accepted=True`` on success,
    or ``accepted=False`` with the ``error`` and a ``rejection`` string.
    """
    entry = _DISPATCH.get(params.action)
    if entry is None:
        return StepResult(accepted=False, rejection=f"unknown_action:{params.action}")

    guard_fn, update_fn, effect_fn = entry

    try:
        guard_fn(state, params)
        new_state = update_fn(state, params)
    except StakingError as exc:
        return _reject(exc)

    violations = check_all(new_state)
    if violations:
        return _reject(LedgerInvariantError(violations))

    try:
        effect = effect_fn(state, new_state, params)
    except StakingError as exc:
        return _reject(exc)
    return StepResult(accepted=True, state=new_state, effect=effect)


def step_or_raise(state: LedgerState, params: ActionParams) -> StepResult:
    """Like ``step()`` but raises the rejection's ``StakingError`` instead."""
    result = step(state, params)
    if result.accepted:
        return result
    if result.error is not None:
        raise result.error
    raise ValueError(result.rejection or "rejected")


def step_batch(state: LedgerState, batch: Iterable[ActionParams]) -> BatchResult:
    """Fold ``step()`` over `batch`, each step seeing the previous post-state.

    The first rejection rejects the whole batch; the caller keeps `state`,
    which no step has modified.
    """
    current = state
    effects: list[Effect] = []
    for i, params in enumerate(batch):
        result = step(current, params)
        if not result.accepted:
            return BatchResult(
                accepted=False,
                error=result.error,
                rejection=f"step {i}: {result.rejection}",
                failed_index=i,
            )
        assert result.state is not None and result.effect is not None
        current = result.state
        effects.append(result.effect)
    return BatchResult(accepted=True, state=current, effects=tuple(effects))


def withdrawable_amount(
    state: LedgerState, owner: Owner, position_id: PositionId, now: Timestamp,
) -> Amount:
    """Value `owner` could withdraw from `position_id` at `now`.

    Raises:
        InvalidPositionError: unknown or closed position.
        TermNotElapsedError: the staking period has not fully elapsed.
    """
    position = require_active_position(state, owner, position_id)
    return accrued_value(state.schedule, position, now)
