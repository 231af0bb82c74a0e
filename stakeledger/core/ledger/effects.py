"""Effect functions for the staking ledger.

One pure function per action, computing the events and transfer instructions of
an accepted step. Effects read both states: ids of newly opened positions come
from the PRE-state counter, and `Withdrawn` reports the closed position's
original fields, which only the PRE-state still holds.
"""

from __future__ import annotations

from .accrual import accrued_value
from .guards import require_active_position
from .types import (
    ActionParams,
    Effect,
    LedgerState,
    StakedEvent,
    Transfer,
    TransferDirection,
    WithdrawnEvent,
)


def _staked(state: LedgerState, params: ActionParams, amount: int, period: int) -> StakedEvent:
    return StakedEvent(
        caller=params.caller,
        id=state.next_id,
        amount=amount,
        start_time=params.now,
        period=period,
    )


def _withdrawn(pre: LedgerState, params: ActionParams, withdraw_amount: int) -> WithdrawnEvent:
    position = require_active_position(pre, params.caller, params.position_id)
    return WithdrawnEvent(
        caller=params.caller,
        id=position.id,
        staked_amount=position.staked_amount,
        withdraw_amount=withdraw_amount,
        period=position.staking_period,
        start_time=position.start_time,
        end_time=params.now,
    )


def _withdrawable(pre: LedgerState, params: ActionParams) -> int:
    position = require_active_position(pre, params.caller, params.position_id)
    return accrued_value(pre.schedule, position, params.now)


def effect_stake(pre: LedgerState, post: LedgerState, params: ActionParams) -> Effect:
    return Effect(
        events=(_staked(pre, params, params.amount, params.period),),
        transfers=(Transfer(TransferDirection.IN, params.caller, params.amount),),
    )


def effect_extend_staking_period(pre: LedgerState, post: LedgerState, params: ActionParams) -> Effect:
    # Value stays in custody: no transfer.
    return Effect(events=(_staked(pre, params, _withdrawable(pre, params), params.period),))


def effect_withdraw(pre: LedgerState, post: LedgerState, params: ActionParams) -> Effect:
    remainder = _withdrawable(pre, params) - params.amount
    events: tuple = ()
    if remainder > 0:
        events += (_staked(pre, params, remainder, pre.schedule.period_for_minimum_rate),)
    events += (_withdrawn(pre, params, params.amount),)
    return Effect(
        events=events,
        transfers=(Transfer(TransferDirection.OUT, params.caller, params.amount),),
    )


def effect_withdraw_all(pre: LedgerState, post: LedgerState, params: ActionParams) -> Effect:
    amount = _withdrawable(pre, params)
    return Effect(
        events=(_withdrawn(pre, params, amount),),
        transfers=(Transfer(TransferDirection.OUT, params.caller, amount),),
    )
