"""State transition functions for the staking ledger.

One pure function per action. Each returns a new `LedgerState`; the input state
is never modified. Guards have already run, so these assume a valid action.

Positions are never edited in place: a change of amount, period or start time
closes the old slot and opens a fresh position with the next id.
"""

from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType

from ...state.positions import Amount, Days, Owner, Position, PositionId, Timestamp
from .accrual import accrued_value
from .guards import require_active_position
from .types import ActionParams, LedgerState


def open_position(
    state: LedgerState, owner: Owner, amount: Amount, period: Days, now: Timestamp,
) -> LedgerState:
    position = Position(
        id=state.next_id,
        staked_amount=amount,
        staking_period=period,
        start_time=now,
    )
    positions = dict(state.positions)
    positions[owner] = state.position_set(owner).append(position)
    return replace(state, next_id=state.next_id + 1, positions=MappingProxyType(positions))


def close_position(state: LedgerState, owner: Owner, position_id: PositionId) -> LedgerState:
    positions = dict(state.positions)
    positions[owner] = state.position_set(owner).close(position_id)
    return replace(state, positions=MappingProxyType(positions))


def _withdrawable(state: LedgerState, params: ActionParams) -> Amount:
    position = require_active_position(state, params.caller, params.position_id)
    return accrued_value(state.schedule, position, params.now)


def apply_stake(state: LedgerState, params: ActionParams) -> LedgerState:
    return open_position(state, params.caller, params.amount, params.period, params.now)


def apply_extend_staking_period(state: LedgerState, params: ActionParams) -> LedgerState:
    value = _withdrawable(state, params)
    closed = close_position(state, params.caller, params.position_id)
    return open_position(closed, params.caller, value, params.period, params.now)


def apply_withdraw(state: LedgerState, params: ActionParams) -> LedgerState:
    remainder = _withdrawable(state, params) - params.amount
    closed = close_position(state, params.caller, params.position_id)
    if remainder == 0:
        return closed
    return open_position(
        closed,
        params.caller,
        remainder,
        state.schedule.period_for_minimum_rate,
        params.now,
    )


def apply_withdraw_all(state: LedgerState, params: ActionParams) -> LedgerState:
    return close_position(state, params.caller, params.position_id)
