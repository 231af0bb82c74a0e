"""Guard functions for the staking ledger.

One function per action. Each checks the action against the PRE-state and
raises the matching ``StakingError`` subclass when it is not allowed. Parameter
checks run before state checks, so a zero amount is reported as such even for
an unknown position.
"""

from __future__ import annotations

from ...state.positions import Owner, Position, PositionId
from ..compounding import MAX_UINT256
from ..errors import (
    InsufficientWithdrawableError,
    InvalidAmountError,
    InvalidPeriodError,
    InvalidPositionError,
)
from .accrual import accrued_value
from .types import ActionParams, LedgerState


def require_amount(amount: int) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise InvalidAmountError()
    if amount > MAX_UINT256:
        raise InvalidAmountError("Amount exceeds uint256")


def require_active_position(state: LedgerState, owner: Owner, position_id: PositionId) -> Position:
    position = state.position_set(owner).get_active(position_id)
    if position is None:
        raise InvalidPositionError(position_id)
    return position


def guard_stake(state: LedgerState, params: ActionParams) -> None:
    require_amount(params.amount)
    if not state.schedule.is_tier(params.period):
        raise InvalidPeriodError()


def guard_extend_staking_period(state: LedgerState, params: ActionParams) -> None:
    if not state.schedule.is_tier(params.period):
        raise InvalidPeriodError()
    position = require_active_position(state, params.caller, params.position_id)
    accrued_value(state.schedule, position, params.now)


def guard_withdraw(state: LedgerState, params: ActionParams) -> None:
    require_amount(params.amount)
    position = require_active_position(state, params.caller, params.position_id)
    withdrawable = accrued_value(state.schedule, position, params.now)
    if params.amount > withdrawable:
        raise InsufficientWithdrawableError(params.amount, withdrawable)


def guard_withdraw_all(state: LedgerState, params: ActionParams) -> None:
    position = require_active_position(state, params.caller, params.position_id)
    accrued_value(state.schedule, position, params.now)
