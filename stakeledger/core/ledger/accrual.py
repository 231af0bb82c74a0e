"""Accrued value of a position.

A position earns its tier rate, compounded daily, for exactly its staking
period. If it is left unclaimed for at least one full day past term, the
term-end value keeps compounding at the schedule's minimum rate for every whole
extra day. Partial days never accrue.
"""

from __future__ import annotations

from ...state.positions import Amount, Days, Position, Timestamp
from ..compounding import compound
from ..errors import TermNotElapsedError
from .types import SECONDS_PER_DAY, RateSchedule


def elapsed_days(start_time: Timestamp, now: Timestamp) -> Days:
    """Whole days between `start_time` and `now` (0 if the clock is behind)."""
    if now <= start_time:
        return 0
    return (now - start_time) // SECONDS_PER_DAY


def term_elapsed(position: Position, now: Timestamp) -> bool:
    return now - position.start_time >= position.staking_period * SECONDS_PER_DAY


def value_at_term_end(schedule: RateSchedule, position: Position) -> Amount:
    rate = schedule.rate_for_period(position.staking_period)
    return compound(rate, position.staked_amount, position.staking_period)


def accrued_value(schedule: RateSchedule, position: Position, now: Timestamp) -> Amount:
    """Withdrawable value of a matured position at `now`.

    Raises:
        TermNotElapsedError: the staking period has not fully elapsed.
        InvalidPeriodError: the position's period is unknown to `schedule`.
        CompoundingOverflowError: fixed-point overflow.
    """
    if not term_elapsed(position, now):
        raise TermNotElapsedError()

    at_term_end = value_at_term_end(schedule, position)
    days = elapsed_days(position.start_time, now)
    if days >= position.staking_period + 1:
        extra_days = days - position.staking_period
        return compound(schedule.minimum_rate, at_term_end, extra_days)
    return at_term_end
