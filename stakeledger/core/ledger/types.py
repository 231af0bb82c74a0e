"""Data types for the staking ledger engine.

All types are frozen dataclasses (immutable).

Units/conventions:
- rates are daily rates scaled by ``RATE_SCALE`` (1e18): ``2 * 10**14`` is 0.02%/day;
- staking periods are whole days;
- timestamps are integer seconds from the clock collaborator;
- amounts are unsigned integers in asset base units.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Mapping, Optional, Tuple

from ...state.positions import Amount, Days, Owner, PositionId, PositionSet, Timestamp
from ..compounding import RATE_SCALE
from ..errors import InvalidPeriodError, StakingError

SECONDS_PER_DAY: int = 86_400
MAX_RATE: int = RATE_SCALE  # 100% per day
TIER_COUNT: int = 3


def _is_day_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@unique
class Action(Enum):
    STAKE = "stake"
    EXTEND_STAKING_PERIOD = "extend_staking_period"
    WITHDRAW = "withdraw"
    WITHDRAW_ALL = "withdraw_all"


@unique
class Event(Enum):
    STAKED = "Staked"
    WITHDRAWN = "Withdrawn"


@unique
class TransferDirection(Enum):
    IN = "in"    # caller -> ledger custody
    OUT = "out"  # ledger custody -> caller


@dataclass(frozen=True)
class Tier:
    """A staking duration eligible for fresh stakes and its daily rate."""

    period: Days
    rate: int

    def __post_init__(self) -> None:
        for name, v in (("period", self.period), ("rate", self.rate)):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
        if self.period <= 0:
            raise ValueError(f"tier period must be positive: {self.period}")
        if not (0 <= self.rate <= MAX_RATE):
            raise ValueError(f"tier rate must be in [0, {MAX_RATE}]: {self.rate}")


@dataclass(frozen=True)
class RateSchedule:
    """Tiered rates plus the floor rate for time held past term."""

    tiers: Tuple[Tier, ...]
    minimum_rate: int
    period_for_minimum_rate: Days = 1

    def __post_init__(self) -> None:
        if not isinstance(self.tiers, tuple) or len(self.tiers) != TIER_COUNT:
            raise ValueError(f"exactly {TIER_COUNT} tiers are required")
        for t in self.tiers:
            if not isinstance(t, Tier):
                raise TypeError("tiers must contain Tier instances")
        periods = [t.period for t in self.tiers]
        if len(set(periods)) != TIER_COUNT:
            raise ValueError(f"tier periods must be distinct: {periods}")

        if not isinstance(self.minimum_rate, int) or isinstance(self.minimum_rate, bool):
            raise TypeError("minimum_rate must be an int")
        if not (0 <= self.minimum_rate <= MAX_RATE):
            raise ValueError(f"minimum_rate must be in [0, {MAX_RATE}]: {self.minimum_rate}")

        p = self.period_for_minimum_rate
        if not isinstance(p, int) or isinstance(p, bool):
            raise TypeError("period_for_minimum_rate must be an int")
        if p <= 0:
            raise ValueError(f"period_for_minimum_rate must be positive: {p}")
        if p in periods:
            raise ValueError(f"period_for_minimum_rate must differ from tier periods: {p}")

    @property
    def tier_periods(self) -> Tuple[Days, ...]:
        return tuple(t.period for t in self.tiers)

    def is_tier(self, period: Days) -> bool:
        return _is_day_count(period) and period in self.tier_periods

    def is_valid_period(self, period: Days) -> bool:
        """True for a tier period or the minimum-rate rollover period."""
        if not _is_day_count(period):
            return False
        return self.is_tier(period) or period == self.period_for_minimum_rate

    def rate_for_period(self, period: Days) -> int:
        if not _is_day_count(period):
            raise InvalidPeriodError()
        for t in self.tiers:
            if t.period == period:
                return t.rate
        if period == self.period_for_minimum_rate:
            return self.minimum_rate
        raise InvalidPeriodError()


@dataclass(frozen=True)
class LedgerState:
    """Complete ledger state: configuration, id counter, and every owner's positions.

    States built by the engine hold `positions` as a read-only mapping.
    """

    schedule: RateSchedule
    next_id: PositionId = 0
    positions: Mapping[Owner, PositionSet] = field(default_factory=dict)

    def position_set(self, owner: Owner) -> PositionSet:
        return self.positions.get(owner, PositionSet())


@dataclass(frozen=True)
class ActionParams:
    """Parameters for an action. Unused fields default to 0."""

    action: Action
    caller: Owner
    now: Timestamp
    amount: Amount = 0          # stake / withdraw
    period: Days = 0            # stake / extend_staking_period
    position_id: PositionId = 0  # extend_staking_period / withdraw / withdraw_all


@dataclass(frozen=True)
class StakedEvent:
    caller: Owner
    id: PositionId
    amount: Amount
    start_time: Timestamp
    period: Days

    @property
    def event(self) -> Event:
        return Event.STAKED


@dataclass(frozen=True)
class WithdrawnEvent:
    caller: Owner
    id: PositionId
    staked_amount: Amount
    withdraw_amount: Amount
    period: Days
    start_time: Timestamp
    end_time: Timestamp

    @property
    def event(self) -> Event:
        return Event.WITHDRAWN


LedgerEvent = StakedEvent | WithdrawnEvent


@dataclass(frozen=True)
class Transfer:
    """Instruction for the external asset ledger."""

    direction: TransferDirection
    account: Owner
    amount: Amount


@dataclass(frozen=True)
class Effect:
    """Observables of a successful step, in emission order."""

    events: Tuple[LedgerEvent, ...] = ()
    transfers: Tuple[Transfer, ...] = ()


@dataclass(frozen=True)
class StepResult:
    """Result of a single engine step."""

    accepted: bool
    state: Optional[LedgerState] = None
    effect: Optional[Effect] = None
    error: Optional[StakingError] = None
    rejection: Optional[str] = None


@dataclass(frozen=True)
class BatchResult:
    """Result of folding several steps; rejected as a whole on the first failure."""

    accepted: bool
    state: Optional[LedgerState] = None
    effects: Tuple[Effect, ...] = ()
    error: Optional[StakingError] = None
    rejection: Optional[str] = None
    failed_index: Optional[int] = None

    @property
    def events(self) -> Tuple[LedgerEvent, ...]:
        return tuple(e for eff in self.effects for e in eff.events)

    @property
    def transfers(self) -> Tuple[Transfer, ...]:
        return tuple(t for eff in self.effects for t in eff.transfers)
