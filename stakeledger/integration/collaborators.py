"""
External collaborators of the staking ledger.

The ledger computes amounts and position state; everything that touches the
outside world goes through one of these protocols:

- `AssetLedger`: moves the staked asset in and out of custody;
- `Authorizer`: decides who may use the admin withdrawal path;
- `Clock`: the time source for term and accrual checks;
- `EventSink`: receives `Staked` / `Withdrawn` events in operation order.

In-memory implementations are provided for tests and for embedding the ledger
in simulations.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Tuple, Type, runtime_checkable

from ..core.ledger.types import LedgerEvent, SECONDS_PER_DAY, TransferDirection
from ..state.balances import Account, AssetId, BalanceTable


@runtime_checkable
class AssetLedger(Protocol):
    """Fungible asset ledger. Implementations raise to signal a failed transfer."""

    def transfer_in(self, source: Account, amount: int) -> None: ...

    def transfer_out(self, destination: Account, amount: int) -> None: ...


@runtime_checkable
class Authorizer(Protocol):
    def is_admin(self, identity: Account) -> bool: ...


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int: ...


@runtime_checkable
class EventSink(Protocol):
    def emit(self, event: LedgerEvent) -> None: ...


# ---------------------------------------------------------------------------
# In-memory implementations
# ---------------------------------------------------------------------------

FailureHook = Callable[[TransferDirection, Account, int], bool]


class TransferRejected(RuntimeError):
    """Raised by `InMemoryAssetLedger` when an injected failure hook fires."""


class InMemoryAssetLedger:
    """
    Asset ledger over a `BalanceTable`, holding custody in a dedicated account.

    `fail_on` (optional) is consulted before every transfer; returning True makes
    that transfer raise `TransferRejected` without moving anything.
    """

    def __init__(
        self,
        asset_id: AssetId,
        custody: Account,
        balances: Optional[BalanceTable] = None,
        fail_on: Optional[FailureHook] = None,
    ):
        self.asset_id = asset_id
        self.custody = custody
        self.balances = balances if balances is not None else BalanceTable()
        self.fail_on = fail_on
        self.history: List[Tuple[TransferDirection, Account, int]] = []

    def mint(self, account: Account, amount: int) -> None:
        self.balances.credit(account, self.asset_id, amount)

    def balance_of(self, account: Account) -> int:
        return self.balances.get(account, self.asset_id)

    @property
    def custody_balance(self) -> int:
        return self.balance_of(self.custody)

    def _check_hook(self, direction: TransferDirection, account: Account, amount: int) -> None:
        if self.fail_on is not None and self.fail_on(direction, account, amount):
            raise TransferRejected(f"transfer {direction.value} {amount} for {account} rejected")

    def transfer_in(self, source: Account, amount: int) -> None:
        self._check_hook(TransferDirection.IN, source, amount)
        self.balances.transfer(source, self.custody, self.asset_id, amount)
        self.history.append((TransferDirection.IN, source, amount))

    def transfer_out(self, destination: Account, amount: int) -> None:
        self._check_hook(TransferDirection.OUT, destination, amount)
        self.balances.transfer(self.custody, destination, self.asset_id, amount)
        self.history.append((TransferDirection.OUT, destination, amount))


@dataclass(frozen=True)
class SingleAdminAuthorizer:
    """The deploying identity is the only admin."""

    admin: Account

    def is_admin(self, identity: Account) -> bool:
        return identity == self.admin


class SystemClock:
    """Wall-clock seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError("start must be non-negative")
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < self._now:
            raise ValueError(f"clock cannot move backwards: {timestamp} < {self._now}")
        self._now = int(timestamp)

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("seconds must be non-negative")
        self._now += int(seconds)
        return self._now

    def advance_days(self, days: int) -> int:
        return self.advance(days * SECONDS_PER_DAY)


@dataclass
class EventLog:
    """Append-only event sink."""

    events: List[LedgerEvent] = field(default_factory=list)

    def emit(self, event: LedgerEvent) -> None:
        self.events.append(event)

    def of_type(self, kind: Type[LedgerEvent]) -> List[LedgerEvent]:
        return [e for e in self.events if isinstance(e, kind)]

    def __len__(self) -> int:
        return len(self.events)
