"""
Staking ledger service: the imperative shell around the functional core.

`StakingLedger` owns one `LedgerState` and the collaborators. Every operation:

1. reads the clock once and builds `ActionParams` for the engine;
2. runs `step_batch` on the current state (single operations are batches of one),
   so every guard of the whole call is checked before anything external happens;
3. executes the resulting transfers in order through the asset ledger; if one
   fails, the transfers already made for this call are reversed and
   `TransferFailureError` is raised;
4. only then commits the post-state and emits the events.

A rejected or failed call leaves the state, the event log and (after
compensation) custody exactly as they were.

All operations hold a single re-entrant lock, which serializes writers for the
global id counter and every owner's position set.
"""

from __future__ import annotations

import threading
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from ..core.errors import LengthMismatchError, TransferFailureError, UnauthorizedError
from ..core.ledger import (
    Action,
    ActionParams,
    BatchResult,
    Effect,
    LedgerState,
    RateSchedule,
    StakedEvent,
    Tier,
    Transfer,
    TransferDirection,
    initial_state,
    state_to_dict,
    step_batch,
    withdrawable_amount,
)
from ..core.ledger.guards import require_amount
from ..state.positions import Position
from .collaborators import AssetLedger, Authorizer, Clock, EventLog, EventSink, SingleAdminAuthorizer
from .config import LedgerConfig


def _new_position_id(effect: Effect) -> Optional[int]:
    for event in effect.events:
        if isinstance(event, StakedEvent):
            return event.id
    return None


class StakingLedger:
    """Term-staking ledger with compounding rewards."""

    def __init__(
        self,
        config: LedgerConfig,
        *,
        asset_ledger: AssetLedger,
        clock: Clock,
        authorizer: Optional[Authorizer] = None,
        event_sink: Optional[EventSink] = None,
        state: Optional[LedgerState] = None,
    ):
        if state is not None and state.schedule != config.schedule:
            raise ValueError("state schedule does not match config schedule")
        self._config = config
        self._assets = asset_ledger
        self._clock = clock
        self._authorizer = authorizer if authorizer is not None else SingleAdminAuthorizer(config.admin)
        self._events = event_sink if event_sink is not None else EventLog()
        self._state = state if state is not None else initial_state(config.schedule)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Staking
    # ------------------------------------------------------------------

    def stake(self, caller: str, amount: int, period: int) -> int:
        """Lock `amount` for `period` days. Returns the new position id."""
        [position_id] = self.stake_batch(caller, [amount], [period])
        return position_id

    def stake_batch(self, caller: str, amounts: Sequence[int], periods: Sequence[int]) -> List[int]:
        if len(amounts) != len(periods):
            raise LengthMismatchError("Amounts and staking periods length mismatch")
        with self._lock:
            now = self._clock.now()
            batch = [
                ActionParams(action=Action.STAKE, caller=caller, now=now, amount=a, period=p)
                for a, p in zip(amounts, periods)
            ]
            result = self._run(batch)
        ids = [e.events[0].id for e in result.effects]
        for (a, p), position_id in zip(zip(amounts, periods), ids):
            logger.info(f"Staked {a} for {p} days: owner={caller} id={position_id}")
        if ids:
            logger.debug(f"Owner {caller} now has {self.total_staked(caller)} staked")
        return ids

    def extend_staking_period(self, caller: str, position_id: int, new_period: int) -> int:
        """Roll a matured position into `new_period`. Returns the new position id."""
        with self._lock:
            params = ActionParams(
                action=Action.EXTEND_STAKING_PERIOD,
                caller=caller,
                now=self._clock.now(),
                period=new_period,
                position_id=position_id,
            )
            result = self._run([params])
        new_id = result.events[0].id
        logger.info(
            f"Extended position {position_id} into {new_period} days: owner={caller} new_id={new_id}"
        )
        return new_id

    # ------------------------------------------------------------------
    # Withdrawals
    # ------------------------------------------------------------------

    def withdraw(self, caller: str, position_id: int, amount: int) -> Optional[int]:
        """Withdraw `amount` from a matured position.

        Returns the id of the position holding the re-staked remainder, or None
        when the whole value was withdrawn.
        """
        [remainder_id] = self.withdraw_batch(caller, [position_id], [amount])
        return remainder_id

    def withdraw_all(self, caller: str, position_id: int) -> int:
        """Close a matured position and transfer its whole value. Returns that value."""
        with self._lock:
            params = ActionParams(
                action=Action.WITHDRAW_ALL,
                caller=caller,
                now=self._clock.now(),
                position_id=position_id,
            )
            result = self._run([params])
        [transfer] = result.transfers
        logger.info(f"Withdrew all of position {position_id}: owner={caller} amount={transfer.amount}")
        return transfer.amount

    def withdraw_batch(
        self, caller: str, position_ids: Sequence[int], amounts: Sequence[int],
    ) -> List[Optional[int]]:
        if len(position_ids) != len(amounts):
            raise LengthMismatchError("Amounts and ids length mismatch")
        with self._lock:
            now = self._clock.now()
            batch = [
                ActionParams(action=Action.WITHDRAW, caller=caller, now=now, amount=a, position_id=i)
                for i, a in zip(position_ids, amounts)
            ]
            result = self._run(batch)
        remainder_ids = [_new_position_id(e) for e in result.effects]
        for position_id, amount, remainder_id in zip(position_ids, amounts, remainder_ids):
            logger.info(
                f"Withdrew {amount} from position {position_id}: owner={caller} remainder_id={remainder_id}"
            )
        return remainder_ids

    def admin_withdraw(self, caller: str, amount: int) -> None:
        """Move `amount` out of custody to the admin. No position accounting is touched."""
        if not self._authorizer.is_admin(caller):
            raise UnauthorizedError(caller)
        require_amount(amount)
        with self._lock:
            self._execute_transfers((Transfer(TransferDirection.OUT, caller, amount),))
        logger.info(f"Admin withdrawal of {amount} to {caller}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def withdrawable_amount(self, caller: str, position_id: int) -> int:
        with self._lock:
            return withdrawable_amount(self._state, caller, position_id, self._clock.now())

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def config(self) -> LedgerConfig:
        return self._config

    @property
    def schedule(self) -> RateSchedule:
        return self._config.schedule

    @property
    def minimum_rate(self) -> int:
        return self._config.schedule.minimum_rate

    @property
    def period_for_minimum_rate(self) -> int:
        return self._config.schedule.period_for_minimum_rate

    @property
    def tiers(self) -> Tuple[Tier, ...]:
        return self._config.schedule.tiers

    def rate_for_period(self, period: int) -> int:
        return self._config.schedule.rate_for_period(period)

    @property
    def id_counter(self) -> int:
        return self._state.next_id

    @property
    def asset_id(self) -> str:
        return self._config.asset_id

    @property
    def admin(self) -> str:
        return self._config.admin

    @property
    def event_sink(self) -> EventSink:
        return self._events

    def total_staked(self, owner: str) -> int:
        """Principal locked in `owner`'s active positions, accrual excluded."""
        return self._state.position_set(owner).total_staked()

    def positions_of(self, owner: str) -> Tuple[Position, ...]:
        """Every slot `owner` ever opened, in id order, closed ones included."""
        return self._state.position_set(owner).positions

    def position(self, owner: str, position_id: int) -> Optional[Position]:
        return self._state.position_set(owner).get(position_id)

    def snapshot(self) -> dict:
        return state_to_dict(self._state)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(self, batch: Sequence[ActionParams]) -> BatchResult:
        result = step_batch(self._state, batch)
        if not result.accepted:
            logger.debug(f"Rejected {[p.action.value for p in batch]}: {result.rejection}")
            if result.error is not None:
                raise result.error
            raise ValueError(result.rejection or "rejected")

        self._execute_transfers(result.transfers)

        assert result.state is not None
        self._state = result.state
        for event in result.events:
            self._events.emit(event)
        return result

    def _transfer(self, transfer: Transfer) -> None:
        if transfer.direction is TransferDirection.IN:
            self._assets.transfer_in(transfer.account, transfer.amount)
        else:
            self._assets.transfer_out(transfer.account, transfer.amount)

    def _execute_transfers(self, transfers: Sequence[Transfer]) -> None:
        done: List[Transfer] = []
        for transfer in transfers:
            try:
                self._transfer(transfer)
            except Exception as exc:
                logger.warning(
                    f"Transfer {transfer.direction.value} of {transfer.amount} for "
                    f"{transfer.account} failed: {exc}"
                )
                uncompensated = self._compensate(done)
                raise TransferFailureError(
                    f"transfer {transfer.direction.value} of {transfer.amount} for "
                    f"{transfer.account} failed: {exc}",
                    uncompensated=uncompensated,
                ) from exc
            done.append(transfer)

    def _compensate(self, done: Sequence[Transfer]) -> List[Transfer]:
        """Reverse `done` newest first. Returns the transfers that could not be reversed."""
        failed: List[Transfer] = []
        for transfer in reversed(done):
            reverse = Transfer(
                TransferDirection.OUT if transfer.direction is TransferDirection.IN else TransferDirection.IN,
                transfer.account,
                transfer.amount,
            )
            try:
                self._transfer(reverse)
            except Exception as exc:
                logger.error(
                    f"Compensating transfer {reverse.direction.value} of {reverse.amount} for "
                    f"{reverse.account} failed: {exc}"
                )
                failed.append(transfer)
            else:
                logger.warning(
                    f"Reversed transfer {transfer.direction.value} of {transfer.amount} for {transfer.account}"
                )
        return failed

