"""Exception types for the staking ledger.

Every rejection of a ledger operation is a ``StakingError`` subclass carrying a
short machine-readable ``code``. ``step()`` in ``core/ledger/engine.py`` returns
the error inside a ``StepResult``; ``step_or_raise()`` and the ``StakingLedger``
shell raise it.

Messages for the user-facing guards keep the wording of the deployed contract.
"""

from __future__ import annotations


class StakingError(Exception):
    """Base class for ledger rejections."""

    code: str = "staking_error"


class InvalidAmountError(StakingError):
    """Raised when an amount that must be positive is zero or negative."""

    code = "invalid_amount"

    def __init__(self, message: str = "Amount must be greater than 0") -> None:
        super().__init__(message)


class InvalidPeriodError(StakingError):
    """Raised when a duration is not one of the configured tiers."""

    code = "invalid_period"

    def __init__(self, message: str = "Invalid staking period") -> None:
        super().__init__(message)


class InvalidPositionError(StakingError):
    """Raised for an unknown id, or an id whose slot is closed."""

    code = "invalid_position"

    def __init__(self, position_id: int, message: str | None = None) -> None:
        self.position_id = position_id
        super().__init__(message or f"Invalid position id: {position_id}")


class TermNotElapsedError(StakingError):
    code = "term_not_elapsed"

    def __init__(self, message: str = "The current staking period has not ended") -> None:
        super().__init__(message)


class InsufficientWithdrawableError(StakingError):
    code = "insufficient_withdrawable"

    def __init__(
        self,
        requested: int,
        withdrawable: int,
        message: str = "Withdraw amount exceeds the withdrawable amount",
    ) -> None:
        self.requested = requested
        self.withdrawable = withdrawable
        super().__init__(message)


class LengthMismatchError(StakingError):
    """Raised when the two arrays of a batch call differ in length."""

    code = "length_mismatch"


class UnauthorizedError(StakingError):
    code = "unauthorized"

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"caller is not the admin: {identity}")


class TransferFailureError(StakingError):
    """Raised when the external asset ledger refused or failed a transfer.

    `uncompensated` lists earlier transfers of the same call that could not be
    reversed (empty when custody is back to its pre-call balance).
    """

    code = "transfer_failure"

    def __init__(self, message: str, uncompensated: tuple = ()) -> None:
        self.uncompensated = tuple(uncompensated)
        super().__init__(message)


class CompoundingOverflowError(StakingError):
    """Raised when fixed-point arithmetic leaves its representable range."""

    code = "overflow"


class LedgerInvariantError(StakingError):
    """Raised when a post-state violates one or more ledger invariants."""

    code = "invariant"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
