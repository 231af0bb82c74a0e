"""
Core staking algorithms
"""

from .compounding import RATE_SCALE, compound, growth_factor
from .errors import (
    CompoundingOverflowError,
    InsufficientWithdrawableError,
    InvalidAmountError,
    InvalidPeriodError,
    InvalidPositionError,
    LedgerInvariantError,
    LengthMismatchError,
    StakingError,
    TermNotElapsedError,
    TransferFailureError,
    UnauthorizedError,
)

__all__ = [
    "RATE_SCALE",
    "compound",
    "growth_factor",
    "CompoundingOverflowError",
    "InsufficientWithdrawableError",
    "InvalidAmountError",
    "InvalidPeriodError",
    "InvalidPositionError",
    "LedgerInvariantError",
    "LengthMismatchError",
    "StakingError",
    "TermNotElapsedError",
    "TransferFailureError",
    "UnauthorizedError",
]
