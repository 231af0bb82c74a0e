"""
State tables for the staking ledger
"""

from .balances import BalanceTable, InsufficientBalanceError
from .positions import Position, PositionSet, PositionStatus

__all__ = [
    "BalanceTable",
    "InsufficientBalanceError",
    "Position",
    "PositionSet",
    "PositionStatus",
]
