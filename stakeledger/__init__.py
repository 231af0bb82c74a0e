"""
stakeledger: term staking with daily-compounding rewards.

Users lock an asset for one of three durations and accrue rewards at that
duration's daily rate; matured value left unclaimed keeps compounding at a
floor rate. See `stakeledger.core.ledger` for the pure engine and
`stakeledger.integration.StakingLedger` for the service wrapper.
"""

from .core.compounding import compound
from .core.errors import StakingError
from .core.ledger import RateSchedule, StakedEvent, Tier, WithdrawnEvent
from .integration import LedgerConfig, StakingLedger, default_schedule, load_config

__version__ = "0.1.0"

__all__ = [
    "compound",
    "StakingError",
    "RateSchedule",
    "StakedEvent",
    "Tier",
    "WithdrawnEvent",
    "LedgerConfig",
    "StakingLedger",
    "default_schedule",
    "load_config",
]
