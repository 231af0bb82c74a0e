"""
Integration layer: collaborators, configuration, and the stateful ledger service
"""

from .collaborators import (
    AssetLedger,
    Authorizer,
    Clock,
    EventLog,
    EventSink,
    InMemoryAssetLedger,
    ManualClock,
    SingleAdminAuthorizer,
    SystemClock,
    TransferRejected,
)
from .config import LedgerConfig, config_from_mapping, default_schedule, load_config
from .staking_ledger import StakingLedger

__all__ = [
    "AssetLedger",
    "Authorizer",
    "Clock",
    "EventLog",
    "EventSink",
    "InMemoryAssetLedger",
    "ManualClock",
    "SingleAdminAuthorizer",
    "SystemClock",
    "TransferRejected",
    "LedgerConfig",
    "config_from_mapping",
    "default_schedule",
    "load_config",
    "StakingLedger",
]
