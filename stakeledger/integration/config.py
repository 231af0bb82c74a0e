"""
Ledger configuration: rate schedule, staked asset, admin identity.

Configuration is read from YAML (`load_config`) or from an already-parsed mapping
(`config_from_mapping`). Unknown keys are rejected so a typo cannot silently
fall back to a default rate. Example file::

    asset_id: "0x5FbDB2315678afecb367f032d93F642f64180aa3"
    admin: "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
    minimum_rate: 50000000000000          # 0.005% / day
    period_for_minimum_rate: 1
    tiers:
      - {period: 30, rate: 200000000000000}     # 0.02% / day
      - {period: 180, rate: 400000000000000}    # 0.04% / day
      - {period: 1460, rate: 1000000000000000}  # 0.1% / day
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..core.ledger.state import schedule_from_dict, schedule_to_dict
from ..core.ledger.types import RateSchedule, Tier

ZERO_ADDRESS = "0x" + "00" * 20

# Rates of the original deployment (daily, scaled by 1e18).
DEFAULT_MINIMUM_RATE = 5 * 10**13      # 0.005%
DEFAULT_TIERS: tuple[tuple[int, int], ...] = (
    (30, 2 * 10**14),                   # 0.02%
    (180, 4 * 10**14),                  # 0.04%
    (1460, 10**15),                     # 0.1%
)
DEFAULT_PERIOD_FOR_MINIMUM_RATE = 1

_ALLOWED_KEYS = frozenset({"asset_id", "admin", "minimum_rate", "period_for_minimum_rate", "tiers"})


def default_schedule() -> RateSchedule:
    return RateSchedule(
        tiers=tuple(Tier(period=p, rate=r) for p, r in DEFAULT_TIERS),
        minimum_rate=DEFAULT_MINIMUM_RATE,
        period_for_minimum_rate=DEFAULT_PERIOD_FOR_MINIMUM_RATE,
    )


@dataclass(frozen=True)
class LedgerConfig:
    schedule: RateSchedule
    asset_id: str
    admin: str

    def __post_init__(self) -> None:
        if not isinstance(self.schedule, RateSchedule):
            raise TypeError("schedule must be a RateSchedule")
        if not isinstance(self.asset_id, str) or not self.asset_id:
            raise ValueError("asset_id must be a non-empty string")
        if self.asset_id.lower() == ZERO_ADDRESS:
            raise ValueError("Token address cannot be the zero address")
        if not isinstance(self.admin, str) or not self.admin:
            raise ValueError("admin must be a non-empty string")

    def to_dict(self) -> dict[str, Any]:
        return {"asset_id": self.asset_id, "admin": self.admin, **schedule_to_dict(self.schedule)}


def config_from_mapping(obj: Mapping[str, Any]) -> LedgerConfig:
    if not isinstance(obj, Mapping):
        raise TypeError("ledger config must be a mapping")
    extra = set(obj) - _ALLOWED_KEYS
    if extra:
        raise ValueError(f"unknown ledger config keys: {sorted(extra)}")
    missing = {"asset_id", "admin"} - set(obj)
    if missing:
        raise ValueError(f"missing ledger config keys: {sorted(missing)}")

    if "tiers" in obj:
        schedule = schedule_from_dict({
            "tiers": obj["tiers"],
            "minimum_rate": obj.get("minimum_rate", DEFAULT_MINIMUM_RATE),
            "period_for_minimum_rate": obj.get("period_for_minimum_rate", DEFAULT_PERIOD_FOR_MINIMUM_RATE),
        })
    else:
        defaults = default_schedule()
        schedule = RateSchedule(
            tiers=defaults.tiers,
            minimum_rate=obj.get("minimum_rate", defaults.minimum_rate),
            period_for_minimum_rate=obj.get("period_for_minimum_rate", defaults.period_for_minimum_rate),
        )
    return LedgerConfig(schedule=schedule, asset_id=obj["asset_id"], admin=obj["admin"])


def load_config(path: Path | str) -> LedgerConfig:
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping):
        raise TypeError("ledger config YAML must be a mapping")
    return config_from_mapping(obj)
