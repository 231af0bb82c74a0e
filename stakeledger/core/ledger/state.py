"""State construction and serialization for the staking ledger.

`initial_state(schedule)` returns an empty ledger with the id counter at 0.

Round-trip property (tested): `state_from_dict(state_to_dict(s)) == s` for all valid states.
The dict form uses only str/int/list values so it can be stored or hashed by
whoever embeds the ledger.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from ...state.positions import Position, PositionSet, PositionStatus
from .types import LedgerState, RateSchedule, Tier

POSITION_FIELDS: tuple[str, ...] = ("id", "staked_amount", "staking_period", "start_time", "status")


def initial_state(schedule: RateSchedule) -> LedgerState:
    return LedgerState(schedule=schedule, positions=MappingProxyType({}))


def schedule_to_dict(schedule: RateSchedule) -> dict[str, Any]:
    return {
        "tiers": [{"period": t.period, "rate": t.rate} for t in schedule.tiers],
        "minimum_rate": schedule.minimum_rate,
        "period_for_minimum_rate": schedule.period_for_minimum_rate,
    }


def schedule_from_dict(d: Mapping[str, Any]) -> RateSchedule:
    """Build a RateSchedule. Raises KeyError on missing fields."""
    tiers = d["tiers"]
    if not isinstance(tiers, (list, tuple)):
        raise TypeError("tiers must be a list")
    return RateSchedule(
        tiers=tuple(Tier(period=_int(t["period"], "period"), rate=_int(t["rate"], "rate")) for t in tiers),
        minimum_rate=_int(d["minimum_rate"], "minimum_rate"),
        period_for_minimum_rate=_int(d["period_for_minimum_rate"], "period_for_minimum_rate"),
    )


def position_to_dict(position: Position) -> dict[str, int | str]:
    return {
        "id": position.id,
        "staked_amount": position.staked_amount,
        "staking_period": position.staking_period,
        "start_time": position.start_time,
        "status": position.status.value,
    }


def position_from_dict(d: Mapping[str, Any]) -> Position:
    return Position(
        id=_int(d["id"], "id"),
        staked_amount=_int(d["staked_amount"], "staked_amount"),
        staking_period=_int(d["staking_period"], "staking_period"),
        start_time=_int(d["start_time"], "start_time"),
        status=PositionStatus(d["status"]),
    )


def state_to_dict(state: LedgerState) -> dict[str, Any]:
    """Serialize a LedgerState; owners are emitted in sorted order."""
    return {
        "schedule": schedule_to_dict(state.schedule),
        "next_id": state.next_id,
        "positions": {
            owner: [position_to_dict(p) for p in state.positions[owner]]
            for owner in sorted(state.positions)
        },
    }


def state_from_dict(d: Mapping[str, Any]) -> LedgerState:
    """Deserialize a dict to a LedgerState. Raises KeyError on missing fields."""
    raw_positions = d["positions"]
    if not isinstance(raw_positions, Mapping):
        raise TypeError("positions must be a mapping of owner -> list")
    positions: dict[str, PositionSet] = {}
    for owner, slots in raw_positions.items():
        if not isinstance(owner, str):
            raise TypeError(f"owner must be a str, got {type(owner).__name__}")
        positions[owner] = PositionSet(positions=tuple(position_from_dict(p) for p in slots))
    return LedgerState(
        schedule=schedule_from_dict(d["schedule"]),
        next_id=_int(d["next_id"], "next_id"),
        positions=MappingProxyType(positions),
    )


def _int(value: Any, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return int(value)  # normalize int subclasses
