"""
Per-owner position sets.

A `PositionSet` is the ordered record of every position an identity ever opened.
Slots are appended in id order and are never removed: closing a position swaps
the slot for its closed record, so an index taken from an earlier snapshot still
points at the same id.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, unique
from typing import Iterator, Optional, Tuple


Owner = str  # staking identity (address / account id)
PositionId = int
Amount = int  # non-negative integer in asset base units
Days = int
Timestamp = int  # seconds


@unique
class PositionStatus(Enum):
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(frozen=True)
class Position:
    """One staking commitment."""

    id: PositionId
    staked_amount: Amount
    staking_period: Days
    start_time: Timestamp
    status: PositionStatus = PositionStatus.ACTIVE

    def __post_init__(self) -> None:
        for name in ("id", "staked_amount", "staking_period", "start_time"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if not isinstance(self.status, PositionStatus):
            raise TypeError("status must be a PositionStatus")

    @property
    def is_active(self) -> bool:
        return self.status is PositionStatus.ACTIVE

    def closed(self) -> "Position":
        """Closed record for this slot: id kept, everything else zeroed."""
        return replace(
            self,
            staked_amount=0,
            staking_period=0,
            start_time=0,
            status=PositionStatus.CLOSED,
        )


@dataclass(frozen=True)
class PositionSet:
    """Immutable ordered collection of one owner's positions."""

    positions: Tuple[Position, ...] = ()

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self) -> Iterator[Position]:
        return iter(self.positions)

    def __getitem__(self, index: int) -> Position:
        return self.positions[index]

    def index_of(self, position_id: PositionId) -> Optional[int]:
        """Slot index for `position_id`, or None if this owner never held it."""
        for i, p in enumerate(self.positions):
            if p.id == position_id:
                return i
        return None

    def get(self, position_id: PositionId) -> Optional[Position]:
        i = self.index_of(position_id)
        return None if i is None else self.positions[i]

    def get_active(self, position_id: PositionId) -> Optional[Position]:
        p = self.get(position_id)
        if p is None or not p.is_active:
            return None
        return p

    def append(self, position: Position) -> "PositionSet":
        if self.positions and position.id <= self.positions[-1].id:
            raise ValueError(
                f"position id {position.id} must exceed last id {self.positions[-1].id}"
            )
        return PositionSet(positions=self.positions + (position,))

    def close(self, position_id: PositionId) -> "PositionSet":
        """Return a new set with `position_id`'s slot replaced by its closed record."""
        i = self.index_of(position_id)
        if i is None:
            raise KeyError(position_id)
        slots = list(self.positions)
        slots[i] = slots[i].closed()
        return PositionSet(positions=tuple(slots))

    def active(self) -> Tuple[Position, ...]:
        return tuple(p for p in self.positions if p.is_active)

    def total_staked(self) -> Amount:
        return sum(p.staked_amount for p in self.positions if p.is_active)

    def __repr__(self) -> str:
        return f"PositionSet({len(self.positions)} slots, {len(self.active())} active)"
