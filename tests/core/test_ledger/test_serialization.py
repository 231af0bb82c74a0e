"""Tests for stakeledger/core/ledger/state.py: construction and dict round-trips."""

import pytest

from stakeledger.core.ledger import (
    Action,
    ActionParams,
    RateSchedule,
    Tier,
    initial_state,
    state_from_dict,
    state_to_dict,
    step_or_raise,
)
from stakeledger.core.ledger.state import (
    POSITION_FIELDS,
    position_from_dict,
    position_to_dict,
    schedule_from_dict,
    schedule_to_dict,
)
from stakeledger.state.positions import Position, PositionStatus

T0 = 1_700_000_000
DAY = 86_400
SCHEDULE = RateSchedule(
    tiers=(Tier(30, 2 * 10**14), Tier(180, 4 * 10**14), Tier(1460, 10**15)),
    minimum_rate=5 * 10**13,
    period_for_minimum_rate=3,
)


def _busy_state():
    s = initial_state(SCHEDULE)
    for caller, amount, period in [("bob", 7, 180), ("alice", 10**18, 30), ("alice", 3 * 10**18, 1460)]:
        s = step_or_raise(s, ActionParams(Action.STAKE, caller, T0, amount=amount, period=period)).state
    s = step_or_raise(
        s, ActionParams(Action.WITHDRAW, "alice", T0 + 45 * DAY, amount=10**17, position_id=1),
    ).state
    return s


class TestInitialState:
    def test_empty(self):
        s = initial_state(SCHEDULE)
        assert s.next_id == 0
        assert s.positions == {}
        assert s.schedule is SCHEDULE


class TestRoundTrip:
    def test_initial(self):
        s = initial_state(SCHEDULE)
        assert state_from_dict(state_to_dict(s)) == s

    def test_busy(self):
        s = _busy_state()
        assert state_from_dict(state_to_dict(s)) == s

    def test_owners_sorted(self):
        d = state_to_dict(_busy_state())
        assert list(d["positions"]) == ["alice", "bob"]

    def test_closed_slot_serialized(self):
        d = state_to_dict(_busy_state())
        alice = d["positions"]["alice"]
        assert [p["id"] for p in alice] == [1, 2, 3]
        assert alice[0] == {"id": 1, "staked_amount": 0, "staking_period": 0, "start_time": 0, "status": "closed"}
        assert alice[2]["staking_period"] == 3

    def test_schedule(self):
        assert schedule_from_dict(schedule_to_dict(SCHEDULE)) == SCHEDULE

    def test_position_fields(self):
        p = Position(id=4, staked_amount=9, staking_period=30, start_time=T0)
        d = position_to_dict(p)
        assert tuple(d) == POSITION_FIELDS
        assert position_from_dict(d) == p


class TestRejects:
    def test_missing_field(self):
        d = state_to_dict(_busy_state())
        del d["next_id"]
        with pytest.raises(KeyError):
            state_from_dict(d)

    def test_string_amount(self):
        d = position_to_dict(Position(id=0, staked_amount=1, staking_period=30, start_time=0))
        d["staked_amount"] = "1"
        with pytest.raises(TypeError):
            position_from_dict(d)

    def test_bool_rejected(self):
        d = schedule_to_dict(SCHEDULE)
        d["minimum_rate"] = True
        with pytest.raises(TypeError):
            schedule_from_dict(d)

    def test_unknown_status(self):
        d = position_to_dict(Position(id=0, staked_amount=1, staking_period=30, start_time=0))
        d["status"] = "pending"
        with pytest.raises(ValueError):
            position_from_dict(d)

    def test_positions_not_mapping(self):
        d = state_to_dict(initial_state(SCHEDULE))
        d["positions"] = []
        with pytest.raises(TypeError):
            state_from_dict(d)

    def test_status_enum_value(self):
        assert PositionStatus("active") is PositionStatus.ACTIVE
