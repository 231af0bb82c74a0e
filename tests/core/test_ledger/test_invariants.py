"""Tests for stakeledger/core/ledger/invariants.py."""

from dataclasses import replace

from stakeledger.core.ledger import (
    Action,
    ActionParams,
    RateSchedule,
    Tier,
    initial_state,
    step_or_raise,
)
from stakeledger.core.ledger.invariants import (
    INVARIANT_REGISTRY,
    check_all,
    inv_active_amount_positive,
    inv_active_period_valid,
    inv_closed_zeroed,
    inv_ids_below_counter,
    inv_ids_increasing_per_owner,
    inv_ids_unique,
)
from stakeledger.state.positions import Position, PositionSet, PositionStatus

T0 = 1_700_000_000
SCHEDULE = RateSchedule(
    tiers=(Tier(30, 2 * 10**14), Tier(180, 4 * 10**14), Tier(1460, 10**15)),
    minimum_rate=5 * 10**13,
)


def _state(next_id, **owners):
    return replace(
        initial_state(SCHEDULE),
        next_id=next_id,
        positions={o: PositionSet(tuple(ps)) for o, ps in owners.items()},
    )


def _p(id, amount=100, period=30, start=T0, status=PositionStatus.ACTIVE):
    return Position(id=id, staked_amount=amount, staking_period=period, start_time=start, status=status)


class TestRegistry:
    def test_all_registered(self):
        assert set(INVARIANT_REGISTRY) == {
            "inv_ids_unique",
            "inv_ids_below_counter",
            "inv_ids_increasing_per_owner",
            "inv_active_amount_positive",
            "inv_active_period_valid",
            "inv_closed_zeroed",
        }

    def test_initial_state_clean(self):
        assert check_all(initial_state(SCHEDULE)) == []

    def test_after_operations_clean(self):
        s = initial_state(SCHEDULE)
        s = step_or_raise(s, ActionParams(Action.STAKE, "a", T0, amount=10**18, period=30)).state
        s = step_or_raise(s, ActionParams(Action.STAKE, "b", T0, amount=5, period=180)).state
        s = step_or_raise(
            s, ActionParams(Action.WITHDRAW, "a", T0 + 40 * 86_400, amount=10**17, position_id=0),
        ).state
        assert check_all(s) == []


class TestIdInvariants:
    def test_duplicate_across_owners(self):
        s = _state(2, a=[_p(0)], b=[_p(0)])
        assert not inv_ids_unique(s)
        assert "inv_ids_unique" in check_all(s)

    def test_id_at_counter(self):
        assert not inv_ids_below_counter(_state(1, a=[_p(1)]))

    def test_decreasing_within_owner(self):
        # PositionSet.append refuses this order, so build the tuple directly
        s = replace(initial_state(SCHEDULE), next_id=3, positions={"a": PositionSet((_p(2), _p(1)))})
        assert not inv_ids_increasing_per_owner(s)


class TestSlotInvariants:
    def test_active_zero_amount(self):
        assert not inv_active_amount_positive(_state(1, a=[_p(0, amount=0)]))

    def test_active_unknown_period(self):
        assert not inv_active_period_valid(_state(1, a=[_p(0, period=7)]))

    def test_active_minimum_period_allowed(self):
        assert inv_active_period_valid(_state(1, a=[_p(0, period=1)]))

    def test_closed_must_be_zeroed(self):
        dirty = _p(0, status=PositionStatus.CLOSED)
        assert not inv_closed_zeroed(_state(1, a=[dirty]))
        assert inv_closed_zeroed(_state(1, a=[_p(0).closed()]))

    def test_closed_slot_ignored_by_amount_checks(self):
        s = _state(1, a=[_p(0).closed()])
        assert check_all(s) == []
