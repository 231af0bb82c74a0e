from __future__ import annotations

import pytest

from stakeledger.state.balances import BalanceTable, InsufficientBalanceError

ASSET = "0xasset"


def test_missing_balance_is_zero() -> None:
    assert BalanceTable().get("alice", ASSET) == 0


def test_zero_balances_are_not_stored() -> None:
    t = BalanceTable()
    t.credit("alice", ASSET, 5)
    t.debit("alice", ASSET, 5)
    assert t.get("alice", ASSET) == 0
    assert repr(t) == "BalanceTable(0 entries)"


def test_set_rejects_negative_and_non_int() -> None:
    t = BalanceTable()
    with pytest.raises(ValueError):
        t.set("alice", ASSET, -1)
    with pytest.raises(TypeError):
        t.set("alice", ASSET, 1.5)  # type: ignore[arg-type]


def test_debit_beyond_balance_leaves_table_unchanged() -> None:
    t = BalanceTable()
    t.credit("alice", ASSET, 3)
    with pytest.raises(InsufficientBalanceError) as exc:
        t.debit("alice", ASSET, 4)
    assert exc.value.balance == 3
    assert exc.value.requested == 4
    assert t.get("alice", ASSET) == 3


def test_transfer_conserves_supply() -> None:
    t = BalanceTable()
    t.credit("alice", ASSET, 100)
    t.credit("bob", "0xother", 7)
    t.transfer("alice", "custody", ASSET, 60)
    assert t.get("alice", ASSET) == 40
    assert t.get("custody", ASSET) == 60
    assert t.get("bob", "0xother") == 7
    assert t.get("bob", ASSET) == 0


def test_failed_transfer_moves_nothing() -> None:
    t = BalanceTable()
    t.credit("alice", ASSET, 10)
    with pytest.raises(InsufficientBalanceError):
        t.transfer("alice", "custody", ASSET, 11)
    assert t.get("alice", ASSET) == 10
    assert t.get("custody", ASSET) == 0
