"""Tests for stakeledger/core/compounding.py: 64.64 fixed-point compounding."""

from fractions import Fraction

import pytest

from stakeledger.core.compounding import (
    MAX_64X64,
    MAX_UINT256,
    ONE_64X64,
    RATE_SCALE,
    compound,
    divu,
    growth_factor,
    mul_64x64,
    mulu,
    pow_64x64,
)
from stakeledger.core.errors import CompoundingOverflowError, StakingError

ETHER = 10**18
MIN_RATE = 5 * 10**13   # 0.005% / day
RATE_30 = 2 * 10**14    # 0.02% / day
RATE_180 = 4 * 10**14   # 0.04% / day
RATE_1460 = 10**15      # 0.1% / day


def exact(rate: int, principal: int, days: int) -> Fraction:
    return Fraction(principal) * (1 + Fraction(rate, RATE_SCALE)) ** days


# ---------------------------------------------------------------------------
# 64.64 primitives
# ---------------------------------------------------------------------------

class TestDivu:
    def test_one(self):
        assert divu(1, 1) == ONE_64X64

    def test_half(self):
        assert divu(1, 2) == ONE_64X64 // 2

    def test_truncates(self):
        # 1/3 is not representable; result is floor(2**64 / 3)
        assert divu(1, 3) == (1 << 64) // 3

    def test_zero_divisor(self):
        with pytest.raises(ZeroDivisionError):
            divu(1, 0)

    def test_overflow(self):
        with pytest.raises(CompoundingOverflowError):
            divu(1 << 64, 1)


class TestMul64x64:
    def test_identity(self):
        x = ONE_64X64 + 12345
        assert mul_64x64(x, ONE_64X64) == x

    def test_truncates(self):
        # (1 + 2**-64)^2 = 1 + 2**-63 + 2**-128 -> the 2**-128 term is dropped
        x = ONE_64X64 + 1
        assert mul_64x64(x, x) == ONE_64X64 + 2

    def test_overflow(self):
        big = 1 << 100
        with pytest.raises(CompoundingOverflowError):
            mul_64x64(big, big)


class TestPow64x64:
    def test_zero_exponent(self):
        assert pow_64x64(ONE_64X64 * 7, 0) == ONE_64X64

    def test_one_exponent(self):
        x = ONE_64X64 + 999
        assert pow_64x64(x, 1) == x

    def test_integer_base(self):
        assert pow_64x64(2 * ONE_64X64, 10) == 1024 * ONE_64X64

    def test_exact_one(self):
        assert pow_64x64(ONE_64X64, 10_000) == ONE_64X64

    def test_overflow(self):
        # 2**63 does not fit below 2**127 / 2**64 = 2**63
        with pytest.raises(CompoundingOverflowError):
            pow_64x64(2 * ONE_64X64, 63)

    def test_largest_fitting_power(self):
        assert pow_64x64(2 * ONE_64X64, 62) == (1 << 62) * ONE_64X64


class TestMulu:
    def test_one(self):
        assert mulu(ONE_64X64, 12345) == 12345

    def test_half_truncates(self):
        assert mulu(ONE_64X64 // 2, 7) == 3

    def test_overflow(self):
        with pytest.raises(CompoundingOverflowError):
            mulu(2 * ONE_64X64, MAX_UINT256)


# ---------------------------------------------------------------------------
# compound
# ---------------------------------------------------------------------------

class TestCompoundIdentity:
    @pytest.mark.parametrize("rate", [0, 1, MIN_RATE, RATE_30, RATE_1460, RATE_SCALE])
    def test_zero_days_returns_principal(self, rate):
        assert compound(rate, 1000 * ETHER, 0) == 1000 * ETHER

    @pytest.mark.parametrize("days", [1, 30, 180, 1460])
    def test_zero_rate_returns_principal(self, days):
        assert compound(0, 1000 * ETHER, days) == 1000 * ETHER

    def test_zero_principal(self):
        assert compound(RATE_30, 0, 30) == 0


class TestCompoundValues:
    def test_one_day_matches_formula(self):
        p = 1000 * ETHER
        base = ONE_64X64 + (RATE_30 << 64) // RATE_SCALE
        assert compound(RATE_30, p, 1) == (base * p) >> 64

    @pytest.mark.parametrize(
        "rate,days",
        [(RATE_30, 30), (RATE_180, 180), (RATE_1460, 1460), (MIN_RATE, 1), (MIN_RATE, 365)],
    )
    def test_never_above_exact_and_close(self, rate, days):
        p = 1000 * ETHER
        got = compound(rate, p, days)
        ref = exact(rate, p, days)
        assert got <= ref
        # relative error well under 1e-15
        assert ref - got < ref / 10**15 + 1

    def test_thirty_day_tier_order_of_magnitude(self):
        # 1000 * 1.0002^30 ~= 1006.0174
        got = compound(RATE_30, 1000 * ETHER, 30)
        assert 1006_017 * 10**15 < got < 1006_018 * 10**15

    def test_growth_factor_is_one_for_zero_days(self):
        assert growth_factor(RATE_1460, 0) == ONE_64X64

    def test_monotone_in_days(self):
        p = 12_345 * ETHER
        values = [compound(MIN_RATE, p, d) for d in range(0, 200)]
        assert values == sorted(values)
        assert values[-1] > values[0]

    def test_monotone_in_rate(self):
        p = 500 * ETHER
        assert compound(MIN_RATE, p, 30) < compound(RATE_30, p, 30) < compound(RATE_180, p, 30)


class TestCompoundRejects:
    def test_negative_principal(self):
        with pytest.raises(ValueError):
            compound(RATE_30, -1, 1)

    def test_negative_days(self):
        with pytest.raises(ValueError):
            compound(RATE_30, 1, -1)

    def test_negative_rate(self):
        with pytest.raises(ValueError):
            compound(-1, 1, 1)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            compound(RATE_30, True, 1)

    def test_overflow_on_pathological_days(self):
        # 100%/day doubles daily; 2**63 days-worth of doubling cannot fit
        with pytest.raises(CompoundingOverflowError):
            compound(RATE_SCALE, 1, 64)

    def test_overflow_is_a_staking_error(self):
        with pytest.raises(StakingError):
            compound(RATE_SCALE, 1, 10_000)

    def test_result_above_uint256(self):
        with pytest.raises(CompoundingOverflowError):
            compound(RATE_SCALE, MAX_UINT256, 1)

    def test_principal_above_uint256(self):
        with pytest.raises(CompoundingOverflowError):
            compound(0, MAX_UINT256 + 1, 0)

    def test_max_constant(self):
        assert MAX_64X64 == (1 << 127) - 1
