# -*- coding: utf-8 -*-
"""
Tests for lbc_contracts.stdlib.math.fixed_point (bonding-curve formulas).

Covers:
- ln/exp/power primitives against known values and their rounding direction
- purchase_return / sale_return edge cases and domain errors
- the worked example: supply 10, ratio 0.5, two deposits of 10
- accuracy against float math for large operands
- properties (hypothesis): buy-then-sell never profits, refunds stay within
  the reserve, minted amounts stay under the linear bound, full sale returns
  the whole reserve, ratio 1 is exactly linear
"""
from __future__ import annotations

import math

import pytest
from hypothesis import given, settings, strategies as st

from lbc_contracts.stdlib.math import PPM
from lbc_contracts.stdlib.math.fixed_point import (FIXED_1, FIXED_2, LN2_CEIL,
                                                   LN2_FLOOR, MAX_EXP,
                                                   MAX_PRECISION,
                                                   CurveDomainError,
                                                   fixed_exp, fixed_ln, power,
                                                   purchase_return,
                                                   sale_return)

ETHER = 10**18

# ----------------------------------------------------------------------------
# Primitives
# ----------------------------------------------------------------------------


def test_ln2_bounds_bracket_ln2():
    assert LN2_FLOOR < LN2_CEIL
    assert LN2_CEIL - LN2_FLOOR < 256
    approx = LN2_FLOOR / FIXED_1
    assert abs(approx - math.log(2)) < 1e-15


def test_fixed_ln_of_one_is_zero():
    assert fixed_ln(7, 7) == 0


def test_fixed_ln_of_two_is_ln2_floor():
    assert fixed_ln(2, 1) == LN2_FLOOR
    assert fixed_ln(10, 5) == LN2_FLOOR


def test_fixed_ln_matches_float():
    for n, d in [(3, 2), (11, 10), (1000, 1), (10**30 + 1, 10**30)]:
        got = fixed_ln(n, d) / FIXED_1
        assert got == pytest.approx(math.log(n / d), rel=1e-12, abs=1e-25)


def test_fixed_ln_rejects_base_below_one():
    with pytest.raises(CurveDomainError):
        fixed_ln(1, 2)
    with pytest.raises(CurveDomainError):
        fixed_ln(1, 0)


def test_fixed_exp_of_zero_is_one():
    assert fixed_exp(0) == FIXED_1


def test_fixed_exp_matches_float():
    for x in (0.25, 1.0, 2.5, 10.0):
        got = fixed_exp(int(x * FIXED_1)) / FIXED_1
        assert got == pytest.approx(math.exp(x), rel=1e-12)


def test_fixed_exp_clamps_large_arguments():
    assert fixed_exp(MAX_EXP + 12345) == fixed_exp(MAX_EXP)
    with pytest.raises(CurveDomainError):
        fixed_exp(-1)


def test_power_square_root_of_four():
    # floor-biased: sqrt(4) can only come out at or slightly below 2.0
    r = power(4, 1, 1, 2)
    assert r <= FIXED_2
    assert FIXED_2 - r < 1 << 16


def test_power_of_unit_base_is_one():
    assert power(5, 5, 3, 7) == FIXED_1


def test_power_rejects_bad_exponent():
    with pytest.raises(CurveDomainError):
        power(2, 1, 1, 0)
    with pytest.raises(CurveDomainError):
        power(2, 1, -1, 2)


# ----------------------------------------------------------------------------
# purchase_return
# ----------------------------------------------------------------------------


def test_purchase_worked_example_decreases():
    # supply 10, ratio 0.5. First deposit of 10 prices against reserve 10.
    first = purchase_return(10, 10, 500_000, 10)
    assert first == 4  # 10 * (sqrt(2) - 1) = 4.14
    second = purchase_return(10 + first, 10, 500_000, 20)
    assert second == 3  # 14 * (sqrt(1.5) - 1) = 3.15
    assert second < first


def test_purchase_zero_deposit_returns_zero():
    assert purchase_return(10 * ETHER, 0, 500_000, ETHER) == 0


def test_purchase_full_ratio_is_linear():
    assert purchase_return(1000, 50, PPM, 200) == 250
    assert purchase_return(7, 1, PPM, 3) == 2


@pytest.mark.parametrize(
    "args",
    [
        (0, 10, 500_000, 10),  # empty supply
        (10, 10, 500_000, 0),  # empty reserve
        (10, 10, 0, 10),  # ratio zero
        (10, 10, PPM + 1, 10),  # ratio above 100%
        (-1, 10, 500_000, 10),
        (10, 1 << 256, 500_000, 10),
        (10, True, 500_000, 10),
    ],
)
def test_purchase_domain_errors(args):
    with pytest.raises(CurveDomainError):
        purchase_return(*args)


def test_purchase_matches_float_for_large_values():
    supply, deposit, reserve = 1_000_000 * ETHER, 250 * ETHER, 40_000 * ETHER
    for ratio in (100_000, 333_333, 500_000, 900_000):
        got = purchase_return(supply, deposit, ratio, reserve)
        exact = supply * ((1 + deposit / reserve) ** (ratio / PPM) - 1)
        assert got == pytest.approx(exact, rel=1e-6)
        assert got <= exact * (1 + 1e-12)


# ----------------------------------------------------------------------------
# sale_return
# ----------------------------------------------------------------------------


def test_sale_all_returns_whole_reserve():
    assert sale_return(17, 17, 500_000, 20) == 20
    assert sale_return(10 * ETHER, 10 * ETHER, 123_456, 3 * ETHER + 7) == 3 * ETHER + 7


def test_sale_nothing_returns_zero():
    assert sale_return(17, 0, 500_000, 20) == 0


def test_sale_small_example():
    # 20 * (1 - (14 / 17) ** 2) = 6.44
    assert sale_return(17, 3, 500_000, 20) == 6


def test_sale_full_ratio_is_linear():
    assert sale_return(1000, 250, PPM, 200) == 50


def test_sale_matches_float_for_large_values():
    supply, reserve = 1_000_000 * ETHER, 40_000 * ETHER
    sell = 12_345 * ETHER
    for ratio in (100_000, 500_000, 750_000):
        got = sale_return(supply, sell, ratio, reserve)
        exact = reserve * (1 - (1 - sell / supply) ** (PPM / ratio))
        assert got == pytest.approx(exact, rel=1e-6)


@pytest.mark.parametrize(
    "args",
    [
        (10, 11, 500_000, 10),  # sells more than exists
        (0, 0, 500_000, 10),
        (10, 1, 500_000, 0),
        (10, 1, 0, 10),
    ],
)
def test_sale_domain_errors(args):
    with pytest.raises(CurveDomainError):
        sale_return(*args)


# ----------------------------------------------------------------------------
# Properties
# ----------------------------------------------------------------------------

AMOUNT = st.integers(min_value=1, max_value=10**30)
RATIO = st.integers(min_value=1, max_value=PPM)


@settings(max_examples=150, deadline=None)
@given(supply=AMOUNT, deposit=AMOUNT, reserve=AMOUNT, ratio=RATIO)
def test_buy_then_sell_never_profits(supply, deposit, reserve, ratio):
    minted = purchase_return(supply, deposit, ratio, reserve)
    if minted == 0:
        return
    refund = sale_return(supply + minted, minted, ratio, reserve + deposit)
    assert refund <= deposit


@settings(max_examples=150, deadline=None)
@given(supply=AMOUNT, deposit=AMOUNT, reserve=AMOUNT, ratio=RATIO)
def test_purchase_below_linear_bound(supply, deposit, reserve, ratio):
    # (1 + x) ** r - 1 <= r * x for 0 < r <= 1
    minted = purchase_return(supply, deposit, ratio, reserve)
    assert minted * reserve * PPM <= supply * deposit * ratio


@settings(max_examples=150, deadline=None)
@given(data=st.data(), supply=AMOUNT, reserve=AMOUNT, ratio=RATIO)
def test_sale_bounded_by_reserve(data, supply, reserve, ratio):
    sell = data.draw(st.integers(min_value=0, max_value=supply))
    refund = sale_return(supply, sell, ratio, reserve)
    assert 0 <= refund <= reserve
    if sell == supply:
        assert refund == reserve


@settings(max_examples=100, deadline=None)
@given(supply=AMOUNT, deposit=AMOUNT, reserve=AMOUNT)
def test_full_ratio_purchase_is_exact_floor(supply, deposit, reserve):
    assert purchase_return(supply, deposit, PPM, reserve) == supply * deposit // reserve


@settings(max_examples=100, deadline=None)
@given(
    num=st.integers(min_value=1, max_value=1 << 200),
    extra=st.integers(min_value=0, max_value=1 << 200),
    exp_n=st.integers(min_value=1, max_value=PPM),
)
def test_power_never_below_one(num, extra, exp_n):
    r = power(num + extra, num, exp_n, PPM)
    assert r >= FIXED_1
    assert r.bit_length() <= MAX_PRECISION + 256
