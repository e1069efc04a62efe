from __future__ import annotations

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from reflection.errors import ConfigurationMissing, InvalidAmount
from reflection.rates import U128_MAX, WAD, Rate, RateConfig
from reflection.token.tax import compute_tax


def test_reference_breakdown() -> None:
    rates = RateConfig.of(tax_rate="0.10", reflection_rate="0.5", burn_rate="0.1")
    b = compute_tax(100_000, rates)
    assert b.taxed_amount == 10_000
    assert b.after_tax == 90_000
    assert b.reflection_amount == 5_000
    assert b.burn_amount == 1_000
    assert b.liquidity_amount == 4_000


def test_zero_tax_rate_withholds_nothing() -> None:
    b = compute_tax(12_345, RateConfig())
    assert b.taxed_amount == 0
    assert b.after_tax == 12_345
    assert (b.reflection_amount, b.burn_amount, b.liquidity_amount) == (0, 0, 0)


def test_small_amounts_floor_to_zero_tax() -> None:
    rates = RateConfig.of(tax_rate="0.1", reflection_rate="0.5", burn_rate="0.1")
    b = compute_tax(9, rates)
    assert b.taxed_amount == 0 and b.after_tax == 9


def test_floor_leaves_remainder_in_liquidity() -> None:
    rates = RateConfig.of(tax_rate="1", reflection_rate="0.5", burn_rate="0.5")
    b = compute_tax(3, rates)
    assert (b.reflection_amount, b.burn_amount, b.liquidity_amount) == (1, 1, 1)


def test_missing_rates() -> None:
    with pytest.raises(ConfigurationMissing):
        compute_tax(100, None)


def test_negative_amount() -> None:
    with pytest.raises(InvalidAmount):
        compute_tax(-1, RateConfig())


# --------------------------- Properties ---------------------------

_tax = st.integers(min_value=0, max_value=WAD)
_split = st.integers(min_value=0, max_value=WAD).flatmap(
    lambda r: st.tuples(st.just(r), st.integers(min_value=0, max_value=WAD - r))
)


@settings(max_examples=300, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(amount=st.integers(min_value=0, max_value=U128_MAX), tax=_tax, split=_split)
def test_breakdown_sums_hold(amount: int, tax: int, split) -> None:
    refl, burn = split
    rates = RateConfig(tax_rate=Rate(tax), reflection_rate=Rate(refl), burn_rate=Rate(burn))
    b = compute_tax(amount, rates)

    assert b.after_tax + b.taxed_amount == amount
    assert b.reflection_amount + b.burn_amount + b.liquidity_amount == b.taxed_amount
    assert b.liquidity_amount >= 0
    assert b.taxed_amount == amount * tax // WAD
