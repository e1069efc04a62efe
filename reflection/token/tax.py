from __future__ import annotations
"""
Tax computation for taxed transfers.

Pure function: amount + RateConfig -> TaxBreakdown. Every rate application
floors, so

    reflection_amount + burn_amount <= taxed_amount
    liquidity_amount = taxed_amount - reflection_amount - burn_amount >= 0

whenever reflection_rate + burn_rate <= 1.

Example
-------
>>> rates = RateConfig.of(tax_rate="0.10", reflection_rate="0.5", burn_rate="0.1")
>>> compute_tax(100_000, rates)
TaxBreakdown(amount=100000, taxed_amount=10000, after_tax=90000, reflection_amount=5000, burn_amount=1000, liquidity_amount=4000)
"""


from dataclasses import asdict, dataclass
from typing import Dict, Optional

from ..errors import ConfigurationMissing, LiquifyInvariantError
from ..rates import RateConfig, require_amount


@dataclass(frozen=True)
class TaxBreakdown:
    amount: int
    taxed_amount: int
    after_tax: int
    reflection_amount: int
    burn_amount: int
    liquidity_amount: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def compute_tax(amount: int, rates: Optional[RateConfig]) -> TaxBreakdown:
    if rates is None:
        raise ConfigurationMissing("tax rates")
    require_amount(amount)

    taxed = rates.tax_rate.mul_floor(amount)
    reflection = rates.reflection_rate.mul_floor(taxed)
    burn = rates.burn_rate.mul_floor(taxed)
    liquidity = taxed - reflection - burn
    if liquidity < 0:
        raise LiquifyInvariantError(
            "reflection + burn exceed the taxed amount",
            details={"taxed": taxed, "reflection": reflection, "burn": burn},
        )

    return TaxBreakdown(
        amount=amount,
        taxed_amount=taxed,
        after_tax=amount - taxed,
        reflection_amount=reflection,
        burn_amount=burn,
        liquidity_amount=liquidity,
    )


__all__ = ["TaxBreakdown", "compute_tax"]
