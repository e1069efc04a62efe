# -*- coding: utf-8 -*-
"""
reflection.rates
================

Fixed-point rates and the token's tax-rate configuration.

Rates are decimal fractions with 18 fractional digits (the "wad" scale), held
as an integer count of atomics. Applying a rate to a token amount is always
``floor(amount * atomics / 1e18)``: truncation happens on every application,
never rounding, so split legs computed from the same base can only sum to at
most that base.

Floats are rejected on input; use strings, ``Decimal`` or ints.

Examples
--------
    >>> r = Rate.parse("0.1")
    >>> r.mul_floor(100_000)
    10000
    >>> RateConfig(tax_rate=Rate.parse("0.1"),
    ...            reflection_rate=Rate.parse("0.5"),
    ...            burn_rate=Rate.parse("0.1")).validate()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Final, Union

from .errors import InvalidAmount, RateOutOfRange

WAD: Final[int] = 10**18
DECIMAL_PLACES: Final[int] = 18
U128_MAX: Final[int] = (1 << 128) - 1

RateLike = Union["Rate", str, Decimal, int]


def require_amount(amount: Any, *, positive: bool = False) -> int:
    """Validate a token amount: int in [0, U128_MAX] (or (0, U128_MAX] if positive)."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(amount, "amount must be an integer")
    if amount < 0 or amount > U128_MAX:
        raise InvalidAmount(amount, "amount out of range")
    if positive and amount == 0:
        raise InvalidAmount(amount, "invalid zero amount")
    return amount


@dataclass(frozen=True, order=True)
class Rate:
    """A non-negative fixed-point fraction (18 decimals)."""

    atomics: int

    def __post_init__(self) -> None:
        if isinstance(self.atomics, bool) or not isinstance(self.atomics, int):
            raise RateOutOfRange(f"rate atomics must be int, got {type(self.atomics).__name__}")
        if self.atomics < 0:
            raise RateOutOfRange("rate must be non-negative", details={"atomics": self.atomics})

    @classmethod
    def parse(cls, value: RateLike) -> "Rate":
        if isinstance(value, Rate):
            return value
        if isinstance(value, float):
            raise RateOutOfRange("float rates are not accepted; pass a string or Decimal")
        try:
            d = Decimal(value) if not isinstance(value, Decimal) else value
        except (InvalidOperation, ValueError, TypeError) as e:
            raise RateOutOfRange(f"cannot parse rate {value!r}") from e
        if not d.is_finite():
            raise RateOutOfRange(f"rate must be finite, got {value!r}")
        scaled = d.scaleb(DECIMAL_PLACES)
        if scaled != scaled.to_integral_value():
            raise RateOutOfRange(
                f"rate {value!r} has more than {DECIMAL_PLACES} decimal places"
            )
        return cls(int(scaled))

    @classmethod
    def zero(cls) -> "Rate":
        return cls(0)

    @classmethod
    def one(cls) -> "Rate":
        return cls(WAD)

    def mul_floor(self, amount: int) -> int:
        """floor(amount * self)."""
        return (amount * self.atomics) // WAD

    def __add__(self, other: "Rate") -> "Rate":
        if not isinstance(other, Rate):
            return NotImplemented
        return Rate(self.atomics + other.atomics)

    def is_zero(self) -> bool:
        return self.atomics == 0

    def to_decimal(self) -> Decimal:
        return Decimal(self.atomics).scaleb(-DECIMAL_PLACES).normalize()

    def __str__(self) -> str:
        d = self.to_decimal()
        # normalize() may produce exponent form for whole numbers (e.g. 1E+1)
        return format(d, "f")


@dataclass(frozen=True)
class RateConfig:
    """
    The four tax parameters.

    tax_rate                  share of a taxed transfer withheld as tax
    reflection_rate           share of the tax (or treasury balance) reflected
    burn_rate                 share of the tax (or treasury balance) burned
    max_transfer_supply_rate  anti-whale threshold as a share of supply; stored
                              and validated, not enforced on transfers

    The liquidity share is the remainder ``1 - reflection_rate - burn_rate``.
    """

    tax_rate: Rate = field(default_factory=Rate.zero)
    reflection_rate: Rate = field(default_factory=Rate.zero)
    burn_rate: Rate = field(default_factory=Rate.zero)
    max_transfer_supply_rate: Rate = field(default_factory=Rate.one)

    @classmethod
    def of(
        cls,
        tax_rate: RateLike = 0,
        reflection_rate: RateLike = 0,
        burn_rate: RateLike = 0,
        max_transfer_supply_rate: RateLike = 1,
    ) -> "RateConfig":
        cfg = cls(
            tax_rate=Rate.parse(tax_rate),
            reflection_rate=Rate.parse(reflection_rate),
            burn_rate=Rate.parse(burn_rate),
            max_transfer_supply_rate=Rate.parse(max_transfer_supply_rate),
        )
        cfg.validate()
        return cfg

    def validate(self) -> None:
        one = Rate.one()
        if self.tax_rate > one:
            raise RateOutOfRange("global_rate must be <= 1", details={"tax_rate": str(self.tax_rate)})
        if self.reflection_rate + self.burn_rate > one:
            raise RateOutOfRange(
                "addition of reflection_rate & burn_rate must be <= 1",
                details={
                    "reflection_rate": str(self.reflection_rate),
                    "burn_rate": str(self.burn_rate),
                },
            )
        if self.max_transfer_supply_rate > one:
            raise RateOutOfRange(
                "max_transfer_supply_rate must be <= 1",
                details={"max_transfer_supply_rate": str(self.max_transfer_supply_rate)},
            )

    @property
    def liquidity_rate(self) -> Rate:
        return Rate(WAD - self.reflection_rate.atomics - self.burn_rate.atomics)

    def with_tax(self, tax_rate: RateLike, reflection_rate: RateLike, burn_rate: RateLike) -> "RateConfig":
        """Copy with a new rate triple; the anti-whale rate is carried over."""
        cfg = RateConfig(
            tax_rate=Rate.parse(tax_rate),
            reflection_rate=Rate.parse(reflection_rate),
            burn_rate=Rate.parse(burn_rate),
            max_transfer_supply_rate=self.max_transfer_supply_rate,
        )
        cfg.validate()
        return cfg

    def to_dict(self) -> Dict[str, str]:
        return {
            "tax_rate": str(self.tax_rate),
            "reflection_rate": str(self.reflection_rate),
            "burn_rate": str(self.burn_rate),
            "max_transfer_supply_rate": str(self.max_transfer_supply_rate),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "RateConfig":
        return RateConfig.of(
            tax_rate=str(d.get("tax_rate", "0")),
            reflection_rate=str(d.get("reflection_rate", "0")),
            burn_rate=str(d.get("burn_rate", "0")),
            max_transfer_supply_rate=str(d.get("max_transfer_supply_rate", "1")),
        )


__all__ = ["WAD", "U128_MAX", "Rate", "RateConfig", "require_amount"]
