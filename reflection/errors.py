from __future__ import annotations
# reflection/errors.py
"""
Error types for the reflection token core and its treasury planner. These are
lightweight, serializable, and safe to surface over logs or a host runtime.

Taxonomy:
- ValidationError      bad input (amounts, addresses, rates, asset pairs)
- AuthorizationError   caller is not the admin / trigger source is not the token
- StateError           configuration missing, protected token, broken invariant
- ResourceError        insufficient balance or allowance

Every error aborts the whole enclosing request; callers see the specific cause
and no state change survives (see reflection.runtime.Session.atomic).
"""


import json
from typing import Any, Dict, Mapping, Optional


class ReflectionError(Exception):
    """Base class for reflection domain errors."""

    code: str = "REFLECTION_ERROR"

    def __init__(self, message: str = "", *, details: Optional[Mapping[str, Any]] = None) -> None:
        self.message = message or self.__class__.__name__
        self.details = dict(details or {})
        super().__init__(self.__str__())

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.details:
            # Keep this compact and stable for logs
            packed = json.dumps(self.details, sort_keys=True, separators=(",", ":"), default=str)
            return f"{self.code}: {self.message} [{packed}]"
        return f"{self.code}: {self.message}"


# ----------------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------------


class ValidationError(ReflectionError):
    code = "VALIDATION_ERROR"


class InvalidAmount(ValidationError):
    """Zero, negative or non-integer token amount."""
    code = "INVALID_AMOUNT"

    def __init__(self, amount: Any, message: str = "amount must be a positive integer") -> None:
        super().__init__(message, details={"amount": amount})


class InvalidAddress(ValidationError):
    code = "INVALID_ADDRESS"

    def __init__(self, address: Any, message: str = "malformed address") -> None:
        super().__init__(message, details={"address": address})


class RateOutOfRange(ValidationError):
    code = "RATE_OUT_OF_RANGE"


class InvalidAsset(ValidationError):
    """Asset of the wrong type or identity for the slot it is bound to."""
    code = "INVALID_ASSET"


class MismatchedQuoteAsset(ValidationError):
    """
    The quote asset (index 1) of a pair being bound differs from the quote
    asset of the already-bound sibling pair.
    """
    code = "MISMATCHED_QUOTE_ASSET"

    def __init__(self, *, expected: Any, actual: Any) -> None:
        super().__init__(
            "asset_infos[1] do not match",
            details={"expected": str(expected), "actual": str(actual)},
        )


class AssetNotInPair(ValidationError):
    code = "ASSET_NOT_IN_PAIR"

    def __init__(self, *, index: int, asset: Any, pair_contract: str) -> None:
        super().__init__(
            f"asset_infos[{index}] is not valid",
            details={"asset": str(asset), "pair_contract": pair_contract},
        )


# ----------------------------------------------------------------------------
# Authorization
# ----------------------------------------------------------------------------


class AuthorizationError(ReflectionError):
    code = "AUTHORIZATION_ERROR"


class Unauthorized(AuthorizationError):
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "unauthorized", *, caller: Optional[str] = None) -> None:
        d: Dict[str, Any] = {}
        if caller is not None:
            d["caller"] = caller
        super().__init__(message, details=d)


# ----------------------------------------------------------------------------
# State
# ----------------------------------------------------------------------------


class StateError(ReflectionError):
    code = "STATE_ERROR"


class ConfigurationMissing(StateError):
    code = "CONFIGURATION_MISSING"

    def __init__(self, what: str) -> None:
        super().__init__(f"{what} is not configured", details={"missing": what})


class ProtectedToken(StateError):
    """The liquidity share token may not be swept out of the treasury."""
    code = "PROTECTED_TOKEN"

    def __init__(self, token: str) -> None:
        super().__init__("not allowed to withdraw LP", details={"token": token})


class LiquifyInvariantError(StateError):
    """reflect + burn exceeded the treasury balance; rates are misconfigured."""
    code = "LIQUIFY_INVARIANT"


# ----------------------------------------------------------------------------
# Resources
# ----------------------------------------------------------------------------


class ResourceError(ReflectionError):
    code = "RESOURCE_ERROR"


class InsufficientFunds(ResourceError):
    code = "INSUFFICIENT_FUNDS"

    def __init__(self, *, address: str, balance: int, required: int) -> None:
        super().__init__(
            "insufficient balance",
            details={"address": address, "balance": balance, "required": required},
        )


class BalanceOverflow(ResourceError):
    """A credit would push a balance past the u128 range."""
    code = "BALANCE_OVERFLOW"

    def __init__(self, *, address: str, balance: int, credit: int) -> None:
        super().__init__(
            "balance overflow",
            details={"address": address, "balance": balance, "credit": credit},
        )


class InsufficientAllowance(ResourceError):
    code = "INSUFFICIENT_ALLOWANCE"

    def __init__(self, *, owner: str, spender: str, allowance: int, required: int) -> None:
        super().__init__(
            "insufficient allowance",
            details={
                "owner": owner,
                "spender": spender,
                "allowance": allowance,
                "required": required,
            },
        )


__all__ = [
    "ReflectionError",
    "ValidationError",
    "InvalidAmount",
    "InvalidAddress",
    "RateOutOfRange",
    "InvalidAsset",
    "MismatchedQuoteAsset",
    "AssetNotInPair",
    "AuthorizationError",
    "Unauthorized",
    "StateError",
    "ConfigurationMissing",
    "ProtectedToken",
    "LiquifyInvariantError",
    "ResourceError",
    "InsufficientFunds",
    "InsufficientAllowance",
    "BalanceOverflow",
]
