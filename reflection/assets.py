from __future__ import annotations
"""
Addresses and AMM asset descriptors.

An AMM pair trades two assets. Each asset is either a *token* (a contract on
the ledger, identified by its address) or a *native* coin of the chain
(identified by its denom). Pair descriptors are ordered: for the pairs the
treasury binds, index 0 is the base asset and index 1 is the shared quote
asset.
"""


import re
from dataclasses import dataclass
from typing import Any, Dict, Literal, Tuple

from .errors import InvalidAddress, InvalidAsset
from .rates import require_amount

AssetKind = Literal["token", "native"]

# Lowercase, normalized form only (bech32 payloads, 0x-hex, or devnet labels).
_ADDRESS_RE = re.compile(r"^[a-z0-9][a-z0-9_.:\-]{2,127}$")
_DENOM_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9/:._\-]{1,127}$")


def validate_address(addr: Any) -> str:
    """Return `addr` if it is a well-formed, normalized address; raise otherwise."""
    if not isinstance(addr, str) or not _ADDRESS_RE.match(addr):
        raise InvalidAddress(addr)
    return addr


@dataclass(frozen=True)
class AssetInfo:
    kind: AssetKind
    value: str  # contract address for tokens, denom for native coins

    def __post_init__(self) -> None:
        if self.kind == "token":
            validate_address(self.value)
        elif self.kind == "native":
            if not isinstance(self.value, str) or not _DENOM_RE.match(self.value):
                raise InvalidAsset(f"invalid native denom {self.value!r}")
        else:
            raise InvalidAsset(f"unknown asset kind {self.kind!r}")

    @classmethod
    def token(cls, contract_addr: str) -> "AssetInfo":
        return cls("token", contract_addr)

    @classmethod
    def native(cls, denom: str) -> "AssetInfo":
        return cls("native", denom)

    @property
    def is_native(self) -> bool:
        return self.kind == "native"

    def to_dict(self) -> Dict[str, Any]:
        if self.kind == "token":
            return {"token": {"contract_addr": self.value}}
        return {"native_token": {"denom": self.value}}

    @classmethod
    def parse(cls, text: str) -> "AssetInfo":
        """Inverse of `str()`: "token:<address>" or "native:<denom>"."""
        kind, sep, value = str(text).partition(":")
        if not sep or kind not in ("token", "native"):
            raise InvalidAsset(f"expected token:<address> or native:<denom>, got {text!r}")
        return cls(kind, value)  # type: ignore[arg-type]

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AssetInfo":
        if "token" in d:
            return AssetInfo.token(d["token"]["contract_addr"])
        if "native_token" in d:
            return AssetInfo.native(d["native_token"]["denom"])
        raise InvalidAsset(f"cannot decode asset info from {d!r}")

    def __str__(self) -> str:
        return f"{self.kind}:{self.value}"


AssetPair = Tuple[AssetInfo, AssetInfo]


def require_pair(assets: Any) -> AssetPair:
    if not isinstance(assets, (tuple, list)) or len(assets) != 2:
        raise InvalidAsset("asset pair must have exactly two entries")
    a, b = assets
    if not isinstance(a, AssetInfo) or not isinstance(b, AssetInfo):
        raise InvalidAsset("asset pair entries must be AssetInfo")
    return (a, b)


@dataclass(frozen=True)
class Asset:
    info: AssetInfo
    amount: int

    def __post_init__(self) -> None:
        require_amount(self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {"info": self.info.to_dict(), "amount": str(self.amount)}


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {"denom": self.denom, "amount": str(self.amount)}


@dataclass(frozen=True)
class PairInfo:
    """What an AMM pair contract reports about itself."""

    asset_infos: AssetPair
    contract_addr: str
    liquidity_token: str

    def contains(self, info: AssetInfo) -> bool:
        return info in self.asset_infos


__all__ = [
    "AssetInfo",
    "AssetPair",
    "Asset",
    "Coin",
    "PairInfo",
    "require_pair",
    "validate_address",
]
