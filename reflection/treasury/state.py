from __future__ import annotations

"""
Treasury state: configuration and bound AMM pairs
--------------------------------------------------

`TreasuryConfig` holds the treasury's wiring (router, token, admin, its own
address) and liquify policy (minimum amount, last trigger time).
`PairBinding` ties an ordered asset pair to the AMM pair contract that trades
it. `TreasuryState` groups both bindings and the liquidity share token that
the liquidity pair reported when it was bound.

Binding conventions
~~~~~~~~~~~~~~~~~~~
liquidity pair   (the token itself, quote asset)
reflection pair  (reflection target asset, quote asset)

The quote asset must be the same for both once both are bound.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ..assets import AssetPair
from ..errors import ConfigurationMissing


@dataclass
class TreasuryConfig:
    router_address: str
    token_address: str
    admin: str
    treasury_address: str
    min_liquify_amount: int = 0
    last_liquify_timestamp: int = 0


@dataclass(frozen=True)
class PairBinding:
    assets: AssetPair
    contract: str

    @property
    def base(self):
        return self.assets[0]

    @property
    def quote(self):
        return self.assets[1]


@dataclass
class TreasuryState:
    config: TreasuryConfig
    liquidity: Optional[PairBinding] = None
    reflection: Optional[PairBinding] = None
    liquidity_token: Optional[str] = None

    def require_liquidity(self) -> PairBinding:
        if self.liquidity is None:
            raise ConfigurationMissing("liquidity pair")
        return self.liquidity

    def require_reflection(self) -> PairBinding:
        if self.reflection is None:
            raise ConfigurationMissing("reflection pair")
        return self.reflection

    def snapshot(self) -> Dict[str, Any]:
        # bindings are frozen; the config is copied by value
        return {
            "config": asdict(self.config),
            "liquidity": self.liquidity,
            "reflection": self.reflection,
            "liquidity_token": self.liquidity_token,
        }

    def restore(self, snap: Dict[str, Any]) -> None:
        # in place: the throttle holds a reference to this config object
        for k, v in snap["config"].items():
            setattr(self.config, k, v)
        self.liquidity = snap["liquidity"]
        self.reflection = snap["reflection"]
        self.liquidity_token = snap["liquidity_token"]


__all__ = ["TreasuryConfig", "PairBinding", "TreasuryState"]
