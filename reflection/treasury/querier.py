from __future__ import annotations
"""
Read-only queries the treasury issues against other contracts.

The treasury never prices swaps or mints liquidity shares itself; it asks the
AMM pair and the token for what it needs. Concrete queriers are provided by
the host (or by tests). `TokenBackedQuerier` answers the token-side queries
from an in-process `ReflectionToken` and forwards AMM queries to another
querier. `StaticQuerier` is a constant-price stand-in for devnet tooling.
"""


from typing import Dict, Optional, Protocol, Sequence, Tuple

from ..assets import Asset, AssetInfo, PairInfo, require_pair
from ..errors import ConfigurationMissing
from ..rates import Rate, RateConfig, RateLike


class Querier(Protocol):
    """
    Methods:
        simulate_swap(pair_contract, offer_asset) -> int
            Predicted return amount of the other asset for `offer_asset`.

        pair_info(pair_contract) -> PairInfo
            Canonical asset ordering and liquidity share token of a pair.

        balance_of(token, address) -> int
            Token balance of `address`.

        query_rates(token) -> RateConfig
            The token's currently configured rates.
    """

    def simulate_swap(self, pair_contract: str, offer_asset: Asset) -> int: ...

    def pair_info(self, pair_contract: str) -> PairInfo: ...

    def balance_of(self, token: str, address: str) -> int: ...

    def query_rates(self, token: str) -> RateConfig: ...


class TokenBackedQuerier:
    """Token queries from a local ReflectionToken; AMM queries from `amm`."""

    def __init__(self, token, amm: Querier) -> None:
        self.token = token
        self.amm = amm

    def _is_local(self, token: str) -> bool:
        return token == self.token.state.token_address

    def simulate_swap(self, pair_contract: str, offer_asset: Asset) -> int:
        return self.amm.simulate_swap(pair_contract, offer_asset)

    def pair_info(self, pair_contract: str) -> PairInfo:
        return self.amm.pair_info(pair_contract)

    def balance_of(self, token: str, address: str) -> int:
        if self._is_local(token):
            return self.token.balance_of(address)
        return self.amm.balance_of(token, address)

    def query_rates(self, token: str) -> RateConfig:
        if not self._is_local(token):
            return self.amm.query_rates(token)
        if self.token.state.rates is None:
            raise ConfigurationMissing("tax rates")
        return self.token.state.rates


class StaticQuerier:
    """
    In-memory collaborator for devnet tooling and tests.

    Every pair swaps at a constant price: offering `n` of the pair's first
    asset returns floor(n * price) of the second. Balances and rates are plain
    dictionaries filled in by the caller. Unknown pairs and tokens raise
    `ConfigurationMissing`.
    """

    def __init__(self) -> None:
        self.pairs: Dict[str, PairInfo] = {}
        self.prices: Dict[str, Rate] = {}
        self.balances: Dict[Tuple[str, str], int] = {}
        self.rates: Dict[str, RateConfig] = {}
        self.swaps: list = []

    def add_pair(
        self,
        contract: str,
        assets: Sequence[AssetInfo],
        liquidity_token: str,
        price: RateLike = "1",
    ) -> PairInfo:
        info = PairInfo(asset_infos=require_pair(assets), contract_addr=contract, liquidity_token=liquidity_token)
        self.pairs[contract] = info
        self.prices[contract] = Rate.parse(price)
        return info

    def set_balance(self, token: str, address: str, amount: int) -> None:
        self.balances[(token, address)] = int(amount)

    def set_rates(self, token: str, rates: Optional[RateConfig]) -> None:
        if rates is None:
            self.rates.pop(token, None)
        else:
            self.rates[token] = rates

    def simulate_swap(self, pair_contract: str, offer_asset: Asset) -> int:
        if pair_contract not in self.prices:
            raise ConfigurationMissing(f"pair {pair_contract}")
        self.swaps.append((pair_contract, offer_asset))
        return self.prices[pair_contract].mul_floor(offer_asset.amount)

    def pair_info(self, pair_contract: str) -> PairInfo:
        if pair_contract not in self.pairs:
            raise ConfigurationMissing(f"pair {pair_contract}")
        return self.pairs[pair_contract]

    def balance_of(self, token: str, address: str) -> int:
        return self.balances.get((token, address), 0)

    def query_rates(self, token: str) -> RateConfig:
        if token not in self.rates:
            raise ConfigurationMissing("tax rates")
        return self.rates[token]


__all__ = ["Querier", "TokenBackedQuerier", "StaticQuerier"]
