from __future__ import annotations

"""
reflection.treasury.pairs
=========================

Binding and validation of the two AMM pairs the treasury trades through.

    liquidity pair   (token, quote)   where liquidity is provided
    reflection pair  (target, quote)  second hop of the reflection swap

Rules
-----
- Only the treasury admin may bind.
- Liquidity pair: assets[0] must be this token, token-typed (a native coin
  in that slot is rejected), and the pair contract must report a token-typed
  asset first.
- Quote assets (index 1) of both pairs must match once both are bound, in
  whichever order they are bound.
- Both assets must appear in the pair contract's reported ordering (set
  membership, order-independent). Guards against pointing at the wrong pool.

Everything is validated before anything is written: a rejected binding
leaves the previous bindings untouched. A successful liquidity binding
records the pool's liquidity share token so it can never be swept out by
`withdraw_token`.
"""

import logging
from typing import Sequence

from ..assets import AssetInfo, PairInfo, require_pair, validate_address
from ..errors import AssetNotInPair, InvalidAsset, MismatchedQuoteAsset, Unauthorized
from .querier import Querier
from .state import PairBinding, TreasuryState

log = logging.getLogger(__name__)


class PairConfigValidator:
    def __init__(self, state: TreasuryState, querier: Querier) -> None:
        self.state = state
        self.querier = querier

    def _ensure_admin(self, caller: str) -> None:
        if caller != self.state.config.admin:
            raise Unauthorized("not admin", caller=caller)

    @staticmethod
    def _check_membership(info: PairInfo, assets: Sequence[AssetInfo], amm_address: str) -> None:
        for i, asset in enumerate(assets):
            if not info.contains(asset):
                raise AssetNotInPair(index=i, asset=asset, pair_contract=amm_address)

    def bind_liquidity_pair(self, caller: str, assets: Sequence[AssetInfo], amm_address: str) -> PairBinding:
        self._ensure_admin(caller)
        validate_address(amm_address)
        pair = require_pair(assets)
        base, quote = pair

        if base.is_native:
            raise InvalidAsset("token should be a contract token, not a native coin")
        if base != AssetInfo.token(self.state.config.token_address):
            raise InvalidAsset(
                "asset_infos[0] must be the treasury's token",
                details={"expected": self.state.config.token_address, "actual": str(base)},
            )
        reflection = self.state.reflection
        if reflection is not None and reflection.quote != quote:
            raise MismatchedQuoteAsset(expected=reflection.quote, actual=quote)

        info = self.querier.pair_info(amm_address)
        if info.asset_infos[0].is_native:
            raise InvalidAsset("token should be a contract token, not a native coin")
        self._check_membership(info, pair, amm_address)

        binding = PairBinding(assets=pair, contract=amm_address)
        self.state.liquidity = binding
        self.state.liquidity_token = info.liquidity_token
        log.info("liquidity pair bound: %s/%s via %s (lp=%s)", base, quote, amm_address, info.liquidity_token)
        return binding

    def bind_reflection_pair(self, caller: str, assets: Sequence[AssetInfo], amm_address: str) -> PairBinding:
        self._ensure_admin(caller)
        validate_address(amm_address)
        pair = require_pair(assets)
        target, quote = pair

        liquidity = self.state.liquidity
        if liquidity is not None and liquidity.quote != quote:
            raise MismatchedQuoteAsset(expected=liquidity.quote, actual=quote)

        self._check_membership(self.querier.pair_info(amm_address), pair, amm_address)

        binding = PairBinding(assets=pair, contract=amm_address)
        self.state.reflection = binding
        log.info("reflection pair bound: %s/%s via %s", target, quote, amm_address)
        return binding


__all__ = ["PairConfigValidator"]
