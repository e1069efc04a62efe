# -*- coding: utf-8 -*-
"""
reflection.token.contract
=========================

Reflection token facade: the admin configuration surface, the four transfer
operations, and the read-only queries, all over an explicit `TokenState`.

Public interface
----------------
# admin (exact-match caller == admin)
set_tax_rate(caller, global_rate, reflection_rate, burn_rate) -> RateConfig
set_pair(caller, address, enabled) -> None
set_treasury(caller, address) -> None

# transfers (see reflection.token.ledger)
transfer(caller, recipient, amount) -> TransferResult
send(caller, contract, amount, payload=None) -> TransferResult
transfer_from(caller, owner, recipient, amount) -> TransferResult
send_from(caller, owner, contract, amount, payload=None) -> TransferResult

# base-token helpers
increase_allowance / decrease_allowance / burn

# queries
query_tax(amount) -> TaxBreakdown
query_rates() -> (tax, reflection, burn, max_transfer_supply)
query_pair(address) -> bool
balance_of(address) -> int

Notes
-----
- Rates are applied as floor-truncating fixed-point multiplications.
- The token never calls the treasury. Taxed transfers set
  `treasury_trigger_requested`; reflection.runtime decides what to do with it.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Tuple

from ..assets import validate_address
from ..errors import ConfigurationMissing, InvalidAmount, Unauthorized
from ..instructions import Hook
from ..rates import U128_MAX, Rate, RateConfig, RateLike, require_amount
from .ledger import TransferLedger, TransferResult
from .state import TokenState
from .tax import TaxBreakdown, compute_tax

log = logging.getLogger(__name__)


class ReflectionToken:
    def __init__(self, state: TokenState) -> None:
        self.state = state
        self.ledger = TransferLedger(state)

    # ------------------------------------------------------------------
    # Instantiation
    # ------------------------------------------------------------------

    @classmethod
    def instantiate(
        cls,
        *,
        token_address: str,
        admin: str,
        treasury: Optional[str] = None,
        initial_balances: Optional[Mapping[str, int]] = None,
        rates: Optional[RateConfig] = None,
        register_admin_as_pair: bool = True,
    ) -> "ReflectionToken":
        """
        Fresh token. Tax starts at zero (max-transfer-supply rate 1) unless
        `rates` is given. The admin starts flagged as a pair unless
        `register_admin_as_pair` is False.
        """
        validate_address(token_address)
        validate_address(admin)
        if treasury is not None:
            validate_address(treasury)
        if rates is not None:
            rates.validate()

        state = TokenState(
            token_address=token_address,
            admin=admin,
            treasury=treasury,
            rates=rates or RateConfig(),
        )
        if register_admin_as_pair:
            state.pairs.set(admin, True)
        for addr, amount in sorted((initial_balances or {}).items()):
            validate_address(addr)
            state.balances.credit(addr, amount)
            state.total_supply += amount
            if state.total_supply > U128_MAX:
                raise InvalidAmount(state.total_supply, "total supply exceeds u128")
        return cls(state)

    # ------------------------------------------------------------------
    # Admin surface
    # ------------------------------------------------------------------

    def _ensure_admin(self, caller: str) -> None:
        if caller != self.state.admin:
            raise Unauthorized("not admin", caller=caller)

    def set_tax_rate(
        self,
        caller: str,
        global_rate: RateLike,
        reflection_rate: RateLike,
        burn_rate: RateLike,
    ) -> RateConfig:
        """
        global_rate      0.1 taxes 10% of every taxed transfer
        reflection_rate  0.5 reflects 50% of the tax
        burn_rate        0.1 burns 10% of the tax
        """
        self._ensure_admin(caller)
        base = self.state.rates or RateConfig()
        new = base.with_tax(global_rate, reflection_rate, burn_rate)
        self.state.rates = new
        log.info("tax rates set: %s", new.to_dict())
        return new

    def set_pair(self, caller: str, address: str, enabled: bool) -> None:
        self._ensure_admin(caller)
        validate_address(address)
        self.state.pairs.set(address, enabled)
        log.info("pair %s %s", address, "enabled" if enabled else "disabled")

    def set_treasury(self, caller: str, address: str) -> None:
        self._ensure_admin(caller)
        self.state.treasury = validate_address(address)
        log.info("treasury set to %s", address)

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    def transfer(self, caller: str, recipient: str, amount: int) -> TransferResult:
        return self.ledger.transfer(caller, recipient, amount)

    def send(self, caller: str, contract: str, amount: int, payload: Hook = None) -> TransferResult:
        return self.ledger.send(caller, contract, amount, payload)

    def transfer_from(self, caller: str, owner: str, recipient: str, amount: int) -> TransferResult:
        return self.ledger.transfer_from(caller, owner, recipient, amount)

    def send_from(
        self, caller: str, owner: str, contract: str, amount: int, payload: Hook = None
    ) -> TransferResult:
        return self.ledger.send_from(caller, owner, contract, amount, payload)

    # ------------------------------------------------------------------
    # Base-token helpers
    # ------------------------------------------------------------------

    def increase_allowance(self, caller: str, spender: str, amount: int) -> int:
        validate_address(spender)
        return self.state.allowances.increase(caller, spender, amount)

    def decrease_allowance(self, caller: str, spender: str, amount: int) -> int:
        validate_address(spender)
        return self.state.allowances.decrease(caller, spender, amount)

    def burn(self, caller: str, amount: int) -> int:
        require_amount(amount, positive=True)
        self.state.balances.debit(caller, amount)
        self.state.total_supply -= amount
        return self.state.total_supply

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query_tax(self, amount: int) -> TaxBreakdown:
        return compute_tax(amount, self.state.rates)

    def query_rates(self) -> Tuple[Rate, Rate, Rate, Rate]:
        r = self.rates()
        return (r.tax_rate, r.reflection_rate, r.burn_rate, r.max_transfer_supply_rate)

    def rates(self) -> RateConfig:
        if self.state.rates is None:
            raise ConfigurationMissing("tax rates")
        return self.state.rates

    def query_pair(self, address: str) -> bool:
        return self.state.pairs.has(address)

    def balance_of(self, address: str) -> int:
        return self.state.balances.get(address)


__all__ = ["ReflectionToken"]
