from __future__ import annotations
"""
Treasury liquify planner.

The treasury accumulates the token's transfer tax. Liquifying converts that
balance three ways, using the token's *current* rates:

    reflect   = floor(balance * reflection_rate)   -> routed into the reflection asset
    burn      = floor(balance * burn_rate)         -> burned
    liquidity = balance - reflect - burn           -> half swapped, paired, deposited

Typical flow
------------
1) A taxed transfer asks for a trigger; the session's throttle lets it through.
2) `liquify(balance)` (or `liquify_now()` / `receive(...)`) returns the plan.
3) The host dispatches the instructions in order after the request completes.

Instruction order (only legs with a positive amount are emitted)
---------------------------------------------------------------
liquidity leg:
    IncreaseAllowance(token -> pair, keep)
    Send(token -> pair, swap, PairSwapHook())
    native quote:  ProvideLiquidity(pair, (keep, simulated), funds=[Coin])
    token quote:   IncreaseAllowance(quote -> pair, simulated)
                   ProvideLiquidity(pair, (keep, simulated))
reflection leg:
    Send(token -> router, reflect, RouterSwapHook([token->quote, quote->target]))
burn leg:
    Burn(token, burn)

`simulated` is the pair's predicted return for swapping `swap` of the token,
queried (never executed) while planning. The planner performs no IO of its
own and never writes the throttle timestamp.
"""


import logging
from typing import List, Sequence

from .. import metrics
from ..assets import Asset, AssetInfo, Coin, validate_address
from ..errors import LiquifyInvariantError, ProtectedToken, Unauthorized
from ..instructions import (Burn, Hook, IncreaseAllowance, Instruction, LiquifyHook,
                            PairSwapHook, ProvideLiquidity, RouterSwapHook, Send,
                            SwapOperation, Transfer)
from ..rates import require_amount
from .pairs import PairConfigValidator
from .querier import Querier
from .state import PairBinding, TreasuryState

log = logging.getLogger(__name__)


def _is_liquify_hook(payload: Hook) -> bool:
    if isinstance(payload, LiquifyHook):
        return True
    return isinstance(payload, dict) and payload == {"liquify": {}}


class TreasuryOrchestrator:
    def __init__(self, state: TreasuryState, querier: Querier) -> None:
        self.state = state
        self.querier = querier
        self.pairs = PairConfigValidator(state, querier)

    @property
    def config(self):
        return self.state.config

    def _ensure_admin(self, caller: str) -> None:
        if caller != self.config.admin:
            raise Unauthorized("not admin", caller=caller)

    # ------------------------------------------------------------------
    # Admin surface
    # ------------------------------------------------------------------

    def bind_liquidity_pair(self, caller: str, assets: Sequence[AssetInfo], amm_address: str) -> PairBinding:
        return self.pairs.bind_liquidity_pair(caller, assets, amm_address)

    def bind_reflection_pair(self, caller: str, assets: Sequence[AssetInfo], amm_address: str) -> PairBinding:
        return self.pairs.bind_reflection_pair(caller, assets, amm_address)

    def set_min_liquify(self, caller: str, amount: int) -> None:
        self._ensure_admin(caller)
        require_amount(amount)
        self.config.min_liquify_amount = int(amount)
        log.info("min liquify amount set to %d", amount)

    def withdraw_token(self, caller: str, token: str) -> List[Instruction]:
        """
        Sweep the treasury's whole balance of `token` to the admin. The
        liquidity share token of the bound pool is never withdrawable.
        """
        self._ensure_admin(caller)
        validate_address(token)
        if self.state.liquidity_token is not None and token == self.state.liquidity_token:
            raise ProtectedToken(token)
        amount = self.querier.balance_of(token, self.config.treasury_address)
        if amount <= 0:
            log.info("withdraw of %s skipped: treasury holds none", token)
            return []
        log.info("withdrawing %d of %s to %s", amount, token, caller)
        return [Transfer(contract=token, recipient=caller, amount=amount)]

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def receive(self, sender_contract: str, cw20_sender: str, amount: int, payload: Hook) -> List[Instruction]:
        """
        Token delivery notification. Only the bound token may deliver, and the
        only accepted payload is the liquify hook.
        """
        if sender_contract != self.config.token_address:
            raise Unauthorized("notification from unknown token", caller=sender_contract)
        if not _is_liquify_hook(payload):
            raise Unauthorized("unsupported notification payload", caller=sender_contract)
        log.debug("liquify requested by %s via notification (amount=%d)", cw20_sender, amount)
        return self.liquify_now()

    def liquify_now(self) -> List[Instruction]:
        return self.liquify(self.balance())

    def balance(self) -> int:
        return self.querier.balance_of(self.config.token_address, self.config.treasury_address)

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def liquify(self, treasury_token_balance: int) -> List[Instruction]:
        require_amount(treasury_token_balance)
        liquidity_pair = self.state.require_liquidity()
        reflection_pair = self.state.require_reflection()

        balance = int(treasury_token_balance)
        if balance < self.config.min_liquify_amount:
            log.debug("liquify skipped: balance %d below minimum %d", balance, self.config.min_liquify_amount)
            metrics.record_liquify("below_min")
            return []

        with metrics.timed(metrics.LIQUIFY_SECONDS):
            plan = self._plan(balance, liquidity_pair, reflection_pair)

        metrics.record_liquify("planned" if plan else "empty", plan)
        log.info("liquify planned for balance %d: %d instruction(s)", balance, len(plan))
        return plan

    def _plan(self, balance: int, liquidity_pair: PairBinding, reflection_pair: PairBinding) -> List[Instruction]:
        rates = self.querier.query_rates(self.config.token_address)
        reflect = rates.reflection_rate.mul_floor(balance)
        burn = rates.burn_rate.mul_floor(balance)
        liquidity = balance - reflect - burn
        if liquidity < 0:
            raise LiquifyInvariantError(
                "reflection and burn portions exceed the balance",
                details={"balance": balance, "reflect": reflect, "burn": burn},
            )

        out: List[Instruction] = []
        if liquidity > 0:
            out.extend(self._liquidity_leg(liquidity, liquidity_pair))
        if reflect > 0:
            out.append(self._reflection_leg(reflect, liquidity_pair, reflection_pair))
        if burn > 0:
            out.append(Burn(contract=self.config.token_address, amount=burn))
        return out

    def _liquidity_leg(self, liquidity: int, pair: PairBinding) -> List[Instruction]:
        token = self.config.token_address
        swap = liquidity // 2
        keep = liquidity - swap

        out: List[Instruction] = [IncreaseAllowance(contract=token, spender=pair.contract, amount=keep)]
        simulated = self.querier.simulate_swap(pair.contract, Asset(pair.base, swap))
        out.append(Send(contract=token, recipient_contract=pair.contract, amount=swap, hook=PairSwapHook()))

        quote = pair.quote
        deposit = (Asset(pair.base, keep), Asset(quote, simulated))
        if quote.is_native:
            out.append(
                ProvideLiquidity(
                    contract=pair.contract,
                    assets=deposit,
                    funds=(Coin(denom=quote.value, amount=simulated),),
                )
            )
        else:
            out.append(IncreaseAllowance(contract=quote.value, spender=pair.contract, amount=simulated))
            out.append(ProvideLiquidity(contract=pair.contract, assets=deposit))
        return out

    def _reflection_leg(
        self, reflect: int, liquidity_pair: PairBinding, reflection_pair: PairBinding
    ) -> Instruction:
        route = RouterSwapHook(
            operations=(
                SwapOperation(offer_asset_info=liquidity_pair.base, ask_asset_info=liquidity_pair.quote),
                SwapOperation(offer_asset_info=reflection_pair.quote, ask_asset_info=reflection_pair.base),
            ),
            minimum_receive=None,
            to=None,
        )
        return Send(
            contract=self.config.token_address,
            recipient_contract=self.config.router_address,
            amount=reflect,
            hook=route,
        )


__all__ = ["TreasuryOrchestrator"]
