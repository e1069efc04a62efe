from __future__ import annotations
"""
reflection.runtime: request sessions over the token and its treasury.

A `Session` is the orchestration layer around the core: every top-level
request runs inside `atomic()`, which snapshots both the token state and the
treasury state and restores them if anything raises. Transfers that touch a
registered pair ask for a treasury trigger; the session consults the
`LiquifyThrottle` and, when it fires, appends the treasury's liquify plan to
the transfer's own instructions. The host dispatches the combined queue in
order after the request returns.

Example
-------
    session = Session.from_config(cfg, amm_querier, initial_balances={"alice": 10**6})
    out = session.transfer("alice", "pair-contract", 1_000)
    for ins in out.instructions:
        host.dispatch(ins.to_dict())
"""


import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Mapping, Optional, Tuple

from . import metrics
from .config import ReflectionConfig
from .errors import ReflectionError
from .instructions import Hook, Instruction
from .token import ReflectionToken, TransferResult
from .treasury import (LiquifyThrottle, Querier, TokenBackedQuerier, TreasuryConfig,
                       TreasuryOrchestrator, TreasuryState)

log = logging.getLogger(__name__)

Clock = Callable[[], int]


def _wall_clock() -> int:
    return int(time.time())


@dataclass(frozen=True)
class Outcome:
    """
    Result of one session request: the transfer (if any) and the ordered
    instruction queue. `liquify_triggered` records that a liquify ran for this
    request (the throttle fired, or an explicit trigger), even when the
    resulting plan was empty.
    """
    result: Optional[TransferResult]
    instructions: Tuple[Instruction, ...] = ()
    liquify_triggered: bool = False


class Session:
    def __init__(
        self,
        token: ReflectionToken,
        orchestrator: TreasuryOrchestrator,
        throttle: LiquifyThrottle,
        clock: Optional[Clock] = None,
    ) -> None:
        self.token = token
        self.orchestrator = orchestrator
        self.throttle = throttle
        self.clock = clock or _wall_clock

    @classmethod
    def from_config(
        cls,
        cfg: ReflectionConfig,
        amm: Querier,
        *,
        initial_balances: Optional[Mapping[str, int]] = None,
        clock: Optional[Clock] = None,
    ) -> "Session":
        """
        Wire a token, treasury and throttle from configuration. `amm` answers
        the pool queries; token balances and rates come from the local token.
        """
        cfg.validate()
        token = ReflectionToken.instantiate(
            token_address=cfg.token.token_address,
            admin=cfg.token.admin,
            treasury=cfg.token.treasury_address,
            initial_balances=initial_balances,
            rates=cfg.rates.to_rate_config(),
            register_admin_as_pair=cfg.token.register_admin_as_pair,
        )
        tconf = TreasuryConfig(
            router_address=cfg.treasury.router_address,
            token_address=cfg.token.token_address,
            admin=cfg.token.admin,
            treasury_address=cfg.token.treasury_address,
            min_liquify_amount=cfg.treasury.min_liquify_amount,
        )
        orchestrator = TreasuryOrchestrator(TreasuryState(tconf), TokenBackedQuerier(token, amm))
        throttle = LiquifyThrottle(tconf, min_interval=cfg.treasury.liquify_interval_seconds)
        return cls(token, orchestrator, throttle, clock=clock)

    # ------------------------------------------------------------------
    # Atomicity
    # ------------------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        token_snap = self.token.state.snapshot()
        treasury_snap = self.orchestrator.state.snapshot()
        try:
            yield
        except Exception as exc:
            self.token.state.restore(token_snap)
            self.orchestrator.state.restore(treasury_snap)
            code = exc.code if isinstance(exc, ReflectionError) else type(exc).__name__
            metrics.record_rollback(code)
            log.warning("request rolled back: %s", exc)
            raise

    def call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run any token or treasury operation under `atomic()`."""
        with self.atomic():
            return fn(*args, **kwargs)

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    def transfer(self, caller: str, recipient: str, amount: int) -> Outcome:
        with self.atomic():
            return self._settle(self.token.transfer(caller, recipient, amount))

    def send(self, caller: str, contract: str, amount: int, payload: Hook = None) -> Outcome:
        with self.atomic():
            return self._settle(self.token.send(caller, contract, amount, payload))

    def transfer_from(self, caller: str, owner: str, recipient: str, amount: int) -> Outcome:
        with self.atomic():
            return self._settle(self.token.transfer_from(caller, owner, recipient, amount))

    def send_from(self, caller: str, owner: str, contract: str, amount: int, payload: Hook = None) -> Outcome:
        with self.atomic():
            return self._settle(self.token.send_from(caller, owner, contract, amount, payload))

    def _settle(self, result: TransferResult) -> Outcome:
        queue: List[Instruction] = list(result.instructions)
        fired = result.treasury_trigger_requested and self.throttle.should_trigger(self.clock())
        if fired:
            queue.extend(self.orchestrator.liquify_now())
        return Outcome(result=result, instructions=tuple(queue), liquify_triggered=fired)

    # ------------------------------------------------------------------
    # Treasury triggers
    # ------------------------------------------------------------------

    def liquify_now(self) -> Outcome:
        with self.atomic():
            return Outcome(result=None, instructions=tuple(self.orchestrator.liquify_now()), liquify_triggered=True)

    def receive(self, sender_contract: str, cw20_sender: str, amount: int, payload: Hook) -> Outcome:
        with self.atomic():
            plan = self.orchestrator.receive(sender_contract, cw20_sender, amount, payload)
            return Outcome(result=None, instructions=tuple(plan))


__all__ = ["Session", "Outcome", "Clock"]
