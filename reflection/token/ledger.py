from __future__ import annotations

"""
reflection.token.ledger
=======================

Pair-aware transfer ledger: the fee-on-transfer core of the token.

All four outward transfer operations (`transfer`, `send`, `transfer_from`,
`send_from`) differ only in authorization, allowance handling and whether a
delivery notification follows. They share one routine, `_move`, which

  1. decides taxability: the debited account, the recipient, or (delegated
     variants) the spender is a registered pair;
  2. computes the `TaxBreakdown` when taxed;
  3. debits the sender the full amount, credits the recipient the delivered
     amount (after tax when taxed), and credits the treasury the tax.

Events record the *delivered* amount, so external indexers track balances
correctly. A taxed transfer also records the treasury credit as its own
`Transfer` event and sets `treasury_trigger_requested` on the result; this
module never invokes the treasury itself.

Validation, the balance and credit-room checks and the allowance deduction
run before any balance moves, so a rejected transfer writes nothing. The session layer
restores the whole state on any later failure.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from .. import metrics
from ..assets import validate_address
from ..errors import ConfigurationMissing, InsufficientFunds
from ..instructions import Hook, Instruction, ReceiveNotification
from ..rates import require_amount
from .state import TokenState
from .tax import TaxBreakdown, compute_tax

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    name: str
    attributes: Tuple[Tuple[str, str], ...]

    def attrs(self) -> Dict[str, str]:
        return dict(self.attributes)

    @staticmethod
    def of(name: str, **attrs: Any) -> "Event":
        return Event(name, tuple((k, str(v)) for k, v in attrs.items() if v is not None))


@dataclass(frozen=True)
class TransferResult:
    variant: str
    sender: str
    recipient: str
    amount: int
    delivered: int
    tax: Optional[TaxBreakdown] = None
    events: Tuple[Event, ...] = ()
    instructions: Tuple[Instruction, ...] = ()

    @property
    def taxed(self) -> bool:
        return self.tax is not None

    @property
    def treasury_trigger_requested(self) -> bool:
        return self.tax is not None


@dataclass
class TransferLedger:
    state: TokenState

    # -------------------------- outward operations --------------------------

    def transfer(self, sender: str, recipient: str, amount: int) -> TransferResult:
        return self._move("transfer", sender, recipient, amount)

    def send(self, sender: str, contract: str, amount: int, payload: Hook = None) -> TransferResult:
        res = self._move("send", sender, contract, amount)
        return _with_notification(res, sender, contract, payload)

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> TransferResult:
        return self._move("transfer_from", owner, recipient, amount, spender=spender)

    def send_from(
        self, spender: str, owner: str, contract: str, amount: int, payload: Hook = None
    ) -> TransferResult:
        res = self._move("send_from", owner, contract, amount, spender=spender)
        # the notification names the caller, as a plain send does
        return _with_notification(res, spender, contract, payload)

    # ------------------------------ internals -------------------------------

    def _move(
        self,
        variant: str,
        sender: str,
        recipient: str,
        amount: int,
        *,
        spender: Optional[str] = None,
    ) -> TransferResult:
        st = self.state
        require_amount(amount, positive=True)
        validate_address(sender)
        validate_address(recipient)
        if spender is not None:
            validate_address(spender)

        parties = (sender, recipient) if spender is None else (sender, recipient, spender)
        is_pair = st.pairs.any(*parties)

        tax: Optional[TaxBreakdown] = None
        delivered = amount
        if is_pair:
            if not st.treasury:
                raise ConfigurationMissing("treasury address")
            tax = compute_tax(amount, st.rates)
            delivered = tax.after_tax

        have = st.balances.get(sender)
        if amount > have:
            raise InsufficientFunds(address=sender, balance=have, required=amount)
        deltas: Dict[str, int] = {sender: -amount}
        deltas[recipient] = deltas.get(recipient, 0) + delivered
        if tax is not None:
            deltas[st.treasury] = deltas.get(st.treasury, 0) + tax.taxed_amount  # type: ignore[index]
        st.balances.check_moves(deltas)
        if spender is not None:
            # allowance is deducted before anything moves
            st.allowances.spend(sender, spender, amount)

        st.balances.debit(sender, amount)
        st.balances.credit(recipient, delivered)
        events: List[Event] = [
            Event.of(
                "Transfer",
                action=variant,
                **{"from": sender, "to": recipient, "by": spender, "amount": delivered},
            )
        ]
        if tax is not None:
            st.balances.credit(st.treasury, tax.taxed_amount)  # type: ignore[arg-type]
            events.append(
                Event.of(
                    "Transfer",
                    action="tax",
                    **{"from": sender, "to": st.treasury, "amount": tax.taxed_amount},
                )
            )

        metrics.record_transfer(variant, is_pair, tax.taxed_amount if tax else 0)
        log.debug(
            "%s %s -> %s amount=%d delivered=%d taxed=%s",
            variant, sender, recipient, amount, delivered, tax.taxed_amount if tax else 0,
        )
        return TransferResult(
            variant=variant,
            sender=sender,
            recipient=recipient,
            amount=amount,
            delivered=delivered,
            tax=tax,
            events=tuple(events),
        )


def _with_notification(res: TransferResult, caller: str, contract: str, payload: Hook) -> TransferResult:
    note = ReceiveNotification(contract=contract, sender=caller, amount=res.delivered, payload=payload)
    return replace(res, instructions=res.instructions + (note,))


__all__ = ["Event", "TransferResult", "TransferLedger"]
