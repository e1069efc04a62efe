from __future__ import annotations
"""
Base-token bookkeeping: balances and allowances.

Minimal in-memory ledgers over integer base units. Credits and debits are
checked: a debit larger than the balance raises `InsufficientFunds`, a credit
past the u128 range raises `BalanceOverflow`, and the entry is left untouched.
"""


from dataclasses import dataclass, field
from typing import Dict, Tuple

from ..errors import BalanceOverflow, InsufficientAllowance, InsufficientFunds
from ..rates import U128_MAX, require_amount


@dataclass
class Balances:
    entries: Dict[str, int] = field(default_factory=dict)

    def get(self, addr: str) -> int:
        return self.entries.get(addr, 0)

    def credit(self, addr: str, amount: int) -> int:
        require_amount(amount)
        new = self.get(addr) + amount
        if new > U128_MAX:
            raise BalanceOverflow(address=addr, balance=self.get(addr), credit=amount)
        self.entries[addr] = new
        return new

    def check_moves(self, deltas: Dict[str, int]) -> None:
        """Raise if applying the net `deltas` would underflow or overflow any entry."""
        for addr, d in deltas.items():
            have = self.get(addr)
            if have + d < 0:
                raise InsufficientFunds(address=addr, balance=have, required=-d)
            if have + d > U128_MAX:
                raise BalanceOverflow(address=addr, balance=have, credit=d)

    def debit(self, addr: str, amount: int) -> int:
        require_amount(amount)
        have = self.get(addr)
        if amount > have:
            raise InsufficientFunds(address=addr, balance=have, required=amount)
        self.entries[addr] = have - amount
        return have - amount

    def total(self) -> int:
        return sum(self.entries.values())

    def snapshot(self) -> Dict[str, int]:
        return dict(self.entries)

    @staticmethod
    def restore(d: Dict[str, int]) -> "Balances":
        return Balances(entries={str(k): int(v) for k, v in d.items()})


@dataclass
class Allowances:
    entries: Dict[Tuple[str, str], int] = field(default_factory=dict)

    def get(self, owner: str, spender: str) -> int:
        return self.entries.get((owner, spender), 0)

    def increase(self, owner: str, spender: str, amount: int) -> int:
        require_amount(amount)
        new = min(self.get(owner, spender) + amount, U128_MAX)
        self.entries[(owner, spender)] = new
        return new

    def decrease(self, owner: str, spender: str, amount: int) -> int:
        require_amount(amount)
        new = max(self.get(owner, spender) - amount, 0)
        self.entries[(owner, spender)] = new
        return new

    def spend(self, owner: str, spender: str, amount: int) -> int:
        """Deduct `amount` from the allowance; raise if it does not cover it."""
        require_amount(amount)
        have = self.get(owner, spender)
        if amount > have:
            raise InsufficientAllowance(owner=owner, spender=spender, allowance=have, required=amount)
        self.entries[(owner, spender)] = have - amount
        return have - amount

    def snapshot(self) -> Dict[Tuple[str, str], int]:
        return dict(self.entries)

    @staticmethod
    def restore(d: Dict[Tuple[str, str], int]) -> "Allowances":
        return Allowances(entries=dict(d))


__all__ = ["Balances", "Allowances"]
