from __future__ import annotations
"""
Token state context.

Everything the token core reads or writes lives on one explicit `TokenState`
object that is passed to every operation: admin, treasury address, tax rates,
the pair registry, balances, allowances and total supply. Nothing is kept in
module globals.

`snapshot()` / `restore()` give the session layer a cheap way to roll the
whole context back when any step of a request fails.
"""


from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..rates import RateConfig
from .accounts import Allowances, Balances
from .registry import PairRegistry


@dataclass
class TokenState:
    token_address: str
    admin: str
    treasury: Optional[str] = None
    rates: Optional[RateConfig] = field(default_factory=RateConfig)
    pairs: PairRegistry = field(default_factory=PairRegistry)
    balances: Balances = field(default_factory=Balances)
    allowances: Allowances = field(default_factory=Allowances)
    total_supply: int = 0

    def snapshot(self) -> Dict[str, Any]:
        return {
            "token_address": self.token_address,
            "admin": self.admin,
            "treasury": self.treasury,
            "rates": self.rates,  # frozen
            "pairs": self.pairs.snapshot(),
            "balances": self.balances.snapshot(),
            "allowances": self.allowances.snapshot(),
            "total_supply": self.total_supply,
        }

    def restore(self, snap: Dict[str, Any]) -> None:
        """Reset this object in place to a previous snapshot."""
        self.token_address = snap["token_address"]
        self.admin = snap["admin"]
        self.treasury = snap["treasury"]
        self.rates = snap["rates"]
        self.pairs = PairRegistry.restore(snap["pairs"])
        self.balances = Balances.restore(snap["balances"])
        self.allowances = Allowances.restore(snap["allowances"])
        self.total_supply = int(snap["total_supply"])


__all__ = ["TokenState"]
