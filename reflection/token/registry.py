from __future__ import annotations
"""
Registry of taxed venues (AMM pairs).

A transfer is taxed when either side is a registered pair. Entries are never
deleted: disabling a pair keeps the address with its flag set to False.
"""


from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class PairRegistry:
    flags: Dict[str, bool] = field(default_factory=dict)

    def set(self, addr: str, enabled: bool) -> None:
        self.flags[addr] = bool(enabled)

    def has(self, addr: str) -> bool:
        return self.flags.get(addr, False)

    def any(self, *addrs: str) -> bool:
        return any(self.has(a) for a in addrs)

    def known(self) -> List[str]:
        """Every address ever flagged, enabled or not."""
        return sorted(self.flags)

    def snapshot(self) -> Dict[str, bool]:
        return dict(self.flags)

    @staticmethod
    def restore(d: Dict[str, bool]) -> "PairRegistry":
        return PairRegistry(flags={str(k): bool(v) for k, v in d.items()})


__all__ = ["PairRegistry"]
