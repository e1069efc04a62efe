from __future__ import annotations
"""
reflection.token
================

Fee-on-transfer token core: tax computation, the pair registry, the
pair-aware transfer ledger, and the token facade that wraps them over an
explicit `TokenState`.
"""

from .contract import ReflectionToken
from .ledger import Event, TransferLedger, TransferResult
from .registry import PairRegistry
from .state import TokenState
from .tax import TaxBreakdown, compute_tax

__all__ = [
    "ReflectionToken",
    "TransferLedger",
    "TransferResult",
    "Event",
    "PairRegistry",
    "TokenState",
    "TaxBreakdown",
    "compute_tax",
]
