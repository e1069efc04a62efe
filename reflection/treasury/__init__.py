from __future__ import annotations
"""
reflection.treasury
===================

Treasury side of the reflection token: pair bindings, the liquify throttle,
and the liquify planner that turns collected tax into liquidity, a reflected
payout and burned supply.
"""

from .orchestrator import TreasuryOrchestrator
from .pairs import PairConfigValidator
from .querier import Querier, StaticQuerier, TokenBackedQuerier
from .state import PairBinding, TreasuryConfig, TreasuryState
from .throttle import MIN_INTERVAL_SECONDS, LiquifyThrottle

__all__ = [
    "TreasuryOrchestrator",
    "PairConfigValidator",
    "Querier",
    "TokenBackedQuerier",
    "StaticQuerier",
    "PairBinding",
    "TreasuryConfig",
    "TreasuryState",
    "LiquifyThrottle",
    "MIN_INTERVAL_SECONDS",
]
