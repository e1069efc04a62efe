from __future__ import annotations
"""
reflection: fee-on-transfer token core and treasury liquify planner.

Transfers touching a registered AMM pair are taxed; the tax is credited to a
treasury, which periodically plans instructions that turn it into pool
liquidity, a reflected payout and burned supply. Nothing here talks to a
chain: external effects are returned as planned instructions.

Public surface (lazily loaded):
- config, errors, metrics, rates, assets, instructions
- token, treasury, runtime, cli
"""


from typing import List

from .version import __version__

__all__: List[str] = [
    "__version__",
    # lazily importable subpackages/modules
    "config",
    "errors",
    "metrics",
    "rates",
    "assets",
    "instructions",
    "token",
    "treasury",
    "runtime",
    "cli",
]

# --- Lazy module loader (PEP 562) -------------------------------------------------
import importlib


_lazy_modules = set(__all__) - {"__version__"}


def __getattr__(name: str):
    if name in _lazy_modules:
        return importlib.import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(set(globals().keys()) | _lazy_modules)


def get_version() -> str:
    """Return the package version string."""
    return __version__
