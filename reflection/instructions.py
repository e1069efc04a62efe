from __future__ import annotations
"""
Planned instructions for external contracts.

The core never executes anything against another contract. It returns these
value objects, in order, and the host runtime dispatches them after the
initiating logic completes, inside the same all-or-nothing transaction. Their
results are never observed by the code that planned them.

Each instruction renders to a plain dict via `to_dict()` (stable key order,
amounts as decimal strings) for logging, CLI output, or a host-side encoder.
"""


from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from .assets import Asset, AssetInfo, Coin


# ------------------------------ Hook payloads ------------------------------- #

@dataclass(frozen=True)
class PairSwapHook:
    """Swap request attached to a token `Send` into an AMM pair."""
    belief_price: Optional[str] = None
    max_spread: Optional[str] = None
    to: Optional[str] = None
    deadline: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "swap": {
                "belief_price": self.belief_price,
                "max_spread": self.max_spread,
                "to": self.to,
                "deadline": self.deadline,
            }
        }


@dataclass(frozen=True)
class SwapOperation:
    offer_asset_info: AssetInfo
    ask_asset_info: AssetInfo

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offer_asset_info": self.offer_asset_info.to_dict(),
            "ask_asset_info": self.ask_asset_info.to_dict(),
        }


@dataclass(frozen=True)
class RouterSwapHook:
    """Multi-hop swap executed by the router, attached to a token `Send`."""
    operations: Tuple[SwapOperation, ...]
    minimum_receive: Optional[int] = None
    to: Optional[str] = None  # None: proceeds go back to the sender
    deadline: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "execute_swap_operations": {
                "operations": [op.to_dict() for op in self.operations],
                "minimum_receive": None if self.minimum_receive is None else str(self.minimum_receive),
                "to": self.to,
                "deadline": self.deadline,
            }
        }


@dataclass(frozen=True)
class LiquifyHook:
    """Notification payload asking the treasury to liquify."""

    def to_dict(self) -> Dict[str, Any]:
        return {"liquify": {}}


Hook = Union[PairSwapHook, RouterSwapHook, LiquifyHook, Dict[str, Any], None]


def _hook_dict(hook: Hook) -> Optional[Dict[str, Any]]:
    if hook is None or isinstance(hook, dict):
        return hook
    return hook.to_dict()


# ------------------------------ Instructions -------------------------------- #

@dataclass(frozen=True)
class Instruction:
    kind: ClassVar[str] = "instruction"
    contract: str  # the contract that receives/executes the instruction

    def body(self) -> Dict[str, Any]:  # pragma: no cover - overridden
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "contract": self.contract, "msg": self.body(), "funds": self.funds_list()}

    def funds_list(self) -> list:
        return []


@dataclass(frozen=True)
class Transfer(Instruction):
    kind: ClassVar[str] = "transfer"
    recipient: str
    amount: int

    def body(self) -> Dict[str, Any]:
        return {"transfer": {"recipient": self.recipient, "amount": str(self.amount)}}


@dataclass(frozen=True)
class Burn(Instruction):
    kind: ClassVar[str] = "burn"
    amount: int

    def body(self) -> Dict[str, Any]:
        return {"burn": {"amount": str(self.amount)}}


@dataclass(frozen=True)
class IncreaseAllowance(Instruction):
    kind: ClassVar[str] = "increase_allowance"
    spender: str
    amount: int
    expires: Optional[int] = None

    def body(self) -> Dict[str, Any]:
        return {
            "increase_allowance": {
                "spender": self.spender,
                "amount": str(self.amount),
                "expires": self.expires,
            }
        }


@dataclass(frozen=True)
class Send(Instruction):
    """Token transfer to a contract, followed by that contract's receive hook."""
    kind: ClassVar[str] = "send"
    recipient_contract: str
    amount: int
    hook: Hook = None

    def body(self) -> Dict[str, Any]:
        return {
            "send": {
                "contract": self.recipient_contract,
                "amount": str(self.amount),
                "msg": _hook_dict(self.hook),
            }
        }


@dataclass(frozen=True)
class ProvideLiquidity(Instruction):
    kind: ClassVar[str] = "provide_liquidity"
    assets: Tuple[Asset, Asset]
    funds: Tuple[Coin, ...] = field(default_factory=tuple)
    receiver: Optional[str] = None
    slippage_tolerance: Optional[str] = None
    deadline: Optional[int] = None

    def body(self) -> Dict[str, Any]:
        return {
            "provide_liquidity": {
                "assets": [a.to_dict() for a in self.assets],
                "receiver": self.receiver,
                "slippage_tolerance": self.slippage_tolerance,
                "deadline": self.deadline,
            }
        }

    def funds_list(self) -> list:
        return [c.to_dict() for c in self.funds]


@dataclass(frozen=True)
class ReceiveNotification(Instruction):
    """Delivery notification sent to the recipient contract of a token `send`."""
    kind: ClassVar[str] = "receive"
    sender: str
    amount: int
    payload: Hook = None

    def body(self) -> Dict[str, Any]:
        return {
            "receive": {
                "sender": self.sender,
                "amount": str(self.amount),
                "msg": _hook_dict(self.payload),
            }
        }


__all__ = [
    "Instruction",
    "Transfer",
    "Burn",
    "IncreaseAllowance",
    "Send",
    "ProvideLiquidity",
    "ReceiveNotification",
    "PairSwapHook",
    "RouterSwapHook",
    "SwapOperation",
    "LiquifyHook",
    "Hook",
]
