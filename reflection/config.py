from __future__ import annotations
"""
reflection.config: configuration for the reflection token and its treasury

Covers:
- Initial tax rates (global / reflection / burn / max-transfer-supply), as
  decimal strings with up to 18 fractional digits
- Token identity (token address, admin, treasury address)
- Treasury wiring (router address, minimum liquify amount)
- Liquify throttle interval (seconds)

Environment overrides (all optional; sensible defaults provided):

  # Rates (decimal strings)
  REFLECTION_TAX_RATE=0.10
  REFLECTION_REFLECTION_RATE=0.5
  REFLECTION_BURN_RATE=0.1
  REFLECTION_MAX_TRANSFER_SUPPLY_RATE=1

  # Addresses
  REFLECTION_TOKEN_ADDRESS=token
  REFLECTION_ADMIN=admin
  REFLECTION_TREASURY_ADDRESS=treasury
  REFLECTION_ROUTER_ADDRESS=router

  # Treasury
  REFLECTION_MIN_LIQUIFY_AMOUNT=0
  REFLECTION_LIQUIFY_INTERVAL_SECONDS=1

You can also load from a JSON or YAML file via
`REFLECTION_CONFIG_FILE=/path/to/config.(json|yaml|yml)`.
File values override defaults; environment overrides the file.
"""


from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional
import json
import os
from pathlib import Path

import yaml

from .rates import RateConfig


# -------------------------- Data classes --------------------------


@dataclass
class RateSettings:
    """Initial tax rates. Decimal strings; floats are not accepted downstream."""
    tax_rate: str = "0"
    reflection_rate: str = "0"
    burn_rate: str = "0"
    max_transfer_supply_rate: str = "1"

    def to_rate_config(self) -> RateConfig:
        return RateConfig.of(
            tax_rate=self.tax_rate,
            reflection_rate=self.reflection_rate,
            burn_rate=self.burn_rate,
            max_transfer_supply_rate=self.max_transfer_supply_rate,
        )

    def validate(self) -> None:
        try:
            self.to_rate_config()
        except Exception as e:
            raise ValueError(f"Invalid rate settings: {e}") from e


@dataclass
class TokenSettings:
    """Identity of the token contract and its admin."""
    token_address: str = "token"
    admin: str = "admin"
    treasury_address: str = "treasury"
    # The instantiator starts flagged as a taxed venue.
    register_admin_as_pair: bool = True

    def validate(self) -> None:
        for name, v in (("token_address", self.token_address),
                        ("admin", self.admin),
                        ("treasury_address", self.treasury_address)):
            if not v:
                raise ValueError(f"{name} must be set.")


@dataclass
class TreasurySettings:
    """Router wiring and liquify policy."""
    router_address: str = "router"
    min_liquify_amount: int = 0
    liquify_interval_seconds: int = 1

    def validate(self) -> None:
        if not self.router_address:
            raise ValueError("router_address must be set.")
        if self.min_liquify_amount < 0:
            raise ValueError("min_liquify_amount must be non-negative.")
        if self.liquify_interval_seconds < 0:
            raise ValueError("liquify_interval_seconds must be non-negative.")


@dataclass
class ReflectionConfig:
    """Top-level configuration container."""
    rates: RateSettings = field(default_factory=RateSettings)
    token: TokenSettings = field(default_factory=TokenSettings)
    treasury: TreasurySettings = field(default_factory=TreasurySettings)

    def validate(self) -> None:
        self.rates.validate()
        self.token.validate()
        self.treasury.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# -------------------------- Loaders --------------------------


def _getenv_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return int(str(v).replace("_", ""))
    except ValueError as e:
        raise ValueError(f"Invalid int for {name}: {v!r}") from e


def _getenv_str(name: str, default: str) -> str:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    return v.strip()


def _getenv_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


def from_env(base: Optional[ReflectionConfig] = None, prefix: str = "REFLECTION_") -> ReflectionConfig:
    """
    Build a ReflectionConfig from environment variables, optionally layering on top of `base`.
    """
    cfg = base or ReflectionConfig()

    new_cfg = ReflectionConfig(
        rates=RateSettings(
            tax_rate=_getenv_str(f"{prefix}TAX_RATE", cfg.rates.tax_rate),
            reflection_rate=_getenv_str(f"{prefix}REFLECTION_RATE", cfg.rates.reflection_rate),
            burn_rate=_getenv_str(f"{prefix}BURN_RATE", cfg.rates.burn_rate),
            max_transfer_supply_rate=_getenv_str(
                f"{prefix}MAX_TRANSFER_SUPPLY_RATE", cfg.rates.max_transfer_supply_rate
            ),
        ),
        token=TokenSettings(
            token_address=_getenv_str(f"{prefix}TOKEN_ADDRESS", cfg.token.token_address),
            admin=_getenv_str(f"{prefix}ADMIN", cfg.token.admin),
            treasury_address=_getenv_str(f"{prefix}TREASURY_ADDRESS", cfg.token.treasury_address),
            register_admin_as_pair=_getenv_bool(
                f"{prefix}REGISTER_ADMIN_AS_PAIR", cfg.token.register_admin_as_pair
            ),
        ),
        treasury=TreasurySettings(
            router_address=_getenv_str(f"{prefix}ROUTER_ADDRESS", cfg.treasury.router_address),
            min_liquify_amount=_getenv_int(f"{prefix}MIN_LIQUIFY_AMOUNT", cfg.treasury.min_liquify_amount),
            liquify_interval_seconds=_getenv_int(
                f"{prefix}LIQUIFY_INTERVAL_SECONDS", cfg.treasury.liquify_interval_seconds
            ),
        ),
    )
    new_cfg.validate()
    return new_cfg


def from_file(path: str | os.PathLike[str]) -> ReflectionConfig:
    """
    Load configuration from a JSON or YAML file.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")

    def pick(dct: Dict[str, Any], key: str, default: Any) -> Any:
        return dct.get(key, default)

    rates = data.get("rates", {})
    token = data.get("token", {})
    treasury = data.get("treasury", {})

    cfg = ReflectionConfig(
        rates=RateSettings(
            # YAML may hand us floats; keep their literal text
            tax_rate=str(pick(rates, "tax_rate", RateSettings().tax_rate)),
            reflection_rate=str(pick(rates, "reflection_rate", RateSettings().reflection_rate)),
            burn_rate=str(pick(rates, "burn_rate", RateSettings().burn_rate)),
            max_transfer_supply_rate=str(
                pick(rates, "max_transfer_supply_rate", RateSettings().max_transfer_supply_rate)
            ),
        ),
        token=TokenSettings(
            token_address=pick(token, "token_address", TokenSettings().token_address),
            admin=pick(token, "admin", TokenSettings().admin),
            treasury_address=pick(token, "treasury_address", TokenSettings().treasury_address),
            register_admin_as_pair=bool(
                pick(token, "register_admin_as_pair", TokenSettings().register_admin_as_pair)
            ),
        ),
        treasury=TreasurySettings(
            router_address=pick(treasury, "router_address", TreasurySettings().router_address),
            min_liquify_amount=int(pick(treasury, "min_liquify_amount", TreasurySettings().min_liquify_amount)),
            liquify_interval_seconds=int(
                pick(treasury, "liquify_interval_seconds", TreasurySettings().liquify_interval_seconds)
            ),
        ),
    )
    cfg.validate()
    return cfg


def load() -> ReflectionConfig:
    """
    Load configuration using the following precedence:
      1) File at $REFLECTION_CONFIG_FILE (JSON/YAML)
      2) Environment variables (REFLECTION_*), applied on top of defaults or file values
    """
    file_path = os.getenv("REFLECTION_CONFIG_FILE")
    base = from_file(file_path) if file_path else ReflectionConfig()
    return from_env(base=base)


# -------------------------- Utilities --------------------------


def pretty(cfg: Optional[ReflectionConfig] = None) -> str:
    """Return a human-readable JSON string of the current config."""
    obj = (cfg or load()).to_dict()
    return json.dumps(obj, indent=2, sort_keys=True)


__all__ = [
    "RateSettings",
    "TokenSettings",
    "TreasurySettings",
    "ReflectionConfig",
    "from_env",
    "from_file",
    "load",
    "pretty",
]
