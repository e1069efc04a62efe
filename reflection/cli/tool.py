from __future__ import annotations

"""
reflection.cli.tool
-------------------

Devnet utility for the reflection token and its treasury planner.

Nothing here touches a chain. Rates and addresses default to the resolved
configuration (see reflection.config); pools are simulated at a constant
price.

Examples
--------
# Tax breakdown of a 100000 transfer at 10% tax, 50% reflected, 10% burned
python -m reflection.cli.tool quote 100000 --tax 0.1 --reflection 0.5 --burn 0.1

# Validate a rate triple and show the implied liquidity share
python -m reflection.cli.tool rates --tax 0.05 --reflection 0.3 --burn 0.2

# Liquify plan for a treasury holding 10000, quote paid in a native coin
python -m reflection.cli.tool plan 10000 --reflection 0.2 --burn 0.1 \
  --quote native:uusd --target token:reward --price 2 --json

# Print the resolved configuration (file at $REFLECTION_CONFIG_FILE, then env)
python -m reflection.cli.tool config
"""

import json
from typing import Any, Dict, List, NoReturn, Optional

import typer

from .. import config as config_mod
from ..assets import AssetInfo
from ..errors import ReflectionError
from ..rates import RateConfig
from ..token.tax import compute_tax
from ..treasury import StaticQuerier, TreasuryConfig, TreasuryOrchestrator, TreasuryState

app = typer.Typer(
    name="reflection",
    add_completion=False,
    no_args_is_help=True,
    help="Inspect tax splits and liquify plans of the reflection token (devnet tooling).",
)

LIQUIDITY_PAIR = "liquidity-pair"
REFLECTION_PAIR = "reflection-pair"

# -------------------- utils --------------------


def _fail(err: Exception) -> NoReturn:
    typer.secho(str(err), fg=typer.colors.RED, err=True)
    raise typer.Exit(2)


def _resolve_rates(
    tax: Optional[str], reflection: Optional[str], burn: Optional[str], max_supply: Optional[str] = None
) -> RateConfig:
    base = config_mod.load().rates
    return RateConfig.of(
        tax_rate=tax if tax is not None else base.tax_rate,
        reflection_rate=reflection if reflection is not None else base.reflection_rate,
        burn_rate=burn if burn is not None else base.burn_rate,
        max_transfer_supply_rate=max_supply if max_supply is not None else base.max_transfer_supply_rate,
    )


def _emit(obj: Any, json_out: bool) -> None:
    if json_out:
        typer.echo(json.dumps(obj, indent=2, sort_keys=True))
        return
    if isinstance(obj, dict):
        for k, v in obj.items():
            typer.echo(f"- {k}: {v}")
    else:
        for line in obj:
            typer.echo(line)


# -------------------- commands --------------------


@app.command("quote")
def quote(
    amount: int = typer.Argument(..., help="Transfer amount (base units)."),
    tax: Optional[str] = typer.Option(None, "--tax", help="Global tax rate, e.g. 0.1."),
    reflection: Optional[str] = typer.Option(None, "--reflection", help="Share of the tax reflected."),
    burn: Optional[str] = typer.Option(None, "--burn", help="Share of the tax burned."),
    json_out: bool = typer.Option(False, "--json", help="Output result as JSON."),
) -> None:
    """Tax breakdown of a taxed transfer of AMOUNT."""
    try:
        breakdown = compute_tax(amount, _resolve_rates(tax, reflection, burn))
    except (ReflectionError, ValueError) as e:
        _fail(e)
    _emit(breakdown.to_dict(), json_out)


@app.command("rates")
def rates(
    tax: Optional[str] = typer.Option(None, "--tax"),
    reflection: Optional[str] = typer.Option(None, "--reflection"),
    burn: Optional[str] = typer.Option(None, "--burn"),
    max_supply: Optional[str] = typer.Option(None, "--max-transfer-supply"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Validate a rate configuration and show the liquidity share."""
    try:
        rc = _resolve_rates(tax, reflection, burn, max_supply)
    except (ReflectionError, ValueError) as e:
        _fail(e)
    out: Dict[str, Any] = rc.to_dict()
    out["liquidity_rate"] = str(rc.liquidity_rate)
    _emit(out, json_out)


@app.command("plan")
def plan(
    balance: int = typer.Argument(..., help="Treasury token balance to liquify."),
    reflection: Optional[str] = typer.Option(None, "--reflection", help="Share of the balance reflected."),
    burn: Optional[str] = typer.Option(None, "--burn", help="Share of the balance burned."),
    quote_asset: str = typer.Option("native:uusd", "--quote", help="Shared quote asset (token:<addr> or native:<denom>)."),
    target: str = typer.Option("native:uatom", "--target", help="Reflection target asset."),
    price: str = typer.Option("1", "--price", help="Constant quote-per-token price of the liquidity pair."),
    min_amount: Optional[int] = typer.Option(None, "--min", help="Minimum balance to liquify."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Ordered instructions a liquify of BALANCE would emit."""
    try:
        cfg = config_mod.load()
        token = cfg.token.token_address
        rc = _resolve_rates(None, reflection, burn)
        quote_info = AssetInfo.parse(quote_asset)
        target_info = AssetInfo.parse(target)

        amm = StaticQuerier()
        amm.add_pair(LIQUIDITY_PAIR, (AssetInfo.token(token), quote_info), "liquidity-lp", price=price)
        amm.add_pair(REFLECTION_PAIR, (target_info, quote_info), "reflection-lp")
        amm.set_rates(token, rc)

        state = TreasuryState(
            TreasuryConfig(
                router_address=cfg.treasury.router_address,
                token_address=token,
                admin=cfg.token.admin,
                treasury_address=cfg.token.treasury_address,
                min_liquify_amount=cfg.treasury.min_liquify_amount if min_amount is None else min_amount,
            )
        )
        orch = TreasuryOrchestrator(state, amm)
        orch.bind_liquidity_pair(cfg.token.admin, (AssetInfo.token(token), quote_info), LIQUIDITY_PAIR)
        orch.bind_reflection_pair(cfg.token.admin, (target_info, quote_info), REFLECTION_PAIR)
        instructions = orch.liquify(balance)
    except (ReflectionError, ValueError) as e:
        _fail(e)

    if json_out:
        _emit([ins.to_dict() for ins in instructions], True)
        return
    if not instructions:
        typer.echo("(nothing to do)")
        return
    lines: List[str] = []
    for i, ins in enumerate(instructions, 1):
        d = ins.to_dict()
        funds = f" funds={d['funds']}" if d["funds"] else ""
        lines.append(f"{i}. {d['kind']} @ {d['contract']} {json.dumps(d['msg'], sort_keys=True)}{funds}")
    _emit(lines, False)


@app.command("config")
def show_config(
    file: Optional[str] = typer.Option(None, "--file", help="Load this JSON/YAML file instead of $REFLECTION_CONFIG_FILE."),
) -> None:
    """Print the resolved configuration."""
    try:
        cfg = config_mod.from_env(config_mod.from_file(file)) if file else config_mod.load()
    except (ValueError, FileNotFoundError) as e:
        _fail(e)
    typer.echo(config_mod.pretty(cfg))


if __name__ == "__main__":
    app()
