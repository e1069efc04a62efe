from __future__ import annotations

import os
from typing import Iterator

import pytest

from reflection.assets import AssetInfo
from reflection.rates import RateConfig
from reflection.token import ReflectionToken
from reflection.treasury import StaticQuerier, TreasuryConfig, TreasuryOrchestrator, TreasuryState

TOKEN = AssetInfo.token("token")
USD = AssetInfo.native("uusd")
ATOM = AssetInfo.native("uatom")

# 10% tax; of which (or of the treasury balance) 50% reflected, 10% burned
DEFAULT_RATES = RateConfig.of(tax_rate="0.1", reflection_rate="0.5", burn_rate="0.1")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for k in list(os.environ):
        if k.startswith("REFLECTION_"):
            monkeypatch.delenv(k, raising=False)
    yield


@pytest.fixture
def token() -> ReflectionToken:
    t = ReflectionToken.instantiate(
        token_address="token",
        admin="admin",
        treasury="treasury",
        initial_balances={"alice": 1_000_000, "bob": 500_000, "pair": 2_000_000},
        rates=DEFAULT_RATES,
        register_admin_as_pair=False,
    )
    t.set_pair("admin", "pair", True)
    return t


@pytest.fixture
def amm() -> StaticQuerier:
    q = StaticQuerier()
    q.add_pair("lp-pair", (TOKEN, USD), "lp-share", price="3")
    q.add_pair("refl-pair", (ATOM, USD), "refl-share")
    q.set_rates("token", DEFAULT_RATES)
    return q


@pytest.fixture
def treasury_state() -> TreasuryState:
    return TreasuryState(
        TreasuryConfig(
            router_address="router",
            token_address="token",
            admin="admin",
            treasury_address="treasury",
        )
    )


@pytest.fixture
def orchestrator(treasury_state: TreasuryState, amm: StaticQuerier) -> TreasuryOrchestrator:
    return TreasuryOrchestrator(treasury_state, amm)


@pytest.fixture
def bound(orchestrator: TreasuryOrchestrator) -> TreasuryOrchestrator:
    orchestrator.bind_liquidity_pair("admin", (TOKEN, USD), "lp-pair")
    orchestrator.bind_reflection_pair("admin", (ATOM, USD), "refl-pair")
    return orchestrator
