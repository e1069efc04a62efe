from __future__ import annotations

import pytest

from reflection.config import RateSettings, ReflectionConfig, TokenSettings
from reflection.errors import ConfigurationMissing, InsufficientFunds
from reflection.instructions import Burn, IncreaseAllowance, ReceiveNotification
from reflection.runtime import Session
from reflection.treasury import StaticQuerier

from .conftest import ATOM, TOKEN, USD


class FakeClock:
    def __init__(self, now: int = 10) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session(amm: StaticQuerier, clock: FakeClock) -> Session:
    cfg = ReflectionConfig(
        rates=RateSettings(tax_rate="0.1", reflection_rate="0.5", burn_rate="0.1"),
        token=TokenSettings(register_admin_as_pair=False),
    )
    s = Session.from_config(cfg, amm, initial_balances={"alice": 1_000_000, "bob": 1_000_000}, clock=clock)
    s.call(s.token.set_pair, "admin", "lp-pair", True)
    return s


def _bind(s: Session) -> None:
    s.call(s.orchestrator.bind_liquidity_pair, "admin", (TOKEN, USD), "lp-pair")
    s.call(s.orchestrator.bind_reflection_pair, "admin", (ATOM, USD), "refl-pair")


def test_taxed_transfer_appends_liquify_plan(session: Session) -> None:
    _bind(session)
    out = session.transfer("alice", "lp-pair", 100_000)

    assert session.token.balance_of("treasury") == 10_000
    assert out.liquify_triggered
    # the plan sees the freshly credited treasury balance
    assert out.instructions[0] == IncreaseAllowance(contract="token", spender="lp-pair", amount=2_000)
    assert out.instructions[-1] == Burn(contract="token", amount=1_000)
    assert session.throttle.last == 10


def test_triggers_in_same_instant_collapse(session: Session, clock: FakeClock) -> None:
    _bind(session)
    first = session.transfer("alice", "lp-pair", 100_000)
    second = session.transfer("bob", "lp-pair", 100_000)
    assert first.liquify_triggered
    assert not second.liquify_triggered
    assert second.instructions == ()

    clock.now = 12
    third = session.transfer("alice", "lp-pair", 100_000)
    assert third.liquify_triggered
    assert third.instructions[-1] == Burn(contract="token", amount=3_000)


def test_trigger_below_minimum_is_reported_with_empty_plan(session: Session) -> None:
    _bind(session)
    session.call(session.orchestrator.set_min_liquify, "admin", 10**9)
    out = session.transfer("alice", "lp-pair", 100_000)

    assert out.liquify_triggered
    assert out.instructions == ()
    assert session.throttle.last == 10


def test_untaxed_transfer_leaves_throttle_alone(session: Session) -> None:
    out = session.transfer("alice", "bob", 5)
    assert out.instructions == ()
    assert session.throttle.last == 0


def test_send_notification_precedes_plan(session: Session) -> None:
    _bind(session)
    out = session.send("alice", "lp-pair", 100_000)
    assert isinstance(out.instructions[0], ReceiveNotification)
    assert out.instructions[0].amount == 90_000
    assert len(out.instructions) == 6


def test_failed_liquify_rolls_back_transfer(session: Session) -> None:
    # pairs never bound: the triggered liquify fails and the transfer is undone
    with pytest.raises(ConfigurationMissing):
        session.transfer("alice", "lp-pair", 100_000)

    assert session.token.balance_of("alice") == 1_000_000
    assert session.token.balance_of("lp-pair") == 0
    assert session.token.balance_of("treasury") == 0
    assert session.throttle.last == 0


def test_failed_transfer_changes_nothing(session: Session) -> None:
    _bind(session)
    before = session.token.state.snapshot()
    with pytest.raises(InsufficientFunds):
        session.transfer_from("bob", "carol", "alice", 1)
    assert session.token.state.snapshot() == before


def test_call_restores_partial_writes(session: Session) -> None:
    def transfer_then_fail() -> None:
        session.token.transfer("alice", "bob", 500)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        session.call(transfer_then_fail)
    assert session.token.balance_of("alice") == 1_000_000
    assert session.token.balance_of("bob") == 1_000_000


def test_liquify_now_bypasses_throttle(session: Session) -> None:
    _bind(session)
    session.call(session.token.set_pair, "admin", "lp-pair", False)
    session.transfer("alice", "treasury", 10_000)
    out = session.liquify_now()
    assert out.result is None
    assert len(out.instructions) == 5
    assert session.throttle.last == 0


def test_receive_via_session(session: Session) -> None:
    _bind(session)
    session.call(session.token.set_pair, "admin", "lp-pair", False)
    session.transfer("alice", "treasury", 10_000)
    out = session.receive("token", "alice", 0, {"liquify": {}})
    assert len(out.instructions) == 5
