from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from reflection.errors import (BalanceOverflow, ConfigurationMissing, InsufficientAllowance,
                               InsufficientFunds, InvalidAddress, InvalidAmount, RateOutOfRange,
                               Unauthorized)
from reflection.instructions import LiquifyHook, ReceiveNotification
from reflection.rates import U128_MAX, WAD, Rate, RateConfig
from reflection.token import ReflectionToken


def _total(token: ReflectionToken) -> int:
    return token.state.balances.total()


# --------------------------- Untaxed ---------------------------


def test_untaxed_transfer_moves_full_amount(token: ReflectionToken) -> None:
    before = _total(token)
    res = token.transfer("alice", "bob", 1_000)

    assert token.balance_of("alice") == 999_000
    assert token.balance_of("bob") == 501_000
    assert token.balance_of("treasury") == 0
    assert not res.taxed and not res.treasury_trigger_requested
    assert res.delivered == 1_000
    assert len(res.events) == 1
    assert res.events[0].attrs() == {"action": "transfer", "from": "alice", "to": "bob", "amount": "1000"}
    assert _total(token) == before


def test_disabled_pair_is_not_taxed(token: ReflectionToken) -> None:
    token.set_pair("admin", "pair", False)
    res = token.transfer("alice", "pair", 100_000)
    assert not res.taxed
    assert token.balance_of("pair") == 2_100_000
    assert "pair" in token.state.pairs.known()
    assert not token.query_pair("pair")


# --------------------------- Taxed ---------------------------


def test_transfer_into_pair_is_taxed(token: ReflectionToken) -> None:
    before = _total(token)
    res = token.transfer("alice", "pair", 100_000)

    assert token.balance_of("alice") == 900_000
    assert token.balance_of("pair") == 2_090_000
    assert token.balance_of("treasury") == 10_000
    assert res.taxed and res.treasury_trigger_requested
    assert res.delivered == 90_000
    assert res.tax is not None and res.tax.taxed_amount == 10_000

    main, tax = res.events
    assert main.attrs()["amount"] == "90000"
    assert tax.attrs() == {"action": "tax", "from": "alice", "to": "treasury", "amount": "10000"}
    assert _total(token) == before


def test_transfer_out_of_pair_is_taxed(token: ReflectionToken) -> None:
    res = token.transfer("pair", "bob", 50_000)
    assert res.taxed
    assert token.balance_of("bob") == 545_000
    assert token.balance_of("treasury") == 5_000


def test_taxed_transfer_without_treasury(token: ReflectionToken) -> None:
    token.state.treasury = None
    with pytest.raises(ConfigurationMissing):
        token.transfer("alice", "pair", 100)
    assert token.balance_of("alice") == 1_000_000
    # untaxed transfers do not need a treasury
    token.transfer("alice", "bob", 100)
    assert token.balance_of("bob") == 500_100


def test_zero_tax_rate_still_requests_trigger(token: ReflectionToken) -> None:
    token.set_tax_rate("admin", "0", "0", "0")
    res = token.transfer("alice", "pair", 1_000)
    assert res.delivered == 1_000
    assert res.treasury_trigger_requested


# --------------------------- Send ---------------------------


def test_send_emits_notification_with_delivered_amount(token: ReflectionToken) -> None:
    res = token.send("alice", "pair", 100_000, LiquifyHook())
    (note,) = res.instructions
    assert isinstance(note, ReceiveNotification)
    assert note.contract == "pair"
    assert note.sender == "alice"
    assert note.amount == 90_000
    assert note.to_dict()["msg"] == {"receive": {"sender": "alice", "amount": "90000", "msg": {"liquify": {}}}}


def test_send_to_plain_contract_untaxed(token: ReflectionToken) -> None:
    res = token.send("bob", "vault", 700)
    assert not res.taxed
    assert res.instructions[0].amount == 700
    assert res.instructions[0].payload is None
    assert token.balance_of("vault") == 700


# --------------------------- Delegated ---------------------------


def test_transfer_from_spends_allowance(token: ReflectionToken) -> None:
    token.increase_allowance("alice", "bob", 5_000)
    res = token.transfer_from("bob", "alice", "carol", 3_000)

    assert token.state.allowances.get("alice", "bob") == 2_000
    assert token.balance_of("carol") == 3_000
    assert token.balance_of("alice") == 997_000
    assert res.events[0].attrs()["by"] == "bob"


def test_spender_pair_makes_delegated_transfer_taxed(token: ReflectionToken) -> None:
    token.increase_allowance("alice", "pair", 10_000)
    res = token.transfer_from("pair", "alice", "carol", 10_000)
    assert res.taxed
    assert token.balance_of("carol") == 9_000
    assert token.balance_of("treasury") == 1_000


def test_send_from_notification_names_caller(token: ReflectionToken) -> None:
    token.increase_allowance("alice", "bob", 1_000)
    res = token.send_from("bob", "alice", "vault", 1_000, {"note": {}})
    (note,) = res.instructions
    assert note.sender == "bob"
    assert note.payload == {"note": {}}


def test_insufficient_allowance_changes_nothing(token: ReflectionToken) -> None:
    token.increase_allowance("alice", "bob", 100)
    with pytest.raises(InsufficientAllowance):
        token.transfer_from("bob", "alice", "carol", 101)
    assert token.state.allowances.get("alice", "bob") == 100
    assert token.balance_of("alice") == 1_000_000
    assert token.balance_of("carol") == 0


def test_owner_short_of_funds_keeps_allowance(token: ReflectionToken) -> None:
    token.increase_allowance("carol", "bob", 1_000)
    with pytest.raises(InsufficientFunds):
        token.transfer_from("bob", "carol", "alice", 500)
    assert token.state.allowances.get("carol", "bob") == 1_000


# --------------------------- Rejections ---------------------------


def test_insufficient_funds_changes_nothing(token: ReflectionToken) -> None:
    snap = token.state.balances.snapshot()
    with pytest.raises(InsufficientFunds) as ei:
        token.transfer("carol", "pair", 1)
    assert ei.value.details == {"address": "carol", "balance": 0, "required": 1}
    assert token.state.balances.snapshot() == snap


@pytest.mark.parametrize(
    "call",
    [
        lambda t: t.transfer("alice", "bob", 0),
        lambda t: t.send("alice", "vault", 0),
        lambda t: t.transfer_from("bob", "alice", "carol", 0),
        lambda t: t.send_from("bob", "alice", "vault", 0),
    ],
)
def test_zero_amount_rejected(token: ReflectionToken, call) -> None:
    with pytest.raises(InvalidAmount):
        call(token)


def test_malformed_address_rejected(token: ReflectionToken) -> None:
    with pytest.raises(InvalidAddress):
        token.transfer("alice", "Not An Address", 1)
    assert token.balance_of("alice") == 1_000_000


# --------------------------- Admin surface ---------------------------


def test_admin_only_configuration(token: ReflectionToken) -> None:
    with pytest.raises(Unauthorized):
        token.set_tax_rate("alice", "0.2", "0", "0")
    with pytest.raises(Unauthorized):
        token.set_pair("alice", "alice", True)


def test_set_tax_rate_replaces_triple(token: ReflectionToken) -> None:
    token.set_tax_rate("admin", "0.05", "0.3", "0.2")
    tax, refl, burn, cap = token.query_rates()
    assert (tax, refl, burn) == (Rate.parse("0.05"), Rate.parse("0.3"), Rate.parse("0.2"))
    assert cap == Rate.one()
    with pytest.raises(RateOutOfRange):
        token.set_tax_rate("admin", "0.05", "0.9", "0.2")
    assert token.query_rates()[0] == Rate.parse("0.05")


def test_admin_registered_as_pair_by_default() -> None:
    t = ReflectionToken.instantiate(token_address="token", admin="admin", treasury="treasury")
    assert t.query_pair("admin")


def test_burn_reduces_supply(token: ReflectionToken) -> None:
    supply = token.state.total_supply
    assert token.burn("bob", 1_000) == supply - 1_000
    assert token.balance_of("bob") == 499_000


def test_set_treasury_is_admin_only(token: ReflectionToken) -> None:
    with pytest.raises(Unauthorized):
        token.set_treasury("alice", "vault")
    with pytest.raises(InvalidAddress):
        token.set_treasury("admin", "Not An Address")
    assert token.state.treasury == "treasury"


def test_taxed_transfer_credits_new_treasury(token: ReflectionToken) -> None:
    token.set_treasury("admin", "vault")
    token.transfer("alice", "pair", 100_000)
    assert token.balance_of("vault") == 10_000
    assert token.balance_of("treasury") == 0


def test_decrease_allowance_floors_at_zero(token: ReflectionToken) -> None:
    token.increase_allowance("alice", "bob", 100)
    assert token.decrease_allowance("alice", "bob", 40) == 60
    assert token.decrease_allowance("alice", "bob", 1_000) == 0
    with pytest.raises(InsufficientAllowance):
        token.transfer_from("bob", "alice", "carol", 1)


# --------------------------- u128 bounds ---------------------------


def test_instantiate_rejects_supply_past_u128() -> None:
    with pytest.raises(InvalidAmount):
        ReflectionToken.instantiate(
            token_address="token",
            admin="admin",
            initial_balances={"alice": U128_MAX, "bob": 1},
        )


def test_recipient_overflow_moves_nothing(token: ReflectionToken) -> None:
    token.state.balances.entries["bob"] = U128_MAX
    with pytest.raises(BalanceOverflow) as ei:
        token.transfer("alice", "bob", 1)
    assert ei.value.details["address"] == "bob"
    assert token.balance_of("alice") == 1_000_000
    assert token.balance_of("bob") == U128_MAX


def test_delegated_overflow_keeps_allowance(token: ReflectionToken) -> None:
    token.state.balances.entries["bob"] = U128_MAX
    token.increase_allowance("alice", "carol", 10)
    with pytest.raises(BalanceOverflow):
        token.transfer_from("carol", "alice", "bob", 5)
    assert token.state.allowances.get("alice", "carol") == 10
    assert token.balance_of("alice") == 1_000_000


def test_treasury_overflow_moves_nothing(token: ReflectionToken) -> None:
    token.state.balances.entries["treasury"] = U128_MAX
    with pytest.raises(BalanceOverflow) as ei:
        token.transfer("alice", "pair", 100_000)
    assert ei.value.details["address"] == "treasury"
    assert token.balance_of("alice") == 1_000_000
    assert token.balance_of("pair") == 2_000_000


# --------------------------- Properties ---------------------------

_split = st.integers(min_value=0, max_value=WAD).flatmap(
    lambda r: st.tuples(st.just(r), st.integers(min_value=0, max_value=WAD - r))
)


@settings(max_examples=200, deadline=None)
@given(
    amount=st.integers(min_value=1, max_value=10**30),
    tax=st.integers(min_value=0, max_value=WAD),
    split=_split,
    to_pair=st.booleans(),
)
def test_transfer_conserves_value(amount: int, tax: int, split, to_pair: bool) -> None:
    refl, burn = split
    t = ReflectionToken.instantiate(
        token_address="token",
        admin="admin",
        treasury="treasury",
        initial_balances={"alice": 10**30, "pair": 1},
        rates=RateConfig(tax_rate=Rate(tax), reflection_rate=Rate(refl), burn_rate=Rate(burn)),
        register_admin_as_pair=False,
    )
    t.set_pair("admin", "pair", True)
    recipient = "pair" if to_pair else "bob"
    before = {a: t.balance_of(a) for a in ("alice", recipient, "treasury")}

    res = t.transfer("alice", recipient, amount)

    gained = t.balance_of(recipient) - before[recipient]
    taxed = t.balance_of("treasury") - before["treasury"]
    assert gained + taxed == amount
    assert before["alice"] - t.balance_of("alice") == amount
    assert gained == res.delivered
    assert res.taxed == to_pair
    assert t.state.balances.total() == 10**30 + 1
