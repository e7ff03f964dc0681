"""Tests for owner-only administration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from conftest import (
    ACTION_FEE,
    ALICE,
    BOB,
    FOUNDER,
    MALLORY,
    OWNER,
    REGISTER_FEE,
    TREASURY,
)
from nodearmy.errors import InvalidBps, NotRegistered, Unauthorized, ZeroAddress
from nodearmy.events import MeritAdjusted, OwnerChanged, ParamsUpdated, PayoutAddressesUpdated
from nodearmy.types import ZERO_ADDRESS, RegistryParams

if TYPE_CHECKING:
    from nodearmy.registry import RegistryEngine
    from nodearmy.transfer import InMemoryLedger


@pytest.mark.parametrize(
    "operation,args",
    [
        ("adjust_merit", (ALICE, 10)),
        ("set_params", (1, 2, 3, 4, 5)),
        ("set_payout_addresses", (BOB, BOB)),
        ("transfer_ownership", (MALLORY,)),
    ],
)
def test_admin_operations_require_owner(engine: RegistryEngine, alice: str, operation: str, args: tuple) -> None:
    """Every administrative operation rejects non-owners."""
    before = engine.export_state()
    with pytest.raises(Unauthorized) as excinfo:
        getattr(engine, operation)(MALLORY, *args)
    assert excinfo.value.caller == MALLORY
    assert engine.export_state() == before


def test_adjust_merit_positive_delta(engine: RegistryEngine, alice: str) -> None:
    """Positive deltas add to merit."""
    assert engine.adjust_merit(OWNER, alice, 25) == 25
    assert engine.get_node(alice).merit == 25
    assert engine.events[-1] == MeritAdjusted(node=alice, total_merit=25)


def test_adjust_merit_negative_delta(engine: RegistryEngine, alice: str) -> None:
    """Negative deltas subtract."""
    engine.node_action(alice, 50, value=ACTION_FEE)
    assert engine.adjust_merit(OWNER, alice, -20) == 30


def test_adjust_merit_saturates_at_zero(engine: RegistryEngine, alice: str) -> None:
    """A delta of -(merit + 1) leaves merit at zero."""
    engine.node_action(alice, 50, value=ACTION_FEE)
    merit = engine.get_node(alice).merit
    assert engine.adjust_merit(OWNER, alice, -(merit + 1)) == 0
    assert engine.get_node(alice).merit == 0


def test_adjust_merit_requires_registered_node(engine: RegistryEngine) -> None:
    """Only active nodes can be adjusted."""
    with pytest.raises(NotRegistered):
        engine.adjust_merit(OWNER, BOB, 5)


def test_set_params_overwrites_all(engine: RegistryEngine, ledger: InMemoryLedger) -> None:
    """New fees apply to the next call."""
    params = engine.set_params(OWNER, 10, 20, 30, 40, 2_500)

    assert params == RegistryParams(register_fee=10, upgrade_fee=20, action_fee=30, boost_fee=40, treasury_bps=2_500)
    assert engine.register_fee == 10
    assert engine.upgrade_fee == 20
    assert engine.action_fee == 30
    assert engine.boost_fee == 40
    assert engine.treasury_bps == 2_500
    assert engine.events[-1] == ParamsUpdated(
        register_fee=10, upgrade_fee=20, action_fee=30, boost_fee=40, treasury_bps=2_500
    )

    engine.register_node(BOB, value=10)
    assert ledger.balance_of(TREASURY) == 2
    assert ledger.balance_of(FOUNDER) == 8


def test_set_params_rejects_invalid_bps(engine: RegistryEngine) -> None:
    """Bps above 10000 are refused and nothing changes."""
    before = engine.params
    with pytest.raises(InvalidBps):
        engine.set_params(OWNER, 1, 2, 3, 4, 10_001)
    assert engine.params == before
    assert engine.events == ()


def test_set_params_accepts_bounds(engine: RegistryEngine) -> None:
    """0 and 10000 are both valid."""
    engine.set_params(OWNER, 0, 0, 0, 0, 0)
    engine.set_params(OWNER, 0, 0, 0, 0, 10_000)
    assert engine.treasury_bps == 10_000


def test_set_payout_addresses(engine: RegistryEngine, ledger: InMemoryLedger) -> None:
    """Subsequent fees go to the new payout addresses."""
    engine.set_payout_addresses(OWNER, MALLORY, BOB)
    assert (engine.treasury, engine.founder) == (MALLORY, BOB)
    assert engine.events[-1] == PayoutAddressesUpdated(treasury=MALLORY, founder=BOB)

    engine.register_node(ALICE, value=REGISTER_FEE)
    assert ledger.balance_of(MALLORY) == 700
    assert ledger.balance_of(BOB) == 300
    assert ledger.balance_of(TREASURY) == 0


@pytest.mark.parametrize("treasury,founder", [(ZERO_ADDRESS, BOB), (BOB, ZERO_ADDRESS)])
def test_set_payout_addresses_rejects_zero(engine: RegistryEngine, treasury: str, founder: str) -> None:
    """Neither payout address may be zero."""
    with pytest.raises(ZeroAddress):
        engine.set_payout_addresses(OWNER, treasury, founder)
    assert (engine.treasury, engine.founder) == (TREASURY, FOUNDER)


def test_transfer_ownership(engine: RegistryEngine, alice: str) -> None:
    """The new owner gains, and the old owner loses, administrative rights."""
    engine.transfer_ownership(OWNER, BOB)

    assert engine.owner == BOB
    assert engine.events[-1] == OwnerChanged(old_owner=OWNER, new_owner=BOB)

    with pytest.raises(Unauthorized):
        engine.adjust_merit(OWNER, alice, 1)
    assert engine.adjust_merit(BOB, alice, 1) == 1


def test_transfer_ownership_rejects_zero(engine: RegistryEngine) -> None:
    """Ownership cannot be handed to the zero address."""
    with pytest.raises(ZeroAddress):
        engine.transfer_ownership(OWNER, ZERO_ADDRESS)
    assert engine.owner == OWNER
