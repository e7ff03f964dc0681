"""Shared fixtures for the registry test-suite."""

from __future__ import annotations

import pytest

from nodearmy.registry import RegistryEngine
from nodearmy.transfer import InMemoryLedger
from nodearmy.types import RegistryParams

# Digit-only addresses are already in checksum form.
OWNER = "0x" + "1" * 40
TREASURY = "0x" + "2" * 40
FOUNDER = "0x" + "3" * 40
ALICE = "0x" + "4" * 40
BOB = "0x" + "5" * 40
MALLORY = "0x" + "6" * 40

REGISTER_FEE = 1_000
UPGRADE_FEE = 2_000
ACTION_FEE = 100
BOOST_FEE = 500
TREASURY_BPS = 7_000

NOW = 1_700_000_000


@pytest.fixture
def params() -> RegistryParams:
    return RegistryParams(
        register_fee=REGISTER_FEE,
        upgrade_fee=UPGRADE_FEE,
        action_fee=ACTION_FEE,
        boost_fee=BOOST_FEE,
        treasury_bps=TREASURY_BPS,
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def engine(params: RegistryParams, ledger: InMemoryLedger) -> RegistryEngine:
    return RegistryEngine(
        owner=OWNER,
        treasury=TREASURY,
        founder=FOUNDER,
        params=params,
        transfer=ledger,
        clock=lambda: NOW,
    )


@pytest.fixture
def alice(engine: RegistryEngine) -> str:
    """ALICE, registered as a SCOUT node."""
    engine.register_node(ALICE, value=REGISTER_FEE)
    return ALICE
