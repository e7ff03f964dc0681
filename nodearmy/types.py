"""Base types and data structures for the NodeArmy registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict

from web3 import Web3

from nodearmy.errors import InvalidAddress, MaxTierReached, ZeroAddress
from nodearmy.json import JSONable


Address = str

ZERO_ADDRESS: Address = "0x0000000000000000000000000000000000000000"

BPS_DENOMINATOR = 10_000
MIN_BOOST_ID = 1
MAX_BOOST_ID = 5
MAX_BOOST_LEVEL = 5
BOOST_BPS_PER_LEVEL = 1_000


class Tier(IntEnum):
    """Membership tier of a node, ordered from lowest to highest."""

    NONE = 0
    SCOUT = 1
    OPERATOR = 2
    OVERSEER = 3

    @property
    def is_max(self) -> bool:
        """Return True for the highest tier."""
        return self is Tier.OVERSEER

    def next(self) -> "Tier":
        """Return the tier one step above this one.

        Raises:
            MaxTierReached: when called on :attr:`Tier.OVERSEER`.
        """
        if self.is_max:
            raise MaxTierReached()
        return Tier(self.value + 1)


def to_address(value: str) -> Address:
    """Return *value* as a checksummed address.

    Raises:
        InvalidAddress: if *value* is not a 20-byte hex address.
    """
    if not isinstance(value, str) or not Web3.is_address(value):
        raise InvalidAddress(value)
    return Web3.to_checksum_address(value)


def to_nonzero_address(value: str, field_name: str = "address") -> Address:
    """Like :func:`to_address` but also rejects the zero address."""
    address = to_address(value)
    if address == ZERO_ADDRESS:
        raise ZeroAddress(field_name)
    return address


@dataclass
class NodeRecord:
    """Registry entry of a single participant."""

    active: bool = False
    tier: Tier = Tier.NONE
    merit: int = 0
    joined_at: int = 0


@dataclass(frozen=True)
class RegistryParams(JSONable):
    """Owner-mutable fee schedule.

    Fees are expressed in the ledger's native unit (wei). ``treasury_bps`` is
    the share of every fee routed to the treasury, the remainder going to the
    founder.
    """

    register_fee: int = 0
    upgrade_fee: int = 0
    action_fee: int = 0
    boost_fee: int = 0
    treasury_bps: int = 0

    def __post_init__(self) -> None:
        """Reject negative fees; the bps bound is enforced by the engine."""
        for name in ("register_fee", "upgrade_fee", "action_fee", "boost_fee"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass
class RegistryState(JSONable):
    """All persistent state owned by a :class:`~nodearmy.registry.RegistryEngine`."""

    owner: Address
    treasury: Address
    founder: Address
    params: RegistryParams
    nodes: Dict[Address, NodeRecord] = field(default_factory=dict)
    # node -> boost id -> level
    boosts: Dict[Address, Dict[int, int]] = field(default_factory=dict)
    total_nodes: int = 0


__all__ = [
    "Address",
    "ZERO_ADDRESS",
    "BPS_DENOMINATOR",
    "MIN_BOOST_ID",
    "MAX_BOOST_ID",
    "MAX_BOOST_LEVEL",
    "BOOST_BPS_PER_LEVEL",
    "Tier",
    "NodeRecord",
    "RegistryParams",
    "RegistryState",
    "to_address",
    "to_nonzero_address",
]
