"""NodeArmy registry package.

A membership registry that tracks nodes, their tier, accumulated merit and
purchased boosts, with every paid action split between a treasury and a
founder payout address.

  - nodearmy.types        node record, tier, parameters, address helpers
  - nodearmy.registry     the registry engine
  - nodearmy.events       events emitted by committed calls
  - nodearmy.transfer     value transfer substrates
  - nodearmy.config       settings loaded from the environment

"""

from __future__ import annotations

# Domain types
from .types import (  # noqa: F401
    Address,
    ZERO_ADDRESS,
    Tier,
    NodeRecord,
    RegistryParams,
    RegistryState,
)

# Errors
from .errors import (  # noqa: F401
    RegistryError,
    Unauthorized,
    NotRegistered,
    AlreadyRegistered,
    FeeMismatch,
    MaxTierReached,
    ZeroMerit,
    InvalidBoostId,
    MaxBoostLevel,
    InvalidBps,
    ZeroAddress,
    InvalidAddress,
    TransferFailed,
    DirectPaymentRejected,
    ReentrantCall,
)

# Events
from .events import EventType, RegistryEvent  # noqa: F401

# Engine and infra
from .fees import FeeSplit, split_fee  # noqa: F401
from .transfer import InMemoryLedger, ValueTransfer  # noqa: F401
from .registry import RegistryEngine  # noqa: F401
from .logger import RegistryLogger  # noqa: F401

__all__ = [
    # core
    "Address",
    "ZERO_ADDRESS",
    "Tier",
    "NodeRecord",
    "RegistryParams",
    "RegistryState",
    # errors
    "RegistryError",
    "Unauthorized",
    "NotRegistered",
    "AlreadyRegistered",
    "FeeMismatch",
    "MaxTierReached",
    "ZeroMerit",
    "InvalidBoostId",
    "MaxBoostLevel",
    "InvalidBps",
    "ZeroAddress",
    "InvalidAddress",
    "TransferFailed",
    "DirectPaymentRejected",
    "ReentrantCall",
    # events
    "EventType",
    "RegistryEvent",
    # app
    "FeeSplit",
    "split_fee",
    "InMemoryLedger",
    "ValueTransfer",
    "RegistryEngine",
    "RegistryLogger",
]
