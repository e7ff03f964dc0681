"""Event records emitted by the NodeArmy registry engine."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Type

from nodearmy.json import JSONable
from nodearmy.types import Address, Tier


class EventType(Enum):
    """Names of the events in the registry's public interface."""

    REGISTERED = "Registered"
    UPGRADED = "Upgraded"
    ACTION = "Action"
    MERIT_ADJUSTED = "MeritAdjusted"
    BOOST_PURCHASED = "BoostPurchased"
    PARAMS_UPDATED = "ParamsUpdated"
    PAYOUT_ADDRESSES_UPDATED = "PayoutAddressesUpdated"
    OWNER_CHANGED = "OwnerChanged"
    PAYOUT = "Payout"


@dataclass(frozen=True)
class RegistryEvent(JSONable):
    """Base class for all registry events."""

    event_type: ClassVar[EventType]

    def to_payload(self) -> Dict[str, Any]:
        """Convert to an ``{"event": name, "args": {...}}`` payload."""
        return {"event": self.event_type.value, "args": self.to_dict()}

    def to_json(self) -> str:
        """Serialize the event payload to JSON."""
        return json.dumps(self.to_payload(), sort_keys=True)

    @staticmethod
    def from_payload(payload: Dict[str, Any]) -> "RegistryEvent":
        """Rebuild an event from a payload produced by :meth:`to_payload`."""
        event_cls = EVENT_CLASSES[EventType(payload["event"])]
        args = dict(payload["args"])
        for f in fields(event_cls):
            if f.type in ("Tier", Tier) and f.name in args:
                args[f.name] = Tier(args[f.name])
        return event_cls(**args)


@dataclass(frozen=True)
class Registered(RegistryEvent):
    event_type: ClassVar[EventType] = EventType.REGISTERED

    node: Address
    tier: Tier
    fee: int


@dataclass(frozen=True)
class Upgraded(RegistryEvent):
    event_type: ClassVar[EventType] = EventType.UPGRADED

    node: Address
    new_tier: Tier
    fee: int


@dataclass(frozen=True)
class ActionPerformed(RegistryEvent):
    event_type: ClassVar[EventType] = EventType.ACTION

    node: Address
    base_merit: int
    final_merit: int
    fee: int


@dataclass(frozen=True)
class MeritAdjusted(RegistryEvent):
    event_type: ClassVar[EventType] = EventType.MERIT_ADJUSTED

    node: Address
    total_merit: int


@dataclass(frozen=True)
class BoostPurchased(RegistryEvent):
    event_type: ClassVar[EventType] = EventType.BOOST_PURCHASED

    node: Address
    boost_id: int
    new_level: int
    fee: int


@dataclass(frozen=True)
class ParamsUpdated(RegistryEvent):
    event_type: ClassVar[EventType] = EventType.PARAMS_UPDATED

    register_fee: int
    upgrade_fee: int
    action_fee: int
    boost_fee: int
    treasury_bps: int


@dataclass(frozen=True)
class PayoutAddressesUpdated(RegistryEvent):
    event_type: ClassVar[EventType] = EventType.PAYOUT_ADDRESSES_UPDATED

    treasury: Address
    founder: Address


@dataclass(frozen=True)
class OwnerChanged(RegistryEvent):
    event_type: ClassVar[EventType] = EventType.OWNER_CHANGED

    old_owner: Address
    new_owner: Address


@dataclass(frozen=True)
class Payout(RegistryEvent):
    event_type: ClassVar[EventType] = EventType.PAYOUT

    recipient: Address
    amount: int


EVENT_CLASSES: Dict[EventType, Type[RegistryEvent]] = {
    cls.event_type: cls
    for cls in (
        Registered,
        Upgraded,
        ActionPerformed,
        MeritAdjusted,
        BoostPurchased,
        ParamsUpdated,
        PayoutAddressesUpdated,
        OwnerChanged,
        Payout,
    )
}


__all__ = [
    "EventType",
    "RegistryEvent",
    "Registered",
    "Upgraded",
    "ActionPerformed",
    "MeritAdjusted",
    "BoostPurchased",
    "ParamsUpdated",
    "PayoutAddressesUpdated",
    "OwnerChanged",
    "Payout",
    "EVENT_CLASSES",
]
