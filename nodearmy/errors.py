"""Rejection types raised by the NodeArmy registry engine.

Every failure of a registry call is synchronous and leaves no partial effect.
Callers can catch :class:`RegistryError` to handle all of them at once, or a
specific subclass when they care about a particular rejection.
"""

from __future__ import annotations

from typing import Optional


class RegistryError(Exception):
    """Base class for every rejection surfaced by the registry."""

    @property
    def name(self) -> str:
        """Return the short rejection name (e.g. ``FeeMismatch``)."""
        return type(self).__name__


class Unauthorized(RegistryError):
    """Caller is not the registry owner."""

    def __init__(self, caller: str) -> None:
        super().__init__(f"{caller} is not the registry owner")
        self.caller = caller


class NotRegistered(RegistryError):
    """Address has no active node."""

    def __init__(self, node: str) -> None:
        super().__init__(f"{node} has no active node")
        self.node = node


class AlreadyRegistered(RegistryError):
    """Address already owns an active node."""

    def __init__(self, node: str) -> None:
        super().__init__(f"{node} is already registered")
        self.node = node


class FeeMismatch(RegistryError):
    """Attached payment differs from the configured fee."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"expected payment of {expected}, received {received}")
        self.expected = expected
        self.received = received


class MaxTierReached(RegistryError):
    """Node is already at the highest tier."""

    def __init__(self, node: Optional[str] = None) -> None:
        super().__init__(f"{node or 'node'} is already at the highest tier")
        self.node = node


class ZeroMerit(RegistryError):
    """Action submitted without any base merit."""

    def __init__(self) -> None:
        super().__init__("base merit must be greater than zero")


class InvalidBoostId(RegistryError):
    """Boost identifier outside the supported range."""

    def __init__(self, boost_id: int) -> None:
        super().__init__(f"boost id {boost_id} is out of range")
        self.boost_id = boost_id


class MaxBoostLevel(RegistryError):
    """Boost already at its maximum level."""

    def __init__(self, boost_id: int) -> None:
        super().__init__(f"boost {boost_id} is already at the maximum level")
        self.boost_id = boost_id


class InvalidBps(RegistryError):
    """Basis-point value above 10000 (or negative)."""

    def __init__(self, bps: int) -> None:
        super().__init__(f"{bps} is not a valid basis-point value")
        self.bps = bps


class ZeroAddress(RegistryError):
    """The zero address was supplied where a real address is required."""

    def __init__(self, field: str = "address") -> None:
        super().__init__(f"{field} must not be the zero address")
        self.field = field


class InvalidAddress(RegistryError):
    """A value that is not a 20-byte hex ledger address."""

    def __init__(self, value: object) -> None:
        super().__init__(f"{value!r} is not a valid address")
        self.value = value


class TransferFailed(RegistryError):
    """Forwarding a fee portion to a payout address failed."""

    def __init__(self, recipient: str) -> None:
        super().__init__(f"transfer to {recipient} failed")
        self.recipient = recipient


class DirectPaymentRejected(RegistryError):
    """Value sent outside of a defined paid operation."""

    def __init__(self, operation: Optional[str] = None) -> None:
        target = f"operation {operation!r}" if operation else "bare transfer"
        super().__init__(f"direct payment rejected ({target})")
        self.operation = operation


class ReentrantCall(RegistryError):
    """A call tried to enter the engine while another call was in progress."""

    def __init__(self) -> None:
        super().__init__("reentrant call rejected")


__all__ = [
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
]
