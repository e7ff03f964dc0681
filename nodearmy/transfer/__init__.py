"""Value transfer substrates used to forward registry fees."""

from __future__ import annotations

from .transfer import ValueTransfer  # noqa: F401
from .memory import InMemoryLedger  # noqa: F401

__all__ = [
    "ValueTransfer",
    "InMemoryLedger",
]
