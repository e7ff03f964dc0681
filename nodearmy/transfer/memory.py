"""In-memory value transfer substrate."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Set, Tuple

from nodearmy.types import Address, to_address

LOGGER = logging.getLogger(__name__)

ReceiveHook = Callable[[Address, int], None]


class InMemoryLedger:
    """Native-value ledger kept in a dictionary.

    Transfers made between :meth:`begin` and :meth:`commit` are journaled so
    that :meth:`rollback` can undo them when the surrounding registry call is
    rejected. Recipients can be configured to refuse value (:meth:`reject`) or
    to run a hook on receipt (:meth:`on_receive`); a hook that raises makes the
    transfer fail, like a recipient contract reverting.
    """

    def __init__(self, balances: Optional[Dict[Address, int]] = None) -> None:
        self._balances: Dict[Address, int] = defaultdict(int)
        for address, amount in (balances or {}).items():
            self._balances[to_address(address)] = amount
        self._journal: Optional[List[Tuple[Address, int]]] = None
        self._rejecting: Set[Address] = set()
        self._hooks: Dict[Address, ReceiveHook] = {}

    @property
    def in_call(self) -> bool:
        """Return True while a journal is open."""
        return self._journal is not None

    def balance_of(self, address: Address) -> int:
        """Return the balance credited to *address*."""
        return self._balances.get(to_address(address), 0)

    def balances(self) -> Dict[Address, int]:
        """Return a copy of all non-zero balances."""
        return {address: amount for address, amount in self._balances.items() if amount}

    def reject(self, address: Address) -> None:
        """Make every transfer to *address* fail."""
        self._rejecting.add(to_address(address))

    def accept(self, address: Address) -> None:
        """Undo a previous :meth:`reject`."""
        self._rejecting.discard(to_address(address))

    def on_receive(self, address: Address, hook: Optional[ReceiveHook]) -> None:
        """Install (or with ``None`` remove) a receive hook for *address*."""
        address = to_address(address)
        if hook is None:
            self._hooks.pop(address, None)
        else:
            self._hooks[address] = hook

    def begin(self) -> None:
        """Open a new journal."""
        if self._journal is not None:
            raise RuntimeError("a transfer journal is already open")
        self._journal = []

    def send(self, recipient: Address, amount: int) -> bool:
        """Credit *amount* to *recipient*, returning False if it refuses."""
        if amount < 0:
            raise ValueError("amount must be non-negative")
        recipient = to_address(recipient)
        if recipient in self._rejecting:
            LOGGER.debug("Recipient %s rejects incoming value", recipient)
            return False

        hook = self._hooks.get(recipient)
        if hook is not None:
            try:
                hook(recipient, amount)
            except Exception as exc:  # noqa: BLE001 – recipient-side revert
                LOGGER.debug("Receive hook of %s reverted: %s", recipient, exc)
                return False

        self._balances[recipient] += amount
        if self._journal is not None:
            self._journal.append((recipient, amount))
        return True

    def commit(self) -> None:
        """Close the journal, keeping every transfer."""
        self._journal = None

    def rollback(self) -> None:
        """Close the journal, undoing every transfer it recorded."""
        journal = self._journal or []
        for recipient, amount in reversed(journal):
            self._balances[recipient] -= amount
        if journal:
            LOGGER.debug("Rolled back %s transfer(s)", len(journal))
        self._journal = None
