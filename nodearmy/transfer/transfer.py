from typing import Protocol

from nodearmy.types import Address


class ValueTransfer(Protocol):
    """Protocol that any value transfer substrate must implement.

    The registry opens a journal with :meth:`begin` at the start of every call,
    forwards fee portions with :meth:`send`, and closes the journal with either
    :meth:`commit` (call succeeded) or :meth:`rollback` (call rejected).
    """

    def send(self, recipient: Address, amount: int) -> bool:  # pragma: no cover
        """Move *amount* to *recipient*.

        Implementations **must** return *False* when the recipient refuses the
        value or the transfer cannot be performed. They **should not** raise for
        recipient-side failures; the registry turns a *False* result into a
        ``TransferFailed`` rejection.
        """

    def begin(self) -> None:  # pragma: no cover
        """Start journaling transfers made by the current call."""

    def commit(self) -> None:  # pragma: no cover
        """Make every journaled transfer final."""

    def rollback(self) -> None:  # pragma: no cover
        """Undo every transfer journaled since :meth:`begin`."""
