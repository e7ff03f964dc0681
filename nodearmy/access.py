"""Owner authorization for administrative registry operations."""

from __future__ import annotations

from nodearmy.errors import Unauthorized
from nodearmy.types import Address, to_address


def require_owner(caller: Address, owner: Address) -> Address:
    """Return the normalised *caller* if it is the registry owner.

    Raises:
        Unauthorized: when *caller* is anyone else.
        InvalidAddress: when *caller* is not an address at all.
    """
    normalised = to_address(caller)
    if normalised != owner:
        raise Unauthorized(normalised)
    return normalised


__all__ = ["require_owner"]
