"""Fee split arithmetic.

Every paid registry call forwards its fee to two payout addresses. The
treasury share is computed with floor division and the founder receives the
remainder, so the two portions always add up to the original amount.
"""

from __future__ import annotations

from dataclasses import dataclass

from nodearmy.errors import InvalidBps
from nodearmy.types import BPS_DENOMINATOR


def validate_bps(bps: int) -> int:
    """Return *bps* unchanged if it lies within ``[0, 10000]``.

    Raises:
        InvalidBps: otherwise.
    """
    if not 0 <= bps <= BPS_DENOMINATOR:
        raise InvalidBps(bps)
    return bps


@dataclass(frozen=True)
class FeeSplit:
    """Treasury and founder portions of a single fee."""

    amount: int
    to_treasury: int
    to_founder: int


def split_fee(amount: int, treasury_bps: int) -> FeeSplit:
    """Split *amount* between treasury and founder.

    Args:
        amount: Fee amount in the ledger's native unit.
        treasury_bps: Treasury share in basis points (0-10000).

    Returns:
        A :class:`FeeSplit` whose portions sum exactly to *amount*.
    """
    if amount < 0:
        raise ValueError("amount must be non-negative")
    validate_bps(treasury_bps)
    to_treasury = amount * treasury_bps // BPS_DENOMINATOR
    return FeeSplit(amount=amount, to_treasury=to_treasury, to_founder=amount - to_treasury)


__all__ = ["FeeSplit", "split_fee", "validate_bps"]
