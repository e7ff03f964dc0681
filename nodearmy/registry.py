"""NodeArmy registry engine.

The engine is a small deterministic state machine: participants register a
node, upgrade its tier, earn merit through paid actions and buy boosts that
multiply future merit. Every paid call forwards its fee, split between the
treasury and the founder, through a :class:`~nodearmy.transfer.ValueTransfer`
substrate. Each call either commits completely or is rolled back, including
any fee transfer already made inside it.
"""

from __future__ import annotations

import copy
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Tuple

from nodearmy.access import require_owner
from nodearmy.errors import (
    AlreadyRegistered,
    DirectPaymentRejected,
    FeeMismatch,
    InvalidBoostId,
    MaxBoostLevel,
    MaxTierReached,
    NotRegistered,
    ReentrantCall,
    RegistryError,
    TransferFailed,
    ZeroMerit,
)
from nodearmy.events import (
    ActionPerformed,
    BoostPurchased,
    MeritAdjusted,
    OwnerChanged,
    ParamsUpdated,
    PayoutAddressesUpdated,
    Payout,
    Registered,
    RegistryEvent,
    Upgraded,
)
from nodearmy.fees import FeeSplit, split_fee, validate_bps
from nodearmy.logger import RegistryLogger
from nodearmy.transfer import InMemoryLedger, ValueTransfer
from nodearmy.types import (
    BOOST_BPS_PER_LEVEL,
    BPS_DENOMINATOR,
    MAX_BOOST_ID,
    MAX_BOOST_LEVEL,
    MIN_BOOST_ID,
    Address,
    NodeRecord,
    RegistryParams,
    RegistryState,
    Tier,
    to_address,
    to_nonzero_address,
)

if TYPE_CHECKING:
    from nodearmy.config import Settings


# Operation names of the public call interface -> (method name, payable)
OPERATIONS: Dict[str, Tuple[str, bool]] = {
    "register": ("register_node", True),
    "upgrade": ("upgrade_tier", True),
    "action": ("node_action", True),
    "buyBoost": ("buy_boost", True),
    "adjustMerit": ("adjust_merit", False),
    "setParams": ("set_params", False),
    "setPayoutAddresses": ("set_payout_addresses", False),
    "transferOwnership": ("transfer_ownership", False),
}


class RegistryEngine:
    """Owns the registry state and exposes its operations."""

    def __init__(
        self,
        owner: Address,
        treasury: Address,
        founder: Address,
        params: Optional[RegistryParams] = None,
        transfer: Optional[ValueTransfer] = None,
        clock: Optional[Callable[[], float]] = None,
        logger: Optional[RegistryLogger] = None,
    ) -> None:
        """Initialise the engine.

        Args:
            owner: Administrative authority.
            treasury: Payout address receiving ``treasury_bps`` of every fee.
            founder: Payout address receiving the remainder.
            params: Initial fee schedule (all zero when omitted).
            transfer: Value transfer substrate; an :class:`InMemoryLedger` by default.
            clock: Callable returning the current time in seconds.
            logger: Logger for call processing.
        """
        params = params or RegistryParams()
        validate_bps(params.treasury_bps)
        self._state = RegistryState(
            owner=to_nonzero_address(owner, "owner"),
            treasury=to_nonzero_address(treasury, "treasury"),
            founder=to_nonzero_address(founder, "founder"),
            params=params,
        )
        self.transfer: ValueTransfer = transfer if transfer is not None else InMemoryLedger()
        self._clock = clock or time.time
        self.logger = logger or RegistryLogger("registry")
        self._events: List[RegistryEvent] = []
        self._pending: Optional[List[RegistryEvent]] = None
        self._entered = False

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        transfer: Optional[ValueTransfer] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> "RegistryEngine":
        """Build an engine from :class:`~nodearmy.config.Settings`."""
        missing = [
            name
            for name in ("owner_address", "treasury_address", "founder_address")
            if not getattr(settings, name)
        ]
        if missing:
            raise ValueError(f"Missing registry configuration: {', '.join(missing)}")

        log_file = None
        if settings.log_file_enabled:
            Path(settings.log_file_path).parent.mkdir(parents=True, exist_ok=True)
            log_file = settings.log_file_path

        return cls(
            owner=settings.owner_address,
            treasury=settings.treasury_address,
            founder=settings.founder_address,
            params=RegistryParams(
                register_fee=settings.register_fee,
                upgrade_fee=settings.upgrade_fee,
                action_fee=settings.action_fee,
                boost_fee=settings.boost_fee,
                treasury_bps=settings.treasury_bps,
            ),
            transfer=transfer,
            clock=clock,
            logger=RegistryLogger("registry", log_file=log_file, level=settings.log_level),
        )

    # ------------------------------------------------------------------
    # Readable state
    # ------------------------------------------------------------------

    @property
    def owner(self) -> Address:
        return self._state.owner

    @property
    def treasury(self) -> Address:
        return self._state.treasury

    @property
    def founder(self) -> Address:
        return self._state.founder

    @property
    def params(self) -> RegistryParams:
        return self._state.params

    @property
    def treasury_bps(self) -> int:
        return self._state.params.treasury_bps

    @property
    def register_fee(self) -> int:
        return self._state.params.register_fee

    @property
    def upgrade_fee(self) -> int:
        return self._state.params.upgrade_fee

    @property
    def action_fee(self) -> int:
        return self._state.params.action_fee

    @property
    def boost_fee(self) -> int:
        return self._state.params.boost_fee

    @property
    def total_nodes(self) -> int:
        return self._state.total_nodes

    @property
    def events(self) -> Tuple[RegistryEvent, ...]:
        """Every event emitted by committed calls, oldest first."""
        return tuple(self._events)

    def get_node(self, node: Address) -> NodeRecord:
        """Return a copy of the node record (an inactive record if unknown)."""
        record = self._state.nodes.get(to_address(node))
        return copy.copy(record) if record is not None else NodeRecord()

    def is_registered(self, node: Address) -> bool:
        return self.get_node(node).active

    def boost_level(self, node: Address, boost_id: int) -> int:
        """Return the level of one boost; 0 for any unset pair."""
        return self._state.boosts.get(to_address(node), {}).get(boost_id, 0)

    def boost_levels(self, node: Address) -> Dict[int, int]:
        """Return the level of every boost id of *node*."""
        levels = self._state.boosts.get(to_address(node), {})
        return {boost_id: levels.get(boost_id, 0) for boost_id in range(MIN_BOOST_ID, MAX_BOOST_ID + 1)}

    def get_boost_bonus_bps(self, node: Address) -> int:
        """Return the merit bonus of *node* in basis points (0-25000)."""
        return sum(level * BOOST_BPS_PER_LEVEL for level in self.boost_levels(node).values())

    def export_state(self) -> Dict[str, Any]:
        """Return the whole registry state as a JSON-safe dictionary."""
        return self._state.to_dict()

    def close(self) -> None:
        """Release the log file held by the engine's logger."""
        self.logger.close()

    # ------------------------------------------------------------------
    # Call plumbing
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Run one call atomically.

        State is snapshotted and the transfer journal opened on entry. On any
        exception the snapshot is restored, journaled transfers are undone and
        pending events are dropped before the exception propagates. Payouts
        are logged only once the journal has been committed.
        """
        if self._entered:
            self.logger.warning(f"{operation} rejected: reentrant call")
            raise ReentrantCall()
        snapshot = copy.deepcopy(self._state)
        # The guard is only taken once the journal is open.
        self.transfer.begin()
        self._entered = True
        self._pending = []
        try:
            yield
        except RegistryError as exc:
            self._state = snapshot
            self.transfer.rollback()
            self.logger.warning(f"{operation} rejected: {exc.name} ({exc})")
            raise
        except Exception as exc:
            self._state = snapshot
            self.transfer.rollback()
            self.logger.error(f"{operation} failed: {exc}")
            raise
        else:
            self.transfer.commit()
            self._events.extend(self._pending)
            for event in self._pending:
                if isinstance(event, Payout):
                    self.logger.transfer(f"Sent {event.amount} to {event.recipient}")
        finally:
            self._pending = None
            self._entered = False

    def _emit(self, event: RegistryEvent) -> None:
        assert self._pending is not None, "events can only be emitted inside a call"
        self._pending.append(event)

    def _require_active(self, node: Address) -> Tuple[Address, NodeRecord]:
        address = to_address(node)
        record = self._state.nodes.get(address)
        if record is None or not record.active:
            raise NotRegistered(address)
        return address, record

    @staticmethod
    def _require_payment(value: int, fee: int) -> None:
        if value < 0:
            raise ValueError("payment must be non-negative")
        if value != fee:
            raise FeeMismatch(expected=fee, received=value)

    def _disburse(self, amount: int) -> FeeSplit:
        """Forward *amount* to treasury and founder.

        Must run after the call's state mutation: a recipient may call back
        into the engine, which the reentrancy guard rejects.
        """
        split = split_fee(amount, self._state.params.treasury_bps)
        portions = (
            (self._state.treasury, split.to_treasury),
            (self._state.founder, split.to_founder),
        )
        for recipient, portion in portions:
            if portion == 0:
                continue
            if not self.transfer.send(recipient, portion):
                raise TransferFailed(recipient)
            self._emit(Payout(recipient=recipient, amount=portion))
        return split

    # ------------------------------------------------------------------
    # Node operations
    # ------------------------------------------------------------------

    def register_node(self, sender: Address, value: int) -> NodeRecord:
        """Register *sender* as a SCOUT node, paying ``register_fee``."""
        with self._transaction("register"):
            node = to_address(sender)
            existing = self._state.nodes.get(node)
            if existing is not None and existing.active:
                raise AlreadyRegistered(node)
            fee = self._state.params.register_fee
            self._require_payment(value, fee)

            record = NodeRecord(active=True, tier=Tier.NONE.next(), merit=0, joined_at=int(self._clock()))
            self._state.nodes[node] = record
            self._state.total_nodes += 1
            self._emit(Registered(node=node, tier=record.tier, fee=fee))
            self._disburse(fee)

        self.logger.success(f"Registered {node} (total nodes: {self._state.total_nodes})")
        return copy.copy(record)

    def upgrade_tier(self, sender: Address, value: int) -> Tier:
        """Advance the caller's tier one step, paying ``upgrade_fee``."""
        with self._transaction("upgrade"):
            node, record = self._require_active(sender)
            if record.tier.is_max:
                raise MaxTierReached(node)
            fee = self._state.params.upgrade_fee
            self._require_payment(value, fee)

            record.tier = record.tier.next()
            self._emit(Upgraded(node=node, new_tier=record.tier, fee=fee))
            self._disburse(fee)

        self.logger.success(f"Upgraded {node} to {record.tier.name}")
        return record.tier

    def node_action(self, sender: Address, base_merit: int, value: int) -> int:
        """Perform a paid action earning boosted merit.

        Returns:
            The merit credited, ``base_merit * (10000 + bonus_bps) // 10000``.
        """
        with self._transaction("action"):
            node, record = self._require_active(sender)
            fee = self._state.params.action_fee
            self._require_payment(value, fee)
            if base_merit < 0:
                raise ValueError("base merit must be non-negative")
            if base_merit == 0:
                raise ZeroMerit()

            bonus_bps = self.get_boost_bonus_bps(node)
            final_merit = base_merit * (BPS_DENOMINATOR + bonus_bps) // BPS_DENOMINATOR
            record.merit += final_merit
            self._emit(ActionPerformed(node=node, base_merit=base_merit, final_merit=final_merit, fee=fee))
            self._emit(MeritAdjusted(node=node, total_merit=record.merit))
            self._disburse(fee)

        self.logger.merit(f"{node} earned {final_merit} merit (base {base_merit}, bonus {bonus_bps} bps)")
        return final_merit

    def buy_boost(self, sender: Address, boost_id: int, value: int) -> int:
        """Raise one of the caller's boosts by a level, paying ``boost_fee``.

        Returns:
            The new boost level.
        """
        with self._transaction("buyBoost"):
            node, _record = self._require_active(sender)
            if not MIN_BOOST_ID <= boost_id <= MAX_BOOST_ID:
                raise InvalidBoostId(boost_id)
            fee = self._state.params.boost_fee
            self._require_payment(value, fee)
            levels = self._state.boosts.setdefault(node, {})
            level = levels.get(boost_id, 0)
            if level >= MAX_BOOST_LEVEL:
                raise MaxBoostLevel(boost_id)

            levels[boost_id] = level + 1
            self._emit(BoostPurchased(node=node, boost_id=boost_id, new_level=level + 1, fee=fee))
            self._disburse(fee)

        self.logger.success(f"{node} raised boost {boost_id} to level {level + 1}")
        return level + 1

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def adjust_merit(self, sender: Address, node: Address, delta: int) -> int:
        """Add *delta* to a node's merit; negative deltas saturate at zero.

        Returns:
            The node's new merit total.
        """
        with self._transaction("adjustMerit"):
            require_owner(sender, self._state.owner)
            address, record = self._require_active(node)
            if delta >= 0:
                record.merit += delta
            else:
                record.merit = max(0, record.merit + delta)
            self._emit(MeritAdjusted(node=address, total_merit=record.merit))

        self.logger.merit(f"Owner adjusted {address} by {delta}, total {record.merit}")
        return record.merit

    def set_params(
        self,
        sender: Address,
        register_fee: int,
        upgrade_fee: int,
        action_fee: int,
        boost_fee: int,
        treasury_bps: int,
    ) -> RegistryParams:
        """Replace the whole fee schedule."""
        with self._transaction("setParams"):
            require_owner(sender, self._state.owner)
            validate_bps(treasury_bps)
            params = RegistryParams(
                register_fee=register_fee,
                upgrade_fee=upgrade_fee,
                action_fee=action_fee,
                boost_fee=boost_fee,
                treasury_bps=treasury_bps,
            )
            self._state.params = params
            self._emit(ParamsUpdated(**params.to_dict()))

        self.logger.info(f"Parameters updated: {params}")
        return params

    def set_payout_addresses(self, sender: Address, treasury: Address, founder: Address) -> None:
        """Replace the treasury and founder payout addresses."""
        with self._transaction("setPayoutAddresses"):
            require_owner(sender, self._state.owner)
            treasury = to_nonzero_address(treasury, "treasury")
            founder = to_nonzero_address(founder, "founder")
            self._state.treasury = treasury
            self._state.founder = founder
            self._emit(PayoutAddressesUpdated(treasury=treasury, founder=founder))

        self.logger.info(f"Payout addresses updated: treasury={treasury} founder={founder}")

    def transfer_ownership(self, sender: Address, new_owner: Address) -> None:
        """Hand administrative authority to *new_owner*."""
        with self._transaction("transferOwnership"):
            old_owner = require_owner(sender, self._state.owner)
            new_owner = to_nonzero_address(new_owner, "new_owner")
            self._emit(OwnerChanged(old_owner=old_owner, new_owner=new_owner))
            self._state.owner = new_owner

        self.logger.info(f"Ownership transferred from {old_owner} to {new_owner}")

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def receive(self, sender: Address, value: int = 0) -> None:
        """Handle a bare value transfer. Always rejected."""
        self.logger.warning(f"Rejected bare transfer of {value} from {sender}")
        raise DirectPaymentRejected()

    def call(self, sender: Address, operation: Optional[str], *args: Any, value: int = 0) -> Any:
        """Dispatch an operation by its interface name.

        Unknown operations, a missing operation and value attached to a
        non-payable operation are rejected with ``DirectPaymentRejected``.
        """
        if not operation:
            return self.receive(sender, value)
        if operation not in OPERATIONS:
            self.logger.warning(f"Rejected call to undefined operation {operation!r} from {sender}")
            raise DirectPaymentRejected(operation)

        method_name, payable = OPERATIONS[operation]
        method = getattr(self, method_name)
        if payable:
            return method(sender, *args, value=value)
        if value:
            self.logger.warning(f"Rejected {value} attached to non-payable {operation} from {sender}")
            raise DirectPaymentRejected(operation)
        return method(sender, *args)


__all__ = ["RegistryEngine", "OPERATIONS"]
