"""
Reconciliation controller for the order detail view.

Merges server truth with the operator's unsaved edits:

    IDLE -> SAVING -> (SUCCESS | PARTIAL_FAILURE | FAILURE) -> IDLE

A save sends only the changed fields, then re-fetches the order once the
update has settled (never in parallel):

- update ok, fetch ok      -> SUCCESS: snapshot replaced, overlay cleared,
                              list row patched, auto-close requested
- update failed, fetch ok  -> PARTIAL_FAILURE: snapshot replaced from the
                              fetch, overlay kept for a retry
- fetch failed             -> FAILURE: overlay merged onto the last snapshot
                              locally and flagged as unconfirmed

Every outcome is returned as a value (Confirmed, Unconfirmed, NoChanges,
Rejected, Discarded). Recoverable errors are turned into notices on the
event bus and never propagate to the caller.

Each open() issues a new CancellationToken and cancels the previous one.
Responses that arrive after the token was cancelled (order closed or
another order opened) are discarded without touching the caches.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..domain.events.event_types import EventType, NoticeLevel
from ..domain.exceptions import OrderValidationError, RecoverableError, SessionExpiredError
from ..domain.interfaces.orders_gateway import OrdersGateway
from ..domain.services.order_diff import diff, to_patch_payload
from ..infrastructure.stores.order_store import OrderStore
from ..models.order import OrderSnapshot, OrderStatus
from ..utils.cancellation import CancellationToken
from ..utils.logging_setup import get_logger
from ..utils.result import attempt
from ..utils.structured_logger import LogCategory, StructuredLogger
from ..utils.trace_context import new_operation
from .edit_overlay import EditOverlay
from .simple_event_bus import SimpleEventBus

logger = get_logger(__name__)
audit = StructuredLogger(logger)

NOTHING_TO_SAVE = "Nothing to save"
REASON_REQUIRED = "A cancellation reason is required"
NOT_CANCELLABLE = "This order can no longer be cancelled"
NO_ORDER_OPEN = "No order is open"
SAVE_IN_PROGRESS = "A save is already in progress"
UPDATED_LOCALLY = "Order updated locally (not confirmed by the server)"


class ControllerState(Enum):
    """Reconciliation states."""
    IDLE = "idle"
    SAVING = "saving"
    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FAILURE = "failure"


# -----------------------------------------------------------------------------
# Outcomes
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Confirmed:
    """
    Snapshot fetched from the server after the update.

    ``error`` is set when the update itself failed (PARTIAL_FAILURE): the
    snapshot is server truth but the operator's edits were not applied.
    """

    snapshot: OrderSnapshot
    state: ControllerState = ControllerState.SUCCESS
    error: Optional[str] = None
    kind: str = "confirmed"

    @property
    def saved(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Unconfirmed:
    """Local overlay-over-snapshot merge shown because the re-fetch failed."""

    merged_view: OrderSnapshot
    state: ControllerState = ControllerState.FAILURE
    error: Optional[str] = None
    update_accepted: bool = False
    kind: str = "unconfirmed"


@dataclass(frozen=True)
class NoChanges:
    """Overlay mirrors the snapshot; no request was sent."""

    order_number: str
    kind: str = "no_changes"


@dataclass(frozen=True)
class Rejected:
    """Refused client-side before any request was sent."""

    reason: str
    order_number: Optional[str] = None
    kind: str = "rejected"


@dataclass(frozen=True)
class Discarded:
    """Late response for an order that is no longer in focus."""

    order_number: str
    kind: str = "discarded"


SaveOutcome = Union[Confirmed, Unconfirmed, NoChanges, Rejected, Discarded]


def describe_error(error: BaseException) -> str:
    """Operator-facing message for a recoverable error."""
    if isinstance(error, SessionExpiredError):
        return "Your session has expired. Please log in again."
    return str(error) or error.__class__.__name__


class ReconciliationController:
    """Drives open/save/cancel/close for the focused order."""

    def __init__(
        self,
        gateway: OrdersGateway,
        store: OrderStore,
        event_bus: SimpleEventBus,
        auto_close_delay_sec: float = 1.5,
        overlay: Optional[EditOverlay] = None,
    ):
        """
        Initialize the controller.

        Args:
            gateway: Remote order backend.
            store: Focused snapshot + list page cache.
            event_bus: Receives notices and reconciliation events.
            auto_close_delay_sec: Delay before a successful save closes the
                detail view. 0 or less disables auto-close.
            overlay: Edit overlay (a new one by default).
        """
        self.gateway = gateway
        self.store = store
        self.event_bus = event_bus
        self.auto_close_delay_sec = auto_close_delay_sec
        self.overlay = overlay or EditOverlay()

        self._state = ControllerState.IDLE
        self._last_state = ControllerState.IDLE
        self._token: Optional[CancellationToken] = None
        self._unconfirmed = False
        self._auto_close_task: Optional[asyncio.Task] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def last_state(self) -> ControllerState:
        """Terminal state of the most recent save or cancel."""
        return self._last_state

    @property
    def order_number(self) -> Optional[str]:
        return self.overlay.order_number

    @property
    def snapshot(self) -> Optional[OrderSnapshot]:
        """What the detail view shows (may be an unconfirmed local merge)."""
        order_number = self.order_number
        return self.store.get(order_number) if order_number else None

    @property
    def effective(self) -> Optional[OrderSnapshot]:
        """Displayed snapshot with the pending edits applied."""
        snapshot = self.snapshot
        return self.overlay.effective(snapshot) if snapshot is not None else None

    @property
    def is_unconfirmed(self) -> bool:
        """The focused snapshot is a local merge the server has not confirmed."""
        return self._unconfirmed

    @property
    def token(self) -> Optional[CancellationToken]:
        return self._token

    # -------------------------------------------------------------------------
    # Open / close
    # -------------------------------------------------------------------------

    async def open(self, order_number: str) -> Optional[OrderSnapshot]:
        """
        Fetch an order and focus it.

        Returns:
            The fetched snapshot, or None when the fetch failed or the order
            was closed / replaced while the fetch was in flight.
        """
        token = self._focus(order_number)

        with new_operation():
            logger.info(f"Opening order {order_number}")
            result = await attempt(self.gateway.get_order, order_number, error_type=RecoverableError)

            if token.cancelled:
                logger.info(f"Discarding detail for {order_number}: {token.reason}")
                return None

            if result.is_err():
                message = describe_error(result.error)
                logger.warning(f"Failed to load order {order_number}: {message}")
                self._notice(NoticeLevel.ERROR, f"Failed to load order: {message}", order_number)
                return None

            snapshot = result.unwrap()
            if snapshot.order_number != order_number:
                logger.info(f"Server resolved {order_number} to {snapshot.order_number}")
            # Key by the server identity; lookups may be case-insensitive
            self.store.set(snapshot.order_number, snapshot)
            self.overlay.bind(snapshot)
            self._unconfirmed = False
            self.event_bus.publish(EventType.ORDER_FOCUSED, snapshot)
            return snapshot

    def close(self) -> None:
        """Drop the focused order: reset overlay, cancel in-flight calls."""
        order_number = self.order_number
        if self._token is not None:
            self._token.cancel("closed")
        self._token = None
        self._cancel_auto_close()

        self.overlay.bind(None)
        self._state = ControllerState.IDLE
        self._unconfirmed = False

        if order_number:
            self.store.invalidate(order_number)
            self.event_bus.publish(EventType.ORDER_CLOSED, order_number)
            logger.debug(f"Closed order {order_number}")

    def set_field(self, field: str, value: Any) -> bool:
        """Record an operator edit (see EditOverlay.set_field)."""
        return self.overlay.set_field(field, value)

    # -------------------------------------------------------------------------
    # Save / cancel
    # -------------------------------------------------------------------------

    async def save(self) -> SaveOutcome:
        """Send the pending edits and reconcile with the server."""
        rejected = self._guard()
        if rejected is not None:
            return rejected

        base = self.overlay.base
        try:
            changes = diff(self.overlay.values, base)
            payload = to_patch_payload(changes) if changes else {}
        except OrderValidationError as e:
            return self._reject(str(e), base.order_number)

        if not changes:
            logger.info(f"Save of {base.order_number}: no changes")
            self._notice(NoticeLevel.INFO, NOTHING_TO_SAVE, base.order_number)
            return NoChanges(order_number=base.order_number)

        return await self._reconcile(base, changes, payload, action="save")

    async def cancel(self, reason: str) -> SaveOutcome:
        """
        Cancel the focused order with a mandatory reason.

        Uses the same update endpoint with ``{order_status: "cancelled", reason}``.
        """
        rejected = self._guard()
        if rejected is not None:
            return rejected

        base = self.overlay.base
        if not reason or not reason.strip():
            return self._reject(REASON_REQUIRED, base.order_number)
        if not base.can_be_cancelled:
            return self._reject(NOT_CANCELLABLE, base.order_number)

        changes: Dict[str, Any] = {"status": OrderStatus.CANCELLED}
        payload = to_patch_payload(changes)
        payload["reason"] = reason.strip()
        return await self._reconcile(base, changes, payload, action="cancel")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _focus(self, order_number: str) -> CancellationToken:
        if self._token is not None:
            self._token.cancel(f"replaced by {order_number}")
        self._cancel_auto_close()

        previous = self.order_number
        if previous and previous != order_number:
            self.store.invalidate(previous)

        self.overlay.bind(None)
        self._state = ControllerState.IDLE
        self._unconfirmed = False
        self._token = CancellationToken(order_number)
        return self._token

    def _guard(self) -> Optional[Rejected]:
        if self.overlay.base is None or self._token is None:
            return self._reject(NO_ORDER_OPEN, None)
        if self._state == ControllerState.SAVING:
            return self._reject(SAVE_IN_PROGRESS, self.overlay.order_number)
        return None

    def _reject(self, reason: str, order_number: Optional[str]) -> Rejected:
        logger.info(f"Rejected action on {order_number}: {reason}")
        self._notice(NoticeLevel.WARNING, reason, order_number)
        return Rejected(reason=reason, order_number=order_number)

    async def _reconcile(
        self,
        base: OrderSnapshot,
        changes: Dict[str, Any],
        payload: Dict[str, Any],
        action: str,
    ) -> SaveOutcome:
        order_number = base.order_number
        token = self._token

        with new_operation():
            self._state = ControllerState.SAVING
            logger.info(f"{action} {order_number}: sending {sorted(payload)}")

            update = await attempt(
                self.gateway.update_order, order_number, payload, error_type=RecoverableError
            )
            if token.cancelled:
                return self._discard(order_number, token)

            # Re-fetch only after the update has settled
            fetched = await attempt(self.gateway.get_order, order_number, error_type=RecoverableError)
            if token.cancelled:
                return self._discard(order_number, token)

            if fetched.is_ok():
                outcome = self._apply_fetched(fetched.unwrap(), update.error, action)
            else:
                outcome = self._apply_local_merge(base, changes, update.error, fetched.error, action)

            self._last_state = outcome.state
            self._state = ControllerState.IDLE

            audit.info(
                LogCategory.ORDERS,
                f"Order {action} {outcome.state.value}",
                {
                    "order_number": order_number,
                    "fields": sorted(payload),
                    "outcome": outcome.kind,
                    "update_error": str(update.error) if update.is_err() else None,
                    "fetch_error": str(fetched.error) if fetched.is_err() else None,
                },
            )
            self.event_bus.publish(EventType.ORDER_RECONCILED, outcome)
            return outcome

    def _apply_fetched(
        self,
        snapshot: OrderSnapshot,
        update_error: Optional[BaseException],
        action: str,
    ) -> Confirmed:
        order_number = snapshot.order_number
        self.store.set(order_number, snapshot)
        self._unconfirmed = False

        if update_error is None:
            self.overlay.bind(snapshot)
            done = "cancelled" if action == "cancel" else "updated"
            self._notice(NoticeLevel.SUCCESS, f"Order {order_number} {done}", order_number)
            self._schedule_auto_close()
            return Confirmed(snapshot=snapshot, state=ControllerState.SUCCESS)

        # Server truth wins, the operator's edits stay for a retry
        self.overlay.rebase(snapshot)
        message = describe_error(update_error)
        logger.warning(f"{action} {order_number} rejected: {message}")
        self._notice(NoticeLevel.ERROR, f"Failed to {action} order: {message}", order_number)
        return Confirmed(snapshot=snapshot, state=ControllerState.PARTIAL_FAILURE, error=message)

    def _apply_local_merge(
        self,
        base: OrderSnapshot,
        changes: Dict[str, Any],
        update_error: Optional[BaseException],
        fetch_error: BaseException,
        action: str,
    ) -> Unconfirmed:
        order_number = base.order_number
        merged = self.overlay.effective(base) if action == "save" else base.with_fields(changes)
        self.store.set(order_number, merged)
        self._unconfirmed = True

        if update_error is None:
            # Server accepted the patch; only the confirmation is missing
            self.overlay.bind(merged)
            error = describe_error(fetch_error)
        else:
            # Diff stays computed against the last confirmed snapshot
            error = describe_error(update_error)

        logger.warning(
            f"{action} {order_number}: showing local merge "
            f"(update: {update_error or 'ok'}, fetch: {fetch_error})"
        )
        self._notice(NoticeLevel.WARNING, UPDATED_LOCALLY, order_number, detail=error)
        return Unconfirmed(
            merged_view=merged,
            error=error,
            update_accepted=update_error is None,
        )

    def _discard(self, order_number: str, token: CancellationToken) -> Discarded:
        logger.info(f"Discarding late response for {order_number}: {token.reason}")
        return Discarded(order_number=order_number)

    def _notice(
        self,
        level: NoticeLevel,
        message: str,
        order_number: Optional[str],
        detail: Optional[str] = None,
    ) -> None:
        self.event_bus.notify(level, message, order_number=order_number, detail=detail)

    # -------------------------------------------------------------------------
    # Auto-close
    # -------------------------------------------------------------------------

    def _schedule_auto_close(self) -> None:
        if self.auto_close_delay_sec <= 0:
            return
        self._cancel_auto_close()
        self._auto_close_task = asyncio.create_task(self._auto_close(self._token))

    def _cancel_auto_close(self) -> None:
        task = self._auto_close_task
        self._auto_close_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _auto_close(self, token: CancellationToken) -> None:
        await asyncio.sleep(self.auto_close_delay_sec)
        if token.cancelled or self._token is not token:
            return
        order_number = self.order_number
        self.close()
        self.event_bus.publish(EventType.ORDER_AUTO_CLOSE, order_number)
