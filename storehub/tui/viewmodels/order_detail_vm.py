"""
Order detail ViewModel.

Builds the display model of the order open in the detail view: header
fields from the effective snapshot (pending edits applied), the projected
timeline, line items and the classified payment summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ...domain.services.order_diff import EDITABLE_FIELDS
from ...domain.services.payment_classifier import PaymentShape, PaymentSummary, classify_payments
from ...domain.services.timeline_projector import TimelineProjection, project_timeline
from ...models.order import OrderSnapshot
from ..formatters import format_datetime, format_money, format_progress, format_status

UNCONFIRMED_BANNER = "Updated locally - not confirmed by the server"


@dataclass(frozen=True)
class OrderDetailDisplay:
    """Display-ready detail view."""

    order_number: str
    header: List[Tuple[str, str]]
    edited_fields: Tuple[str, ...]
    timeline_lines: List[str]
    item_lines: List[str]
    payment_lines: List[str]
    banners: List[str] = field(default_factory=list)
    can_edit: bool = False
    can_cancel: bool = False


class OrderDetailViewModel:
    """Transforms a snapshot (plus its effective view) into display lines."""

    def compute_display(
        self,
        snapshot: OrderSnapshot,
        effective: Optional[OrderSnapshot] = None,
        unconfirmed: bool = False,
    ) -> OrderDetailDisplay:
        """
        Args:
            snapshot: Snapshot shown in the detail view.
            effective: Snapshot with pending edits applied (defaults to snapshot).
            unconfirmed: Snapshot is a local merge the server did not confirm.
        """
        view = effective if effective is not None else snapshot
        edited = tuple(
            name for name in EDITABLE_FIELDS if getattr(view, name) != getattr(snapshot, name)
        )

        banners = []
        if unconfirmed:
            banners.append(UNCONFIRMED_BANNER)
        if view.is_cancelled:
            banners.append("This order has been cancelled")

        return OrderDetailDisplay(
            order_number=view.order_number,
            header=self.header_fields(view, edited),
            edited_fields=edited,
            timeline_lines=self.timeline_lines(project_timeline(view.timeline, view.status)),
            item_lines=self.item_lines(view),
            payment_lines=self.payment_lines(
                classify_payments(view.payment_transactions, view.total_price), view.currency
            ),
            banners=banners,
            can_edit=snapshot.can_be_edited,
            can_cancel=snapshot.can_be_cancelled and not snapshot.is_cancelled,
        )

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    @staticmethod
    def header_fields(order: OrderSnapshot, edited: Tuple[str, ...] = ()) -> List[Tuple[str, str]]:
        def mark(name: str, value: str) -> str:
            return f"{value} *" if name in edited else value

        rows = [
            ("Order", order.order_number),
            ("Customer", order.user_name or ""),
            ("Created", format_datetime(order.created_at)),
            ("Status", mark("status", format_status(order.status, styled=True))),
            ("Payment", mark("payment_status", format_status(order.payment_status, styled=True))),
            ("Total", mark("total_price", format_money(order.total_price, order.currency))),
            ("Currency", mark("currency", order.currency)),
            ("Vendor", mark("vendor", order.vendor or "")),
            ("Notes", mark("notes", order.notes or "")),
            ("Hint", mark("hint_note", order.hint_note or "")),
        ]
        if order.is_trackable:
            rows.append(("Tracking", f"{order.carrier or ''} {order.tracking_number or ''}".strip()))
            if order.estimated_delivery:
                rows.append(("ETA", format_datetime(order.estimated_delivery, with_time=False)))
        return rows

    @staticmethod
    def timeline_lines(projection: TimelineProjection) -> List[str]:
        if projection.terminal:
            return ["[bold red]CANCELLED[/]"]

        lines = []
        for step in projection.steps:
            if step.active:
                marker = "[bold cyan]>[/]"
            elif step.completed:
                marker = "[green]x[/]"
            else:
                marker = "[dim]o[/]"
            when = format_datetime(step.timestamp)
            lines.append(f"{marker} {step.label}" + (f" [dim]{when}[/]" if when else ""))
        return lines

    @staticmethod
    def item_lines(order: OrderSnapshot) -> List[str]:
        lines = []
        for item in order.items:
            if item.to_be_quoted:
                price = "[yellow]to be quoted[/]"
            else:
                price = format_money(item.line_total, order.currency)
            lines.append(f"{item.quantity} x {item.name}  {price}")
        return lines

    @staticmethod
    def payment_lines(summary: PaymentSummary, currency: str) -> List[str]:
        if summary.shape == PaymentShape.REFUNDED:
            tx = summary.transaction
            return [
                "[magenta]Refunded[/]",
                f"{format_money(tx.amount, currency)} via {tx.method_display or tx.method or 'n/a'}",
            ]

        if summary.shape == PaymentShape.FULL:
            tx = summary.transaction
            state = "[green]Paid[/]" if tx.completed else format_status(tx.status, styled=True)
            return [f"Full payment: {format_money(tx.amount, currency)} {state}"]

        lines = [
            f"Split payment: {format_money(summary.paid_amount, currency)}"
            f" / {format_money(summary.total_amount, currency)}",
            format_progress(summary.progress_pct),
        ]
        if summary.overflow:
            lines.append("[red]Completed payments exceed the order total[/]")
        for step in summary.steps:
            name = "Deposit" if step.number == 1 else "Final"
            tx = step.transaction
            line = f"{step.number}. {name}: {format_money(tx.amount, currency)} {format_status(tx.status, styled=True)}"
            if step.hint:
                line += f" [dim]({step.hint})[/]"
            lines.append(line)
        return lines
