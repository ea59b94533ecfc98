"""
Rich rendering for the CLI.

Turns view-model output into Rich renderables. The only module of the
package that imports rich.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..domain.events.event_types import Notice, NoticeLevel
from ..models.notification import Notification
from ..models.order import OrderSnapshot
from .viewmodels import NotificationViewModel, OrderDetailDisplay, OrderListViewModel, TableUpdate

NOTICE_STYLES = {
    NoticeLevel.INFO: "cyan",
    NoticeLevel.SUCCESS: "green",
    NoticeLevel.WARNING: "yellow",
    NoticeLevel.ERROR: "red",
}


def render_order_list(orders: Sequence[OrderSnapshot], page: int, page_count: int, total: int) -> Panel:
    """
    Render one page of the order list.

    Args:
        orders: Orders on the current page.
        page: Current 1-based page.
        page_count: Number of pages.
        total: Server-side order count.
    """
    title = f"Orders (page {page}/{page_count}, {total} total)"
    if not orders:
        return Panel(Text("No orders found", style="dim"), title=title, border_style="dim")

    vm = OrderListViewModel()
    table = Table(expand=True, header_style="bold")
    for column in vm.columns:
        table.add_column(column, no_wrap=True)

    for item in orders:
        table.add_row(*vm.format_row(item))

    return Panel(table, title=title, border_style="cyan")


def render_order_detail(display: OrderDetailDisplay) -> Panel:
    """Render the detail view: header, timeline, items and payment."""
    parts: List = []

    for banner in display.banners:
        parts.append(Text(banner, style="bold yellow"))

    header = Table(show_header=False, box=None, padding=(0, 1))
    header.add_column(style="dim", no_wrap=True)
    header.add_column()
    for label, value in display.header:
        header.add_row(label, Text.from_markup(value))
    parts.append(header)

    if display.edited_fields:
        parts.append(Text(f"* unsaved: {', '.join(display.edited_fields)}", style="yellow"))

    sections = (
        ("Timeline", display.timeline_lines),
        ("Items", display.item_lines),
        ("Payment", display.payment_lines),
    )
    for title, lines in sections:
        if lines:
            parts.append(Text(title, style="bold"))
            parts.extend(Text.from_markup(f"  {line}") for line in lines)

    flags = []
    if not display.can_edit:
        flags.append("read-only")
    if display.can_cancel:
        flags.append("cancellable")
    subtitle = ", ".join(flags) or None

    return Panel(Group(*parts), title=f"Order {display.order_number}", subtitle=subtitle, border_style="cyan")


def render_notifications(notifications: Sequence[Notification], unread: int) -> Panel:
    title = f"Notifications ({unread} unread)"
    if not notifications:
        return Panel(Text("No notifications", style="dim"), title=title, border_style="dim")

    vm = NotificationViewModel()
    table = Table(expand=True, header_style="bold")
    for column in vm.columns:
        table.add_column(column)

    for item in notifications:
        table.add_row(*vm.format_row(item))

    return Panel(table, title=title, border_style="cyan")


def render_notification_changes(
    vm: NotificationViewModel, update: TableUpdate, unread: int
) -> Optional[Panel]:
    """
    Render only the notifications that appeared or changed since the last poll.

    New rows are bold. Returns None when nothing visible changed (an empty
    update, or one that only reordered rows).
    """
    added = {op.row_key: op.values for op in update.rows if op.action == "add"}
    changed = {cell.row_key for cell in update.cells}
    removed = [op.row_key for op in update.rows if op.action == "remove"]

    table = Table(expand=True, header_style="bold")
    for column in vm.columns:
        table.add_column(column)
    for key in update.order:
        if key in added:
            table.add_row(*added[key], style="bold")
        elif key in changed:
            table.add_row(*vm.cached_row(key))

    parts: List = []
    if table.row_count:
        parts.append(table)
    if removed:
        parts.append(Text(f"Removed: {', '.join(removed)}", style="dim"))
    if not parts:
        return None
    return Panel(Group(*parts), title=f"Notifications ({unread} unread)", border_style="cyan")


def render_notice(notice: Notice) -> Text:
    style = NOTICE_STYLES.get(notice.level, "")
    text = Text(f"[{notice.level.value}] ", style=style)
    text.append(notice.message)
    if notice.detail:
        text.append(f" ({notice.detail})", style="dim")
    return text
