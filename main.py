"""
StoreHub Order Console - Main Entry Point

Usage:
    python main.py orders list --status pending
    python main.py orders show ORD-1001
    python main.py orders update ORD-1001 --status confirmed --total-price 49.90
    python main.py orders cancel ORD-1001 --reason "Customer request"
    python main.py notifications watch
"""

from __future__ import annotations
import asyncio
import argparse
import sys
from datetime import datetime

from rich.console import Console

from config.config_manager import ConfigManager
from storehub.application import AppContainer, Confirmed, NoChanges, Unconfirmed
from storehub.domain.events import EventType
from storehub.domain.exceptions import FatalError, StoreHubError
from storehub.tui.render import (
    render_notice,
    render_notification_changes,
    render_notifications,
    render_order_detail,
    render_order_list,
)
from storehub.tui.viewmodels import NotificationViewModel, OrderDetailViewModel
from storehub.utils import StructuredLogger, flush_all_loggers, shutdown_logging
from storehub.utils.logging_setup import setup_category_logging
from storehub.utils.structured_logger import LogCategory

console = Console()

EDIT_OPTIONS = (
    "status",
    "payment_status",
    "total_price",
    "notes",
    "vendor",
    "currency",
    "hint_note",
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="StoreHub Order Console",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py orders list --search ahmed --status pending
  python main.py orders update ORD-1001 --status confirmed
  python main.py notifications unread
  python main.py session set --access <token> --refresh <token>
        """
    )

    parser.add_argument(
        "--env",
        type=str,
        default="dev",
        help="Environment config to load on top of base.yaml (default: dev)"
    )
    parser.add_argument(
        "--config-dir",
        type=str,
        default="config",
        help="Directory containing base.yaml / {env}.yaml (default: config)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level for all categories)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level (ignored if --verbose is set)"
    )
    parser.add_argument(
        "--console",
        action="store_true",
        help="Mirror log warnings (all records with --verbose) to stderr"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    # orders
    orders = commands.add_parser("orders", help="Admin order list and detail")
    order_cmds = orders.add_subparsers(dest="action", required=True)

    list_cmd = order_cmds.add_parser("list", help="List orders")
    list_cmd.add_argument("--search", default="", help="Order number, customer or vendor")
    list_cmd.add_argument("--status", default="", help="Order status filter")
    list_cmd.add_argument("--page", type=int, default=1)
    list_cmd.add_argument("--start-date", type=datetime.fromisoformat, help="YYYY-MM-DD")
    list_cmd.add_argument("--end-date", type=datetime.fromisoformat, help="YYYY-MM-DD")

    show_cmd = order_cmds.add_parser("show", help="Show order detail")
    show_cmd.add_argument("order_number")

    update_cmd = order_cmds.add_parser("update", help="Edit order fields and save")
    update_cmd.add_argument("order_number")
    for option in EDIT_OPTIONS:
        update_cmd.add_argument(f"--{option.replace('_', '-')}", dest=option)

    cancel_cmd = order_cmds.add_parser("cancel", help="Cancel an order")
    cancel_cmd.add_argument("order_number")
    cancel_cmd.add_argument("--reason", required=True, help="Cancellation reason (required)")

    # notifications
    notifications = commands.add_parser("notifications", help="Notification bell")
    notify_cmds = notifications.add_subparsers(dest="action", required=True)

    notify_list = notify_cmds.add_parser("list", help="List notifications")
    notify_list.add_argument("--page", type=int, default=1)
    notify_list.add_argument("--limit", type=int)
    notify_cmds.add_parser("unread", help="Show unread count")
    read_cmd = notify_cmds.add_parser("read", help="Mark one notification as read")
    read_cmd.add_argument("notification_id")
    notify_cmds.add_parser("read-all", help="Mark all notifications as read")
    delete_cmd = notify_cmds.add_parser("delete", help="Delete one notification")
    delete_cmd.add_argument("notification_id")
    notify_cmds.add_parser("delete-all", help="Delete all notifications")
    watch_cmd = notify_cmds.add_parser("watch", help="Poll and print bell updates until Ctrl+C")
    watch_cmd.add_argument("--interval", type=float, help="Override poll interval (seconds)")

    # session
    session = commands.add_parser("session", help="Stored access/refresh tokens")
    session_cmds = session.add_subparsers(dest="action", required=True)
    set_cmd = session_cmds.add_parser("set", help="Store tokens issued by the backend")
    set_cmd.add_argument("--access", required=True)
    set_cmd.add_argument("--refresh")
    session_cmds.add_parser("clear", help="Forget tokens (preferences are kept)")
    session_cmds.add_parser("show", help="Show whether a session is stored")

    return parser.parse_args(argv)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

async def run_orders(container: AppContainer, args: argparse.Namespace) -> int:
    if args.action == "list":
        ok = await container.order_list.apply_filters(
            search=args.search,
            status=args.status,
            start_date=args.start_date,
            end_date=args.end_date,
        )
        if ok and args.page > 1:
            ok = await container.order_list.go_to_page(args.page)
        service = container.order_list
        console.print(render_order_list(service.rows, service.query.page, service.page_count, service.total))
        return 0 if ok else 1

    controller = container.controller
    snapshot = await controller.open(args.order_number)
    if snapshot is None:
        return 1

    if args.action == "update":
        for option in EDIT_OPTIONS:
            value = getattr(args, option)
            if value is not None:
                controller.set_field(option, value)
        outcome = await controller.save()
    elif args.action == "cancel":
        outcome = await controller.cancel(args.reason)
    else:
        outcome = None

    display = OrderDetailViewModel().compute_display(
        controller.snapshot or snapshot,
        controller.effective,
        unconfirmed=controller.is_unconfirmed,
    )
    console.print(render_order_detail(display))

    if outcome is None or isinstance(outcome, NoChanges):
        return 0
    if isinstance(outcome, Confirmed):
        return 0 if outcome.saved else 1
    if isinstance(outcome, Unconfirmed):
        return 2
    return 1


async def run_notifications(container: AppContainer, args: argparse.Namespace) -> int:
    poller = container.poller
    api = container.notifications_api

    if args.action == "list":
        unread = await api.unread_count()
        page = await api.list_notifications(page=args.page, limit=args.limit)
        console.print(render_notifications(page.items, unread))
        return 0
    if args.action == "unread":
        console.print(f"Unread notifications: {await api.unread_count()}")
        return 0
    if args.action == "read":
        return 0 if await poller.mark_read(args.notification_id) else 1
    if args.action == "read-all":
        return 0 if await poller.mark_all_read() else 1
    if args.action == "delete":
        return 0 if await poller.delete(args.notification_id) else 1
    if args.action == "delete-all":
        return 0 if await poller.delete_all() else 1

    # watch
    if args.interval:
        poller.poll_interval_sec = args.interval
    container.event_bus.subscribe(
        EventType.UNREAD_COUNT_CHANGED,
        lambda count: console.print(f"Unread notifications: {count}"),
    )
    vm = NotificationViewModel()

    def on_notifications(latest):
        panel = render_notification_changes(vm, vm.compute_updates(latest), poller.unread_count)
        if panel is not None:
            console.print(panel)

    container.event_bus.subscribe(EventType.NOTIFICATIONS_UPDATED, on_notifications)
    await poller.start()
    try:
        while poller.running:
            await asyncio.sleep(1)
    finally:
        await poller.stop()
    return 0


def run_session(container: AppContainer, args: argparse.Namespace) -> int:
    store = container.session_store
    if args.action == "set":
        store.set_session(args.access, refresh_token=args.refresh)
        console.print("Session stored")
    elif args.action == "clear":
        store.clear_session()
        console.print("Session cleared")
    else:
        state = "present" if store.get_access_token() else "absent"
        refresh = "present" if store.get_refresh_token() else "absent"
        console.print(f"Access token: {state}, refresh token: {refresh}")
    return 0


async def main_async(args: argparse.Namespace) -> int:
    """Main async entry point."""
    config = ConfigManager(config_dir=args.config_dir, env=args.env).load()

    category_loggers = setup_category_logging(
        env=args.env,
        log_dir=config.logging.log_dir,
        level=args.log_level or config.logging.level,
        console=args.console or config.logging.console,
        verbose=args.verbose,
        json_files=config.logging.json,
    )
    system_structured = StructuredLogger(category_loggers["system"])
    system_structured.info(
        LogCategory.SYSTEM,
        "Starting StoreHub order console",
        {"env": args.env, "command": args.command, "action": args.action},
    )

    container = AppContainer(config).initialize(system_structured)
    container.event_bus.subscribe(EventType.NOTICE, lambda notice: console.print(render_notice(notice)))

    try:
        if args.command == "orders":
            return await run_orders(container, args)
        if args.command == "notifications":
            return await run_notifications(container, args)
        return run_session(container, args)
    finally:
        await container.cleanup()
        system_structured.info(LogCategory.SYSTEM, "Shutdown complete")
        flush_all_loggers()
        shutdown_logging()


def main() -> None:
    """Main entry point."""
    args = parse_args()

    try:
        exit_code = asyncio.run(main_async(args))
    except KeyboardInterrupt:
        print("Shutdown requested")
        exit_code = 0
    except FatalError as e:
        print(f"Configuration error: {e}")
        exit_code = 1
    except StoreHubError as e:
        print(f"Error: {e}")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
