#!/usr/bin/env python3
"""
JewelPOS management CLI.

Usage:
    python manage.py migrate         Apply pending database migrations
    python manage.py serve           Start the API server
    python manage.py status          Show migration status and schema checks
    python manage.py remind-memos    Send reminders for overdue memos
"""

import argparse
import asyncio
import sys
from datetime import date

from jewelpos.config import configure_logging, get_settings


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from jewelpos.infrastructure.storage.sqlite.migrations import run_migrations

    results = asyncio.run(run_migrations(create_backup_before=not args.no_backup))
    if not results:
        print("Database is up to date.")
        return

    for result in results:
        mark = "OK  " if result.success else "FAIL"
        print(f"  [{mark}] {result.version}_{result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         {result.error}")

    if not all(r.success for r in results):
        sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start uvicorn with the application factory."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "jewelpos.api.main:create_app",
        factory=True,
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
    )


def cmd_status(args: argparse.Namespace) -> None:
    """Print applied and pending migrations plus integrity checks."""
    from jewelpos.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        verify_schema_integrity,
    )

    status = asyncio.run(get_migration_status())
    if not status["exists"]:
        print("Database does not exist yet. Run 'migrate' first.")
        return

    print(f"Current version: {status['current_version']}")
    print(f"Applied:  {', '.join(status['applied_migrations']) or '-'}")
    print(f"Pending:  {', '.join(status['pending_migrations']) or '-'}")

    failed = False
    for check in asyncio.run(verify_schema_integrity()):
        print(f"  {check['check']:<16} {check['status']}")
        failed = failed or check["status"] != "PASS"

    if failed:
        sys.exit(1)


def cmd_remind_memos(args: argparse.Namespace) -> None:
    """Send reminders for memos past their due date."""
    from jewelpos.application.use_cases import RemindOverdueMemosUseCase
    from jewelpos.core.entities.notification import NotificationChannel
    from jewelpos.infrastructure.storage.sqlite import close_pool

    async def _run() -> None:
        try:
            result = await RemindOverdueMemosUseCase().execute(
                today=date.fromisoformat(args.date) if args.date else None,
                channel=NotificationChannel(args.channel),
            )
        finally:
            await close_pool()

        print(f"Overdue memos:      {result.total_overdue}")
        print(f"Reminders sent:     {result.reminders_sent}")
        print(f"Skipped no contact: {result.skipped_no_contact}")
        print(f"Failed:             {result.failed}")

    asyncio.run(_run())


def main() -> None:
    parser = argparse.ArgumentParser(
        description="JewelPOS management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending database migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.set_defaults(func=cmd_status)

    # remind-memos
    p_remind = sub.add_parser("remind-memos", help="Send reminders for overdue memos")
    p_remind.add_argument(
        "--channel",
        choices=["sms", "whatsapp", "email"],
        default="whatsapp",
        help="Delivery channel (default: whatsapp)",
    )
    p_remind.add_argument("--date", default=None, help="Evaluate as of YYYY-MM-DD (default: today)")
    p_remind.set_defaults(func=cmd_remind_memos)

    args = parser.parse_args()
    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
