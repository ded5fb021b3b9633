"""
hotelstock management CLI.

Usage:
    hotelstock serve                               Start the API server
    hotelstock migrate [--no-backup]               Apply pending migrations
    hotelstock migrate --status | --verify         Show migration status or check the schema
    hotelstock generate PROPERTY_ID WEEK_START     Generate (or reuse) a weekly report
    hotelstock list PROPERTY_ID [--limit N]        List a property's weekly reports
    hotelstock show REPORT_ID                      Print a report as JSON
"""

import argparse
import asyncio
import json
import sys
from datetime import date
from pathlib import Path

from hotelstock.config import configure_logging, get_settings


def _print_result(result) -> None:
    """Print an OperationResult; exit non-zero on failure."""
    if not result.success:
        print(f"Error [{result.error_code}]: {result.error}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(result.data.model_dump(mode="json"), indent=2, ensure_ascii=False))


async def _with_database(coro_factory):
    """Run a coroutine with migrations applied and the pool closed afterwards."""
    from hotelstock.infrastructure.storage.sqlite import close_pool
    from hotelstock.infrastructure.storage.sqlite.migrations import run_migrations

    await run_migrations()
    try:
        return await coro_factory()
    finally:
        await close_pool()


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "hotelstock.api.main:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    from hotelstock.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        initialize_database,
        verify_schema_integrity,
    )

    if args.status:
        status = asyncio.run(get_migration_status(args.db_path))
        print(f"Database exists: {status['exists']}")
        print(f"Current version: {status.get('current_version') or 'N/A'}")
        print(f"Applied migrations: {status['applied_migrations']}")
        print(f"Pending migrations: {status['pending_migrations']}")
        return

    if args.verify:
        checks = asyncio.run(verify_schema_integrity(args.db_path))
        for check in checks:
            print(f"[{check['status']}] {check['check']}")
            if check["status"] != "PASS":
                for key, value in check.items():
                    if key not in ("check", "status"):
                        print(f"       {key}: {value}")
        if any(c["status"] != "PASS" for c in checks):
            sys.exit(1)
        return

    results = asyncio.run(
        initialize_database(args.db_path, create_backup_before=not args.no_backup)
    )
    if not results:
        print("Database is up to date.")
    for result in results:
        status = "SUCCESS" if result.success else "FAILED"
        print(f"[{status}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         Error: {result.error}")
    if any(not r.success for r in results):
        sys.exit(1)


def cmd_generate(args: argparse.Namespace) -> None:
    from hotelstock.application.dto.requests import GenerateWeeklyReportRequest
    from hotelstock.application.use_cases import GenerateWeeklyReportUseCase

    request = GenerateWeeklyReportRequest(
        property_id=args.property_id,
        period_start=date.fromisoformat(args.week_start),
    )
    result = asyncio.run(
        _with_database(lambda: GenerateWeeklyReportUseCase().execute(request))
    )
    _print_result(result)


def cmd_list(args: argparse.Namespace) -> None:
    from hotelstock.application.use_cases import ListWeeklyReportsUseCase

    result = asyncio.run(
        _with_database(
            lambda: ListWeeklyReportsUseCase().execute(args.property_id, limit=args.limit)
        )
    )
    _print_result(result)


def cmd_show(args: argparse.Namespace) -> None:
    from hotelstock.application.use_cases import GetReportDataUseCase

    result = asyncio.run(
        _with_database(lambda: GetReportDataUseCase().execute(args.report_id))
    )
    _print_result(result)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hotelstock",
        description="Hotel stock reconciliation management CLI",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Start the API server")
    serve.add_argument("--host", default=None, help="Bind host (default from settings)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default from settings)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve.set_defaults(func=cmd_serve)

    migrate = sub.add_parser("migrate", help="Apply pending migrations")
    migrate.add_argument("--db-path", type=Path, default=None, help="Database path (default from settings)")
    mode = migrate.add_mutually_exclusive_group()
    mode.add_argument("--status", action="store_true", help="Show migration status")
    mode.add_argument("--verify", action="store_true", help="Verify schema integrity")
    migrate.add_argument("--no-backup", action="store_true", help="Skip backup before migrations")
    migrate.set_defaults(func=cmd_migrate)

    generate = sub.add_parser("generate", help="Generate a weekly report")
    generate.add_argument("property_id", help="Property (hotel) ID")
    generate.add_argument("week_start", help="First day of the period (YYYY-MM-DD)")
    generate.set_defaults(func=cmd_generate)

    list_cmd = sub.add_parser("list", help="List a property's weekly reports")
    list_cmd.add_argument("property_id", help="Property (hotel) ID")
    list_cmd.add_argument("--limit", type=int, default=None)
    list_cmd.set_defaults(func=cmd_list)

    show = sub.add_parser("show", help="Print a weekly report as JSON")
    show.add_argument("report_id", type=int)
    show.set_defaults(func=cmd_show)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(stream=sys.stderr)
    args.func(args)


if __name__ == "__main__":
    main()
