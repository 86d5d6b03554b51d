"""Command line entry point for running and maintaining the service."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import suppress
from pathlib import Path

from dotenv import load_dotenv


logger = logging.getLogger("volunteer_tracker.cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="volunteer-tracker", description="Volunteer hours tracking service")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST or 127.0.0.1)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT or 5000)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    sub.add_parser("init-db", help="Create missing database tables")

    export = sub.add_parser("export-csv", help="Write all events as CSV")
    export.add_argument("--output", "-o", default=None, help="Output file (default: stdout)")

    sub.add_parser("push-sheets", help="Push local records to Google Sheets")
    sub.add_parser("pull-sheets", help="Pull Google Sheets rows into the database")

    password = sub.add_parser("set-admin-password", help="Replace the admin password")
    password.add_argument("password")
    return parser.parse_args(argv)


def _serve(args: argparse.Namespace) -> int:
    import uvicorn
    from volunteer_tracker.utils.config import get_config

    config = get_config()
    uvicorn.run(
        "volunteer_tracker.api.main:app",
        host=args.host or config.host,
        port=args.port or config.port,
        reload=args.reload,
        log_level=config.log_level.lower(),
    )
    return 0


def _init_db(_args: argparse.Namespace) -> int:
    from volunteer_tracker.db import database

    database.init_schema()
    print(f"Database ready at {database.engine.url.render_as_string(hide_password=True)}")
    return 0


def _export_csv(args: argparse.Namespace) -> int:
    from volunteer_tracker.db.database import new_session
    from volunteer_tracker.services.csv_export import export_csv

    session = new_session()
    try:
        content = export_csv(session)
    finally:
        with suppress(Exception):
            session.close()
    if args.output:
        Path(args.output).write_text(content, encoding="utf-8", newline="")
        print(f"Wrote {args.output}")
    else:
        sys.stdout.write(content)
    return 0


def _sync(direction: str) -> int:
    from volunteer_tracker import audit
    from volunteer_tracker.db.database import new_session
    from volunteer_tracker.services import sheets_sync

    runner = sheets_sync.run_push if direction == "push" else sheets_sync.run_pull
    session = new_session()
    try:
        report = runner(session, actor=audit.ACTOR_ADMIN)
    except (sheets_sync.SheetsNotConfigured, sheets_sync.SheetsSyncError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        with suppress(Exception):
            session.close()

    if direction == "push":
        print(f"Pushed {report.volunteers_written} volunteers at {report.timestamp}.")
    else:
        print(
            f"Pulled at {report.timestamp}: {report.volunteers_created} volunteers created, "
            f"{report.events_created} events created, {report.events_updated} events updated, "
            f"{len(report.rows_skipped)} rows skipped."
        )
        for skipped in report.rows_skipped:
            print(f"  skipped {skipped.sheet} row {skipped.row}: {skipped.reason}", file=sys.stderr)
    return 0


def _set_admin_password(args: argparse.Namespace) -> int:
    from volunteer_tracker.api.deps import set_admin_password
    from volunteer_tracker.db.database import new_session
    from volunteer_tracker.utils.password_crypto import MIN_PASSWORD_LENGTH

    if len(args.password) < MIN_PASSWORD_LENGTH:
        print(f"Error: password must be at least {MIN_PASSWORD_LENGTH} characters", file=sys.stderr)
        return 1
    session = new_session()
    try:
        set_admin_password(session, args.password)
    finally:
        with suppress(Exception):
            session.close()
    print("Admin password updated.")
    return 0


COMMANDS = {
    "serve": _serve,
    "init-db": _init_db,
    "export-csv": _export_csv,
    "push-sheets": lambda _args: _sync("push"),
    "pull-sheets": lambda _args: _sync("pull"),
    "set-admin-password": _set_admin_password,
}


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    try:
        return COMMANDS[args.command](args)
    except Exception as exc:
        logger.exception("command_failed command=%s", args.command)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
