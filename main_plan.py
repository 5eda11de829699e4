# main_plan.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from importlib.metadata import PackageNotFoundError, version

from core.exceptions import DomainError
from infra.db.base import SessionLocal, db_url
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.operational_support import bind_trace_id
from infra.services import build_service_graph

logger = logging.getLogger(__name__)

DIST_NAME = "project-plan-scheduler"


def app_version() -> str:
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        # running from a source checkout that was never installed
        return "0+unknown"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="project-plan",
        description="Critical path and task plan tools for a project schedule.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {app_version()}")
    parser.add_argument("--actor", default=None, help="username recorded in the audit log")
    sub = parser.add_subparsers(dest="command", required=True)

    recalc = sub.add_parser("recalculate", help="recompute critical path flags for a project")
    recalc.add_argument("project_id")

    listing = sub.add_parser("list", help="print the task plan of a project")
    listing.add_argument("project_id")
    listing.add_argument("--archived", action="store_true", help="list archived tasks instead")

    export = sub.add_parser("export", help="dump the task plan as JSON")
    export.add_argument("project_id")

    audit = sub.add_parser("audit", help="show recent audited changes of a project")
    audit.add_argument("project_id")
    audit.add_argument("--limit", type=int, default=50)
    audit.add_argument("--task", dest="task_id", default=None, help="only entries about this task")
    return parser


def _print_rows(rows) -> None:
    for row in rows:
        task = row.task
        marker = "*" if task.is_critical_path else " "
        start = task.planned_start.isoformat() if task.planned_start else "-"
        end = task.planned_end.isoformat() if task.planned_end else "-"
        days = row.duration_days if row.duration_days is not None else "-"
        print(f"{marker} {task.id}  {task.name:<40} {start:>10} {end:>10} {days:>4}d  float={task.float_days}")


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging()
    run_migrations(db_url)

    session = SessionLocal()
    try:
        services = build_service_graph(session, actor_username=args.actor)
        with bind_trace_id():
            if args.command == "recalculate":
                result = services.scheduling_engine.recalculate_critical_path(args.project_id)
                print(json.dumps(result.as_dict(), indent=2))
            elif args.command == "list":
                _print_rows(services.task_service.list_task_rows(args.project_id, archived=args.archived))
            elif args.command == "export":
                print(json.dumps(services.task_service.export_tasks(args.project_id), indent=2))
            elif args.command == "audit":
                if args.task_id:
                    entries = services.audit_service.task_history(args.task_id, args.limit)
                else:
                    entries = services.audit_service.list_recent(args.limit, project_id=args.project_id)
                for entry in entries:
                    print(entry.describe())
    except DomainError as exc:
        logger.error("%s (%s)", exc, exc.code)
        return 1
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
