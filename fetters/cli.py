"""Command-line entry point for fetters.

Usage:
    fetters add "Acme Corp"
    fetters list --status progress
    fetters stage tree
    fetters sprint new --name spring-search
"""

from __future__ import annotations

import argparse
import sqlite3
import sys

from . import __version__
from .commands import config as config_cmd
from .commands import jobs, misc, sprint, stage
from .config import load_config, require_current_sprint, resolve_current_sprint
from .db import close_db, init_db
from .db.errors import FettersError, FettersIOError, QueryError
from .db.models import JobQuery
from .display import failure
from .log import get_logger, setup_logging

log = get_logger(__name__)


def add_query_args(parser: argparse.ArgumentParser) -> None:
    """Flags shared by every command that searches job applications."""
    parser.add_argument(
        "-c", "--company",
        help="Filter results by company name. Supports searching with partial text.",
    )
    parser.add_argument(
        "-l", "--link",
        help="Filter results by links. Supports searching with partial text.",
    )
    parser.add_argument(
        "-n", "--notes",
        help="Filter results by notes. Supports searching with partial text.",
    )
    parser.add_argument(
        "--sprint",
        help="Filter results by sprint name. Supports searching with partial text.",
    )
    parser.add_argument(
        "-s", "--status",
        help="Filter results by application status. Supports searching with partial text.",
    )
    parser.add_argument(
        "-t", "--title",
        help="Filter results by job title. Supports searching with partial text.",
    )
    parser.add_argument(
        "--stages",
        nargs="?",
        const=0,
        type=int,
        metavar="N",
        help=(
            "Filter by number of interview stages. Without a value, shows jobs "
            "with any stages. With a number, shows jobs with that exact count."
        ),
    )


def query_from_args(args: argparse.Namespace) -> JobQuery:
    return JobQuery(
        company=args.company,
        link=args.link,
        notes=args.notes,
        sprint=args.sprint,
        status=args.status,
        title=args.title,
        stages=args.stages,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fetters",
        description="Track your job applications in sprints from the terminal.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    p = sub.add_parser("add", help="Track a new job application.")
    p.add_argument("company", help="The name of the company.")

    sub.add_parser("banner", help="Display the ASCII art.")

    p = sub.add_parser("config", help="Configure fetters by opening its config file.")
    config_sub = p.add_subparsers(dest="action", required=True, metavar="ACTION")
    config_sub.add_parser("edit", help="Edit the configuration file.")
    config_sub.add_parser("show", help="Display the current configuration settings.")

    for name, help_text in (
        ("delete", "Delete a tracked job application."),
        ("list", "List job applications in the current sprint, or those matching the query."),
        ("open", "Open the web link or local file associated with a job application."),
        ("update", "Update a tracked job application."),
    ):
        add_query_args(sub.add_parser(name, help=help_text))

    p = sub.add_parser("export", help="Export a sprint's job applications to a spreadsheet.")
    p.add_argument(
        "-d", "--directory",
        help="Export the spreadsheet to this directory. Defaults to the current directory.",
    )
    p.add_argument(
        "-f", "--filename",
        help=(
            "Filename for the exported file; '.xlsx' is added if missing. "
            "Defaults to '<DATE>-fetters-export-sprint-<SPRINT_NAME>.xlsx'."
        ),
    )
    p.add_argument(
        "-s", "--sprint",
        help="Select a sprint to export from. Defaults to the current sprint.",
    )

    sub.add_parser("insights", help="Show job application insights.")

    p = sub.add_parser("sprint", help="Manage job sprints.")
    sprint_sub = p.add_subparsers(dest="action", required=True, metavar="ACTION")
    sprint_sub.add_parser("current", help="Display the current sprint name.")
    p_new = sprint_sub.add_parser("new", help="Create a new job sprint and make it current.")
    p_new.add_argument("-n", "--name", help="Override the default sprint name (YYYY-MM-DD).")
    sprint_sub.add_parser("show-all", help="Show all job sprints.")
    sprint_sub.add_parser("set", help="Set the current job sprint.")

    p = sub.add_parser("stage", help="Manage interview stages for a job application.")
    stage_sub = p.add_subparsers(dest="action", required=True, metavar="ACTION")
    for name, help_text in (
        ("add", "Add a new interview stage to an application."),
        ("delete", "Delete an interview stage from an application."),
        ("tree", "Display a tree of interview stages."),
        ("update", "Update an interview stage for an application."),
    ):
        add_query_args(stage_sub.add_parser(name, help=help_text))

    return parser


_JOB_COMMANDS = {
    "delete": jobs.delete,
    "list": jobs.show,
    "open": jobs.open_link,
    "update": jobs.update,
}

_STAGE_COMMANDS = {
    "add": stage.add,
    "delete": stage.delete,
    "tree": stage.tree,
    "update": stage.update,
}


def run(args: argparse.Namespace, conn: sqlite3.Connection) -> None:
    """Dispatch parsed arguments to a command."""
    if args.command == "banner":
        misc.banner()
        return
    if args.command == "config":
        if args.action == "edit":
            config_cmd.edit()
        else:
            config_cmd.show()
        return

    config = load_config()

    if args.command == "sprint":
        if args.action == "new":
            sprint.new(conn, config, resolve_current_sprint(config, db=conn), args.name)
        elif args.action == "show-all":
            sprint.show_all(conn)
        elif args.action == "set":
            sprint.set_current(conn, config)
        else:
            sprint.current(require_current_sprint(config, db=conn))
        return

    current_sprint = require_current_sprint(config, db=conn)

    if args.command == "add":
        jobs.add(conn, args.company, current_sprint)
    elif args.command in _JOB_COMMANDS:
        _JOB_COMMANDS[args.command](conn, query_from_args(args), current_sprint)
    elif args.command == "export":
        misc.export(conn, current_sprint, args.directory, args.filename, args.sprint)
    elif args.command == "insights":
        misc.insights(conn, current_sprint)
    elif args.command == "stage":
        _STAGE_COMMANDS[args.action](conn, query_from_args(args), current_sprint)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    log.debug("Running %s", args)

    try:
        conn = init_db()
        run(args, conn)
    except FettersError as exc:
        log.debug("Command failed", exc_info=True)
        print(failure(str(exc)), file=sys.stderr)
        return 1
    except sqlite3.Error as exc:
        log.exception("Database error")
        print(failure(str(QueryError(exc))), file=sys.stderr)
        return 1
    except OSError as exc:
        log.exception("I/O error")
        print(failure(str(FettersIOError(exc))), file=sys.stderr)
        return 1
    finally:
        close_db()
    return 0


if __name__ == "__main__":
    sys.exit(main())
