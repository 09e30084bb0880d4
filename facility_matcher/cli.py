from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import yaml

from .app import FacilityMatcherApp
from .commands import status as cmd_status
from .commands.output import result_page
from .config import load_settings
from .errors import FacilityMatcherError
from .io_formats import read_lines, write_export
from .session import LoadStatus

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}

MUTATING_COMMANDS = {"import-raw", "import-clean", "add-clean", "assign"}

logger = logging.getLogger(__name__)


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Match raw facility names against a clean reference list")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    parser.add_argument("--user", default=None, help="Session owner (overrides user.id from config)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    raw_parser = subparsers.add_parser(
        "import-raw", help="Replace raw inputs with the lines of a file (existing matches are kept)"
    )
    raw_parser.add_argument("file", type=Path)
    clean_parser = subparsers.add_parser("import-clean", help="Append the lines of a file to the clean-name list")
    clean_parser.add_argument("file", type=Path)
    add_parser = subparsers.add_parser("add-clean", help="Add a single clean name")
    add_parser.add_argument("name")

    search_parser = subparsers.add_parser("search", help="List raw inputs matching a term")
    search_parser.add_argument("term", nargs="?", default="")
    search_parser.add_argument("--threshold", type=float, default=None, help="Fuzzy inclusion threshold (0-1)")
    search_parser.add_argument("--limit", type=int, default=None, help="Rows to show")

    suggest_parser = subparsers.add_parser("suggest", help="Rank clean names for a term")
    suggest_parser.add_argument("term", nargs="?", default="")

    assign_parser = subparsers.add_parser("assign", help="Assign a clean name to raw inputs")
    assign_parser.add_argument("--clean", required=True, help="Clean name to assign")
    targets = assign_parser.add_mutually_exclusive_group(required=True)
    targets.add_argument("--id", type=int, nargs="+", dest="ids", help="Raw input ids")
    targets.add_argument("--term", help="Assign every raw input currently visible for this term")
    assign_parser.add_argument("--threshold", type=float, default=None, help="Threshold used with --term")

    export_parser = subparsers.add_parser("export", help="Write raw inputs and their matches as CSV")
    export_parser.add_argument("out", type=Path, nargs="?", default=Path("matched_hospitals.csv"))

    subparsers.add_parser("status", help="Show import and completion counts")
    return parser


def _run_command(args: argparse.Namespace, app: FacilityMatcherApp) -> int:
    session = app.session
    matching = app.settings.matching
    match args.command:
        case "import-raw":
            count = session.import_raw_inputs(read_lines(args.file))
            print(f"Imported {count} raw input(s).")
        case "import-clean":
            added = session.import_clean_names(read_lines(args.file))
            print(f"Added {added} clean name(s); {len(session.clean_names)} total.")
        case "add-clean":
            if session.add_clean_name(args.name):
                print(f"Added clean name {args.name.strip()!r}.")
            else:
                print("Clean name is blank or already listed.")
        case "search":
            results = session.visible_results(args.term, args.threshold)
            limit = args.limit or matching.results_page_size
            for line in result_page(results, session.matches, limit):
                print(line)
        case "suggest":
            names = session.suggestions(args.term)
            if not names:
                print("No matching clean names found")
            for name in names:
                print(name)
        case "assign":
            if args.ids:
                count = session.bulk_assign(args.ids, args.clean)
            else:
                visible = session.visible_results(args.term, args.threshold)
                count = session.bulk_assign(visible, args.clean)
            print(f"Matched {count} raw input(s) to {args.clean!r}.")
        case "export":
            rows = write_export(args.out, session.raw_inputs, session.matches)
            print(f"Exported {rows} row(s) to {args.out}.")
        case "status":
            report = cmd_status.run(session)
            for line in report.lines:
                print(line)
            if not report.ok:
                return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    warn_buffer = configure_logging(args.log_level)

    app: FacilityMatcherApp | None = None
    try:
        settings = load_settings(args.config)
        if args.user:
            settings.user.id = args.user
        app = FacilityMatcherApp.create(settings)
        loaded = app.session.load()
        if loaded.status is LoadStatus.FAILED:
            logger.error("Could not load the saved session; refusing to continue")
            return 1
        exit_code = _run_command(args, app)
        if args.command in MUTATING_COMMANDS:
            saved = app.session.save()
            print(saved.message)
            if not saved.ok:
                return 1
        return exit_code
    except (FacilityMatcherError, ValueError, OSError, yaml.YAMLError) as exc:
        logger.error("%s", exc)
        return 1
    finally:
        if app:
            app.close()
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
