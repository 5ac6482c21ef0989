from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from jira_importer.config.loader import ConfigError, load_config
from jira_importer.excel.reader import ExcelReadError, read_sheet
from jira_importer.excel.validator import SheetValidationError, format_issue_lines, validate_sheet
from jira_importer.logging.error_log import ErrorLogBuffer
from jira_importer.logging.init import log_summary, setup_logging
from jira_importer.models.task_group import TaskHierarchy
from jira_importer.services.hierarchy import build_hierarchy
from jira_importer.services.orchestrator import create_issues
from jira_importer.services.selector import NoCandidateFilesError, select_file_and_sheet
from jira_importer.services.summary import render_summary_line
from jira_importer.tracker.client import JiraTrackerClient

"""CLI entrypoint.

Flow: load config -> pick file/sheet (argument or interactive) -> read ->
validate -> group -> create issues -> SUMMARY.

Exit codes: 0 when the pipeline reached the summary (even if some groups
failed remotely), 1 for any failure before issue creation starts.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env into the process environment (its values win)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="excel-jira-import",
        description="Create Jira parent issues and sub-tasks from an Excel sheet",
    )
    p.add_argument("file", nargs="?", help="Spreadsheet to import; omit to choose interactively")
    p.add_argument("--config", type=Path, default=None, help="YAML config file (default: config/import.yml if present)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--dry-run", action="store_true", help="Validate and print the planned issues, create nothing")
    return p.parse_args(argv)


def _print_plan(hierarchy: TaskHierarchy) -> None:
    for group in hierarchy:
        print(f"{group.name} ({group.total_estimate} points)")
        for child in group.children:
            print(f"  - {child.name} ({child.estimate} points)")


def main(argv: list[str] | None = None) -> int:
    # an explicit [] must not fall back to sys.argv[1:]
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error("config: %s", e)
        return EXIT_FATAL

    if args.file:
        path = Path(args.file)
        sheet_name = cfg.excel.sheet_name
    else:
        try:
            selection = select_file_and_sheet(Path.cwd())
        except NoCandidateFilesError as e:
            logger.error("select: %s", e)
            return EXIT_FATAL
        except ExcelReadError as e:
            logger.error("read: %s", e)
            return EXIT_FATAL
        except (EOFError, KeyboardInterrupt):
            logger.error("select: selection aborted")
            return EXIT_FATAL
        path, sheet_name = selection.path, selection.sheet_name

    logger.info("reading %s (sheet '%s')", path, sheet_name)
    try:
        sheet = read_sheet(path, sheet_name)
    except ExcelReadError as e:
        logger.error("read: %s", e)
        return EXIT_FATAL
    logger.info("read %d row(s) from sheet '%s'", len(sheet.rows), sheet_name)

    try:
        validation = validate_sheet(sheet, cfg.excel.columns)
    except SheetValidationError as e:
        logger.error("validate: %s", e)
        return EXIT_FATAL
    if validation.warnings:
        logger.warning("%d warning(s):", len(validation.warnings))
        for line in format_issue_lines(validation.warnings):
            logger.warning("  %s", line)

    hierarchy = build_hierarchy(validation.rows)
    logger.info("found %d parent task(s) and %d sub-task(s)", len(hierarchy), hierarchy.child_count)

    if args.dry_run:
        _print_plan(hierarchy)
        return EXIT_SUCCESS

    client = JiraTrackerClient.from_config(cfg.tracker)
    result = create_issues(
        hierarchy,
        client,
        cfg,
        error_log=ErrorLogBuffer(),
        source_file=path.name,
        sheet_name=sheet_name,
    )

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
