"""Failure log for remote creation errors.

Each failed parent or sub-task creation becomes one ErrorRecord. Records
are held in memory while groups are processed and written together when
the run ends, one JSON object per line, to ``logs/errors-YYYYMMDD-HHMMSS.log``.
The timestamp in the name is UTC and is taken when the file is first needed.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from jira_importer.models.error_record import ErrorRecord

DEFAULT_LOGS_DIR = Path("./logs")
FILE_STAMP_FORMAT = "%Y%m%d-%H%M%S"


def log_file_name(now: datetime) -> str:
    return f"errors-{now.astimezone(UTC).strftime(FILE_STAMP_FORMAT)}.log"


class ErrorLogBuffer:
    """Collects failure records for a single import run.

    A run without failures leaves no logs directory behind. Once a file
    has been chosen every later flush appends to it.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._pending: list[ErrorRecord] = []
        self._target: Path | None = None
        self._logs_dir = DEFAULT_LOGS_DIR if logs_dir is None else logs_dir

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def __len__(self) -> int:
        return len(self._pending)

    def _log_file(self) -> Path:
        if self._target is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            self._target = self._logs_dir / log_file_name(datetime.now(UTC))
        return self._target

    def flush(self) -> Path | None:
        """Write pending records and return the file, or None if nothing was pending."""
        if not self._pending:
            return None
        target = self._log_file()
        lines = "".join(record.to_json_line() + "\n" for record in self._pending)
        with target.open("a", encoding="utf-8") as f:
            f.write(lines)
        self._pending.clear()
        return target
