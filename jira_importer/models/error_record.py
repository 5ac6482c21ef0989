from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the failure log.

One record per remote creation failure. Serialized as a single JSON Lines
entry with a fixed key set.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Spreadsheet filename being imported
        sheet: Sheet name within the file
        group: Parent task name
        child: Sub-task name, or None for parent-level failures
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Tracker error message
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    group: str
    child: str | None
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(
        file: str, sheet: str, group: str, child: str | None, error_type: str, message: str
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            group=group,
            child=child,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
