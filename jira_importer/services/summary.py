from __future__ import annotations

from ..models.processing_result import ImportResult

"""SUMMARY line rendering."""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for very small values
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.2f}"


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for an ImportResult.

    Format:
    SUMMARY groups={total} success={ok} failed={failed} sub_tasks={created}/{attempted} elapsed_sec={s}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> r = ImportResult(
        ...     success_groups=2, failed_groups=1, children_created=3, children_failed=1,
        ...     start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(r)
        'SUMMARY groups=3 success=2 failed=1 sub_tasks=3/4 elapsed_sec=2'
    """
    return (
        f"SUMMARY groups={result.total_groups} "
        f"success={result.success_groups} "
        f"failed={result.failed_groups} "
        f"sub_tasks={result.children_created}/{result.children_attempted} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
