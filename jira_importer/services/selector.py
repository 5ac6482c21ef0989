from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..excel.reader import SPREADSHEET_SUFFIXES, list_sheet_names

"""Interactive file and sheet selection.

Used when the CLI is started without a file argument: spreadsheets in the
working directory are listed, the operator picks one by number, then picks
one of its sheets the same way.
"""


class NoCandidateFilesError(Exception):
    pass


@dataclass(frozen=True)
class Selection:
    path: Path
    sheet_name: str


def scan_spreadsheet_files(directory: Path) -> list[Path]:
    """Spreadsheet files directly in ``directory`` (non-recursive), sorted by name.

    Raises:
        NoCandidateFilesError: nothing matches
    """
    files = sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in SPREADSHEET_SUFFIXES),
        key=lambda p: p.name,
    )
    if not files:
        raise NoCandidateFilesError(
            f"no spreadsheet files ({', '.join(SPREADSHEET_SUFFIXES)}) in {directory.resolve()}"
        )
    return files


def choose(
    options: list[str],
    title: str,
    prompt: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> int:
    """Show a numbered list and ask until a valid 1-based choice is entered.

    Returns:
        0-based index of the chosen option
    """
    if not options:
        raise ValueError(f"nothing to choose from: {title}")
    output(title)
    for number, option in enumerate(options, start=1):
        output(f"  {number}. {option}")
    while True:
        answer = prompt(f"Select 1-{len(options)}: ").strip()
        if answer.isdecimal() and answer.isascii() and 1 <= int(answer) <= len(options):
            return int(answer) - 1
        output(f"Invalid choice {answer!r}, enter a number between 1 and {len(options)}.")


def select_file_and_sheet(
    directory: Path,
    prompt: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> Selection:
    """Prompt for a spreadsheet in ``directory`` and one of its sheets."""
    files = scan_spreadsheet_files(directory)
    file_index = choose([p.name for p in files], "Spreadsheet files:", prompt, output)
    path = files[file_index]

    sheets = list_sheet_names(path)
    sheet_index = choose(sheets, f"Sheets in {path.name}:", prompt, output)
    return Selection(path=path, sheet_name=sheets[sheet_index])
