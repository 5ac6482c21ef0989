from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from jira_importer.config.loader import ConfigError, load_config
from jira_importer.tracker.client import JiraTrackerClient, TrackerError

"""Find the custom field id that holds story points / estimates.

Lists the tracker's fields and prints those whose name contains "point" or
"estimate", so the id can be put in STORY_POINTS_FIELD_ID.
"""

KEYWORDS = ("point", "estimate")


def find_estimate_fields(fields: list[dict[str, Any]]) -> list[dict[str, Any]]:
    matches = []
    for f in fields:
        name = str(f.get("name") or "").lower()
        if any(k in name for k in KEYWORDS):
            matches.append(f)
    return matches


def _field_type(field: dict[str, Any]) -> str:
    schema = field.get("schema") or {}
    return schema.get("type") or "unknown"


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    p = argparse.ArgumentParser(prog="excel-jira-find-field", description="List estimate/story point fields")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--all", action="store_true", help="List every field, not only estimate candidates")
    args = p.parse_args(argv)

    if Path(".env").exists():
        load_dotenv(dotenv_path=Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        print(f"config: {e}", file=sys.stderr)
        return 1

    client = JiraTrackerClient.from_config(cfg.tracker)
    try:
        fields = client.list_fields()
    except TrackerError as e:
        print(f"list fields failed: {e}", file=sys.stderr)
        return 1

    selected = fields if args.all else find_estimate_fields(fields)
    print(f"Fields matching {' / '.join(KEYWORDS)}:" if not args.all else "All fields:")
    for f in selected:
        print(f"  {f.get('name')}")
        print(f"    id: {f.get('id')}")
        print(f"    type: {_field_type(f)}")
    if not selected:
        print("  (none)")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
