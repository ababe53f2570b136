"""Field normalization for raw task-tracker exports.

Every function here returns a safe default on bad input so a single malformed
cell never aborts a batch.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

from workload_engine.config import DEFAULT_COMPLETED_STATUSES

UNASSIGNED = "Unassigned"
ASSIGNEE_SEPARATOR = " / "

_HOURS_MINUTES_RE = re.compile(r"(\d+)\s*h(?:\s*(\d+)\s*m?)?")
_MINUTES_RE = re.compile(r"(\d+)\s*m")
_HOURS_RE = re.compile(r"(\d+)\s*h")
# Leading "d/m[/y]"; trailing text such as a time of day is ignored.
_DAY_MONTH_RE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?(?!\d)")
_ASSIGNEE_STRIP_RE = re.compile(r"[\[\]'\"]")
_ASSIGNEE_SPLIT_RE = re.compile(r"[,;|/]")

# Accepted header spellings per canonical field, compared case-insensitively.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "task_id": ("Task ID", "task_id", "id"),
    "name": ("Task Name", "task_name", "name", "Task"),
    "status": ("Status", "status"),
    "assignee": ("Assignee", "Assignees", "assignee", "assignees", "Owner"),
    "start_date": ("Start Date", "start_date", "Start"),
    "due_date": ("Due Date", "due_date", "Due"),
    "closed_date": ("Date Closed", "Closed Date", "date_closed", "closed_date"),
    "planned": ("Time Estimate", "time_estimate", "Estimate", "planned"),
    "logged": ("Time Logged", "time_logged", "Time Tracked", "time_spent", "logged"),
    "parent_name": ("Parent Name", "parent_name", "Parent"),
    "project": ("List", "List Name", "list_name", "Project", "project"),
    "description": ("Description", "Descrição", "description", "Task Content"),
    "priority": ("Priority", "priority"),
}

_MISSING_MARKERS = {"", "nan", "none", "null"}


def _clean(value: Any) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    return "" if text.lower() in _MISSING_MARKERS else text


def field(record: Mapping[str, Any], name: str) -> str:
    """Return the trimmed value of a canonical field, or "" when absent."""

    aliases = FIELD_ALIASES.get(name, (name,))
    for alias in aliases:
        if alias in record:
            value = _clean(record[alias])
            if value:
                return value

    lowered = {alias.lower() for alias in aliases}
    for key, value in record.items():
        if str(key).strip().lower() in lowered:
            cleaned = _clean(value)
            if cleaned:
                return cleaned
    return ""


def parse_duration(text: Any) -> float:
    """Parse "1h 30m", "90m" or "2h" into hours; anything else is 0."""

    s = _clean(text).lower()
    if not s or s == "0":
        return 0.0

    m = _HOURS_MINUTES_RE.search(s)
    if m:
        return int(m.group(1)) + int(m.group(2) or 0) / 60.0

    m = _MINUTES_RE.search(s)
    if m:
        return int(m.group(1)) / 60.0

    m = _HOURS_RE.search(s)
    if m:
        return float(int(m.group(1)))

    return 0.0


def parse_date(text: Any, reference: Optional[date] = None) -> Optional[date]:
    """Parse a millisecond epoch or a "d/m[/y]" string into a date.

    Anything after the date part, such as "10:00" in "05/03/2025 10:00", is
    ignored.
    """

    s = _clean(text)
    if not s:
        return None

    if s.isdigit():
        try:
            return datetime.fromtimestamp(int(s) / 1000.0, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None

    m = _DAY_MONTH_RE.match(s)
    if not m:
        return None

    day, month, year_text = int(m.group(1)), int(m.group(2)), m.group(3)
    if year_text:
        year = int(year_text)
        if len(year_text) == 2:
            year += 2000
    else:
        year = (reference or date.today()).year

    try:
        return date(year, month, day)
    except ValueError:
        return None


def normalize_assignee(raw: Any, mappings: Mapping[str, str]) -> str:
    """Map a raw assignee cell to one identity or a " / "-joined group of them."""

    s = _ASSIGNEE_STRIP_RE.sub("", _clean(raw)).strip()
    if not s:
        return UNASSIGNED

    if s in mappings:
        return mappings[s]

    resolved: list[str] = []
    for fragment in _ASSIGNEE_SPLIT_RE.split(s):
        fragment = fragment.strip()
        if not fragment:
            continue
        lowered = fragment.lower()
        mapped = next((short for full, short in mappings.items() if full and full.lower() in lowered), fragment)
        if mapped not in resolved:
            resolved.append(mapped)

    return ASSIGNEE_SEPARATOR.join(resolved) if resolved else UNASSIGNED


def split_assignees(identity: str) -> list[str]:
    names: list[str] = []
    for name in (identity or "").split(ASSIGNEE_SEPARATOR):
        name = name.strip() or UNASSIGNED
        if name not in names:
            names.append(name)
    return names


def is_completed(status: str, completed_statuses=DEFAULT_COMPLETED_STATUSES) -> bool:
    return (status or "").strip().upper() in completed_statuses
