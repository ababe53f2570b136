"""JSON adapter for raw task-tracker exports.

Two shapes are accepted: flat records keyed by export headers (as a CSV export
would produce) and task objects as returned by the ClickUp API, which are
flattened into the same header keys.
"""

from __future__ import annotations

import json
from typing import Any, Optional

_MS_PER_MINUTE = 60_000


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_api_task(item: dict) -> bool:
    assignees = item.get("assignees")
    return (
        isinstance(item.get("status"), dict)
        or isinstance(item.get("list"), dict)
        or (isinstance(assignees, list) and any(isinstance(a, dict) for a in assignees))
        or _is_number(item.get("time_estimate"))
        or _is_number(item.get("time_spent"))
    )


def _duration(value: Any) -> str:
    """Millisecond duration -> "Nm" understood by the duration parser."""

    if value in (None, ""):
        return ""
    try:
        millis = float(value)
    except (TypeError, ValueError):
        return ""
    return f"{round(millis / _MS_PER_MINUTE)}m"


def _epoch(value: Any) -> str:
    if value in (None, ""):
        return ""
    if _is_number(value):
        return str(int(value))
    return str(value).strip()


def _label(value: Any, *keys: str) -> str:
    if isinstance(value, dict):
        for key in keys:
            if value.get(key):
                return str(value[key])
        return ""
    return "" if value is None else str(value)


def _assignees(value: Any) -> str:
    if not isinstance(value, list):
        return _label(value, "username", "name")
    names = [_label(person, "username", "name", "email") for person in value]
    return ", ".join(name for name in names if name)


def flatten_api_task(item: dict, names_by_id: Optional[dict[str, str]] = None) -> dict:
    """Map one ClickUp API task object onto export header keys.

    ``parent`` holds a task id in the API; it is resolved to the parent's name
    through ``names_by_id``. An unknown parent id is kept as is, so the linker
    treats the task as an orphan.
    """

    names_by_id = names_by_id or {}
    parent_id = item.get("parent")
    parent_name = ""
    if parent_id:
        parent_name = names_by_id.get(str(parent_id), str(parent_id))

    return {
        "Task ID": _label(item.get("id")),
        "Task Name": _label(item.get("name")),
        "Status": _label(item.get("status"), "status").upper(),
        "Assignee": _assignees(item.get("assignees")),
        "Start Date": _epoch(item.get("start_date")),
        "Due Date": _epoch(item.get("due_date")),
        "Date Closed": _epoch(item.get("date_closed")),
        "Time Estimate": _duration(item.get("time_estimate")),
        "Time Logged": _duration(item.get("time_spent")),
        "List": _label(item.get("list"), "name"),
        "Description": _label(item.get("description") or item.get("text_content")),
        "Priority": _label(item.get("priority"), "priority", "name").upper(),
        "Parent Name": parent_name,
    }


def parse(file_path: str) -> list[dict]:
    """Parse a JSON export into raw records.

    Accepts either a list of objects or an object with a "tasks" list.
    """

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if isinstance(payload, dict) and "tasks" in payload:
        payload = payload["tasks"]

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    for index, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Item {index}: expected an object, got {type(item).__name__}")

    names_by_id = {str(item["id"]): str(item.get("name") or "") for item in payload if item.get("id")}
    return [flatten_api_task(item, names_by_id) if _is_api_task(item) else item for item in payload]
