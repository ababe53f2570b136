"""CSV adapter for raw task-tracker exports."""

from __future__ import annotations

import csv


def parse(file_path: str) -> list[dict[str, str]]:
    """Read a CSV export into raw records keyed by header.

    Missing cells are left empty; field-level cleanup happens in the normalizer.
    """

    with open(file_path, newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        records: list[dict[str, str]] = []
        for row in reader:
            record = {key.strip(): (value or "") for key, value in row.items() if key is not None}
            if any(value.strip() for value in record.values()):
                records.append(record)
        return records
