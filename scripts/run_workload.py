"""Build the grouped workload view and quality report from a CSV/JSON export."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from workload_engine.adapters import csv_adapter, json_adapter
from workload_engine.config import EngineConfig, load_config
from workload_engine.export import member_to_dict, quality_to_dict, result_to_dict
from workload_engine.pipeline import process_records
from workload_engine.quality import member_rankings, score_tasks


def _load_records(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the workload engine over a task export")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON task export")
    parser.add_argument("--config", help="Path to YAML config (mappings, holidays, quality weights)")
    parser.add_argument("--anchor", help="First day of the display window (YYYY-MM-DD), defaults to today")
    parser.add_argument("--assignee", help="Also report the quality score for a single assignee")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config) if args.config else EngineConfig()
    anchor = date.fromisoformat(args.anchor) if args.anchor else date.today()

    records = _load_records(Path(args.data))
    result = process_records(records, config, anchor=anchor)

    report = result_to_dict(result)
    report["rankings"] = [member_to_dict(m) for m in member_rankings(result.tasks, config=config)]
    if args.assignee:
        report["assignee_quality"] = quality_to_dict(
            score_tasks(result.tasks, config=config, assignee=args.assignee)
        )

    print(json.dumps(report, indent=2, ensure_ascii=False))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "workload_report.json"
    out_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Saved workload report to {out_path}")


if __name__ == "__main__":
    main()
