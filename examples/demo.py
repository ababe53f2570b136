"""Demo script for workload-engine."""

import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from workload_engine.adapters.csv_adapter import parse
from workload_engine.config import load_config
from workload_engine.pipeline import process_records
from workload_engine.quality import member_rankings


def main() -> None:
    records = parse("examples/sample_tasks.csv")
    config = load_config("examples/config.yaml")
    result = process_records(records, config, anchor=date(2025, 3, 3))

    print("Window:", [day.isoformat() for day in result.window])
    for group in result.groups:
        print(group.assignee)
        for project in group.projects:
            print(f"  {project.name} ({project.planned:.1f}h planned, {project.logged:.1f}h logged)")
            for task in project.tasks:
                print(f"    - {task.name}: {dict(task.distribution)}")
    print("Team quality score:", result.quality.score)
    for member in member_rankings(result.tasks, config=config):
        print(f"  {member.name}: {member.score} ({member.tier})")


if __name__ == "__main__":
    main()
