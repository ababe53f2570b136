"""End-to-end batch transformation from raw records to grouped views."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from workload_engine.config import EngineConfig
from workload_engine.grouping import group_tasks
from workload_engine.linker import link_tasks
from workload_engine.quality import QualityReport, score_tasks
from workload_engine.schema import GroupedData, Task
from workload_engine.workdays import display_window

logger = logging.getLogger(__name__)


@dataclass
class WorkloadResult:
    tasks: list[Task]
    window: list[date]
    groups: list[GroupedData]
    quality: QualityReport


def process_records(
    records: Iterable[Mapping[str, Any]],
    config: Optional[EngineConfig] = None,
    anchor: Optional[date] = None,
) -> WorkloadResult:
    """Link, distribute, group and score one batch of raw records.

    The result depends only on the arguments; pass ``anchor`` explicitly for
    reproducible output.
    """

    config = config or EngineConfig()
    anchor = anchor or date.today()

    tasks = link_tasks(records, config, reference=anchor)
    window = display_window(anchor, config.holidays, length=config.window_length)
    groups = group_tasks(tasks, window, config)
    quality = score_tasks(tasks, config.quality_weights, config)

    logger.info(
        "Processed %d tasks into %d assignee groups (quality score %d)",
        len(tasks),
        len(groups),
        quality.score,
    )
    return WorkloadResult(tasks=tasks, window=window, groups=groups, quality=quality)
