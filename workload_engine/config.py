"""Engine configuration and YAML loader."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_QUALITY_WEIGHTS = {
    "assignee": 15.0,
    "due_date": 8.0,
    "priority": 6.0,
    "start_date": 6.0,
    "estimate": 10.0,
    "description": 12.0,
}

DEFAULT_COMPLETED_STATUSES = frozenset(
    {"COMPLETE", "COMPLETED", "CONCLUÍDO", "CONCLUIDO", "FINALIZADO", "DONE", "CLOSED"}
)


@dataclass
class EngineConfig:
    """Caller-supplied configuration threaded through every stage."""

    name_mappings: dict[str, str] = field(default_factory=dict)
    holidays: frozenset[str] = frozenset()
    quality_weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_QUALITY_WEIGHTS))
    completed_statuses: frozenset[str] = DEFAULT_COMPLETED_STATUSES
    lowest_priorities: frozenset[str] = frozenset({"4", "LOW"})
    placeholder_assignees: frozenset[str] = frozenset({"Unassigned", "Sem responsável", "Não atribuído"})
    min_description_length: int = 5
    window_length: int = 10


def _string_set(value, key: str) -> frozenset[str]:
    if not isinstance(value, (list, tuple, set)):
        raise ValueError(f"Config '{key}' must be a list of strings")
    return frozenset(str(item).strip() for item in value)


def from_dict(data: dict) -> EngineConfig:
    """Build an EngineConfig from a plain mapping, keeping defaults for absent keys."""

    if not isinstance(data, dict):
        raise ValueError("Config payload must be a mapping")

    config = EngineConfig()

    mappings = data.get("name_mappings")
    if mappings is not None:
        if not isinstance(mappings, dict):
            raise ValueError("Config 'name_mappings' must be a mapping")
        config.name_mappings = {str(k).strip(): str(v).strip() for k, v in mappings.items()}

    if data.get("holidays") is not None:
        config.holidays = _string_set(data["holidays"], "holidays")

    weights = data.get("quality_weights")
    if weights is not None:
        if not isinstance(weights, dict):
            raise ValueError("Config 'quality_weights' must be a mapping")
        try:
            config.quality_weights = {str(k): float(v) for k, v in weights.items()}
        except (TypeError, ValueError) as exc:
            raise ValueError("Config 'quality_weights' values must be numeric") from exc

    if data.get("completed_statuses") is not None:
        statuses = _string_set(data["completed_statuses"], "completed_statuses")
        config.completed_statuses = frozenset(s.upper() for s in statuses)

    if data.get("lowest_priorities") is not None:
        priorities = _string_set(data["lowest_priorities"], "lowest_priorities")
        config.lowest_priorities = frozenset(p.upper() for p in priorities)

    if data.get("placeholder_assignees") is not None:
        config.placeholder_assignees = _string_set(data["placeholder_assignees"], "placeholder_assignees")

    for key in ("min_description_length", "window_length"):
        if data.get(key) is not None:
            try:
                setattr(config, key, int(data[key]))
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Config '{key}' must be an integer") from exc

    return config


def load_config(config_path: str | Path) -> EngineConfig:
    """Load a YAML config file; an empty file yields the defaults."""

    with open(config_path, encoding="utf-8") as handle:
        data = yaml.safe_load(handle)

    if data is None:
        return EngineConfig()
    return from_dict(data)
