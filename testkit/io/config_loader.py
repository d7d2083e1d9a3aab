from __future__ import annotations
from typing import Any, Callable, Dict, List, Tuple
import json
import logging
from pathlib import Path

import yaml

from testkit.core.errors import AggregatedStatisticsError, ConfigError
from testkit.core.events import Events
from testkit.core.recorder import ExecutionResults
from testkit.core.statistics import STATISTICS, EventStatistics

logger = logging.getLogger(__name__)

SELECTORS = ("all", "tests", "containers")

StatisticsPlan = Dict[str, List[Tuple[str, int]]]


def load_config(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        text = f.read()
    suffix = p.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            # default to JSON
            data = json.loads(text or "{}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not parse config file {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {p} must contain a mapping at the top level")
    return data


def select(results: ExecutionResults, selector: str) -> Events:
    if selector == "all":
        return results.all_events()
    if selector == "tests":
        return results.tests()
    if selector == "containers":
        return results.containers()
    raise ConfigError(f"Unknown selector '{selector}'; expected one of {', '.join(SELECTORS)}")


def build_statistics_plan(cfg: Dict[str, Any]) -> StatisticsPlan:
    """
    Validate the `statistics` section of a config into
    {selector: [(statistic name, expected count), ...]}, keeping declaration order.
    """
    section = cfg.get("statistics") or {}
    if not isinstance(section, dict):
        raise ConfigError("'statistics' must be a mapping of selector -> expected counts")
    plan: StatisticsPlan = {}
    for selector, counts in section.items():
        selector = str(selector).lower()
        if selector not in SELECTORS:
            raise ConfigError(f"Unknown selector '{selector}'; expected one of {', '.join(SELECTORS)}")
        if not isinstance(counts, dict):
            raise ConfigError(f"Expected counts for '{selector}' must be a mapping")
        rows: List[Tuple[str, int]] = []
        for name, value in counts.items():
            name = str(name)
            if name not in STATISTICS:
                raise ConfigError(f"Unknown statistic '{name}' for '{selector}'")
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"Expected count for '{selector}.{name}' must be a non-negative integer, got {value!r}")
            rows.append((name, value))
        plan[selector] = rows
    return plan


def check_statistics(results: ExecutionResults, cfg: Dict[str, Any]) -> None:
    """
    Run every configured statistics expectation. All selectors are evaluated
    and every unmet expectation, across selectors, is raised in one error.
    """
    plan = build_statistics_plan(cfg)
    failures: List[str] = []
    for selector, rows in plan.items():
        events = select(results, selector)
        try:
            events.assert_statistics(_configure(rows))
        except AggregatedStatisticsError as e:
            logger.debug("%s", e)
            failures.extend(f"{events.category}: {f}" for f in e.failures)
    if failures:
        raise AggregatedStatisticsError(failures)


def _configure(rows: List[Tuple[str, int]]) -> Callable[[EventStatistics], None]:
    def configure(stats: EventStatistics) -> None:
        for name, count in rows:
            stats.expect(name, count)
    return configure
