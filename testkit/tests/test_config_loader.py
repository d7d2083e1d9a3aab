import json
from pathlib import Path

import pytest

from testkit.core.errors import AggregatedStatisticsError, ConfigError
from testkit.core.recorder import ExecutionResults
from testkit.io import load_config, build_statistics_plan, check_statistics


def test_check_from_yaml_config(tmp_path: Path, run_events):
    cfg_path = tmp_path / "expect.yaml"
    cfg_path.write_text(
        "statistics:\n"
        "  tests:\n"
        "    started: 2\n"
        "    succeeded: 1\n"
        "    failed: 1\n"
        "    skipped: 1\n"
        "  containers:\n"
        "    started: 1\n"
        "    finished: 1\n",
        encoding="utf-8",
    )
    cfg = load_config(cfg_path)
    plan = build_statistics_plan(cfg)
    assert plan["tests"] == [("started", 2), ("succeeded", 1), ("failed", 1), ("skipped", 1)]
    check_statistics(ExecutionResults(tuple(run_events)), cfg)


def test_check_reports_failures_from_every_selector(tmp_path: Path, run_events):
    cfg = {
        "statistics": {
            "tests": {"started": 5, "failed": 1},
            "all": {"reporting_entry_published": 0},
        }
    }
    cfg_path = tmp_path / "expect.json"
    cfg_path.write_text(json.dumps(cfg), encoding="utf-8")
    with pytest.raises(AggregatedStatisticsError) as exc_info:
        check_statistics(ExecutionResults(tuple(run_events)), load_config(cfg_path))
    failures = exc_info.value.failures
    assert failures == [
        "Test: type 'started' count: expected <5> but was <2>",
        "All: type 'reporting_entry_published' count: expected <0> but was <1>",
    ]


@pytest.mark.parametrize("cfg", [
    {"statistics": ["started"]},
    {"statistics": {"everything": {"started": 1}}},
    {"statistics": {"tests": {"bogus": 1}}},
    {"statistics": {"tests": {"started": -1}}},
    {"statistics": {"tests": {"started": "two"}}},
    {"statistics": {"tests": 3}},
])
def test_invalid_plans(cfg):
    with pytest.raises(ConfigError):
        build_statistics_plan(cfg)


def test_unparseable_or_non_mapping_config(tmp_path: Path):
    bad_yaml = tmp_path / "bad.yaml"
    bad_yaml.write_text("statistics: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(bad_yaml)

    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(listing)


def test_empty_config_checks_nothing(tmp_path: Path, run_events):
    empty = tmp_path / "empty.yml"
    empty.write_text("", encoding="utf-8")
    cfg = load_config(empty)
    assert cfg == {}
    check_statistics(ExecutionResults(tuple(run_events)), cfg)
