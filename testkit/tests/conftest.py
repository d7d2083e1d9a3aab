import pytest

from testkit.core.event import (
    DescriptorKind,
    ExecutionEvent,
    ReportEntry,
    TestDescriptor,
    TestExecutionResult,
)

SUITE = TestDescriptor("[engine:demo]/[class:Suite]", "Suite", DescriptorKind.CONTAINER)
ALPHA = TestDescriptor("[engine:demo]/[class:Suite]/[method:alpha]", "alpha()")
BETA = TestDescriptor("[engine:demo]/[class:Suite]/[method:beta]", "beta()")
GAMMA = TestDescriptor("[engine:demo]/[class:Suite]/[method:gamma]", "gamma()")
DYN = TestDescriptor("[engine:demo]/[class:Suite]/[dynamic:#1]", "dynamic #1")


def make_run():
    """Suite with one passing test, one failing test and one skipped test."""
    return [
        ExecutionEvent.started(SUITE, timestamp=0.0),
        ExecutionEvent.started(ALPHA, timestamp=1.0),
        ExecutionEvent.reporting_entry_published(ALPHA, ReportEntry({"key": "value"}, 1.5), timestamp=1.5),
        ExecutionEvent.finished(ALPHA, TestExecutionResult.successful(), timestamp=2.0),
        ExecutionEvent.started(BETA, timestamp=3.0),
        ExecutionEvent.finished(BETA, TestExecutionResult.failed(AssertionError("boom")), timestamp=5.0),
        ExecutionEvent.skipped(GAMMA, "disabled", timestamp=6.0),
        ExecutionEvent.finished(SUITE, TestExecutionResult.successful(), timestamp=7.0),
    ]


@pytest.fixture
def run_events():
    return make_run()
