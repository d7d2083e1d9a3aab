from testkit.core import conditions as c
from testkit.core.event import EventType, ReportEntry, TestExecutionResult
from testkit.core.recorder import ExecutionRecorder
from conftest import ALPHA, DYN, GAMMA, SUITE


def record():
    rec = ExecutionRecorder()
    rec.execution_started(SUITE)
    rec.dynamic_test_registered(DYN)
    rec.execution_started(DYN)
    rec.reporting_entry_published(DYN, ReportEntry.from_values(k="v"))
    rec.execution_finished(DYN, TestExecutionResult.successful())
    rec.execution_skipped(GAMMA, "disabled")
    rec.execution_started(ALPHA)
    rec.execution_finished(ALPHA, TestExecutionResult.aborted())
    rec.execution_finished(SUITE, TestExecutionResult.successful())
    return rec.get_execution_results()


def test_events_are_recorded_in_call_order():
    results = record()
    types = [e.type for e in results.all_events()]
    assert types == [
        EventType.STARTED,
        EventType.DYNAMIC_TEST_REGISTERED,
        EventType.STARTED,
        EventType.REPORTING_ENTRY_PUBLISHED,
        EventType.FINISHED,
        EventType.SKIPPED,
        EventType.STARTED,
        EventType.FINISHED,
        EventType.FINISHED,
    ]


def test_selector_categories():
    results = record()
    assert results.all_events().category == "All"
    assert results.tests().failed().category == "Test Failed"
    assert results.containers().category == "Container"


def test_tests_and_containers_views():
    results = record()
    results.containers().assert_events_match_exactly(
        c.event(c.container(), c.started()),
        c.event(c.container(), c.finished_successfully()),
    )
    results.tests().assert_statistics(
        lambda stats: stats.dynamically_registered(1).started(2).skipped(1).succeeded(1).aborted(1)
    )


def test_results_are_a_snapshot():
    rec = ExecutionRecorder()
    rec.execution_started(ALPHA)
    results = rec.get_execution_results()
    rec.execution_finished(ALPHA, TestExecutionResult.successful())
    assert results.all_events().count() == 1
