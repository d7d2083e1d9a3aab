import io
import tempfile

import pytest

from testkit.core.errors import InvalidArgumentError
from testkit.core.event import EventType, ExecutionEvent, Status, TestExecutionResult
from testkit.core.events import Events
from conftest import ALPHA, BETA, DYN, GAMMA, SUITE


def test_construction_rejects_none():
    with pytest.raises(InvalidArgumentError):
        Events(None, "All")
    with pytest.raises(InvalidArgumentError):
        Events([ExecutionEvent.started(ALPHA), None], "All")


def test_accepts_generator_and_snapshots_list(run_events):
    from_gen = Events((e for e in run_events), "All")
    assert from_gen.count() == len(run_events)

    source = list(run_events)
    view = Events(source, "All")
    source.append(ExecutionEvent.started(ALPHA))
    source.clear()
    assert view.count() == len(run_events)
    assert list(view.list()) == run_events


def test_list_is_read_only(run_events):
    view = Events(run_events, "All")
    with pytest.raises((TypeError, AttributeError)):
        view.list().append(ExecutionEvent.started(ALPHA))


def test_stream_is_restartable(run_events):
    view = Events(run_events, "All")
    first = list(view.stream())
    second = list(view.stream())
    assert first == second == run_events


def test_map_and_filter(run_events):
    view = Events(run_events, "All")
    names = list(view.map(lambda e: e.test_descriptor.display_name))
    assert names[0] == "Suite" and names[1] == "alpha()"
    starts = list(view.filter(lambda e: e.type is EventType.STARTED))
    assert [e.test_descriptor for e in starts] == [SUITE, ALPHA, BETA]
    with pytest.raises(InvalidArgumentError):
        view.map(None)
    with pytest.raises(InvalidArgumentError):
        view.filter(None)


def test_derivations_and_categories(run_events):
    view = Events(run_events, "All")
    assert view.started().count() == 3
    assert view.finished().count() == 3
    assert view.skipped().count() == 1
    assert view.succeeded().count() == 2
    assert view.failed().count() == 1
    assert view.aborted().count() == 0
    assert view.reporting_entry_published().count() == 1
    assert view.dynamically_registered().count() == 0

    assert view.failed().category == "All Failed"
    assert view.succeeded().category == "All Successful"
    assert view.reporting_entry_published().category == "All Reporting Entry Published"
    assert view.started().started().category == "All Started Started"


def test_derivation_does_not_touch_parent(run_events):
    view = Events(run_events, "All")
    view.failed()
    assert view.count() == len(run_events)
    assert view.category == "All"


def test_dynamically_registered():
    events = [
        ExecutionEvent.dynamic_test_registered(DYN),
        ExecutionEvent.started(DYN),
        ExecutionEvent.finished(DYN, TestExecutionResult.aborted()),
    ]
    view = Events(events, "Test")
    assert view.dynamically_registered().list() == (events[0],)
    assert view.aborted().list() == (events[2],)


def test_debug_to_text_stream(run_events):
    buf = io.StringIO()
    view = Events(run_events, "All")
    assert view.failed().debug(buf).category == "All Failed"
    lines = buf.getvalue().splitlines()
    assert lines[0] == "All Failed Events:"
    assert len(lines) == 2
    assert lines[1].startswith("\t")
    assert "beta()" in lines[1]


def test_debug_to_binary_stream(run_events):
    buf = io.BytesIO()
    Events(run_events, "Tëst").skipped().debug(buf)
    assert not buf.closed
    text = buf.getvalue().decode("utf-8")
    assert text.splitlines()[0] == "Tëst Skipped Events:"
    assert "gamma()" in text


def test_debug_to_named_temporary_file(run_events):
    with tempfile.NamedTemporaryFile() as f:
        Events(run_events, "All").failed().debug(f)
        f.seek(0)
        lines = f.read().decode("utf-8").splitlines()
    assert lines[0] == "All Failed Events:"
    assert "beta()" in lines[1]


def test_debug_empty_view_writes_header_only():
    buf = io.StringIO()
    Events([], "Nothing").debug(buf)
    assert buf.getvalue() == "Nothing Events:\n"


def test_debug_defaults_to_stdout(run_events, capsys):
    view = Events(run_events, "All").started()
    assert view.debug() is view
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "All Started Events:"
    assert len(out.splitlines()) == 4


def test_assert_statistics_rejects_none(run_events):
    with pytest.raises(InvalidArgumentError):
        Events(run_events, "All").assert_statistics(None)


def test_executions_shortcut(run_events):
    execs = Events(run_events, "All").executions()
    assert execs.category == "All"
    assert execs.count() == 4
    assert [x.test_descriptor for x in execs.failed()] == [BETA]
    assert [x.test_descriptor for x in execs.skipped()] == [GAMMA]


def test_finished_by_status_partition(run_events):
    view = Events(run_events, "All")
    for e in view.finished():
        statuses = [
            s for s, derived in (
                (Status.SUCCESSFUL, view.succeeded()),
                (Status.FAILED, view.failed()),
                (Status.ABORTED, view.aborted()),
            ) if e in derived.list()
        ]
        assert statuses == [e.payload.status]
