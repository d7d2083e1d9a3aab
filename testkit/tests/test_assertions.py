import pytest

from testkit.core import conditions as c
from testkit.core.errors import EventAssertionError, LengthMismatchError
from testkit.core.event import EventType
from testkit.core.events import Events


def test_fluent_checks_pass(run_events):
    view = Events(run_events, "All")
    (view.started().assert_that_events()
        .has_size(3)
        .all_match(c.started())
        .any_match(c.container())
        .none_match(c.skipped_with_reason())
        .have_exactly(2, c.test())
        .contains(run_events[0]))
    view.aborted().assert_that_events().is_empty()


def test_actual_is_the_event_tuple(run_events):
    actual = Events(run_events, "All").skipped().assert_that_events().actual
    assert [e.type for e in actual] == [EventType.SKIPPED]


def test_failures_name_category(run_events):
    view = Events(run_events, "All").failed()
    with pytest.raises(EventAssertionError) as exc_info:
        view.assert_that_events().has_size(2)
    assert "All Failed" in str(exc_info.value)
    assert "expected size <2> but was <1>" in str(exc_info.value)

    with pytest.raises(EventAssertionError):
        view.assert_that_events().all_match(c.finished_successfully())
    with pytest.raises(EventAssertionError):
        view.assert_that_events().any_match(c.started())
    with pytest.raises(EventAssertionError):
        view.assert_that_events().none_match(c.finished())
    with pytest.raises(EventAssertionError):
        view.assert_that_events().contains(run_events[0])


def test_matches_exactly_delegates(run_events):
    skipped = Events(run_events, "All").skipped()
    skipped.assert_that_events().matches_exactly(c.skipped_with_reason("disabled"))
    with pytest.raises(LengthMismatchError):
        skipped.assert_that_events().matches_exactly()
