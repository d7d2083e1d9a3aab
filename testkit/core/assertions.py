from __future__ import annotations
from typing import Optional, Sequence, Tuple

from testkit.core.conditions import ConditionLike, as_condition
from testkit.core.errors import EventAssertionError, format_event_lines
from testkit.core.event import ExecutionEvent
from testkit.core.matching import assert_events_match_exactly


class EventListAssert:
    """
    Small fluent wrapper for ad hoc checks over an event list.

    For anything beyond these checks, take `.actual` (a plain tuple) and
    assert on it directly.
    """

    def __init__(self, actual: Sequence[ExecutionEvent], category: Optional[str] = None) -> None:
        self.actual: Tuple[ExecutionEvent, ...] = tuple(actual)
        self.category = category

    def _fail(self, what: str) -> None:
        prefix = f"[{self.category} Events] " if self.category else ""
        raise EventAssertionError(f"{prefix}{what}\n{format_event_lines(self.actual)}", self.category)

    def has_size(self, expected: int) -> "EventListAssert":
        if len(self.actual) != expected:
            self._fail(f"expected size <{expected}> but was <{len(self.actual)}>")
        return self

    def is_empty(self) -> "EventListAssert":
        return self.has_size(0)

    def contains(self, *events: ExecutionEvent) -> "EventListAssert":
        missing = [e for e in events if not any(e is a or e == a for a in self.actual)]
        if missing:
            self._fail("missing expected event(s):\n" + format_event_lines(missing) + "\nin")
        return self

    def all_match(self, condition: ConditionLike) -> "EventListAssert":
        cond = as_condition(condition)
        bad = [i for i, e in enumerate(self.actual) if not cond.matches(e)]
        if bad:
            self._fail(f"expected all events to match {cond.description}; indexes {bad} did not")
        return self

    def any_match(self, condition: ConditionLike) -> "EventListAssert":
        cond = as_condition(condition)
        if not any(cond.matches(e) for e in self.actual):
            self._fail(f"expected at least one event to match {cond.description}")
        return self

    def none_match(self, condition: ConditionLike) -> "EventListAssert":
        cond = as_condition(condition)
        bad = [i for i, e in enumerate(self.actual) if cond.matches(e)]
        if bad:
            self._fail(f"expected no event to match {cond.description}; indexes {bad} did")
        return self

    def have_exactly(self, expected: int, condition: ConditionLike) -> "EventListAssert":
        cond = as_condition(condition)
        n = sum(1 for e in self.actual if cond.matches(e))
        if n != expected:
            self._fail(f"expected exactly <{expected}> event(s) matching {cond.description} but found <{n}>")
        return self

    def matches_exactly(self, *conditions: ConditionLike) -> "EventListAssert":
        assert_events_match_exactly(self.actual, conditions, self.category)
        return self
