from __future__ import annotations
from typing import IO, Any, Callable, Iterable, Iterator, Optional, Tuple, TypeVar, Union
import io
import logging
import sys

from testkit.core.conditions import ConditionLike
from testkit.core.errors import InvalidArgumentError, require_not_none
from testkit.core.event import (
    EventType,
    ExecutionEvent,
    Status,
    TestExecutionResult,
    by_payload,
    by_type,
)
from testkit.core.matching import assert_events_match_exactly
from testkit.core.statistics import EventStatistics

logger = logging.getLogger(__name__)

R = TypeVar("R")
Sink = Union[IO[str], IO[bytes]]


class Events:
    """
    Immutable, labeled, ordered view over execution events.

    Every filter returns a new `Events` whose category extends this one's
    (e.g. "Test" -> "Test Failed"); the parent view is never modified.
    """

    def __init__(self, events: Iterable[ExecutionEvent], category: str) -> None:
        require_not_none(events, "ExecutionEvent collection must not be None")
        snapshot = tuple(events)
        if any(e is None for e in snapshot):
            raise InvalidArgumentError("ExecutionEvent collection must not contain None elements")
        self._events: Tuple[ExecutionEvent, ...] = snapshot
        self._category = category

    @property
    def category(self) -> str:
        return self._category

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[ExecutionEvent]:
        return iter(self._events)

    def __repr__(self) -> str:
        return f"Events(category={self._category!r}, count={len(self._events)})"

    # --- accessors ----------------------------------------------------------

    def list(self) -> Tuple[ExecutionEvent, ...]:
        return self._events

    def stream(self) -> Iterator[ExecutionEvent]:
        return iter(self._events)

    def map(self, fn: Callable[[ExecutionEvent], R]) -> Iterator[R]:
        require_not_none(fn, "Mapping function must not be None")
        return (fn(e) for e in self._events)

    def filter(self, predicate: Callable[[ExecutionEvent], bool]) -> Iterator[ExecutionEvent]:
        require_not_none(predicate, "Filter predicate must not be None")
        return (e for e in self._events if predicate(e))

    def executions(self) -> "Executions":
        from testkit.core.executions import Executions
        return Executions.from_events(self._events, self._category)

    def count(self) -> int:
        return len(self._events)

    # --- built-in filters ---------------------------------------------------

    def skipped(self) -> "Events":
        return self._derive(self._by_type(EventType.SKIPPED), "Skipped")

    def started(self) -> "Events":
        return self._derive(self._by_type(EventType.STARTED), "Started")

    def finished(self) -> "Events":
        return self._derive(self._by_type(EventType.FINISHED), "Finished")

    def aborted(self) -> "Events":
        return self._derive(self._finished_by_status(Status.ABORTED), "Aborted")

    def succeeded(self) -> "Events":
        return self._derive(self._finished_by_status(Status.SUCCESSFUL), "Successful")

    def failed(self) -> "Events":
        return self._derive(self._finished_by_status(Status.FAILED), "Failed")

    def reporting_entry_published(self) -> "Events":
        return self._derive(self._by_type(EventType.REPORTING_ENTRY_PUBLISHED), "Reporting Entry Published")

    def dynamically_registered(self) -> "Events":
        return self._derive(self._by_type(EventType.DYNAMIC_TEST_REGISTERED), "Dynamically Registered")

    # --- assertions ---------------------------------------------------------

    def assert_statistics(self, configurator: Callable[[EventStatistics], Any]) -> None:
        require_not_none(configurator, "Statistics configurator must not be None")
        stats = EventStatistics(self, self._category)
        configurator(stats)
        stats.assert_all()

    def assert_events_match_exactly(self, *conditions: ConditionLike) -> None:
        assert_events_match_exactly(self._events, conditions, self._category)

    def assert_that_events(self) -> "EventListAssert":
        from testkit.core.assertions import EventListAssert
        return EventListAssert(self._events, self._category)

    # --- diagnostics --------------------------------------------------------

    def debug(self, out: Optional[Sink] = None) -> "Events":
        """
        Print all events, one per line, to `out` (sys.stdout when omitted).
        Binary streams receive UTF-8. Returns self for chaining.
        """
        write_lines(out, f"{self._category} Events:", self._events)
        return self

    # --- internals ----------------------------------------------------------

    def _derive(self, events: Iterable[ExecutionEvent], suffix: str) -> "Events":
        derived = Events(events, f"{self._category} {suffix}")
        logger.debug("derived %r from %r", derived, self)
        return derived

    def _by_type(self, event_type: EventType) -> Iterator[ExecutionEvent]:
        require_not_none(event_type, "Type must not be None")
        return self.filter(by_type(event_type))

    def _finished_by_status(self, status: Status) -> Iterator[ExecutionEvent]:
        require_not_none(status, "Status must not be None")
        has_status = by_payload(TestExecutionResult, lambda r: r.status is status)
        return (e for e in self._by_type(EventType.FINISHED) if has_status(e))


def write_lines(out: Optional[Sink], header: str, items: Iterable[Any]) -> None:
    if out is None:
        out = sys.stdout
    if isinstance(out, (io.RawIOBase, io.BufferedIOBase)):
        writer = io.TextIOWrapper(out, encoding="utf-8", newline="\n", write_through=True)
        try:
            _write(writer, header, items)
        finally:
            # hand the buffer back to the caller without closing it
            writer.detach()
    elif _is_binary(out):
        _write(_Utf8Writer(out), header, items)
    else:
        _write(out, header, items)


def _is_binary(out: Any) -> bool:
    if isinstance(out, io.TextIOBase) or hasattr(out, "encoding"):
        return False
    return "b" in str(getattr(out, "mode", ""))


class _Utf8Writer:
    """Encodes text for binary file objects outside the io class hierarchy (e.g. tempfile wrappers)."""

    def __init__(self, raw: IO[bytes]) -> None:
        self._raw = raw

    def write(self, text: str) -> int:
        return self._raw.write(text.encode("utf-8"))

    def flush(self) -> None:
        self._raw.flush()


def _write(out: IO[str], header: str, items: Iterable[Any]) -> None:
    out.write(header + "\n")
    for item in items:
        out.write(f"\t{item}\n")
    out.flush()
