from __future__ import annotations
from collections import defaultdict, deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Deque, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar
import logging

import numpy as np

from testkit.core.errors import InvalidArgumentError, require_not_none
from testkit.core.event import EventType, ExecutionEvent, Status, TestDescriptor, TestExecutionResult
from testkit.core.events import Sink, write_lines

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Termination(str, Enum):
    SKIPPED = "SKIPPED"
    EXECUTED = "EXECUTED"
    NOT_TERMINATED = "NOT_TERMINATED"


@dataclass(frozen=True)
class Execution:
    test_descriptor: TestDescriptor
    start_instant: Optional[float]
    end_instant: Optional[float]
    termination: Termination
    skip_reason: Optional[str] = None
    result: Optional[TestExecutionResult] = None

    @property
    def duration(self) -> Optional[float]:
        if self.start_instant is None or self.end_instant is None:
            return None
        return float(self.end_instant) - float(self.start_instant)

    def is_skipped(self) -> bool:
        return self.termination is Termination.SKIPPED

    def is_executed(self) -> bool:
        return self.termination is Termination.EXECUTED

    def has_status(self, status: Status) -> bool:
        return self.is_executed() and self.result is not None and self.result.status is status

    def __str__(self) -> str:
        if self.is_skipped():
            outcome = f"skipped: {self.skip_reason}"
        elif self.is_executed():
            outcome = str(self.result)
        else:
            outcome = "not terminated"
        dur = self.duration
        dur_s = "?" if dur is None else f"{dur:.3f}s"
        return f"Execution [{self.test_descriptor}, duration = {dur_s}, {outcome}]"


@dataclass
class DurationSummary:
    count: int
    total: float
    mean: float
    median: float
    p95: float
    max: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "total": self.total,
            "mean": self.mean,
            "median": self.median,
            "p95": self.p95,
            "max": self.max,
        }


def correlate(events: Sequence[ExecutionEvent]) -> List[Execution]:
    """
    Pair STARTED events with the terminating event for the same descriptor.

    Repeated STARTED events for one descriptor are separate executions and are
    paired first-in first-out. A FINISHED event with no pending start gets
    start_instant=None. Starts that never terminate are appended at the end.
    """
    executions: List[Execution] = []
    pending: Dict[TestDescriptor, Deque[Tuple[int, ExecutionEvent]]] = defaultdict(deque)
    for pos, e in enumerate(events):
        d = e.test_descriptor
        if e.type is EventType.STARTED:
            pending[d].append((pos, e))
        elif e.type is EventType.SKIPPED:
            executions.append(Execution(d, e.timestamp, e.timestamp, Termination.SKIPPED, skip_reason=e.payload))
        elif e.type is EventType.FINISHED:
            start = pending[d].popleft()[1] if pending[d] else None
            if start is None:
                logger.warning("FINISHED event without a matching STARTED event: %s", e)
            executions.append(Execution(
                d,
                start.timestamp if start is not None else None,
                e.timestamp,
                Termination.EXECUTED,
                result=e.payload_as(TestExecutionResult),
            ))

    unterminated = sorted(item for queue in pending.values() for item in queue)
    for _, s in unterminated:
        logger.debug("execution never terminated: %s", s)
        executions.append(Execution(s.test_descriptor, s.timestamp, None, Termination.NOT_TERMINATED))
    return executions


class Executions:
    """
    Executions correlated from an event sequence, with the same filters as Events.

    `started()` keeps only executions with a recorded STARTED event, so an
    execution paired from a lone FINISHED event is finished but not started.
    """

    def __init__(self, executions: Iterable[Execution], category: str) -> None:
        require_not_none(executions, "Execution collection must not be None")
        snapshot = tuple(executions)
        if any(x is None for x in snapshot):
            raise InvalidArgumentError("Execution collection must not contain None elements")
        self._executions: Tuple[Execution, ...] = snapshot
        self._category = category

    @classmethod
    def from_events(cls, events: Sequence[ExecutionEvent], category: str) -> "Executions":
        return cls(correlate(list(events)), category)

    @property
    def category(self) -> str:
        return self._category

    def __len__(self) -> int:
        return len(self._executions)

    def __iter__(self) -> Iterator[Execution]:
        return iter(self._executions)

    def list(self) -> Tuple[Execution, ...]:
        return self._executions

    def stream(self) -> Iterator[Execution]:
        return iter(self._executions)

    def map(self, fn: Callable[[Execution], R]) -> Iterator[R]:
        require_not_none(fn, "Mapping function must not be None")
        return (fn(x) for x in self._executions)

    def filter(self, predicate: Callable[[Execution], bool]) -> Iterator[Execution]:
        require_not_none(predicate, "Filter predicate must not be None")
        return (x for x in self._executions if predicate(x))

    def count(self) -> int:
        return len(self._executions)

    def skipped(self) -> "Executions":
        return self._derive(lambda x: x.is_skipped(), "Skipped")

    def started(self) -> "Executions":
        return self._derive(lambda x: x.start_instant is not None and not x.is_skipped(), "Started")

    def finished(self) -> "Executions":
        return self._derive(lambda x: x.is_executed(), "Finished")

    def aborted(self) -> "Executions":
        return self._derive(lambda x: x.has_status(Status.ABORTED), "Aborted")

    def succeeded(self) -> "Executions":
        return self._derive(lambda x: x.has_status(Status.SUCCESSFUL), "Successful")

    def failed(self) -> "Executions":
        return self._derive(lambda x: x.has_status(Status.FAILED), "Failed")

    def duration_summary(self) -> DurationSummary:
        durations = np.asarray([x.duration for x in self._executions if x.duration is not None], dtype=float)
        if durations.size == 0:
            return DurationSummary(count=0, total=0.0, mean=0.0, median=0.0, p95=0.0, max=0.0)
        return DurationSummary(
            count=int(durations.size),
            total=float(np.sum(durations)),
            mean=float(np.mean(durations)),
            median=float(np.median(durations)),
            p95=float(np.percentile(durations, 95)),
            max=float(np.max(durations)),
        )

    def debug(self, out: Optional[Sink] = None) -> "Executions":
        write_lines(out, f"{self._category} Executions:", self._executions)
        return self

    def _derive(self, predicate: Callable[[Execution], bool], suffix: str) -> "Executions":
        return Executions(self.filter(predicate), f"{self._category} {suffix}")
