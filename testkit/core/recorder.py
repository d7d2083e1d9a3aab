from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple

from testkit.core.event import (
    ExecutionEvent,
    ReportEntry,
    TestDescriptor,
    TestExecutionResult,
    by_test_descriptor,
)
from testkit.core.events import Events


@dataclass(frozen=True)
class ExecutionResults:
    """Snapshot of everything an engine reported during one run."""

    events: Tuple[ExecutionEvent, ...]

    def all_events(self) -> Events:
        return Events(self.events, "All")

    def containers(self) -> Events:
        return Events(filter(by_test_descriptor(TestDescriptor.is_container), self.events), "Container")

    def tests(self) -> Events:
        return Events(filter(by_test_descriptor(TestDescriptor.is_test), self.events), "Test")


class ExecutionRecorder:
    """Engine listener that records every callback as an ExecutionEvent, in call order."""

    def __init__(self) -> None:
        self._events: List[ExecutionEvent] = []

    def dynamic_test_registered(self, descriptor: TestDescriptor) -> None:
        self._events.append(ExecutionEvent.dynamic_test_registered(descriptor))

    def execution_started(self, descriptor: TestDescriptor) -> None:
        self._events.append(ExecutionEvent.started(descriptor))

    def execution_skipped(self, descriptor: TestDescriptor, reason: str) -> None:
        self._events.append(ExecutionEvent.skipped(descriptor, reason))

    def execution_finished(self, descriptor: TestDescriptor, result: TestExecutionResult) -> None:
        self._events.append(ExecutionEvent.finished(descriptor, result))

    def reporting_entry_published(self, descriptor: TestDescriptor, entry: ReportEntry) -> None:
        self._events.append(ExecutionEvent.reporting_entry_published(descriptor, entry))

    def get_execution_results(self) -> ExecutionResults:
        return ExecutionResults(tuple(self._events))
