from .errors import (
    InvalidArgumentError,
    ConfigError,
    EventAssertionError,
    LengthMismatchError,
    PositionMismatchError,
    AggregatedStatisticsError,
)
from .event import (
    EventType,
    Status,
    DescriptorKind,
    TestDescriptor,
    TestExecutionResult,
    ReportEntry,
    RecordedThrowable,
    ExecutionEvent,
    by_type,
    by_payload,
    by_test_descriptor,
)
from .conditions import Condition, as_condition
from .matching import assert_events_match_exactly
from .statistics import EventStatistics, count_summary
from .events import Events
from .executions import Execution, Executions, Termination, DurationSummary
from .assertions import EventListAssert
from .recorder import ExecutionRecorder, ExecutionResults

__all__ = [
    "InvalidArgumentError",
    "ConfigError",
    "EventAssertionError",
    "LengthMismatchError",
    "PositionMismatchError",
    "AggregatedStatisticsError",
    "EventType",
    "Status",
    "DescriptorKind",
    "TestDescriptor",
    "TestExecutionResult",
    "ReportEntry",
    "RecordedThrowable",
    "ExecutionEvent",
    "by_type",
    "by_payload",
    "by_test_descriptor",
    "Condition",
    "as_condition",
    "assert_events_match_exactly",
    "EventStatistics",
    "count_summary",
    "Events",
    "Execution",
    "Executions",
    "Termination",
    "DurationSummary",
    "EventListAssert",
    "ExecutionRecorder",
    "ExecutionResults",
]
