from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Type, TypeVar
import time

from testkit.core.errors import InvalidArgumentError, require_not_none

T = TypeVar("T")
EventPredicate = Callable[["ExecutionEvent"], bool]


class EventType(str, Enum):
    DYNAMIC_TEST_REGISTERED = "DYNAMIC_TEST_REGISTERED"
    SKIPPED = "SKIPPED"
    STARTED = "STARTED"
    FINISHED = "FINISHED"
    REPORTING_ENTRY_PUBLISHED = "REPORTING_ENTRY_PUBLISHED"


class Status(str, Enum):
    SUCCESSFUL = "SUCCESSFUL"
    ABORTED = "ABORTED"
    FAILED = "FAILED"


class DescriptorKind(str, Enum):
    CONTAINER = "CONTAINER"
    TEST = "TEST"
    CONTAINER_AND_TEST = "CONTAINER_AND_TEST"


@dataclass(frozen=True)
class TestDescriptor:
    unique_id: str
    display_name: str
    kind: DescriptorKind = DescriptorKind.TEST

    # keep pytest from collecting this class
    __test__ = False

    def is_test(self) -> bool:
        return self.kind in (DescriptorKind.TEST, DescriptorKind.CONTAINER_AND_TEST)

    def is_container(self) -> bool:
        return self.kind in (DescriptorKind.CONTAINER, DescriptorKind.CONTAINER_AND_TEST)

    def __str__(self) -> str:
        return f"{self.kind.value.lower()} '{self.display_name}' [{self.unique_id}]"


class RecordedThrowable(Exception):
    """Stand-in for an exception read back from an event log."""

    def __init__(self, type_name: str, message: str = "") -> None:
        super().__init__(message)
        self.type_name = type_name

    def __str__(self) -> str:
        return self.args[0] if self.args else ""

    def __repr__(self) -> str:
        return f"{self.type_name}({str(self)!r})"


@dataclass(frozen=True)
class TestExecutionResult:
    status: Status
    throwable: Optional[BaseException] = None

    __test__ = False

    @staticmethod
    def successful() -> "TestExecutionResult":
        return TestExecutionResult(Status.SUCCESSFUL)

    @staticmethod
    def aborted(throwable: Optional[BaseException] = None) -> "TestExecutionResult":
        return TestExecutionResult(Status.ABORTED, throwable)

    @staticmethod
    def failed(throwable: Optional[BaseException] = None) -> "TestExecutionResult":
        return TestExecutionResult(Status.FAILED, throwable)

    def __str__(self) -> str:
        if self.throwable is None:
            return f"TestExecutionResult(status={self.status.value})"
        return f"TestExecutionResult(status={self.status.value}, throwable={self.throwable!r})"


@dataclass(frozen=True)
class ReportEntry:
    values: Dict[str, str] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    @staticmethod
    def from_values(**values: str) -> "ReportEntry":
        return ReportEntry({str(k): str(v) for k, v in values.items()})

    def __str__(self) -> str:
        return f"ReportEntry({self.values})"


@dataclass(frozen=True)
class ExecutionEvent:
    type: EventType
    test_descriptor: TestDescriptor
    payload: Any = None
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def dynamic_test_registered(cls, descriptor: TestDescriptor, **kw: Any) -> "ExecutionEvent":
        return cls(EventType.DYNAMIC_TEST_REGISTERED, descriptor, None, **kw)

    @classmethod
    def started(cls, descriptor: TestDescriptor, **kw: Any) -> "ExecutionEvent":
        return cls(EventType.STARTED, descriptor, None, **kw)

    @classmethod
    def skipped(cls, descriptor: TestDescriptor, reason: str, **kw: Any) -> "ExecutionEvent":
        return cls(EventType.SKIPPED, descriptor, reason, **kw)

    @classmethod
    def finished(cls, descriptor: TestDescriptor, result: TestExecutionResult, **kw: Any) -> "ExecutionEvent":
        return cls(EventType.FINISHED, descriptor, require_not_none(result, "TestExecutionResult must not be None"), **kw)

    @classmethod
    def reporting_entry_published(cls, descriptor: TestDescriptor, entry: ReportEntry, **kw: Any) -> "ExecutionEvent":
        return cls(EventType.REPORTING_ENTRY_PUBLISHED, descriptor, entry, **kw)

    def payload_as(self, payload_type: Type[T]) -> Optional[T]:
        if isinstance(self.payload, payload_type):
            return self.payload
        return None

    def require_payload(self, payload_type: Type[T]) -> T:
        value = self.payload_as(payload_type)
        if value is None:
            raise InvalidArgumentError(
                f"Payload of {self.type.value} event is not of type {payload_type.__name__}: {self.payload!r}"
            )
        return value

    def __str__(self) -> str:
        payload = "" if self.payload is None else f", payload = {self.payload}"
        return (
            f"ExecutionEvent [type = {self.type.value}, testDescriptor = {self.test_descriptor}, "
            f"timestamp = {self.timestamp:.6f}{payload}]"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "test": {
                "unique_id": self.test_descriptor.unique_id,
                "display_name": self.test_descriptor.display_name,
                "kind": self.test_descriptor.kind.value,
            },
            "timestamp": float(self.timestamp),
            "payload": _payload_to_dict(self.payload),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ExecutionEvent":
        event_type = EventType(str(d["type"]).upper())
        test = d.get("test") or {}
        if not isinstance(test, dict):
            raise ValueError(f"Event 'test' must be a mapping, got {test!r}")
        descriptor = TestDescriptor(
            unique_id=str(test["unique_id"]),
            display_name=str(test.get("display_name", test["unique_id"])),
            kind=DescriptorKind(str(test.get("kind", DescriptorKind.TEST.value)).upper()),
        )
        return ExecutionEvent(
            type=event_type,
            test_descriptor=descriptor,
            payload=_payload_from_dict(event_type, d.get("payload")),
            timestamp=float(d.get("timestamp", 0.0)),
        )


def _payload_to_dict(payload: Any) -> Any:
    if isinstance(payload, TestExecutionResult):
        out: Dict[str, Any] = {"status": payload.status.value}
        if payload.throwable is not None:
            t = payload.throwable
            type_name = t.type_name if isinstance(t, RecordedThrowable) else type(t).__name__
            out["throwable"] = {"type": type_name, "message": str(t)}
        return out
    if isinstance(payload, ReportEntry):
        return {"values": dict(payload.values), "timestamp": float(payload.timestamp)}
    return payload


def _payload_from_dict(event_type: EventType, raw: Any) -> Any:
    if event_type is EventType.FINISHED:
        raw = raw or {}
        _require_mapping(event_type, raw)
        thrown = raw.get("throwable")
        throwable = None
        if thrown:
            _require_mapping(event_type, thrown)
            throwable = RecordedThrowable(str(thrown.get("type", "Exception")), str(thrown.get("message", "")))
        return TestExecutionResult(Status(str(raw.get("status", "SUCCESSFUL")).upper()), throwable)
    if event_type is EventType.REPORTING_ENTRY_PUBLISHED:
        raw = raw or {}
        _require_mapping(event_type, raw)
        values = raw.get("values") or {}
        _require_mapping(event_type, values)
        return ReportEntry(
            {str(k): str(v) for k, v in values.items()},
            float(raw.get("timestamp", 0.0)),
        )
    if event_type is EventType.SKIPPED:
        return None if raw is None else str(raw)
    return None


def _require_mapping(event_type: EventType, raw: Any) -> None:
    if not isinstance(raw, dict):
        raise ValueError(f"{event_type.value} payload must be a mapping, got {raw!r}")


# --- predicates -------------------------------------------------------------

def by_type(event_type: EventType) -> EventPredicate:
    require_not_none(event_type, "Type must not be None")
    return lambda e: e.type is event_type


def by_payload(payload_type: Type[T], predicate: Callable[[T], bool]) -> EventPredicate:
    require_not_none(payload_type, "Payload type must not be None")
    require_not_none(predicate, "Payload predicate must not be None")

    def test(e: ExecutionEvent) -> bool:
        value = e.payload_as(payload_type)
        return value is not None and bool(predicate(value))

    return test


def by_test_descriptor(predicate: Callable[[TestDescriptor], bool]) -> EventPredicate:
    require_not_none(predicate, "Descriptor predicate must not be None")
    return lambda e: bool(predicate(e.test_descriptor))
