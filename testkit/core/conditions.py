from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Optional, Type, Union

from testkit.core.errors import InvalidArgumentError, require_not_none
from testkit.core.event import (
    EventType,
    ExecutionEvent,
    ReportEntry,
    Status,
    TestExecutionResult,
)


@dataclass(frozen=True)
class Condition:
    """A predicate paired with a human-readable description of what it expects."""

    predicate: Callable[[Any], bool]
    description: str

    def matches(self, value: Any) -> bool:
        return bool(self.predicate(value))

    def __call__(self, value: Any) -> bool:
        return self.matches(value)

    def __str__(self) -> str:
        return self.description


ConditionLike = Union[Condition, Callable[[Any], bool]]


def as_condition(obj: ConditionLike) -> Condition:
    if isinstance(obj, Condition):
        return obj
    if callable(obj):
        return Condition(obj, getattr(obj, "__name__", repr(obj)))
    raise InvalidArgumentError(f"Not a condition: {obj!r}")


def all_of(*conditions: ConditionLike) -> Condition:
    conds = [as_condition(c) for c in conditions]
    if len(conds) == 1:
        return conds[0]
    desc = "all of: [" + ", ".join(c.description for c in conds) + "]"
    return Condition(lambda v: all(c.matches(v) for c in conds), desc)


def any_of(*conditions: ConditionLike) -> Condition:
    conds = [as_condition(c) for c in conditions]
    desc = "any of: [" + ", ".join(c.description for c in conds) + "]"
    return Condition(lambda v: any(c.matches(v) for c in conds), desc)


def not_(condition: ConditionLike) -> Condition:
    c = as_condition(condition)
    return Condition(lambda v: not c.matches(v), f"not {c.description}")


# --- event conditions -------------------------------------------------------

def event(*conditions: ConditionLike) -> Condition:
    """Combine several event conditions into one positional expectation."""
    if not conditions:
        raise InvalidArgumentError("At least one condition is required")
    return all_of(*conditions)


def event_type(expected: EventType) -> Condition:
    require_not_none(expected, "Type must not be None")
    return Condition(lambda e: e.type is expected, f"type is {expected.value}")


def display_name(name: str) -> Condition:
    return Condition(lambda e: e.test_descriptor.display_name == name, f"display name '{name}'")


def unique_id_substring(fragment: str) -> Condition:
    return Condition(lambda e: fragment in e.test_descriptor.unique_id, f"unique id containing '{fragment}'")


def _descriptor(kind_check: Callable[[ExecutionEvent], bool], label: str,
                unique_id: Optional[str], name: Optional[str]) -> Condition:
    conds = [Condition(kind_check, label)]
    if unique_id is not None:
        conds.append(unique_id_substring(unique_id))
    if name is not None:
        conds.append(display_name(name))
    return all_of(*conds)


def test(unique_id: Optional[str] = None, name: Optional[str] = None) -> Condition:
    return _descriptor(lambda e: e.test_descriptor.is_test(), "is a test", unique_id, name)


# keep pytest from collecting the condition factory
test.__test__ = False  # type: ignore[attr-defined]


def container(unique_id: Optional[str] = None, name: Optional[str] = None) -> Condition:
    return _descriptor(lambda e: e.test_descriptor.is_container(), "is a container", unique_id, name)


def started() -> Condition:
    return event_type(EventType.STARTED)


def dynamic_test_registered(unique_id: Optional[str] = None) -> Condition:
    cond = event_type(EventType.DYNAMIC_TEST_REGISTERED)
    if unique_id is None:
        return cond
    return all_of(cond, unique_id_substring(unique_id))


def skipped_with_reason(expected: Union[str, Callable[[str], bool], None] = None) -> Condition:
    cond = event_type(EventType.SKIPPED)
    if expected is None:
        return cond
    if isinstance(expected, str):
        reason = Condition(lambda e: e.payload == expected, f"reason '{expected}'")
    else:
        reason = Condition(lambda e: isinstance(e.payload, str) and bool(expected(e.payload)), "reason matching predicate")
    return all_of(cond, reason)


def finished(*result_conditions: ConditionLike) -> Condition:
    conds = [event_type(EventType.FINISHED)]
    for rc in result_conditions:
        inner = as_condition(rc)
        conds.append(Condition(
            lambda e, inner=inner: e.payload_as(TestExecutionResult) is not None and inner.matches(e.payload),
            f"result {inner.description}",
        ))
    return all_of(*conds)


def finished_successfully() -> Condition:
    return finished(status(Status.SUCCESSFUL))


def finished_with_failure(*throwable_conditions: ConditionLike) -> Condition:
    return _finished_with(Status.FAILED, throwable_conditions)


def aborted(*throwable_conditions: ConditionLike) -> Condition:
    return _finished_with(Status.ABORTED, throwable_conditions)


def _finished_with(expected: Status, throwable_conditions: tuple) -> Condition:
    if not throwable_conditions:
        return finished(status(expected))
    return finished(status(expected), throwable(*throwable_conditions))


def reporting_entry_published(**values: str) -> Condition:
    cond = event_type(EventType.REPORTING_ENTRY_PUBLISHED)
    if not values:
        return cond
    expected = {str(k): str(v) for k, v in values.items()}

    def has_values(e: ExecutionEvent) -> bool:
        entry = e.payload_as(ReportEntry)
        return entry is not None and all(entry.values.get(k) == v for k, v in expected.items())

    return all_of(cond, Condition(has_values, f"report entry containing {expected}"))


# --- result conditions ------------------------------------------------------

def status(expected: Status) -> Condition:
    require_not_none(expected, "Status must not be None")
    return Condition(lambda r: r.status is expected, f"status {expected.value}")


def throwable(*conditions: ConditionLike) -> Condition:
    inner = all_of(*conditions) if conditions else Condition(lambda t: True, "any throwable")
    return Condition(
        lambda r: r.throwable is not None and inner.matches(r.throwable),
        f"throwable {inner.description}",
    )


def instance_of(exc_type: Type[BaseException]) -> Condition:
    def check(t: BaseException) -> bool:
        if isinstance(t, exc_type):
            return True
        # exceptions read back from a log only carry their class name
        return getattr(t, "type_name", None) == exc_type.__name__

    return Condition(check, f"instance of {exc_type.__name__}")


def message(expected: Union[str, Callable[[str], bool]]) -> Condition:
    if isinstance(expected, str):
        return Condition(lambda t: str(t) == expected, f"message '{expected}'")
    return Condition(lambda t: bool(expected(str(t))), "message matching predicate")
