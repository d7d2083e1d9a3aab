from __future__ import annotations
from typing import Any, List, Optional, Sequence


class InvalidArgumentError(ValueError):
    """A required argument was absent (None) or otherwise unusable."""


class ConfigError(ValueError):
    pass


def _prefix(category: Optional[str]) -> str:
    return f"[{category} Events] " if category else ""


def format_event_lines(events: Sequence[Any]) -> str:
    if not events:
        return "\t(no events)"
    return "\n".join(f"\t{e}" for e in events)


class EventAssertionError(AssertionError):
    """Base class for every failed assertion over execution events."""

    def __init__(self, message: str, category: Optional[str] = None) -> None:
        super().__init__(message)
        self.category = category


class LengthMismatchError(EventAssertionError):
    def __init__(self, expected: int, actual: int, events: Sequence[Any], category: Optional[str] = None) -> None:
        self.expected = expected
        self.actual = actual
        self.events = tuple(events)
        message = (
            f"{_prefix(category)}expected {expected} event(s) but found {actual}:\n"
            f"{format_event_lines(self.events)}"
        )
        super().__init__(message, category)


class PositionMismatchError(EventAssertionError):
    def __init__(self, index: int, description: str, event: Any, category: Optional[str] = None) -> None:
        self.index = index
        self.description = description
        self.event = event
        message = (
            f"{_prefix(category)}event at index {index} did not match\n"
            f"  expected: {description}\n"
            f"  actual:   {event}"
        )
        super().__init__(message, category)


class AggregatedStatisticsError(EventAssertionError):
    """
    Collects every unmet statistics expectation into a single failure.
    The order of `failures` is the order in which expectations were declared.
    """

    def __init__(self, failures: List[str], category: Optional[str] = None) -> None:
        self.failures = list(failures)
        header = f"{_prefix(category)}statistics did not match ({len(self.failures)} failure(s))"
        lines = [header] + [f"\t{f}" for f in self.failures]
        super().__init__("\n".join(lines), category)


def require_not_none(value: Any, message: str) -> Any:
    if value is None:
        raise InvalidArgumentError(message)
    return value
