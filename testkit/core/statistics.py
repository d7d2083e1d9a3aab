from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Tuple
import logging

from testkit.core.errors import AggregatedStatisticsError, InvalidArgumentError, require_not_none

if TYPE_CHECKING:
    from testkit.core.events import Events

logger = logging.getLogger(__name__)

# each name is also a derivation method on Events
STATISTICS = (
    "started",
    "skipped",
    "finished",
    "aborted",
    "succeeded",
    "failed",
    "reporting_entry_published",
    "dynamically_registered",
)


def count_summary(events: "Events") -> Dict[str, int]:
    return {name: getattr(events, name)().count() for name in STATISTICS}


class EventStatistics:
    """
    Accumulates expected counts per event kind and checks them together.

    Every setter returns the accumulator so expectations can be chained:

        events.assert_statistics(lambda stats: stats.started(2).succeeded(1))
    """

    def __init__(self, events: "Events", category: str) -> None:
        self.category = category
        self._actual = count_summary(events)
        self._expected: List[Tuple[str, int]] = []

    def _expect(self, name: str, expected: int) -> "EventStatistics":
        require_not_none(expected, f"Expected count for '{name}' must not be None")
        if isinstance(expected, bool) or not isinstance(expected, int) or expected < 0:
            raise InvalidArgumentError(f"Expected count for '{name}' must be a non-negative integer, got {expected!r}")
        self._expected.append((name, expected))
        return self

    def started(self, expected: int) -> "EventStatistics":
        return self._expect("started", expected)

    def skipped(self, expected: int) -> "EventStatistics":
        return self._expect("skipped", expected)

    def finished(self, expected: int) -> "EventStatistics":
        return self._expect("finished", expected)

    def aborted(self, expected: int) -> "EventStatistics":
        return self._expect("aborted", expected)

    def succeeded(self, expected: int) -> "EventStatistics":
        return self._expect("succeeded", expected)

    def failed(self, expected: int) -> "EventStatistics":
        return self._expect("failed", expected)

    def reporting_entry_published(self, expected: int) -> "EventStatistics":
        return self._expect("reporting_entry_published", expected)

    def dynamically_registered(self, expected: int) -> "EventStatistics":
        return self._expect("dynamically_registered", expected)

    def expect(self, name: str, expected: int) -> "EventStatistics":
        """Declare an expectation by name (used by config-driven checks)."""
        if name not in self._actual:
            raise InvalidArgumentError(f"Unknown statistic '{name}'; expected one of {', '.join(STATISTICS)}")
        return self._expect(name, expected)

    def expectations(self) -> List[Tuple[str, int, int]]:
        return [(name, exp, self._actual[name]) for name, exp in self._expected]

    def assert_all(self) -> None:
        failures: List[str] = []
        for name, expected, actual in self.expectations():
            logger.debug("%s statistics: %s expected=%d actual=%d", self.category, name, expected, actual)
            if expected != actual:
                failures.append(f"type '{name}' count: expected <{expected}> but was <{actual}>")
        if failures:
            raise AggregatedStatisticsError(failures, self.category)
