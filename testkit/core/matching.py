from __future__ import annotations
from typing import List, Optional, Sequence
import logging

from testkit.core.conditions import Condition, ConditionLike, as_condition
from testkit.core.errors import LengthMismatchError, PositionMismatchError, require_not_none
from testkit.core.event import ExecutionEvent

logger = logging.getLogger(__name__)


def assert_events_match_exactly(
    events: Sequence[ExecutionEvent],
    conditions: Sequence[ConditionLike],
    category: Optional[str] = None,
) -> None:
    """
    Positional, length-strict match of `events` against `conditions`.

    Raises LengthMismatchError when the two sequences differ in length, and
    PositionMismatchError for the first index whose condition does not hold.
    Order matters: conditions are never reordered to find a match.
    """
    require_not_none(events, "ExecutionEvent list must not be None")
    require_not_none(conditions, "Condition list must not be None")
    events = list(events)
    conds: List[Condition] = [as_condition(c) for c in conditions]

    if len(events) != len(conds):
        raise LengthMismatchError(len(conds), len(events), events, category)

    for idx, (cond, e) in enumerate(zip(conds, events)):
        if not cond.matches(e):
            logger.debug("position %d failed: expected %s, got %s", idx, cond.description, e)
            raise PositionMismatchError(idx, cond.description, e, category)
