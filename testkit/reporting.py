from __future__ import annotations
from typing import Any, Dict, List, Optional

from testkit.core.events import Events
from testkit.core.executions import Execution, Executions
from testkit.core.recorder import ExecutionResults
from testkit.core.statistics import count_summary


def _trim(s: str, width: int) -> str:
    return s if len(s) <= width else (s[: max(0, width - 1)] + "…")


def format_statistics_table(events: Events) -> str:
    """
    Counts per event kind for one view.

    Columns:
      STATISTIC | COUNT
    """
    counts = count_summary(events)
    name_w = max(len("STATISTIC"), *(len(k) for k in counts))
    header = f"{'STATISTIC':<{name_w}} | {'COUNT':>5}"
    lines = [f"{events.category} ({events.count()} events)", header, "-" * len(header)]
    for name, n in counts.items():
        lines.append(f"{name:<{name_w}} | {n:>5}")
    return "\n".join(lines)


def _outcome(x: Execution) -> str:
    if x.is_skipped():
        return "SKIPPED"
    if x.is_executed() and x.result is not None:
        return x.result.status.value
    return "RUNNING"


def format_executions_table(
    executions: Executions,
    *,
    max_rows: int = 50,
    col_widths: Optional[Dict[str, int]] = None,
) -> str:
    """
    Pretty-print one row per execution.

    Columns:
      IDX | NAME | KIND | OUTCOME | DURATION
    """
    widths = {
        "idx": 4,
        "name": 32,
        "kind": 9,
        "outcome": 10,
        "dur": 9,
    }
    if col_widths:
        widths.update(col_widths)

    header = (
        f"{'IDX':>{widths['idx']}} | {'NAME':<{widths['name']}} | {'KIND':<{widths['kind']}} | "
        f"{'OUTCOME':<{widths['outcome']}} | {'DURATION':>{widths['dur']}}"
    )
    out_lines = [header, "-" * len(header)]
    rows = executions.list()
    for idx, x in enumerate(rows[:max_rows], start=1):
        dur = x.duration
        dur_s = "—" if dur is None else f"{dur:.3f}"
        name = _trim(x.test_descriptor.display_name, widths["name"])
        kind = _trim(x.test_descriptor.kind.value.lower(), widths["kind"])
        out_lines.append(
            f"{idx:>{widths['idx']}} | {name:<{widths['name']}} | {kind:<{widths['kind']}} | "
            f"{_outcome(x):<{widths['outcome']}} | {dur_s:>{widths['dur']}}"
        )
    if len(rows) > max_rows:
        out_lines.append(f"... ({len(rows) - max_rows} more rows)")
    return "\n".join(out_lines)


def build_json_report(results: ExecutionResults) -> Dict[str, Any]:
    """
    JSON-serializable summary: counts per selector plus a duration summary
    of the test executions.
    """
    views = {
        "all": results.all_events(),
        "tests": results.tests(),
        "containers": results.containers(),
    }
    executions = results.tests().executions()
    return {
        "counts": {name: {"total": v.count(), **count_summary(v)} for name, v in views.items()},
        "test_durations": executions.duration_summary().to_dict(),
        "failed_tests": [x.test_descriptor.display_name for x in executions.failed()],
    }


def format_text_report(
    results: ExecutionResults,
    *,
    max_rows: int = 50,
    title: Optional[str] = None,
) -> str:
    lines: List[str] = []
    hdr = title or "Test Run Summary"
    lines.append("=" * 80)
    lines.append(hdr)
    lines.append("=" * 80)
    for view in (results.tests(), results.containers()):
        lines.append(format_statistics_table(view))
        lines.append("")

    executions = results.tests().executions()
    summary = executions.duration_summary()
    lines.append(
        f"Test durations: count={summary.count}, total={summary.total:.3f}s, mean={summary.mean:.3f}s, "
        f"median={summary.median:.3f}s, p95={summary.p95:.3f}s, max={summary.max:.3f}s"
    )
    lines.append("")
    lines.append("Test executions:")
    lines.append(format_executions_table(executions, max_rows=max_rows))
    lines.append("=" * 80)
    return "\n".join(lines)
