"""
Simple example that records a small run, asserts on it, and prints a report.
"""
from testkit.core import (
    DescriptorKind,
    ExecutionRecorder,
    TestDescriptor,
    TestExecutionResult,
)
from testkit.core import conditions as c
from testkit.reporting import format_text_report


def record_run() -> ExecutionRecorder:
    suite = TestDescriptor("[engine:demo]/[class:MathTests]", "MathTests", DescriptorKind.CONTAINER)
    add = TestDescriptor("[engine:demo]/[class:MathTests]/[method:add]", "add()")
    div = TestDescriptor("[engine:demo]/[class:MathTests]/[method:divide]", "divide()")
    slow = TestDescriptor("[engine:demo]/[class:MathTests]/[method:slow]", "slow()")

    rec = ExecutionRecorder()
    rec.execution_started(suite)
    rec.execution_started(add)
    rec.execution_finished(add, TestExecutionResult.successful())
    rec.execution_started(div)
    rec.execution_finished(div, TestExecutionResult.failed(ZeroDivisionError("division by zero")))
    rec.execution_skipped(slow, "too slow for CI")
    rec.execution_finished(suite, TestExecutionResult.successful())
    return rec


def main() -> None:
    results = record_run().get_execution_results()

    results.tests().assert_statistics(lambda stats: stats.started(2).succeeded(1).failed(1).skipped(1))
    results.containers().assert_events_match_exactly(
        c.event(c.container(name="MathTests"), c.started()),
        c.event(c.container(name="MathTests"), c.finished_successfully()),
    )
    results.tests().failed().assert_events_match_exactly(
        c.event(c.test(name="divide()"), c.finished_with_failure(c.instance_of(ZeroDivisionError))),
    )

    results.all_events().debug()
    print(format_text_report(results, title="testkit Simple Example"))


if __name__ == "__main__":
    main()
