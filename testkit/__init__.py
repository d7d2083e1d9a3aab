"""
testkit: query-and-assertion facade over the events of a test-engine run.

This package provides:
- An immutable, labeled view over execution events (started, finished, skipped,
  dynamically registered, reporting entry published) with filters by type and status
- Exact, positional matching of an event sequence against expected conditions
- Aggregated statistics assertions (e.g. "2 started, 1 failed") reported all at once
- Correlation of STARTED/FINISHED pairs into executions with duration summaries

Failures are raised as AssertionError subclasses so they read naturally in pytest.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
