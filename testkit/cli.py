from __future__ import annotations
import argparse
import logging
import sys
from typing import Any, Dict, List, Optional
from testkit.core.errors import AggregatedStatisticsError, ConfigError
from testkit.io.json_io import load_events, save_json
from testkit.io import load_config, check_statistics
from testkit.io.config_loader import SELECTORS, select
from testkit.reporting import format_text_report, build_json_report
from testkit import __version__


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="testkit", description="Inspect and check recorded test-execution events")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Show version and exit")

    p_debug = sub.add_parser("debug", help="Print the events of one view")
    p_debug.add_argument("--events", required=True, help="Path to event log JSON")
    p_debug.add_argument("--selector", choices=SELECTORS, default="all", help="Which view to print")

    p_sum = sub.add_parser("summary", help="Summarize counts and durations")
    p_sum.add_argument("--events", required=True, help="Path to event log JSON")
    p_sum.add_argument("--out", required=False, help="Path to write JSON summary")

    p_check = sub.add_parser("check", help="Check event statistics against a config file (JSON or YAML)")
    p_check.add_argument("--events", required=True, help="Path to event log JSON")
    p_check.add_argument("--config", required=True, help="Path to expectations file (JSON/YAML)")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "version":
        print(__version__)
        return 0

    try:
        results = load_events(args.events)

        if args.cmd == "debug":
            select(results, args.selector).debug(sys.stdout)
            return 0

        if args.cmd == "summary":
            if args.out:
                report: Dict[str, Any] = build_json_report(results)
                save_json(args.out, report)
            else:
                print(format_text_report(results))
            return 0

        if args.cmd == "check":
            cfg = load_config(args.config)
            check_statistics(results, cfg)
            print("OK")
            return 0
    except AggregatedStatisticsError as e:
        print(str(e), file=sys.stderr)
        return 1
    except (ConfigError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
